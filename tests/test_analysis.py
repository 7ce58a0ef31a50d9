"""End-to-end tests for rungait.analysis."""

import json
import math

import pytest

from conftest import make_running_samples
from rungait.analysis import TOO_SHORT_MESSAGE, analyze_samples
from rungait.constants import PHASE_NAMES
from rungait.phases import PercentBoundaryTable


class TestAnalyzeSamples:

    def test_two_full_cycles(self, running_samples):
        analysis = analyze_samples(running_samples, fps=30.0)
        assert analysis.status == "ok"
        assert analysis.strikes == (15, 45, 75)
        assert [(c.start_idx, c.end_idx) for c in analysis.cycles] == [(15, 45), (45, 75)]
        assert analysis.n_cycles == 2
        assert analysis.side == "left"
        assert analysis.fps == 30.0

    def test_first_cycle_phase_medians(self, running_samples):
        analysis = analyze_samples(running_samples, fps=30.0)
        stats = analysis.phase_summary
        assert [s.phase for s in stats] == list(PHASE_NAMES)
        # knee = 100 + i survives the moving mean away from the clip edges
        expected_knee = [115, 117, 122, 127, 132, 135, 139, 143]
        for stat, knee in zip(stats, expected_knee):
            assert stat.knee == pytest.approx(knee)
            assert stat.hip == pytest.approx(150.0)
            assert stat.ankle == pytest.approx(90.0)

    def test_undefined_joint_reported_as_none(self):
        samples = make_running_samples(ankle=float("nan"))
        analysis = analyze_samples(samples, fps=30.0)
        assert all(s.ankle is None for s in analysis.phase_summary)
        assert all(s.knee is not None for s in analysis.phase_summary)

    def test_samples_are_smoothed_copies(self):
        samples = make_running_samples(knee=lambda i: 100.0 + (50.0 if i == 30 else 0.0))
        analysis = analyze_samples(samples, fps=30.0)
        assert samples[30].knee == 150.0
        assert analysis.samples[30].knee == pytest.approx(110.0)
        assert len(analysis.samples) == len(samples)

    def test_too_short(self):
        analysis = analyze_samples(make_running_samples(n_frames=20), fps=30.0)
        assert analysis.status == "too_short"
        assert analysis.message == TOO_SHORT_MESSAGE
        assert analysis.cycles == ()
        assert analysis.phase_summary == ()

    def test_empty_input(self):
        analysis = analyze_samples([], fps=30.0)
        assert analysis.status == "too_short"
        assert analysis.strikes == ()
        assert analysis.samples == ()

    def test_right_side(self):
        analysis = analyze_samples(make_running_samples(side="right"), fps=30.0)
        assert analysis.side == "right"
        assert all(c.side == "right" for c in analysis.cycles)

    def test_default_fps_from_config(self, running_samples):
        assert analyze_samples(running_samples).fps == 30.0

    def test_window_one_keeps_raw_values(self):
        samples = make_running_samples(knee=lambda i: 100.0 + (50.0 if i == 20 else 0.0))
        analysis = analyze_samples(samples, fps=30.0, window=1)
        assert analysis.samples[20].knee == 150.0

    def test_custom_policy(self, running_samples):
        table = [(name, (i + 1) / 8) for i, name in enumerate(PHASE_NAMES)]
        analysis = analyze_samples(running_samples, fps=30.0, policy=PercentBoundaryTable(table))
        first = analysis.cycles[0]
        assert first.phase("IC").end_idx == 15 + 4

    def test_config_overrides(self, running_samples):
        config = {"smoothing": {"method": "median", "window": 3}}
        analysis = analyze_samples(running_samples, fps=30.0, config=config)
        assert analysis.status == "ok"
        assert analysis.phase_summary[0].knee == pytest.approx(115.0, abs=1.0)

    def test_to_dict_is_json_ready(self):
        samples = make_running_samples(ankle=float("nan"))
        data = analyze_samples(samples, fps=30.0).to_dict()
        text = json.dumps(data, allow_nan=False)
        assert "time_series" in json.loads(text)
        assert data["phase_summary"][0]["ankle"] is None
        assert math.isclose(data["cycles"][0]["duration"], 1.0)

    def test_rejects_non_samples(self):
        with pytest.raises(TypeError):
            analyze_samples([{"t": 0.0, "knee": 90.0}], fps=30.0)

    def test_rejects_bad_fps(self, running_samples):
        with pytest.raises(ValueError, match="fps"):
            analyze_samples(running_samples, fps=0)
