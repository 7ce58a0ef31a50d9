"""Tests for rungait.schema and rungait.config."""

import json
import math
from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from conftest import make_running_samples
from rungait.analysis import analyze_samples
from rungait.config import DEFAULT_CONFIG, get_config, load_config, save_config
from rungait.schema import (
    FrameSample,
    GaitCycle,
    PhaseSegment,
    load_json,
    load_samples,
    samples_from_records,
    save_json,
)


class TestFrameSample:

    def test_frozen(self):
        sample = FrameSample(0.0, 150.0, 120.0, 90.0, "left", 0.8)
        with pytest.raises(FrozenInstanceError):
            sample.knee = 100.0

    def test_to_dict_maps_nan_to_none(self):
        d = FrameSample(0.1, float("nan"), 120.0, 90.0, "left", 0.8).to_dict()
        assert d["hip"] is None
        assert d["knee"] == 120.0

    def test_from_dict_camel_case(self):
        s = FrameSample.from_dict({"t": 0.5, "hip": 1, "knee": 2, "ankle": None,
                                   "side": "right", "yAnkle": 0.7})
        assert s.y_ankle == 0.7
        assert s.side == "right"
        assert math.isnan(s.ankle)

    def test_samples_from_records(self):
        records = [{"t": i / 30, "knee": 100 + i, "y_ankle": 0.8} for i in range(3)]
        samples = samples_from_records(records)
        assert [s.knee for s in samples] == [100.0, 101.0, 102.0]
        assert all(s.side == "left" for s in samples)


class TestGaitCycle:

    def test_duration_and_lookup(self):
        phases = (PhaseSegment("IC", 0, 2), PhaseSegment("LR", 2, 5))
        cycle = GaitCycle(0, 5, "left", phases, start_time=1.0, end_time=1.5)
        assert cycle.n_frames == 5
        assert cycle.duration == pytest.approx(0.5)
        assert cycle.phase("LR").n_frames == 3
        with pytest.raises(KeyError):
            cycle.phase("TSw")

    def test_duration_unknown_without_times(self):
        assert GaitCycle(0, 5, "left").duration is None


class TestJsonIO:

    def test_analysis_round_trip(self, tmp_path, running_samples):
        analysis = analyze_samples(running_samples, fps=30.0)
        path = tmp_path / "out" / "result.json"
        save_json(analysis, path)
        data = load_json(path)
        assert data["status"] == "ok"
        assert len(data["cycles"]) == 2

        samples, fps = load_samples(path)
        assert fps == 30.0
        assert len(samples) == len(running_samples)
        assert samples[20].knee == pytest.approx(analysis.samples[20].knee)

    def test_numpy_values_converted(self, tmp_path):
        path = tmp_path / "np.json"
        save_json({"a": np.float64(1.5), "b": np.int64(3), "c": np.array([1.0, np.nan])}, path)
        assert load_json(path) == {"a": 1.5, "b": 3, "c": [1.0, None]}

    def test_load_samples_without_fps(self, tmp_path):
        path = tmp_path / "samples.json"
        save_json({"time_series": [s.to_dict() for s in make_running_samples(n_frames=3)]}, path)
        samples, fps = load_samples(path)
        assert fps is None
        assert len(samples) == 3

    def test_missing_time_series(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"fps": 30}))
        with pytest.raises(ValueError, match="time_series"):
            load_samples(path)

    def test_root_must_be_dict(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="dict"):
            load_json(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "nope.json")


class TestConfig:

    def test_defaults(self):
        cfg = get_config()
        assert cfg["capture"]["fps"] == 30.0
        assert cfg["smoothing"]["window"] == 5
        assert cfg["cycles"]["max_cadence"] == 220.0
        assert [row[0] for row in cfg["phases"]["table"]][0] == "IC"

    def test_partial_override_merges(self):
        cfg = get_config({"smoothing": {"window": 7}})
        assert cfg["smoothing"]["window"] == 7
        assert cfg["smoothing"]["method"] == "moving_mean"
        assert cfg["capture"]["side"] == "left"

    def test_defaults_not_mutated(self):
        cfg = get_config()
        cfg["smoothing"]["window"] = 99
        assert DEFAULT_CONFIG["smoothing"]["window"] == 5

    def test_json_round_trip(self, tmp_path):
        path = tmp_path / "cfg.json"
        save_config({"capture": {"side": "right"}}, path)
        cfg = load_config(path)
        assert cfg["capture"]["side"] == "right"
        assert cfg["capture"]["fps"] == 30.0

    def test_yaml_round_trip(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "cfg.yaml"
        save_config({"cycles": {"extremum": "min"}}, path)
        cfg = load_config(path)
        assert cfg["cycles"]["extremum"] == "min"
        assert cfg["cycles"]["min_cadence"] == 60.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_non_dict_rejected(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError, match="Config must be a dict"):
            load_config(path)
