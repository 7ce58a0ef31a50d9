"""Tests for rungait.export."""

import os

import pandas as pd
import pytest

from conftest import make_running_samples
from rungait.analysis import analyze_samples
from rungait.export import export_csv, to_dataframe


@pytest.fixture
def analysis():
    return analyze_samples(make_running_samples(), fps=30.0)


class TestToDataFrame:

    def test_samples(self, analysis):
        df = to_dataframe(analysis, "samples")
        assert len(df) == 90
        assert list(df.columns) == ["frame_idx", "t", "hip", "knee", "ankle", "side", "y_ankle"]

    def test_cycles(self, analysis):
        df = to_dataframe(analysis, "cycles")
        assert list(df["start_idx"]) == [15, 45]
        assert list(df["end_idx"]) == [45, 75]
        assert df["duration"].tolist() == pytest.approx([1.0, 1.0])

    def test_phases(self, analysis):
        df = to_dataframe(analysis, "phases")
        assert len(df) == 16
        first = df[df["cycle_id"] == 0]
        assert first["n_frames"].tolist() == [1, 3, 6, 5, 4, 3, 4, 4]
        assert first["phase"].tolist()[0] == "IC"

    def test_phase_summary(self, analysis):
        df = to_dataframe(analysis, "phase_summary")
        assert len(df) == 8
        assert df.loc[0, "knee"] == pytest.approx(115.0)

    def test_all(self, analysis):
        tables = to_dataframe(analysis, "all")
        assert set(tables) == {"samples", "cycles", "phases", "phase_summary"}
        assert all(isinstance(df, pd.DataFrame) for df in tables.values())

    def test_too_short_tables_empty(self):
        short = analyze_samples(make_running_samples(n_frames=20), fps=30.0)
        assert to_dataframe(short, "cycles").empty
        assert to_dataframe(short, "phase_summary").empty

    def test_invalid_what(self, analysis):
        with pytest.raises(ValueError, match="what"):
            to_dataframe(analysis, "events")


class TestExportCsv:

    def test_writes_all_tables(self, analysis, tmp_path):
        files = export_csv(analysis, str(tmp_path / "csv"), prefix="run_")
        names = sorted(os.path.basename(f) for f in files)
        assert names == ["run_cycles.csv", "run_phase_summary.csv", "run_phases.csv", "run_samples.csv"]
        df = pd.read_csv(tmp_path / "csv" / "run_cycles.csv")
        assert len(df) == 2

    def test_skips_empty_tables(self, tmp_path):
        short = analyze_samples(make_running_samples(n_frames=20), fps=30.0)
        files = export_csv(short, str(tmp_path))
        assert [os.path.basename(f) for f in files] == ["samples.csv"]

    def test_rejects_non_analysis(self, tmp_path):
        with pytest.raises(TypeError):
            export_csv({"cycles": []}, str(tmp_path))
