"""Tests for DataFrame, CSV and summary JSON export."""

import json
import os

import pandas as pd
import pytest

from conftest import make_walking_frames

from thrustgait import analyze_gait
from thrustgait.export import export_csv, export_summary_json, to_dataframe


@pytest.fixture(scope="module")
def result():
    return analyze_gait(make_walking_frames(left_knee_offset=0.02))


class TestToDataFrame:

    def test_stance(self, result):
        df = to_dataframe(result, what="stance")
        assert list(df.columns) == ["side", "start_frame", "end_frame", "n_frames"]
        assert len(df) == 10
        assert (df["n_frames"] == df["end_frame"] - df["start_frame"] + 1).all()

    def test_cycles(self, result):
        df = to_dataframe(result, what="cycles")
        assert len(df) == 8
        assert list(df["cycle_id"]) == list(range(8))
        assert (df["n_frames"] == 30).all()

    def test_phases(self, result):
        df = to_dataframe(result, what="phases")
        assert len(df) == 8 * 8
        assert set(df["type"]) == {"IC", "LR", "MSt", "TSt", "PSw", "ISw", "MSw", "TSw"}

    def test_thrust(self, result):
        df = to_dataframe(result, what="thrust")
        assert len(df) == 150
        assert list(df.columns) == ["frame_idx", "time_ms", "left_knee_cm", "right_knee_cm"]
        assert df["left_knee_cm"].max() == pytest.approx(2.0)

    def test_all(self, result):
        tables = to_dataframe(result, what="all")
        assert set(tables) == {"stance", "cycles", "phases", "thrust"}
        assert all(isinstance(t, pd.DataFrame) for t in tables.values())

    def test_invalid(self, result):
        with pytest.raises(ValueError):
            to_dataframe(result, what="angles")

    def test_empty_result(self):
        empty = {"stance_phases": [], "gait_cycles": [], "lateral_thrust": {}}
        df = to_dataframe(empty, what="phases")
        assert df.empty
        assert "type" in df.columns


def test_export_csv(tmp_path, result):
    paths = export_csv(result, str(tmp_path), prefix="p01_")
    names = sorted(os.path.basename(p) for p in paths)
    assert names == ["p01_cycles.csv", "p01_phases.csv", "p01_stance.csv", "p01_thrust.csv"]
    stance = pd.read_csv(tmp_path / "p01_stance.csv")
    assert len(stance) == 10


def test_export_csv_without_waveforms(tmp_path, result):
    paths = export_csv(result, str(tmp_path / "out"), include_waveforms=False)
    assert len(paths) == 3
    assert not (tmp_path / "out" / "thrust.csv").exists()


def test_export_csv_rejects_non_dict(tmp_path):
    with pytest.raises(TypeError):
        export_csv(None, str(tmp_path))


def test_export_summary_json(tmp_path, result):
    path = export_summary_json(result, str(tmp_path / "summary.json"), source="walk.json")
    with open(path) as f:
        summary = json.load(f)
    assert summary["metadata"]["source"] == "walk.json"
    assert summary["trial"]["total_frames"] == 150
    assert summary["stance_phases"] == {"n_left": 5, "n_right": 5}
    assert summary["gait_cycles"] == {"n_left": 4, "n_right": 4}
    lt = summary["lateral_thrust"]
    assert set(lt["left_knee"]) == {"amplitude_cm", "max_displacement_cm", "severity"}
    assert "waveform" not in lt["left_knee"]
    assert lt["left_knee"]["max_displacement_cm"] == pytest.approx(2.0)
