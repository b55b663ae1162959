from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from pipeline.io import files


def _frame() -> pd.DataFrame:
    return pd.DataFrame({"items_ordered": [1, 501], "total_items": [250, 750]})


def test_writers_leave_no_temp_files(tmp_path: Path):
    out = tmp_path / "out"
    files.write_csv(_frame(), out / "plans.csv")
    files.write_parquet(_frame(), out / "plans.parquet")
    files.write_json([{"total_items": 250}], out / "plans.json")

    assert sorted(p.name for p in out.iterdir()) == [
        "plans.csv",
        "plans.json",
        "plans.parquet",
    ]
    assert pd.read_csv(out / "plans.csv")["total_items"].tolist() == [250, 750]
    assert pd.read_parquet(out / "plans.parquet")["total_items"].tolist() == [250, 750]
    assert json.loads((out / "plans.json").read_text(encoding="utf-8")) == [{"total_items": 250}]


@pytest.mark.parametrize("name", ["plans.csv", "plans.parquet"])
def test_failed_frame_write_keeps_previous_output(tmp_path: Path, monkeypatch, name):
    target = tmp_path / name
    target.write_text("previous", encoding="utf-8")

    def _boom(self, path, *args, **kwargs):
        Path(path).write_text("partial", encoding="utf-8")
        raise OSError("disk full")

    monkeypatch.setattr(pd.DataFrame, "to_csv", _boom)
    monkeypatch.setattr(pd.DataFrame, "to_parquet", _boom)
    writer = files.write_csv if name.endswith(".csv") else files.write_parquet

    with pytest.raises(OSError, match="disk full"):
        writer(_frame(), target)

    assert target.read_text(encoding="utf-8") == "previous"
    assert [p.name for p in tmp_path.iterdir()] == [name]
