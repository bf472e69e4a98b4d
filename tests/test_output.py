from __future__ import annotations

from pathlib import Path

from gamus.output import timestamped_path


def test_timestamped_path_creates_directory(tmp_path: Path) -> None:
    out_dir = tmp_path / "nested" / "out"
    path = timestamped_path(str(out_dir), "evaluation", ".json", stamp="20260101_000000")
    assert out_dir.is_dir()
    assert path == str(out_dir / "evaluation_20260101_000000.json")


def test_timestamped_path_does_not_clobber(tmp_path: Path) -> None:
    stamp = "20260101_000000"
    first = timestamped_path(str(tmp_path), "gantt_run1", ".png", stamp=stamp)
    Path(first).write_bytes(b"x")
    second = timestamped_path(str(tmp_path), "gantt_run1", ".png", stamp=stamp)
    assert second == str(tmp_path / f"gantt_run1_{stamp}-2.png")
    Path(second).write_bytes(b"x")
    third = timestamped_path(str(tmp_path), "gantt_run1", ".png", stamp=stamp)
    assert third == str(tmp_path / f"gantt_run1_{stamp}-3.png")
