from __future__ import annotations

from pathlib import Path

import pytest

from ps_build_hdr.errors import StageFailure
from ps_build_hdr.pipeline import PipelineOptions
from ps_build_hdr.runlog import RunLog
from ps_build_hdr.service import run_directory_scan, run_explicit


class _RecordingRunner:
    def __init__(self, fail_on_call: int | None = None) -> None:
        self.batches: list[tuple[Path, ...]] = []
        self.fail_on_call = fail_on_call

    def __call__(self, batch, tools, run_log, options=None, output_dir=None) -> Path:
        self.batches.append(tuple(batch))
        if self.fail_on_call is not None and len(self.batches) == self.fail_on_call:
            raise StageFailure("merge", ["luminance-hdr-cli"], 1, run_log.path)
        return Path(output_dir or ".") / f"{batch[0].stem}_ps-hdr.jpg"


def _populate(directory: Path, count: int) -> list[Path]:
    files = [directory / f"IMG_{i:04d}.JPG" for i in range(count)]
    for f in files:
        f.write_bytes(b"")
    return files


def test_directory_scan_six_files_makes_two_disjoint_runs(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    files = _populate(src, 6)
    runner = _RecordingRunner()
    run_log = RunLog(tmp_path / "run.log")

    outputs = run_directory_scan(src, 3, object(), run_log, PipelineOptions(), runner=runner)

    assert runner.batches == [tuple(files[:3]), tuple(files[3:])]
    assert len(outputs) == 2
    text = run_log.path.read_text(encoding="utf-8")
    assert text.count("Images: ") == 2
    assert "Images: IMG_0003.JPG IMG_0004.JPG IMG_0005.JPG" in text


def test_directory_scan_drops_trailing_partial_group(tmp_path: Path, caplog) -> None:
    files = _populate(tmp_path, 7)
    runner = _RecordingRunner()

    run_directory_scan(tmp_path, 3, object(), RunLog(tmp_path / "log" / "run.log"), PipelineOptions(), runner=runner)

    assert runner.batches == [tuple(files[:3]), tuple(files[3:6])]
    assert "ignored 1 trailing file" in caplog.text


def test_directory_scan_stops_at_first_failure(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    _populate(src, 9)
    runner = _RecordingRunner(fail_on_call=1)

    with pytest.raises(StageFailure):
        run_directory_scan(src, 3, object(), RunLog(tmp_path / "run.log"), PipelineOptions(), runner=runner)
    assert len(runner.batches) == 1


def test_explicit_mode_uses_all_files_as_one_batch(tmp_path: Path) -> None:
    files = [tmp_path / f"IMG_{i}.JPG" for i in range(5)]
    runner = _RecordingRunner()
    run_log = RunLog(tmp_path / "run.log")

    outputs = run_explicit(files, object(), run_log, PipelineOptions(), output_dir=tmp_path, runner=runner)

    assert runner.batches == [tuple(files)]
    assert outputs == [tmp_path / "IMG_0_ps-hdr.jpg"]
    assert not run_log.path.exists()
