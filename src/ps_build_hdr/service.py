from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from ps_build_hdr.batching import explicit_batch, list_directory, partition
from ps_build_hdr.pipeline import PipelineOptions, run_batch
from ps_build_hdr.runlog import RunLog
from ps_build_hdr.tools.resolver import ToolSet


logger = logging.getLogger(__name__)

BatchRunner = Callable[..., Path]


def run_directory_scan(
    directory: Path,
    number: int,
    tools: ToolSet,
    run_log: RunLog,
    options: PipelineOptions,
    output_dir: Path | None = None,
    runner: BatchRunner = run_batch,
) -> list[Path]:
    """Process every full group of ``number`` entries in ``directory``.

    The listing is taken once up front, so outputs written into the same
    directory are not picked up as inputs.
    """
    files = list_directory(directory)
    dropped = len(files) % number if number > 0 else 0
    outputs: list[Path] = []
    for batch in partition(files, number):
        logger.info("batch %s", " ".join(p.name for p in batch))
        run_log.banner(batch)
        outputs.append(runner(batch, tools, run_log, options=options, output_dir=output_dir))
    if dropped:
        logger.warning("ignored %d trailing file(s) that do not fill a set of %d", dropped, number)
    return outputs


def run_explicit(
    files: Sequence[Path],
    tools: ToolSet,
    run_log: RunLog,
    options: PipelineOptions,
    output_dir: Path | None = None,
    runner: BatchRunner = run_batch,
) -> list[Path]:
    batch = explicit_batch(files)
    logger.info("batch %s", " ".join(p.name for p in batch))
    return [runner(batch, tools, run_log, options=options, output_dir=output_dir)]
