from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import shutil
import tempfile
from typing import Mapping, Sequence

from ps_build_hdr.composite import composite_args
from ps_build_hdr.errors import StageFailure
from ps_build_hdr.exposure import ExposureSample, normalize_evs, read_batch_exposures
from ps_build_hdr.runlog import RunLog
from ps_build_hdr.tools.base import ExternalTool
from ps_build_hdr.tools.resolver import ToolSet
from ps_build_hdr.utils.formatting import describe_sample, format_ev


logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_ps-hdr.jpg"
HDR_SUFFIX = "_ps-hdr.hdr"

MERGE_CONFIG = "weight=gaussian:response_curve=gamma:model=debevec"

# Local contrast disabled, equation 4 (eq2=false), full (non-simple) mode.
ASHIKHMIN_PARAMS: dict[str, str] = {"lc": "0", "eq2": "false", "simple": "false"}
MANTIUK08_PARAMS: dict[str, str] = {
    "colorsaturation": "1",
    "contrastenhancement": "1",
    "luminancelevel": "1",
    "setluminance": "false",
}


@dataclass
class PipelineOptions:
    keep_intermediate: bool = False


@dataclass
class PipelineRun:
    work_dir: Path
    hdr_path: Path
    tonemap_a_path: Path
    tonemap_b_path: Path
    output_path: Path

    @classmethod
    def create(cls, first_input: Path, output_dir: Path) -> "PipelineRun":
        work_dir = Path(tempfile.mkdtemp(prefix="ps-build-hdr."))
        return cls(
            work_dir=work_dir,
            hdr_path=work_dir / "merged.hdr",
            tonemap_a_path=work_dir / "ashikhmin.jpg",
            tonemap_b_path=work_dir / "mantiuk08.jpg",
            output_path=output_path_for(first_input, output_dir),
        )


def output_path_for(first_input: Path, output_dir: Path) -> Path:
    return output_dir / f"{first_input.stem}{OUTPUT_SUFFIX}"


def kept_hdr_path_for(first_input: Path, output_dir: Path) -> Path:
    return output_dir / f"{first_input.stem}{HDR_SUFFIX}"


def merge_args(tools: ToolSet, evs: Sequence[float], inputs: Sequence[Path], hdr_path: Path) -> list[str]:
    flags = tools.flags
    return [
        flags.align,
        tools.align_mode.value,
        flags.config,
        MERGE_CONFIG,
        flags.ev,
        ",".join(format_ev(ev) for ev in evs),
        flags.output,
        str(hdr_path),
        *[str(p) for p in inputs],
    ]


def tonemap_args(
    tools: ToolSet,
    hdr_path: Path,
    operator: str,
    params: Mapping[str, str],
    out_path: Path,
) -> list[str]:
    flags = tools.flags
    return [
        flags.load,
        str(hdr_path),
        flags.tmo,
        operator,
        *flags.tonemap_params(operator, params),
        flags.output,
        str(out_path),
    ]


def metadata_copy_args(source: Path, target: Path) -> list[str]:
    return ["-overwrite_original", "-TagsFromFile", str(source), str(target)]


def _run_stage(stage: str, tool: ExternalTool, args: Sequence[str], run_log: RunLog) -> None:
    cmd = tool.command_line(args)
    logger.info("stage %s", stage)
    result = tool.invoke(args)
    run_log.command(cmd, result.output)
    if not result.ok:
        raise StageFailure(stage, cmd, result.exit_code, run_log.path)


def batch_evs(samples: Mapping[Path, ExposureSample], batch: Sequence[Path]) -> list[float]:
    """Normalized EVs in the same order as ``batch``."""
    normalized = normalize_evs({image: sample.ev for image, sample in samples.items()})
    return [normalized[image] for image in batch]


def _copy_metadata(tools: ToolSet, source: Path, target: Path, run_log: RunLog) -> None:
    if not tools.copies_metadata:
        return
    tool = tools.metadata_tool
    args = metadata_copy_args(source, target)
    result = tool.invoke(args)
    run_log.command(tool.command_line(args), result.output)
    if not result.ok:
        logger.warning("could not copy metadata from %s to %s (exit %s)", source, target, result.exit_code)


def run_batch(
    batch: Sequence[Path],
    tools: ToolSet,
    run_log: RunLog,
    options: PipelineOptions | None = None,
    output_dir: Path | None = None,
) -> Path:
    """Merge, tone-map twice and composite one exposure set.

    Raises on the first failing stage; later stages are skipped. The
    temporary work directory is removed whether the run succeeds or not.
    """
    if not batch:
        raise ValueError("cannot process an empty batch")
    options = options or PipelineOptions()
    output_dir = output_dir or Path.cwd()
    first = batch[0]

    samples = read_batch_exposures(batch, tools.metadata_backend)
    for image in batch:
        logger.debug("exposure %s", describe_sample(samples[image]))
    evs = batch_evs(samples, batch)

    run = PipelineRun.create(first, output_dir)
    try:
        _run_stage("merge", tools.hdr_engine, merge_args(tools, evs, batch, run.hdr_path), run_log)
        _run_stage(
            "tonemap-ashikhmin",
            tools.hdr_engine,
            tonemap_args(tools, run.hdr_path, "ashikhmin", ASHIKHMIN_PARAMS, run.tonemap_a_path),
            run_log,
        )
        _run_stage(
            "tonemap-mantiuk08",
            tools.hdr_engine,
            tonemap_args(tools, run.hdr_path, "mantiuk08", MANTIUK08_PARAMS, run.tonemap_b_path),
            run_log,
        )
        _run_stage(
            "composite",
            tools.compositor,
            composite_args(run.tonemap_b_path, run.tonemap_a_path, run.output_path),
            run_log,
        )

        _copy_metadata(tools, first, run.output_path, run_log)

        if options.keep_intermediate:
            kept = kept_hdr_path_for(first, output_dir)
            shutil.move(str(run.hdr_path), str(kept))
            logger.info("kept radiance map %s", kept)
    finally:
        shutil.rmtree(run.work_dir, ignore_errors=True)

    logger.info("wrote %s", run.output_path)
    return run.output_path
