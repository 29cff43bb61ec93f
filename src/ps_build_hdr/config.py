from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

from ps_build_hdr.errors import ConfigError
from ps_build_hdr.runlog import DEFAULT_RUN_LOG


@dataclass
class BatchConfig:
    number: int = 3
    keep_hdr: bool = False
    output_dir: Path | None = None


@dataclass
class ToolPaths:
    luminance_hdr: Path | str | None = None
    gimp: Path | str | None = None
    align_image_stack: Path | str | None = None
    exiftool: Path | str | None = None


@dataclass
class AppConfig:
    batch: BatchConfig = field(default_factory=BatchConfig)
    tools: ToolPaths = field(default_factory=ToolPaths)
    run_log: Path = DEFAULT_RUN_LOG
    log_level: str = "INFO"
    log_file: Path | None = None


def _expand_path(value: str | None, base: Path) -> Path | None:
    if value in (None, ""):
        return None
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def _tool_path(value: str | None, base: Path) -> Path | str | None:
    """Paths resolve against the config file; bare command names stay for PATH lookup."""
    if value in (None, ""):
        return None
    text = str(value)
    if "/" not in text and os.sep not in text and not text.startswith("~"):
        return text
    return _expand_path(text, base)


def _as_mapping(raw: Any, key: str) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"config section {key!r} must be a mapping")
    return raw


def _positive_int(value: Any, key: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from exc
    if number < 1:
        raise ConfigError(f"{key} must be a positive integer, got {number}")
    return number


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        return AppConfig()

    import yaml

    cfg_path = Path(path).expanduser().resolve()
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {cfg_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"config root in {cfg_path} must be a mapping")

    base = cfg_path.parent
    batch_raw = _as_mapping(raw.get("batch"), "batch")
    tools_raw = _as_mapping(raw.get("tools"), "tools")

    batch = BatchConfig(
        number=_positive_int(batch_raw.get("number", 3), "batch.number"),
        keep_hdr=bool(batch_raw.get("keep_hdr", False)),
        output_dir=_expand_path(batch_raw.get("output_dir"), base),
    )
    tools = ToolPaths(
        luminance_hdr=_tool_path(tools_raw.get("luminance_hdr"), base),
        gimp=_tool_path(tools_raw.get("gimp"), base),
        align_image_stack=_tool_path(tools_raw.get("align_image_stack"), base),
        exiftool=_tool_path(tools_raw.get("exiftool"), base),
    )

    return AppConfig(
        batch=batch,
        tools=tools,
        run_log=_expand_path(raw.get("run_log"), base) or DEFAULT_RUN_LOG.expanduser(),
        log_level=str(raw.get("log_level", "INFO")),
        log_file=_expand_path(raw.get("log_file"), base),
    )
