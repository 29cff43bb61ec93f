from __future__ import annotations

from pathlib import Path
from typing import Sequence


class PipelineError(RuntimeError):
    pass


class ConfigError(ValueError):
    pass


class ToolNotFound(PipelineError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name} not found in PATH; install it or set its path in the config")
        self.name = name


class NoMetadataBackend(PipelineError):
    def __init__(self) -> None:
        super().__init__("no exposure metadata backend available; install exiftool or the exifread package")


class MetadataUnavailable(PipelineError):
    def __init__(self, image: Path, reason: str) -> None:
        super().__init__(f"cannot read exposure metadata from {image}: {reason}")
        self.image = image
        self.reason = reason


class StageFailure(PipelineError):
    def __init__(self, stage: str, command: Sequence[str], exit_code: int, log_path: Path | None) -> None:
        self.stage = stage
        self.command = tuple(command)
        self.exit_code = exit_code
        self.log_path = log_path
        super().__init__(f"{stage} stage failed with exit code {exit_code}")
