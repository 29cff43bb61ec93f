from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from ps_build_hdr.config import ToolPaths
from ps_build_hdr.errors import ToolNotFound
from ps_build_hdr.exposure.metadata import (
    ExifReadBackend,
    ExifToolBackend,
    MetadataBackend,
    select_backend,
)

from .base import ExternalTool, find_tool
from .dialect import Dialect, FlagSet, detect_dialect, flags_for


logger = logging.getLogger(__name__)

LUMINANCE_HDR = "luminance-hdr-cli"
GIMP = "gimp"
ALIGN_IMAGE_STACK = "align_image_stack"
EXIFTOOL = "exiftool"


class AlignMode(str, enum.Enum):
    # Feature-based alignment through align_image_stack.
    AIS = "AIS"
    # Median threshold bitmap, built into luminance-hdr.
    MTB = "MTB"


@dataclass(frozen=True)
class ToolSet:
    hdr_engine: ExternalTool
    compositor: ExternalTool
    metadata_tool: ExternalTool | None
    align_mode: AlignMode
    dialect: Dialect
    metadata_backend: MetadataBackend

    @property
    def flags(self) -> FlagSet:
        return flags_for(self.dialect)

    @property
    def copies_metadata(self) -> bool:
        return self.metadata_tool is not None


Finder = Callable[[str, Optional[Union[str, Path]]], Optional[ExternalTool]]


def _engine_version(engine: ExternalTool) -> str:
    result = engine.invoke(["--version"])
    return result.output.strip()


def resolve_tools(paths: ToolPaths | None = None, finder: Finder = find_tool) -> ToolSet:
    """Locate external binaries once at startup.

    luminance-hdr-cli and gimp are mandatory. align_image_stack and exiftool
    only degrade the run when absent.
    """
    paths = paths or ToolPaths()

    hdr_engine = finder(LUMINANCE_HDR, paths.luminance_hdr)
    if hdr_engine is None:
        raise ToolNotFound(LUMINANCE_HDR)
    compositor = finder(GIMP, paths.gimp)
    if compositor is None:
        raise ToolNotFound(GIMP)

    if finder(ALIGN_IMAGE_STACK, paths.align_image_stack) is not None:
        align_mode = AlignMode.AIS
    else:
        align_mode = AlignMode.MTB
        logger.warning("%s not found; falling back to MTB alignment", ALIGN_IMAGE_STACK)

    metadata_tool = finder(EXIFTOOL, paths.exiftool)
    if metadata_tool is None:
        logger.warning("%s not found; output images will lose their EXIF metadata", EXIFTOOL)

    backend = select_backend([ExifToolBackend(metadata_tool), ExifReadBackend()])

    version_text = _engine_version(hdr_engine)
    dialect = detect_dialect(version_text)
    logger.info("%s %s: using %s flags", LUMINANCE_HDR, version_text or "(unknown version)", dialect.value)

    return ToolSet(
        hdr_engine=hdr_engine,
        compositor=compositor,
        metadata_tool=metadata_tool,
        align_mode=align_mode,
        dialect=dialect,
        metadata_backend=backend,
    )
