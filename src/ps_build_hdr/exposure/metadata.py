from __future__ import annotations

from dataclasses import dataclass
import importlib.util
import json
import logging
import math
from pathlib import Path
from typing import Any, Iterable, Protocol, Sequence

from ps_build_hdr.errors import MetadataUnavailable, NoMetadataBackend
from ps_build_hdr.tools.base import ExternalTool


logger = logging.getLogger(__name__)

# ISO-to-luminance calibration of the reference metering standard.
EV_CALIBRATION = 12.07488


@dataclass(frozen=True)
class ExposureSample:
    image: Path
    exposure_time_s: float
    iso: float
    f_number: float
    ev: float


def compute_ev(exposure_time_s: float, iso: float, f_number: float) -> float:
    return math.log2((exposure_time_s * iso) / (f_number**2 * EV_CALIBRATION))


def _ratio_like_to_float(value: Any) -> float | None:
    if value is None:
        return None

    # exifread stores most values as a list-like container.
    if hasattr(value, "values") and not isinstance(value, dict):
        value = value.values
    if isinstance(value, (list, tuple)):
        if len(value) == 0:
            return None
        value = value[0]

    if hasattr(value, "num") and hasattr(value, "den"):
        den = float(getattr(value, "den", 0) or 0)
        if den == 0.0:
            return None
        return float(getattr(value, "num", 0)) / den

    if isinstance(value, str) and "/" in value:
        num, _, den = value.partition("/")
        try:
            den_f = float(den)
            if den_f == 0.0:
                return None
            return float(num) / den_f
        except ValueError:
            return None

    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _require_positive(image: Path, **fields: float | None) -> tuple[float, ...]:
    missing = [name for name, value in fields.items() if value is None or value <= 0]
    if missing:
        raise MetadataUnavailable(image, f"missing or invalid {', '.join(missing)}")
    return tuple(float(v) for v in fields.values())  # type: ignore[arg-type]


class MetadataBackend(Protocol):
    name: str

    def available(self) -> bool:
        ...

    def extract(self, image: Path) -> tuple[float, float, float]:
        ...


class ExifToolBackend:
    name = "exiftool"

    def __init__(self, tool: ExternalTool | None) -> None:
        self.tool = tool

    def available(self) -> bool:
        return self.tool is not None

    def extract(self, image: Path) -> tuple[float, float, float]:
        if self.tool is None:
            raise MetadataUnavailable(image, "exiftool is not available")

        result = self.tool.invoke(["-j", "-n", "-ExposureTime", "-ISO", "-FNumber", str(image)])
        if not result.ok:
            raise MetadataUnavailable(image, f"exiftool exited with {result.exit_code}")
        try:
            rows = json.loads(result.output)
        except ValueError as exc:
            raise MetadataUnavailable(image, "exiftool returned malformed JSON") from exc
        if not rows:
            raise MetadataUnavailable(image, "exiftool returned no rows")
        row = rows[0]

        exposure_time, iso, f_number = _require_positive(
            image,
            exposure_time=_ratio_like_to_float(row.get("ExposureTime")),
            iso=_ratio_like_to_float(row.get("ISO")),
            f_number=_ratio_like_to_float(row.get("FNumber")),
        )
        return exposure_time, iso, f_number


class ExifReadBackend:
    name = "exifread"

    def available(self) -> bool:
        return importlib.util.find_spec("exifread") is not None

    def extract(self, image: Path) -> tuple[float, float, float]:
        import exifread

        try:
            with Path(image).open("rb") as f:
                tags = exifread.process_file(f, details=False)
        except OSError as exc:
            raise MetadataUnavailable(image, str(exc)) from exc

        exposure_time, iso, f_number = _require_positive(
            image,
            exposure_time=_ratio_like_to_float(tags.get("EXIF ExposureTime")),
            iso=_ratio_like_to_float(tags.get("EXIF ISOSpeedRatings") or tags.get("EXIF PhotographicSensitivity")),
            f_number=_ratio_like_to_float(tags.get("EXIF FNumber")),
        )
        return exposure_time, iso, f_number


def select_backend(backends: Iterable[MetadataBackend]) -> MetadataBackend:
    """Return the first available backend.

    Order expresses preference: exiftool first, then in-process exifread.
    """
    for backend in backends:
        if backend.available():
            logger.info("exposure metadata backend: %s", backend.name)
            return backend
    raise NoMetadataBackend()


def read_exposure(image: Path, backend: MetadataBackend) -> ExposureSample:
    exposure_time, iso, f_number = backend.extract(image)
    return ExposureSample(
        image=image,
        exposure_time_s=exposure_time,
        iso=iso,
        f_number=f_number,
        ev=compute_ev(exposure_time, iso, f_number),
    )


def read_batch_exposures(batch: Sequence[Path], backend: MetadataBackend) -> dict[Path, ExposureSample]:
    return {image: read_exposure(image, backend) for image in batch}
