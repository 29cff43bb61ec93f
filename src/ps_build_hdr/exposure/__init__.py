from .metadata import (
    EV_CALIBRATION,
    ExifReadBackend,
    ExifToolBackend,
    ExposureSample,
    MetadataBackend,
    compute_ev,
    read_batch_exposures,
    read_exposure,
    select_backend,
)
from .normalize import EV_LIMIT, normalize_evs

__all__ = [
    "EV_CALIBRATION",
    "EV_LIMIT",
    "ExifReadBackend",
    "ExifToolBackend",
    "ExposureSample",
    "MetadataBackend",
    "compute_ev",
    "normalize_evs",
    "read_batch_exposures",
    "read_exposure",
    "select_backend",
]
