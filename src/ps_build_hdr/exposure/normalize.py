from __future__ import annotations

from pathlib import Path
from typing import Mapping

# luminance-hdr-cli accepts EVs within +/-10 stops.
EV_LIMIT = 10.0


def normalize_evs(evs: Mapping[Path, float]) -> dict[Path, float]:
    """Shift a batch of EVs so the out-of-range bound lands on +/-10.

    Only one bound is corrected per call. When the maximum exceeds +10 the
    minimum is not rechecked, so a batch spanning more than 20 stops can still
    fall below -10 afterwards.
    """
    if not evs:
        return {}

    hi = max(evs.values())
    lo = min(evs.values())
    if hi > EV_LIMIT:
        shift = hi - EV_LIMIT
    elif lo < -EV_LIMIT:
        shift = lo + EV_LIMIT
    else:
        return dict(evs)
    return {image: ev - shift for image, ev in evs.items()}
