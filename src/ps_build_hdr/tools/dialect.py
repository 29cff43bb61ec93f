from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
import re
from typing import Mapping


logger = logging.getLogger(__name__)


class Dialect(str, enum.Enum):
    LEGACY = "legacy"
    MODERN = "modern"


# First luminance-hdr-cli release with per-operator tone-mapping flags.
MODERN_SINCE: tuple[int, int, int] = (2, 3, 0)

_VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


@dataclass(frozen=True)
class FlagSet:
    dialect: Dialect
    align: str
    config: str
    ev: str
    output: str
    load: str
    tmo: str

    def tonemap_params(self, operator: str, params: Mapping[str, str]) -> list[str]:
        """Render fixed operator parameters in this dialect's spelling."""
        if self.dialect is Dialect.LEGACY:
            joined = ":".join(f"{key}={value}" for key, value in params.items())
            return ["-p", joined]

        spelled = _MODERN_OPERATOR_FLAGS.get(operator)
        if spelled is None:
            raise ValueError(f"unknown tone-mapping operator: {operator}")
        args: list[str] = []
        for key, value in params.items():
            args.extend([spelled[key], value])
        return args


_MODERN_OPERATOR_FLAGS: dict[str, dict[str, str]] = {
    "ashikhmin": {
        "lc": "--tmoAshLocal",
        "eq2": "--tmoAshEq2",
        "simple": "--tmoAshSimple",
    },
    "mantiuk08": {
        "colorsaturation": "--tmoM08ColorSaturation",
        "contrastenhancement": "--tmoM08ConstrastEnh",
        "luminancelevel": "--tmoM08LuminanceLvl",
        "setluminance": "--tmoM08SetLuminance",
    },
}


FLAG_SETS: dict[Dialect, FlagSet] = {
    Dialect.LEGACY: FlagSet(
        dialect=Dialect.LEGACY,
        align="-a",
        config="-c",
        ev="-e",
        output="-o",
        load="-l",
        tmo="-t",
    ),
    Dialect.MODERN: FlagSet(
        dialect=Dialect.MODERN,
        align="--align",
        config="--config",
        ev="--ev",
        output="--output",
        load="--load",
        tmo="--tmo",
    ),
}


def parse_version(text: str) -> tuple[int, int, int] | None:
    m = _VERSION_RE.search(text or "")
    if m is None:
        return None
    return int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)


def detect_dialect(version_text: str) -> Dialect:
    version = parse_version(version_text)
    if version is None:
        logger.warning("could not parse luminance-hdr-cli version from %r; assuming modern flags", version_text)
        return Dialect.MODERN
    if version < MODERN_SINCE:
        return Dialect.LEGACY
    return Dialect.MODERN


def flags_for(dialect: Dialect) -> FlagSet:
    return FLAG_SETS[dialect]
