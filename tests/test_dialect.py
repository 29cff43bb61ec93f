from __future__ import annotations

import pytest

from ps_build_hdr.tools.dialect import Dialect, detect_dialect, flags_for, parse_version


def test_parse_version_from_banner() -> None:
    assert parse_version("luminance-hdr-cli 2.6.1.1") == (2, 6, 1)
    assert parse_version("Luminance HDR 2.2") == (2, 2, 0)
    assert parse_version("no digits here") is None


@pytest.mark.parametrize(
    "text,dialect",
    [
        ("luminance-hdr-cli 2.0.2", Dialect.LEGACY),
        ("luminance-hdr-cli 2.2.1", Dialect.LEGACY),
        ("luminance-hdr-cli 2.3.0", Dialect.MODERN),
        ("luminance-hdr-cli 2.6.0", Dialect.MODERN),
        ("", Dialect.MODERN),
    ],
)
def test_detect_dialect(text: str, dialect: Dialect) -> None:
    assert detect_dialect(text) is dialect


def test_legacy_tonemap_params_are_colon_joined() -> None:
    flags = flags_for(Dialect.LEGACY)
    args = flags.tonemap_params("ashikhmin", {"lc": "0", "eq2": "false", "simple": "false"})
    assert args == ["-p", "lc=0:eq2=false:simple=false"]


def test_modern_tonemap_params_use_operator_flags() -> None:
    flags = flags_for(Dialect.MODERN)
    args = flags.tonemap_params(
        "mantiuk08",
        {"colorsaturation": "1", "contrastenhancement": "1", "luminancelevel": "1", "setluminance": "false"},
    )
    assert args == [
        "--tmoM08ColorSaturation",
        "1",
        "--tmoM08ConstrastEnh",
        "1",
        "--tmoM08LuminanceLvl",
        "1",
        "--tmoM08SetLuminance",
        "false",
    ]


def test_modern_tonemap_params_reject_unknown_operator() -> None:
    with pytest.raises(ValueError):
        flags_for(Dialect.MODERN).tonemap_params("reinhard02", {"key": "0.18"})
