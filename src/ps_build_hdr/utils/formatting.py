from __future__ import annotations

from fractions import Fraction

from ps_build_hdr.exposure.metadata import ExposureSample


def shutter_seconds_to_fraction(value: float | None, max_denominator: int = 1000000) -> str | None:
    if value is None:
        return None
    if value <= 0:
        return None

    frac = Fraction(value).limit_denominator(max_denominator)
    if frac.denominator == 1:
        return str(frac.numerator)
    return f"{frac.numerator}/{frac.denominator}"


def format_ev(ev: float) -> str:
    return f"{ev:.6f}"


def describe_sample(sample: ExposureSample) -> str:
    shutter = shutter_seconds_to_fraction(sample.exposure_time_s) or "?"
    return f"{sample.image.name}: {shutter}s ISO{sample.iso:g} f/{sample.f_number:g} EV {sample.ev:.2f}"
