from __future__ import annotations

from pathlib import Path

from ps_build_hdr.exposure import normalize_evs


def _evs(*values: float) -> dict[Path, float]:
    return {Path(f"IMG_{i:04d}.JPG"): v for i, v in enumerate(values)}


def test_normalize_shifts_down_when_max_above_limit() -> None:
    out = normalize_evs(_evs(12.0, 8.0, 5.0))
    assert list(out.values()) == [10.0, 6.0, 3.0]


def test_normalize_shifts_up_when_min_below_limit() -> None:
    out = normalize_evs(_evs(-12.0, -5.0, 0.0))
    assert list(out.values()) == [-10.0, -3.0, 2.0]


def test_normalize_passes_in_range_values_through() -> None:
    evs = _evs(5.0, 0.0, -5.0)
    assert normalize_evs(evs) == evs


def test_normalize_boundaries_are_inclusive() -> None:
    evs = _evs(10.0, -10.0)
    assert normalize_evs(evs) == evs


def test_normalize_is_idempotent() -> None:
    for values in [(12.0, 8.0, 5.0), (-12.0, -5.0, 0.0), (5.0, 0.0, -5.0), (13.5, 11.25, 9.0), (-14.5, -11.0, -7.5)]:
        once = normalize_evs(_evs(*values))
        assert normalize_evs(once) == once


def test_normalize_only_corrects_one_bound() -> None:
    out = normalize_evs(_evs(15.0, -12.0))
    assert list(out.values()) == [10.0, -17.0]


def test_normalize_does_not_mutate_input() -> None:
    evs = _evs(12.0, 8.0)
    normalize_evs(evs)
    assert list(evs.values()) == [12.0, 8.0]


def test_normalize_empty() -> None:
    assert normalize_evs({}) == {}
