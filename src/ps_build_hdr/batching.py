from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Sequence


Batch = tuple[Path, ...]


def list_directory(directory: Path) -> list[Path]:
    """All entries of ``directory`` in lexicographic name order.

    Nothing is filtered out; the directory is expected to hold only the
    bracketed photos.
    """
    return [directory / name for name in sorted(p.name for p in directory.iterdir())]


def partition(files: Iterable[Path], number: int) -> Iterator[Batch]:
    if number < 1:
        raise ValueError(f"batch size must be a positive integer, got {number}")

    pending: list[Path] = []
    for path in files:
        pending.append(path)
        if len(pending) == number:
            yield tuple(pending)
            pending = []
    # A trailing partial group is dropped.


def explicit_batch(files: Sequence[Path]) -> Batch:
    if not files:
        raise ValueError("explicit batch needs at least one file")
    return tuple(files)
