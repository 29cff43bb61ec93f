from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Sequence

from ps_build_hdr.tools.base import format_command


DEFAULT_RUN_LOG = Path("~/.ps-build-hdr.log")

_BORDER = "-" * 80


class RunLog:
    """Append-only text log of every external command and its raw output."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def _append(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(text)

    def banner(self, images: Sequence[Path], when: datetime | None = None) -> None:
        stamp = (when or datetime.now()).strftime("%a %b %d %H:%M:%S %Y")
        names = " ".join(p.name for p in images)
        self._append(f"{_BORDER}\nDate: {stamp}\nImages: {names}\n{_BORDER}\n")

    def command(self, cmd: Sequence[str], output: str) -> None:
        if output and not output.endswith("\n"):
            output += "\n"
        self._append(f"$ {format_command(cmd)}\n{output}")
