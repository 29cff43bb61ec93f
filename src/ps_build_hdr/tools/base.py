from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import shlex
import shutil
import subprocess
from typing import Protocol, Sequence


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResult:
    exit_code: int
    output: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ExternalTool(Protocol):
    name: str

    def invoke(self, args: Sequence[str]) -> ToolResult:
        ...

    def command_line(self, args: Sequence[str]) -> list[str]:
        ...


class SubprocessTool:
    """Runs one external binary, capturing stdout and stderr as one stream.

    Calls block until the process exits; there is no timeout.
    """

    def __init__(self, name: str, path: str | Path) -> None:
        self.name = name
        self.path = str(path)

    def command_line(self, args: Sequence[str]) -> list[str]:
        return [self.path, *[str(a) for a in args]]

    def invoke(self, args: Sequence[str]) -> ToolResult:
        cmd = self.command_line(args)
        logger.debug("running %s", format_command(cmd))
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as exc:
            # Same shape as a shell reporting an unrunnable command.
            return ToolResult(exit_code=127, output=f"{exc}\n")
        return ToolResult(exit_code=proc.returncode, output=proc.stdout or "")

    def __repr__(self) -> str:
        return f"SubprocessTool({self.name!r}, {self.path!r})"


def find_tool(name: str, override: str | Path | None = None) -> SubprocessTool | None:
    if override is not None:
        path = Path(override).expanduser()
        if path.is_file():
            return SubprocessTool(name, path)
        found = shutil.which(str(override))
    else:
        found = shutil.which(name)
    if found is None:
        return None
    return SubprocessTool(name, found)


def format_command(cmd: Sequence[str]) -> str:
    return shlex.join(str(c) for c in cmd)
