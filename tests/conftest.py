from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest

from ps_build_hdr.errors import MetadataUnavailable
from ps_build_hdr.tools.base import ToolResult
from ps_build_hdr.tools.dialect import Dialect
from ps_build_hdr.tools.resolver import AlignMode, ToolSet


class FakeTool:
    def __init__(
        self,
        name: str,
        handler: Callable[[list[str]], ToolResult] | None = None,
    ) -> None:
        self.name = name
        self.path = f"/usr/bin/{name}"
        self.calls: list[list[str]] = []
        self._handler = handler

    def command_line(self, args: Sequence[str]) -> list[str]:
        return [self.path, *[str(a) for a in args]]

    def invoke(self, args: Sequence[str]) -> ToolResult:
        args = [str(a) for a in args]
        self.calls.append(args)
        if self._handler is not None:
            return self._handler(args)
        return ToolResult(exit_code=0, output=f"{self.name} ok\n")


class FakeBackend:
    name = "fake"

    def __init__(self, exposures: dict[str, tuple[float, float, float]]) -> None:
        self.exposures = exposures

    def available(self) -> bool:
        return True

    def extract(self, image: Path) -> tuple[float, float, float]:
        try:
            return self.exposures[Path(image).name]
        except KeyError:
            raise MetadataUnavailable(Path(image), "no EXIF data") from None


def write_gimp_output(args: list[str]) -> ToolResult:
    # The macro call is the second -b script; its last quoted string is the output path.
    call = args[4]
    out = call.rsplit('"', 2)[-2]
    Path(out).write_bytes(b"jpeg")
    return ToolResult(exit_code=0, output="batch command executed successfully\n")


def write_engine_output(args: list[str]) -> ToolResult:
    for flag in ("-o", "--output"):
        if flag in args:
            Path(args[args.index(flag) + 1]).write_bytes(b"#?RADIANCE")
    return ToolResult(exit_code=0, output="luminance-hdr-cli ok\n")


@pytest.fixture
def fake_tool() -> type[FakeTool]:
    return FakeTool


@pytest.fixture
def fake_backend() -> type[FakeBackend]:
    return FakeBackend


@pytest.fixture
def engine_handler() -> Callable[[list[str]], ToolResult]:
    return write_engine_output


@pytest.fixture
def make_toolset() -> Callable[..., ToolSet]:
    def _make(
        exposures: dict[str, tuple[float, float, float]] | None = None,
        hdr_engine: FakeTool | None = None,
        compositor: FakeTool | None = None,
        metadata_tool: FakeTool | None = None,
        align_mode: AlignMode = AlignMode.AIS,
        dialect: Dialect = Dialect.MODERN,
    ) -> ToolSet:
        return ToolSet(
            hdr_engine=hdr_engine or FakeTool("luminance-hdr-cli", write_engine_output),
            compositor=compositor or FakeTool("gimp", write_gimp_output),
            metadata_tool=metadata_tool,
            align_mode=align_mode,
            dialect=dialect,
            metadata_backend=FakeBackend(exposures or {}),
        )

    return _make
