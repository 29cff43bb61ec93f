from .base import ExternalTool, SubprocessTool, ToolResult, find_tool, format_command
from .dialect import Dialect, FlagSet, detect_dialect, flags_for, parse_version

__all__ = [
    "Dialect",
    "ExternalTool",
    "FlagSet",
    "SubprocessTool",
    "ToolResult",
    "detect_dialect",
    "find_tool",
    "flags_for",
    "format_command",
    "parse_version",
]
