"""statusline - color-coded status line for a CLI coding assistant."""

__version__ = "0.1.0"

from .assembler import StatusFragments, assemble, render_status_line
from .cli import cli
from .config import ConfigManager, StatusConfig
from .errors import GitUnavailable, InputError, ParseError
from .git import Clean, Dirty, NotRepo, inspect_repository, validate_directory
from .reader import StatusInput, parse_status_input, read_input
from .tiers import MessagePools, UsageTier, classify, select_message

__all__ = [
    "cli",
    "ConfigManager",
    "StatusConfig",
    "StatusInput",
    "StatusFragments",
    "MessagePools",
    "UsageTier",
    "NotRepo",
    "Clean",
    "Dirty",
    "InputError",
    "ParseError",
    "GitUnavailable",
    "assemble",
    "classify",
    "inspect_repository",
    "parse_status_input",
    "read_input",
    "render_status_line",
    "select_message",
    "validate_directory",
]
