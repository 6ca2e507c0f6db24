"""Fragment builders: each turns one slice of state into a colored string.

Builders are pure and position-agnostic. An empty string means "leave me
out"; only the assembler decides order and separators.
"""

import os
import random
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Optional

from .config import FILES_STYLE_COUNT, FILES_STYLE_LABEL, StatusConfig
from .git import Clean, Dirty, GitStatus, NotRepo
from .theme import BAR_EMPTY, BAR_FILLED, DEFAULT_THEME, Theme
from .tiers import classify, clamp_percent, select_message, usage_percent

# Plain ASCII digits, optional fraction. Anything else never reaches formatting.
COST_PATTERN = re.compile(r"[0-9]+(\.[0-9]+)?", re.ASCII)

NOT_A_REPO = "(not a git repository)"
FILES_LABEL = "changes"


def format_number(n: int) -> str:
    """Compact K/M rendering, truncating to one decimal below 10K and 10M.

    >>> format_number(1500), format_number(54000), format_number(1200000)
    ('1.5K', '54K', '1.2M')
    """
    n = max(0, n)
    if n < 1000:
        return str(n)
    if n < 1_000_000:
        k, rem = divmod(n, 1000)
        return f"{k}.{rem // 100}K" if k < 10 else f"{k}K"
    m, rem = divmod(n, 1_000_000)
    return f"{m}.{rem // 100_000}M" if m < 10 else f"{m}M"


def render_bar(percent: int, width: int, theme: Theme = DEFAULT_THEME) -> str:
    """``width`` glyphs: filled ones in the tier color, the rest gray."""
    percent = clamp_percent(percent)
    filled = percent * width // 100
    empty = width - filled
    p = theme.palette
    color = theme.tier_color(classify(percent).value)
    return f"{color}{BAR_FILLED * filled}{p.reset}{p.gray}{BAR_EMPTY * empty}{p.reset}"


def build_model(model_name: str, theme: Theme = DEFAULT_THEME) -> str:
    p = theme.palette
    return f"{theme.icons.model} {p.cyan}{model_name or ''}{p.reset}"


def build_context(
    usage: int,
    capacity: int,
    config: Optional[StatusConfig] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Bar, percentage, usage/capacity, and (optionally) a tier message."""
    config = config or StatusConfig()
    theme = config.theme
    p = theme.palette

    percent = usage_percent(usage, capacity)
    bar = render_bar(percent, config.bar_width, theme)
    text = (
        f"{theme.icons.context} {p.gray}[{p.reset}{bar}{p.gray}]{p.reset} "
        f"{percent}% {format_number(usage)}/{format_number(capacity)}"
    )
    if config.show_messages:
        message = select_message(classify(percent), config.messages, rng)
        text += f" {p.gray}|{p.reset} {p.gray}{message}{p.reset}"
    return text


def build_directory(
    current_dir: Optional[str],
    theme: Theme = DEFAULT_THEME,
    cwd: Optional[str] = None,
) -> str:
    """Basename of the workspace directory, or of our own cwd when absent."""
    path = current_dir or cwd or os.getcwd()
    stripped = path.rstrip("/\\")
    name = os.path.basename(stripped) if stripped else path
    p = theme.palette
    return f"{theme.icons.directory} {p.blue}{name or path}{p.reset}"


def _ahead_behind(ahead: int, behind: int, theme: Theme) -> str:
    p = theme.palette
    out = ""
    if ahead > 0:
        out += f" {p.green}↑{ahead}{p.reset}"
    if behind > 0:
        out += f" {p.red}↓{behind}{p.reset}"
    return out


def build_git(status: GitStatus, theme: Theme = DEFAULT_THEME) -> str:
    """Branch plus ahead/behind, or a caution note outside a repository."""
    p = theme.palette
    if isinstance(status, NotRepo):
        return f"{p.orange}{NOT_A_REPO}{p.reset}"
    if isinstance(status, (Clean, Dirty)):
        return (
            f"{theme.icons.git} {p.magenta}{status.branch}{p.reset}"
            f"{_ahead_behind(status.ahead, status.behind, theme)}"
        )
    raise TypeError(f"unknown git status: {status!r}")


def build_files(
    file_count: Optional[int],
    style: str = FILES_STYLE_COUNT,
    theme: Theme = DEFAULT_THEME,
) -> str:
    """Changed-path count, empty for a clean tree or no repository."""
    if not file_count or file_count <= 0:
        return ""
    p = theme.palette
    if style == FILES_STYLE_LABEL:
        label = FILES_LABEL
    else:
        label = f"{file_count} files"
    return f"{theme.icons.files} {p.gray}{label}{p.reset}"


def build_lines(added: int, removed: int, theme: Theme = DEFAULT_THEME) -> str:
    if not added and not removed:
        return ""
    p = theme.palette
    return f"{theme.icons.files} {p.green}+{added}{p.reset}/{p.red}-{removed}{p.reset}"


def build_cost(
    cost: Optional[str],
    theme: Theme = DEFAULT_THEME,
    enabled: bool = True,
) -> str:
    """``$X.XX`` for a plain non-zero decimal; anything else is dropped silently."""
    if not enabled or cost is None:
        return ""
    text = str(cost).strip()
    if not COST_PATTERN.fullmatch(text):
        return ""
    try:
        value = Decimal(text)
    except InvalidOperation:
        return ""
    if value == 0:
        return ""
    amount = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)
    p = theme.palette
    return f"{theme.icons.cost} {p.green}${amount}{p.reset}"


__all__ = [
    "format_number",
    "render_bar",
    "build_model",
    "build_context",
    "build_directory",
    "build_git",
    "build_files",
    "build_lines",
    "build_cost",
]
