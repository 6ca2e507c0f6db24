"""Statusline theme: ANSI palette, icons, and per-tier colors.

All escape sequences live here. Builders never hardcode colors.
"""

import os
from dataclasses import dataclass, field
from typing import Dict


# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Palette:
    """16-color ANSI palette used by every fragment."""

    red: str = "\033[0;31m"
    green: str = "\033[0;32m"
    blue: str = "\033[0;34m"
    magenta: str = "\033[0;35m"
    cyan: str = "\033[0;36m"
    orange: str = "\033[0;33m"
    gray: str = "\033[0;90m"
    reset: str = "\033[0m"


PALETTE = Palette()

# NO_COLOR: every code collapses to the empty string
PLAIN = Palette(
    red="", green="", blue="", magenta="", cyan="", orange="", gray="", reset="",
)


@dataclass(frozen=True)
class Icons:
    """Leading glyph per fragment."""

    model: str = "\U0001F680"       # rocket
    context: str = "\U0001F525"     # fire
    directory: str = "\U0001F4C2"   # open folder
    git: str = "\U0001F38B"         # tanabata tree
    files: str = "\u270f\ufe0f"     # pencil
    cost: str = "\U0001F4B5"        # dollar banknote


ICONS = Icons()

BAR_FILLED = "█"  # █
BAR_EMPTY = "░"   # ░


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Theme:
    """Palette plus icons plus the color each usage tier paints the bar with."""

    palette: Palette = PALETTE
    icons: Icons = ICONS
    tier_colors: Dict[str, str] = field(default_factory=dict)

    def tier_color(self, tier_name: str) -> str:
        """Color for a tier name, gray when unknown."""
        return self.tier_colors.get(tier_name, self.palette.gray)

    @property
    def separator(self) -> str:
        p = self.palette
        return f" {p.gray}|{p.reset} "


def _tier_colors(palette: Palette) -> Dict[str, str]:
    return {
        "very_low": palette.green,
        "low": palette.cyan,
        "medium": palette.orange,
        "high": palette.orange,
        "critical": palette.red,
    }


def build_theme(color: bool = True) -> Theme:
    """Build the theme, honoring NO_COLOR unless color is forced off already."""
    if color and os.environ.get("NO_COLOR"):
        color = False
    palette = PALETTE if color else PLAIN
    return Theme(palette=palette, icons=ICONS, tier_colors=_tier_colors(palette))


DEFAULT_THEME = Theme(palette=PALETTE, icons=ICONS, tier_colors=_tier_colors(PALETTE))
