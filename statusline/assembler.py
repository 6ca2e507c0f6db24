"""Assemble fragments into the final status line.

This module is the only place that knows fragment order:
directory | git | files | lines | model | context | cost
"""

import logging
import random
from dataclasses import dataclass, fields
from typing import Optional

from .components import (
    build_context,
    build_cost,
    build_directory,
    build_files,
    build_git,
    build_lines,
    build_model,
)
from .config import StatusConfig
from .git import Dirty, GitStatus, inspect_repository
from .reader import StatusInput
from .theme import DEFAULT_THEME, Theme

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusFragments:
    """One fragment per component, in layout order. Empty means omitted."""

    directory: str = ""
    git: str = ""
    files: str = ""
    lines: str = ""
    model: str = ""
    context: str = ""
    cost: str = ""

    def ordered(self) -> list[str]:
        return [getattr(self, f.name) for f in fields(self)]


def assemble(fragments: StatusFragments, theme: Theme = DEFAULT_THEME) -> str:
    """Join non-empty fragments with the gray separator, closing with a reset."""
    parts = [part for part in fragments.ordered() if part]
    return theme.separator.join(parts) + theme.palette.reset


def build_fragments(
    status: StatusInput,
    git_status: GitStatus,
    config: StatusConfig,
    rng: Optional[random.Random] = None,
    cwd: Optional[str] = None,
) -> StatusFragments:
    """Run every builder against one snapshot."""
    theme = config.theme
    dirty = isinstance(git_status, Dirty)
    return StatusFragments(
        directory=build_directory(status.current_dir, theme, cwd=cwd),
        git=build_git(git_status, theme),
        files=build_files(git_status.file_count if dirty else 0, config.files_style, theme),
        lines=(
            build_lines(git_status.added, git_status.removed, theme)
            if dirty and config.show_line_counts else ""
        ),
        model=build_model(status.model_name, theme),
        context=build_context(
            status.current_usage_tokens, status.context_window_size, config, rng,
        ),
        cost=build_cost(status.cost_usd, theme, enabled=config.show_cost),
    )


def render_status_line(
    status: StatusInput,
    config: StatusConfig,
    git_status: Optional[GitStatus] = None,
    rng: Optional[random.Random] = None,
    cwd: Optional[str] = None,
) -> str:
    """Full pipeline for one snapshot: inspect git (unless given), build, assemble."""
    if git_status is None:
        git_status = inspect_repository(
            status.current_dir,
            allow_absolute=config.allow_absolute_paths,
            line_counts=config.show_line_counts,
        )
    _log.debug("git status: %s", git_status)
    return assemble(build_fragments(status, git_status, config, rng, cwd), config.theme)
