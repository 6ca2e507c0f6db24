"""Git repository state for the status line.

One membership check plus one ``git status --porcelain=v2 --branch`` call
cover branch, ahead/behind and the changed-path count. A diff-stat call is
only made when line counts are enabled and the tree is dirty. Every failure
turns into NotRepo: a broken git must never blank the whole line. A git
older than 2.11 rejects porcelain v2, so it lands there too; the explicit
version check is only a diagnostic for ``statusline config``.
"""

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from .errors import GitUnavailable

_log = logging.getLogger(__name__)

DETACHED_HEAD = "(detached HEAD)"
MIN_GIT_VERSION = (2, 11)
GIT_TIMEOUT = 2

# Characters that would let a caller-supplied path smuggle shell syntax
UNSAFE_PATH_CHARS = ("$", "`", ";")


@dataclass(frozen=True)
class NotRepo:
    """Not inside a work tree, or git could not tell us."""


@dataclass(frozen=True)
class Clean:
    """Work tree with nothing to commit."""

    branch: str
    ahead: int = 0
    behind: int = 0


@dataclass(frozen=True)
class Dirty:
    """Work tree with at least one changed, staged or untracked path."""

    branch: str
    file_count: int
    ahead: int = 0
    behind: int = 0
    added: int = 0
    removed: int = 0


GitStatus = Union[NotRepo, Clean, Dirty]


@dataclass(frozen=True)
class PorcelainSummary:
    """What one porcelain v2 report tells us."""

    branch: str = DETACHED_HEAD
    ahead: int = 0
    behind: int = 0
    file_count: int = 0


def validate_directory(path: str, allow_absolute: bool = False) -> bool:
    """Whether a caller-supplied directory is safe to hand to ``git -C``."""
    if not path:
        return False
    if ".." in path:
        return False
    if path.startswith("~"):
        return False
    if any(ch in path for ch in UNSAFE_PATH_CHARS):
        return False
    if not allow_absolute and (path.startswith("/") or os.path.isabs(path)):
        return False
    return True


def _run_git(args: list[str], directory: Optional[str] = None) -> str:
    """Run one git command and return stdout. Raises GitUnavailable on any failure."""
    cmd = ["git"]
    if directory:
        cmd += ["-C", directory]
    cmd += args

    env = dict(os.environ)
    env["GIT_OPTIONAL_LOCKS"] = "0"

    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=GIT_TIMEOUT,
            env=env,
        )
    except FileNotFoundError as e:
        raise GitUnavailable("git binary not found") from e
    except subprocess.TimeoutExpired as e:
        raise GitUnavailable(f"git {args[0]} timed out after {GIT_TIMEOUT}s") from e
    except OSError as e:
        raise GitUnavailable(f"git {args[0]} failed: {e}") from e

    if proc.returncode != 0:
        raise GitUnavailable(
            f"git {args[0]} exited {proc.returncode}: {proc.stderr.strip()}"
        )
    return proc.stdout


def parse_git_version(output: str) -> Optional[tuple[int, int]]:
    """(major, minor) out of ``git --version`` output."""
    match = re.search(r"(\d+)\.(\d+)", output)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


@lru_cache(maxsize=None)
def git_supports_porcelain_v2() -> bool:
    """Whether the installed git speaks porcelain v2. Checked once per process.

    Only the ``config`` report asks; rendering keeps to two git calls.
    """
    try:
        version = parse_git_version(_run_git(["--version"]))
    except GitUnavailable as e:
        _log.debug("git version check failed: %s", e)
        return False
    ok = version is not None and version >= MIN_GIT_VERSION
    _log.debug("git version %s supported=%s", version, ok)
    return ok


def parse_porcelain_v2(output: str) -> PorcelainSummary:
    """Summarize ``git status --porcelain=v2 --branch`` output.

    Header lines start with ``#``; every other non-empty line is one path.
    """
    branch = DETACHED_HEAD
    ahead = behind = 0
    file_count = 0

    for line in output.splitlines():
        if line.startswith("# branch.head "):
            head = line[len("# branch.head "):].strip()
            branch = head if head and head != "(detached)" else DETACHED_HEAD
        elif line.startswith("# branch.ab "):
            parts = line[len("# branch.ab "):].split()
            for part in parts:
                if part.startswith("+") and part[1:].isdigit():
                    ahead = int(part[1:])
                elif part.startswith("-") and part[1:].isdigit():
                    behind = int(part[1:])
        elif line.startswith("#"):
            continue
        elif line.strip():
            file_count += 1

    return PorcelainSummary(branch=branch, ahead=ahead, behind=behind, file_count=file_count)


def parse_numstat(output: str) -> tuple[int, int]:
    """Total (added, removed) across ``git diff --numstat`` lines.

    Binary files report ``-`` and count as zero.
    """
    added = removed = 0
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        if parts[0].isdigit():
            added += int(parts[0])
        if parts[1].isdigit():
            removed += int(parts[1])
    return added, removed


def _line_counts(directory: Optional[str]) -> tuple[int, int]:
    try:
        return parse_numstat(_run_git(["diff", "HEAD", "--numstat"], directory))
    except GitUnavailable as e:
        # No HEAD yet (fresh repo) is the usual cause
        _log.debug("line counts unavailable: %s", e)
        return 0, 0


def inspect_repository(
    directory: Optional[str] = None,
    allow_absolute: bool = False,
    line_counts: bool = False,
) -> GitStatus:
    """Work out the GitStatus of ``directory`` (process cwd when None)."""
    if directory is not None and not validate_directory(directory, allow_absolute):
        _log.debug("rejected directory %r", directory)
        return NotRepo()

    try:
        inside = _run_git(["rev-parse", "--is-inside-work-tree"], directory)
        if inside.strip() != "true":
            raise GitUnavailable("inside .git, not a work tree")
        output = _run_git(
            ["status", "--porcelain=v2", "--branch", "--untracked-files=all"],
            directory,
        )
    except GitUnavailable as e:
        _log.debug("not a repository: %s", e)
        return NotRepo()

    summary = parse_porcelain_v2(output)
    if summary.file_count == 0:
        return Clean(branch=summary.branch, ahead=summary.ahead, behind=summary.behind)

    added = removed = 0
    if line_counts:
        added, removed = _line_counts(directory)

    return Dirty(
        branch=summary.branch,
        file_count=summary.file_count,
        ahead=summary.ahead,
        behind=summary.behind,
        added=added,
        removed=removed,
    )
