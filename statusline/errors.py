"""Error taxonomy for the statusline renderer.

InputError and ParseError are fatal: click reports them on stderr and exits
non-zero before anything reaches stdout. GitUnavailable never leaves the
git module; it is downgraded to a NotRepo status there.
"""

import click


USAGE_HINT = (
    "Usage: pipe the status JSON into statusline, "
    "e.g. echo '{\"model\": {\"display_name\": \"Opus\"}}' | statusline"
)


class StatusLineError(click.ClickException):
    """Fatal error that aborts the render with exit code 1."""

    exit_code = 1


class InputError(StatusLineError):
    """No JSON piped in: stdin is a terminal or yielded zero bytes."""

    def __init__(self, message: str):
        super().__init__(f"{message}\n{USAGE_HINT}")


class ParseError(StatusLineError):
    """Stdin did not hold a JSON object."""


class GitUnavailable(Exception):
    """git is missing, too old, failed, or the directory is not a repository."""
