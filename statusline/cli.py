"""statusline CLI - render one status line from the JSON piped on stdin."""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .assembler import render_status_line
from .config import ConfigManager
from .git import MIN_GIT_VERSION, git_supports_porcelain_v2
from .messages import available_languages
from .reader import parse_status_input, read_input
from .tiers import UsageTier

_log = logging.getLogger(__name__)

# stdout belongs to the status line; everything human-facing goes to stderr
console = Console(stderr=True)


def _configure_logging(debug: bool) -> None:
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        stream=sys.stderr,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def render(manager: ConfigManager) -> str:
    """Read stdin, build the line, return it. InputError/ParseError propagate."""
    raw = read_input()
    status = parse_status_input(raw)
    config = manager.build()
    _log.debug("config: %s (exists=%s)", manager.config_path, manager.exists)
    return render_status_line(status, config)


@click.group(invoke_without_command=True)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False),
    help="Config file (default: $STATUSLINE_CONFIG or ~/.config/statusline/config.yaml)",
)
@click.option(
    "--debug", is_flag=True, envvar="STATUSLINE_DEBUG",
    help="Log config, git calls and parsing details to stderr",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], debug: bool):
    """Render a color-coded status line from the JSON snapshot on stdin.

    Run with no sub-command to render; the host CLI pipes one JSON document
    per invocation.
    """
    _configure_logging(debug)
    ctx.obj = ConfigManager(config_path)
    if ctx.invoked_subcommand is None:
        line = render(ctx.obj)
        click.echo(line)


@cli.command()
@click.pass_obj
def config(manager: ConfigManager):
    """Show the effective configuration."""
    settings = manager.build()

    console.print(f"Config file: {manager.config_path}", highlight=False)
    if not manager.exists:
        console.print("  (not found, using defaults)", style="dim")

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="bold")
    table.add_column()
    language = manager.get_messages_file() or manager.get_language()
    table.add_row("messages", f"{settings.show_messages} ({language})")
    table.add_row("cost", str(settings.show_cost))
    table.add_row("line counts", str(settings.show_line_counts))
    table.add_row("files style", settings.files_style)
    table.add_row("bar width", str(settings.bar_width))
    table.add_row("absolute paths", "accept" if settings.allow_absolute_paths else "reject")
    table.add_row("languages", ", ".join(available_languages()))
    git_ok = git_supports_porcelain_v2()
    minimum = ".".join(str(n) for n in MIN_GIT_VERSION)
    table.add_row("git", "ok" if git_ok else f"missing or older than {minimum}")
    console.print(table)


@cli.command()
@click.argument(
    "tier", required=False,
    type=click.Choice([t.value for t in UsageTier]),
)
@click.pass_obj
def messages(manager: ConfigManager, tier: Optional[str]):
    """List the active context messages, for all tiers or one."""
    pools = manager.get_message_pools()
    tiers = [UsageTier(tier)] if tier else list(UsageTier)
    for t in tiers:
        console.print(f"[bold]{t.value}[/bold]")
        for message in pools.for_tier(t):
            console.print(f"  {message}", highlight=False, markup=False)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
