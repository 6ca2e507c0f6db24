"""Tests for fragment assembly and the render pipeline."""

import random
from unittest.mock import patch

from statusline.assembler import StatusFragments, assemble, build_fragments, render_status_line
from statusline.config import StatusConfig
from statusline.git import Clean, Dirty, NotRepo
from statusline.reader import StatusInput
from statusline.theme import DEFAULT_THEME, PALETTE, build_theme
from statusline.tiers import MessagePools

PLAIN = build_theme(color=False)

SNAPSHOT = StatusInput(
    model_name="Opus",
    current_dir="/test/project",
    context_window_size=200000,
    current_usage_tokens=65000,
    cost_usd="0.15",
)


def _config(**overrides):
    settings = {"show_messages": False, "theme": PLAIN}
    settings.update(overrides)
    return StatusConfig(**settings)


class TestAssemble:
    def test_fixed_order(self):
        fragments = StatusFragments(
            model="M", context="C", cost="$", directory="D", git="G", files="F", lines="L",
        )
        assert assemble(fragments, PLAIN) == "D | G | F | L | M | C | $"

    def test_empty_fragments_omitted(self):
        fragments = StatusFragments(directory="D", git="G", model="M", context="C")
        assert assemble(fragments, PLAIN) == "D | G | M | C"

    def test_no_trailing_separator(self):
        fragments = StatusFragments(directory="D", git="G", model="M", context="C", cost="")
        assert not assemble(fragments, PLAIN).rstrip().endswith("|")

    def test_gray_separator_and_reset(self):
        line = assemble(StatusFragments(directory="D", git="G"), DEFAULT_THEME)
        assert line == f"D {PALETTE.gray}|{PALETTE.reset} G{PALETTE.reset}"

    def test_single_line(self):
        line = assemble(StatusFragments(directory="D", model="M"), DEFAULT_THEME)
        assert "\n" not in line


class TestBuildFragments:
    def test_not_repo(self):
        fragments = build_fragments(SNAPSHOT, NotRepo(), _config())
        assert fragments.git == "(not a git repository)"
        assert fragments.files == ""
        assert fragments.directory.endswith("project")

    def test_dirty_surfaces_files(self):
        fragments = build_fragments(SNAPSHOT, Dirty(branch="dev", file_count=3), _config())
        assert fragments.files.endswith("3 files")
        assert "3" not in fragments.git

    def test_line_counts_only_when_enabled(self):
        dirty = Dirty(branch="dev", file_count=1, added=4, removed=2)
        assert build_fragments(SNAPSHOT, dirty, _config()).lines == ""
        assert build_fragments(SNAPSHOT, dirty, _config(show_line_counts=True)).lines.endswith("+4/-2")

    def test_cost_flag(self):
        assert build_fragments(SNAPSHOT, NotRepo(), _config()).cost.endswith("$0.15")
        assert build_fragments(SNAPSHOT, NotRepo(), _config(show_cost=False)).cost == ""


class TestRenderStatusLine:
    def test_end_to_end_plain(self):
        line = render_status_line(SNAPSHOT, _config(), git_status=NotRepo())
        assert line == (
            "\U0001F4C2 project | (not a git repository) | \U0001F680 Opus | "
            "\U0001F525 [████░░░░░░░░░░░] 32% 65K/200K | \U0001F4B5 $0.15"
        )

    def test_clean_repo_layout(self):
        line = render_status_line(SNAPSHOT, _config(show_cost=False), git_status=Clean(branch="main", ahead=1))
        assert line.startswith("\U0001F4C2 project | \U0001F38B main ↑1 | \U0001F680 Opus")

    def test_inspects_git_with_policy(self):
        config = _config(allow_absolute_paths=True, show_line_counts=True)
        with patch("statusline.assembler.inspect_repository", return_value=Clean(branch="main")) as inspect:
            render_status_line(SNAPSHOT, config)
        inspect.assert_called_once_with("/test/project", allow_absolute=True, line_counts=True)

    def test_ends_with_reset(self):
        config = _config(theme=DEFAULT_THEME)
        line = render_status_line(SNAPSHOT, config, git_status=NotRepo())
        assert line.endswith(PALETTE.reset)

    def test_repeatable_apart_from_message(self):
        pools = MessagePools(low=tuple(f"msg{i}" for i in range(30)))
        config = _config(show_messages=True, messages=pools)
        first = render_status_line(SNAPSHOT, config, git_status=NotRepo(), rng=random.Random(1))
        second = render_status_line(SNAPSHOT, config, git_status=NotRepo(), rng=random.Random(2))
        strip = lambda line: line.rsplit(" | ", 2)[0]  # drop message and cost
        assert strip(first) == strip(second)

    def test_identical_without_messages(self):
        config = _config()
        assert render_status_line(SNAPSHOT, config, git_status=NotRepo()) == \
            render_status_line(SNAPSHOT, config, git_status=NotRepo())
