"""Configuration management for the statusline renderer.

The renderer runs once per prompt, so the config file is only ever read:
a missing file means defaults, never a freshly written one.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any

import yaml

from .messages import DEFAULT_LANGUAGE, load_language, load_messages_file
from .theme import Theme, build_theme
from .tiers import MessagePools

_log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.config/statusline/config.yaml"
CONFIG_ENV_VAR = "STATUSLINE_CONFIG"

FILES_STYLE_COUNT = "count"
FILES_STYLE_LABEL = "label"

DEFAULT_BAR_WIDTH = 15
MAX_BAR_WIDTH = 100

DEFAULTS: Dict[str, Any] = {
    "features": {
        "show_messages": True,
        "show_cost": True,
        "show_line_counts": False,
    },
    "language": DEFAULT_LANGUAGE,
    "messages_file": "",
    "files_style": FILES_STYLE_COUNT,
    "allow_absolute_paths": False,
    "bar_width": DEFAULT_BAR_WIDTH,
}


@dataclass(frozen=True)
class StatusConfig:
    """Everything the builders read, fixed before the first fragment is built."""

    show_messages: bool = True
    show_cost: bool = True
    show_line_counts: bool = False
    messages: MessagePools = field(default_factory=MessagePools)
    files_style: str = FILES_STYLE_COUNT
    allow_absolute_paths: bool = False
    bar_width: int = DEFAULT_BAR_WIDTH
    theme: Theme = field(default_factory=build_theme)


class ConfigManager:
    """Load statusline settings from YAML."""

    def __init__(self, config_path: Optional[str] = None):
        raw_path = config_path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
        self.config_path = Path(raw_path).expanduser()
        self.data = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file, or nothing if absent."""
        if not self.config_path.exists():
            _log.debug("no config at %s, using defaults", self.config_path)
            return {}
        return self._read_yaml()

    def _read_yaml(self) -> Dict[str, Any]:
        """Read and parse YAML file."""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            _log.warning("error reading config %s: %s", self.config_path, e)
            return {}
        if content is None:
            return {}
        if not isinstance(content, dict):
            _log.warning("config %s is not a mapping, ignoring", self.config_path)
            return {}
        return content

    @property
    def exists(self) -> bool:
        return self.config_path.exists()

    def get_features(self) -> Dict[str, bool]:
        """Feature flags merged over defaults; non-bool values keep the default."""
        features = dict(DEFAULTS["features"])
        config = self.data.get("features") or {}
        if not isinstance(config, dict):
            _log.warning("'features' must be a mapping, ignoring")
            return features
        for name, value in config.items():
            if name not in features:
                _log.warning("unknown feature %r ignored", name)
            elif isinstance(value, bool):
                features[name] = value
            else:
                _log.warning("feature %r must be true/false, got %r", name, value)
        return features

    def get_language(self) -> str:
        language = self.data.get("language", DEFAULTS["language"])
        if not isinstance(language, str) or not language:
            _log.warning("invalid language %r", language)
            return DEFAULTS["language"]
        return language

    def get_messages_file(self) -> str:
        value = self.data.get("messages_file") or ""
        return value if isinstance(value, str) else ""

    def get_files_style(self) -> str:
        style = self.data.get("files_style", DEFAULTS["files_style"])
        if style not in (FILES_STYLE_COUNT, FILES_STYLE_LABEL):
            _log.warning("invalid files_style %r, using %r", style, FILES_STYLE_COUNT)
            return FILES_STYLE_COUNT
        return style

    def get_allow_absolute_paths(self) -> bool:
        value = self.data.get("allow_absolute_paths", DEFAULTS["allow_absolute_paths"])
        if not isinstance(value, bool):
            _log.warning("allow_absolute_paths must be true/false, got %r", value)
            return DEFAULTS["allow_absolute_paths"]
        return value

    def get_bar_width(self) -> int:
        value = self.data.get("bar_width", DEFAULTS["bar_width"])
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_BAR_WIDTH:
            _log.warning("bar_width must be 1..%d, got %r", MAX_BAR_WIDTH, value)
            return DEFAULTS["bar_width"]
        return value

    def get_message_pools(self) -> MessagePools:
        """Custom pack if configured and loadable, else the language pack."""
        messages_file = self.get_messages_file()
        if messages_file:
            try:
                return load_messages_file(messages_file)
            except (OSError, ValueError) as e:
                _log.warning("cannot load messages_file %s: %s", messages_file, e)
        return load_language(self.get_language())

    def build(self) -> StatusConfig:
        """Resolve every setting into one immutable StatusConfig."""
        features = self.get_features()
        show_messages = features["show_messages"]
        return StatusConfig(
            show_messages=show_messages,
            show_cost=features["show_cost"],
            show_line_counts=features["show_line_counts"],
            messages=self.get_message_pools() if show_messages else MessagePools(),
            files_style=self.get_files_style(),
            allow_absolute_paths=self.get_allow_absolute_paths(),
            bar_width=self.get_bar_width(),
            theme=build_theme(),
        )
