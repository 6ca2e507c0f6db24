"""Bundled context-message packs, one YAML file per language.

Each pack maps the five tier names (very_low, low, medium, high, critical)
to a list of short strings. Custom packs use the same shape; JSON files
load too since yaml.safe_load reads JSON.
"""

import logging
from pathlib import Path
from typing import Any, Union

import yaml

from ..tiers import MessagePools, UsageTier

_log = logging.getLogger(__name__)

PACK_DIR = Path(__file__).parent
DEFAULT_LANGUAGE = "en"


def available_languages() -> list[str]:
    """Language codes with a bundled pack, sorted."""
    return sorted(p.stem for p in PACK_DIR.glob("*.yaml"))


def pools_from_dict(data: Any) -> MessagePools:
    """Build MessagePools from a parsed pack, skipping anything that is not a string."""
    if not isinstance(data, dict):
        raise ValueError("message pack must be a mapping of tier name to list")

    pools = {}
    for tier in UsageTier:
        raw = data.get(tier.value) or []
        if not isinstance(raw, list):
            raise ValueError(f"tier '{tier.value}' must be a list of strings")
        pools[tier.value] = tuple(m for m in raw if isinstance(m, str) and m)
    return MessagePools(**pools)


def load_messages_file(path: Union[str, Path]) -> MessagePools:
    """Load a custom pack from a YAML or JSON file.

    Raises OSError if unreadable, ValueError if malformed.
    """
    path = Path(path).expanduser()
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"invalid message pack {path}: {e}") from e
    return pools_from_dict(data)


def load_language(language: str = DEFAULT_LANGUAGE) -> MessagePools:
    """Load a bundled pack, falling back to English for unknown codes."""
    if language not in available_languages():
        _log.warning("unknown language %r, using %r", language, DEFAULT_LANGUAGE)
        language = DEFAULT_LANGUAGE
    return load_messages_file(PACK_DIR / f"{language}.yaml")
