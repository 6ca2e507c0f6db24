"""Read the status JSON from stdin and pull out the handful of fields we render."""

import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from .errors import InputError, ParseError

_log = logging.getLogger(__name__)

DEFAULT_CONTEXT_WINDOW = 200_000

USAGE_FIELDS = (
    "input_tokens",
    "cache_creation_input_tokens",
    "cache_read_input_tokens",
)


@dataclass(frozen=True)
class StatusInput:
    """The fields of one status snapshot, defaults already applied."""

    model_name: str = ""
    current_dir: Optional[str] = None
    context_window_size: int = DEFAULT_CONTEXT_WINDOW
    current_usage_tokens: int = 0
    cost_usd: str = "0"


def read_input(stream: Optional[TextIO] = None) -> str:
    """Read all of stdin. Raises InputError on a terminal or on empty input."""
    stream = stream if stream is not None else sys.stdin
    if stream is None:
        raise InputError("No input: stdin is closed")
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        raise InputError("No input: stdin is a terminal, expected piped JSON")
    data = stream.read()
    if not data:
        raise InputError("No input: stdin was empty")
    return data


def _dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing or not a dict."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _text(value: str) -> str:
    """Drop lone surrogates, which JSON allows but stdout cannot encode."""
    return value.encode("utf-8", "replace").decode("utf-8")


def _as_int(value: Any, default: int) -> int:
    """Integer view of a JSON value, or default when it is not a whole number."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return default


def _as_cost(value: Any) -> str:
    """Cost as text. Numbers are rendered plainly; strings are only stripped."""
    if value is None or isinstance(value, bool):
        return "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:.6f}"
    if isinstance(value, str):
        return _text(value.strip())
    return "0"


def parse_status_input(text: str) -> StatusInput:
    """Parse raw JSON into a StatusInput. Raises ParseError on malformed input."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ParseError(f"Failed to parse JSON input: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("Failed to parse JSON input: expected an object")

    model = _dig(data, "model", "display_name")
    current_dir = _dig(data, "workspace", "current_dir")

    usage = 0
    for name in USAGE_FIELDS:
        usage += max(0, _as_int(_dig(data, "context_window", "current_usage", name), 0))

    status = StatusInput(
        model_name="" if model is None else _text(str(model)),
        current_dir=_text(current_dir) if isinstance(current_dir, str) and current_dir else None,
        context_window_size=_as_int(
            _dig(data, "context_window", "context_window_size"), DEFAULT_CONTEXT_WINDOW,
        ),
        current_usage_tokens=usage,
        cost_usd=_as_cost(_dig(data, "cost", "total_cost_usd")),
    )
    _log.debug("parsed input: %s", status)
    return status
