"""Persistent JSON config for runtime tuning.

Stores the tick interval, message-bus capacity, input poll interval, and
mouse-reporting preference. All access is defensive: malformed or missing
config falls back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .bus import DEFAULT_CAPACITY
from .merger import DEFAULT_INPUT_POLL_SECONDS, DEFAULT_TICK_INTERVAL

APP_NAME = "tuiloop"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

MIN_TICK_INTERVAL = 0.01
MAX_TICK_INTERVAL = 60.0
MAX_MESSAGE_CAPACITY = 100_000


@dataclass(frozen=True)
class RuntimeConfig:
    """Tunables for one ``Application``.

    ``tick_interval_seconds`` of ``None`` disables the tick producer.
    """

    tick_interval_seconds: float | None = DEFAULT_TICK_INTERVAL
    message_capacity: int = DEFAULT_CAPACITY
    input_poll_seconds: float = DEFAULT_INPUT_POLL_SECONDS
    mouse_reporting: bool = True


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored so a read-only config dir never stops the UI.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def _number(value: object) -> float | None:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _load_tick_interval(data: dict[str, object]) -> float | None:
    if "tick_interval_seconds" in data and data["tick_interval_seconds"] is None:
        return None
    value = _number(data.get("tick_interval_seconds"))
    if value is None or not (MIN_TICK_INTERVAL <= value <= MAX_TICK_INTERVAL):
        return DEFAULT_TICK_INTERVAL
    return value


def _load_capacity(data: dict[str, object]) -> int:
    value = data.get("message_capacity")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_CAPACITY
    if not (1 <= value <= MAX_MESSAGE_CAPACITY):
        return DEFAULT_CAPACITY
    return value


def _load_poll_seconds(data: dict[str, object]) -> float:
    value = _number(data.get("input_poll_seconds"))
    if value is None or not (0.0 < value <= 1.0):
        return DEFAULT_INPUT_POLL_SECONDS
    return value


def load_runtime_config() -> RuntimeConfig:
    """Build a ``RuntimeConfig`` from disk, sanitizing each field independently."""
    data = load_config()
    mouse = data.get("mouse_reporting")
    return RuntimeConfig(
        tick_interval_seconds=_load_tick_interval(data),
        message_capacity=_load_capacity(data),
        input_poll_seconds=_load_poll_seconds(data),
        mouse_reporting=mouse if isinstance(mouse, bool) else True,
    )


def save_runtime_config(runtime_config: RuntimeConfig) -> None:
    """Merge ``runtime_config`` into the persisted config object."""
    config = load_config()
    config.update(asdict(runtime_config))
    save_config(config)


__all__ = [
    "CONFIG_PATH",
    "RuntimeConfig",
    "load_config",
    "load_runtime_config",
    "save_config",
    "save_runtime_config",
]
