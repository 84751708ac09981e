from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, Optional

from .models import WindowConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppSettings:
    channel_count: int = 3
    sampling_rate: int = 256
    window_duration_sec: int = 5
    view_count: int = 3
    view_width: int = 600
    view_height: int = 120
    signal_frequency_hz: float = 1.0
    signal_amplitude: float = 0.5
    stroke_width: float = 2.0
    use_plot_view: bool = False
    start_paused: bool = False

    def window_config(self) -> WindowConfig:
        return WindowConfig(
            channel_count=self.channel_count,
            sampling_rate=self.sampling_rate,
            window_duration_sec=self.window_duration_sec,
        )


_INT_FIELDS = {"channel_count", "sampling_rate", "window_duration_sec", "view_count", "view_width", "view_height"}
_FLOAT_FIELDS = {"signal_frequency_hz", "signal_amplitude", "stroke_width"}
_BOOL_FIELDS = {"use_plot_view", "start_paused"}


class SettingsPersistence:
    """Storage backend for AppSettingsStore. Values round-trip as plain dicts."""

    def load(self) -> Dict[str, Any]:
        raise NotImplementedError

    def save(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError


class InMemoryPersistence(SettingsPersistence):
    """Process-local persistence used headless and in tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def load(self) -> Dict[str, Any]:
        return dict(self._data)

    def save(self, data: Dict[str, Any]) -> None:
        self._data.update(data)


_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _coerce(name: str, raw: Any, default: Any) -> Any:
    # Backends may hand values back as strings ("4", "true", "0.5").
    try:
        if name in _BOOL_FIELDS:
            if isinstance(raw, str):
                text = raw.strip().lower()
                if text in _TRUE_STRINGS:
                    return True
                if text in _FALSE_STRINGS:
                    return False
                raise ValueError(raw)
            return bool(raw)
        if name in _INT_FIELDS:
            value = int(raw)
            return value if value > 0 else default
        if name in _FLOAT_FIELDS:
            return float(raw)
    except (TypeError, ValueError):
        logger.debug("Ignoring stored value for %s: %r", name, raw)
        return default
    return raw


SettingsCallback = Callable[[AppSettings], None]


class AppSettingsStore:
    """
    Thread-safe holder of the current AppSettings.

    `update()` writes only the fields that actually changed to the backend and
    notifies subscribers only when something changed.
    """

    def __init__(self, *, persistence: Optional[SettingsPersistence] = None) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[int, SettingsCallback] = {}
        self._next_token = 0
        self._persistence = persistence if persistence is not None else InMemoryPersistence()
        self._settings = self._load_settings()

    def _load_settings(self) -> AppSettings:
        stored = self._persistence.load()
        defaults = AppSettings()
        values = {
            f.name: _coerce(f.name, stored[f.name], getattr(defaults, f.name))
            for f in fields(AppSettings)
            if f.name in stored
        }
        return replace(defaults, **values)

    def get(self) -> AppSettings:
        with self._lock:
            return self._settings

    def update(self, **changes: Any) -> AppSettings:
        with self._lock:
            current = self._settings
            updated = replace(current, **changes)
            dirty = {
                name: getattr(updated, name)
                for name in changes
                if getattr(updated, name) != getattr(current, name)
            }
            if not dirty:
                return current
            self._settings = updated
            self._persistence.save(dirty)
            callbacks = list(self._subscribers.values())
        logger.debug("Settings changed: %s", sorted(dirty))
        for callback in callbacks:
            try:
                callback(updated)
            except Exception as exc:
                logger.warning("Settings subscriber failed: %s", exc)
        return updated

    def subscribe(self, callback: SettingsCallback, *, replay: bool = True) -> Callable[[], None]:
        """Register `callback`; returns a function that removes it again."""
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback
            current = self._settings
        if replay:
            callback(current)

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe


__all__ = ["AppSettings", "AppSettingsStore", "InMemoryPersistence", "SettingsPersistence"]
