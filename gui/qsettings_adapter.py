"""Persist AppSettings through QSettings.

Keys live under a ``display/`` group. Reads are typed against the field's
default so that INI and registry backends, which store everything as text,
hand back ints, floats and bools instead of strings.
"""
from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Dict, Optional

from PySide6.QtCore import QSettings

from shared.app_settings import AppSettings, AppSettingsStore, SettingsPersistence

logger = logging.getLogger(__name__)

SETTINGS_GROUP = "display"


class QSettingsPersistence(SettingsPersistence):
    def __init__(
        self,
        organization: str = "TraceWindow",
        application: str = "TraceWindow",
        *,
        qsettings: Optional[QSettings] = None,
    ) -> None:
        self._qsettings = qsettings if qsettings is not None else QSettings(organization, application)
        defaults = AppSettings()
        self._defaults: Dict[str, Any] = {f.name: getattr(defaults, f.name) for f in fields(AppSettings)}

    @property
    def qsettings(self) -> QSettings:
        return self._qsettings

    def load(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        self._qsettings.beginGroup(SETTINGS_GROUP)
        try:
            stored = set(self._qsettings.childKeys())
            for name, default in self._defaults.items():
                if name not in stored:
                    continue
                try:
                    data[name] = self._qsettings.value(name, default, type=type(default))
                except (TypeError, ValueError) as exc:
                    logger.debug("Unreadable setting %s: %s", name, exc)
        finally:
            self._qsettings.endGroup()
        return data

    def save(self, data: Dict[str, Any]) -> None:
        self._qsettings.beginGroup(SETTINGS_GROUP)
        try:
            for name, value in data.items():
                if name not in self._defaults:
                    logger.debug("Not persisting unknown setting %s", name)
                    continue
                if value is None:
                    self._qsettings.remove(name)
                else:
                    self._qsettings.setValue(name, value)
        finally:
            self._qsettings.endGroup()
        self._qsettings.sync()


def create_gui_settings_store() -> AppSettingsStore:
    return AppSettingsStore(persistence=QSettingsPersistence())


__all__ = ["QSettingsPersistence", "SETTINGS_GROUP", "create_gui_settings_store"]
