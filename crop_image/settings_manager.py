from __future__ import annotations

import json
import os
from typing import Any

from PySide6.QtGui import QColor

from .geometry import DisplayConfig
from .logger import get_logger

_logger = get_logger("settings")


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "asset_name": "m4",
        "background_color": "#1c1c1e",
        "blur_radius": 20.0,
        "screen_width": 390.0,
        "screen_height": 844.0,
        "crop_width": 300.0,
        "crop_height": 225.0,
        "max_scale": 5.0,
        "zoom_damping": 0.5,
        "wheel_zoom_step": 1.25,
        "reclamp_on_zoom_end": False,
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except Exception as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except Exception as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    def _get_float(self, key: str) -> float:
        try:
            return float(self.get(key))
        except (TypeError, ValueError):
            _logger.warning("invalid %s: %r, using default", key, self._settings.get(key))
            return float(self.DEFAULTS[key])

    @property
    def reclamp_on_zoom_end(self) -> bool:
        value = self.get("reclamp_on_zoom_end", False)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    @property
    def wheel_zoom_step(self) -> float:
        return self._get_float("wheel_zoom_step")

    @property
    def blur_radius(self) -> float:
        return self._get_float("blur_radius")

    def display_config(self) -> DisplayConfig:
        """Build the screen/crop geometry passed to the viewport and cropper."""
        return DisplayConfig(
            screen_width=self._get_float("screen_width"),
            screen_height=self._get_float("screen_height"),
            crop_width=self._get_float("crop_width"),
            crop_height=self._get_float("crop_height"),
            max_scale=self._get_float("max_scale"),
            zoom_damping=self._get_float("zoom_damping"),
        )

    def determine_background(self) -> QColor:
        try:
            hexcol = self.get("background_color")
            if isinstance(hexcol, str):
                color = QColor(hexcol)
                if color.isValid():
                    return color
                _logger.warning("saved background_color invalid: %s", hexcol)
        except Exception as e:
            _logger.warning("failed to parse background_color: %s", e)
        return QColor(self.DEFAULTS["background_color"])
