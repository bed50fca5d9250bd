"""Geometry value types and helpers for the crop viewport.

Pure Python, no Qt dependencies. All sizes are logical (display) units unless
a name says otherwise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SizeF:
    width: float
    height: float

    def scaled(self, factor: float) -> SizeF:
        return SizeF(self.width * factor, self.height * factor)


@dataclass(frozen=True, slots=True)
class OffsetF:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: OffsetF) -> OffsetF:
        return OffsetF(self.x + other.x, self.y + other.y)


ZERO_OFFSET = OffsetF(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class RectF:
    """Rect in (x, y, width, height) form."""

    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    def scaled(self, factor: float) -> RectF:
        """Scale origin and size by the same factor."""
        return RectF(self.x * factor, self.y * factor, self.width * factor, self.height * factor)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True, slots=True)
class DisplayGeometry:
    """Size at which the image is drawn on screen (before pan/zoom)."""

    displayed_width: float
    displayed_height: float

    @property
    def size(self) -> SizeF:
        return SizeF(self.displayed_width, self.displayed_height)


@dataclass(frozen=True, slots=True)
class DisplayConfig:
    """Screen and crop-window geometry supplied once at startup.

    screen_* is the logical screen (window) size the image is fitted to;
    crop_* is the fixed crop window. max_scale bounds zoom, zoom_damping
    softens pinch magnification.
    """

    screen_width: float = 390.0
    screen_height: float = 844.0
    crop_width: float = 300.0
    crop_height: float = 225.0
    max_scale: float = 5.0
    zoom_damping: float = 0.5

    def __post_init__(self) -> None:
        for name in ("screen_width", "screen_height", "crop_width", "crop_height", "max_scale"):
            value = float(getattr(self, name))
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be positive and finite, got {getattr(self, name)!r}")
        if not math.isfinite(float(self.zoom_damping)) or self.zoom_damping < 0:
            raise ValueError(f"zoom_damping must be finite and not negative, got {self.zoom_damping!r}")

    @property
    def crop_size(self) -> SizeF:
        return SizeF(self.crop_width, self.crop_height)

    @property
    def screen_size(self) -> SizeF:
        return SizeF(self.screen_width, self.screen_height)


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def compute_display_geometry(native_width: float, native_height: float, screen_width: float) -> DisplayGeometry:
    """Fit the image to the screen width, keeping its aspect ratio."""
    if native_width <= 0 or native_height <= 0:
        raise ValueError(f"Image size must be positive, got {native_width}x{native_height}")
    factor = float(screen_width) / float(native_width)
    return DisplayGeometry(float(native_width) * factor, float(native_height) * factor)


def min_scale(display: DisplayGeometry, config: DisplayConfig) -> float:
    """Smallest zoom that keeps the crop window no wider than the image."""
    return float(config.crop_width) / float(display.displayed_width)


def offset_limit(display: DisplayGeometry, config: DisplayConfig, scale: float) -> SizeF:
    """Maximum pan per axis that keeps the crop window inside the scaled image.

    An axis where the scaled image is smaller than the crop window gets a
    limit of zero, pinning the image centered on that axis.
    """
    lw = (display.displayed_width * scale - config.crop_width) / 2
    lh = (display.displayed_height * scale - config.crop_height) / 2
    return SizeF(max(0.0, lw), max(0.0, lh))


def clamp_offset(candidate: OffsetF, limit: SizeF) -> OffsetF:
    return OffsetF(
        clamp(candidate.x, -limit.width, limit.width),
        clamp(candidate.y, -limit.height, limit.height),
    )
