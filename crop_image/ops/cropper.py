from __future__ import annotations

import math

from crop_image.geometry import DisplayConfig, DisplayGeometry, OffsetF, RectF


def display_crop_rect(display: DisplayGeometry, config: DisplayConfig, offset: OffsetF, scale: float) -> RectF:
    """Return the part of the unzoomed displayed image visible inside the crop window."""
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale!r}")
    w = config.crop_width / scale
    h = config.crop_height / scale
    return RectF(
        (display.displayed_width - w) / 2 - offset.x / scale,
        (display.displayed_height - h) / 2 - offset.y / scale,
        w,
        h,
    )


def image_scale(native_width: float, native_height: float, config: DisplayConfig) -> float:
    """Ratio between native pixels and logical screen units."""
    return max(native_width / config.screen_width, native_height / config.screen_height)


def native_crop_rect(
    display: DisplayGeometry,
    config: DisplayConfig,
    offset: OffsetF,
    scale: float,
    native_size: tuple[int, int],
) -> RectF:
    """Map the crop window into native pixel coordinates of the source image."""
    nw, nh = native_size
    return display_crop_rect(display, config, offset, scale).scaled(image_scale(nw, nh, config))


def to_pixel_rect(rect: RectF, img_width: int, img_height: int) -> tuple[int, int, int, int] | None:
    """Snap `rect` outward to whole pixels and intersect it with the image.

    Returns (left, top, width, height), or None when nothing of the image is
    covered.
    """
    if rect.is_empty() or not all(math.isfinite(v) for v in (rect.x, rect.y, rect.width, rect.height)):
        return None
    left = max(0, math.floor(rect.x))
    top = max(0, math.floor(rect.y))
    right = min(int(img_width), math.ceil(rect.x2))
    bottom = min(int(img_height), math.ceil(rect.y2))
    if right <= left or bottom <= top:
        return None
    return (left, top, right - left, bottom - top)

