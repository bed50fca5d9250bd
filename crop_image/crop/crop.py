"""Crop backend: map the viewport into native pixels and cut the bitmap.

Works on in-memory QImage objects only; nothing is read from or written to disk.
"""

from __future__ import annotations

from PySide6.QtCore import QRect
from PySide6.QtGui import QImage

from crop_image.geometry import DisplayConfig, DisplayGeometry, OffsetF
from crop_image.logger import get_logger
from crop_image.ops.cropper import native_crop_rect, to_pixel_rect

_logger = get_logger("crop")


def extract_crop(image: QImage, crop: tuple[int, int, int, int]) -> QImage | None:
    """Copy `crop` (left, top, width, height) out of `image`.

    Callers may pass any pixel rectangle, so it is checked against the image
    here. Returns None instead of raising when it is empty or not fully inside
    the image.
    """
    if image.isNull():
        _logger.warning("extract_crop called with a null image")
        return None
    rect = QRect(*crop)
    if rect.isEmpty() or not image.rect().contains(rect):
        _logger.warning("Crop bounds %s invalid for image size %dx%d", crop, image.width(), image.height())
        return None

    cropped = image.copy(rect)
    if cropped.isNull():
        _logger.warning("QImage.copy returned a null image for %s", crop)
        return None
    return cropped


def render_crop(
    image: QImage,
    display: DisplayGeometry,
    config: DisplayConfig,
    offset: OffsetF,
    scale: float,
) -> QImage | None:
    """Render the crop window contents at the image's native resolution."""
    if image.isNull():
        _logger.warning("render_crop called with a null image")
        return None

    rect = native_crop_rect(display, config, offset, scale, (image.width(), image.height()))
    pixel_rect = to_pixel_rect(rect, image.width(), image.height())
    _logger.debug("crop rect native=%s pixels=%s (offset=%s scale=%.3f)", rect, pixel_rect, offset, scale)
    if pixel_rect is None:
        _logger.warning("Crop rect %s lies outside image %dx%d", rect, image.width(), image.height())
        return None
    return extract_crop(image, pixel_rect)
