"""Image effects for the canvas backdrop (numpy + Pillow)."""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageFilter
from PySide6.QtCore import Qt
from PySide6.QtGui import QImage

from .logger import get_logger

_logger = get_logger("effects")

RGBA_CHANNELS = 4


def qimage_to_array(image: QImage) -> np.ndarray:
    """Return an (h, w, 4) uint8 RGBA copy of `image`."""
    img = image.convertToFormat(QImage.Format.Format_RGBA8888)
    w, h = img.width(), img.height()
    buf = np.frombuffer(img.constBits(), dtype=np.uint8, count=img.sizeInBytes())
    rows = buf.reshape(h, img.bytesPerLine())
    return np.array(rows[:, : w * RGBA_CHANNELS].reshape(h, w, RGBA_CHANNELS))


def array_to_qimage(arr: np.ndarray) -> QImage:
    rgba = np.ascontiguousarray(arr, dtype=np.uint8)
    h, w = rgba.shape[:2]
    # QImage does not own the numpy buffer; copy before it goes out of scope
    return QImage(rgba.data, w, h, w * RGBA_CHANNELS, QImage.Format.Format_RGBA8888).copy()


def blurred_image(image: QImage, radius: float, size: tuple[int, int] | None = None) -> QImage:
    """Gaussian-blur `image`, optionally downscaling it to `size` first.

    Blurring at display size keeps large assets cheap; the result is only used
    as an out-of-focus backdrop.
    """
    if image.isNull():
        return QImage()

    src = image
    if size is not None:
        w, h = max(1, int(size[0])), max(1, int(size[1]))
        src = image.scaled(w, h, Qt.AspectRatioMode.IgnoreAspectRatio, Qt.TransformationMode.SmoothTransformation)

    if radius <= 0:
        return src.copy()

    pil = Image.fromarray(qimage_to_array(src))
    out = pil.filter(ImageFilter.GaussianBlur(radius=float(radius)))
    _logger.debug("blurred %dx%d backdrop, radius=%.1f", src.width(), src.height(), radius)
    return array_to_qimage(np.asarray(out))
