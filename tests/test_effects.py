from __future__ import annotations

import numpy as np
from PySide6.QtCore import QRect
from PySide6.QtGui import QColor, QImage, QPainter

from crop_image.effects import array_to_qimage, blurred_image, qimage_to_array


def make_checker(w: int = 64, h: int = 48) -> QImage:
    img = QImage(w, h, QImage.Format.Format_RGB32)
    img.fill(QColor(0, 0, 0))
    painter = QPainter(img)
    painter.fillRect(QRect(0, 0, w // 2, h), QColor(255, 255, 255))
    painter.end()
    return img


def test_array_round_trip_preserves_pixels() -> None:
    img = make_checker(33, 17)  # odd width exercises row padding
    arr = qimage_to_array(img)
    assert arr.shape == (17, 33, 4)
    assert tuple(arr[0, 0]) == (255, 255, 255, 255)
    assert tuple(arr[16, 32]) == (0, 0, 0, 255)

    back = array_to_qimage(arr)
    assert back.pixelColor(0, 0) == QColor(255, 255, 255)
    assert back.pixelColor(32, 16) == QColor(0, 0, 0)


def test_blur_softens_hard_edge() -> None:
    out = blurred_image(make_checker(), 4.0)
    arr = qimage_to_array(out)
    edge = int(arr[24, 32, 0])
    assert 0 < edge < 255
    # far from the edge the colors survive
    assert arr[24, 2, 0] > 200
    assert arr[24, 61, 0] < 55


def test_blur_downscales_to_requested_size() -> None:
    out = blurred_image(make_checker(), 2.0, (32, 24))
    assert (out.width(), out.height()) == (32, 24)


def test_zero_radius_returns_copy() -> None:
    src = make_checker()
    out = blurred_image(src, 0)
    assert np.array_equal(qimage_to_array(out), qimage_to_array(src))


def test_null_image_stays_null() -> None:
    assert blurred_image(QImage(), 5.0).isNull()
