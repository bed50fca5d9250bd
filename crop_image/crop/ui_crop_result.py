"""Result sheet shown after confirming a crop."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QSizePolicy, QVBoxLayout, QWidget

from crop_image.logger import get_logger

_logger = get_logger("ui_crop_result")

NO_IMAGE_TEXT = "No cropped image"


class CropResultDialog(QDialog):
    """Modal sheet displaying the cropped bitmap, or a placeholder when there is none."""

    def __init__(self, parent: QWidget | None, cropped: QImage | None, display_size: tuple[float, float]):
        super().__init__(parent)
        self.setWindowTitle("Cropped Image")
        self.setModal(True)

        self._cropped = cropped if cropped is not None and not cropped.isNull() else None
        self._display_w = max(1, round(display_size[0]))
        self._display_h = max(1, round(display_size[1]))

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.image_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        layout.addWidget(self.image_label, stretch=1)

        self.info_label = QLabel()
        self.info_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.info_label)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        close_btn = QPushButton("Done")
        close_btn.clicked.connect(self.accept)
        button_layout.addWidget(close_btn)
        layout.addLayout(button_layout)

        self._populate()

    def _populate(self) -> None:
        if self._cropped is None:
            _logger.warning("No cropped image to show")
            self.image_label.setText(NO_IMAGE_TEXT)
            self.info_label.setText("")
            return

        # Native pixels are shown at the crop window's logical size.
        pix = QPixmap.fromImage(self._cropped).scaled(
            self._display_w,
            self._display_h,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.image_label.setPixmap(pix)
        self.info_label.setText(f"{self._cropped.width()} × {self._cropped.height()} px")
        _logger.debug("showing crop %dx%d", self._cropped.width(), self._cropped.height())

    @property
    def cropped(self) -> QImage | None:
        return self._cropped

    def has_image(self) -> bool:
        return self._cropped is not None
