"""Crop workflow operations.

Bridges the main window and the crop backend.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from crop_image.logger import get_logger

from .crop import render_crop
from .ui_crop_result import CropResultDialog

if TYPE_CHECKING:
    from PySide6.QtGui import QImage

    from crop_image.main import CropWindow

_logger = get_logger("crop_operations")


def crop_current(window: CropWindow) -> QImage | None:
    """Render the window's current crop from its committed viewport state."""
    controller = window.controller
    st = controller.state
    return render_crop(window.image, controller.display, controller.config, st.offset, st.scale)


def start_crop_workflow(window: CropWindow, *, exec_dialog: bool = True) -> CropResultDialog:
    """Crop the current viewport and present the result sheet.

    Args:
        window: Main CropWindow instance
        exec_dialog: Run the dialog modally; tests pass False and inspect it
    """
    _logger.debug("Starting crop workflow: state=%s", window.controller.state)
    cropped = crop_current(window)
    if cropped is None:
        _logger.warning("Crop produced no image")
    else:
        _logger.info("Cropped %dx%d from %dx%d", cropped.width(), cropped.height(), window.image.width(), window.image.height())

    cfg = window.controller.config
    dialog = CropResultDialog(window, cropped, (cfg.crop_width, cfg.crop_height))
    if exec_dialog:
        dialog.exec()
        _logger.debug("Crop result dialog closed")
    return dialog
