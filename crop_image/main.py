import os
import sys
from pathlib import Path

from PySide6.QtGui import QAction, QImage, QKeySequence
from PySide6.QtWidgets import QApplication, QMainWindow, QStyle, QToolBar

from crop_image.app.state.crop_view_state import CropViewState
from crop_image.crop.crop_operations import start_crop_workflow
from crop_image.geometry import compute_display_geometry
from crop_image.loader import AssetMissingError, load_asset, load_image
from crop_image.logger import get_logger, setup_logger
from crop_image.ops.viewport_controller import ViewportController
from crop_image.settings_manager import SettingsManager
from crop_image.ui_canvas import CropCanvas

# --- CLI logging options -----------------------------------------------------
# To prevent Qt from exiting due to unknown options, we preemptively parse
# our own options, reflect them in environment variables (CROP_IMAGE_LOG_LEVEL,
# CROP_IMAGE_LOG_CATS), and remove them from sys.argv.


def _apply_cli_logging_options() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Crop Image", add_help=False)
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    args, remaining = parser.parse_known_args(sys.argv[1:])
    if args.log_level:
        os.environ["CROP_IMAGE_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["CROP_IMAGE_LOG_CATS"] = args.log_cats
    sys.argv[:] = [sys.argv[0], *remaining]


logger = get_logger("main")

EXIT_BAD_CONFIG = 1
EXIT_ASSET_MISSING = 2


def default_settings_path() -> str:
    env = (os.getenv("CROP_IMAGE_SETTINGS") or "").strip()
    if env:
        return env
    return str(Path.home() / ".crop_image" / "settings.json")


class CropWindow(QMainWindow):
    """Single-screen cropper: pan/zoom canvas plus a confirm action."""

    def __init__(self, image: QImage, settings: SettingsManager):
        super().__init__()
        self.setWindowTitle("Crop Image")
        self._image = image
        self._settings = settings

        config = settings.display_config()
        display = compute_display_geometry(image.width(), image.height(), config.screen_width)
        logger.debug(
            "display geometry %.1fx%.1f for image %dx%d",
            display.displayed_width,
            display.displayed_height,
            image.width(),
            image.height(),
        )

        self.viewport_state = CropViewState(self)
        self.controller = ViewportController(
            display,
            config,
            reclamp_on_zoom_end=settings.reclamp_on_zoom_end,
            on_change=self.viewport_state.apply_snapshot,
        )
        self.viewport_state.apply_snapshot(self.controller.state)

        self.canvas = CropCanvas(
            self.controller,
            self.viewport_state,
            image,
            self,
            background=settings.determine_background(),
            blur_radius=settings.blur_radius,
            wheel_zoom_step=settings.wheel_zoom_step,
        )
        self.setCentralWidget(self.canvas)
        self._build_toolbar()
        self.resize(round(config.screen_width), round(config.screen_height))
        self.last_result_dialog = None

    @property
    def image(self) -> QImage:
        return self._image

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Crop", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.reset_action = QAction("Reset", self)
        self.reset_action.setToolTip("Reset pan and zoom")
        self.reset_action.setShortcut(QKeySequence("Ctrl+0"))
        self.reset_action.triggered.connect(self.controller.reset)
        toolbar.addAction(self.reset_action)

        icon = self.style().standardIcon(QStyle.StandardPixmap.SP_DialogApplyButton)
        self.confirm_action = QAction(icon, "Crop", self)
        self.confirm_action.setToolTip("Crop to the window")
        self.confirm_action.setShortcuts([QKeySequence("Return"), QKeySequence("Enter")])
        self.confirm_action.triggered.connect(self.confirm_crop)
        toolbar.addAction(self.confirm_action)

    def confirm_crop(self, *, exec_dialog: bool = True):
        self.last_result_dialog = start_crop_workflow(self, exec_dialog=exec_dialog)
        return self.last_result_dialog


def load_startup_image(image_arg: str | None, settings: SettingsManager) -> QImage:
    """Load the image named on the command line, else the bundled asset from settings."""
    if image_arg:
        return load_image(image_arg)
    return load_asset(str(settings.get("asset_name")))


def run(argv: list[str] | None = None) -> int:
    """Application entrypoint (packaging-friendly)."""
    import argparse

    if argv is None:
        _apply_cli_logging_options()
        setup_logger()
        argv = sys.argv

    parser = argparse.ArgumentParser(prog="crop-image", add_help=False)
    parser.add_argument("image", nargs="?", help="Image file to crop (defaults to the bundled asset)")
    parser.add_argument("--settings", help="Path to settings.json")
    args, _ = parser.parse_known_args(argv[1:])

    app = QApplication.instance() or QApplication(argv)
    settings = SettingsManager(args.settings or default_settings_path())

    try:
        image = load_startup_image(args.image, settings)
    except AssetMissingError as e:
        logger.error("cannot start: %s", e)
        return EXIT_ASSET_MISSING

    try:
        window = CropWindow(image, settings)
    except ValueError as e:
        logger.error("invalid crop configuration: %s", e)
        return EXIT_BAD_CONFIG

    window.show()
    logger.info("Ready: %dx%d image", image.width(), image.height())
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
