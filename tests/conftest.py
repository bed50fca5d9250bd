"""Pytest configuration.

The canvas, main window and result dialog tests use PySide6 widgets, and the
loader needs Qt's image plugins.

During `--collect-only` (and sometimes during collection/filtering), pytest may
import Qt modules before any fixture creates a `QApplication`, which can produce
Qt warnings (and, on some platforms, an abnormal process exit).

We create a single `QApplication` for the entire session as early as possible
and cleanly shut it down at the end.
"""

from __future__ import annotations

import os
from typing import Any

import pytest

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a headless QApplication exists before collecting/running tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    # Import lazily so non-Qt environments can still import this conftest.
    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    global _APP

    app = QApplication.instance()
    if app is None:
        # Keep a strong ref so it isn't GC'd mid-session.
        _APP = QApplication([])
    else:
        _APP = app


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    """Attempt a clean Qt shutdown to avoid lingering threads at interpreter exit."""

    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    app = QApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()


@pytest.fixture
def display_config():
    from crop_image.geometry import DisplayConfig

    return DisplayConfig(screen_width=390.0, screen_height=844.0, crop_width=300.0, crop_height=225.0)


@pytest.fixture
def display_800x600(display_config):
    """Display geometry of an 800x600 image fitted to a 390-wide screen."""
    from crop_image.geometry import compute_display_geometry

    return compute_display_geometry(800, 600, display_config.screen_width)


@pytest.fixture
def settings(tmp_path):
    from crop_image.settings_manager import SettingsManager

    return SettingsManager(str(tmp_path / "settings.json"))
