"""Pan/zoom canvas with a fixed crop window.

Draws a blurred copy of the image as backdrop, the sharp image masked to the
crop window on top, and a thin white outline around the window. Mouse drags
pan; pinch, trackpad zoom and the wheel zoom.
"""

from __future__ import annotations

from PySide6.QtCore import QEvent, QPointF, QRectF, QSize, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget

from .app.state.crop_view_state import CropViewState
from .effects import blurred_image
from .geometry import OffsetF
from .logger import get_logger
from .ops.viewport_controller import ViewportController

_logger = get_logger("ui_canvas")

OUTLINE_WIDTH = 1.0


class CropCanvas(QWidget):
    def __init__(
        self,
        controller: ViewportController,
        state: CropViewState,
        image: QImage,
        parent: QWidget | None = None,
        *,
        background: QColor | None = None,
        blur_radius: float = 20.0,
        wheel_zoom_step: float = 1.25,
    ):
        super().__init__(parent)
        self._controller = controller
        self._state = state
        self._pixmap = QPixmap.fromImage(image)
        self._background = QColor(background) if background is not None else QColor(28, 28, 30)
        self._wheel_zoom_step = float(wheel_zoom_step) if wheel_zoom_step > 1.0 else 1.25

        display = controller.display
        self._backdrop = QPixmap.fromImage(
            blurred_image(image, blur_radius, (round(display.displayed_width), round(display.displayed_height)))
        )

        # Pan state: widget position where the drag started
        self._pan_origin: QPointF | None = None
        # Accumulated magnification of an in-progress trackpad zoom
        self._native_magnification: float | None = None
        # True between the first and last update of a pinch gesture
        self._pinching = False

        self._state.changed.connect(self.update)

        cfg = controller.config
        self.setMinimumSize(round(cfg.crop_width), round(cfg.crop_height))
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMouseTracking(False)
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.grabGesture(Qt.GestureType.PinchGesture)

    # ---- geometry ----
    def crop_window_rect(self) -> QRectF:
        """Crop window in widget coordinates, centered in the widget."""
        cfg = self._controller.config
        c = QRectF(self.rect()).center()
        return QRectF(c.x() - cfg.crop_width / 2, c.y() - cfg.crop_height / 2, cfg.crop_width, cfg.crop_height)

    def image_rect(self) -> QRectF:
        """Where the displayed image lands after pan/zoom, in widget coordinates."""
        display = self._controller.display
        s = self._state.scale
        w = display.displayed_width * s
        h = display.displayed_height * s
        c = QRectF(self.rect()).center()
        cx = c.x() + self._state.offsetX
        cy = c.y() + self._state.offsetY
        return QRectF(cx - w / 2, cy - h / 2, w, h)

    # ---- painting ----
    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            painter.fillRect(self.rect(), self._background)

            target = self.image_rect()
            painter.drawPixmap(target, self._backdrop, QRectF(self._backdrop.rect()))

            window = self.crop_window_rect()
            painter.save()
            painter.setClipRect(window)
            painter.drawPixmap(target, self._pixmap, QRectF(self._pixmap.rect()))
            painter.restore()

            pen = QPen(QColor(Qt.GlobalColor.white))
            pen.setWidthF(OUTLINE_WIDTH)
            painter.setPen(pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(window)
        finally:
            painter.end()

    # ---- pan ----
    def _get_event_position(self, event) -> QPointF | None:
        """Extract widget position from a mouse event."""
        if hasattr(event, "position"):
            return QPointF(event.position())
        if hasattr(event, "pos"):
            return QPointF(event.pos())
        return None

    def is_panning(self) -> bool:
        return self._pan_origin is not None

    def is_zooming(self) -> bool:
        return self._pinching or self._native_magnification is not None

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton or self.is_zooming():
            super().mousePressEvent(event)
            return
        self._pan_origin = self._get_event_position(event)
        self.setCursor(Qt.CursorShape.ClosedHandCursor)
        event.accept()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if self._pan_origin is None:
            super().mouseMoveEvent(event)
            return
        pos = self._get_event_position(event)
        if pos is None:
            return
        delta = pos - self._pan_origin
        self._controller.on_pan_change(OffsetF(delta.x(), delta.y()))
        event.accept()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton or self._pan_origin is None:
            super().mouseReleaseEvent(event)
            return
        self._pan_origin = None
        self._controller.on_pan_end()
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        event.accept()

    # ---- zoom ----
    def wheelEvent(self, event) -> None:  # type: ignore[override]
        """Ctrl+wheel zoom, each event a complete zoom gesture.

        - Ctrl + Scroll up: zoom in by `wheel_zoom_step` per notch (before damping)
        - Ctrl + Scroll down: zoom out by its inverse
        - Partial notches (trackpads, hi-res wheels) zoom proportionally
        - Ignored without Ctrl, and while a drag is in progress
        """
        angle = event.angleDelta().y()
        if angle == 0 or not (event.modifiers() & Qt.KeyboardModifier.ControlModifier):
            event.ignore()
            return
        if self.is_panning() or self.is_zooming():
            event.accept()
            return
        magnification = self._wheel_zoom_step ** (angle / 120.0)
        self._controller.on_zoom_change(magnification)
        self._controller.on_zoom_end()
        event.accept()

    def event(self, event: QEvent) -> bool:  # type: ignore[override]
        et = event.type()
        if et == QEvent.Type.Gesture:
            return self._handle_gesture(event)
        if et == QEvent.Type.NativeGesture:
            return self._handle_native_gesture(event)
        return super().event(event)

    def _handle_gesture(self, event) -> bool:
        pinch = event.gesture(Qt.GestureType.PinchGesture)
        if pinch is None:
            return False
        self.pinch_changed(pinch.totalScaleFactor(), pinch.state())
        event.accept(pinch)
        return True

    def pinch_changed(self, magnification: float, gesture_state: Qt.GestureState) -> None:
        """Feed a pinch update into the controller."""
        _logger.debug("pinch %s: magnification=%.3f", gesture_state, magnification)
        if gesture_state == Qt.GestureState.GestureStarted and self.is_panning():
            return
        if gesture_state != Qt.GestureState.GestureStarted and not self._pinching:
            return
        if gesture_state in (Qt.GestureState.GestureStarted, Qt.GestureState.GestureUpdated):
            self._pinching = True
            self._controller.on_zoom_change(magnification)
        elif gesture_state == Qt.GestureState.GestureFinished:
            self._pinching = False
            self._controller.on_zoom_change(magnification)
            self._controller.on_zoom_end()
        elif gesture_state == Qt.GestureState.GestureCanceled:
            self._pinching = False
            self._controller.on_zoom_end()

    def _handle_native_gesture(self, event) -> bool:
        gt = event.gestureType()
        if gt == Qt.NativeGestureType.BeginNativeGesture:
            if not self.is_panning():
                self._native_magnification = 1.0
        elif gt == Qt.NativeGestureType.ZoomNativeGesture:
            if self._native_magnification is None:
                # No begin event, or the gesture began mid-drag
                if self.is_panning():
                    event.accept()
                    return True
                self._native_magnification = 1.0
            # Trackpad reports incremental deltas; accumulate into a total factor
            self._native_magnification *= 1.0 + event.value()
            self._controller.on_zoom_change(self._native_magnification)
        elif gt == Qt.NativeGestureType.EndNativeGesture:
            if self._native_magnification is not None:
                self._controller.on_zoom_end()
            self._native_magnification = None
        else:
            return super().event(event)
        event.accept()
        return True

    def sizeHint(self) -> QSize:  # type: ignore[override]
        cfg = self._controller.config
        return QSize(round(cfg.screen_width), round(cfg.screen_height))
