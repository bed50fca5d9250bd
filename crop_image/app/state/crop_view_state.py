from __future__ import annotations

from PySide6.QtCore import Property, QObject, Signal

from crop_image.ops.viewport_controller import ViewportState


class CropViewState(QObject):
    """Qt-facing mirror of the viewport controller snapshot.

    Design:
    - The controller is authoritative; this object only republishes its
      snapshots as properties with change signals.
    - `changed` fires once per snapshot, after the per-property signals, so
      a repaint never sees a half-applied update.
    """

    offsetXChanged = Signal(float)
    offsetYChanged = Signal(float)
    scaleChanged = Signal(float)
    changed = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._offset_x = 0.0
        self._offset_y = 0.0
        self._scale = 1.0

    # ---- read-only properties (mutate via apply_snapshot) ----
    def _get_offset_x(self) -> float:
        return float(self._offset_x)

    offsetX = Property(float, _get_offset_x, notify=offsetXChanged)  # type: ignore[arg-type]

    def _get_offset_y(self) -> float:
        return float(self._offset_y)

    offsetY = Property(float, _get_offset_y, notify=offsetYChanged)  # type: ignore[arg-type]

    def _get_scale(self) -> float:
        return float(self._scale)

    scale = Property(float, _get_scale, notify=scaleChanged)  # type: ignore[arg-type]

    def apply_snapshot(self, snapshot: ViewportState) -> None:
        x = float(snapshot.offset.x)
        y = float(snapshot.offset.y)
        s = float(snapshot.scale)
        dirty = False

        if x != self._offset_x:
            self._offset_x = x
            self.offsetXChanged.emit(x)
            dirty = True
        if y != self._offset_y:
            self._offset_y = y
            self.offsetYChanged.emit(y)
            dirty = True
        if s != self._scale:
            self._scale = s
            self.scaleChanged.emit(s)
            dirty = True

        if dirty:
            self.changed.emit()
