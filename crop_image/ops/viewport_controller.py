from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from crop_image.geometry import (
    ZERO_OFFSET,
    DisplayConfig,
    DisplayGeometry,
    OffsetF,
    SizeF,
    clamp,
    clamp_offset,
    min_scale,
    offset_limit,
)
from crop_image.logger import get_logger

_logger = get_logger("viewport")


@dataclass(frozen=True, slots=True)
class ViewportState:
    """Pan/zoom snapshot.

    `offset`/`scale` are live values during a gesture; `last_offset`/`last_scale`
    are the values committed at the end of the previous gesture.
    """

    offset: OffsetF = ZERO_OFFSET
    scale: float = 1.0
    last_offset: OffsetF = ZERO_OFFSET
    last_scale: float = 1.0


class ViewportController:
    """Track pan/zoom in response to gestures and keep the crop window inside the image.

    Each handler replaces the whole `ViewportState` snapshot, so observers never
    see offset and scale from different events.
    """

    def __init__(
        self,
        display: DisplayGeometry,
        config: DisplayConfig,
        *,
        reclamp_on_zoom_end: bool = False,
        on_change: Callable[[ViewportState], None] | None = None,
    ) -> None:
        self._display = display
        self._config = config
        self._min_scale = min_scale(display, config)
        if self._min_scale > config.max_scale:
            raise ValueError(
                f"Crop window {config.crop_width}x{config.crop_height} needs scale {self._min_scale:.3f}, "
                f"above max_scale {config.max_scale}"
            )
        self._reclamp_on_zoom_end = bool(reclamp_on_zoom_end)
        self._on_change = on_change
        self._state = self._initial_state()

    def _initial_state(self) -> ViewportState:
        s = clamp(1.0, self._min_scale, self._config.max_scale)
        return ViewportState(offset=ZERO_OFFSET, scale=s, last_offset=ZERO_OFFSET, last_scale=s)

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def display(self) -> DisplayGeometry:
        return self._display

    @property
    def config(self) -> DisplayConfig:
        return self._config

    def scale_range(self) -> tuple[float, float]:
        return self._min_scale, float(self._config.max_scale)

    def offset_limit(self) -> SizeF:
        return offset_limit(self._display, self._config, self._state.scale)

    def set_listener(self, on_change: Callable[[ViewportState], None] | None) -> None:
        self._on_change = on_change

    def _commit(self, new_state: ViewportState) -> None:
        if new_state == self._state:
            return
        self._state = new_state
        if self._on_change is not None:
            self._on_change(new_state)

    # ---- pan ----
    def on_pan_change(self, translation: OffsetF) -> OffsetF:
        """Move the image by `translation` relative to the last committed offset."""
        st = self._state
        offset = clamp_offset(st.last_offset + translation, self.offset_limit())
        self._commit(replace(st, offset=offset))
        return offset

    def on_pan_end(self) -> None:
        st = self._state
        self._commit(replace(st, last_offset=st.offset))
        _logger.debug("pan end: offset=(%.2f, %.2f)", st.offset.x, st.offset.y)

    # ---- zoom ----
    def on_zoom_change(self, magnification: float) -> float:
        """Zoom relative to the last committed scale.

        Magnification is damped: a pinch of 2.0 zooms by 1.5 with the default
        damping of 0.5.
        """
        st = self._state
        damped = (float(magnification) - 1.0) * self._config.zoom_damping + 1.0
        scale = clamp(damped * st.last_scale, self._min_scale, self._config.max_scale)
        self._commit(replace(st, scale=scale))
        return scale

    def on_zoom_end(self) -> None:
        st = self._state
        offset = st.offset
        if self._reclamp_on_zoom_end:
            offset = clamp_offset(offset, offset_limit(self._display, self._config, st.scale))
        self._commit(replace(st, offset=offset, last_offset=offset, last_scale=st.scale))
        _logger.debug("zoom end: scale=%.3f", st.scale)

    def reset(self) -> None:
        self._commit(self._initial_state())
        _logger.debug("viewport reset")
