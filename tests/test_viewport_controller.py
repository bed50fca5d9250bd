from __future__ import annotations

import pytest

from crop_image.geometry import DisplayConfig, OffsetF, compute_display_geometry
from crop_image.ops.viewport_controller import ViewportController, ViewportState

MIN_SCALE = 300 / 390


@pytest.fixture
def controller(display_800x600, display_config) -> ViewportController:
    return ViewportController(display_800x600, display_config)


def _zoom_to(ctrl: ViewportController, magnification: float) -> None:
    ctrl.on_zoom_change(magnification)
    ctrl.on_zoom_end()


def test_initial_state_is_centered_at_scale_one(controller: ViewportController) -> None:
    st = controller.state
    assert st.offset == OffsetF(0, 0)
    assert st.scale == 1.0
    assert st.last_scale == 1.0
    assert controller.scale_range() == (pytest.approx(MIN_SCALE), 5.0)


@pytest.mark.parametrize(
    "translation",
    [(0, 0), (10, -10), (100, -100), (-1000, 1000), (44.9, 33.7), (1e9, -1e9)],
)
@pytest.mark.parametrize("magnification", [1.0, 3.0, 0.6, 9.0])
def test_pan_stays_within_offset_limit(controller: ViewportController, translation, magnification) -> None:
    _zoom_to(controller, magnification)
    controller.on_pan_change(OffsetF(*translation))
    controller.on_pan_end()

    lim = controller.offset_limit()
    st = controller.state
    assert abs(st.offset.x) <= lim.width + 1e-9
    assert abs(st.offset.y) <= lim.height + 1e-9


def test_pan_clamps_each_axis_independently(controller: ViewportController) -> None:
    out = controller.on_pan_change(OffsetF(100, 5))
    assert out.x == pytest.approx(45.0)
    assert out.y == pytest.approx(5.0)


def test_pan_change_is_relative_to_last_committed_offset(controller: ViewportController) -> None:
    controller.on_pan_change(OffsetF(10, 5))
    controller.on_pan_change(OffsetF(20, 10))
    assert controller.state.offset == OffsetF(20, 10)
    assert controller.state.last_offset == OffsetF(0, 0)

    controller.on_pan_end()
    controller.on_pan_change(OffsetF(5, 5))
    assert controller.state.offset == OffsetF(25, 15)


def test_pan_end_is_idempotent(controller: ViewportController) -> None:
    controller.on_pan_change(OffsetF(12, -7))
    controller.on_pan_end()
    first = controller.state
    controller.on_pan_end()
    assert controller.state == first


@pytest.mark.parametrize("magnification", [-5.0, -0.4, 0.0, 0.5, 1.0, 1.7, 3.0, 9.0, 100.0])
def test_zoom_stays_within_scale_range(controller: ViewportController, magnification: float) -> None:
    scale = controller.on_zoom_change(magnification)
    assert MIN_SCALE - 1e-9 <= scale <= 5.0


def test_zoom_is_damped_and_relative_to_last_scale(controller: ViewportController) -> None:
    assert controller.on_zoom_change(3.0) == pytest.approx(2.0)
    # Live changes do not compound until the gesture ends
    assert controller.on_zoom_change(3.0) == pytest.approx(2.0)
    controller.on_zoom_end()
    assert controller.state.last_scale == pytest.approx(2.0)
    assert controller.on_zoom_change(1.5) == pytest.approx(2.5)


def test_zoom_below_minimum_clamps_to_minimum(controller: ViewportController) -> None:
    # (m - 1) * 0.5 + 1 == 0.3  ->  m == -0.4
    assert controller.on_zoom_change(-0.4) == pytest.approx(MIN_SCALE)
    assert controller.state.scale != pytest.approx(0.3)


def test_zoom_above_maximum_clamps_to_max(controller: ViewportController) -> None:
    assert controller.on_zoom_change(20.0) == 5.0


def test_scale_two_offset_fifty_is_not_clamped(controller: ViewportController) -> None:
    _zoom_to(controller, 3.0)
    assert controller.state.scale == pytest.approx(2.0)
    assert controller.offset_limit().width == pytest.approx(240.0)

    controller.on_pan_change(OffsetF(50, 0))
    controller.on_pan_end()
    assert controller.state.offset == OffsetF(50, 0)


def test_zoom_change_does_not_touch_offset_or_committed_scale(controller: ViewportController) -> None:
    controller.on_pan_change(OffsetF(20, 0))
    controller.on_zoom_change(3.0)
    st = controller.state
    assert st.offset == OffsetF(20, 0)
    assert st.last_offset == OffsetF(0, 0)
    assert st.last_scale == 1.0


def test_zoom_end_commits_live_offset(controller: ViewportController) -> None:
    controller.on_pan_change(OffsetF(20, 10))
    controller.on_zoom_change(2.0)
    controller.on_zoom_end()
    assert controller.state.last_offset == OffsetF(20, 10)
    assert controller.state.last_scale == pytest.approx(1.5)


def test_zoom_end_does_not_reclamp_until_next_pan(controller: ViewportController) -> None:
    _zoom_to(controller, 3.0)  # scale 2
    controller.on_pan_change(OffsetF(200, 0))
    controller.on_pan_end()

    _zoom_to(controller, 0.5)  # scale 1.5 -> limit (585 - 300) / 2
    assert controller.state.offset.x == pytest.approx(200.0)

    controller.on_pan_change(OffsetF(0, 0))
    assert controller.state.offset.x == pytest.approx(142.5)


def test_zoom_end_reclamps_when_enabled(display_800x600, display_config) -> None:
    ctrl = ViewportController(display_800x600, display_config, reclamp_on_zoom_end=True)
    _zoom_to(ctrl, 3.0)
    ctrl.on_pan_change(OffsetF(200, 0))
    ctrl.on_pan_end()

    _zoom_to(ctrl, 0.5)
    assert ctrl.state.offset.x == pytest.approx(142.5)
    assert ctrl.state.last_offset.x == pytest.approx(142.5)


def test_listener_receives_whole_snapshots(display_800x600, display_config) -> None:
    seen: list[ViewportState] = []
    ctrl = ViewportController(display_800x600, display_config, on_change=seen.append)

    ctrl.on_pan_change(OffsetF(10, 0))
    ctrl.on_zoom_change(3.0)
    ctrl.on_zoom_end()

    assert [s.offset for s in seen] == [OffsetF(10, 0)] * 3
    assert seen[1].scale == pytest.approx(2.0)
    assert seen[2].last_scale == pytest.approx(2.0)
    assert all(isinstance(s, ViewportState) for s in seen)


def test_listener_not_called_without_change(display_800x600, display_config) -> None:
    seen: list[ViewportState] = []
    ctrl = ViewportController(display_800x600, display_config, on_change=seen.append)
    ctrl.on_pan_end()
    ctrl.on_pan_change(OffsetF(0, 0))
    assert seen == []


def test_reset_restores_initial_state(controller: ViewportController) -> None:
    _zoom_to(controller, 3.0)
    controller.on_pan_change(OffsetF(50, 20))
    controller.on_pan_end()

    controller.reset()
    assert controller.state == ViewportState()


def test_initial_scale_raised_to_minimum_for_narrow_screens() -> None:
    cfg = DisplayConfig(screen_width=200, screen_height=400, crop_width=300, crop_height=225)
    display = compute_display_geometry(800, 600, cfg.screen_width)
    ctrl = ViewportController(display, cfg)
    assert ctrl.state.scale == pytest.approx(1.5)
    assert ctrl.state.last_scale == pytest.approx(1.5)


def test_unreachable_minimum_scale_is_rejected() -> None:
    cfg = DisplayConfig(screen_width=50, screen_height=400, crop_width=300, crop_height=225, max_scale=5.0)
    display = compute_display_geometry(800, 600, cfg.screen_width)
    with pytest.raises(ValueError):
        ViewportController(display, cfg)
