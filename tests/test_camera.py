import math

import numpy as np
import pytest

from meshray.camera import (
    AzElCamera,
    UpDirection,
    az_el_rotation,
    az_el_translation,
)

UP_AXES = {
    UpDirection.X: np.array([1.0, 0.0, 0.0]),
    UpDirection.Y: np.array([0.0, 1.0, 0.0]),
    UpDirection.Z: np.array([0.0, 0.0, 1.0]),
}


@pytest.mark.parametrize("up", list(UpDirection))
@pytest.mark.parametrize("az,el", [(0.0, 0.0), (0.7, -0.3), (-2.0, 1.2)])
def test_rotation_is_proper_orthonormal(up, az, el):
    r = az_el_rotation(az, el, up)
    np.testing.assert_allclose(r @ r.T, np.eye(3), atol=1e-12)
    assert np.linalg.det(r) == pytest.approx(1.0)


@pytest.mark.parametrize("up", list(UpDirection))
@pytest.mark.parametrize("az", [0.0, 1.0, -2.5])
def test_full_elevation_places_camera_above_focus(up, az):
    focus = np.array([1.0, 2.0, 3.0])
    r = az_el_rotation(az, math.pi / 2, up)
    pos = az_el_translation(focus, r, 4.0)
    np.testing.assert_allclose(pos, focus + 4.0 * UP_AXES[up], atol=1e-12)


@pytest.mark.parametrize("up", list(UpDirection))
def test_translation_distance_equals_radius(up):
    cam = AzElCamera(focus=[1.0, -1.0, 0.5], radius=7.0, up_direction=up, azimuth=0.4, elevation=0.2)
    assert np.linalg.norm(cam.translation() - cam.focus) == pytest.approx(7.0)


def test_default_camera():
    cam = AzElCamera()
    assert cam.radius == 10.0
    assert cam.up_direction is UpDirection.Y
    np.testing.assert_array_equal(cam.focus, np.zeros(3))


def test_orbit_changes_azimuth():
    cam = AzElCamera()
    assert cam.orbit([100.0, 0.0], [100.0, 100.0]) is True
    assert cam.azimuth == pytest.approx(-math.pi)
    assert cam.elevation == 0.0


def test_orbit_clamps_elevation():
    cam = AzElCamera()
    cam.orbit([0.0, 10000.0], [100.0, 100.0])
    assert cam.elevation == pytest.approx(math.pi / 2)
    cam.orbit([0.0, -100000.0], [100.0, 100.0])
    assert cam.elevation == pytest.approx(-math.pi / 2)


def test_orbit_without_movement_does_nothing():
    cam = AzElCamera(azimuth=0.3)
    assert cam.orbit([0.0, 0.0], [100.0, 100.0]) is False
    assert cam.azimuth == 0.3


def test_orbit_rejects_empty_window():
    cam = AzElCamera()
    with pytest.raises(ValueError):
        cam.orbit([1.0, 1.0], [0.0, 100.0])


@pytest.mark.parametrize("up", list(UpDirection))
def test_pan_moves_focus_perpendicular_to_view(up):
    cam = AzElCamera(up_direction=up, azimuth=0.5, elevation=0.3)
    before = cam.focus.copy()
    assert cam.pan([10.0, -6.0], [800.0, 600.0], fov=0.8, aspect_ratio=4 / 3) is True
    moved = cam.focus - before
    assert np.linalg.norm(moved) > 0.0
    view_axis = cam.rotation()[:, 2]
    assert moved @ view_axis == pytest.approx(0.0, abs=1e-12)


def test_pan_scales_with_radius():
    near = AzElCamera(radius=1.0)
    far = AzElCamera(radius=3.0)
    near.pan([4.0, 2.0], [100.0, 100.0])
    far.pan([4.0, 2.0], [100.0, 100.0])
    np.testing.assert_allclose(far.focus, 3.0 * near.focus)


def test_pan_without_movement_does_nothing():
    cam = AzElCamera(focus=[1.0, 1.0, 1.0])
    assert cam.pan([0.0, 0.0], [100.0, 100.0]) is False
    np.testing.assert_array_equal(cam.focus, [1.0, 1.0, 1.0])


def test_zoom_in_reduces_radius_and_out_increases():
    cam = AzElCamera(radius=10.0)
    cam.zoom(1.0)
    assert cam.radius < 10.0
    smaller = cam.radius
    cam.zoom(-1.0)
    assert cam.radius > smaller


def test_zoom_never_reaches_zero():
    cam = AzElCamera(radius=1.0)
    cam.zoom(100.0)
    assert cam.radius == 0.05


def test_zoom_zero_scroll_does_nothing():
    cam = AzElCamera(radius=2.0)
    assert cam.zoom(0.0) is False
    assert cam.radius == 2.0