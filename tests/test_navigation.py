"""
Test suite for the camera navigation state machine.

Tests cover:
- Target selection and snapshots
- Autopilot approach and arrival
- Warp transit
- Orbit and follow tracking
- Free flight thrust, damping and gravity
- Mode guards, cancellation and callbacks
"""

import math
import pytest
import numpy as np
from types import SimpleNamespace
from orrery import (NavigationController, CameraMode, CameraSettings, FlightIntent,
                    CelestialBody, NavigationWarning)
from orrery.navigation import autopilot_speed_factor


def make_target(name='Target', position=(0.0, 0.0, 0.0), radius=1000.0, mass=1e20):
    return CelestialBody(name=name, mass=mass, radius=radius, rotation_period=1.0,
                         position=np.array(position, dtype=float))


@pytest.fixture
def target():
    return make_target()


@pytest.fixture
def modes():
    return []


@pytest.fixture
def nav(target, modes):
    return NavigationController([target], position=(100000.0, 0.0, 0.0),
                                on_mode_change=modes.append,
                                time_source=lambda: 0.0)


class TestTargeting:
    """Test target selection and clearing."""

    def test_set_target(self, nav, target):
        changes = []
        nav.on_target_change = changes.append
        assert nav.set_target(target)
        assert nav.target is target
        assert nav.target_snapshot.name == 'Target'
        assert nav.target_snapshot.radius == 1000.0
        assert changes == [target]

    def test_invalid_position_rejected(self, nav, target):
        nav.set_target(target)
        changes = []
        nav.on_target_change = changes.append
        bad = make_target('Bad', position=(np.nan, 0.0, 0.0))
        with pytest.warns(NavigationWarning, match="invalid position"):
            assert not nav.set_target(bad)
        assert nav.target is target
        assert changes == []

    def test_snapshot_fallbacks(self, nav):
        probe = SimpleNamespace(name='Probe', position=np.zeros(3),
                                radius=0.0, mass=-1.0)
        assert nav.set_target(probe)
        assert nav.target_snapshot.radius == 10000.0
        assert nav.target_snapshot.mass == 1e24

    def test_snapshot_is_a_copy(self, nav, target):
        nav.set_target(target)
        target.position[0] = 5.0
        assert nav.target_snapshot.position[0] == 0.0

    def test_clear_target_leaves_orbit(self, nav, target, modes):
        nav.set_target(target)
        nav.start_orbit()
        nav.clear_target()
        assert nav.target is None
        assert nav.mode is CameraMode.FREE_FLIGHT
        assert modes == [CameraMode.ORBIT, CameraMode.FREE_FLIGHT]

    def test_clear_without_target_is_noop(self, nav):
        changes = []
        nav.on_target_change = changes.append
        nav.clear_target()
        assert changes == []

    def test_proximity_auto_select(self, target):
        nav = NavigationController([target], position=(5000.0, 0.0, 0.0))
        nav.update(1 / 60)
        assert nav.target is target

    def test_no_auto_select_when_far(self, nav):
        nav.update(1 / 60)
        assert nav.target is None


class TestAutopilot:
    """Test the autopilot approach."""

    def test_speed_factor_profile(self):
        assert autopilot_speed_factor(0.0) == pytest.approx(0.1)
        assert autopilot_speed_factor(0.3) == pytest.approx(0.6)
        assert autopilot_speed_factor(0.5) == pytest.approx(0.6)
        assert autopilot_speed_factor(1.0) == pytest.approx(0.1)

    def test_arrives_in_orbit(self, nav, target, modes):
        nav.set_target(target)
        assert nav.start_autopilot()
        assert nav.flight_path is not None
        assert len(nav.flight_path) == 101
        progress = []
        for _ in range(10000):
            nav.update(0.5)
            if nav.mode is not CameraMode.AUTOPILOT:
                break
            progress.append(nav.autopilot_progress)
        assert nav.mode is CameraMode.ORBIT
        assert nav.autopilot.completed
        assert not nav.is_autopilot_active
        assert nav.autopilot_progress == 0.0
        assert np.linalg.norm(nav.position) == pytest.approx(5000.0)
        assert all(b >= a for a, b in zip(progress, progress[1:]))
        assert modes == [CameraMode.AUTOPILOT, CameraMode.ORBIT]

    def test_already_inside_arrival_sphere(self, target):
        nav = NavigationController([target], position=(3000.0, 0.0, 0.0))
        nav.set_target(target)
        nav.start_autopilot()
        nav.update(0.1)
        assert nav.mode is CameraMode.ORBIT

    def test_requires_target(self, nav, modes):
        with pytest.warns(NavigationWarning, match="no target"):
            assert not nav.start_autopilot()
        assert modes == []

    def test_cancel_restores_mode(self, nav, target, modes):
        nav.set_target(target)
        nav.start_autopilot()
        nav.update(0.5)
        nav.cancel_autopilot()
        nav.cancel_autopilot()
        assert nav.mode is CameraMode.FREE_FLIGHT
        assert nav.autopilot_progress == 0.0
        assert nav.flight_path is None
        assert modes == [CameraMode.AUTOPILOT, CameraMode.FREE_FLIGHT]

    def test_retarget_during_autopilot_orbits_arrival_body(self, nav, target):
        nav.set_target(target)
        nav.start_autopilot()
        other = make_target('Other', position=(5.0e8, 0.0, 0.0))
        nav.set_target(other)
        for _ in range(10000):
            nav.update(0.5)
            if nav.mode is not CameraMode.AUTOPILOT:
                break
        assert nav.mode is CameraMode.ORBIT
        assert nav.target is target
        nav.update(1 / 60)
        assert np.linalg.norm(nav.position) == pytest.approx(5000.0)


class TestWarp:
    """Test eased warp transit."""

    def test_warp_arrives(self, nav, target, modes):
        nav.set_target(target)
        assert nav.start_warp()
        assert nav.mode is CameraMode.WARPING
        for _ in range(100):
            nav.update(0.05)
            if nav.mode is not CameraMode.WARPING:
                break
            assert 0.0 <= nav.warp_progress <= 1.0
        assert nav.mode is CameraMode.ORBIT
        assert np.allclose(nav.position, [10000.0, 0.0, 0.0])
        assert not nav.is_warp_active
        assert modes == [CameraMode.WARPING, CameraMode.ORBIT]

    def test_arrival_scales_with_radius(self):
        giant = make_target('Giant', radius=70000.0)
        nav = NavigationController([giant], position=(0.0, 0.0, 1.0e6))
        nav.set_target(giant)
        nav.start_warp()
        assert np.allclose(nav.warp.arrival, [0.0, 0.0, 350000.0])

    def test_degenerate_direction(self, target):
        nav = NavigationController([target], position=(0.0, 0.0, 0.0))
        nav.set_target(target)
        assert nav.start_warp()
        assert np.allclose(nav.warp.arrival, [10000.0, 0.0, 0.0])

    def test_no_warp_during_autopilot(self, nav, target):
        nav.set_target(target)
        nav.start_autopilot()
        with pytest.warns(NavigationWarning, match="autopilot is active"):
            assert not nav.start_warp()
        assert nav.mode is CameraMode.AUTOPILOT

    def test_cancel_warp_restores_orbit(self, nav, target):
        nav.set_target(target)
        nav.start_orbit()
        nav.start_warp()
        nav.update(0.5)
        nav.cancel_warp()
        assert nav.mode is CameraMode.ORBIT
        assert nav.warp_progress == 0.0

    def test_cancel_all(self, nav, target):
        nav.set_target(target)
        nav.start_orbit()
        nav.start_warp()
        nav.cancel_all_automated_movement()
        assert nav.mode is CameraMode.FREE_FLIGHT
        assert not nav.is_warp_active

    def test_cancel_warp_when_inactive(self, nav, target, modes):
        nav.cancel_warp()
        assert nav.mode is CameraMode.FREE_FLIGHT
        assert modes == []
        nav.set_target(target)
        nav.start_orbit()
        modes.clear()
        nav.cancel_warp()
        assert nav.mode is CameraMode.ORBIT
        assert modes == []

    def test_retarget_during_warp_orbits_arrival_body(self, nav, target):
        nav.set_target(target)
        nav.start_warp()
        changes = []
        nav.on_target_change = changes.append
        other = make_target('Other', position=(5.0e8, 0.0, 0.0))
        nav.set_target(other)
        for _ in range(100):
            nav.update(0.05)
            if nav.mode is not CameraMode.WARPING:
                break
        assert nav.mode is CameraMode.ORBIT
        assert nav.target is target
        assert nav.target_snapshot.name == 'Target'
        assert changes == [other, target]
        nav.update(1 / 60)
        assert np.linalg.norm(nav.position) == pytest.approx(10000.0)


class TestTracking:
    """Test orbit and follow modes."""

    def test_orbit_rotates_about_up(self, target):
        nav = NavigationController([target], position=(20000.0, 0.0, 0.0))
        nav.set_target(target)
        nav.start_orbit()
        nav.update(0.5)
        expected = [20000.0 * math.cos(0.1), 0.0, -20000.0 * math.sin(0.1)]
        assert np.allclose(nav.position, expected)
        assert nav.speed == 0.0
        assert np.linalg.norm(nav.position) == pytest.approx(20000.0)

    def test_orbit_tracks_moving_target(self, target):
        nav = NavigationController([target], position=(20000.0, 0.0, 0.0))
        nav.set_target(target)
        nav.start_orbit()
        target.position = np.array([1.0e6, 0.0, 0.0])
        nav.update(0.5)
        assert np.linalg.norm(nav.position - target.position) > 9.0e5

    def test_follow_blends_toward_offset(self, target):
        nav = NavigationController([target], position=(10000.0, 0.0, 0.0),
                                   time_source=lambda: 0.0)
        nav.set_target(target)
        assert nav.start_follow()
        nav.update(1 / 60)
        assert np.allclose(nav.position, [8500.0, 200.0, 0.0])
        assert nav.speed == 0.0

    def test_follow_requires_target(self, nav):
        with pytest.warns(NavigationWarning):
            assert not nav.start_follow()

    def test_orbit_zoom(self, target):
        nav = NavigationController([target], position=(20000.0, 0.0, 0.0))
        nav.set_target(target)
        nav.start_orbit()
        nav.zoom(50)
        assert np.linalg.norm(nav.position) == pytest.approx(20500.0)
        nav.zoom(-1.0e6)
        assert np.linalg.norm(nav.position) == pytest.approx(1000.0)


class TestFreeFlight:
    """Test manual flight dynamics."""

    def test_thrust_without_inertia(self):
        nav = NavigationController(position=(0.0, 0.0, 0.0),
                                   settings=CameraSettings(inertia=False))
        nav.update(0.1, FlightIntent(forward=1.0))
        assert np.allclose(nav.velocity, [0.0, 0.0, -50.0])
        assert np.allclose(nav.position, [0.0, 0.0, -5.0])
        assert nav.speed == pytest.approx(50.0)

    def test_boost(self):
        nav = NavigationController(position=(0.0, 0.0, 0.0),
                                   settings=CameraSettings(inertia=False))
        nav.update(0.1, FlightIntent(forward=1.0, boost=True))
        assert nav.target_speed == pytest.approx(5000.0)

    def test_strafe(self):
        nav = NavigationController(position=(0.0, 0.0, 0.0),
                                   settings=CameraSettings(inertia=False))
        nav.update(0.1, FlightIntent(strafe=1.0))
        assert np.allclose(nav.velocity, [1000.0, 0.0, 0.0])

    def test_coasting_damps_to_zero(self):
        nav = NavigationController(position=(0.0, 0.0, 0.0))
        nav.update(0.1, FlightIntent(forward=1.0))
        assert nav.speed > 0
        for _ in range(500):
            nav.update(0.1)
        assert np.array_equal(nav.velocity, np.zeros(3))
        assert nav.speed == 0.0

    def test_brake(self):
        nav = NavigationController(position=(0.0, 0.0, 0.0))
        nav.update(0.1, FlightIntent(forward=1.0))
        nav.update(0.1, FlightIntent(brake=True))
        assert nav.target_speed == pytest.approx(900.0)

    def test_mouse_look(self):
        nav = NavigationController(position=(0.0, 0.0, 0.0))
        nav.update(0.1, FlightIntent(yaw=100.0, pitch=-100.0))
        yaw, pitch, roll = nav.orientation
        assert yaw == pytest.approx(-0.2)
        assert pitch == pytest.approx(0.2)
        nav.update(0.1, FlightIntent(pitch=-1.0e6))
        assert nav.orientation[1] < math.pi / 2

    def test_gravity_acceleration(self):
        planet = make_target('Planet', mass=1e24)
        nav = NavigationController([planet], position=(1.0e6, 0.0, 0.0))
        accel = nav.gravity_acceleration()
        assert np.allclose(accel, [-0.66743, 0.0, 0.0])

    def test_gravity_ignores_far_and_close_bodies(self):
        far = make_target('Far', position=(2.0e8, 0.0, 0.0), mass=1e30)
        close = make_target('Close', position=(1500.0, 0.0, 0.0), mass=1e30)
        nav = NavigationController([far, close], position=(0.0, 0.0, 0.0))
        assert np.allclose(nav.gravity_acceleration(), 0.0)

    def test_invalid_dt_uses_fallback(self):
        nav = NavigationController(position=(0.0, 0.0, 0.0),
                                   settings=CameraSettings(inertia=False))
        nav.update(5.0, FlightIntent(forward=1.0))
        assert nav.position[2] == pytest.approx(-50.0 / 60.0)

    def test_zoom_adjusts_target_speed(self):
        nav = NavigationController()
        nav.zoom(100)
        assert nav.target_speed == pytest.approx(10.0)
        nav.zoom(-1.0e6)
        assert nav.target_speed == 0.0


class TestControls:
    """Test settings, mode requests and orientation helpers."""

    def test_set_settings(self, nav):
        nav.set_settings(movement_speed=10.0, inertia=False)
        assert nav.settings.movement_speed == 10.0
        assert nav.settings.inertia is False
        with pytest.raises(AttributeError, match="no attribute"):
            nav.set_settings(warp_factor=9)

    def test_set_camera_mode(self, nav, target):
        with pytest.warns(NavigationWarning):
            assert not nav.set_camera_mode('orbit')
        nav.set_target(target)
        assert nav.set_camera_mode('ORBIT')
        assert nav.mode is CameraMode.ORBIT
        assert nav.set_camera_mode(CameraMode.FREE_FLIGHT)
        assert nav.mode is CameraMode.FREE_FLIGHT

    def test_unknown_mode(self, nav):
        with pytest.raises(ValueError, match="Unknown camera mode"):
            nav.set_camera_mode('hover')
        with pytest.raises(TypeError):
            nav.set_camera_mode(3)

    def test_mode_callback_only_on_change(self, nav, target, modes):
        nav.set_target(target)
        nav.start_orbit()
        nav.start_orbit()
        assert modes == [CameraMode.ORBIT]

    def test_look_at(self):
        nav = NavigationController(position=(0.0, 0.0, 0.0))
        nav.look_at([10.0, 0.0, 0.0])
        assert np.allclose(nav.direction, [1.0, 0.0, 0.0])
        nav.look_at([0.0, 10.0, 0.0])
        assert np.allclose(nav.direction, [0.0, 1.0, 0.0], atol=1e-9)

    def test_rotation_matrix_orthonormal(self):
        nav = NavigationController()
        nav.update(0.1, FlightIntent(yaw=50.0, pitch=20.0, roll=1.0))
        R = nav.rotation_matrix
        assert np.allclose(R @ R.T, np.eye(3))

    def test_position_setter_rejects_nan(self, nav):
        with pytest.warns(NavigationWarning):
            nav.position = [np.nan, 0.0, 0.0]
        assert np.allclose(nav.position, [100000.0, 0.0, 0.0])
