"""
Test suite for Keplerian propagation.

Tests cover:
- Kepler equation convergence across eccentricities
- Element-to-state conversion and the full-period identity
- Central body handling and axial rotation
- Invalid input handling in strict and non-strict modes
- Relativistic perihelion precession
"""

import math
import pytest
import numpy as np
from orrery import (CelestialBody, BodyConfig, temp_config, solve_kepler,
                    propagate, axial_orientation, SUN, MERCURY, VENUS, EARTH, URANUS)
from orrery.bodies import ARCSEC_TO_RAD, SECONDS_PER_CENTURY
from orrery.kepler import (state_from_elements, reset_to_epoch_offset,
                           mean_anomaly_at, perifocal_dcm, KeplerianModel, TWO_PI)
from orrery.utils import rot_z


def make_body(**overrides):
    params = dict(name='Testworld', mass=1e24, radius=5000.0, rotation_period=1.0,
                  semi_major_axis=1.0e8, eccentricity=0.1, orbital_period=300.0)
    params.update(overrides)
    return CelestialBody.from_config(BodyConfig(**params))


class TestSolveKepler:
    """Test the Newton-Raphson Kepler solver."""

    @pytest.mark.parametrize("e", np.linspace(0.0, 0.94, 9))
    @pytest.mark.parametrize("M", np.linspace(0.0, TWO_PI, 13, endpoint=False))
    def test_residual_small(self, e, M):
        E = solve_kepler(M, e)
        assert abs(E - e * math.sin(E) - M) < 1e-6

    def test_circular_orbit(self):
        assert solve_kepler(1.234, 0.0) == pytest.approx(1.234)

    def test_iteration_cap_returns_estimate(self):
        E = solve_kepler(2.0, 0.9, max_iter=1)
        assert math.isfinite(E)

    def test_custom_tolerance(self):
        E = solve_kepler(0.5, 0.3, tol=1e-12)
        assert abs(E - 0.3 * math.sin(E) - 0.5) < 1e-12


class TestElementsToState:
    """Test conversion of orbital elements to Cartesian state."""

    def test_earth_at_perihelion(self):
        earth = make_body(name='Earth', semi_major_axis=149597890.0,
                          eccentricity=0.0167, orbital_period=365.256)
        r, v = state_from_elements(earth)
        assert r[0] == pytest.approx(149597890.0 * (1 - 0.0167))
        assert r[1] == pytest.approx(0.0, abs=1e-6)
        assert r[2] == pytest.approx(0.0, abs=1e-6)
        # perihelion velocity is perpendicular to the radius
        assert v[0] == pytest.approx(0.0, abs=1e-9)
        assert v[1] > 0

    def test_radius_within_apsides(self):
        body = CelestialBody.from_config(MERCURY)
        r, _ = state_from_elements(body)
        a, e = body.semi_major_axis, body.eccentricity
        assert a * (1 - e) - 1e-3 <= np.linalg.norm(r) <= a * (1 + e) + 1e-3

    def test_vis_viva(self):
        body = CelestialBody.from_config(MERCURY)
        r, v = state_from_elements(body)
        a = body.semi_major_axis
        mu = body.mean_motion**2 * a**3
        expected = math.sqrt(mu * (2 / np.linalg.norm(r) - 1 / a))
        assert np.linalg.norm(v) == pytest.approx(expected, rel=1e-9)

    def test_state_does_not_mutate(self):
        body = CelestialBody.from_config(EARTH)
        before = body.position.copy()
        state_from_elements(body)
        assert np.array_equal(body.position, before)

    def test_dcm_orthonormal(self):
        DCM = perifocal_dcm(0.3, 1.1, 2.5)
        assert np.allclose(DCM @ DCM.T, np.eye(3))
        assert np.linalg.det(DCM) == pytest.approx(1.0)


class TestPropagate:
    """Test in-place Keplerian propagation of bodies."""

    def test_full_period_returns_to_start(self):
        body = CelestialBody.from_config(MERCURY)
        M0 = body.mean_anomaly
        r0, _ = state_from_elements(body)
        propagate(body, body.period_seconds)
        assert body.mean_anomaly == pytest.approx(M0, abs=1e-9)
        assert np.allclose(body.position, r0, atol=1.0)

    def test_mean_anomaly_wraps(self):
        body = make_body()
        for _ in range(5):
            propagate(body, body.period_seconds * 0.7)
            assert 0 <= body.mean_anomaly < TWO_PI

    def test_negative_step_reverses(self):
        body = CelestialBody.from_config(EARTH)
        r0, _ = state_from_elements(body)
        propagate(body, 86400.0 * 10)
        propagate(body, -86400.0 * 10)
        assert np.allclose(body.position, r0, atol=1e-3)

    def test_last_update_accumulates(self):
        body = make_body()
        propagate(body, 10.0)
        propagate(body, 5.0)
        assert body.last_update == pytest.approx(15.0)

    def test_central_body_stays_at_origin(self):
        sun = CelestialBody.from_config(SUN)
        propagate(sun, 86400.0)
        assert np.allclose(sun.position, 0.0)
        assert np.allclose(sun.velocity, 0.0)
        assert sun.rotation_angle == pytest.approx(
            (sun.spin_rate * 86400.0) % TWO_PI)

    def test_rotation_wraps(self):
        body = make_body(rotation_period=1.0)
        propagate(body, 86400.0 * 2.25)
        assert body.rotation_angle == pytest.approx(0.5 * math.pi)

    def test_retrograde_rotation(self):
        venus = CelestialBody.from_config(VENUS)
        propagate(venus, 86400.0)
        expected = (-TWO_PI / venus.rotation_period / 86400.0 * 86400.0) % TWO_PI
        assert venus.rotation_angle == pytest.approx(expected)

    def test_invalid_eccentricity_raises(self):
        body = make_body()
        body.eccentricity = 1.2
        with pytest.raises(ValueError, match="eccentricity"):
            propagate(body, 60.0)

    def test_invalid_eccentricity_non_strict(self):
        body = make_body()
        body.eccentricity = 1.2
        before = body.position.copy()
        with temp_config(STRICT_VALIDATION=False):
            with pytest.warns(UserWarning, match="eccentricity"):
                result = propagate(body, 60.0)
        assert np.array_equal(result, before)
        assert np.array_equal(body.position, before)
        assert body.last_update == 0.0

    def test_non_finite_step_raises(self):
        body = make_body()
        with pytest.raises(ValueError, match="finite"):
            propagate(body, float('nan'))


class TestPrecession:
    """Test the relativistic perihelion precession correction."""

    def test_mercury_century(self):
        body = CelestialBody.from_config(MERCURY)
        propagate(body, SECONDS_PER_CENTURY, relativistic=True)
        assert body.cumulative_precession == pytest.approx(42.98 * ARCSEC_TO_RAD)

    def test_disabled_without_flag(self):
        body = CelestialBody.from_config(MERCURY)
        propagate(body, SECONDS_PER_CENTURY, relativistic=False)
        assert body.cumulative_precession == 0.0

    def test_ignored_for_bodies_without_precession(self):
        body = make_body()
        propagate(body, SECONDS_PER_CENTURY, relativistic=True)
        assert body.cumulative_precession == 0.0

    def test_precession_rotates_orbit(self):
        body = make_body(precession_rate=1.0e5, precession_enabled=True)
        baseline = make_body()
        propagate(body, SECONDS_PER_CENTURY, relativistic=True)
        propagate(baseline, SECONDS_PER_CENTURY)
        delta = body.cumulative_precession
        assert delta == pytest.approx(1.0e5 * ARCSEC_TO_RAD)
        assert np.allclose(body.position, rot_z(delta) @ baseline.position, atol=1e-3)


class TestEpochReset:
    """Test absolute placement from the J2000 epoch."""

    def test_reset_matches_propagation(self):
        stepped = CelestialBody.from_config(EARTH)
        anchored = CelestialBody.from_config(EARTH)
        for _ in range(10):
            propagate(stepped, 86400.0)
        reset_to_epoch_offset(anchored, 10 * 86400.0)
        assert np.allclose(stepped.position, anchored.position, atol=1e-2)
        assert stepped.rotation_angle == pytest.approx(anchored.rotation_angle)

    def test_reset_is_absolute(self):
        body = CelestialBody.from_config(MERCURY)
        reset_to_epoch_offset(body, 5.0e8, relativistic=True)
        reset_to_epoch_offset(body, 1.0e6, relativistic=True)
        fresh = CelestialBody.from_config(MERCURY)
        reset_to_epoch_offset(fresh, 1.0e6, relativistic=True)
        assert np.allclose(body.position, fresh.position)
        assert body.cumulative_precession == fresh.cumulative_precession
        assert body.last_update == 1.0e6

    def test_mean_anomaly_at_epoch(self):
        body = CelestialBody.from_config(EARTH)
        assert mean_anomaly_at(body, 0.0) == pytest.approx(body.epoch_mean_anomaly)
        assert mean_anomaly_at(CelestialBody.from_config(SUN), 1e9) == 0.0

    def test_model_steps_every_body(self):
        bodies = [CelestialBody.from_config(cfg) for cfg in (SUN, MERCURY, EARTH)]
        KeplerianModel().step(bodies, 3600.0)
        assert all(b.last_update == 3600.0 for b in bodies)


class TestAxialOrientation:
    """Test spin axis orientation matrices."""

    def test_orthonormal(self):
        body = CelestialBody.from_config(EARTH)
        body.rotation_angle = 1.0
        R = axial_orientation(body)
        assert np.allclose(R @ R.T, np.eye(3))

    def test_extreme_tilt_adds_quarter_turn(self):
        uranus = CelestialBody.from_config(URANUS)
        R = axial_orientation(uranus)
        # the spin axis leaves the y axis for an extreme tilt
        axis = R @ np.array([0.0, 1.0, 0.0])
        upright = CelestialBody.from_config(EARTH)
        upright_axis = axial_orientation(upright) @ np.array([0.0, 1.0, 0.0])
        assert abs(axis[1]) < abs(upright_axis[1])
