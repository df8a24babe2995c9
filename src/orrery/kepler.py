'''Keplerian propagation for the orrery package
Kepler equation solver, element-to-state conversion and the analytic
physics model used by the simulation clock'''

import math
import numpy as np
from .config import config
from .bodies import CelestialBody, SECONDS_PER_CENTURY, ARCSEC_TO_RAD
from .utils import rot_x, rot_y, rot_z, validation_error

TWO_PI = 2 * math.pi


def solve_kepler(mean_anomaly: float, eccentricity: float,
                 tol: float = None, max_iter: int = None) -> float:
    """
    Solve Kepler's equation E - e sin(E) = M for the eccentric anomaly.

    Newton-Raphson iteration starting at E0 = M. Iteration stops when the
    correction falls below `tol` or after `max_iter` steps, in which case
    the last estimate is returned.

    Parameters
    ----------
    mean_anomaly : float
        Mean anomaly M [rad]
    eccentricity : float
        Orbital eccentricity, 0 <= e < 1
    tol : float, optional
        Convergence threshold on |dE| [rad]. Default: config.KEPLER_TOL
    max_iter : int, optional
        Iteration cap. Default: config.KEPLER_MAX_ITER

    Returns
    -------
    float
        Eccentric anomaly E [rad]

    Examples
    --------
    >>> E = solve_kepler(1.0, 0.5)
    >>> abs(E - 0.5 * math.sin(E) - 1.0) < 1e-6
    True
    """
    if tol is None:
        tol = config.KEPLER_TOL
    if max_iter is None:
        max_iter = config.KEPLER_MAX_ITER

    E = mean_anomaly
    for _ in range(max_iter):
        dE = (E - eccentricity * math.sin(E) - mean_anomaly) / \
            (1 - eccentricity * math.cos(E))
        E -= dE
        if abs(dE) < tol:
            break
    return E


def perifocal_dcm(raan: float, inc: float, argp: float) -> np.ndarray:
    """
    Direction cosine matrix from the perifocal frame to the reference frame.

    DCM = R3(Ω) · R1(i) · R3(ω): rotate by the argument of perihelion,
    then the inclination, then the longitude of the ascending node.
    """
    # rotation about z-axis by RAAN
    R3_omega = rot_z(raan)
    # rotation about x-axis by inclination
    R1_i = rot_x(inc)
    # rotation about z-axis by argument of perihelion
    R3_w = rot_z(argp)
    return R3_omega @ R1_i @ R3_w


def perifocal_state(a: float, e: float, E: float, n: float):
    """
    Position [km] and velocity [km/s] in the perifocal frame.

    Parameters
    ----------
    a : float
        Semi-major axis [km]
    e : float
        Eccentricity
    E : float
        Eccentric anomaly [rad]
    n : float
        Mean motion [rad/s]
    """
    cosE, sinE = math.cos(E), math.sin(E)
    root = math.sqrt(1 - e**2)
    rvec = np.array([a * (cosE - e), a * root * sinE, 0.0])
    # dE/dt = n / (1 - e cos E)
    Edot = n / (1 - e * cosE)
    vvec = np.array([-a * sinE * Edot, a * root * cosE * Edot, 0.0])
    return rvec, vvec


def precession_offset(body: CelestialBody, relativistic: bool) -> float:
    """Rotation [rad] added to ω when the relativistic correction applies."""
    if relativistic and body.precession_enabled:
        return body.cumulative_precession
    return 0.0


def state_from_elements(body: CelestialBody, relativistic: bool = False):
    """
    Cartesian state of a body at its current mean anomaly.

    Does not mutate the body.

    Returns
    -------
    tuple of np.ndarray
        (position [km], velocity [km/s]) in the reference frame
    """
    if body.is_central:
        return np.zeros(3), np.zeros(3)
    E = solve_kepler(body.mean_anomaly, body.eccentricity)
    rvec, vvec = perifocal_state(body.semi_major_axis, body.eccentricity,
                                 E, body.mean_motion)
    argp = body.argument_of_perihelion + precession_offset(body, relativistic)
    DCM = perifocal_dcm(body.longitude_of_ascending_node, body.inclination, argp)
    return DCM @ rvec, DCM @ vvec


def advance_rotation(body: CelestialBody, elapsed_seconds: float) -> float:
    """
    Advance a body's axial rotation angle.

    The angle changes by 2π / (rotation period) per second of simulated
    time, reversed for retrograde rotators, and wraps to [0, 2π).
    """
    body.rotation_angle = (body.rotation_angle
                           + body.spin_rate * elapsed_seconds) % TWO_PI
    return body.rotation_angle


def axial_orientation(body: CelestialBody) -> np.ndarray:
    """
    Orientation matrix of a body's spin axis.

    Tilt about z by the axial tilt, an extra quarter turn about x for
    bodies flagged with an extreme tilt, then spin about the body's y axis.
    """
    R = rot_z(body.axial_tilt)
    if body.extreme_tilt:
        R = R @ rot_x(math.pi / 2)
    return R @ rot_y(body.rotation_angle)


def propagate(body: CelestialBody, elapsed_seconds: float,
              relativistic: bool = False) -> np.ndarray:
    """
    Advance a body along its Keplerian orbit.

    Mutates the body's running mean anomaly, cumulative precession,
    rotation angle, position, velocity and last update time. The central
    body stays at the origin and only rotates.

    Parameters
    ----------
    body : CelestialBody
        Body to advance
    elapsed_seconds : float
        Simulated time step [s], may be negative or zero
    relativistic : bool, optional
        Apply the body's perihelion precession if it has one enabled.
        Default: False

    Returns
    -------
    np.ndarray
        New position [km]

    Raises
    ------
    ValueError
        If the body's orbital elements are invalid or the time step is
        not finite (with config.STRICT_VALIDATION; otherwise the body is
        left unchanged with a warning)
    """
    if not math.isfinite(elapsed_seconds):
        validation_error(f"{body.name}: elapsed time must be finite, "
                         f"got {elapsed_seconds}")
        return body.position.copy()
    if not body.validate():
        return body.position.copy()

    advance_rotation(body, elapsed_seconds)
    body.last_update += elapsed_seconds

    if body.is_central:
        body.position = np.zeros(3)
        body.velocity = np.zeros(3)
        return body.position.copy()

    body.mean_anomaly = (body.mean_anomaly
                         + body.mean_motion * elapsed_seconds) % TWO_PI
    if relativistic and body.precession_enabled:
        body.cumulative_precession += (body.precession_rate * ARCSEC_TO_RAD
                                       * elapsed_seconds / SECONDS_PER_CENTURY)

    body.position, body.velocity = state_from_elements(body, relativistic)
    return body.position.copy()


def mean_anomaly_at(body: CelestialBody, seconds_since_epoch: float) -> float:
    """Mean anomaly [rad] at an absolute time, measured from the J2000 value."""
    if body.is_central:
        return 0.0
    return (body.epoch_mean_anomaly
            + body.mean_motion * seconds_since_epoch) % TWO_PI


def reset_to_epoch_offset(body: CelestialBody, seconds_since_epoch: float,
                          relativistic: bool = False) -> np.ndarray:
    """
    Place a body at an absolute time measured from the J2000 epoch.

    Mean anomaly, cumulative precession and rotation angle are computed
    directly from the offset, so repeated resets never accumulate error.

    Returns
    -------
    np.ndarray
        New position [km]
    """
    if not body.validate():
        return body.position.copy()
    body.mean_anomaly = mean_anomaly_at(body, seconds_since_epoch)
    if body.precession_enabled:
        body.cumulative_precession = (body.precession_rate * ARCSEC_TO_RAD
                                      * seconds_since_epoch / SECONDS_PER_CENTURY)
    else:
        body.cumulative_precession = 0.0
    body.rotation_angle = (body.spin_rate * seconds_since_epoch) % TWO_PI
    body.last_update = seconds_since_epoch
    body.position, body.velocity = state_from_elements(body, relativistic)
    return body.position.copy()


class KeplerianModel:
    """
    Analytic two-body propagation of every body about the central body.

    Each body moves on its fixed ellipse; bodies do not perturb each other.
    """
    name = 'kepler'

    def step(self, bodies, elapsed_seconds: float, relativistic: bool = False):
        """Advance every body by elapsed_seconds of simulated time."""
        for body in bodies:
            propagate(body, elapsed_seconds, relativistic)

    def reset(self, bodies, seconds_since_epoch: float, relativistic: bool = False):
        """Place every body at an absolute time since J2000."""
        for body in bodies:
            reset_to_epoch_offset(body, seconds_since_epoch, relativistic)

    def __repr__(self):
        return "KeplerianModel()"
