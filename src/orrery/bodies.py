'''Celestial body definitions for the orrery package
BodyConfig (static table row) and CelestialBody (runtime record)'''

import math
import numpy as np
from dataclasses import dataclass, field
from typing import Optional
from .utils import validation_error

# km in one astronomical unit
AU_KM = 149597870.7
# seconds in one day / one Julian century
SECONDS_PER_DAY = 86400.0
SECONDS_PER_CENTURY = 36525.0 * SECONDS_PER_DAY
ARCSEC_TO_RAD = math.pi / (180.0 * 3600.0)


def default_precession_rate(semi_major_axis: float, eccentricity: float) -> float:
    """
    Empirical perihelion precession rate [arcsec/century].

    Scaled from Mercury's 43.03"/century by 1/a[AU] and 1/(1 - e^2).
    """
    a_au = semi_major_axis / AU_KM
    return 43.03 * (1.0 / a_au) * (1.0 / (1.0 - eccentricity**2))


def check_elements(name, semi_major_axis, eccentricity, orbital_period, angles=()):
    """
    Validate a body's orbital elements.

    A body whose semi-major axis, eccentricity and period are all zero is
    the central body and only its angles are checked.

    Returns
    -------
    bool
        True if the elements describe a bound orbit (or the central body)

    Raises
    ------
    ValueError
        Through validation_error() on non-finite values, a <= 0,
        e outside [0, 1) or a non-positive period.
    """
    values = (semi_major_axis, eccentricity, orbital_period) + tuple(angles)
    if not all(math.isfinite(x) for x in values):
        validation_error(f"{name}: orbital elements contain NaN or Inf")
        return False
    if semi_major_axis == 0 and eccentricity == 0 and orbital_period == 0:
        return True
    ok = True
    if semi_major_axis <= 0:
        ok = False
        validation_error(f"{name}: semi-major axis must be positive, "
                         f"got {semi_major_axis}")
    if not 0 <= eccentricity < 1:
        ok = False
        validation_error(f"{name}: eccentricity must lie in [0, 1), "
                         f"got {eccentricity}")
    if orbital_period <= 0:
        ok = False
        validation_error(f"{name}: orbital period must be positive, "
                         f"got {orbital_period}")
    return ok


@dataclass(frozen=True)
class BodyConfig:
    """
    Immutable static parameters for one celestial body.

    Angles are in degrees and periods in days, as they appear in
    published element tables. The central body (the star) leaves every
    orbital element at zero.

    Attributes
    ----------
    name : str
        Unique body name
    mass : float
        Mass [kg]
    radius : float
        Mean radius [km]
    rotation_period : float
        Sidereal rotation period [days]
    axial_tilt : float
        Obliquity to orbit [deg]
    semi_major_axis : float
        Semi-major axis [km], 0 for the central body
    eccentricity : float
        Orbital eccentricity, 0 <= e < 1
    orbital_period : float
        Sidereal orbital period [days]
    inclination : float
        Orbital inclination [deg]
    longitude_of_ascending_node : float
        [deg]
    argument_of_perihelion : float
        [deg]
    mean_anomaly : float
        Mean anomaly at the J2000 epoch [deg]
    retrograde : bool
        Spin opposite to the orbital sense
    extreme_tilt : bool
        Spin axis lies close to the orbital plane (adds a quarter turn
        about x to the body's orientation)
    has_rings : bool
        Body carries ring geometry
    moons : int
        Number of known moons
    precession_rate : float, optional
        Relativistic perihelion precession [arcsec/century]. Derived from
        the orbit with default_precession_rate() when None.
    precession_enabled : bool
        Whether the relativistic correction applies to this body
    color : str
        Display colour for plots and orbit lines
    """
    name: str
    mass: float
    radius: float
    rotation_period: float
    axial_tilt: float = 0.0
    semi_major_axis: float = 0.0
    eccentricity: float = 0.0
    orbital_period: float = 0.0
    inclination: float = 0.0
    longitude_of_ascending_node: float = 0.0
    argument_of_perihelion: float = 0.0
    mean_anomaly: float = 0.0
    retrograde: bool = False
    extreme_tilt: bool = False
    has_rings: bool = False
    moons: int = 0
    precession_rate: Optional[float] = None
    precession_enabled: bool = False
    color: str = 'white'

    def __post_init__(self):
        #Validate parameters
        if not self.name:
            raise ValueError("Body name must be a non-empty string")
        if not (math.isfinite(self.mass) and self.mass > 0):
            raise ValueError(f"{self.name}: mass must be positive, got {self.mass}")
        if not (math.isfinite(self.radius) and self.radius > 0):
            raise ValueError(f"{self.name}: radius must be positive, got {self.radius}")
        if not math.isfinite(self.rotation_period) or self.rotation_period == 0:
            raise ValueError(f"{self.name}: rotation period must be finite and non-zero")
        check_elements(self.name, self.semi_major_axis, self.eccentricity,
                       self.orbital_period,
                       (self.axial_tilt, self.inclination,
                        self.longitude_of_ascending_node,
                        self.argument_of_perihelion, self.mean_anomaly))
        if self.is_central and any((self.inclination,
                                    self.longitude_of_ascending_node,
                                    self.argument_of_perihelion,
                                    self.mean_anomaly)):
            validation_error(f"{self.name}: central body must have all "
                             f"orbital elements zero")
        if self.precession_rate is not None and not math.isfinite(self.precession_rate):
            validation_error(f"{self.name}: precession rate must be finite")

    @property
    def is_central(self) -> bool:
        """True for the star: no orbit, fixed at the origin"""
        return (self.semi_major_axis == 0 and self.eccentricity == 0
                and self.orbital_period == 0)

    @property
    def reference_position(self) -> np.ndarray:
        """Fallback position: (a, 0, 0), or the origin for the central body"""
        return np.array([self.semi_major_axis, 0.0, 0.0])


@dataclass(eq=False)
class CelestialBody:
    """
    Mutable runtime record for one body.

    Constructed once from a BodyConfig and mutated every tick by the
    propagator. Angles are stored in radians and periods in days.
    `position` [km] and `velocity` [km/s] are outputs, `mean_anomaly`,
    `cumulative_precession` and `rotation_angle` are running state.
    """
    name: str
    mass: float
    radius: float
    rotation_period: float
    axial_tilt: float = 0.0
    retrograde: bool = False
    extreme_tilt: bool = False
    has_rings: bool = False
    moons: int = 0
    semi_major_axis: float = 0.0
    eccentricity: float = 0.0
    orbital_period: float = 0.0
    inclination: float = 0.0
    longitude_of_ascending_node: float = 0.0
    argument_of_perihelion: float = 0.0
    mean_anomaly: float = 0.0
    epoch_mean_anomaly: float = 0.0
    precession_rate: float = 0.0
    precession_enabled: bool = False
    cumulative_precession: float = 0.0
    rotation_angle: float = 0.0
    color: str = 'white'
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    last_update: float = 0.0

    # ========== CONSTRUCTION ==========
    @classmethod
    def from_config(cls, cfg: BodyConfig) -> "CelestialBody":
        """Build the runtime record from a static table row."""
        if cfg.precession_rate is not None:
            rate = cfg.precession_rate
        elif cfg.precession_enabled:
            rate = default_precession_rate(cfg.semi_major_axis, cfg.eccentricity)
        else:
            rate = 0.0
        mean_anomaly = math.radians(cfg.mean_anomaly) % (2 * math.pi)
        body = cls(
            name=cfg.name,
            mass=cfg.mass,
            radius=cfg.radius,
            rotation_period=cfg.rotation_period,
            axial_tilt=math.radians(cfg.axial_tilt),
            retrograde=cfg.retrograde,
            extreme_tilt=cfg.extreme_tilt,
            has_rings=cfg.has_rings,
            moons=cfg.moons,
            semi_major_axis=cfg.semi_major_axis,
            eccentricity=cfg.eccentricity,
            orbital_period=cfg.orbital_period,
            inclination=math.radians(cfg.inclination),
            longitude_of_ascending_node=math.radians(cfg.longitude_of_ascending_node),
            argument_of_perihelion=math.radians(cfg.argument_of_perihelion),
            mean_anomaly=mean_anomaly,
            epoch_mean_anomaly=mean_anomaly,
            precession_rate=rate,
            precession_enabled=cfg.precession_enabled,
            color=cfg.color,
        )
        body.position = cfg.reference_position
        return body

    # ========== PROPERTY ACCESS ==========
    @property
    def is_central(self) -> bool:
        """True for the star: rotation only, fixed at the origin"""
        return (self.semi_major_axis == 0 and self.eccentricity == 0
                and self.orbital_period == 0)

    @property
    def period_seconds(self) -> float:
        """Orbital period [s]"""
        return self.orbital_period * SECONDS_PER_DAY

    @property
    def mean_motion(self) -> float:
        """Mean motion n = 2π / T [rad/s]"""
        return 2 * math.pi / self.period_seconds

    @property
    def semi_minor_axis(self) -> float:
        """b = a √(1 - e²) [km]"""
        return self.semi_major_axis * math.sqrt(1 - self.eccentricity**2)

    @property
    def spin_rate(self) -> float:
        """Signed axial spin rate [rad/s], negative for retrograde bodies"""
        rate = 2 * math.pi / (self.rotation_period * SECONDS_PER_DAY)
        return -rate if self.retrograde else rate

    @property
    def reference_position(self) -> np.ndarray:
        """Fallback position: (a, 0, 0), or the origin for the central body"""
        return np.array([self.semi_major_axis, 0.0, 0.0])

    def validate(self):
        """Check the current orbital elements, see check_elements()."""
        return check_elements(self.name, self.semi_major_axis, self.eccentricity,
                       self.orbital_period,
                       (self.inclination, self.longitude_of_ascending_node,
                        self.argument_of_perihelion, self.mean_anomaly))

    def distance_to(self, point) -> float:
        """Euclidean distance from the body centre to point [km]"""
        return float(np.linalg.norm(np.asarray(point, dtype=float) - self.position))

    def __repr__(self):
        kind = "central" if self.is_central else f"a={self.semi_major_axis:.4e} km"
        return f"CelestialBody('{self.name}', {kind}, m={self.mass:.3e} kg)"

    def __str__(self):
        if self.is_central:
            return (f"{self.name} (central body)\n"
                    f"  mass   = {self.mass:12.4e} kg\n"
                    f"  radius = {self.radius:12.1f} km")
        return (f"{self.name}\n"
                f"  a     = {self.semi_major_axis:14.1f} km\n"
                f"  e     = {self.eccentricity:14.6f}\n"
                f"  i     = {np.degrees(self.inclination):14.4f}°\n"
                f"  RAAN  = {np.degrees(self.longitude_of_ascending_node):14.4f}°\n"
                f"  ω     = {np.degrees(self.argument_of_perihelion):14.4f}°\n"
                f"  M     = {np.degrees(self.mean_anomaly):14.4f}°\n"
                f"  r     = [{self.position[0]:.4e}, {self.position[1]:.4e}, "
                f"{self.position[2]:.4e}] km")
