"""
Global Configuration for Orrery Package
=======================================

This module provides package-wide configuration settings that users can modify
to control numerical tolerances, validation behavior, camera feel and default
plotting options.

Examples
--------
View current configuration:

>>> import orrery
>>> print(orrery.config)

Modify settings:

>>> orrery.config.KEPLER_TOL = 1e-10  # Stricter Kepler convergence
>>> orrery.config.WARP_DURATION_MS = 1500  # Faster warp transit

Reset to defaults:

>>> orrery.config.reset()

Temporarily modify settings:

>>> with orrery.temp_config(STRICT_VALIDATION=False):
...     # Invalid elements warn instead of raising inside this block
...     rogue = orrery.BodyConfig("Rogue", 1e20, 100.0, 1.0,
...                               semi_major_axis=1e8, eccentricity=1.2,
...                               orbital_period=400.0)

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset.
"""

from dataclasses import dataclass
from contextlib import contextmanager
import math


@dataclass
class OrreryConfig:
    """
    Global configuration for Orrery package.

    Attributes
    ----------
    KEPLER_TOL : float
        Newton-Raphson convergence threshold on |dE| [rad].
        Default: 1e-6
    KEPLER_MAX_ITER : int
        Iteration cap for the Kepler solver. The best estimate is
        accepted once the cap is reached.
        Default: 100
    MAX_PHYSICS_DT : float
        Largest real-time delta [s] the clock will scale and propagate in
        one tick. Longer stalls are clamped to this value.
        Default: 0.1
    DATE_EMIT_INTERVAL_MS : float
        Minimum real time between two formatted-date publications [ms].
        Default: 1000
    MAX_CAMERA_DT : float
        Camera deltas above this value [s] are treated as a stall.
        Default: 1.0
    FALLBACK_CAMERA_DT : float
        Delta [s] substituted for a stalled or invalid camera delta.
        Default: 1/60
    SPEED_SMOOTHING : float
        Weight kept on the previous free-flight speed each tick.
        Default: 0.95
    GRAVITY_SCALE : float
        Gameplay damping applied to summed gravitational acceleration.
        Default: 0.01
    ARRIVAL_RADII : float
        Autopilot arrival distance in target radii.
        Default: 5
    PROXIMITY_RADII : float
        Auto-select a body when closer than this many of its radii.
        Default: 10
    WARP_DURATION_MS : float
        Length of the warp transit [ms].
        Default: 3000
    WARP_MIN_ARRIVAL : float
        Minimum warp stand-off distance from the target centre [km].
        Default: 10000
    STRICT_VALIDATION : bool
        If True, validation failures raise exceptions.
        If False, validation failures issue warnings.
        Default: True
    ORBIT_SEGMENTS : int
        Number of segments in an orbit polyline.
        Default: 256
    FLIGHT_PATH_SEGMENTS : int
        Number of segments in an autopilot flight path preview.
        Default: 100
    """

    # Kepler solver
    KEPLER_TOL: float = 1e-6
    KEPLER_MAX_ITER: int = 100

    # Simulation clock
    MAX_PHYSICS_DT: float = 0.1
    DATE_EMIT_INTERVAL_MS: float = 1000.0

    # Camera integration
    MAX_CAMERA_DT: float = 1.0
    FALLBACK_CAMERA_DT: float = 1.0 / 60.0

    # Free flight
    SPEED_SMOOTHING: float = 0.95
    BRAKE_FACTOR: float = 0.9
    ROLL_STEP: float = 0.02
    VELOCITY_EPSILON: float = 0.01
    PITCH_LIMIT: float = math.pi / 2 - 0.01

    # Gravity perturbation (gameplay units: G in SI, distances in km)
    GRAVITY_CONSTANT: float = 6.6743e-11
    GRAVITY_INFLUENCE_RANGE: float = 1e8
    GRAVITY_MIN_RADII: float = 2.0
    GRAVITY_SCALE: float = 0.01

    # Assisted modes
    ARRIVAL_RADII: float = 5.0
    PROXIMITY_RADII: float = 10.0
    ORBIT_ANGULAR_RATE: float = 0.2
    FOLLOW_BLEND: float = 0.1
    FOLLOW_DISTANCE_RADII: float = 5.0
    FOLLOW_HEIGHT_RADII: float = 2.0
    FOLLOW_DRIFT_RATE: float = 1e-4

    # Warp
    WARP_DURATION_MS: float = 3000.0
    WARP_MIN_ARRIVAL: float = 10000.0
    DEGENERATE_LENGTH: float = 1e-3

    # Target fallbacks
    FALLBACK_TARGET_RADIUS: float = 10000.0
    FALLBACK_TARGET_MASS: float = 1e24

    # Validation behavior
    STRICT_VALIDATION: bool = True

    # Output and plotting defaults
    ORBIT_SEGMENTS: int = 256
    FLIGHT_PATH_SEGMENTS: int = 100
    DEFAULT_BODY_COLOR: str = 'lightblue'
    DEFAULT_ORBIT_COLOR: str = 'white'
    DEFAULT_PATH_COLOR: str = 'red'
    DEFAULT_BODY_OPACITY: float = 0.6

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import orrery
        >>> orrery.config.KEPLER_MAX_ITER = 5  # Modify
        >>> orrery.config.reset()  # Back to defaults
        >>> orrery.config.KEPLER_MAX_ITER
        100
        """
        defaults = OrreryConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["OrreryConfig:"]
        lines.append("  Kepler Solver:")
        lines.append(f"    KEPLER_TOL = {self.KEPLER_TOL}")
        lines.append(f"    KEPLER_MAX_ITER = {self.KEPLER_MAX_ITER}")
        lines.append("  Clock:")
        lines.append(f"    MAX_PHYSICS_DT = {self.MAX_PHYSICS_DT}")
        lines.append(f"    DATE_EMIT_INTERVAL_MS = {self.DATE_EMIT_INTERVAL_MS}")
        lines.append("  Camera:")
        lines.append(f"    MAX_CAMERA_DT = {self.MAX_CAMERA_DT}")
        lines.append(f"    FALLBACK_CAMERA_DT = {self.FALLBACK_CAMERA_DT}")
        lines.append(f"    SPEED_SMOOTHING = {self.SPEED_SMOOTHING}")
        lines.append(f"    GRAVITY_SCALE = {self.GRAVITY_SCALE}")
        lines.append("  Assisted Modes:")
        lines.append(f"    ARRIVAL_RADII = {self.ARRIVAL_RADII}")
        lines.append(f"    PROXIMITY_RADII = {self.PROXIMITY_RADII}")
        lines.append(f"    ORBIT_ANGULAR_RATE = {self.ORBIT_ANGULAR_RATE}")
        lines.append(f"    FOLLOW_BLEND = {self.FOLLOW_BLEND}")
        lines.append(f"    WARP_DURATION_MS = {self.WARP_DURATION_MS}")
        lines.append(f"    WARP_MIN_ARRIVAL = {self.WARP_MIN_ARRIVAL}")
        lines.append("  Behavior:")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append("  Plotting:")
        lines.append(f"    ORBIT_SEGMENTS = {self.ORBIT_SEGMENTS}")
        lines.append(f"    FLIGHT_PATH_SEGMENTS = {self.FLIGHT_PATH_SEGMENTS}")
        lines.append(f"    DEFAULT_BODY_COLOR = '{self.DEFAULT_BODY_COLOR}'")
        lines.append(f"    DEFAULT_ORBIT_COLOR = '{self.DEFAULT_ORBIT_COLOR}'")
        lines.append(f"    DEFAULT_PATH_COLOR = '{self.DEFAULT_PATH_COLOR}'")
        lines.append(f"    DEFAULT_BODY_OPACITY = {self.DEFAULT_BODY_OPACITY}")
        return "\n".join(lines)


# Global configuration instance
config = OrreryConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import orrery
    >>> with orrery.temp_config(WARP_DURATION_MS=500):
    ...     controller.start_warp()
    >>> # Original config restored here
    >>> orrery.config.WARP_DURATION_MS
    3000.0

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    for key in kwargs:
        if key not in config.__dataclass_fields__:
            raise AttributeError(
                f"OrreryConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
    old_values = {}
    for key, value in kwargs.items():
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
