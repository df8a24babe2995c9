'''Camera navigation for the orrery package
Five-mode state machine turning flight intent and target selection into
camera motion: free flight, orbit, follow, autopilot and warp'''

import logging
import math
import time
import numpy as np
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Callable, Optional
from .config import config
from .trajectory import FlightPath
from .tween import Tween, quintic_in_out
from .utils import (navigation_warning, is_finite_vector, safe_normalize,
                    rot_x, rot_y, rot_z, rotate_about_axis, UP, DEFAULT_AXIS)

logger = logging.getLogger(__name__)

# default start: just outside Earth's reference position
DEFAULT_CAMERA_POSITION = (149597890.0 + 10000.0, 0.0, 0.0)


# define an enumerated list of camera modes
class CameraMode(Enum):
    FREE_FLIGHT = 'free_flight'
    ORBIT = 'orbit'
    FOLLOW = 'follow'
    AUTOPILOT = 'autopilot'
    WARPING = 'warping'


@dataclass
class FlightIntent:
    """
    Control intent for one tick, produced by an input collector.

    Axis values are in [-1, 1]; yaw and pitch are pointer deltas scaled by
    CameraSettings.rotation_speed.

    Attributes
    ----------
    forward : float
        +1 forward, -1 backward
    strafe : float
        +1 right, -1 left
    vertical : float
        +1 up, -1 down
    roll : float
        +1 rolls left, -1 rolls right
    yaw, pitch : float
        Pointer movement since the last tick
    boost : bool
        Multiply thrust by CameraSettings.boost_multiplier
    brake : bool
        Bleed off target speed while no forward intent is given
    """
    forward: float = 0.0
    strafe: float = 0.0
    vertical: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0
    pitch: float = 0.0
    boost: bool = False
    brake: bool = False

    @property
    def has_thrust(self) -> bool:
        return bool(self.forward or self.strafe or self.vertical)


@dataclass
class CameraSettings:
    """
    Tunable camera behavior.

    Speeds are in km/s, distances in km.
    """
    movement_speed: float = 1000.0
    rotation_speed: float = 0.002
    max_speed: float = 100000.0
    min_speed: float = 0.0
    damping_factor: float = 0.95
    boost_multiplier: float = 5.0
    zoom_sensitivity: float = 0.1
    min_distance: float = 1000.0
    max_distance: float = 100000.0
    inertia: bool = True


@dataclass(frozen=True)
class TargetSnapshot:
    """Validated copy of a target taken when it was selected."""
    name: str
    position: np.ndarray
    radius: float
    mass: float


@dataclass
class AutopilotState:
    active: bool = False
    target: object = None
    snapshot: Optional[TargetSnapshot] = None
    arrival_distance: float = 0.0
    initial_distance: float = 0.0
    progress: float = 0.0
    completed: bool = False
    flight_path: Optional[FlightPath] = None


@dataclass
class WarpState:
    active: bool = False
    target: object = None
    snapshot: Optional[TargetSnapshot] = None
    progress: float = 0.0
    departure: np.ndarray = field(default_factory=lambda: np.zeros(3))
    arrival: np.ndarray = field(default_factory=lambda: np.zeros(3))
    tween: Optional[Tween] = None


def autopilot_speed_factor(progress: float) -> float:
    """
    Speed multiplier along an autopilot approach.

    Quadratic ease-in below 30% progress, 0.6 cruise up to 70%, quadratic
    ease-out afterwards. Never below 0.1 so the approach always completes.
    """
    if progress < 0.3:
        return (progress / 0.3)**2 * 0.5 + 0.1
    elif progress > 0.7:
        return ((1 - progress) / 0.3)**2 * 0.5 + 0.1
    return 0.6


class NavigationController:
    """
    Camera state machine.

    The controller never owns bodies: it keeps the live reference of the
    selected target for tracking and a validated snapshot for distance
    and arrival math. At most one of autopilot and warp is active.

    Parameters
    ----------
    bodies : iterable of CelestialBody, optional
        Bodies used for gravity perturbation and proximity selection
    position : array_like, optional
        Initial camera position [km]. Default: 10 000 km beyond Earth's
        reference position
    settings : CameraSettings, optional
    on_mode_change : callable, optional
        Called with the new CameraMode whenever the mode changes
    on_target_change : callable, optional
        Called with the new target (or None) whenever it changes
    time_source : callable, optional
        Returns real time in ms, drives the follow-mode drift.
        Default: wall clock

    Examples
    --------
    >>> nav = NavigationController(solar_system())
    >>> nav.set_target(nav.bodies[3])
    True
    >>> nav.start_warp()
    True
    >>> nav.mode
    <CameraMode.WARPING: 'warping'>
    """

    def __init__(
        self,
        bodies=None,
        position=DEFAULT_CAMERA_POSITION,
        settings: Optional[CameraSettings] = None,
        on_mode_change: Optional[Callable[[CameraMode], None]] = None,
        on_target_change: Optional[Callable[[object], None]] = None,
        time_source: Optional[Callable[[], float]] = None,
    ):
        self._bodies = list(bodies or ())
        self._position = np.array(position, dtype=float)
        self._velocity = np.zeros(3)
        self._speed = 0.0
        self._target_speed = 0.0
        self._reported_speed = 0.0
        # YXZ Euler angles [rad]
        self._yaw = 0.0
        self._pitch = 0.0
        self._roll = 0.0
        self._settings = settings if settings is not None else CameraSettings()

        self._mode = CameraMode.FREE_FLIGHT
        self._previous_mode = None
        self._target = None
        self._snapshot = None
        self._autopilot = AutopilotState()
        self._warp = WarpState()

        self.on_mode_change = on_mode_change
        self.on_target_change = on_target_change
        self._time_source = time_source or (lambda: time.time() * 1000.0)

    # ========== TARGETING ==========
    def set_target(self, body) -> bool:
        """
        Select a body as the navigation target.

        Bodies whose position has a non-finite component are rejected with
        a NavigationWarning; the current target is kept and no callback
        fires. A non-positive or missing radius or mass is replaced by
        config.FALLBACK_TARGET_RADIUS / FALLBACK_TARGET_MASS in the snapshot.

        Returns
        -------
        bool
            True if the target was set
        """
        if body is None:
            self.clear_target()
            return True
        if not is_finite_vector(getattr(body, 'position', None)):
            navigation_warning(f"Cannot set target: {body.name} has invalid "
                               f"position {getattr(body, 'position', None)}")
            return False
        self._target = body
        self._snapshot = self._take_snapshot(body)
        logger.info("Target set to %s", body.name)
        if self.on_target_change is not None:
            self.on_target_change(body)
        return True

    def clear_target(self):
        """Drop the target. Orbit and follow fall back to free flight."""
        if self._target is None:
            return
        self._target = None
        self._snapshot = None
        if self._mode in (CameraMode.ORBIT, CameraMode.FOLLOW):
            self._set_mode(CameraMode.FREE_FLIGHT)
        if self.on_target_change is not None:
            self.on_target_change(None)

    @staticmethod
    def _take_snapshot(body) -> TargetSnapshot:
        radius = getattr(body, 'radius', None)
        if radius is None or not math.isfinite(radius) or radius <= 0:
            radius = config.FALLBACK_TARGET_RADIUS
        mass = getattr(body, 'mass', None)
        if mass is None or not math.isfinite(mass) or mass <= 0:
            mass = config.FALLBACK_TARGET_MASS
        return TargetSnapshot(name=body.name,
                              position=np.array(body.position, dtype=float),
                              radius=float(radius), mass=float(mass))

    @staticmethod
    def _live_position(body, snapshot: TargetSnapshot) -> np.ndarray:
        """Live target position, or the snapshot copy if it went non-finite"""
        if body is not None and is_finite_vector(body.position):
            return np.array(body.position, dtype=float)
        return snapshot.position.copy()

    # ========== MODE TRANSITIONS ==========
    def _set_mode(self, mode: CameraMode):
        if mode is self._mode:
            return
        self._mode = mode
        logger.debug("Camera mode set to %s", mode.value)
        if self.on_mode_change is not None:
            self.on_mode_change(mode)

    def _automation_busy(self, action: str) -> bool:
        if self._autopilot.active:
            navigation_warning(f"Cannot {action}: autopilot is active")
            return True
        if self._warp.active:
            navigation_warning(f"Cannot {action}: warp is active")
            return True
        return False

    def start_orbit(self) -> bool:
        """Orbit the current target. Requires a target and no automation."""
        if self._target is None:
            navigation_warning("Cannot start orbit: no target selected")
            return False
        if self._automation_busy("start orbit"):
            return False
        self._set_mode(CameraMode.ORBIT)
        logger.info("Orbit mode engaged: orbiting %s", self._target.name)
        return True

    def start_follow(self) -> bool:
        """Follow the current target. Requires a target and no automation."""
        if self._target is None:
            navigation_warning("Cannot start follow: no target selected")
            return False
        if self._automation_busy("start follow"):
            return False
        self._set_mode(CameraMode.FOLLOW)
        logger.info("Follow mode engaged: following %s", self._target.name)
        return True

    def start_autopilot(self) -> bool:
        """
        Fly to the current target and settle into orbit on arrival.

        Arrival distance is config.ARRIVAL_RADII target radii. Records a
        straight FlightPath preview from the current position.

        Returns
        -------
        bool
            True if autopilot engaged
        """
        if self._target is None:
            navigation_warning("Cannot start autopilot: no target selected")
            return False
        if self._automation_busy("start autopilot"):
            return False

        target_position = self._live_position(self._target, self._snapshot)
        distance = float(np.linalg.norm(target_position - self._position))
        self._previous_mode = self._mode
        self._autopilot = AutopilotState(
            active=True,
            target=self._target,
            snapshot=self._snapshot,
            arrival_distance=self._snapshot.radius * config.ARRIVAL_RADII,
            initial_distance=distance,
            flight_path=FlightPath.straight(self._position, target_position),
        )
        self._set_mode(CameraMode.AUTOPILOT)
        logger.info("Autopilot engaged: navigating to %s", self._target.name)
        return True

    def cancel_autopilot(self):
        """Stop autopilot and restore the prior mode. No-op if inactive."""
        if not self._autopilot.active:
            return
        self._autopilot.active = False
        self._autopilot.progress = 0.0
        self._set_mode(self._previous_mode or CameraMode.FREE_FLIGHT)
        logger.info("Autopilot disengaged")

    def start_warp(self) -> bool:
        """
        Eased transit to a stand-off point beside the current target.

        The arrival point lies max(config.WARP_MIN_ARRIVAL, 5 radii) from
        the target centre on the side of the current camera position.

        Returns
        -------
        bool
            True if warp engaged
        """
        if self._target is None:
            navigation_warning("Cannot start warp: no target selected")
            return False
        if self._automation_busy("start warp"):
            return False
        if not is_finite_vector(self._position):
            navigation_warning(f"Cannot start warp: camera position is invalid "
                               f"{self._position}")
            return False

        target_position = self._live_position(self._target, self._snapshot)
        arrival_distance = max(config.WARP_MIN_ARRIVAL,
                               self._snapshot.radius * config.ARRIVAL_RADII)
        direction = self._position - target_position
        if np.linalg.norm(direction) < config.DEGENERATE_LENGTH:
            logger.debug("Warp departure coincides with target, using default axis")
        direction = safe_normalize(direction, DEFAULT_AXIS, config.DEGENERATE_LENGTH)
        arrival = target_position + direction * arrival_distance

        departure = self._position.copy()
        self._previous_mode = self._mode
        self._warp = WarpState(
            active=True,
            target=self._target,
            snapshot=self._snapshot,
            departure=departure,
            arrival=arrival,
            tween=Tween(departure, arrival, config.WARP_DURATION_MS, quintic_in_out),
        )
        self._velocity = np.zeros(3)
        self._set_mode(CameraMode.WARPING)
        logger.info("Warp engaged: warping to %s", self._target.name)
        return True

    def cancel_warp(self):
        """Stop warp where it is and restore the prior mode. No-op if inactive."""
        if not self._warp.active:
            return
        self._warp.active = False
        self._warp.progress = 0.0
        self._warp.tween = None
        self._set_mode(self._previous_mode or CameraMode.FREE_FLIGHT)
        logger.info("Warp disengaged")

    def cancel_all_automated_movement(self):
        """Cancel autopilot and warp and return to free flight."""
        self.cancel_autopilot()
        self.cancel_warp()
        self._set_mode(CameraMode.FREE_FLIGHT)

    def set_camera_mode(self, mode) -> bool:
        """
        Request a mode by enum or value string.

        Free flight cancels all automation; the other modes go through
        their start_* method and its guards.
        """
        mode = self._parse_mode(mode)
        if mode is CameraMode.FREE_FLIGHT:
            self.cancel_all_automated_movement()
            return True
        starters = {
            CameraMode.ORBIT: self.start_orbit,
            CameraMode.FOLLOW: self.start_follow,
            CameraMode.AUTOPILOT: self.start_autopilot,
            CameraMode.WARPING: self.start_warp,
        }
        return starters[mode]()

    # ========== SETTINGS ==========
    def set_settings(self, **kwargs):
        """
        Merge partial settings.

        Raises
        ------
        AttributeError
            If a key is not a CameraSettings field
        """
        valid = {f.name for f in fields(CameraSettings)}
        for key in kwargs:
            if key not in valid:
                raise AttributeError(f"CameraSettings has no attribute '{key}'. "
                                     f"Valid attributes: {sorted(valid)}")
        self._settings = replace(self._settings, **kwargs)

    def zoom(self, delta: float):
        """
        Scroll input: adjust target speed in free flight, orbit radius in orbit.
        """
        s = self._settings
        if self._mode is CameraMode.FREE_FLIGHT:
            self._target_speed = min(s.max_speed, max(
                s.min_speed, self._target_speed + delta * s.zoom_sensitivity))
        elif self._mode is CameraMode.ORBIT and self._target is not None:
            target_position = self._live_position(self._target, self._snapshot)
            offset = self._position - target_position
            new_distance = min(s.max_distance, max(
                s.min_distance,
                float(np.linalg.norm(offset)) + delta * s.zoom_sensitivity * 100))
            # keep the angle, change the distance
            self._position = target_position + safe_normalize(offset) * new_distance

    # ========== ORIENTATION ==========
    @property
    def direction(self) -> np.ndarray:
        """Unit forward vector from yaw and pitch"""
        cp = math.cos(self._pitch)
        return np.array([-math.sin(self._yaw) * cp,
                         math.sin(self._pitch),
                         -math.cos(self._yaw) * cp])

    @property
    def right(self) -> np.ndarray:
        return safe_normalize(np.cross(self.direction, UP), DEFAULT_AXIS)

    @property
    def rotation_matrix(self) -> np.ndarray:
        """Camera orientation, YXZ Euler order"""
        return rot_y(self._yaw) @ rot_x(self._pitch) @ rot_z(self._roll)

    @property
    def orientation(self) -> tuple:
        """(yaw, pitch, roll) [rad]"""
        return (self._yaw, self._pitch, self._roll)

    def look_at(self, point):
        """Turn the camera to face a point, levelling the roll."""
        d = np.asarray(point, dtype=float) - self._position
        if not is_finite_vector(d) or np.linalg.norm(d) == 0:
            return
        d = d / np.linalg.norm(d)
        self._yaw = math.atan2(-d[0], -d[2])
        self._pitch = math.asin(min(1.0, max(-1.0, d[1])))
        self._roll = 0.0

    # ========== TICK ==========
    def update(self, dt: float, intent: Optional[FlightIntent] = None):
        """
        Advance the camera by one frame.

        Parameters
        ----------
        dt : float
            Real frame time [s]. Values above config.MAX_CAMERA_DT, negative
            or non-finite values are replaced by config.FALLBACK_CAMERA_DT.
        intent : FlightIntent, optional
            Control intent, only used in free flight
        """
        if not math.isfinite(dt) or dt < 0 or dt > config.MAX_CAMERA_DT:
            dt = config.FALLBACK_CAMERA_DT
        if intent is None:
            intent = FlightIntent()

        if self._mode is CameraMode.FREE_FLIGHT:
            self._update_free_flight(dt, intent)
        elif self._mode is CameraMode.AUTOPILOT:
            self._update_autopilot(dt)
        elif self._mode is CameraMode.ORBIT:
            self._update_orbit(dt)
        elif self._mode is CameraMode.FOLLOW:
            self._update_follow()
        elif self._mode is CameraMode.WARPING:
            self._update_warp(dt)

        if self._target is None:
            self._check_proximity()

    def _update_free_flight(self, dt: float, intent: FlightIntent):
        s = self._settings
        boost = s.boost_multiplier if intent.boost else 1.0

        # target speed from forward intent, brake bleeds it off
        if intent.forward:
            self._target_speed = s.movement_speed * boost * intent.forward
        elif intent.brake:
            self._target_speed *= config.BRAKE_FACTOR
        smoothing = config.SPEED_SMOOTHING
        self._speed = self._speed * smoothing + self._target_speed * (1 - smoothing)

        # mouse look and roll
        if intent.yaw or intent.pitch:
            self._yaw -= intent.yaw * s.rotation_speed
            self._pitch -= intent.pitch * s.rotation_speed
            self._pitch = max(-config.PITCH_LIMIT, min(config.PITCH_LIMIT, self._pitch))
        if intent.roll:
            self._roll += config.ROLL_STEP * intent.roll

        thrust = intent.has_thrust
        if thrust or not s.inertia:
            velocity = self.direction * self._speed
            if intent.strafe:
                velocity = velocity + self.right * (intent.strafe * s.movement_speed * boost)
            if intent.vertical:
                velocity = velocity + UP * (intent.vertical * s.movement_speed * boost)
            self._velocity = velocity

        if s.inertia:
            self._velocity = self._velocity + self.gravity_acceleration() * dt

        self._position = self._position + self._velocity * dt

        if s.inertia and not thrust:
            self._velocity = self._velocity * s.damping_factor
            if np.linalg.norm(self._velocity) < config.VELOCITY_EPSILON:
                self._velocity = np.zeros(3)

        self._reported_speed = float(np.linalg.norm(self._velocity))

    def gravity_acceleration(self) -> np.ndarray:
        """
        Summed, scaled gravitational pull of nearby bodies [km/s²].

        Bodies farther than config.GRAVITY_INFLUENCE_RANGE or closer than
        GRAVITY_MIN_RADII radii are ignored. The sum is multiplied by
        config.GRAVITY_SCALE; this is a feel-tuning perturbation, not a
        dynamics model.
        """
        acceleration = np.zeros(3)
        for body in self._bodies:
            if not is_finite_vector(body.position):
                continue
            offset = np.asarray(body.position, dtype=float) - self._position
            distance = float(np.linalg.norm(offset))
            if (distance > config.GRAVITY_INFLUENCE_RANGE
                    or distance < body.radius * config.GRAVITY_MIN_RADII):
                continue
            magnitude = config.GRAVITY_CONSTANT * body.mass / distance**2
            acceleration += offset / distance * magnitude
        return acceleration * config.GRAVITY_SCALE

    def _update_autopilot(self, dt: float):
        ap = self._autopilot
        if not ap.active:
            return
        target_position = self._live_position(ap.target, ap.snapshot)
        offset = target_position - self._position
        distance = float(np.linalg.norm(offset))
        if distance <= ap.arrival_distance:
            self._complete_autopilot()
            return

        raw = 1 - distance / ap.initial_distance if ap.initial_distance > 0 else 1.0
        ap.progress = max(ap.progress, min(1.0, max(0.0, raw)))

        s = self._settings
        base_speed = min(s.max_speed, max(s.movement_speed, distance / 10))
        speed = base_speed * autopilot_speed_factor(ap.progress)
        direction = offset / distance

        # never step inside the arrival sphere
        remaining = distance - ap.arrival_distance
        step = speed * dt
        arrived = step >= remaining
        if arrived:
            step = remaining
        self._position = self._position + direction * step
        self._velocity = direction * speed
        self._reported_speed = speed
        self.look_at(target_position)
        if arrived:
            self._complete_autopilot()

    def _complete_autopilot(self):
        ap = self._autopilot
        ap.completed = True
        ap.active = False
        ap.progress = 0.0
        self._velocity = np.zeros(3)
        logger.info("Autopilot complete: arrived at %s", ap.snapshot.name)
        self._settle_on(ap.target, ap.snapshot)
        self._set_mode(CameraMode.ORBIT)

    def _settle_on(self, body, snapshot: TargetSnapshot):
        """Restore the body a flight arrived at as the orbit target."""
        if self._target is body:
            return
        self._target = body
        self._snapshot = snapshot
        if self.on_target_change is not None:
            self.on_target_change(body)

    def _update_orbit(self, dt: float):
        if self._target is None:
            return
        target_position = self._live_position(self._target, self._snapshot)
        offset = self._position - target_position
        offset = rotate_about_axis(offset, UP, config.ORBIT_ANGULAR_RATE * dt)
        self._position = target_position + offset
        self.look_at(target_position)
        self._velocity = np.zeros(3)
        self._reported_speed = 0.0

    def _update_follow(self):
        if self._target is None:
            return
        target_position = self._live_position(self._target, self._snapshot)
        r = self._snapshot.radius
        follow_offset = np.array([-config.FOLLOW_DISTANCE_RADII * r,
                                  config.FOLLOW_HEIGHT_RADII * r, 0.0])
        # slow drift around the target in real time
        angle = self._time_source() * config.FOLLOW_DRIFT_RATE
        follow_offset = rot_y(angle) @ follow_offset
        desired = target_position + follow_offset
        self._position = self._position + (desired - self._position) * config.FOLLOW_BLEND
        self.look_at(target_position)
        self._velocity = np.zeros(3)
        self._reported_speed = 0.0

    def _update_warp(self, dt: float):
        warp = self._warp
        if not warp.active or warp.tween is None:
            return
        previous = self._position
        self._position = warp.tween.advance(dt * 1000.0)
        warp.progress = warp.tween.eased
        self._reported_speed = float(np.linalg.norm(self._position - previous)) / dt \
            if dt > 0 else 0.0
        self.look_at(self._live_position(warp.target, warp.snapshot))
        if warp.tween.finished:
            self._position = warp.arrival.copy()
            warp.active = False
            warp.progress = 0.0
            warp.tween = None
            self._reported_speed = 0.0
            logger.info("Warp complete: arrived at %s", warp.snapshot.name)
            self._settle_on(warp.target, warp.snapshot)
            self._set_mode(CameraMode.ORBIT)

    def _check_proximity(self):
        """Auto-select the nearest body when inside its proximity radius."""
        closest, closest_distance = None, math.inf
        for body in self._bodies:
            if not is_finite_vector(body.position):
                continue
            distance = float(np.linalg.norm(np.asarray(body.position) - self._position))
            if distance < closest_distance:
                closest, closest_distance = body, distance
        if closest is not None and closest_distance < closest.radius * config.PROXIMITY_RADII:
            self.set_target(closest)

    # ========== PROPERTY ACCESS ==========
    @property
    def bodies(self) -> tuple:
        return tuple(self._bodies)

    def set_bodies(self, bodies):
        """Replace the bodies used for gravity and proximity."""
        self._bodies = list(bodies)

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, value):
        value = np.asarray(value, dtype=float)
        if not is_finite_vector(value):
            navigation_warning(f"Ignoring invalid camera position {value}")
            return
        self._position = value.copy()

    @property
    def velocity(self) -> np.ndarray:
        return self._velocity.copy()

    @property
    def speed(self) -> float:
        """Speed reported to the host [km/s], 0 in orbit and follow"""
        return self._reported_speed

    @property
    def target_speed(self) -> float:
        return self._target_speed

    @property
    def settings(self) -> CameraSettings:
        return self._settings

    @property
    def mode(self) -> CameraMode:
        return self._mode

    @property
    def previous_mode(self) -> Optional[CameraMode]:
        return self._previous_mode

    @property
    def target(self):
        return self._target

    @property
    def target_snapshot(self) -> Optional[TargetSnapshot]:
        return self._snapshot

    @property
    def autopilot(self) -> AutopilotState:
        return self._autopilot

    @property
    def warp(self) -> WarpState:
        return self._warp

    @property
    def is_autopilot_active(self) -> bool:
        return self._autopilot.active

    @property
    def is_warp_active(self) -> bool:
        return self._warp.active

    @property
    def autopilot_progress(self) -> float:
        """Approach progress in [0, 1], 0 when autopilot is inactive"""
        return self._autopilot.progress if self._autopilot.active else 0.0

    @property
    def warp_progress(self) -> float:
        """Eased warp progress in [0, 1], 0 when warp is inactive"""
        return self._warp.progress if self._warp.active else 0.0

    @property
    def flight_path(self) -> Optional[FlightPath]:
        return self._autopilot.flight_path if self._autopilot.active else None

    def __repr__(self):
        target = self._target.name if self._target is not None else None
        return (f"NavigationController(mode='{self._mode.value}', "
                f"target={target!r}, speed={self._reported_speed:.1f} km/s)")

    # ========== STATIC METHODS ==========
    @staticmethod
    def _parse_mode(mode):
        """Convert string or enum to CameraMode enum"""
        if isinstance(mode, CameraMode):
            return mode
        elif isinstance(mode, str):
            try:
                return CameraMode(mode.lower())
            except ValueError:
                raise ValueError(f"Unknown camera mode '{mode}'. "
                                 f"Use: {[m.value for m in CameraMode]}") from None
        else:
            raise TypeError(f"mode must be CameraMode or str, got {type(mode)}")
