'''Host facade for the orrery package
SimulationContext ties one clock and one camera controller together and
produces a FrameState per rendered frame'''

import logging
import math
import numpy as np
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol
from .config import config
from .defaults import solar_system
from .clock import SimulationClock
from .navigation import (NavigationController, CameraMode, CameraSettings,
                         FlightIntent, DEFAULT_CAMERA_POSITION)
from .trajectory import orbit_path
from .utils import navigation_warning, is_finite_vector, safe_normalize

logger = logging.getLogger(__name__)


class SceneSink(Protocol):
    """
    Render-side collaborator mirroring simulation state onto visuals.

    Exceptions raised here are logged and never interrupt a tick.
    """

    def update_bodies(self, bodies) -> None: ...

    def update_camera(self, position: np.ndarray, rotation: np.ndarray,
                      mode: CameraMode) -> None: ...


@dataclass(frozen=True)
class FrameState:
    """
    Per-tick values published to the host.

    Attributes
    ----------
    camera_position : np.ndarray
        [km]
    camera_velocity : np.ndarray
        [km/s]
    camera_speed : float
        Reported speed [km/s]
    mode : CameraMode
    autopilot_progress : float
        0 when autopilot is inactive
    warp_progress : float
        0 when warp is inactive
    target : str or None
        Name of the selected target
    date : str
        Last published simulated date
    """
    camera_position: np.ndarray
    camera_velocity: np.ndarray
    camera_speed: float
    mode: CameraMode
    autopilot_progress: float
    warp_progress: float
    target: Optional[str]
    date: str


class SimulationContext:
    """
    Explicit simulation context owned by the host.

    Holds one SimulationClock and one NavigationController that share the
    same body objects. The host calls tick() once per rendered frame.

    Parameters
    ----------
    bodies : iterable of CelestialBody or BodyConfig, optional
        Default: a fresh solar_system()
    start_date : datetime or str, optional
        Default: the J2000 epoch
    camera_position : array_like, optional
    settings : CameraSettings, optional
    sink : SceneSink, optional
    on_date_update, on_mode_change, on_target_change : callable, optional
        Forwarded host callbacks
    time_source : callable, optional
        Real time in ms for follow-mode drift

    Examples
    --------
    >>> ctx = SimulationContext()
    >>> ctx.set_time_scale(86400)
    >>> frame = ctx.tick(0.0)
    >>> frame = ctx.tick(16.0)
    >>> frame.mode
    <CameraMode.FREE_FLIGHT: 'free_flight'>
    """

    def __init__(
        self,
        bodies=None,
        start_date=None,
        camera_position=DEFAULT_CAMERA_POSITION,
        settings: Optional[CameraSettings] = None,
        sink: Optional[SceneSink] = None,
        on_date_update: Optional[Callable[[str], None]] = None,
        on_mode_change: Optional[Callable[[CameraMode], None]] = None,
        on_target_change: Optional[Callable[[object], None]] = None,
        time_source: Optional[Callable[[], float]] = None,
    ):
        if bodies is None:
            bodies = solar_system()
        self._on_date_update = on_date_update
        self._date = ""
        self.clock = SimulationClock(bodies, start_date=start_date,
                                     on_date_update=self._publish_date)
        self.navigation = NavigationController(
            self.clock.bodies,
            position=camera_position,
            settings=settings,
            on_mode_change=on_mode_change,
            on_target_change=on_target_change,
            time_source=time_source,
        )
        self.sink = sink
        self._show_orbits = False
        self._last_tick_ms = None

    def _publish_date(self, date: str):
        self._date = date
        if self._on_date_update is not None:
            self._on_date_update(date)

    # ========== TICK ==========
    def tick(self, now_ms: float, intent: Optional[FlightIntent] = None,
             dt: Optional[float] = None) -> FrameState:
        """
        Advance the clock and the camera by one frame.

        Parameters
        ----------
        now_ms : float
            Monotonic real-time timestamp [ms]
        intent : FlightIntent, optional
            Free-flight control intent for this frame
        dt : float, optional
            Camera frame time [s]. Default: the real time since the last
            tick, clamped to [0, config.MAX_PHYSICS_DT]

        Returns
        -------
        FrameState
        """
        self.clock.advance(now_ms)
        if dt is None:
            if self._last_tick_ms is None or not math.isfinite(now_ms):
                dt = 0.0
            else:
                dt = (now_ms - self._last_tick_ms) / 1000.0
                dt = min(max(dt, 0.0), config.MAX_PHYSICS_DT)
        if math.isfinite(now_ms):
            self._last_tick_ms = now_ms
        self.navigation.update(dt, intent)

        if self.sink is not None:
            try:
                self.sink.update_bodies(self.clock.bodies)
                self.sink.update_camera(self.navigation.position,
                                        self.navigation.rotation_matrix,
                                        self.navigation.mode)
            except Exception:
                logger.exception("Scene sink failed, continuing")

        return self.frame_state()

    def frame_state(self) -> FrameState:
        nav = self.navigation
        target = nav.target
        return FrameState(
            camera_position=nav.position,
            camera_velocity=nav.velocity,
            camera_speed=nav.speed,
            mode=nav.mode,
            autopilot_progress=nav.autopilot_progress,
            warp_progress=nav.warp_progress,
            target=target.name if target is not None else None,
            date=self._date,
        )

    # ========== SIMULATION CONTROLS ==========
    def set_time_scale(self, value: float):
        self.clock.set_time_scale(value)

    def set_date(self, date):
        self.clock.set_date(date)

    def set_physics_model(self, use_nbody: bool):
        self.clock.set_physics_model(bool(use_nbody))

    def set_relativistic_effects(self, enabled: bool):
        self.clock.set_relativistic_effects(enabled)

    def set_show_orbits(self, show: bool):
        self._show_orbits = bool(show)

    @property
    def show_orbits(self) -> bool:
        return self._show_orbits

    def orbit_paths(self) -> Dict[str, np.ndarray]:
        """Orbit polylines by body name when orbits are shown, else empty."""
        if not self._show_orbits:
            return {}
        relativistic = self.clock.relativistic_effects
        return {body.name: orbit_path(body, relativistic=relativistic)
                for body in self.clock.bodies if not body.is_central}

    # ========== BODY REGISTRY ==========
    def add_body(self, body):
        body = self.clock.add_body(body)
        self.navigation.set_bodies(self.clock.bodies)
        return body

    def remove_body(self, name: str):
        body = self.clock.remove_body(name)
        self.navigation.set_bodies(self.clock.bodies)
        if self.navigation.target is body:
            self.navigation.cancel_all_automated_movement()
            self.navigation.clear_target()
        return body

    def get_body(self, name: str):
        return self.clock.get_body(name)

    # ========== NAVIGATION CONTROLS ==========
    def _automation_busy(self, action: str) -> bool:
        nav = self.navigation
        if nav.is_autopilot_active or nav.is_warp_active:
            active = "autopilot" if nav.is_autopilot_active else "warp"
            navigation_warning(f"Cannot {action}: {active} is active")
            return True
        return False

    def _lookup(self, name: str, action: str):
        body = self.clock.get_body(name)
        if body is None:
            navigation_warning(f"Cannot {action}: body '{name}' not found")
        return body

    def set_target(self, name: str) -> bool:
        body = self._lookup(name, "set target")
        if body is None:
            return False
        return self.navigation.set_target(body)

    def clear_target(self):
        self.navigation.clear_target()

    def warp_to_planet(self, name: str) -> bool:
        """
        Select a body and warp to it.

        Refused with a NavigationWarning, leaving the target unchanged,
        while autopilot or warp is active.

        A body whose live position is non-finite is first restored to its
        reference position (a, 0, 0), with a NavigationWarning.
        """
        if self._automation_busy("warp"):
            return False
        body = self._lookup(name, "warp")
        if body is None:
            return False
        if not is_finite_vector(body.position):
            navigation_warning(f"Body '{body.name}' has invalid coordinates, "
                               f"restoring its default position")
            body.position = body.reference_position
        if not self.navigation.set_target(body):
            return False
        return self.navigation.start_warp()

    def follow_planet(self, name: str) -> bool:
        if self._automation_busy("follow"):
            return False
        body = self._lookup(name, "follow")
        if body is None:
            return False
        if not self.navigation.set_target(body):
            return False
        return self.navigation.start_follow()

    def start_autopilot(self) -> bool:
        return self.navigation.start_autopilot()

    def cancel_autopilot(self):
        self.navigation.cancel_autopilot()

    def set_camera_mode(self, mode) -> bool:
        return self.navigation.set_camera_mode(mode)

    def cancel_all_automated_movement(self):
        self.navigation.cancel_all_automated_movement()

    # ========== PICKING ==========
    def pick(self, origin, direction):
        """
        Nearest body hit by a ray, treating bodies as spheres.

        Parameters
        ----------
        origin : array_like
            Ray origin [km]
        direction : array_like
            Ray direction, need not be normalized

        Returns
        -------
        CelestialBody or None
        """
        origin = np.asarray(origin, dtype=float)
        if not is_finite_vector(origin) or not is_finite_vector(direction):
            return None
        d = np.asarray(direction, dtype=float)
        if np.linalg.norm(d) == 0:
            return None
        d = safe_normalize(d)

        closest, closest_t = None, math.inf
        for body in self.clock.bodies:
            if not is_finite_vector(body.position):
                continue
            oc = origin - body.position
            b = float(np.dot(oc, d))
            c = float(np.dot(oc, oc)) - body.radius**2
            disc = b * b - c
            if disc < 0:
                continue
            root = math.sqrt(disc)
            t = -b - root
            if t < 0:
                # origin inside the sphere
                t = -b + root
            if 0 <= t < closest_t:
                closest, closest_t = body, t
        return closest

    def select_at(self, origin, direction) -> bool:
        """Pick along a ray and make the hit body the target."""
        body = self.pick(origin, direction)
        if body is None:
            return False
        return self.navigation.set_target(body)

    def __repr__(self):
        return f"SimulationContext({self.clock!r}, {self.navigation!r})"
