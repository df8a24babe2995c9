'''Simulation clock for the orrery package
Owns simulated time, the time-scale multiplier, the physics model selector
and the body registry'''

import logging
import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional
from .config import config
from .bodies import BodyConfig, CelestialBody, SECONDS_PER_DAY, SECONDS_PER_CENTURY
from .kepler import KeplerianModel, reset_to_epoch_offset
from .nbody import NBodyModel
from .utils import navigation_warning

logger = logging.getLogger(__name__)

# J2000 epoch: 2000-01-01 12:00:00 UTC, Julian date 2451545.0
J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
J2000_JD = 2451545.0
DATE_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


# define an enumerated list of physics models
class PhysicsModel(Enum):
    KEPLERIAN = 'kepler'
    N_BODY = 'nbody'


class SimulationClock:
    """
    Tick-driven simulated time for a set of bodies.

    Each call to advance() measures the real time since the previous call,
    clamps it, scales it by the time-scale multiplier and moves every body
    forward through the active physics model. The simulated date is
    published to an optional callback at most once per
    config.DATE_EMIT_INTERVAL_MS of real time.

    Parameters
    ----------
    bodies : iterable of CelestialBody or BodyConfig, optional
        Initial bodies. Names must be unique (case-insensitive).
    start_date : datetime or str, optional
        Initial simulated date. Naive datetimes are taken as UTC.
        Default: the J2000 epoch
    time_scale : float, optional
        Simulated seconds per real second. Default: 1.0
    physics_model : PhysicsModel, str or bool, optional
        Default: PhysicsModel.KEPLERIAN
    relativistic : bool, optional
        Apply perihelion precession to bodies that have it enabled.
        Default: False
    on_date_update : callable, optional
        Called with the formatted simulated date string

    Examples
    --------
    >>> from orrery import SimulationClock, solar_system
    >>> clock = SimulationClock(solar_system(), time_scale=86400)
    >>> clock.advance(0.0)      # first call sets the real-time baseline
    0.0
    >>> clock.advance(50.0)     # 50 ms of real time -> 1.2 simulated hours
    4320.0
    """

    def __init__(
        self,
        bodies=None,
        start_date=None,
        time_scale: float = 1.0,
        physics_model=PhysicsModel.KEPLERIAN,
        relativistic: bool = False,
        on_date_update: Optional[Callable[[str], None]] = None,
    ):
        self._bodies = []
        self._time_scale = 1.0
        self._relativistic = bool(relativistic)
        self._models = {
            PhysicsModel.KEPLERIAN: KeplerianModel(),
            PhysicsModel.N_BODY: NBodyModel(),
        }
        self._physics_model = self._parse_physics_model(physics_model)
        self._sim_seconds = 0.0
        self._last_real_ms = None
        self._last_emit_ms = None
        self.on_date_update = on_date_update

        for body in bodies or ():
            self._register(body)
        self.set_time_scale(time_scale)
        self.set_date(J2000 if start_date is None else start_date)

    # ========== TICK ==========
    def advance(self, now_ms: float) -> float:
        """
        Advance simulated time to match a real-time timestamp.

        Parameters
        ----------
        now_ms : float
            Monotonic real-time timestamp [ms]

        Returns
        -------
        float
            Simulated seconds applied this tick
        """
        if not math.isfinite(now_ms):
            navigation_warning(f"Ignoring non-finite clock timestamp {now_ms}")
            return 0.0
        if self._last_real_ms is None:
            self._last_real_ms = now_ms
            self._emit_date(now_ms, force=True)
            return 0.0

        real_dt = (now_ms - self._last_real_ms) / 1000.0
        self._last_real_ms = now_ms
        # clamp stalls and clock jumps backwards
        real_dt = min(max(real_dt, 0.0), config.MAX_PHYSICS_DT)
        scaled_dt = real_dt * self._time_scale

        if scaled_dt != 0.0:
            try:
                self.model.step(self._bodies, scaled_dt, self._relativistic)
            except ValueError as err:
                if self._physics_model is not PhysicsModel.N_BODY:
                    raise
                navigation_warning(f"N-body step failed, bodies unchanged: {err}")
                scaled_dt = 0.0
            self._sim_seconds += scaled_dt

        self._emit_date(now_ms)
        return scaled_dt

    def _emit_date(self, now_ms: float, force: bool = False):
        if self.on_date_update is None:
            return
        if (not force and self._last_emit_ms is not None
                and now_ms - self._last_emit_ms < config.DATE_EMIT_INTERVAL_MS):
            return
        self._last_emit_ms = now_ms
        self.on_date_update(self.get_formatted_date())

    # ========== CONTROLS ==========
    def set_time_scale(self, scale: float):
        """
        Set simulated seconds per real second. 0 pauses the simulation.

        Negative values are clamped to 0 and non-finite values are ignored,
        both with a NavigationWarning.
        """
        scale = float(scale)
        if not math.isfinite(scale):
            navigation_warning(f"Ignoring non-finite time scale {scale}")
            return
        if scale < 0:
            navigation_warning(f"Time scale {scale} is negative, pausing instead")
            scale = 0.0
        self._time_scale = scale

    def set_date(self, date):
        """
        Jump to an absolute simulated date.

        Every body is placed directly from its J2000 elements, so the
        result does not depend on any earlier date or tick history.

        Parameters
        ----------
        date : datetime or str
            Target date. Strings are parsed with datetime.fromisoformat.
            Naive datetimes are taken as UTC.
        """
        date = self._parse_date(date)
        self._sim_seconds = (date - J2000).total_seconds()
        self.model.reset(self._bodies, self._sim_seconds, self._relativistic)
        # next advance() starts a fresh real-time baseline
        self._last_real_ms = None
        logger.debug("Simulated date set to %s", self.get_formatted_date())
        if self.on_date_update is not None:
            self.on_date_update(self.get_formatted_date())

    def set_physics_model(self, model):
        """
        Select the physics model.

        Parameters
        ----------
        model : PhysicsModel, str or bool
            'kepler' / 'nbody', or True for N-body and False for Keplerian

        Notes
        -----
        Returning to the Keplerian model re-anchors every body on its
        elements at the current simulated date.
        """
        new_model = self._parse_physics_model(model)
        if new_model is self._physics_model:
            return
        self._physics_model = new_model
        if new_model is PhysicsModel.KEPLERIAN:
            self.model.reset(self._bodies, self._sim_seconds, self._relativistic)
        logger.info("Physics model set to %s", new_model.value)

    def set_relativistic_effects(self, enabled: bool):
        """Enable or disable the perihelion precession correction."""
        self._relativistic = bool(enabled)
        logger.info("Relativistic precession %s",
                    "enabled" if self._relativistic else "disabled")

    # ========== BODY REGISTRY ==========
    def _register(self, body) -> CelestialBody:
        if isinstance(body, BodyConfig):
            body = CelestialBody.from_config(body)
        elif not isinstance(body, CelestialBody):
            raise TypeError(f"body must be CelestialBody or BodyConfig, got {type(body)}")
        if self.get_body(body.name) is not None:
            raise ValueError(f"A body named '{body.name}' already exists")
        self._bodies.append(body)
        return body

    def add_body(self, body) -> CelestialBody:
        """
        Add a body and place it at the current simulated date.

        Raises
        ------
        ValueError
            If a body with the same name (case-insensitive) exists
        """
        body = self._register(body)
        reset_to_epoch_offset(body, self._sim_seconds, self._relativistic)
        logger.info("Added body %s", body.name)
        return body

    def remove_body(self, name: str) -> CelestialBody:
        """
        Remove a body by name (case-insensitive).

        Raises
        ------
        KeyError
            If no body has that name
        """
        body = self.get_body(name)
        if body is None:
            raise KeyError(f"No body named '{name}'")
        self._bodies.remove(body)
        logger.info("Removed body %s", body.name)
        return body

    def get_body(self, name: str) -> Optional[CelestialBody]:
        """Look up a body by case-insensitive name, None if absent."""
        key = name.lower()
        for body in self._bodies:
            if body.name.lower() == key:
                return body
        return None

    # ========== PROPERTY ACCESS ==========
    @property
    def bodies(self) -> tuple:
        return tuple(self._bodies)

    @property
    def central_body(self) -> Optional[CelestialBody]:
        for body in self._bodies:
            if body.is_central:
                return body
        return None

    @property
    def model(self):
        """Active physics model strategy"""
        return self._models[self._physics_model]

    @property
    def physics_model(self) -> PhysicsModel:
        return self._physics_model

    @property
    def relativistic_effects(self) -> bool:
        return self._relativistic

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def paused(self) -> bool:
        return self._time_scale == 0.0

    @property
    def seconds_since_epoch(self) -> float:
        """Simulated seconds since J2000"""
        return self._sim_seconds

    @property
    def current_date(self) -> datetime:
        return J2000 + timedelta(seconds=self._sim_seconds)

    @property
    def julian_date(self) -> float:
        return J2000_JD + self._sim_seconds / SECONDS_PER_DAY

    @property
    def julian_centuries(self) -> float:
        """Julian centuries since J2000"""
        return self._sim_seconds / SECONDS_PER_CENTURY

    def get_formatted_date(self) -> str:
        """Simulated date as 'YYYY-MM-DD HH:MM:SS UTC'."""
        return self.current_date.strftime(DATE_FORMAT)

    def __repr__(self):
        return (f"SimulationClock(date='{self.get_formatted_date()}', "
                f"time_scale={self._time_scale}, "
                f"model='{self._physics_model.value}', bodies={len(self._bodies)})")

    # ========== STATIC METHODS ==========
    @staticmethod
    def _parse_date(date) -> datetime:
        """Convert datetime or ISO string to an aware UTC datetime"""
        if isinstance(date, str):
            date = datetime.fromisoformat(date)
        elif not isinstance(date, datetime):
            raise TypeError(f"date must be datetime or str, got {type(date)}")
        if date.tzinfo is None:
            return date.replace(tzinfo=timezone.utc)
        return date.astimezone(timezone.utc)

    @staticmethod
    def _parse_physics_model(model):
        """Convert string, bool or enum to PhysicsModel enum"""
        if isinstance(model, PhysicsModel):
            return model
        elif isinstance(model, bool):
            return PhysicsModel.N_BODY if model else PhysicsModel.KEPLERIAN
        elif isinstance(model, str):
            # Map string to enum
            model_map = {
                'kepler': PhysicsModel.KEPLERIAN,
                'keplerian': PhysicsModel.KEPLERIAN,
                'Kepler': PhysicsModel.KEPLERIAN,
                'nbody': PhysicsModel.N_BODY,
                'Nbody': PhysicsModel.N_BODY,
                'n_body': PhysicsModel.N_BODY,
                'N_BODY': PhysicsModel.N_BODY,
            }
            if model in model_map:
                return model_map[model]
            else:
                raise ValueError(f"Unknown physics model '{model}'. "
                                 f"Use: {list(model_map.keys())}")
        else:
            raise TypeError(f"physics model must be PhysicsModel, str or bool, "
                            f"got {type(model)}")
