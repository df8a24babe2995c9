"""
Orrery: Solar System Simulation and Camera Navigation

A Python package for Keplerian propagation of solar-system bodies, an
optional N-body model using high-performance Taylor series integration,
and a multi-mode camera navigation state machine for interactive hosts.
"""

# Configuration
from .config import config, temp_config

# Core classes
from .bodies import BodyConfig, CelestialBody
from .clock import SimulationClock, PhysicsModel
from .kepler import KeplerianModel, solve_kepler, propagate, axial_orientation
from .nbody import NBodyModel
from .navigation import (NavigationController, CameraMode, CameraSettings,
                         FlightIntent, TargetSnapshot)
from .tween import Tween
from .trajectory import FlightPath, orbit_path, states_dataframe, plot_system
from .context import SimulationContext, FrameState
from .utils import NavigationWarning

# Solar System bodies
from .defaults import (SUN, MERCURY, VENUS, EARTH, MARS, JUPITER, SATURN,
                       URANUS, NEPTUNE, PLUTO, SOLAR_SYSTEM, solar_system)

# Package metadata
__version__ = "0.1.0"
__author__ = "Shane Billingsley"

# Define what gets imported with "from orrery import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    # Classes
    "BodyConfig",
    "CelestialBody",
    "SimulationClock",
    "PhysicsModel",
    "KeplerianModel",
    "NBodyModel",
    "NavigationController",
    "CameraMode",
    "CameraSettings",
    "FlightIntent",
    "TargetSnapshot",
    "Tween",
    "FlightPath",
    "SimulationContext",
    "FrameState",
    "NavigationWarning",
    # Functions
    "solve_kepler",
    "propagate",
    "axial_orientation",
    "orbit_path",
    "states_dataframe",
    "plot_system",
    "solar_system",
    # Constants
    "SUN",
    "MERCURY",
    "VENUS",
    "EARTH",
    "MARS",
    "JUPITER",
    "SATURN",
    "URANUS",
    "NEPTUNE",
    "PLUTO",
    "SOLAR_SYSTEM",
]
