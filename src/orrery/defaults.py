"""
Default Solar System Configuration
==================================

Static element table for the Sun, the eight planets and Pluto, and a
factory that builds fresh runtime bodies from it.

Each call to ``solar_system()`` returns new CelestialBody objects, so
independent simulations never share mutable state.

Examples
--------
>>> from orrery import solar_system, EARTH
>>> bodies = solar_system()
>>> [b.name for b in bodies][:4]
['Sun', 'Mercury', 'Venus', 'Earth']
>>> EARTH.semi_major_axis
149597890.0
"""
from .bodies import BodyConfig, CelestialBody

"""
Predefined Solar System bodies
Angles in degrees, periods in days, distances in km, masses in kg.
Mean anomalies are referenced to the J2000 epoch.
Precession rates are the observed relativistic perihelion advance
[arcsec/century] and are enabled for the four inner planets.
"""
SUN = BodyConfig(
    name='Sun',
    mass=1.989e30,
    radius=696342.0,
    rotation_period=25.05,
    axial_tilt=7.25,
    color='yellow'
)

MERCURY = BodyConfig(
    name='Mercury',
    mass=3.285e23,
    radius=2439.7,
    rotation_period=58.65,
    axial_tilt=0.034,
    semi_major_axis=57909050.0,
    eccentricity=0.2056,
    orbital_period=87.969,
    inclination=7.0,
    longitude_of_ascending_node=48.33,
    argument_of_perihelion=29.124,
    mean_anomaly=174.796,
    precession_rate=42.98,
    precession_enabled=True,
    color='gray'
)

VENUS = BodyConfig(
    name='Venus',
    mass=4.867e24,
    radius=6052.0,
    rotation_period=243.0,
    axial_tilt=177.36,
    semi_major_axis=108208930.0,
    eccentricity=0.0067,
    orbital_period=224.701,
    inclination=3.39,
    longitude_of_ascending_node=76.68,
    argument_of_perihelion=54.85,
    mean_anomaly=50.115,
    retrograde=True,
    precession_rate=8.62,
    precession_enabled=True,
    color='khaki'
)

EARTH = BodyConfig(
    name='Earth',
    mass=5.972e24,
    radius=6371.0,
    rotation_period=0.99726968,
    axial_tilt=23.439,
    semi_major_axis=149597890.0,
    eccentricity=0.0167,
    orbital_period=365.256,
    inclination=0.0,
    longitude_of_ascending_node=174.873,
    argument_of_perihelion=288.064,
    mean_anomaly=358.617,
    moons=1,
    precession_rate=3.84,
    precession_enabled=True,
    color='royalblue'
)

MARS = BodyConfig(
    name='Mars',
    mass=6.39e23,
    radius=3389.5,
    rotation_period=1.025957,
    axial_tilt=25.19,
    semi_major_axis=227936640.0,
    eccentricity=0.0934,
    orbital_period=686.98,
    inclination=1.85,
    longitude_of_ascending_node=49.58,
    argument_of_perihelion=286.5,
    mean_anomaly=19.412,
    moons=2,
    precession_rate=1.35,
    precession_enabled=True,
    color='orangered'
)

JUPITER = BodyConfig(
    name='Jupiter',
    mass=1.898e27,
    radius=69911.0,
    rotation_period=0.41354,
    axial_tilt=3.13,
    semi_major_axis=778547200.0,
    eccentricity=0.0489,
    orbital_period=4332.59,
    inclination=1.305,
    longitude_of_ascending_node=100.56,
    argument_of_perihelion=273.88,
    mean_anomaly=20.020,
    has_rings=True,
    moons=95,
    color='burlywood'
)

SATURN = BodyConfig(
    name='Saturn',
    mass=5.683e26,
    radius=58232.0,
    rotation_period=0.444,
    axial_tilt=26.73,
    semi_major_axis=1433449370.0,
    eccentricity=0.0565,
    orbital_period=10759.22,
    inclination=2.485,
    longitude_of_ascending_node=113.72,
    argument_of_perihelion=339.39,
    mean_anomaly=317.020,
    has_rings=True,
    moons=146,
    color='goldenrod'
)

# Uranus has a 97.77° obliquity but spins in the orbital sense
URANUS = BodyConfig(
    name='Uranus',
    mass=8.681e25,
    radius=25559.0,
    rotation_period=0.71833,
    axial_tilt=97.77,
    semi_major_axis=2870658186.0,
    eccentricity=0.046381,
    orbital_period=30688.5,
    inclination=0.772,
    longitude_of_ascending_node=74.23,
    argument_of_perihelion=96.7,
    mean_anomaly=142.238,
    extreme_tilt=True,
    has_rings=True,
    moons=28,
    color='paleturquoise'
)

NEPTUNE = BodyConfig(
    name='Neptune',
    mass=1.024e26,
    radius=24764.0,
    rotation_period=0.67125,
    axial_tilt=28.32,
    semi_major_axis=4498396441.0,
    eccentricity=0.01,
    orbital_period=60190.0,
    inclination=1.77,
    longitude_of_ascending_node=131.78,
    argument_of_perihelion=272.85,
    mean_anomaly=256.228,
    has_rings=True,
    moons=16,
    color='dodgerblue'
)

PLUTO = BodyConfig(
    name='Pluto',
    mass=1.303e22,
    radius=1188.3,
    rotation_period=6.3872,
    axial_tilt=122.53,
    semi_major_axis=5906380624.0,
    eccentricity=0.2488,
    orbital_period=90560.0,
    inclination=17.15,
    longitude_of_ascending_node=110.3,
    argument_of_perihelion=113.83,
    mean_anomaly=14.53,
    retrograde=True,
    moons=5,
    color='tan'
)

SOLAR_SYSTEM = (SUN, MERCURY, VENUS, EARTH, MARS, JUPITER,
                SATURN, URANUS, NEPTUNE, PLUTO)

def solar_system(configs=SOLAR_SYSTEM) -> list:
    """
    Build fresh runtime bodies for a body table.

    Parameters
    ----------
    configs : iterable of BodyConfig, optional
        Static body table. Default: SOLAR_SYSTEM

    Returns
    -------
    list of CelestialBody
        One new body per table row, central body first if present
    """
    return [CelestialBody.from_config(cfg) for cfg in configs]
