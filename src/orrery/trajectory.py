'''Path geometry and export for the orrery package
Orbit polylines, autopilot flight-path previews, pandas export and
plotly 3-D figures'''

import numpy as np
import pandas as pd
from typing import Optional
import plotly.graph_objects as go
from .config import config
from .bodies import CelestialBody
from .kepler import perifocal_dcm, precession_offset


def orbit_path(body: CelestialBody, segments: Optional[int] = None,
               relativistic: bool = False) -> np.ndarray:
    """
    Closed polyline tracing a body's current orbital ellipse.

    Uses the polar form r = a(1 - e²) / (1 + e cos θ) in the perifocal
    frame, rotated with the body's current elements (and accumulated
    precession when `relativistic` applies to the body).

    Parameters
    ----------
    body : CelestialBody
        Orbiting body. The central body has no orbit.
    segments : int, optional
        Number of line segments. Default: config.ORBIT_SEGMENTS
    relativistic : bool, optional
        Include the body's accumulated perihelion precession

    Returns
    -------
    np.ndarray
        Array of shape (segments + 1, 3) [km]; first and last points coincide.
        Shape (0, 3) for the central body.
    """
    if body.is_central:
        return np.zeros((0, 3))
    if segments is None:
        segments = config.ORBIT_SEGMENTS
    if segments < 1:
        raise ValueError(f"segments must be at least 1, got {segments}")

    a, e = body.semi_major_axis, body.eccentricity
    theta = np.linspace(0.0, 2 * np.pi, segments + 1)
    # find semi-latus rectum
    p = a * (1 - e**2)
    r_mag = p / (1 + e * np.cos(theta))
    rvec = np.column_stack([r_mag * np.cos(theta), r_mag * np.sin(theta),
                            np.zeros_like(theta)])
    argp = body.argument_of_perihelion + precession_offset(body, relativistic)
    DCM = perifocal_dcm(body.longitude_of_ascending_node, body.inclination, argp)
    points = rvec @ DCM.T
    # close the loop exactly
    points[-1] = points[0]
    return points


def _add_sphere_to_plot(fig, center, radius, color, opacity, name):
    """Helper to add a sphere to the plot at specified center."""
    u = np.linspace(0, 2 * np.pi, 30)
    v = np.linspace(0, np.pi, 20)

    x = center[0] + radius * np.outer(np.cos(u), np.sin(v))
    y = center[1] + radius * np.outer(np.sin(u), np.sin(v))
    z = center[2] + radius * np.outer(np.ones(np.size(u)), np.cos(v))

    fig.add_trace(go.Surface(
        x=x, y=y, z=z,
        colorscale=[[0, color], [1, color]],
        showscale=False,
        opacity=opacity,
        name=name,
        hoverinfo='name'
    ))


def _scene_layout(fig, title):
    fig.update_layout(
        scene=dict(
            xaxis_title='X [km]',
            yaxis_title='Y [km]',
            zaxis_title='Z [km]',
            aspectmode='data'
        ),
        title=title,
        showlegend=True
    )


class FlightPath:
    """
    Sampled path preview from a departure point to a destination.

    Attributes:
        points: (N, 3) array of positions [km], departure first
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, points):
        points = np.asarray(points, dtype=float)
        if points.ndim != 2 or points.shape[1] != 3 or len(points) < 2:
            raise ValueError(f"FlightPath needs an (N, 3) array with N >= 2, "
                             f"got shape {points.shape}")
        if not np.all(np.isfinite(points)):
            raise ValueError("FlightPath points contain NaN or Inf values")
        self._points = points

    @classmethod
    def straight(cls, start, end, segments: Optional[int] = None) -> 'FlightPath':
        """Evenly spaced straight line with segments + 1 points."""
        if segments is None:
            segments = config.FLIGHT_PATH_SEGMENTS
        start = np.asarray(start, dtype=float)
        end = np.asarray(end, dtype=float)
        t = np.linspace(0.0, 1.0, segments + 1)[:, None]
        return cls(start + (end - start) * t)

    # ========== PROPERTY ACCESS ==========
    @property
    def points(self) -> np.ndarray:
        return self._points.copy()

    @property
    def start(self) -> np.ndarray:
        return self._points[0].copy()

    @property
    def end(self) -> np.ndarray:
        return self._points[-1].copy()

    @property
    def length(self) -> float:
        """Total path length [km]"""
        return float(np.sum(np.linalg.norm(np.diff(self._points, axis=0), axis=1)))

    # ========== EXPORT ==========
    def to_dataframe(self) -> pd.DataFrame:
        """
        Export path to pandas DataFrame.

        Returns:
            DataFrame with columns fraction (0 at departure, 1 at the
            destination), x, y, z
        """
        fraction = np.linspace(0.0, 1.0, len(self._points))
        data = {
            'fraction': fraction,
            'x': self._points[:, 0],
            'y': self._points[:, 1],
            'z': self._points[:, 2],
        }
        return pd.DataFrame(data)

    def add_to_plot(self, fig: go.Figure, color: Optional[str] = None,
                    name: str = 'Flight path', **kwargs) -> go.Figure:
        """
        Add this path to an existing Plotly figure.

        Parameters:
            fig: Existing Plotly Figure object
            color: Line color (default: config.DEFAULT_PATH_COLOR)
            name: Legend name (default: 'Flight path')
            **kwargs: Additional arguments passed to Scatter3d

        Returns:
            Updated Plotly Figure object (same object, modified in place)
        """
        if color is None:
            color = config.DEFAULT_PATH_COLOR
        fig.add_trace(go.Scatter3d(
            x=self._points[:, 0],
            y=self._points[:, 1],
            z=self._points[:, 2],
            mode='lines',
            line=dict(color=color, width=3, dash='dash'),
            name=name,
            hovertemplate='x: %{x:.1f}<br>y: %{y:.1f}<br>z: %{z:.1f}<extra></extra>',
            **kwargs
        ))
        return fig

    def plot_3d(self, color: Optional[str] = None) -> go.Figure:
        """Create a 3D plot of the path alone."""
        fig = go.Figure()
        self.add_to_plot(fig, color=color)
        _scene_layout(fig, 'Flight Path')
        return fig

    def __len__(self):
        return len(self._points)

    def __repr__(self):
        return f"FlightPath(n_points={len(self)}, length={self.length:.4e} km)"


def states_dataframe(bodies) -> pd.DataFrame:
    """
    Snapshot of body states as a pandas DataFrame.

    One row per body with columns name, x, y, z [km], vx, vy, vz [km/s],
    distance from the origin [km], mean_anomaly and rotation_angle [deg].
    """
    rows = []
    for body in bodies:
        rows.append({
            'name': body.name,
            'x': body.position[0],
            'y': body.position[1],
            'z': body.position[2],
            'vx': body.velocity[0],
            'vy': body.velocity[1],
            'vz': body.velocity[2],
            'distance': float(np.linalg.norm(body.position)),
            'mean_anomaly': np.degrees(body.mean_anomaly),
            'rotation_angle': np.degrees(body.rotation_angle),
        })
    columns = ['name', 'x', 'y', 'z', 'vx', 'vy', 'vz',
               'distance', 'mean_anomaly', 'rotation_angle']
    return pd.DataFrame(rows, columns=columns)


def plot_system(bodies, show_orbits: bool = True, camera_position=None,
                flight_path: Optional[FlightPath] = None,
                radius_scale: float = 1.0, relativistic: bool = False,
                body_opacity: Optional[float] = None) -> go.Figure:
    """
    Create a 3D plot of the current system state.

    Parameters:
        bodies: Iterable of CelestialBody
        show_orbits: Draw each orbiting body's ellipse (default: True)
        camera_position: Optional camera position to mark [km]
        flight_path: Optional FlightPath to overlay
        radius_scale: Multiplier on body radii so planets stay visible at
            solar-system scale (default: 1.0)
        relativistic: Include accumulated precession in orbit lines
        body_opacity: Opacity of body spheres (default: config.DEFAULT_BODY_OPACITY)

    Returns:
        Plotly Figure object
    """
    if body_opacity is None:
        body_opacity = config.DEFAULT_BODY_OPACITY
    fig = go.Figure()

    for body in bodies:
        if not np.all(np.isfinite(body.position)):
            continue
        _add_sphere_to_plot(
            fig,
            center=body.position,
            radius=body.radius * radius_scale,
            color=body.color or config.DEFAULT_BODY_COLOR,
            opacity=body_opacity,
            name=body.name
        )
        if show_orbits and not body.is_central:
            path = orbit_path(body, relativistic=relativistic)
            fig.add_trace(go.Scatter3d(
                x=path[:, 0],
                y=path[:, 1],
                z=path[:, 2],
                mode='lines',
                line=dict(color=body.color or config.DEFAULT_ORBIT_COLOR, width=1),
                name=f'{body.name} orbit',
                hoverinfo='name'
            ))

    if flight_path is not None:
        flight_path.add_to_plot(fig)

    if camera_position is not None:
        cam = np.asarray(camera_position, dtype=float)
        fig.add_trace(go.Scatter3d(
            x=[cam[0]], y=[cam[1]], z=[cam[2]],
            mode='markers',
            marker=dict(size=4, color=config.DEFAULT_PATH_COLOR),
            name='Camera'
        ))

    _scene_layout(fig, 'Solar System')
    return fig
