"""
Utility functions and classes for the Orrery package.
"""

import warnings
from typing import Type
import numpy as np
from .config import config


class NavigationWarning(UserWarning):
    """Recoverable problem: an operation was aborted or a value was defaulted."""


def validation_error(message: str, error_class: Type[Exception] = ValueError):
    """
    Raise error or warn based on config.STRICT_VALIDATION.

    This function provides consistent validation behavior across the package.
    When STRICT_VALIDATION is True (default), raises the specified exception.
    When False, issues a UserWarning instead.

    Parameters
    ----------
    message : str
        Validation error message
    error_class : Type[Exception], optional
        Exception class to raise if STRICT_VALIDATION is True.
        Default: ValueError

    Raises
    ------
    Exception (of type error_class)
        If config.STRICT_VALIDATION is True

    Warns
    -----
    UserWarning
        If config.STRICT_VALIDATION is False

    Examples
    --------
    >>> from orrery.utils import validation_error
    >>> from orrery import config
    >>> config.STRICT_VALIDATION = True
    >>> validation_error("Invalid value")  # Raises ValueError
    >>> config.STRICT_VALIDATION = False
    >>> validation_error("Invalid value")  # Issues warning
    """
    if config.STRICT_VALIDATION:
        raise error_class(message)
    else:
        warnings.warn(message, UserWarning, stacklevel=2)


def navigation_warning(message: str):
    """Issue a NavigationWarning attributed to the caller's caller."""
    warnings.warn(message, NavigationWarning, stacklevel=3)


# ========== VECTOR HELPERS ==========
UP = np.array([0.0, 1.0, 0.0])
DEFAULT_AXIS = np.array([1.0, 0.0, 0.0])


def is_finite_vector(v) -> bool:
    """True if v is a 3-vector with only finite components."""
    if v is None:
        return False
    arr = np.asarray(v, dtype=float)
    return arr.shape == (3,) and bool(np.all(np.isfinite(arr)))


def safe_normalize(v, fallback=DEFAULT_AXIS, min_length: float = 0.0) -> np.ndarray:
    """
    Unit vector along v, or the fallback axis if v is degenerate.

    A vector is degenerate when it contains non-finite values or its
    length does not exceed min_length.
    """
    arr = np.asarray(v, dtype=float)
    length = np.linalg.norm(arr)
    if not np.isfinite(length) or length <= min_length:
        return np.array(fallback, dtype=float)
    return arr / length


def rot_x(angle: float) -> np.ndarray:
    # rotation about x-axis
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [1, 0,  0],
        [0, c, -s],
        [0, s,  c]
    ])


def rot_y(angle: float) -> np.ndarray:
    # rotation about y-axis
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [ c, 0, s],
        [ 0, 1, 0],
        [-s, 0, c]
    ])


def rot_z(angle: float) -> np.ndarray:
    # rotation about z-axis
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, -s, 0],
        [s,  c, 0],
        [0,  0, 1]
    ])


def rotate_about_axis(v, axis, angle: float) -> np.ndarray:
    """Rotate v about a unit axis by angle (Rodrigues' formula)."""
    v = np.asarray(v, dtype=float)
    k = np.asarray(axis, dtype=float)
    c, s = np.cos(angle), np.sin(angle)
    return v * c + np.cross(k, v) * s + k * np.dot(k, v) * (1 - c)
