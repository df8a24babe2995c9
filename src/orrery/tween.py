'''Timed interpolation for the orrery package
Easing curves and a polled Tween state machine'''

import math
import numpy as np
from typing import Callable


# ========== EASING CURVES ==========
# Each maps normalized time k in [0, 1] to a blend fraction in [0, 1]
def linear(k: float) -> float:
    return k


def quadratic_in(k: float) -> float:
    return k * k


def quadratic_out(k: float) -> float:
    return k * (2 - k)


def quadratic_in_out(k: float) -> float:
    k *= 2
    if k < 1:
        return 0.5 * k * k
    k -= 1
    return -0.5 * (k * (k - 2) - 1)


def quintic_in_out(k: float) -> float:
    k *= 2
    if k < 1:
        return 0.5 * k**5
    k -= 2
    return 0.5 * (k**5 + 2)


class Tween:
    """
    Eased interpolation between two values over a fixed duration.

    The tween has no clock of its own: the owner calls advance() exactly
    once per tick with the elapsed time, then reads `value`. There are no
    callbacks; completion is observed through `finished`.

    Parameters
    ----------
    start, end : float or array_like
        Interpolation endpoints. Arrays are interpolated component-wise.
    duration_ms : float
        Duration [ms], must be positive
    easing : callable, optional
        Easing curve. Default: quintic_in_out

    Examples
    --------
    >>> tw = Tween(0.0, 10.0, duration_ms=1000)
    >>> tw.advance(500)
    5.0
    >>> tw.advance(500)
    10.0
    >>> tw.finished
    True
    """

    def __init__(self, start, end, duration_ms: float,
                 easing: Callable[[float], float] = quintic_in_out):
        if not (math.isfinite(duration_ms) and duration_ms > 0):
            raise ValueError(f"Tween duration must be positive, got {duration_ms}")
        self._start = np.asarray(start, dtype=float)
        self._end = np.asarray(end, dtype=float)
        if self._start.shape != self._end.shape:
            raise ValueError(f"Tween endpoints differ in shape: "
                             f"{self._start.shape} vs {self._end.shape}")
        self._duration = float(duration_ms)
        self._easing = easing
        self._elapsed = 0.0

    def advance(self, delta_ms: float):
        """Move the tween forward by delta_ms and return the new value."""
        if math.isfinite(delta_ms) and delta_ms > 0:
            self._elapsed = min(self._elapsed + delta_ms, self._duration)
        return self.value

    @property
    def progress(self) -> float:
        """Elapsed fraction of the duration in [0, 1]"""
        return self._elapsed / self._duration

    @property
    def eased(self) -> float:
        """Blend fraction after easing"""
        if self.finished:
            return 1.0
        return self._easing(self.progress)

    @property
    def value(self):
        out = self._start + (self._end - self._start) * self.eased
        if out.ndim == 0:
            return float(out)
        return out

    @property
    def finished(self) -> bool:
        return self._elapsed >= self._duration

    @property
    def start(self):
        return self._start.copy()

    @property
    def end(self):
        return self._end.copy()

    @property
    def duration_ms(self) -> float:
        return self._duration

    def __repr__(self):
        return (f"Tween(duration_ms={self._duration}, "
                f"progress={self.progress:.3f}, easing={self._easing.__name__})")
