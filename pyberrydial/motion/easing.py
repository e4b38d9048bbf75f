"""
Easing functions shape how a motion task spreads its steps over time.

An easing function maps the elapsed fraction of the motion time (0...1) onto
the fraction of the motion distance that should have been covered (0...1).
It must be monotonic with f(0) = 0 and f(1) = 1; this is assumed, not
checked, by the motion engine.

Besides the classic polynomial and sine curves, class `ProfileEasing`
derives an easing from an industrial motion profile: a trapezoidal or a
pure S-curved velocity profile, normalized to unit time and unit distance.

References
----------
Gürocak, H. (2016), Industrial Motion Control, John Wiley & Sons.
"""
from typing import Callable
from enum import StrEnum
import math

import numpy as np
from scipy.integrate import solve_ivp


Easing = Callable[[float], float]


def linear(t: float) -> float:
    return t


def quad_in(t: float) -> float:
    return t * t


def quad_out(t: float) -> float:
    return t * (2 - t)


def quad_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t / 2
    t -= 1
    return (t * (2 - t) + 1) / 2


def cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def sine_in_out(t: float) -> float:
    return (1 - math.cos(math.pi * t)) / 2


def poly_in(exponent: float = 3.0) -> Easing:
    """Returns a polynomial ease-in curve `t ** exponent`."""
    def f(t: float) -> float:
        return t ** exponent
    return f


def poly_out(exponent: float = 3.0) -> Easing:
    """Returns a polynomial ease-out curve `1 - (1 - t) ** exponent`."""
    def f(t: float) -> float:
        return 1 - (1 - t) ** exponent
    return f


class ProfileType(StrEnum):
    TRAPEZOIDAL = "trapezoidal"
    S_CURVED = "S-curved"


class ProfileEasing:
    """
    Easing function derived from a symmetrical single-axis motion profile.

    The motion is normalized: total travel time is 1 and total travel
    distance is 1. The acceleration and deceleration phases each take
    `accel_fraction` of the travel time; in between, the pointer moves at
    constant velocity.
    """
    def __init__(
        self,
        kind: ProfileType | str = ProfileType.TRAPEZOIDAL,
        accel_fraction: float = 0.25,
        num_points: int = 201
    ) -> None:
        """Creates a `ProfileEasing` object.

        Parameters
        ----------
        kind:
            Shape of the velocity profile, either trapezoidal (constant
            acceleration) or S-curved (linearly rising and falling
            acceleration).
        accel_fraction:
            Fraction of the travel time spent accelerating. Must be in
            (0, 0.5]. With 0.5 there is no constant-velocity phase.
        num_points:
            Number of time points at which the position profile is
            calculated. Positions in between are linearly interpolated.
        """
        if not 0.0 < accel_fraction <= 0.5:
            raise ValueError("Acceleration fraction must be in (0, 0.5].")
        self.kind = ProfileType(kind)
        self.accel_fraction = accel_fraction
        self._t_arr, self._s_arr = self._position_profile(num_points)

    def _accel_fun(self, t: float) -> float:
        dt_acc = self.accel_fraction
        t_dec = 1.0 - dt_acc
        if self.kind == ProfileType.TRAPEZOIDAL:
            if t < dt_acc:
                return 1.0
            elif t > t_dec:
                return -1.0
            return 0.0
        half = dt_acc / 2
        if t <= half:
            return t / half
        elif t <= dt_acc:
            return (dt_acc - t) / half
        elif t < t_dec:
            return 0.0
        t -= t_dec
        if t <= half:
            return -t / half
        return -max(dt_acc - t, 0.0) / half

    def _position_profile(self, num_points: int) -> tuple[np.ndarray, np.ndarray]:
        """
        Integrates the acceleration function twice over the unit time
        interval and returns the normalized position profile.
        """
        def fun(t: float, s: np.ndarray) -> np.ndarray:
            s_dot = np.zeros(2)
            s_dot[0] = s[1]
            s_dot[1] = self._accel_fun(t)
            return s_dot

        t_arr = np.linspace(0.0, 1.0, num_points)
        sol = solve_ivp(
            fun, (0.0, 1.0), [0.0, 0.0],
            method='LSODA',
            t_eval=t_arr,
            max_step=self.accel_fraction / 20,
            rtol=1e-6,
            atol=1e-9
        )
        # numerical noise near zero velocity must not make the curve go back
        s_arr = np.maximum.accumulate(np.clip(sol.y[0], 0.0, None))
        s_arr = s_arr / s_arr[-1]
        s_arr[0], s_arr[-1] = 0.0, 1.0
        return sol.t, s_arr

    def __call__(self, t: float) -> float:
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0
        return float(np.interp(t, self._t_arr, self._s_arr))

    def __repr__(self) -> str:
        return f"ProfileEasing(kind={self.kind.value!r}, accel_fraction={self.accel_fraction})"
