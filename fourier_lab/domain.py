"""Interval and the sampling knobs shared by the integrator and the sampler."""

import enum
import math
import numbers
from dataclasses import dataclass

import numpy as np

from .errors import InvalidParameter


class FailurePolicy(enum.Enum):
    """What to do with a point where the function cannot be evaluated.

    ZERO   the point counts as 0.0 (integration default)
    OMIT   the point is dropped (sampling default); in a sum this is the
           same as contributing 0.0
    NAN    the value becomes NaN, so sums become NaN
    RAISE  the EvaluationError propagates and the whole request fails

    Every policy except RAISE marks the result as degraded.
    """

    ZERO = "zero"
    OMIT = "omit"
    NAN = "nan"
    RAISE = "raise"


class Stepping(enum.Enum):
    """How grid points are generated from ``lower`` to ``upper``.

    COUNTED      x_k = lower + k*dx for k = 0..steps, always steps + 1 points
    ACCUMULATED  x += dx while x <= upper; floating-point drift decides
                 whether the last point lands, so steps or steps + 1 points
    """

    COUNTED = "counted"
    ACCUMULATED = "accumulated"


@dataclass(frozen=True)
class Interval:
    lower: float = -math.pi
    upper: float = math.pi

    def __post_init__(self):
        if not (math.isfinite(self.lower) and math.isfinite(self.upper)):
            raise InvalidParameter(f"interval bounds must be finite, got [{self.lower}, {self.upper}]")
        if not self.lower < self.upper:
            raise InvalidParameter(f"interval lower bound must be below upper bound, got [{self.lower}, {self.upper}]")

    @property
    def period(self):
        return self.upper - self.lower

    @property
    def angular_frequency(self):
        # exactly 1.0 on [-pi, pi]
        return 2.0 * math.pi / self.period

    @property
    def normalization(self):
        return 2.0 / self.period

    def __contains__(self, x):
        return self.lower <= x <= self.upper


def check_steps(steps):
    if isinstance(steps, bool) or not isinstance(steps, numbers.Integral) or steps < 1:
        raise InvalidParameter(f"sample count must be a positive integer, got {steps!r}")
    return int(steps)


def grid(interval, steps, stepping=Stepping.COUNTED):
    """Return the grid points and the step width for ``steps`` sub-intervals."""
    interval = as_interval(interval)
    steps = check_steps(steps)
    dx = (interval.upper - interval.lower) / steps
    if stepping is Stepping.COUNTED:
        xs = np.linspace(interval.lower, interval.upper, steps + 1)
    else:
        points = []
        x = interval.lower
        while x <= interval.upper:
            points.append(x)
            x += dx
        xs = np.array(points)
    return xs, dx


def as_interval(value):
    if isinstance(value, Interval):
        return value
    try:
        lower, upper = value
        lower, upper = float(lower), float(upper)
    except (TypeError, ValueError) as e:
        raise InvalidParameter(f"interval must be an Interval or a (lower, upper) pair, got {value!r}") from e
    return Interval(lower, upper)
