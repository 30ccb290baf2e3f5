"""Fixed-step numerical quadrature."""

import logging
from dataclasses import dataclass

import numpy as np

from .config import DEFAULT_INTERVAL, DEFAULT_SAMPLE_COUNT
from .domain import FailurePolicy, Stepping, as_interval, grid
from .errors import EvaluationError

logger = logging.getLogger(__name__)


# --- grid evaluation ---

@dataclass(frozen=True)
class GridValues:
    # raw samples, before any failure policy is applied
    xs: np.ndarray
    values: np.ndarray
    valid: np.ndarray
    dx: float

    @property
    def failed(self):
        return int(np.count_nonzero(~self.valid))

    def first_failure(self):
        return float(self.xs[~self.valid][0])


@dataclass(frozen=True)
class Integral:
    value: float
    evaluated: int
    failed: int = 0

    @property
    def degraded(self):
        return self.failed > 0

    def __float__(self):
        return self.value


def _evaluate_pointwise(f, xs):
    values = np.empty_like(xs)
    for i, x in enumerate(xs):
        try:
            values[i] = f(float(x))
        except (EvaluationError, ArithmeticError, ValueError):
            # math.sqrt(-1) raises ValueError, 1/0 ZeroDivisionError
            values[i] = np.nan
    return values, np.isfinite(values)


def evaluate_on_grid(f, interval, steps, stepping=Stepping.COUNTED):
    """Evaluate ``f`` on the integration grid of ``interval``.

    ``f`` is either a parsed Function (evaluated in one vectorised pass) or
    any callable taking a float, which is called once per point.
    """
    xs, dx = grid(interval, steps, stepping)
    if hasattr(f, "evaluate"):
        values, valid = f.evaluate(xs)
    else:
        values, valid = _evaluate_pointwise(f, xs)
    return GridValues(xs, values, valid, dx)


def resolve_failures(samples, policy):
    """Return the values to sum, with failed points replaced per ``policy``."""
    if samples.valid.all():
        return samples.values
    if policy is FailurePolicy.RAISE:
        raise EvaluationError(samples.first_failure())
    fill = np.nan if policy is FailurePolicy.NAN else 0.0
    return np.where(samples.valid, samples.values, fill)


# --- quadrature ---

def left_sum(values, dx, weights=None):
    if weights is not None:
        values = values * weights
    return float(np.sum(values) * dx)


def integrate(f, interval=DEFAULT_INTERVAL, steps=DEFAULT_SAMPLE_COUNT,
              policy=FailurePolicy.ZERO, stepping=Stepping.COUNTED):
    """Integrate ``f`` over ``interval`` with ``steps`` sub-intervals.

    Every grid point from ``lower`` up to and including ``upper`` contributes
    ``f(x) * dx``. Points where ``f`` fails are handled according to
    ``policy``; the returned Integral records how many failed.
    """
    interval = as_interval(interval)
    samples = evaluate_on_grid(f, interval, steps, stepping)
    values = resolve_failures(samples, policy)
    result = Integral(left_sum(values, samples.dx), len(samples.xs), samples.failed)
    if result.degraded:
        logger.warning("integral over [%g, %g] degraded: %d of %d evaluations failed",
                       interval.lower, interval.upper, result.failed, result.evaluated)
    return result
