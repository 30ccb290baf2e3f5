"""Truncated series reconstruction and curve sampling."""

import logging
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from .coefficients import CoefficientSet
from .config import CONSTANT_TERMS, DEFAULT_INTERVAL, DEFAULT_SAMPLE_COUNT
from .domain import FailurePolicy, Stepping, as_interval
from .errors import InvalidParameter
from .integrate import evaluate_on_grid, resolve_failures

logger = logging.getLogger(__name__)


# --- sample containers ---

class SamplePoint(NamedTuple):
    x: float
    y: float


def _read_only(values):
    values = np.array(values, dtype=float)
    values.flags.writeable = False
    return values


@dataclass(frozen=True, eq=False)
class SampleSeries:
    """Sampled curve. ``xs`` is strictly increasing; both arrays are read-only."""

    xs: np.ndarray
    ys: np.ndarray
    failed: int = 0

    def __post_init__(self):
        object.__setattr__(self, "xs", _read_only(self.xs))
        object.__setattr__(self, "ys", _read_only(self.ys))

    @property
    def degraded(self):
        return self.failed > 0

    @property
    def points(self):
        return [SamplePoint(float(x), float(y)) for x, y in zip(self.xs, self.ys)]

    def __len__(self):
        return len(self.xs)

    def __iter__(self):
        return iter(self.points)


# --- reconstruction ---

def reconstruct(coefficients, x, constant_term="full"):
    """Evaluate the truncated series at ``x`` (a float or an array).

    S(x) = sum_{n=0}^{N-1} a_n cos(n w x) + b_n sin(n w x)

    With ``constant_term="half"`` the n = 0 term is a_0/2 instead. a_0 carries
    the same 2/T normalization as the other cosine terms, so only the halved
    form converges to f for functions with a non-zero mean. A plain sequence
    of (a_n, b_n) pairs is read as coefficients on [-pi, pi].
    """
    if constant_term not in CONSTANT_TERMS:
        raise InvalidParameter(f"constant_term must be one of {CONSTANT_TERMS}, got {constant_term!r}")
    if not isinstance(coefficients, CoefficientSet):
        coefficients = CoefficientSet.from_pairs(coefficients)
    omega = coefficients.interval.angular_frequency
    x_arr = np.asarray(x, dtype=float)

    a_0 = coefficients[0].a
    if constant_term == "half":
        a_0 = a_0 / 2.0
    result = np.full(x_arr.shape, a_0)
    for term in coefficients.terms[1:]:
        result = result + term.a * np.cos(term.n * omega * x_arr) + term.b * np.sin(term.n * omega * x_arr)

    if np.ndim(x) == 0:
        return float(result)
    return result


def sample(f, interval=DEFAULT_INTERVAL, steps=DEFAULT_SAMPLE_COUNT,
           policy=FailurePolicy.OMIT, stepping=Stepping.COUNTED):
    """Sample ``f`` on the same grid the integrator uses.

    OMIT drops failed points, ZERO and NAN replace their y value, RAISE
    propagates the first EvaluationError.
    """
    interval = as_interval(interval)
    samples = evaluate_on_grid(f, interval, steps, stepping)
    if policy is FailurePolicy.OMIT:
        series = SampleSeries(samples.xs[samples.valid], samples.values[samples.valid], samples.failed)
    else:
        series = SampleSeries(samples.xs, resolve_failures(samples, policy), samples.failed)
    if series.degraded:
        logger.warning("sampling '%s' degraded: %d of %d points failed (policy=%s)",
                       f, series.failed, len(samples.xs), policy.value)
    return series


# --- original vs approximation ---

@dataclass(frozen=True, eq=False)
class Comparison:
    """Original curve and its reconstruction on the same x values."""

    original: SampleSeries
    approximation: SampleSeries

    @property
    def error(self):
        return self.approximation.ys - self.original.ys

    @property
    def max_error(self):
        if len(self.original) == 0:
            return float("nan")
        return float(np.nanmax(np.abs(self.error)))

    @property
    def relative_l2_error(self):
        err = np.nansum(self.error ** 2)
        ref = np.nansum(self.original.ys ** 2)
        return float(np.sqrt(err / (ref + 1e-14)))


def compare(f, coefficients, steps=DEFAULT_SAMPLE_COUNT,
            policy=FailurePolicy.OMIT, stepping=Stepping.COUNTED, constant_term="full"):
    """Sample ``f`` and its reconstruction from ``coefficients`` side by side.

    The reconstruction is evaluated at exactly the x values kept for the
    original, so points dropped under OMIT are missing from both curves.
    """
    original = sample(f, coefficients.interval, steps, policy, stepping)
    return compare_samples(original, coefficients, constant_term)


def compare_samples(original, coefficients, constant_term="full"):
    ys = reconstruct(coefficients, original.xs, constant_term)
    approximation = SampleSeries(original.xs, ys, original.failed)
    return Comparison(original, approximation)
