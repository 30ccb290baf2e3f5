"""Fourier cosine/sine coefficients by numerical integration."""

import logging
import numbers
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd
from scipy.integrate import quad

from .config import DEFAULT_INTERVAL, DEFAULT_SAMPLE_COUNT, DEFAULT_TERM_COUNT
from .domain import FailurePolicy, Interval, Stepping, as_interval, check_steps
from .errors import InvalidParameter
from .integrate import evaluate_on_grid, left_sum, resolve_failures

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FourierCoefficient:
    n: int
    a: float
    b: float

    def __iter__(self):
        # unpacks as (a_n, b_n)
        return iter((self.a, self.b))


@dataclass(frozen=True)
class CoefficientSet:
    """Coefficients for harmonics 0..N-1 computed on ``interval``.

    ``failed`` counts grid points where the function could not be evaluated;
    a set with failures is ``degraded`` and should be presented as such.
    """

    terms: Tuple[FourierCoefficient, ...]
    interval: Interval = DEFAULT_INTERVAL
    evaluated: int = 0
    failed: int = 0

    @classmethod
    def from_pairs(cls, pairs, interval=DEFAULT_INTERVAL):
        """Build a set from ``(a_n, b_n)`` pairs ordered by harmonic index."""
        terms = tuple(FourierCoefficient(n, float(a), float(b)) for n, (a, b) in enumerate(pairs))
        if not terms:
            raise InvalidParameter("a coefficient set needs at least one term")
        return cls(terms, as_interval(interval))

    @property
    def degraded(self):
        return self.failed > 0

    @property
    def a(self):
        return np.array([term.a for term in self.terms])

    @property
    def b(self):
        return np.array([term.b for term in self.terms])

    def truncate(self, term_count):
        """Return the first ``term_count`` terms as a new set."""
        term_count = check_term_count(term_count)
        if term_count > len(self.terms):
            raise InvalidParameter(f"only {len(self.terms)} terms available, asked for {term_count}")
        return CoefficientSet(self.terms[:term_count], self.interval, self.evaluated, self.failed)

    def __len__(self):
        return len(self.terms)

    def __getitem__(self, index):
        return self.terms[index]

    def __iter__(self):
        return iter(self.terms)


def check_term_count(term_count):
    if isinstance(term_count, bool) or not isinstance(term_count, numbers.Integral) or term_count < 1:
        raise InvalidParameter(f"term count must be a positive integer, got {term_count!r}")
    return int(term_count)


def compute_coefficients(f, interval=DEFAULT_INTERVAL, term_count=DEFAULT_TERM_COUNT,
                         steps=DEFAULT_SAMPLE_COUNT, policy=FailurePolicy.ZERO,
                         stepping=Stepping.COUNTED):
    """Compute a_n and b_n for n = 0..term_count-1.

    a_n = (2/T) * integral f(x) cos(n w x) dx
    b_n = (2/T) * integral f(x) sin(n w x) dx

    with T the period of ``interval`` and w = 2*pi/T; on [-pi, pi] this is
    the familiar (1/pi) * integral f(x) cos(nx) dx. ``f`` is evaluated once on
    the integration grid and the samples are shared by every harmonic.
    """
    term_count = check_term_count(term_count)
    steps = check_steps(steps)
    interval = as_interval(interval)

    samples = evaluate_on_grid(f, interval, steps, stepping)
    values = resolve_failures(samples, policy)
    omega = interval.angular_frequency
    norm = interval.normalization

    terms = []
    for n in range(term_count):
        a_n = norm * left_sum(values, samples.dx, np.cos(n * omega * samples.xs))
        b_n = norm * left_sum(values, samples.dx, np.sin(n * omega * samples.xs))
        terms.append(FourierCoefficient(n, a_n, b_n))
        if (n + 1) % 10 == 0:
            logger.debug("coefficients: %d/%d", n + 1, term_count)

    result = CoefficientSet(tuple(terms), interval, len(samples.xs), samples.failed)
    if result.degraded:
        logger.warning("coefficients for '%s' degraded: %d of %d grid points failed (policy=%s)",
                       f, result.failed, result.evaluated, policy.value)
    return result


def reference_coefficients(f, interval=DEFAULT_INTERVAL, term_count=DEFAULT_TERM_COUNT, limit=100):
    """Same coefficients via adaptive ``scipy.integrate.quad``.

    Used to cross-check the fixed-step result. Failed evaluations raise
    EvaluationError since quad cannot skip points.
    """
    term_count = check_term_count(term_count)
    interval = as_interval(interval)
    a, b = interval.lower, interval.upper
    omega = interval.angular_frequency
    norm = interval.normalization

    terms = []
    for n in range(term_count):
        val_an, _ = quad(lambda x: f(x) * np.cos(n * omega * x), a, b, limit=limit)
        val_bn, _ = quad(lambda x: f(x) * np.sin(n * omega * x), a, b, limit=limit)
        terms.append(FourierCoefficient(n, norm * val_an, norm * val_bn))
    return CoefficientSet(tuple(terms), interval)


def coefficient_table(coefficients):
    # a_n cos + b_n sin = A_n cos(nwx + phi_n)
    a, b = coefficients.a, coefficients.b
    return pd.DataFrame({
        "n": [term.n for term in coefficients],
        "a_n": a,
        "b_n": b,
        "amplitude": np.hypot(a, b),
        "phase": np.arctan2(-b, a),
    })
