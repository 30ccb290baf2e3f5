"""Fourier Lab: truncated Fourier series of user-supplied functions."""

from .coefficients import (
    CoefficientSet,
    FourierCoefficient,
    coefficient_table,
    compute_coefficients,
    reference_coefficients,
)
from .config import DEFAULT_INTERVAL, DEFAULT_SAMPLE_COUNT, DEFAULT_TERM_COUNT, TERM_COUNT_RANGE, Settings
from .core import FourierResult, calculate
from .domain import FailurePolicy, Interval, Stepping
from .errors import EvaluationError, FourierLabError, InvalidParameter, ParseError
from .expression import Function, parse
from .integrate import Integral, integrate
from .series import Comparison, SamplePoint, SampleSeries, compare, reconstruct, sample

__version__ = "0.1.0"
