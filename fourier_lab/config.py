"""Defaults consumed by the core and the Streamlit page."""

import logging
import os
from dataclasses import dataclass, field, replace

from .domain import FailurePolicy, Interval, Stepping, as_interval, check_steps
from .errors import InvalidParameter

logger = logging.getLogger(__name__)

# Integration and plotting range
DEFAULT_INTERVAL = Interval()

# Grid resolution used for quadrature and plotting
DEFAULT_SAMPLE_COUNT = 1000

# Term count offered by the UI; the core accepts any N >= 1
TERM_COUNT_RANGE = (1, 100)
DEFAULT_TERM_COUNT = 10

DEFAULT_EXPRESSION = "sin(x)"

# n = 0 term of the reconstruction: a_0 as is, or a_0/2 (mean of f)
CONSTANT_TERMS = ("full", "half")

ENV_PREFIX = "FOURIER_LAB_"


@dataclass(frozen=True)
class Settings:
    interval: Interval = field(default_factory=Interval)
    sample_count: int = DEFAULT_SAMPLE_COUNT
    integration_policy: FailurePolicy = FailurePolicy.ZERO
    sampling_policy: FailurePolicy = FailurePolicy.OMIT
    stepping: Stepping = Stepping.COUNTED
    constant_term: str = "full"

    def __post_init__(self):
        object.__setattr__(self, "interval", as_interval(self.interval))
        check_steps(self.sample_count)
        if self.constant_term not in CONSTANT_TERMS:
            raise InvalidParameter(f"constant_term must be one of {CONSTANT_TERMS}, got {self.constant_term!r}")

    def override(self, **changes):
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from FOURIER_LAB_* variables, falling back to defaults.

        FOURIER_LAB_LOWER / FOURIER_LAB_UPPER   interval bounds
        FOURIER_LAB_SAMPLE_COUNT                grid resolution
        FOURIER_LAB_INTEGRATION_POLICY          zero | omit | nan | raise
        FOURIER_LAB_SAMPLING_POLICY             zero | omit | nan | raise
        FOURIER_LAB_STEPPING                    counted | accumulated
        FOURIER_LAB_CONSTANT_TERM               full | half
        """
        environ = os.environ if environ is None else environ

        def get(name):
            return environ.get(ENV_PREFIX + name)

        changes = {}
        try:
            lower, upper = get("LOWER"), get("UPPER")
            if lower is not None or upper is not None:
                changes["interval"] = Interval(
                    DEFAULT_INTERVAL.lower if lower is None else float(lower),
                    DEFAULT_INTERVAL.upper if upper is None else float(upper),
                )
            if get("SAMPLE_COUNT") is not None:
                changes["sample_count"] = int(get("SAMPLE_COUNT"))
            if get("INTEGRATION_POLICY") is not None:
                changes["integration_policy"] = FailurePolicy(get("INTEGRATION_POLICY").lower())
            if get("SAMPLING_POLICY") is not None:
                changes["sampling_policy"] = FailurePolicy(get("SAMPLING_POLICY").lower())
            if get("STEPPING") is not None:
                changes["stepping"] = Stepping(get("STEPPING").lower())
            if get("CONSTANT_TERM") is not None:
                changes["constant_term"] = get("CONSTANT_TERM").lower()
        except InvalidParameter:
            raise
        except ValueError as e:
            raise InvalidParameter(f"bad {ENV_PREFIX}* setting: {e}") from e
        if changes:
            logger.debug("settings overridden from environment: %s", sorted(changes))
        return cls(**changes)
