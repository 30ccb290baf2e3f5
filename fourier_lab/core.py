"""One-call calculation: expression text and term count in, curves out."""

import logging
from dataclasses import dataclass

from .coefficients import CoefficientSet, check_term_count, compute_coefficients
from .config import Settings
from .expression import Function, parse
from .series import Comparison, SampleSeries, compare, compare_samples

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FourierResult:
    function: Function
    coefficients: CoefficientSet
    comparison: Comparison
    constant_term: str = "full"

    @property
    def original(self) -> SampleSeries:
        return self.comparison.original

    @property
    def approximation(self) -> SampleSeries:
        return self.comparison.approximation

    @property
    def degraded(self) -> bool:
        return self.coefficients.degraded or self.original.degraded

    def with_terms(self, term_count):
        """Re-reconstruct with the first ``term_count`` terms, without integrating again."""
        coefficients = self.coefficients.truncate(term_count)
        comparison = compare_samples(self.original, coefficients, self.constant_term)
        return FourierResult(self.function, coefficients, comparison, self.constant_term)


def calculate(text, term_count, settings=None) -> FourierResult:
    """Parse ``text``, compute ``term_count`` coefficients and sample both curves.

    Parameters are checked before the text is parsed; ParseError and
    InvalidParameter propagate to the caller.
    """
    settings = settings or Settings()
    term_count = check_term_count(term_count)

    function = parse(text)
    coefficients = compute_coefficients(
        function,
        settings.interval,
        term_count,
        settings.sample_count,
        settings.integration_policy,
        settings.stepping,
    )
    comparison = compare(
        function,
        coefficients,
        settings.sample_count,
        settings.sampling_policy,
        settings.stepping,
        settings.constant_term,
    )
    logger.info("calculated %d terms for '%s' (relative L2 error %.3e)",
                term_count, function, comparison.relative_l2_error)
    return FourierResult(function, coefficients, comparison, settings.constant_term)
