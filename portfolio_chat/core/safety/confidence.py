"""
Confidence gate.

Decides whether retrieved results are strong enough to ground an answer.
Only results at or above the threshold are ever passed on.

Dependencies: None
System role: Last safety check before generation
"""

import logging

from portfolio_chat.configs.safety import SafetySettings
from portfolio_chat.core.safety.messages import FallbackType, get_fallback_response
from portfolio_chat.models.safety import ConfidenceCheckResult, ConfidenceReason
from portfolio_chat.models.search import SearchResult

logger = logging.getLogger(__name__)


class ConfidenceGate:
    """Filter search results by a global similarity threshold."""

    def __init__(
        self,
        min_confidence: float = 0.70,
        min_results_required: int = 1,
        maybe_relevant_threshold: float = 0.5,
    ) -> None:
        self.min_confidence = min_confidence
        self.min_results_required = min_results_required
        self.maybe_relevant_threshold = maybe_relevant_threshold

    @classmethod
    def from_settings(cls, settings: SafetySettings) -> "ConfidenceGate":
        return cls(
            min_confidence=settings.min_confidence,
            min_results_required=settings.min_results_required,
            maybe_relevant_threshold=settings.maybe_relevant_threshold,
        )

    def evaluate(self, results: list[SearchResult]) -> ConfidenceCheckResult:
        """
        Gate a result set.

        Args:
            results: Search results, any order

        Returns:
            ConfidenceCheckResult: passed with only the passing results, or a refusal reason
        """
        if not results:
            return ConfidenceCheckResult(
                passed=False,
                reason=ConfidenceReason.NO_RESULTS,
                highest_score=0.0,
                message=get_fallback_response(FallbackType.NO_RESULTS),
            )

        highest = max(result.score for result in results)
        valid = [result for result in results if result.score >= self.min_confidence]

        if len(valid) < self.min_results_required:
            if highest > self.maybe_relevant_threshold:
                reason = ConfidenceReason.LOW_CONFIDENCE
                message = get_fallback_response(FallbackType.LOW_CONFIDENCE)
            else:
                reason = ConfidenceReason.BELOW_THRESHOLD
                message = get_fallback_response(FallbackType.NO_RESULTS)
            logger.info(
                f"{__name__}:evaluate - Refused ({reason.value}), highest={highest:.3f}"
            )
            return ConfidenceCheckResult(
                passed=False,
                reason=reason,
                highest_score=highest,
                message=message,
            )

        return ConfidenceCheckResult(passed=True, valid_results=valid, highest_score=highest)
