"""Purity Score Aggregation - deduction-based scoring with a fixed fallback"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable

from ..proxy_core import constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TestOutcome:
    """Result of one purity test"""
    __test__ = False

    name: str
    passed: bool
    deduction: int


@dataclass
class ScoreResult:
    """Aggregated purity score"""
    score: int
    test_results: Dict[str, bool] = field(default_factory=dict)
    fallback: bool = False


class ScoreAggregator:
    """Fold test outcomes into a bounded score.

    If producing the outcomes raises, the computation is abandoned and the
    default score is returned instead ("unknown, assume medium").
    """

    def __init__(self, base_score: int = constants.PURITY_BASE_SCORE,
                 default_score: int = constants.PURITY_DEFAULT_SCORE,
                 min_score: int = constants.PURITY_MIN_SCORE,
                 max_score: int = constants.PURITY_MAX_SCORE):
        self.base_score = base_score
        self.default_score = default_score
        self.min_score = min_score
        self.max_score = max_score

    def clamp(self, score: int) -> int:
        return max(self.min_score, min(self.max_score, score))

    def fold(self, outcomes: Iterable[TestOutcome]) -> int:
        score = self.base_score
        for outcome in outcomes:
            if not outcome.passed:
                score -= outcome.deduction
        return self.clamp(score)

    def evaluate(self, run_tests: Callable[[], Iterable[TestOutcome]]) -> ScoreResult:
        try:
            outcomes = list(run_tests())
            score = self.fold(outcomes)
        except Exception as e:
            logger.warning(f"Error calculating purity score, using default {self.default_score}: {e}")
            return ScoreResult(score=self.clamp(self.default_score), fallback=True)

        return ScoreResult(
            score=score,
            test_results={outcome.name: outcome.passed for outcome in outcomes}
        )
