"""
Explosion guard

Bounds planning latency: enumeration only runs when every column is resolved
and the cartesian product of candidate counts stays within a ceiling. A
failed guard costs efficiency (every tablet is scanned), never correctness.
"""

from dataclasses import dataclass
from typing import Sequence

from tabletprune.core.config import DEFAULT_MAX_COMBINATIONS
from tabletprune.core.errors import ConfigurationError
from tabletprune.pruning.candidates import CandidateSet


@dataclass(frozen=True)
class GuardDecision:
    """
    Outcome of the guard

    Attributes:
        passed: Enumeration may run
        combinations: Exact product when passed; on failure the running product
            at the point the guard gave up, or None for an unresolved column
        reason: Human-readable explanation
    """

    passed: bool
    combinations: int | None
    reason: str

    def __bool__(self) -> bool:
        return self.passed


class ExplosionGuard:
    """Decide whether enumerating all candidate combinations is affordable"""

    def __init__(self, max_combinations: int = DEFAULT_MAX_COMBINATIONS):
        if max_combinations <= 0:
            raise ConfigurationError(f"max_combinations must be positive, got {max_combinations}")
        self.max_combinations = max_combinations

    def evaluate(self, candidates: Sequence[CandidateSet]) -> GuardDecision:
        if not candidates:
            return GuardDecision(False, None, "no distribution columns")

        combinations = 1
        for candidate in candidates:
            if not candidate.is_resolved:
                return GuardDecision(
                    False, None, f"column {candidate.column} unresolved: {candidate.reason}"
                )
            if candidate.size == 0:
                # Malformed, treat like unresolved
                return GuardDecision(False, None, f"column {candidate.column} has no candidates")

            combinations *= candidate.size
            if combinations > self.max_combinations:
                return GuardDecision(
                    False,
                    combinations,
                    f"more than {self.max_combinations} combinations",
                )

        return GuardDecision(True, combinations, f"{combinations} combination(s)")

    def __repr__(self) -> str:
        return f"ExplosionGuard(max_combinations={self.max_combinations})"
