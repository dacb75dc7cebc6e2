"""
Hash distribution pruner

Given the ordered distribution columns of a table, the per-column filters of
a query and the table's bucket -> tablet assignment, compute the tablets that
could hold qualifying rows.

    candidates = resolve_candidates(...)      # one set per column
    guard.evaluate(candidates)                # bounded enumeration?
      fail -> every tablet in the assignment
      pass -> depth-first over the cartesian product, hash each full key,
              bucket = hash % bucket_count, collect the owning tablets

The result is always a superset of the tablets that hold matching rows.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from tabletprune.core.catalog import DistributionColumn, TabletAssignment
from tabletprune.core.config import PrunerConfig
from tabletprune.pruning.candidates import CandidateSet, resolve_candidates
from tabletprune.pruning.guard import ExplosionGuard, GuardDecision
from tabletprune.pruning.key import CompositeKey
from tabletprune.sql.filters import ColumnFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PruneResult:
    """
    Tablets selected by one pruning call

    Attributes:
        tablet_ids: Tablets that must be scanned
        fell_back: True when the guard failed and every tablet was returned
        combinations: Value combinations enumerated (or attempted)
        reason: Why pruning did or did not narrow the scan
        total_tablets: Tablets in the input assignment
    """

    tablet_ids: frozenset
    fell_back: bool
    combinations: int | None
    reason: str
    total_tablets: int

    @property
    def pruned_ratio(self) -> float:
        """Fraction of input tablets skipped"""
        if not self.total_tablets:
            return 0.0
        return 1.0 - len(self.tablet_ids) / self.total_tablets

    def __len__(self) -> int:
        return len(self.tablet_ids)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.tablet_ids))

    def __contains__(self, tablet_id: object) -> bool:
        return tablet_id in self.tablet_ids


class HashDistributionPruner:
    """
    Prune tablets of a hash-distributed table

    Each instance serves one pruning request; all inputs are treated as
    read-only snapshots.

    Example:
        ```python
        pruner = HashDistributionPruner(columns, filters, assignment)
        result = pruner.prune()
        print(len(result), result.reason)
        ```
    """

    def __init__(
        self,
        columns: Sequence[DistributionColumn],
        filters: Mapping[str, ColumnFilter],
        assignment: TabletAssignment,
        config: PrunerConfig | None = None,
    ):
        """
        Initialize pruner

        Args:
            columns: Ordered distribution columns, in placement order
            filters: Column name -> filter from predicate normalization
            assignment: Bucket ordinal -> tablet id snapshot
            config: Ceiling, dedup policy and bucket hash
        """
        self.columns = tuple(columns)
        self.filters = filters
        self.assignment = assignment
        self.config = config or PrunerConfig()
        self.guard = ExplosionGuard(self.config.max_combinations)

    def resolve(self) -> list[CandidateSet]:
        """Candidate sets per distribution column"""
        return resolve_candidates(self.columns, self.filters, self.config.dedupe_candidates)

    def prune(self) -> PruneResult:
        """
        Compute the tablets to scan

        Returns:
            PruneResult; on guard failure it holds every tablet of the assignment
        """
        candidates = self.resolve()
        decision = self.guard.evaluate(candidates)

        if not decision:
            return self._fall_back(decision)

        key = CompositeKey(len(self.columns), self.config.bucket_hash)
        found: set = set()
        self._enumerate(candidates, 0, key, found)

        logger.debug(
            "Hash pruning selected %d of %d tablet(s) from %d combination(s)",
            len(found),
            len(self.assignment),
            decision.combinations,
        )
        return PruneResult(
            tablet_ids=frozenset(found),
            fell_back=False,
            combinations=decision.combinations,
            reason=decision.reason,
            total_tablets=len(self.assignment.tablet_ids()),
        )

    def _enumerate(
        self, candidates: Sequence[CandidateSet], depth: int, key: CompositeKey, found: set
    ) -> None:
        column = self.columns[depth]
        last = depth == len(self.columns) - 1

        for value in candidates[depth].values:
            with key.pushed(value, column.type):
                if last:
                    bucket = key.hash() % self.assignment.bucket_count
                    tablet_id = self.assignment.tablet_for(bucket)
                    if tablet_id is not None:
                        found.add(tablet_id)
                else:
                    self._enumerate(candidates, depth + 1, key, found)

    def _fall_back(self, decision: GuardDecision) -> PruneResult:
        tablet_ids = self.assignment.tablet_ids()
        logger.info("Hash pruning skipped, scanning all %d tablet(s): %s", len(tablet_ids), decision.reason)
        return PruneResult(
            tablet_ids=tablet_ids,
            fell_back=True,
            combinations=decision.combinations,
            reason=decision.reason,
            total_tablets=len(tablet_ids),
        )


def prune_tablets(
    columns: Sequence[DistributionColumn],
    filters: Mapping[str, ColumnFilter],
    assignment: TabletAssignment,
    max_combinations: int | None = None,
) -> set:
    """
    Tablet ids that may hold rows matching ``filters``

    Args:
        columns: Ordered distribution columns
        filters: Column name -> filter
        assignment: Bucket ordinal -> tablet id snapshot
        max_combinations: Enumeration ceiling (default 100)

    Returns:
        Set of tablet ids to scan
    """
    config = PrunerConfig() if max_combinations is None else PrunerConfig(max_combinations=max_combinations)
    return set(HashDistributionPruner(columns, filters, assignment, config).prune().tablet_ids)
