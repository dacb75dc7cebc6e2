"""
Scan optimizer rules and the pipeline that applies them

A rule narrows ``node.selected_tablet_ids``. Rules hold configuration only:
what a rule did to one scan is returned as an ``AppliedOptimization`` for that
run, so a rule or pipeline can be reused across queries.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from tabletprune.core.scan import OlapScanNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedOptimization:
    """What one rule did to one scan node"""

    name: str
    detail: str
    tablets_before: int
    tablets_after: int

    @property
    def tablets_skipped(self) -> int:
        return self.tablets_before - self.tablets_after

    def __str__(self) -> str:
        return f"{self.name}: {self.detail}"


class Optimizer(ABC):
    """
    A single narrowing rule for scan nodes

    ``optimize`` reports back through its return value; subclasses must not
    keep per-node state between calls.
    """

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable rule name"""
        pass

    @abstractmethod
    def can_optimize(self, node: OlapScanNode) -> bool:
        """
        Check if this rule applies to the node

        Args:
            node: Scan node to optimize

        Returns:
            True if the rule should run
        """
        pass

    @abstractmethod
    def optimize(self, node: OlapScanNode) -> str | None:
        """
        Narrow the node's selected tablets

        Args:
            node: Scan node to optimize

        Returns:
            Description of the narrowing, or None if the rule kept every tablet
        """
        pass


class OptimizerPipeline:
    """Applies rules in order; each sees the selection the previous one left"""

    def __init__(self, optimizers: Iterable[Optimizer]):
        self.optimizers = list(optimizers)

    def optimize(self, node: OlapScanNode) -> list[AppliedOptimization]:
        """
        Run every applicable rule on the node

        Returns:
            The rules that narrowed this node, in the order they ran
        """
        applied = []

        for optimizer in self.optimizers:
            if not optimizer.can_optimize(node):
                continue

            before = len(node.selected_tablet_ids)
            detail = optimizer.optimize(node)
            if detail is None:
                continue

            applied.append(
                AppliedOptimization(optimizer.get_name(), detail, before, len(node.selected_tablet_ids))
            )
            logger.debug(
                "%s on %s: %d -> %d tablet(s)",
                optimizer.get_name(),
                node.table.name,
                before,
                len(node.selected_tablet_ids),
            )

        return applied


def summarize(applied: list[AppliedOptimization]) -> str:
    """Human-readable summary of one pipeline run"""
    if not applied:
        return "No optimizations applied"

    lines = ["Optimizations applied:"]
    lines.extend(f"  - {entry}" for entry in applied)
    return "\n".join(lines)
