"""
Scan Planner - orchestrates the optimization pipeline

This is the main entry point for narrowing a scan before scan ranges are
built.
"""

from typing import Iterable

from tabletprune.core.config import PrunerConfig
from tabletprune.core.scan import OlapScanNode
from tabletprune.optimizers.base import AppliedOptimization, Optimizer, OptimizerPipeline, summarize
from tabletprune.optimizers.distribution_pruning import DistributionPruningOptimizer


class ScanPlanner:
    """
    Scan planner and optimizer orchestrator

    The planner modifies the scan node in-place. Distribution pruning always
    runs first; extra rules run after it on the narrowed selection. The report
    kept on the planner describes the most recent ``optimize`` call only.

    Example:
        ```python
        planner = ScanPlanner()
        planner.optimize(node)
        print(planner.get_optimization_summary())
        ```
    """

    def __init__(self, config: PrunerConfig | None = None, extra_optimizers: Iterable[Optimizer] = ()):
        """
        Args:
            config: Pruner settings; defaults to PrunerConfig()
            extra_optimizers: Rules applied after distribution pruning
        """
        self.pipeline = OptimizerPipeline([DistributionPruningOptimizer(config), *extra_optimizers])
        self.last_applied: list[AppliedOptimization] = []

    def optimize(self, node: OlapScanNode) -> list[AppliedOptimization]:
        """
        Apply all applicable optimizations

        Args:
            node: Scan node to optimize

        Returns:
            The rules that narrowed this node
        """
        self.last_applied = self.pipeline.optimize(node)
        return self.last_applied

    @property
    def optimizations_applied(self) -> list[str]:
        return [str(entry) for entry in self.last_applied]

    def get_optimization_summary(self) -> str:
        """
        Summary of the last ``optimize`` call

        Example:
            "Optimizations applied:
              - Distribution pruning: 2 of 300 tablet(s) from 2 combination(s)"
        """
        return summarize(self.last_applied)
