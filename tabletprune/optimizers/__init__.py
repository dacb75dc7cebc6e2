"""
Scan Optimizers - narrow the tablets a scan has to read

- Base classes: Optimizer, OptimizerPipeline, AppliedOptimization
- Optimizer rules: DistributionPruningOptimizer
- ScanPlanner: Main orchestrator that applies all optimizations

Example:
    ```python
    from tabletprune.optimizers import ScanPlanner

    planner = ScanPlanner()
    planner.optimize(node)
    print(planner.get_optimization_summary())
    ```
"""

from tabletprune.optimizers.base import AppliedOptimization, Optimizer, OptimizerPipeline
from tabletprune.optimizers.distribution_pruning import DistributionPruningOptimizer
from tabletprune.optimizers.planner import ScanPlanner

__all__ = [
    "AppliedOptimization",
    "Optimizer",
    "OptimizerPipeline",
    "ScanPlanner",
    "DistributionPruningOptimizer",
]
