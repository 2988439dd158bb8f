"""ItemSpread point-distribution engine."""

from itemspread.engine.config import DistributionConfig, InvalidConfigError
from itemspread.engine.distributor import (
    DistributionCancelled,
    PointDistributor,
    distribute,
    estimate_operations,
    relax_step,
    scale_to_bounding_box,
    scale_uniform,
)
from itemspread.engine.items import Item, Translation, distribute_items
from itemspread.engine.seeding import suggest_config
from itemspread.engine.workload import WorkloadLevel, assess_workload

__all__ = [
    "DistributionConfig",
    "InvalidConfigError",
    "DistributionCancelled",
    "PointDistributor",
    "distribute",
    "estimate_operations",
    "relax_step",
    "scale_to_bounding_box",
    "scale_uniform",
    "Item",
    "Translation",
    "distribute_items",
    "suggest_config",
    "WorkloadLevel",
    "assess_workload",
]
