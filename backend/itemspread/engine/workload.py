"""Workload advisory — projected operation counts and the warnings shown for them.

Purely informational: nothing here stops a run. The HTTP layer decides
whether a VERY_SLOW run needs an explicit confirmation.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from itemspread.engine.distributor import estimate_operations

# Same thresholds the Distribute Items dialog used
WARNING_THRESHOLD = 50_000_000
CONFIRM_THRESHOLD = 500_000_000


class WorkloadLevel(str, enum.Enum):
    OK = "ok"
    SLOW = "slow"
    VERY_SLOW = "very_slow"


@dataclass
class WorkloadEstimate:
    operations: int
    level: WorkloadLevel
    message: str = ""

    @property
    def needs_confirmation(self) -> bool:
        return self.level is WorkloadLevel.VERY_SLOW


def format_operations(num: int) -> str:
    """1500 → '1.5K', 60_000_000 → '60M', 2_000_000_000 → '2B'."""
    for divisor, suffix in ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K")):
        if num >= divisor:
            text = f"{num / divisor:.1f}"
            if text.endswith(".0"):
                text = text[:-2]
            return text + suffix
    return str(num)


def assess_workload(
    n_points: int,
    max_steps: int,
    max_iterations: int,
    warning_threshold: int = WARNING_THRESHOLD,
    confirm_threshold: int = CONFIRM_THRESHOLD,
) -> WorkloadEstimate:
    ops = estimate_operations(n_points, max_steps, max_iterations)

    if ops > confirm_threshold:
        return WorkloadEstimate(
            operations=ops,
            level=WorkloadLevel.VERY_SLOW,
            message=f"WARNING: {format_operations(ops)} operations WILL TAKE A LONG TIME!",
        )
    if ops > warning_threshold:
        return WorkloadEstimate(
            operations=ops,
            level=WorkloadLevel.SLOW,
            message=f"WARNING: {format_operations(ops)} operations may take a long time!",
        )
    return WorkloadEstimate(operations=ops, level=WorkloadLevel.OK)
