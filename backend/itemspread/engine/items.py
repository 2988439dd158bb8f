"""Item adapter — items in, per-item translations out.

An item is anything with a bounding box. Its center feeds the distributor and
its bbox diagonal feeds the default radius. The engine never moves items; it
hands back the translation each one needs.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field

from itemspread.engine.config import DistributionConfig, InvalidConfigError
from itemspread.engine.distributor import (
    CancelCheck,
    PointDistributor,
    ProgressCallback,
)
from itemspread.utils.geometry import bbox_diagonal, bounds_center

logger = logging.getLogger(__name__)


class Item(BaseModel):
    id: str = Field(..., description="Caller-side identifier")
    bbox: tuple[float, float, float, float] = Field(..., description="(xmin, ymin, xmax, ymax)")

    @property
    def center(self) -> tuple[float, float]:
        return bounds_center(self.bbox)

    @property
    def size(self) -> float:
        return bbox_diagonal(self.bbox)


class Translation(BaseModel):
    id: str
    dx: float
    dy: float

    @property
    def is_zero(self) -> bool:
        return self.dx == 0 and self.dy == 0


@dataclass
class ItemDistribution:
    original: NDArray[np.float64]
    points: NDArray[np.float64]
    translations: list[Translation] = field(default_factory=list)
    operations: int = 0

    @property
    def moved(self) -> int:
        return sum(1 for t in self.translations if not t.is_zero)


def item_centers(items: Sequence[Item]) -> NDArray[np.float64]:
    if not items:
        return np.empty((0, 2))
    return np.array([item.center for item in items], dtype=np.float64)


def item_sizes(items: Sequence[Item]) -> NDArray[np.float64]:
    return np.array([item.size for item in items], dtype=np.float64)


def translations_for(
    items: Sequence[Item],
    original: NDArray[np.float64],
    distributed: NDArray[np.float64],
) -> list[Translation]:
    """Delta between each item's distributed point and its original center."""
    if not (len(items) == len(original) == len(distributed)):
        raise ValueError(
            f"Length mismatch: {len(items)} items, {len(original)} originals, "
            f"{len(distributed)} distributed points"
        )
    deltas = distributed - original
    return [
        Translation(id=item.id, dx=float(dx), dy=float(dy))
        for item, (dx, dy) in zip(items, deltas)
    ]


def distribute_items(
    items: Sequence[Item],
    config: DistributionConfig,
    on_progress: ProgressCallback | None = None,
    should_cancel: CancelCheck | None = None,
) -> ItemDistribution:
    if not items:
        raise InvalidConfigError("No items to distribute")

    original = item_centers(items)
    distributor = PointDistributor(config)
    points = distributor.distribute(original, on_progress, should_cancel)

    result = ItemDistribution(
        original=original,
        points=points,
        translations=translations_for(items, original, points),
        operations=distributor.estimate(len(items)),
    )
    logger.info("Distributed %d items (%d moved)", len(items), result.moved)
    return result
