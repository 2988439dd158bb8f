"""Default parameters seeded from the point set itself."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from itemspread.engine.config import DistributionConfig, InvalidConfigError
from itemspread.utils.geometry import (
    as_points,
    bounds_center,
    bounds_of,
    median_pairwise_distance,
    median_size,
)

logger = logging.getLogger(__name__)

# spread = median distance apart / SPREAD_DIVISOR
SPREAD_DIVISOR = 8.0
# radius = median item size * RADIUS_MULTIPLIER
RADIUS_MULTIPLIER = 1.5


def suggest_config(
    points: ArrayLike,
    sizes: ArrayLike,
    sample_cap: int = 2000,
    **overrides: Any,
) -> DistributionConfig:
    """Seed spread/radius/center from the data; explicit overrides win.

    Overrides set to None are ignored, so optional request fields can be
    passed straight through.
    """
    pts = as_points(points)
    if len(pts) == 0:
        raise InvalidConfigError("Cannot seed a config from an empty point set")

    distance = median_pairwise_distance(pts, sample_cap)
    size = median_size(np.asarray(sizes, dtype=np.float64))

    config = DistributionConfig(
        spread=distance / SPREAD_DIVISOR,
        radius=size * RADIUS_MULTIPLIER,
        center=bounds_center(bounds_of(pts)),
    )
    logger.debug(
        "Seeded config: median distance %.2f, median size %.2f → spread %.3f, radius %.3f",
        distance,
        size,
        config.spread,
        config.radius,
    )

    given = {k: v for k, v in overrides.items() if v is not None}
    unknown = set(given) - set(DistributionConfig.__dataclass_fields__)
    if unknown:
        raise InvalidConfigError(f"Unknown config fields: {sorted(unknown)}")
    return replace(config, **given)
