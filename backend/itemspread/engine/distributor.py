"""PointDistributor — iterative point-repulsion relaxation.

Every point is pushed away from every other point closer than ``radius`` by a
force of ``spread / d * (p_i - p_j)``. Each ordered pair (i, j) is evaluated on
its own, so an unordered pair contributes once from each endpoint. All forces
of a step are computed from the positions at the start of that step, then all
points move at once.

Usage:
    distributor = PointDistributor(config)
    spread_out = distributor.distribute(centers)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from itemspread.engine.config import DistributionConfig, InvalidConfigError
from itemspread.utils.geometry import Bounds, as_points, bounds_center, bounds_of

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
CancelCheck = Callable[[], bool]


class DistributionCancelled(RuntimeError):
    """Raised when a cooperative cancellation check asks a run to stop."""

    def __init__(self, step: int, total: int) -> None:
        super().__init__(f"Distribution cancelled at step {step}/{total}")
        self.step = step
        self.total = total


def estimate_operations(n_points: int, max_steps: int, max_iterations: int) -> int:
    """Projected pairwise evaluations for a run: n² × steps × iterations."""
    return n_points * n_points * max_steps * max_iterations


def relax_step(
    points: NDArray[np.float64],
    spread: float,
    damping: float,
    radius: float,
    block_size: int = 512,
) -> NDArray[np.float64]:
    """One synchronous relaxation step. Returns a new array."""
    n = len(points)
    if n < 2:
        return points.copy()

    forces = np.zeros_like(points)

    for start in range(0, n, block_size):
        stop = min(start + block_size, n)
        # diff[i, j] = p_i - p_j for the rows in this block
        diff = points[start:stop, np.newaxis, :] - points[np.newaxis, :, :]
        dist = np.sqrt(diff[:, :, 0] ** 2 + diff[:, :, 1] ** 2)

        # d == 0 covers both self-pairs and coincident points
        active = (dist > 0) & (dist < radius)
        amount = np.zeros_like(dist)
        np.divide(spread, dist, out=amount, where=active)

        forces[start:stop] = np.sum(amount[:, :, np.newaxis] * diff, axis=1)

    return points + damping * forces


def scale_to_bounding_box(points: NDArray[np.float64], target: Bounds) -> NDArray[np.float64]:
    """Map the points' bounds onto ``target`` with independent x/y scales.

    An axis with zero source extent is left unscaled and centered on the
    target's center for that axis.
    """
    src = bounds_of(points)
    src_center = bounds_center(src)
    tgt_center = bounds_center(target)
    scaled = np.empty_like(points)

    for axis in (0, 1):
        src_min, src_max = src[axis], src[axis + 2]
        tgt_min, tgt_max = target[axis], target[axis + 2]
        extent = src_max - src_min
        if extent == 0:
            scaled[:, axis] = tgt_center[axis] + (points[:, axis] - src_center[axis])
        else:
            scale = (tgt_max - tgt_min) / extent
            scaled[:, axis] = tgt_min + (points[:, axis] - src_min) * scale

    return scaled


def scale_uniform(
    points: NDArray[np.float64],
    factor: float,
    fulcrum: tuple[float, float] | None = None,
) -> NDArray[np.float64]:
    """Scale every point's offset from ``fulcrum`` by ``factor`` (default: bounds center)."""
    if fulcrum is None:
        fulcrum = bounds_center(bounds_of(points))
    origin = np.asarray(fulcrum, dtype=np.float64)
    return origin + (points - origin) * factor


class PointDistributor:
    """Runs the relaxation for one DistributionConfig."""

    def __init__(self, config: DistributionConfig | None = None) -> None:
        self.config = config or DistributionConfig()

    def estimate(self, n_points: int) -> int:
        return estimate_operations(n_points, self.config.max_steps, self.config.max_iterations)

    def distribute(
        self,
        points: ArrayLike,
        on_progress: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> NDArray[np.float64]:
        """Distribute ``points``. The input is never mutated; output is index-aligned."""
        cfg = self.config
        cfg.validate()
        current = _checked_points(points)

        start = time.perf_counter()
        total = cfg.total_steps
        every = cfg.report_every
        original_bounds = bounds_of(current)

        logger.info(
            "Distributing %d points: %d steps x %d iterations (%d operations)",
            len(current),
            cfg.max_steps,
            cfg.max_iterations,
            self.estimate(len(current)),
        )

        done = 0
        for iteration in range(cfg.max_iterations):
            for _ in range(cfg.max_steps):
                if should_cancel is not None and should_cancel():
                    logger.info("Distribution cancelled at step %d/%d", done, total)
                    raise DistributionCancelled(done, total)

                current = relax_step(current, cfg.spread, cfg.damping, cfg.radius, cfg.block_size)
                done += 1

                if on_progress is not None and done % every == 0 and done < total:
                    on_progress(done, total)

            if cfg.keep_within_bounds:
                current = scale_to_bounding_box(current, original_bounds)
                logger.debug("  iteration %d: rescaled to original bounds", iteration + 1)
            elif cfg.scale_factor != 1:
                current = scale_uniform(current, cfg.scale_factor, cfg.center)
                logger.debug("  iteration %d: scaled by %.3f", iteration + 1, cfg.scale_factor)

        if on_progress is not None:
            on_progress(total, total)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Distribution complete: %d points in %.0fms", len(current), elapsed)
        return current


def distribute(
    points: ArrayLike,
    config: DistributionConfig,
    on_progress: ProgressCallback | None = None,
    should_cancel: CancelCheck | None = None,
) -> NDArray[np.float64]:
    """Functional form of PointDistributor.distribute."""
    return PointDistributor(config).distribute(points, on_progress, should_cancel)


def _checked_points(points: ArrayLike) -> NDArray[np.float64]:
    try:
        pts = as_points(points)
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(str(e)) from e
    if len(pts) == 0:
        raise InvalidConfigError("Cannot distribute an empty point set")
    if not np.all(np.isfinite(pts)):
        raise InvalidConfigError("Point coordinates must be finite")
    return pts
