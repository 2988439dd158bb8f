"""Distribution configuration — the parameter set for one run."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Integral


class InvalidConfigError(ValueError):
    """Raised when a point set or config cannot be distributed."""


@dataclass
class DistributionConfig:
    """Controls one distribution run. Defaults follow the Distribute Items tool."""

    # Repulsive force scale
    spread: float = 0.5
    # Fraction of the computed force applied per step
    damping: float = 0.95
    # Pairs further apart than this exert no force
    radius: float = 100.0
    # Relaxation steps per iteration
    max_steps: int = 100
    # Full relaxation passes, each followed by an optional rescale
    max_iterations: int = 1
    # Uniform post-pass scale (ignored when keep_within_bounds is set)
    scale_factor: float = 1.0
    # Rescale after each iteration to the original bounds
    keep_within_bounds: bool = False
    # Fulcrum for uniform scaling; None = bounds center of the scaled set
    center: tuple[float, float] | None = None

    # Steps between progress reports; None = max(1, max_steps // 10)
    progress_interval: int | None = None
    # Rows of the pairwise matrix evaluated at once (memory only)
    block_size: int = 512

    @property
    def total_steps(self) -> int:
        return self.max_steps * self.max_iterations

    @property
    def report_every(self) -> int:
        if self.progress_interval is not None:
            return self.progress_interval
        return max(1, self.max_steps // 10)

    def validate(self) -> None:
        """Fail fast on values that cannot produce a defined result."""
        for name in ("spread", "damping", "radius", "scale_factor"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidConfigError(f"{name} must be finite, got {value!r}")

        _require_count("max_steps", self.max_steps)
        _require_count("max_iterations", self.max_iterations)
        _require_count("block_size", self.block_size)
        if self.progress_interval is not None:
            _require_count("progress_interval", self.progress_interval)

        if self.center is not None:
            if len(self.center) != 2:
                raise InvalidConfigError(f"center must be an (x, y) pair, got {self.center!r}")
            try:
                finite = all(math.isfinite(float(c)) for c in self.center)
            except (TypeError, ValueError) as e:
                raise InvalidConfigError(f"center must be numeric, got {self.center!r}") from e
            if not finite:
                raise InvalidConfigError(f"center must be finite, got {self.center!r}")


def _require_count(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidConfigError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidConfigError(f"{name} must be >= 1, got {value}")
