"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from itemspread.engine.items import Item


class ConfigOverrides(BaseModel):
    """Distribution parameters. Omitted fields are seeded from the data."""

    spread: float | None = Field(default=None, description="Repulsive force scale")
    damping: float | None = Field(default=None, description="Fraction of force applied per step")
    radius: float | None = Field(default=None, description="Interaction cutoff distance")
    max_steps: int | None = Field(default=None, description="Relaxation steps per iteration")
    max_iterations: int | None = Field(default=None, description="Relaxation passes")
    scale_factor: float | None = Field(default=None, description="Uniform post-pass scale")
    keep_within_bounds: bool | None = Field(
        default=None,
        description="Rescale to the original bounds after each iteration",
    )
    center: tuple[float, float] | None = Field(default=None, description="Scaling fulcrum")

    def given(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class PointsDistributeRequest(BaseModel):
    points: list[tuple[float, float]] = Field(..., description="Points to distribute")
    config: ConfigOverrides = Field(default_factory=ConfigOverrides)
    sizes: list[float] | None = Field(
        default=None,
        description="Optional item sizes, used only to seed a missing radius",
    )
    confirm: bool = Field(default=False, description="Run even when the workload is very slow")


class ItemsDistributeRequest(BaseModel):
    items: list[Item] = Field(..., description="Items with bounding boxes")
    config: ConfigOverrides = Field(default_factory=ConfigOverrides)
    confirm: bool = Field(default=False, description="Run even when the workload is very slow")


class SvgDistributeRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    config: ConfigOverrides = Field(default_factory=ConfigOverrides)
    confirm: bool = Field(default=False, description="Run even when the workload is very slow")


class SuggestRequest(BaseModel):
    items: list[Item] = Field(..., description="Items with bounding boxes")


class EstimateRequest(BaseModel):
    point_count: int = Field(..., ge=0, description="Number of items to distribute")
    max_steps: int = Field(default=100, ge=1)
    max_iterations: int = Field(default=1, ge=1)
