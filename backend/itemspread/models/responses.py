"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from itemspread.engine.items import Translation


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    engine: str = "point-repulsion"


class ConfigResponse(BaseModel):
    spread: float
    damping: float
    radius: float
    max_steps: int
    max_iterations: int
    scale_factor: float
    keep_within_bounds: bool
    center: tuple[float, float] | None = None


class EstimateResponse(BaseModel):
    operations: int
    level: str
    message: str = ""
    needs_confirmation: bool = False


class PointsDistributeResponse(BaseModel):
    points: list[tuple[float, float]]
    config: ConfigResponse
    estimate: EstimateResponse
    processing_time_ms: float = 0.0


class ItemsDistributeResponse(BaseModel):
    translations: list[Translation]
    points: list[tuple[float, float]]
    config: ConfigResponse
    estimate: EstimateResponse
    moved: int = 0
    processing_time_ms: float = 0.0


class SvgDistributeResponse(BaseModel):
    svg: str
    translations: list[Translation] = Field(default_factory=list)
    skipped: dict[str, str] = Field(default_factory=dict)
    config: ConfigResponse
    estimate: EstimateResponse
    processing_time_ms: float = 0.0
