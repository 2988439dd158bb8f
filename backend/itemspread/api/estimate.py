"""POST /api/estimate and /api/suggest — workload advisory and seeded defaults."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from itemspread.api.distribute import config_response, estimate_response
from itemspread.config import Settings
from itemspread.dependencies import get_settings
from itemspread.engine.config import InvalidConfigError
from itemspread.engine.items import item_centers, item_sizes
from itemspread.engine.seeding import suggest_config
from itemspread.engine.workload import assess_workload
from itemspread.models.requests import EstimateRequest, SuggestRequest
from itemspread.models.responses import ConfigResponse, EstimateResponse

router = APIRouter()


@router.post("/estimate", response_model=EstimateResponse)
async def estimate(
    req: EstimateRequest,
    settings: Settings = Depends(get_settings),
) -> EstimateResponse:
    result = assess_workload(
        req.point_count,
        req.max_steps,
        req.max_iterations,
        warning_threshold=settings.operations_warning_threshold,
        confirm_threshold=settings.operations_confirm_threshold,
    )
    return estimate_response(result)


@router.post("/suggest", response_model=ConfigResponse)
async def suggest(
    req: SuggestRequest,
    settings: Settings = Depends(get_settings),
) -> ConfigResponse:
    try:
        config = suggest_config(
            item_centers(req.items),
            item_sizes(req.items),
            sample_cap=settings.median_sample_cap,
        )
    except InvalidConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return config_response(config)
