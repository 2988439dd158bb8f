"""POST /api/distribute/* — run the distributor on points, items or SVG."""

from __future__ import annotations

import asyncio
import json
import logging
import threading
import time
from collections.abc import AsyncGenerator, Sequence

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from itemspread.config import Settings
from itemspread.dependencies import get_settings
from itemspread.engine.config import DistributionConfig, InvalidConfigError
from itemspread.engine.distributor import DistributionCancelled, PointDistributor
from itemspread.engine.items import Item, distribute_items, item_centers, item_sizes
from itemspread.engine.seeding import suggest_config
from itemspread.engine.workload import WorkloadEstimate, assess_workload
from itemspread.models.requests import (
    ConfigOverrides,
    ItemsDistributeRequest,
    PointsDistributeRequest,
    SvgDistributeRequest,
)
from itemspread.models.responses import (
    ConfigResponse,
    EstimateResponse,
    ItemsDistributeResponse,
    PointsDistributeResponse,
    SvgDistributeResponse,
)
from itemspread.svg.parser import parse_svg_items
from itemspread.svg.translation_applier import apply_translations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/distribute")


_SENTINEL = object()  # marks end of queue


def config_response(config: DistributionConfig) -> ConfigResponse:
    return ConfigResponse(
        spread=config.spread,
        damping=config.damping,
        radius=config.radius,
        max_steps=config.max_steps,
        max_iterations=config.max_iterations,
        scale_factor=config.scale_factor,
        keep_within_bounds=config.keep_within_bounds,
        center=config.center,
    )


def estimate_response(estimate: WorkloadEstimate) -> EstimateResponse:
    return EstimateResponse(
        operations=estimate.operations,
        level=estimate.level.value,
        message=estimate.message,
        needs_confirmation=estimate.needs_confirmation,
    )


def _check_size(count: int, settings: Settings) -> None:
    if count == 0:
        raise HTTPException(status_code=422, detail="Nothing to distribute")
    if count > settings.max_points:
        raise HTTPException(
            status_code=422,
            detail=f"{count} points exceeds the limit of {settings.max_points}",
        )


def _seed_items_config(
    items: Sequence[Item],
    overrides: ConfigOverrides,
    settings: Settings,
) -> DistributionConfig:
    try:
        config = suggest_config(
            item_centers(items),
            item_sizes(items),
            sample_cap=settings.median_sample_cap,
            **overrides.given(),
        )
        config.validate()
    except InvalidConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return config


def _assess(count: int, config: DistributionConfig, settings: Settings) -> WorkloadEstimate:
    return assess_workload(
        count,
        config.max_steps,
        config.max_iterations,
        warning_threshold=settings.operations_warning_threshold,
        confirm_threshold=settings.operations_confirm_threshold,
    )


def _gate(estimate: WorkloadEstimate, confirm: bool) -> None:
    """Very slow runs need an explicit confirm flag."""
    if estimate.needs_confirmation and not confirm:
        raise HTTPException(
            status_code=409,
            detail=(
                f"CAUTION: this distribution involves {estimate.operations} operations "
                "and will be VERY slow to run. Resend with confirm=true to continue."
            ),
        )


def _error_status(error: Exception) -> int:
    return 422 if isinstance(error, InvalidConfigError) else 500


@router.post("/points", response_model=PointsDistributeResponse)
async def distribute_points(
    req: PointsDistributeRequest,
    settings: Settings = Depends(get_settings),
) -> PointsDistributeResponse:
    _check_size(len(req.points), settings)
    overrides = req.config.given()

    if "radius" not in overrides and req.sizes is None:
        raise HTTPException(status_code=422, detail="radius is required when sizes are not given")
    if req.sizes is not None and len(req.sizes) != len(req.points):
        raise HTTPException(status_code=422, detail="sizes must align with points")

    start = time.perf_counter()
    try:
        config = suggest_config(
            req.points,
            req.sizes or [],
            sample_cap=settings.median_sample_cap,
            **overrides,
        )
        config.validate()
    except InvalidConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    estimate = _assess(len(req.points), config, settings)
    _gate(estimate, req.confirm)

    # CPU-bound: keep the event loop free while it runs
    loop = asyncio.get_running_loop()
    try:
        points = await loop.run_in_executor(None, PointDistributor(config).distribute, req.points)
    except InvalidConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    elapsed = (time.perf_counter() - start) * 1000
    return PointsDistributeResponse(
        points=[(float(x), float(y)) for x, y in points],
        config=config_response(config),
        estimate=estimate_response(estimate),
        processing_time_ms=round(elapsed, 1),
    )


@router.post("/items", response_model=ItemsDistributeResponse)
async def distribute_item_set(
    req: ItemsDistributeRequest,
    settings: Settings = Depends(get_settings),
) -> ItemsDistributeResponse:
    _check_size(len(req.items), settings)
    config = _seed_items_config(req.items, req.config, settings)
    estimate = _assess(len(req.items), config, settings)
    _gate(estimate, req.confirm)

    start = time.perf_counter()
    loop = asyncio.get_running_loop()
    try:
        result = await loop.run_in_executor(None, distribute_items, req.items, config)
    except InvalidConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    elapsed = (time.perf_counter() - start) * 1000

    return ItemsDistributeResponse(
        translations=result.translations,
        points=[(float(x), float(y)) for x, y in result.points],
        config=config_response(config),
        estimate=estimate_response(estimate),
        moved=result.moved,
        processing_time_ms=round(elapsed, 1),
    )


@router.post("/svg", response_model=SvgDistributeResponse)
async def distribute_svg(
    req: SvgDistributeRequest,
    settings: Settings = Depends(get_settings),
) -> SvgDistributeResponse:
    start = time.perf_counter()

    doc = parse_svg_items(req.svg)
    if not doc.items:
        raise HTTPException(status_code=422, detail="No movable elements found in SVG")

    items = [svg_item.to_item() for svg_item in doc.items]
    _check_size(len(items), settings)
    config = _seed_items_config(items, req.config, settings)
    estimate = _assess(len(items), config, settings)
    _gate(estimate, req.confirm)

    loop = asyncio.get_running_loop()
    try:
        result = await loop.run_in_executor(None, distribute_items, items, config)
    except InvalidConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    svg = apply_translations(doc, result.translations)
    elapsed = (time.perf_counter() - start) * 1000

    return SvgDistributeResponse(
        svg=svg,
        translations=result.translations,
        skipped=doc.skipped,
        config=config_response(config),
        estimate=estimate_response(estimate),
        processing_time_ms=round(elapsed, 1),
    )


async def _stream_distribute(
    req: ItemsDistributeRequest,
    settings: Settings,
) -> AsyncGenerator[str, None]:
    """Run the distribution in a thread, yielding SSE progress events as they arrive."""
    start = time.perf_counter()

    try:
        _check_size(len(req.items), settings)
        config = _seed_items_config(req.items, req.config, settings)
        estimate = _assess(len(req.items), config, settings)
        _gate(estimate, req.confirm)
    except HTTPException as e:
        data = json.dumps({"type": "error", "status": e.status_code, "message": e.detail})
        yield f"event: error\ndata: {data}\n\n"
        return

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    cancelled = threading.Event()

    def _on_progress(step: int, total: int) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, {"step": step, "total": total})

    def _run() -> None:
        """Sync distribution in thread — pushes progress dicts, then the outcome."""
        try:
            outcome = distribute_items(req.items, config, _on_progress, cancelled.is_set)
        except Exception as e:
            # reported to the client as an error event
            if not isinstance(e, (InvalidConfigError, DistributionCancelled)):
                logger.exception("Distribution failed")
            outcome = e
        loop.call_soon_threadsafe(queue.put_nowait, outcome)
        loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    loop.run_in_executor(None, _run)

    outcome = None
    try:
        while True:
            item = await queue.get()
            if item is _SENTINEL:
                break
            if isinstance(item, dict):
                yield f"event: progress\ndata: {json.dumps(item)}\n\n"
            else:
                outcome = item
    finally:
        # Client went away mid-run: stop the worker at its next step
        cancelled.set()

    if isinstance(outcome, Exception):
        data = json.dumps({"type": "error", "status": _error_status(outcome), "message": str(outcome)})
        yield f"event: error\ndata: {data}\n\n"
        return

    elapsed = (time.perf_counter() - start) * 1000
    response = ItemsDistributeResponse(
        translations=outcome.translations,
        points=[(float(x), float(y)) for x, y in outcome.points],
        config=config_response(config),
        estimate=estimate_response(estimate),
        moved=outcome.moved,
        processing_time_ms=round(elapsed, 1),
    )
    yield f"event: result\ndata: {response.model_dump_json()}\n\n"
    yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"


@router.post("/stream")
async def distribute_stream(
    req: ItemsDistributeRequest,
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    return StreamingResponse(
        _stream_distribute(req, settings),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
