"""
Dominant Colors API Routes
Implements /v1/dominant-colors and supporting routes.
"""
import time
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from dominant_colors.config import config
from dominant_colors.errors import InvalidConfiguration
from dominant_colors.schemas import ColorEntry, DominantColorsResponse, ErrorResponse, IterationTrace
from dominant_colors.services.colors.extraction import get_dominant_colors
from dominant_colors.services.colors.options import build_image_options, build_options
from dominant_colors.utils.ids import generate_request_id
from dominant_colors.utils.logging import request_logger
from dominant_colors.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Dominant Colors"])


@router.post(
    "/dominant-colors",
    response_model=DominantColorsResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Extract dominant colors",
)
async def extract_dominant_colors(
    file: UploadFile = File(..., description="Image file"),
    colors_num: int = Query(config.DEFAULT_COLORS_NUM, description="Number of colors to return"),
    clusters_num: int = Query(config.DEFAULT_CLUSTERS_NUM, description="Number of clusters to form"),
    similarity: float = Query(config.DEFAULT_SIMILARITY, description="Convergence threshold on center drift"),
    verbose: bool = Query(False, description="Include seed centers and per-iteration trace"),
    resize_width: int = Query(config.RESIZE_WIDTH, description="Downscale if wider than this"),
    resize_height: int = Query(config.RESIZE_HEIGHT, description="Downscale if taller than this"),
    seed: Optional[int] = Query(None, ge=0, description="Random seed for reproducible results"),
) -> DominantColorsResponse:
    """
    Extract the dominant colors of an uploaded image.

    - **colors_num**: palette size, clamped to clusters_num
    - **clusters_num**: more clusters give more precise colors but take longer
    - **similarity**: larger thresholds converge sooner
    - **resize_width** / **resize_height**: downscaling bounds, cut computation time

    Options are validated together; any invalid value rejects the request.
    """
    request_id = generate_request_id()
    log = request_logger(request_id)
    metrics = get_metrics()
    metrics.increment_request_count()
    start_time = time.time()

    try:
        options = build_options(
            colors_num=colors_num,
            clusters_num=clusters_num,
            similarity=similarity,
            verbose=verbose,
        )
        image_options = build_image_options(resize_width=resize_width, resize_height=resize_height)
    except InvalidConfiguration as e:
        metrics.increment_failure_count(type(e).__name__)
        log.warning(f"Rejected options: {e}")
        raise

    file_bytes = await file.read()
    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        metrics.increment_failure_count("FileTooLarge")
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    log.info(f"Extracting colors from {file.filename} ({len(file_bytes)} bytes)")
    # CPU bound, runs in the threadpool
    colors = await run_in_threadpool(
        get_dominant_colors,
        file_bytes,
        options=options,
        image_options=image_options,
        rng=seed,
        filename=file.filename or None,
    )

    duration_ms = (time.time() - start_time) * 1000
    metrics.record_timing("request", duration_ms)
    log.info(f"Request complete in {duration_ms:.1f}ms")

    return DominantColorsResponse(
        request_id=request_id,
        found_colors=colors.found_colors,
        palette=[
            ColorEntry(hex=hex_color, rgb=list(rgb), ratio=ratio)
            for hex_color, rgb, ratio in zip(colors.found_colors, colors.rgb, colors.ratios)
        ],
        pixel_count=colors.pixel_count,
        iteration_count=colors.iteration_count,
        initial_centers=colors.initial_centers,
        iterations=[
            IterationTrace(cluster_centers=report.cluster_centers, max_distance=report.max_distance)
            for report in colors.iterations
        ] if colors.iterations is not None else None,
    )


@router.get("/metrics")
def dominant_colors_metrics():
    """Get in-process service metrics."""
    return get_metrics().get_summary()
