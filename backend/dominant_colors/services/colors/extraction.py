"""
Dominant color extraction pipeline.

Loads pixels from an image, clusters them with K-means++ and formats the
resulting palette as hex strings ordered by cluster population.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from dominant_colors.errors import DominantColorsError
from dominant_colors.services.imaging import ImageSource, load_pixels
from dominant_colors.utils.metrics import get_metrics, timed
from .kmeans import ClusteringResult, Trace, cluster_colors, rgb_to_hex
from .options import ClusteringOptions, ImageOptions


@dataclass
class IterationReport:
    """Hex centers and max drift of one refinement iteration."""
    cluster_centers: List[str]
    max_distance: float


@dataclass
class DominantColors:
    """Extraction result; verbose fields are None unless requested."""
    found_colors: List[str]
    rgb: List[Tuple[int, int, int]]
    ratios: List[float]
    pixel_count: int
    iteration_count: int
    initial_centers: Optional[List[str]] = None
    iterations: Optional[List[IterationReport]] = None


def _hex_list(centers: np.ndarray) -> List[str]:
    return [rgb_to_hex(center) for center in centers]


def build_result(result: ClusteringResult) -> DominantColors:
    """Format a clustering result for output."""
    trace: Optional[Trace] = result.trace
    return DominantColors(
        found_colors=result.hex_colors,
        rgb=list(result.palette),
        ratios=result.ratios,
        pixel_count=result.pixel_count,
        iteration_count=result.iterations,
        initial_centers=_hex_list(trace.initial_centers) if trace else None,
        iterations=[
            IterationReport(cluster_centers=_hex_list(snap.centers), max_distance=snap.max_drift)
            for snap in trace.iterations
        ] if trace else None
    )


def get_dominant_colors(
    source: ImageSource,
    options: Optional[ClusteringOptions] = None,
    image_options: Optional[ImageOptions] = None,
    rng=None,
    filename: Optional[str] = None
) -> DominantColors:
    """
    Extract the dominant colors of an image.

    Args:
        source: Image path or raw bytes
        options: Clustering options (defaults from config)
        image_options: Resize bounds (defaults from config)
        rng: numpy Generator or integer seed for reproducible runs
        filename: Original file name when source is bytes

    Returns:
        DominantColors ordered by descending cluster population

    Raises:
        EmptyInput: If the image yields no pixels (unreadable or unsupported)
        InvalidConfiguration: If clusters_num exceeds the pixel count
        ConvergenceTimeout: If refinement hits the iteration cap
    """
    if options is None:
        options = ClusteringOptions()

    metrics = get_metrics()
    try:
        with timed("pixel_loading"):
            pixels = load_pixels(source, image_options, filename=filename)

        with timed("clustering"):
            result = cluster_colors(pixels, options, rng=rng)
    except DominantColorsError as e:
        metrics.increment_failure_count(type(e).__name__)
        logger.error(f"Dominant color extraction failed: {e}")
        raise

    metrics.record_iterations(result.iterations)
    colors = build_result(result)
    logger.info(f"Found colors {colors.found_colors} in {result.iterations} iterations")
    return colors
