"""
K-means++ clustering of pixels in RGB color space.

Seeding picks initial centers with probability proportional to the squared
distance from the centers chosen so far. Lloyd's iteration then alternates
nearest-center assignment and mean recomputation until the largest center
movement of an iteration falls below the similarity threshold.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from dominant_colors.errors import ConvergenceTimeout, EmptyInput, InvalidConfiguration
from .options import ClusteringOptions


@dataclass
class Cluster:
    """A cluster center and the indices of the pixels assigned to it."""
    center: np.ndarray
    members: np.ndarray

    @property
    def size(self) -> int:
        return int(len(self.members))


@dataclass
class IterationSnapshot:
    """Cluster centers, sizes and max drift recorded after one iteration."""
    centers: np.ndarray
    sizes: List[int]
    max_drift: float


@dataclass
class Trace:
    """Observational record of a verbose clustering run."""
    initial_centers: np.ndarray
    iterations: List[IterationSnapshot] = field(default_factory=list)


@dataclass
class ClusteringState:
    """Clusters of the last iteration with its max drift and iteration count."""
    clusters: List[Cluster]
    max_drift: float
    iterations: int


@dataclass
class ClusteringResult:
    """Palette ordered by descending cluster population."""
    palette: List[Tuple[int, int, int]]
    sizes: List[int]
    pixel_count: int
    iterations: int
    trace: Optional[Trace] = None

    @property
    def ratios(self) -> List[float]:
        return [size / self.pixel_count for size in self.sizes]

    @property
    def hex_colors(self) -> List[str]:
        return [rgb_to_hex(color) for color in self.palette]


def distance(a, b) -> float:
    """Euclidean distance between two colors."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.dot(diff, diff)))


def squared_distances(pixels: np.ndarray, centers: np.ndarray) -> np.ndarray:
    """Squared distance from every pixel to every center, shape (N, k)."""
    diff = pixels[:, None, :].astype(np.float64) - centers[None, :, :]
    return np.einsum("nkc,nkc->nk", diff, diff)


def round_center(center: np.ndarray) -> Tuple[int, int, int]:
    """Round a center to the nearest integer per channel, clamped to [0, 255]."""
    rounded = np.clip(np.floor(np.asarray(center, dtype=np.float64) + 0.5), 0, 255)
    r, g, b = (int(x) for x in rounded)
    return r, g, b


def rgb_to_hex(rgb) -> str:
    """Convert an RGB triple to a hex color string, rounding float channels."""
    r, g, b = round_center(rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


def weighted_index(weights: np.ndarray, rng: np.random.Generator) -> int:
    """
    Draw an index with probability proportional to its weight.

    A single uniform draw is mapped through the cumulative weights with a
    binary search. Zero-weight entries are never picked unless every weight
    is zero, in which case the draw is uniform.
    """
    cumulative = np.cumsum(weights)
    total = cumulative[-1]
    if total <= 0:
        return int(rng.integers(len(weights)))

    pick = rng.random() * total
    index = int(np.searchsorted(cumulative, pick, side="right"))
    if index >= len(weights):
        # pick rounded up to total
        index = int(np.flatnonzero(weights)[-1])
    return index


def seed_centers(pixels: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """
    Choose k initial centers with K-means++ weighted sampling.

    Args:
        pixels: RGB pixels (N, 3)
        k: Number of centers, 1 <= k <= N
        rng: Source of uniform draws

    Returns:
        Initial centers (k, 3) float64

    Raises:
        EmptyInput: If there are no pixels
        InvalidConfiguration: If k is out of range
    """
    n = len(pixels)
    if n == 0:
        raise EmptyInput()
    if k < 1 or k > n:
        raise InvalidConfiguration(
            f"Cluster count must be between 1 and the pixel count {n}, got {k}",
            fields=["clusters_num"]
        )

    pixels_f = np.asarray(pixels, dtype=np.float64)
    centers = np.empty((k, 3), dtype=np.float64)
    centers[0] = pixels_f[int(rng.integers(n))]

    # squared distance of each pixel to its nearest chosen center
    nearest = squared_distances(pixels_f, centers[:1])[:, 0]
    for i in range(1, k):
        index = weighted_index(nearest, rng)
        centers[i] = pixels_f[index]
        nearest = np.minimum(nearest, squared_distances(pixels_f, centers[i:i + 1])[:, 0])
        logger.debug(f"Seed {i}: pixel {index} -> {centers[i].tolist()}")

    return centers


def _assign_slice(pixels: np.ndarray, centers: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    k = len(centers)
    # argmin returns the first minimum, so ties go to the lowest cluster index
    labels = np.argmin(squared_distances(pixels, centers), axis=1)
    counts = np.bincount(labels, minlength=k)
    sums = np.stack(
        [np.bincount(labels, weights=pixels[:, c], minlength=k) for c in range(3)],
        axis=1
    )
    return labels, sums, counts


def assign(pixels: np.ndarray, centers: np.ndarray,
           workers: int = 1) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Assign every pixel to its nearest center.

    With more than one worker the pixels are split into disjoint slices that
    are assigned concurrently; per-slice sums and counts are reduced after.

    Returns:
        Tuple of (labels (N,), per-cluster channel sums (k, 3), per-cluster counts (k,))
    """
    if workers <= 1 or len(pixels) < 2 * workers:
        return _assign_slice(pixels, centers)

    slices = np.array_split(pixels, workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        parts = list(pool.map(lambda part: _assign_slice(part, centers), slices))

    labels = np.concatenate([part[0] for part in parts])
    sums = np.sum([part[1] for part in parts], axis=0)
    counts = np.sum([part[2] for part in parts], axis=0)
    return labels, sums, counts


def refine(pixels: np.ndarray, centers: np.ndarray, similarity: float,
           max_iterations: int, workers: int = 1,
           trace: Optional[Trace] = None) -> ClusteringState:
    """
    Run Lloyd's iteration from the given centers until max drift < similarity.

    Clusters are re-sorted by descending size (stable on ties) after every
    iteration. A cluster that receives no pixels keeps its previous center.

    Raises:
        ConvergenceTimeout: If max_iterations pass without converging
    """
    pixels_f = np.asarray(pixels, dtype=np.float64)
    centers = np.array(centers, dtype=np.float64)
    k = len(centers)
    iteration = 0

    while True:
        labels, sums, counts = assign(pixels_f, centers, workers)

        new_centers = centers.copy()
        filled = counts > 0
        new_centers[filled] = sums[filled] / counts[filled, None]

        drift = np.sqrt(np.sum((new_centers - centers) ** 2, axis=1))
        max_drift = float(drift.max())

        order = np.argsort(-counts, kind="stable")
        centers = new_centers[order]
        counts = counts[order]
        rank = np.empty(k, dtype=np.intp)
        rank[order] = np.arange(k)
        labels = rank[labels]

        iteration += 1
        logger.debug(f"Iteration {iteration}: max drift {max_drift:.4f}, sizes {counts.tolist()}")

        if trace is not None:
            trace.iterations.append(IterationSnapshot(
                centers=centers.copy(),
                sizes=counts.tolist(),
                max_drift=max_drift
            ))

        if max_drift < similarity:
            break
        if iteration >= max_iterations:
            raise ConvergenceTimeout(iteration, max_drift, similarity)

    clusters = [Cluster(center=centers[i], members=np.flatnonzero(labels == i)) for i in range(k)]
    return ClusteringState(clusters=clusters, max_drift=max_drift, iterations=iteration)


def cluster_colors(pixels, options: ClusteringOptions, rng=None) -> ClusteringResult:
    """
    Cluster pixels and report the dominant colors.

    Args:
        pixels: RGB pixels, anything convertible to an (N, 3) array
        options: Validated clustering options
        rng: numpy Generator, integer seed or None for fresh entropy

    Returns:
        ClusteringResult with the first colors_num centers, rounded and clamped,
        and a Trace when options.verbose is set

    Raises:
        EmptyInput: If no pixels are supplied
        InvalidConfiguration: If clusters_num exceeds the pixel count
        ConvergenceTimeout: If refinement hits the iteration cap
    """
    pixels = np.asarray(pixels)
    if pixels.size == 0:
        raise EmptyInput()
    if pixels.ndim != 2 or pixels.shape[1] != 3:
        raise ValueError(f"Expected pixels of shape (N, 3), got {pixels.shape}")

    n = len(pixels)
    if options.clusters_num > n:
        raise InvalidConfiguration(
            f"clusters_num {options.clusters_num} exceeds pixel count {n}",
            fields=["clusters_num"]
        )

    rng = np.random.default_rng(rng)
    logger.info(f"Clustering {n} pixels into {options.clusters_num} clusters")

    initial = seed_centers(pixels, options.clusters_num, rng)
    trace = Trace(initial_centers=initial.copy()) if options.verbose else None

    state = refine(
        pixels, initial,
        similarity=options.similarity,
        max_iterations=options.max_iterations,
        workers=options.workers,
        trace=trace
    )

    top = state.clusters[:options.colors_num]
    logger.info(f"Converged after {state.iterations} iterations (max drift {state.max_drift:.4f})")

    return ClusteringResult(
        palette=[round_center(cluster.center) for cluster in top],
        sizes=[cluster.size for cluster in top],
        pixel_count=n,
        iterations=state.iterations,
        trace=trace
    )
