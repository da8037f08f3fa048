"""Color quantization using deterministic K-means clustering."""
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.metrics import pairwise_distances_argmin

from quixelart.types import ImageArray, KMeansConfig, QuantizationError, RasterImage

logger = logging.getLogger(__name__)

MIN_COLORS = 1
MAX_COLORS = 64

# Rec. 601 luma weights, used to order colors for seeding
_LUMA = np.array([0.299, 0.587, 0.114])


@dataclass
class KMeansResult:
    """Outcome of a k-means run over a set of colors."""
    centroids: np.ndarray  # (k, 3) float64
    labels: np.ndarray     # (n,) cluster index of every input color
    iterations: int
    converged: bool

    @property
    def palette(self) -> np.ndarray:
        """Centroids rounded to the nearest uint8 sample."""
        return np.clip(np.rint(self.centroids), 0, 255).astype(np.uint8)


def initial_centroids(colors: np.ndarray, k: int) -> np.ndarray:
    """
    Pick k seed centroids from distinct colors, evenly spaced by luma.

    Colors are sorted by luma (ties broken by R, G, B) and the middle color of
    each of k equal slices is taken. With k <= len(colors) the picks are all
    distinct.

    Args:
        colors: (n, 3) distinct colors
        k: Number of seeds, 1 <= k <= n

    Returns:
        (k, 3) float64 array of seeds
    """
    n = len(colors)
    luma = colors @ _LUMA
    order = np.lexsort((colors[:, 2], colors[:, 1], colors[:, 0], luma))
    picks = ((2 * np.arange(k) + 1) * n) // (2 * k)
    return colors[order[picks]].astype(np.float64)


def _weighted_means(
    colors: np.ndarray,
    weights: np.ndarray,
    labels: np.ndarray,
    k: int
) -> tuple:
    counts = np.bincount(labels, weights=weights, minlength=k)
    sums = np.stack(
        [np.bincount(labels, weights=weights * colors[:, c], minlength=k) for c in range(colors.shape[1])],
        axis=-1
    )
    return sums, counts


def kmeans_palette(
    colors: np.ndarray,
    k: int,
    weights: Optional[np.ndarray] = None,
    config: Optional[KMeansConfig] = None
) -> KMeansResult:
    """
    Cluster distinct colors into k centroids with Lloyd's algorithm.

    Every iteration assigns each color to its nearest centroid (Euclidean),
    then moves each centroid to the weighted mean of its colors. A centroid
    left without colors is re-seeded to the color lying farthest from its
    own centroid. Stops once no centroid moves more than
    config.tolerance * 255, or after config.max_iter iterations.

    Args:
        colors: (n, 3) distinct colors, 0-255
        k: Number of clusters, 1 <= k <= n
        weights: Pixel count of each color (defaults to 1 each)
        config: Convergence settings

    Returns:
        KMeansResult with final centroids and labels
    """
    config = config or KMeansConfig()
    colors = np.asarray(colors, dtype=np.float64)
    n = len(colors)

    if not 1 <= k <= n:
        raise QuantizationError(f"k must be in 1..{n} for {n} distinct colors, got {k}")

    if weights is None:
        weights = np.ones(n, dtype=np.float64)
    else:
        weights = np.asarray(weights, dtype=np.float64)

    tolerance = config.tolerance * 255.0
    centroids = initial_centroids(colors, k)
    converged = False
    iteration = 0

    for iteration in range(1, config.max_iter + 1):
        labels = pairwise_distances_argmin(colors, centroids)
        sums, counts = _weighted_means(colors, weights, labels, k)

        updated = centroids.copy()
        filled = counts > 0
        updated[filled] = sums[filled] / counts[filled, None]

        empty = np.flatnonzero(~filled)
        if empty.size:
            # Farthest colors first; each one seeds a single empty cluster
            distances = np.linalg.norm(colors - centroids[labels], axis=1)
            farthest = np.argsort(-distances, kind="stable")
            for cluster, color_idx in zip(empty, farthest):
                updated[cluster] = colors[color_idx]
            logger.debug(f"K-means iteration {iteration}: re-seeded {empty.size} empty cluster(s)")

        shift = float(np.max(np.linalg.norm(updated - centroids, axis=1)))
        centroids = updated

        if not empty.size and shift < tolerance:
            converged = True
            break

    labels = pairwise_distances_argmin(colors, centroids)

    if not converged:
        logger.warning(f"K-means stopped after {iteration} iterations without converging")

    return KMeansResult(centroids=centroids, labels=labels, iterations=iteration, converged=converged)


def quantize(
    image: RasterImage,
    k: int,
    config: Optional[KMeansConfig] = None
) -> RasterImage:
    """
    Reduce an image to at most k colors with k-means.

    Only the color channels are clustered; alpha is copied through. The
    clustering runs over the distinct colors weighted by pixel count, which
    gives the same centroids as clustering every pixel.

    Args:
        image: Input image
        k: Palette size, 1-64
        config: Convergence settings

    Returns:
        New RasterImage using at most k colors

    Raises:
        QuantizationError: If k is out of range
    """
    if isinstance(k, bool) or not MIN_COLORS <= k <= MAX_COLORS:
        raise QuantizationError(f"k must be in {MIN_COLORS}..{MAX_COLORS}, got {k}")

    pixels = image.color.reshape(-1, 3)
    colors, inverse, counts = np.unique(pixels, axis=0, return_inverse=True, return_counts=True)
    inverse = inverse.reshape(-1)

    if len(colors) <= k:
        logger.info(f"Image has {len(colors)} distinct colors, k={k}: palette kept as is")
        return RasterImage(image.pixels)

    result = kmeans_palette(colors, k, weights=counts, config=config)
    logger.info(
        f"K-means: {len(colors)} distinct colors -> {k} clusters "
        f"in {result.iterations} iterations"
    )

    quantized: ImageArray = result.palette[result.labels][inverse]
    return image.with_color(quantized.reshape(image.height, image.width, 3))


def extract_palette(image: RasterImage) -> np.ndarray:
    """Distinct RGB colors of an image, ordered by how many pixels use them."""
    colors, counts = np.unique(image.color.reshape(-1, 3), axis=0, return_counts=True)
    return colors[np.argsort(-counts, kind="stable")]
