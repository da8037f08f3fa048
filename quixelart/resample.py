"""Area and nearest-neighbour resampling of raster images."""
import logging
from typing import Tuple

import numpy as np
from PIL import Image

from quixelart.raster_ingest import to_pil
from quixelart.types import RasterImage, ResampleMode

logger = logging.getLogger(__name__)

_PIL_FILTERS = {
    ResampleMode.AREA: Image.Resampling.BOX,
    ResampleMode.NEAREST: Image.Resampling.NEAREST,
}


def scaled_size(width: int, height: int, pixelize: int) -> Tuple[int, int]:
    """
    Size of the image after shrinking it by `pixelize` percent.

    Each dimension is round(dim * (100 - pixelize) / 100), rounding halves
    up, and never drops below 1.

    Args:
        width: Source width
        height: Source height
        pixelize: Shrink percentage (0 keeps the size)

    Returns:
        (width, height) of the downsampled image
    """
    keep = 100 - pixelize
    new_width = (width * keep * 2 + 100) // 200
    new_height = (height * keep * 2 + 100) // 200
    return max(1, new_width), max(1, new_height)


def resample(
    image: RasterImage,
    target_width: int,
    target_height: int,
    mode: ResampleMode = ResampleMode.AREA
) -> RasterImage:
    """
    Resize an image with an area (box) or nearest-neighbour filter.

    AREA averages every source pixel under the footprint of an output pixel,
    which anti-aliases the image before quantization. NEAREST copies the
    closest source pixel and is what turns the small image into hard blocks.

    Args:
        image: Source image
        target_width: Output width, clamped to at least 1
        target_height: Output height, clamped to at least 1
        mode: Filter to use

    Returns:
        New RasterImage of the requested size
    """
    target_width = max(1, int(target_width))
    target_height = max(1, int(target_height))

    if (target_width, target_height) == image.size:
        return RasterImage(image.pixels)

    logger.debug(
        f"Resampling {image.width}x{image.height} -> {target_width}x{target_height} ({mode.name})"
    )

    pil_image = to_pil(image)
    size = (target_width, target_height)

    if mode is ResampleMode.AREA:
        # Each band on its own: Pillow premultiplies RGBA by alpha for BOX
        bands = [band.resize(size, resample=_PIL_FILTERS[mode]) for band in pil_image.split()]
        resized = Image.merge(pil_image.mode, bands)
    else:
        resized = pil_image.resize(size, resample=_PIL_FILTERS[mode])

    return RasterImage(np.asarray(resized))


def downsample(image: RasterImage, pixelize: int) -> RasterImage:
    """Shrink an image by `pixelize` percent with the area filter."""
    width, height = scaled_size(image.width, image.height, pixelize)
    return resample(image, width, height, ResampleMode.AREA)


def upsample(image: RasterImage, width: int, height: int) -> RasterImage:
    """Blow an image up to an explicit size with nearest-neighbour blocks."""
    return resample(image, width, height, ResampleMode.NEAREST)
