"""QuixelArt: photograph to pixel art.

Downsamples an image with an area filter, optionally adjusts its tones,
reduces it to a small palette with k-means and blows it back up to its
original size with nearest-neighbour blocks.
"""
from quixelart.types import (
    RasterImage,
    PixelizationParams,
    LevelsParams,
    ModulateParams,
    KMeansConfig,
    ResampleMode,
    PixelizationError,
    InvalidImageError,
    InvalidParamsError,
    QuantizationError,
)
from quixelart.pipeline import PixelizePipeline, render, process_image

__version__ = "0.1.0"

__all__ = [
    "RasterImage",
    "PixelizationParams",
    "LevelsParams",
    "ModulateParams",
    "KMeansConfig",
    "ResampleMode",
    "PixelizationError",
    "InvalidImageError",
    "InvalidParamsError",
    "QuantizationError",
    "PixelizePipeline",
    "render",
    "process_image",
]
