"""Core types for the pixelization pipeline."""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple, Union

import numpy as np

# Type aliases
ImageArray = np.ndarray
Color = Union[Tuple[int, int, int], Tuple[int, int, int, int]]


class PixelizationError(Exception):
    """Base exception for pixelization errors."""
    pass


class InvalidImageError(PixelizationError):
    """Exception raised for empty or malformed pixel buffers."""
    pass


class InvalidParamsError(PixelizationError, ValueError):
    """Exception raised when a parameter is outside its allowed range."""
    pass


class QuantizationError(PixelizationError):
    """Exception raised during color quantization."""
    pass


class ResampleMode(Enum):
    """Resampling filters used by the pipeline."""
    AREA = auto()
    NEAREST = auto()


@dataclass(frozen=True)
class RasterImage:
    """Decoded image: (height, width, channels) uint8 buffer, RGB or RGBA.

    The buffer is copied on construction and marked read-only, so an image
    handed from one stage to the next can never be mutated behind its back.
    """
    pixels: ImageArray = field(repr=False)

    def __post_init__(self):
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise InvalidImageError(f"Expected numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3:
            raise InvalidImageError(f"Expected (H, W, C) array, got {pixels.ndim}D")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidImageError(f"Image has zero size: {pixels.shape[1]}x{pixels.shape[0]}")
        if pixels.shape[2] not in (3, 4):
            raise InvalidImageError(f"Expected 3 or 4 channels, got {pixels.shape[2]}")
        if pixels.dtype != np.uint8:
            raise InvalidImageError(f"Expected uint8 samples, got {pixels.dtype}")

        owned = np.array(pixels, dtype=np.uint8, copy=True)
        owned.setflags(write=False)
        object.__setattr__(self, "pixels", owned)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height), the same order Pillow uses."""
        return self.width, self.height

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4

    @property
    def color(self) -> ImageArray:
        """Color channels only (alpha excluded)."""
        return self.pixels[..., :3]

    @property
    def alpha(self) -> Optional[ImageArray]:
        return self.pixels[..., 3] if self.has_alpha else None

    def with_color(self, color: ImageArray) -> "RasterImage":
        """New image with replaced color channels; alpha is carried over."""
        if np.issubdtype(color.dtype, np.floating):
            color = np.rint(color)
        color = np.clip(color, 0, 255).astype(np.uint8)
        if self.has_alpha:
            color = np.concatenate([color, self.pixels[..., 3:4]], axis=-1)
        return RasterImage(color)

    def distinct_colors(self) -> int:
        """Number of distinct RGB colors, ignoring alpha."""
        return int(len(np.unique(self.color.reshape(-1, 3), axis=0)))

    def __eq__(self, other):
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))


def _check_range(name: str, value, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParamsError(f"{name} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise InvalidParamsError(f"{name} must be in {low}..{high}, got {value}")


@dataclass(frozen=True)
class LevelsParams:
    """Black and white points as percentages of the 0-255 range.

    white < black is allowed and inverts the tones; white == black thresholds.
    """
    black: int = 10
    white: int = 80

    def __post_init__(self):
        _check_range("levels black", self.black, 0, 100)
        _check_range("levels white", self.white, 0, 100)


@dataclass(frozen=True)
class ModulateParams:
    """Brightness, saturation and hue in percent; 100 leaves the image unchanged."""
    brightness: int = 100
    saturation: int = 100
    hue: int = 100

    def __post_init__(self):
        _check_range("modulate brightness", self.brightness, 0, 200)
        _check_range("modulate saturation", self.saturation, 0, 200)
        _check_range("modulate hue", self.hue, 0, 200)

    @property
    def is_identity(self) -> bool:
        return self.brightness == 100 and self.saturation == 100 and self.hue == 100


@dataclass(frozen=True)
class PixelizationParams:
    """Immutable parameter snapshot for one pipeline run.

    A stage whose params are None is switched off and skipped entirely.
    """
    pixelize: int = 80
    kcolors: int = 32
    levels: Optional[LevelsParams] = None
    modulate: Optional[ModulateParams] = None

    def __post_init__(self):
        _check_range("pixelize", self.pixelize, 0, 99)
        _check_range("kcolors", self.kcolors, 1, 64)
        if self.levels is not None and not isinstance(self.levels, LevelsParams):
            raise InvalidParamsError(f"levels must be LevelsParams or None, got {self.levels!r}")
        if self.modulate is not None and not isinstance(self.modulate, ModulateParams):
            raise InvalidParamsError(f"modulate must be ModulateParams or None, got {self.modulate!r}")

    @classmethod
    def default(cls) -> "PixelizationParams":
        """Start-up values of the editor: levels on, modulate off."""
        return cls(pixelize=80, kcolors=32, levels=LevelsParams(10, 80), modulate=None)


@dataclass(frozen=True)
class KMeansConfig:
    """Convergence settings for the k-means quantizer."""
    # Largest centroid movement, on a 0-1 scale, that still counts as converged
    tolerance: float = 0.01
    max_iter: int = 100
