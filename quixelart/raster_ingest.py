"""Raster image ingestion and export through Pillow."""
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageOps

from quixelart.types import InvalidImageError, PixelizationError, RasterImage


def ingest_pil(img: Image.Image) -> RasterImage:
    """
    Convert a Pillow image to a RasterImage.

    Modes carrying transparency (RGBA, LA, PA, P with a transparency entry)
    become RGBA; everything else becomes RGB.
    """
    if img.mode == 'RGBA':
        pass
    elif img.mode in ('LA', 'PA') or (img.mode == 'P' and 'transparency' in img.info):
        img = img.convert('RGBA')
    elif img.mode != 'RGB':
        img = img.convert('RGB')

    return RasterImage(np.asarray(img))


def load_image(path: Union[str, Path]) -> RasterImage:
    """
    Load an image file.

    Args:
        path: Path to image file

    Returns:
        RasterImage in RGB or RGBA

    Raises:
        FileNotFoundError: If file doesn't exist
        InvalidImageError: If file cannot be decoded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise InvalidImageError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            # Apply EXIF orientation transformation to handle rotation
            img = ImageOps.exif_transpose(img)
            img.load()
            return ingest_pil(img)
    except (IOError, OSError) as e:
        raise InvalidImageError(f"Failed to load image {path}: {e}") from e


def image_from_array(image: np.ndarray) -> RasterImage:
    """
    Create a RasterImage from a numpy array.

    Args:
        image: (H, W), (H, W, 3) or (H, W, 4) array, either uint8 or
               float in [0, 1]

    Returns:
        RasterImage
    """
    image = np.asarray(image)

    if image.ndim == 2:
        # Grayscale - convert to RGB
        image = np.stack([image] * 3, axis=-1)

    if image.ndim != 3:
        raise InvalidImageError(f"Expected 2D or 3D array, got {image.ndim}D")

    if np.issubdtype(image.dtype, np.floating):
        image = np.clip(np.rint(image * 255.0), 0, 255).astype(np.uint8)
    elif image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)

    return RasterImage(image)


def to_pil(image: RasterImage) -> Image.Image:
    """Pillow view of a RasterImage (RGB or RGBA)."""
    return Image.fromarray(np.ascontiguousarray(image.pixels))


def save_image(image: RasterImage, path: Union[str, Path]) -> Path:
    """
    Save an image; the format follows the file extension.

    RGBA images saved to a format without alpha support (JPEG) are flattened
    by dropping the alpha channel.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    pil_image = to_pil(image)
    if image.has_alpha and path.suffix.lower() in ('.jpg', '.jpeg'):
        pil_image = pil_image.convert('RGB')

    try:
        pil_image.save(path)
    except (ValueError, OSError) as e:
        raise PixelizationError(f"Failed to save image {path}: {e}") from e
    return path
