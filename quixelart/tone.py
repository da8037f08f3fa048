"""Tone adjustments: linear levels and HSV brightness/saturation/hue modulation."""
import logging
from typing import Optional

import numpy as np
from skimage.color import hsv2rgb, rgb2hsv

from quixelart.types import LevelsParams, ModulateParams, RasterImage

logger = logging.getLogger(__name__)

# Degrees of hue rotation per percentage point away from 100
HUE_DEGREES_PER_UNIT = 3.6


def apply_levels(image: RasterImage, black_pct: int, white_pct: int) -> RasterImage:
    """
    Linearly remap every color channel between a black and a white point.

    out = clamp((in - black) / (white - black) * 255, 0, 255), with both points
    given as percentages of 255. A white point below the black point inverts
    the tones. When both points coincide the remap degenerates into a
    threshold: 255 where in >= black, 0 elsewhere.

    Args:
        image: Input image (alpha passes through untouched)
        black_pct: Black point, 0-100
        white_pct: White point, 0-100

    Returns:
        New RasterImage with remapped channels
    """
    black = black_pct / 100.0 * 255.0
    white = white_pct / 100.0 * 255.0
    channels = image.color.astype(np.float64)

    if white == black:
        logger.debug(f"Levels black == white ({black_pct}%), thresholding")
        remapped = np.where(channels >= black, 255.0, 0.0)
    else:
        remapped = (channels - black) / (white - black) * 255.0

    return image.with_color(np.clip(remapped, 0.0, 255.0))


def apply_modulate(
    image: RasterImage,
    brightness_pct: int,
    saturation_pct: int,
    hue_pct: int
) -> RasterImage:
    """
    Scale brightness and saturation and rotate hue in HSV space.

    100 is the neutral value for all three. Hue turns by
    (hue_pct - 100) * 3.6 degrees.

    Args:
        image: Input image (alpha passes through untouched)
        brightness_pct: Value multiplier in percent, 0-200
        saturation_pct: Saturation multiplier in percent, 0-200
        hue_pct: Hue offset, 0-200

    Returns:
        New RasterImage with modulated colors
    """
    hsv = rgb2hsv(image.color.astype(np.float64) / 255.0)

    hue_shift = (hue_pct - 100) * HUE_DEGREES_PER_UNIT / 360.0
    hsv[..., 0] = np.mod(hsv[..., 0] + hue_shift, 1.0)
    hsv[..., 1] = np.clip(hsv[..., 1] * (saturation_pct / 100.0), 0.0, 1.0)
    hsv[..., 2] = np.clip(hsv[..., 2] * (brightness_pct / 100.0), 0.0, 1.0)

    rgb = hsv2rgb(hsv) * 255.0
    return image.with_color(np.clip(rgb, 0.0, 255.0))


def adjust_tone(
    image: RasterImage,
    levels: Optional[LevelsParams] = None,
    modulate: Optional[ModulateParams] = None
) -> RasterImage:
    """Apply levels then modulate; a stage given None is skipped outright."""
    if levels is not None:
        image = apply_levels(image, levels.black, levels.white)
    if modulate is not None:
        image = apply_modulate(image, modulate.brightness, modulate.saturation, modulate.hue)
    return image
