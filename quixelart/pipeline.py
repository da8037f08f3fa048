"""Main pipeline orchestrator: downsample, tone, quantize, upsample."""
import logging
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

from quixelart.quantize import quantize
from quixelart.raster_ingest import load_image, save_image
from quixelart.resample import downsample, upsample
from quixelart.tone import adjust_tone
from quixelart.types import KMeansConfig, PixelizationError, PixelizationParams, RasterImage

logger = logging.getLogger(__name__)


class PixelizePipeline:
    """Pixel-art rendering pipeline."""

    def __init__(
        self,
        params: Optional[PixelizationParams] = None,
        kmeans: Optional[KMeansConfig] = None
    ):
        """
        Initialize pipeline with a parameter snapshot.

        Args:
            params: Pipeline parameters. Uses the editor defaults if None.
            kmeans: Quantizer convergence settings. Uses defaults if None.
        """
        self.params = params or PixelizationParams.default()
        self.kmeans = kmeans or KMeansConfig()
        self.debug_stages: List[Tuple[str, RasterImage]] = []

    def render(self, source: RasterImage, debug: bool = False) -> RasterImage:
        """
        Run the four stages over a source image.

        The upsample target is the source's own size, so the output always has
        exactly the source dimensions whatever the pixelize factor.

        Args:
            source: Decoded source image (only read, never modified)
            debug: If True, keep every intermediate image in debug_stages

        Returns:
            New RasterImage the size of the source
        """
        params = self.params
        start_time = time.time()
        self.debug_stages = []

        if debug:
            self.debug_stages.append(("1_original", source))

        # Step 1: Downsample with the area filter
        small = downsample(source, params.pixelize)
        logger.info(
            f"Downsampled {source.width}x{source.height} -> {small.width}x{small.height} "
            f"(pixelize={params.pixelize}%)"
        )
        if debug:
            self.debug_stages.append(("2_downsampled", small))

        # Step 2: Levels and modulate, each skipped when switched off
        adjusted = adjust_tone(small, params.levels, params.modulate)
        if debug and adjusted is not small:
            self.debug_stages.append(("3_toned", adjusted))

        # Step 3: Palette reduction
        quantized = quantize(adjusted, params.kcolors, self.kmeans)
        if debug:
            self.debug_stages.append(("4_quantized", quantized))

        # Step 4: Back to the original size with hard blocks
        result = upsample(quantized, source.width, source.height)
        if debug:
            self.debug_stages.append(("5_result", result))

        logger.info(f"Rendered in {time.time() - start_time:.2f}s")
        return result

    def process(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        debug: bool = False
    ) -> RasterImage:
        """
        Load an image file, render it, and optionally save the result.

        Raises:
            FileNotFoundError: If the input file doesn't exist
            PixelizationError: If loading or rendering fails
        """
        source = load_image(input_path)
        try:
            result = self.render(source, debug=debug)
        except PixelizationError:
            raise
        except Exception as e:
            raise PixelizationError(f"Pipeline processing failed: {e}") from e

        if output_path:
            save_image(result, output_path)
        return result

    def save_stages(self, stages_dir: Union[str, Path]) -> List[Path]:
        """Write the images kept by the last debug render as PNG files."""
        stages_dir = Path(stages_dir)
        stages_dir.mkdir(parents=True, exist_ok=True)

        saved = []
        for stage_name, stage_image in self.debug_stages:
            stage_path = stages_dir / f"{stage_name}.png"
            save_image(stage_image, stage_path)
            saved.append(stage_path)
        return saved


def render(source: RasterImage, params: PixelizationParams) -> RasterImage:
    """
    Render a source image as pixel art.

    Pure function of its inputs: every call is a fresh computation over the
    source, and identical inputs give byte-identical output.

    Example:
        >>> params = PixelizationParams(pixelize=50, kcolors=8)
        >>> art = render(source, params)
    """
    return PixelizePipeline(params).render(source)


def process_image(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    params: Optional[PixelizationParams] = None
) -> RasterImage:
    """Convenience function for one-off file processing."""
    return PixelizePipeline(params).process(input_path, output_path)
