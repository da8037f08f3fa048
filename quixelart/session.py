"""Headless editor session: palette slider state and when it triggers a render.

Sliders emit two kinds of events. "Changed" only stores the new value;
"released" re-renders. Toggling levels or modulate re-renders at once.
Releasing a levels or modulate slider only re-renders while that stage is
switched on, since its values have no effect otherwise.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from quixelart.types import (
    LevelsParams,
    ModulateParams,
    PixelizationParams,
    RasterImage,
    _check_range,
)
from quixelart.worker import RenderCallback, RenderWorker

logger = logging.getLogger(__name__)


class Slider(Enum):
    """Palette sliders; value is (state field, min, max)."""
    PIXELIZE = ("pixelize", 0, 99)
    KCOLORS = ("kcolors", 1, 64)
    LEVEL_BLACK = ("level_black", 0, 100)
    LEVEL_WHITE = ("level_white", 0, 100)
    MODULATE_BRIGHTNESS = ("modulate_brightness", 0, 200)
    MODULATE_SATURATION = ("modulate_saturation", 0, 200)
    MODULATE_HUE = ("modulate_hue", 0, 200)


_LEVEL_SLIDERS = (Slider.LEVEL_BLACK, Slider.LEVEL_WHITE)
_MODULATE_SLIDERS = (Slider.MODULATE_BRIGHTNESS, Slider.MODULATE_SATURATION, Slider.MODULATE_HUE)


@dataclass
class PaletteState:
    """Mutable slider and checkbox values, with the editor's start-up defaults."""
    pixelize: int = 80
    kcolors: int = 32
    level_toggle: bool = True
    level_black: int = 10
    level_white: int = 80
    modulate_toggle: bool = False
    modulate_brightness: int = 100
    modulate_saturation: int = 100
    modulate_hue: int = 100


class EditorSession:
    """Owns the mutable palette state and hands immutable snapshots to a RenderWorker."""

    def __init__(
        self,
        worker: Optional[RenderWorker] = None,
        on_render: Optional[RenderCallback] = None,
        state: Optional[PaletteState] = None
    ):
        self.worker = worker or RenderWorker()
        self.on_render = on_render
        self.state = state or PaletteState()
        self.source: Optional[RasterImage] = None

    def snapshot(self) -> PixelizationParams:
        """Freeze the current state into pipeline parameters."""
        s = self.state
        levels = LevelsParams(s.level_black, s.level_white) if s.level_toggle else None
        modulate = (
            ModulateParams(s.modulate_brightness, s.modulate_saturation, s.modulate_hue)
            if s.modulate_toggle else None
        )
        return PixelizationParams(
            pixelize=s.pixelize,
            kcolors=s.kcolors,
            levels=levels,
            modulate=modulate,
        )

    def open(self, source: RasterImage) -> Optional[int]:
        """Set a new source image and render it."""
        self.source = source
        return self._render()

    def change(self, slider: Slider, value: int) -> None:
        """Slider moved: store the value, no render."""
        name, low, high = slider.value
        _check_range(name, value, low, high)
        setattr(self.state, name, value)

    def release(self, slider: Slider) -> Optional[int]:
        """Slider let go: render, unless the slider's stage is switched off."""
        if slider in _LEVEL_SLIDERS and not self.state.level_toggle:
            return None
        if slider in _MODULATE_SLIDERS and not self.state.modulate_toggle:
            return None
        return self._render()

    def toggle_levels(self, enabled: bool) -> Optional[int]:
        self.state.level_toggle = enabled
        return self._render()

    def toggle_modulate(self, enabled: bool) -> Optional[int]:
        self.state.modulate_toggle = enabled
        return self._render()

    def _render(self) -> Optional[int]:
        if self.source is None:
            logger.debug("No source image yet, skipping render")
            return None
        return self.worker.submit(self.source, self.snapshot(), self.on_render)

    def close(self) -> None:
        self.worker.shutdown()
