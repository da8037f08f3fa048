"""Tests for the editor session trigger contract."""
import pytest

from quixelart.session import EditorSession, PaletteState, Slider
from quixelart.types import InvalidParamsError, LevelsParams, ModulateParams, PixelizationParams
from quixelart.worker import RenderWorker


class RecordingWorker:
    """Worker stand-in that records every submitted snapshot."""

    def __init__(self):
        self.submitted = []

    def submit(self, source, params, callback=None):
        self.submitted.append(params)
        return len(self.submitted)

    def shutdown(self, wait=True):
        pass


@pytest.fixture
def session(gray_image):
    session = EditorSession(worker=RecordingWorker())
    session.open(gray_image)
    return session


class TestEditorSession:
    """Test cases for EditorSession."""

    def test_open_renders(self, session):
        assert len(session.worker.submitted) == 1
        assert session.worker.submitted[0] == PixelizationParams.default()

    def test_no_source_no_render(self):
        session = EditorSession(worker=RecordingWorker())

        assert session.release(Slider.PIXELIZE) is None
        assert session.toggle_levels(False) is None
        assert session.worker.submitted == []

    def test_change_only_stores(self, session):
        session.change(Slider.PIXELIZE, 60)
        session.change(Slider.KCOLORS, 8)

        assert session.state.pixelize == 60
        assert session.state.kcolors == 8
        assert len(session.worker.submitted) == 1

    def test_release_renders_snapshot(self, session):
        session.change(Slider.KCOLORS, 8)
        ticket = session.release(Slider.KCOLORS)

        assert ticket == 2
        assert session.worker.submitted[-1].kcolors == 8

    def test_level_release_needs_levels_on(self, session):
        session.change(Slider.LEVEL_BLACK, 30)
        assert session.release(Slider.LEVEL_BLACK) == 2

        session.toggle_levels(False)
        assert session.worker.submitted[-1].levels is None
        assert session.release(Slider.LEVEL_WHITE) is None
        assert len(session.worker.submitted) == 3

    def test_modulate_release_needs_modulate_on(self, session):
        session.change(Slider.MODULATE_HUE, 150)
        assert session.release(Slider.MODULATE_HUE) is None

        session.toggle_modulate(True)
        assert session.worker.submitted[-1].modulate == ModulateParams(100, 100, 150)
        assert session.release(Slider.MODULATE_SATURATION) == 3

    def test_toggle_renders_immediately(self, session):
        session.toggle_modulate(True)
        session.toggle_levels(False)

        assert len(session.worker.submitted) == 3

    def test_crossed_level_sliders(self, session):
        session.change(Slider.LEVEL_BLACK, 90)
        session.change(Slider.LEVEL_WHITE, 20)
        session.release(Slider.LEVEL_WHITE)

        assert session.worker.submitted[-1].levels == LevelsParams(90, 20)

    @pytest.mark.parametrize("slider, value", [
        (Slider.PIXELIZE, 100),
        (Slider.KCOLORS, 0),
        (Slider.LEVEL_WHITE, 101),
        (Slider.MODULATE_BRIGHTNESS, 201),
    ])
    def test_change_out_of_range(self, session, slider, value):
        with pytest.raises(InvalidParamsError):
            session.change(slider, value)

    @pytest.mark.parametrize("value", [50.5, "50", True])
    def test_change_rejects_non_integer(self, session, value):
        with pytest.raises(InvalidParamsError):
            session.change(Slider.PIXELIZE, value)

        assert session.state.pixelize == 80
        assert session.release(Slider.PIXELIZE) == 2

    def test_snapshot_is_detached(self, session):
        snapshot = session.snapshot()
        session.change(Slider.PIXELIZE, 10)

        assert snapshot.pixelize == 80
        assert session.snapshot().pixelize == 10

    def test_custom_state(self):
        state = PaletteState(pixelize=50, kcolors=4, level_toggle=False)
        session = EditorSession(worker=RecordingWorker(), state=state)

        assert session.snapshot() == PixelizationParams(pixelize=50, kcolors=4)


class TestEditorSessionRendering:
    """End-to-end rendering through a real worker."""

    def test_open_and_release(self, gray_image):
        results = []
        session = EditorSession(worker=RenderWorker(), on_render=results.append)

        session.open(gray_image)
        session.change(Slider.KCOLORS, 1)
        session.release(Slider.KCOLORS)
        outcome = session.worker.wait(timeout=30)
        session.close()

        assert outcome.ok
        assert outcome.image.size == gray_image.size
        assert results[-1].generation == outcome.generation
