"""Background rendering where the most recent request wins."""
import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from quixelart.pipeline import render
from quixelart.types import PixelizationParams, RasterImage

logger = logging.getLogger(__name__)


@dataclass
class RenderOutcome:
    """Result of one background render: an image or the error it raised."""
    generation: int
    image: Optional[RasterImage] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


RenderCallback = Callable[[RenderOutcome], None]


class RenderWorker:
    """
    Runs renders on a single background thread.

    Renders are expensive and parameters change quickly, so requests are not
    queued: a new submit cancels a render that has not started yet, and the
    result of any render that was superseded while running is dropped when it
    arrives. Only the latest request ever reaches the callback.
    """

    def __init__(self, render_fn: Callable[[RasterImage, PixelizationParams], RasterImage] = render):
        self._render_fn = render_fn
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="quixelart-render")
        self._lock = threading.Lock()
        self._generation = 0
        self._future: Optional[Future] = None

    @property
    def generation(self) -> int:
        """Ticket number of the most recent request."""
        with self._lock:
            return self._generation

    def submit(
        self,
        source: RasterImage,
        params: PixelizationParams,
        callback: Optional[RenderCallback] = None
    ) -> int:
        """
        Request a render, superseding any earlier one.

        Args:
            source: Source image (read-only, may be shared between requests)
            params: Parameter snapshot for this render
            callback: Called from the worker thread with the outcome, only if
                      this request is still the latest when it finishes

        Returns:
            Ticket number of this request
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._future is not None and self._future.cancel():
                logger.debug(f"Cancelled queued render #{generation - 1}")
            future = self._executor.submit(self._render_fn, source, params)
            self._future = future

        future.add_done_callback(lambda f: self._deliver(generation, f, callback))
        return generation

    def _deliver(self, generation: int, future: Future, callback: Optional[RenderCallback]) -> None:
        if future.cancelled():
            return

        with self._lock:
            stale = generation != self._generation
        if stale:
            logger.debug(f"Discarding stale render #{generation}")
            return

        outcome = _outcome(generation, future)
        if not outcome.ok:
            logger.error(f"Render #{generation} failed: {outcome.error}")
        if callback is None:
            return
        try:
            callback(outcome)
        except Exception:
            logger.exception(f"Render callback for #{generation} raised")

    def wait(self, timeout: Optional[float] = None) -> Optional[RenderOutcome]:
        """
        Block until the latest request has finished.

        If newer requests arrive while waiting, waits for those instead.
        Returns None if nothing was ever submitted.
        """
        while True:
            with self._lock:
                future = self._future
                generation = self._generation
            if future is None:
                return None

            try:
                future.exception(timeout)
            except CancelledError:
                pass

            with self._lock:
                if generation == self._generation:
                    return _outcome(generation, future)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker thread, dropping any queued render."""
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> "RenderWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()


def _outcome(generation: int, future: Future) -> RenderOutcome:
    if future.cancelled():
        return RenderOutcome(generation, error=CancelledError())
    error = future.exception()
    if error is not None:
        return RenderOutcome(generation, error=error)
    return RenderOutcome(generation, image=future.result())
