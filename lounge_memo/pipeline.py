"""
Frame Pipeline Module for Lounge Memo

Producer/consumer harness around the detector machine.

    frame source --(bounded frame queue)--> Consumer --> result.json
                                               ^    +--> on_result callback
                          edit queue ----------/

The consumer is the only writer of the session aggregate. Edits from the UI
arrive as complete replacement aggregates and are merged at the top of each
frame iteration.
"""

import logging
import queue
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import numpy as np

from .capture import TARGET_FPS, CaptureError, FrameSource
from .courses import CourseCatalog
from .detector import DetectorContext, DetectorMachine, DetectorState
from .mogi_result import MogiResult
from .ocr import create_engine
from .ocr.debug import DEBUG_DIR, save_debug_image
from .snapshots import SnapshotSink
from .template_matcher import ResultsBanner

logger = logging.getLogger(__name__)

FRAME_QUEUE_SIZE = 10
FPS_LOG_INTERVAL = 30

# Seconds between stop-flag checks while the frame queue is full
PUT_POLL_SEC = 0.2

ResultCallback = Callable[[MogiResult], None]


def _put_frame(frames: queue.Queue, frame: Optional[np.ndarray], stop_event: threading.Event) -> bool:
    """Blocking put that gives up once a stop is requested."""
    while True:
        try:
            frames.put(frame, timeout=PUT_POLL_SEC)
            return True
        except queue.Full:
            if stop_event.is_set():
                return False


def close_channel(frames: queue.Queue, stop_event: threading.Event) -> None:
    """
    Queue the end-of-stream marker.

    Waits for room like any frame. Only once a stop was requested, when the
    consumer may no longer be draining, is the oldest queued frame dropped
    to make room.
    """
    if _put_frame(frames, None, stop_event):
        return
    while True:
        try:
            frames.put_nowait(None)
            return
        except queue.Full:
            try:
                frames.get_nowait()
            except queue.Empty:
                pass


def run_producer(source: FrameSource, frames: queue.Queue, stop_event: threading.Event,
                 fps: float = TARGET_FPS) -> None:
    """
    Read frames from a source into the frame queue until stopped or exhausted.

    Live sources are throttled to fps. The queue is always closed on exit;
    capture errors end the stream instead of propagating.

    Args:
        source: Frame source
        frames: Bounded frame queue; None marks the end of the stream
        stop_event: Set to stop producing
        fps: Frame rate cap for live sources
    """
    frame_interval = 1.0 / fps if source.live and fps > 0 else 0.0
    logger.info(f"Producer started: {source.description}")
    try:
        while not stop_event.is_set():
            frame_start = time.perf_counter()

            frame = source.read()
            if frame is None:
                logger.info(f"{source.description}: end of stream")
                break
            if not _put_frame(frames, frame, stop_event):
                break

            remaining = frame_interval - (time.perf_counter() - frame_start)
            if remaining > 0:
                stop_event.wait(remaining)
    except CaptureError as e:
        logger.error(f"Capture failed: {e}")
    finally:
        source.release()
        close_channel(frames, stop_event)
        logger.info("Producer stopped")


class Consumer:
    """
    Drives the detector machine over the frame queue.

    After every frame that changed the aggregate (by detection or by an
    applied edit), the aggregate is written to result_file and a copy is
    handed to on_result. Persistence errors propagate and end run().

    Example:
        consumer = Consumer(context, MogiResult(), Path("result.json"), on_result=print)
        consumer.run(frames, edits)
    """

    def __init__(self, context: DetectorContext, mogi_result: MogiResult,
                 result_file: Optional[Path] = Path("result.json"),
                 on_result: Optional[ResultCallback] = None,
                 on_fps: Optional[Callable[[float], None]] = None):
        self.context = context
        self.mogi_result = mogi_result
        self.result_file = Path(result_file) if result_file is not None else None
        self.on_result = on_result
        self.on_fps = on_fps
        self.machine = DetectorMachine(context, mogi_result)
        self._published = mogi_result.copy()
        self._debug_requested = threading.Event()

    @property
    def state(self) -> DetectorState:
        return self.machine.state

    def request_debug_image(self) -> None:
        """Ask for an annotated OCR image of the next frame (thread-safe)."""
        self._debug_requested.set()

    def run(self, frames: queue.Queue, edits: queue.Queue) -> None:
        """
        Consume frames until the end-of-stream marker.

        Args:
            frames: Frame queue fed by run_producer()
            edits: Queue of replacement aggregates from the UI, polled once per frame

        Raises:
            OSError: If result.json or a snapshot cannot be written
            ValueError: If a scoreboard reading maps to an impossible position
        """
        logger.info("Consumer started")
        self._broadcast()

        frame_count = 0
        window_start = time.perf_counter()
        while True:
            frame = frames.get()
            if frame is None:
                logger.info("Frame channel closed, consumer stopping")
                return

            frame_count += 1
            if frame_count % FPS_LOG_INTERVAL == 0:
                now = time.perf_counter()
                fps = FPS_LOG_INTERVAL / (now - window_start) if now > window_start else 0.0
                window_start = now
                logger.debug(f"Consumer fps: {fps:.1f} ({self.state.name})")
                if self.on_fps:
                    self.on_fps(fps)

            self._apply_edit(edits)
            self.machine.update(frame, self.mogi_result)

            if self.mogi_result != self._published:
                self._publish()

            if self._debug_requested.is_set():
                self._debug_requested.clear()
                self._save_debug_image(frame)

    def _apply_edit(self, edits: queue.Queue) -> None:
        try:
            edited = edits.get_nowait()
        except queue.Empty:
            return
        self.machine.resync(self.mogi_result, edited)
        self.mogi_result = edited
        logger.info("Manual edit applied")

    def _publish(self) -> None:
        logger.debug(f"Aggregate changed:\n{self.mogi_result}")
        if self.result_file is not None:
            self.mogi_result.save(self.result_file)
            logger.info(f"Updated {self.result_file}")
        self._published = self.mogi_result.copy()
        self._broadcast()

    def _broadcast(self) -> None:
        if self.on_result:
            self.on_result(self.mogi_result.copy())

    def _save_debug_image(self, frame: np.ndarray) -> Optional[Path]:
        words = self.context.recognize(frame)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
        path = DEBUG_DIR / f"debug_{timestamp}.png"
        try:
            save_debug_image(frame, words, str(path), debug_dir=DEBUG_DIR)
        except OSError as e:
            logger.error(f"Could not save debug image: {e}")
            return None
        logger.info(f"Debug image saved: {path}")
        return path


class FramePipeline:
    """
    Runs a producer thread and the consumer on the calling thread.

    Example:
        pipeline = FramePipeline(source, consumer)
        pipeline.run()          # blocks until the source ends or stop() is called
    """

    def __init__(self, source: FrameSource, consumer: Consumer, queue_size: int = FRAME_QUEUE_SIZE):
        self.source = source
        self.consumer = consumer
        self.frames: queue.Queue = queue.Queue(maxsize=queue_size)
        self.edits: queue.Queue = queue.Queue()
        self._stop_event = threading.Event()
        self._producer: Optional[threading.Thread] = None

    def run(self) -> None:
        """
        Run until the stream ends or stop() is called.

        Raises:
            Whatever the consumer raises (persistence failures are fatal)
        """
        self._stop_event.clear()
        self._producer = threading.Thread(
            target=run_producer,
            args=(self.source, self.frames, self._stop_event),
            name="frame-producer",
            daemon=True,
        )
        self._producer.start()
        try:
            self.consumer.run(self.frames, self.edits)
        finally:
            self._stop_event.set()
            self._producer.join(timeout=2.0)
            self._producer = None

    def submit_edit(self, mogi_result: MogiResult) -> None:
        """Queue a replacement aggregate for the consumer (thread-safe)."""
        self.edits.put(mogi_result.copy())

    def stop(self) -> None:
        """Stop the producer; the consumer drains the queue and returns."""
        logger.info("Pipeline stop requested")
        self._stop_event.set()


def create_context(settings: Dict[str, Any]) -> DetectorContext:
    """
    Build detector collaborators from settings.

    The OCR reader itself loads lazily on the first recognized frame.

    Raises:
        ValueError: If the OCR engine type is not recognized
    """
    engine = create_engine(
        settings["ocr_engine"],
        languages=settings["ocr_languages"],
        gpu=settings["ocr_gpu"],
    )
    banner = ResultsBanner()
    if not banner.load(Path(settings["template_dir"])):
        logger.warning("Results banner template unavailable, race finishes will not be detected")
    return DetectorContext(
        ocr=engine,
        catalog=CourseCatalog(),
        banner=banner,
        snapshots=SnapshotSink(Path(settings["results_dir"])),
    )
