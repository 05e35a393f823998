"""
Result Worker Module for Lounge Memo

Provides a background QThread worker that runs the frame pipeline.
Communicates with the UI via Qt signals for thread-safe updates.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from PyQt5.QtCore import QThread, pyqtSignal

from .capture import TARGET_FPS, create_source
from .mogi_result import MogiResult
from .pipeline import Consumer, FramePipeline, create_context


# Configure module logger
logger = logging.getLogger(__name__)


class ResultWorker(QThread):
    """
    Background worker thread for the capture/detect pipeline.

    The pipeline is built on the calling thread so configuration errors
    surface immediately; run() only drives it.

    Signals:
        result_changed(object): Copy of the aggregate after every change
        status_changed(str): Emitted when worker status changes
        error_occurred(str): Emitted when the pipeline aborts
        fps_update(float, float): current_fps, fps_cap

    Example:
        worker = ResultWorker(settings, MogiResult())
        worker.result_changed.connect(window.set_result)
        worker.start()
        # ...
        worker.request_stop()
        worker.wait()
    """

    result_changed = pyqtSignal(object)
    status_changed = pyqtSignal(str)
    error_occurred = pyqtSignal(str)
    fps_update = pyqtSignal(float, float)

    def __init__(self, settings: Dict[str, Any], mogi_result: MogiResult):
        """
        Initialize the worker.

        Args:
            settings: Settings dictionary (see lounge_memo.settings)
            mogi_result: Aggregate the session starts from

        Raises:
            ValueError: If the settings name an unknown source or OCR engine
        """
        super().__init__()
        self._source = create_source(settings)
        context = create_context(settings)
        self._consumer = Consumer(
            context,
            mogi_result,
            result_file=Path(settings["result_file"]),
            on_result=self.result_changed.emit,
            on_fps=self._on_fps,
        )
        self._pipeline = FramePipeline(self._source, self._consumer)

    @property
    def source_description(self) -> str:
        return self._source.description

    def run(self):
        """Main worker loop. Called when thread starts."""
        logger.info(f"Result worker started ({self._source.description})")
        self.status_changed.emit("Running")
        try:
            self._pipeline.run()
        except Exception as e:
            logger.exception("Pipeline aborted")
            self.error_occurred.emit(str(e))
            return
        self.status_changed.emit("Stopped")
        logger.info("Result worker stopped")

    def request_stop(self):
        """
        Request the worker to stop gracefully.

        The consumer drains queued frames before the thread ends.
        Use wait() after calling this to block until stopped.
        """
        logger.info("Stop requested")
        self._pipeline.stop()

    def submit_edit(self, mogi_result: MogiResult):
        """Hand an edited aggregate to the consumer."""
        self._pipeline.submit_edit(mogi_result)

    def request_debug_image(self):
        """Save an annotated OCR image of the next frame to debug/."""
        self._consumer.request_debug_image()

    def _on_fps(self, fps: float) -> None:
        self.fps_update.emit(fps, TARGET_FPS)
