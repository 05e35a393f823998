"""
Lounge Memo - Entry Point

Launches the results window and manages the capture/detect worker thread,
or replays a recording without a window in headless mode.

Example:
    python main.py
    python main.py --source screen --device 2
    python main.py --headless --video recording.mp4
    python main.py --resume             # continue the session in result.json
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from PyQt5.QtWidgets import QApplication

from lounge_memo.capture import CaptureError, create_source
from lounge_memo.control_ui import ResultWindow
from lounge_memo.courses import CourseCatalog
from lounge_memo.mogi_result import MogiResult
from lounge_memo.pipeline import Consumer, FramePipeline, create_context
from lounge_memo.result_worker import ResultWorker
from lounge_memo.settings import load_settings, save_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE = "lounge_memo.log"

logger = logging.getLogger(__name__)


def configure_logging(level: str, write_to_file: bool) -> None:
    """
    Configure root logging: console at the chosen level, optional DEBUG log file.

    Safe to call again when the settings change.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()  # Console output
    console.setLevel(getattr(logging, level.upper(), logging.INFO))
    handlers = [console]
    if write_to_file:
        file_handler = logging.FileHandler(LOG_FILE, mode='w', encoding='utf-8')  # File output
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )


def load_session(settings: Dict[str, Any], resume: bool) -> MogiResult:
    """
    Start a new session, or reload the previous one from result_file.

    Raises:
        OSError, ValueError: If --resume was given and the file is unusable
    """
    if not resume:
        return MogiResult()
    return MogiResult.load(Path(settings["result_file"]))


class Application:
    """
    Main application controller.

    Manages the lifecycle of the UI and worker thread,
    connecting signals between them.
    """

    def __init__(self, settings: Dict[str, Any], mogi_result: MogiResult):
        """
        Initialize the application.

        Args:
            settings: Effective settings (saved settings with CLI overrides)
            mogi_result: Aggregate to start from
        """
        self.settings = settings
        self.mogi_result = mogi_result
        self.catalog = CourseCatalog()
        self.window: Optional[ResultWindow] = None
        self.worker: Optional[ResultWorker] = None
        self.exit_code = 0

    def setup(self):
        """Set up the UI and connect signals."""
        self.window = ResultWindow(self.catalog, self.settings)

        # Connect UI signals to handlers
        self.window.start_requested.connect(self._on_start)
        self.window.stop_requested.connect(self._on_stop)
        self.window.shutdown_requested.connect(self._on_shutdown)
        self.window.preview_requested.connect(self._on_preview)
        self.window.debug_requested.connect(self._on_debug_requested)
        self.window.edit_submitted.connect(self._on_edit)
        self.window.clear_requested.connect(self._on_clear)
        self.window.settings_changed.connect(self._on_settings_changed)

        self.window.set_result(self.mogi_result)
        logger.info(f"Application initialized, {len(self.mogi_result.races)} races in session")

    def _on_start(self):
        """Handle start button click."""
        if self.worker and self.worker.isRunning():
            logger.warning("Worker already running")
            return

        try:
            self.worker = ResultWorker(self.settings, self.mogi_result)
        except ValueError as e:
            logger.error(f"Cannot start: {e}")
            self.window.set_status(f"Error: {e}")
            return

        logger.info(f"Starting result worker ({self.worker.source_description})")

        # Connect worker signals to UI
        self.worker.result_changed.connect(self._on_result_changed)
        self.worker.status_changed.connect(self.window.set_status)
        self.worker.error_occurred.connect(self._on_error)
        self.worker.fps_update.connect(self.window.set_fps_info)
        self.worker.finished.connect(self._on_worker_finished)

        self.worker.start()
        self.window.set_running(True)

    def _on_stop(self):
        """Handle stop button click."""
        if not self.worker or not self.worker.isRunning():
            logger.warning("Worker not running")
            return

        logger.info("Stopping result worker")
        self.worker.request_stop()
        self.worker.wait(5000)

        if self.worker.isRunning():
            logger.warning("Worker did not stop gracefully, terminating")
            self.worker.terminate()
            self.worker.wait()

        self.worker = None
        self.window.set_running(False)

    def _on_worker_finished(self):
        """Worker ended on its own (stream ended or pipeline aborted)."""
        if self.worker is not None and not self.worker.isRunning():
            self.worker = None
            self.window.set_running(False)

    def _on_shutdown(self):
        """Handle window close."""
        logger.info("Shutdown requested")
        if self.worker and self.worker.isRunning():
            self._on_stop()

    def _on_error(self, error_msg: str):
        """Handle a fatal worker error: the session state can no longer be trusted."""
        logger.critical(f"Worker error: {error_msg}")
        self.window.set_status(f"Error: {error_msg}")
        self.exit_code = 1
        QApplication.instance().exit(self.exit_code)

    def _on_result_changed(self, mogi_result: MogiResult):
        self.mogi_result = mogi_result
        self.window.set_result(mogi_result)

    def _apply_result(self, mogi_result: MogiResult):
        """Route a user-made aggregate through the worker, or persist it directly when stopped."""
        if self.worker and self.worker.isRunning():
            self.worker.submit_edit(mogi_result)
            return
        self.mogi_result = mogi_result
        self.window.set_result(mogi_result)
        try:
            mogi_result.save(Path(self.settings["result_file"]))
        except OSError as e:
            logger.error(f"Could not save result: {e}")
            self.window.set_status(f"Error: {e}")

    def _on_edit(self, mogi_result: MogiResult):
        logger.info("Results edited manually")
        self._apply_result(mogi_result)

    def _on_clear(self):
        logger.info("New session requested")
        self._apply_result(MogiResult())

    def _on_settings_changed(self, settings: Dict[str, Any]):
        """Handle settings change from UI."""
        logging_changed = (
            settings.get("log_level") != self.settings.get("log_level")
            or settings.get("write_log_to_file") != self.settings.get("write_log_to_file")
        )
        self.settings.update(settings)
        save_settings(self.settings)
        if logging_changed:
            configure_logging(self.settings["log_level"], self.settings["write_log_to_file"])
            logger.info(f"Log level set to {self.settings['log_level']}")

    def _on_preview(self):
        """Grab a single frame from the selected source."""
        try:
            source = create_source(self.settings)
        except ValueError as e:
            self.window.set_status(f"Error: {e}")
            return
        try:
            frame = source.read()
        except CaptureError as e:
            logger.error(f"Preview failed: {e}")
            self.window.set_status(f"Error: {e}")
            return
        finally:
            source.release()
        if frame is not None:
            self.window.show_preview(frame)

    def _on_debug_requested(self):
        """Handle debug image save request."""
        if self.worker and self.worker.isRunning():
            self.worker.request_debug_image()

    def run(self) -> int:
        """
        Run the application.

        Returns:
            Exit code
        """
        self.window.show()
        return 0


def run_headless(settings: Dict[str, Any], mogi_result: MogiResult) -> int:
    """
    Run the pipeline without a window until the source ends.

    Persistence errors are not caught here.
    """
    source = create_source(settings)
    context = create_context(settings)
    consumer = Consumer(
        context,
        mogi_result,
        result_file=Path(settings["result_file"]),
        on_result=lambda result: logger.info(f"Result updated:\n{result}"),
    )
    pipeline = FramePipeline(source, consumer)
    try:
        pipeline.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
        pipeline.stop()
    print(consumer.mogi_result)
    return 0


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Lounge Memo - records course and finishing position from a game capture"
    )
    parser.add_argument(
        "--source", "-s",
        choices=["camera", "screen", "video"],
        help="Frame source (default: saved setting)"
    )
    parser.add_argument(
        "--device",
        type=int,
        help="Capture device index, or monitor number for --source screen"
    )
    parser.add_argument(
        "--video",
        help="Video file to replay (implies --source video)"
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window until the source ends"
    )
    parser.add_argument(
        "--resume", "-r",
        action="store_true",
        help="Continue the session saved in the result file"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable DEBUG console logging"
    )
    return parser.parse_args(argv)


def apply_overrides(settings: Dict[str, Any], args) -> Dict[str, Any]:
    """Effective settings for this run; CLI flags override saved values."""
    settings = dict(settings)
    if args.video:
        settings["source"] = "video"
        settings["video_path"] = args.video
    if args.source:
        settings["source"] = args.source
    if args.device is not None:
        key = "monitor" if settings["source"] == "screen" else "device_index"
        settings[key] = args.device
    if args.debug:
        settings["log_level"] = "DEBUG"
    return settings


def main(argv=None):
    """Initialize and run the Lounge Memo application."""
    args = parse_args(argv)
    saved = load_settings()
    settings = apply_overrides(saved, args)
    configure_logging(settings["log_level"], settings["write_log_to_file"])

    mogi_result = load_session(settings, args.resume)

    if args.headless:
        sys.exit(run_headless(settings, mogi_result))

    app = QApplication(sys.argv)

    application = Application(settings, mogi_result)
    application.setup()
    application.run()

    code = app.exec_()
    sys.exit(application.exit_code or code)


if __name__ == "__main__":
    main()
