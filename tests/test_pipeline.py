"""
Tests for the producer/consumer pipeline.
"""

import queue
import threading
import time
import warnings
from pathlib import Path

import pytest

from conftest import black_top_frame, gray_frame, word
from lounge_memo import pipeline
from lounge_memo.capture import CaptureError, FrameSource
from lounge_memo.courses import Course, Series
from lounge_memo.detector import DetectorState
from lounge_memo.mogi_result import MogiResult
from lounge_memo.pipeline import Consumer, FramePipeline, close_channel, run_producer

MKS = Course("マリオカートスタジアム", Series.NEW)


class ListSource(FrameSource):
    """Replays a list of frames; an exception in the list is raised."""
    live = False

    def __init__(self, frames):
        self._frames = list(frames)
        self.released = False

    @property
    def description(self) -> str:
        return "list"

    def read(self):
        if not self._frames:
            return None
        frame = self._frames.pop(0)
        if isinstance(frame, Exception):
            raise frame
        return frame

    def release(self):
        self.released = True


def channel(*frames) -> queue.Queue:
    frames_queue = queue.Queue()
    for frame in frames:
        frames_queue.put(frame)
    frames_queue.put(None)
    return frames_queue


def drain(frames_queue: queue.Queue) -> list:
    items = []
    while not frames_queue.empty():
        items.append(frames_queue.get_nowait())
    return items


@pytest.fixture
def result_file(tmp_path):
    return tmp_path / "result.json"


# --- Consumer ---

def test_consumer_publishes_detected_course(context, result_file):
    context.ocr.default = [word("マリオカートスタジアム")]
    published = []
    consumer = Consumer(context, MogiResult(), result_file, on_result=published.append)

    consumer.run(channel(*[black_top_frame()] * 5), queue.Queue())

    assert consumer.state is DetectorState.RACE_FINISH
    assert len(published) == 2
    assert published[0].current_course is None
    assert published[-1].current_course == MKS
    assert published[-1] is not consumer.mogi_result
    assert MogiResult.load(result_file).current_course == MKS


def test_consumer_skips_unchanged_frames(context, result_file):
    published = []
    consumer = Consumer(context, MogiResult(), result_file, on_result=published.append)

    consumer.run(channel(gray_frame(), gray_frame(), gray_frame()), queue.Queue())

    assert len(published) == 1
    assert not result_file.exists()


def test_consumer_applies_edit(context, result_file):
    edited = MogiResult(current_course=MKS)
    edits = queue.Queue()
    edits.put(edited)
    published = []
    consumer = Consumer(context, MogiResult(), result_file, on_result=published.append)

    consumer.run(channel(gray_frame()), edits)

    assert consumer.state is DetectorState.RACE_FINISH
    assert consumer.mogi_result.current_course == MKS
    assert published[-1] == edited
    assert MogiResult.load(result_file) == edited


def test_consumer_persistence_failure_is_fatal(context, tmp_path):
    context.ocr.default = [word("マリオカートスタジアム")]
    consumer = Consumer(context, MogiResult(), tmp_path / "missing" / "result.json")

    with pytest.raises(OSError):
        consumer.run(channel(*[black_top_frame()] * 5), queue.Queue())


def test_consumer_debug_image(context, tmp_path, monkeypatch):
    monkeypatch.setattr(pipeline, "DEBUG_DIR", tmp_path)
    consumer = Consumer(context, MogiResult(), None)
    consumer.request_debug_image()

    consumer.run(channel(gray_frame(), gray_frame()), queue.Queue())

    assert len(list(tmp_path.glob("debug_*.png"))) == 1


# --- Producer ---

def test_producer_forwards_frames_and_closes():
    frames = [gray_frame(), black_top_frame()]
    source = ListSource(frames)
    frames_queue = queue.Queue()

    run_producer(source, frames_queue, threading.Event())

    items = drain(frames_queue)
    assert len(items) == 3
    assert items[-1] is None
    assert source.released


def test_producer_capture_error_ends_stream():
    source = ListSource([gray_frame(), CaptureError("unplugged"), gray_frame()])
    frames_queue = queue.Queue()

    run_producer(source, frames_queue, threading.Event())

    items = drain(frames_queue)
    assert len(items) == 2
    assert items[-1] is None
    assert source.released


def test_producer_stops_on_request():
    source = ListSource([gray_frame()] * 5)
    stop_event = threading.Event()
    stop_event.set()
    frames_queue = queue.Queue()

    run_producer(source, frames_queue, stop_event)

    assert drain(frames_queue) == [None]


def test_slow_consumer_receives_every_frame():
    source = ListSource(range(15))
    frames_queue = queue.Queue(maxsize=4)
    received = []

    def slow_consumer():
        while True:
            item = frames_queue.get()
            if item is None:
                return
            received.append(item)
            time.sleep(0.01)

    consumer_thread = threading.Thread(target=slow_consumer)
    consumer_thread.start()
    run_producer(source, frames_queue, threading.Event())
    consumer_thread.join(timeout=5.0)

    assert not consumer_thread.is_alive()
    assert received == list(range(15))


def test_close_channel_waits_for_room():
    frames_queue = queue.Queue(maxsize=2)
    frames_queue.put(1)
    frames_queue.put(2)

    closer = threading.Thread(target=close_channel, args=(frames_queue, threading.Event()))
    closer.start()
    time.sleep(0.05)
    assert closer.is_alive()

    assert frames_queue.get() == 1
    closer.join(timeout=2.0)
    assert drain(frames_queue) == [2, None]


def test_close_channel_after_stop_makes_room():
    frames_queue = queue.Queue(maxsize=2)
    frames_queue.put(1)
    frames_queue.put(2)
    stop_event = threading.Event()
    stop_event.set()

    close_channel(frames_queue, stop_event)

    assert drain(frames_queue) == [2, None]


# --- Pipeline ---

def test_pipeline_runs_until_source_ends(context, result_file):
    context.ocr.default = [word("マリオカートスタジアム")]
    consumer = Consumer(context, MogiResult(), result_file)
    frames = [gray_frame()] + [black_top_frame()] * 5 + [gray_frame()] * 20

    FramePipeline(ListSource(frames), consumer, queue_size=4).run()

    assert consumer.mogi_result.current_course == MKS
    assert consumer.state is DetectorState.RACE_FINISH


def test_submit_edit_queues_a_copy(context):
    consumer = Consumer(context, MogiResult(), None)
    frame_pipeline = FramePipeline(ListSource([]), consumer)
    edited = MogiResult(current_course=MKS)

    frame_pipeline.submit_edit(edited)

    queued = frame_pipeline.edits.get_nowait()
    assert queued == edited
    assert queued is not edited


def test_module_source_has_no_invalid_escapes():
    source = Path(pipeline.__file__).read_text(encoding="utf-8")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(source, pipeline.__file__, "exec")
