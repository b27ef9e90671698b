import pytest

from katanacore.rewind import FRAME_SKIP_COUNT, FrameSnapshot, RewindBuffer


def feed(buffer, count, start=0):
    for i in range(start, start + count):
        buffer.capture_frame(i, 4, 3)


def test_only_every_nth_frame_is_captured():
    buffer = RewindBuffer()
    feed(buffer, FRAME_SKIP_COUNT - 1)
    assert len(buffer) == 0
    feed(buffer, 1, FRAME_SKIP_COUNT - 1)
    assert len(buffer) == 1
    feed(buffer, FRAME_SKIP_COUNT)
    assert len(buffer) == 2


def test_capture_skipped_when_stopped_or_paused():
    buffer = RewindBuffer()
    buffer.capture_stop = True
    feed(buffer, FRAME_SKIP_COUNT * 2)
    assert len(buffer) == 0
    buffer.capture_stop = False
    buffer.toggle_pause()
    assert buffer.paused
    feed(buffer, FRAME_SKIP_COUNT * 2)
    assert len(buffer) == 0


def test_start_rewind_on_empty_buffer_does_nothing():
    buffer = RewindBuffer()
    buffer.start_rewind()
    assert not buffer.is_rewinding


def test_rewind_plays_newest_first_then_ends():
    buffer = RewindBuffer(frame_skip_count=1)
    feed(buffer, 3)
    buffer.toggle_pause()
    buffer.start_rewind()
    assert buffer.is_rewinding
    assert not buffer.paused

    frames = [buffer.next_rewind_frame() for _ in range(3)]
    assert [snap.frame for snap in frames] == [2, 1, 0]
    assert frames[0] == FrameSnapshot(2, 4, 3)
    assert buffer.is_rewinding

    assert buffer.next_rewind_frame() is None
    assert not buffer.is_rewinding


def test_no_capture_while_rewinding():
    buffer = RewindBuffer(frame_skip_count=1)
    feed(buffer, 2)
    buffer.start_rewind()
    feed(buffer, 5)
    assert len(buffer) == 2


def test_clear_empties_buffer():
    buffer = RewindBuffer(frame_skip_count=1)
    feed(buffer, 3)
    buffer.clear()
    assert len(buffer) == 0
    buffer.start_rewind()
    assert not buffer.is_rewinding


def test_invalid_skip_count_rejected():
    with pytest.raises(ValueError):
        RewindBuffer(frame_skip_count=0)