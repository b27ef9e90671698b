"""Periodic frame capture and newest-first playback for the rewind effect."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Optional

FRAME_SKIP_COUNT = 15
"""One frame out of this many is captured."""


@dataclass(frozen=True)
class FrameSnapshot:
    """One captured frame and its size."""

    frame: Any
    width: int
    height: int


class RewindBuffer:
    """Captures every n-th rendered frame and plays them back in reverse."""

    def __init__(self, frame_skip_count: int = FRAME_SKIP_COUNT) -> None:
        if frame_skip_count <= 0:
            raise ValueError("frame_skip_count must be positive")
        self.frame_skip_count = frame_skip_count
        self._frames: deque[FrameSnapshot] = deque()
        self._counter = 0
        self._rewinding = False
        self.paused = False
        self.capture_stop = False

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def is_rewinding(self) -> bool:
        return self._rewinding

    def capture_frame(self, frame: Any, width: int, height: int) -> None:
        """Offer a rendered frame; only every n-th one is kept."""
        if self._rewinding or self.paused or self.capture_stop:
            return

        self._counter += 1
        if self._counter % self.frame_skip_count:
            return

        self._frames.append(FrameSnapshot(frame, width, height))
        if self._counter >= 10:
            self._counter = 0

    def start_rewind(self) -> None:
        """Begin playback; does nothing when no frame has been captured."""
        if not self._frames:
            return
        self._rewinding = True
        self.paused = False
        self._counter = 0

    def next_rewind_frame(self) -> Optional[FrameSnapshot]:
        """Remove and return the newest frame, or None once playback is over."""
        if not self._frames:
            self._rewinding = False
            return None
        return self._frames.pop()

    def clear(self) -> None:
        """Drop every captured frame."""
        self._frames.clear()

    def toggle_pause(self) -> None:
        self.paused = not self.paused