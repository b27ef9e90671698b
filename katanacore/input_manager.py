"""Keyboard and mouse state with recording and replay of input."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, Optional

KEY_TYPE_COUNT = 256
"""Number of virtual key codes tracked."""

Point = tuple[int, int]


class KeyState(Enum):
    """State of a key in the current frame."""

    NONE = 0
    PRESSED = 1
    DOWN = 2
    UP = 3


class KeyType(IntEnum):
    """Virtual key codes the game listens to."""

    LEFT_MOUSE = 0x01
    RIGHT_MOUSE = 0x02
    UP = 0x26
    DOWN = 0x28
    LEFT = 0x25
    RIGHT = 0x27
    SPACE_BAR = 0x20
    ESC = 0x1B
    LEFT_SHIFT = 0xA0
    KEY_1 = ord("1")
    KEY_2 = ord("2")
    KEY_3 = ord("3")
    W = ord("W")
    A = ord("A")
    S = ord("S")
    D = ord("D")
    L = ord("L")
    Q = ord("Q")
    E = ord("E")
    T = ord("T")
    F1 = 0x70
    F2 = 0x71


@dataclass(frozen=True)
class KeyLog:
    """Recorded state of one key in one frame."""

    state: KeyState
    key: int
    input_time: float = 0.0


@dataclass(frozen=True)
class MouseLog:
    """Recorded mouse position in one frame."""

    pos: Point = (0, 0)
    input_time: float = 0.0


def is_held(state: KeyState) -> bool:
    """Whether a key in ``state`` is physically down."""
    return state in (KeyState.DOWN, KeyState.PRESSED)


def next_key_state(prev_state: KeyState, is_pressed: bool) -> KeyState:
    """State of a key this frame given its previous state and whether it is down."""
    if is_pressed:
        return KeyState.PRESSED if is_held(prev_state) else KeyState.DOWN
    return KeyState.UP if is_held(prev_state) else KeyState.NONE


class InputManager:
    """Tracks key states per frame, records them, and can replay a recording."""

    def __init__(self) -> None:
        self._states = [KeyState.NONE] * KEY_TYPE_COUNT
        self._key_logs: list[deque[KeyLog]] = [deque() for _ in range(KEY_TYPE_COUNT)]
        self._mouse_logs: deque[MouseLog] = deque()
        self._recording_time = 0.0
        self._replay = False
        self.mouse_pos: Point = (0, 0)

    @property
    def is_replay(self) -> bool:
        return self._replay

    @property
    def recording_time(self) -> float:
        return self._recording_time

    def _reset_states(self) -> None:
        self._states = [KeyState.NONE] * KEY_TYPE_COUNT

    def _state(self, key: int) -> KeyState:
        return self._states[int(key) & 0xFF]

    def update(
        self,
        delta_time: float,
        pressed_keys: Iterable[int],
        mouse_pos: Optional[Point] = None,
    ) -> None:
        """Advance one frame from the keys held down and the mouse position.

        While replaying, the live input is ignored and the recording is played.
        A ``mouse_pos`` of None keeps the previous position.
        """
        if self._replay:
            self.replay_update()
            return

        self._recording_time += delta_time
        pressed = {int(key) & 0xFF for key in pressed_keys}

        for key, log in enumerate(self._key_logs):
            state = next_key_state(self._states[key], key in pressed)
            self._states[key] = state
            log.append(KeyLog(state, key, self._recording_time))

        if mouse_pos is not None:
            self.mouse_pos = (int(mouse_pos[0]), int(mouse_pos[1]))
        self._mouse_logs.append(MouseLog(self.mouse_pos, self._recording_time))

    def replay_update(self) -> None:
        """Play back one recorded frame; stop replaying when the recording runs out."""
        remaining = False
        for key, log in enumerate(self._key_logs):
            if not log:
                self._states[key] = KeyState.NONE
                continue
            self._states[key] = log.popleft().state
            remaining = remaining or bool(log)

        if self._mouse_logs:
            self.mouse_pos = self._mouse_logs.popleft().pos
        remaining = remaining or bool(self._mouse_logs)

        if not remaining:
            self._replay = False
            self.clear_input_log()
            self._reset_states()

    def button_pressed(self, key: int) -> bool:
        """Whether ``key`` is being held since an earlier frame."""
        return self._state(key) == KeyState.PRESSED

    def button_down(self, key: int) -> bool:
        """Whether ``key`` went down this frame."""
        return self._state(key) == KeyState.DOWN

    def button_up(self, key: int) -> bool:
        """Whether ``key`` was released this frame."""
        return self._state(key) == KeyState.UP

    def clear_input_log(self) -> None:
        """Drop the recording and restart the recording clock."""
        for log in self._key_logs:
            log.clear()
        self._mouse_logs.clear()
        self._recording_time = 0.0

    def set_replay(self, replay: bool) -> None:
        """Start or stop replaying the recording."""
        self._replay = replay
        if not replay:
            return
        self._recording_time = 0.0
        self._reset_states()