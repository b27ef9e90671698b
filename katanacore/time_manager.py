"""Frame timing, fixed steps, slow motion with a battery, and hit stop."""

from __future__ import annotations

import time
from typing import Callable, Optional

SLOW_MOTION_SCALE = 0.2
"""Time scale reached while slow motion is engaged."""

MAX_BATTERY = 11
"""Number of slow-motion battery cells when full."""

BATTERY_TICK = 0.5
"""Gauge level at which one battery cell is drained or recovered."""

HIT_STOP_TIME = 0.2
"""Duration of a hit stop in unscaled seconds."""

AUTO_END_TRANSITION_SPEED = 2.0
"""Transition speed used when an empty battery ends slow motion."""


class TimeManager:
    """Measures real frame time and produces scaled fixed-step delta times.

    ``clock`` returns the current time in seconds. ``on_global_speed`` is
    called with ``(speed, immediate)`` and ``on_slow_motion`` with ``engage``
    whenever slow motion starts or ends, so audio can follow.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.perf_counter,
        on_global_speed: Optional[Callable[[float, bool], None]] = None,
        on_slow_motion: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self._clock = clock
        self._on_global_speed = on_global_speed
        self._on_slow_motion = on_slow_motion
        self._prev_count = clock()

        self._real_delta_time = 0.0
        self._delta_time = 0.0
        self._const_delta_time = 0.0
        self._time_scale = 1.0

        self._frame_count = 0
        self._frame_time = 0.0
        self._fps = 0

        self.slow_motion = False
        self._target_time_scale = 1.0
        self._transition_speed = 2.0
        self._transitioning = False
        self._battery_gauge = 0.0
        self._battery_count = MAX_BATTERY

        self._hit_stop = False
        self._hit_stop_elapsed = 0.0

        self._mask_alpha = 0.0
        self._prev_time_scale = 1.0

        self.paused = False

    # ---------------------------------------------------------------- readouts

    @property
    def fps(self) -> int:
        return self._fps

    @property
    def real_delta_time(self) -> float:
        return self._real_delta_time

    @property
    def delta_time(self) -> float:
        """Fixed step scaled by the current time scale."""
        return self._delta_time

    @property
    def const_delta_time(self) -> float:
        """Fixed step unaffected by slow motion."""
        return self._const_delta_time

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def is_transitioning(self) -> bool:
        return self._transitioning

    @property
    def mask_alpha(self) -> float:
        """Opacity of the slow-motion overlay, from 0 to 255."""
        return self._mask_alpha

    @property
    def hit_stop(self) -> bool:
        return self._hit_stop

    @property
    def hit_stop_time(self) -> float:
        return HIT_STOP_TIME

    @property
    def battery_count(self) -> int:
        return self._battery_count

    # ------------------------------------------------------------------ frames

    def update(self) -> None:
        """Measure the real time since the last call and refresh the FPS count."""
        now = self._clock()
        self._real_delta_time = now - self._prev_count
        self._prev_count = now

        self._frame_count += 1
        self._frame_time += self._real_delta_time
        if self._frame_time >= 1.0:
            self._fps = self._frame_count
            self._frame_time -= 1.0
            self._frame_count = 0

    def fixed_update(self, fixed_delta_time: float) -> None:
        """Advance one fixed step: time-scale transition, battery, hit stop."""
        self._const_delta_time = fixed_delta_time

        if self._transitioning:
            self._advance_transition()

        if self.paused:
            self._delta_time = 0.0
            return

        if self.slow_motion:
            self._battery_gauge += self._const_delta_time
            if self._battery_gauge >= BATTERY_TICK:
                self._battery_gauge = 0.0
                self._battery_count -= 1
            if self._battery_count <= 0:
                self.end_slow_motion(AUTO_END_TRANSITION_SPEED)
        elif self._battery_count < MAX_BATTERY:
            self._battery_gauge += self._const_delta_time * 0.5
            if self._battery_gauge >= BATTERY_TICK:
                self._battery_gauge = 0.0
                self._battery_count += 1

        if self._hit_stop:
            self._hit_stop_elapsed += self._const_delta_time
            if self._hit_stop_elapsed >= HIT_STOP_TIME:
                self._hit_stop_elapsed = 0.0
                self._hit_stop = False

        self._delta_time = self._const_delta_time * self._time_scale

    def _advance_transition(self) -> None:
        diff = self._target_time_scale - self._time_scale
        move = self._transition_speed * self._const_delta_time

        if abs(diff) <= move:
            self._time_scale = self._target_time_scale
            self._transitioning = False
            self.slow_motion = self._time_scale < 1.0
            self._mask_alpha = 255.0 if self.slow_motion else 0.0
            return

        self._time_scale += move if diff > 0 else -move
        span = abs(self._target_time_scale - self._prev_time_scale)
        progress = 1.0 - abs(diff) / span if span else 1.0
        if self._target_time_scale >= 1.0:
            self._mask_alpha = 255.0 * (1.0 - progress)
        else:
            self._mask_alpha = 255.0 * progress

    # ------------------------------------------------------------- slow motion

    def start_slow_motion(self, transition_speed: float) -> None:
        """Begin easing the time scale down to slow motion."""
        self._prev_time_scale = self._time_scale
        self._target_time_scale = SLOW_MOTION_SCALE
        self._transition_speed = transition_speed
        self._transitioning = True
        self.slow_motion = True
        if self._on_global_speed is not None:
            self._on_global_speed(SLOW_MOTION_SCALE, False)
        if self._on_slow_motion is not None:
            self._on_slow_motion(True)

    def end_slow_motion(self, transition_speed: float) -> None:
        """Begin easing the time scale back to normal speed."""
        self._prev_time_scale = self._time_scale
        self._target_time_scale = 1.0
        self._transition_speed = transition_speed
        self._transitioning = True
        if self._on_global_speed is not None:
            self._on_global_speed(1.0, True)
        if self._on_slow_motion is not None:
            self._on_slow_motion(False)

    def reset_battery(self) -> None:
        """Refill the slow-motion battery."""
        self._battery_gauge = 0.0
        self._battery_count = MAX_BATTERY

    def trigger_hit_stop(self) -> None:
        """Start a hit stop lasting ``hit_stop_time`` unscaled seconds."""
        self._hit_stop = True

    def sync_clock(self) -> None:
        """Forget the time elapsed since the last update, e.g. after a stall."""
        self._prev_count = self._clock()