import pytest

from katanacore.time_manager import MAX_BATTERY, SLOW_MOTION_SCALE, TimeManager

STEP = 1.0 / 60.0


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_manager():
    clock = FakeClock(10.0)
    speeds = []
    engages = []
    tm = TimeManager(
        clock=clock,
        on_global_speed=lambda speed, immediate: speeds.append((speed, immediate)),
        on_slow_motion=engages.append,
    )
    return tm, clock, speeds, engages


def test_update_measures_real_delta():
    tm, clock, _, _ = make_manager()
    clock.now = 10.5
    tm.update()
    assert tm.real_delta_time == pytest.approx(0.5)


def test_fps_counts_frames_in_one_second():
    tm, clock, _, _ = make_manager()
    for _ in range(4):
        clock.now += 0.25
        tm.update()
    assert tm.fps == 4


def test_sync_clock_discards_stalled_time():
    tm, clock, _, _ = make_manager()
    clock.now += 5.0
    tm.sync_clock()
    clock.now += 0.25
    tm.update()
    assert tm.real_delta_time == pytest.approx(0.25)


def test_fixed_update_without_slow_motion():
    tm, _, _, _ = make_manager()
    tm.fixed_update(STEP)
    assert tm.delta_time == pytest.approx(STEP)
    assert tm.const_delta_time == pytest.approx(STEP)


def test_end_slow_motion_restores_normal_speed():
    tm, _, speeds, engages = make_manager()
    tm.start_slow_motion(4.0)
    for _ in range(30):
        tm.fixed_update(STEP)
    tm.end_slow_motion(3.0)
    assert speeds[-1] == (1.0, True)
    assert engages[-1] is False
    for _ in range(60):
        tm.fixed_update(STEP)
    assert not tm.slow_motion
    assert tm.time_scale == pytest.approx(1.0)
    assert tm.mask_alpha == 0.0


def test_battery_drains_and_ends_slow_motion():
    tm, _, _, engages = make_manager()
    tm.start_slow_motion(4.0)
    for _ in range(MAX_BATTERY):
        tm.fixed_update(0.5)
    assert tm.battery_count == 0
    assert engages == [True, False]
    tm.fixed_update(0.5)
    assert not tm.slow_motion
    assert tm.battery_count == 0
    tm.fixed_update(0.5)
    assert tm.battery_count == 1


def test_reset_battery_refills():
    tm, _, _, _ = make_manager()
    tm.start_slow_motion(4.0)
    for _ in range(3):
        tm.fixed_update(0.5)
    assert tm.battery_count < MAX_BATTERY
    tm.reset_battery()
    assert tm.battery_count == MAX_BATTERY


def test_pause_zeroes_delta_time():
    tm, _, _, _ = make_manager()
    tm.paused = True
    tm.fixed_update(STEP)
    assert tm.delta_time == 0.0
    tm.paused = False
    tm.fixed_update(STEP)
    assert tm.delta_time == pytest.approx(STEP)


def test_hit_stop_expires():
    tm, _, _, _ = make_manager()
    tm.trigger_hit_stop()
    assert tm.hit_stop
    tm.fixed_update(0.125)
    assert tm.hit_stop
    tm.fixed_update(0.125)
    assert not tm.hit_stop
    assert tm.hit_stop_time == pytest.approx(0.2)