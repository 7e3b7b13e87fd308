import pytest

from vector_animator.engine.clock import LoopMode, PlaybackClock, PlaybackState


def _playing(duration=10.0, loop_mode='once', speed=1.0, start=0.0):
    clock = PlaybackClock(duration, loop_mode=loop_mode, speed=speed)
    clock.seek(start)
    clock.play(now=0.0)
    return clock


class TestLoopModes:
    def test_repeat_wraps(self):
        clock = _playing(loop_mode='repeat', speed=2.0, start=8.0)
        assert clock.tick(now=2.0) == pytest.approx(2.0)
        assert clock.is_playing

    def test_once_stops_at_end(self):
        clock = _playing()
        assert clock.tick(now=12.0) == 10.0
        assert not clock.is_playing
        assert clock.tick(now=20.0) == 10.0

    def test_ping_pong_reflects(self):
        clock = _playing(loop_mode='ping-pong', start=8.0)
        assert clock.tick(now=4.0) == pytest.approx(8.0)
        assert clock.state.direction == -1
        assert clock.tick(now=5.0) == pytest.approx(7.0)

    def test_ping_pong_bounces_off_start(self):
        clock = _playing(loop_mode='ping-pong', start=8.0)
        clock.tick(now=4.0)
        assert clock.tick(now=13.0) == pytest.approx(1.0)
        assert clock.state.direction == 1

    def test_pingpong_alias(self):
        assert LoopMode.parse('pingpong') is LoopMode.PING_PONG
        assert LoopMode.parse('PING_PONG') is LoopMode.PING_PONG
        assert LoopMode.parse(LoopMode.REPEAT) is LoopMode.REPEAT

    def test_unknown_loop_mode(self):
        with pytest.raises(ValueError):
            LoopMode.parse('bounce')

    def test_set_loop_mode_turns_backward_play_forward(self):
        clock = _playing(loop_mode='ping-pong', start=8.0)
        clock.tick(now=4.0)
        clock.set_loop_mode('repeat')
        assert clock.state.loop_mode is LoopMode.REPEAT
        assert clock.state.direction == 1
        assert clock.tick(now=5.0) == pytest.approx(9.0)
        assert clock.tick(now=7.0) == pytest.approx(1.0)

    def test_set_loop_mode_rejects_unknown(self):
        clock = PlaybackClock(10.0)
        with pytest.raises(ValueError):
            clock.set_loop_mode('shuffle')
        assert clock.state.loop_mode is LoopMode.ONCE


class TestTransport:
    def test_pause_keeps_time(self):
        clock = _playing()
        assert clock.pause(now=3.0) == pytest.approx(3.0)
        assert clock.tick(now=9.0) == pytest.approx(3.0)

    def test_resume_after_pause(self):
        clock = _playing()
        clock.pause(now=3.0)
        clock.play(now=100.0)
        assert clock.tick(now=101.0) == pytest.approx(4.0)

    def test_small_ticks_do_not_drift(self):
        clock = _playing(duration=100.0)
        for i in range(1, 1001):
            clock.tick(now=i * 0.001)
        assert clock.time == pytest.approx(1.0, abs=1e-9)

    def test_set_speed_has_no_jump(self):
        clock = _playing()
        clock.set_speed(2.0, now=1.0)
        assert clock.time == pytest.approx(1.0)
        assert clock.tick(now=2.0) == pytest.approx(3.0)

    def test_seek_resets_direction(self):
        clock = _playing(loop_mode='ping-pong', start=8.0)
        clock.tick(now=4.0)
        clock.seek(5.0, now=4.0)
        assert clock.state.direction == 1
        assert clock.tick(now=5.0) == pytest.approx(6.0)

    def test_seek_clamps(self):
        clock = PlaybackClock(10.0)
        clock.seek(-3.0)
        assert clock.time == 0.0
        clock.seek(42.0)
        assert clock.time == 10.0

    def test_play_at_end_restarts_once(self):
        clock = PlaybackClock(10.0)
        clock.seek(10.0)
        clock.play(now=0.0)
        assert clock.time == 0.0

    def test_toggle(self):
        clock = PlaybackClock(10.0)
        clock.toggle(now=0.0)
        assert clock.is_playing
        clock.toggle(now=2.0)
        assert not clock.is_playing
        assert clock.time == pytest.approx(2.0)

    def test_advance_by_delta(self):
        clock = _playing()
        assert clock.advance(0.5) == pytest.approx(0.5)
        assert clock.advance(0.25) == pytest.approx(0.75)

    def test_injected_wall_clock(self):
        wall = [50.0]
        clock = PlaybackClock(10.0, clock=lambda: wall[0])
        clock.play()
        wall[0] = 52.5
        assert clock.tick() == pytest.approx(2.5)

    def test_listeners_receive_time(self):
        seen = []
        clock = _playing().on_tick(seen.append)
        clock.tick(now=1.0)
        clock.pause(now=2.0)
        clock.tick(now=3.0)
        assert seen == pytest.approx([1.0, 2.0])

    def test_shrinking_duration_clamps_time(self):
        clock = PlaybackClock(10.0)
        clock.seek(8.0)
        clock.duration = 5.0
        assert clock.time == 5.0


class TestValidation:
    @pytest.mark.parametrize("duration", [0.0, -1.0])
    def test_duration_must_be_positive(self, duration):
        with pytest.raises(ValueError):
            PlaybackClock(duration)

    @pytest.mark.parametrize("speed", [0.0, -2.0])
    def test_speed_must_be_positive(self, speed):
        clock = PlaybackClock(10.0)
        with pytest.raises(ValueError):
            clock.set_speed(speed)
        with pytest.raises(ValueError):
            PlaybackClock(10.0, speed=speed)

    def test_state_is_shared(self):
        state = PlaybackState(time=2.0, loop_mode='repeat')
        clock = PlaybackClock(10.0, state=state)
        assert state.loop_mode is LoopMode.REPEAT
        clock.seek(4.0)
        assert state.time == 4.0
