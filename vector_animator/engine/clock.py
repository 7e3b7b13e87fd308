"""
Playback Clock - Advances timeline time against the wall clock.

Time is always derived from an anchor (wall time, timeline time) taken when
playback starts, so frame jitter never accumulates. The anchor is reset on
seek, speed change and after every loop boundary.
"""

import logging
import time as _time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union


logger = logging.getLogger(__name__)


class LoopMode(Enum):
    """What happens when playback reaches an end of the timeline"""
    ONCE = 'once'
    REPEAT = 'repeat'
    PING_PONG = 'ping-pong'

    @classmethod
    def parse(cls, value: Union['LoopMode', str]) -> 'LoopMode':
        """Accepts enum members and 'once' / 'repeat' / 'ping-pong' / 'pingpong'"""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace('_', '-')
        if key == 'pingpong':
            key = 'ping-pong'
        try:
            return cls(key)
        except ValueError:
            valid = ', '.join(m.value for m in cls)
            raise ValueError(f"Unknown loop mode '{value}'. Available: {valid}") from None


@dataclass
class PlaybackState:
    """Transport state shared with the host"""
    time: float = 0.0
    is_playing: bool = False
    speed: float = 1.0
    loop_mode: LoopMode = LoopMode.ONCE
    direction: int = 1


TickListener = Callable[[float], None]


class PlaybackClock:
    """
    Drives PlaybackState.time while playing.

    Usage:
        clock = PlaybackClock(duration=10.0, loop_mode='repeat')
        clock.play()
        ...
        t = clock.tick()      # once per display refresh
        frame = compositor.composite(nodes, animation, t)

    Every method that reads the wall clock accepts an explicit ``now`` (in
    seconds) so hosts and tests can drive it deterministically.
    """

    def __init__(self, duration: float, state: Optional[PlaybackState] = None,
                 loop_mode: Union[LoopMode, str, None] = None, speed: Optional[float] = None,
                 clock: Callable[[], float] = _time.perf_counter):
        self.state = state or PlaybackState()
        self._clock = clock
        self._listeners: List[TickListener] = []
        self.duration = duration
        if loop_mode is not None:
            self.state.loop_mode = LoopMode.parse(loop_mode)
        else:
            self.state.loop_mode = LoopMode.parse(self.state.loop_mode)
        self._validate_speed(speed if speed is not None else self.state.speed)
        if speed is not None:
            self.state.speed = float(speed)

        self._wall_start = 0.0
        self._anchor_time = self.state.time
        self._last_now = 0.0
        if self.state.is_playing:
            self._reanchor(self._clock())

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def duration(self) -> float:
        return self._duration

    @duration.setter
    def duration(self, value: float) -> None:
        if value is None or value <= 0:
            raise ValueError(f"duration must be positive, got {value}")
        self._duration = float(value)
        if self.state.time > self._duration:
            self.state.time = self._duration
            self._anchor_time = self._duration

    @property
    def time(self) -> float:
        return self.state.time

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    @staticmethod
    def _validate_speed(speed: float) -> None:
        if speed is None or speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else float(now)

    def _reanchor(self, now: float) -> None:
        self._wall_start = now
        self._anchor_time = self.state.time
        self._last_now = now

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def on_tick(self, listener: TickListener) -> 'PlaybackClock':
        """Register a callback receiving the new time after each tick"""
        self._listeners.append(listener)
        return self

    def play(self, now: Optional[float] = None) -> None:
        """Start playback from the current time"""
        if self.state.is_playing:
            return
        state = self.state
        if state.loop_mode == LoopMode.ONCE and state.time >= self.duration:
            state.time = 0.0
            state.direction = 1
        state.is_playing = True
        self._reanchor(self._now(now))
        logger.debug("play from t=%.3f", state.time)

    def pause(self, now: Optional[float] = None) -> float:
        """Stop playback, keeping the exact time reached"""
        if self.state.is_playing:
            self.tick(now)
            self.state.is_playing = False
        return self.state.time

    def toggle(self, now: Optional[float] = None) -> None:
        if self.state.is_playing:
            self.pause(now)
        else:
            self.play(now)

    def seek(self, time: float, now: Optional[float] = None) -> None:
        """Jump to a time; playback direction resets to forward"""
        self.state.time = min(max(0.0, float(time)), self.duration)
        self.state.direction = 1
        self._reanchor(self._now(now) if self.state.is_playing else self._last_now)

    def set_speed(self, speed: float, now: Optional[float] = None) -> None:
        """Change speed without a jump in time"""
        self._validate_speed(speed)
        if self.state.is_playing:
            self.tick(now)
        self.state.speed = float(speed)
        if self.state.is_playing:
            self._reanchor(self._last_now)

    def set_loop_mode(self, mode: Union[LoopMode, str]) -> None:
        self.state.loop_mode = LoopMode.parse(mode)
        if self.state.loop_mode != LoopMode.PING_PONG and self.state.direction == -1:
            self.state.direction = 1
            self._reanchor(self._last_now)

    # -------------------------------------------------------------------------
    # Ticking
    # -------------------------------------------------------------------------

    def tick(self, now: Optional[float] = None) -> float:
        """
        Advance to the wall time `now`.

        Returns:
            The new timeline time
        """
        state = self.state
        if not state.is_playing:
            return state.time

        now = self._now(now)
        elapsed = max(0.0, now - self._wall_start) * state.speed
        raw = self._anchor_time + elapsed * state.direction
        self._last_now = now

        forward_end = state.direction == 1 and raw >= self.duration
        backward_end = state.direction == -1 and raw <= 0.0
        if forward_end or backward_end:
            self._handle_boundary(raw, elapsed)
            self._reanchor(now)
        else:
            state.time = raw

        for listener in self._listeners:
            listener(state.time)
        return state.time

    def advance(self, dt: float) -> float:
        """Advance by a frame delta in seconds instead of an absolute time"""
        return self.tick(self._last_now + max(0.0, dt))

    def _handle_boundary(self, raw: float, elapsed: float) -> None:
        state = self.state
        duration = self.duration

        if state.loop_mode == LoopMode.REPEAT:
            state.time = raw % duration
        elif state.loop_mode == LoopMode.PING_PONG:
            # unfold onto a forward-only axis of period 2 * duration
            start = self._anchor_time if state.direction == 1 else 2 * duration - self._anchor_time
            phase = (start + elapsed) % (2 * duration)
            if phase < duration:
                state.time, state.direction = phase, 1
            else:
                state.time, state.direction = 2 * duration - phase, -1
        else:
            state.time = duration if state.direction == 1 else 0.0
            state.is_playing = False
            logger.debug("playback finished at t=%.3f", state.time)
