"""
Keyframe Tracks - Per-property keyframe lists and their evaluation.

A track belongs to one node property. Evaluating it at a time clamps to the
first/last keyframe outside its range, honours freeze (hold) keyframes, and
otherwise eases the segment progress and blends the two bracketing values.
"""

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.easing import ease
from ..core.utils import to_float, to_snake_case
from .interpolate import blend
from .values import value_from_data


logger = logging.getLogger(__name__)


# =============================================================================
# Property Defaults
# =============================================================================

NUMERIC_PROPERTIES = frozenset([
    'x', 'y', 'r', 'rx', 'ry', 'opacity', 'rotation', 'scale', 'stroke_width',
    'stroke_dashoffset', 'motion_path_start', 'motion_path_end',
    'motion_path_offset_x', 'motion_path_offset_y', 'draw_start_percent',
    'draw_end_percent', 'font_size', 'letter_spacing', 'line_height',
])

_NUMERIC_DEFAULTS = {
    'opacity': 1.0,
    'scale': 1.0,
    'draw_end_percent': 1.0,
    'motion_path_end': 1.0,
    'font_size': 16.0,
}

_OTHER_DEFAULTS = {
    'width': None,  # auto
    'height': None,
    'text': 'Hello',
    'text_path': None,
    'motion_path': None,
}


def default_for_property(prop: Optional[str]) -> Any:
    """Value used when a property has neither keyframes nor a base value"""
    if prop is None:
        return None
    if prop in NUMERIC_PROPERTIES:
        return _NUMERIC_DEFAULTS.get(prop, 0.0)
    return _OTHER_DEFAULTS.get(prop)


# =============================================================================
# Keyframes & Tracks
# =============================================================================

@dataclass
class Keyframe:
    """A single keyframe on a property track."""
    time: float
    value: Any
    easing: str = 'linear'   # easing of the segment that starts here
    freeze: bool = False     # hold value until the next keyframe

    def to_dict(self) -> Dict:
        data = {'time': self.time, 'value': self.value, 'easing': self.easing}
        if self.freeze:
            data['freeze'] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'Keyframe':
        return cls(
            time=max(0.0, to_float(data.get('time'), 0.0)),
            value=value_from_data(data.get('value')),
            easing=data.get('easing') or 'linear',
            freeze=bool(data.get('freeze', False)),
        )


@dataclass
class AnimationTrack:
    """Keyframes for one property of one node"""
    node_id: str
    property: str
    keyframes: List[Keyframe] = field(default_factory=list)

    def sorted_keyframes(self) -> List[Keyframe]:
        """Keyframes ordered by time, as a new list"""
        return sorted(self.keyframes, key=lambda k: k.time)

    def evaluate(self, time: float, fallback: Any = None,
                 config: Optional[EngineConfig] = None) -> Any:
        """Value of this track at `time`"""
        return evaluate_keyframes(self.keyframes, time, fallback, self.property, config)

    @classmethod
    def from_dict(cls, data: Dict) -> 'AnimationTrack':
        return cls(
            node_id=str(data.get('node_id', data.get('elementId', ''))),
            property=to_snake_case(str(data.get('property', ''))),
            keyframes=[Keyframe.from_dict(k) for k in data.get('keyframes', [])],
        )


@dataclass
class Animation:
    """Timeline document: a duration and the tracks of every node"""
    duration: float = DEFAULT_CONFIG.default_duration
    tracks: List[AnimationTrack] = field(default_factory=list)

    def tracks_for(self, node_id: str) -> List[AnimationTrack]:
        """Tracks of one node, in document order"""
        return [t for t in self.tracks if t.node_id == node_id]

    def track(self, node_id: str, prop: str) -> Optional[AnimationTrack]:
        """Track for a node property, or None"""
        for t in self.tracks:
            if t.node_id == node_id and t.property == prop:
                return t
        return None

    @classmethod
    def from_dict(cls, data: Dict, config: Optional[EngineConfig] = None) -> 'Animation':
        config = config or DEFAULT_CONFIG
        duration = to_float(data.get('duration'), 0.0)
        return cls(
            duration=duration if duration > 0 else config.default_duration,
            tracks=[AnimationTrack.from_dict(t) for t in data.get('tracks', [])],
        )


# =============================================================================
# Evaluation
# =============================================================================

def evaluate_keyframes(keyframes: List[Keyframe], time: float, fallback: Any = None,
                       prop: Optional[str] = None,
                       config: Optional[EngineConfig] = None) -> Any:
    """
    Evaluate a keyframe list at a time.

    Args:
        keyframes: Keyframes in any order; not modified
        time: Timeline time in seconds
        fallback: Value used when there are no keyframes
        prop: Property name, used for the default when fallback is None
        config: Optional EngineConfig for the easing solver

    Returns:
        The interpolated value
    """
    if not keyframes:
        if fallback is None:
            return default_for_property(prop)
        return fallback

    ordered = sorted(keyframes, key=lambda k: k.time)
    first, last = ordered[0], ordered[-1]
    if time <= first.time:
        return first.value
    if time >= last.time:
        return last.value

    times = [k.time for k in ordered]
    index = bisect_right(times, time) - 1
    prev, nxt = ordered[index], ordered[index + 1]

    if time == prev.time:
        return prev.value
    if prev.freeze:
        return prev.value

    progress = (time - prev.time) / (nxt.time - prev.time)
    eased = ease(progress, prev.easing or 'linear', config)
    return blend(prev.value, nxt.value, eased)


def evaluate_track(track: Optional[AnimationTrack], time: float, fallback: Any = None,
                   prop: Optional[str] = None,
                   config: Optional[EngineConfig] = None) -> Any:
    """
    Evaluate a track, tolerating a missing one.

    Args:
        track: The track, or None
        time: Timeline time in seconds
        fallback: Base value when the track is missing or empty
        prop: Property name; defaults to the track's own

    Returns:
        The interpolated value
    """
    if track is None:
        return evaluate_keyframes([], time, fallback, prop, config)
    return evaluate_keyframes(track.keyframes, time, fallback, prop or track.property, config)


def motion_span(track: Optional[AnimationTrack], source_id: Optional[str],
                duration: float) -> Tuple[float, float]:
    """
    Time window over which a node travels along its current motion path.

    The window opens at the earliest motion_path keyframe bound to
    `source_id` and closes at the next later keyframe on that track, or at
    the end of the animation. Without such keyframes it is [0, duration].
    """
    if track is None or not track.keyframes or source_id is None:
        return (0.0, duration)
    bound = [k.time for k in track.keyframes if k.value == source_id]
    if not bound:
        return (0.0, duration)
    start = min(bound)
    later = [k.time for k in track.keyframes if k.time > start]
    end = min(later) if later else duration
    return (start, end)
