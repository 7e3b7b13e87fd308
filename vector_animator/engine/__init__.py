"""
Timeline engine: tracks, interpolation, motion paths, compositing, playback
"""

from .values import (
    ValueKind,
    GradientKind,
    Gradient,
    GradientStop,
    Crossfade,
    classify_value,
    value_from_data,
)
from .interpolate import blend
from .tracks import (
    Keyframe,
    AnimationTrack,
    Animation,
    evaluate_track,
    evaluate_keyframes,
    default_for_property,
    motion_span,
)
from .scene import (
    NodeKind,
    SceneNode,
    MotionPathBinding,
    PreviewOverride,
    GradientUpdate,
    animatable_properties,
)
from .motion_path import MotionPathSampler, PathSampleCache
from .compositor import FrameCompositor, composite, collect_gradient_updates, stable_gradient_id
from .clock import PlaybackClock, PlaybackState, LoopMode
from .timecode import format_duration, parse_duration, adjust_duration

__all__ = [
    'ValueKind', 'GradientKind', 'Gradient', 'GradientStop', 'Crossfade',
    'classify_value', 'value_from_data',
    'blend',
    'Keyframe', 'AnimationTrack', 'Animation', 'evaluate_track', 'evaluate_keyframes',
    'default_for_property', 'motion_span',
    'NodeKind', 'SceneNode', 'MotionPathBinding', 'PreviewOverride', 'GradientUpdate',
    'animatable_properties',
    'MotionPathSampler', 'PathSampleCache',
    'FrameCompositor', 'composite', 'collect_gradient_updates', 'stable_gradient_id',
    'PlaybackClock', 'PlaybackState', 'LoopMode',
    'format_duration', 'parse_duration', 'adjust_duration',
]
