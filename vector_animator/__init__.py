"""
Vector Animator - Timeline engine for keyframed vector artwork
"""

from typing import Any, Dict, List, Optional

from .core import EngineConfig, load_config, ease, get_easing, setup_default_logging
from .engine import (
    Animation,
    AnimationTrack,
    Keyframe,
    SceneNode,
    NodeKind,
    MotionPathBinding,
    PreviewOverride,
    Gradient,
    GradientStop,
    blend,
    evaluate_track,
    MotionPathSampler,
    PathSampleCache,
    FrameCompositor,
    composite,
    collect_gradient_updates,
    PlaybackClock,
    PlaybackState,
    LoopMode,
)

__version__ = "0.1.0"
__all__ = [
    'EngineConfig',
    'load_config',
    'setup_default_logging',
    'ease',
    'get_easing',
    'blend',
    'evaluate_track',
    'Animation',
    'AnimationTrack',
    'Keyframe',
    'SceneNode',
    'NodeKind',
    'MotionPathBinding',
    'PreviewOverride',
    'Gradient',
    'GradientStop',
    'MotionPathSampler',
    'PathSampleCache',
    'FrameCompositor',
    'composite',
    'collect_gradient_updates',
    'PlaybackClock',
    'PlaybackState',
    'LoopMode',
    'render_frame',
]


def render_frame(
    document: Dict[str, Any],
    time: float,
    preview: Optional[PreviewOverride] = None,
    cache: Optional[PathSampleCache] = None,
    config: Optional[EngineConfig] = None,
) -> List[SceneNode]:
    """
    Resolve a plain-data document at a time.

    Args:
        document: Mapping with 'nodes' (or 'elements') and 'animation'
        time: Timeline time in seconds
        preview: Optional live paint override
        cache: Path sampler cache to reuse across calls
        config: Engine settings

    Returns:
        Render-ready nodes

    Example:
        frame = render_frame({
            'nodes': [{'id': 'dot', 'type': 'circle', 'x': 0, 'y': 0, 'r': 5}],
            'animation': {'duration': 2, 'tracks': [
                {'node_id': 'dot', 'property': 'x',
                 'keyframes': [{'time': 0, 'value': 0}, {'time': 2, 'value': 100}]},
            ]},
        }, time=1.0)
    """
    raw_nodes = document.get('nodes', document.get('elements', []))
    nodes = [n if isinstance(n, SceneNode) else SceneNode.from_dict(n) for n in raw_nodes]
    animation = document.get('animation') or {}
    if not isinstance(animation, Animation):
        animation = Animation.from_dict(animation, config)
    return composite(nodes, animation, time, preview=preview, cache=cache, config=config)
