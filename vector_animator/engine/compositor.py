"""
Frame Compositor - Resolves every node at a timeline time.

For each node:
1. evaluate its tracks (static props are the fallback)
2. apply a live colour-picker preview to fill/stroke
3. turn gradient paints into stable url(#...) references + gradient updates
4. place the node on its motion path
5. derive stroke dashing from the draw-on percentages

The result is a list of shallow node copies; inputs are never mutated, and a
failure while resolving one node leaves that node unresolved without
affecting the others.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.geometry import Vec2, transform_point
from ..core.utils import clamp, format_number, to_float
from .motion_path import PathSampleCache
from .scene import (
    DRAWABLE_KINDS,
    GradientUpdate,
    MotionPathBinding,
    NodeKind,
    PAINT_PROPERTIES,
    PreviewOverride,
    SceneNode,
)
from .tracks import Animation, AnimationTrack, evaluate_track, motion_span
from .values import Crossfade, Gradient, GradientKind


logger = logging.getLogger(__name__)


def stable_gradient_id(node_id: str, prop: str, kind: GradientKind) -> str:
    """Definition id that stays the same for a node paint across frames"""
    prefix = 'stable-lin' if kind == GradientKind.LINEAR else 'stable-rad'
    return f"{prefix}-{node_id}-{prop}"


def collect_gradient_updates(nodes: Iterable[SceneNode]) -> List[GradientUpdate]:
    """All gradient updates of a composited frame, in node order"""
    updates = []
    for node in nodes:
        for prop in PAINT_PROPERTIES:
            updates.extend(node.gradient_updates.get(prop, []))
    return updates


class FrameCompositor:
    """
    Produces render-ready node snapshots for a timeline time.

    Usage:
        compositor = FrameCompositor()
        frame = compositor.composite(nodes, animation, time=1.5)
    """

    def __init__(self, cache: Optional[PathSampleCache] = None,
                 config: Optional[EngineConfig] = None):
        self.config = config or (cache.config if cache is not None else DEFAULT_CONFIG)
        self.cache = cache if cache is not None else PathSampleCache(self.config)

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def composite(self, nodes: Sequence[SceneNode], animation: Animation, time: float,
                  preview: Optional[PreviewOverride] = None) -> List[SceneNode]:
        """
        Resolve all nodes at a time.

        Args:
            nodes: Scene nodes, not modified
            animation: Timeline with the tracks of every node
            time: Timeline time in seconds
            preview: Optional live paint override

        Returns:
            New node list in input order
        """
        by_id = {node.id: node for node in nodes}
        tracks_by_node: Dict[str, List[AnimationTrack]] = {}
        for track in animation.tracks:
            tracks_by_node.setdefault(track.node_id, []).append(track)

        frame = []
        for node in nodes:
            try:
                frame.append(self.resolve_node(
                    node, tracks_by_node.get(node.id, []), by_id, animation.duration, time, preview
                ))
            except Exception:
                logger.warning("Failed to resolve node %r at t=%.3f", node.id, time, exc_info=True)
                frame.append(node.with_props({}))
        return frame

    def resolve_node(self, node: SceneNode, tracks: List[AnimationTrack],
                     nodes_by_id: Dict[str, SceneNode], duration: float, time: float,
                     preview: Optional[PreviewOverride] = None) -> SceneNode:
        """Resolve a single node given its own tracks"""
        resolved: Dict[str, Any] = {}
        updates: Dict[str, List[GradientUpdate]] = {}

        overridden = None
        if preview is not None and preview.node_id == node.id and preview.property in PAINT_PROPERTIES:
            overridden = preview.property
            self._apply_paint(node.id, overridden, preview.value, resolved, updates)

        for track in tracks:
            if track.property == overridden:
                continue
            value = evaluate_track(track, time, node.props.get(track.property),
                                   track.property, self.config)
            if track.property in PAINT_PROPERTIES:
                self._apply_paint(node.id, track.property, value, resolved, updates)
            else:
                resolved[track.property] = value

        if node.kind == NodeKind.TEXT and 'text_path' in resolved:
            resolved['text_path_id'] = resolved['text_path']

        by_prop = {t.property: t for t in tracks}
        binding = self._effective_binding(node, resolved)
        if binding is not None and binding.source_node_id:
            self._apply_motion_path(node, binding, by_prop.get('motion_path'),
                                    nodes_by_id, duration, time, resolved)

        if node.kind in DRAWABLE_KINDS:
            self._apply_draw_range(node, by_prop, resolved)

        return node.with_props(resolved, updates)

    # -------------------------------------------------------------------------
    # Paint
    # -------------------------------------------------------------------------

    def _apply_paint(self, node_id: str, prop: str, value: Any,
                     resolved: Dict[str, Any], updates: Dict[str, List[GradientUpdate]]) -> None:
        if isinstance(value, Crossfade):
            from_id = stable_gradient_id(node_id, prop, value.from_gradient.kind)
            to_id = stable_gradient_id(node_id, prop, value.to_gradient.kind)
            resolved[prop] = f"url(#{from_id})"
            progress = clamp(value.progress, 0.0, 1.0)
            updates[prop] = [
                GradientUpdate(from_id, value.from_gradient.with_id(from_id), 1.0 - progress),
                GradientUpdate(to_id, value.to_gradient.with_id(to_id), progress),
            ]
        elif isinstance(value, Gradient):
            def_id = stable_gradient_id(node_id, prop, value.kind)
            resolved[prop] = f"url(#{def_id})"
            updates[prop] = [GradientUpdate(def_id, value.with_id(def_id))]
        else:
            resolved[prop] = value
            updates.pop(prop, None)

    # -------------------------------------------------------------------------
    # Motion Path
    # -------------------------------------------------------------------------

    @staticmethod
    def _effective_binding(node: SceneNode, resolved: Dict[str, Any]) -> Optional[MotionPathBinding]:
        """Static binding with any animated motion fields applied"""
        base = node.motion_path
        if base is None and 'motion_path' not in resolved:
            return None
        base = base or MotionPathBinding()
        source = resolved['motion_path'] if 'motion_path' in resolved else base.source_node_id
        return MotionPathBinding(
            source_node_id=source if isinstance(source, str) and source else None,
            start_u=to_float(resolved.get('motion_path_start'), base.start_u),
            end_u=to_float(resolved.get('motion_path_end'), base.end_u),
            offset_x=to_float(resolved.get('motion_path_offset_x'), base.offset_x),
            offset_y=to_float(resolved.get('motion_path_offset_y'), base.offset_y),
            align_rotation=base.align_rotation,
        )

    def motion_progress(self, binding: MotionPathBinding, span: Tuple[float, float],
                        time: float) -> float:
        """Normalized arc-length position u for a time within a motion span"""
        start_time, end_time = span
        motion_duration = max(self.config.min_motion_duration, end_time - start_time)
        base_progress = clamp((time - start_time) / motion_duration, 0.0, 1.0)
        segment = max(self.config.min_motion_segment, binding.end_u - binding.start_u)
        return clamp(binding.start_u + base_progress * segment, 0.0, 1.0)

    def _apply_motion_path(self, node: SceneNode, binding: MotionPathBinding,
                           motion_track: Optional[AnimationTrack],
                           nodes_by_id: Dict[str, SceneNode], duration: float, time: float,
                           resolved: Dict[str, Any]) -> None:
        source = nodes_by_id.get(binding.source_node_id)
        if source is None or source.id == node.id:
            logger.debug("Motion path source %r unavailable for %r", binding.source_node_id, node.id)
            return
        d = source.outline_path_d()
        if not d:
            return
        sampler = self.cache.get(d)
        if sampler.is_empty:
            return

        span = motion_span(motion_track, binding.source_node_id, duration)
        u = self.motion_progress(binding, span, time)

        src_x, src_y = source.number('x', 0.0), source.number('y', 0.0)
        src_rotation = source.number('rotation', 0.0)
        src_scale = source.number('scale', 1.0)
        point = transform_point(sampler.sample_at(u), src_x, src_y, src_rotation, src_scale)

        offset = Vec2(binding.offset_x, binding.offset_y)
        if binding.align_rotation:
            angle = sampler.tangent_angle_at(u) + src_rotation
            resolved['rotation'] = angle
            offset = offset.rotate_degrees(angle)
        position = point + offset

        if node.kind == NodeKind.RECT:
            width = to_float(resolved.get('width'), node.number('width', 0.0))
            height = to_float(resolved.get('height'), node.number('height', 0.0))
            resolved['x'] = position.x - width / 2.0
            resolved['y'] = position.y - height / 2.0
        else:
            resolved['x'] = position.x
            resolved['y'] = position.y

    # -------------------------------------------------------------------------
    # Draw Range
    # -------------------------------------------------------------------------

    def _apply_draw_range(self, node: SceneNode, tracks: Dict[str, AnimationTrack],
                          resolved: Dict[str, Any]) -> None:
        start = to_float(resolved.get('draw_start_percent'), node.number('draw_start_percent', 0.0))
        end = to_float(resolved.get('draw_end_percent'), node.number('draw_end_percent', 1.0))
        animated = any(
            tracks.get(prop) is not None and tracks[prop].keyframes
            for prop in ('draw_start_percent', 'draw_end_percent')
        )
        if not animated and start == 0.0 and end == 1.0:
            return

        geometry = node.with_props(resolved)
        d = geometry.outline_path_d()
        length = self.cache.get(d).total_length if d else 0.0
        if length <= 0:
            resolved['stroke_dasharray'] = "0 1"
            resolved['stroke_dashoffset'] = 0.0
            return

        start_len = clamp(start, 0.0, 1.0) * length
        end_len = clamp(end, 0.0, 1.0) * length
        visible = max(0.0, end_len - start_len)
        resolved['stroke_dasharray'] = f"{format_number(visible)} {format_number(length)}"
        resolved['stroke_dashoffset'] = -start_len


def composite(nodes: Sequence[SceneNode], animation: Animation, time: float,
              preview: Optional[PreviewOverride] = None,
              cache: Optional[PathSampleCache] = None,
              config: Optional[EngineConfig] = None) -> List[SceneNode]:
    """
    Resolve all nodes at a time.

    Args:
        nodes: Scene nodes
        animation: Timeline document
        time: Timeline time in seconds
        preview: Optional live paint override
        cache: Path sampler cache to reuse across frames
        config: Engine settings

    Returns:
        Render-ready node copies
    """
    return FrameCompositor(cache, config).composite(nodes, animation, time, preview)
