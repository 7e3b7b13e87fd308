"""
Scene Nodes - The drawable items the compositor resolves each frame.

Nodes are plain records: a kind, an id, a property dict and an optional
motion path binding. The compositor never mutates them; it returns shallow
copies with resolved properties merged in.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..core.color import is_color
from ..core.geometry import (
    circle_path_d,
    ellipse_path_d,
    points_to_path_d,
    rect_path_d,
)
from ..core.utils import to_float, to_snake_case
from .values import Gradient, value_from_data


class NodeKind(Enum):
    """Kinds of scene node"""
    RECT = 'rect'
    CIRCLE = 'circle'
    PATH = 'path'
    GROUP = 'group'
    TEXT = 'text'
    IMAGE = 'image'


# =============================================================================
# Animatable Properties
# =============================================================================

MOTION_PROPERTIES = [
    'motion_path', 'motion_path_start', 'motion_path_end',
    'motion_path_offset_x', 'motion_path_offset_y',
]
COMMON_PROPERTIES = [
    'x', 'y', 'fill', 'stroke', 'stroke_width', 'opacity', 'rotation', 'scale',
] + MOTION_PROPERTIES
DRAW_PROPERTIES = [
    'stroke_dasharray', 'stroke_dashoffset', 'draw_start_percent', 'draw_end_percent',
]

ANIMATABLE_PROPERTIES: Dict[NodeKind, List[str]] = {
    NodeKind.RECT: COMMON_PROPERTIES + ['width', 'height'] + DRAW_PROPERTIES,
    NodeKind.CIRCLE: COMMON_PROPERTIES + ['r', 'rx', 'ry'] + DRAW_PROPERTIES,
    NodeKind.PATH: COMMON_PROPERTIES + ['d'] + DRAW_PROPERTIES,
    NodeKind.GROUP: list(COMMON_PROPERTIES),
    NodeKind.TEXT: COMMON_PROPERTIES + [
        'width', 'height', 'font_size', 'text', 'letter_spacing', 'line_height', 'text_path',
    ],
    NodeKind.IMAGE: ['x', 'y', 'opacity', 'rotation', 'scale', 'width', 'height'] + MOTION_PROPERTIES,
}

PAINT_PROPERTIES = ('fill', 'stroke')
DRAWABLE_KINDS = (NodeKind.PATH, NodeKind.RECT, NodeKind.CIRCLE)


def animatable_properties(kind: Union[NodeKind, str]) -> List[str]:
    """Properties a node kind exposes to the timeline"""
    if not isinstance(kind, NodeKind):
        try:
            kind = NodeKind(kind)
        except ValueError:
            return []
    return list(ANIMATABLE_PROPERTIES[kind])


# =============================================================================
# Node Records
# =============================================================================

@dataclass
class MotionPathBinding:
    """Ties a node's position to the outline of another node"""
    source_node_id: Optional[str] = None
    start_u: float = 0.0
    end_u: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    align_rotation: bool = False


@dataclass
class GradientUpdate:
    """
    A gradient definition the renderer must create or refresh.

    weight is 1 for a plain gradient; during a crossfade the outgoing and
    incoming definitions carry 1 - progress and progress.
    """
    def_id: str
    gradient: Gradient
    weight: float = 1.0


@dataclass
class SceneNode:
    """A drawable item plus its resolved per-frame extras"""
    id: str
    kind: NodeKind
    props: Dict[str, Any] = field(default_factory=dict)
    motion_path: Optional[MotionPathBinding] = None
    name: str = ""
    gradient_updates: Dict[str, List[GradientUpdate]] = field(default_factory=dict)

    def get(self, prop: str, default: Any = None) -> Any:
        """Property value, or default when unset"""
        value = self.props.get(prop)
        return default if value is None else value

    def number(self, prop: str, default: float = 0.0) -> float:
        """Property coerced to float"""
        return to_float(self.props.get(prop), default)

    def with_props(self, resolved: Dict[str, Any],
                   gradient_updates: Optional[Dict[str, List[GradientUpdate]]] = None) -> 'SceneNode':
        """Shallow copy with resolved properties merged in"""
        props = dict(self.props)
        props.update(resolved)
        return replace(self, props=props, gradient_updates=dict(gradient_updates or {}))

    def outline_path_d(self) -> Optional[str]:
        """
        Outline of this node in its local coordinate space.

        Returns:
            Path description, or None for kinds without an outline
        """
        if self.kind == NodeKind.PATH:
            d = self.props.get('d')
            closed = bool(self.props.get('closed', False))
            if isinstance(d, str) and d.strip():
                return d
            if isinstance(d, (list, tuple)) and d:
                return points_to_path_d(d, closed)
            points = self.props.get('structured_points')
            if points:
                return points_to_path_d(points, closed)
            return None
        if self.kind == NodeKind.RECT:
            width, height = self.number('width', 0.0), self.number('height', 0.0)
            return rect_path_d(width, height)
        if self.kind == NodeKind.CIRCLE:
            rx, ry = to_float(self.props.get('rx')), to_float(self.props.get('ry'))
            if rx and ry:
                return ellipse_path_d(rx, ry)
            return circle_path_d(self.number('r', 0.0))
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SceneNode':
        """
        Build a node from the host application's plain data.

        Keys may be camelCase or snake_case. Motion path fields
        (motionPathId, alignToPath, ...) become a MotionPathBinding.
        """
        props: Dict[str, Any] = {}
        for key, value in data.items():
            if key in ('id', 'type', 'kind', 'name'):
                continue
            props[to_snake_case(key)] = value

        for paint in PAINT_PROPERTIES:
            if isinstance(props.get(paint), dict):
                props[paint] = value_from_data(props[paint])
        if isinstance(props.get('d'), list):
            props['d'] = value_from_data(props['d'])
        if props.get('structured_points'):
            props['structured_points'] = value_from_data(props['structured_points'])
        if 'closed_by_joining' in props:
            props['closed'] = bool(props.pop('closed_by_joining'))

        binding = None
        source = props.pop('motion_path_id', None)
        align = bool(props.pop('align_to_path', False))
        if source:
            binding = MotionPathBinding(
                source_node_id=source,
                start_u=to_float(props.get('motion_path_start'), 0.0),
                end_u=to_float(props.get('motion_path_end'), 1.0),
                offset_x=to_float(props.get('motion_path_offset_x'), 0.0),
                offset_y=to_float(props.get('motion_path_offset_y'), 0.0),
                align_rotation=align,
            )

        return cls(
            id=str(data['id']),
            kind=NodeKind(data.get('kind', data.get('type'))),
            props=props,
            motion_path=binding,
            name=str(data.get('name', '')),
        )


@dataclass
class PreviewOverride:
    """
    Transient paint shown while a colour picker is open.

    While active it replaces the node's fill or stroke and suppresses that
    property's track.
    """
    node_id: str
    property: str
    value: Union[str, Gradient]

    @property
    def is_gradient(self) -> bool:
        return isinstance(self.value, Gradient)

    @property
    def is_solid(self) -> bool:
        return isinstance(self.value, str) and is_color(self.value)
