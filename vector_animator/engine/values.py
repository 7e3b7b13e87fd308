"""
Animatable Values - The closed set of value shapes a keyframe can hold.

    NUMBER       int / float
    ABSENT       None (optional numeric such as auto width)
    COLOR        CSS colour string
    GRADIENT     Gradient
    CROSSFADE    Crossfade (only produced by interpolation)
    PATH_POINTS  list of PathPoint
    REFERENCE    'url(#id)' string
    TEXT         any other string (text content, node id references)
    OTHER        anything else; never interpolated
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from ..core.color import is_color
from ..core.geometry import PathPoint
from ..core.utils import clamp, to_float


logger = logging.getLogger(__name__)


class ValueKind(Enum):
    """Classification of an animatable value"""
    NUMBER = auto()
    ABSENT = auto()
    COLOR = auto()
    GRADIENT = auto()
    CROSSFADE = auto()
    PATH_POINTS = auto()
    REFERENCE = auto()
    TEXT = auto()
    OTHER = auto()


class GradientKind(Enum):
    """Gradient geometry family"""
    LINEAR = 'linear'
    RADIAL = 'radial'

    @classmethod
    def parse(cls, name: str) -> 'GradientKind':
        """Accepts 'linear', 'radial', 'linearGradient', 'radialGradient'"""
        key = str(name).lower()
        if key.startswith('radial'):
            return cls.RADIAL
        if key.startswith('linear'):
            return cls.LINEAR
        raise ValueError(f"Unknown gradient type '{name}'")


# Radial geometry is kept as percentage strings, the way SVG writes it
DEFAULT_RADIAL_CX = "50%"
DEFAULT_RADIAL_CY = "50%"
DEFAULT_RADIAL_R = "50%"
DEFAULT_RADIAL_FR = "0%"
DEFAULT_GRADIENT_ANGLE = 0.0


def _stop_offset(value: Any) -> float:
    """Stop offset in 0-1; accepts numbers and percent strings such as '50%'"""
    if isinstance(value, str) and value.strip().endswith('%'):
        percent = to_float(value.strip()[:-1], 0.0)
        return clamp(percent / 100.0, 0.0, 1.0)
    return clamp(to_float(value, 0.0), 0.0, 1.0)


@dataclass
class GradientStop:
    """Colour stop; offset in 0-1"""
    offset: float
    color: str
    id: str = ""


@dataclass
class Gradient:
    """Linear or radial gradient paint"""
    id: str = ""
    kind: GradientKind = GradientKind.LINEAR
    stops: List[GradientStop] = field(default_factory=list)

    # linear
    angle: Optional[float] = None

    # radial, percent strings
    cx: Optional[str] = None
    cy: Optional[str] = None
    r: Optional[str] = None
    fx: Optional[str] = None
    fy: Optional[str] = None
    fr: Optional[str] = None

    units: str = "objectBoundingBox"

    def with_id(self, new_id: str) -> 'Gradient':
        """Copy carrying a different id"""
        return replace(self, id=new_id, stops=list(self.stops))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id,
            'type': f"{self.kind.value}Gradient",
            'stops': [{'id': s.id, 'offset': s.offset, 'color': s.color} for s in self.stops],
            'gradient_units': self.units,
        }
        if self.kind == GradientKind.LINEAR:
            if self.angle is not None:
                data['angle'] = self.angle
        else:
            for name in ('cx', 'cy', 'r', 'fx', 'fy', 'fr'):
                value = getattr(self, name)
                if value is not None:
                    data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Gradient':
        stops = [
            GradientStop(
                offset=_stop_offset(s.get('offset')),
                color=str(s.get('color', '#000000')),
                id=str(s.get('id', '')),
            )
            for s in data.get('stops') or []
            if isinstance(s, dict)
        ]
        angle = data.get('angle')
        return cls(
            id=str(data.get('id', '')),
            kind=GradientKind.parse(data.get('type', data.get('kind', 'linear'))),
            stops=stops,
            angle=to_float(angle),
            cx=data.get('cx'), cy=data.get('cy'), r=data.get('r'),
            fx=data.get('fx'), fy=data.get('fy'), fr=data.get('fr'),
            units=data.get('gradient_units', data.get('gradientUnits', 'objectBoundingBox')),
        )


@dataclass
class Crossfade:
    """Blend between two gradients of different kinds"""
    from_gradient: Gradient
    to_gradient: Gradient
    progress: float


def classify_value(value: Any) -> ValueKind:
    """Determine the ValueKind of an animatable value"""
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, bool):
        return ValueKind.OTHER
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, Gradient):
        return ValueKind.GRADIENT
    if isinstance(value, Crossfade):
        return ValueKind.CROSSFADE
    if isinstance(value, str):
        if value.strip().startswith('url('):
            return ValueKind.REFERENCE
        if is_color(value):
            return ValueKind.COLOR
        return ValueKind.TEXT
    if isinstance(value, (list, tuple)) and all(isinstance(p, PathPoint) for p in value):
        return ValueKind.PATH_POINTS
    return ValueKind.OTHER


def value_from_data(data: Any) -> Any:
    """
    Convert plain document data into an animatable value.

    Gradient dicts become Gradient, lists of point dicts become PathPoint
    lists; everything else, including data that cannot be read, passes
    through unchanged.
    """
    try:
        if isinstance(data, dict) and 'stops' in data:
            return Gradient.from_dict(data)
        if isinstance(data, list) and data and all(isinstance(p, (dict, PathPoint)) for p in data):
            return [p if isinstance(p, PathPoint) else PathPoint.from_dict(p) for p in data]
    except (TypeError, ValueError) as e:
        logger.debug("Keeping unreadable value data as-is: %s", e)
    return data
