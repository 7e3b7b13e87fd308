"""
Value Interpolator - Blends two animatable values at a given progress.

Dispatch is a table keyed by (ValueKind, ValueKind). Pairs with no entry hold
the earlier value, so malformed or mismatched data never raises.
"""

import logging
import re
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.color import blend_colors
from ..core.geometry import PathPoint
from ..core.utils import clamp, lerp
from .values import (
    ValueKind,
    GradientKind,
    Gradient,
    GradientStop,
    Crossfade,
    classify_value,
    DEFAULT_GRADIENT_ANGLE,
    DEFAULT_RADIAL_CX,
    DEFAULT_RADIAL_CY,
    DEFAULT_RADIAL_R,
    DEFAULT_RADIAL_FR,
)


logger = logging.getLogger(__name__)

Blender = Callable[[Any, Any, float], Any]


# =============================================================================
# Scalars
# =============================================================================

def _blend_numbers(v1: float, v2: float, t: float) -> float:
    return lerp(v1, v2, t)


def _blend_optional_numbers(v1: Optional[float], v2: Optional[float], t: float) -> Optional[float]:
    """An absent side means 'auto'; step at the midpoint"""
    return v1 if t < 0.5 else v2


def _step(v1: Any, v2: Any, t: float) -> Any:
    return v1 if t < 1 else v2


def _hold(v1: Any, v2: Any, t: float) -> Any:
    return v1


# =============================================================================
# Gradients
# =============================================================================

_PERCENT_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+))\s*%?\s*$")


def _parse_percent(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    match = _PERCENT_RE.match(str(value))
    return float(match.group(1)) if match else default


def _format_percent(value: float) -> str:
    return f"{value:.2f}%"


def _radial_geometry(g: Gradient) -> Dict[str, float]:
    cx = _parse_percent(g.cx, _parse_percent(DEFAULT_RADIAL_CX, 50.0))
    cy = _parse_percent(g.cy, _parse_percent(DEFAULT_RADIAL_CY, 50.0))
    return {
        'cx': cx,
        'cy': cy,
        'r': _parse_percent(g.r, _parse_percent(DEFAULT_RADIAL_R, 50.0)),
        # focal point defaults to the centre
        'fx': _parse_percent(g.fx, cx),
        'fy': _parse_percent(g.fy, cy),
        'fr': _parse_percent(g.fr, _parse_percent(DEFAULT_RADIAL_FR, 0.0)),
    }


def blended_gradient_id(g1: Gradient, g2: Gradient) -> str:
    """Deterministic id for a blended gradient"""
    return f"{g1.id}~{g2.id}"


def _blend_stops(s1: List[GradientStop], s2: List[GradientStop], t: float) -> List[GradientStop]:
    if len(s1) != len(s2):
        logger.debug("Gradient stop counts differ (%d vs %d), holding", len(s1), len(s2))
        return list(s1) if t < 1 else list(s2)
    return [
        GradientStop(
            offset=clamp(lerp(a.offset, b.offset, t), 0.0, 1.0),
            color=blend_colors(a.color, b.color, t),
            id=a.id,
        )
        for a, b in zip(s1, s2)
    ]


def _blend_gradients(g1: Gradient, g2: Gradient, t: float) -> Any:
    new_id = blended_gradient_id(g1, g2)
    if g1.kind != g2.kind:
        return Crossfade(from_gradient=g1, to_gradient=g2, progress=t)
    if t <= 0:
        return g1.with_id(new_id)

    stops = _blend_stops(g1.stops, g2.stops, t)
    if g1.kind == GradientKind.LINEAR:
        a1 = g1.angle if g1.angle is not None else DEFAULT_GRADIENT_ANGLE
        a2 = g2.angle if g2.angle is not None else DEFAULT_GRADIENT_ANGLE
        return replace(g1, id=new_id, stops=stops, angle=lerp(a1, a2, t))

    geo1, geo2 = _radial_geometry(g1), _radial_geometry(g2)
    blended = {name: _format_percent(lerp(geo1[name], geo2[name], t)) for name in geo1}
    return replace(g1, id=new_id, stops=stops, **blended)


def solid_as_gradient(color: str, like: Gradient) -> Gradient:
    """Gradient with the geometry and stop offsets of `like`, every stop `color`"""
    stops = [GradientStop(offset=s.offset, color=color, id=s.id) for s in like.stops]
    if not stops:
        stops = [GradientStop(0.0, color, 'solid-0'), GradientStop(1.0, color, 'solid-1')]
    return replace(like, id=f"solid-{like.id}", stops=stops)


def _blend_color_to_gradient(c1: str, g2: Gradient, t: float) -> Any:
    return _blend_gradients(solid_as_gradient(c1, g2), g2, t)


def _blend_gradient_to_color(g1: Gradient, c2: str, t: float) -> Any:
    return _blend_gradients(g1, solid_as_gradient(c2, g1), t)


# =============================================================================
# Path Points
# =============================================================================

def _blend_handle(h1: Optional[Tuple[float, float]], h2: Optional[Tuple[float, float]],
                  t: float) -> Optional[Tuple[float, float]]:
    if h1 is None or h2 is None:
        return None
    return (lerp(h1[0], h2[0], t), lerp(h1[1], h2[1], t))


def _blend_path_points(p1: List[PathPoint], p2: List[PathPoint], t: float) -> List[PathPoint]:
    if len(p1) != len(p2):
        logger.debug("Path point counts differ (%d vs %d), stepping", len(p1), len(p2))
        return list(p1) if t < 1 else list(p2)
    return [
        PathPoint(
            x=lerp(a.x, b.x, t),
            y=lerp(a.y, b.y, t),
            id=a.id,
            handle_in=_blend_handle(a.handle_in, b.handle_in, t),
            handle_out=_blend_handle(a.handle_out, b.handle_out, t),
            is_smooth=a.is_smooth,
        )
        for a, b in zip(p1, p2)
    ]


# =============================================================================
# Dispatch
# =============================================================================

_BLENDERS: Dict[Tuple[ValueKind, ValueKind], Blender] = {
    (ValueKind.NUMBER, ValueKind.NUMBER): _blend_numbers,
    (ValueKind.NUMBER, ValueKind.ABSENT): _blend_optional_numbers,
    (ValueKind.ABSENT, ValueKind.NUMBER): _blend_optional_numbers,
    (ValueKind.ABSENT, ValueKind.ABSENT): _hold,
    (ValueKind.COLOR, ValueKind.COLOR): blend_colors,
    (ValueKind.GRADIENT, ValueKind.GRADIENT): _blend_gradients,
    (ValueKind.COLOR, ValueKind.GRADIENT): _blend_color_to_gradient,
    (ValueKind.GRADIENT, ValueKind.COLOR): _blend_gradient_to_color,
    (ValueKind.PATH_POINTS, ValueKind.PATH_POINTS): _blend_path_points,
    (ValueKind.REFERENCE, ValueKind.REFERENCE): _step,
    (ValueKind.TEXT, ValueKind.TEXT): _step,
    (ValueKind.TEXT, ValueKind.COLOR): _step,
    (ValueKind.COLOR, ValueKind.TEXT): _step,
    (ValueKind.REFERENCE, ValueKind.TEXT): _step,
    (ValueKind.TEXT, ValueKind.REFERENCE): _step,
}


def blend(v1: Any, v2: Any, progress: float) -> Any:
    """
    Interpolate between two animatable values.

    Args:
        v1: Value at the earlier keyframe
        v2: Value at the later keyframe
        progress: Eased progress; may leave 0-1 for overshooting easings

    Returns:
        Blended value. Never raises; unsupported pairs return v1.
    """
    if v1 is v2:
        return v1
    try:
        if v1 == v2:
            return v1
    except (TypeError, ValueError):
        pass

    kinds = (classify_value(v1), classify_value(v2))
    blender = _BLENDERS.get(kinds, _hold)
    if blender is _hold and kinds not in _BLENDERS:
        logger.debug("No interpolation for %s -> %s, holding", kinds[0].name, kinds[1].name)
    return blender(v1, v2, progress)
