"""
Geometry - Vectors, path points and SVG path flattening.

Path descriptions ("M 0 0 C ...") are flattened into numpy polylines so that
arc length can be measured and sampled. Supported commands: M L H V C S Q T
A Z, absolute and relative. Each curve or arc segment is sampled with a fixed
number of points; straight segments contribute their end point only.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np


logger = logging.getLogger(__name__)


# =============================================================================
# Vector Math
# =============================================================================

@dataclass
class Vec2:
    """2D vector"""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> 'Vec2':
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> 'Vec2':
        return self.__mul__(scalar)

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def rotate_degrees(self, degrees: float) -> 'Vec2':
        """Rotate about the origin; positive angles turn clockwise in screen space"""
        rad = math.radians(degrees)
        c, s = math.cos(rad), math.sin(rad)
        return Vec2(self.x * c - self.y * s, self.x * s + self.y * c)

    def lerp(self, other: 'Vec2', t: float) -> 'Vec2':
        return Vec2(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t
        )

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class PathPoint:
    """
    Anchor of an editable bezier path.

    handle_in controls the curve arriving at the anchor, handle_out the curve
    leaving it. Missing handles make the adjacent segment straight.
    """
    x: float
    y: float
    id: str = ""
    handle_in: Optional[Tuple[float, float]] = None
    handle_out: Optional[Tuple[float, float]] = None
    is_smooth: bool = False

    def to_dict(self) -> dict:
        data = {'id': self.id, 'x': self.x, 'y': self.y, 'is_smooth': self.is_smooth}
        if self.handle_in is not None:
            data['h1x'], data['h1y'] = self.handle_in
        if self.handle_out is not None:
            data['h2x'], data['h2y'] = self.handle_out
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'PathPoint':
        """Accepts both snake_case and the h1x/h1y/h2x/h2y handle layout"""
        handle_in = data.get('handle_in')
        handle_out = data.get('handle_out')
        if handle_in is None and data.get('h1x') is not None and data.get('h1y') is not None:
            handle_in = (data['h1x'], data['h1y'])
        if handle_out is None and data.get('h2x') is not None and data.get('h2y') is not None:
            handle_out = (data['h2x'], data['h2y'])
        return cls(
            x=float(data.get('x', 0.0)),
            y=float(data.get('y', 0.0)),
            id=str(data.get('id', '')),
            handle_in=tuple(handle_in) if handle_in is not None else None,
            handle_out=tuple(handle_out) if handle_out is not None else None,
            is_smooth=bool(data.get('is_smooth', data.get('isSmooth', False))),
        )


# =============================================================================
# Path Description Builders
# =============================================================================

def _coord(value: float) -> str:
    """Coordinate text with enough digits to rebuild the same shape"""
    text = f"{float(value):.12g}"
    return "0" if text == "-0" else text


def points_to_path_d(points: Sequence[PathPoint], closed: bool = False) -> str:
    """
    Build a path description of cubic segments from structured points.

    Args:
        points: Anchors in drawing order
        closed: Add a segment from the last anchor back to the first

    Returns:
        Path description, empty for no points
    """
    if not points:
        return ""

    fmt = _coord
    first = points[0]
    parts = [f"M {fmt(first.x)} {fmt(first.y)}"]

    def segment(p0: PathPoint, p1: PathPoint) -> str:
        c1 = p0.handle_out if p0.handle_out is not None else (p0.x, p0.y)
        c2 = p1.handle_in if p1.handle_in is not None else (p1.x, p1.y)
        return (f"C {fmt(c1[0])} {fmt(c1[1])}, {fmt(c2[0])} {fmt(c2[1])}, "
                f"{fmt(p1.x)} {fmt(p1.y)}")

    for prev, cur in zip(points, points[1:]):
        parts.append(segment(prev, cur))
    if closed and len(points) > 1:
        parts.append(segment(points[-1], first))
    return " ".join(parts)


def rect_path_d(width: float, height: float) -> str:
    """Outline of a rectangle anchored at its top-left corner"""
    w, h = _coord(width), _coord(height)
    return f"M0,0 L{w},0 L{w},{h} L0,{h} Z"


def ellipse_path_d(rx: float, ry: float) -> str:
    """Outline of an ellipse centred on the origin, starting at the top"""
    rx_s, ry_s, top = _coord(rx), _coord(ry), _coord(-ry)
    return (f"M0,{top} A{rx_s},{ry_s} 0 1,0 0,{ry_s} "
            f"A{rx_s},{ry_s} 0 1,0 0,{top} Z")


def circle_path_d(r: float) -> str:
    """Outline of a circle centred on the origin, starting at the top"""
    return ellipse_path_d(r, r)


# =============================================================================
# Path Parsing
# =============================================================================

_SEPARATOR_RE = re.compile(r"[\s,]*")
_COMMAND_RE = re.compile(r"[MmLlHhVvCcSsQqTtAaZz]")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
# arc flags are single digits and may be written without separators ("1010")
_FLAG_RE = re.compile(r"[01]")

_ARG_COUNTS = {'M': 2, 'L': 2, 'H': 1, 'V': 1, 'C': 6, 'S': 4, 'Q': 4, 'T': 2, 'A': 7, 'Z': 0}
_ARC_FLAG_ARGS = (3, 4)


def parse_path_commands(d: str) -> List[Tuple[str, List[float]]]:
    """
    Split a path description into (command, args) pairs.

    Implicit repetitions are expanded; extra coordinates after a moveto
    become lineto commands. Parsing stops at the first malformed command and
    keeps what came before it.
    """
    commands: List[Tuple[str, List[float]]] = []
    if not isinstance(d, str):
        return commands

    pos, end = 0, len(d)
    cmd: Optional[str] = None
    while True:
        pos = _SEPARATOR_RE.match(d, pos).end()
        if pos >= end:
            break
        letter = _COMMAND_RE.match(d, pos)
        if letter is not None:
            cmd = letter.group()
            pos = letter.end()
            if cmd in 'Zz':
                commands.append((cmd, []))
                continue
        elif cmd is None or cmd in 'Zz':
            logger.debug("Path data has coordinates without a command: %r", d)
            break

        count = _ARG_COUNTS[cmd.upper()]
        args: List[float] = []
        while len(args) < count:
            pos = _SEPARATOR_RE.match(d, pos).end()
            is_flag = cmd in 'Aa' and len(args) in _ARC_FLAG_ARGS
            match = (_FLAG_RE if is_flag else _NUMBER_RE).match(d, pos)
            if match is None:
                break
            args.append(float(match.group()))
            pos = match.end()
        if len(args) < count:
            logger.debug("Truncated %s command in path data", cmd)
            break
        commands.append((cmd, args))
        # moveto followed by bare coordinates continues as lineto
        if cmd == 'M':
            cmd = 'L'
        elif cmd == 'm':
            cmd = 'l'
    return commands


def _cubic_points(p0, p1, p2, p3, samples: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, samples + 1)[1:, None]
    mt = 1.0 - t
    pts = (mt ** 3) * p0 + 3 * (mt ** 2) * t * p1 + 3 * mt * (t ** 2) * p2 + (t ** 3) * p3
    pts[-1] = p3
    return pts


def _quad_points(p0, p1, p2, samples: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, samples + 1)[1:, None]
    mt = 1.0 - t
    pts = (mt ** 2) * p0 + 2 * mt * t * p1 + (t ** 2) * p2
    pts[-1] = p2
    return pts


def _arc_points(p0, rx, ry, phi_deg, large_arc, sweep, p1, samples: int) -> np.ndarray:
    """Elliptical arc via centre parameterisation"""
    x0, y0 = p0
    x1, y1 = p1
    if x0 == x1 and y0 == y1:
        return np.empty((0, 2))
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0:
        return np.array([[x1, y1]])

    phi = math.radians(phi_deg % 360.0)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)
    dx2, dy2 = (x0 - x1) / 2.0, (y0 - y1) / 2.0
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    # scale radii up when the end point is out of reach
    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1:
        scale = math.sqrt(lam)
        rx, ry = rx * scale, ry * scale

    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den)) if den else 0.0
    if bool(large_arc) == bool(sweep):
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx
    cx = cos_phi * cxp - sin_phi * cyp + (x0 + x1) / 2.0
    cy = sin_phi * cxp + cos_phi * cyp + (y0 + y1) / 2.0

    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    theta2 = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx)
    dtheta = theta2 - theta1
    if sweep and dtheta < 0:
        dtheta += 2 * math.pi
    elif not sweep and dtheta > 0:
        dtheta -= 2 * math.pi

    theta = theta1 + dtheta * np.linspace(0.0, 1.0, samples + 1)[1:]
    xs = cx + rx * cos_phi * np.cos(theta) - ry * sin_phi * np.sin(theta)
    ys = cy + rx * sin_phi * np.cos(theta) + ry * cos_phi * np.sin(theta)
    pts = np.column_stack([xs, ys])
    pts[-1] = (x1, y1)
    return pts


def flatten_path(d: str, curve_samples: int = 64) -> List[np.ndarray]:
    """
    Flatten a path description into polylines.

    Args:
        d: SVG path description
        curve_samples: Points generated per curve or arc segment

    Returns:
        One (N, 2) array per subpath; subpaths with a single point are dropped
    """
    subpaths: List[np.ndarray] = []
    chunks: List[np.ndarray] = []
    cur = np.zeros(2)
    start = np.zeros(2)
    last_cubic_ctrl: Optional[np.ndarray] = None
    last_quad_ctrl: Optional[np.ndarray] = None

    def flush():
        if chunks:
            pts = np.vstack(chunks)
            if len(pts) > 1:
                subpaths.append(pts)
        chunks.clear()

    def begin(point):
        flush()
        chunks.append(np.array([point], dtype=float))

    for cmd, args in parse_path_commands(d):
        upper = cmd.upper()
        rel = cmd.islower()
        base = cur if rel else np.zeros(2)

        if not chunks and upper not in ('M', 'Z'):
            begin(cur.copy())

        cubic_ctrl = None
        quad_ctrl = None

        if upper == 'M':
            cur = base + np.array(args)
            start = cur.copy()
            begin(cur.copy())
        elif upper == 'L':
            cur = base + np.array(args)
            chunks.append(cur[None, :].copy())
        elif upper == 'H':
            cur = np.array([args[0] + (cur[0] if rel else 0.0), cur[1]])
            chunks.append(cur[None, :].copy())
        elif upper == 'V':
            cur = np.array([cur[0], args[0] + (cur[1] if rel else 0.0)])
            chunks.append(cur[None, :].copy())
        elif upper == 'C':
            p1 = base + np.array(args[0:2])
            p2 = base + np.array(args[2:4])
            p3 = base + np.array(args[4:6])
            chunks.append(_cubic_points(cur, p1, p2, p3, curve_samples))
            cubic_ctrl, cur = p2, p3
        elif upper == 'S':
            p1 = 2 * cur - last_cubic_ctrl if last_cubic_ctrl is not None else cur.copy()
            p2 = base + np.array(args[0:2])
            p3 = base + np.array(args[2:4])
            chunks.append(_cubic_points(cur, p1, p2, p3, curve_samples))
            cubic_ctrl, cur = p2, p3
        elif upper == 'Q':
            p1 = base + np.array(args[0:2])
            p2 = base + np.array(args[2:4])
            chunks.append(_quad_points(cur, p1, p2, curve_samples))
            quad_ctrl, cur = p1, p2
        elif upper == 'T':
            p1 = 2 * cur - last_quad_ctrl if last_quad_ctrl is not None else cur.copy()
            p2 = base + np.array(args[0:2])
            chunks.append(_quad_points(cur, p1, p2, curve_samples))
            quad_ctrl, cur = p1, p2
        elif upper == 'A':
            rx, ry, phi, large_arc, sweep = args[:5]
            end = base + np.array(args[5:7])
            chunks.append(_arc_points(cur, rx, ry, phi, large_arc, sweep, end, curve_samples))
            cur = end
        elif upper == 'Z':
            if chunks and not np.allclose(cur, start):
                chunks.append(start[None, :].copy())
            cur = start.copy()
            flush()

        last_cubic_ctrl = cubic_ctrl
        last_quad_ctrl = quad_ctrl

    flush()
    return subpaths


def polyline_length(points: np.ndarray) -> float:
    """Total length of an (N, 2) polyline"""
    if len(points) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(points, axis=0), axis=1)))


def transform_point(point: Vec2, x: float = 0.0, y: float = 0.0,
                    rotation: float = 0.0, scale: float = 1.0) -> Vec2:
    """Apply scale, then rotation (degrees), then translation"""
    return (point * scale).rotate_degrees(rotation) + Vec2(x, y)
