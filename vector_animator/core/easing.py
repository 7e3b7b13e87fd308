"""
Easing Library

Maps normalized segment progress (0-1) through a named easing curve.

Easing ids:
- linear
- easeIn/easeOut/easeInOut + Sine, Quad, Cubic, Quart, Quint, Expo, Circ,
  Back, Elastic, Bounce (Penner closed forms)
- step-start / step-end: hold semantics
- cubic-bezier(p1x, p1y, p2x, p2y): CSS-style custom curve

Snake case spellings ('ease_in_out_quad') are accepted as aliases. Unknown or
malformed ids fall back to linear; ``ease`` never raises.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np

from .config import DEFAULT_CONFIG


logger = logging.getLogger(__name__)

EasingFunction = Callable[[float], float]


# =============================================================================
# Core Easing Functions
# =============================================================================

def linear(t: float) -> float:
    """No easing - constant velocity"""
    return t


def step_start(t: float) -> float:
    """Jump to the end value as soon as the segment starts"""
    return 0.0 if t <= 0 else 1.0


def step_end(t: float) -> float:
    """Hold the start value until the segment ends"""
    return 1.0 if t >= 1 else 0.0


# -----------------------------------------------------------------------------
# Polynomial Easing (Quad, Cubic, Quart, Quint)
# -----------------------------------------------------------------------------

def ease_in_quad(t: float) -> float:
    return t * t


def ease_out_quad(t: float) -> float:
    return t * (2 - t)


def ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t


def ease_in_cubic(t: float) -> float:
    return t * t * t


def ease_out_cubic(t: float) -> float:
    t1 = t - 1
    return t1 * t1 * t1 + 1


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    t1 = 2 * t - 2
    return 0.5 * t1 * t1 * t1 + 1


def ease_in_quart(t: float) -> float:
    return t * t * t * t


def ease_out_quart(t: float) -> float:
    t1 = t - 1
    return 1 - t1 * t1 * t1 * t1


def ease_in_out_quart(t: float) -> float:
    if t < 0.5:
        return 8 * t * t * t * t
    t1 = t - 1
    return 1 - 8 * t1 * t1 * t1 * t1


def ease_in_quint(t: float) -> float:
    return t * t * t * t * t


def ease_out_quint(t: float) -> float:
    t1 = t - 1
    return 1 + t1 * t1 * t1 * t1 * t1


def ease_in_out_quint(t: float) -> float:
    if t < 0.5:
        return 16 * t * t * t * t * t
    t1 = t - 1
    return 1 + 16 * t1 * t1 * t1 * t1 * t1


# -----------------------------------------------------------------------------
# Sinusoidal / Exponential / Circular
# -----------------------------------------------------------------------------

def ease_in_sine(t: float) -> float:
    return 1 - np.cos(t * np.pi / 2)


def ease_out_sine(t: float) -> float:
    return np.sin(t * np.pi / 2)


def ease_in_out_sine(t: float) -> float:
    return 0.5 * (1 - np.cos(np.pi * t))


def ease_in_expo(t: float) -> float:
    if t == 0:
        return 0.0
    return 2 ** (10 * (t - 1))


def ease_out_expo(t: float) -> float:
    if t == 1:
        return 1.0
    return 1 - 2 ** (-10 * t)


def ease_in_out_expo(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    if t < 0.5:
        return 0.5 * 2 ** (20 * t - 10)
    return 1 - 0.5 * 2 ** (-20 * t + 10)


def ease_in_circ(t: float) -> float:
    return 1 - np.sqrt(1 - t * t)


def ease_out_circ(t: float) -> float:
    t1 = t - 1
    return np.sqrt(1 - t1 * t1)


def ease_in_out_circ(t: float) -> float:
    if t < 0.5:
        return 0.5 * (1 - np.sqrt(1 - 4 * t * t))
    t1 = 2 * t - 2
    return 0.5 * (np.sqrt(1 - t1 * t1) + 1)


# -----------------------------------------------------------------------------
# Back Easing (Overshoot/Anticipation)
# -----------------------------------------------------------------------------

def ease_in_back(t: float, overshoot: float = 1.70158) -> float:
    """Back ease in - dips below the start value first"""
    return t * t * ((overshoot + 1) * t - overshoot)


def ease_out_back(t: float, overshoot: float = 1.70158) -> float:
    """Back ease out - overshoots the end value, then settles"""
    t1 = t - 1
    return t1 * t1 * ((overshoot + 1) * t1 + overshoot) + 1


def ease_in_out_back(t: float, overshoot: float = 1.70158) -> float:
    s = overshoot * 1.525
    if t < 0.5:
        return 0.5 * (4 * t * t * ((s + 1) * 2 * t - s))
    t1 = 2 * t - 2
    return 0.5 * (t1 * t1 * ((s + 1) * t1 + s) + 2)


# -----------------------------------------------------------------------------
# Elastic Easing
# -----------------------------------------------------------------------------

def _elastic_shift(amplitude: float, period: float) -> float:
    if amplitude >= 1:
        return period / (2 * np.pi) * np.arcsin(1 / amplitude)
    return period / 4


def ease_in_elastic(t: float, amplitude: float = 1.0, period: float = 0.3) -> float:
    """
    Elastic ease in - spring wind-up before leaving the start value

    Args:
        t: Progress 0-1
        amplitude: Overshoot amplitude (1.0 = normal)
        period: Oscillation period (smaller = more oscillations)
    """
    if t == 0 or t == 1:
        return float(t)
    s = _elastic_shift(amplitude, period)
    t1 = t - 1
    return -(amplitude * 2 ** (10 * t1) * np.sin((t1 - s) * (2 * np.pi) / period))


def ease_out_elastic(t: float, amplitude: float = 1.0, period: float = 0.3) -> float:
    """Elastic ease out - wobbles around the end value"""
    if t == 0 or t == 1:
        return float(t)
    s = _elastic_shift(amplitude, period)
    return amplitude * 2 ** (-10 * t) * np.sin((t - s) * (2 * np.pi) / period) + 1


def ease_in_out_elastic(t: float, amplitude: float = 1.0, period: float = 0.5) -> float:
    """Elastic ease in/out - wobbles at both ends"""
    if t == 0 or t == 1:
        return float(t)
    s = _elastic_shift(amplitude, period)
    t1 = 2 * t - 1
    if t1 < 0:
        return -0.5 * amplitude * 2 ** (10 * t1) * np.sin((t1 - s) * (2 * np.pi) / period)
    return 0.5 * amplitude * 2 ** (-10 * t1) * np.sin((t1 - s) * (2 * np.pi) / period) + 1


# -----------------------------------------------------------------------------
# Bounce Easing
# -----------------------------------------------------------------------------

def ease_out_bounce(t: float) -> float:
    """Bounce ease out - ball bouncing to rest"""
    if t < 1 / 2.75:
        return 7.5625 * t * t
    elif t < 2 / 2.75:
        t1 = t - 1.5 / 2.75
        return 7.5625 * t1 * t1 + 0.75
    elif t < 2.5 / 2.75:
        t1 = t - 2.25 / 2.75
        return 7.5625 * t1 * t1 + 0.9375
    else:
        t1 = t - 2.625 / 2.75
        return 7.5625 * t1 * t1 + 0.984375


def ease_in_bounce(t: float) -> float:
    return 1 - ease_out_bounce(1 - t)


def ease_in_out_bounce(t: float) -> float:
    if t < 0.5:
        return 0.5 * ease_in_bounce(2 * t)
    return 0.5 * ease_out_bounce(2 * t - 1) + 0.5


# =============================================================================
# Custom Bezier Curves
# =============================================================================

@dataclass
class BezierCurve:
    """
    Cubic Bezier easing curve (like CSS cubic-bezier)

    Control points: P0=(0,0), P1=(x1,y1), P2=(x2,y2), P3=(1,1)

    X is solved for the curve parameter with a fixed number of Newton-Raphson
    steps; a bounded bisection takes over when the slope flattens out.
    """
    x1: float
    y1: float
    x2: float
    y2: float
    iterations: int = 4

    def __call__(self, t: float) -> float:
        """Evaluate bezier at progress t"""
        if t <= 0 or t >= 1:
            return float(t)
        return self._sample_curve_y(self._solve_curve_x(t))

    def _solve_curve_x(self, x: float, epsilon: float = 1e-6) -> float:
        """Newton-Raphson to find the curve parameter for a given x"""
        t = x
        for _ in range(self.iterations):
            x_at_t = self._sample_curve_x(t) - x
            if abs(x_at_t) < epsilon:
                return t
            d = self._sample_curve_x_derivative(t)
            if abs(d) < epsilon:
                break
            t -= x_at_t / d
        else:
            if 0.0 <= t <= 1.0:
                return t

        # Fallback: bisection, bounded
        t0, t1 = 0.0, 1.0
        t = x
        for _ in range(32):
            x_at_t = self._sample_curve_x(t)
            if abs(x_at_t - x) < epsilon:
                break
            if x > x_at_t:
                t0 = t
            else:
                t1 = t
            t = (t0 + t1) / 2
        return t

    def _sample_curve_x(self, t: float) -> float:
        return ((1 - 3 * self.x2 + 3 * self.x1) * t + (3 * self.x2 - 6 * self.x1)) * t * t + 3 * self.x1 * t

    def _sample_curve_y(self, t: float) -> float:
        return ((1 - 3 * self.y2 + 3 * self.y1) * t + (3 * self.y2 - 6 * self.y1)) * t * t + 3 * self.y1 * t

    def _sample_curve_x_derivative(self, t: float) -> float:
        return (3 * (1 - 3 * self.x2 + 3 * self.x1) * t + 2 * (3 * self.x2 - 6 * self.x1)) * t + 3 * self.x1

    def to_easing_id(self) -> str:
        """Serialize back to a cubic-bezier(...) easing id"""
        return f"cubic-bezier({self.x1:g},{self.y1:g},{self.x2:g},{self.y2:g})"


_NUMBER = r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*"
_CUBIC_BEZIER_RE = re.compile(
    r"^\s*cubic-bezier\(" + ",".join([_NUMBER] * 4) + r"\)\s*$", re.IGNORECASE
)


@lru_cache(maxsize=256)
def parse_cubic_bezier(easing_id: str, iterations: int = DEFAULT_CONFIG.bezier_iterations) -> Optional[BezierCurve]:
    """
    Parse a ``cubic-bezier(p1x,p1y,p2x,p2y)`` string.

    Returns:
        BezierCurve, or None when the string is malformed or an x control
        point lies outside 0-1
    """
    match = _CUBIC_BEZIER_RE.match(easing_id)
    if not match:
        return None
    x1, y1, x2, y2 = (float(g) for g in match.groups())
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        return None
    return BezierCurve(x1, y1, x2, y2, iterations=iterations)


# Bezier approximations of the named curves, used to seed a custom curve
# editor. Curves with no close cubic fit share the ease-in-out-cubic default.
DEFAULT_CUSTOM_BEZIER: Tuple[float, float, float, float] = (0.645, 0.045, 0.355, 1.0)

STANDARD_EASE_TO_BEZIER: Dict[str, Tuple[float, float, float, float]] = {
    'linear': (0.0, 0.0, 1.0, 1.0),
    'easeInQuad': (0.11, 0.0, 0.5, 0.0),
    'easeOutQuad': (0.5, 1.0, 0.89, 1.0),
    'easeInOutQuad': (0.45, 0.0, 0.55, 1.0),
    'easeInCubic': (0.32, 0.0, 0.67, 0.0),
    'easeOutCubic': (0.33, 1.0, 0.68, 1.0),
    'easeInOutCubic': (0.65, 0.0, 0.35, 1.0),
    'easeInQuart': (0.5, 0.0, 0.75, 0.0),
    'easeOutQuart': (0.25, 1.0, 0.5, 1.0),
    'easeInOutQuart': (0.76, 0.0, 0.24, 1.0),
    'easeInQuint': (0.6, 0.0, 0.8, 0.0),
    'easeOutQuint': (0.2, 1.0, 0.4, 1.0),
    'easeInOutQuint': (0.83, 0.0, 0.17, 1.0),
    'step-start': (0.0, 1.0, 1.0, 1.0),
    'step-end': (0.0, 0.0, 1.0, 0.0),
}


# =============================================================================
# Easing Registry & Utilities
# =============================================================================

EASING_FUNCTIONS: Dict[str, EasingFunction] = {
    'linear': linear,
    'step-start': step_start,
    'step-end': step_end,

    'easeInSine': ease_in_sine,
    'easeOutSine': ease_out_sine,
    'easeInOutSine': ease_in_out_sine,
    'easeInQuad': ease_in_quad,
    'easeOutQuad': ease_out_quad,
    'easeInOutQuad': ease_in_out_quad,
    'easeInCubic': ease_in_cubic,
    'easeOutCubic': ease_out_cubic,
    'easeInOutCubic': ease_in_out_cubic,
    'easeInQuart': ease_in_quart,
    'easeOutQuart': ease_out_quart,
    'easeInOutQuart': ease_in_out_quart,
    'easeInQuint': ease_in_quint,
    'easeOutQuint': ease_out_quint,
    'easeInOutQuint': ease_in_out_quint,
    'easeInExpo': ease_in_expo,
    'easeOutExpo': ease_out_expo,
    'easeInOutExpo': ease_in_out_expo,
    'easeInCirc': ease_in_circ,
    'easeOutCirc': ease_out_circ,
    'easeInOutCirc': ease_in_out_circ,
    'easeInBack': ease_in_back,
    'easeOutBack': ease_out_back,
    'easeInOutBack': ease_in_out_back,
    'easeInElastic': ease_in_elastic,
    'easeOutElastic': ease_out_elastic,
    'easeInOutElastic': ease_in_out_elastic,
    'easeInBounce': ease_in_bounce,
    'easeOutBounce': ease_out_bounce,
    'easeInOutBounce': ease_in_out_bounce,
}


def normalize_easing_id(name: str) -> str:
    """
    Canonicalize an easing id.

    'ease_in_out_quad' -> 'easeInOutQuad', 'step_end' -> 'step-end'.
    Ids already in canonical form are returned unchanged.
    """
    name = name.strip()
    if name in EASING_FUNCTIONS or '_' not in name:
        return name
    if name in ('step_start', 'step_end'):
        return name.replace('_', '-')
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def is_valid_easing(easing_id: str) -> bool:
    """True when the id names a known curve or a well-formed cubic-bezier"""
    if not isinstance(easing_id, str):
        return False
    return (normalize_easing_id(easing_id) in EASING_FUNCTIONS
            or parse_cubic_bezier(easing_id) is not None)


def get_easing(name: str, config=None) -> EasingFunction:
    """
    Get an easing function by id.

    Args:
        name: Easing id (e.g. 'easeOutElastic', 'cubic-bezier(.4,0,.2,1)')
        config: Optional EngineConfig for the bezier solver

    Returns:
        Easing function

    Raises:
        ValueError: If the easing id is not recognised
    """
    canonical = normalize_easing_id(name)
    if canonical in EASING_FUNCTIONS:
        return EASING_FUNCTIONS[canonical]
    iterations = (config or DEFAULT_CONFIG).bezier_iterations
    curve = parse_cubic_bezier(canonical, iterations)
    if curve is not None:
        return curve
    available = ', '.join(sorted(EASING_FUNCTIONS.keys()))
    raise ValueError(f"Unknown easing '{name}'. Available: {available}, cubic-bezier(...)")


def ease(progress: float, easing: Union[str, EasingFunction, None] = 'linear', config=None) -> float:
    """
    Apply easing to segment progress.

    Args:
        progress: Progress value, clamped to 0-1
        easing: Easing id or callable; None means linear
        config: Optional EngineConfig for the bezier solver

    Returns:
        Eased value. Exactly 0 at progress 0 and exactly 1 at progress 1.
    """
    t = float(np.clip(progress, 0.0, 1.0))
    if t == 0.0 or t == 1.0:
        return t

    if easing is None:
        return t
    if callable(easing):
        return float(easing(t))

    try:
        fn = get_easing(easing, config)
    except (ValueError, AttributeError):
        logger.debug("Unknown easing %r, using linear", easing)
        return t
    return float(fn(t))


def generate_easing_curve(easing: Union[str, EasingFunction] = 'linear', samples: int = 64) -> np.ndarray:
    """
    Sample an easing curve for previews.

    Args:
        easing: Easing id or callable
        samples: Number of points

    Returns:
        Array of shape (samples, 2) with columns (progress, eased)
    """
    xs = np.linspace(0.0, 1.0, max(2, samples))
    ys = np.array([ease(x, easing) for x in xs])
    return np.column_stack([xs, ys])


def bezier_points_for(easing_id: str) -> Tuple[float, float, float, float]:
    """Control points approximating an easing id, for the custom curve editor"""
    curve = parse_cubic_bezier(easing_id) if isinstance(easing_id, str) else None
    if curve is not None:
        return (curve.x1, curve.y1, curve.x2, curve.y2)
    return STANDARD_EASE_TO_BEZIER.get(normalize_easing_id(easing_id), DEFAULT_CUSTOM_BEZIER)
