"""
Shared numeric helpers.
"""

import math
import re
from typing import Optional


class MathUtils:
    """Scalar math used across the engine"""

    @staticmethod
    def lerp(a: float, b: float, t: float) -> float:
        """Linear interpolation between a and b"""
        return a + (b - a) * t

    @staticmethod
    def clamp(value: float, min_val: float, max_val: float) -> float:
        """Clamp value to range"""
        return max(min_val, min(max_val, value))

    @staticmethod
    def to_float(value, default: Optional[float] = None) -> Optional[float]:
        """Coerce to a finite float, or return default"""
        if isinstance(value, bool) or value is None:
            return default
        try:
            result = float(value)
        except (TypeError, ValueError):
            return default
        return result if math.isfinite(result) else default


def format_number(value: float, decimals: int = 3) -> str:
    """Compact decimal formatting: 1.0 -> '1', 0.12345 -> '0.123'"""
    text = f"{value:.{decimals}f}".rstrip('0').rstrip('.')
    if text in ('-0', ''):
        return '0'
    return text


lerp = MathUtils.lerp
clamp = MathUtils.clamp
to_float = MathUtils.to_float


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake_case(name: str) -> str:
    """'strokeWidth' -> 'stroke_width'; snake_case passes through"""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()
