"""
Core utilities: easing, colours, geometry, configuration
"""

from .config import EngineConfig, load_config, DEFAULT_CONFIG
from .easing import (
    ease,
    get_easing,
    is_valid_easing,
    BezierCurve,
    EASING_FUNCTIONS,
    STANDARD_EASE_TO_BEZIER,
    generate_easing_curve,
)
from .color import RGBA, parse_color, blend_colors, is_color
from .geometry import (
    Vec2,
    PathPoint,
    flatten_path,
    points_to_path_d,
    rect_path_d,
    circle_path_d,
    ellipse_path_d,
)
from .log import setup_default_logging
from .utils import MathUtils

__all__ = [
    'EngineConfig',
    'load_config',
    'DEFAULT_CONFIG',
    'ease',
    'get_easing',
    'is_valid_easing',
    'BezierCurve',
    'EASING_FUNCTIONS',
    'STANDARD_EASE_TO_BEZIER',
    'generate_easing_curve',
    'RGBA',
    'parse_color',
    'blend_colors',
    'is_color',
    'Vec2',
    'PathPoint',
    'flatten_path',
    'points_to_path_d',
    'rect_path_d',
    'circle_path_d',
    'ellipse_path_d',
    'setup_default_logging',
    'MathUtils',
]
