"""
Engine Configuration - Tuning knobs for the timeline engine.

Values can be loaded from a YAML file so hosts can trade precision for speed
(bezier solver iterations, path flattening density, cache size) without code
changes.
"""

import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Data Structure
# ============================================================================

@dataclass
class EngineConfig:
    """Numeric settings shared by the engine components"""

    # cubic-bezier easing solver
    bezier_iterations: int = 4

    # points generated per curve/arc segment when flattening a path
    curve_samples: int = 64

    # maximum number of flattened paths kept by a PathSampleCache
    path_cache_size: int = 256

    # floors applied when mapping time onto a motion path
    min_motion_duration: float = 0.001
    min_motion_segment: float = 0.0001

    # used when an animation document omits its duration
    default_duration: float = 5.0

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError for settings the engine cannot work with"""
        if int(self.bezier_iterations) < 1:
            raise ValueError(f"bezier_iterations must be >= 1, got {self.bezier_iterations}")
        if int(self.curve_samples) < 1:
            raise ValueError(f"curve_samples must be >= 1, got {self.curve_samples}")
        if int(self.path_cache_size) < 1:
            raise ValueError(f"path_cache_size must be >= 1, got {self.path_cache_size}")
        if self.min_motion_duration <= 0 or self.min_motion_segment <= 0:
            raise ValueError("motion floors must be positive")
        if self.default_duration <= 0:
            raise ValueError(f"default_duration must be positive, got {self.default_duration}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'EngineConfig':
        """Create from dictionary, ignoring unknown keys"""
        data = data or {}
        valid_fields = {f.name: f.type for f in fields(cls)}
        unknown = set(data) - set(valid_fields)
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))

        kwargs = {}
        for key, value in data.items():
            if key not in valid_fields:
                continue
            caster = int if valid_fields[key] in (int, 'int') else float
            try:
                kwargs[key] = caster(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid value for '{key}': {value!r}") from e
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'EngineConfig':
        """
        Load configuration from a YAML file.

        The file may hold the settings at top level or under an ``engine`` key.

        Raises:
            ValueError: If the file does not contain a mapping
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        if isinstance(data.get('engine'), dict):
            data = data['engine']
        return cls.from_dict(data)

    def save(self, path: Union[str, Path]) -> None:
        """Write configuration to a YAML file"""
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


DEFAULT_CONFIG = EngineConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Get engine configuration.

    Args:
        path: Optional YAML file; defaults are returned when omitted

    Returns:
        EngineConfig instance
    """
    if path is None:
        return EngineConfig()
    config = EngineConfig.from_yaml(path)
    logger.debug("Loaded engine config from %s", path)
    return config
