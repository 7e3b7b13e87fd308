"""
Motion Path Sampler - Arc-length sampling of node outlines.

A path description is flattened once into a polyline with a cumulative
length table. Positions are then looked up by normalized arc length u in
0-1; moveto gaps between subpaths contribute no length.
"""

import logging
import math
from collections import OrderedDict
from typing import Optional

import numpy as np

from ..core.config import DEFAULT_CONFIG, EngineConfig
from ..core.geometry import Vec2, flatten_path
from ..core.utils import clamp


logger = logging.getLogger(__name__)


class MotionPathSampler:
    """
    Samples positions and tangents along a flattened path.

    Usage:
        sampler = MotionPathSampler("M0,0 L100,0")
        sampler.total_length      # 100.0
        sampler.sample_at(0.25)   # Vec2(25, 0)
    """

    def __init__(self, d: str, curve_samples: int = DEFAULT_CONFIG.curve_samples):
        self.d = d
        subpaths = flatten_path(d, curve_samples)
        if not subpaths:
            self._points = np.zeros((0, 2))
            self._segment_lengths = np.zeros(0)
        else:
            points = np.vstack(subpaths)
            lengths = np.linalg.norm(np.diff(points, axis=0), axis=1)
            # the jump from one subpath's end to the next one's start is not drawn
            boundaries = np.cumsum([len(s) for s in subpaths])[:-1] - 1
            lengths[boundaries] = 0.0
            self._points = points
            self._segment_lengths = lengths
        self._cumulative = np.concatenate([[0.0], np.cumsum(self._segment_lengths)])

    @property
    def total_length(self) -> float:
        return float(self._cumulative[-1])

    @property
    def is_empty(self) -> bool:
        return self.total_length <= 0.0

    def point_at_length(self, distance: float) -> Vec2:
        """Point at an absolute arc length, clamped to the path"""
        if len(self._points) == 0:
            return Vec2()
        if len(self._segment_lengths) == 0 or self.is_empty:
            first = self._points[0]
            return Vec2(float(first[0]), float(first[1]))

        s = clamp(float(distance), 0.0, self.total_length)
        index = int(np.searchsorted(self._cumulative, s, side='right')) - 1
        index = min(max(index, 0), len(self._segment_lengths) - 1)
        seg_len = self._segment_lengths[index]
        local = (s - self._cumulative[index]) / seg_len if seg_len > 0 else 0.0
        p0, p1 = self._points[index], self._points[index + 1]
        x, y = p0 + (p1 - p0) * clamp(local, 0.0, 1.0)
        return Vec2(float(x), float(y))

    def sample_at(self, u: float) -> Vec2:
        """Point at normalized arc length u (clamped to 0-1)"""
        return self.point_at_length(clamp(u, 0.0, 1.0) * self.total_length)

    def tangent_angle_at(self, u: float) -> float:
        """
        Direction of travel at u, in degrees.

        Uses a small finite difference ahead of the point, or behind it at the
        very end of the path. Returns 0 for degenerate paths.
        """
        total = self.total_length
        if total <= 0:
            return 0.0
        distance = clamp(u, 0.0, 1.0) * total
        delta = max(0.001, min(total * 0.01, 0.1))

        here = self.point_at_length(distance)
        if distance + delta <= total:
            ahead = self.point_at_length(distance + delta)
            dx, dy = ahead.x - here.x, ahead.y - here.y
        elif distance - delta >= 0:
            behind = self.point_at_length(distance - delta)
            dx, dy = here.x - behind.x, here.y - behind.y
        else:
            return 0.0
        if dx == 0 and dy == 0:
            return 0.0
        return math.degrees(math.atan2(dy, dx))


class PathSampleCache:
    """
    LRU cache of samplers keyed by path description.

    Owned by whoever drives the compositor and passed in explicitly. A changed
    outline produces a different key, so stale entries simply age out;
    ``invalidate`` drops them eagerly.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._entries: "OrderedDict[str, MotionPathSampler]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, d: str) -> bool:
        return d in self._entries

    def get(self, d: str) -> MotionPathSampler:
        """Sampler for a path description, built on first use"""
        sampler = self._entries.get(d)
        if sampler is not None:
            self.hits += 1
            self._entries.move_to_end(d)
            return sampler

        self.misses += 1
        sampler = MotionPathSampler(d, self.config.curve_samples)
        if sampler.is_empty:
            logger.debug("Path %r has no length", d[:60])
        self._entries[d] = sampler
        while len(self._entries) > self.config.path_cache_size:
            self._entries.popitem(last=False)
        return sampler

    def invalidate(self, d: Optional[str] = None) -> None:
        """Drop one path, or everything when d is None"""
        if d is None:
            self._entries.clear()
        else:
            self._entries.pop(d, None)
