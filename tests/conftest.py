"""Shared fixtures: small scenes and animations."""

import math

import pytest

from vector_animator.core.config import EngineConfig
from vector_animator.engine.motion_path import PathSampleCache
from vector_animator.engine.scene import MotionPathBinding, NodeKind, SceneNode
from vector_animator.engine.tracks import Animation, AnimationTrack, Keyframe


@pytest.fixture()
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture()
def cache(config) -> PathSampleCache:
    return PathSampleCache(config)


@pytest.fixture()
def circle_100() -> SceneNode:
    """Circle at the origin with a circumference of 100"""
    return SceneNode(id='orbit', kind=NodeKind.CIRCLE, props={'x': 0.0, 'y': 0.0, 'r': 100.0 / (2 * math.pi)})


@pytest.fixture()
def rider() -> SceneNode:
    return SceneNode(
        id='rider',
        kind=NodeKind.CIRCLE,
        props={'x': 0.0, 'y': 0.0, 'r': 2.0},
        motion_path=MotionPathBinding(source_node_id='orbit'),
    )


@pytest.fixture()
def linear_x_animation() -> Animation:
    track = AnimationTrack('box', 'x', [Keyframe(0.0, 0.0), Keyframe(2.0, 10.0)])
    return Animation(duration=4.0, tracks=[track])
