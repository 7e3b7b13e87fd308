import math

import pytest

from vector_animator.core.config import EngineConfig
from vector_animator.engine.compositor import FrameCompositor
from vector_animator.engine.motion_path import MotionPathSampler, PathSampleCache
from vector_animator.engine.scene import MotionPathBinding, NodeKind, SceneNode
from vector_animator.engine.tracks import Animation, AnimationTrack, Keyframe


def _path(node_id, d, **props):
    return SceneNode(id=node_id, kind=NodeKind.PATH, props=dict(d=d, **props))


def _rider(kind=NodeKind.CIRCLE, **binding):
    binding.setdefault('source_node_id', 'guide')
    return SceneNode(id='rider', kind=kind, props={'x': 0.0, 'y': 0.0, 'width': 10.0, 'height': 4.0},
                     motion_path=MotionPathBinding(**binding))


def _frame(nodes, time, duration=4.0, tracks=()):
    compositor = FrameCompositor()
    frame = compositor.composite(nodes, Animation(duration=duration, tracks=list(tracks)), time)
    return {node.id: node for node in frame}


# -----------------------------------------------------------------------------
# Sampler
# -----------------------------------------------------------------------------

def test_sampler_on_a_line():
    sampler = MotionPathSampler('M0,0 L100,0')
    assert sampler.total_length == pytest.approx(100.0)
    assert sampler.sample_at(0.25).to_tuple() == pytest.approx((25.0, 0.0))
    assert sampler.sample_at(2.0).to_tuple() == pytest.approx((100.0, 0.0))
    assert sampler.point_at_length(-5).to_tuple() == pytest.approx((0.0, 0.0))


def test_sampler_skips_moveto_gaps():
    sampler = MotionPathSampler('M0,0 L10,0 M100,0 L110,0')
    assert sampler.total_length == pytest.approx(20.0)
    assert sampler.sample_at(0.75).to_tuple() == pytest.approx((105.0, 0.0))


def test_tangent_angles():
    assert MotionPathSampler('M0,0 L100,0').tangent_angle_at(0.5) == pytest.approx(0.0)
    assert MotionPathSampler('M0,0 L0,100').tangent_angle_at(0.5) == pytest.approx(90.0)
    # at the very end the difference is taken behind the point
    assert MotionPathSampler('M0,0 L-100,0').tangent_angle_at(1.0) == pytest.approx(180.0)


def test_empty_sampler():
    sampler = MotionPathSampler('')
    assert sampler.is_empty
    assert sampler.sample_at(0.5).to_tuple() == (0.0, 0.0)
    assert sampler.tangent_angle_at(0.5) == 0.0


def test_circle_sampler_length(circle_100, cache):
    sampler = cache.get(circle_100.outline_path_d())
    assert sampler.total_length == pytest.approx(100.0, rel=1e-3)


# -----------------------------------------------------------------------------
# Cache
# -----------------------------------------------------------------------------

def test_cache_hits_and_misses():
    cache = PathSampleCache()
    first = cache.get('M0,0 L1,0')
    assert cache.get('M0,0 L1,0') is first
    assert (cache.hits, cache.misses) == (1, 1)
    assert 'M0,0 L1,0' in cache


def test_cache_is_bounded_lru():
    cache = PathSampleCache(EngineConfig(path_cache_size=2))
    cache.get('M0,0 L1,0')
    cache.get('M0,0 L2,0')
    cache.get('M0,0 L1,0')
    cache.get('M0,0 L3,0')
    assert len(cache) == 2
    assert 'M0,0 L2,0' not in cache
    assert 'M0,0 L1,0' in cache


def test_cache_invalidate():
    cache = PathSampleCache()
    cache.get('M0,0 L1,0')
    cache.get('M0,0 L2,0')
    cache.invalidate('M0,0 L1,0')
    assert len(cache) == 1
    cache.invalidate()
    assert len(cache) == 0


# -----------------------------------------------------------------------------
# Binding
# -----------------------------------------------------------------------------

def test_circle_of_circumference_100_at_half_time(circle_100, rider, cache):
    compositor = FrameCompositor(cache)
    frame = compositor.composite([circle_100, rider], Animation(duration=4.0), 2.0)
    moved = frame[1]
    expected = cache.get(circle_100.outline_path_d()).sample_at(0.5)
    assert (moved.props['x'], moved.props['y']) == pytest.approx(expected.to_tuple())
    # half way round a circle starting at the top is the bottom
    r = 100.0 / (2 * math.pi)
    assert (moved.props['x'], moved.props['y']) == pytest.approx((0.0, r), abs=1e-6)


def test_motion_keyframes_define_the_span():
    guide = _path('guide', 'M0,0 L100,0')
    track = AnimationTrack('rider', 'motion_path', [Keyframe(1.0, 'guide'), Keyframe(3.0, 'guide')])
    frame = _frame([guide, _rider()], 2.0, duration=10.0, tracks=[track])
    assert frame['rider'].props['x'] == pytest.approx(50.0)
    assert _frame([guide, _rider()], 0.5, duration=10.0, tracks=[track])['rider'].props['x'] == pytest.approx(0.0)


def test_start_and_end_fractions():
    guide = _path('guide', 'M0,0 L100,0')
    frame = _frame([guide, _rider(start_u=0.2, end_u=0.4)], 2.0)
    assert frame['rider'].props['x'] == pytest.approx(30.0)


def test_animated_binding_fields():
    guide = _path('guide', 'M0,0 L100,0')
    tracks = [
        AnimationTrack('rider', 'motion_path_end', [Keyframe(0.0, 0.5)]),
        AnimationTrack('rider', 'motion_path_offset_y', [Keyframe(0.0, 7.0)]),
    ]
    frame = _frame([guide, _rider()], 4.0, tracks=tracks)
    assert (frame['rider'].props['x'], frame['rider'].props['y']) == pytest.approx((50.0, 7.0))


def test_offset_is_rotated_when_aligned():
    guide = _path('guide', 'M0,0 L0,100')
    frame = _frame([guide, _rider(offset_y=10.0, align_rotation=True)], 0.0)
    rider = frame['rider']
    assert rider.props['rotation'] == pytest.approx(90.0)
    assert (rider.props['x'], rider.props['y']) == pytest.approx((-10.0, 0.0), abs=1e-9)


def test_offset_is_plain_when_not_aligned():
    guide = _path('guide', 'M0,0 L0,100')
    frame = _frame([guide, _rider(offset_y=10.0)], 0.0)
    assert (frame['rider'].props['x'], frame['rider'].props['y']) == pytest.approx((0.0, 10.0))
    assert 'rotation' not in frame['rider'].props


def test_source_transform_is_applied():
    guide = _path('guide', 'M0,0 L10,0', x=5.0, y=5.0, rotation=90.0, scale=2.0)
    frame = _frame([guide, _rider()], 4.0)
    assert (frame['rider'].props['x'], frame['rider'].props['y']) == pytest.approx((5.0, 25.0))


def test_rect_is_centred_on_the_path():
    guide = _path('guide', 'M0,0 L100,0')
    frame = _frame([guide, _rider(kind=NodeKind.RECT)], 2.0)
    assert (frame['rider'].props['x'], frame['rider'].props['y']) == pytest.approx((45.0, -2.0))


def test_unresolvable_source_disables_motion():
    frame = _frame([_rider(source_node_id='ghost')], 2.0)
    assert (frame['rider'].props['x'], frame['rider'].props['y']) == (0.0, 0.0)
    flat = _path('guide', 'M5,5 L5,5')
    frame = _frame([flat, _rider()], 2.0)
    assert frame['rider'].props['x'] == 0.0


def test_motion_path_track_can_unbind():
    guide = _path('guide', 'M0,0 L100,0')
    track = AnimationTrack('rider', 'motion_path', [Keyframe(0.0, None)])
    frame = _frame([guide, _rider()], 2.0, tracks=[track])
    assert frame['rider'].props['x'] == 0.0
