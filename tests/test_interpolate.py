import pytest

from vector_animator.core.geometry import PathPoint
from vector_animator.engine.interpolate import blend, blended_gradient_id, solid_as_gradient
from vector_animator.engine.values import (
    Crossfade,
    Gradient,
    GradientKind,
    GradientStop,
    ValueKind,
    classify_value,
    value_from_data,
)


def _linear(gid='a', colors=('#000000', '#ffffff'), angle=None):
    stops = [GradientStop(i / (len(colors) - 1), c, f"{gid}-s{i}") for i, c in enumerate(colors)]
    return Gradient(id=gid, kind=GradientKind.LINEAR, stops=stops, angle=angle)


def _radial(gid='r', **geometry):
    stops = [GradientStop(0.0, '#000000', 's0'), GradientStop(1.0, '#ffffff', 's1')]
    return Gradient(id=gid, kind=GradientKind.RADIAL, stops=stops, **geometry)


@pytest.mark.parametrize("value, kind", [
    (1, ValueKind.NUMBER),
    (2.5, ValueKind.NUMBER),
    (None, ValueKind.ABSENT),
    ('#fff', ValueKind.COLOR),
    ('url(#g)', ValueKind.REFERENCE),
    ('Hello', ValueKind.TEXT),
    ([PathPoint(0, 0)], ValueKind.PATH_POINTS),
    (True, ValueKind.OTHER),
    ({'a': 1}, ValueKind.OTHER),
])
def test_classify_value(value, kind):
    assert classify_value(value) == kind


def test_numbers():
    assert blend(0.0, 10.0, 0.25) == pytest.approx(2.5)
    assert blend(0.0, 10.0, 1.2) == pytest.approx(12.0)


def test_absent_numbers_step_at_midpoint():
    assert blend(None, 10.0, 0.4) is None
    assert blend(None, 10.0, 0.5) == 10.0
    assert blend(10.0, None, 0.4) == 10.0
    assert blend(10.0, None, 0.6) is None
    assert blend(None, None, 0.5) is None


@pytest.mark.parametrize("value", [
    3.0, 'red', 'url(#x)', 'Hello', None, [PathPoint(1, 2, 'p')], _linear(), _radial(),
])
def test_blend_of_equal_values_is_identity(value):
    assert blend(value, value, 0.37) == value


def test_colors():
    assert blend('#000000', '#ffffff', 0.5) == 'rgb(128, 128, 128)'


def test_linear_gradients_blend_stopwise():
    g1 = _linear('a', ('#000000', '#000000'), angle=0)
    g2 = _linear('b', ('#ffffff', '#ffffff'), angle=90)
    result = blend(g1, g2, 0.5)
    assert isinstance(result, Gradient)
    assert result.id == blended_gradient_id(g1, g2) == 'a~b'
    assert result.angle == pytest.approx(45.0)
    assert [s.color for s in result.stops] == ['rgb(128, 128, 128)'] * 2
    assert [s.id for s in result.stops] == ['a-s0', 'a-s1']


def test_missing_angle_defaults_to_zero():
    result = blend(_linear('a'), _linear('b', ('#ffffff', '#000000'), angle=90), 0.5)
    assert result.angle == pytest.approx(45.0)


def test_gradient_at_zero_progress_keeps_first_gradient():
    g1 = _radial('a', cx='30%')
    g2 = _radial('b', cx='70%')
    result = blend(g1, g2, 0.0)
    assert result.stops == g1.stops
    assert result.cx == '30%'
    assert result.id == 'a~b'


def test_radial_geometry_uses_defaults():
    g1 = _radial('a')
    g2 = _radial('b', cx='100%', r='70%', fr='10%')
    result = blend(g1, g2, 0.5)
    assert result.cx == '75.00%'
    assert result.cy == '50.00%'
    assert result.r == '60.00%'
    # focal point follows the centre when unset
    assert result.fx == '75.00%'
    assert result.fr == '5.00%'


def test_mismatched_stop_counts_hold_earlier_stops():
    # known limitation: no stop resampling, the stop list steps at the end
    g1 = _linear('a', ('#000000', '#ffffff'))
    g2 = _linear('b', ('#000000', '#888888', '#ffffff'))
    assert blend(g1, g2, 0.5).stops == g1.stops
    assert blend(g1, g2, 1.0).stops == g2.stops


def test_different_gradient_kinds_crossfade():
    g1, g2 = _linear('a'), _radial('b')
    result = blend(g1, g2, 0.3)
    assert isinstance(result, Crossfade)
    assert result.from_gradient is g1
    assert result.to_gradient is g2
    assert result.progress == pytest.approx(0.3)


def test_solid_to_gradient_uses_gradient_geometry():
    g2 = _linear('b', ('#ffffff', '#ffffff'), angle=30)
    result = blend('#000000', g2, 0.5)
    assert isinstance(result, Gradient)
    assert result.angle == pytest.approx(30.0)
    assert [s.color for s in result.stops] == ['rgb(128, 128, 128)'] * 2


def test_gradient_to_solid():
    g1 = _radial('a', cx='20%')
    result = blend(g1, '#ffffff', 0.5)
    assert result.kind == GradientKind.RADIAL
    assert result.cx == '20.00%'
    assert result.stops[0].color == 'rgb(128, 128, 128)'


def test_solid_as_gradient_without_stops():
    g = solid_as_gradient('red', Gradient(id='empty'))
    assert [s.color for s in g.stops] == ['red', 'red']


def test_path_points_blend_positionally():
    a = [PathPoint(0, 0, 'p0', handle_out=(1, 1)), PathPoint(10, 0, 'p1', handle_in=(8, 0))]
    b = [PathPoint(0, 10, 'q0', handle_out=(3, 3)), PathPoint(20, 0, 'q1')]
    result = blend(a, b, 0.5)
    assert (result[0].x, result[0].y) == pytest.approx((0.0, 5.0))
    assert result[0].handle_out == pytest.approx((2.0, 2.0))
    assert result[1].handle_in is None
    assert [p.id for p in result] == ['p0', 'p1']


def test_path_point_count_mismatch_steps():
    a = [PathPoint(0, 0)]
    b = [PathPoint(1, 1), PathPoint(2, 2)]
    assert blend(a, b, 0.99) == a
    assert blend(a, b, 1.0) == b


def test_strings_step_at_end():
    assert blend('Hello', 'World', 0.99) == 'Hello'
    assert blend('Hello', 'World', 1.0) == 'World'
    assert blend('url(#a)', 'url(#b)', 0.5) == 'url(#a)'


def test_mismatched_types_hold_earlier_value():
    assert blend(5.0, 'Hello', 0.9) == 5.0
    assert blend(_linear(), 3.0, 0.9) == _linear()
    assert blend([PathPoint(0, 0)], 'M0,0', 1.0) == [PathPoint(0, 0)]


def test_gradient_data_with_percent_and_bad_offsets():
    gradient = value_from_data({'type': 'linearGradient', 'angle': 'wide', 'stops': [
        {'offset': '50%', 'color': '#000000'},
        {'offset': 'far', 'color': '#ffffff'},
        {'offset': 3, 'color': '#ffffff'},
        'not-a-stop',
    ]})
    assert isinstance(gradient, Gradient)
    assert [s.offset for s in gradient.stops] == [0.5, 0.0, 1.0]
    assert gradient.angle is None


def test_unreadable_value_data_is_kept_and_held():
    conic = {'type': 'conicGradient', 'stops': []}
    assert value_from_data(conic) is conic
    assert classify_value(conic) == ValueKind.OTHER
    assert blend(conic, '#ffffff', 0.5) is conic

    points = [{'x': 'left', 'y': 0}]
    assert value_from_data(points) is points
