import numpy as np
import pytest

from models import Course, Leg, Terrain, TerrainSegment
from utils.segmentation import build_segments, leg_boundaries


def test_leg_boundaries_keep_remainder_as_last_segment():
    assert list(leg_boundaries(0.0, 60.0, 25.0)) == [0.0, 25.0, 50.0, 60.0]


def test_leg_boundaries_exact_multiple_has_no_sliver():
    assert list(leg_boundaries(0.0, 50.0, 25.0)) == [0.0, 25.0, 50.0]
    assert list(leg_boundaries(100.0, 150.0, 25.0)) == [100.0, 125.0, 150.0]


def test_segment_lengths_sum_to_leg_distance():
    segments = build_segments(Course.simple(0.06, terrain=Terrain.ROAD))

    lengths = [s.len_m for s in segments]
    assert lengths == pytest.approx([25.0, 25.0, 10.0])
    assert sum(lengths) == pytest.approx(60.0)


def test_constant_grade_without_samples():
    segments = build_segments(Course.simple(1.0, gain_m=100.0, loss_m=0.0, terrain=Terrain.ROAD))

    assert len(segments) == 40
    assert all(s.grade == pytest.approx(10.0) for s in segments)
    assert all(s.ele_m == 0.0 for s in segments)
    assert [s.start_m for s in segments] == pytest.approx([i * 25.0 for i in range(40)])


def test_net_zero_leg_is_flat_without_samples():
    segments = build_segments(Course.simple(1.0, gain_m=300.0, loss_m=300.0))
    assert all(s.grade == 0.0 for s in segments)


def test_grades_interpolated_from_samples():
    course = Course([Leg(dist_km=1.0)], [(0.0, 100.0), (1000.0, 200.0)])
    segments = build_segments(course)

    assert all(s.grade == pytest.approx(10.0) for s in segments)
    assert segments[0].ele_m == pytest.approx(102.5)
    assert segments[-1].ele_m == pytest.approx(200.0)


def test_elevation_clamped_past_last_sample():
    course = Course([Leg(dist_km=2.0)], [(0.0, 100.0), (1000.0, 200.0)])
    segments = build_segments(course)

    tail = [s for s in segments if s.start_m >= 1000.0]
    assert tail
    assert all(s.grade == pytest.approx(0.0) for s in tail)
    assert all(s.ele_m == pytest.approx(200.0) for s in tail)


def test_terrain_assigned_at_segment_midpoint():
    leg = Leg(
        dist_km=1.0,
        terrain=Terrain.MIXED,
        terrain_segments=(TerrainSegment(0.5, "technical"), TerrainSegment(0.3, "road")),
    )
    segments = build_segments(Course([leg]))

    assert segments[0].terrain == Terrain.TECHNICAL
    assert segments[19].terrain == Terrain.TECHNICAL  # mid 0.4875 km
    assert segments[20].terrain == Terrain.ROAD  # mid 0.5125 km
    assert segments[31].terrain == Terrain.ROAD  # mid 0.7875 km
    assert segments[32].terrain == Terrain.MIXED  # past the terrain-segments
    assert segments[-1].terrain == Terrain.MIXED


def test_segments_are_contiguous_across_legs():
    course = Course([Leg(dist_km=0.1, terrain="road"), Leg(dist_km=0.05, terrain="sandy")])
    segments = build_segments(course)

    assert [s.leg for s in segments] == [0, 0, 0, 0, 1, 1]
    assert [s.start_m for s in segments] == pytest.approx([0, 25, 50, 75, 100, 125])
    assert segments[-1].terrain == Terrain.SANDY

    ends = np.array([s.start_m + s.len_m for s in segments])
    assert ends[-1] == pytest.approx(course.total_km * 1000)


def test_zero_distance_leg_produces_no_segments():
    course = Course([Leg(dist_km=0.0), Leg(dist_km=0.05)])
    segments = build_segments(course)

    assert len(segments) == 2
    assert all(s.leg == 1 for s in segments)
