from dataclasses import replace

import numpy as np
import pytest

from models import RunnerProfile, Segment, Terrain
from utils.fatigue import (
    FatigueAccumulator, damage_coefficient, finish_pull, metabolic_reset, muscular_reset,
)
from utils.performance import SegmentPace, segment_pace


def _segment(grade=0.0, terrain=Terrain.ROAD, start_m=0.0):
    return Segment(len_m=25.0, ele_m=0.0, grade=grade, terrain=terrain, leg=0, start_m=start_m)


@pytest.mark.parametrize("minutes, metabolic, muscular", [
    (0, 0.0, 0.0),
    (30, 0.20, 0.05),
    (60, 0.35, 0.10),
    (90, 0.50, 0.20),
    (180, 0.80, 0.30),
    (270, 0.95, 0.30),
    (1000, 0.95, 0.30),
])
def test_reset_curves(minutes, metabolic, muscular):
    assert metabolic_reset(minutes) == pytest.approx(metabolic)
    assert muscular_reset(minutes) == pytest.approx(muscular)


def test_reset_curves_are_monotone_and_below_one():
    minutes = np.arange(0, 600, 5)
    metabolic = [metabolic_reset(m) for m in minutes]
    muscular = [muscular_reset(m) for m in minutes]

    assert all(b >= a for a, b in zip(metabolic, metabolic[1:]))
    assert all(b >= a for a, b in zip(muscular, muscular[1:]))
    assert max(metabolic) < 1.0
    assert max(muscular) < 1.0


def test_no_sleep_means_no_reset():
    assert metabolic_reset(None) == 0.0
    assert metabolic_reset(-10) == 0.0
    assert muscular_reset(0) == 0.0


@pytest.mark.parametrize("grade, hiking, expected", [
    (20.0, True, 0.2),
    (-15.0, True, 0.2),
    (-15.0, False, 3.0),
    (-10.0, False, 2.0),
    (-5.0, False, 2.0),
    (-2.0, False, 0.5),
    (0.0, False, 0.5),
    (2.0, False, 0.5),
    (3.0, False, 1.0),
])
def test_damage_coefficient_bands(grade, hiking, expected):
    assert damage_coefficient(grade, hiking) == expected


@pytest.mark.parametrize("fraction, expected", [(0.0, 1.0), (0.5, 1.0), (0.9, 1.0), (0.95, 0.875), (1.0, 0.75)])
def test_finish_pull(fraction, expected):
    assert finish_pull(fraction) == pytest.approx(expected)


def test_finish_pull_never_negative():
    assert finish_pull(2.0) == 0.0


def test_first_flat_segment_factor():
    profile = RunnerProfile(fade_per_10k=1.0, muscular_resilience=0.003)
    fatigue = FatigueAccumulator(profile, 300.0, 10000.0)
    seg = _segment()

    factor = fatigue.fatigue_factor(segment_pace(seg, 300.0, profile), seg)

    fade_rate = 0.01 * (1 + 0.0125 * 0.003)
    assert fatigue.effort_seconds == pytest.approx(7.5)
    assert fatigue.muscular_damage == pytest.approx(0.0125)
    assert factor == pytest.approx(1 + 7.5 / 36000 * fade_rate)


def test_zero_fade_means_no_fatigue(neutral_profile):
    fatigue = FatigueAccumulator(neutral_profile, 300.0, 10000.0)
    for i in range(100):
        seg = _segment(start_m=i * 25.0)
        assert fatigue.fatigue_factor(segment_pace(seg, 300.0, neutral_profile), seg) == 1.0


def test_fatigue_grows_along_the_race():
    profile = RunnerProfile()
    fatigue = FatigueAccumulator(profile, 300.0, 100000.0)
    factors = []
    for i in range(200):
        seg = _segment(start_m=i * 25.0)
        factors.append(fatigue.fatigue_factor(segment_pace(seg, 300.0, profile), seg))

    assert all(b > a for a, b in zip(factors, factors[1:]))


def test_slow_terrain_costs_time_not_effort():
    profile = RunnerProfile(t_slow=1.25)
    fatigue = FatigueAccumulator(profile, 300.0, 10000.0)
    seg = _segment(terrain=Terrain.SLOW)
    pace = segment_pace(seg, 300.0, profile)

    fatigue.fatigue_factor(pace, seg)

    assert pace.time_s == pytest.approx(9.375)
    assert fatigue.effort_seconds == pytest.approx(9.375)


def test_hiking_is_cheaper_per_second():
    profile = RunnerProfile()
    fatigue = FatigueAccumulator(profile, 300.0, 10000.0)
    seg = _segment(grade=20.0)
    pace = segment_pace(seg, 300.0, profile)

    fatigue.fatigue_factor(pace, seg)

    assert pace.is_hiking
    assert fatigue.effort_seconds == pytest.approx(22.5 * 3.0 * (1 - 0.085))
    assert fatigue.muscular_damage == pytest.approx(0.025 * 0.2)


def test_finish_pull_eases_fade_near_the_line():
    profile = RunnerProfile()
    pace = SegmentPace(pace_spk=300.0, time_s=7.5, terrain_time_s=0.0, elevation_time_s=0.0,
                       terrain_factor=1.0, is_hiking=False)

    mid_race = FatigueAccumulator(profile, 300.0, 10000.0).fatigue_factor(pace, _segment(start_m=5000.0))
    near_end = FatigueAccumulator(profile, 300.0, 10000.0).fatigue_factor(pace, _segment(start_m=9500.0))

    assert (near_end - 1) == pytest.approx((mid_race - 1) * 0.875)


def test_rest_pays_back_fatigue():
    fatigue = FatigueAccumulator(RunnerProfile(), 300.0, 10000.0)
    fatigue.muscular_damage = 10.0

    fatigue.rest(90)
    assert fatigue.reset_credit == pytest.approx(0.5)
    assert fatigue.muscular_damage == pytest.approx(8.0)

    fatigue.rest(270)
    assert fatigue.reset_credit == 1.0


def test_full_credit_cancels_accumulated_effort():
    profile = RunnerProfile()
    fatigue = FatigueAccumulator(profile, 300.0, 10000.0)
    fatigue.effort_seconds = 20000.0
    fatigue.reset_credit = 1.0
    seg = _segment()

    assert fatigue.fatigue_factor(segment_pace(seg, 300.0, profile), seg) == pytest.approx(1.0)


def test_rest_without_sleep_is_a_no_op():
    fatigue = FatigueAccumulator(replace(RunnerProfile(), fade_per_10k=2.0), 300.0, 10000.0)
    fatigue.muscular_damage = 4.0
    fatigue.rest(0)
    fatigue.rest(None)

    assert fatigue.reset_credit == 0.0
    assert fatigue.muscular_damage == 4.0
