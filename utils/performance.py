"""
Performance modeling and adjustment functions.
Per-segment pace from terrain and grade, plus distance scaling.
"""

from dataclasses import dataclass

from models import RunnerProfile, Segment
import config


@dataclass(frozen=True)
class SegmentPace:
    """Pace for one segment before fatigue, night and weather are applied."""
    pace_spk: float  # s/km
    time_s: float
    terrain_time_s: float
    elevation_time_s: float
    terrain_factor: float
    is_hiking: bool


def is_hiking(grade: float, profile: RunnerProfile) -> bool:
    """Hiking kicks in strictly above the profile's grade threshold."""
    return bool(profile.hike) and grade > profile.hike_thr


def segment_pace(segment: Segment, base_pace_spk: float, profile: RunnerProfile) -> SegmentPace:
    """
    Calculate the terrain- and grade-adjusted pace for a single segment.

    Terrain is applied first and unconditionally. Grade then selects exactly one
    branch; pace is deliberately discontinuous at the hiking threshold.

    Branches:
        - Hiking (grade > hike threshold): the slower of climbing at the
          profile's VAM and walking the horizontal distance at a grade-scaled
          walking pace
        - Uphill running: +up_cost_pct of flat pace per grade point
        - Gentle downhill (grade > -3): -down_benefit_pct per grade point
        - Steep downhill (grade <= -3): +down_penalty_pct per grade point
        - Flat: no elevation cost

    Args:
        segment: Segment with length, grade and terrain
        base_pace_spk: Flat pace (seconds per km)
        profile: Runner profile

    Returns:
        SegmentPace with pace, segment time and the terrain/elevation time deltas (seconds)

    Example:
        Flat pace 300 s/km, 2% grade, up_cost_pct=2.8, road terrain:
        pace = 300 + 300 * 0.028 * 2 = 316.8 s/km
    """
    len_km = segment.len_m / config.METERS_PER_KM
    grade = segment.grade

    terrain_factor = profile.terrain_factor(segment.terrain)
    terrain_pace = base_pace_spk * (terrain_factor - 1)
    pace_spk = base_pace_spk + terrain_pace

    hiking = is_hiking(grade, profile)
    if hiking:
        vam_mps = (profile.vam / config.SECONDS_PER_HOUR) or config.EPSILON
        vertical_time = (grade / 100 * segment.len_m) / vam_mps

        horizontal_pace_factor = (config.HIKE_HORIZONTAL_BASE
                                  + (grade - profile.hike_thr) / 10 * config.HIKE_HORIZONTAL_PER_10PCT)
        horizontal_time = len_km * base_pace_spk * terrain_factor * horizontal_pace_factor

        hike_time = max(vertical_time, horizontal_time)
        # Measured against the terrain-adjusted flat time so terrain is not counted twice
        elevation_time = hike_time - pace_spk * len_km
        pace_spk = hike_time / len_km
    else:
        elevation_pace = grade_pace_delta(grade, base_pace_spk, profile)
        elevation_time = elevation_pace * len_km
        pace_spk += elevation_pace

    return SegmentPace(
        pace_spk=pace_spk,
        time_s=pace_spk * len_km,
        terrain_time_s=terrain_pace * len_km,
        elevation_time_s=elevation_time,
        terrain_factor=terrain_factor,
        is_hiking=hiking,
    )


def grade_pace_delta(grade: float, base_pace_spk: float, profile: RunnerProfile) -> float:
    """Seconds per km added (or removed) by running a grade."""
    if grade > 0:
        return base_pace_spk * (profile.up_cost_pct / 100) * grade
    if grade < 0:
        if grade > config.STEEP_DOWNHILL_GRADE:
            benefit = -grade * (profile.down_benefit_pct / 100)
            return -base_pace_spk * benefit
        penalty = -grade * (profile.down_penalty_pct / 100)
        return base_pace_spk * penalty
    return 0.0


def riegel_time(t1_s: float, d1_km: float, d2_km: float, exponent: float = config.RIEGEL_EXPONENT) -> float:
    """
    Scale a known performance to another distance with Riegel's formula.

    T2 = T1 * (D2 / D1) ^ exponent

    Returns:
        Predicted time in seconds, or 0.0 when any input is non-positive

    Example:
        4:00:00 marathon -> 50 km: riegel_time(14400, 42.195, 50) ~= 17238 s (4:47:18)
    """
    if t1_s <= 0 or d1_km <= 0 or d2_km <= 0:
        return 0.0
    return t1_s * (d2_km / d1_km) ** exponent
