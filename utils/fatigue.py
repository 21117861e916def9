"""
Fatigue modeling.

Two running scalars carry fatigue through a race:
    - effort-seconds: metabolic strain, time weighted by relative effort
    - muscular damage: eccentric loading, dominated by steep downhill running

Together they produce a multiplicative fatigue factor per segment. Sleep at an
aid station pays back part of both, metabolic faster than muscular.
"""

import numpy as np

from models import Segment, RunnerProfile, Terrain
from utils.performance import SegmentPace
import config


def _reset_from_curve(minutes: float, curve) -> float:
    minutes = minutes or 0.0
    if minutes <= 0:
        return 0.0
    xs, ys = zip(*curve)
    return float(np.interp(minutes, xs, ys))


def metabolic_reset(minutes: float) -> float:
    """
    Fraction of metabolic fatigue removed by a sleep of `minutes`.

    Example:
        30 min -> 0.20, 90 min -> 0.50, 180 min -> 0.80, 270+ min -> 0.95
    """
    return _reset_from_curve(minutes, config.METABOLIC_RESET_CURVE)


def muscular_reset(minutes: float) -> float:
    """
    Fraction of muscular damage removed by a sleep of `minutes`.

    Example:
        30 min -> 0.05, 60 min -> 0.10, 90 min -> 0.20, 180+ min -> 0.30
    """
    return _reset_from_curve(minutes, config.MUSCULAR_RESET_CURVE)


def damage_coefficient(grade: float, hiking: bool) -> float:
    """Muscular damage per km for a (hiking, grade) band."""
    if hiking:
        return config.DAMAGE_HIKING
    if grade < config.STEEP_DOWNHILL_DAMAGE_GRADE:
        return config.DAMAGE_STEEP_DOWNHILL
    if grade < config.DOWNHILL_DAMAGE_GRADE:
        return config.DAMAGE_DOWNHILL
    if grade > config.UPHILL_DAMAGE_GRADE:
        return config.DAMAGE_UPHILL
    return config.DAMAGE_FLAT


def finish_pull(distance_fraction: float) -> float:
    """
    Fade-rate multiplier for the finish-line pull.

    1.0 until 90% of the race, then ramps linearly down (0.75 at the line), never below 0.
    """
    if distance_fraction <= config.FINISH_PULL_START:
        return 1.0
    ramp = (distance_fraction - config.FINISH_PULL_START) / (1 - config.FINISH_PULL_START)
    return max(0.0, 1 - config.FINISH_PULL_STRENGTH * ramp)


class FatigueAccumulator:
    """
    Fatigue state for one simulation run.

    Create a fresh instance per run; state is never reset mid-race, only
    perturbed by sleep through `rest`.
    """

    def __init__(self, profile: RunnerProfile, base_pace_spk: float, total_distance_m: float):
        self.profile = profile
        self.base_pace_spk = base_pace_spk
        self.total_distance_m = total_distance_m

        self.effort_seconds = 0.0
        self.muscular_damage = 0.0
        self.reset_credit = 0.0

        fade_per_10k = profile.fade_per_10k if profile.fade_per_10k is not None else config.DEFAULT_FADE_PER_10K
        self.base_fade_rate = fade_per_10k / 100
        self.resilience = (profile.muscular_resilience
                           if profile.muscular_resilience is not None else config.DEFAULT_MUSCULAR_RESILIENCE)
        self.hiking_economy = (profile.hiking_economy_factor
                               if profile.hiking_economy_factor is not None else config.DEFAULT_HIKING_ECONOMY)

    def fatigue_factor(self, pace: SegmentPace, segment: Segment) -> float:
        """
        Accumulate one segment's load and return its fatigue multiplier.

        Args:
            pace: Terrain/grade-adjusted pace for the segment
            segment: The segment itself (start distance, length, grade, terrain)

        Returns:
            Multiplier (>= 1 for sane profiles) applied to the segment's pre-fatigue time
        """
        len_km = segment.len_m / config.METERS_PER_KM

        # 1. Muscular damage
        self.muscular_damage += len_km * damage_coefficient(segment.grade, pace.is_hiking)

        # 2. Metabolic effort
        effort = pace.pace_spk / self.base_pace_spk
        if segment.terrain == Terrain.SLOW:
            # Slow terrain costs time, not cardio
            effort /= pace.terrain_factor or config.EPSILON
        if pace.is_hiking:
            effort *= (1 - self.hiking_economy)
        self.effort_seconds += pace.time_s * effort

        # 3. Fade rate, amplified by damage and eased near the finish
        fade_rate = self.base_fade_rate * (1 + self.muscular_damage * self.resilience)
        if self.total_distance_m > 0:
            fade_rate *= finish_pull(segment.start_m / self.total_distance_m)

        # 4. Factor
        return 1.0 + (self.effort_seconds / config.EFFORT_NORMALISER_S) * fade_rate * (1 - self.reset_credit)

    def rest(self, sleep_minutes: float) -> None:
        """Apply sleep recovery at an aid station."""
        if not sleep_minutes or sleep_minutes <= 0:
            return
        self.reset_credit = min(1.0, self.reset_credit + metabolic_reset(sleep_minutes))
        self.muscular_damage *= (1 - muscular_reset(sleep_minutes))
