"""
Race plan aggregation.
Slices a simulation result into per-leg arrival times, fuel needs and night stretches.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import List, Optional

import pandas as pd

from models import ComputationResult, Course, Leg
from utils.elevation import gain_loss_between
from utils.environment import NightWindow
import config


@dataclass(frozen=True)
class LegPlanInfo:
    leg: Leg
    start_km: float
    end_km: float
    running_time_s: float
    adjusted_pace_spk: float
    arrival: datetime
    departure: datetime
    total_stop_min: float
    carbs_g: int
    water_ml: int
    terrain_breakdown: str


@dataclass(frozen=True)
class NightPeriod:
    start_km: float
    end_km: float


@dataclass(frozen=True)
class RaceEvent:
    km: float
    kind: str  # "sunrise" or "sunset"


def leg_plan(
        result: ComputationResult,
        course: Course,
        race_start: datetime,
        carbs_per_hour: float = config.DEFAULT_CARBS_PER_HOUR,
        water_per_hour: float = config.DEFAULT_WATER_PER_HOUR
) -> List[LegPlanInfo]:
    """
    Break the simulated race down leg by leg.

    A leg owns the chart points whose km lies in (start_km, end_km]. Its running
    time ends at the last of those points; stop and sleep minutes then push the
    departure time back.

    Args:
        result: Simulation output
        course: The simulated course (for leg distances, stops and terrain)
        race_start: Start instant
        carbs_per_hour: Fuelling rate (grams per running hour)
        water_per_hour: Drinking rate (ml per running hour)

    Returns:
        One LegPlanInfo per leg, empty if there is nothing to plan
    """
    if result is None or race_start is None or not course.legs:
        return []

    df = result.to_dataframe()
    plan = []
    cumulative_time = 0.0

    for leg, (start_km, end_km) in zip(course.legs, course.leg_bounds_km):
        points = df[(df["km"] > start_km) & (df["km"] <= end_km)] if not df.empty else df
        end_time = float(points["cumulative_time"].iloc[-1]) if not points.empty else cumulative_time
        running_time = end_time - cumulative_time

        cumulative_time = end_time
        arrival = race_start + timedelta(seconds=cumulative_time)
        total_stop_min = (leg.stop_min or 0.0) + (leg.sleep_min or 0.0)
        cumulative_time += total_stop_min * config.SECONDS_PER_MINUTE
        departure = race_start + timedelta(seconds=cumulative_time)

        running_hours = running_time / config.SECONDS_PER_HOUR
        has_distance = leg.dist_km > 0
        plan.append(LegPlanInfo(
            leg=leg,
            start_km=start_km,
            end_km=end_km,
            running_time_s=running_time,
            adjusted_pace_spk=running_time / leg.dist_km if has_distance else 0.0,
            arrival=arrival,
            departure=departure,
            total_stop_min=total_stop_min,
            carbs_g=int(round(running_hours * carbs_per_hour)) if has_distance else 0,
            water_ml=int(round(running_hours * water_per_hour)) if has_distance else 0,
            terrain_breakdown=terrain_breakdown(leg, points),
        ))

    return plan


def terrain_breakdown(leg: Leg, points: pd.DataFrame) -> str:
    """
    Describe a leg's terrain, e.g. "3.0km technical · 1.5km mixed".

    Uses the leg's own terrain-segments when it has them, otherwise counts
    simulated segments per terrain (longest first).
    """
    if leg.terrain_segments:
        return " · ".join(f"{ts.dist_km:.1f}km {ts.terrain.value}"
                          for ts in leg.terrain_segments if ts.dist_km > 0)
    if points.empty:
        return ""

    segment_km = config.SEGMENT_LENGTH_M / config.METERS_PER_KM
    counts = points.groupby("terrain", sort=False).size().sort_values(ascending=False, kind="stable")
    return " · ".join(f"{n * segment_km:.1f}km {terrain}" for terrain, n in counts.items())


def night_periods(result: ComputationResult, race_start: datetime, window: NightWindow) -> List[NightPeriod]:
    """
    Contiguous stretches of the course covered in the dark.

    A period opens at the first chart point inside the night window and closes
    at the first point back outside it; a period still open at the finish ends
    at the last point.
    """
    if result is None or race_start is None or not result.chart_data:
        return []

    periods = []
    in_night = False
    start_km = 0.0
    for pt in result.chart_data:
        dark = window.contains(race_start + timedelta(seconds=pt.cumulative_time))
        if dark and not in_night:
            in_night = True
            start_km = pt.km
        elif not dark and in_night:
            in_night = False
            periods.append(NightPeriod(start_km, pt.km))

    if in_night:
        periods.append(NightPeriod(start_km, result.chart_data[-1].km))
    return periods


def race_events(
        result: ComputationResult,
        race_start: datetime,
        sunrise: Optional[datetime],
        sunset: Optional[datetime]
) -> List[RaceEvent]:
    """First km reached at or after sunrise and sunset (each reported once)."""
    if result is None or race_start is None or not result.chart_data:
        return []

    pending = {kind: when for kind, when in (("sunrise", sunrise), ("sunset", sunset)) if when is not None}
    events = []
    for pt in result.chart_data:
        if not pending:
            break
        moment = race_start + timedelta(seconds=pt.cumulative_time)
        for kind in [k for k, when in pending.items() if moment >= when]:
            events.append(RaceEvent(pt.km, kind))
            del pending[kind]
    return events


def fill_leg_elevation(course: Course) -> Course:
    """
    Recompute every leg's gain and loss from the course's elevation samples.

    Returns the course unchanged when it has no samples.
    """
    if not course.has_elevation:
        return course

    legs = []
    for leg, (start_km, end_km) in zip(course.legs, course.leg_bounds_km):
        gain, loss = gain_loss_between(course.samples, start_km * config.METERS_PER_KM,
                                       end_km * config.METERS_PER_KM)
        legs.append(replace(leg, gain_m=round(gain), loss_m=round(loss)))
    return Course(legs, course.samples)
