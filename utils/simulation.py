"""
Race simulation.
Walks every segment of the course in order and integrates time from the start line.
"""

import logging
from datetime import timedelta
from typing import List, Optional, Sequence

from models import AddedTimes, ChartDataPoint, ComputationResult, Segment, SimulationInput
from utils.environment import NightWindow, night_factor, segment_temperature, weather_factor
from utils.fatigue import FatigueAccumulator
from utils.performance import segment_pace
from utils.segmentation import build_segments
from utils.app_utils import fmt_time
import config

logger = logging.getLogger(__name__)


def simulate_race(
        sim_input: SimulationInput,
        flat_time_s: float,
        segments: Optional[Sequence[Segment]] = None
) -> Optional[ComputationResult]:
    """
    Simulate one race from a flat-time baseline.

    Each segment's time is built up in a fixed order, every stage compounding
    on the previous one and booking its delta to its own category:
        terrain -> elevation/hiking -> fatigue -> night -> weather
    Stops and sleep are added after each leg's last segment. Night and weather
    are evaluated at the segment's entry time (cumulative time before it).

    Because every category is the delta of its own stage, the result satisfies
        final_time == flat_time + sum(added_times)

    Args:
        sim_input: Course, runner profile, start instant, night window and weather
        flat_time_s: Time to run the whole distance flat, daytime, temperate (seconds)
        segments: Pre-built segments for this course (built here if omitted)

    Returns:
        ComputationResult, or None when the course has no distance, the flat
        time is not positive, or the start date/time cannot be parsed
    """
    course = sim_input.course
    total_km = course.total_km
    if total_km <= 0 or flat_time_s <= 0:
        return None

    race_start = sim_input.race_start
    if race_start is None:
        return None

    if segments is None:
        segments = build_segments(course)

    profile = sim_input.profile
    weather = sim_input.weather
    window = NightWindow.from_strings(sim_input.night_from, sim_input.night_to)
    dark_factor = night_factor(profile.night_conf)

    base_pace_spk = flat_time_s / total_km
    fatigue = FatigueAccumulator(profile, base_pace_spk, total_km * config.METERS_PER_KM)

    by_leg: List[List[Segment]] = [[] for _ in course.legs]
    for seg in segments:
        by_leg[seg.leg].append(seg)

    totals = dict(elevation=0.0, terrain=0.0, stops=0.0, night=0.0, weather=0.0, fatigue=0.0)
    chart_data: List[ChartDataPoint] = []
    current_time_s = 0.0

    for leg_index, (leg, leg_segments) in enumerate(zip(course.legs, by_leg)):
        for seg in leg_segments:
            pace = segment_pace(seg, base_pace_spk, profile)
            totals["terrain"] += pace.terrain_time_s
            totals["elevation"] += pace.elevation_time_s

            fatigue_factor = fatigue.fatigue_factor(pace, seg)
            fatigued_s = pace.time_s * fatigue_factor
            totals["fatigue"] += fatigued_s - pace.time_s

            # Environment is read at segment entry
            wall_clock = race_start + timedelta(seconds=current_time_s)
            dark = window.contains(wall_clock)
            night_f = dark_factor if dark else 1.0
            night_s = fatigued_s * night_f
            totals["night"] += night_s - fatigued_s

            weather_f = weather_factor(segment_temperature(weather, dark), weather.humidity_pct,
                                       weather.sky, profile.heat)
            final_seg_s = night_s * weather_f
            totals["weather"] += final_seg_s - night_s

            current_time_s += final_seg_s
            chart_data.append(ChartDataPoint(
                km=(seg.start_m + seg.len_m / 2) / config.METERS_PER_KM,
                elevation=seg.ele_m,
                pace=final_seg_s / (seg.len_m / config.METERS_PER_KM),
                leg=leg_index + 1,
                cumulative_time=current_time_s,
                terrain=seg.terrain,
                grade=seg.grade,
            ))

        stop_s = (leg.stop_min or 0.0) * config.SECONDS_PER_MINUTE
        sleep_s = (leg.sleep_min or 0.0) * config.SECONDS_PER_MINUTE
        totals["stops"] += stop_s + sleep_s
        current_time_s += stop_s + sleep_s
        fatigue.rest(leg.sleep_min)

    added = AddedTimes(**totals)
    logger.debug(
        f"Simulated {total_km:.1f} km from flat {fmt_time(flat_time_s)} -> {fmt_time(current_time_s)} "
        f"(elevation {added.elevation:+.0f}s, terrain {added.terrain:+.0f}s, stops {added.stops:+.0f}s, "
        f"fatigue {added.fatigue:+.0f}s, night {added.night:+.0f}s, weather {added.weather:+.0f}s)"
    )

    return ComputationResult(
        flat_time=flat_time_s,
        final_time=current_time_s,
        added_times=added,
        chart_data=tuple(chart_data),
    )
