"""
Course segmentation.
Cuts a course into the fixed-length segments the race simulation walks.
"""

import logging
from typing import List

import numpy as np

from models import Course, Leg, Segment, Terrain
from utils.elevation import elevation_at
import config

logger = logging.getLogger(__name__)


def build_segments(course: Course, step_m: float = config.SEGMENT_LENGTH_M) -> List[Segment]:
    """
    Convert a course's legs into one flat, ordered list of segments.

    Each leg is cut into full steps of `step_m` plus a shorter final segment
    holding the remainder, so segment lengths always add up to the leg distance.

    Elevation source:
        - Course has elevation samples: elevation is interpolated at every
          segment boundary and grade = rise / run * 100
        - No samples: the leg's net gain/loss is spread as one constant grade,
          and elevation is reported as 0

    Args:
        course: Course with legs and optional elevation samples
        step_m: Nominal segment length (meters)

    Returns:
        List of Segment, contiguous from 0 to the course's total distance
    """
    segments: List[Segment] = []
    leg_start_m = 0.0

    for leg_index, leg in enumerate(course.legs):
        leg_m = leg.dist_km * config.METERS_PER_KM
        if leg_m <= 0:
            continue

        bounds = leg_boundaries(leg_start_m, leg_start_m + leg_m, step_m)
        starts = bounds[:-1]
        lengths = np.diff(bounds)

        if course.has_elevation:
            elevations = elevation_at(course.samples, bounds)
            ends_ele = elevations[1:]
            grades = (np.diff(elevations) / lengths) * 100.0
        else:
            ends_ele = np.zeros(len(lengths))
            grades = np.full(len(lengths), ((leg.gain_m - leg.loss_m) / leg_m) * 100.0)

        mids_into_leg_km = (starts - leg_start_m + lengths / 2) / config.METERS_PER_KM
        terrains = assign_terrain(leg, mids_into_leg_km)

        segments.extend(
            Segment(len_m=float(length), ele_m=float(ele), grade=float(grade),
                    terrain=terrain, leg=leg_index, start_m=float(start))
            for start, length, ele, grade, terrain in zip(starts, lengths, ends_ele, grades, terrains)
        )
        leg_start_m += leg_m

    logger.debug(f"Segmented {len(course.legs)} legs ({course.total_km:.2f} km) into {len(segments)} segments")
    return segments


def leg_boundaries(start_m: float, end_m: float, step_m: float = config.SEGMENT_LENGTH_M) -> np.ndarray:
    """
    Segment boundaries for one leg: start, every full step, then the leg end.

    Example:
        leg_boundaries(0, 60, 25) -> [0, 25, 50, 60]
        leg_boundaries(0, 50, 25) -> [0, 25, 50]
    """
    inner = np.arange(start_m + step_m, end_m, step_m)
    # Drop float leftovers that would create a sliver segment at the leg end
    inner = inner[inner < end_m - config.MIN_SEGMENT_M]
    return np.concatenate([[start_m], inner, [end_m]])


def assign_terrain(leg: Leg, mids_into_leg_km: np.ndarray) -> List[Terrain]:
    """
    Terrain for each segment midpoint (km into the leg).

    Picks the first terrain-segment whose cumulative distance reaches the
    midpoint. Midpoints past the last terrain-segment, and legs without
    terrain-segments, use the leg's own terrain.
    """
    if not leg.terrain_segments:
        return [leg.terrain] * len(mids_into_leg_km)

    cumulative_km = np.cumsum([ts.dist_km for ts in leg.terrain_segments])
    idx = np.searchsorted(cumulative_km, mids_into_leg_km, side="left")
    n = len(leg.terrain_segments)
    return [leg.terrain_segments[i].terrain if i < n else leg.terrain for i in idx]
