"""
Prediction entry points.

"predict" mode runs the race simulation from a flat time (given directly or
derived from a reference performance with Riegel's formula). "goal" mode
searches for the flat time whose simulated finish matches a target.
"""

import logging
from typing import Optional

from models import ComputationResult, PlanMode, SimulationInput
from utils.performance import riegel_time
from utils.segmentation import build_segments
from utils.simulation import simulate_race
from utils.app_utils import fmt_time
import config

logger = logging.getLogger(__name__)


def flat_time_from_reference(reference: str, reference_time_s: float, target_km: float) -> float:
    """
    Flat time for the target race from a known performance.

    Args:
        reference: "race" (the time already is a flat time for this race) or
                   one of config.REFERENCE_DISTANCES_KM ("10k", "half", "marathon", "50k")
        reference_time_s: Time achieved over the reference distance (seconds)
        target_km: Distance of the race being planned

    Returns:
        Flat time in seconds, or 0.0 for unusable inputs

    Example:
        flat_time_from_reference("marathon", 14400, 50) ~= 17238 s
    """
    if reference == "race":
        return max(0.0, float(reference_time_s))
    d1 = config.REFERENCE_DISTANCES_KM.get(reference)
    if d1 is None:
        raise ValueError(f"Unknown reference distance '{reference}'. "
                         f"Choose from: race, {', '.join(config.REFERENCE_DISTANCES_KM)}")
    return riegel_time(reference_time_s, d1, target_km)


def solve_flat_time(
        sim_input: SimulationInput,
        goal_s: float,
        iterations: int = config.GOAL_SOLVER_ITERATIONS
) -> Optional[float]:
    """
    Find the flat time whose simulated finish just beats `goal_s`.

    Bisects [0, 2 x goal] a fixed number of times. Each trial reruns the full
    simulation. Finish time rises with flat time, so a trial finishing under
    the goal raises the lower bound and becomes the current answer; any other
    trial lowers the upper bound. If no trial beats the goal, the goal itself
    is returned.

    Returns:
        Flat time in seconds, or None for a non-positive goal or a course that cannot be simulated
    """
    if goal_s <= 0:
        return None

    logger.debug("=" * 60)
    logger.debug("STAGE: GOAL SOLVER")
    logger.debug(f"Target finish: {fmt_time(goal_s)}, {iterations} iterations")

    segments = build_segments(sim_input.course)
    low, high = 0.0, goal_s * 2
    best_flat_time = goal_s

    for i in range(iterations):
        mid = (low + high) / 2
        trial = simulate_race(sim_input, mid, segments)
        if trial is None:
            return None

        if trial.final_time < goal_s:
            low = mid
            best_flat_time = mid
        else:
            high = mid
        logger.debug(f"  Iteration {i}: flat {fmt_time(mid)} -> finish {fmt_time(trial.final_time)}")

    logger.debug(f"Solved flat time: {fmt_time(best_flat_time)}")
    return best_flat_time


def plan_for_goal(sim_input: SimulationInput, goal_s: float) -> Optional[ComputationResult]:
    """Simulate the race at the flat time that meets the goal."""
    flat_time = solve_flat_time(sim_input, goal_s)
    if flat_time is None:
        return None
    return simulate_race(sim_input, flat_time)


def run_plan(
        sim_input: SimulationInput,
        mode: PlanMode = PlanMode.PREDICT,
        flat_time_s: Optional[float] = None,
        goal_s: Optional[float] = None
) -> Optional[ComputationResult]:
    """
    Main entry point: simulate the race in "predict" or "goal" mode.

    Args:
        sim_input: Everything the simulation reads
        mode: PlanMode.PREDICT (needs flat_time_s) or PlanMode.GOAL (needs goal_s)
        flat_time_s: Flat-ground time for the whole distance (predict mode)
        goal_s: Target finish time (goal mode)

    Returns:
        ComputationResult, or None when the inputs are not (yet) usable
    """
    mode = PlanMode(mode)
    logger.debug("=" * 60)
    logger.debug(f"STARTING RACE PLAN ({mode.value})")
    logger.debug(f"Course: {sim_input.course.total_km:.1f} km in {len(sim_input.course.legs)} legs")

    if mode == PlanMode.GOAL:
        return plan_for_goal(sim_input, goal_s or 0.0)
    return simulate_race(sim_input, flat_time_s or 0.0)
