"""
Elevation lookup utilities.
Reads elevation off course-wide (dist_m, ele_m) samples by linear interpolation.
"""

import numpy as np
import pandas as pd
from typing import Tuple


def elevation_at(samples: pd.DataFrame, dist_m) -> np.ndarray:
    """
    Interpolate elevation at one or more cumulative distances.

    Piecewise linear between the nearest samples, clamped to the first/last
    sample outside the track.

    Args:
        samples: DataFrame with 'dist_m' and 'ele_m' columns, sorted by distance
        dist_m: Scalar or array of cumulative distances (meters)

    Returns:
        Array of elevations (meters)
    """
    if samples is None or samples.empty:
        return np.zeros_like(np.asarray(dist_m, dtype=float))

    distances = samples["dist_m"].to_numpy(dtype=float)
    elevations = samples["ele_m"].to_numpy(dtype=float)
    return np.interp(np.asarray(dist_m, dtype=float), distances, elevations)


def gain_loss_between(samples: pd.DataFrame, start_m: float, end_m: float) -> Tuple[float, float]:
    """
    Total climb and descent between two course distances.

    Uses the interpolated elevation at the start and every raw sample inside
    (start_m, end_m]; no hysteresis, so noisy tracks over-count.

    Returns:
        Tuple of (gain_m, loss_m), both non-negative
    """
    if samples is None or samples.empty or end_m <= start_m:
        return 0.0, 0.0

    inside = samples[(samples["dist_m"] > start_m) & (samples["dist_m"] <= end_m)]
    if inside.empty:
        return 0.0, 0.0

    start_ele = float(elevation_at(samples, start_m))
    profile = np.concatenate([[start_ele], inside["ele_m"].to_numpy(dtype=float)])
    deltas = np.diff(profile)

    gain = float(deltas[deltas > 0].sum())
    loss = float(-deltas[deltas < 0].sum())
    return gain, loss
