"""
GPX file parsing.
Turns a GPX track into the (dist_m, ele_m) samples the simulation consumes.
"""

import io
import numpy as np
import pandas as pd
import gpxpy
from typing import List, Tuple
import config


def parse_gpx(file_bytes: bytes) -> pd.DataFrame:
    """
    Parse GPX file and return DataFrame with coordinates and cumulative distance.

    Args:
        file_bytes: Raw GPX file bytes

    Returns:
        DataFrame with columns: lat, lon, ele_m, dist_m

    Raises:
        ValueError: If GPX file cannot be parsed or has fewer than two track points
    """
    gpx_data = _parse_gpx_data(file_bytes)
    points = _extract_gps_points(gpx_data)
    df = pd.DataFrame(points, columns=["lat", "lon", "ele_m"])
    df["dist_m"] = cumulative_distance_m(df["lat"].to_numpy(), df["lon"].to_numpy())
    df["ele_m"] = df["ele_m"].interpolate().bfill().ffill().fillna(0.0)
    return df


def parse_cumulative_dist(text: str, units: str) -> list[float]:
    """
    Parse comma-separated distance values and convert to kilometers.

    Example:
        parse_cumulative_dist("10, 21.1", "km") -> [10.0, 21.1]
        parse_cumulative_dist("6.2, 13.1", "mi") -> [9.98, 21.08]
    """
    try:
        vals = [float(x.strip()) for x in text.split(",") if x.strip()]
    except ValueError as e:
        raise ValueError(f"Could not read aid station distances '{text}': {e}")
    if units == "mi":
        return [v * config.MILES_TO_KM for v in vals]
    return vals


def cumulative_distance_m(lat: np.ndarray, lon: np.ndarray) -> np.ndarray:
    """
    Cumulative great-circle distance along a track (haversine), starting at 0.
    """
    if len(lat) == 0:
        return np.array([], dtype=float)

    lat_rad = np.radians(np.asarray(lat, dtype=float))
    lon_rad = np.radians(np.asarray(lon, dtype=float))
    d_lat = np.diff(lat_rad)
    d_lon = np.diff(lon_rad)

    a = np.sin(d_lat / 2) ** 2 + np.cos(lat_rad[:-1]) * np.cos(lat_rad[1:]) * np.sin(d_lon / 2) ** 2
    steps = 2 * config.EARTH_R * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    steps = np.nan_to_num(steps, nan=0.0)
    return np.concatenate([[0.0], np.cumsum(steps)])


def _parse_gpx_data(file_bytes: bytes):
    """Parse GPX bytes into gpxpy object with error handling."""
    try:
        gpx_content = file_bytes.decode("utf-8", errors="ignore")
        gpx_data = gpxpy.parse(io.StringIO(gpx_content))
    except Exception as e:
        raise ValueError(f"Failed to parse GPX file: {e}")

    if not gpx_data.tracks and not gpx_data.routes:
        raise ValueError("No tracks found in GPX file")

    return gpx_data


def _extract_gps_points(gpx_data) -> List[Tuple[float, float, float]]:
    """
    Pull (latitude, longitude, elevation_m) out of every track segment, falling back to routes.
    """
    points = []
    for track in gpx_data.tracks:
        for segment in track.segments:
            for point in segment.points:
                elevation = point.elevation if point.elevation is not None else np.nan
                points.append((point.latitude, point.longitude, elevation))

    if not points:
        for route in gpx_data.routes:
            for point in route.points:
                elevation = point.elevation if point.elevation is not None else np.nan
                points.append((point.latitude, point.longitude, elevation))

    if len(points) < 2:
        raise ValueError("GPX file needs at least two track points")

    return points
