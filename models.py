from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from utils.gpx_parsing import parse_gpx, parse_cumulative_dist
from utils.elevation import gain_loss_between
import config


class Terrain(str, Enum):
    ROAD = "road"
    SMOOTH = "smooth"
    MIXED = "mixed"
    TECHNICAL = "technical"
    SANDY = "sandy"
    # Forced slow going (crowds, river crossings): costs time but not cardio effort
    SLOW = "slow"


class NightConfidence(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Sky(str, Enum):
    PARTLY_CLOUDY = "Partly Cloudy"
    SUNNY = "Sunny"
    OVERCAST = "Overcast"


class PlanMode(str, Enum):
    PREDICT = "predict"
    GOAL = "goal"


@dataclass(frozen=True)
class TerrainSegment:
    dist_km: float
    terrain: Terrain

    def __post_init__(self):
        object.__setattr__(self, "terrain", Terrain(self.terrain))


@dataclass(frozen=True)
class Leg:
    """
    A stretch of course between aid stations (or the whole race in simple mode).

    Gain/loss only matter when the course carries no elevation samples.
    """
    dist_km: float
    gain_m: float = 0.0
    loss_m: float = 0.0
    terrain: Terrain = Terrain.MIXED
    stop_min: float = 0.0
    sleep_min: float = 0.0
    terrain_segments: Tuple[TerrainSegment, ...] = ()
    name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "terrain", Terrain(self.terrain))
        object.__setattr__(self, "terrain_segments", tuple(self.terrain_segments))


@dataclass(frozen=True)
class RunnerProfile:
    """
    The runner's fixed parameter set. Every multiplier is a dimensionless ratio
    applied to the flat pace-per-km baseline.
    """
    heat: float = 1.0
    fade_per_10k: float = 1.0
    night_conf: NightConfidence = NightConfidence.MEDIUM
    up_cost_pct: float = 2.8
    down_benefit_pct: float = 1.0
    down_penalty_pct: float = 1.2
    t_road: float = 1.0
    t_smooth: float = 1.0
    t_mixed: float = 1.05
    t_tech: float = 1.15
    t_sand: float = 1.20
    t_slow: float = 1.25
    hike: bool = True
    hike_thr: float = 15.0
    vam: float = 800.0
    muscular_resilience: float = config.DEFAULT_MUSCULAR_RESILIENCE
    hiking_economy_factor: float = config.DEFAULT_HIKING_ECONOMY

    def __post_init__(self):
        object.__setattr__(self, "night_conf", NightConfidence(self.night_conf))

    @classmethod
    def from_preset(cls, name: str = config.DEFAULT_PRESET) -> "RunnerProfile":
        if name not in config.PROFILE_PRESETS:
            raise ValueError(f"Unknown profile preset '{name}'. Choose from: {', '.join(config.PROFILE_PRESETS)}")
        return cls(**config.PROFILE_PRESETS[name])

    def terrain_factor(self, terrain: Terrain) -> float:
        factors = {
            Terrain.ROAD: self.t_road,
            Terrain.SMOOTH: self.t_smooth,
            Terrain.MIXED: self.t_mixed,
            Terrain.TECHNICAL: self.t_tech,
            Terrain.SANDY: self.t_sand,
            Terrain.SLOW: self.t_slow,
        }
        return factors.get(Terrain(terrain), 1.0)


@dataclass(frozen=True)
class Segment:
    len_m: float
    ele_m: float
    grade: float
    terrain: Terrain
    leg: int
    start_m: float


@dataclass(frozen=True)
class ChartDataPoint:
    km: float
    elevation: float
    pace: float  # s/km, all factors applied
    leg: int  # 1-based
    cumulative_time: float  # seconds from start
    terrain: Terrain
    grade: float


@dataclass(frozen=True)
class AddedTimes:
    elevation: float = 0.0
    terrain: float = 0.0
    stops: float = 0.0
    night: float = 0.0
    weather: float = 0.0
    fatigue: float = 0.0

    @property
    def total(self) -> float:
        return self.elevation + self.terrain + self.stops + self.night + self.weather + self.fatigue

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ComputationResult:
    flat_time: float
    final_time: float
    added_times: AddedTimes
    chart_data: Tuple[ChartDataPoint, ...] = ()

    def to_dataframe(self) -> pd.DataFrame:
        """Chart data as a DataFrame, one row per segment."""
        columns = [f.name for f in fields(ChartDataPoint)]
        df = pd.DataFrame.from_records(
            [tuple(getattr(p, c) for c in columns) for p in self.chart_data],
            columns=columns,
        )
        if not df.empty:
            df["terrain"] = df["terrain"].map(lambda t: Terrain(t).value)
        return df


@dataclass(frozen=True)
class Weather:
    temp_c: float = config.DEFAULT_TEMP_C
    night_temp_drop_c: float = config.DEFAULT_NIGHT_TEMP_DROP_C
    humidity_pct: float = config.DEFAULT_HUMIDITY_PCT
    sky: Sky = Sky.PARTLY_CLOUDY

    def __post_init__(self):
        object.__setattr__(self, "sky", Sky(self.sky))


ElevationSamples = Union[pd.DataFrame, Sequence[Tuple[float, float]]]


class Course:
    """
    Represents a race course: ordered legs plus optional course-wide elevation samples.
    """

    def __init__(self, legs: Sequence[Leg], samples: Optional[ElevationSamples] = None):
        self.legs = tuple(legs)
        self.samples = self._normalise_samples(samples)
        self.total_km = float(sum(leg.dist_km for leg in self.legs))

    @classmethod
    def simple(cls, distance_km: float, gain_m: float = 0.0, loss_m: float = 0.0,
               terrain: Terrain = Terrain.MIXED, samples: Optional[ElevationSamples] = None) -> "Course":
        """Whole race as a single leg with no stops."""
        return cls([Leg(dist_km=distance_km, gain_m=gain_m, loss_m=loss_m, terrain=terrain)], samples)

    @classmethod
    def from_gpx(cls, gpx_bytes: bytes, aid_km_text: str = "", aid_units: str = "km",
                 terrain: Terrain = Terrain.MIXED, stop_min: float = 0.0) -> "Course":
        """
        Build a course from a GPX track, split into legs at the given aid stations.

        Args:
            gpx_bytes: Raw GPX file bytes
            aid_km_text: Comma-separated cumulative aid station distances (e.g. "10, 25, 40")
            aid_units: Either "km" or "mi"
            terrain: Terrain assigned to every leg
            stop_min: Planned stop at each aid station (minutes)
        """
        df = parse_gpx(gpx_bytes)
        total_km = float(df["dist_m"].iloc[-1]) / config.METERS_PER_KM
        aid_km = [km for km in parse_cumulative_dist(aid_km_text, aid_units) if 0.0 < km < total_km]

        edges = [0.0] + sorted(aid_km) + [total_km]
        legs = []
        for i, (a, b) in enumerate(zip(edges[:-1], edges[1:])):
            gain_m, loss_m = gain_loss_between(df, a * config.METERS_PER_KM, b * config.METERS_PER_KM)
            is_last = i == len(edges) - 2
            legs.append(Leg(
                dist_km=b - a,
                gain_m=round(gain_m),
                loss_m=round(loss_m),
                terrain=terrain,
                stop_min=0.0 if is_last else stop_min,
                name="Finish" if is_last else f"AS{i + 1}",
            ))
        return cls(legs, df[["dist_m", "ele_m"]])

    @property
    def has_elevation(self) -> bool:
        return self.samples is not None and len(self.samples) > 0

    @property
    def gain_m(self) -> float:
        return float(sum(leg.gain_m for leg in self.legs))

    @property
    def loss_m(self) -> float:
        return float(sum(leg.loss_m for leg in self.legs))

    @property
    def leg_bounds_km(self) -> list:
        """(start_km, end_km) for every leg."""
        ends = np.cumsum([leg.dist_km for leg in self.legs]) if self.legs else np.array([])
        starts = np.concatenate([[0.0], ends[:-1]]) if len(ends) else np.array([])
        return [(float(a), float(b)) for a, b in zip(starts, ends)]

    @staticmethod
    def _normalise_samples(samples: Optional[ElevationSamples]) -> Optional[pd.DataFrame]:
        if samples is None:
            return None
        if isinstance(samples, pd.DataFrame):
            df = samples[["dist_m", "ele_m"]].astype(float)
        else:
            df = pd.DataFrame(list(samples), columns=["dist_m", "ele_m"], dtype=float)
        df = df.dropna().sort_values("dist_m", kind="stable").reset_index(drop=True)
        return df if not df.empty else None


@dataclass(frozen=True)
class SimulationInput:
    """
    Everything one simulation run reads. Immutable: callers build a new one on every change.
    """
    course: Course
    profile: RunnerProfile = field(default_factory=RunnerProfile)
    start_date: str = ""
    start_time: str = config.DEFAULT_START_TIME
    night_from: str = config.DEFAULT_NIGHT_FROM
    night_to: str = config.DEFAULT_NIGHT_TO
    weather: Weather = field(default_factory=Weather)

    @property
    def race_start(self) -> Optional[datetime]:
        """Start instant, or None when the date/time cannot be parsed."""
        try:
            return datetime.fromisoformat(f"{self.start_date.strip()}T{self.start_time.strip()}")
        except (ValueError, TypeError, AttributeError):
            return None
