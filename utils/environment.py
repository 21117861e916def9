"""
Environmental adjustments: running in the dark and weather.

`is_night` is the one place wall-clock time is compared with the night window;
the simulation, night-period extraction and leg plans all go through it.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models import NightConfidence, Sky, Weather
import config


def parse_clock(text: str) -> Optional[int]:
    """
    Parse an "HH:MM" (or "HH:MM:SS") time of day into seconds into the day.

    Returns:
        Seconds since midnight, or None if the text is not a valid clock time

    Example:
        parse_clock("19:00") -> 68400
    """
    try:
        parts = [int(p) for p in str(text).strip().split(":")]
    except ValueError:
        return None
    if len(parts) < 2 or len(parts) > 3:
        return None
    hours, minutes, seconds = (parts + [0])[:3]
    if not (0 <= hours < 24 and 0 <= minutes < 60 and 0 <= seconds < 60):
        return None
    return hours * config.SECONDS_PER_HOUR + minutes * config.SECONDS_PER_MINUTE + seconds


def seconds_into_day(moment: datetime) -> int:
    return moment.hour * config.SECONDS_PER_HOUR + moment.minute * config.SECONDS_PER_MINUTE + moment.second


def is_night(moment: datetime, night_start_s: Optional[int], night_end_s: Optional[int]) -> bool:
    """
    Whether a wall-clock moment falls inside the night window.

    Windows crossing midnight (start > end) are night when at/after start OR
    before end; otherwise night is the half-open range [start, end). Equal or
    unknown bounds mean no night at all.
    """
    if moment is None or night_start_s is None or night_end_s is None:
        return False
    secs = seconds_into_day(moment)
    if night_start_s > night_end_s:
        return secs >= night_start_s or secs < night_end_s
    if night_start_s < night_end_s:
        return night_start_s <= secs < night_end_s
    return False


@dataclass(frozen=True)
class NightWindow:
    start_s: Optional[int]
    end_s: Optional[int]

    @classmethod
    def from_strings(cls, night_from: str, night_to: str) -> "NightWindow":
        return cls(parse_clock(night_from), parse_clock(night_to))

    def contains(self, moment: datetime) -> bool:
        return is_night(moment, self.start_s, self.end_s)


def night_factor(confidence: NightConfidence) -> float:
    """Pace multiplier in the dark: 1.00 / 1.05 / 1.10 for High / Medium / Low confidence."""
    return config.NIGHT_FACTORS.get(NightConfidence(confidence).value, config.NIGHT_FACTORS["Low"])


def weather_factor(temp_c: float, humidity_pct: float, sky: Sky, heat_acclimation: float) -> float:
    """
    Pace multiplier for heat, humidity and sun.

    The penalty above 1.0 is divided by the runner's heat acclimation, so 1.2
    means handling heat 20% better than average. Overcast skies can take the
    factor slightly below 1.0.

    Example:
        25C, 70% humidity, sunny, acclimation 1.0:
        1 + 0.05 + 0.01 + 0.02 = 1.08
    """
    factor = 1.0
    if temp_c > config.HEAT_REFERENCE_C:
        factor += ((temp_c - config.HEAT_REFERENCE_C) / 10) * config.HEAT_PENALTY_PER_10C
    if humidity_pct > config.HUMIDITY_REFERENCE_PCT:
        factor += ((humidity_pct - config.HUMIDITY_REFERENCE_PCT) / 10) * config.HUMIDITY_PENALTY_PER_10PCT
    factor += config.SKY_ADJUSTMENT.get(Sky(sky).value, 0.0)

    penalty = factor - 1.0
    return 1.0 + penalty / (heat_acclimation or config.EPSILON)


def segment_temperature(weather: Weather, night: bool) -> float:
    """Air temperature for a segment: the day temperature, minus the night drop in the dark."""
    return weather.temp_c - (weather.night_temp_drop_c if night else 0.0)
