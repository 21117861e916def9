"""Shared fixtures: a neutral runner and race-day conditions that add nothing."""

import pytest

from models import Course, Leg, RunnerProfile, SimulationInput, Sky, Terrain, Weather


@pytest.fixture
def neutral_profile():
    """All multipliers 1.0, no fade, no hiking, unaffected by the dark."""
    return RunnerProfile(
        heat=1.0, fade_per_10k=0.0, night_conf="High",
        up_cost_pct=0.0, down_benefit_pct=0.0, down_penalty_pct=0.0,
        t_road=1.0, t_smooth=1.0, t_mixed=1.0, t_tech=1.15, t_sand=1.0, t_slow=1.0,
        hike=False, hike_thr=15.0, vam=800.0, muscular_resilience=0.0, hiking_economy_factor=0.0,
    )


@pytest.fixture
def neutral_weather():
    return Weather(temp_c=10.0, night_temp_drop_c=5.0, humidity_pct=50.0, sky=Sky.PARTLY_CLOUDY)


@pytest.fixture
def make_input(neutral_profile, neutral_weather):
    def _make(course, profile=None, weather=None, start_date="2025-06-01", start_time="06:00",
              night_from="19:00", night_to="06:00"):
        return SimulationInput(
            course=course,
            profile=profile or neutral_profile,
            start_date=start_date,
            start_time=start_time,
            night_from=night_from,
            night_to=night_to,
            weather=weather or neutral_weather,
        )
    return _make


@pytest.fixture
def hilly_course():
    """Three legs over a climb-and-descent profile, with an aid stop and a sleep."""
    samples = [
        (0.0, 500.0), (5000.0, 900.0), (9000.0, 1700.0), (12000.0, 1650.0),
        (16000.0, 900.0), (22000.0, 600.0), (30000.0, 620.0),
    ]
    legs = [
        Leg(dist_km=10.0, terrain=Terrain.MIXED, stop_min=5.0),
        Leg(dist_km=12.0, terrain=Terrain.TECHNICAL, stop_min=10.0, sleep_min=90.0),
        Leg(dist_km=8.0, terrain=Terrain.ROAD),
    ]
    return Course(legs, samples)
