#!/usr/bin/env python3
"""
Plan an ultra from the command line.
Simulates the race and prints the finish time, where the time goes, and a leg-by-leg plan.
"""

import logging
import sys
from dataclasses import replace
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

import typer
import pandas as pd
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from models import Course, Leg, PlanMode, RunnerProfile, SimulationInput, Sky, Terrain, TerrainSegment, Weather
from utils.app_utils import fmt, fmt_time, format_minutes, parse_duration
from utils.environment import NightWindow, parse_clock
from utils.prediction import flat_time_from_reference, run_plan
from utils.race_plan import fill_leg_elevation, leg_plan, night_periods, race_events
import config

app = typer.Typer()
console = Console()


def load_legs(path: Path) -> list[Leg]:
    """
    Read legs from a CSV with columns dist_km, gain_m, loss_m, terrain, stop_min, sleep_min, name.

    Only dist_km is required. A terrain cell like "technical:2.5|mixed:4" defines terrain-segments.
    """
    try:
        df = pd.read_csv(path)
    except Exception as e:
        raise ValueError(f"Could not read legs file {path}: {e}")

    if "dist_km" not in df.columns:
        raise ValueError(f"Legs file {path} needs a 'dist_km' column")

    legs = []
    for row in df.to_dict("records"):
        terrain_text = Terrain.MIXED.value if pd.isna(row.get("terrain", None)) else str(row["terrain"]).strip()
        terrain_segments = ()
        if ":" in terrain_text:
            pieces = [p.split(":") for p in terrain_text.split("|") if p.strip()]
            terrain_segments = tuple(TerrainSegment(dist_km=float(d), terrain=t.strip()) for t, d in pieces)
            terrain_text = terrain_segments[0].terrain.value
        legs.append(Leg(
            dist_km=float(row["dist_km"]),
            gain_m=_number(row.get("gain_m")),
            loss_m=_number(row.get("loss_m")),
            terrain=terrain_text,
            stop_min=_number(row.get("stop_min")),
            sleep_min=_number(row.get("sleep_min")),
            terrain_segments=terrain_segments,
            name=None if pd.isna(row.get("name", None)) else str(row.get("name")),
        ))
    return legs


def _number(value) -> float:
    return 0.0 if value is None or pd.isna(value) else float(value)


def _next_clock_time(race_start: datetime, clock: Optional[str]) -> Optional[datetime]:
    """First occurrence of an HH:MM clock time at or after the start."""
    if not clock:
        return None
    seconds = parse_clock(clock)
    if seconds is None:
        raise ValueError(f"Could not parse clock time '{clock}' (expected HH:MM)")
    moment = race_start.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(seconds=seconds)
    return moment if moment >= race_start else moment + timedelta(days=1)


@app.command()
def predict(
        distance: float = typer.Option(50.0, "--distance", "-d", help="Race distance (km), simple mode"),
        gain: float = typer.Option(1000.0, "--gain", help="Total elevation gain (m), simple mode"),
        loss: float = typer.Option(1000.0, "--loss", help="Total elevation loss (m), simple mode"),
        terrain: Terrain = typer.Option(Terrain.MIXED, "--terrain", "-t", help="Terrain, simple mode"),
        legs_file: Optional[Path] = typer.Option(None, "--legs", "-l", help="CSV of legs (switches to leg mode)"),
        gpx_file: Optional[Path] = typer.Option(None, "--gpx", "-g", help="GPX track for elevation"),
        aid_stations: str = typer.Option("", "--aid-stations", "-a",
                                         help="Aid station distances (km) to split a GPX into legs, e.g. '10,25,40'"),
        preset: str = typer.Option(config.DEFAULT_PRESET, "--preset", "-p",
                                   help=f"Runner profile: {', '.join(config.PROFILE_PRESETS)}"),
        night_conf: Optional[str] = typer.Option(None, "--night-confidence", help="Override: High/Medium/Low"),
        mode: PlanMode = typer.Option(PlanMode.PREDICT, "--mode", "-m", help="predict or goal"),
        flat_time: Optional[str] = typer.Option(None, "--flat-time", help="Flat time for this distance (H:MM:SS)"),
        reference: str = typer.Option("marathon", "--reference",
                                      help="Reference performance: race, 10k, half, marathon, 50k"),
        reference_time: str = typer.Option("4:00:00", "--reference-time", help="Reference time (H:MM:SS)"),
        goal: str = typer.Option("13:30:00", "--goal", help="Goal finish time (H:MM:SS), goal mode"),
        start_date: Optional[str] = typer.Option(None, "--start-date", help="Race date (YYYY-MM-DD), default today"),
        start_time: str = typer.Option(config.DEFAULT_START_TIME, "--start-time", help="Start time (HH:MM)"),
        night_from: str = typer.Option(config.DEFAULT_NIGHT_FROM, "--night-from", help="Night starts (HH:MM)"),
        night_to: str = typer.Option(config.DEFAULT_NIGHT_TO, "--night-to", help="Night ends (HH:MM)"),
        temp: float = typer.Option(config.DEFAULT_TEMP_C, "--temp", help="Day temperature (C)"),
        night_drop: float = typer.Option(config.DEFAULT_NIGHT_TEMP_DROP_C, "--night-drop",
                                         help="Temperature drop at night (C)"),
        humidity: float = typer.Option(config.DEFAULT_HUMIDITY_PCT, "--humidity", help="Humidity (%)"),
        sky: Sky = typer.Option(Sky.PARTLY_CLOUDY, "--sky", help="Sky condition"),
        sunrise: Optional[str] = typer.Option(None, "--sunrise", help="Sunrise (HH:MM)"),
        sunset: Optional[str] = typer.Option(None, "--sunset", help="Sunset (HH:MM)"),
        chart_csv: Optional[Path] = typer.Option(None, "--chart-csv", help="Write per-segment chart data to CSV"),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed debug information")
):
    """
    Predict an ultra finish time, or the flat pace a goal time needs.

    Example:
        python scripts/predict.py --start-date 2025-07-12 --distance 100 --gain 5000 --loss 5000
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(console=console)])

    try:
        profile = RunnerProfile.from_preset(preset)
        if night_conf:
            profile = replace(profile, night_conf=night_conf)

        if gpx_file is not None:
            course = Course.from_gpx(gpx_file.read_bytes(), aid_stations, "km", terrain=terrain)
            if legs_file is not None:
                course = fill_leg_elevation(Course(load_legs(legs_file), course.samples))
        elif legs_file is not None:
            course = Course(load_legs(legs_file))
        else:
            course = Course.simple(distance, gain, loss, terrain)

        if mode == PlanMode.PREDICT:
            if flat_time:
                flat_time_s = parse_duration(flat_time)
            else:
                flat_time_s = flat_time_from_reference(reference, parse_duration(reference_time), course.total_km)
            goal_s = None
        else:
            flat_time_s = None
            goal_s = parse_duration(goal)
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    sim_input = SimulationInput(
        course=course,
        profile=profile,
        start_date=start_date or date.today().isoformat(),
        start_time=start_time,
        night_from=night_from,
        night_to=night_to,
        weather=Weather(temp_c=temp, night_temp_drop_c=night_drop, humidity_pct=humidity, sky=sky),
    )

    console.print(f"[blue]Simulating {course.total_km:.1f} km in {len(course.legs)} legs ({mode.value})...[/blue]")
    result = run_plan(sim_input, mode, flat_time_s=flat_time_s, goal_s=goal_s)

    if result is None:
        console.print("[red]❌ Nothing to simulate: check distance, start date/time and the flat/goal time.[/red]")
        raise typer.Exit(1)

    _print_summary(result, course)
    _print_legs(result, sim_input)

    try:
        sun_times = [_next_clock_time(sim_input.race_start, t) for t in (sunrise, sunset)]
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    for event in race_events(result, sim_input.race_start, *sun_times):
        icon = "🌅" if event.kind == "sunrise" else "🌇"
        console.print(f"{icon} {event.kind.capitalize()} at km {event.km:.1f}")

    if chart_csv is not None:
        result.to_dataframe().to_csv(chart_csv, index=False)
        console.print(f"[green]Chart data written to {chart_csv}[/green]")


def _print_summary(result, course):
    console.print("\n[bold]⏱️ Predicted Finish[/bold]")

    summary = Table(show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="white")
    summary.add_row("Flat time", fmt_time(result.flat_time))
    summary.add_row("Finish time", fmt_time(result.final_time))
    summary.add_row("Average pace", f"{fmt_time(result.final_time / course.total_km)} /km")
    summary.add_row("Course", f"{course.total_km:.1f} km, +{course.gain_m:.0f} m / -{course.loss_m:.0f} m")
    console.print(summary)

    breakdown = Table(show_header=True, header_style="bold magenta")
    breakdown.add_column("Category", style="cyan")
    breakdown.add_column("Added time", style="yellow", justify="right")
    for name, seconds in result.added_times.as_dict().items():
        sign = "-" if seconds < 0 else "+"
        breakdown.add_row(name.capitalize(), f"{sign}{fmt_time(abs(seconds))}")
    console.print(breakdown)


def _print_legs(result, sim_input):
    race_start = sim_input.race_start
    window = NightWindow.from_strings(sim_input.night_from, sim_input.night_to)
    plan = leg_plan(result, sim_input.course, race_start)
    if len(plan) > 1:
        console.print("\n[bold]📊 Leg Plan[/bold]")
        table = Table(show_header=True, header_style="bold yellow")
        table.add_column("Leg", style="cyan")
        table.add_column("Km", style="white")
        table.add_column("Running", style="green")
        table.add_column("Arrive", style="green")
        table.add_column("Stop", style="white")
        table.add_column("Pace", style="yellow")
        table.add_column("Carbs/Water", style="white")
        table.add_column("Terrain", style="white")
        for i, info in enumerate(plan, start=1):
            night_marker = " 🌙" if window.contains(info.arrival) else ""
            table.add_row(
                info.leg.name or f"Leg {i}",
                f"{info.end_km:.1f}",
                fmt(info.running_time_s),
                info.arrival.strftime("%a %H:%M") + night_marker,
                format_minutes(info.total_stop_min),
                f"{fmt_time(info.adjusted_pace_spk)} /km",
                f"{info.carbs_g} g / {info.water_ml} ml",
                info.terrain_breakdown,
            )
        console.print(table)

    periods = night_periods(result, race_start, window)
    for period in periods:
        console.print(f"🌙 Night running from km {period.start_km:.1f} to km {period.end_km:.1f}")


if __name__ == "__main__":
    app()
