import config


def fmt(sec: float) -> str:
    """Formats seconds into H:MM format."""
    sec = int(sec)
    h = sec // config.SECONDS_PER_HOUR
    m = (sec % config.SECONDS_PER_HOUR) // config.SECONDS_PER_MINUTE
    return f"{h:d}:{m:02d}"


def fmt_time(sec: float) -> str:
    """Formats seconds into H:MM:SS format (negative values clamp to 0:00:00)."""
    sec = max(0, int(round(sec)))
    h = sec // config.SECONDS_PER_HOUR
    m = (sec % config.SECONDS_PER_HOUR) // config.SECONDS_PER_MINUTE
    s = sec % config.SECONDS_PER_MINUTE
    return f"{h:d}:{m:02d}:{s:02d}"


def format_minutes(minutes: float) -> str:
    """Formats a stop length, e.g. 90 -> '1h 30m', 45 -> '45m', 0 -> '0m'."""
    if not minutes or minutes <= 0:
        return "0m"
    minutes = int(round(minutes))
    h, m = divmod(minutes, config.MINUTES_PER_HOUR)
    parts = []
    if h > 0:
        parts.append(f"{h}h")
    if m > 0:
        parts.append(f"{m}m")
    return " ".join(parts)


def parse_duration(text: str) -> float:
    """
    Parse "H:MM:SS" or "H:MM" into seconds.

    Raises:
        ValueError: If the text is not a duration
    """
    try:
        parts = [float(p) for p in str(text).strip().split(":")]
    except ValueError:
        raise ValueError(f"Could not parse duration '{text}' (expected H:MM:SS)")
    if len(parts) < 2 or len(parts) > 3 or any(p < 0 for p in parts):
        raise ValueError(f"Could not parse duration '{text}' (expected H:MM:SS)")
    h, m, s = (parts + [0.0])[:3]
    return h * config.SECONDS_PER_HOUR + m * config.SECONDS_PER_MINUTE + s
