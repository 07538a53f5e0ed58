from datetime import date, datetime, time, timezone
from typing import Any, Optional


def normalize_calendar_date(value: Any) -> Any:
    """Ramène une date ou un datetime (objet ou chaîne ISO) à une date calendaire.

    Les datetimes avec fuseau sont d'abord convertis en UTC. Les valeurs non
    reconnues sont renvoyées telles quelles pour laisser pydantic signaler l'erreur.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if "T" in raw or " " in raw:
            try:
                parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
            except ValueError:
                return value
            return normalize_calendar_date(parsed)
        try:
            return date.fromisoformat(raw)
        except ValueError:
            return value
    return value


def validate_time_window(start: Optional[time], end: Optional[time]) -> None:
    if start is not None and end is not None and end <= start:
        raise ValueError("endTime must be after startTime")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
