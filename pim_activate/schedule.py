"""One-time activation windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

ONCE = "Once"


def format_timestamp(moment: datetime) -> str:
    """UTC, millisecond precision, e.g. 2024-05-01T09:30:00.123Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class Schedule:
    start: datetime
    end: datetime
    type: str = ONCE

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type,
            "startDateTime": format_timestamp(self.start),
            "endDateTime": format_timestamp(self.end),
        }


def build_schedule(hours: int, now: datetime | None = None) -> Schedule:
    """
    Window starting now (truncated to the millisecond) and lasting ``hours``.

    Naive ``now`` values are taken to be UTC.
    """
    start = now or datetime.now(timezone.utc)
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    start = start.astimezone(timezone.utc)
    start = start.replace(microsecond=start.microsecond // 1000 * 1000)
    return Schedule(start=start, end=start + timedelta(hours=hours))
