"""Time-related helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""

    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Clock(Protocol):
    """Source of the current time for services that stamp entities."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the system wall time."""

    def now(self) -> datetime:
        return utc_now()


@dataclass(slots=True)
class FixedClock:
    """Clock frozen at a given instant."""

    instant: datetime

    def now(self) -> datetime:
        return ensure_utc(self.instant)


__all__ = ["Clock", "FixedClock", "SystemClock", "ensure_utc", "utc_now"]
