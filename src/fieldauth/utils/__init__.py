"""Utility helpers."""

from .time import Clock, FixedClock, SystemClock, ensure_utc, utc_now

__all__ = ["Clock", "FixedClock", "SystemClock", "ensure_utc", "utc_now"]
