"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


def hours_ago_iso(hours: float, *, now: datetime | None = None) -> str:
    """UTC timestamp *hours* before *now*, as round-trippable ISO 8601.

    Examples:
        >>> hours_ago_iso(24, now=datetime(2026, 1, 2, tzinfo=UTC))
        '2026-01-01T00:00:00+00:00'
    """
    anchor = now or datetime.now(UTC)
    return (anchor - timedelta(hours=hours)).isoformat()
