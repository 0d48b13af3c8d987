"""Millisecond duration formatting."""

from __future__ import annotations

_UNITS: tuple[tuple[str, int], ...] = (
    ("w", 7 * 24 * 60 * 60 * 1000),
    ("d", 24 * 60 * 60 * 1000),
    ("h", 60 * 60 * 1000),
    ("m", 60 * 1000),
    ("s", 1000),
    ("ms", 1),
)


def humanize_duration(ms: int) -> str:
    """Format milliseconds as ``"1h 4s"``, skipping empty units."""
    if ms <= 0:
        return "0ms"

    parts: list[str] = []
    remainder = ms
    for label, size in _UNITS:
        value, remainder = divmod(remainder, size)
        if value:
            parts.append(f"{value}{label}")
    return " ".join(parts)


def dotted_duration(ms: int) -> str:
    """Format milliseconds as ``MM:SS`` or ``H:MM:SS``; sub-second values render as ``00:00``."""
    total_seconds = max(ms, 0) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"
