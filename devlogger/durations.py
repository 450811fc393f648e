"""Short human-readable durations: 10ms, 1.5s, 1m 30s, 2h 5m."""

import math

_UNITS = (
    ("d", 86400),
    ("h", 3600),
    ("m", 60),
)


def format_duration(ms: float) -> str:
    """Format a millisecond duration as a compact string.

    Sub-second values render as whole milliseconds. Longer values are
    broken into days/hours/minutes with seconds to one decimal place,
    dropping zero components. Negative durations get a leading ``-``.
    Raises ValueError for NaN or infinite input.
    """
    if not math.isfinite(ms):
        raise ValueError(f"Duration must be finite, got {ms!r}")
    if ms < 0:
        return "-" + format_duration(-ms)
    if ms < 1000:
        return f"{round(ms)}ms"

    remaining = ms / 1000
    parts = []
    for suffix, size in _UNITS:
        count = int(remaining // size)
        if count:
            parts.append(f"{count}{suffix}")
            remaining -= count * size

    seconds = f"{remaining:.1f}".rstrip("0").rstrip(".")
    if seconds != "0":
        parts.append(f"{seconds}s")
    return " ".join(parts)
