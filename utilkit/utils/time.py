"""
Clocks, epoch timestamps, and fixed-zone time formatting.

**Conceptual**: Every rendering in this module happens in a single fixed
UTC+8 zone (CST), regardless of the host's local timezone. Two machines with
different TZ settings format the same instant to the same string, which is
what log lines, filenames and API responses built from these helpers rely on.

**Conventions**:
  - Naive datetimes are interpreted as UTC before conversion to CST.
  - "Now" comes from a Clock object, never from datetime.now() directly, so
    tests can freeze time (FrozenClock) and production uses RealClock.
  - Durations follow the compact "1h30m" / "-1.5h" / "300ms" notation.

**Formats**:
  - Seconds:      "YYYY-MM-DD HH:MM:SS"      e.g. "2023-11-15 06:13:20"
  - Milliseconds: "YYYY-MM-DD HH:MM:SS.mmm"  e.g. "2023-11-15 06:13:20.500"
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

# Fixed UTC+8 zone used for all rendering and parsing
CST = timezone(timedelta(hours=8), "CST")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_TIME_TEXT_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")

# Microseconds per duration unit. Nanoseconds are below timedelta resolution
# and get rounded to the nearest microsecond.
_UNIT_MICROSECONDS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,  # micro sign
    "μs": 1,  # greek mu
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}

# Longer units first so "ms" is not read as "m" followed by garbage
_DURATION_COMPONENT_RE = re.compile(r"([0-9]*(?:\.[0-9]*)?)(ns|us|µs|μs|ms|s|m|h)")

# Durations are bounded like a signed 64-bit nanosecond count (about 292 years)
_MAX_DURATION_US = (2 ** 63 - 1) / 1000


class Clock(Protocol):
    """
    Abstract time source protocol.

    **Usage**: Functions that need "now" accept an optional Clock. In
    production pass nothing (or a RealClock); in tests pass a FrozenClock.

    **Example**:
        ts = get_timestamp(FrozenClock(datetime(2015, 1, 5, tzinfo=timezone.utc)))
    """

    def now(self) -> datetime:
        """Return the current time according to this clock (timezone-aware)."""
        ...


class RealClock:
    """Clock that returns the actual current system time (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """
    Clock that always returns a fixed timestamp (for deterministic tests).

    **Usage**:
        clock = FrozenClock(datetime(2015, 1, 5, tzinfo=timezone.utc))
        clock.now()  # Always returns 2015-01-05T00:00:00+00:00
    """

    def __init__(self, fixed_now: datetime):
        """
        Args:
            fixed_now: The datetime to return on every call to now().
                       Should be timezone-aware (UTC recommended).
        """
        self._fixed_now = fixed_now

    def now(self) -> datetime:
        return self._fixed_now


def get_real_clock() -> Clock:
    """Factory function to create a RealClock instance."""
    return RealClock()


def get_frozen_clock(fixed_now: datetime) -> Clock:
    """Factory function to create a FrozenClock with a given timestamp."""
    return FrozenClock(fixed_now)


def _as_aware(t: datetime) -> datetime:
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t


def to_cst(t: datetime) -> datetime:
    """Convert t to the fixed CST zone (naive input is taken as UTC)."""
    return _as_aware(t).astimezone(CST)


def _render_seconds(t: datetime) -> str:
    # Explicit widths: strftime("%Y") does not zero-pad years below 1000 on glibc
    return (
        f"{t.year:04d}-{t.month:02d}-{t.day:02d} "
        f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}"
    )


def _render_millis(t: datetime) -> str:
    return f"{_render_seconds(t)}.{t.microsecond // 1000:03d}"


# ---------------------------------------------------------------------------
# Epoch timestamps
# ---------------------------------------------------------------------------

def get_timestamp(clock: Optional[Clock] = None) -> int:
    """Seconds since 1970-01-01T00:00:00Z according to clock (default: real time)."""
    now = _as_aware((clock or RealClock()).now())
    return (now - EPOCH) // timedelta(seconds=1)


def get_timestamp_ms(clock: Optional[Clock] = None) -> int:
    """Milliseconds since 1970-01-01T00:00:00Z according to clock."""
    now = _as_aware((clock or RealClock()).now())
    return (now - EPOCH) // timedelta(milliseconds=1)


def get_timestamp_string(clock: Optional[Clock] = None) -> str:
    return str(get_timestamp(clock))


def get_timestamp_ms_string(clock: Optional[Clock] = None) -> str:
    return str(get_timestamp_ms(clock))


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_seconds(t: datetime) -> str:
    """
    Render t as "YYYY-MM-DD HH:MM:SS" in CST.

    Example:
        >>> format_seconds(datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc))
        '2023-11-15 06:13:20'
    """
    return _render_seconds(to_cst(t))


def format_millis(epoch_millis: int) -> str:
    """
    Render a millisecond epoch as "YYYY-MM-DD HH:MM:SS.mmm" in CST.

    **Functionally**:
      - The fractional field always has exactly three digits: 500 ms renders
        as ".500" (never ".5") and a whole second renders as ".000".
      - Negative values are instants before the epoch.

    Example:
        >>> format_millis(1700000000500)
        '2023-11-15 06:13:20.500'
    """
    t = EPOCH + timedelta(milliseconds=epoch_millis)
    return _render_millis(t.astimezone(CST))


def format_millis_from_time(t: datetime) -> str:
    """Render t as "YYYY-MM-DD HH:MM:SS.mmm" in CST (sub-millisecond digits truncated)."""
    return _render_millis(to_cst(t))


def format_with_offset(t: datetime, duration_expr: str) -> str:
    """
    Shift t by a duration expression and render it as "YYYY-MM-DD HH:MM:SS" in CST.

    A malformed or out-of-range duration_expr is treated as a zero offset,
    and so is one that would move t outside the datetime range. The result
    is then the same as format_seconds(t).

    Example:
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> format_with_offset(t, "+1h30m")
        '2024-01-01 09:30:00'
    """
    try:
        offset = parse_duration(duration_expr)
    except ValueError:
        offset = timedelta(0)

    try:
        return format_seconds(_as_aware(t) + offset)
    except OverflowError:
        # shifted past datetime.min/max
        return format_seconds(t)


def format_custom(t: datetime, pattern: str) -> str:
    """Render t in CST with a strftime pattern, e.g. "%Y/%m/%d"."""
    return to_cst(t).strftime(pattern)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_time(text: str) -> datetime:
    """
    Parse "YYYY-MM-DD HH:MM:SS" as a moment in CST.

    Returns:
        Timezone-aware datetime with tzinfo=CST.

    Raises:
        ValueError: If text does not match the format exactly (fields must be
                    zero-padded) or names an impossible date/time.
    """
    if not _TIME_TEXT_RE.fullmatch(text):
        raise ValueError(f"time {text!r} does not match format 'YYYY-MM-DD HH:MM:SS'")
    return datetime.strptime(text, TIME_FORMAT).replace(tzinfo=CST)


def parse_duration(expr: str) -> timedelta:
    """
    Parse a compact duration expression into a timedelta.

    **Grammar**: an optional sign followed by one or more `<number><unit>`
    components, where number may be fractional and unit is one of
    ns, us (or µs), ms, s, m, h. The bare string "0" is also accepted.

    Examples:
        >>> parse_duration("1h30m")
        datetime.timedelta(seconds=5400)
        >>> parse_duration("-1.5h")
        datetime.timedelta(days=-1, seconds=81000)
        >>> parse_duration("300ms")
        datetime.timedelta(microseconds=300000)

    Raises:
        ValueError: On empty input, a missing unit, an unknown unit, a
                    component without digits, or a total beyond about
                    2562047h (the signed 64-bit nanosecond range).
    """
    original = expr
    sign = 1
    if expr[:1] in ("+", "-"):
        if expr[0] == "-":
            sign = -1
        expr = expr[1:]

    if expr == "0":
        return timedelta(0)
    if not expr:
        raise ValueError(f"invalid duration {original!r}")

    total_us = 0.0
    pos = 0
    while pos < len(expr):
        match = _DURATION_COMPONENT_RE.match(expr, pos)
        if match is None or match.group(1) in ("", "."):
            raise ValueError(f"invalid duration {original!r}")
        total_us += float(match.group(1)) * _UNIT_MICROSECONDS[match.group(2)]
        pos = match.end()

    if total_us > _MAX_DURATION_US:
        raise ValueError(f"invalid duration {original!r}: out of range")

    return timedelta(microseconds=sign * total_us)
