"""
Scalar conversion, comparison, and rounding helpers.

**Conceptual**: Small numeric building blocks used by request handlers and
report code: turning query-string text into numbers, rendering numbers back
to text with a fixed number of decimals, comparing floats "up to N decimal
places", and rounding single-precision values.

**Error policy** (kept for compatibility with existing callers):
  - parse_int / parse_float return 0 on invalid input. A caller cannot tell
    "the input was 0" from "the input was garbage".
  - try_parse_int / try_parse_float return None on invalid input. Prefer these
    in new code.

**Single precision**: ceil32 / floor32 operate on and return numpy.float32,
so the result stays representable as a 32-bit float.
"""

import math
import re
import threading
from enum import IntEnum
from typing import Optional

import numpy as np

from utilkit.config.settings import get_settings

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INT_TEXT_RE = re.compile(r"[+-]?[0-9]+")

_rng = np.random.default_rng()
_rng_lock = threading.Lock()


class Comparison(IntEnum):
    """Result of compare_floats."""
    LESS = -1
    EQUAL = 0
    GREATER = 1


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def try_parse_int(text: str) -> Optional[int]:
    """
    Parse a signed decimal integer.

    **Functionally**:
      - Accepts an optional leading "+" or "-" followed by ASCII digits only.
      - Rejects whitespace, underscores, and non-ASCII digits (which Python's
        int() would otherwise accept).
      - Rejects values outside the signed 64-bit range.

    Returns:
        The integer, or None if text is not a valid int64.
    """
    if not _INT_TEXT_RE.fullmatch(text):
        return None
    value = int(text)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def parse_int(text: str) -> int:
    """
    Parse a signed decimal integer, returning 0 on failure.

    Example:
        >>> parse_int("42")
        42
        >>> parse_int("abc")
        0
    """
    value = try_parse_int(text)
    return 0 if value is None else value


def try_parse_float(text: str) -> Optional[float]:
    """
    Parse a float literal.

    **Functionally**:
      - Accepts decimal, exponent, "inf"/"infinity"/"nan" forms (any case).
      - Rejects surrounding whitespace and digit-group underscores.
      - A finite literal too large for a double (e.g. "1e400") is an
        out-of-range error, not infinity.

    Returns:
        The float, or None if text is not a valid float literal.
    """
    if text != text.strip() or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isinf(value) and "inf" not in text.lower():
        return None
    return value


def parse_float(text: str) -> float:
    """Parse a float literal, returning 0.0 on failure."""
    value = try_parse_float(text)
    return 0.0 if value is None else value


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_int(i: int) -> str:
    return str(int(i))


def format_float(f: float, precision: int) -> str:
    """
    Render f in fixed-point notation.

    Args:
        f: Value to render.
        precision: Number of fractional digits. A negative precision means
                   "as few digits as needed to round-trip f".

    Examples:
        >>> format_float(3.14159, 2)
        '3.14'
        >>> format_float(2.0, 0)
        '2'
        >>> format_float(0.1, -1)
        '0.1'
    """
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "+Inf" if f > 0 else "-Inf"
    if precision < 0:
        return np.format_float_positional(f, trim="-")
    return f"{f:.{precision}f}"


# ---------------------------------------------------------------------------
# Comparison and rounding
# ---------------------------------------------------------------------------

def compare_floats(a: float, b: float, precision: Optional[int] = None) -> Comparison:
    """
    Compare two floats up to a number of decimal places.

    **Mathematical**: with tolerance = 10^-max(precision, 0):
        |a - b| >  tolerance and a > b  ->  GREATER
        |a - b| >  tolerance and a < b  ->  LESS
        |a - b| <= tolerance            ->  EQUAL
    A difference of exactly the tolerance counts as EQUAL.

    Args:
        a, b: Values to compare.
        precision: Decimal places. None uses Settings.float_precision.
                   Negative values are clamped to 0 (tolerance 1).

    Examples:
        >>> compare_floats(1.0, 1.05, 1)
        <Comparison.EQUAL: 0>
        >>> compare_floats(1.0, 1.2, 1)
        <Comparison.LESS: -1>
    """
    if precision is None:
        precision = get_settings().float_precision
    precision = max(precision, 0)

    tolerance = 10.0 ** -precision
    diff = abs(a - b)

    if diff > tolerance:
        return Comparison.GREATER if a > b else Comparison.LESS
    return Comparison.EQUAL


def ceil32(f: float) -> np.float32:
    """Round up to the nearest integral value, as a float32."""
    return np.ceil(np.float32(f))


def floor32(f: float) -> np.float32:
    """Round down to the nearest integral value, as a float32."""
    return np.floor(np.float32(f))


def random_n(n: int) -> int:
    """
    Return a uniformly distributed integer in [0, n).

    Uses one process-wide numpy Generator seeded from OS entropy at import
    time. numpy Generators are not thread-safe, so draws are serialized by a lock.

    Raises:
        ValueError: If n <= 0.
    """
    if n <= 0:
        raise ValueError(f"n must be positive, got: {n}")
    with _rng_lock:
        return int(_rng.integers(0, n))
