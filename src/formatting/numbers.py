"""
Plant-locale number formatting.

Display strings use ``.`` as the thousands separator and ``,`` as the
decimal separator (``1.234.567,9``).  Rounding is half-away-from-zero on
the shortest decimal representation of the float (``repr``), so
``0.05 -> "0,1"`` and ``-2.25 -> "-2,3"`` regardless of binary error.

`format_number` and `parse_input_value` form a round-trip pair used by
every data-entry form: ``parse_input_value(format_number(x))`` equals
``x`` rounded to one decimal.  Nothing in this module raises; invalid
input formats as zero and parses as ``None``.
"""
from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

THOUSANDS_SEP = "."
DECIMAL_SEP = ","
DEFAULT_PRECISION = 1
MAX_PRECISION = 4

# Longest leading decimal literal, optionally with an exponent; trailing text is ignored.
_NUMBER_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Matched as substrings of the lower-cased unit, first group wins.
_HIGH_PRECISION_UNITS = ("bar", "psi", "kpa", "mpa", "m³/h", "kg/h", "t/h", "l/h", "ml/h")
_MEDIUM_PRECISION_UNITS = ("°c", "°f", "°k", "%", "kg", "ton", "m³", "l", "ml")
_LOW_PRECISION_UNITS = ("unit", "pcs", "buah", "batch", "shift")


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _round_half_away(value: float, precision: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 400  # enough digits for any finite float
        quantum = Decimal(1).scaleb(-precision)
        rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = rounded.copy_abs()
    return rounded


def _group(rounded: Decimal, precision: int) -> str:
    sign = "-" if rounded < 0 else ""
    int_part, _, frac_part = f"{rounded.copy_abs():f}".partition(".")
    grouped = f"{int(int_part):,}".replace(",", THOUSANDS_SEP)
    if precision == 0:
        return f"{sign}{grouped}"
    return f"{sign}{grouped}{DECIMAL_SEP}{frac_part.ljust(precision, '0')}"


def format_number_with_precision(value: Any, precision: int = DEFAULT_PRECISION) -> str:
    """Format *value* with *precision* decimals (clamped to 0..4)."""
    precision = max(0, min(int(precision), MAX_PRECISION))
    if not _is_number(value):
        value = 0
    try:
        return _group(_round_half_away(value, precision), precision)
    except (InvalidOperation, ValueError, OverflowError):
        return _group(Decimal(0), precision)


def format_number(value: Any) -> str:
    """``1234.567 -> "1.234,6"``; ``None``/NaN/inf format as ``"0,0"``."""
    return format_number_with_precision(value, DEFAULT_PRECISION)


def format_percentage(value: Any) -> str:
    """Same rule as `format_number`; the caller appends any ``%`` sign."""
    return format_number_with_precision(value, DEFAULT_PRECISION)


def parse_input_value(text: str | None) -> float | None:
    """Parse a plant-locale string back to a float.

    Every ``.`` is treated as a thousands separator and dropped, then the
    first ``,`` becomes the decimal point.  The longest leading number is
    read and anything after it ignored, so ``"12abc" -> 12.0`` and
    ``"1e3" -> 1000.0``.  Empty input, input with no leading number and
    non-finite results return ``None``.
    """
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    normalized = text.replace(THOUSANDS_SEP, "").replace(DECIMAL_SEP, ".", 1)
    match = _NUMBER_PREFIX_RE.match(normalized)
    if match is None:
        return None
    value = float(match.group())
    return value if math.isfinite(value) else None


def precision_for_unit(unit: str | None) -> int:
    """Decimal places conventionally shown for a parameter unit."""
    if not unit:
        return DEFAULT_PRECISION
    lowered = unit.lower()
    if any(u in lowered for u in _HIGH_PRECISION_UNITS):
        return 2
    if any(u in lowered for u in _MEDIUM_PRECISION_UNITS):
        return 1
    if any(u in lowered for u in _LOW_PRECISION_UNITS):
        return 0
    return DEFAULT_PRECISION


def format_input_value(value: Any, precision: int = DEFAULT_PRECISION) -> str:
    """Render a stored reading for an input box; blanks stay blank."""
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            number = parse_input_value(value)
        if number is None or not math.isfinite(number):
            return ""
        value = number
    if not _is_number(value):
        return ""
    return format_number_with_precision(value, precision)


def format_rupiah(amount: Any) -> str:
    """``1234567.4 -> "Rp 1.234.567"``."""
    return f"Rp {format_number_with_precision(amount, 0)}"


def format_budget_compact(amount: Any) -> str:
    """Short budget label: ``M`` (milyar), ``jt`` (juta), ``rb`` (ribu)."""
    if not _is_number(amount):
        return "Rp 0"
    if amount >= 1_000_000_000:
        return f"Rp {_round_half_away(amount / 1_000_000_000, 1):f}M"
    if amount >= 1_000_000:
        return f"Rp {_round_half_away(amount / 1_000_000, 1):f}jt"
    if amount >= 1_000:
        return f"Rp {_round_half_away(amount / 1_000, 0):f}rb"
    # Halves round up, also for negative amounts (-750.5 -> -750).
    return f"Rp {math.floor(amount + 0.5)}"
