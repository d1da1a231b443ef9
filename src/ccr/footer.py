"""
Footer rows of the CCR data-entry table.

Per numeric parameter: total / average / min / max over the day's filled
hours.  Per shift: the sum of each parameter's readings inside the
shift's hours.  Text parameters and parameters without readings have no
footer.
"""
from __future__ import annotations

import math
from typing import Any, Iterable

from src.ccr.models import CcrParameterDataFlat, FooterStats, ParameterSetting
from src.formatting.numbers import parse_input_value

SHIFT_HOURS: dict[str, tuple[int, ...]] = {
    "shift1": (8, 9, 10, 11, 12, 13, 14, 15),
    "shift2": (16, 17, 18, 19, 20, 21, 22),
    "shift3": (23, 24),
    "shift3_cont": (1, 2, 3, 4, 5, 6, 7),
}


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    try:
        number = float(str(value).strip())
    except ValueError:
        return parse_input_value(str(value))
    return number if math.isfinite(number) else None


def _rows_by_parameter(rows: Iterable[CcrParameterDataFlat]) -> dict[str, CcrParameterDataFlat]:
    return {row.parameter_id: row for row in rows}


def compute_parameter_footer(
    settings: Iterable[ParameterSetting],
    rows: Iterable[CcrParameterDataFlat],
) -> dict[str, FooterStats | None]:
    by_parameter = _rows_by_parameter(rows)
    footer: dict[str, FooterStats | None] = {}

    for param in settings:
        row = by_parameter.get(param.id)
        if not param.is_numeric or row is None:
            footer[param.id] = None
            continue

        values = [v for v in (_to_float(x) for x in row.hourly_values().values()) if v is not None]
        if not values:
            footer[param.id] = None
            continue

        total = sum(values)
        footer[param.id] = FooterStats(
            total=total,
            avg=total / len(values),
            min=min(values),
            max=max(values),
            count=len(values),
        )

    return footer


def compute_shift_totals(
    settings: Iterable[ParameterSetting],
    rows: Iterable[CcrParameterDataFlat],
) -> dict[str, dict[str, float]]:
    """``{shift: {parameter_id: total}}``; non-numeric hours count as zero."""
    by_parameter = _rows_by_parameter(rows)
    totals: dict[str, dict[str, float]] = {shift: {} for shift in SHIFT_HOURS}

    for param in settings:
        row = by_parameter.get(param.id)
        if not param.is_numeric or row is None:
            continue
        for shift, hours in SHIFT_HOURS.items():
            totals[shift][param.id] = sum(
                _to_float(getattr(row, f"hour{hour}")) or 0.0 for hour in hours
            )

    return totals
