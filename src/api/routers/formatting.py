"""
GET /format/number, /format/percentage, /format/parse -- plant-locale conversions.
"""
from __future__ import annotations

from fastapi import APIRouter, Query
from pydantic import BaseModel

from src.formatting.numbers import (
    DEFAULT_PRECISION,
    MAX_PRECISION,
    format_number_with_precision,
    format_percentage,
    parse_input_value,
)

router = APIRouter()



class FormattedResponse(BaseModel):
    value: float
    formatted: str


class ParsedResponse(BaseModel):
    text: str
    value: float | None



@router.get("/number", response_model=FormattedResponse)
def format_number_endpoint(
    value: float,
    precision: int = Query(DEFAULT_PRECISION, ge=0, le=MAX_PRECISION),
) -> FormattedResponse:
    return FormattedResponse(value=value, formatted=format_number_with_precision(value, precision))


@router.get("/percentage", response_model=FormattedResponse)
def format_percentage_endpoint(value: float) -> FormattedResponse:
    return FormattedResponse(value=value, formatted=format_percentage(value))


@router.get("/parse", response_model=ParsedResponse)
def parse_endpoint(text: str = "") -> ParsedResponse:
    """Parse ``1.234,5``-style input; ``value`` is null when it is not a number."""
    return ParsedResponse(text=text, value=parse_input_value(text))
