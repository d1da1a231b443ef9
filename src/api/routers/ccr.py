"""GET /ccr/* -- typed CCR reads for the data-entry and report screens."""
from __future__ import annotations

import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.api.deps import get_query_service
from src.ccr.footer import compute_parameter_footer, compute_shift_totals
from src.ccr.models import (
    HOURS,
    CcrDowntime,
    CcrParameterDataFlat,
    ParameterSetting,
    PlantUnit,
    SiloCapacity,
)
from src.core.logging import get_logger
from src.formatting.dates import calculate_duration, format_date, format_duration
from src.formatting.numbers import (
    format_input_value,
    format_number,
    format_number_with_precision,
    precision_for_unit,
)
from src.query.descriptor import OrderBy, QueryDescriptor
from src.query.service import QueryService

logger = get_logger(__name__)
router = APIRouter()



class FooterResponse(BaseModel):
    total: str
    avg: str
    min: str
    max: str
    count: int


class ParameterRowResponse(BaseModel):
    parameter_id: str
    parameter: str
    unit: str
    precision: int
    hours: dict[int, str]
    users: dict[int, str]


class ParameterDataResponse(BaseModel):
    date: str
    date_display: str
    rows: list[ParameterRowResponse]
    footer: dict[str, FooterResponse | None]
    shift_totals: dict[str, dict[str, str]]


class SiloResponse(BaseModel):
    id: str
    plant_category: str
    unit: str
    silo_name: str
    capacity: float
    dead_stock: float
    capacity_display: str
    dead_stock_display: str


class DowntimeResponse(BaseModel):
    id: str
    date_display: str
    start_time: str
    end_time: str
    duration: str
    unit: str
    pic: str
    problem: str
    status: str | None



def _filters(**candidates: str | None) -> dict[str, str]:
    return {k: v for k, v in candidates.items() if v}


def _parameter_settings(service: QueryService, category: str | None, unit: str | None) -> list[ParameterSetting]:
    descriptor = QueryDescriptor(
        table="parameter_settings",
        filters=_filters(category=category, unit=unit),
        order_by=OrderBy(column="parameter"),
    )
    return service.fetch(descriptor, ParameterSetting) or []


@router.get("/plant-units", response_model=list[PlantUnit])
def plant_units_endpoint(category: str | None = None, service: QueryService = Depends(get_query_service)):
    descriptor = QueryDescriptor(
        table="plant_units",
        filters=_filters(category=category),
        order_by=OrderBy(column="unit"),
    )
    try:
        return service.fetch(descriptor, PlantUnit) or []
    except Exception as exc:
        logger.exception("Plant unit read failed")
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/parameters", response_model=list[ParameterSetting])
def parameters_endpoint(
    category: str | None = None,
    unit: str | None = None,
    service: QueryService = Depends(get_query_service),
):
    try:
        return _parameter_settings(service, category, unit)
    except Exception as exc:
        logger.exception("Parameter settings read failed")
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/parameter-data", response_model=ParameterDataResponse)
def parameter_data_endpoint(
    date: datetime.date,
    category: str | None = None,
    unit: str | None = None,
    service: QueryService = Depends(get_query_service),
):
    """One day of hourly readings with display strings, footer and shift totals."""
    try:
        settings = _parameter_settings(service, category, unit)
        parameter_ids = [p.id for p in settings]
        # Dependent read: nothing to fetch until the parameter list is known.
        data_descriptor = QueryDescriptor(
            table="ccr_parameter_data",
            filters={"date": date.isoformat(), "parameter_id": parameter_ids},
            enabled=bool(parameter_ids),
        )
        rows = service.fetch(data_descriptor, CcrParameterDataFlat) or []
    except Exception as exc:
        logger.exception("Parameter data read failed")
        raise HTTPException(status_code=500, detail=str(exc))

    by_parameter = {row.parameter_id: row for row in rows}
    precision = {p.id: precision_for_unit(p.unit) for p in settings}

    row_responses = []
    for param in settings:
        row = by_parameter.get(param.id)
        hours: dict[int, str] = {}
        users: dict[int, str] = {}
        if row is not None:
            for hour, value in row.hourly_values().items():
                hours[hour] = (
                    format_input_value(value, precision[param.id]) if param.is_numeric else str(value)
                )
            for hour in HOURS:
                user = row.hour_user(hour)
                if user:
                    users[hour] = user
        row_responses.append(ParameterRowResponse(
            parameter_id=param.id,
            parameter=param.parameter,
            unit=param.unit,
            precision=precision[param.id],
            hours=hours,
            users=users,
        ))

    footer: dict[str, FooterResponse | None] = {}
    for pid, stats in compute_parameter_footer(settings, rows).items():
        if stats is None:
            footer[pid] = None
            continue
        p = precision[pid]
        footer[pid] = FooterResponse(
            total=format_number_with_precision(stats.total, p),
            avg=format_number_with_precision(stats.avg, p),
            min=format_number_with_precision(stats.min, p),
            max=format_number_with_precision(stats.max, p),
            count=stats.count,
        )

    shift_totals = {
        shift: {pid: format_number_with_precision(total, precision[pid]) for pid, total in per_param.items()}
        for shift, per_param in compute_shift_totals(settings, rows).items()
    }

    return ParameterDataResponse(
        date=date.isoformat(),
        date_display=format_date(date),
        rows=row_responses,
        footer=footer,
        shift_totals=shift_totals,
    )


@router.get("/downtime", response_model=list[DowntimeResponse])
def downtime_endpoint(
    date: datetime.date,
    unit: str | None = None,
    service: QueryService = Depends(get_query_service),
):
    descriptor = QueryDescriptor(
        table="ccr_downtime_data",
        filters=_filters(date=date.isoformat(), unit=unit),
        order_by=OrderBy(column="start_time"),
    )
    try:
        records = service.fetch(descriptor, CcrDowntime) or []
    except Exception as exc:
        logger.exception("Downtime read failed")
        raise HTTPException(status_code=500, detail=str(exc))

    return [
        DowntimeResponse(
            id=r.id,
            date_display=format_date(r.date),
            start_time=r.start_time,
            end_time=r.end_time,
            duration=format_duration(*calculate_duration(r.start_time, r.end_time)),
            unit=r.unit,
            pic=r.pic,
            problem=r.problem,
            status=r.status,
        )
        for r in records
    ]


@router.get("/silos", response_model=list[SiloResponse])
def silos_endpoint(
    plant_category: str | None = None,
    unit: str | None = None,
    service: QueryService = Depends(get_query_service),
):
    """Silo master data with capacity and dead stock in plant-locale tons."""
    descriptor = QueryDescriptor(
        table="silo_capacities",
        filters=_filters(plant_category=plant_category, unit=unit),
        order_by=OrderBy(column="silo_name"),
    )
    try:
        silos = service.fetch(descriptor, SiloCapacity) or []
    except Exception as exc:
        logger.exception("Silo capacity read failed")
        raise HTTPException(status_code=500, detail=str(exc))

    return [
        SiloResponse(
            **silo.model_dump(),
            capacity_display=format_number(silo.capacity),
            dead_stock_display=format_number(silo.dead_stock),
        )
        for silo in silos
    ]
