"""
Integration tests -- seeded database → QueryService → typed rows → footer.

Runs the seed pipeline against in-memory SQLite, so no live database is
needed.
"""
from __future__ import annotations

import pytest

from pipelines.seed.seed_data import DATE_END, PARAMETERS, PLANT_UNITS, seed
from src.ccr.footer import compute_parameter_footer, compute_shift_totals
from src.ccr.models import CcrDowntime, CcrParameterDataFlat, ParameterSetting, PlantUnit
from src.db.sql_client import SqlTableClient
from src.query.cache import QueryCache
from src.query.descriptor import OrderBy, QueryDescriptor
from src.query.service import QueryService


@pytest.fixture(scope="module")
def seeded_engine():
    from sqlalchemy import create_engine
    from sqlalchemy.pool import StaticPool

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    counts = seed(engine)
    assert counts["plant_units"] == sum(len(u) for u in PLANT_UNITS.values())
    yield engine
    engine.dispose()


@pytest.fixture
def service(seeded_engine, sink, clock) -> QueryService:
    return QueryService(SqlTableClient(seeded_engine), cache=QueryCache(clock=clock), sink=sink)


def test_plant_units_typed(service):
    units = service.fetch(
        QueryDescriptor(table="plant_units", filters={"category": "Tonasa 4"}, order_by=OrderBy(column="unit")),
        PlantUnit,
    )
    assert [u.unit for u in units] == sorted(PLANT_UNITS["Tonasa 4"])
    assert all(isinstance(u.id, str) for u in units)


def test_parameters_then_dependent_readings(service):
    settings = service.fetch(
        QueryDescriptor(table="parameter_settings", filters={"category": "CM 220"}),
        ParameterSetting,
    )
    assert len(settings) == len(PARAMETERS)

    ids = [p.id for p in settings]
    rows = service.fetch(
        QueryDescriptor(
            table="ccr_parameter_data",
            filters={"date": DATE_END.isoformat(), "parameter_id": ids},
        ),
        CcrParameterDataFlat,
    )
    assert {r.parameter_id for r in rows} == set(ids)

    footer = compute_parameter_footer(settings, rows)
    text_ids = {p.id for p in settings if not p.is_numeric}
    for pid, stats in footer.items():
        if pid in text_ids:
            assert stats is None
        elif stats is not None:
            assert stats.min <= stats.avg <= stats.max
            assert 0 < stats.count <= 24

    shifts = compute_shift_totals(settings, rows)
    assert set(shifts) == {"shift1", "shift2", "shift3", "shift3_cont"}
    assert not text_ids & set(shifts["shift1"])


def test_disabled_dependent_read(service):
    descriptor = QueryDescriptor(table="ccr_parameter_data", filters={"parameter_id": []}, enabled=False)
    assert service.fetch(descriptor, CcrParameterDataFlat) is None
    assert service.cache_stats()["size"] == 0


def test_downtime_ordered_by_start(service):
    events = service.fetch(
        QueryDescriptor(table="ccr_downtime_data", order_by=OrderBy(column="start_time"), limit=50),
        CcrDowntime,
    )
    starts = [e.start_time for e in events]
    assert starts == sorted(starts)


def test_cache_serves_repeat_and_expires(service, clock):
    descriptor = QueryDescriptor(table="silo_capacities", order_by=OrderBy(column="id"))
    first = service.use_query(descriptor)
    second = service.use_query(descriptor)
    assert first.is_success and not first.is_cached
    assert second.is_cached
    assert second.data == first.data

    clock.advance(301)
    third = service.use_query(descriptor)
    assert not third.is_cached


def test_paging_through_readings(service):
    base = dict(table="ccr_parameter_data", select="id", order_by=OrderBy(column="id"), limit=100)
    page1 = service.fetch(QueryDescriptor(**base, offset=0))
    page2 = service.fetch(QueryDescriptor(**base, offset=100))
    assert [r["id"] for r in page1] == list(range(1, 101))
    assert [r["id"] for r in page2] == list(range(101, 201))
