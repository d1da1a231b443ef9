"""
Unit tests -- table catalog loading and descriptor validation.
"""
from src.catalog.loader import load_table_catalog, parse_catalog
from src.catalog.validator import validate_descriptor
from src.query.descriptor import OrderBy, QueryDescriptor


def _catalog():
    return parse_catalog({
        "version": 1,
        "default_max_rows": 100,
        "tables": [
            {"name": "plant_units", "columns": ["id", "unit", "category"]},
            {"name": "big", "columns": ["id"], "max_rows": 5000},
        ],
    })


def test_yaml_catalog_loads():
    catalog = load_table_catalog()
    names = catalog.get_table_names()
    for table in ("plant_units", "parameter_settings", "silo_capacities",
                  "ccr_parameter_data", "ccr_downtime_data"):
        assert table in names
    data = catalog.table("ccr_parameter_data")
    assert data.has_column("hour24")
    assert data.has_column("hour24_user")
    assert data.max_rows == 5000
    assert catalog.table("plant_units").max_rows == 1000


def test_yaml_catalog_cached():
    assert load_table_catalog() is load_table_catalog()


def test_default_max_rows_applied():
    assert _catalog().table("plant_units").max_rows == 100
    assert _catalog().table("big").max_rows == 5000


def test_valid_descriptor():
    d = QueryDescriptor(
        table="plant_units", select="id,unit",
        filters={"category": "Tonasa 4"}, order_by=OrderBy(column="unit"), limit=10,
    )
    assert validate_descriptor(d, _catalog()) == []


def test_unknown_table():
    errors = validate_descriptor(QueryDescriptor(table="users"), _catalog())
    assert len(errors) == 1
    assert "Unknown table 'users'" in errors[0]


def test_unknown_select_column():
    errors = validate_descriptor(QueryDescriptor(table="plant_units", select="id,password"), _catalog())
    assert any("password" in e for e in errors)


def test_unknown_filter_column():
    errors = validate_descriptor(QueryDescriptor(table="plant_units", filters={"secret": 1}), _catalog())
    assert any("filter column 'secret'" in e for e in errors)


def test_empty_membership_list():
    errors = validate_descriptor(QueryDescriptor(table="plant_units", filters={"unit": []}), _catalog())
    assert any("empty value list" in e for e in errors)


def test_unknown_order_column():
    errors = validate_descriptor(
        QueryDescriptor(table="plant_units", order_by=OrderBy(column="nope")), _catalog(),
    )
    assert any("order column 'nope'" in e for e in errors)


def test_limit_above_max_rows():
    errors = validate_descriptor(QueryDescriptor(table="plant_units", limit=101), _catalog())
    assert any("maximum is 100" in e for e in errors)


def test_offset_only_checks_default_window():
    d = QueryDescriptor(table="plant_units", offset=0)
    assert validate_descriptor(d, _catalog(), range_window=100) == []
    assert validate_descriptor(d, _catalog(), range_window=1000) != []
