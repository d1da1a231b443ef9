"""
SQLAlchemy Core definitions of the CCR tables.

Used to create the tables for local Postgres (via the seed pipeline) and
for the in-memory SQLite databases in tests.  Dates are stored as ISO
``YYYY-MM-DD`` strings and times as ``HH:MM`` strings, matching what the
REST backends return.
"""
from __future__ import annotations

from sqlalchemy import Column, Float, Integer, MetaData, String, Table, Text

metadata = MetaData()

plant_units = Table(
    "plant_units",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("unit", String(60), nullable=False),
    Column("category", String(60), nullable=False),
    Column("description", Text),
)

parameter_settings = Table(
    "parameter_settings",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("parameter", String(120), nullable=False),
    Column("data_type", String(10), nullable=False, default="Number"),
    Column("unit", String(30), nullable=False, default=""),
    Column("category", String(60), nullable=False),
    Column("min_value", Float),
    Column("max_value", Float),
    Column("opc_min_value", Float),
    Column("opc_max_value", Float),
    Column("pcc_min_value", Float),
    Column("pcc_max_value", Float),
)

silo_capacities = Table(
    "silo_capacities",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("plant_category", String(60), nullable=False),
    Column("unit", String(60), nullable=False),
    Column("silo_name", String(60), nullable=False),
    Column("capacity", Float, nullable=False),
    Column("dead_stock", Float, nullable=False, default=0.0),
)

ccr_parameter_data = Table(
    "ccr_parameter_data",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("parameter_id", String(40), nullable=False, index=True),
    Column("date", String(10), nullable=False, index=True),
    Column("name", String(120)),
    *[Column(f"hour{h}", String(30)) for h in range(1, 25)],
    *[Column(f"hour{h}_user", String(80)) for h in range(1, 25)],
)

ccr_downtime_data = Table(
    "ccr_downtime_data",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("date", String(10), nullable=False, index=True),
    Column("start_time", String(5), nullable=False),
    Column("end_time", String(5), nullable=False),
    Column("pic", String(80), nullable=False, default=""),
    Column("problem", Text, nullable=False, default=""),
    Column("unit", String(60), nullable=False, default=""),
    Column("action", Text),
    Column("corrective_action", Text),
    Column("status", String(20)),
)
