"""
Seed data generator -- creates realistic CCR plant-operations data.

Generates:
  - plant units for two plant categories
  - ~10 CCR parameters per plant unit (numeric and text)
  - silo master data
  - hourly CCR readings for the last ``NUM_DAYS`` days
  - a handful of downtime events per day

All data is inserted via SQLAlchemy into the tables defined in
``src.db.schema`` (created if missing).
Run:  python -m pipelines.seed.seed_data
"""
from __future__ import annotations

import os
import random
from datetime import date, timedelta
from pathlib import Path

from dotenv import load_dotenv
from faker import Faker
from sqlalchemy import create_engine, insert

from src.db.schema import (
    ccr_downtime_data,
    ccr_parameter_data,
    metadata,
    parameter_settings,
    plant_units,
    silo_capacities,
)

# ── Load .env from project root ─────────────────────────
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(_PROJECT_ROOT / ".env")

fake = Faker("id_ID")
Faker.seed(42)
random.seed(42)

# ── Tunables ─────────────────────────────────────────────
NUM_DAYS = 30
MAX_DOWNTIME_PER_DAY = 3

PLANT_UNITS = {
    "Tonasa 2/3": ["CM 220", "CM 320", "RKC 2", "RKC 3"],
    "Tonasa 4": ["CM 419", "CM 420", "RKC 4"],
}

# (parameter, unit, data_type, low, high)
PARAMETERS = [
    ("Feed", "t/h", "Number", 150.0, 210.0),
    ("Motor Current", "A", "Number", 80.0, 120.0),
    ("Outlet Temperature", "°C", "Number", 85.0, 110.0),
    ("Separator Speed", "rpm", "Number", 900.0, 1200.0),
    ("Blaine", "cm²/g", "Number", 3600.0, 4200.0),
    ("Residue 45µm", "%", "Number", 8.0, 14.0),
    ("Mill Inlet Pressure", "mbar", "Number", -5.0, -1.0),
    ("SO3", "%", "Number", 1.8, 2.4),
    ("Running Hours", "shift", "Number", 0.0, 8.0),
    ("Cement Type", "", "Text", 0.0, 0.0),
]

CEMENT_TYPES = ["OPC", "PCC"]
PROBLEMS = [
    "Bucket elevator trip",
    "Bag filter differential pressure high",
    "Separator vibration high",
    "Feeder belt slip",
    "Power dip from PLN",
    "Mill outlet temperature high",
]

DATE_END = date.today()
DATE_START = DATE_END - timedelta(days=NUM_DAYS - 1)


# ── Generators ───────────────────────────────────────────

def gen_plant_units() -> list[dict]:
    rows = []
    for category, units in PLANT_UNITS.items():
        for unit in units:
            rows.append({
                "id": len(rows) + 1,
                "unit": unit,
                "category": category,
                "description": f"{unit} ({category})",
            })
    return rows


def gen_parameter_settings(units: list[dict]) -> list[dict]:
    rows = []
    for u in units:
        for name, measure, data_type, low, high in PARAMETERS:
            numeric = data_type == "Number"
            rows.append({
                "id": len(rows) + 1,
                "parameter": name,
                "data_type": data_type,
                "unit": measure,
                "category": u["unit"],
                "min_value": low if numeric else None,
                "max_value": high if numeric else None,
                "opc_min_value": low if numeric else None,
                "opc_max_value": high if numeric else None,
                "pcc_min_value": low * 0.95 if numeric else None,
                "pcc_max_value": high * 0.95 if numeric else None,
            })
    return rows


def gen_silo_capacities() -> list[dict]:
    rows = []
    for category, units in PLANT_UNITS.items():
        for unit in units:
            if not unit.startswith("CM"):
                continue
            for n in range(1, 3):
                capacity = random.choice([5_000.0, 7_500.0, 10_000.0])
                rows.append({
                    "id": len(rows) + 1,
                    "plant_category": category,
                    "unit": unit,
                    "silo_name": f"Silo {unit[-3:]}-{n}",
                    "capacity": capacity,
                    "dead_stock": round(capacity * 0.05, 1),
                })
    return rows


def gen_parameter_data(settings: list[dict]) -> list[dict]:
    operators = [fake.first_name() for _ in range(8)]
    rows = []
    for day in range(NUM_DAYS):
        day_str = (DATE_START + timedelta(days=day)).isoformat()
        for s in settings:
            row = {
                "id": len(rows) + 1,
                "parameter_id": str(s["id"]),
                "date": day_str,
                "name": s["parameter"],
            }
            for hour in range(1, 25):
                row[f"hour{hour}"] = None
                row[f"hour{hour}_user"] = None
                if random.random() < 0.05:
                    continue  # missed reading
                if s["data_type"] == "Text":
                    value = random.choice(CEMENT_TYPES)
                else:
                    value = round(random.uniform(s["min_value"], s["max_value"]), 2)
                row[f"hour{hour}"] = str(value)
                row[f"hour{hour}_user"] = random.choice(operators)
            rows.append(row)
    return rows


def gen_downtime(units: list[dict]) -> list[dict]:
    rows = []
    for day in range(NUM_DAYS):
        day_str = (DATE_START + timedelta(days=day)).isoformat()
        for _ in range(random.randint(0, MAX_DOWNTIME_PER_DAY)):
            start_h, start_m = random.randint(0, 23), random.choice([0, 15, 30, 45])
            minutes = random.randint(10, 240)
            end_total = (start_h * 60 + start_m + minutes) % (24 * 60)
            rows.append({
                "id": len(rows) + 1,
                "date": day_str,
                "start_time": f"{start_h:02d}:{start_m:02d}",
                "end_time": f"{end_total // 60:02d}:{end_total % 60:02d}",
                "pic": fake.name(),
                "problem": random.choice(PROBLEMS),
                "unit": random.choice(units)["unit"],
                "action": "Stop and inspect",
                "corrective_action": fake.sentence(nb_words=6),
                "status": random.choice(["Open", "Close"]),
            })
    return rows


# ── Bulk insert helper ───────────────────────────────────

def _bulk_insert(engine, table, rows: list[dict], batch_size: int = 2000):
    """Insert rows into *table* in executemany batches."""
    if not rows:
        return
    with engine.begin() as conn:
        for i in range(0, len(rows), batch_size):
            conn.execute(insert(table), rows[i : i + batch_size])
    print(f"  ✓ {table.name}: {len(rows):,} rows")


def _db_url() -> str:
    user = os.getenv("POSTGRES_USER", "ccr")
    pw = os.getenv("POSTGRES_PASSWORD", "ccr_pw")
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("POSTGRES_DB", "plant_ops")
    return f"postgresql://{user}:{pw}@{host}:{port}/{db}"


# ── Main ─────────────────────────────────────────────────

def seed(engine) -> dict[str, int]:
    """Recreate the CCR tables on *engine* and fill them. Returns row counts."""
    metadata.drop_all(engine)
    metadata.create_all(engine)

    units = gen_plant_units()
    settings = gen_parameter_settings(units)
    silos = gen_silo_capacities()
    readings = gen_parameter_data(settings)
    downtime = gen_downtime(units)

    _bulk_insert(engine, plant_units, units)
    _bulk_insert(engine, parameter_settings, settings)
    _bulk_insert(engine, silo_capacities, silos)
    _bulk_insert(engine, ccr_parameter_data, readings)
    _bulk_insert(engine, ccr_downtime_data, downtime)

    return {
        "plant_units": len(units),
        "parameter_settings": len(settings),
        "silo_capacities": len(silos),
        "ccr_parameter_data": len(readings),
        "ccr_downtime_data": len(downtime),
    }


def main():
    print("═══ CCR Seed Data Generator ═══")
    engine = create_engine(_db_url(), echo=False)
    counts = seed(engine)
    print("\nDone: " + ", ".join(f"{n:,} {t}" for t, n in counts.items()) + ".")


if __name__ == "__main__":
    main()
