"""
Typed CCR rows.

Backend rows are validated into these models at the query boundary, so a
malformed row fails fast instead of leaking missing fields into reports.
Unknown columns are ignored; ids are always coerced to strings because
Postgres serial ids and PocketBase record ids differ in type.
"""
from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

HOURS = tuple(range(1, 25))

HourlyValue = Union[float, str, None]


class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class PlantUnit(_Row):
    unit: str
    category: str
    description: str | None = None


class ParameterSetting(_Row):
    parameter: str
    data_type: Literal["Number", "Text"] = "Number"
    unit: str = ""
    category: str
    min_value: float | None = None
    max_value: float | None = None
    opc_min_value: float | None = None
    opc_max_value: float | None = None
    pcc_min_value: float | None = None
    pcc_max_value: float | None = None

    @property
    def is_numeric(self) -> bool:
        return self.data_type == "Number"


class SiloCapacity(_Row):
    plant_category: str
    unit: str
    silo_name: str
    capacity: float
    dead_stock: float = 0.0


class CcrDowntime(_Row):
    date: str
    start_time: str
    end_time: str
    pic: str = ""
    problem: str = ""
    unit: str = ""
    action: str | None = None
    corrective_action: str | None = None
    status: str | None = None


class CcrParameterDataFlat(_Row):
    """One parameter's readings for one day, one column per hour."""

    parameter_id: str
    date: str
    name: str | None = None

    hour1: HourlyValue = None
    hour2: HourlyValue = None
    hour3: HourlyValue = None
    hour4: HourlyValue = None
    hour5: HourlyValue = None
    hour6: HourlyValue = None
    hour7: HourlyValue = None
    hour8: HourlyValue = None
    hour9: HourlyValue = None
    hour10: HourlyValue = None
    hour11: HourlyValue = None
    hour12: HourlyValue = None
    hour13: HourlyValue = None
    hour14: HourlyValue = None
    hour15: HourlyValue = None
    hour16: HourlyValue = None
    hour17: HourlyValue = None
    hour18: HourlyValue = None
    hour19: HourlyValue = None
    hour20: HourlyValue = None
    hour21: HourlyValue = None
    hour22: HourlyValue = None
    hour23: HourlyValue = None
    hour24: HourlyValue = None

    hour1_user: str | None = None
    hour2_user: str | None = None
    hour3_user: str | None = None
    hour4_user: str | None = None
    hour5_user: str | None = None
    hour6_user: str | None = None
    hour7_user: str | None = None
    hour8_user: str | None = None
    hour9_user: str | None = None
    hour10_user: str | None = None
    hour11_user: str | None = None
    hour12_user: str | None = None
    hour13_user: str | None = None
    hour14_user: str | None = None
    hour15_user: str | None = None
    hour16_user: str | None = None
    hour17_user: str | None = None
    hour18_user: str | None = None
    hour19_user: str | None = None
    hour20_user: str | None = None
    hour21_user: str | None = None
    hour22_user: str | None = None
    hour23_user: str | None = None
    hour24_user: str | None = None

    @field_validator("parameter_id", mode="before")
    @classmethod
    def _parameter_id_to_str(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    def hourly_values(self) -> dict[int, HourlyValue]:
        """``{hour: value}`` for every hour that has an entry."""
        values: dict[int, HourlyValue] = {}
        for hour in HOURS:
            value = getattr(self, f"hour{hour}")
            if value is not None and value != "":
                values[hour] = value
        return values

    def hour_user(self, hour: int) -> str | None:
        return getattr(self, f"hour{hour}_user")


class FooterStats(BaseModel):
    total: float
    avg: float
    min: float
    max: float
    count: int = Field(0, description="Number of numeric hourly values")
