"""
Load reference tables from a JSON document.

Document shape (every key optional):

    {
      "fuels":        [{"code": "G", "name": "gasoline", "family": "gasoline", ...}],
      "make_models":  [{"make_name": "Toyota", "model_name": "Prius",
                        "automobile_fuel": "G", "fuel_efficiency_city": 20.0, ...}],
      "size_classes": [{"name": "Midsize Car",
                        "hybrid": {"city": 1.68, "highway": 1.2}, ...}],
      ...
    }

Fuels are referenced by code and fuel types by name; both must be
defined in the same document.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import structlog

from ..calculations import DrivetrainMultipliers
from ..domain import ConfigurationError
from .lookup import InMemoryReferenceData, ReferenceTables
from .records import (
    AutomobileActivityYear,
    AutomobileActivityYearType,
    AutomobileFuel,
    AutomobileMake,
    AutomobileMakeModel,
    AutomobileMakeModelYear,
    AutomobileMakeModelYearVariant,
    AutomobileMakeYear,
    AutomobileSizeClass,
    AutomobileTypeFuel,
    AutomobileTypeFuelYear,
    Country,
    FuelType,
)

logger = structlog.get_logger(__name__)


def _fuel(fuels: dict[str, AutomobileFuel], code: Optional[str]) -> Optional[AutomobileFuel]:
    if code is None:
        return None
    try:
        return fuels[code]
    except KeyError:
        raise ConfigurationError(f"Reference data names unknown fuel code '{code}'") from None


def _multipliers(raw: Optional[dict[str, Any]]) -> DrivetrainMultipliers:
    raw = raw or {}
    return DrivetrainMultipliers(city=raw.get("city"), highway=raw.get("highway"))


def _with_fuels(row: dict[str, Any], fuels: dict[str, AutomobileFuel]) -> dict[str, Any]:
    row = dict(row)
    row["automobile_fuel"] = _fuel(fuels, row.get("automobile_fuel"))
    row["alt_automobile_fuel"] = _fuel(fuels, row.get("alt_automobile_fuel"))
    return row


def tables_from_dict(data: dict[str, Any]) -> ReferenceTables:
    """Build ReferenceTables from a decoded JSON document."""
    try:
        fuels = tuple(AutomobileFuel(**row) for row in data.get("fuels", ()))
        by_code = {fuel.code: fuel for fuel in fuels}
        fuel_types = tuple(FuelType(**row) for row in data.get("fuel_types", ()))
        by_name = {fuel_type.name: fuel_type for fuel_type in fuel_types}

        variants = []
        for row in data.get("make_model_year_variants", ()):
            row = dict(row)
            name = row.get("fuel_type")
            if name is not None and name not in by_name:
                raise ConfigurationError(f"Reference data names unknown fuel type '{name}'")
            row["fuel_type"] = by_name.get(name) if name is not None else None
            variants.append(AutomobileMakeModelYearVariant(**row))

        size_classes = []
        for row in data.get("size_classes", ()):
            row = dict(row)
            row["hybrid"] = _multipliers(row.get("hybrid"))
            row["conventional"] = _multipliers(row.get("conventional"))
            size_classes.append(AutomobileSizeClass(**row))

        return ReferenceTables(
            fuels=fuels,
            fuel_types=fuel_types,
            makes=tuple(AutomobileMake(**row) for row in data.get("makes", ())),
            make_years=tuple(AutomobileMakeYear(**row) for row in data.get("make_years", ())),
            make_models=tuple(
                AutomobileMakeModel(**_with_fuels(row, by_code))
                for row in data.get("make_models", ())
            ),
            make_model_years=tuple(
                AutomobileMakeModelYear(**_with_fuels(row, by_code))
                for row in data.get("make_model_years", ())
            ),
            make_model_year_variants=tuple(variants),
            size_classes=tuple(size_classes),
            type_fuels=tuple(AutomobileTypeFuel(**row) for row in data.get("type_fuels", ())),
            type_fuel_years=tuple(
                AutomobileTypeFuelYear(**row) for row in data.get("type_fuel_years", ())
            ),
            activity_years=tuple(
                AutomobileActivityYear(**row) for row in data.get("activity_years", ())
            ),
            activity_year_types=tuple(
                AutomobileActivityYearType(**row) for row in data.get("activity_year_types", ())
            ),
            countries=tuple(Country(**row) for row in data.get("countries", ())),
        )
    except TypeError as exc:
        raise ConfigurationError(f"Malformed reference data: {exc}") from exc


def load_reference_data(path: str | Path) -> InMemoryReferenceData:
    """Read a JSON reference document into an in-memory lookup."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    tables = tables_from_dict(data)
    logger.info(
        "reference_data_loaded",
        path=str(path),
        fuels=len(tables.fuels),
        make_models=len(tables.make_models),
        countries=len(tables.countries),
    )
    return InMemoryReferenceData(tables)
