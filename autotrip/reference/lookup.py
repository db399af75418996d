"""
Reference-data lookup.

The models reach reference tables only through the ReferenceData
protocol: every finder takes key values and returns a record or None.
A miss is not an error; the quorum asking simply does not apply.

"Closest year" finders return the record whose year is nearest to the
requested year. Ties go to the earlier year, so 2010 against tables for
2009 and 2011 picks 2009.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Optional, Protocol, TypeVar

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

R = TypeVar("R")


# =============================================================================
# CLOSEST YEAR
# =============================================================================

def closest_year(
    records: Iterable[R],
    year: int,
    key: Callable[[R], int] = lambda record: record.year,
) -> Optional[R]:
    """
    The record whose year is nearest `year`; ties go to the earlier year.

    Returns None for an empty candidate set.
    """
    best: Optional[R] = None
    best_rank: Optional[tuple[int, int]] = None
    for record in records:
        record_year = key(record)
        rank = (abs(record_year - year), record_year)
        if best_rank is None or rank < best_rank:
            best, best_rank = record, rank
    return best


def _same(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return a.strip().casefold() == b.strip().casefold()


# =============================================================================
# PROTOCOL
# =============================================================================

class ReferenceData(Protocol):
    """Lookup service for the reference tables the models consult."""

    def find_make(self, name: str) -> Optional[AutomobileMake]: ...

    def find_make_year(self, make_name: str, year: int) -> Optional[AutomobileMakeYear]: ...

    def find_make_model(
        self,
        make_name: str,
        model_name: str,
        automobile_fuel: Optional[AutomobileFuel] = None,
    ) -> Optional[AutomobileMakeModel]: ...

    def find_make_model_year(
        self, make_name: str, model_name: str, year: int
    ) -> Optional[AutomobileMakeModelYear]: ...

    def find_make_model_year_variant(self, row_hash: str) -> Optional[AutomobileMakeModelYearVariant]: ...

    def find_size_class(self, name: str) -> Optional[AutomobileSizeClass]: ...

    def find_fuel(self, code_or_name: str) -> Optional[AutomobileFuel]: ...

    def find_fuel_type(self, name: str) -> Optional[FuelType]: ...

    def find_country(self, iso_3166_code: str) -> Optional[Country]: ...

    def find_type_fuel(self, type_name: str, fuel_family: str) -> Optional[AutomobileTypeFuel]: ...

    def find_type_fuel_year(
        self, type_name: str, fuel_family: str, year: int
    ) -> Optional[AutomobileTypeFuelYear]: ...

    def find_activity_year(self, year: int) -> Optional[AutomobileActivityYear]: ...

    def find_activity_year_type(
        self, type_name: str, year: int
    ) -> Optional[AutomobileActivityYearType]: ...


# =============================================================================
# IN-MEMORY IMPLEMENTATION
# =============================================================================

@dataclass(frozen=True)
class ReferenceTables:
    """Plain record lists, one per reference table."""
    fuels: tuple[AutomobileFuel, ...] = ()
    fuel_types: tuple[FuelType, ...] = ()
    makes: tuple[AutomobileMake, ...] = ()
    make_years: tuple[AutomobileMakeYear, ...] = ()
    make_models: tuple[AutomobileMakeModel, ...] = ()
    make_model_years: tuple[AutomobileMakeModelYear, ...] = ()
    make_model_year_variants: tuple[AutomobileMakeModelYearVariant, ...] = ()
    size_classes: tuple[AutomobileSizeClass, ...] = ()
    type_fuels: tuple[AutomobileTypeFuel, ...] = ()
    type_fuel_years: tuple[AutomobileTypeFuelYear, ...] = ()
    activity_years: tuple[AutomobileActivityYear, ...] = ()
    activity_year_types: tuple[AutomobileActivityYearType, ...] = ()
    countries: tuple[Country, ...] = ()


class InMemoryReferenceData:
    """
    ReferenceData over in-memory tables.

    Name matching is case-insensitive. Read-only, so one instance can
    serve concurrent evaluations.
    """

    def __init__(self, tables: Optional[ReferenceTables] = None):
        self.tables = tables if tables is not None else ReferenceTables()

    def find_make(self, name: str) -> Optional[AutomobileMake]:
        return next((m for m in self.tables.makes if _same(m.name, name)), None)

    def find_make_year(self, make_name: str, year: int) -> Optional[AutomobileMakeYear]:
        return next(
            (
                m for m in self.tables.make_years
                if _same(m.make_name, make_name) and m.year == year
            ),
            None,
        )

    def find_make_model(
        self,
        make_name: str,
        model_name: str,
        automobile_fuel: Optional[AutomobileFuel] = None,
    ) -> Optional[AutomobileMakeModel]:
        """
        Match make and model. When the client named a fuel, prefer the
        variant that runs on it as its primary or alternate fuel.
        """
        candidates = [
            m for m in self.tables.make_models
            if _same(m.make_name, make_name) and _same(m.model_name, model_name)
        ]
        if automobile_fuel is not None:
            for candidate in candidates:
                if candidate.efficiencies_for(automobile_fuel) is not None:
                    return candidate
        return candidates[0] if candidates else None

    def find_make_model_year(
        self, make_name: str, model_name: str, year: int
    ) -> Optional[AutomobileMakeModelYear]:
        return next(
            (
                m for m in self.tables.make_model_years
                if _same(m.make_name, make_name)
                and _same(m.model_name, model_name)
                and m.year == year
            ),
            None,
        )

    def find_make_model_year_variant(self, row_hash: str) -> Optional[AutomobileMakeModelYearVariant]:
        return next(
            (v for v in self.tables.make_model_year_variants if v.row_hash == row_hash),
            None,
        )

    def find_size_class(self, name: str) -> Optional[AutomobileSizeClass]:
        return next((s for s in self.tables.size_classes if _same(s.name, name)), None)

    def find_fuel(self, code_or_name: str) -> Optional[AutomobileFuel]:
        for fuel in self.tables.fuels:
            if fuel.code == code_or_name or _same(fuel.name, code_or_name):
                return fuel
        return None

    def find_fuel_type(self, name: str) -> Optional[FuelType]:
        return next((f for f in self.tables.fuel_types if _same(f.name, name)), None)

    def find_country(self, iso_3166_code: str) -> Optional[Country]:
        return next(
            (c for c in self.tables.countries if _same(c.iso_3166_code, iso_3166_code)),
            None,
        )

    def find_type_fuel(self, type_name: str, fuel_family: str) -> Optional[AutomobileTypeFuel]:
        return next(
            (
                t for t in self.tables.type_fuels
                if _same(t.type_name, type_name) and _same(t.fuel_family, fuel_family)
            ),
            None,
        )

    def find_type_fuel_year(
        self, type_name: str, fuel_family: str, year: int
    ) -> Optional[AutomobileTypeFuelYear]:
        return closest_year(
            (
                t for t in self.tables.type_fuel_years
                if _same(t.type_name, type_name) and _same(t.fuel_family, fuel_family)
            ),
            year,
        )

    def find_activity_year(self, year: int) -> Optional[AutomobileActivityYear]:
        return closest_year(self.tables.activity_years, year)

    def find_activity_year_type(
        self, type_name: str, year: int
    ) -> Optional[AutomobileActivityYearType]:
        return closest_year(
            (t for t in self.tables.activity_year_types if _same(t.type_name, type_name)),
            year,
        )
