"""
Reference records used by the automobile trip models.

These are opaque to the decision engine: quorums receive them as
characteristic values and read the attributes they need. Every numeric
attribute is optional because real reference tables have gaps, and a gap
must degrade to "unknown", not to an error.

Units:
    fuel efficiency         km / l (gasoline-equivalent for non-liquid fuels)
    speed                   km / h
    distance                km
    energy content          MJ / fuel unit
    co2 emission factor     kg / fuel unit
    ch4, n2o, hfc factors   kg CO2e / km
    electricity factor      kg CO2e / kWh
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..calculations import Drivetrain, DrivetrainMultipliers


# =============================================================================
# FUELS
# =============================================================================

LIQUID_UNIT = "l"


@dataclass(frozen=True)
class AutomobileFuel:
    """An automobile fuel, e.g. gasoline ("G") or electricity ("EL")."""
    code: str
    name: str
    family: Optional[str] = None
    unit: str = LIQUID_UNIT
    energy_content: Optional[float] = None
    co2_emission_factor: Optional[float] = None
    co2_biogenic_emission_factor: Optional[float] = None
    ch4_emission_factor: Optional[float] = None
    n2o_emission_factor: Optional[float] = None

    @property
    def non_liquid(self) -> bool:
        return self.unit != LIQUID_UNIT

    def same_as(self, other: Any) -> bool:
        return isinstance(other, AutomobileFuel) and other.code == self.code


@dataclass(frozen=True)
class FuelType:
    """Legacy per-liter fuel type used by the carbon model."""
    name: str
    emission_factor: Optional[float] = None


# =============================================================================
# VEHICLES
# =============================================================================

@dataclass(frozen=True)
class AutomobileMake:
    name: str
    fuel_efficiency: Optional[float] = None


@dataclass(frozen=True)
class AutomobileMakeYear:
    make_name: str
    year: int
    fuel_efficiency: Optional[float] = None


@dataclass(frozen=True)
class _FuelEfficiencies:
    """City/highway efficiencies for a primary and an alternate fuel."""
    automobile_fuel: Optional[AutomobileFuel] = None
    fuel_efficiency_city: Optional[float] = None
    fuel_efficiency_highway: Optional[float] = None
    alt_automobile_fuel: Optional[AutomobileFuel] = None
    alt_fuel_efficiency_city: Optional[float] = None
    alt_fuel_efficiency_highway: Optional[float] = None
    type_name: Optional[str] = None

    def efficiencies_for(self, fuel: AutomobileFuel) -> Optional[tuple[Optional[float], Optional[float]]]:
        """
        (city, highway) for `fuel`, checking the primary fuel first.

        None when the vehicle does not run on `fuel`.
        """
        if fuel.same_as(self.automobile_fuel):
            return self.fuel_efficiency_city, self.fuel_efficiency_highway
        if fuel.same_as(self.alt_automobile_fuel):
            return self.alt_fuel_efficiency_city, self.alt_fuel_efficiency_highway
        return None


@dataclass(frozen=True, kw_only=True)
class AutomobileMakeModel(_FuelEfficiencies):
    make_name: str
    model_name: str


@dataclass(frozen=True, kw_only=True)
class AutomobileMakeModelYear(_FuelEfficiencies):
    make_name: str
    model_name: str
    year: int


@dataclass(frozen=True)
class AutomobileMakeModelYearVariant:
    """A specific engine/transmission variant (carbon model only)."""
    row_hash: str
    make_name: str
    model_name: str
    year: int
    fuel_type: Optional[FuelType] = None
    fuel_efficiency_city: Optional[float] = None
    fuel_efficiency_highway: Optional[float] = None


@dataclass(frozen=True)
class AutomobileSizeClass:
    name: str
    type_name: Optional[str] = None
    fuel_efficiency_city: Optional[float] = None
    fuel_efficiency_highway: Optional[float] = None
    hybrid: DrivetrainMultipliers = field(default_factory=DrivetrainMultipliers)
    conventional: DrivetrainMultipliers = field(default_factory=DrivetrainMultipliers)

    def multipliers(self, drivetrain: Drivetrain) -> DrivetrainMultipliers:
        if drivetrain == Drivetrain.HYBRID:
            return self.hybrid
        return self.conventional


# =============================================================================
# EMISSION FACTOR TABLES
# =============================================================================

@dataclass(frozen=True)
class AutomobileTypeFuel:
    type_name: str
    fuel_family: str
    ch4_emission_factor: Optional[float] = None
    n2o_emission_factor: Optional[float] = None


@dataclass(frozen=True)
class AutomobileTypeFuelYear:
    type_name: str
    fuel_family: str
    year: int
    ch4_emission_factor: Optional[float] = None
    n2o_emission_factor: Optional[float] = None


@dataclass(frozen=True)
class AutomobileActivityYear:
    year: int
    hfc_emission_factor: Optional[float] = None


@dataclass(frozen=True)
class AutomobileActivityYearType:
    type_name: str
    year: int
    hfc_emission_factor: Optional[float] = None


# =============================================================================
# LOCALITY
# =============================================================================

@dataclass(frozen=True)
class Country:
    iso_3166_code: str
    name: str = ""
    automobile_urbanity: Optional[float] = None
    automobile_city_speed: Optional[float] = None
    automobile_highway_speed: Optional[float] = None
    automobile_fuel_efficiency: Optional[float] = None
    automobile_trip_distance: Optional[float] = None
    electricity_emission_factor: Optional[float] = None
