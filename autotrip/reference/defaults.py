"""
Default-data provider.

Fallback records used when nothing better matches: world-average country
statistics, an average automobile fuel, average drivetrain multipliers,
gasoline as the energy reference for non-liquid fuels, and the legacy
carbon model's trip constants.

A DefaultData instance is injected into each DecisionEngine. Quorums read
it through the evaluation context, never through a module global.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..calculations import DrivetrainMultipliers
from .records import AutomobileFuel, AutomobileSizeClass, Country, FuelType


@dataclass(frozen=True)
class TripFallback:
    """Carbon model constants for a trip nobody described."""
    distance: float = 16.33                # km, NHTS 2009
    urbanity: float = 0.43                 # EPA (2009) Appendix A
    city_speed: float = 32.0               # km/h, EPA (2006)
    highway_speed: float = 91.7            # km/h, EPA (2006)
    fuel_efficiency: float = 8.58          # km/l, US VMT over fuel consumption
    hybridity_multiplier: float = 1.0


@dataclass(frozen=True)
class DefaultData:
    country: Country
    automobile_fuel: AutomobileFuel
    size_class: AutomobileSizeClass
    gasoline: AutomobileFuel
    fuel_type: FuelType
    trip: TripFallback = field(default_factory=TripFallback)


GASOLINE = AutomobileFuel(
    code="G",
    name="regular gasoline",
    family="gasoline",
    energy_content=35.0,
    co2_emission_factor=2.31,
    co2_biogenic_emission_factor=0.0,
    ch4_emission_factor=0.00031,
    n2o_emission_factor=0.0038,
)

WORLD_DEFAULTS = DefaultData(
    country=Country(
        iso_3166_code="",
        name="fallback",
        automobile_urbanity=0.43,
        automobile_city_speed=32.0,
        automobile_highway_speed=91.7,
        automobile_fuel_efficiency=8.58,
        automobile_trip_distance=16.0,
        electricity_emission_factor=0.62,
    ),
    automobile_fuel=AutomobileFuel(
        code="F",
        name="fallback",
        family=None,
        energy_content=35.3,
        co2_emission_factor=2.35,
        co2_biogenic_emission_factor=0.0,
        ch4_emission_factor=0.00033,
        n2o_emission_factor=0.0039,
    ),
    size_class=AutomobileSizeClass(
        name="fallback",
        hybrid=DrivetrainMultipliers(city=1.68, highway=1.20),
        conventional=DrivetrainMultipliers(city=0.99, highway=1.00),
    ),
    gasoline=GASOLINE,
    fuel_type=FuelType(name="fallback", emission_factor=2.44),
)
