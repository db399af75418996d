"""
Sample reference data (for demos and tests).

A small, internally consistent slice of the automobile reference tables:
a few makes and models, the fuels they run on, two size classes, two
countries, and emission-factor tables with year gaps so closest-year
matching has something to do.

The numbers are illustrative, not authoritative.
"""

from __future__ import annotations

from ..calculations import DrivetrainMultipliers
from ..geo import Coordinates
from .defaults import GASOLINE
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


# =============================================================================
# FUELS
# =============================================================================

DIESEL = AutomobileFuel(
    code="D",
    name="diesel",
    family="diesel",
    energy_content=38.6,
    co2_emission_factor=2.69,
    co2_biogenic_emission_factor=0.0,
    ch4_emission_factor=0.00001,
    n2o_emission_factor=0.0001,
)

ELECTRICITY = AutomobileFuel(
    code="EL",
    name="electricity",
    family="electricity",
    unit="kWh",
    energy_content=3.6,
    ch4_emission_factor=0.0,
    n2o_emission_factor=0.0,
)

E85 = AutomobileFuel(
    code="E",
    name="E85",
    family="ethanol",
    energy_content=25.0,
    co2_emission_factor=0.35,
    co2_biogenic_emission_factor=1.6,
    ch4_emission_factor=0.0004,
    n2o_emission_factor=0.004,
)

REGULAR_GASOLINE_TYPE = FuelType(name="regular gasoline", emission_factor=2.34)
DIESEL_TYPE = FuelType(name="diesel", emission_factor=2.73)

PASSENGER_CARS = "Passenger cars"
LIGHT_TRUCKS = "Light-duty trucks"


# =============================================================================
# TABLES
# =============================================================================

SAMPLE_TABLES = ReferenceTables(
    fuels=(GASOLINE, DIESEL, ELECTRICITY, E85),
    fuel_types=(REGULAR_GASOLINE_TYPE, DIESEL_TYPE),
    makes=(
        AutomobileMake(name="Toyota", fuel_efficiency=14.0),
        AutomobileMake(name="Nissan", fuel_efficiency=12.5),
        AutomobileMake(name="Ford"),
    ),
    make_years=(
        AutomobileMakeYear(make_name="Toyota", year=2010, fuel_efficiency=15.2),
        AutomobileMakeYear(make_name="Ford", year=2010, fuel_efficiency=9.1),
    ),
    make_models=(
        AutomobileMakeModel(
            make_name="Toyota", model_name="Prius", type_name=PASSENGER_CARS,
            automobile_fuel=GASOLINE, fuel_efficiency_city=21.3, fuel_efficiency_highway=20.4,
        ),
        AutomobileMakeModel(
            make_name="Toyota", model_name="Camry", type_name=PASSENGER_CARS,
            automobile_fuel=GASOLINE, fuel_efficiency_city=9.8, fuel_efficiency_highway=14.0,
        ),
        AutomobileMakeModel(
            make_name="Nissan", model_name="Leaf", type_name=PASSENGER_CARS,
            automobile_fuel=ELECTRICITY, fuel_efficiency_city=45.0, fuel_efficiency_highway=40.0,
        ),
        AutomobileMakeModel(
            make_name="Ford", model_name="F150", type_name=LIGHT_TRUCKS,
            automobile_fuel=GASOLINE, fuel_efficiency_city=6.4, fuel_efficiency_highway=8.9,
            alt_automobile_fuel=E85, alt_fuel_efficiency_city=4.7, alt_fuel_efficiency_highway=6.6,
        ),
    ),
    make_model_years=(
        AutomobileMakeModelYear(
            make_name="Toyota", model_name="Prius", year=2010, type_name=PASSENGER_CARS,
            automobile_fuel=GASOLINE, fuel_efficiency_city=21.7, fuel_efficiency_highway=20.4,
        ),
        AutomobileMakeModelYear(
            make_name="Ford", model_name="F150", year=2010, type_name=LIGHT_TRUCKS,
            automobile_fuel=GASOLINE, fuel_efficiency_city=6.4, fuel_efficiency_highway=9.4,
        ),
    ),
    make_model_year_variants=(
        AutomobileMakeModelYearVariant(
            row_hash="prius-2010-a", make_name="Toyota", model_name="Prius", year=2010,
            fuel_type=REGULAR_GASOLINE_TYPE,
            fuel_efficiency_city=21.7, fuel_efficiency_highway=20.4,
        ),
    ),
    size_classes=(
        AutomobileSizeClass(
            name="Midsize Car", type_name=PASSENGER_CARS,
            fuel_efficiency_city=9.6, fuel_efficiency_highway=13.6,
            hybrid=DrivetrainMultipliers(city=1.68, highway=1.20),
            conventional=DrivetrainMultipliers(city=0.99, highway=1.00),
        ),
        AutomobileSizeClass(
            name="Pickup Truck", type_name=LIGHT_TRUCKS,
            fuel_efficiency_city=6.4, fuel_efficiency_highway=8.5,
            conventional=DrivetrainMultipliers(city=1.00, highway=1.00),
        ),
    ),
    type_fuels=(
        AutomobileTypeFuel(PASSENGER_CARS, "gasoline", ch4_emission_factor=0.00012, n2o_emission_factor=0.0021),
        AutomobileTypeFuel(LIGHT_TRUCKS, "gasoline", ch4_emission_factor=0.00019, n2o_emission_factor=0.0032),
        AutomobileTypeFuel(PASSENGER_CARS, "electricity", ch4_emission_factor=0.0, n2o_emission_factor=0.0),
    ),
    type_fuel_years=(
        AutomobileTypeFuelYear(PASSENGER_CARS, "gasoline", 2005, ch4_emission_factor=0.00013, n2o_emission_factor=0.0025),
        AutomobileTypeFuelYear(PASSENGER_CARS, "gasoline", 2010, ch4_emission_factor=0.00010, n2o_emission_factor=0.0018),
    ),
    activity_years=(
        AutomobileActivityYear(2009, hfc_emission_factor=0.0062),
        AutomobileActivityYear(2011, hfc_emission_factor=0.0059),
    ),
    activity_year_types=(
        AutomobileActivityYearType(PASSENGER_CARS, 2009, hfc_emission_factor=0.0051),
        AutomobileActivityYearType(PASSENGER_CARS, 2011, hfc_emission_factor=0.0049),
    ),
    countries=(
        Country(
            iso_3166_code="US", name="United States",
            automobile_urbanity=0.43, automobile_city_speed=32.0, automobile_highway_speed=91.7,
            automobile_fuel_efficiency=8.9, automobile_trip_distance=16.3,
            electricity_emission_factor=0.59,
        ),
        Country(
            iso_3166_code="GB", name="United Kingdom",
            automobile_urbanity=0.35, automobile_fuel_efficiency=12.0,
            automobile_trip_distance=13.0, electricity_emission_factor=0.47,
        ),
    ),
)

SAMPLE_GEOCODES: dict[str, Coordinates] = {
    "1600 Pennsylvania Ave NW, Washington, DC": Coordinates(38.8977, -77.0365),
    "Lincoln Memorial, Washington, DC": Coordinates(38.8893, -77.0502),
    "Times Square, New York, NY": Coordinates(40.7580, -73.9855),
}


def sample_reference_data() -> InMemoryReferenceData:
    return InMemoryReferenceData(SAMPLE_TABLES)
