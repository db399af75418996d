"""
Impact model — multi-gas automobile trip emissions (canonical).

Estimates `carbon` (kg CO2e) for one trip as the sum of CO2, CH4, N2O and
HFC emissions during the evaluation timeframe. Each committee below is
listed most-preferred quorum first.

Units follow autotrip.reference.records. `duration` is in seconds.

Quorums that read an attribute from a reference record, or ask a
collaborator, fall through when the answer is missing: a gap in one
table should let the next-preferred method try. Arithmetic quorums never
produce ABSENT and keep the default policy.
"""

from __future__ import annotations

from ..calculations import (
    Drivetrain,
    coerce_date,
    during_timeframe,
    fuel_volume,
    harmonic_blend,
)
from ..decision.quorum import AbsencePolicy
from ..decision.registry import Registry
from ..domain import ABSENT, Compliance, is_absent

SCOPE_1 = Compliance.GHG_PROTOCOL_SCOPE_1
SCOPE_3 = Compliance.GHG_PROTOCOL_SCOPE_3
ISO = Compliance.ISO

ALL = (SCOPE_1, SCOPE_3, ISO)
SCOPE_3_ISO = (SCOPE_3, ISO)

FALL_THROUGH = AbsencePolicy.FALL_THROUGH

registry = Registry(
    "impact",
    characteristics=(
        "make", "model", "year", "size_class", "country",
        "hybridity", "origin", "destination", "duration",
    ),
)


# =============================================================================
# EMISSIONS
# =============================================================================

registry.committee("carbon", "Total trip emissions (kg CO2e)")


@registry.quorum(
    "carbon", "from co2 emission, ch4 emission, n2o emission, and hfc emission",
    requires=("co2_emission", "ch4_emission", "n2o_emission", "hfc_emission"),
    complies=ALL,
)
def carbon_from_gases(c, context):
    return c["co2_emission"] + c["ch4_emission"] + c["n2o_emission"] + c["hfc_emission"]


@registry.quorum(
    "co2_emission", "from fuel use during timeframe and co2 emission factor",
    requires=("fuel_use_during_timeframe", "co2_emission_factor"),
    complies=ALL,
)
def co2_emission(c, context):
    return c["fuel_use_during_timeframe"] * c["co2_emission_factor"]


@registry.quorum(
    "co2_biogenic_emission", "from fuel use during timeframe and co2 biogenic emission factor",
    requires=("fuel_use_during_timeframe", "co2_biogenic_emission_factor"),
    complies=ALL,
)
def co2_biogenic_emission(c, context):
    return c["fuel_use_during_timeframe"] * c["co2_biogenic_emission_factor"]


@registry.quorum(
    "ch4_emission", "from distance during timeframe and ch4 emission factor",
    requires=("distance_during_timeframe", "ch4_emission_factor"),
    complies=ALL,
)
def ch4_emission(c, context):
    return c["distance_during_timeframe"] * c["ch4_emission_factor"]


@registry.quorum(
    "n2o_emission", "from distance during timeframe and n2o emission factor",
    requires=("distance_during_timeframe", "n2o_emission_factor"),
    complies=ALL,
)
def n2o_emission(c, context):
    return c["distance_during_timeframe"] * c["n2o_emission_factor"]


@registry.quorum(
    "hfc_emission", "from distance during timeframe and hfc emission factor",
    requires=("distance_during_timeframe", "hfc_emission_factor"),
    complies=ALL,
)
def hfc_emission(c, context):
    return c["distance_during_timeframe"] * c["hfc_emission_factor"]


# =============================================================================
# EMISSION FACTORS
# =============================================================================

@registry.quorum(
    "co2_emission_factor", "from automobile fuel",
    requires=("automobile_fuel",), complies=ALL, on_absent=FALL_THROUGH,
)
def co2_ef_from_fuel(c, context):
    return c["automobile_fuel"].co2_emission_factor


# Electricity is the only fuel without a co2 emission factor.
@registry.quorum(
    "co2_emission_factor", "from country",
    requires=("country",), complies=SCOPE_3_ISO, on_absent=FALL_THROUGH,
)
def co2_ef_from_country(c, context):
    return c["country"].electricity_emission_factor


@registry.quorum("co2_emission_factor", "default", complies=SCOPE_3_ISO)
def co2_ef_default(c, context):
    return context.defaults.country.electricity_emission_factor


@registry.quorum(
    "co2_biogenic_emission_factor", "from automobile fuel",
    requires=("automobile_fuel",), complies=ALL, on_absent=FALL_THROUGH,
)
def co2_biogenic_ef_from_fuel(c, context):
    return c["automobile_fuel"].co2_biogenic_emission_factor


@registry.quorum("co2_biogenic_emission_factor", "default", complies=SCOPE_3_ISO)
def co2_biogenic_ef_default(c, context):
    return 0.0


def _register_gas_factor(gas: str) -> None:
    attribute = f"{gas}_emission_factor"
    for source in ("type_fuel_year", "type_fuel", "automobile_fuel"):
        registry.quorum(
            attribute, f"from {source.replace('_', ' ')}",
            requires=(source,), complies=ALL, on_absent=FALL_THROUGH,
        )(lambda c, context, source=source: getattr(c[source], attribute))


_register_gas_factor("ch4")
_register_gas_factor("n2o")


@registry.quorum(
    "type_fuel_year", "from automobile type, automobile fuel, and year",
    requires=("automobile_type", "automobile_fuel", "year"),
    complies=ALL, on_absent=FALL_THROUGH,
)
def type_fuel_year(c, context):
    family = c["automobile_fuel"].family
    if family is None:
        return ABSENT
    return context.reference.find_type_fuel_year(c["automobile_type"], family, int(c["year"]))


@registry.quorum(
    "type_fuel", "from automobile type and automobile fuel",
    requires=("automobile_type", "automobile_fuel"),
    complies=ALL, on_absent=FALL_THROUGH,
)
def type_fuel(c, context):
    family = c["automobile_fuel"].family
    if family is None:
        return ABSENT
    return context.reference.find_type_fuel(c["automobile_type"], family)


@registry.quorum(
    "hfc_emission_factor", "from activity year type",
    requires=("activity_year_type",), complies=ALL, on_absent=FALL_THROUGH,
)
def hfc_ef_from_activity_year_type(c, context):
    return c["activity_year_type"].hfc_emission_factor


@registry.quorum(
    "hfc_emission_factor", "from activity year",
    requires=("activity_year",), complies=ALL, on_absent=FALL_THROUGH,
)
def hfc_ef_from_activity_year(c, context):
    return c["activity_year"].hfc_emission_factor


@registry.quorum(
    "activity_year_type", "from date and automobile type",
    requires=("date", "automobile_type"), complies=ALL, on_absent=FALL_THROUGH,
)
def activity_year_type(c, context):
    return context.reference.find_activity_year_type(c["automobile_type"], coerce_date(c["date"]).year)


@registry.quorum(
    "activity_year", "from date",
    requires=("date",), complies=ALL, on_absent=FALL_THROUGH,
)
def activity_year(c, context):
    return context.reference.find_activity_year(coerce_date(c["date"]).year)


@registry.quorum(
    "automobile_type", "from make model year",
    requires=("make_model_year",), complies=ALL, on_absent=FALL_THROUGH,
)
def type_from_make_model_year(c, context):
    return c["make_model_year"].type_name


@registry.quorum(
    "automobile_type", "from make model",
    requires=("make_model",), complies=ALL, on_absent=FALL_THROUGH,
)
def type_from_make_model(c, context):
    return c["make_model"].type_name


@registry.quorum(
    "automobile_type", "from size class",
    requires=("size_class",), complies=ALL, on_absent=FALL_THROUGH,
)
def type_from_size_class(c, context):
    return c["size_class"].type_name


# =============================================================================
# ENERGY AND FUEL USE
# =============================================================================

@registry.quorum(
    "energy", "from fuel use during timeframe and automobile fuel",
    requires=("fuel_use_during_timeframe", "automobile_fuel"),
    on_absent=FALL_THROUGH,
)
def energy(c, context):
    energy_content = c["automobile_fuel"].energy_content
    if energy_content is None:
        return ABSENT
    return c["fuel_use_during_timeframe"] * energy_content


@registry.quorum(
    "fuel_use_during_timeframe", "from fuel use, date, and timeframe",
    requires=("fuel_use", "date"), complies=ALL,
)
def fuel_use_during_timeframe(c, context):
    return during_timeframe(c["fuel_use"], c["date"], context.timeframe)


@registry.quorum(
    "fuel_use", "from fuel efficiency, distance, and automobile fuel",
    requires=("fuel_efficiency", "distance", "automobile_fuel"), complies=ALL,
)
def fuel_use(c, context):
    fuel = c["automobile_fuel"]
    return fuel_volume(
        c["distance"],
        c["fuel_efficiency"],
        energy_content=fuel.energy_content,
        reference_energy_content=context.defaults.gasoline.energy_content,
        non_liquid=fuel.non_liquid,
    )


# =============================================================================
# DISTANCE
# =============================================================================

@registry.quorum(
    "distance_during_timeframe", "from distance, date, and timeframe",
    requires=("distance", "date"), complies=ALL,
)
def distance_during_timeframe(c, context):
    return during_timeframe(c["distance"], c["date"], context.timeframe)


@registry.quorum(
    "distance", "from origin and destination locations",
    requires=("origin_location", "destination_location"),
    complies=SCOPE_3_ISO, on_absent=FALL_THROUGH,
)
def distance_from_locations(c, context):
    if context.router is None:
        return ABSENT
    return context.router.route_distance(c["origin_location"], c["destination_location"])


@registry.quorum(
    "distance", "from duration and speed",
    requires=("duration", "speed"), complies=SCOPE_3_ISO,
)
def distance_from_duration(c, context):
    return c["duration"] / 60.0 / 60.0 * c["speed"]


@registry.quorum(
    "distance", "from country",
    requires=("country",), complies=SCOPE_3_ISO, on_absent=FALL_THROUGH,
)
def distance_from_country(c, context):
    return c["country"].automobile_trip_distance


@registry.quorum("distance", "default", complies=SCOPE_3_ISO)
def distance_default(c, context):
    return context.defaults.country.automobile_trip_distance


def _geocode(address, context):
    if context.geocoder is None:
        return ABSENT
    return context.geocoder.geocode(str(address))


@registry.quorum(
    "destination_location", "from destination",
    requires=("destination",), complies=ALL, on_absent=FALL_THROUGH,
)
def destination_location(c, context):
    return _geocode(c["destination"], context)


@registry.quorum(
    "origin_location", "from origin",
    requires=("origin",), complies=ALL, on_absent=FALL_THROUGH,
)
def origin_location(c, context):
    return _geocode(c["origin"], context)


@registry.quorum(
    "speed", "from urbanity and country",
    requires=("urbanity", "country"), complies=ALL, on_absent=FALL_THROUGH,
)
def speed_from_country(c, context):
    country = c["country"]
    return harmonic_blend(c["urbanity"], country.automobile_city_speed, country.automobile_highway_speed)


@registry.quorum(
    "speed", "from urbanity",
    requires=("urbanity",), complies=ALL,
)
def speed_from_urbanity(c, context):
    fallback = context.defaults.country
    return harmonic_blend(c["urbanity"], fallback.automobile_city_speed, fallback.automobile_highway_speed)


# =============================================================================
# FUEL EFFICIENCY
# =============================================================================

def _scaled(value, multiplier):
    if is_absent(value):
        return ABSENT
    return value * multiplier


@registry.quorum(
    "fuel_efficiency", "from fuel efficiency city, fuel efficiency highway, and urbanity",
    requires=("fuel_efficiency_city", "fuel_efficiency_highway", "urbanity"),
    complies=ALL,
)
def fuel_efficiency_from_city_highway(c, context):
    return harmonic_blend(c["urbanity"], c["fuel_efficiency_city"], c["fuel_efficiency_highway"])


@registry.quorum(
    "fuel_efficiency", "from size class, hybridity multiplier, and urbanity",
    requires=("size_class", "hybridity_multiplier", "urbanity"),
    complies=SCOPE_3_ISO, on_absent=FALL_THROUGH,
)
def fuel_efficiency_from_size_class(c, context):
    size_class = c["size_class"]
    blended = harmonic_blend(
        c["urbanity"], size_class.fuel_efficiency_city, size_class.fuel_efficiency_highway
    )
    return _scaled(blended, c["hybridity_multiplier"])


@registry.quorum(
    "fuel_efficiency", "from make year and hybridity multiplier",
    requires=("make_year", "hybridity_multiplier"),
    complies=SCOPE_3_ISO, on_absent=FALL_THROUGH,
)
def fuel_efficiency_from_make_year(c, context):
    return _scaled(c["make_year"].fuel_efficiency, c["hybridity_multiplier"])


@registry.quorum(
    "fuel_efficiency", "from make and hybridity multiplier",
    requires=("make", "hybridity_multiplier"),
    complies=SCOPE_3_ISO, on_absent=FALL_THROUGH,
)
def fuel_efficiency_from_make(c, context):
    return _scaled(c["make"].fuel_efficiency, c["hybridity_multiplier"])


@registry.quorum(
    "fuel_efficiency", "from country and hybridity multiplier",
    requires=("country", "hybridity_multiplier"),
    complies=SCOPE_3_ISO, on_absent=FALL_THROUGH,
)
def fuel_efficiency_from_country(c, context):
    return _scaled(c["country"].automobile_fuel_efficiency, c["hybridity_multiplier"])


@registry.quorum(
    "fuel_efficiency", "from hybridity multiplier",
    requires=("hybridity_multiplier",), complies=SCOPE_3_ISO,
)
def fuel_efficiency_default(c, context):
    return context.defaults.country.automobile_fuel_efficiency * c["hybridity_multiplier"]


def _efficiency(record, fuel, index):
    pair = record.efficiencies_for(fuel)
    return ABSENT if pair is None else pair[index]


def _register_rated_efficiency(quantity: str, index: int) -> None:
    @registry.quorum(
        quantity, "from make model year and automobile fuel",
        requires=("make_model_year", "automobile_fuel"),
        complies=ALL, on_absent=FALL_THROUGH,
    )
    def from_make_model_year(c, context):
        return _efficiency(c["make_model_year"], c["automobile_fuel"], index)

    # A make and model can have one record per fuel; use the one for this fuel.
    @registry.quorum(
        quantity, "from make model and automobile fuel",
        requires=("make_model", "automobile_fuel"),
        complies=ALL, on_absent=FALL_THROUGH,
    )
    def from_make_model(c, context):
        make_model, fuel = c["make_model"], c["automobile_fuel"]
        match = context.reference.find_make_model(make_model.make_name, make_model.model_name, fuel)
        return _efficiency(match or make_model, fuel, index)


_register_rated_efficiency("fuel_efficiency_city", 0)
_register_rated_efficiency("fuel_efficiency_highway", 1)


# =============================================================================
# VEHICLE
# =============================================================================

@registry.quorum(
    "automobile_fuel", "from make model year",
    requires=("make_model_year",), complies=ALL, on_absent=FALL_THROUGH,
)
def fuel_from_make_model_year(c, context):
    return c["make_model_year"].automobile_fuel


@registry.quorum(
    "automobile_fuel", "from make model",
    requires=("make_model",), complies=ALL, on_absent=FALL_THROUGH,
)
def fuel_from_make_model(c, context):
    return c["make_model"].automobile_fuel


@registry.quorum("automobile_fuel", "default", complies=SCOPE_3_ISO)
def fuel_default(c, context):
    return context.defaults.automobile_fuel


@registry.quorum(
    "hybridity_multiplier", "from size class, hybridity, and urbanity",
    requires=("size_class", "hybridity", "urbanity"),
    complies=ALL, on_absent=FALL_THROUGH,
)
def hybridity_multiplier_from_size_class(c, context):
    drivetrain = Drivetrain.from_hybridity(c["hybridity"])
    return c["size_class"].multipliers(drivetrain).blend(c["urbanity"])


@registry.quorum(
    "hybridity_multiplier", "from hybridity and urbanity",
    requires=("hybridity", "urbanity"), complies=ALL, on_absent=FALL_THROUGH,
)
def hybridity_multiplier_from_fallback(c, context):
    drivetrain = Drivetrain.from_hybridity(c["hybridity"])
    return context.defaults.size_class.multipliers(drivetrain).blend(c["urbanity"])


@registry.quorum("hybridity_multiplier", "default", complies=ALL)
def hybridity_multiplier_default(c, context):
    return 1.0


@registry.quorum(
    "urbanity", "from country",
    requires=("country",), complies=ALL, on_absent=FALL_THROUGH,
)
def urbanity_from_country(c, context):
    return c["country"].automobile_urbanity


@registry.quorum("urbanity", "default", complies=ALL)
def urbanity_default(c, context):
    return context.defaults.country.automobile_urbanity


@registry.quorum(
    "make_model_year", "from make model and year",
    requires=("make_model", "year"), complies=ALL, on_absent=FALL_THROUGH,
)
def make_model_year(c, context):
    make_model = c["make_model"]
    return context.reference.find_make_model_year(
        make_model.make_name, make_model.model_name, int(c["year"])
    )


@registry.quorum(
    "make_year", "from make and year",
    requires=("make", "year"), complies=ALL, on_absent=FALL_THROUGH,
)
def make_year(c, context):
    return context.reference.find_make_year(c["make"].name, int(c["year"]))


@registry.quorum(
    "make_model", "from make and model",
    requires=("make", "model"), complies=ALL, on_absent=FALL_THROUGH,
)
def make_model(c, context):
    return context.reference.find_make_model(c["make"].name, str(c["model"]))


@registry.quorum("date", "from timeframe", complies=ALL)
def date_from_timeframe(c, context):
    return context.timeframe.from_


IMPACT_MODEL = registry.freeze()
