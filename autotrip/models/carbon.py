"""
Carbon model — per-liter automobile trip emissions (legacy).

The older single-factor model: `emission` (kg CO2e) is fuel use times a
fuel-type emission factor. Kept alongside the impact model as its own
registry, so callers choose explicitly; quantity names overlap but the
fallback values differ (trip constants come from DefaultData.trip).

Vehicle records (make, make_year, make_model, make_model_year,
make_model_year_variant) are client-only here. `duration` is in minutes.
"""

from __future__ import annotations

from ..calculations import Drivetrain, during_timeframe, harmonic_blend
from ..decision.quorum import AbsencePolicy
from ..decision.registry import Registry
from ..domain import ABSENT, Compliance, is_absent

ALL = (Compliance.GHG_PROTOCOL_SCOPE_1, Compliance.GHG_PROTOCOL_SCOPE_3, Compliance.ISO)
SCOPE_3_ISO = (Compliance.GHG_PROTOCOL_SCOPE_3, Compliance.ISO)

FALL_THROUGH = AbsencePolicy.FALL_THROUGH

registry = Registry(
    "carbon",
    characteristics=(
        "make", "make_year", "make_model", "make_model_year", "make_model_year_variant",
        "size_class", "hybridity", "origin", "destination", "duration",
    ),
)


@registry.quorum(
    "emission", "from fuel use, emission factor, date, and timeframe",
    requires=("fuel_use", "emission_factor", "date"), complies=ALL,
)
def emission(c, context):
    return during_timeframe(c["fuel_use"] * c["emission_factor"], c["date"], context.timeframe)


@registry.quorum(
    "emission_factor", "from fuel type",
    requires=("fuel_type",), complies=ALL, on_absent=FALL_THROUGH,
)
def emission_factor_from_fuel_type(c, context):
    return c["fuel_type"].emission_factor


@registry.quorum("emission_factor", "default", complies=ALL)
def emission_factor_default(c, context):
    return context.defaults.fuel_type.emission_factor


@registry.quorum(
    "fuel_type", "from make model year variant",
    requires=("make_model_year_variant",), complies=ALL, on_absent=FALL_THROUGH,
)
def fuel_type(c, context):
    return c["make_model_year_variant"].fuel_type


@registry.quorum(
    "fuel_use", "from fuel efficiency and distance",
    requires=("fuel_efficiency", "distance"), complies=ALL,
)
def fuel_use(c, context):
    return c["distance"] / c["fuel_efficiency"]


# =============================================================================
# DISTANCE
# =============================================================================

@registry.quorum(
    "distance", "from origin and destination locations",
    requires=("origin_location", "destination_location"),
    complies=ALL, on_absent=FALL_THROUGH,
)
def distance_from_locations(c, context):
    if context.router is None:
        return ABSENT
    return context.router.route_distance(c["origin_location"], c["destination_location"])


@registry.quorum(
    "distance", "from duration and speed",
    requires=("duration", "speed"), complies=ALL,
)
def distance_from_duration(c, context):
    return (c["duration"] / 60.0) * c["speed"]


@registry.quorum("distance", "default", complies=SCOPE_3_ISO)
def distance_default(c, context):
    return context.defaults.trip.distance


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


@registry.quorum("speed", "from urbanity", requires=("urbanity",), complies=ALL)
def speed(c, context):
    trip = context.defaults.trip
    return harmonic_blend(c["urbanity"], trip.city_speed, trip.highway_speed)


# =============================================================================
# FUEL EFFICIENCY
# =============================================================================

def _register_rated(source: str) -> None:
    @registry.quorum(
        "fuel_efficiency", f"from {source.replace('_', ' ')} and urbanity",
        requires=(source, "urbanity"), complies=ALL, on_absent=FALL_THROUGH,
    )
    def rated(c, context):
        record = c[source]
        return harmonic_blend(c["urbanity"], record.fuel_efficiency_city, record.fuel_efficiency_highway)


for _source in ("make_model_year_variant", "make_model_year", "make_model"):
    _register_rated(_source)


@registry.quorum(
    "fuel_efficiency", "from size class, hybridity multiplier, and urbanity",
    requires=("size_class", "hybridity_multiplier", "urbanity"),
    complies=ALL, on_absent=FALL_THROUGH,
)
def fuel_efficiency_from_size_class(c, context):
    size_class = c["size_class"]
    blended = harmonic_blend(
        c["urbanity"], size_class.fuel_efficiency_city, size_class.fuel_efficiency_highway
    )
    if is_absent(blended):
        return ABSENT
    return blended * c["hybridity_multiplier"]


@registry.quorum(
    "fuel_efficiency", "from make year and hybridity multiplier",
    requires=("make_year", "hybridity_multiplier"), complies=ALL, on_absent=FALL_THROUGH,
)
def fuel_efficiency_from_make_year(c, context):
    rated = c["make_year"].fuel_efficiency
    return ABSENT if rated is None else rated * c["hybridity_multiplier"]


@registry.quorum(
    "fuel_efficiency", "from make and hybridity multiplier",
    requires=("make", "hybridity_multiplier"), complies=ALL, on_absent=FALL_THROUGH,
)
def fuel_efficiency_from_make(c, context):
    rated = c["make"].fuel_efficiency
    return ABSENT if rated is None else rated * c["hybridity_multiplier"]


@registry.quorum(
    "fuel_efficiency", "from hybridity multiplier",
    requires=("hybridity_multiplier",), complies=SCOPE_3_ISO,
)
def fuel_efficiency_default(c, context):
    return context.defaults.trip.fuel_efficiency * c["hybridity_multiplier"]


# =============================================================================
# VEHICLE AND TRIP
# =============================================================================

@registry.quorum(
    "hybridity_multiplier", "from size class, hybridity, and urbanity",
    requires=("size_class", "hybridity", "urbanity"), complies=ALL, on_absent=FALL_THROUGH,
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
    return context.defaults.trip.hybridity_multiplier


@registry.quorum("urbanity", "default", complies=ALL)
def urbanity_default(c, context):
    return context.defaults.trip.urbanity


@registry.quorum("date", "from timeframe", complies=(*ALL, Compliance.TCR))
def date_from_timeframe(c, context):
    return context.timeframe.from_


CARBON_MODEL = registry.freeze()
