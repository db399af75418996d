"""
Tests for the impact model.

These tests verify:
1. Emission arithmetic (carbon is the plain sum of the four gases)
2. Time gating of distance and fuel use
3. Fuel use for liquid and non-liquid fuels
4. Graceful absence when reference data has no match
5. Compliance filtering never selects a non-compliant quorum
6. End-to-end estimates over the sample reference data
"""

from datetime import date

import pytest

from autotrip.decision.engine import DecisionEngine
from autotrip.domain import ABSENT, CollaboratorError, Compliance, Timeframe
from autotrip.geo import GreatCircleRouter, StaticGeocoder
from autotrip.models.impact import IMPACT_MODEL
from autotrip.provenance import ResolutionSource
from autotrip.reference.defaults import GASOLINE
from autotrip.reference.records import AutomobileFuel
from autotrip.reference.sample import E85, ELECTRICITY, SAMPLE_GEOCODES, sample_reference_data

YEAR_2010 = Timeframe.from_year(2010)


# =============================================================================
# TEST FIXTURES
# =============================================================================

def make_engine(**collaborators) -> DecisionEngine:
    """Helper to create an impact-model engine over the sample tables."""
    collaborators.setdefault("reference", sample_reference_data())
    return DecisionEngine(IMPACT_MODEL, **collaborators)


def make_vehicle(make: str, **characteristics) -> dict:
    """Helper to describe a trip with a make record from the sample tables."""
    characteristics["make"] = sample_reference_data().find_make(make)
    return characteristics


class FailingGeocoder:
    def geocode(self, address):
        raise CollaboratorError("geocoder unavailable")


# =============================================================================
# EMISSION ARITHMETIC TESTS
# =============================================================================

class TestEmissionArithmetic:
    """Test the top of the committee graph."""

    def test_carbon_is_sum_of_gases(self):
        decision = make_engine().evaluate(
            "carbon",
            {"co2_emission": 10.0, "ch4_emission": 0.1, "n2o_emission": 0.1, "hfc_emission": 1.0},
        )
        assert decision.value == pytest.approx(11.2)
        assert decision.provenance.quorum_name == (
            "from co2 emission, ch4 emission, n2o emission, and hfc emission"
        )

    def test_co2_emission(self):
        decision = make_engine().evaluate(
            "co2_emission", {"fuel_use_during_timeframe": 10.0, "co2_emission_factor": 2.5}
        )
        assert decision.value == pytest.approx(25.0)

    def test_energy(self):
        decision = make_engine().evaluate(
            "energy", {"fuel_use": 10.0, "automobile_fuel": GASOLINE}, YEAR_2010
        )
        assert decision.value == pytest.approx(350.0)


# =============================================================================
# TIME GATING TESTS
# =============================================================================

class TestTimeGating:
    """Test distance and fuel use during the timeframe."""

    TIMEFRAME = Timeframe(date(2010, 1, 10), date(2011, 1, 1))

    @pytest.mark.parametrize(
        "trip_date, expected",
        [
            (date(2009, 6, 1), 0.0),
            (date(2010, 6, 1), 100.0),
            (date(2011, 6, 1), 0.0),
        ],
    )
    def test_distance_during_timeframe(self, trip_date, expected):
        decision = make_engine().evaluate(
            "distance_during_timeframe", {"distance": 100.0, "date": trip_date}, self.TIMEFRAME
        )
        assert decision.value == expected
        assert decision.known

    def test_default_date_is_timeframe_start(self):
        decision = make_engine().evaluate(
            "distance_during_timeframe", {"distance": 100.0}, self.TIMEFRAME
        )
        assert decision.value == 100.0
        assert decision.resolution_of("date").value == date(2010, 1, 10)

    def test_trip_outside_timeframe_has_zero_carbon(self):
        decision = make_engine().evaluate(
            "carbon",
            {"distance": 100.0, "fuel_efficiency": 10.0, "date": date(2009, 6, 1)},
            YEAR_2010,
        )
        assert decision.value == 0.0
        assert decision.known


# =============================================================================
# FUEL USE TESTS
# =============================================================================

class TestFuelUse:
    """Test fuel use for liquid and non-liquid fuels."""

    def test_gasoline(self):
        decision = make_engine().evaluate(
            "fuel_use",
            {"fuel_efficiency": 10.0, "distance": 100.0, "automobile_fuel": GASOLINE},
        )
        assert decision.value == pytest.approx(10.0)

    def test_electricity(self):
        decision = make_engine().evaluate(
            "fuel_use",
            {"fuel_efficiency": 10.0, "distance": 100.0, "automobile_fuel": ELECTRICITY},
        )
        assert decision.value == pytest.approx(97.22222, rel=1e-6)

    def test_electricity_falls_back_to_grid_emission_factor(self):
        decision = make_engine().evaluate(
            "co2_emission_factor",
            {"automobile_fuel": ELECTRICITY, "country": sample_reference_data().find_country("US")},
        )
        assert decision.value == 0.59
        assert decision.provenance.quorum_name == "from country"

    def test_electricity_without_country_uses_default_grid(self):
        decision = make_engine().evaluate("co2_emission_factor", {"automobile_fuel": ELECTRICITY})
        assert decision.value == 0.62
        assert decision.provenance.quorum_name == "default"

    def test_biogenic_default_is_zero(self):
        decision = make_engine().evaluate(
            "co2_biogenic_emission_factor", {"automobile_fuel": ELECTRICITY}
        )
        assert decision.value == 0.0

    def test_non_liquid_fuel_without_energy_content(self):
        hydrogen = AutomobileFuel(code="H", name="hydrogen", unit="kg")
        characteristics = {"fuel_efficiency": 10.0, "distance": 100.0, "automobile_fuel": hydrogen}

        assert make_engine().evaluate("fuel_use", characteristics).value is ABSENT
        assert make_engine().evaluate("energy", characteristics, YEAR_2010).value is ABSENT


# =============================================================================
# GRACEFUL ABSENCE TESTS
# =============================================================================

class TestGracefulAbsence:
    """Test that reference misses degrade instead of raising."""

    def test_invalid_make_model_is_absent(self):
        decision = make_engine().evaluate("make_model", make_vehicle("Toyota", model="Leaf"))
        assert decision.value is ABSENT

    def test_unsupplied_client_characteristic_is_absent(self):
        assert make_engine().evaluate("make", {}).value is ABSENT

    def test_invalid_make_model_leaves_city_efficiency_absent(self):
        decision = make_engine().evaluate(
            "fuel_efficiency_city", make_vehicle("Toyota", model="Leaf", year=2010)
        )
        assert decision.value is ABSENT

    def test_fuel_efficiency_falls_back_to_make_year(self):
        decision = make_engine().evaluate(
            "fuel_efficiency", make_vehicle("Toyota", model="Leaf", year=2010)
        )
        assert decision.value == pytest.approx(15.2)
        assert decision.provenance.quorum_name == "from make year and hybridity multiplier"

    def test_make_without_efficiency_falls_through(self):
        decision = make_engine().evaluate(
            "fuel_efficiency",
            make_vehicle("Ford", country=sample_reference_data().find_country("US")),
        )
        assert decision.value == pytest.approx(8.9)
        assert decision.provenance.quorum_name == "from country and hybridity multiplier"

    def test_country_without_speeds_falls_through(self):
        gb = sample_reference_data().find_country("GB")
        decision = make_engine().evaluate("speed", {"country": gb})
        expected = 1.0 / (0.35 / 32.0 + 0.65 / 91.7)
        assert decision.value == pytest.approx(expected)
        assert decision.provenance.quorum_name == "from urbanity"

    def test_invalid_trip_still_has_carbon(self):
        decision = make_engine().evaluate(
            "carbon", make_vehicle("Toyota", model="Leaf"), YEAR_2010
        )
        assert decision.known
        assert decision.value > 0.0


# =============================================================================
# COMPLIANCE TESTS
# =============================================================================

class TestCompliance:
    """Test compliance filtering over the real committees."""

    def test_scope_1_never_uses_scope_3_only_distance(self):
        decision = make_engine().evaluate("distance", {}, comply=["ghg_protocol_scope_1"])
        assert decision.value is ABSENT

    def test_scope_1_carbon_uses_only_scope_1_quorums(self):
        decision = make_engine().evaluate(
            "carbon",
            {"distance": 100.0, "fuel_efficiency": 10.0, "automobile_fuel": GASOLINE},
            YEAR_2010,
            comply=["ghg_protocol_scope_1"],
        )
        assert decision.known
        for resolution in decision.trace:
            if resolution.source == ResolutionSource.QUORUM:
                assert Compliance.GHG_PROTOCOL_SCOPE_1 in resolution.complies

    def test_scope_1_carbon_value(self):
        decision = make_engine().evaluate(
            "carbon",
            {"distance": 100.0, "fuel_efficiency": 10.0, "automobile_fuel": GASOLINE},
            YEAR_2010,
            comply=["ghg_protocol_scope_1"],
        )
        # 10 l gasoline, gasoline ch4/n2o factors, 2009 activity year hfc
        expected = 10.0 * 2.31 + 100.0 * (0.00031 + 0.0038 + 0.0062)
        assert decision.value == pytest.approx(expected)

    def test_energy_has_no_compliant_method(self):
        characteristics = {"fuel_use": 10.0, "automobile_fuel": GASOLINE}
        assert make_engine().evaluate("energy", characteristics, YEAR_2010).known
        decision = make_engine().evaluate("energy", characteristics, YEAR_2010, comply=["iso"])
        assert decision.value is ABSENT

    def test_energy_is_the_only_untagged_quorum(self):
        untagged = [
            (quantity, quorum.name)
            for quantity in IMPACT_MODEL.quantities()
            for quorum in IMPACT_MODEL.get(quantity)
            if not quorum.complies
        ]
        assert untagged == [("energy", "from fuel use during timeframe and automobile fuel")]

    def test_no_quorum_claims_tcr(self):
        decision = make_engine().evaluate("carbon", {"distance": 10.0}, comply=["tcr"])
        assert decision.value is ABSENT


# =============================================================================
# END-TO-END TESTS
# =============================================================================

class TestSampleTrips:
    """Test full estimates over the sample reference data."""

    def test_prius_2010_in_us(self):
        reference = sample_reference_data()
        decision = make_engine(reference=reference).evaluate(
            "carbon",
            make_vehicle("Toyota", model="Prius", year=2010, country=reference.find_country("US")),
            YEAR_2010,
        )

        fuel_efficiency = 1.0 / (0.43 / 21.7 + 0.57 / 20.4)
        expected = 16.3 / fuel_efficiency * 2.31 + 16.3 * (0.00010 + 0.0018 + 0.0051)
        assert decision.value == pytest.approx(expected)

        assert decision.resolution_of("distance").quorum_name == "from country"
        assert decision.resolution_of("fuel_efficiency").quorum_name == (
            "from fuel efficiency city, fuel efficiency highway, and urbanity"
        )
        assert decision.resolution_of("automobile_type").value == "Passenger cars"
        assert decision.resolution_of("type_fuel_year").value.year == 2010
        assert decision.resolution_of("activity_year_type").value.year == 2009
        assert all(runs == 1 for runs in decision.committee_runs.values())

    def test_leaf_uses_make_model_fuel(self):
        reference = sample_reference_data()
        decision = make_engine(reference=reference).evaluate(
            "fuel_use",
            make_vehicle("Nissan", model="Leaf", country=reference.find_country("US")),
            YEAR_2010,
        )
        assert decision.resolution_of("automobile_fuel").value is ELECTRICITY
        fuel_efficiency = 1.0 / (0.43 / 45.0 + 0.57 / 40.0)
        assert decision.value == pytest.approx(16.3 / fuel_efficiency * 35.0 / 3.6)

    def test_alternate_fuel_efficiency(self):
        decision = make_engine().evaluate(
            "fuel_efficiency_city",
            make_vehicle("Ford", model="F150", automobile_fuel=E85),
        )
        assert decision.value == 4.7

    def test_hybrid_size_class(self):
        midsize = sample_reference_data().find_size_class("Midsize Car")
        decision = make_engine().evaluate(
            "fuel_efficiency", {"size_class": midsize, "hybridity": True}
        )
        multiplier = 1.0 / (0.43 / 1.68 + 0.57 / 1.20)
        rated = 1.0 / (0.43 / 9.6 + 0.57 / 13.6)
        assert decision.value == pytest.approx(rated * multiplier)
        assert decision.resolution_of("hybridity_multiplier").quorum_name == (
            "from size class, hybridity, and urbanity"
        )

    def test_hybrid_without_size_class_multipliers(self):
        pickup = sample_reference_data().find_size_class("Pickup Truck")
        decision = make_engine().evaluate(
            "hybridity_multiplier", {"size_class": pickup, "hybridity": True}
        )
        assert decision.provenance.quorum_name == "from hybridity and urbanity"
        assert decision.value == pytest.approx(1.0 / (0.43 / 1.68 + 0.57 / 1.20))

    def test_duration_and_speed(self):
        decision = make_engine().evaluate("distance", {"duration": 1800, "speed": 60.0})
        assert decision.value == pytest.approx(30.0)
        assert decision.provenance.quorum_name == "from duration and speed"


class TestLocations:
    """Test distance from geocoded origin and destination."""

    ORIGIN = "1600 Pennsylvania Ave NW, Washington, DC"
    DESTINATION = "Times Square, New York, NY"

    def test_distance_from_locations(self):
        engine = make_engine(geocoder=StaticGeocoder(SAMPLE_GEOCODES), router=GreatCircleRouter())
        decision = engine.evaluate("distance", {"origin": self.ORIGIN, "destination": self.DESTINATION})
        assert decision.provenance.quorum_name == "from origin and destination locations"
        assert 320.0 < decision.value < 340.0

    def test_unknown_address_falls_through(self):
        engine = make_engine(geocoder=StaticGeocoder(SAMPLE_GEOCODES), router=GreatCircleRouter())
        decision = engine.evaluate("distance", {"origin": "Nowhere", "destination": self.DESTINATION})
        assert decision.value == 16.0
        assert decision.provenance.quorum_name == "default"

    def test_geocoder_failure_falls_through(self):
        engine = make_engine(geocoder=FailingGeocoder(), router=GreatCircleRouter())
        decision = engine.evaluate("distance", {"origin": self.ORIGIN, "destination": self.DESTINATION})
        assert decision.value == 16.0

    def test_no_router_falls_through(self):
        engine = make_engine(geocoder=StaticGeocoder(SAMPLE_GEOCODES))
        decision = engine.evaluate("distance", {"origin": self.ORIGIN, "destination": self.DESTINATION})
        assert decision.provenance.quorum_name == "default"
