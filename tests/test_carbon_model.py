"""
Tests for the legacy carbon model and model selection.
"""

from datetime import date

import pytest

from autotrip.decision.engine import DecisionEngine
from autotrip.domain import ABSENT, ConfigurationError, Timeframe
from autotrip.models import DEFAULT_MODEL, DEFAULT_TARGETS, MODELS, get_model
from autotrip.models.carbon import CARBON_MODEL
from autotrip.reference.sample import SAMPLE_TABLES, sample_reference_data

YEAR_2010 = Timeframe.from_year(2010)


def make_engine() -> DecisionEngine:
    return DecisionEngine(CARBON_MODEL, reference=sample_reference_data())


class TestCarbonModel:
    """Test the per-liter model."""

    def test_emission(self):
        decision = make_engine().evaluate(
            "emission", {"fuel_use": 10.0, "emission_factor": 2.5}, YEAR_2010
        )
        assert decision.value == pytest.approx(25.0)

    def test_emission_outside_timeframe_is_zero(self):
        decision = make_engine().evaluate(
            "emission",
            {"fuel_use": 10.0, "emission_factor": 2.5, "date": date(2008, 3, 1)},
            YEAR_2010,
        )
        assert decision.value == 0.0

    def test_variant_drives_fuel_type_and_efficiency(self):
        variant = SAMPLE_TABLES.make_model_year_variants[0]
        decision = make_engine().evaluate(
            "emission", {"make_model_year_variant": variant}, YEAR_2010
        )

        fuel_efficiency = 1.0 / (0.43 / 21.7 + 0.57 / 20.4)
        assert decision.value == pytest.approx(16.33 / fuel_efficiency * 2.34)
        assert decision.resolution_of("emission_factor").quorum_name == "from fuel type"
        assert decision.resolution_of("fuel_efficiency").quorum_name == (
            "from make model year variant and urbanity"
        )

    def test_default_emission_factor(self):
        decision = make_engine().evaluate("emission_factor", {})
        assert decision.value == 2.44
        assert decision.provenance.quorum_name == "default"

    def test_duration_is_in_minutes(self):
        decision = make_engine().evaluate("distance", {"duration": 30.0, "urbanity": 1.0})
        assert decision.value == pytest.approx(16.0)
        assert decision.provenance.quorum_name == "from duration and speed"

    def test_default_distance_and_urbanity(self):
        engine = make_engine()
        assert engine.evaluate("distance", {}).value == 16.33
        assert engine.evaluate("urbanity", {}).value == 0.43

    def test_make_year_efficiency(self):
        make_year = sample_reference_data().find_make_year("Ford", 2010)
        decision = make_engine().evaluate("fuel_efficiency", {"make_year": make_year})
        assert decision.value == pytest.approx(9.1)

    def test_default_distance_is_not_scope_1(self):
        decision = make_engine().evaluate("distance", {}, comply=["ghg_protocol_scope_1"])
        assert decision.value is ABSENT

    def test_date_complies_with_tcr(self):
        decision = make_engine().evaluate("date", {}, YEAR_2010, comply=["tcr"])
        assert decision.value == date(2010, 1, 1)

    def test_emission_does_not_comply_with_tcr(self):
        decision = make_engine().evaluate(
            "emission", {"fuel_use": 10.0, "emission_factor": 2.5}, YEAR_2010, comply=["tcr"]
        )
        assert decision.value is ABSENT


class TestModelSelection:
    """Test looking models up by name."""

    def test_default_model(self):
        assert get_model().name == DEFAULT_MODEL == "impact"

    def test_lookup_is_case_insensitive(self):
        assert get_model(" Carbon ") is CARBON_MODEL

    def test_unknown_model(self):
        with pytest.raises(ConfigurationError, match="Unknown model"):
            get_model("vintage")

    def test_every_model_has_a_target_committee(self):
        for name, model in MODELS.items():
            assert model.frozen
            assert DEFAULT_TARGETS[name] in model

    def test_models_share_names_not_committees(self):
        impact, carbon = get_model("impact"), get_model("carbon")
        assert "distance" in impact and "distance" in carbon
        assert impact.get("distance") is not carbon.get("distance")
        assert "emission" not in impact
