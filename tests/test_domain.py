"""
Tests for the core domain objects.

These tests verify:
1. ABSENT is a falsy singleton distinct from None and zero
2. Timeframes are half-open and parse both accepted forms
3. Compliance filters parse, reject unknown standards, and may be empty
4. The characteristic store is immutable and drops absent values
5. Resolution records enforce their invariants
"""

import pickle
from datetime import date

import pytest

from autotrip.domain import (
    ABSENT,
    CharacteristicStore,
    Compliance,
    Timeframe,
    compliance_filter,
    is_absent,
)
from autotrip.provenance import (
    Resolution,
    ResolutionSource,
    create_client_resolution,
    create_quorum_resolution,
    create_unresolved,
)


# =============================================================================
# ABSENCE TESTS
# =============================================================================

class TestAbsent:
    """Test the absent sentinel."""

    def test_absent_is_falsy(self):
        assert not ABSENT

    def test_absent_is_not_zero(self):
        assert ABSENT != 0
        assert not is_absent(0)
        assert not is_absent(0.0)

    def test_none_counts_as_absent(self):
        assert is_absent(None)
        assert is_absent(ABSENT)

    def test_absent_survives_pickling(self):
        assert pickle.loads(pickle.dumps(ABSENT)) is ABSENT

    def test_repr(self):
        assert repr(ABSENT) == "ABSENT"


# =============================================================================
# TIMEFRAME TESTS
# =============================================================================

class TestTimeframe:
    """Test the half-open date window."""

    def test_start_is_inside(self):
        timeframe = Timeframe(date(2010, 1, 10), date(2011, 1, 1))
        assert timeframe.contains(date(2010, 1, 10))

    def test_end_is_outside(self):
        timeframe = Timeframe(date(2010, 1, 10), date(2011, 1, 1))
        assert date(2011, 1, 1) not in timeframe
        assert date(2010, 12, 31) in timeframe

    def test_empty_timeframe_rejected(self):
        with pytest.raises(ValueError):
            Timeframe(date(2010, 1, 1), date(2010, 1, 1))

    def test_from_year(self):
        timeframe = Timeframe.from_year(2010)
        assert timeframe.from_ == date(2010, 1, 1)
        assert timeframe.until == date(2011, 1, 1)
        assert timeframe.days == 365

    def test_this_year(self):
        timeframe = Timeframe.this_year(today=date(2012, 7, 4))
        assert timeframe == Timeframe.from_year(2012)

    def test_parse_year(self):
        assert Timeframe.parse("2010") == Timeframe.from_year(2010)

    def test_parse_interval(self):
        timeframe = Timeframe.parse("2010-01-10/2011-01-01")
        assert timeframe.from_ == date(2010, 1, 10)
        assert timeframe.until == date(2011, 1, 1)

    def test_str_round_trips_through_parse(self):
        timeframe = Timeframe(date(2010, 1, 10), date(2011, 1, 1))
        assert str(timeframe) == "2010-01-10/2011-01-01"
        assert Timeframe.parse(str(timeframe)) == timeframe

    def test_parse_garbage(self):
        with pytest.raises(ValueError):
            Timeframe.parse("last year")


# =============================================================================
# COMPLIANCE TESTS
# =============================================================================

class TestCompliance:
    """Test compliance parsing and filters."""

    def test_parse_by_value(self):
        assert Compliance.parse("ghg_protocol_scope_1") == Compliance.GHG_PROTOCOL_SCOPE_1
        assert Compliance.parse(" ISO ") == Compliance.ISO

    def test_parse_enum_passthrough(self):
        assert Compliance.parse(Compliance.TCR) is Compliance.TCR

    def test_unknown_standard(self):
        with pytest.raises(ValueError, match="Unknown compliance standard"):
            Compliance.parse("scope_2")

    def test_empty_filter(self):
        assert compliance_filter() == frozenset()

    def test_filter_deduplicates(self):
        assert compliance_filter(["iso", Compliance.ISO]) == frozenset({Compliance.ISO})


# =============================================================================
# CHARACTERISTIC STORE TESTS
# =============================================================================

class TestCharacteristicStore:
    """Test the client characteristic store."""

    def test_absent_values_dropped(self):
        store = CharacteristicStore({"distance": 10.0, "speed": None, "urbanity": ABSENT})
        assert "distance" in store
        assert "speed" not in store
        assert "urbanity" not in store
        assert len(store) == 1

    def test_zero_is_kept(self):
        store = CharacteristicStore(distance=0.0)
        assert store["distance"] == 0.0

    def test_value_of_missing_is_absent(self):
        assert CharacteristicStore().value("distance") is ABSENT

    def test_store_is_read_only(self):
        store = CharacteristicStore(distance=10.0)
        with pytest.raises(TypeError):
            store["distance"] = 20.0

    def test_with_values_returns_new_store(self):
        store = CharacteristicStore(distance=10.0)
        extended = store.with_values(speed=50.0)
        assert "speed" not in store
        assert extended["speed"] == 50.0
        assert extended["distance"] == 10.0


# =============================================================================
# RESOLUTION TESTS
# =============================================================================

class TestResolution:
    """Test provenance records."""

    def test_client_resolution_complies_with_everything(self):
        resolution = create_client_resolution("distance", 10.0)
        assert resolution.source == ResolutionSource.CLIENT
        assert resolution.complies_with({Compliance.TCR})
        assert resolution.complies_with({Compliance.GHG_PROTOCOL_SCOPE_1})

    def test_quorum_resolution_checks_tags(self):
        resolution = create_quorum_resolution(
            "distance", 10.0, "default", {Compliance.GHG_PROTOCOL_SCOPE_3}
        )
        assert resolution.complies_with({Compliance.GHG_PROTOCOL_SCOPE_3, Compliance.ISO})
        assert not resolution.complies_with({Compliance.GHG_PROTOCOL_SCOPE_1})
        assert resolution.complies_with(set())

    def test_unresolved_is_unknown(self):
        resolution = create_unresolved("distance")
        assert resolution.value is ABSENT
        assert not resolution.known
        assert not resolution.complies_with(set())
        assert resolution.describe() == "distance = unknown"

    def test_unresolved_cannot_carry_value(self):
        with pytest.raises(ValueError):
            Resolution("distance", 10.0, ResolutionSource.UNRESOLVED)

    def test_resolved_needs_value(self):
        with pytest.raises(ValueError):
            Resolution("distance", ABSENT, ResolutionSource.CLIENT)

    def test_quorum_resolution_needs_name(self):
        with pytest.raises(ValueError):
            Resolution("distance", 10.0, ResolutionSource.QUORUM)

    def test_describe_names_quorum(self):
        resolution = create_quorum_resolution("distance", 10.0, "from country", {Compliance.ISO})
        assert "from country" in resolution.describe()
        assert "iso" in resolution.describe()
