"""
Core Domain Objects for the autotrip engine.

Everything the decision engine reasons about is built from these pieces.

Domain Objects:
    ABSENT              — The "cannot be determined" value
    Compliance          — Calculation standards a quorum may claim
    CharacteristicStore — Immutable client-supplied facts about one trip
    Timeframe           — Half-open date window emissions are measured over

Absence is a first-class value. It is not None, not zero, and never an
error: anything computed from an absent characteristic is itself absent.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional


# =============================================================================
# ABSENCE
# =============================================================================

class _Absent:
    """Singleton marking a characteristic that could not be determined."""

    _instance: Optional[_Absent] = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()


def is_absent(value: Any) -> bool:
    """True for ABSENT and for None (a compute that returned nothing)."""
    return value is ABSENT or value is None


# =============================================================================
# ERRORS
# =============================================================================

class AutotripError(Exception):
    """Base class for every error raised by the engine."""
    pass


class ConfigurationError(AutotripError):
    """
    A malformed committee/quorum configuration.

    Configuration errors are fatal: evaluation aborts immediately and no
    partial result is returned. They are never retried.
    """
    pass


class CyclicDependencyError(ConfigurationError):
    """A quantity (transitively) requires itself."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Cyclic dependency: {' -> '.join(cycle)}")


class DuplicateQuorumError(ConfigurationError):
    """Two quorums in one committee share a name."""

    def __init__(self, quantity: str, quorum_name: str):
        self.quantity = quantity
        self.quorum_name = quorum_name
        super().__init__(
            f"Committee '{quantity}' already has a quorum named '{quorum_name}'"
        )


class RegistryFrozenError(ConfigurationError):
    """Registration attempted after the registry was frozen."""
    pass


class UnknownQuantityError(ConfigurationError):
    """A quantity that neither the model nor the client knows about."""
    pass


class UndeclaredCharacteristicError(ConfigurationError):
    """A quorum read a characteristic it did not declare."""

    def __init__(self, quorum_name: str, characteristic: str):
        self.quorum_name = quorum_name
        self.characteristic = characteristic
        super().__init__(
            f"Quorum '{quorum_name}' read undeclared characteristic '{characteristic}'"
        )


class QuorumComputeError(ConfigurationError):
    """A quorum's compute function raised."""

    def __init__(self, quantity: str, quorum_name: str, cause: BaseException):
        self.quantity = quantity
        self.quorum_name = quorum_name
        self.cause = cause
        super().__init__(
            f"Quorum '{quorum_name}' of committee '{quantity}' failed: {cause!r}"
        )


class CollaboratorError(AutotripError):
    """
    An external collaborator (geocoder, router, reference lookup) failed.

    Not fatal. The engine treats the quorum as absent and moves on to the
    next-preferred quorum.
    """
    pass


class CharacterizationError(AutotripError):
    """Client input names an unknown characteristic or cannot be parsed."""
    pass


# =============================================================================
# COMPLIANCE
# =============================================================================

class Compliance(Enum):
    """Calculation standards a quorum may comply with."""
    GHG_PROTOCOL_SCOPE_1 = "ghg_protocol_scope_1"
    GHG_PROTOCOL_SCOPE_3 = "ghg_protocol_scope_3"
    ISO = "iso"
    TCR = "tcr"

    @classmethod
    def parse(cls, value: str | Compliance) -> Compliance:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown compliance standard '{value}' (valid: {valid})") from None


def compliance_filter(values: Iterable[str | Compliance] = ()) -> frozenset[Compliance]:
    """Build a compliance filter. Empty means "no restriction"."""
    return frozenset(Compliance.parse(v) for v in values)


# =============================================================================
# TIMEFRAME
# =============================================================================

@dataclass(frozen=True)
class Timeframe:
    """
    Half-open date interval [from_, until).

    A trip dated on `until` falls outside the timeframe.
    """
    from_: date
    until: date

    def __post_init__(self):
        if not self.from_ < self.until:
            raise ValueError(
                f"Timeframe must start before it ends ({self.from_} >= {self.until})"
            )

    def contains(self, day: date) -> bool:
        return self.from_ <= day < self.until

    __contains__ = contains

    @property
    def days(self) -> int:
        return (self.until - self.from_).days

    @classmethod
    def from_year(cls, year: int) -> Timeframe:
        """The calendar year `year`."""
        return cls(date(year, 1, 1), date(year + 1, 1, 1))

    @classmethod
    def this_year(cls, today: Optional[date] = None) -> Timeframe:
        """The default timeframe: the current calendar year."""
        if today is None:
            today = date.today()
        return cls.from_year(today.year)

    @classmethod
    def parse(cls, text: str) -> Timeframe:
        """
        Parse "YYYY" or "YYYY-MM-DD/YYYY-MM-DD".

        Raises ValueError on anything else.
        """
        text = text.strip()
        if "/" in text:
            start, end = text.split("/", 1)
            return cls(date.fromisoformat(start.strip()), date.fromisoformat(end.strip()))
        if text.isdigit() and len(text) == 4:
            return cls.from_year(int(text))
        raise ValueError(f"Unrecognized timeframe '{text}'")

    def __str__(self) -> str:
        return f"{self.from_.isoformat()}/{self.until.isoformat()}"


# =============================================================================
# CHARACTERISTIC STORE
# =============================================================================

class CharacteristicStore(Mapping[str, Any]):
    """
    Client-supplied characteristics for one trip.

    Immutable for the lifetime of an evaluation. Keys whose value is
    ABSENT or None are dropped at construction, so membership means
    "the client actually told us this".
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        merged = dict(values or {})
        merged.update(kwargs)
        self._values: dict[str, Any] = {
            name: value for name, value in merged.items() if not is_absent(value)
        }

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def value(self, name: str) -> Any:
        """The client value for `name`, or ABSENT."""
        return self._values.get(name, ABSENT)

    def with_values(self, **kwargs: Any) -> CharacteristicStore:
        """A new store with extra or replaced characteristics."""
        return CharacteristicStore(self._values, **kwargs)

    def __repr__(self) -> str:
        return f"CharacteristicStore({self._values!r})"
