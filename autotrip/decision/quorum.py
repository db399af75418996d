"""
Quorums and Committees.

A Quorum is one ranked method for computing a quantity. A Committee is
the ordered list of quorums for one quantity, most preferred first.

Both are plain records. Nothing here evaluates anything; the decision
engine walks committees and calls quorum compute functions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..domain import (
    ABSENT,
    Compliance,
    DuplicateQuorumError,
    RegistryFrozenError,
    UndeclaredCharacteristicError,
    is_absent,
)

if TYPE_CHECKING:
    from .engine import EvaluationContext


class AbsencePolicy(Enum):
    """
    What happens when a quorum's compute yields ABSENT.

    TERMINATE    — the quantity resolves to ABSENT, no further quorums run
    FALL_THROUGH — the quorum did not apply; try the next-preferred one
    """
    TERMINATE = "terminate"
    FALL_THROUGH = "fall_through"


Compute = Callable[["QuorumInputs", "EvaluationContext"], Any]


@dataclass(frozen=True)
class Quorum:
    """
    A single computation rule.

    A quorum with no `requires` is a default quorum. Default quorums are
    compliance-filtered exactly like every other quorum.
    """
    name: str
    compute: Compute
    requires: tuple[str, ...] = ()
    appreciates: tuple[str, ...] = ()
    complies: frozenset[Compliance] = field(default_factory=frozenset)
    on_absent: AbsencePolicy = AbsencePolicy.TERMINATE

    def __post_init__(self):
        if not self.name:
            raise ValueError("Quorum name is required")
        overlap = set(self.requires) & set(self.appreciates)
        if overlap:
            raise ValueError(
                f"Quorum '{self.name}' both requires and appreciates {sorted(overlap)}"
            )

    @property
    def is_default(self) -> bool:
        return not self.requires

    @property
    def declared(self) -> frozenset[str]:
        return frozenset(self.requires) | frozenset(self.appreciates)

    def is_eligible_under(self, comply: frozenset[Compliance]) -> bool:
        """An empty filter admits everything; otherwise tags must intersect."""
        return not comply or bool(self.complies & comply)


class QuorumInputs(Mapping[str, Any]):
    """
    The resolved characteristics handed to one quorum.

    Only names the quorum declared can be read. Appreciated names that
    could not be resolved read as ABSENT.
    """

    __slots__ = ("_quorum_name", "_values", "_declared")

    def __init__(
        self,
        quorum_name: str,
        values: Mapping[str, Any],
        declared: Iterable[str],
    ):
        self._quorum_name = quorum_name
        self._declared = frozenset(declared)
        self._values = {k: v for k, v in values.items() if not is_absent(v)}

    def __getitem__(self, name: str) -> Any:
        if name not in self._declared:
            raise UndeclaredCharacteristicError(self._quorum_name, name)
        return self._values.get(name, ABSENT)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def known(self, name: str) -> bool:
        return not is_absent(self[name])


class Committee:
    """Ordered quorums producing one named quantity."""

    def __init__(self, quantity: str, description: str = ""):
        self.quantity = quantity
        self.description = description
        self._quorums: list[Quorum] = []
        self._frozen = False

    def freeze(self) -> None:
        self._frozen = True

    def add(self, quorum: Quorum) -> Quorum:
        """Append a quorum at the lowest preference so far."""
        if self._frozen:
            raise RegistryFrozenError(f"Committee '{self.quantity}' is frozen")
        if any(q.name == quorum.name for q in self._quorums):
            raise DuplicateQuorumError(self.quantity, quorum.name)
        self._quorums.append(quorum)
        return quorum

    def __iter__(self) -> Iterator[Quorum]:
        return iter(self._quorums)

    def __len__(self) -> int:
        return len(self._quorums)

    def __getitem__(self, index: int) -> Quorum:
        return self._quorums[index]

    def quorum_named(self, name: str) -> Quorum:
        for quorum in self._quorums:
            if quorum.name == name:
                return quorum
        raise KeyError(f"Committee '{self.quantity}' has no quorum '{name}'")

    def dependencies(self) -> set[str]:
        """Every characteristic any quorum of this committee reads."""
        names: set[str] = set()
        for quorum in self._quorums:
            names.update(quorum.requires)
            names.update(quorum.appreciates)
        return names

    def __repr__(self) -> str:
        return f"Committee({self.quantity!r}, {[q.name for q in self._quorums]!r})"
