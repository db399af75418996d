"""
Resolution Records — the audit trail of a decision.

Every quantity the engine settles during an evaluation leaves exactly one
Resolution behind, recording where its value came from.

Resolution Sources:
    CLIENT     — Value supplied by the client (complies with every standard)
    QUORUM     — Value produced by a named quorum of the quantity's committee
    UNRESOLVED — No quorum could fire; the value is ABSENT

Resolutions exist for auditing and testing. They are never fed back into
further computation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .domain import ABSENT, Compliance, is_absent


class ResolutionSource(Enum):
    """Where a resolved value came from."""
    CLIENT = "client_input"
    QUORUM = "quorum"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Resolution:
    """
    Provenance for one resolved quantity.

    Invariants:
    1. CLIENT and QUORUM resolutions carry a known value
    2. QUORUM resolutions name the quorum that fired
    3. UNRESOLVED resolutions carry ABSENT and no quorum
    """
    quantity: str
    value: Any
    source: ResolutionSource
    quorum_name: Optional[str] = None
    complies: frozenset[Compliance] = field(default_factory=frozenset)
    inputs: tuple[str, ...] = ()

    def __post_init__(self):
        if self.source == ResolutionSource.UNRESOLVED:
            if not is_absent(self.value):
                raise ValueError(f"Unresolved '{self.quantity}' cannot carry a value")
        elif is_absent(self.value):
            raise ValueError(f"Resolved '{self.quantity}' must carry a value")
        if self.source == ResolutionSource.QUORUM and not self.quorum_name:
            raise ValueError(f"Quorum resolution of '{self.quantity}' needs a quorum name")

    @property
    def known(self) -> bool:
        return self.source != ResolutionSource.UNRESOLVED

    def complies_with(self, comply: Iterable[Compliance]) -> bool:
        """
        Whether this value satisfies a compliance filter.

        Client input complies with every standard; an empty filter is
        satisfied by anything known.
        """
        if not self.known:
            return False
        if self.source == ResolutionSource.CLIENT:
            return True
        wanted = frozenset(comply)
        return not wanted or bool(self.complies & wanted)

    def describe(self) -> str:
        """One-line human-readable provenance."""
        if self.source == ResolutionSource.CLIENT:
            return f"{self.quantity} = {self.value!r} (client input)"
        if self.source == ResolutionSource.UNRESOLVED:
            return f"{self.quantity} = unknown"
        tags = ", ".join(sorted(c.value for c in self.complies)) or "none"
        return (
            f"{self.quantity} = {self.value!r} "
            f"(quorum '{self.quorum_name}'; complies: {tags})"
        )


def create_client_resolution(quantity: str, value: Any) -> Resolution:
    """Provenance for a client-supplied characteristic."""
    return Resolution(
        quantity=quantity,
        value=value,
        source=ResolutionSource.CLIENT,
        complies=frozenset(Compliance),
    )


def create_quorum_resolution(
    quantity: str,
    value: Any,
    quorum_name: str,
    complies: Iterable[Compliance],
    inputs: Iterable[str] = (),
) -> Resolution:
    """Provenance for a value produced by a quorum."""
    return Resolution(
        quantity=quantity,
        value=value,
        source=ResolutionSource.QUORUM,
        quorum_name=quorum_name,
        complies=frozenset(complies),
        inputs=tuple(inputs),
    )


def create_unresolved(quantity: str) -> Resolution:
    """Provenance for a quantity nothing could determine."""
    return Resolution(
        quantity=quantity,
        value=ABSENT,
        source=ResolutionSource.UNRESOLVED,
    )
