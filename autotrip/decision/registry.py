"""
Committee/Quorum Registry.

Holds, per quantity name, the ordered committee of quorums for one model.
Registration happens once at import time; `freeze()` validates the
dependency graph and makes the registry read-only, after which it can be
shared by any number of concurrent evaluations.

Usage:
    registry = Registry("impact")

    @registry.quorum("carbon", "from co2 and ch4", requires=("co2", "ch4"),
                     complies=SCOPE_1_3_ISO)
    def carbon_from_gases(c, context):
        return c["co2"] + c["ch4"]

    IMPACT_MODEL = registry.freeze()
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Optional

import structlog

from ..domain import (
    Compliance,
    CyclicDependencyError,
    RegistryFrozenError,
)
from .quorum import AbsencePolicy, Committee, Compute, Quorum

logger = structlog.get_logger(__name__)


class Registry:
    """Committees for one model, keyed by quantity name."""

    def __init__(self, name: str, characteristics: Iterable[str] = ()):
        self.name = name
        self._committees: dict[str, Committee] = {}
        # Client-only characteristics: known to the model, no committee.
        self._characteristics: set[str] = set(characteristics)
        self._frozen = False

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"Registry '{self.name}' is frozen")

    def characteristic(self, *names: str) -> None:
        """Declare client-only characteristics (no committee)."""
        self._check_mutable()
        self._characteristics.update(names)

    def committee(self, quantity: str, description: str = "") -> Committee:
        """Get or create the committee for `quantity`."""
        existing = self._committees.get(quantity)
        if existing is not None:
            if description and not existing.description:
                self._check_mutable()
                existing.description = description
            return existing
        self._check_mutable()
        created = Committee(quantity, description)
        self._committees[quantity] = created
        return created

    def register(self, quantity: str, quorum: Quorum) -> Quorum:
        """Append `quorum` to the committee for `quantity`."""
        self._check_mutable()
        return self.committee(quantity).add(quorum)

    def quorum(
        self,
        quantity: str,
        name: str,
        *,
        requires: Iterable[str] = (),
        appreciates: Iterable[str] = (),
        complies: Iterable[Compliance] = (),
        on_absent: AbsencePolicy = AbsencePolicy.TERMINATE,
    ) -> Callable[[Compute], Compute]:
        """Decorator form of `register`. Returns the function unchanged."""
        def decorator(compute: Compute) -> Compute:
            self.register(
                quantity,
                Quorum(
                    name=name,
                    compute=compute,
                    requires=tuple(requires),
                    appreciates=tuple(appreciates),
                    complies=frozenset(complies),
                    on_absent=on_absent,
                ),
            )
            return compute
        return decorator

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Check that committees form a DAG.

        Raises CyclicDependencyError naming the first cycle found.
        """
        WHITE, GREY, BLACK = 0, 1, 2
        state: dict[str, int] = {}
        path: list[str] = []

        def visit(quantity: str) -> None:
            state[quantity] = GREY
            path.append(quantity)
            for dependency in sorted(self._committees[quantity].dependencies()):
                if dependency not in self._committees:
                    continue
                mark = state.get(dependency, WHITE)
                if mark == GREY:
                    start = path.index(dependency)
                    raise CyclicDependencyError(path[start:] + [dependency])
                if mark == WHITE:
                    visit(dependency)
            path.pop()
            state[quantity] = BLACK

        for quantity in self._committees:
            if state.get(quantity, WHITE) == WHITE:
                visit(quantity)

    def freeze(self) -> Registry:
        """Validate and make read-only. Returns self."""
        if not self._frozen:
            self.validate()
            for committee in self._committees.values():
                committee.freeze()
            self._frozen = True
            logger.debug(
                "registry_frozen",
                registry=self.name,
                committees=len(self._committees),
                quorums=sum(len(c) for c in self._committees.values()),
            )
        return self

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, quantity: str) -> Optional[Committee]:
        return self._committees.get(quantity)

    def __contains__(self, quantity: str) -> bool:
        return quantity in self._committees

    def quantities(self) -> list[str]:
        """Committee quantities in registration order."""
        return list(self._committees)

    def characteristics(self) -> set[str]:
        """Every name this model understands, computed or client-only."""
        names = set(self._characteristics) | set(self._committees)
        for committee in self._committees.values():
            names.update(committee.dependencies())
        return names

    def knows(self, name: str) -> bool:
        return name in self.characteristics()

    def __repr__(self) -> str:
        return f"Registry({self.name!r}, committees={len(self._committees)})"
