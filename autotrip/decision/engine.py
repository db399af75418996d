"""
Decision Engine — recursive, memoized, most-preferred-first resolution.

Resolution of a quantity:
    1. Client input wins (and complies with every standard)
    2. A memoized result is returned as-is (including a memoized ABSENT)
    3. Otherwise the committee runs, once, in preference order:
         - quorums whose compliance tags miss a non-empty filter are skipped
         - required inputs are resolved recursively; any ABSENT skips the quorum
         - appreciated inputs are resolved; ABSENT is passed through
         - compute runs; an ABSENT result terminates or falls through
           according to the quorum's absence policy
    4. If nothing fires, ABSENT is memoized

Failure model:
    Configuration errors (cycles, undeclared reads, a compute that raises)
    abort the evaluation. A CollaboratorError raised from compute is normal
    degradation: the quorum counts as absent and the next one is tried.

An Evaluation owns its memo table and is discarded afterwards. The
DecisionEngine holds only read-only state and may be shared.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import structlog

from ..domain import (
    ABSENT,
    CharacteristicStore,
    CollaboratorError,
    Compliance,
    ConfigurationError,
    CyclicDependencyError,
    QuorumComputeError,
    Timeframe,
    UnknownQuantityError,
    compliance_filter,
    is_absent,
)
from ..provenance import (
    Resolution,
    create_client_resolution,
    create_quorum_resolution,
    create_unresolved,
)
from .quorum import AbsencePolicy, Committee, QuorumInputs
from .registry import Registry

if TYPE_CHECKING:
    from ..geo import Geocoder, Router
    from ..reference.defaults import DefaultData
    from ..reference.lookup import ReferenceData

logger = structlog.get_logger(__name__)


# =============================================================================
# EVALUATION CONTEXT
# =============================================================================

@dataclass(frozen=True)
class EvaluationContext:
    """
    Everything a quorum may consult besides its declared inputs.

    Collaborators are injected here rather than reached through globals.
    """
    timeframe: Timeframe
    comply: frozenset[Compliance]
    reference: ReferenceData
    defaults: DefaultData
    geocoder: Optional[Geocoder] = None
    router: Optional[Router] = None


# =============================================================================
# DECISION
# =============================================================================

@dataclass(frozen=True)
class Decision:
    """
    Result of evaluating one target quantity.

    Exposes:
    - The value (or ABSENT) and its provenance
    - Every resolution settled along the way, in settlement order
    - How many times each committee ran (never more than once)
    """
    target: str
    provenance: Resolution
    timeframe: Timeframe
    comply: frozenset[Compliance] = field(default_factory=frozenset)
    trace: tuple[Resolution, ...] = ()
    committee_runs: Mapping[str, int] = field(default_factory=dict)

    @property
    def value(self) -> Any:
        return self.provenance.value

    @property
    def known(self) -> bool:
        return self.provenance.known

    def resolution_of(self, quantity: str) -> Optional[Resolution]:
        for resolution in self.trace:
            if resolution.quantity == quantity:
                return resolution
        return None

    def explain(self) -> str:
        """
        Plain-text account of how the target was reached.

        Dependencies appear before the quantities that used them.
        """
        tags = ", ".join(sorted(c.value for c in self.comply)) or "any"
        lines = [
            f"{self.target}: {self.value!r}",
            f"Timeframe: {self.timeframe}",
            f"Compliance: {tags}",
            "",
            "Resolution trace:",
        ]
        for resolution in self.trace:
            lines.append(f"  - {resolution.describe()}")
        return "\n".join(lines)


@dataclass(frozen=True)
class Report:
    """Every committee of a model, resolved in one evaluation."""
    model: str
    timeframe: Timeframe
    comply: frozenset[Compliance]
    resolutions: Mapping[str, Resolution]

    def value(self, quantity: str) -> Any:
        resolution = self.resolutions.get(quantity)
        return resolution.value if resolution else ABSENT

    def known_values(self) -> dict[str, Any]:
        return {
            name: r.value for name, r in self.resolutions.items() if r.known
        }


# =============================================================================
# EVALUATION (one trip, one memo table)
# =============================================================================

class Evaluation:
    """
    A single evaluation: characteristics + context + memo table.

    Single-threaded. Create one per trip and throw it away afterwards.
    """

    def __init__(
        self,
        model: Registry,
        characteristics: CharacteristicStore,
        context: EvaluationContext,
    ):
        self.model = model
        self.characteristics = characteristics
        self.context = context
        self._memo: dict[str, Resolution] = {}
        self._trace: list[Resolution] = []
        self._stack: list[str] = []
        self.committee_runs: Counter[str] = Counter()

    @property
    def trace(self) -> tuple[Resolution, ...]:
        return tuple(self._trace)

    def _settle(self, resolution: Resolution) -> Resolution:
        self._memo[resolution.quantity] = resolution
        self._trace.append(resolution)
        return resolution

    def resolve(self, quantity: str) -> Resolution:
        """Resolve `quantity`, consulting client input, memo, then committee."""
        memoized = self._memo.get(quantity)
        if memoized is not None:
            return memoized

        client_value = self.characteristics.value(quantity)
        if not is_absent(client_value):
            return self._settle(create_client_resolution(quantity, client_value))

        committee = self.model.get(quantity)
        if committee is None:
            return self._settle(create_unresolved(quantity))

        if quantity in self._stack:
            start = self._stack.index(quantity)
            raise CyclicDependencyError(self._stack[start:] + [quantity])

        self._stack.append(quantity)
        try:
            resolution = self._run_committee(committee)
        finally:
            self._stack.pop()
        return self._settle(resolution)

    def _run_committee(self, committee: Committee) -> Resolution:
        quantity = committee.quantity
        comply = self.context.comply
        self.committee_runs[quantity] += 1

        for quorum in committee:
            if not quorum.is_eligible_under(comply):
                logger.debug(
                    "quorum_skipped",
                    quantity=quantity,
                    quorum=quorum.name,
                    reason="noncompliant",
                )
                continue

            values: dict[str, Any] = {}
            missing: Optional[str] = None
            for name in quorum.requires:
                resolution = self.resolve(name)
                if not resolution.known:
                    missing = name
                    break
                values[name] = resolution.value
            if missing is not None:
                logger.debug(
                    "quorum_skipped",
                    quantity=quantity,
                    quorum=quorum.name,
                    reason="missing_requirement",
                    requirement=missing,
                )
                continue

            for name in quorum.appreciates:
                values[name] = self.resolve(name).value

            inputs = QuorumInputs(quorum.name, values, quorum.declared)
            try:
                value = quorum.compute(inputs, self.context)
            except CollaboratorError as exc:
                logger.warning(
                    "collaborator_failed",
                    quantity=quantity,
                    quorum=quorum.name,
                    error=str(exc),
                )
                continue
            except ConfigurationError:
                raise
            except Exception as exc:
                raise QuorumComputeError(quantity, quorum.name, exc) from exc

            if is_absent(value):
                if quorum.on_absent == AbsencePolicy.FALL_THROUGH:
                    logger.debug(
                        "quorum_skipped",
                        quantity=quantity,
                        quorum=quorum.name,
                        reason="not_applicable",
                    )
                    continue
                logger.debug("quorum_terminated", quantity=quantity, quorum=quorum.name)
                return create_unresolved(quantity)

            logger.debug("quorum_selected", quantity=quantity, quorum=quorum.name)
            return create_quorum_resolution(
                quantity,
                value,
                quorum.name,
                quorum.complies,
                inputs=[n for n in quorum.requires + quorum.appreciates if n in inputs],
            )

        return create_unresolved(quantity)


# =============================================================================
# ENGINE
# =============================================================================

class DecisionEngine:
    """
    Evaluates trips against one model.

    Holds the frozen registry and the injected collaborators. Each call
    to `evaluate` or `decide` builds a fresh Evaluation.
    """

    def __init__(
        self,
        model: Registry,
        reference: Optional[ReferenceData] = None,
        defaults: Optional[DefaultData] = None,
        geocoder: Optional[Geocoder] = None,
        router: Optional[Router] = None,
    ):
        from ..reference.defaults import WORLD_DEFAULTS
        from ..reference.lookup import InMemoryReferenceData

        self.model = model.freeze()
        self.reference = reference if reference is not None else InMemoryReferenceData()
        self.defaults = defaults if defaults is not None else WORLD_DEFAULTS
        self.geocoder = geocoder
        self.router = router

    def _context(
        self,
        timeframe: Optional[Timeframe],
        comply: Iterable[str | Compliance],
    ) -> EvaluationContext:
        return EvaluationContext(
            timeframe=timeframe if timeframe is not None else Timeframe.this_year(),
            comply=compliance_filter(comply),
            reference=self.reference,
            defaults=self.defaults,
            geocoder=self.geocoder,
            router=self.router,
        )

    def begin(
        self,
        characteristics: Mapping[str, Any] | CharacteristicStore,
        timeframe: Optional[Timeframe] = None,
        comply: Iterable[str | Compliance] = (),
    ) -> Evaluation:
        """Start an evaluation without resolving anything yet."""
        if not isinstance(characteristics, CharacteristicStore):
            characteristics = CharacteristicStore(characteristics)
        return Evaluation(self.model, characteristics, self._context(timeframe, comply))

    def evaluate(
        self,
        target: str,
        characteristics: Mapping[str, Any] | CharacteristicStore,
        timeframe: Optional[Timeframe] = None,
        comply: Iterable[str | Compliance] = (),
    ) -> Decision:
        """Resolve one target quantity and report how it was reached."""
        evaluation = self.begin(characteristics, timeframe, comply)
        if not self.model.knows(target) and target not in evaluation.characteristics:
            raise UnknownQuantityError(
                f"Model '{self.model.name}' has no characteristic named '{target}'"
            )

        resolution = evaluation.resolve(target)
        logger.info(
            "evaluation_complete",
            model=self.model.name,
            target=target,
            known=resolution.known,
            quorum=resolution.quorum_name,
        )
        return Decision(
            target=target,
            provenance=resolution,
            timeframe=evaluation.context.timeframe,
            comply=evaluation.context.comply,
            trace=evaluation.trace,
            committee_runs=dict(evaluation.committee_runs),
        )

    def decide(
        self,
        characteristics: Mapping[str, Any] | CharacteristicStore,
        timeframe: Optional[Timeframe] = None,
        comply: Iterable[str | Compliance] = (),
    ) -> Report:
        """Resolve every committee of the model in a single evaluation."""
        evaluation = self.begin(characteristics, timeframe, comply)
        resolutions = {
            quantity: evaluation.resolve(quantity)
            for quantity in self.model.quantities()
        }
        logger.info(
            "decision_complete",
            model=self.model.name,
            resolved=sum(1 for r in resolutions.values() if r.known),
            unresolved=sum(1 for r in resolutions.values() if not r.known),
        )
        return Report(
            model=self.model.name,
            timeframe=evaluation.context.timeframe,
            comply=evaluation.context.comply,
            resolutions=resolutions,
        )


def evaluate(
    target: str,
    characteristics: Mapping[str, Any] | CharacteristicStore,
    timeframe: Optional[Timeframe] = None,
    comply: Iterable[str | Compliance] = (),
    model: Optional[Registry] = None,
    **collaborators: Any,
) -> tuple[Any, Resolution]:
    """
    Engine entry point: `(value or ABSENT, provenance)` for one target.

    `model` defaults to the impact model. Collaborators (reference,
    defaults, geocoder, router) are passed through to DecisionEngine.
    """
    if model is None:
        from ..models import get_model
        model = get_model("impact")
    decision = DecisionEngine(model, **collaborators).evaluate(
        target, characteristics, timeframe, comply
    )
    return decision.value, decision.provenance
