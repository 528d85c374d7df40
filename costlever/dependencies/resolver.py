"""
Dependency Resolver

Expands raw selections into effective selections plus a set of hidden lever
ids by applying the configured dependency rules until nothing changes.

Iteration is capped at MAX_PASSES. Cyclic or contradictory rule sets stop at
the cap with whatever state the last pass produced, so their output depends
on the cap. This is reported as an anomaly and a warning, never raised.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..coerce import strict_equals
from ..models import Anomaly, AnomalyCode, EstimatorConfig, Selections, record_anomaly
from .visibility import condition_holds

logger = logging.getLogger(__name__)

MAX_PASSES = 6


@dataclass
class ResolvedSelections:
    """Effective selections after dependency resolution."""
    selections: Selections
    hidden_ids: Set[str] = field(default_factory=set)
    passes: int = 0
    converged: bool = True


def resolve(
    config: EstimatorConfig,
    selections: Selections,
    anomalies: Optional[List[Anomaly]] = None,
) -> ResolvedSelections:
    """
    Run dependency rules to a fixed point.

    Each pass forces every `adjust` of every matching rule; a pass that
    forces nothing ends the loop. Hidden ids are taken from the rules that
    match the final selections, so resolving an already resolved map
    yields the same result.

    Args:
        config: Estimator configuration
        selections: Raw (default-seeded) selections, not modified

    Returns:
        ResolvedSelections
    """
    working = dict(selections)
    passes = 0
    converged = False

    for _ in range(MAX_PASSES):
        passes += 1
        changed = False

        for dep in config.dependencies:
            if not condition_holds(dep.when, working):
                continue
            for adj in dep.then.adjust:
                if adj.id in working and strict_equals(working[adj.id], adj.value):
                    continue
                working[adj.id] = copy.deepcopy(adj.value)
                changed = True

        if not changed:
            converged = True
            break

    if not converged:
        logger.warning(
            f"Dependency rules did not converge after {MAX_PASSES} passes; "
            f"using the state of the last pass"
        )
        record_anomaly(
            anomalies,
            AnomalyCode.DEPENDENCY_CAP_REACHED,
            f"dependency resolution stopped at the {MAX_PASSES}-pass cap without converging",
        )

    # Hidden ids come from the final map only, not a union over passes,
    # so re-resolving a resolved map yields the same set.
    hidden: Set[str] = set()
    shown: Set[str] = set()
    for dep in config.dependencies:
        if condition_holds(dep.when, working):
            hidden.update(dep.then.hide)
            shown.update(dep.then.show)

    return ResolvedSelections(
        selections=working,
        hidden_ids=hidden - shown,
        passes=passes,
        converged=converged,
    )
