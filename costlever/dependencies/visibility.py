"""
Visibility Evaluator - decides which levers take part in a computation.

A lever is visible when every `visibleWhen` rule matches the effective
selections and the dependency resolver has not hidden it.
"""

from typing import Iterable, List

from ..coerce import strict_equals
from ..models import Condition, Selections


def condition_holds(condition: Condition, selections: Selections) -> bool:
    """
    Check a `{id, equals}` rule.

    A key missing from the selections never matches, not even `equals: null`.
    """
    if condition.id not in selections:
        return False
    return strict_equals(selections[condition.id], condition.equals)


def is_visible(lever, selections: Selections) -> bool:
    """Visible iff every visibleWhen rule holds (no rules means visible)."""
    return all(condition_holds(rule, selections) for rule in lever.visible_when)


def visible_levers(levers: Iterable, selections: Selections, hidden_ids) -> List:
    """Levers that are neither hidden by dependencies nor by their own rules."""
    return [
        lever for lever in levers
        if lever.id not in hidden_ids and is_visible(lever, selections)
    ]
