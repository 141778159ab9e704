"""Selector resolution: the ordered list of ways to find an element."""

from __future__ import annotations

from uia_locators.constants import IMPLICIT_SELECTOR_PRIORITIES
from uia_locators.core.models import LocatorDescriptor, Strategy

# Strategy types rendered as ``type="value"`` by best_selector().
_PROPERTY_TYPES = ("automationId", "name", "className", "controlType")


def implicit_selectors(descriptor: LocatorDescriptor) -> list[Strategy]:
    """Selectors derived from the non-empty identity attributes."""
    return [
        Strategy(type=kind, value=getattr(descriptor, fld), priority=priority)
        for kind, fld, priority in IMPLICIT_SELECTOR_PRIORITIES
        if getattr(descriptor, fld)
    ]


def resolve_selectors(descriptor: LocatorDescriptor) -> list[Strategy]:
    """Implicit selectors followed by explicit strategies, sorted by priority.

    ``sorted`` is stable, so equal priorities keep concatenation order:
    implicit selectors first, then strategies in declaration order.
    """
    combined = implicit_selectors(descriptor) + [s.model_copy() for s in descriptor.strategies]
    return sorted(combined, key=lambda s: s.priority)


def render_selector(strategy: Strategy) -> str | None:
    if strategy.type in _PROPERTY_TYPES:
        return f'{strategy.type}="{strategy.value}"'
    if strategy.type == "xpath":
        return strategy.value
    return None


def best_selector(descriptor: LocatorDescriptor) -> str:
    """Single selector string for test scripts.

    The highest-priority explicit strategy wins when there is one; otherwise
    the first non-empty identity attribute. Falls back to the full name.
    """
    if descriptor.strategies:
        best = min(descriptor.strategies, key=lambda s: s.priority)
        return render_selector(best) or descriptor.full_name

    implicit = implicit_selectors(descriptor)
    if implicit:
        return render_selector(implicit[0]) or descriptor.full_name
    return descriptor.full_name
