"""Resource arithmetic shared by costs, production and events."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .enums import ErrorKind, ResourceKind
from .errors import IntentRejected, InvariantViolation
from .models import ResourceMap, Resources

RESOURCE_KINDS: tuple[ResourceKind, ...] = tuple(ResourceKind)


def get_amount(resources: Resources, kind: ResourceKind) -> int:
    return getattr(resources, kind.value)


def set_amount(resources: Resources, kind: ResourceKind, value: int) -> None:
    setattr(resources, kind.value, value)


def resources_from_map(amounts: Mapping[ResourceKind, int]) -> Resources:
    """Build a counter set from a partial map, clamping at zero."""

    return Resources(**{kind.value: max(0, int(amounts.get(kind, 0))) for kind in RESOURCE_KINDS})


def can_afford(resources: Resources, cost: Mapping[ResourceKind, int]) -> bool:
    return all(get_amount(resources, kind) >= amount for kind, amount in cost.items())


def pay_cost(resources: Resources, cost: Mapping[ResourceKind, int]) -> None:
    """Deduct a cost in place or raise ``IntentRejected``."""

    if not can_afford(resources, cost):
        missing = {
            kind.value: amount - get_amount(resources, kind)
            for kind, amount in cost.items()
            if get_amount(resources, kind) < amount
        }
        raise IntentRejected(ErrorKind.INSUFFICIENT_RESOURCES, f"missing {missing}")
    for kind, amount in cost.items():
        set_amount(resources, kind, get_amount(resources, kind) - amount)
    ensure_non_negative(resources)


def apply_delta(resources: Resources, delta: Mapping[ResourceKind, int]) -> ResourceMap:
    """Apply a delta in place, clamping each counter at zero.

    Returns the change actually applied, which differs from ``delta`` when a
    counter hit the floor.
    """

    applied: ResourceMap = {}
    for kind, amount in delta.items():
        if not amount:
            continue
        before = get_amount(resources, kind)
        after = max(0, before + amount)
        set_amount(resources, kind, after)
        if after != before:
            applied[kind] = after - before
    ensure_non_negative(resources)
    return applied


def merge_deltas(deltas: Iterable[Mapping[ResourceKind, int]]) -> ResourceMap:
    merged: ResourceMap = {}
    for delta in deltas:
        for kind, amount in delta.items():
            merged[kind] = merged.get(kind, 0) + amount
    return {kind: amount for kind, amount in merged.items() if amount}


def ensure_non_negative(resources: Resources) -> None:
    for kind in RESOURCE_KINDS:
        if get_amount(resources, kind) < 0:
            raise InvariantViolation(f"{kind.value} went negative")
