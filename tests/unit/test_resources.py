"""Tests for resource arithmetic."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from famand.domain.enums import ErrorKind, ResourceKind
from famand.domain.errors import IntentRejected, InvariantViolation
from famand.domain.models import Resources
from famand.domain.resources import apply_delta, ensure_non_negative, merge_deltas, pay_cost

COINS, FOOD = ResourceKind.COINS, ResourceKind.FOOD


def test_pay_cost_deducts():
    resources = Resources(coins=5, food=1)
    pay_cost(resources, {COINS: 2, FOOD: 1})
    assert (resources.coins, resources.food) == (3, 0)


def test_pay_cost_rejects_without_change():
    resources = Resources(coins=1)
    with pytest.raises(IntentRejected) as excinfo:
        pay_cost(resources, {COINS: 2})
    assert excinfo.value.kind == ErrorKind.INSUFFICIENT_RESOURCES
    assert resources.coins == 1


def test_merge_drops_zero_totals():
    assert merge_deltas([{COINS: 2, FOOD: -1}, {FOOD: 1}]) == {COINS: 2}


def test_ensure_non_negative():
    with pytest.raises(InvariantViolation):
        ensure_non_negative(Resources(food=-1))


@given(st.integers(0, 50), st.integers(-100, 100))
def test_apply_delta_never_goes_negative(start, change):
    resources = Resources(food=start)
    applied = apply_delta(resources, {FOOD: change})
    assert resources.food == max(0, start + change)
    assert applied.get(FOOD, 0) == resources.food - start
