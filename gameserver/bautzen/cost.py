"""
Movement cost algebra.

A cost is a chain of steps (Half, One, Two, weighing 1/2, 1 and 2 movement points) ending at Zero, or the
absorbing Impossible. Keeping the chain (instead of a plain number) keeps track of what each step was paid for,
while costs can still be totalled and compared.

Laws:
* combine is associative, Zero is its identity and Impossible absorbs anything combined with it
* costs are ordered by the total weight of their steps, Impossible above every finite cost
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import ClassVar, Iterable


class Cost:
    """Base of the closed set of cost values: Impossible, Zero, Half, One, Two."""

    @property
    def is_impossible(self) -> bool:
        return isinstance(self, Impossible)

    @property
    def total(self) -> Fraction | float:
        """Accumulated movement points. Exact for finite costs, infinity for Impossible."""
        terminus, steps = _unwind(self)
        if terminus.is_impossible:
            return math.inf
        return sum((step.WEIGHT for step in steps), Fraction(0))

    def steps(self) -> tuple[Step, ...]:
        """The steps of the chain, outermost first."""
        return _unwind(self)[1]

    def __add__(self, other: Cost) -> Cost:
        return combine(self, other)

    def __lt__(self, other: Cost) -> bool:
        return compare(self, other) < 0

    def __le__(self, other: Cost) -> bool:
        return compare(self, other) <= 0

    def __gt__(self, other: Cost) -> bool:
        return compare(self, other) > 0

    def __ge__(self, other: Cost) -> bool:
        return compare(self, other) >= 0


@dataclass(frozen=True)
class Impossible(Cost):
    pass


@dataclass(frozen=True)
class Zero(Cost):
    pass


IMPOSSIBLE = Impossible()
ZERO = Zero()


@dataclass(frozen=True)
class Step(Cost):
    """One increment wrapped around the rest of the chain. `reason` records why it was paid and is not compared."""

    rest: Cost
    reason: str = field(default="", compare=False)

    WEIGHT: ClassVar[Fraction] = Fraction(0)

    def __new__(cls, rest: Cost, reason: str = "") -> Cost:
        # a step on top of Impossible is Impossible
        if rest.is_impossible:
            return IMPOSSIBLE
        return super().__new__(cls)

    def __getnewargs__(self) -> tuple[Cost, str]:
        # copy and pickle call __new__ with these before restoring the fields
        return (self.rest, self.reason)


class Half(Step):
    WEIGHT = Fraction(1, 2)


class One(Step):
    WEIGHT = Fraction(1)


class Two(Step):
    WEIGHT = Fraction(2)


def _unwind(cost: Cost) -> tuple[Cost, tuple[Step, ...]]:
    """Split a cost into its terminus (Zero or Impossible) and its steps. Iterative, so long chains are fine."""
    steps: list[Step] = []
    while isinstance(cost, Step):
        steps.append(cost)
        cost = cost.rest
    return cost, tuple(steps)


def combine(first: Cost, second: Cost) -> Cost:
    """Spend `first` then `second`: the steps of `first` are stacked on top of `second`."""
    if first.is_impossible or second.is_impossible:
        return IMPOSSIBLE
    _, steps = _unwind(first)
    result = second
    for step in reversed(steps):
        result = type(step)(result, step.reason)
    return result


def combine_all(costs: Iterable[Cost]) -> Cost:
    result: Cost = ZERO
    for cost in costs:
        result = combine(result, cost)
    return result


def compare(first: Cost, second: Cost) -> int:
    """-1, 0 or 1 as `first` is cheaper than, as expensive as, or dearer than `second`."""
    a, b = first.total, second.total
    return (a > b) - (a < b)
