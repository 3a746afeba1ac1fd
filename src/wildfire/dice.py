"""Dice expressions and the spread chance policy.

A dice expression is a sum of terms such as ``"1d6"``, ``"2d4 + 1"`` or
``"d20 - 2"``. Each term is either ``NdM`` (N dice with M faces, N defaults to
one) or a whole number, and every term after the first needs a sign.
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from typing import Any, Protocol

from .constants import CHANCE_FLAG, DEFAULT_CHANCE_FORMULA, DEFAULT_CHANCE_TARGET
from .errors import DiceFormulaError

logger = logging.getLogger(__name__)

_TERM = re.compile(r"\s*([+-])?\s*(?:(\d*)[dD](\d+)|(\d+))\s*")


@dataclass(frozen=True)
class DiceTerm:
    """One signed term of a dice expression; ``faces`` is 0 for a constant."""

    sign: int
    count: int
    faces: int = 0

    @property
    def low(self) -> int:
        # every die shows at least 1
        return self.count

    @property
    def high(self) -> int:
        return self.count * self.faces if self.faces else self.count

    @property
    def minimum(self) -> int:
        return self.low if self.sign > 0 else -self.high

    @property
    def maximum(self) -> int:
        return self.high if self.sign > 0 else -self.low

    def roll(self, rng: random.Random) -> list[int]:
        if not self.faces:
            return [self.count]
        return [rng.randint(1, self.faces) for _ in range(self.count)]


class Roll:
    """A parsed dice expression that can be evaluated any number of times."""

    def __init__(self, formula: str):
        self.formula = formula
        self.terms = self._parse(formula)

    @staticmethod
    def _parse(formula: str) -> list[DiceTerm]:
        if not isinstance(formula, str) or not formula.strip():
            raise DiceFormulaError(f"Empty dice formula: {formula!r}")

        terms = []
        pos = 0
        while pos < len(formula):
            match = _TERM.match(formula, pos)
            if match is None or match.end() == pos:
                raise DiceFormulaError(f"Cannot parse dice formula {formula!r} at position {pos}")
            sign, count, faces, constant = match.groups()
            if sign is None and terms:
                raise DiceFormulaError(f"Missing operator in dice formula {formula!r} at position {pos}")
            direction = -1 if sign == "-" else 1
            if constant is not None:
                terms.append(DiceTerm(direction, int(constant)))
            else:
                if int(faces) == 0:
                    raise DiceFormulaError(f"Dice need at least one face: {formula!r}")
                terms.append(DiceTerm(direction, int(count) if count else 1, int(faces)))
            pos = match.end()
        return terms

    @property
    def minimum(self) -> int:
        return sum(term.minimum for term in self.terms)

    @property
    def maximum(self) -> int:
        return sum(term.maximum for term in self.terms)

    def evaluate(self, rng: random.Random) -> int:
        """Roll every term and return the total."""
        total = 0
        for term in self.terms:
            total += term.sign * sum(term.roll(rng))
        return total

    def __repr__(self) -> str:
        return f"Roll({self.formula!r})"


class Randomizer(Protocol):
    def roll(self, formula: str) -> int:
        ...


class DiceRoller:
    """Evaluates dice expressions using a ``random.Random`` source.

    Parsed expressions are cached, a hazard rolls the same formula for every
    candidate cell.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()
        self._cache: dict[str, Roll] = {}

    def parse(self, formula: str) -> Roll:
        roll = self._cache.get(formula)
        if roll is None:
            roll = self._cache[formula] = Roll(formula)
        return roll

    def roll(self, formula: str) -> int:
        total = self.parse(formula).evaluate(self.rng)
        logger.debug(f"Rolled {formula}: {total}")
        return total


@dataclass(frozen=True)
class Chance:
    """
    The random chance of a hazard spreading into a cell.

    The spread succeeds when a roll of ``formula`` is ``target`` or higher.
    """

    formula: str = DEFAULT_CHANCE_FORMULA
    target: int = DEFAULT_CHANCE_TARGET

    def succeeds(self, total: int) -> bool:
        """Check whether a rolled total meets the target."""
        return total >= self.target

    def to_flags(self) -> dict[str, Any]:
        return {CHANCE_FLAG: {"formula": self.formula, "target": self.target}}

    @classmethod
    def from_flags(cls, flags: dict[str, Any]) -> Chance | None:
        """Read a chance stored by :meth:`to_flags`, or None when absent."""
        data = flags.get(CHANCE_FLAG)
        if not data:
            return None
        return cls(formula=str(data["formula"]), target=int(data["target"]))
