"""Server-side dice rolling engine.

Rolls any number of six-sided dice and reports each face plus the total.
"""

from __future__ import annotations

import random
import threading

from pydantic import BaseModel, ConfigDict

SIDES = 6

_local = threading.local()


class DiceError(ValueError):
    """Raised when a dice count is invalid."""


class RollResult(BaseModel):
    """Outcome of a single roll request."""

    model_config = ConfigDict(frozen=True)

    dice: int
    rolls: tuple[int, ...]
    total: int


def _thread_rng() -> random.Random:
    rng = getattr(_local, "rng", None)
    if rng is None:
        rng = _local.rng = random.Random()
    return rng


def roll(dice_count: int, rng: random.Random | None = None) -> RollResult:
    """Roll ``dice_count`` d6 and return the faces and their sum.

    Args:
        dice_count: Number of dice to roll. Zero is allowed and yields no rolls.
        rng: Generator to draw from. Defaults to a per-thread ``random.Random``.

    Returns:
        A RollResult whose ``total`` is exactly ``sum(rolls)``.

    Raises:
        DiceError: If dice_count is negative.
    """
    if dice_count < 0:
        raise DiceError(f"Cannot roll a negative number of dice: {dice_count}")

    if rng is None:
        rng = _thread_rng()
    rolls = tuple(rng.randint(1, SIDES) for _ in range(dice_count))
    return RollResult(dice=dice_count, rolls=rolls, total=sum(rolls))
