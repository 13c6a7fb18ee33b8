"""Deterministic randomness for Famand games.

Every random draw the engine makes (dice, deck shuffles, random events) is
derived from a seed string built from the game state, so replaying the same
intents against the same snapshot always yields the same game.

Examples:
    >>> seed = generate_seed(game_id=7, turn=3, phase="action", context="dice_1")
    >>> roll_dice(seed, "1d6")["total"] in range(1, 7)
    True
    >>> shuffle(seed, ["a", "b", "c"])["items"] in (
    ...     ["a", "b", "c"], ["a", "c", "b"], ["b", "a", "c"],
    ...     ["b", "c", "a"], ["c", "a", "b"], ["c", "b", "a"],
    ... )
    True
"""

import hashlib
import random
import re
from functools import cache
from typing import Any


def generate_seed(game_id: int, turn: int, phase: str, context: str) -> str:
    """Build the seed string ``"game_id:turn:phase:context"``.

    Args:
        game_id: Game identifier
        turn: Current turn number (0 is used for setup)
        phase: Current turn phase, or ``"setup"``
        context: What the draw is for (e.g. ``"dice_1"``, ``"random_event"``)

    Raises:
        ValueError: If game_id or turn is negative
    """
    if game_id < 0:
        raise ValueError(f"game_id must be non-negative, got {game_id}")
    if turn < 0:
        raise ValueError(f"turn must be non-negative, got {turn}")

    return f"{game_id}:{turn}:{phase}:{context}"


def _seed_to_int(seed: str) -> int:
    """Stable 64-bit integer derived from SHA-256(seed)."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def _rng(seed: str) -> random.Random:
    return random.Random(_seed_to_int(seed))


def _parse_dice_notation(notation: str) -> tuple[int, int]:
    """Parse ``NdM`` into ``(num_dice, num_sides)``.

    Raises:
        ValueError: If notation is invalid or values are non-positive
    """
    match = re.match(r"^(\d+)d(\d+)$", notation.lower())
    if not match:
        raise ValueError(f"Invalid dice notation: '{notation}'. Expected format: NdM (e.g. '1d6')")

    num_dice = int(match.group(1))
    num_sides = int(match.group(2))

    if num_dice <= 0:
        raise ValueError(f"Number of dice must be positive, got {num_dice}")
    if num_sides <= 0:
        raise ValueError(f"Number of sides must be positive, got {num_sides}")

    return num_dice, num_sides


def roll_dice(seed: str, notation: str = "1d6") -> dict[str, Any]:
    """Roll dice with a deterministic seed.

    Returns:
        Dictionary with ``notation``, ``rolls``, ``total`` and ``seed``.
    """
    num_dice, num_sides = _parse_dice_notation(notation)

    rng = _rng(seed)
    rolls = [rng.randint(1, num_sides) for _ in range(num_dice)]

    return {
        "notation": notation,
        "rolls": rolls,
        "total": sum(rolls),
        "seed": seed,
    }


def random_choice(seed: str, options: list[Any]) -> dict[str, Any]:
    """Pick one option; returns ``choice``, ``index`` and ``seed``.

    Raises:
        ValueError: If options list is empty
    """
    if not options:
        raise ValueError("options list cannot be empty")

    index = _rng(seed).randint(0, len(options) - 1)

    return {
        "choice": options[index],
        "index": index,
        "seed": seed,
    }


def random_int(seed: str, min_val: int, max_val: int) -> dict[str, Any]:
    """Random integer in ``[min_val, max_val]``.

    Raises:
        ValueError: If min_val > max_val
    """
    if min_val > max_val:
        raise ValueError(f"min_val ({min_val}) cannot be greater than max_val ({max_val})")

    value = _rng(seed).randint(min_val, max_val)

    return {
        "value": value,
        "min": min_val,
        "max": max_val,
        "seed": seed,
    }


def shuffle(seed: str, items: list[Any]) -> dict[str, Any]:
    """Return a shuffled copy of ``items``; the input list is left alone."""
    shuffled = list(items)
    _rng(seed).shuffle(shuffled)
    return {"items": shuffled, "seed": seed}


@cache
def _dice_pmf(num_dice: int, num_sides: int) -> dict[int, int]:
    """Outcome counts for the sum of ``num_dice`` d``num_sides``."""
    pmf: dict[int, int] = {0: 1}
    for _ in range(num_dice):
        new: dict[int, int] = {}
        for total, count in pmf.items():
            for face in range(1, num_sides + 1):
                new[total + face] = new.get(total + face, 0) + count
        pmf = new
    return pmf


@cache
def _dice_threshold_for_probability(probability: float, num_dice: int, num_sides: int) -> int:
    """Smallest target T with P(roll >= T) >= probability."""
    min_roll = num_dice
    max_roll = num_dice * num_sides

    if probability <= 0.0:
        return max_roll + 1
    if probability >= 1.0:
        return min_roll

    pmf = _dice_pmf(num_dice, num_sides)
    total_outcomes = num_sides**num_dice

    cumulative = 0.0
    for target in range(max_roll, min_roll - 1, -1):
        cumulative += pmf.get(target, 0) / total_outcomes
        if cumulative >= probability:
            return target

    return max_roll + 1


def check_success(seed: str, probability: float, dice_notation: str = "1d100") -> dict[str, Any]:
    """Roll against a probability threshold.

    With the default ``1d100`` the achievable probabilities are whole
    percentages, which covers the event chances the engine uses.

    Returns:
        Dictionary with ``success``, ``roll``, ``target``, ``probability``
        and ``seed``.

    Raises:
        ValueError: If probability not in [0.0, 1.0] or dice notation invalid
    """
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"probability must be between 0.0 and 1.0, got {probability}")

    num_dice, num_sides = _parse_dice_notation(dice_notation)
    target = _dice_threshold_for_probability(probability, num_dice, num_sides)
    roll = roll_dice(seed, dice_notation)["total"]

    return {
        "success": roll >= target,
        "roll": roll,
        "target": target,
        "probability": probability,
        "seed": seed,
    }
