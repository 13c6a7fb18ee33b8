"""Utility functions for the Famand engine."""

from famand.utils.rng import (
    check_success,
    generate_seed,
    random_choice,
    random_int,
    roll_dice,
    shuffle,
)

__all__ = [
    "check_success",
    "generate_seed",
    "random_choice",
    "random_int",
    "roll_dice",
    "shuffle",
]
