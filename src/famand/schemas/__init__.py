from .card import (
    AdjacencyMultiplierSchema,
    CardEffectSchema,
    CardSchema,
    CardTargetSchema,
    ChainBonusSchema,
    CountScalingSchema,
    DiversityBonusSchema,
    GlobalMultiplierSchema,
)
from .victory import VictoryConditionSchema, VictorySystemSchema

__all__ = [
    "AdjacencyMultiplierSchema",
    "CardEffectSchema",
    "CardSchema",
    "CardTargetSchema",
    "ChainBonusSchema",
    "CountScalingSchema",
    "DiversityBonusSchema",
    "GlobalMultiplierSchema",
    "VictoryConditionSchema",
    "VictorySystemSchema",
]
