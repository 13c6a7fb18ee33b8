from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

from famand.domain.enums import CardType, CrisisEffect, Rarity, ResourceKind, StateFlag, Trigger
from famand.domain.models import (
    AdjacencyMultiplier,
    Card,
    CardEffect,
    CardID,
    CardTarget,
    ChainBonus,
    ComboRule,
    CountScaling,
    DiversityBonus,
    GlobalMultiplier,
)

ResourceAmounts = dict[ResourceKind, int]
ResourceCost = dict[ResourceKind, Annotated[int, Field(ge=0)]]


class CardTargetSchema(BaseModel):
    card_type: CardType | None = Field(None, description="Match cards of this type")
    card_id: str | None = Field(None, description="Match cards with this id")

    def to_domain(self) -> CardTarget:
        return CardTarget(
            card_type=self.card_type,
            card_id=CardID(self.card_id) if self.card_id is not None else None,
        )


class ChainBonusSchema(BaseModel):
    kind: Literal["chain_bonus"]
    resource: ResourceKind
    amount: int = Field(default=1, ge=0)

    def to_domain(self) -> ChainBonus:
        return ChainBonus(resource=self.resource, amount=self.amount)


class AdjacencyMultiplierSchema(BaseModel):
    kind: Literal["adjacency_multiplier"]
    target: CardTargetSchema
    factor: int = Field(default=2, ge=1)
    resource: ResourceKind | None = None

    def to_domain(self) -> AdjacencyMultiplier:
        return AdjacencyMultiplier(
            target=self.target.to_domain(), factor=self.factor, resource=self.resource
        )


class CountScalingSchema(BaseModel):
    kind: Literal["count_scaling"]
    resource: ResourceKind
    amount: int = Field(default=1, ge=0)
    per_card: CardTargetSchema | None = None
    per_resource: ResourceKind | None = None
    cap: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def _one_counter(self) -> "CountScalingSchema":
        if (self.per_card is None) == (self.per_resource is None):
            raise ValueError("count_scaling needs exactly one of per_card or per_resource")
        return self

    def to_domain(self) -> CountScaling:
        return CountScaling(
            resource=self.resource,
            amount=self.amount,
            per_card=self.per_card.to_domain() if self.per_card is not None else None,
            per_resource=self.per_resource,
            cap=self.cap,
        )


class DiversityBonusSchema(BaseModel):
    kind: Literal["diversity_bonus"]
    resource: ResourceKind
    amount: int = Field(default=1, ge=0)

    def to_domain(self) -> DiversityBonus:
        return DiversityBonus(resource=self.resource, amount=self.amount)


class GlobalMultiplierSchema(BaseModel):
    kind: Literal["global_multiplier"]
    factor: float = Field(default=2.0, gt=0.0)
    target: CardTargetSchema | None = None
    resource: ResourceKind | None = None

    def to_domain(self) -> GlobalMultiplier:
        return GlobalMultiplier(
            factor=self.factor,
            target=self.target.to_domain() if self.target is not None else None,
            resource=self.resource,
        )


ComboRuleSchema = Annotated[
    ChainBonusSchema
    | AdjacencyMultiplierSchema
    | CountScalingSchema
    | DiversityBonusSchema
    | GlobalMultiplierSchema,
    Field(discriminator="kind"),
]


class CardEffectSchema(BaseModel):
    description: str = Field(..., description="Card text")
    production: ResourceAmounts = Field(default_factory=dict)
    trigger: Trigger | None = None
    dice_numbers: list[Annotated[int, Field(ge=1, le=6)]] = Field(default_factory=list)
    combo: ComboRuleSchema | None = None
    crisis_effect: CrisisEffect | None = None
    duration: int | None = Field(None, ge=1)
    buy_extra_card: int = Field(default=0, ge=0)
    discard_next_turn: int = Field(default=0, ge=0)
    extra_dice_roll: int = Field(default=0, ge=0)
    reputation: int = 0
    grants: list[StateFlag] = Field(default_factory=list)

    def to_domain(self) -> CardEffect:
        combo: ComboRule | None = self.combo.to_domain() if self.combo is not None else None
        return CardEffect(
            description=self.description,
            production={kind: amount for kind, amount in self.production.items() if amount},
            trigger=self.trigger,
            dice_numbers=frozenset(self.dice_numbers),
            combo=combo,
            crisis_effect=self.crisis_effect,
            duration=self.duration,
            buy_extra_card=self.buy_extra_card,
            discard_next_turn=self.discard_next_turn,
            extra_dice_roll=self.extra_dice_roll,
            reputation=self.reputation,
            grants=frozenset(self.grants),
        )


class CardSchema(BaseModel):
    id: str = Field(..., min_length=1, description="Unique card id")
    name: str = Field(..., min_length=1)
    type: CardType
    cost: ResourceCost = Field(default_factory=dict)
    effect: CardEffectSchema
    rarity: Rarity

    def to_domain(self) -> Card:
        return Card(
            id=CardID(self.id),
            name=self.name,
            type=self.type,
            cost={kind: amount for kind, amount in self.cost.items() if amount},
            effect=self.effect.to_domain(),
            rarity=self.rarity,
        )
