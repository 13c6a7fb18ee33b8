from pydantic import BaseModel, Field

from famand.domain.enums import ConditionCategory, ConditionType, VictoryMode
from famand.domain.models import VictoryCondition, VictorySystem


class VictoryConditionSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    category: ConditionCategory
    target: int = Field(..., ge=0)
    type: ConditionType | None = None
    description: str = ""

    def to_domain(self) -> VictoryCondition:
        return VictoryCondition(
            id=self.id,
            name=self.name,
            category=self.category,
            target=self.target,
            type=self.type,
            description=self.description,
        )


class VictorySystemSchema(BaseModel):
    mode: VictoryMode
    conditions: list[VictoryConditionSchema] = Field(default_factory=list)
    required_major: int = Field(default=0, ge=0)
    required_minor: int = Field(default=0, ge=0)

    def to_domain(self) -> VictorySystem:
        return VictorySystem(
            mode=self.mode,
            conditions=tuple(condition.to_domain() for condition in self.conditions),
            required_major=self.required_major,
            required_minor=self.required_minor,
        )
