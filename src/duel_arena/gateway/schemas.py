"""Payload schemas exchanged with the character service."""

from pydantic import BaseModel, ConfigDict, Field

from ..engine.stats import CombatStats


class StatBlock(BaseModel):
    """Aggregated combat stats as reported by the character service."""

    strength: int = Field(ge=0)
    agility: int = Field(ge=0)
    intelligence: int = Field(ge=0)
    faith: int = Field(ge=0)

    def to_combat_stats(self) -> CombatStats:
        return CombatStats(**self.model_dump())


class ItemInstanceRef(BaseModel):
    """An item instance owned by a character."""

    model_config = ConfigDict(populate_by_name=True)

    instance_id: str = Field(alias="instanceId")
    item_id: str = Field(alias="itemId")


class CharacterSnapshot(BaseModel):
    """Point-in-time view of a character: owner, health and combat stats."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    created_by: str = Field(alias="createdBy", description="User id of the owner")
    health: int = Field(ge=0)
    mana: int = 0
    class_name: str | None = Field(default=None, alias="className")
    calculated_stats: StatBlock = Field(alias="calculatedStats")
    item_instances: list[ItemInstanceRef] = Field(default_factory=list, alias="itemInstances")

    @property
    def owner_user_id(self) -> str:
        return self.created_by


class TransferredItem(BaseModel):
    """The item instance moved from the loser to the winner."""

    model_config = ConfigDict(populate_by_name=True)

    item_instance_id: str = Field(alias="itemInstanceId")
    item_id: str | None = Field(default=None, alias="itemId")


class LootResult(BaseModel):
    """Outcome of a loot transfer request. `transferred` is None if the loser had nothing."""

    transferred: TransferredItem | None = None

    @property
    def transferred_item_instance_id(self) -> str | None:
        return self.transferred.item_instance_id if self.transferred else None
