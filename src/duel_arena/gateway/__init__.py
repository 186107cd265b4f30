"""Remote character service gateway."""

from .client import CharacterGateway, HttpCharacterGateway
from .schemas import CharacterSnapshot, ItemInstanceRef, LootResult, StatBlock, TransferredItem

__all__ = [
    "CharacterGateway",
    "HttpCharacterGateway",
    "CharacterSnapshot",
    "ItemInstanceRef",
    "LootResult",
    "StatBlock",
    "TransferredItem",
]
