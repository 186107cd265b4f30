"""Fake collaborators and fixed identities shared by the tests."""

import uuid
from datetime import datetime, timedelta, timezone

from duel_arena.errors import UpstreamError
from duel_arena.gateway.client import CharacterGateway
from duel_arena.gateway.schemas import CharacterSnapshot, LootResult

USER_1 = "user-1"
USER_2 = "user-2"
GAME_MASTER = "gm-1"
CHAR_A = "11111111-1111-1111-1111-111111111111"
CHAR_B = "22222222-2222-2222-2222-222222222222"
CHAR_C = "33333333-3333-3333-3333-333333333333"

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_snapshot(
    character_id: str,
    owner: str,
    health: int = 30,
    strength: int = 5,
    agility: int = 5,
    intelligence: int = 5,
    faith: int = 5,
) -> CharacterSnapshot:
    """Build a snapshot the way the character service sends it."""
    return CharacterSnapshot.model_validate(
        {
            "id": character_id,
            "name": f"Hero {character_id[:4]}",
            "createdBy": owner,
            "health": health,
            "mana": 10,
            "className": "Warrior",
            "calculatedStats": {
                "strength": strength,
                "agility": agility,
                "intelligence": intelligence,
                "faith": faith,
            },
            "itemInstances": [],
        }
    )


class FrozenClock:
    """Controllable clock passed to the engine."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakeCharacterGateway(CharacterGateway):
    """In-memory character service that records every call."""

    def __init__(self) -> None:
        self.snapshots: dict[str, CharacterSnapshot] = {}
        self.snapshot_calls: list[str] = []
        self.loot_calls: list[tuple[uuid.UUID | None, str, str]] = []
        self.loot_result = LootResult.model_validate(
            {"transferred": {"itemInstanceId": "instance-1", "itemId": "item-1"}}
        )
        self.fail_snapshot = False
        self.fail_loot = False

    def add(self, snapshot: CharacterSnapshot) -> None:
        self.snapshots[snapshot.id] = snapshot

    async def snapshot(self, character_id: str) -> CharacterSnapshot:
        self.snapshot_calls.append(character_id)
        if self.fail_snapshot:
            raise UpstreamError("character service unavailable")
        return self.snapshots[character_id]

    async def resolve_duel_loot(
        self,
        duel_id: uuid.UUID | None,
        winner_character_id: str,
        loser_character_id: str,
    ) -> LootResult:
        self.loot_calls.append((duel_id, winner_character_id, loser_character_id))
        if self.fail_loot:
            raise UpstreamError("character service timed out")
        return self.loot_result
