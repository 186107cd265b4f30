"""Client for the remote character service."""

import logging
import uuid
from abc import ABC, abstractmethod

import httpx
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..errors import NotFoundError, UpstreamError
from .schemas import CharacterSnapshot, LootResult

logger = logging.getLogger(__name__)


class CharacterGateway(ABC):
    """Abstract access to the character service.

    Calls are remote: they may be slow or fail, and failures surface as
    UpstreamError (or NotFoundError for an unknown character).
    """

    @abstractmethod
    async def snapshot(self, character_id: str) -> CharacterSnapshot:
        """Fetch a character's current owner, health and aggregated stats.

        Args:
            character_id: Character to read

        Returns:
            CharacterSnapshot as of the call
        """
        pass

    @abstractmethod
    async def resolve_duel_loot(
        self,
        duel_id: uuid.UUID | None,
        winner_character_id: str,
        loser_character_id: str,
    ) -> LootResult:
        """Ask the character service to move one item from loser to winner.

        Which item (if any) is chosen is up to the character service.
        """
        pass


class HttpCharacterGateway(CharacterGateway):
    """Character service client over HTTP using an internal token."""

    SNAPSHOT_PATH = "/internal/characters/{character_id}/snapshot"
    RESOLVE_PATH = "/internal/duels/resolve"

    def __init__(
        self,
        base_url: str,
        internal_token: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"X-Internal-Token": internal_token},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "HttpCharacterGateway":
        settings = settings or get_settings()
        return cls(
            base_url=settings.character_service_url,
            internal_token=settings.internal_token,
            timeout=settings.character_service_timeout,
        )

    async def snapshot(self, character_id: str) -> CharacterSnapshot:
        """Fetch a snapshot. Safe to retry."""
        path = self.SNAPSHOT_PATH.format(character_id=character_id)
        try:
            response = await self.client.get(path)
            if response.status_code == 404:
                raise NotFoundError(f"Character {character_id} not found", code="CHARACTER_NOT_FOUND")
            response.raise_for_status()
            return CharacterSnapshot.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.warning("Snapshot request for character %s failed: %s", character_id, e)
            raise UpstreamError(f"Character service snapshot failed: {e}") from e
        except (ValidationError, ValueError) as e:
            logger.warning("Invalid snapshot payload for character %s: %s", character_id, e)
            raise UpstreamError(f"Character service returned an invalid snapshot: {e}") from e

    async def resolve_duel_loot(
        self,
        duel_id: uuid.UUID | None,
        winner_character_id: str,
        loser_character_id: str,
    ) -> LootResult:
        """Request loot transfer. Not retried: the endpoint takes no dedup key."""
        payload = {
            "winnerCharacterId": winner_character_id,
            "loserCharacterId": loser_character_id,
        }
        if duel_id is not None:
            payload["duelId"] = str(duel_id)

        try:
            response = await self.client.post(self.RESOLVE_PATH, json=payload)
            response.raise_for_status()
            return LootResult.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.warning("Loot transfer for duel %s failed: %s", duel_id, e)
            raise UpstreamError(f"Character service loot transfer failed: {e}") from e
        except (ValidationError, ValueError) as e:
            logger.warning("Invalid loot payload for duel %s: %s", duel_id, e)
            raise UpstreamError(f"Character service returned an invalid loot result: {e}") from e

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "HttpCharacterGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
