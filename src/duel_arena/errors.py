"""Error taxonomy for duel operations.

Every error carries a stable machine-readable ``code`` for client-side
branching and an HTTP-style ``status`` so a routing layer can map it
directly to a response.
"""

from typing import Any


class DuelError(Exception):
    """Base class for all duel failures."""

    status: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, Any]:
        """Convert to a response body."""
        return {"error": self.code, "message": self.message}

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code={self.code}, status={self.status})>"


class NotFoundError(DuelError):
    """Duel or character does not exist. Terminal, do not retry."""

    status = 404
    default_code = "DUEL_NOT_FOUND"


class ForbiddenError(DuelError):
    """Caller is not allowed to perform the operation. Terminal."""

    status = 403
    default_code = "FORBIDDEN"


class InvalidChallengeError(DuelError):
    """Challenge request is malformed (e.g. a character challenging itself)."""

    status = 400
    default_code = "INVALID_CHALLENGE"


class ConflictError(DuelError):
    """Duel is in the wrong lifecycle state for the request."""

    status = 409
    default_code = "DUEL_NOT_ACTIVE"


class DuelTimeoutError(ConflictError):
    """Duel expired and was closed as a draw on this access."""

    default_code = "TIMEOUT"

    def to_dict(self) -> dict[str, Any]:
        return {"status": "Draw", "reason": self.code, "message": self.message}


class CooldownError(DuelError):
    """Action kind is still on cooldown for this side. Transient, retry later."""

    status = 429
    default_code = "COOLDOWN"


class UpstreamError(DuelError):
    """Remote character service failed or returned an unusable payload."""

    status = 502
    default_code = "UPSTREAM_ERROR"


class StorageError(DuelError):
    """Durable store rejected or failed a write. No partial state is left."""

    status = 500
    default_code = "STORAGE_ERROR"
