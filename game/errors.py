"""Exceptions raised by the game core."""

from typing import Optional


class GameError(Exception):
    """Base class for all game core failures."""


class GameNotFoundError(GameError):
    """Raised when a game id is not present in the store."""

    def __init__(self, game_id: str):
        super().__init__(f"Game with ID {game_id} not found")
        self.game_id = game_id


class UpstreamFailure(GameError):
    """An external dependency (model, history log, store) failed or timed out."""

    def __init__(self, service: str, message: str):
        super().__init__(f"[{service}] {message}")
        self.service = service


class MalformedStateError(GameError):
    """A stored record could not be decoded."""

    def __init__(self, message: str, game_id: Optional[str] = None):
        super().__init__(message)
        self.game_id = game_id
