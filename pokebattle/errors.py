"""Exceptions raised by the service layer.

Every error carries a short, client-safe message and the HTTP status the
routers translate it to. Nothing else about internal state is exposed.
"""
from fastapi import HTTPException, status


class ServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request body"


class BattleNotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Battle not found"


class UpstreamDataError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to fetch Pokemon data"


class DataUnavailableError(UpstreamDataError):
    """PokeAPI was unreachable, timed out or returned something unusable."""


class PokemonNotFoundError(UpstreamDataError):
    default_message = "Pokemon not found"


class RuleViolationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class BattleNotActiveError(RuleViolationError):
    default_message = "Battle is not active"


class NotYourTurnError(RuleViolationError):
    default_message = "It's not your turn"


class MoveNotFoundError(RuleViolationError):
    def __init__(self, move_name: str):
        super().__init__(f"move {move_name} not found")


class MoveExhaustedError(RuleViolationError):
    def __init__(self, move_name: str):
        super().__init__(f"move {move_name} has no PP left")


class CollectionStoreError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to access Pokemon collection"


def to_http_exception(error: ServiceError) -> HTTPException:
    """Translate a service error into the HTTP error the client sees"""
    return HTTPException(status_code=error.status_code, detail=error.message)
