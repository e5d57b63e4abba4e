"""Per-user Pokemon collections kept in Redis.

One hash per user (``collection:{user_id}``); each field is an entry_id
and each value the entry serialized as JSON.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError
from uuid6 import uuid7

from pokebattle.errors import CollectionStoreError, InvalidRequestError
from pokebattle.models.dc_models import (
    CategoryModel,
    PokemonEntryModel,
    SavePokemonModel,
)
from pokebattle.services.battle_store import utc_now

INVALID_CATEGORY_MESSAGE = "Invalid category. Must be: favorites, caught, or wishlist"


def parse_category(category: str) -> CategoryModel:
    try:
        return CategoryModel(category)
    except ValueError as e:
        raise InvalidRequestError(INVALID_CATEGORY_MESSAGE) from e


class CollectionStore:
    def __init__(self, redis: Redis, clock: Callable[[], datetime] = utc_now):
        self.redis: Redis = redis
        self.clock: Callable[[], datetime] = clock

    @staticmethod
    def collection_key(user_id: str) -> str:
        return f"collection:{user_id}"

    async def save_entry(self, user_id: str, request: SavePokemonModel) -> PokemonEntryModel:
        """Save a Pokemon into the user's collection

        Args:
            user_id (str): Owner of the collection
            request (SavePokemonModel): Pokemon to save

        Raises:
            InvalidRequestError: Name or category missing, or unknown category
            CollectionStoreError: Redis failed

        Returns:
            PokemonEntryModel: The stored entry
        """
        if not request.pokemon_name or not request.category:
            raise InvalidRequestError("Pokemon name and category are required")
        category = parse_category(request.category)

        now = self.clock()
        entry = PokemonEntryModel(
            user_id=user_id,
            entry_id=f"{request.pokemon_name}_{uuid7()}",
            pokemon_name=request.pokemon_name,
            pokemon_id=request.pokemon_id,
            category=category,
            notes=request.notes,
            types=request.types,
            sprite_url=request.sprite_url,
            created_at=now,
            updated_at=now,
        )
        try:
            await self.redis.hset(
                self.collection_key(user_id), entry.entry_id, entry.model_dump_json()
            )
        except RedisError as e:
            logging.error(f"Error saving Pokemon entry: {e}")
            raise CollectionStoreError("Failed to save Pokemon entry") from e
        logging.info(f"Saved Pokemon entry {entry.entry_id} for user: {user_id}")
        return entry

    async def read_entries(
        self, user_id: str, category: Optional[str] = None
    ) -> List[PokemonEntryModel]:
        """Entries of the user, newest first, optionally only one category"""
        wanted = parse_category(category) if category else None
        try:
            values = await self.redis.hvals(self.collection_key(user_id))
        except RedisError as e:
            logging.error(f"Error reading Pokemon collection: {e}")
            raise CollectionStoreError("Failed to query Pokemon collection") from e

        entries = [PokemonEntryModel.model_validate_json(value) for value in values]
        if wanted is not None:
            entries = [entry for entry in entries if entry.category == wanted]
        entries.sort(key=lambda entry: entry.created_at, reverse=True)
        return entries

    async def delete_entry(self, user_id: str, entry_id: str) -> None:
        """Delete one entry. Deleting a missing entry is not an error."""
        if not entry_id:
            raise InvalidRequestError("Entry ID required")
        try:
            await self.redis.hdel(self.collection_key(user_id), entry_id)
        except RedisError as e:
            logging.error(f"Error deleting Pokemon entry: {e}")
            raise CollectionStoreError("Failed to delete Pokemon entry") from e
        logging.info(f"Deleted Pokemon entry {entry_id} for user: {user_id}")

    async def aclose(self) -> None:
        await self.redis.aclose()
