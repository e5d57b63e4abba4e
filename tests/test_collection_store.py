from datetime import timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from pokebattle.errors import CollectionStoreError, InvalidRequestError
from pokebattle.models.dc_models import CategoryModel, SavePokemonModel
from pokebattle.services.collection_store import CollectionStore
from tests.factories import FIXED_NOW


class FakeRedis:
    """Hash commands of redis.asyncio.Redis kept in a dict."""

    def __init__(self):
        self.hashes = {}

    async def hset(self, key, field, value):
        self.hashes.setdefault(key, {})[field] = value
        return 1

    async def hvals(self, key):
        return list(self.hashes.get(key, {}).values())

    async def hdel(self, key, field):
        return 1 if self.hashes.get(key, {}).pop(field, None) is not None else 0

    async def aclose(self):
        pass


class BrokenRedis(FakeRedis):
    async def hset(self, key, field, value):
        raise RedisConnectionError("connection refused")

    async def hvals(self, key):
        raise RedisConnectionError("connection refused")


class _Clock:
    def __init__(self):
        self.now = FIXED_NOW

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def collection_store(fake_redis):
    return CollectionStore(fake_redis, clock=_Clock())


def save_request(name="pikachu", category="favorites", **kwargs):
    return SavePokemonModel(pokemon_name=name, category=category, **kwargs)


async def test_save_entry_stores_json_under_user_hash(collection_store, fake_redis):
    entry = await collection_store.save_entry(
        "ash", save_request(pokemon_id=25, types=["electric"], notes="first partner")
    )

    assert entry.entry_id.startswith("pikachu_")
    assert entry.category == CategoryModel.favorites
    assert list(fake_redis.hashes) == ["collection:ash"]
    assert entry.entry_id in fake_redis.hashes["collection:ash"]


@pytest.mark.parametrize(
    "request_model, message",
    [
        (save_request(name=""), "Pokemon name and category are required"),
        (save_request(category=""), "Pokemon name and category are required"),
        (save_request(category="legendary"), "Invalid category. Must be: favorites, caught, or wishlist"),
    ],
)
async def test_save_entry_validates_input(collection_store, fake_redis, request_model, message):
    with pytest.raises(InvalidRequestError) as exc_info:
        await collection_store.save_entry("ash", request_model)
    assert exc_info.value.message == message
    assert fake_redis.hashes == {}


async def test_read_entries_newest_first_and_by_category(collection_store):
    await collection_store.save_entry("ash", save_request("pikachu", "favorites"))
    await collection_store.save_entry("ash", save_request("caterpie", "caught"))
    await collection_store.save_entry("ash", save_request("mew", "wishlist"))
    await collection_store.save_entry("gary", save_request("eevee", "favorites"))

    everything = await collection_store.read_entries("ash")
    assert [entry.pokemon_name for entry in everything] == ["mew", "caterpie", "pikachu"]

    caught = await collection_store.read_entries("ash", "caught")
    assert [entry.pokemon_name for entry in caught] == ["caterpie"]


async def test_read_entries_rejects_unknown_category(collection_store):
    with pytest.raises(InvalidRequestError):
        await collection_store.read_entries("ash", "legendary")


async def test_delete_entry_is_idempotent(collection_store):
    entry = await collection_store.save_entry("ash", save_request())

    await collection_store.delete_entry("ash", entry.entry_id)
    await collection_store.delete_entry("ash", entry.entry_id)

    assert await collection_store.read_entries("ash") == []


async def test_redis_failures_become_collection_errors():
    store = CollectionStore(BrokenRedis())
    with pytest.raises(CollectionStoreError) as save_error:
        await store.save_entry("ash", save_request())
    with pytest.raises(CollectionStoreError) as read_error:
        await store.read_entries("ash")

    assert save_error.value.message == "Failed to save Pokemon entry"
    assert read_error.value.message == "Failed to query Pokemon collection"
    assert read_error.value.status_code == 500
