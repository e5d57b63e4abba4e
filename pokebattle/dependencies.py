"""
FastAPI dependencies.

Collaborators are created in the app lifespan and kept on ``app.state`` so
tests can swap them without touching module globals.
"""
from fastapi import Request

from pokebattle.services.battle_service import BattleService
from pokebattle.services.collection_store import CollectionStore
from pokebattle.services.pokeapi_client import PokeAPIClient


def get_battle_service(request: Request) -> BattleService:
    return request.app.state.battle_service


def get_collection_store(request: Request) -> CollectionStore:
    return request.app.state.collection_store


def get_pokeapi_client(request: Request) -> PokeAPIClient:
    return request.app.state.pokeapi_client
