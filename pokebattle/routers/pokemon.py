import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from pokebattle.authentication.basic_authentication import basic_auth
from pokebattle.dependencies import get_collection_store, get_pokeapi_client
from pokebattle.errors import PokemonNotFoundError, ServiceError, to_http_exception
from pokebattle.models.basic_authentication_models import UserModel
from pokebattle.models.dc_models import (
    PokemonCollectionResponseModel,
    SavePokemonModel,
    SavePokemonResponseModel,
)
from pokebattle.services.collection_store import CollectionStore
from pokebattle.services.pokeapi_client import PokeAPIClient

pokemon_router = APIRouter()


class PokemonAPI:
    @staticmethod
    @pokemon_router.get("/pokemon/{id_or_name}")
    async def get_pokemon(
        id_or_name: str,
        user_data: UserModel = Depends(basic_auth.check_user_data),
        client: PokeAPIClient = Depends(get_pokeapi_client),
    ) -> Dict[str, Any]:
        """Proxy a Pokemon resource from PokeAPI"""
        logging.info(f"User {user_data.username} requesting Pokemon: {id_or_name}")
        try:
            data = await client.get_pokemon(id_or_name.lower())
        except PokemonNotFoundError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Pokemon not found"
            ) from e
        except ServiceError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail="External API error"
            ) from e
        return {"data": data}


class CollectionAPI:
    @staticmethod
    @pokemon_router.post("/save-pokemon", response_model=SavePokemonResponseModel)
    async def save_pokemon(
        request: SavePokemonModel,
        user_data: UserModel = Depends(basic_auth.check_user_data),
        collection_store: CollectionStore = Depends(get_collection_store),
    ) -> SavePokemonResponseModel:
        try:
            entry = await collection_store.save_entry(user_data.username, request)
        except ServiceError as e:
            raise to_http_exception(e) from e
        return SavePokemonResponseModel(success=True, entry_id=entry.entry_id)

    @staticmethod
    @pokemon_router.get("/my-pokemon", response_model=PokemonCollectionResponseModel)
    async def get_pokemon_collection(
        category: Optional[str] = None,
        user_data: UserModel = Depends(basic_auth.check_user_data),
        collection_store: CollectionStore = Depends(get_collection_store),
    ) -> PokemonCollectionResponseModel:
        """Saved Pokemon of the user, newest first

        Args:
            category (Optional[str]): favorites, caught or wishlist. All if omitted.
        """
        try:
            entries = await collection_store.read_entries(user_data.username, category)
        except ServiceError as e:
            raise to_http_exception(e) from e
        logging.info(f"Retrieved {len(entries)} Pokemon for user: {user_data.username}")
        return PokemonCollectionResponseModel(pokemon=entries)

    @staticmethod
    @pokemon_router.delete(
        "/delete-pokemon/{entry_id}",
        response_model=SavePokemonResponseModel,
        response_model_exclude_none=True,
    )
    async def delete_pokemon(
        entry_id: str,
        user_data: UserModel = Depends(basic_auth.check_user_data),
        collection_store: CollectionStore = Depends(get_collection_store),
    ) -> SavePokemonResponseModel:
        try:
            await collection_store.delete_entry(user_data.username, entry_id)
        except ServiceError as e:
            raise to_http_exception(e) from e
        return SavePokemonResponseModel(success=True)
