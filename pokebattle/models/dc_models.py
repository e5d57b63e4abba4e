"""Request and response bodies exchanged with the client."""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from pokebattle.models.battle_models import (
    BattleStateModel,
    CamelModel,
    TurnResultModel,
)


class StartBattleModel(CamelModel):
    player_pokemon_id: int


class MakeMoveModel(CamelModel):
    move_name: str = ""


class BattleResponseModel(CamelModel):
    battle: BattleStateModel


class MakeMoveResponseModel(CamelModel):
    battle: BattleStateModel
    turn_result: TurnResultModel


class CategoryModel(str, Enum):
    favorites = "favorites"
    caught = "caught"
    wishlist = "wishlist"


class SavePokemonModel(CamelModel):
    pokemon_name: str = ""
    pokemon_id: int = 0
    category: str = ""
    notes: str = ""
    types: List[str] = []
    sprite_url: str = ""


class PokemonEntryModel(CamelModel):
    user_id: str
    entry_id: str
    pokemon_name: str
    pokemon_id: int = 0
    category: CategoryModel
    notes: str = ""
    types: List[str] = []
    sprite_url: str = ""
    created_at: datetime
    updated_at: datetime


class SavePokemonResponseModel(CamelModel):
    success: bool
    entry_id: Optional[str] = None


class PokemonCollectionResponseModel(CamelModel):
    pokemon: List[PokemonEntryModel] = Field(default_factory=list)


class RegisterUserModel(CamelModel):
    username: str = ""
    password: str = ""
