from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized with camelCase keys for the frontend, populated by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class Actor(str, Enum):
    player = "player"
    computer = "computer"


class TurnHolder(str, Enum):
    player = "player"
    computer = "computer"
    finished = "finished"


class BattleStatus(str, Enum):
    active = "active"
    won = "won"
    lost = "lost"


class MoveModel(CamelModel):
    name: str
    power: int = Field(ge=0)
    type: str
    pp: int = Field(ge=0)  # max uses
    current_pp: int = Field(ge=0)


class StatsModel(CamelModel):
    hp: int = Field(default=0, ge=0)
    attack: int = Field(default=0, ge=0)
    defense: int = Field(default=0, ge=0)
    speed: int = Field(default=0, ge=0)


class CombatantModel(CamelModel):
    pokemon_id: int = Field(gt=0)
    name: str
    current_hp: int = Field(ge=0)
    max_hp: int = Field(ge=0)
    types: List[str] = []
    sprite_url: str = ""
    moves: List[MoveModel] = Field(min_length=1, max_length=4)
    stats: StatsModel

    def find_move(self, move_name: str) -> Optional[MoveModel]:
        """Case-insensitive lookup in the move set."""
        wanted = move_name.casefold()
        for move in self.moves:
            if move.name.casefold() == wanted:
                return move
        return None


class TurnActionModel(CamelModel):
    turn: int = Field(ge=1)
    actor: Actor
    action: str = "attack"
    move_name: str
    damage: int = Field(ge=0)
    message: str
    timestamp: datetime


class BattleStateModel(CamelModel):
    battle_id: str
    user_id: str
    player_pokemon: CombatantModel
    computer_pokemon: CombatantModel
    current_turn: TurnHolder = TurnHolder.player
    battle_status: BattleStatus = BattleStatus.active
    created_at: datetime
    updated_at: datetime
    turn_history: List[TurnActionModel] = []


class TurnResultModel(CamelModel):
    player_action: Optional[TurnActionModel] = None
    computer_action: Optional[TurnActionModel] = None
    battle_ended: bool = False
    winner: Optional[Actor] = None
