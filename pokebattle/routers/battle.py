import logging

from fastapi import APIRouter, Depends

from pokebattle.authentication.basic_authentication import basic_auth
from pokebattle.dependencies import get_battle_service
from pokebattle.errors import ServiceError, to_http_exception
from pokebattle.models.basic_authentication_models import UserModel
from pokebattle.models.dc_models import (
    BattleResponseModel,
    MakeMoveModel,
    MakeMoveResponseModel,
    StartBattleModel,
)
from pokebattle.services.battle_service import BattleService

battle_router = APIRouter()


class BattleServer:
    @staticmethod
    @battle_router.post("/start-battle", response_model=BattleResponseModel)
    async def start_battle(
        request: StartBattleModel,
        user_data: UserModel = Depends(basic_auth.check_user_data),
        battle_service: BattleService = Depends(get_battle_service),
    ) -> BattleResponseModel:
        """Start a battle of the chosen Pokemon against a random one

        Args:
            request (StartBattleModel):
                    playerPokemonId: int
            user_data (UserModel): Basic authentication result

        Returns:
            BattleResponseModel: The new battle, player to move
        """
        try:
            battle = await battle_service.start(
                user_data.username, request.player_pokemon_id
            )
        except ServiceError as e:
            logging.info(f"Failed to start battle for {user_data.username}: {e.message}")
            raise to_http_exception(e) from e
        return BattleResponseModel(battle=battle)

    @staticmethod
    @battle_router.post(
        "/battle/{battle_id}/move",
        response_model=MakeMoveResponseModel,
        response_model_exclude_none=True,
    )
    async def make_move(
        battle_id: str,
        request: MakeMoveModel,
        user_data: UserModel = Depends(basic_auth.check_user_data),
        battle_service: BattleService = Depends(get_battle_service),
    ) -> MakeMoveResponseModel:
        """Play one round: the player's move and the computer's reply

        Args:
            battle_id (str): ID to identify this battle
            request (MakeMoveModel):
                    moveName: str
            user_data (UserModel): Basic authentication result

        Returns:
            MakeMoveResponseModel: Battle after the round and what happened in it
        """
        try:
            battle, turn_result = await battle_service.act(
                user_data.username, battle_id, request.move_name
            )
        except ServiceError as e:
            logging.info(f"Rejected move for battle {battle_id}: {e.message}")
            raise to_http_exception(e) from e
        return MakeMoveResponseModel(battle=battle, turn_result=turn_result)

    @staticmethod
    @battle_router.get("/battle/{battle_id}", response_model=BattleResponseModel)
    async def get_battle(
        battle_id: str,
        user_data: UserModel = Depends(basic_auth.check_user_data),
        battle_service: BattleService = Depends(get_battle_service),
    ) -> BattleResponseModel:
        try:
            battle = await battle_service.inspect(user_data.username, battle_id)
        except ServiceError as e:
            raise to_http_exception(e) from e
        return BattleResponseModel(battle=battle)
