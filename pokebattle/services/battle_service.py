"""Use cases behind the battle endpoints: start, act and inspect.

- Routers call this module and never touch the store directly.
- Turn rules live in ``pokebattle.domain.battle_rules``.
"""
import logging
from datetime import datetime
from typing import Callable, Tuple

import numpy as np
from uuid6 import uuid7

from pokebattle.domain.battle_rules import resolve_turn
from pokebattle.errors import InvalidRequestError, UpstreamDataError
from pokebattle.load_settings import MAX_POKEMON_ID, MIN_POKEMON_ID
from pokebattle.models.battle_models import (
    BattleStateModel,
    BattleStatus,
    TurnHolder,
    TurnResultModel,
)
from pokebattle.services.battle_store import BattleStore, utc_now
from pokebattle.services.combatant_builder import CombatantBuilder


def generate_battle_id(user_id: str) -> str:
    return f"{user_id}_{uuid7()}"


class BattleService:
    def __init__(
        self,
        store: BattleStore,
        builder: CombatantBuilder,
        rng: np.random.Generator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store: BattleStore = store
        self.builder: CombatantBuilder = builder
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()
        self.clock: Callable[[], datetime] = clock

    async def start(self, user_id: str, player_pokemon_id: int) -> BattleStateModel:
        """Start a battle of the player's Pokemon against a random one

        Args:
            user_id (str): Owner of the new battle
            player_pokemon_id (int): PokeAPI ID of the player's Pokemon

        Raises:
            InvalidRequestError: player_pokemon_id is out of range
            UpstreamDataError: Either Pokemon could not be fetched

        Returns:
            BattleStateModel: The stored battle, player to move
        """
        if not MIN_POKEMON_ID <= player_pokemon_id <= MAX_POKEMON_ID:
            raise InvalidRequestError(
                f"Player Pokemon ID must be between {MIN_POKEMON_ID} and {MAX_POKEMON_ID}"
            )
        computer_pokemon_id = int(self.rng.integers(MIN_POKEMON_ID, MAX_POKEMON_ID + 1))
        logging.info(
            f"User {user_id} starting battle with Pokemon ID: {player_pokemon_id}"
        )

        try:
            player_pokemon = await self.builder.build_combatant(player_pokemon_id)
        except UpstreamDataError as e:
            logging.error(f"Error fetching player Pokemon data: {e}")
            raise UpstreamDataError("Failed to fetch player Pokemon data") from e
        try:
            computer_pokemon = await self.builder.build_combatant(computer_pokemon_id)
        except UpstreamDataError as e:
            logging.error(f"Error fetching computer Pokemon data: {e}")
            raise UpstreamDataError("Failed to fetch computer Pokemon data") from e

        now = self.clock()
        battle = BattleStateModel(
            battle_id=generate_battle_id(user_id),
            user_id=user_id,
            player_pokemon=player_pokemon,
            computer_pokemon=computer_pokemon,
            current_turn=TurnHolder.player,
            battle_status=BattleStatus.active,
            created_at=now,
            updated_at=now,
            turn_history=[],
        )
        await self.store.put(battle)
        logging.info(
            f"Started battle {battle.battle_id}: "
            f"{player_pokemon.name} vs {computer_pokemon.name}"
        )
        return battle

    async def act(
        self, user_id: str, battle_id: str, move_name: str
    ) -> Tuple[BattleStateModel, TurnResultModel]:
        """Play the player's move and the computer's reply

        Raises:
            InvalidRequestError: move_name is empty
            BattleNotFoundError: No such battle for this user
            RuleViolationError: The move is not allowed right now

        Returns:
            Tuple[BattleStateModel, TurnResultModel]: Battle after the round and what happened
        """
        if not move_name or not move_name.strip():
            raise InvalidRequestError("Move name required")

        async with self.store.transaction(battle_id, user_id) as battle:
            now = self.clock()
            turn_result = resolve_turn(battle, move_name.strip(), self.rng, now)
            battle.updated_at = now
            snapshot = battle.model_copy(deep=True)

        logging.info(f"Processed move {move_name} for battle: {battle_id}")
        if turn_result.battle_ended:
            logging.info(f"Battle {battle_id} ended, winner: {turn_result.winner.value}")
        return snapshot, turn_result

    async def inspect(self, user_id: str, battle_id: str) -> BattleStateModel:
        return await self.store.get(battle_id, user_id)
