"""Turn resolution and damage rules that are independent from HTTP and storage.

Rule of thumb:
- OK: damage math, precondition checks, mutating a battle state handed in.
- Not OK: touching the battle store, PokeAPI, datetime.now(), global random.

The random source is a ``numpy.random.Generator`` (or anything exposing
``integers`` and ``uniform`` the same way) so tests can pin the outcome.
"""
from datetime import datetime

import numpy as np

from pokebattle.errors import (
    BattleNotActiveError,
    MoveExhaustedError,
    MoveNotFoundError,
    NotYourTurnError,
)
from pokebattle.models.battle_models import (
    Actor,
    BattleStateModel,
    BattleStatus,
    CombatantModel,
    MoveModel,
    TurnActionModel,
    TurnHolder,
    TurnResultModel,
)

LEVEL = 50
RANDOM_FACTOR_MIN = 0.85
RANDOM_FACTOR_MAX = 1.0
MIN_DAMAGE = 1


def calculate_damage(
    attacker: CombatantModel,
    defender: CombatantModel,
    move: MoveModel,
    random_factor: float,
) -> int:
    """Damage dealt by one attack, never less than MIN_DAMAGE.

    Args:
        attacker (CombatantModel): Pokemon using the move
        defender (CombatantModel): Pokemon receiving the hit
        move (MoveModel): Move used by the attacker
        random_factor (float): Variance in [0.85, 1.0]

    Returns:
        int: Damage to subtract from the defender's current HP
    """
    # A zero defense stat would divide by zero; treat it as 1.
    defense = max(defender.stats.defense, 1)
    base = ((2 * LEVEL + 10) * attacker.stats.attack * move.power) // (250 * defense)
    damage = int(np.floor(base * random_factor))
    return max(damage, MIN_DAMAGE)


def player_moves_first(battle: BattleStateModel) -> bool:
    """Faster Pokemon acts first; ties go to the player."""
    return battle.player_pokemon.stats.speed >= battle.computer_pokemon.stats.speed


def next_turn_number(battle: BattleStateModel) -> int:
    """History length before the round, plus one; both actions of a round share it."""
    return len(battle.turn_history) + 1


def choose_computer_move(computer: CombatantModel, rng: np.random.Generator) -> MoveModel:
    """Uniform pick over the whole move set, exhausted moves included."""
    return computer.moves[int(rng.integers(len(computer.moves)))]


def check_player_move(battle: BattleStateModel, move_name: str) -> MoveModel:
    """Validate that the player may use ``move_name`` now.

    Checks run in order and the first failure wins. Nothing is mutated.

    Raises:
        BattleNotActiveError: The battle is already won or lost
        NotYourTurnError: The turn holder is not the player
        MoveNotFoundError: The player's Pokemon does not know the move
        MoveExhaustedError: The move has no PP left

    Returns:
        MoveModel: The matched move of the player's Pokemon
    """
    if battle.battle_status != BattleStatus.active:
        raise BattleNotActiveError()
    if battle.current_turn != TurnHolder.player:
        raise NotYourTurnError()
    move = battle.player_pokemon.find_move(move_name)
    if move is None:
        raise MoveNotFoundError(move_name)
    if move.current_pp <= 0:
        raise MoveExhaustedError(move_name)
    return move


def _attack(
    attacker: CombatantModel,
    defender: CombatantModel,
    move: MoveModel,
    actor: Actor,
    turn_number: int,
    rng: np.random.Generator,
    now: datetime,
) -> TurnActionModel:
    random_factor = float(rng.uniform(RANDOM_FACTOR_MIN, RANDOM_FACTOR_MAX))
    damage = calculate_damage(attacker, defender, move, random_factor)
    defender.current_hp = max(0, defender.current_hp - damage)
    move.current_pp = max(0, move.current_pp - 1)
    return TurnActionModel(
        turn=turn_number,
        actor=actor,
        move_name=move.name,
        damage=damage,
        message=f"{attacker.name} used {move.name}! It dealt {damage} damage!",
        timestamp=now,
    )


def _finish(battle: BattleStateModel, result: TurnResultModel, winner: Actor) -> None:
    battle.battle_status = BattleStatus.won if winner == Actor.player else BattleStatus.lost
    battle.current_turn = TurnHolder.finished
    result.battle_ended = True
    result.winner = winner


def resolve_turn(
    battle: BattleStateModel,
    player_move_name: str,
    rng: np.random.Generator,
    now: datetime,
) -> TurnResultModel:
    """Advance the battle by one round: the player's move plus the computer's reply.

    All preconditions are checked before anything changes, so a rejected
    move leaves the battle untouched. If the first attack knocks out the
    defender the second attacker never acts.

    Args:
        battle (BattleStateModel): Battle to mutate in place
        player_move_name (str): Move chosen by the player, case-insensitive
        rng (np.random.Generator): Source for the computer's move and damage variance
        now (datetime): Timestamp stamped on the turn actions

    Returns:
        TurnResultModel: Actions taken this round and whether the battle ended
    """
    player_move = check_player_move(battle, player_move_name)
    computer_move = choose_computer_move(battle.computer_pokemon, rng)

    player = battle.player_pokemon
    computer = battle.computer_pokemon
    if player_moves_first(battle):
        order = [
            (player, computer, player_move, Actor.player),
            (computer, player, computer_move, Actor.computer),
        ]
    else:
        order = [
            (computer, player, computer_move, Actor.computer),
            (player, computer, player_move, Actor.player),
        ]

    turn_number = next_turn_number(battle)
    result = TurnResultModel()
    for attacker, defender, move, actor in order:
        action = _attack(attacker, defender, move, actor, turn_number, rng, now)
        battle.turn_history.append(action)
        if actor == Actor.player:
            result.player_action = action
        else:
            result.computer_action = action

        if defender.current_hp <= 0:
            _finish(battle, result, actor)
            return result

    battle.current_turn = TurnHolder.player
    return result
