"""Build battle-ready Pokemon snapshots from PokeAPI data."""
import logging
from typing import Any, Dict, List

from pokebattle.errors import UpstreamDataError
from pokebattle.models.battle_models import CombatantModel, MoveModel, StatsModel
from pokebattle.services.pokeapi_client import PokeAPIClient

MAX_MOVES = 4
DEFAULT_MOVE_POWER = 40
DEFAULT_MOVE_TYPE = "normal"
DEFAULT_MOVE_PP = 20
FALLBACK_MOVE_NAME = "tackle"
FALLBACK_MOVE_PP = 35


def default_move(move_name: str, pp: int = DEFAULT_MOVE_PP) -> MoveModel:
    return MoveModel(
        name=move_name,
        power=DEFAULT_MOVE_POWER,
        type=DEFAULT_MOVE_TYPE,
        pp=pp,
        current_pp=pp,
    )


def _count(value: Any, default: int) -> int:
    """Non-negative integer from a JSON field, ``default`` for anything else."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def _name_of(resource: Any) -> str:
    """``name`` of a PokeAPI named resource such as ``{"name": ..., "url": ...}``"""
    if not isinstance(resource, dict):
        return ""
    name = resource.get("name")
    return name if isinstance(name, str) else ""


def _entries(pokemon_data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    entries = pokemon_data.get(key)
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


def parse_stats(pokemon_data: Dict[str, Any]) -> StatsModel:
    stats = {}
    for stat_info in _entries(pokemon_data, "stats"):
        stat_name = _name_of(stat_info.get("stat"))
        if stat_name in ("hp", "attack", "defense", "speed"):
            stats[stat_name] = _count(stat_info.get("base_stat"), 0)
    return StatsModel(**stats)


def parse_types(pokemon_data: Dict[str, Any]) -> List[str]:
    return [
        _name_of(type_info.get("type"))
        for type_info in _entries(pokemon_data, "types")
        if _name_of(type_info.get("type"))
    ]


def parse_sprite_url(pokemon_data: Dict[str, Any]) -> str:
    sprites = pokemon_data.get("sprites")
    if not isinstance(sprites, dict):
        return ""
    sprite_url = sprites.get("front_default")
    return sprite_url if isinstance(sprite_url, str) else ""


def parse_move_names(pokemon_data: Dict[str, Any]) -> List[str]:
    """Candidate move names in PokeAPI order, capped at MAX_MOVES."""
    names = []
    for move_info in _entries(pokemon_data, "moves"):
        move_name = _name_of(move_info.get("move"))
        if move_name and move_name.casefold() not in (name.casefold() for name in names):
            names.append(move_name)
        if len(names) >= MAX_MOVES:
            break
    return names


def parse_move(move_name: str, move_data: Any) -> MoveModel:
    """Move from a PokeAPI move body; missing or ill-typed fields take the defaults."""
    if not isinstance(move_data, dict):
        return default_move(move_name)
    # status moves have a null power; they still hit for the default
    power = _count(move_data.get("power"), 0) or DEFAULT_MOVE_POWER
    pp = _count(move_data.get("pp"), DEFAULT_MOVE_PP)
    return MoveModel(
        name=move_name,
        power=power,
        type=_name_of(move_data.get("type")) or DEFAULT_MOVE_TYPE,
        pp=pp,
        current_pp=pp,
    )


class CombatantBuilder:
    def __init__(self, client: PokeAPIClient):
        self.client: PokeAPIClient = client

    async def build_combatant(self, pokemon_id: int) -> CombatantModel:
        """Build the in-battle snapshot of a Pokemon

        A Pokemon that cannot be fetched fails the whole build. A move that
        cannot be fetched is replaced by a default move instead.

        Args:
            pokemon_id (int): PokeAPI Pokemon ID

        Raises:
            UpstreamDataError: The Pokemon itself could not be resolved

        Returns:
            CombatantModel: Pokemon at full HP with up to four moves
        """
        pokemon_data = await self.client.get_pokemon(pokemon_id)

        moves = [await self.build_move(move_name) for move_name in parse_move_names(pokemon_data)]
        if not moves:
            moves.append(default_move(FALLBACK_MOVE_NAME, FALLBACK_MOVE_PP))

        stats = parse_stats(pokemon_data)
        return CombatantModel(
            pokemon_id=pokemon_id,
            name=_name_of(pokemon_data),
            current_hp=stats.hp,
            max_hp=stats.hp,
            types=parse_types(pokemon_data),
            sprite_url=parse_sprite_url(pokemon_data),
            moves=moves,
            stats=stats,
        )

    async def build_move(self, move_name: str) -> MoveModel:
        try:
            move_data = await self.client.get_move(move_name)
        except UpstreamDataError:
            logging.warning(f"Move {move_name} unavailable, using default move")
            return default_move(move_name)
        return parse_move(move_name, move_data)
