import logging
from typing import Any, Dict

import httpx

from pokebattle.errors import DataUnavailableError, PokemonNotFoundError
from pokebattle.load_settings import POKEAPI_BASE_URL, REQUEST_TIMEOUT

logging.getLogger("httpx").setLevel(logging.WARNING)


class PokeAPIClient:
    """Read-only client for the public PokeAPI."""

    def __init__(
        self,
        base_url: str = POKEAPI_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url: str = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def get_pokemon(self, id_or_name: int | str) -> Dict[str, Any]:
        """Fetch a Pokemon resource

        Args:
            id_or_name (int | str): National dex number or lowercase name

        Raises:
            PokemonNotFoundError: PokeAPI answered 404
            DataUnavailableError: PokeAPI could not be reached or answered badly

        Returns:
            Dict[str, Any]: Decoded PokeAPI JSON
        """
        return await self._get_json(f"/pokemon/{id_or_name}")

    async def get_move(self, move_name: str) -> Dict[str, Any]:
        """Fetch a move resource, with the same error mapping as get_pokemon"""
        return await self._get_json(f"/move/{move_name}")

    async def _get_json(self, path: str) -> Dict[str, Any]:
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            logging.error(f"Error fetching {path} from PokeAPI: {e}")
            raise DataUnavailableError() from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise PokemonNotFoundError()
        if response.status_code != httpx.codes.OK:
            logging.error(f"PokeAPI returned status {response.status_code} for {path}")
            raise DataUnavailableError()

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Failed to parse PokeAPI response for {path}: {e}")
            raise DataUnavailableError() from e
        if not isinstance(data, dict):
            logging.error(f"Unexpected PokeAPI response shape for {path}")
            raise DataUnavailableError()
        return data

    async def aclose(self) -> None:
        await self._client.aclose()
