import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from pokebattle.authentication.basic_authentication import basic_auth
from pokebattle.main import app
from pokebattle.models.basic_authentication_models import UserModel
from pokebattle.services.battle_service import BattleService
from pokebattle.services.battle_store import BattleStore
from pokebattle.services.collection_store import CollectionStore
from pokebattle.services.pokeapi_client import PokeAPIClient
from tests.factories import FakeBuilder, FakeRng
from tests.test_collection_store import FakeRedis


def _pokeapi_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/pokemon/pikachu"):
        return httpx.Response(200, json={"id": 25, "name": "pikachu"})
    if request.url.path.endswith("/pokemon/boom"):
        return httpx.Response(500)
    return httpx.Response(404)


@pytest.fixture
async def client():
    current_user = {"username": "ash"}

    def fake_user() -> UserModel:
        return UserModel(username=current_user["username"], hash_password="", salt="")

    pokeapi_client = PokeAPIClient(
        base_url="https://pokeapi.test/api/v2",
        transport=httpx.MockTransport(_pokeapi_handler),
    )
    app.state.battle_service = BattleService(BattleStore(), FakeBuilder(), rng=FakeRng())
    app.state.collection_store = CollectionStore(FakeRedis())
    app.state.pokeapi_client = pokeapi_client
    app.dependency_overrides[basic_auth.check_user_data] = fake_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        http_client.current_user = current_user
        yield http_client

    app.dependency_overrides.clear()
    await pokeapi_client.aclose()


async def start_battle(client, pokemon_id=25):
    return await client.post("/start-battle", json={"playerPokemonId": pokemon_id})


async def test_hello(client):
    response = await client.get("/")
    assert response.json() == {"message": "Hello World"}


async def test_start_battle_returns_camel_case_battle(client):
    response = await start_battle(client)

    assert response.status_code == 200
    battle = response.json()["battle"]
    assert battle["userId"] == "ash"
    assert battle["currentTurn"] == "player"
    assert battle["battleStatus"] == "active"
    assert battle["turnHistory"] == []
    assert battle["playerPokemon"]["pokemonId"] == 25
    assert battle["playerPokemon"]["currentHp"] == battle["playerPokemon"]["maxHp"] == 35
    assert battle["playerPokemon"]["moves"][0] == {
        "name": "tackle", "power": 40, "type": "normal", "pp": 35, "currentPp": 35,
    }
    assert battle["computerPokemon"]["name"] == "rattata"


@pytest.mark.parametrize("body", [{"playerPokemonId": 0}, {"playerPokemonId": 1001}])
async def test_start_battle_out_of_range(client, body):
    response = await client.post("/start-battle", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Player Pokemon ID must be between 1 and 1000"}


async def test_start_battle_malformed_body(client):
    response = await client.post("/start-battle", json={"playerPokemonId": "pikachu"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


async def test_start_battle_unknown_pokemon_is_server_error(client):
    response = await start_battle(client, 999)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch player Pokemon data"}


async def test_move_and_get_battle(client):
    battle_id = (await start_battle(client)).json()["battle"]["battleId"]

    response = await client.post(f"/battle/{battle_id}/move", json={"moveName": "tackle"})

    assert response.status_code == 200
    body = response.json()
    turn_result = body["turnResult"]
    assert turn_result["battleEnded"] is False
    assert "winner" not in turn_result
    assert turn_result["playerAction"]["moveName"] == "tackle"
    assert turn_result["playerAction"]["action"] == "attack"
    assert turn_result["computerAction"]["turn"] == 1
    assert body["battle"]["computerPokemon"]["currentHp"] == 3

    fetched = await client.get(f"/battle/{battle_id}")
    assert fetched.status_code == 200
    assert fetched.json()["battle"] == body["battle"]


async def test_move_that_wins_reports_winner(client):
    battle_id = (await start_battle(client)).json()["battle"]["battleId"]
    await client.post(f"/battle/{battle_id}/move", json={"moveName": "tackle"})

    response = await client.post(f"/battle/{battle_id}/move", json={"moveName": "tackle"})

    turn_result = response.json()["turnResult"]
    assert turn_result["battleEnded"] is True
    assert turn_result["winner"] == "player"
    assert "computerAction" not in turn_result
    assert response.json()["battle"]["battleStatus"] == "won"

    after = await client.post(f"/battle/{battle_id}/move", json={"moveName": "tackle"})
    assert after.status_code == 400
    assert after.json() == {"error": "Battle is not active"}


async def test_move_errors(client):
    battle_id = (await start_battle(client)).json()["battle"]["battleId"]

    missing_name = await client.post(f"/battle/{battle_id}/move", json={})
    assert missing_name.status_code == 400
    assert missing_name.json() == {"error": "Move name required"}

    unknown_move = await client.post(f"/battle/{battle_id}/move", json={"moveName": "surf"})
    assert unknown_move.status_code == 400
    assert unknown_move.json() == {"error": "move surf not found"}

    unknown_battle = await client.post("/battle/nope/move", json={"moveName": "tackle"})
    assert unknown_battle.status_code == 404
    assert unknown_battle.json() == {"error": "Battle not found"}


async def test_battles_are_private_to_their_owner(client):
    battle_id = (await start_battle(client)).json()["battle"]["battleId"]

    client.current_user["username"] = "gary"
    get_response = await client.get(f"/battle/{battle_id}")
    move_response = await client.post(f"/battle/{battle_id}/move", json={"moveName": "tackle"})
    missing_response = await client.get("/battle/gary_missing")

    assert get_response.status_code == move_response.status_code == 404
    assert get_response.json() == move_response.json() == missing_response.json()


async def test_requests_without_credentials_are_unauthorized(client):
    app.dependency_overrides.clear()

    response = await start_battle(client)

    assert response.status_code == 401
    assert "error" in response.json()


async def test_pokemon_proxy(client):
    found = await client.get("/pokemon/Pikachu")
    assert found.status_code == 200
    assert found.json() == {"data": {"id": 25, "name": "pikachu"}}

    missing = await client.get("/pokemon/missingno")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Pokemon not found"}

    broken = await client.get("/pokemon/boom")
    assert broken.status_code == 502
    assert broken.json() == {"error": "External API error"}


async def test_collection_endpoints(client):
    saved = await client.post(
        "/save-pokemon",
        json={"pokemonName": "pikachu", "pokemonId": 25, "category": "caught", "types": ["electric"]},
    )
    assert saved.status_code == 200
    entry_id = saved.json()["entryId"]
    assert saved.json()["success"] is True

    invalid = await client.post("/save-pokemon", json={"pokemonName": "mew", "category": "legendary"})
    assert invalid.status_code == 400

    listed = await client.get("/my-pokemon", params={"category": "caught"})
    assert [entry["entryId"] for entry in listed.json()["pokemon"]] == [entry_id]
    assert listed.json()["pokemon"][0]["spriteUrl"] == ""

    deleted = await client.delete(f"/delete-pokemon/{entry_id}")
    assert deleted.json() == {"success": True}
    assert (await client.get("/my-pokemon")).json() == {"pokemon": []}


class ExplodingBuilder(FakeBuilder):
    async def build_combatant(self, pokemon_id):
        raise RuntimeError("unexpected payload")


async def test_unexpected_errors_use_the_error_envelope(client):
    app.state.battle_service = BattleService(BattleStore(), ExplodingBuilder(), rng=FakeRng())

    # the server re-raises after the handler has sent the response
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as raw_client:
        response = await start_battle(raw_client)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
