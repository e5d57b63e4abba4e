import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from pokebattle.authentication.basic_authentication import basic_auth
from pokebattle.load_settings import cors_allow_origins, redis_db, redis_host, redis_port
from pokebattle.routers import battle, pokemon, users
from pokebattle.services.battle_service import BattleService
from pokebattle.services.battle_store import BattleStore
from pokebattle.services.collection_store import CollectionStore
from pokebattle.services.combatant_builder import CombatantBuilder
from pokebattle.services.pokeapi_client import PokeAPIClient

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app):
    """Create the collaborators and start the battle cleanup job.
    This function is called to start the server.
    """
    pokeapi_client = PokeAPIClient()
    battle_store = BattleStore()
    collection_store = CollectionStore(
        Redis(
            host=redis_host,
            port=redis_port,
            db=redis_db,
            decode_responses=True,
            health_check_interval=30,
        )
    )
    app.state.pokeapi_client = pokeapi_client
    app.state.collection_store = collection_store
    app.state.battle_service = BattleService(
        battle_store, CombatantBuilder(pokeapi_client)
    )

    await basic_auth.create_table()
    # Battles older than max_age are removed in the background
    battle_store.start()
    try:
        yield
    finally:
        battle_store.shutdown()
        await pokeapi_client.aclose()
        await collection_store.aclose()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
app.include_router(battle.battle_router)
app.include_router(pokemon.pokemon_router)
app.include_router(users.user_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logging.info(f"Invalid request body for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logging.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.get("/")
async def hello():
    return {"message": "Hello World"}
