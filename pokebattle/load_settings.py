import os
import pathlib
from dotenv import load_dotenv

load_dotenv()

POKEAPI_BASE_URL = os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

BATTLE_MAX_AGE_MINUTES = int(os.getenv("BATTLE_MAX_AGE_MINUTES", "60"))
CLEANUP_INTERVAL_MINUTES = int(os.getenv("CLEANUP_INTERVAL_MINUTES", "30"))

MIN_POKEMON_ID = 1
MAX_POKEMON_ID = int(os.getenv("MAX_POKEMON_ID", "1000"))

user_db_path = os.getenv(
    "USER_DB_PATH",
    str(pathlib.Path(__file__).parents[1] / "basic_authentication.sqlite3"),
)
pepper_data = os.getenv("PEPPER_DATA", "")

redis_host = os.getenv("REDIS_HOST", "redis")
redis_port = int(os.getenv("REDIS_PORT", "6379"))
redis_db = int(os.getenv("REDIS_DB", "0"))

cors_allow_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

if __name__ == "__main__":
    print(POKEAPI_BASE_URL, REQUEST_TIMEOUT, user_db_path, redis_host, redis_port)
