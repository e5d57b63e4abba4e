"""Domain layer (pure logic).

- Keep battle rules and damage calculations here.
- Avoid I/O: no HTTP/FastAPI, no Redis, no PokeAPI calls.
- Prefer deterministic functions (time/random passed in as arguments).
"""
