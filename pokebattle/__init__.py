"""Battle backend proxying PokeAPI with in-memory battle sessions."""
