import os
import pathlib
import tempfile

# Point the module-level user database at a scratch file before pokebattle is imported.
os.environ.setdefault(
    "USER_DB_PATH",
    str(pathlib.Path(tempfile.gettempdir()) / f"pokebattle_test_{os.getpid()}.sqlite3"),
)
os.environ.setdefault("PEPPER_DATA", "test-pepper")

import pytest

from pokebattle.services.battle_store import BattleStore
from tests.factories import FakeBuilder, FakeRng


@pytest.fixture
def battle_store():
    return BattleStore()


@pytest.fixture
def fake_rng():
    return FakeRng()


@pytest.fixture
def fake_builder():
    return FakeBuilder()
