import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Dict

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from pokebattle.battle_lock import ReadWriteLock
from pokebattle.errors import BattleNotFoundError
from pokebattle.load_settings import BATTLE_MAX_AGE_MINUTES, CLEANUP_INTERVAL_MINUTES
from pokebattle.models.battle_models import BattleStateModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BattleStore:
    """In-memory registry of battles keyed by battle_id.

    Battles live only as long as the process. A scheduled job removes battles
    older than ``max_age`` every ``cleanup_interval``.
    """

    def __init__(
        self,
        max_age: timedelta = timedelta(minutes=BATTLE_MAX_AGE_MINUTES),
        cleanup_interval: timedelta = timedelta(minutes=CLEANUP_INTERVAL_MINUTES),
        clock: Callable[[], datetime] = utc_now,
    ):
        self.max_age: timedelta = max_age
        self.cleanup_interval: timedelta = cleanup_interval
        self.clock: Callable[[], datetime] = clock
        self._battles: Dict[str, BattleStateModel] = {}
        self._lock = ReadWriteLock()
        self.scheduler = AsyncIOScheduler()

    def start(self) -> None:
        """Start the eviction job. Needs a running event loop."""
        self.scheduler.add_job(
            self.delete_expired_battles,
            "interval",
            seconds=self.cleanup_interval.total_seconds(),
            id="delete_expired_battles",
            replace_existing=True,
        )
        self.scheduler.start()
        logging.info(
            f"Battle cleanup scheduled every {self.cleanup_interval}, max age {self.max_age}"
        )

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logging.info("Battle cleanup stopped")

    async def put(self, battle: BattleStateModel) -> None:
        """Insert or replace the battle. updated_at is left to the caller."""
        async with self._lock.write():
            self._battles[battle.battle_id] = battle.model_copy(deep=True)

    async def get(self, battle_id: str, user_id: str) -> BattleStateModel:
        """Return a copy of the battle owned by user_id

        Args:
            battle_id (str): ID to identify this battle
            user_id (str): User asking for the battle

        Raises:
            BattleNotFoundError: The battle does not exist or belongs to someone else

        Returns:
            BattleStateModel: Copy of the stored battle
        """
        async with self._lock.read():
            return self._lookup(battle_id, user_id).model_copy(deep=True)

    @asynccontextmanager
    async def transaction(
        self, battle_id: str, user_id: str
    ) -> AsyncIterator[BattleStateModel]:
        """Load, mutate and persist one battle while holding the write lock.

        The yielded copy replaces the stored battle only when the block exits
        without an exception, so a rejected move never leaves a partial turn.
        """
        async with self._lock.write():
            battle = self._lookup(battle_id, user_id).model_copy(deep=True)
            yield battle
            self._battles[battle.battle_id] = battle

    async def evict_older_than(self, max_age: timedelta) -> int:
        """Remove every battle created before now - max_age

        Returns:
            int: Number of removed battles
        """
        cutoff = self.clock() - max_age
        async with self._lock.write():
            expired = [
                battle_id
                for battle_id, battle in self._battles.items()
                if battle.created_at < cutoff
            ]
            for battle_id in expired:
                del self._battles[battle_id]
                logging.info(f"Cleaned up old battle: {battle_id}")
        return len(expired)

    async def delete_expired_battles(self) -> None:
        removed = await self.evict_older_than(self.max_age)
        logging.info(f"Battle cleanup removed {removed} battle(s)")

    async def count(self) -> int:
        async with self._lock.read():
            return len(self._battles)

    def _lookup(self, battle_id: str, user_id: str) -> BattleStateModel:
        battle = self._battles.get(battle_id)
        # ownership mismatches look exactly like absence
        if battle is None or battle.user_id != user_id:
            raise BattleNotFoundError()
        return battle
