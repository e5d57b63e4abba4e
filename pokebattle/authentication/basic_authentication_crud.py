import hashlib
import logging
import secrets

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from pokebattle.load_settings import pepper_data
from pokebattle.models.basic_authentication_models import UserModel
from pokebattle.models.basic_authentication_schemas import Base, UserTable

logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def hash_password(password: str, salt: str) -> str:
    return hashlib.sha256((password + salt + pepper_data).encode()).hexdigest()


class CreateAuthentication:

    @staticmethod
    async def create_table(engine: AsyncEngine) -> None:
        """Create table if not exists"""
        async with engine.begin() as conn:
            # existing tables are skipped
            await conn.run_sync(Base.metadata.create_all)

    @staticmethod
    async def create_user_data(username: str, password: str, session: AsyncSession) -> bool:
        """Create user data to authenticate the user

        Args:
            username (str): Name used for HTTP Basic authentication
            password (str): Plain password, stored salted and hashed
            session (AsyncSession): Session bound to the user database

        Returns:
            bool: True if the user was created, False if the name is taken
        """
        salt = secrets.token_hex(8)
        new_user = UserTable(
            username=username,
            hash_password=hash_password(password, salt),
            salt=salt,
        )
        session.add(new_user)
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            logging.warning(f"User {username} already exists: {e.orig}")
            return False
        return True


class ReadAuthentication:
    @staticmethod
    async def read_user_data(username: str, session: AsyncSession) -> UserModel | None:
        """Read user data to get salt and password hash

        Args:
            username (str): username of the user

        Returns:
            UserModel | None: username, password hash and salt, None if unknown
        """
        stmt = select(UserTable).where(UserTable.username == username)
        result = await session.execute(stmt)
        result = result.scalars().first()
        if result is None:
            logging.info(f"User not found: {username}")
            return None
        return UserModel.model_validate(result)
