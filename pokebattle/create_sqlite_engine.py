from sqlalchemy.ext.asyncio import create_async_engine

from pokebattle.load_settings import user_db_path

sqlite_url = f"sqlite+aiosqlite:///{user_db_path}"


engine = create_async_engine(url=sqlite_url, echo=False)
