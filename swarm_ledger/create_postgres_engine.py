from sqlalchemy.ext.asyncio import create_async_engine

from swarm_ledger.load_secrets import user, password, host, port, db_name, pool_size, max_overflow

POSTGRES_DATABASE_URL = (
    f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"
)

engine = create_async_engine(POSTGRES_DATABASE_URL, pool_size=pool_size, max_overflow=max_overflow)
