from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from swarm_ledger.load_secrets import db_backend

if db_backend == "postgres":
    from swarm_ledger.create_postgres_engine import engine
else:
    from swarm_ledger.create_sqlite_engine import engine


def make_session_factory(bind) -> async_sessionmaker:
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        expire_on_commit=False,
        bind=bind,
    )


# Centralized session factory to avoid creating it in router modules.
Session = make_session_factory(engine)
