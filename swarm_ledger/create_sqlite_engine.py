import pathlib

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from swarm_ledger.load_secrets import sqlite_path

# Execution option marking a connection whose transaction will read then write.
WRITE_LOCK = "sqlite_write_lock"


def build_sqlite_engine(path: str | pathlib.Path, echo: bool = False) -> AsyncEngine:
    """Create an aiosqlite engine that emits its own BEGIN statements.

    pysqlite only emits BEGIN lazily before the first write, so a read-then-write
    transaction would not be isolated. Driver-level transaction handling is
    switched off. Connections carrying the ``WRITE_LOCK`` execution option start
    with BEGIN IMMEDIATE and hold the write lock from their first read; every
    other transaction is a plain deferred BEGIN and never waits on a writer.
    """
    sqlite_url = f"sqlite+aiosqlite:///{pathlib.Path(path)}"
    engine = create_async_engine(url=sqlite_url, echo=echo)

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        if conn.get_execution_options().get(WRITE_LOCK, False):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


engine = build_sqlite_engine(sqlite_path)
