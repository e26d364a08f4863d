# manages connection to the local session db, internal to db package
import asyncio
import os.path
from contextlib import asynccontextmanager
from sqlite3 import Row

import aiosqlite

from utils.logger import get_logger

_logger = get_logger(__name__)

DB_PATH = "data/session.sqlite"

SCHEMA = """
CREATE TABLE IF NOT EXISTS session_kv (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_initialized = False
_init_lock = asyncio.Lock()


def configure(path: str) -> None:
    """Point the module at another db file, schema is re-checked on next use."""
    global DB_PATH, _initialized
    DB_PATH = path
    _initialized = False


async def _init_db(conn: aiosqlite.Connection) -> None:
    _logger.info(f"Initializing session database at {DB_PATH}...")
    await conn.executescript(SCHEMA)
    await conn.commit()


@asynccontextmanager
async def connect() -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection.

    Creates the parent directory and the key-value table on first use.
    """
    global _initialized
    parent = os.path.dirname(DB_PATH)
    if parent:
        os.makedirs(parent, exist_ok=True)

    conn = await aiosqlite.connect(DB_PATH)
    conn.row_factory = Row

    if not _initialized:
        async with _init_lock:
            if not _initialized:
                await _init_db(conn)
                _initialized = True
    try:
        yield conn
    finally:
        await conn.close()
