# manages connections to the sqlite file backing the record store
import asyncio
import json
import os
from contextlib import asynccontextmanager
from sqlite3 import Row

import aiosqlite

from utils.logger import get_logger

_logger = get_logger(__name__)

_HERE = os.path.dirname(os.path.abspath(__file__))

DB_PATH = os.getenv("STORE_DB_PATH", "data/db.sqlite")
SCHEMA_SCRIPT = os.path.join(_HERE, "records.sql")
SEED_PATH = os.path.join(_HERE, "seed.json")

# paths whose schema and seed data are already in place
_initialized: set[str] = set()
_init_lock = asyncio.Lock()


def load_seed(seed_path: str | None) -> dict[str, list[dict]]:
    """Read a `{collection: [records]}` document; a missing file means no seed."""
    if not seed_path or not os.path.exists(seed_path):
        return {}
    with open(seed_path, "r", encoding="utf-8") as f:
        return json.load(f)


async def _run_schema(conn: aiosqlite.Connection) -> None:
    _logger.info(f"Creating record tables from {SCHEMA_SCRIPT}...")
    with open(SCHEMA_SCRIPT, "r") as f:
        await conn.executescript(f.read())


async def _init_db(conn: aiosqlite.Connection, seed_path: str | None) -> None:
    await _run_schema(conn)

    seed = load_seed(seed_path)
    for collection, records in seed.items():
        _logger.info(f"Seeding '{collection}' with {len(records)} records")
        await conn.executemany(
            "INSERT INTO records(collection, id, body) VALUES (?, ?, ?);",
            [(collection, int(r["id"]), json.dumps(r)) for r in records],
        )
    await conn.commit()


async def _table_exists(conn: aiosqlite.Connection, table_name: str) -> bool:
    cur = await conn.execute(
        """
        SELECT name
        FROM sqlite_master
        WHERE type = 'table'
          AND name = ?;
        """,
        (table_name,),
    )
    row = await cur.fetchone()
    await cur.close()
    return row is not None


@asynccontextmanager
async def connect(path: str = DB_PATH, seed_path: str | None = SEED_PATH):
    """Async context manager yielding an aiosqlite connection to `path`.

    The first connection to a path creates the records table and loads the seed.
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    conn = await aiosqlite.connect(path)
    conn.row_factory = Row

    if path not in _initialized:
        async with _init_lock:
            if path not in _initialized:
                if not await _table_exists(conn, "records"):
                    _logger.info(f"Initializing record store at {path}...")
                    await _init_db(conn, seed_path)
                elif not await _table_exists(conn, "id_marks"):
                    # files from before id tracking; the schema script is idempotent
                    _logger.info(f"Upgrading record store at {path}...")
                    await _run_schema(conn)
                    await conn.commit()
                _initialized.add(path)
    try:
        yield conn
    finally:
        await conn.close()
