# src/db/store.py
from __future__ import annotations

import asyncio
import json
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional

from db.database import DB_PATH, SEED_PATH, connect
from utils.logger import get_logger

_logger = get_logger(__name__)

COLLECTIONS = ("users", "posts", "products", "comments", "categories")

Record = Dict[str, Any]


class UnknownCollectionError(LookupError):
    """Raised for a collection name the store does not hold."""

    def __init__(self, collection: str) -> None:
        super().__init__(f"Unknown collection '{collection}'")
        self.collection = collection


def _to_int(val) -> Optional[int]:
    try:
        return int(val)
    except (TypeError, ValueError):
        return None


def _matches_filters(record: Record, filters: Mapping[str, str]) -> bool:
    # query-string filters arrive as text, so compare textual forms
    for field, expected in filters.items():
        value = record.get(field)
        if isinstance(value, bool):
            value = "true" if value else "false"
        if str(value) != expected:
            return False
    return True


class RecordStore:
    """
    File-backed store of named record collections.

    Reads open their own connection and always see the last commit. Writes are
    serialized through one lock and committed before they return, so a caller
    that got a result back knows it is on disk.
    """

    def __init__(
        self,
        path: str = DB_PATH,
        seed_path: Optional[str] = SEED_PATH,
        collections: Iterable[str] = COLLECTIONS,
    ) -> None:
        self.path = path
        self.seed_path = seed_path
        self.collections = tuple(collections)
        self._write_lock = asyncio.Lock()

    def _connect(self):
        return connect(self.path, self.seed_path)

    def _check(self, collection: str) -> None:
        if collection not in self.collections:
            raise UnknownCollectionError(collection)

    # ---------------------------
    # Reads
    # ---------------------------

    async def list(
        self, collection: str, filters: Optional[Mapping[str, str]] = None
    ) -> List[Record]:
        """All records of `collection` in insertion order, optionally filtered."""
        self._check(collection)
        async with self._connect() as conn:
            cur = await conn.execute(
                "SELECT body FROM records WHERE collection = ? ORDER BY seq;",
                (collection,),
            )
            rows = await cur.fetchall()
            await cur.close()
        records = [json.loads(row["body"]) for row in rows]
        if filters:
            records = [r for r in records if _matches_filters(r, filters)]
        return records

    async def get(self, collection: str, record_id: int) -> Optional[Record]:
        self._check(collection)
        async with self._connect() as conn:
            cur = await conn.execute(
                "SELECT body FROM records WHERE collection = ? AND id = ?;",
                (collection, record_id),
            )
            row = await cur.fetchone()
            await cur.close()
        return json.loads(row["body"]) if row else None

    async def filter_by(self, collection: str, field: str, value: Any) -> List[Record]:
        """Records whose `field` equals `value` exactly (no type coercion)."""
        return [r for r in await self.list(collection) if r.get(field) == value]

    async def find_one(self, collection: str, field: str, value: Any) -> Optional[Record]:
        for record in await self.list(collection):
            if record.get(field) == value:
                return record
        return None

    async def search(
        self, collection: str, query: str, fields: Iterable[str]
    ) -> List[Record]:
        """
        Case-insensitive substring match of `query` against any of `fields`.
        Missing or non-string fields never match.
        """
        needle = query.lower()
        fields = tuple(fields)
        return [
            record
            for record in await self.list(collection)
            if any(
                isinstance(record.get(f), str) and needle in record[f].lower()
                for f in fields
            )
        ]

    async def snapshot(self) -> Dict[str, List[Record]]:
        """Every collection as `{name: [records]}`, the seed file layout."""
        return {name: await self.list(name) for name in self.collections}

    # ---------------------------
    # Writes
    # ---------------------------

    async def _next_id(self, conn, collection: str) -> int:
        # the mark outlives deletes; MAX(id) covers seeded rows that have no mark
        cur = await conn.execute(
            """
            SELECT MAX(
                       COALESCE((SELECT MAX(id) FROM records WHERE collection = ?), 0),
                       COALESCE((SELECT last_id FROM id_marks WHERE collection = ?), 0)
                   );
            """,
            (collection, collection),
        )
        row = await cur.fetchone()
        await cur.close()
        largest = _to_int(row[0]) if row else None
        now_ms = int(time.time() * 1000)
        if not largest:
            return now_ms
        return max(now_ms, largest + 1)

    async def _mark_issued(self, conn, collection: str, record_id: int) -> None:
        await conn.execute(
            """
            INSERT INTO id_marks(collection, last_id) VALUES (?, ?)
            ON CONFLICT(collection) DO UPDATE SET last_id = MAX(last_id, excluded.last_id);
            """,
            (collection, record_id),
        )

    async def _insert(self, conn, collection: str, fields: Mapping[str, Any]) -> Record:
        record = dict(fields)
        record["id"] = await self._next_id(conn, collection)
        await conn.execute(
            "INSERT INTO records(collection, id, body) VALUES (?, ?, ?);",
            (collection, record["id"], json.dumps(record)),
        )
        await self._mark_issued(conn, collection, record["id"])
        await conn.commit()
        _logger.debug(f"Inserted {collection}/{record['id']}")
        return record

    async def insert(self, collection: str, fields: Mapping[str, Any]) -> Record:
        """Append a record with a freshly assigned id; any `id` in `fields` is ignored."""
        self._check(collection)
        async with self._write_lock:
            async with self._connect() as conn:
                return await self._insert(conn, collection, fields)

    async def insert_unique(
        self, collection: str, fields: Mapping[str, Any], field: str
    ) -> Optional[Record]:
        """
        Append `fields` unless a record already holds the same `field` value.
        Returns None on conflict. The check and the insert share one write.
        """
        self._check(collection)
        async with self._write_lock:
            if await self.find_one(collection, field, fields.get(field)) is not None:
                return None
            async with self._connect() as conn:
                return await self._insert(conn, collection, fields)

    async def _write_body(self, conn, collection: str, record: Record) -> None:
        await conn.execute(
            "UPDATE records SET body = ? WHERE collection = ? AND id = ?;",
            (json.dumps(record), collection, record["id"]),
        )
        await conn.commit()

    async def replace(
        self, collection: str, record_id: int, fields: Mapping[str, Any]
    ) -> Optional[Record]:
        """Swap the whole body of a record, keeping its id and position."""
        self._check(collection)
        async with self._write_lock:
            if await self.get(collection, record_id) is None:
                return None
            record = {**fields, "id": record_id}
            async with self._connect() as conn:
                await self._write_body(conn, collection, record)
            return record

    async def patch(
        self, collection: str, record_id: int, fields: Mapping[str, Any]
    ) -> Optional[Record]:
        """Shallow-merge `fields` into a record; the id never changes."""
        self._check(collection)
        async with self._write_lock:
            current = await self.get(collection, record_id)
            if current is None:
                return None
            record = {**current, **fields, "id": record_id}
            async with self._connect() as conn:
                await self._write_body(conn, collection, record)
            return record

    async def delete(self, collection: str, record_id: int) -> bool:
        """Remove one record. Records in other collections that point at it stay."""
        self._check(collection)
        async with self._write_lock:
            async with self._connect() as conn:
                cur = await conn.execute(
                    "DELETE FROM records WHERE collection = ? AND id = ?;",
                    (collection, record_id),
                )
                deleted = cur.rowcount
                await cur.close()
                await conn.commit()
        return deleted > 0
