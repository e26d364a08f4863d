from __future__ import annotations

import json
from typing import Dict, Optional

import aiosqlite

from core.errors import StorageError
from core.models import Session
from db.database import connect
from utils.logger import get_logger

_logger = get_logger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
LOCATION_KEY = "userLocation"

SESSION_KEYS = (TOKEN_KEY, USER_KEY, LOCATION_KEY)


# ---------------------------
# Raw key-value access
# ---------------------------


async def get_values() -> Dict[str, str]:
    placeholders = ", ".join("?" for _ in SESSION_KEYS)
    async with connect() as conn:
        cur = await conn.execute(
            f"SELECT key, value FROM session_kv WHERE key IN ({placeholders});",
            SESSION_KEYS,
        )
        rows = await cur.fetchall()
        await cur.close()
    return {row["key"]: row["value"] for row in rows}


async def put_values(values: Dict[str, Optional[str]]) -> None:
    """Upsert the given keys; a value of None deletes the key."""
    async with connect() as conn:
        for key, value in values.items():
            if value is None:
                await conn.execute("DELETE FROM session_kv WHERE key = ?;", (key,))
            else:
                await conn.execute(
                    """
                    INSERT INTO session_kv (key, value)
                    VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value;
                    """,
                    (key, value),
                )
        await conn.commit()


# ---------------------------
# Session persistence
# ---------------------------


class SessionStore:
    """
    Durable token/user/location entries, written only by login and logout.
    Database and filesystem failures surface as StorageError.
    """

    async def load(self) -> Session:
        try:
            values = await get_values()
        except (aiosqlite.Error, OSError) as e:
            raise StorageError(f"Could not read the session database: {e}") from e

        token = values.get(TOKEN_KEY)
        if not token:
            return Session()

        user = None
        raw_user = values.get(USER_KEY)
        if raw_user:
            try:
                user = json.loads(raw_user)
            except json.JSONDecodeError:
                _logger.warning("Persisted user profile is not valid JSON, ignored.")

        return Session(
            token=token,
            user=user,
            selected_location=values.get(LOCATION_KEY) or None,
        )

    async def save(self, session: Session) -> None:
        await self._write(
            {
                TOKEN_KEY: session.token,
                USER_KEY: json.dumps(session.user),
                LOCATION_KEY: session.selected_location,
            }
        )

    async def clear(self) -> None:
        await self._write({k: None for k in SESSION_KEYS})

    async def _write(self, values: Dict[str, Optional[str]]) -> None:
        try:
            await put_values(values)
        except (aiosqlite.Error, OSError) as e:
            raise StorageError(f"Could not write the session database: {e}") from e
