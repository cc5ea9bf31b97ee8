import psycopg
from psycopg.rows import dict_row

from filepipe.database.connection import get_connection
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.exceptions import ObjectNotFoundError, StorageError
from filepipe.storage.models import StoredObject


class PostgresObjectStore(BaseObjectStore):
    """Stores objects as rows of the objects table.

    Each put is a single upsert statement, so readers see either the previous
    row or the new one.
    """

    def ensure_schema(self) -> None:
        """Create the objects table if it does not exist."""
        with get_connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS objects (
                    key TEXT PRIMARY KEY,
                    body BYTEA NOT NULL,
                    content_type TEXT NOT NULL,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )
            conn.commit()

    def put(self, key: str, body: bytes, content_type: str) -> None:
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO objects (key, body, content_type)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (key) DO UPDATE
                    SET body = EXCLUDED.body,
                        content_type = EXCLUDED.content_type,
                        updated_at = NOW()
                    """,
                    (key, body, content_type),
                )
                conn.commit()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to write object '{key}': {exc}") from exc

    def get(self, key: str) -> StoredObject:
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        "SELECT key, body, content_type FROM objects WHERE key = %s",
                        (key,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to read object '{key}': {exc}") from exc

        if row is None:
            raise ObjectNotFoundError(f"Object not found: {key}")

        return StoredObject(
            key=row["key"],
            body=bytes(row["body"]),
            content_type=row["content_type"],
        )

    def exists(self, key: str) -> bool:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1 FROM objects WHERE key = %s", (key,))
                    return cur.fetchone() is not None
        except psycopg.Error as exc:
            raise StorageError(f"Failed to check object '{key}': {exc}") from exc
