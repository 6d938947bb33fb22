from __future__ import annotations
from typing import Optional
import sqlite3, os
from filosign_core.storage.provider import StorageProvider, StorageError


class SQLiteStorage(StorageProvider):
    name = "sqlite"

    def __init__(self, path="db/filosign_state.db"):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.path = path
        self.db = sqlite3.connect(path, check_same_thread=False)

        self._init()

    def _init(self) -> None:
        self.db.execute("""CREATE TABLE IF NOT EXISTS kv_store(
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )""")
        self.db.commit()

    def read(self, key: str) -> Optional[str]:
        try:
            cur = self.db.execute("SELECT value FROM kv_store WHERE key=?", (key,))
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"read failed for {key!r}: {e}") from e
        return row[0] if row else None

    def write(self, key: str, value: str) -> None:
        try:
            self.db.execute(
                "INSERT INTO kv_store(key,value) VALUES(?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (key, value)
            )
            self.db.commit()
        except sqlite3.Error as e:
            raise StorageError(f"write failed for {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.db.execute("DELETE FROM kv_store WHERE key=?", (key,))
            self.db.commit()
        except sqlite3.Error as e:
            raise StorageError(f"delete failed for {key!r}: {e}") from e

    def close(self):
        self.db.close()
