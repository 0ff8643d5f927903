# storage/repos.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from typing import Optional

from projtrack.core.clock import Clock, now_ms
from projtrack.storage.db import Database


class AppStateRepo:
    """
    Key/value rows in app_state. Each write stamps updated_at (epoch ms).
    """

    def __init__(self, db: Database, clock: Clock = now_ms):
        self.db = db
        self.clock = clock

    def get(self, key: str) -> Optional[str]:
        row = self.db.conn.execute(
            "SELECT value FROM app_state WHERE key=?",
            (key,),
        ).fetchone()
        return row["value"] if row else None

    def updated_at(self, key: str) -> Optional[int]:
        row = self.db.conn.execute(
            "SELECT updated_at FROM app_state WHERE key=?",
            (key,),
        ).fetchone()
        return int(row["updated_at"]) if row else None

    def set(self, key: str, value: str) -> None:
        self.db.conn.execute(
            """
            INSERT INTO app_state(key, value, updated_at) VALUES(?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value=excluded.value,
                updated_at=excluded.updated_at
            """,
            (key, value, self.clock()),
        )
        self.db.conn.commit()

    def delete(self, key: str) -> None:
        self.db.conn.execute("DELETE FROM app_state WHERE key=?", (key,))
        self.db.conn.commit()
