#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sqlite3
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, db_path: str = "projtrack.db"):
        if db_path != ":memory:":
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            db_path = str(path)
        self.db_path = db_path
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row

    def _cols(self, table: str) -> List[str]:
        return [
            r["name"]
            for r in self.conn.execute(f"PRAGMA table_info({table});").fetchall()
        ]

    def init_schema(self):
        cur = self.conn.cursor()

        # whole project tree lives under one key as a JSON blob
        cur.execute("""
            CREATE TABLE IF NOT EXISTS app_state (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at INTEGER NOT NULL DEFAULT 0
            );
        """)

        # app_state migration (table created before updated_at existed)
        if "updated_at" not in self._cols("app_state"):
            cur.execute(
                "ALTER TABLE app_state ADD COLUMN updated_at INTEGER NOT NULL DEFAULT 0;"
            )

        self.conn.commit()
        logger.debug("schema ready at %s", self.db_path)

    def close(self):
        try:
            self.conn.close()
        except sqlite3.Error:
            logger.warning("closing %s failed", self.db_path, exc_info=True)
