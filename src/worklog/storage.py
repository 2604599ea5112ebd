"""SQLiteリポジトリ共通処理

ユーザー・ワークアイテム・専題の各リポジトリは同じDBファイル
（data/worklog.db）を共有する。パスの解決順は
引数 > 環境変数 WORKLOG_DB_PATH > 既定パス。
"""

from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


def default_db_path() -> Path:
    root = Path(__file__).resolve().parents[2]
    return root / "data" / "worklog.db"


def resolve_db_path(db_path: Optional[Path] = None) -> Path:
    env_path = os.getenv("WORKLOG_DB_PATH")
    if db_path:
        return Path(db_path)
    if env_path:
        return Path(env_path)
    return default_db_path()


class SQLiteRepository:
    """統合DBを使うリポジトリの基底クラス。"""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = resolve_db_path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        raise NotImplementedError

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()
