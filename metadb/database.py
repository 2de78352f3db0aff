"""
SQLite database utilities for the metadata table.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from .errors import ConnectivityError


logger = logging.getLogger(__name__)

TABLE_NAME = "metadata"

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
  ID INTEGER PRIMARY KEY AUTOINCREMENT,
  Name VARCHAR(255) NOT NULL UNIQUE,
  Value TEXT NOT NULL,
  ValueType TINYINT NOT NULL
  -- 0 = bool, 1 = int, 2 = float, 3 = string
)
"""


def initialize_schema(connection: Any) -> None:
    """Create the metadata table on ``connection`` if it does not exist yet.

    Raises:
        ConnectivityError: If the statement cannot be executed.
    """
    try:
        cursor = connection.cursor()
        try:
            _ = cursor.execute(SCHEMA_SQL)
        finally:
            cursor.close()
        connection.commit()
    except Exception as exc:
        raise ConnectivityError(
            f"metadb: got error while creating {TABLE_NAME} table: {exc}"
        ) from exc
    logger.debug("Ensured %s table exists", TABLE_NAME)


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open a SQLite connection with sane defaults."""
    path = Path(db_path)
    if str(path) != ":memory:":
        path.parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(str(path))
    connection.row_factory = sqlite3.Row
    return connection
