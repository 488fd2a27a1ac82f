"""DuckDB connections for the exported analysis tables."""

import duckdb
from pathlib import Path

from bora_stats.config import DB_PATH
from bora_stats.db.schema import create_all_tables


def get_connection(db_path: Path | str = DB_PATH, read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Return a file-backed DuckDB connection.

    Writers get the parent directory created; readers open read-only so a
    presentation process can share the file.
    """
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def open_export(db_path: Path | str = DB_PATH) -> duckdb.DuckDBPyConnection:
    """Writable connection with every export table created."""
    conn = get_connection(db_path)
    create_all_tables(conn)
    return conn
