# storage/db.py
import sqlite3
import os
from pathlib import Path


_DEFAULT_DB_PATH = Path.home() / ".lectio" / "lectio.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS translations (
    id            TEXT    NOT NULL,
    chapter_id    TEXT    NOT NULL,
    language      TEXT    NOT NULL,
    content       TEXT    NOT NULL,
    translated_at TEXT    NOT NULL,
    PRIMARY KEY (chapter_id, language)
);
"""


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    """
    Abre y configura la conexión a SQLite.
    Siempre devuelve rows como dicts (row_factory).
    """
    path = db_path or os.environ.get("LECTIO_DB_PATH") or str(_DEFAULT_DB_PATH)

    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")   # lecturas mientras otra sesión escribe
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Crea las tablas si no existen. Idempotente."""
    with conn:
        conn.executescript(_SCHEMA)
