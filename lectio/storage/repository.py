# storage/repository.py
import logging
import sqlite3
from datetime import datetime, timezone

from lectio.storage.db import get_connection, init_schema
from lectio.storage.models import TranslationRecord, make_translation_id

logger = logging.getLogger(__name__)


class Repository:
    """
    Única interfaz entre el resto de la aplicación y SQLite.
    Recibe un db_path para facilitar el testing con :memory:.
    """

    def __init__(self, db_path: str | None = None):
        self._conn = get_connection(db_path)
        init_schema(self._conn)

    # ------------------------------------------------------------------
    # Translations
    # ------------------------------------------------------------------

    def get_translation(self, chapter_id: str, language: str) -> TranslationRecord | None:
        row = self._conn.execute(
            "SELECT * FROM translations WHERE chapter_id = ? AND language = ?",
            (chapter_id, language),
        ).fetchone()
        return self._row_to_translation(row) if row else None

    def save_translation(self, record: TranslationRecord) -> None:
        """
        Upsert por (chapter_id, language) en una sola sentencia.
        El id es solo informativo: la clave es el par, no el string unido.
        Un re-traducir forzado reemplaza el registro anterior de forma atómica.
        """
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO translations (id, chapter_id, language, content, translated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (chapter_id, language)
                DO UPDATE SET id            = excluded.id,
                              content       = excluded.content,
                              translated_at = excluded.translated_at
                """,
                (record.id, record.chapter_id, record.language,
                 record.content, record.translated_at),
            )
        logger.debug("Traducción guardada: %s (%d chars)", record.id, len(record.content))

    def create_translation(self, chapter_id: str, language: str, content: str) -> TranslationRecord:
        """Construye el registro con timestamp actual y lo persiste."""
        record = TranslationRecord(
            id            = make_translation_id(chapter_id, language),
            chapter_id    = chapter_id,
            language      = language,
            content       = content,
            translated_at = datetime.now(timezone.utc).isoformat(),
        )
        self.save_translation(record)
        return record

    def get_languages(self, chapter_id: str) -> list[str]:
        """Idiomas con traducción guardada para un capítulo, en orden alfabético."""
        rows = self._conn.execute(
            "SELECT language FROM translations WHERE chapter_id = ? ORDER BY language ASC",
            (chapter_id,),
        ).fetchall()
        return [r["language"] for r in rows]

    # ------------------------------------------------------------------
    # Mapeo de rows a dataclasses
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_translation(row: sqlite3.Row) -> TranslationRecord:
        return TranslationRecord(
            id=row["id"],
            chapter_id=row["chapter_id"],
            language=row["language"],
            content=row["content"],
            translated_at=row["translated_at"],
        )

    # ------------------------------------------------------------------
    # Cleanup (para tests)
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._conn.close()
