# session/cache.py
import hashlib
from typing import Optional

_EDGE_CHARS = 32


def chunk_fingerprint(chapter_id: str, language: str, chunk: str) -> str:
    """Identidad de un chunk: capítulo, idioma, longitud, primeros y últimos 32 chars."""
    raw = "\x1f".join([
        chapter_id,
        language,
        str(len(chunk)),
        chunk[:_EDGE_CHARS],
        chunk[-_EDGE_CHARS:],
    ])
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class ChunkCache:
    """
    Traducciones de chunk aceptadas, vivas mientras dure el proceso.
    Sobrevive a la cancelación de la sesión que la llenó: reintentar
    justo después sale más barato.
    """

    def __init__(self):
        self._entries: dict[str, str] = {}

    def get(self, chapter_id: str, language: str, chunk: str) -> Optional[str]:
        return self._entries.get(chunk_fingerprint(chapter_id, language, chunk))

    def put(self, chapter_id: str, language: str, chunk: str, translated: str) -> None:
        key = chunk_fingerprint(chapter_id, language, chunk)
        # write-once por clave
        self._entries.setdefault(key, translated)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


SkeletonKey = tuple[str, str, int, int, tuple[int, ...]]


def skeleton_key(chapter_id: str, language: str, protected_markup: str, chunks: list[str]) -> SkeletonKey:
    return (
        chapter_id,
        language,
        len(protected_markup),
        len(chunks),
        tuple(len(c) for c in chunks),
    )


class SkeletonCache:
    """Skeletons por capítulo/idioma para no recalcularlos al volver a entrar."""

    def __init__(self):
        self._entries: dict[SkeletonKey, list[str]] = {}

    def get(self, key: SkeletonKey) -> Optional[list[str]]:
        return self._entries.get(key)

    def put(self, key: SkeletonKey, skeletons: list[str]) -> None:
        self._entries[key] = list(skeletons)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
