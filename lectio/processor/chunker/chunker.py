# chunker/chunker.py
import re

from .models import ChunkConfig


class HtmlChunker:
    """
    Parte el markup de un capítulo en trozos que viajan en una sola llamada.

    Dos pasadas:
      1. split por cierres de bloque (</p>, </div>, ...): cada segmento
         termina con su delimitador.
      2. empaquetado greedy de segmentos hasta max_chars.

    Un segmento más grande que max_chars sale solo, sobredimensionado,
    antes que cortarlo a mitad de etiqueta.
    """

    def __init__(self, config: ChunkConfig | None = None):
        self._config = config or ChunkConfig()
        tags = "|".join(self._config.block_tags)
        self._split_re = re.compile(rf"(</(?:{tags})>)", re.IGNORECASE)

    @property
    def max_chars(self) -> int:
        return self._config.max_chars

    def chunk(self, markup: str, max_chars: int | None = None) -> list[str]:
        limit = max_chars if max_chars is not None else self._config.max_chars
        if limit < 1:
            raise ValueError(f"max_chars debe ser >= 1, recibido {limit}")

        chunks: list[str] = []
        current = ""

        for segment in self._segments(markup):
            if len(current) + len(segment) <= limit:
                current += segment
                continue

            # No cabe: se cierra el buffer actual (si hay) y el segmento abre uno nuevo
            if current:
                chunks.append(current)
            current = segment

        if current:
            chunks.append(current)

        return chunks

    def _segments(self, markup: str) -> list[str]:
        """
        Pasada 1. re.split con grupo devuelve [texto, cierre, texto, cierre, ..., resto]:
        se pega cada cierre a su texto para que ningún corte caiga antes de él.
        """
        parts = self._split_re.split(markup)
        segments = [
            parts[i] + parts[i + 1]
            for i in range(0, len(parts) - 1, 2)
        ]
        if parts[-1]:
            segments.append(parts[-1])
        return segments


def split_html_into_chunks(html: str, max_chars: int = 5000) -> list[str]:
    """Atajo funcional con la configuración por defecto."""
    return HtmlChunker(ChunkConfig(max_chars=max_chars)).chunk(html)
