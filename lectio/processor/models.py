from dataclasses import dataclass


@dataclass(frozen=True)
class Chapter:
    """
    Lo que entrega la ingesta de documentos: un capítulo ya parseado.
    Solo lectura para el pipeline de traducción.
    """
    id:      str
    book_id: str
    index:   int
    title:   str
    content: str    # markup HTML en el idioma original
