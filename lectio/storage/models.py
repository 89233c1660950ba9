from dataclasses import dataclass


def make_translation_id(chapter_id: str, language: str) -> str:
    """Id legible "<chapter_id>-<language>". Puede repetirse entre pares distintos: no es la clave."""
    return f"{chapter_id}-{language}"


@dataclass
class TranslationRecord:
    """
    Traducción completa de un capítulo a un idioma.
    Solo se escribe al terminar una sesión sin cancelar, nunca parcial.
    """
    id:            str
    chapter_id:    str
    language:      str
    content:       str
    translated_at: str    # ISO-8601 UTC
