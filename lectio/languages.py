# lectio/languages.py
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Language:
    code: str
    name: str    # es lo que viaja al prompt y la clave de las traducciones guardadas


LANGUAGES: list[Language] = [
    Language("id", "Indonesian"),
    Language("en", "English"),
    Language("es", "Spanish"),
    Language("fr", "French"),
    Language("de", "German"),
    Language("ja", "Japanese"),
    Language("ko", "Korean"),
    Language("zh", "Chinese (Simplified)"),
]


def find_language(value: str) -> Optional[Language]:
    """Busca por código o por nombre, sin distinguir mayúsculas."""
    needle = value.strip().lower()
    for lang in LANGUAGES:
        if needle in (lang.code, lang.name.lower()):
            return lang
    return None
