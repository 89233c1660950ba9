# session/quality.py
import re

from lectio.processor.html_text import strip_tags

# Constantes empíricas, sin derivación documentada. Configurables vía config.yaml.
DEFAULT_POOR_RATIO_THRESHOLD = 0.7
DEFAULT_MIN_WORD_LENGTH      = 4


def unchanged_word_ratio(source_html: str, translated_html: str, min_word_length: int = DEFAULT_MIN_WORD_LENGTH) -> float:
    """
    Fracción de palabras únicas del original (len >= min_word_length) que
    siguen apareciendo literalmente (sin distinguir mayúsculas) en la traducción.
    """
    plain_source     = strip_tags(source_html).lower()
    plain_translated = strip_tags(translated_html).lower()

    # Solo ASCII: las letras acentuadas y CJK cortan palabra
    words = set(re.findall(rf"\b\w{{{min_word_length},}}\b", plain_source, re.ASCII))
    if not words:
        return 0.0

    unchanged = sum(1 for w in words if w in plain_translated)
    return unchanged / len(words)


def is_poor(
    source_html:     str,
    translated_html: str,
    threshold:       float = DEFAULT_POOR_RATIO_THRESHOLD,
    min_word_length: int   = DEFAULT_MIN_WORD_LENGTH,
) -> bool:
    """
    True si la traducción parece un eco del original: texto vacío
    o más de `threshold` de las palabras sin cambiar.
    """
    if not strip_tags(translated_html):
        return True
    return unchanged_word_ratio(source_html, translated_html, min_word_length) > threshold


class QualityPolicy:
    """Heurística parametrizada, inyectable en el orquestador."""

    def __init__(
        self,
        threshold:       float = DEFAULT_POOR_RATIO_THRESHOLD,
        min_word_length: int   = DEFAULT_MIN_WORD_LENGTH,
    ):
        self.threshold       = threshold
        self.min_word_length = min_word_length

    def is_poor(self, source_html: str, translated_html: str) -> bool:
        return is_poor(source_html, translated_html, self.threshold, self.min_word_length)
