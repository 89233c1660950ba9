# processor/html_text.py
import re

_TAG_RE        = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_tags(html: str) -> str:
    """Quita todas las etiquetas y colapsa espacios. Devuelve texto plano."""
    text = _TAG_RE.sub(" ", html)
    return _WHITESPACE_RE.sub(" ", text).strip()
