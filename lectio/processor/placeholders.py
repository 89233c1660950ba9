# processor/placeholders.py
import re

_IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)

PLACEHOLDER_TEMPLATE = "__IMG_PLACEHOLDER_{index}__"


def protect_images(markup: str) -> tuple[str, list[str]]:
    """
    Sustituye cada <img ...> por un token posicional que el modelo no toca.
    Se aplica una sola vez sobre el capítulo completo, antes de chunkear:
    así ninguna etiqueta de imagen puede quedar partida entre dos chunks.
    """
    tags: list[str] = []

    def _replace(match: re.Match) -> str:
        tags.append(match.group(0))
        return PLACEHOLDER_TEMPLATE.format(index=len(tags) - 1)

    return _IMG_RE.sub(_replace, markup), tags


def restore_images(markup: str, tags: list[str]) -> str:
    """
    Reinserta las etiquetas originales. Tolera mayúsculas y espacios que el
    modelo haya metido dentro del token (p.ej. "__ IMG_PLACEHOLDER_0 __").
    """
    for index, tag in enumerate(tags):
        pattern = re.compile(rf"__\s*IMG_PLACEHOLDER_{index}\s*__", re.IGNORECASE)
        # lambda: la etiqueta se inserta literal, sin interpretar backslashes
        markup = pattern.sub(lambda _m, tag=tag: tag, markup)
    return markup
