# processor/skeleton.py
import math

from lectio.processor.html_text import strip_tags

_MIN_CHARS_PER_LINE = 16
_CHAR_WIDTH_FACTOR  = 0.55     # ancho medio de un carácter respecto al font-size
_MIN_CHAR_WIDTH_PX  = 6

_LINE_HTML  = '<div class="skeleton-line" style="width:{width:.1f}%"></div>'
_BLOCK_HTML = '<div class="skeleton-block" aria-hidden="true">{lines}</div>'


def chars_per_line(font_size: float, max_width: float) -> int:
    return max(
        _MIN_CHARS_PER_LINE,
        int(max_width // max(font_size * _CHAR_WIDTH_FACTOR, _MIN_CHAR_WIDTH_PX)),
    )


def build_skeleton(chunk_markup: str, seed: int, font_size: float = 18, max_width: float = 720) -> str:
    """
    Placeholder visual de un chunk mientras su traducción está en vuelo.

    Reproduce la forma del párrafo: una barra por línea estimada, con un
    ancho proporcional al texto de esa línea más un jitter pseudoaleatorio.
    El jitter es función pura de (seed, línea) para que el mismo chunk
    se vea igual en cada render.
    """
    per_line = chars_per_line(font_size, max_width)
    lines    = _wrap(strip_tags(chunk_markup), per_line)

    bars = []
    for idx, line in enumerate(lines):
        base   = min(100.0, max(35.0, len(line) / per_line * 100))
        jitter = (_jitter(seed, idx) - 0.5) * 8
        width  = max(32.0, min(100.0, base + jitter))
        bars.append(_LINE_HTML.format(width=width))

    return _BLOCK_HTML.format(lines="".join(bars))


def _wrap(text: str, per_line: int) -> list[str]:
    """Word-wrap greedy. Siempre devuelve al menos una línea."""
    lines: list[str] = []
    current = ""

    for word in text.split(" ") if text else []:
        if not current:
            current = word
        elif len(current) + 1 + len(word) > per_line:
            lines.append(current)
            current = word
        else:
            current += " " + word

    if current:
        lines.append(current)

    return lines or [" "]


def _jitter(seed: int, index: int) -> float:
    """Valor en [0, 1) determinista."""
    n = math.sin(seed * 999 + index * 17) * 10000
    return n - math.floor(n)
