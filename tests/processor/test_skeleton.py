# tests/processor/test_skeleton.py
import re

from lectio.processor.html_text import strip_tags
from lectio.processor.skeleton import build_skeleton, chars_per_line

_WIDTH_RE = re.compile(r"width:([\d.]+)%")


def widths(skeleton: str) -> list[float]:
    return [float(w) for w in _WIDTH_RE.findall(skeleton)]


class TestSkeleton:

    def test_mismo_seed_mismo_resultado(self):
        chunk = "<p>" + "palabra " * 200 + "</p>"
        assert build_skeleton(chunk, seed=3) == build_skeleton(chunk, seed=3)

    def test_seed_distinto_cambia_el_jitter(self):
        chunk = "<p>" + "palabra " * 200 + "</p>"
        assert build_skeleton(chunk, seed=1) != build_skeleton(chunk, seed=2)

    def test_una_barra_por_linea_estimada(self):
        per_line = chars_per_line(font_size=18, max_width=720)
        word  = "x" * (per_line - 1)
        chunk = "<p>" + " ".join([word] * 5) + "</p>"

        assert len(widths(build_skeleton(chunk, 0, 18, 720))) == 5

    def test_anchos_entre_32_y_100(self):
        chunk = "<p>" + "lorem ipsum dolor " * 100 + "</p><p>fin</p>"
        for w in widths(build_skeleton(chunk, 7)):
            assert 32.0 <= w <= 100.0

    def test_chunk_sin_texto_tiene_una_linea(self):
        assert len(widths(build_skeleton("<div></div>", 0))) == 1

    def test_no_contiene_texto_del_chunk(self):
        skeleton = build_skeleton("<p>Secreto</p>", 0)
        assert "Secreto" not in skeleton

    def test_chars_per_line_tiene_minimo(self):
        assert chars_per_line(font_size=200, max_width=100) == 16


class TestStripTags:

    def test_quita_etiquetas_y_colapsa_espacios(self):
        assert strip_tags("<p>Hola\n  <b>mundo</b></p>") == "Hola mundo"

    def test_vacio(self):
        assert strip_tags("<div><br/></div>") == ""
