# tests/router/test_prompt_builder.py
from lectio.router.prompt_builder import build_translate_prompt


class TestPromptBuilder:

    def test_contiene_idioma_destino(self):
        prompt = build_translate_prompt("Japanese")
        assert "Japanese" in prompt

    def test_contexto_desconocido_por_defecto(self):
        prompt = build_translate_prompt("French")
        assert 'Libro: "Desconocido"' in prompt
        assert 'Capítulo: "Desconocido"' in prompt

    def test_incluye_titulos(self):
        prompt = build_translate_prompt("French", book_title="Mushoku", chapter_title="Prólogo")
        assert 'Libro: "Mushoku"' in prompt
        assert 'Capítulo: "Prólogo"' in prompt

    def test_exige_preservar_placeholders(self):
        prompt = build_translate_prompt("French")
        assert "__IMG_PLACEHOLDER_0__" in prompt

    def test_sin_indentacion_del_template(self):
        prompt = build_translate_prompt("French")
        assert not any(line.startswith("    ") for line in prompt.splitlines()[:5])

    def test_no_quedan_llaves_sin_resolver(self):
        prompt = build_translate_prompt("French")
        assert "{target_lang}" not in prompt
        assert "{book_title}" not in prompt
