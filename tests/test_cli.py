# tests/test_cli.py
import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch
from click.testing import CliRunner

from lectio.cli import main
from lectio.exceptions import ConfigurationError
from lectio.session.models import (
    EventKind,
    Notice,
    NoticeLevel,
    ReaderState,
    SessionStatus,
    TranslationEvent,
)
from lectio.storage.models import TranslationRecord


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def chapter_file(tmp_path) -> Path:
    """Capítulo .html válido para los tests."""
    f = tmp_path / "capitulo_01.html"
    f.write_text("<p>Hello world</p>", encoding="utf-8")
    return f


def make_orchestrator(status=SessionStatus.COMPLETED, content="<p>Bonjour monde</p>", events=()):
    """
    Orquestador falso. `events` se entregan a los listeners suscritos
    durante translate(), como haría el real.
    """
    orch      = MagicMock()
    listeners = []
    orch.subscribe.side_effect = lambda listener: listeners.append(listener) or (lambda: None)

    async def _translate(lang, force=False):
        for event in events:
            for listener in listeners:
                listener(event)
        return status

    orch.translate = AsyncMock(side_effect=_translate)
    orch.displayed_content = content
    return orch


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def run_translate(runner, chapter, target="fr", *extra):
    """Shortcut para invocar el comando translate."""
    return runner.invoke(main, ["translate", "--chapter", str(chapter), "--to", target, *extra])


# ------------------------------------------------------------------
# translate: validaciones
# ------------------------------------------------------------------

class TestTranslateValidation:

    def test_archivo_inexistente(self, runner, tmp_path):
        result = run_translate(runner, tmp_path / "no_existe.html")
        assert result.exit_code == 1
        assert "no encontrado" in result.output

    def test_formato_no_soportado(self, runner, tmp_path):
        f = tmp_path / "capitulo.pdf"
        f.write_text("x")
        result = run_translate(runner, f)
        assert result.exit_code == 1
        assert "no soportado" in result.output

    def test_idioma_desconocido(self, runner, chapter_file):
        result = run_translate(runner, chapter_file, "klingon")
        assert result.exit_code == 1
        assert "Idioma no soportado" in result.output

    def test_proveedor_desconocido(self, runner, chapter_file):
        with patch("lectio.cli.build_orchestrator", side_effect=ConfigurationError("Proveedor desconocido: 'x'")):
            result = run_translate(runner, chapter_file)
        assert result.exit_code == 1
        assert "Proveedor desconocido" in result.output


# ------------------------------------------------------------------
# translate: ejecución
# ------------------------------------------------------------------

class TestTranslateRun:

    def test_traduccion_exitosa_imprime_html(self, runner, chapter_file):
        orch = make_orchestrator()
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = run_translate(runner, chapter_file)

        assert result.exit_code == 0
        assert "<p>Bonjour monde</p>" in result.output
        orch.translate.assert_awaited_once_with("French", force=False)

    def test_codigo_y_nombre_resuelven_igual(self, runner, chapter_file):
        orch = make_orchestrator()
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            run_translate(runner, chapter_file, "german")
        orch.translate.assert_awaited_once_with("German", force=False)

    def test_force(self, runner, chapter_file):
        orch = make_orchestrator()
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            run_translate(runner, chapter_file, "fr", "--force")
        orch.translate.assert_awaited_once_with("French", force=True)

    def test_abre_el_capitulo_con_titulo_del_libro(self, runner, chapter_file):
        orch = make_orchestrator()
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            run_translate(runner, chapter_file, "fr", "--book-title", "Mushoku")

        chapter = orch.open_chapter.call_args.args[0]
        assert chapter.title == "capitulo_01"
        assert chapter.content == "<p>Hello world</p>"
        assert orch.open_chapter.call_args.kwargs["book_title"] == "Mushoku"

    def test_output_a_archivo(self, runner, chapter_file, tmp_path):
        out  = tmp_path / "capitulo_01.fr.html"
        orch = make_orchestrator()
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = run_translate(runner, chapter_file, "fr", "--output", str(out))

        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == "<p>Bonjour monde</p>"

    def test_progreso_por_chunk(self, runner, chapter_file):
        state  = ReaderState(translated_content="x", current_language="French", pending_chunks=1, is_translating=True)
        events = [TranslationEvent(kind=EventKind.CONTENT, state=state, session_id=1, slot_index=0, content="x")]
        orch   = make_orchestrator(events=events)
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = run_translate(runner, chapter_file)

        assert "1/2 (50%)" in result.output

    def test_avisos_se_imprimen(self, runner, chapter_file):
        notice = Notice(level=NoticeLevel.SUCCESS, title="Traducción completada")
        events = [TranslationEvent(kind=EventKind.NOTICE, state=ReaderState(), notice=notice)]
        orch   = make_orchestrator(events=events)
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = run_translate(runner, chapter_file)

        assert "Traducción completada" in result.output

    def test_sin_api_key_indica_donde_configurarla(self, runner, chapter_file):
        events = [TranslationEvent(kind=EventKind.SETTINGS_REQUESTED, state=ReaderState())]
        orch   = make_orchestrator(status=SessionStatus.IDLE, events=events)
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = run_translate(runner, chapter_file)

        assert result.exit_code == 1
        assert "LECTIO_API_KEY" in result.output

    def test_sesion_fallida_sale_con_2(self, runner, chapter_file):
        orch = make_orchestrator(status=SessionStatus.FAILED)
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = run_translate(runner, chapter_file)

        assert result.exit_code == 2
        assert "failed" in result.output


# ------------------------------------------------------------------
# show / languages
# ------------------------------------------------------------------

class TestShow:

    def test_lista_idiomas_guardados(self, runner, chapter_file):
        orch = MagicMock()
        orch.repository.get_languages.return_value = ["French", "German"]
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = runner.invoke(main, ["show", "--chapter", str(chapter_file)])

        assert result.exit_code == 0
        assert "French" in result.output
        assert "German" in result.output

    def test_sin_traducciones(self, runner, chapter_file):
        orch = MagicMock()
        orch.repository.get_languages.return_value = []
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = runner.invoke(main, ["show", "--chapter", str(chapter_file)])

        assert result.exit_code == 0
        assert "no tiene traducciones" in result.output

    def test_muestra_traduccion(self, runner, chapter_file):
        orch = MagicMock()
        orch.repository.get_translation.return_value = TranslationRecord(
            id="x-French", chapter_id="x", language="French",
            content="<p>Bonjour</p>", translated_at="2026-01-01T00:00:00+00:00",
        )
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = runner.invoke(main, ["show", "--chapter", str(chapter_file), "--to", "fr"])

        assert result.exit_code == 0
        assert "<p>Bonjour</p>" in result.output

    def test_traduccion_inexistente(self, runner, chapter_file):
        orch = MagicMock()
        orch.repository.get_translation.return_value = None
        with patch("lectio.cli.build_orchestrator", return_value=orch):
            result = runner.invoke(main, ["show", "--chapter", str(chapter_file), "--to", "fr"])

        assert result.exit_code == 1


class TestLanguages:

    def test_lista_catalogo(self, runner):
        result = runner.invoke(main, ["languages"])
        assert result.exit_code == 0
        assert "fr" in result.output
        assert "Chinese (Simplified)" in result.output
