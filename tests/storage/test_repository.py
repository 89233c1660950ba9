# tests/storage/test_repository.py
import pytest

from lectio.storage.models import TranslationRecord, make_translation_id
from lectio.storage.repository import Repository


@pytest.fixture
def repo():
    """Repository con SQLite en memoria, aislado por test."""
    r = Repository(db_path=":memory:")
    yield r
    r.close()


class TestTranslations:

    def test_get_inexistente(self, repo):
        assert repo.get_translation("ch-1", "French") is None

    def test_create_y_get(self, repo):
        created = repo.create_translation("ch-1", "French", "<p>Bonjour</p>")
        loaded  = repo.get_translation("ch-1", "French")

        assert loaded == created
        assert loaded.id == "ch-1-French"
        assert loaded.content == "<p>Bonjour</p>"
        assert loaded.translated_at.endswith("+00:00")

    def test_upsert_reemplaza_contenido(self, repo):
        repo.create_translation("ch-1", "French", "<p>v1</p>")
        repo.create_translation("ch-1", "French", "<p>v2</p>")

        assert repo.get_translation("ch-1", "French").content == "<p>v2</p>"
        assert repo.get_languages("ch-1") == ["French"]

    def test_idiomas_independientes(self, repo):
        repo.create_translation("ch-1", "French", "<p>Bonjour</p>")
        repo.create_translation("ch-1", "German", "<p>Hallo</p>")

        assert repo.get_translation("ch-1", "German").content == "<p>Hallo</p>"
        assert repo.get_translation("ch-1", "French").content == "<p>Bonjour</p>"

    def test_guiones_no_mezclan_capitulos(self, repo):
        # "book-1" + "ch-French" y "book" + "1-ch-French" comparten el id unido
        repo.create_translation("book-1", "ch-French", "<p>uno</p>")

        assert repo.get_translation("book", "1-ch-French") is None
        assert repo.get_translation("book-1", "ch-French").content == "<p>uno</p>"

    def test_pares_con_mismo_id_unido_conviven(self, repo):
        repo.create_translation("a-b", "c", "<p>X</p>")
        repo.create_translation("a", "b-c", "<p>Y</p>")

        assert repo.get_translation("a-b", "c").content == "<p>X</p>"
        assert repo.get_translation("a", "b-c").content == "<p>Y</p>"
        assert repo.get_languages("a") == ["b-c"]
        assert repo.get_languages("a-b") == ["c"]

    def test_idioma_con_guion(self, repo):
        repo.create_translation("ch-1", "zh-CN", "<p>你好</p>")
        repo.create_translation("ch-1", "zh-CN", "<p>你好!</p>")

        assert repo.get_translation("ch-1", "zh-CN").content == "<p>你好!</p>"
        assert repo.get_languages("ch-1") == ["zh-CN"]

    def test_save_translation(self, repo):
        record = TranslationRecord(
            id            = make_translation_id("ch-9", "Korean"),
            chapter_id    = "ch-9",
            language      = "Korean",
            content       = "<p>안녕</p>",
            translated_at = "2026-01-01T00:00:00+00:00",
        )
        repo.save_translation(record)
        assert repo.get_translation("ch-9", "Korean") == record


class TestLanguages:

    def test_sin_traducciones(self, repo):
        assert repo.get_languages("ch-1") == []

    def test_orden_alfabetico_y_por_capitulo(self, repo):
        repo.create_translation("ch-1", "Spanish", "x")
        repo.create_translation("ch-1", "French", "x")
        repo.create_translation("ch-2", "German", "x")

        assert repo.get_languages("ch-1") == ["French", "Spanish"]
        assert repo.get_languages("ch-2") == ["German"]


class TestPersistence:

    def test_sobrevive_a_reabrir(self, tmp_path):
        path = str(tmp_path / "lectio.db")
        first = Repository(db_path=path)
        first.create_translation("ch-1", "French", "<p>Bonjour</p>")
        first.close()

        second = Repository(db_path=path)
        try:
            assert second.get_translation("ch-1", "French").content == "<p>Bonjour</p>"
        finally:
            second.close()

    def test_id_logico(self):
        assert make_translation_id("abc", "Chinese (Simplified)") == "abc-Chinese (Simplified)"
