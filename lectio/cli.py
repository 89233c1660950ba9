# lectio/cli.py
import asyncio
import hashlib
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from lectio.config_loader import resolve_config_path
from lectio.exceptions import ConfigurationError
from lectio.factory import build_orchestrator
from lectio.languages import LANGUAGES, find_language
from lectio.processor.models import Chapter
from lectio.session.models import EventKind, NoticeLevel, SessionStatus, TranslationEvent


# Carga .env una sola vez, antes que cualquier otra cosa
load_dotenv()

_SUPPORTED_FORMATS = {".html", ".htm", ".xhtml"}

_NOTICE_COLORS = {
    NoticeLevel.SUCCESS: "green",
    NoticeLevel.INFO:    None,
    NoticeLevel.WARNING: "yellow",
    NoticeLevel.ERROR:   "red",
}


# ------------------------------------------------------------------
# Grupo raíz
# ------------------------------------------------------------------

@click.group()
@click.version_option(package_name="lectio")
@click.option("--config", "config_path", default=None, help="Ruta al config.yaml")
@click.option("--db", "db_path", default=None, help="Ruta a la base de datos SQLite")
@click.option("--verbose", "-v", is_flag=True, help="Muestra logs de depuración")
@click.pass_context
def main(ctx, config_path, db_path, verbose):
    """
    Lectio: lector de capítulos con traducción progresiva.

    Traduce el capítulo actual por trozos, mostrando el avance
    chunk a chunk y guardando el resultado para la próxima lectura.
    """
    if verbose:
        logging.basicConfig(
            level  = logging.DEBUG,
            format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["db_path"]     = db_path


# ------------------------------------------------------------------
# lectio translate
# ------------------------------------------------------------------

@main.command()
@click.option(
    "--chapter", "-c",
    required = True,
    type     = click.Path(exists=False),   # validamos nosotros para mejor mensaje
    help     = "Archivo HTML del capítulo (.html, .xhtml)",
)
@click.option(
    "--to", "target_lang",
    required = True,
    metavar  = "LANG",
    help     = "Idioma destino (código o nombre: fr, French)",
)
@click.option("--force", is_flag=True, help="Ignora la traducción guardada y vuelve a traducir")
@click.option("--book-title", default="", help="Título del libro (contexto para el modelo)")
@click.option(
    "--output", "-o",
    type = click.Path(dir_okay=False),
    help = "Escribe el HTML traducido en este archivo",
)
@click.pass_context
def translate(ctx, chapter: str, target_lang: str, force: bool, book_title: str, output: str | None):
    """Traduce un capítulo mostrando el progreso chunk a chunk."""

    # ── Validaciones de entrada ───────────────────────────────────
    _validate_file(chapter)
    language = _resolve_language(target_lang)

    # ── Ensamblar pipeline ────────────────────────────────────────
    orchestrator = _build(ctx)
    chapter_obj  = _load_chapter(Path(chapter))
    orchestrator.open_chapter(chapter_obj, book_title=book_title)

    settings_requested = []

    def _on_event(event: TranslationEvent) -> None:
        if event.kind is EventKind.SETTINGS_REQUESTED:
            settings_requested.append(event)
        elif event.kind is EventKind.NOTICE and event.notice:
            _print_notice(event.notice)
        elif event.kind is EventKind.CONTENT and event.slot_index is not None:
            total   = event.slot_index + 1 + event.state.pending_chunks
            current = event.slot_index + 1
            click.echo(f"[lectio] Traduciendo... {current}/{total} ({int(current / total * 100)}%)")

    orchestrator.subscribe(_on_event)

    # ── Ejecutar ──────────────────────────────────────────────────
    try:
        status = asyncio.run(orchestrator.translate(language, force=force))

    except KeyboardInterrupt:
        orchestrator.cancel_translate()
        click.echo("\n[lectio] Traducción cancelada. No se guardó nada.")
        sys.exit(0)

    if settings_requested:
        _abort(
            "No hay API key configurada.\n"
            f"Añádela en {resolve_config_path(ctx.obj['config_path'])} "
            f"(provider.api_key) o en la variable LECTIO_API_KEY."
        )

    if status is not SessionStatus.COMPLETED:
        _error(f"La traducción terminó en estado '{status.value}'.")
        sys.exit(2)

    if output:
        Path(output).write_text(orchestrator.displayed_content, encoding="utf-8")
        click.echo(f"[lectio] Output: {output}")
    else:
        click.echo("")
        click.echo(orchestrator.displayed_content)


# ------------------------------------------------------------------
# lectio show
# ------------------------------------------------------------------

@main.command()
@click.option("--chapter", "-c", required=True, type=click.Path(exists=False), help="Archivo HTML del capítulo")
@click.option("--to", "target_lang", default=None, metavar="LANG", help="Idioma a mostrar")
@click.pass_context
def show(ctx, chapter: str, target_lang: str | None):
    """Muestra una traducción guardada o lista los idiomas disponibles."""
    _validate_file(chapter)
    orchestrator = _build(ctx)
    chapter_obj  = _load_chapter(Path(chapter))
    repo         = orchestrator.repository

    if not target_lang:
        languages = repo.get_languages(chapter_obj.id)
        if not languages:
            click.echo("[lectio] Este capítulo no tiene traducciones guardadas.")
            return
        click.echo("[lectio] Traducciones guardadas:")
        for lang in languages:
            click.echo(f"  - {lang}")
        return

    language = _resolve_language(target_lang)
    record   = repo.get_translation(chapter_obj.id, language)
    if record is None:
        _abort(f"No hay traducción guardada a {language} para este capítulo.")

    click.echo(record.content)


# ------------------------------------------------------------------
# lectio languages
# ------------------------------------------------------------------

@main.command()
def languages():
    """Lista los idiomas de destino disponibles."""
    for lang in LANGUAGES:
        click.echo(f"{lang.code:<4} {lang.name}")


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _build(ctx):
    try:
        return build_orchestrator(
            db_path     = ctx.obj["db_path"],
            config_path = ctx.obj["config_path"],
        )
    except ConfigurationError as e:
        _abort(str(e))


def _load_chapter(path: Path) -> Chapter:
    """
    Capítulo suelto desde disco. El id es el SHA-256 del contenido:
    el mismo archivo renombrado reutiliza sus traducciones.
    """
    raw = path.read_bytes()
    return Chapter(
        id      = hashlib.sha256(raw).hexdigest()[:32],
        book_id = path.parent.name,
        index   = 0,
        title   = path.stem,
        content = raw.decode("utf-8"),
    )


def _validate_file(path: str) -> None:
    """Verifica existencia y formato del archivo."""
    p = Path(path)

    if not p.exists():
        _abort(f"Archivo no encontrado: {path}")

    if not p.is_file():
        _abort(f"La ruta no es un archivo: {path}")

    if p.suffix.lower() not in _SUPPORTED_FORMATS:
        supported = ", ".join(sorted(_SUPPORTED_FORMATS))
        _abort(
            f"Formato no soportado: '{p.suffix}'\n"
            f"Formatos disponibles: {supported}"
        )


def _resolve_language(value: str) -> str:
    """Acepta código o nombre del catálogo; devuelve el nombre."""
    if not value.strip():
        _abort("--to no puede estar vacío.")

    lang = find_language(value)
    if lang is None:
        available = ", ".join(f"{item.code} ({item.name})" for item in LANGUAGES)
        _abort(
            f"Idioma no soportado: '{value}'\n"
            f"Disponibles: {available}"
        )
    return lang.name


def _print_notice(notice) -> None:
    text = f"[lectio] {notice.title}"
    if notice.description:
        text += f" — {notice.description}"
    click.echo(click.style(text, fg=_NOTICE_COLORS.get(notice.level)))


def _abort(message: str) -> None:
    """Error de validación: culpa del usuario."""
    click.echo(click.style(f"[lectio] Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _error(message: str) -> None:
    """Error de sistema: no es culpa del usuario."""
    click.echo(click.style(f"[lectio] {message}", fg="red"), err=True)
