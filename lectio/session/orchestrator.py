# session/orchestrator.py
import itertools
import logging
from dataclasses import replace
from typing import Callable, Optional

from lectio.config_loader import Settings
from lectio.exceptions import (
    PoorTranslationError,
    TranslationCancelledError,
    TranslationFailedError,
)
from lectio.processor.chunker.chunker import HtmlChunker
from lectio.processor.chunker.models import ChunkConfig
from lectio.processor.models import Chapter
from lectio.processor.placeholders import protect_images, restore_images
from lectio.processor.skeleton import build_skeleton
from lectio.router.models import ContextHints
from lectio.router.translator import ChunkTranslator
from lectio.session.cache import ChunkCache, SkeletonCache, skeleton_key
from lectio.session.models import (
    ORIGINAL_LANGUAGE,
    ChunkSlot,
    EventKind,
    Notice,
    NoticeLevel,
    ReaderState,
    SessionStatus,
    SlotState,
    TranslationEvent,
    TranslationSession,
)
from lectio.session.quality import QualityPolicy
from lectio.storage.repository import Repository

logger = logging.getLogger(__name__)

Listener = Callable[[TranslationEvent], None]


class TranslationOrchestrator:
    """
    Dueño de la traducción del capítulo abierto en una vista de lectura.

    Responsabilidades:
    - Servir traducciones guardadas sin tocar la red
    - Preparar el capítulo (imágenes protegidas, chunks, skeletons)
    - Traducir los chunks en orden, de uno en uno, con pausa entre llamadas
    - Reintentar una vez los chunks que vuelven sin traducir
    - Publicar el contenido ensamblado tras cada chunk
    - Cancelar: explícitamente o cuando una sesión nueva reemplaza a la anterior
    - Persistir el capítulo completo solo si la sesión terminó sin cancelarse

    Nunca lanza hacia la superficie de lectura: los resultados se devuelven
    como SessionStatus y se comunican como eventos/avisos.
    """

    def __init__(
        self,
        repo:           Repository,
        translator:     ChunkTranslator,
        settings:       Optional[Settings]      = None,
        chunker:        Optional[HtmlChunker]   = None,
        quality:        Optional[QualityPolicy] = None,
        chunk_cache:    Optional[ChunkCache]    = None,
        skeleton_cache: Optional[SkeletonCache] = None,
    ):
        self._repo       = repo
        self._translator = translator
        self._settings   = settings or Settings()

        cfg = self._settings.translation
        self._chunker = chunker or HtmlChunker(ChunkConfig(max_chars=cfg.chunk_max_chars))
        self._quality = quality or QualityPolicy(cfg.poor_ratio_threshold, cfg.min_word_length)
        self._chunk_cache    = chunk_cache if chunk_cache is not None else ChunkCache()
        self._skeleton_cache = skeleton_cache if skeleton_cache is not None else SkeletonCache()

        self._chapter:    Optional[Chapter] = None
        self._book_title: str = ""
        self._state       = ReaderState()
        self._session:    Optional[TranslationSession] = None
        self._session_ids = itertools.count(1)
        self._listeners:  list[Listener] = []

    # ------------------------------------------------------------------
    # Estado observable
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def chapter(self) -> Optional[Chapter]:
        return self._chapter

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def translated_content(self) -> Optional[str]:
        return self._state.translated_content

    @property
    def current_language(self) -> str:
        return self._state.current_language

    @property
    def pending_chunks(self) -> int:
        return self._state.pending_chunks

    @property
    def is_translating(self) -> bool:
        return self._state.is_translating

    @property
    def displayed_content(self) -> str:
        """Lo que ve el lector: la traducción (o su progreso) o el original."""
        if self._state.translated_content is not None:
            return self._state.translated_content
        return self._chapter.content if self._chapter else ""

    @property
    def active_session(self) -> Optional[TranslationSession]:
        return self._session

    @property
    def repository(self) -> Repository:
        return self._repo

    @property
    def chunk_cache(self) -> ChunkCache:
        return self._chunk_cache

    @property
    def skeleton_cache(self) -> SkeletonCache:
        return self._skeleton_cache

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registra un listener. Devuelve la función para darlo de baja."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Operaciones
    # ------------------------------------------------------------------

    def open_chapter(self, chapter: Chapter, book_title: str = "") -> None:
        """
        Cambia el capítulo actual. Si el lector tiene un idioma recordado
        y existe traducción guardada, se muestra directamente.
        """
        self._abort_active("cambio de capítulo")
        self._chapter    = chapter
        self._book_title = book_title

        lang   = self._settings.reader.target_language
        record = None
        if lang and lang != ORIGINAL_LANGUAGE:
            record = self._repo.get_translation(chapter.id, lang)

        if record:
            self._update_state(
                translated_content = record.content,
                current_language   = lang,
                pending_chunks     = 0,
                is_translating     = False,
            )
        else:
            self._update_state(**_RESET)

        self._emit(EventKind.CONTENT)

    def show_original(self) -> None:
        """Vuelve al original. No borra ninguna traducción guardada."""
        self._abort_active("vuelta al original")
        self._settings.reader.target_language = ""
        self._update_state(**_RESET)
        self._emit(EventKind.CONTENT)

    def cancel_translate(self) -> None:
        """Dispara la cancelación de la sesión activa. Síncrono."""
        session = self._session
        if session is None:
            return

        logger.info("Cancelando sesión %d (%s)", session.id, session.language)
        session.token.cancel()
        session.status = SessionStatus.CANCELLED
        self._session  = None
        self._update_state(**_RESET)
        self._emit(EventKind.CONTENT, session_id=session.id)

    async def retranslate(self) -> SessionStatus:
        """
        Re-traduce el idioma mostrado saltándose la traducción guardada.
        Los chunks ya aceptados en este proceso salen de la caché de chunks,
        así que puede no haber ninguna llamada de red.
        """
        if not self._state.current_language:
            return SessionStatus.IDLE
        return await self.translate(self._state.current_language, force=True)

    async def translate(self, target_lang: str, force: bool = False) -> SessionStatus:
        """
        Punto de entrada principal. Devuelve el estado final de la sesión
        (IDLE si no llegó a crearse ninguna).
        """
        chapter = self._chapter
        if chapter is None:
            logger.warning("translate(%s) sin capítulo abierto — ignorado", target_lang)
            return SessionStatus.IDLE

        if target_lang == ORIGINAL_LANGUAGE:
            self.show_original()
            return SessionStatus.IDLE

        if (
            not force
            and self._state.current_language == target_lang
            and self._state.translated_content
        ):
            # Ya se muestra (o se está traduciendo) ese idioma
            return SessionStatus.RUNNING if self._state.is_translating else SessionStatus.COMPLETED

        self._settings.reader.target_language = target_lang

        # ── Paso 1: traducción guardada ───────────────────────────────
        if not force:
            record = self._repo.get_translation(chapter.id, target_lang)
            if record:
                self._abort_active("traducción guardada")
                self._update_state(
                    translated_content = record.content,
                    current_language   = target_lang,
                    pending_chunks     = 0,
                    is_translating     = False,
                )
                self._emit(EventKind.CONTENT)
                self._notify(NoticeLevel.SUCCESS, "Traducción cargada desde caché")
                logger.info("Capítulo %s (%s) servido desde caché", chapter.id, target_lang)
                return SessionStatus.COMPLETED

        # ── Paso 2: credencial ────────────────────────────────────────
        credential = self._settings.provider.api_key
        if not credential:
            logger.warning("Traducción solicitada sin api_key configurada")
            self._emit(EventKind.SETTINGS_REQUESTED)
            self._notify(
                NoticeLevel.ERROR,
                "Se requiere API key",
                "Añade la API key de tu proveedor en la configuración para poder traducir.",
            )
            return SessionStatus.IDLE

        # ── Paso 3: nueva sesión (reemplaza a la anterior) ────────────
        self._abort_active("sesión reemplazada")
        session = TranslationSession(
            id         = next(self._session_ids),
            chapter_id = chapter.id,
            language   = target_lang,
            status     = SessionStatus.RUNNING,
        )
        self._session = session
        self._update_state(
            translated_content = None,
            current_language   = target_lang,
            pending_chunks     = 0,
            is_translating     = True,
        )
        logger.info(
            "Sesión %d: traduciendo capítulo %s a %s%s",
            session.id, chapter.id, target_lang, " (forzado)" if force else "",
        )

        try:
            await self._run_session(session, chapter, credential)

        except TranslationCancelledError:
            self._finish_cancelled(session)

        except Exception as e:
            logger.exception("Sesión %d: error no recuperable", session.id)
            self._finish_failed(session, TranslationFailedError(f"{type(e).__name__}: {e}"))

        finally:
            if self._session is session:
                self._session = None

        return session.status

    # ------------------------------------------------------------------
    # Pasos internos
    # ------------------------------------------------------------------

    async def _run_session(self, session: TranslationSession, chapter: Chapter, credential: str) -> None:
        protected, images = protect_images(chapter.content)
        chunks    = self._chunker.chunk(protected)
        skeletons = self._skeletons_for(session, protected, chunks)

        session.slots = [
            ChunkSlot(source=chunk, skeleton=skeleton, state=SlotState.SKELETON)
            for chunk, skeleton in zip(chunks, skeletons)
        ]
        self._update_state(
            translated_content = session.assemble(),
            pending_chunks     = len(chunks),
        )
        self._emit(EventKind.CONTENT, session_id=session.id)
        logger.info("Sesión %d: %d chunks, %d imágenes protegidas", session.id, len(chunks), len(images))

        hints = ContextHints(book_title=self._book_title, chapter_title=chapter.title)
        delay = self._settings.translation.chunk_delay_seconds
        total = len(session.slots)

        for i, slot in enumerate(session.slots):
            if session.token.cancelled:
                break

            try:
                if i > 0:
                    await session.token.sleep(delay)
                content    = await self._translate_slot(session, slot, images, credential, hints)
                slot.state = SlotState.TRANSLATED

            except TranslationCancelledError:
                logger.info("Sesión %d: cancelada en chunk %d/%d", session.id, i + 1, total)
                break

            except PoorTranslationError as e:
                logger.info("Chunk %d: %s — se usa el original", i, e)
                content    = restore_images(slot.source, images)
                slot.state = SlotState.FALLBACK_ORIGINAL
                session.had_fallback = True

            except Exception as e:
                logger.warning("Error en chunk %d: %s", i, e)
                content    = restore_images(slot.source, images)
                slot.state = SlotState.FALLBACK_ORIGINAL
                session.had_fallback = True
                if self._is_current(session):
                    self._notify(
                        NoticeLevel.WARNING,
                        "Parte de la traducción falló",
                        "Se muestra el texto original en esa sección.",
                        session_id = session.id,
                    )

            slot.content = content
            session.translated_any = True

            if not self._is_current(session):
                break

            self._update_state(
                translated_content = session.assemble(),
                pending_chunks     = session.pending_chunks,
            )
            self._emit(EventKind.CONTENT, session_id=session.id, slot_index=i, content=content)
            logger.debug("Sesión %d: chunk %d/%d listo (%s)", session.id, i + 1, total, slot.state.value)

        if not self._is_current(session):
            raise TranslationCancelledError()

        # ── Completada: persistir el capítulo entero ──────────────────
        final = session.assemble()
        self._repo.create_translation(chapter.id, session.language, final)
        session.status = SessionStatus.COMPLETED

        self._update_state(
            translated_content = final,
            current_language   = session.language,
            pending_chunks     = 0,
            is_translating     = False,
        )
        self._emit(EventKind.CONTENT, session_id=session.id)
        self._notify(NoticeLevel.SUCCESS, "Traducción completada", session_id=session.id)
        if session.had_fallback:
            self._notify(
                NoticeLevel.INFO,
                "Traducción parcial",
                "Algunas secciones conservan el texto original por baja confianza.",
                session_id = session.id,
            )
        logger.info(
            "Sesión %d completada: %d chunks%s",
            session.id, total, " (con fallback)" if session.had_fallback else "",
        )

    async def _translate_slot(
        self,
        session:    TranslationSession,
        slot:       ChunkSlot,
        images:     list[str],
        credential: str,
        hints:      ContextHints,
    ) -> str:
        """
        Traduce un chunk: caché → red → heurística → un reintento.
        Lanza PoorTranslationError si el reintento tampoco convence.
        """
        cached = self._chunk_cache.get(session.chapter_id, session.language, slot.source)
        if cached is not None:
            logger.debug("Sesión %d: chunk servido desde caché de sesión", session.id)
            return cached

        source     = restore_images(slot.source, images)
        translated = await self._call_translator(session, slot.source, images, credential, hints)

        if not self._quality.is_poor(source, translated):
            self._chunk_cache.put(session.chapter_id, session.language, slot.source, translated)
            return translated

        logger.info("Sesión %d: traducción pobre, reintentando una vez", session.id)
        try:
            retry = await self._call_translator(session, slot.source, images, credential, hints)
        except TranslationCancelledError:
            raise
        except Exception as e:
            raise PoorTranslationError(f"reintento fallido ({type(e).__name__}: {e})") from e

        if self._quality.is_poor(source, retry):
            raise PoorTranslationError("el reintento también parece sin traducir")

        self._chunk_cache.put(session.chapter_id, session.language, slot.source, retry)
        return retry

    async def _call_translator(
        self,
        session:    TranslationSession,
        chunk:      str,
        images:     list[str],
        credential: str,
        hints:      ContextHints,
    ) -> str:
        translated = await self._translator.translate_chunk(
            chunk,
            session.language,
            credential,
            hints,
            session.token,
        )
        return restore_images(translated, images)

    def _skeletons_for(self, session: TranslationSession, protected: str, chunks: list[str]) -> list[str]:
        key       = skeleton_key(session.chapter_id, session.language, protected, chunks)
        skeletons = self._skeleton_cache.get(key)
        if skeletons is None:
            reader    = self._settings.reader
            skeletons = [
                build_skeleton(chunk, idx, reader.font_size, reader.max_width)
                for idx, chunk in enumerate(chunks)
            ]
            self._skeleton_cache.put(key, skeletons)
        return skeletons

    def _finish_cancelled(self, session: TranslationSession) -> None:
        session.status = SessionStatus.CANCELLED
        logger.info("Sesión %d cancelada — no se guarda nada", session.id)

        if self._session is session:
            # Cancelada sin pasar por cancel_translate()
            self._session = None
            self._update_state(**_RESET)
            self._emit(EventKind.CONTENT, session_id=session.id)

    def _finish_failed(self, session: TranslationSession, error: TranslationFailedError) -> None:
        session.status = SessionStatus.FAILED
        if self._session is not session:
            return

        if session.translated_any:
            # El parcial sigue visible, pero sin idioma: no es una traducción
            # completa y un translate() posterior debe volver a intentarlo
            self._update_state(is_translating=False, pending_chunks=0, current_language="")
        else:
            self._update_state(**_RESET)

        self._emit(EventKind.CONTENT, session_id=session.id)
        self._notify(NoticeLevel.ERROR, "La traducción falló", str(error), session_id=session.id)

    def _abort_active(self, reason: str) -> None:
        """Última escritura gana: cualquier sesión en curso se cancela."""
        session = self._session
        if session is None:
            return
        logger.info("Sesión %d abortada: %s", session.id, reason)
        session.token.cancel()
        session.status = SessionStatus.CANCELLED
        self._session  = None
        self._update_state(is_translating=False, pending_chunks=0)

    def _is_current(self, session: TranslationSession) -> bool:
        return self._session is session and not session.token.cancelled

    # ------------------------------------------------------------------
    # Publicación
    # ------------------------------------------------------------------

    def _update_state(self, **changes) -> None:
        self._state = replace(self._state, **changes)

    def _notify(
        self,
        level:       NoticeLevel,
        title:       str,
        description: str = "",
        session_id:  Optional[int] = None,
    ) -> None:
        self._emit(
            EventKind.NOTICE,
            session_id = session_id,
            notice     = Notice(level=level, title=title, description=description),
        )

    def _emit(
        self,
        kind:       EventKind,
        session_id: Optional[int] = None,
        slot_index: Optional[int] = None,
        content:    Optional[str] = None,
        notice:     Optional[Notice] = None,
    ) -> None:
        event = TranslationEvent(
            kind       = kind,
            state      = self._state,
            session_id = session_id,
            slot_index = slot_index,
            content    = content,
            notice     = notice,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # Un listener roto no puede tumbar la sesión
                logger.exception("Listener falló procesando %s", kind.value)


_RESET = {
    "translated_content": None,
    "current_language":   "",
    "pending_chunks":     0,
    "is_translating":     False,
}
