# router/translator.py
import logging
from typing import Callable, Optional

from lectio.exceptions import ConfigurationError, ProviderError, TranslationCancelledError
from lectio.router.base import BaseModel
from lectio.router.models import ContextHints
from lectio.router.prompt_builder import build_translate_prompt
from lectio.router.response_parser import clean_model_output
from lectio.cancellation import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS   = 3
DEFAULT_BACKOFF_SECONDS = 1.0


class ChunkTranslator:
    """
    Primitiva de red: traduce UN chunk con un proveedor.

    Responsabilidades:
    - Construir el prompt con las pistas de contexto
    - Reintentar fallos de transporte con backoff exponencial (1s, 2s, ...)
    - No reintentar cancelaciones ni errores de contenido
    - Abortar en cuanto el token de cancelación se dispara, incluso a mitad de llamada

    No sabe nada de calidad: el reintento semántico es del orquestador.
    """

    def __init__(
        self,
        model_factory:   Callable[[str], BaseModel],
        max_attempts:    int   = DEFAULT_MAX_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts debe ser >= 1")
        self._model_factory   = model_factory
        self._max_attempts    = max_attempts
        self._backoff_seconds = backoff_seconds
        self._models: dict[str, BaseModel] = {}

    async def translate_chunk(
        self,
        markup:      str,
        target_lang: str,
        credential:  Optional[str],
        hints:       Optional[ContextHints] = None,
        token:       Optional[CancellationToken] = None,
    ) -> str:
        """
        Devuelve el HTML traducido, sin bloques markdown.
        Lanza ProviderError tras agotar intentos, TranslationCancelledError
        si el token se dispara, ConfigurationError si no hay credencial.
        """
        if not credential:
            raise ConfigurationError("Se requiere una API key para traducir")

        token = token or CancellationToken()
        token.raise_if_cancelled()

        hints  = hints or ContextHints()
        model  = self._model_for(credential)
        prompt = build_translate_prompt(
            target_lang   = target_lang,
            book_title    = hints.book_title,
            chapter_title = hints.chapter_title,
        )

        last_error: Exception | None = None

        for attempt in range(1, self._max_attempts + 1):
            token.raise_if_cancelled()

            try:
                response = await token.run(model.translate(markup, prompt))
                text = clean_model_output(response.translation, model.name)

                if not text.strip():
                    raise ProviderError("Respuesta vacía del modelo de traducción")

                logger.info(
                    "Chunk traducido con %s | tokens: %d+%d | intento %d",
                    model.name,
                    response.tokens_input,
                    response.tokens_output,
                    attempt,
                )
                return text

            except TranslationCancelledError:
                raise

            except Exception as e:
                if _is_content_error(e):
                    logger.error(
                        "Error de contenido en %s — no se reintenta: %s", model.name, e,
                    )
                    raise ProviderError(f"{type(e).__name__}: {e}") from e

                logger.warning(
                    "Intento %d/%d con %s falló: %s",
                    attempt, self._max_attempts, model.name, e,
                )
                last_error = e

            if attempt < self._max_attempts:
                await token.sleep(self._backoff_seconds * 2 ** (attempt - 1))

        raise ProviderError(
            f"La traducción falló tras {self._max_attempts} intentos. "
            f"Último error: {last_error}"
        ) from last_error

    def _model_for(self, credential: str) -> BaseModel:
        """Un adaptador por credencial, reutilizado entre chunks."""
        model = self._models.get(credential)
        if model is None:
            model = self._model_factory(credential)
            self._models[credential] = model
        return model


def _is_content_error(e: Exception) -> bool:
    """
    Determina si el error es del contenido del chunk (no de transporte).
    Estos errores no se reintentan: fallarían igual en cada intento.
    """
    import anthropic
    import google.api_core.exceptions as google_ex

    content_errors = (
        anthropic.BadRequestError,
        google_ex.InvalidArgument,
        ValueError,
    )
    return isinstance(e, content_errors)
