# lectio/factory.py
from dataclasses import replace
from typing import Callable, Optional

from lectio.config_loader import Settings, load_settings
from lectio.exceptions import ConfigurationError
from lectio.processor.chunker.chunker import HtmlChunker
from lectio.processor.chunker.models import ChunkConfig
from lectio.router.base import BaseModel
from lectio.router.claude import ClaudeAdapter
from lectio.router.gemini import GeminiAdapter
from lectio.router.models import ModelConfig
from lectio.router.translator import ChunkTranslator
from lectio.session.orchestrator import TranslationOrchestrator
from lectio.session.quality import QualityPolicy
from lectio.storage.repository import Repository

_ADAPTERS: dict[str, type[BaseModel]] = {
    "claude": ClaudeAdapter,
    "gemini": GeminiAdapter,
}


def build_orchestrator(
    db_path:     Optional[str]      = None,
    config_path: Optional[str]      = None,
    settings:    Optional[Settings] = None,
) -> TranslationOrchestrator:
    """
    Ensambla el TranslationOrchestrator con todas sus dependencias.
    Punto de entrada único para el CLI y los tests de integración.

    La falta de api_key NO es un error aquí: se reporta cuando el lector
    pide traducir. Un proveedor desconocido sí lo es.
    """
    settings = settings or load_settings(config_path)
    cfg      = settings.translation

    repo       = Repository(db_path=db_path)
    translator = ChunkTranslator(
        model_factory   = build_model_factory(settings.provider),
        max_attempts    = cfg.max_attempts,
        backoff_seconds = cfg.backoff_seconds,
    )

    return TranslationOrchestrator(
        repo       = repo,
        translator = translator,
        settings   = settings,
        chunker    = HtmlChunker(ChunkConfig(max_chars=cfg.chunk_max_chars)),
        quality    = QualityPolicy(cfg.poor_ratio_threshold, cfg.min_word_length),
    )


def build_model_factory(config: ModelConfig) -> Callable[[str], BaseModel]:
    """
    Devuelve credential → adaptador. La credencial la aporta la configuración
    del lector en el momento de traducir, no el config del proveedor.
    """
    adapter_class = _ADAPTERS.get(config.name)
    if adapter_class is None:
        supported = ", ".join(sorted(_ADAPTERS))
        raise ConfigurationError(
            f"Proveedor desconocido: '{config.name}'. Disponibles: {supported}"
        )

    def _factory(credential: str) -> BaseModel:
        return adapter_class(replace(config, api_key=credential))

    return _factory
