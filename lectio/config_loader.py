# lectio/config_loader.py
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from lectio.router.models import ModelConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".lectio" / "config.yaml"


@dataclass
class ReaderSettings:
    """Preferencias del lector que afectan a la traducción."""
    target_language: str   = ""     # último idioma elegido ("" = original)
    font_size:       float = 18
    max_width:       float = 720


@dataclass
class TranslationConfig:
    chunk_max_chars:      int   = 5000
    chunk_delay_seconds:  float = 0.5     # pausa entre chunks, cortesía con el proveedor
    max_attempts:         int   = 3
    backoff_seconds:      float = 1.0
    # Constantes empíricas de la heurística de calidad
    poor_ratio_threshold: float = 0.7
    min_word_length:      int   = 4


@dataclass
class Settings:
    provider:    ModelConfig       = field(default_factory=ModelConfig)
    reader:      ReaderSettings    = field(default_factory=ReaderSettings)
    translation: TranslationConfig = field(default_factory=TranslationConfig)


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    return Path(config_path or os.environ.get("LECTIO_CONFIG_PATH") or DEFAULT_CONFIG_PATH)


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Carga la configuración desde YAML.
    Resuelve variables de entorno en api_key (${VAR}).
    Si el archivo no existe usa los defaults: la falta de api_key
    solo se reporta cuando el lector pide una traducción.
    """
    path = resolve_config_path(config_path)

    raw: dict = {}
    if path.exists():
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.info("Config no encontrada en %s — usando valores por defecto", path)

    provider_raw    = raw.get("provider") or {}
    reader_raw      = raw.get("reader") or {}
    translation_raw = raw.get("translation") or {}

    defaults_t = TranslationConfig()
    defaults_r = ReaderSettings()

    provider = ModelConfig(
        name              = provider_raw.get("name", "gemini"),
        model             = provider_raw.get("model"),
        api_key           = _resolve_env(provider_raw.get("api_key")) or os.environ.get("LECTIO_API_KEY"),
        timeout_seconds   = provider_raw.get("timeout_seconds", 60),
        temperature       = provider_raw.get("temperature", 0.3),
        max_output_tokens = provider_raw.get("max_output_tokens", 3000),
    )

    reader = ReaderSettings(
        target_language = reader_raw.get("target_language") or defaults_r.target_language,
        font_size       = reader_raw.get("font_size", defaults_r.font_size),
        max_width       = reader_raw.get("max_width", defaults_r.max_width),
    )

    translation = TranslationConfig(
        chunk_max_chars      = translation_raw.get("chunk_max_chars", defaults_t.chunk_max_chars),
        chunk_delay_seconds  = translation_raw.get("chunk_delay_seconds", defaults_t.chunk_delay_seconds),
        max_attempts         = translation_raw.get("max_attempts", defaults_t.max_attempts),
        backoff_seconds      = translation_raw.get("backoff_seconds", defaults_t.backoff_seconds),
        poor_ratio_threshold = translation_raw.get("poor_ratio_threshold", defaults_t.poor_ratio_threshold),
        min_word_length      = translation_raw.get("min_word_length", defaults_t.min_word_length),
    )

    return Settings(provider=provider, reader=reader, translation=translation)


def _resolve_env(value: Optional[str]) -> Optional[str]:
    """Expande ${VAR_NAME} desde el entorno."""
    if not value or not value.startswith("${"):
        return value
    var_name = value.strip("${}").strip()
    return os.environ.get(var_name)
