# router/models.py
from dataclasses import dataclass
from typing import Optional


@dataclass
class ModelResponse:
    translation:   str
    model_used:    str
    tokens_input:  int = 0
    tokens_output: int = 0


@dataclass
class ModelConfig:
    """
    Configuración del proveedor de traducción.
    Se carga desde la sección `provider` de ~/.lectio/config.yaml.
    """
    name:              str = "gemini"
    model:             Optional[str] = None   # None → modelo por defecto del adaptador
    api_key:           Optional[str] = None
    timeout_seconds:   int = 60
    temperature:       float = 0.3
    max_output_tokens: int = 3000


@dataclass(frozen=True)
class ContextHints:
    """Contexto para que el modelo infiera género, tono y relaciones."""
    book_title:    str = ""
    chapter_title: str = ""
