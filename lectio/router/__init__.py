from lectio.router.base import BaseModel
from lectio.router.models import ContextHints, ModelConfig, ModelResponse
from lectio.router.prompt_builder import build_translate_prompt
from lectio.router.response_parser import clean_model_output
from lectio.router.translator import ChunkTranslator

__all__ = [
    "BaseModel",
    "ContextHints",
    "ModelConfig",
    "ModelResponse",
    "build_translate_prompt",
    "clean_model_output",
    "ChunkTranslator",
]
