# router/gemini.py
import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from lectio.router.base import BaseModel
from lectio.router.models import ModelConfig, ModelResponse

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "gemini-2.5-flash"

_RETRYABLE_ERRORS = (
    google_exceptions.ResourceExhausted,   # 429
    google_exceptions.DeadlineExceeded,    # timeout
    google_exceptions.ServiceUnavailable,
)


class GeminiAdapter(BaseModel):

    def __init__(self, config: ModelConfig):
        self._config = config
        genai.configure(api_key=config.api_key)
        self._model = genai.GenerativeModel(
            model_name        = config.model or _DEFAULT_MODEL,
            generation_config = genai.GenerationConfig(
                temperature       = config.temperature,
                max_output_tokens = config.max_output_tokens,
            ),
        )

    @property
    def name(self) -> str:
        return self._config.name

    async def translate(self, chunk: str, system_prompt: str) -> ModelResponse:
        full_prompt = f"{system_prompt}\n\n{chunk}"

        try:
            response = await self._model.generate_content_async(
                full_prompt,
                request_options={"timeout": self._config.timeout_seconds},
            )
        except _RETRYABLE_ERRORS as e:
            logger.warning("Gemini error retryable: %s", e)
            raise

        usage = getattr(response, "usage_metadata", None)

        return ModelResponse(
            translation   = response.text,
            model_used    = self.name,
            tokens_input  = getattr(usage, "prompt_token_count", 0) or 0,
            tokens_output = getattr(usage, "candidates_token_count", 0) or 0,
        )
