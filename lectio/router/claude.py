# router/claude.py
import logging

import anthropic

from lectio.router.base import BaseModel
from lectio.router.models import ModelConfig, ModelResponse

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "claude-haiku-4-5-20251001"

_RETRYABLE_ERRORS = (
    anthropic.RateLimitError,
    anthropic.APITimeoutError,
    anthropic.APIConnectionError,
)


class ClaudeAdapter(BaseModel):

    def __init__(self, config: ModelConfig):
        self._config = config
        self._client = anthropic.AsyncAnthropic(
            api_key = config.api_key,
            timeout = config.timeout_seconds,
        )

    @property
    def name(self) -> str:
        return self._config.name

    async def translate(self, chunk: str, system_prompt: str) -> ModelResponse:
        try:
            response = await self._client.messages.create(
                model       = self._config.model or _DEFAULT_MODEL,
                max_tokens  = self._config.max_output_tokens,
                temperature = self._config.temperature,
                system      = system_prompt,
                messages    = [{"role": "user", "content": chunk}],
            )
        except _RETRYABLE_ERRORS as e:
            logger.warning("Claude error retryable: %s", e)
            raise

        except anthropic.BadRequestError as e:
            # El chunk en sí tiene problemas (ej: contenido bloqueado)
            logger.error("Claude BadRequest en chunk: %s", e)
            raise

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )

        return ModelResponse(
            translation   = text,
            model_used    = self.name,
            tokens_input  = response.usage.input_tokens,
            tokens_output = response.usage.output_tokens,
        )
