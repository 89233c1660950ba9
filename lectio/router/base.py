# router/base.py
from abc import ABC, abstractmethod
from lectio.router.models import ModelResponse


class BaseModel(ABC):
    """
    Contrato que deben cumplir todos los adaptadores.
    El ChunkTranslator solo habla con esta interfaz.
    Nunca importa claude.py ni gemini.py directamente.
    """

    @abstractmethod
    async def translate(self, chunk: str, system_prompt: str) -> ModelResponse:
        """
        Envía el chunk al modelo y devuelve la respuesta en bruto.
        SÍ puede lanzar errores del SDK (timeout, rate limit, APIError):
        el ChunkTranslator los captura, reintenta y los envuelve.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Identificador del proveedor ("gemini", "claude")."""
        ...
