# lectio/exceptions.py


class LectioError(Exception):
    """Base de todos los errores propios de lectio."""


class ConfigurationError(LectioError):
    """Falta configuración obligatoria (api_key, proveedor). Bloquea la sesión."""


class ProviderError(LectioError):
    """Fallo de transporte o del modelo al traducir un chunk."""


class PoorTranslationError(LectioError):
    """
    El modelo devolvió algo que parece sin traducir, incluso tras el reintento.
    Nunca llega al usuario como error: el chunk usa el original.
    """


class TranslationCancelledError(LectioError):
    """La sesión fue cancelada o reemplazada por otra."""

    def __init__(self, message: str = "Aborted"):
        super().__init__(message)


class TranslationFailedError(LectioError):
    """Error no recuperable de la sesión (no de un chunk concreto)."""
