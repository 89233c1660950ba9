# router/response_parser.py
import logging
import re

logger = logging.getLogger(__name__)

# ```html ... ``` o ``` ... ``` envolviendo toda la respuesta
_FENCE_OPEN_RE  = re.compile(r"^\s*```[a-zA-Z]*[ \t]*\n")
_FENCE_CLOSE_RE = re.compile(r"\n```\s*$")


def clean_model_output(raw_text: str, model_name: str = "model") -> str:
    """
    Quita el bloque markdown con el que algunos modelos envuelven el HTML.
    Nunca lanza excepción. Una respuesta vacía se devuelve vacía:
    decidir qué hacer con ella es cosa del caller.
    """
    if not raw_text:
        return ""

    text = raw_text
    opened = _FENCE_OPEN_RE.match(text)
    if opened:
        logger.warning(
            "%s envolvió la respuesta en markdown — considera reforzar el prompt",
            model_name,
        )
        text = text[opened.end():]
        text = _FENCE_CLOSE_RE.sub("", text)

    return text
