# lectio/cancellation.py
import asyncio
import logging
from typing import Awaitable, TypeVar

from lectio.exceptions import TranslationCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """
    Señal de cancelación cooperativa compartida por una sesión.

    Se consulta al inicio de cada iteración del bucle de chunks y se pasa a
    cada llamada de red: run() y sleep() abortan en cuanto se dispara, sin
    esperar a que termine la petición en vuelo.
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Idempotente. Síncrono: se puede llamar desde cualquier callback."""
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise TranslationCancelledError()

    async def sleep(self, seconds: float) -> None:
        """asyncio.sleep interrumpible."""
        self.raise_if_cancelled()
        if seconds <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        raise TranslationCancelledError()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Espera `awaitable` compitiendo contra la cancelación.
        Si el token gana, la tarea en vuelo se cancela y se lanza
        TranslationCancelledError.
        """
        self.raise_if_cancelled()

        task   = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            finished = task.done()
            if not finished:
                task.cancel()

        if not finished:
            logger.debug("Llamada en vuelo abortada por cancelación")
            raise TranslationCancelledError()

        return task.result()
