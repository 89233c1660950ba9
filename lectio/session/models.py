# session/models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from lectio.cancellation import CancellationToken

ORIGINAL_LANGUAGE = "original"


class SessionStatus(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED    = "failed"


class SlotState(Enum):
    EMPTY             = "empty"
    SKELETON          = "skeleton"
    TRANSLATED        = "translated"
    FALLBACK_ORIGINAL = "fallback_original"


class NoticeLevel(Enum):
    SUCCESS = "success"
    INFO    = "info"
    WARNING = "warning"
    ERROR   = "error"


class EventKind(Enum):
    CONTENT            = "content"
    NOTICE             = "notice"
    SETTINGS_REQUESTED = "settings_requested"


@dataclass
class ChunkSlot:
    source:   str                  # chunk protegido, tal cual salió del chunker
    skeleton: str = ""
    state:    SlotState = SlotState.EMPTY
    content:  Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.state in (SlotState.TRANSLATED, SlotState.FALLBACK_ORIGINAL)

    def display(self) -> str:
        """Lo que se pinta ahora mismo para este slot."""
        if self.resolved:
            return self.content or ""
        return self.skeleton


@dataclass
class TranslationSession:
    """Una invocación de translate() de principio a fin."""
    id:         int
    chapter_id: str
    language:   str
    token:      CancellationToken = field(default_factory=CancellationToken)
    status:     SessionStatus = SessionStatus.IDLE
    slots:      list[ChunkSlot] = field(default_factory=list)
    had_fallback:   bool = False
    translated_any: bool = False

    @property
    def pending_chunks(self) -> int:
        return sum(1 for s in self.slots if not s.resolved)

    def assemble(self) -> str:
        return "".join(slot.display() for slot in self.slots)


@dataclass(frozen=True)
class ReaderState:
    """Estado observable por la superficie de lectura."""
    translated_content: Optional[str] = None
    current_language:   str  = ""
    pending_chunks:     int  = 0
    is_translating:     bool = False


@dataclass(frozen=True)
class Notice:
    level:       NoticeLevel
    title:       str
    description: str = ""


@dataclass(frozen=True)
class TranslationEvent:
    """
    Evento discreto que emite el orquestador.
    CONTENT con slot_index → ese chunk se resolvió; content es su markup.
    CONTENT sin slot_index → cambio de contenido completo (skeletons, revert...).
    """
    kind:       EventKind
    state:      ReaderState
    session_id: Optional[int] = None
    slot_index: Optional[int] = None
    content:    Optional[str] = None
    notice:     Optional[Notice] = None
