from lectio.session.models import (
    ORIGINAL_LANGUAGE,
    EventKind,
    Notice,
    NoticeLevel,
    ReaderState,
    SessionStatus,
    SlotState,
    TranslationEvent,
    TranslationSession,
)
from lectio.session.cache import ChunkCache, SkeletonCache
from lectio.session.quality import QualityPolicy, is_poor
from lectio.session.orchestrator import TranslationOrchestrator

__all__ = [
    "ORIGINAL_LANGUAGE",
    "EventKind",
    "Notice",
    "NoticeLevel",
    "ReaderState",
    "SessionStatus",
    "SlotState",
    "TranslationEvent",
    "TranslationSession",
    "ChunkCache",
    "SkeletonCache",
    "QualityPolicy",
    "is_poor",
    "TranslationOrchestrator",
]
