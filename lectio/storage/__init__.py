# storage/__init__.py
from lectio.storage.repository import Repository
from lectio.storage.models import TranslationRecord, make_translation_id

__all__ = [
    "Repository",
    "TranslationRecord",
    "make_translation_id",
]
