from lectio.processor.models import Chapter
from lectio.processor.chunker.chunker import HtmlChunker, split_html_into_chunks
from lectio.processor.placeholders import protect_images, restore_images
from lectio.processor.skeleton import build_skeleton

__all__ = [
    "Chapter",
    "HtmlChunker",
    "split_html_into_chunks",
    "protect_images",
    "restore_images",
    "build_skeleton",
]
