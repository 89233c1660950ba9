from .chunker import HtmlChunker, split_html_into_chunks
from .models import ChunkConfig

__all__ = ["HtmlChunker", "split_html_into_chunks", "ChunkConfig"]
