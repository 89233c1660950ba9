from dataclasses import dataclass, field


@dataclass
class ChunkConfig:
    """Configuracion del chunker. Centralizada y explicita."""
    max_chars: int = 5000

    # Cierres de bloque donde es seguro cortar sin romper el HTML
    block_tags: list[str] = field(default_factory=lambda: [
        "p", "div", "blockquote",
        "h[1-6]",
        "li", "ul", "ol",
        "table", "article", "section",
    ])
