# lectio/__init__.py
"""Lectio: lector de capítulos con traducción progresiva por IA."""

__version__ = "0.1.0"
