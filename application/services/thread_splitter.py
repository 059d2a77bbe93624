# application/services/thread_splitter.py
from __future__ import annotations
from typing import Iterable
from domain.models import ThreadChunk

DEFAULT_MAX_LENGTH = 300

def split_thread(text: str | None, max_length: int = DEFAULT_MAX_LENGTH) -> list[str]:
    """
    Corta el texto en trozos de como mucho `max_length` caracteres, en orden.
    Se recortan espacios al inicio y tras cada corte; texto vacío -> [].
    """
    if max_length <= 0:
        raise ValueError("max_length debe ser positivo")
    chunks: list[str] = []
    remaining = (text or "").strip()
    while remaining:
        chunks.append(remaining[:max_length])
        remaining = remaining[max_length:].strip()
    return chunks

def to_chunks(texts: Iterable[str]) -> list[ThreadChunk]:
    return [ThreadChunk(index=i, text=t) for i, t in enumerate(texts)]
