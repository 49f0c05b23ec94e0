"""
Sliding-window text chunker.

Splits extracted text into fixed-size overlapping windows. Removing the
overlap prefix from every chunk after the first and concatenating restores
the original text exactly.

Dependencies: documind.core.document_processing.models
System role: Chunking stage of document ingestion
"""

from documind.core.document_processing.models import TextChunk


def chunk_text(text: str, chunk_size: int = 900, chunk_overlap: int = 100) -> list[TextChunk]:
    """
    Split text into overlapping windows.

    Args:
        text: Extracted document text
        chunk_size: Window length in characters
        chunk_overlap: Characters shared by consecutive windows

    Returns:
        list[TextChunk]: Chunks in order; a single empty chunk for empty text

    Raises:
        ValueError: If chunk_size < 1 or chunk_overlap is outside [0, chunk_size)
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    if chunk_overlap < 0 or chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be in [0, chunk_size)")

    if not text:
        return [TextChunk(content="", index=0)]

    stride = chunk_size - chunk_overlap
    chunks: list[TextChunk] = []
    start = 0
    while True:
        end = min(start + chunk_size, len(text))
        chunks.append(TextChunk(content=text[start:end], index=len(chunks)))
        if end >= len(text):
            break
        start += stride
    return chunks
