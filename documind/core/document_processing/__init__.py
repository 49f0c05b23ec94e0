"""
Document processing: text extraction, chunking, embedding and the
ingestion pipeline.
"""

from documind.core.document_processing.chunker import chunk_text
from documind.core.document_processing.embedder import (
    Embedder,
    LangChainEmbedder,
    StubEmbedder,
    build_embedder,
)
from documind.core.document_processing.models import (
    DocumentUpdate,
    IngestionJob,
    IngestionOutcome,
    IngestionResult,
    TextChunk,
)
from documind.core.document_processing.pipeline import IngestionPipeline
from documind.core.document_processing.text_extractor import PdfTextExtractor, TextExtractor

__all__ = [
    "DocumentUpdate",
    "Embedder",
    "IngestionJob",
    "IngestionOutcome",
    "IngestionPipeline",
    "IngestionResult",
    "LangChainEmbedder",
    "PdfTextExtractor",
    "StubEmbedder",
    "TextChunk",
    "TextExtractor",
    "build_embedder",
    "chunk_text",
]
