"""
PDF text extraction using LangChain PyPDFLoader.

Dependencies: langchain_community.document_loaders, pypdf
System role: Extraction stage of document ingestion
"""

from pathlib import Path
from typing import Protocol

from langchain_community.document_loaders import PyPDFLoader

from documind.core.exceptions import ParsingError


class TextExtractor(Protocol):
    """Turns a stored file into plain text."""

    def extract(self, file_path: str) -> str: ...


class PdfTextExtractor:
    """Extract text from every page of a PDF."""

    def __init__(self, page_separator: str = "\n") -> None:
        self._page_separator = page_separator

    def extract(self, file_path: str) -> str:
        """
        Read a PDF and join its pages' text.

        Image-only or scanned PDFs yield an empty string rather than an
        error; callers decide how to treat documents without text.

        Args:
            file_path: Absolute path to the PDF

        Returns:
            str: Extracted text

        Raises:
            ParsingError: When the file is missing or cannot be parsed
        """
        path = Path(file_path)
        if not path.exists():
            raise ParsingError(f"File not found: {file_path}", file_type="pdf")

        try:
            pages = PyPDFLoader(str(path)).load()
        except Exception as e:
            raise ParsingError(f"Failed to parse PDF: {e}", file_type="pdf") from e

        return self._page_separator.join(page.page_content for page in pages).strip()
