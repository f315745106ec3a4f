"""Document ingestion: text extraction, chunking and term-frequency indexing."""

import logging
from pathlib import Path

import docx
import fitz  # PyMuPDF
from dotenv import load_dotenv

from enemgenius.constants import ALLOWED_EXTENSIONS, DEFAULT_MAX_CHUNK_SIZE
from enemgenius.models import KnowledgeFileWithContent, new_id
from enemgenius.rag import chunk_text, index_chunks

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class UnsupportedFileTypeError(ValueError):
    """Raised when a document type cannot be parsed."""


def extract_text_from_pdf(pdf_path: Path) -> str:
    """Extract all text from a PDF file.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        str: Text of all pages, separated by blank lines
    """
    doc = fitz.open(pdf_path)
    try:
        pages = [page.get_text() for page in doc]
    finally:
        doc.close()
    return "\n\n".join(pages)


def extract_text_from_docx(docx_path: Path) -> str:
    """Extract the paragraph text of a Word document, one paragraph per line."""
    document = docx.Document(str(docx_path))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[1].lower() if "." in filename else ""


def parse_file(path: Path) -> str:
    """Extract plain text from a supported document.

    Args:
        path: Path to a .pdf, .docx, .txt or .md file

    Returns:
        str: The document text

    Raises:
        UnsupportedFileTypeError: If the extension is not supported
    """
    extension = file_extension(path.name)
    if extension == "pdf":
        return extract_text_from_pdf(path)
    if extension == "docx":
        return extract_text_from_docx(path)
    if extension in ("txt", "md"):
        return path.read_text(encoding="utf-8")
    raise UnsupportedFileTypeError(
        f"Tipo de arquivo não suportado: '{path.name}'. "
        f"Use {', '.join(sorted(ALLOWED_EXTENSIONS))}."
    )


def build_knowledge_file(
    path: Path,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
    selected: bool = False,
    name: str | None = None,
) -> KnowledgeFileWithContent:
    """Parse, chunk and index a document into a knowledge file.

    Args:
        path: Path to the document
        max_chunk_size: Maximum characters per chunk
        selected: Whether the file takes part in retrieval
        name: Display name (defaults to the file name)

    Returns:
        KnowledgeFileWithContent: The file with its indexed chunks, ready to store

    Raises:
        UnsupportedFileTypeError: If the extension is not supported
    """
    logger.info(f"📄 Extracting text from {path.name}...")
    text = parse_file(path)
    logger.info(f"  Extracted {len(text)} characters")

    chunks = index_chunks(chunk_text(text, max_chunk_size))
    logger.info(f"  ✓ Created {len(chunks)} indexed chunks from {path.name}")

    return KnowledgeFileWithContent(
        id=new_id(),
        name=name or path.name,
        is_selected=selected,
        indexed_chunks=chunks,
    )
