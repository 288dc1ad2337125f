"""
PDF Text Source

Turns a statement PDF into a Document. No extraction happens here.
"""
import os
import pdfplumber

from statement_import.common.logging_config import get_logger
from statement_import.common.models import Document

logger = get_logger(__name__)


def load_pdf_document(file_path_or_buffer, source_id: str = None) -> Document:
    """
    Read every page's text and join the pages with newlines.

    Args:
        file_path_or_buffer: Path or binary file object accepted by pdfplumber
        source_id: Identifier of the document; defaults to the file name
    """
    if source_id is None:
        name = file_path_or_buffer if isinstance(file_path_or_buffer, str) else getattr(file_path_or_buffer, 'name', 'buffer')
        source_id = os.path.basename(str(name))

    pages = []
    with pdfplumber.open(file_path_or_buffer) as pdf:
        for page in pdf.pages:
            t = page.extract_text()
            if t:
                pages.append(t)

    logger.debug("PDF text loaded", source_id=source_id, page_count=len(pages))
    return Document(text="\n".join(pages), source_id=source_id)


def load_text_document(file_path: str, source_id: str = None, encoding: str = 'utf-8') -> Document:
    with open(file_path, 'r', encoding=encoding) as f:
        text = f.read()
    return Document(text=text, source_id=source_id or os.path.basename(file_path))
