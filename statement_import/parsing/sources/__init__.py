# Sources submodule
from .pdf_text import load_pdf_document, load_text_document

__all__ = ['load_pdf_document', 'load_text_document']
