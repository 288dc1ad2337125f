"""
Document Classifier

Picks the document type governing a document and seeds its Context Store.
"""
import re
from dataclasses import dataclass
from typing import Sequence

from statement_import.common.logging_config import get_logger
from statement_import.common.models import Document
from .coercers import as_currency_code
from .config.layout import DocumentType
from .context import ContextStore
from .exceptions import CoercionError, MissingContext, UnrecognizedDocument

logger = get_logger(__name__)


@dataclass
class Classification:
    document_type: DocumentType
    context: ContextStore


def matches(document_type: DocumentType, document: Document) -> bool:
    if document_type.match_mode == 'line':
        pattern = re.compile(document_type.pattern)
        return any(pattern.search(line) for line in document.lines)
    return re.search(document_type.pattern, document.text, re.MULTILINE) is not None


def extract_context(document_type: DocumentType, document: Document) -> ContextStore:
    """
    Run the type's context sections over the document.

    A context section with an `assign` callable receives (context, values);
    otherwise every captured group is stored under its own name. The first
    value found for a key wins.
    """
    context = ContextStore(scope='document')
    lines = document.lines

    for section in document_type.context:
        values = section.match(lines, document.text, context)
        if values is None:
            continue

        if section.assign is not None:
            section.assign(context, values)
            continue

        for key, value in values.items():
            if key in context:
                continue
            try:
                context.put(key, as_currency_code(value) if key == 'currency' else value.strip())
            except CoercionError as e:
                # left unset; reported as MissingContext if the key is required
                logger.warning(f"Ignoring context value for '{key}': {e}", source_id=document.source_id)
    return context


def classify(document: Document, document_types: Sequence[DocumentType], institution: str = None) -> Classification:
    """
    Return the first matching document type with its populated context.

    Raises:
        UnrecognizedDocument: no document type matched
        MissingContext: a required context key was never populated
    """
    for document_type in document_types:
        if matches(document_type, document):
            break
    else:
        raise UnrecognizedDocument(
            "No document type matched",
            source_id=document.source_id,
            institution=institution,
            sample_text=document.text,
        )

    context = extract_context(document_type, document)

    missing = [key for key in document_type.required_context_keys() if key not in context]
    if missing:
        raise MissingContext(
            missing,
            source_id=document.source_id,
            institution=institution,
            document_type=document_type.pattern,
            sample_text=document.text,
        )

    return Classification(document_type=document_type, context=context)
