"""
Errors and warnings raised while extracting transactions from statement text.

Document-level errors abort a whole document; block-level errors only
cost the block they happened in. Warnings never abort anything and are
attached to the item they concern.
"""
from dataclasses import dataclass
from typing import Optional


class ExtractionError(Exception):
    """Base class for every extraction failure."""

    reason = 'ExtractionError'


class DocumentError(ExtractionError):
    """
    Fatal for the whole document.

    Carries enough context to diagnose a configuration gap:
    - The document source id
    - The institution that was tried (if any)
    - The document type pattern that matched (if any)
    - A sample of the text
    """

    def __init__(self, message: str, source_id: str = None, institution: str = None,
                 document_type: str = None, sample_text: str = None):
        self.message = message
        self.source_id = source_id
        self.institution = institution
        self.document_type = document_type
        self.sample_text = sample_text

        details = []
        if source_id:
            details.append(f"Document: {source_id}")
        if institution:
            details.append(f"Institution: {institution}")
        if document_type:
            details.append(f"Document type: {document_type}")
        if sample_text:
            details.append(f"Sample: {sample_text[:200]}...")

        full_message = f"{message}\n" + "\n".join(details) if details else message
        super().__init__(full_message)


class UnrecognizedDocument(DocumentError):
    reason = 'UnrecognizedDocument'


class MissingContext(DocumentError):
    reason = 'MissingContext'

    def __init__(self, missing_keys, **kwargs):
        self.missing_keys = list(missing_keys)
        super().__init__(f"Missing document context: {', '.join(self.missing_keys)}", **kwargs)


class BlockError(ExtractionError):
    """Fatal for a single block; extraction continues with the next one."""

    def __init__(self, message: str, block_text: str = None):
        self.message = message
        self.block_text = block_text
        super().__init__(message)


class NoMatch(BlockError):
    reason = 'NoMatch'


class CoercionError(BlockError):
    reason = 'CoercionError'


class IncompleteTransaction(BlockError):
    reason = 'IncompleteTransaction'


class ContextOverwriteError(ValueError):
    """A context key was set twice in the same scope."""


class LayoutConfigError(ValueError):
    """A layout definition is malformed."""


@dataclass(frozen=True)
class ExtractionWarning:
    code: str
    message: str

    def to_dict(self):
        return {'code': self.code, 'message': self.message}


@dataclass(frozen=True)
class ReconciliationWarning(ExtractionWarning):
    expected: Optional[int] = None
    actual: Optional[int] = None


@dataclass(frozen=True)
class SecurityWarning(ExtractionWarning):
    ticker: Optional[str] = None
