"""
Output items: one per block, either a finished transaction or a failure.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from statement_import.common.models import DomainTransaction
from .exceptions import BlockError, DocumentError, ExtractionWarning
from .segmenter import Block


@dataclass(frozen=True)
class Item:
    source_id: str
    institution: str
    start_line: int

    @property
    def is_failure(self) -> bool:
        return False


@dataclass(frozen=True)
class TransactionItem(Item):
    transaction: DomainTransaction
    warnings: Tuple[ExtractionWarning, ...] = ()

    def to_dict(self):
        data = {'status': 'ok', 'source_id': self.source_id, 'institution': self.institution,
                'start_line': self.start_line}
        data.update(self.transaction.to_dict())
        data['warnings'] = [w.to_dict() for w in self.warnings]
        return data


@dataclass(frozen=True)
class FailureItem(Item):
    reason: str
    message: str
    block_text: str

    @property
    def is_failure(self) -> bool:
        return True

    def to_dict(self):
        return {
            'status': 'failed',
            'source_id': self.source_id,
            'institution': self.institution,
            'reason': self.reason,
            'message': self.message,
            'block_text': self.block_text,
            'start_line': self.start_line,
        }


def wrap_success(transaction: DomainTransaction, warnings, block: Block, source_id: str, institution: str) -> TransactionItem:
    return TransactionItem(
        source_id=source_id,
        institution=institution,
        start_line=block.start_line,
        transaction=transaction,
        warnings=tuple(warnings),
    )


def wrap_failure(error: BlockError, block: Block, source_id: str, institution: str) -> FailureItem:
    return FailureItem(
        source_id=source_id,
        institution=institution,
        reason=error.reason,
        message=error.message,
        block_text=block.text,
        start_line=block.start_line,
    )


@dataclass
class ExtractionResult:
    """Everything extracted from one document, or the reason it was rejected."""
    source_id: str
    institution: Optional[str] = None
    document_type: Optional[str] = None
    items: List[Item] = field(default_factory=list)
    error: Optional[DocumentError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def transactions(self) -> List[DomainTransaction]:
        return [i.transaction for i in self.items if not i.is_failure]

    @property
    def failures(self) -> List[FailureItem]:
        return [i for i in self.items if i.is_failure]

    def to_dicts(self) -> List[dict]:
        return [i.to_dict() for i in self.items]
