"""
Transaction Builder

Runs a transaction definition's steps over one block and produces a
finished domain transaction, or raises the error of the first failing step.
"""
from dataclasses import dataclass
from typing import List, Tuple

from statement_import.common.logging_config import get_logger
from statement_import.common.models import (
    BuySellEntry, Deposit, DividendEvent, DomainTransaction, RawFieldMap,
)
from .config.layout import CoercionParams, TransactionDef
from .context import ContextStore
from .exceptions import (
    BlockError, CoercionError, ExtractionWarning, IncompleteTransaction,
    ReconciliationWarning, SecurityWarning,
)
from .segmenter import Block

logger = get_logger(__name__)

SUBJECTS = {
    'deposit': Deposit,
    'buy': lambda: BuySellEntry(type='BUY'),
    'sell': lambda: BuySellEntry(type='SELL'),
    'dividend': DividendEvent,
}


@dataclass
class BuildContext:
    """What an assignment step can see and write besides the transaction."""
    context: ContextStore
    fields: RawFieldMap
    coerce: CoercionParams
    securities: object
    block: Block


class TransactionBuilder:
    """
    Builds one transaction per block from a TransactionDef.

    Steps run in declaration order. A failing step fails the whole block;
    nothing is retried and the half-built transaction is dropped.
    """

    def __init__(self, definition: TransactionDef, coercion: CoercionParams, securities):
        self.definition = definition
        self.coercion = coercion
        self.securities = securities

    def new_subject(self) -> DomainTransaction:
        kind = self.definition.kind
        factory = SUBJECTS[kind] if isinstance(kind, str) else kind
        return factory()

    def build(self, block: Block, context: ContextStore) -> Tuple[DomainTransaction, List[ExtractionWarning]]:
        transaction = self.new_subject()
        ctx = BuildContext(
            context=context.child('block'),
            fields=RawFieldMap(),
            coerce=self.coercion,
            securities=self.securities,
            block=block,
        )

        text = block.text
        try:
            for step in self.definition.steps:
                step.run(transaction, block.lines, text, ctx)

            self._validate(transaction)
            warnings = []
            self._resolve_security(transaction, ctx, warnings)
        except BlockError as e:
            if e.block_text is None:
                e.block_text = text
            raise

        warnings.extend(self._reconcile(transaction))
        return transaction, warnings

    def _resolve_security(self, transaction, ctx: BuildContext, warnings: list) -> None:
        ticker = ctx.fields.get('ticker')
        if not ticker:
            return

        name = ctx.fields.get('name') or ''
        if not name:
            warnings.append(SecurityWarning(
                code='SECURITY_NAME_MISSING',
                message=f"No security name captured for {ticker}",
                ticker=ticker,
            ))
        transaction.security = self.securities.get_or_create(ticker, name)

    def _validate(self, transaction: DomainTransaction) -> None:
        missing = transaction.missing_fields()
        if missing:
            raise IncompleteTransaction(f"Missing required fields: {', '.join(missing)}")
        if transaction.amount < 0:
            raise CoercionError(f"Negative amount: {transaction.amount}")
        if transaction.shares is not None and transaction.shares <= 0:
            raise CoercionError(f"Share quantity must be positive: {transaction.shares}")

    def _reconcile(self, transaction: DomainTransaction) -> List[ReconciliationWarning]:
        """Cross-check gross, fee and net amount when all three were captured."""
        if transaction.gross is None or transaction.fee is None:
            return []

        if isinstance(transaction, BuySellEntry) and transaction.type == 'BUY':
            expected = transaction.gross + transaction.fee
        else:
            expected = transaction.gross - transaction.fee

        if abs(expected - transaction.amount) <= self.coercion.reconciliation_tolerance:
            return []

        logger.warning(
            "Gross/fee/net mismatch",
            kind=transaction.kind, expected=expected, actual=transaction.amount,
        )
        return [ReconciliationWarning(
            code='RECONCILIATION_MISMATCH',
            message=f"Expected net amount {expected}, statement shows {transaction.amount}",
            expected=expected,
            actual=transaction.amount,
        )]
