"""
Declarative Extractor

Extracts transactions from statement text using the rules defined in an
InstitutionConfig. One engine serves every institution.
"""
from typing import Iterator, List, Tuple

from statement_import.common.logging_config import document_scope, get_logger
from statement_import.common.models import Document
from statement_import.core.securities import InMemorySecurityRegistry
from ..base import BaseExtractor
from ..builder import TransactionBuilder
from ..classifier import classify, matches
from ..config.layout import DocumentType, InstitutionConfig
from ..exceptions import BlockError
from ..items import ExtractionResult, Item, wrap_failure, wrap_success
from ..segmenter import Block, BlockSequence

logger = get_logger(__name__)


class DeclarativeExtractor(BaseExtractor):
    """
    Generic extractor driven by an InstitutionConfig.

    Classifies the document, segments it into blocks for every transaction
    definition of the matched document type, and builds one item per block
    in document order. Block failures become FailureItems; document
    failures (UnrecognizedDocument, MissingContext) propagate.
    """

    def __init__(self, config: InstitutionConfig, securities=None):
        """
        Initialize extractor with an institution configuration.

        Args:
            config: InstitutionConfig with document types and coercion parameters
            securities: get_or_create(ticker, name) collaborator; a private
                        in-memory registry is used when omitted
        """
        self.config = config
        self.securities = securities if securities is not None else InMemorySecurityRegistry()
        self._builders = {
            id(tdef): TransactionBuilder(tdef, config.coercion, self.securities)
            for dtype in config.document_types
            for tdef in dtype.transactions
        }

    def identify(self, text: str) -> bool:
        """Check if this extractor can handle the text based on keywords."""
        if self.config.keywords:
            return all(k in text for k in self.config.keywords)
        probe = Document(text=text, source_id='identify')
        return any(matches(d, probe) for d in self.config.document_types)

    def extract(self, document: Document) -> ExtractionResult:
        with document_scope(document.source_id):
            classification = classify(document, self.config.document_types, institution=self.config.institution)
            document_type = classification.document_type
            logger.info(
                f"Document classified as {self.config.name}",
                institution=self.config.institution,
                document_type=document_type.pattern,
            )

            items: List[Item] = []
            for block, builder in self._blocks(document, document_type):
                items.append(self._build_item(document, block, builder, classification.context))

            failed = sum(1 for i in items if i.is_failure)
            logger.info("Extraction finished", item_count=len(items), failed_count=failed)
            return ExtractionResult(
                source_id=document.source_id,
                institution=self.config.institution,
                document_type=document_type.pattern,
                items=items,
            )

    def _build_item(self, document: Document, block: Block, builder: TransactionBuilder, context) -> Item:
        try:
            transaction, warnings = builder.build(block, context)
        except BlockError as e:
            logger.warning(
                f"Block failed: {e.message}",
                reason=e.reason, start_line=block.start_line,
            )
            return wrap_failure(e, block, document.source_id, self.config.institution)

        return wrap_success(transaction, warnings, block, document.source_id, self.config.institution)

    def _blocks(self, document: Document, document_type: DocumentType) -> Iterator[Tuple[Block, TransactionBuilder]]:
        """
        Blocks of every transaction definition, merged in document order.
        Ties on the same start line keep declaration order.
        """
        lines = document.lines
        found = []
        for order, tdef in enumerate(document_type.transactions):
            sequence = BlockSequence(lines, tdef.block.start, tdef.block.end, tdef.block.max_lines)
            for block in sequence:
                found.append((block.start_line, order, block, self._builders[id(tdef)]))

        found.sort(key=lambda f: (f[0], f[1]))
        for _, _, block, builder in found:
            yield block, builder
