"""
Extractor Pipeline

Orchestrates extraction: institution detection, per-document extraction
and parallel processing of independent documents.
"""
import concurrent.futures
from typing import List, Optional, Sequence

from statement_import.common.logging_config import get_logger
from statement_import.common.models import Document
from statement_import.core.securities import InMemorySecurityRegistry
from .config.registry import InstitutionRegistry
from .exceptions import DocumentError, UnrecognizedDocument
from .extractors.declarative import DeclarativeExtractor
from .items import ExtractionResult

logger = get_logger(__name__)


class ExtractorPipeline:
    """
    Main orchestrator for statement extraction.

    Handles:
    - Institution detection from document text
    - Declarative extraction with the detected layout
    - Document-level failures reported in the result instead of raised
    - Bounded parallel processing of many documents
    """

    def __init__(self, registry: InstitutionRegistry, securities=None, max_workers: int = 4):
        """
        Initialize pipeline with layout registry.

        Args:
            registry: InstitutionRegistry with available layouts
            securities: Shared get_or_create(ticker, name) collaborator
            max_workers: Upper bound of documents processed at once
        """
        self.registry = registry
        self.securities = securities if securities is not None else InMemorySecurityRegistry()
        self.max_workers = max_workers

    def process_document(self, document: Document) -> ExtractionResult:
        """
        Extract one document.

        Returns:
            ExtractionResult; `error` is set and `items` empty when the
            document was rejected as a whole.
        """
        layout = self.registry.detect(document.text)
        if not layout:
            error = UnrecognizedDocument(
                "No institution layout matched",
                source_id=document.source_id,
                sample_text=document.text,
            )
            logger.warning("Institution not detected.", source_id=document.source_id)
            return ExtractionResult(source_id=document.source_id, error=error)

        logger.info(f"Institution detected: {layout.name}", institution=layout.institution,
                    source_id=document.source_id)
        extractor = DeclarativeExtractor(layout, self.securities)
        try:
            return extractor.extract(document)
        except DocumentError as e:
            logger.error(f"Document rejected: {e.message}", reason=e.reason,
                         source_id=document.source_id, institution=layout.institution)
            return ExtractionResult(source_id=document.source_id, institution=layout.institution, error=e)

    def process_many(self, documents: Sequence[Document], max_workers: Optional[int] = None) -> List[ExtractionResult]:
        """
        Extract many documents, one per worker.
        Results come back in input order.
        """
        workers = max_workers or self.max_workers
        logger.info("Processing documents", document_count=len(documents), max_workers=workers)

        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.process_document, d) for d in documents]
            return [f.result() for f in futures]
