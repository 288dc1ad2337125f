import pandas as pd

from statement_import.common.logging_config import get_logger
from statement_import.common.settings import EngineSettings
from statement_import.core.consolidator import TransactionConsolidator
from .config.registry import InstitutionRegistry
from .pipeline import ExtractorPipeline
from .sources.pdf_text import load_pdf_document, load_text_document

logger = get_logger(__name__)


class ParserFacade:
    """
    File-level entry point: statement file in, DataFrame of items out.
    """

    def __init__(self, layouts_dir: str = None, securities=None, settings: EngineSettings = None):
        self.settings = settings or EngineSettings.from_env()
        self.registry = InstitutionRegistry(layouts_dir or self.settings.layouts_dir)
        self.pipeline = ExtractorPipeline(self.registry, securities, self.settings.max_workers)

    def load(self, file_path: str):
        if file_path.lower().endswith('.pdf'):
            return load_pdf_document(file_path)
        return load_text_document(file_path)

    def parse(self, file_path: str):
        """
        Unified parse method.
        Returns: (pd.DataFrame, dict) -> (items, metadata)
        """
        try:
            document = self.load(file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Read Error: {e}", file_path=file_path, error_type=type(e).__name__)
            return pd.DataFrame(), {'source_id': file_path, 'error': f"Read Error: {e}"}

        result = self.pipeline.process_document(document)
        metadata = {
            'source_id': result.source_id,
            'institution': result.institution,
            'document_type': result.document_type,
            'error': str(result.error) if result.error else None,
            'failed_blocks': len(result.failures),
        }
        if not result.ok:
            return pd.DataFrame(), metadata

        return TransactionConsolidator.to_frame(result.items), metadata

    def parse_many(self, file_paths) -> pd.DataFrame:
        documents = [self.load(p) for p in file_paths]
        results = self.pipeline.process_many(documents)
        for r in results:
            if not r.ok:
                logger.warning(f"Skipped {r.source_id}: {r.error.reason}", source_id=r.source_id)
        return TransactionConsolidator.consolidate(results)
