"""
Base Classes for Parsing Module
"""
from abc import ABC, abstractmethod

from statement_import.common.models import Document


class BaseExtractor(ABC):
    """
    Abstract Base Class for all statement extractors.

    Returns:
        ExtractionResult with one item per transaction block
    """

    @abstractmethod
    def identify(self, text: str) -> bool:
        """
        Returns True if this extractor can handle the given statement text.
        """
        pass

    @abstractmethod
    def extract(self, document: Document):
        """
        Main entry point.
        Returns an ExtractionResult; raises DocumentError when the
        document as a whole cannot be processed.
        """
        pass
