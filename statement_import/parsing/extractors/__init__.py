# Extractors submodule
from .declarative import DeclarativeExtractor

__all__ = ['DeclarativeExtractor']
