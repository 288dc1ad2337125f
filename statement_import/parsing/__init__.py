"""
Parsing module for statement_import

This module holds the declarative extraction engine:
- Value coercers, context store, sections and alternations
- Block segmentation and document classification
- Transaction building and output items
- Layout configuration, pipeline orchestration and file facade
"""

# Base classes
from .base import BaseExtractor

# Configuration
from .config.layout import BlockDef, CoercionParams, DocumentType, InstitutionConfig, TransactionDef
from .config.registry import InstitutionRegistry
from .sections import OneOf, PatternEntry, Section
from .assign import FieldAssigner

# Engine
from .context import ContextStore
from .segmenter import Block, BlockSequence
from .classifier import Classification, classify
from .builder import TransactionBuilder
from .items import ExtractionResult, FailureItem, TransactionItem
from .extractors.declarative import DeclarativeExtractor

# Errors
from .exceptions import (
    CoercionError, DocumentError, BlockError, ExtractionError, IncompleteTransaction,
    MissingContext, NoMatch, ReconciliationWarning, SecurityWarning, UnrecognizedDocument,
)

# Pipeline & Facade
from .pipeline import ExtractorPipeline
from .facade import ParserFacade

__all__ = [
    # Base
    'BaseExtractor',
    # Config
    'BlockDef',
    'CoercionParams',
    'DocumentType',
    'InstitutionConfig',
    'TransactionDef',
    'InstitutionRegistry',
    'OneOf',
    'PatternEntry',
    'Section',
    'FieldAssigner',
    # Engine
    'ContextStore',
    'Block',
    'BlockSequence',
    'Classification',
    'classify',
    'TransactionBuilder',
    'ExtractionResult',
    'FailureItem',
    'TransactionItem',
    'DeclarativeExtractor',
    # Errors
    'ExtractionError',
    'DocumentError',
    'BlockError',
    'UnrecognizedDocument',
    'MissingContext',
    'NoMatch',
    'CoercionError',
    'IncompleteTransaction',
    'ReconciliationWarning',
    'SecurityWarning',
    # Pipeline
    'ExtractorPipeline',
    'ParserFacade',
]
