# Configuration submodule
from .layout import BlockDef, CoercionParams, DocumentType, InstitutionConfig, TransactionDef
from .registry import InstitutionRegistry

__all__ = [
    'BlockDef',
    'CoercionParams',
    'DocumentType',
    'InstitutionConfig',
    'TransactionDef',
    'InstitutionRegistry',
]
