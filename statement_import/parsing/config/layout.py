"""
Institution Layout Configuration

Dataclasses describing how to extract transactions from one institution's
statements. A new institution is supported by writing one of these (usually
as a JSON file), never by subclassing the engine.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from ..assign import FieldAssigner
from ..coercers import (
    NumberLocale, as_currency_code, normalize_ticker, parse_amount, parse_date,
    parse_shares, resolve_date_formats, resolve_locale,
)
from ..exceptions import LayoutConfigError
from ..sections import OneOf, PatternEntry, Section

TRANSACTION_KINDS = ('deposit', 'buy', 'sell', 'dividend')
MATCH_MODES = ('text', 'line')

Step = Union[Section, OneOf]


@dataclass
class CoercionParams:
    """
    Institution-specific parsing parameters.

    Attributes:
        locale: Named number locale (e.g. 'en_CA'); overrides the separators below
        amount_decimal_separator / amount_thousand_separator: Used when no locale is named
        date_formats: strptime formats and/or named orders ('DMY', 'MDY', 'YMD')
        default_exchange_suffix: Appended to tickers without an exchange, e.g. '.TO'
        amount_scale: Minor unit digits of the statement currency
        reconciliation_tolerance: Allowed gross/fee/net difference in minor units
    """
    locale: Optional[str] = None
    amount_decimal_separator: str = '.'
    amount_thousand_separator: str = ','
    date_formats: List[str] = field(default_factory=lambda: ['DMY'])
    default_exchange_suffix: Optional[str] = None
    amount_scale: int = 2
    reconciliation_tolerance: int = 1

    def __post_init__(self):
        try:
            self.number_locale = (
                resolve_locale(self.locale) if self.locale
                else NumberLocale(self.amount_decimal_separator, self.amount_thousand_separator)
            )
            self.resolved_date_formats = resolve_date_formats(self.date_formats)
        except ValueError as e:
            raise LayoutConfigError(str(e)) from e

    def amount(self, value: str) -> int:
        return parse_amount(value, self.number_locale, self.amount_scale)

    def date(self, value: str):
        return parse_date(value, self.resolved_date_formats)

    def shares(self, value: str):
        return parse_shares(value, self.number_locale)

    def ticker(self, value: str) -> str:
        return normalize_ticker(value, self.default_exchange_suffix)

    def currency(self, value: str) -> str:
        return as_currency_code(value)


@dataclass
class BlockDef:
    start: str
    end: Optional[str] = None
    max_lines: Optional[int] = None


@dataclass
class TransactionDef:
    """
    One kind of transaction found in a document type.

    `kind` names the subject: 'deposit', 'buy', 'sell' or 'dividend'.
    A callable returning an empty transaction may be given instead.
    """
    kind: Union[str, Callable]
    block: BlockDef
    steps: List[Step]

    def __post_init__(self):
        if isinstance(self.kind, str) and self.kind not in TRANSACTION_KINDS:
            raise LayoutConfigError(f"Unknown transaction kind: {self.kind}")
        if not self.steps:
            raise LayoutConfigError("A transaction needs at least one step")


@dataclass
class DocumentType:
    """
    Classification rule plus everything extracted from documents of this type.

    Attributes:
        pattern: Regex identifying the document
        match_mode: 'text' searches the full text, 'line' requires one matching line
        context: Sections run once over the document to seed the Context Store
        required_context: Keys that must be in the Context Store after classification
        transactions: Block and builder definitions
    """
    pattern: str
    transactions: List[TransactionDef] = field(default_factory=list)
    context: List[Section] = field(default_factory=list)
    required_context: List[str] = field(default_factory=list)
    match_mode: str = 'text'

    def __post_init__(self):
        if self.match_mode not in MATCH_MODES:
            raise LayoutConfigError(f"Unknown match mode: {self.match_mode}")

    def required_context_keys(self) -> List[str]:
        """Declared keys plus every key a transaction section reads, in first-seen order."""
        keys = list(self.required_context)
        for tdef in self.transactions:
            for step in tdef.steps:
                for section in step.sections():
                    for key in section.context_keys:
                        if key not in keys:
                            keys.append(key)
        return keys


@dataclass
class InstitutionConfig:
    """
    Configuration for one institution.

    Attributes:
        institution: Identifier (e.g. 'questrade')
        name: Human-readable name (e.g. 'Questrade, Inc.')
        document_types: Registered in order; the first match governs a document
        keywords: Strings that must all appear for the registry to pick this institution
        coercion: Number/date/ticker parameters
    """
    institution: str
    name: str
    document_types: List[DocumentType]
    keywords: List[str] = field(default_factory=list)
    coercion: CoercionParams = field(default_factory=CoercionParams)

    @classmethod
    def from_dict(cls, data: dict) -> "InstitutionConfig":
        try:
            return cls(
                institution=data['institution'],
                name=data.get('name', data['institution']),
                keywords=list(data.get('keywords', [])),
                coercion=CoercionParams(**data.get('coercion', {})),
                document_types=[_document_type(d) for d in data['document_types']],
            )
        except (KeyError, TypeError) as e:
            raise LayoutConfigError(f"Malformed layout: {e}") from e


def _pattern_entry(data) -> PatternEntry:
    if isinstance(data, str):
        return PatternEntry(data)
    return PatternEntry(
        regex=data['regex'],
        attributes=data.get('attributes'),
        multiline=data.get('multiline', False),
    )


def _section(data: dict) -> Section:
    assign = None
    if 'fields' in data or 'constants' in data:
        assign = FieldAssigner(data.get('fields'), data.get('constants'))

    return Section(
        name=data.get('name', 'section'),
        patterns=[_pattern_entry(p) for p in data['patterns']],
        attributes=list(data.get('attributes', [])),
        context_keys=list(data.get('context', [])),
        assign=assign,
        optional=data.get('optional', False),
    )


def _step(data: dict) -> Step:
    if 'one_of' in data:
        return OneOf(alternatives=[_section(s) for s in data['one_of']], name=data.get('name', 'one_of'))
    return _section(data.get('section', data))


def _document_type(data: dict) -> DocumentType:
    transactions = []
    for t in data.get('transactions', []):
        transactions.append(TransactionDef(
            kind=t['kind'],
            block=BlockDef(**t['block']),
            steps=[_step(s) for s in t['steps']],
        ))

    for s in data.get('context', []):
        if 'fields' in s or 'constants' in s:
            raise LayoutConfigError(f"Context section '{s.get('name')}' cannot assign transaction fields")

    return DocumentType(
        pattern=data['pattern'],
        transactions=transactions,
        context=[_section(s) for s in data.get('context', [])],
        required_context=list(data.get('required_context', [])),
        match_mode=data.get('match_mode', 'text'),
    )
