"""
Value Coercers

Typed, locale-aware conversion of captured strings into domain values.
Every function here is pure and raises CoercionError on bad input.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional, Union

from .exceptions import CoercionError


@dataclass(frozen=True)
class NumberLocale:
    """Decimal and grouping separators of an institution's number format."""
    decimal_separator: str = '.'
    grouping_separator: str = ','

    def __post_init__(self):
        if self.decimal_separator == self.grouping_separator:
            raise ValueError("Decimal and grouping separators must differ")


LOCALES = {
    'en_US': NumberLocale('.', ','),
    'en_CA': NumberLocale('.', ','),
    'en_GB': NumberLocale('.', ','),
    'de_DE': NumberLocale(',', '.'),
    'pt_BR': NumberLocale(',', '.'),
    'fr_CA': NumberLocale(',', ' '),
    'de_CH': NumberLocale('.', "'"),
}

DEFAULT_LOCALE = LOCALES['en_US']

# Named date orderings; each expands to strptime formats over the usual separators
DATE_ORDERS = {
    'DMY': ['%d{sep}%m{sep}%Y', '%d{sep}%m{sep}%y'],
    'MDY': ['%m{sep}%d{sep}%Y', '%m{sep}%d{sep}%y'],
    'YMD': ['%Y{sep}%m{sep}%d'],
}
DATE_SEPARATORS = ['-', '/', '.']

_SPACES = ('\u00a0', '\u202f')


def resolve_locale(value: Union[str, NumberLocale, None]) -> NumberLocale:
    if value is None:
        return DEFAULT_LOCALE
    if isinstance(value, NumberLocale):
        return value
    try:
        return LOCALES[value]
    except KeyError:
        raise ValueError(f"Unknown number locale: {value}") from None


def resolve_date_formats(formats: Union[str, Iterable[str]]) -> List[str]:
    """
    Expand a date format declaration into an ordered list of strptime formats.

    Accepts a single strptime format, a named order ('DMY', 'MDY', 'YMD')
    or a list mixing both.
    """
    if isinstance(formats, str):
        formats = [formats]

    resolved = []
    for fmt in formats:
        if fmt in DATE_ORDERS:
            for sep in DATE_SEPARATORS:
                resolved.extend(p.format(sep=sep) for p in DATE_ORDERS[fmt])
        else:
            resolved.append(fmt)

    if not resolved:
        raise ValueError("At least one date format is required")
    return resolved


def _number_pattern(locale: NumberLocale) -> re.Pattern:
    g = re.escape(locale.grouping_separator)
    d = re.escape(locale.decimal_separator)
    return re.compile(rf"^(?:\d{{1,3}}(?:{g}\d{{3}})+|\d+)?(?:{d}\d+)?$")


def _to_decimal(value: str, locale: NumberLocale) -> Decimal:
    text = value
    if locale.grouping_separator == ' ':
        for space in _SPACES:
            text = text.replace(space, ' ')

    if not any(c.isdigit() for c in text) or not _number_pattern(locale).match(text):
        raise CoercionError(f"Not a number: {value!r}")

    clean = text.replace(locale.grouping_separator, '').replace(locale.decimal_separator, '.')
    try:
        return Decimal(clean)
    except InvalidOperation:
        raise CoercionError(f"Not a number: {value!r}") from None


def _split_sign(value: str):
    """Strip parentheses / leading sign. Returns (negative, remainder)."""
    text = value.strip()
    negative = False
    if text.startswith('(') and text.endswith(')'):
        negative = True
        text = text[1:-1].strip()
    if text[:1] in ('-', '+'):
        if text[0] == '-':
            if negative:
                raise CoercionError(f"Conflicting signs: {value!r}")
            negative = True
        text = text[1:].strip()
    return negative, text


def parse_amount(value: str, locale: Union[str, NumberLocale, None] = None, scale: int = 2) -> int:
    """
    Parse a monetary string into an integer of minor units.

        parse_amount("10,000.00")            -> 1000000
        parse_amount("(2.046,50)", "de_DE")  -> -204650
    """
    if value is None or not str(value).strip():
        raise CoercionError("Empty amount")

    locale = resolve_locale(locale)
    negative, text = _split_sign(str(value))
    number = _to_decimal(text, locale)

    quantum = Decimal(1).scaleb(-scale)
    try:
        minor = int(number.quantize(quantum, rounding=ROUND_HALF_UP).scaleb(scale))
    except InvalidOperation:
        raise CoercionError(f"Amount out of range: {value!r}") from None
    return -minor if negative else minor


def format_amount(minor: int, locale: Union[str, NumberLocale, None] = None, scale: int = 2) -> str:
    """Inverse of parse_amount: render minor units with the locale's separators."""
    locale = resolve_locale(locale)
    sign = '-' if minor < 0 else ''
    units, cents = divmod(abs(int(minor)), 10 ** scale)

    digits = str(units)
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    integer_part = locale.grouping_separator.join(groups)

    if scale == 0:
        return f"{sign}{integer_part}"
    return f"{sign}{integer_part}{locale.decimal_separator}{cents:0{scale}d}"


def parse_shares(value: str, locale: Union[str, NumberLocale, None] = None,
                 strictly_positive: bool = True) -> Decimal:
    """Parse a share quantity. Quantities keep their full precision."""
    if value is None or not str(value).strip():
        raise CoercionError("Empty share quantity")

    locale = resolve_locale(locale)
    negative, text = _split_sign(str(value))
    shares = _to_decimal(text, locale)
    if negative:
        shares = -shares

    if strictly_positive and shares <= 0:
        raise CoercionError(f"Share quantity must be positive: {value!r}")
    return shares


def parse_date(value: str, formats: Union[str, Iterable[str]] = 'DMY') -> date:
    """Try each format in declaration order; the first one that parses wins."""
    if value is None or not str(value).strip():
        raise CoercionError("Empty date")

    text = str(value).strip()
    for fmt in resolve_date_formats(formats):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise CoercionError(f"Invalid date {text!r}")


def normalize_ticker(value: str, default_suffix: Optional[str] = None, separator: str = '.') -> str:
    """
    Append the institution's default exchange suffix to unqualified tickers.

        normalize_ticker("XEQT", ".TO")    -> "XEQT.TO"
        normalize_ticker("VEQT.TO", ".TO") -> "VEQT.TO"
    """
    ticker = (value or '').strip()
    if not ticker:
        raise CoercionError("Empty ticker symbol")
    if default_suffix and separator not in ticker:
        ticker = ticker + default_suffix
    return ticker


def as_currency_code(value: str) -> str:
    code = (value or '').strip().upper()
    if not re.fullmatch(r"[A-Z]{3}", code):
        raise CoercionError(f"Invalid currency code: {value!r}")
    return code
