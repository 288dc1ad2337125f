from dataclasses import dataclass, field
import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Document:
    """Plain text of one statement plus where it came from."""
    text: str
    source_id: str

    @property
    def lines(self) -> list[str]:
        """Split on newlines only; form feeds between PDF pages stay inside their line."""
        lines = self.text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return lines


@dataclass(frozen=True)
class SecurityRef:
    """
    Handle returned by the security registry.
    The engine never creates these directly.
    """
    ticker: str
    name: str
    uuid: str


@dataclass
class DomainTransaction:
    """
    Canonical representation of an extracted transaction.
    Amounts are integers in minor currency units (cents for 2-digit currencies).
    """
    kind = 'OTHER'

    date: Optional[datetime.date] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    shares: Optional[Decimal] = None
    fee: Optional[int] = None
    gross: Optional[int] = None
    security: Optional[SecurityRef] = None
    note: Optional[str] = None

    def missing_fields(self) -> list[str]:
        return [name for name in ('date', 'amount', 'currency') if getattr(self, name) is None]

    def to_dict(self):
        return {
            'kind': self.kind,
            'date': self.date.isoformat() if self.date else None,
            'amount': self.amount,
            'currency': self.currency,
            'shares': str(self.shares) if self.shares is not None else None,
            'fee': self.fee,
            'gross': self.gross,
            'ticker': self.security.ticker if self.security else None,
            'security_name': self.security.name if self.security else None,
            'note': self.note,
        }


@dataclass
class Deposit(DomainTransaction):
    kind = 'DEPOSIT'


@dataclass
class BuySellEntry(DomainTransaction):
    type: str = 'BUY'  # 'BUY' or 'SELL'

    @property
    def kind(self):
        return self.type


@dataclass
class DividendEvent(DomainTransaction):
    kind = 'DIVIDEND'


@dataclass
class RawFieldMap:
    """Unparsed captures collected for one in-progress transaction."""
    values: dict = field(default_factory=dict)

    def put(self, key: str, value: str):
        self.values[key] = value

    def get(self, key: str, default=None):
        return self.values.get(key, default)

    def __contains__(self, key):
        return key in self.values
