"""
Declarative assignment used by JSON layouts.

Maps transaction attributes to captured group names; the coercer applied
is implied by the attribute.
"""
from typing import Dict, Optional

from .exceptions import LayoutConfigError

MONEY_FIELDS = ('amount', 'fee', 'gross')
TEXT_FIELDS = ('note',)
# Written to the raw field map and resolved into a SecurityRef by the builder
SECURITY_FIELDS = ('ticker', 'name')
TARGETS = ('date', 'currency', 'shares') + MONEY_FIELDS + TEXT_FIELDS + SECURITY_FIELDS


class FieldAssigner:
    """
    Callable assignment step.

        FieldAssigner(fields={"date": "date", "amount": "amount"},
                      constants={"note": "Contribution"})

    Captures that a match did not produce are skipped; the builder reports
    any required field still missing once all steps have run.
    """

    def __init__(self, fields: Optional[Dict[str, str]] = None, constants: Optional[Dict[str, str]] = None):
        self.fields = dict(fields or {})
        self.constants = dict(constants or {})

        unknown = [t for t in list(self.fields) + list(self.constants) if t not in TARGETS]
        if unknown:
            raise LayoutConfigError(f"Unknown assignment targets: {unknown}")

    def __call__(self, transaction, values: Dict[str, str], ctx) -> None:
        for target, capture in self.fields.items():
            raw = values.get(capture)
            if raw is not None:
                self._set(transaction, target, raw, ctx)

        for target, value in self.constants.items():
            self._set(transaction, target, value, ctx)

    def _set(self, transaction, target: str, raw: str, ctx) -> None:
        coerce = ctx.coerce
        if target == 'date':
            transaction.date = coerce.date(raw)
        elif target == 'currency':
            transaction.currency = coerce.currency(raw)
        elif target == 'shares':
            transaction.shares = coerce.shares(raw)
        elif target in MONEY_FIELDS:
            # the sign is carried by the transaction kind
            setattr(transaction, target, abs(coerce.amount(raw)))
        elif target == 'ticker':
            ctx.fields.put('ticker', coerce.ticker(raw))
        elif target == 'name':
            ctx.fields.put('name', raw.strip())
        else:
            setattr(transaction, target, raw.strip())

    def __repr__(self):
        return f"FieldAssigner(fields={self.fields!r}, constants={self.constants!r})"
