"""
Context Store

Scoped, append-only key/value store carrying document-wide values
(e.g. the statement currency) down into every block.
"""
from typing import Dict, Iterator, Optional

from .exceptions import ContextOverwriteError


class ContextStore:
    """
    A key set in a scope is final for that scope. Child scopes see their
    parent's entries and may shadow them, but never change them.
    """

    def __init__(self, parent: Optional["ContextStore"] = None, scope: str = 'document'):
        self._parent = parent
        self._values: Dict[str, str] = {}
        self.scope = scope

    def child(self, scope: str = 'block') -> "ContextStore":
        return ContextStore(parent=self, scope=scope)

    def put(self, key: str, value: str) -> None:
        if key in self._values:
            raise ContextOverwriteError(
                f"Context key '{key}' already set in {self.scope} scope"
            )
        self._values[key] = value

    def get(self, key: str, default=None):
        if key in self._values:
            return self._values[key]
        if self._parent is not None:
            return self._parent.get(key, default)
        return default

    def __getitem__(self, key: str) -> str:
        if key not in self:
            raise KeyError(key)
        return self.get(key)

    def __contains__(self, key) -> bool:
        return key in self._values or (self._parent is not None and key in self._parent)

    def keys(self) -> Iterator[str]:
        seen = set()
        scope = self
        while scope is not None:
            for key in scope._values:
                if key not in seen:
                    seen.add(key)
                    yield key
            scope = scope._parent

    def as_dict(self) -> Dict[str, str]:
        return {key: self.get(key) for key in self.keys()}

    def __repr__(self):
        return f"ContextStore(scope={self.scope!r}, values={self.as_dict()!r})"
