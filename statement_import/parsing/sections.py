"""
Pattern Sections and Alternations

A Section is an ordered list of regex entries with named groups. The first
entry that matches with every required attribute present wins; later
entries are never evaluated. OneOf applies the same rule one level up, over
whole sections.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .exceptions import LayoutConfigError, NoMatch

# assign(transaction, values, build_context)
AssignFn = Callable[[Any, Dict[str, str], Any], None]


@dataclass
class PatternEntry:
    """
    One regex of a section.

    Attributes:
        regex: Python regex with named groups, e.g. r"Combined in (?P<currency>\\w{3})$"
        attributes: Required group names for this entry; None means use the section's
        multiline: Search the whole block text (re.MULTILINE) instead of line by line
    """
    regex: str
    attributes: Optional[List[str]] = None
    multiline: bool = False
    compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        flags = re.MULTILINE if self.multiline else 0
        try:
            self.compiled = re.compile(self.regex, flags)
        except re.error as e:
            raise LayoutConfigError(f"Invalid pattern {self.regex!r}: {e}") from e

    def search(self, lines: Sequence[str], text: str, required: Sequence[str]) -> Optional[re.Match]:
        candidates = self.compiled.finditer(text) if self.multiline else (
            self.compiled.search(line) for line in lines
        )
        for m in candidates:
            if m is None:
                continue
            groups = m.groupdict()
            if all(groups.get(name) is not None for name in required):
                return m
        return None


@dataclass
class Section:
    """
    Named group of alternative patterns bound to an assignment step.

    Attributes:
        name: Used in diagnostics only
        patterns: Ordered entries; declaration order is the tie-break
        attributes: Group names every match must capture
        context_keys: Context Store keys copied into the values handed to assign
        assign: Callable (transaction, values, build_context)
        optional: A missing match skips the section instead of failing the block
    """
    name: str
    patterns: List[PatternEntry]
    attributes: List[str] = field(default_factory=list)
    context_keys: List[str] = field(default_factory=list)
    assign: Optional[AssignFn] = None
    optional: bool = False

    def __post_init__(self):
        self.patterns = [p if isinstance(p, PatternEntry) else PatternEntry(p) for p in self.patterns]
        if not self.patterns:
            raise LayoutConfigError(f"Section '{self.name}' has no patterns")

        for entry in self.patterns:
            required = self._required(entry)
            unknown = [a for a in required if a not in entry.compiled.groupindex]
            if unknown:
                raise LayoutConfigError(
                    f"Section '{self.name}': attributes {unknown} are not groups of {entry.regex!r}"
                )

    def _required(self, entry: PatternEntry) -> List[str]:
        return entry.attributes if entry.attributes is not None else self.attributes

    def match(self, lines: Sequence[str], text: str, context) -> Optional[Dict[str, str]]:
        """
        Return the captured values of the first satisfying entry, or None.
        Context values are added for every declared context key that is set.
        """
        for entry in self.patterns:
            m = entry.search(lines, text, self._required(entry))
            if m is None:
                continue

            values = {k: v for k, v in m.groupdict().items() if v is not None}
            for key in self.context_keys:
                if key in context and key not in values:
                    values[key] = context.get(key)
            return values
        return None

    def apply(self, transaction, values: Dict[str, str], build_context) -> None:
        if self.assign is not None:
            self.assign(transaction, values, build_context)

    def run(self, transaction, lines, text, build_context) -> bool:
        values = self.match(lines, text, build_context.context)
        if values is None:
            if self.optional:
                return False
            raise NoMatch(f"Section '{self.name}' did not match", block_text=text)

        self.apply(transaction, values, build_context)
        return True

    def sections(self) -> List["Section"]:
        return [self]


@dataclass
class OneOf:
    """Alternation: the first section that matches is committed, the rest are skipped."""
    alternatives: List[Section]
    name: str = 'one_of'

    def __post_init__(self):
        if not self.alternatives:
            raise LayoutConfigError(f"Alternation '{self.name}' is empty")

    def run(self, transaction, lines, text, build_context) -> bool:
        for section in self.alternatives:
            values = section.match(lines, text, build_context.context)
            if values is not None:
                section.apply(transaction, values, build_context)
                return True

        names = ', '.join(s.name for s in self.alternatives)
        raise NoMatch(f"None of the alternatives matched ({names})", block_text=text)

    def sections(self) -> List[Section]:
        return list(self.alternatives)
