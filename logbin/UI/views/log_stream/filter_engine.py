"""
Filter Engine Module - Search visibility, highlighting and separators

Handles:
- Tokenizing the filter text
- OR-matching tokens against the raw record text (case-insensitive)
- Highlight spans for every match
- Time-gap separators over the full, unfiltered sequence
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence, Tuple

from .log_parser import LogRecord

SEPARATOR_GAP_MS = 3000

Span = Tuple[int, int]


def tokenize(filter_text: Optional[str]) -> Tuple[str, ...]:
    """Lower-cased, whitespace-separated tokens; empty for blank input"""
    if not filter_text:
        return ()
    return tuple(token for token in filter_text.strip().lower().split() if token)


def build_pattern(tokens: Sequence[str]) -> Optional[Pattern[str]]:
    """
    Single case-insensitive pattern matching any token as a substring

    Tokens are matched literally. Longer tokens come first so that an
    overlapping shorter token never truncates a highlight.
    """
    if not tokens:
        return None
    ordered = sorted(set(tokens), key=lambda t: (-len(t), t))
    return re.compile("|".join(re.escape(t) for t in ordered), re.IGNORECASE)


@dataclass(frozen=True)
class FilterResult:
    """Visibility of one record under the current filter"""
    visible: bool
    highlights: Tuple[Span, ...] = ()


class FilterEngine:
    """Pure visibility/highlight computation for the current filter text"""

    def __init__(self, filter_text: Optional[str] = None):
        self.filter_text = filter_text or ""
        self.tokens = tokenize(filter_text)
        self.pattern = build_pattern(self.tokens)

    @property
    def is_active(self) -> bool:
        return self.pattern is not None

    def match(self, record: LogRecord) -> FilterResult:
        """Visibility and highlight spans over record.raw"""
        if self.pattern is None:
            return FilterResult(visible=True)

        spans = tuple(m.span() for m in self.pattern.finditer(record.raw) if m.end() > m.start())
        return FilterResult(visible=bool(spans), highlights=spans)

    def apply(self, records: Sequence[LogRecord]) -> List[FilterResult]:
        """Results for every record, in order; hidden records keep their slot"""
        return [self.match(record) for record in records]


def separators(records: Sequence[LogRecord], gap_ms: int = SEPARATOR_GAP_MS) -> List[bool]:
    """
    Flag records that start a new burst

    Record i gets a separator when its effective time is more than gap_ms
    after record i-1's. Computed over the unfiltered sequence.
    """
    flags = []
    for idx, record in enumerate(records):
        if idx == 0:
            flags.append(False)
            continue
        flags.append(record.effective_time > records[idx - 1].effective_time + gap_ms)
    return flags
