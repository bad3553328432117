"""Redactor: the redaction pipeline.  Scan, merge, number, rewrite.

Usage:
    from doc_redactor import Redactor, restore_original

    redactor = Redactor()        # reusable, holds no per-document state

    result = redactor.redact("Contact: alice@example.com for queries.")
    print(result.rewritten_text)  # "Contact: [REDACTED:EMAIL#1] for queries."

    print(restore_original(result.rewritten_text, result.annotations))
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable

from .patterns import Pattern, build_catalog, scan_patterns
from .types import Annotation, Candidate, RedactionResult

logger = logging.getLogger(__name__)

PLACEHOLDER_FMT = "[REDACTED:{id}]"
TOTAL_KEY = "total_redactions"


@dataclass
class RedactorConfig:
    """Configuration for the Redactor."""
    redact_pii: bool = True           # contact, financial and name identifiers
    redact_phi: bool = True           # medical record numbers and dates
    additional_patterns: list[Pattern] = field(default_factory=list)
    # Entity types to always skip (e.g. don't redact dates)
    skip_types: set[str] = field(default_factory=set)
    # Allow-list: values that should NEVER be redacted
    allow_list: set[str] = field(default_factory=set)


class Redactor:
    """Pattern-catalog redactor.

    The catalog is fixed at construction.  ``redact`` keeps all working
    state local, so one instance may serve several threads.
    """

    def __init__(self, config: RedactorConfig | None = None) -> None:
        self.config = config or RedactorConfig()
        self.catalog: tuple[Pattern, ...] = build_catalog(
            redact_pii=self.config.redact_pii,
            redact_phi=self.config.redact_phi,
            additional=self.config.additional_patterns,
        )

    def redact(self, text: str) -> RedactionResult:
        """Redact text.  Non-string or empty input yields an empty result."""
        if not isinstance(text, str) or not text:
            return RedactionResult(rewritten_text="", annotations=[], summary={})

        candidates = scan_patterns(text, self.catalog)

        # --- Filter ---
        filtered = [
            c for c in candidates
            if c.category not in self.config.skip_types
            and c.text not in self.config.allow_list
        ]

        merged = merge_overlaps(text, filtered)
        annotations = assign_ids(merged)
        rewritten = rewrite(text, annotations)
        logger.debug("redact: %d candidates -> %d annotations",
                     len(filtered), len(annotations))
        return RedactionResult(
            rewritten_text=rewritten,
            annotations=annotations,
            summary=summarize(annotations),
        )

    def restore(self, rewritten_text: str, annotations: Iterable[Annotation]) -> str:
        return restore_text(rewritten_text, annotations)


def merge_overlaps(text: str, candidates: list[Candidate]) -> list[Candidate]:
    """Collapse overlapping candidates into maximal, disjoint spans.

    Candidates are swept by start (higher priority first on ties).  A
    candidate starting at or before the open span's end is absorbed; the
    span takes the category of its highest-priority contributor.  The
    span text is re-read from ``text`` so it always matches the offsets.
    """
    if not candidates:
        return []
    ordered = sorted(candidates, key=lambda c: (c.start, -c.priority))

    merged: list[Candidate] = []
    cur = ordered[0]
    start, end = cur.start, cur.end
    for nxt in ordered[1:]:
        if nxt.start <= end:
            end = max(end, nxt.end)
            if nxt.priority > cur.priority:
                cur = nxt
        else:
            merged.append(_span(text, cur, start, end))
            cur = nxt
            start, end = nxt.start, nxt.end
    merged.append(_span(text, cur, start, end))
    return merged


def _span(text: str, winner: Candidate, start: int, end: int) -> Candidate:
    return Candidate(
        category=winner.category,
        start=start,
        end=end,
        text=text[start:end],
        confidence=winner.confidence,
        priority=winner.priority,
    )


def assign_ids(spans: list[Candidate]) -> list[Annotation]:
    """Number spans per category in left-to-right order: EMAIL#1, EMAIL#2..."""
    counters: dict[str, int] = {}
    out: list[Annotation] = []
    for s in spans:
        counters[s.category] = counters.get(s.category, 0) + 1
        out.append(Annotation(
            id=f"{s.category}#{counters[s.category]}",
            category=s.category,
            original=s.text,
            start=s.start,
            end=s.end,
            confidence=s.confidence,
        ))
    return out


def rewrite(text: str, annotations: list[Annotation]) -> str:
    """Replace each span with its placeholder, right-to-left to preserve offsets."""
    result = text
    for a in sorted(annotations, key=lambda a: a.start, reverse=True):
        result = result[:a.start] + PLACEHOLDER_FMT.format(id=a.id) + result[a.end:]
    return result


def restore_text(rewritten_text: str, annotations: Iterable[Annotation]) -> str:
    """Undo ``rewrite``.

    When the rewritten text is unmodified, placeholders are located by
    offset, so a placeholder-shaped string that was already in the
    original is left alone.  Otherwise falls back to replacing the first
    occurrence of each placeholder literal.
    """
    if not isinstance(rewritten_text, str) or not rewritten_text:
        return ""
    ordered = sorted(annotations, key=lambda a: a.start)
    if not ordered:
        return rewritten_text

    by_offset = _restore_by_offset(rewritten_text, ordered)
    if by_offset is not None:
        return by_offset

    logger.warning("rewritten text does not line up with %d annotations; "
                   "restoring by placeholder text", len(ordered))
    restored = rewritten_text
    for a in reversed(ordered):
        restored = restored.replace(PLACEHOLDER_FMT.format(id=a.id), a.original, 1)
    return restored


def _restore_by_offset(rewritten_text: str, ordered: list[Annotation]) -> str | None:
    parts: list[str] = []
    shift = 0
    cursor = 0
    for a in ordered:
        placeholder = PLACEHOLDER_FMT.format(id=a.id)
        pos = a.start + shift
        if pos < cursor or rewritten_text[pos:pos + len(placeholder)] != placeholder:
            return None
        parts.append(rewritten_text[cursor:pos])
        parts.append(a.original)
        cursor = pos + len(placeholder)
        shift += len(placeholder) - (a.end - a.start)
    parts.append(rewritten_text[cursor:])
    return "".join(parts)


def summarize(annotations: list[Annotation]) -> dict[str, int]:
    """Per-category counts keyed by lower-cased category, plus the total."""
    summary: dict[str, int] = {}
    for a in annotations:
        key = a.category.lower()
        summary[key] = summary.get(key, 0) + 1
    summary[TOTAL_KEY] = len(annotations)
    return summary


_default: Redactor | None = None


def _default_redactor() -> Redactor:
    global _default
    if _default is None:
        _default = Redactor()
    return _default


def annotate_for_redaction(text: str, config: RedactorConfig | None = None) -> RedactionResult:
    """Redact ``text`` with the built-in catalog, or with ``config`` if given."""
    redactor = Redactor(config) if config is not None else _default_redactor()
    return redactor.redact(text)


def restore_original(rewritten_text: str, annotations: Iterable[Annotation]) -> str:
    """Return the text ``annotate_for_redaction`` was called with."""
    return restore_text(rewritten_text, annotations)
