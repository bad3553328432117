"""Flagger: marks privilege, PHI, confidentiality, financial and risky
contract language.

Unlike redaction, flags may overlap.  Hits of the same category that
start within ``MERGE_DISTANCE`` characters of an open flag are folded
into it and their reasons concatenated.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from .flag_patterns import (
    CONFIDENTIALITY,
    FINANCIAL_SENSITIVE,
    FLAG_PATTERNS,
    PHI,
    PRIVILEGE,
    RISKY_EXCERPT_LENGTH,
    RISKY_TERMS,
    FlagPattern,
    ProximityRule,
    word_regex,
)
from .types import Flag, FlagCandidate, FlagResult, FlagSummary, RiskLevel, Severity

logger = logging.getLogger(__name__)

MERGE_DISTANCE = 50
# Characters per word when turning a word distance into a character distance
AVG_WORD_LENGTH = 6
HIGH_RISK_THRESHOLD = 3


@dataclass
class FlaggerConfig:
    """Which concerns to look for."""
    flag_privilege: bool = True
    flag_phi: bool = True
    flag_confidentiality: bool = True
    flag_financial: bool = True
    flag_risky_terms: bool = True

    def enabled(self, category: str) -> bool:
        gates = {
            PRIVILEGE: self.flag_privilege,
            PHI: self.flag_phi,
            CONFIDENTIALITY: self.flag_confidentiality,
            FINANCIAL_SENSITIVE: self.flag_financial,
        }
        return gates.get(category, True)


class Flagger:
    def __init__(self, config: FlaggerConfig | None = None) -> None:
        self.config = config or FlaggerConfig()
        self.patterns: tuple[FlagPattern, ...] = tuple(
            p for p in FLAG_PATTERNS if self.config.enabled(p.category)
        )

    def flag(self, text: str) -> FlagResult:
        if not isinstance(text, str) or not text:
            return FlagResult(flags=[], summary=FlagSummary())

        candidates: list[FlagCandidate] = []
        for pattern in self.patterns:
            candidates.extend(keyword_hits(text, pattern))
            candidates.extend(proximity_hits(text, pattern))
        if self.config.flag_risky_terms:
            candidates.extend(risky_hits(text))

        flags = number_flags(merge_flags(candidates))
        logger.debug("flag: %d hits -> %d flags", len(candidates), len(flags))
        return FlagResult(flags=flags, summary=summarize_flags(flags))


def extract_excerpt(text: str, position: int, length: int = 100) -> str:
    """Context window of ``length`` characters centred on ``position``."""
    half = length // 2
    start = max(0, position - half)
    end = min(len(text), position + half)
    excerpt = text[start:end].strip()
    if start > 0:
        excerpt = "..." + excerpt
    if end < len(text):
        excerpt = excerpt + "..."
    return excerpt


def keyword_hits(text: str, pattern: FlagPattern) -> list[FlagCandidate]:
    hits: list[FlagCandidate] = []
    for keyword in pattern.keywords:
        for m in word_regex(keyword).finditer(text):
            hits.append(FlagCandidate(
                category=pattern.category,
                start=m.start(),
                end=m.end(),
                reason=f'Contains keyword: "{keyword}"',
                severity=pattern.severity,
                excerpt=extract_excerpt(text, m.start(), pattern.excerpt_length),
            ))
    return hits


def find_proximity(text: str, rule: ProximityRule) -> tuple[int, int] | None:
    """Return the (start, end) covering the first close pair, or None.

    Closeness is measured in characters: ``max_words * AVG_WORD_LENGTH``
    between the starts of the two words.  This approximates a word count
    without tokenizing.
    """
    first = [(m.start(), m.end()) for m in word_regex(rule.first).finditer(text)]
    if not first:
        return None
    second = [(m.start(), m.end()) for m in word_regex(rule.second).finditer(text)]
    limit = rule.max_words * AVG_WORD_LENGTH
    for s1, e1 in first:
        for s2, e2 in second:
            if abs(s2 - s1) <= limit:
                return min(s1, s2), max(e1, e2)
    return None


def proximity_hits(text: str, pattern: FlagPattern) -> list[FlagCandidate]:
    hits: list[FlagCandidate] = []
    for rule in pattern.proximity:
        found = find_proximity(text, rule)
        if found is None:
            continue
        start, end = found
        hits.append(FlagCandidate(
            category=pattern.category,
            start=start,
            end=end,
            reason=(f"Contains related terms: {rule.first}, {rule.second} "
                    f"within {rule.max_words} words"),
            severity=pattern.severity,
            excerpt=extract_excerpt(text, start, pattern.excerpt_length),
        ))
    return hits


def risky_hits(text: str) -> list[FlagCandidate]:
    hits: list[FlagCandidate] = []
    for term in RISKY_TERMS:
        for m in term.regex.finditer(text):
            hits.append(FlagCandidate(
                category=term.category,
                start=m.start(),
                end=m.end(),
                reason=term.reason,
                severity=term.severity,
                excerpt=extract_excerpt(text, m.start(), RISKY_EXCERPT_LENGTH),
            ))
    return hits


def merge_flags(candidates: list[FlagCandidate]) -> list[FlagCandidate]:
    """Fold same-category hits within MERGE_DISTANCE of the open flag.

    The open flag keeps its own position, excerpt and severity; only the
    reason grows.  Different categories are never merged.
    """
    if not candidates:
        return []
    ordered = sorted(candidates, key=lambda c: c.start)

    merged: list[FlagCandidate] = []
    cur = ordered[0]
    reason = cur.reason
    for nxt in ordered[1:]:
        if nxt.category == cur.category and abs(nxt.start - cur.start) <= MERGE_DISTANCE:
            if nxt.reason not in reason:
                reason = f"{reason}; {nxt.reason}"
        else:
            merged.append(_with_reason(cur, reason))
            cur = nxt
            reason = cur.reason
    merged.append(_with_reason(cur, reason))
    return merged


def _with_reason(c: FlagCandidate, reason: str) -> FlagCandidate:
    if reason == c.reason:
        return c
    return FlagCandidate(c.category, c.start, c.end, reason, c.severity, c.excerpt)


def number_flags(candidates: list[FlagCandidate]) -> list[Flag]:
    return [
        Flag(
            id=f"F{i}",
            category=c.category,
            excerpt=c.excerpt,
            start=c.start,
            end=c.end,
            reason=c.reason,
            severity=c.severity,
        )
        for i, c in enumerate(candidates, start=1)
    ]


def risk_level(high_severity: int) -> RiskLevel:
    if high_severity > HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if high_severity > 0:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def summarize_flags(flags: list[Flag]) -> FlagSummary:
    by_category: dict[str, int] = {}
    for f in flags:
        by_category[f.category] = by_category.get(f.category, 0) + 1
    high = sum(1 for f in flags if f.severity is Severity.HIGH)
    return FlagSummary(
        by_category=by_category,
        total=len(flags),
        high_severity=high,
        risk_level=risk_level(high),
    )


_default: Flagger | None = None


def annotate_for_flagging(text: str, config: FlaggerConfig | None = None) -> FlagResult:
    """Flag ``text`` with every concern enabled, or per ``config`` if given."""
    global _default
    if config is not None:
        return Flagger(config).flag(text)
    if _default is None:
        _default = Flagger()
    return _default.flag(text)
