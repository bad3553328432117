"""Flagging catalog: keyword and proximity rules per concern, plus risky
contract terms.

Keywords and proximity words are literal text, matched case-insensitively
on word boundaries.  Catalog order fixes the order of equal-position hits.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from functools import lru_cache

from .types import Severity

PRIVILEGE = "PRIVILEGE"
PHI = "PHI"
CONFIDENTIALITY = "CONFIDENTIALITY"
FINANCIAL_SENSITIVE = "FINANCIAL_SENSITIVE"
RISKY_CLAUSE = "RISKY_CLAUSE"
INDEMNIFICATION = "INDEMNIFICATION"

RISKY_EXCERPT_LENGTH = 80


@dataclass(frozen=True, slots=True)
class ProximityRule:
    """``first`` and ``second`` within roughly ``max_words`` words of each other."""
    first: str
    second: str
    max_words: int


@dataclass(frozen=True, slots=True)
class FlagPattern:
    category: str
    keywords: tuple[str, ...]
    proximity: tuple[ProximityRule, ...]
    severity: Severity
    excerpt_length: int


@dataclass(frozen=True, slots=True)
class RiskyTerm:
    category: str
    regex: re.Pattern
    reason: str
    severity: Severity


def _rules(*specs: tuple[str, str, int]) -> tuple[ProximityRule, ...]:
    return tuple(ProximityRule(a, b, n) for a, b, n in specs)


FLAG_PATTERNS: tuple[FlagPattern, ...] = (
    FlagPattern(
        category=PRIVILEGE,
        keywords=(
            "attorney-client",
            "attorney client",
            "legal advice",
            "privileged",
            "work product",
            "opinion of counsel",
            "confidential legal",
            "counsel advised",
            "legal counsel",
        ),
        proximity=_rules(
            ("attorney", "advice", 5),
            ("counsel", "opinion", 5),
            ("lawyer", "privileged", 5),
            ("legal", "privileged", 3),
        ),
        severity=Severity.HIGH,
        excerpt_length=100,
    ),
    FlagPattern(
        category=PHI,
        keywords=(
            "diagnosis",
            "treatment",
            "medical history",
            "patient",
            "HIV",
            "AIDS",
            "psychiatric",
            "mental health",
            "prescription",
            "medication",
            "surgery",
            "hospitalization",
            "medical condition",
            "health information",
            "HIPAA",
        ),
        proximity=_rules(
            ("patient", "diagnosed", 5),
            ("medical", "condition", 3),
            ("health", "records", 3),
        ),
        severity=Severity.HIGH,
        excerpt_length=100,
    ),
    FlagPattern(
        category=CONFIDENTIALITY,
        keywords=(
            "confidential",
            "proprietary",
            "trade secret",
            "non-disclosure",
            "NDA",
            "confidentiality agreement",
            "secret information",
            "proprietary information",
        ),
        proximity=_rules(
            ("confidential", "information", 3),
            ("trade", "secret", 2),
        ),
        severity=Severity.MEDIUM,
        excerpt_length=80,
    ),
    FlagPattern(
        category=FINANCIAL_SENSITIVE,
        keywords=(
            "bank account",
            "routing number",
            "account number",
            "financial records",
            "tax return",
            "W-2",
            "1099",
            "salary",
            "compensation details",
        ),
        proximity=_rules(
            ("bank", "account", 2),
            ("financial", "information", 3),
        ),
        severity=Severity.HIGH,
        excerpt_length=80,
    ),
)


def _risky(category: str, regex: str, reason: str, severity: Severity) -> RiskyTerm:
    return RiskyTerm(category, re.compile(regex, re.IGNORECASE), reason, severity)


RISKY_TERMS: tuple[RiskyTerm, ...] = (
    _risky(RISKY_CLAUSE, r"unlimited\s+liability",
           "Unlimited liability clause detected", Severity.HIGH),
    _risky(RISKY_CLAUSE, r"waive\s+all\s+rights",
           "Rights waiver clause detected", Severity.HIGH),
    _risky(RISKY_CLAUSE, r"no\s+warranty",
           "No warranty clause detected", Severity.MEDIUM),
    _risky(RISKY_CLAUSE, r"as\s+is\s+basis",
           '"As is" basis clause detected', Severity.MEDIUM),
    _risky(INDEMNIFICATION, r"indemnif(?:y|ication)",
           "Indemnification clause detected", Severity.MEDIUM),
)


@lru_cache(maxsize=None)
def word_regex(word: str) -> re.Pattern:
    """Case-insensitive, word-bounded literal match."""
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)
