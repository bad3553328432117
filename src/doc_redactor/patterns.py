"""Redaction pattern catalog and candidate scanner.

The built-in catalog is an immutable tuple built once at import.  Each
pattern is applied independently: a greedy left-to-right scan whose
matches never overlap within that pattern.  Overlaps *between* patterns
are left for the redactor to resolve.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable

from .errors import PatternError
from .types import Candidate, Confidence
from .validators import Validator, run_validator

logger = logging.getLogger(__name__)

# Category groups gated by RedactorConfig.redact_pii / redact_phi
GROUP_PII = "pii"
GROUP_PHI = "phi"
GROUP_CUSTOM = "custom"

_FLAGS = re.ASCII
_FLAGS_I = re.ASCII | re.IGNORECASE

# Placeholders are `[REDACTED:<CATEGORY>#<n>]`, so categories stay within this set
_CATEGORY = re.compile(r"[A-Z0-9_]+")
_WHITESPACE = re.compile(r"\s+")
# Lower-cased, this would collide with the summary total key
RESERVED_CATEGORY = "TOTAL_REDACTIONS"


@dataclass(frozen=True, slots=True)
class Pattern:
    """One redaction rule.  Higher ``priority`` wins overlap ties."""
    category: str
    regex: re.Pattern
    priority: int
    confidence: Confidence
    validator: Validator = Validator.NONE
    custom_validator: Callable[[str], bool] | None = None
    group: str = GROUP_CUSTOM

    def accepts(self, matched: str) -> bool:
        return run_validator(self.validator, matched, self.custom_validator)


def _p(category: str, regex: str, priority: int, confidence: Confidence,
       validator: Validator = Validator.NONE, *, group: str = GROUP_PII,
       flags: int = _FLAGS) -> Pattern:
    return Pattern(category, re.compile(regex, flags), priority, confidence,
                   validator, None, group)


_H, _M = Confidence.HIGH, Confidence.MEDIUM

# Order matters: with equal start and priority the earlier pattern wins.
BUILTIN_PATTERNS: tuple[Pattern, ...] = (
    _p("SSN", r"\b\d{3}-\d{2}-\d{4}\b", 10, _H),

    _p("CREDIT_CARD", r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b",
       9, _H, Validator.LUHN),

    # Bank account and routing: the label, when present, is part of the match
    _p("BANK_ACCOUNT",
       r"\b(?:account(?:\s*(?:number|#|no\.?))?[\s:]*)?(\d{8,17})\b",
       9, _M, Validator.BANK_ACCOUNT, flags=_FLAGS_I),
    _p("ROUTING_NUMBER",
       r"\b(?:(?:routing|aba)(?:\s*(?:number|#|no\.?))?[\s:]*)?(\d{9})\b",
       9, _M, Validator.ROUTING_CHECKSUM, flags=_FLAGS_I),

    _p("IBAN", r"\b[A-Z]{2}\d{2}[A-Z0-9]{4}\d{7}[A-Z0-9]{0,16}\b", 9, _H),

    _p("MRN",
       r"\b(?:MRN|medical\s*record(?:\s*(?:number|#|no\.?))?|patient\s*(?:id|number|#))"
       r"[\s:]*([A-Z0-9]{6,12})\b",
       9, _H, group=GROUP_PHI, flags=_FLAGS_I),

    # Salary: labelled amount, amount with a period, verb + amount
    _p("SALARY",
       r"\b(?:salary|compensation|annual\s*(?:pay|income|wage)|base\s*(?:pay|salary)"
       r"|hourly\s*(?:rate|wage)|pay\s*rate)[\s:]*(?:\$\s*)?[\d,]+(?:\.\d{2})?"
       r"\s*(?:per\s*(?:year|annum|hour|month|week))?\b",
       8, _H, flags=_FLAGS_I),
    _p("SALARY",
       r"\$\s*[\d,]+(?:\.\d{2})?\s*(?:per\s*(?:year|annum|hour|month|week)"
       r"|/\s*(?:yr|hr|mo|wk)|annually|monthly|hourly)\b",
       8, _H, flags=_FLAGS_I),
    _p("SALARY",
       r"\b(?:earns?|paid|paying|receives?|making)\s*\$\s*[\d,]+(?:\.\d{2})?\b",
       8, _M, flags=_FLAGS_I),

    # Local part and domain lengths capped as in RFC 5321
    _p("EMAIL", r"\b[A-Za-z0-9._%+-]{1,64}@[A-Za-z0-9.-]{1,255}\.[A-Za-z]{2,}\b", 8, _H),

    _p("PHONE",
       r"(?:\+\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}"
       r"|\+\d{1,3}[\s\d.-]{9,15}",
       7, _H, Validator.PHONE_LENGTH),

    _p("DATE",
       r"\b(?:0?[1-9]|1[0-2])[-/.](?:0?[1-9]|[12]\d|3[01])[-/.]\d{2,4}\b",
       6, _M, group=GROUP_PHI),

    _p("IP_ADDRESS",
       r"\b(?:(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\.){3}"
       r"(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\b",
       5, _H),

    _p("ADDRESS",
       r"\b\d{1,6}\s+(?:[A-Z][a-z]+\s+){1,3}"
       r"(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct"
       r"|Way|Circle|Cir|Place|Pl)(?:\s+(?:Apt|Unit|Suite|Ste|#)\.?\s*\w+)?\b",
       4, _M, flags=_FLAGS_I),

    _p("TITLE_NAME",
       r"\b(?:Mr|Ms|Mrs|Dr|Prof|Rev)\.?\s+[A-Z][a-z]+(?:\s+[A-Z]\.?)?(?:\s+[A-Z][a-z]+)?\b",
       3, _M),
)


def custom_pattern(
    category: str,
    regex: str | re.Pattern,
    *,
    priority: int = 1,
    confidence: Confidence | str = Confidence.LOW,
    validator: Callable[[str], bool] | None = None,
    flags: int = 0,
) -> Pattern:
    """Build a caller-supplied pattern.

    The category is upper-cased with whitespace runs turned into ``_``
    ("case number" -> "CASE_NUMBER").  Raises PatternError if the regex
    does not compile, matches the empty string, or the category/confidence
    is unusable.  Built-in patterns are never touched.
    """
    if not isinstance(category, str) or not category.strip():
        raise PatternError(f"custom pattern needs a category, got {category!r}")
    tag = _WHITESPACE.sub("_", category.strip()).upper()
    if not _CATEGORY.fullmatch(tag):
        raise PatternError(
            f"{category!r}: category may only hold letters, digits and underscores"
        )
    if tag == RESERVED_CATEGORY:
        raise PatternError(f"{category!r}: category name is reserved for the summary total")
    try:
        conf = Confidence(confidence)
    except ValueError:
        raise PatternError(
            f"{category}: unknown confidence {confidence!r}"
        ) from None
    try:
        prio = int(priority)
    except (TypeError, ValueError):
        raise PatternError(f"{category}: priority must be an integer, got {priority!r}") from None
    if isinstance(regex, re.Pattern):
        compiled = regex
    else:
        try:
            compiled = re.compile(regex, flags)
        except (re.error, TypeError) as e:
            raise PatternError(f"{category}: invalid regex {regex!r}: {e}") from e
    if compiled.fullmatch("") is not None:
        raise PatternError(f"{category}: regex {compiled.pattern!r} matches empty text")

    return Pattern(
        category=tag,
        regex=compiled,
        priority=prio,
        confidence=conf,
        validator=Validator.CUSTOM if validator is not None else Validator.NONE,
        custom_validator=validator,
        group=GROUP_CUSTOM,
    )


def build_catalog(
    *,
    redact_pii: bool = True,
    redact_phi: bool = True,
    additional: Iterable[Pattern] = (),
) -> tuple[Pattern, ...]:
    """Return the active catalog: gated built-ins followed by ``additional``."""
    groups = set()
    if redact_pii:
        groups.add(GROUP_PII)
    if redact_phi:
        groups.add(GROUP_PHI)
    active = [p for p in BUILTIN_PATTERNS if p.group in groups]
    active.extend(additional)
    return tuple(active)


def scan_patterns(text: str, catalog: Iterable[Pattern]) -> list[Candidate]:
    """Run every pattern over text.  Returns unresolved, possibly overlapping
    candidates in catalog order."""
    if not isinstance(text, str) or not text:
        return []
    candidates: list[Candidate] = []
    for pattern in catalog:
        for m in pattern.regex.finditer(text):
            matched = m.group()
            if not matched:
                continue
            if not pattern.accepts(matched):
                continue
            candidates.append(Candidate(
                category=pattern.category,
                start=m.start(),
                end=m.end(),
                text=matched,
                confidence=pattern.confidence,
                priority=pattern.priority,
            ))
    logger.debug("scanned %d chars: %d candidates", len(text), len(candidates))
    return candidates
