"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Severity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"


class RiskLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True, slots=True)
class Candidate:
    """A raw redaction match, before overlaps are resolved."""
    category: str          # e.g. "EMAIL", "SSN"
    start: int
    end: int
    text: str
    confidence: Confidence
    priority: int


@dataclass(frozen=True, slots=True)
class Annotation:
    """A final redaction record.  The list of these is the restore ledger."""
    id: str                # "EMAIL#1"
    category: str
    original: str
    start: int
    end: int
    confidence: Confidence

    @property
    def placeholder(self) -> str:
        return f"[REDACTED:{self.id}]"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.category,
            "original": self.original,
            "start": self.start,
            "end": self.end,
            "confidence": self.confidence.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Annotation":
        return cls(
            id=data["id"],
            category=data["type"],
            original=data["original"],
            start=int(data["start"]),
            end=int(data["end"]),
            confidence=Confidence(data.get("confidence", "low")),
        )


@dataclass(frozen=True, slots=True)
class FlagCandidate:
    """A raw keyword, proximity or risky-term hit."""
    category: str
    start: int
    end: int
    reason: str
    severity: Severity
    excerpt: str


@dataclass(frozen=True, slots=True)
class Flag:
    """A final content-concern record."""
    id: str                # "F1", "F2", ...
    category: str
    excerpt: str
    start: int
    end: int
    reason: str            # "; "-joined when several rules fired nearby
    severity: Severity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.category,
            "excerpt": self.excerpt,
            "start": self.start,
            "end": self.end,
            "reason": self.reason,
            "severity": self.severity.value,
        }


@dataclass(slots=True)
class RedactionResult:
    """Result of redacting a document."""
    rewritten_text: str                                 # text with placeholders
    annotations: list[Annotation] = field(default_factory=list)
    summary: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "text": self.rewritten_text,
            "annotations": [a.to_dict() for a in self.annotations],
            "summary": dict(self.summary),
        }


@dataclass(frozen=True, slots=True)
class FlagSummary:
    by_category: dict[str, int] = field(default_factory=dict)
    total: int = 0
    high_severity: int = 0
    risk_level: RiskLevel = RiskLevel.LOW

    def to_dict(self) -> dict:
        return {
            "by_category": dict(self.by_category),
            "total": self.total,
            "high_severity": self.high_severity,
            "risk_level": self.risk_level.value,
        }


@dataclass(slots=True)
class FlagResult:
    """Result of flagging a document."""
    flags: list[Flag] = field(default_factory=list)
    summary: FlagSummary = field(default_factory=FlagSummary)

    def to_dict(self) -> dict:
        return {
            "flags": [f.to_dict() for f in self.flags],
            "summary": self.summary.to_dict(),
        }
