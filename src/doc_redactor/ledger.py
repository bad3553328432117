"""RedactionLedger: placeholder ↔ original lookup for one redacted document.

Built from the annotations a redaction produced.  Used where the
placeholders travel through something that may rearrange the text, such
as a summary written by a downstream model, and offsets no longer apply.
"""

from __future__ import annotations
from typing import Iterable

from .redactor import PLACEHOLDER_FMT
from .types import Annotation


class RedactionLedger:
    """Placeholder → original store, scoped to one document."""

    __slots__ = ("_token_to_original", "_annotations")

    def __init__(self) -> None:
        self._token_to_original: dict[str, str] = {}   # "[REDACTED:EMAIL#1]" → "a@b.com"
        self._annotations: dict[str, Annotation] = {}  # "EMAIL#1" → Annotation

    @classmethod
    def from_annotations(cls, annotations: Iterable[Annotation]) -> "RedactionLedger":
        ledger = cls()
        for a in annotations:
            ledger.add(a)
        return ledger

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def add(self, annotation: Annotation) -> str:
        """Record an annotation and return its placeholder."""
        token = PLACEHOLDER_FMT.format(id=annotation.id)
        self._token_to_original[token] = annotation.original
        self._annotations[annotation.id] = annotation
        return token

    def restore(self, text: str) -> str:
        """Replace every known placeholder in text with its original value."""
        result = text
        for token in sorted(self._token_to_original, key=len, reverse=True):
            if token in result:
                result = result.replace(token, self._token_to_original[token])
        return result

    def lookup_token(self, token: str) -> str | None:
        """Look up the original value for a placeholder."""
        return self._token_to_original.get(token)

    def lookup_id(self, annotation_id: str) -> Annotation | None:
        return self._annotations.get(annotation_id)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return len(self._token_to_original)

    def dump(self) -> dict[str, str]:
        """Return a copy of the placeholder→original mapping."""
        return dict(self._token_to_original)
