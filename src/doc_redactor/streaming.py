"""Streaming restorer: buffers chunks and restores placeholders as they complete.

For streamed text where placeholders arrive as fragments:
    [RED  →  [REDACTED:EM  →  [REDACTED:EMAIL#  →  [REDACTED:EMAIL#1]

Text is emitted as soon as it is either a complete placeholder or
clearly not one.

Usage:
    restorer = StreamingRestorer(RedactionLedger.from_annotations(result.annotations))
    for chunk in stream:
        ready_text = restorer.feed(chunk)
        if ready_text:
            yield ready_text
    # Flush any remaining buffer
    yield restorer.flush()
"""

from __future__ import annotations
import re

from .ledger import RedactionLedger

_PREFIX = "[REDACTED:"
_TOKEN_COMPLETE = re.compile(r"\[REDACTED:[^\]\s\[]+#\d+\]")


class StreamingRestorer:
    """Buffers streaming chunks and restores complete placeholders."""

    __slots__ = ("_ledger", "_buffer", "_max_token_len")

    def __init__(self, ledger: RedactionLedger, *, max_token_len: int = 80) -> None:
        self._ledger = ledger
        self._buffer = ""
        self._max_token_len = max_token_len  # safety limit

    def feed(self, chunk: str) -> str:
        """Feed a chunk, return any text ready to emit."""
        self._buffer += chunk
        return self._drain()

    def flush(self) -> str:
        """Flush remaining buffer (call at end of stream)."""
        out = self._buffer
        self._buffer = ""
        return self._ledger.restore(out)

    def _drain(self) -> str:
        out_parts: list[str] = []

        while self._buffer:
            idx = self._buffer.find("[")

            if idx == -1:
                out_parts.append(self._buffer)
                self._buffer = ""
                break

            if idx > 0:
                out_parts.append(self._buffer[:idx])
                self._buffer = self._buffer[idx:]

            # Buffer starts with [
            m = _TOKEN_COMPLETE.match(self._buffer)
            if m:
                token = m.group()
                original = self._ledger.lookup_token(token)
                out_parts.append(original if original is not None else token)
                self._buffer = self._buffer[m.end():]
                continue

            head = self._buffer[:len(_PREFIX)]
            if not _PREFIX.startswith(head):
                # Diverged from the placeholder prefix, not a token
                out_parts.append("[")
                self._buffer = self._buffer[1:]
                continue

            close_idx = self._buffer.find("]")
            if close_idx != -1 or len(self._buffer) > self._max_token_len:
                # Closed without matching, or too long: emit the [
                out_parts.append("[")
                self._buffer = self._buffer[1:]
                continue

            # Still accumulating a potential token
            break

        return "".join(out_parts)
