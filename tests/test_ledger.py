"""Tests for the redaction ledger and the streaming restorer."""

from doc_redactor import (
    RedactionLedger, RedactorConfig, StreamingRestorer,
    annotate_for_redaction, custom_pattern,
)


def _ledger(text="Email alice@example.com and bob@test.org"):
    return RedactionLedger.from_annotations(annotate_for_redaction(text).annotations)


# ── Ledger ───────────────────────────────────────────────────────────

def test_ledger_restores_rearranged_text():
    ledger = _ledger()
    text = "Reply to [REDACTED:EMAIL#2] then [REDACTED:EMAIL#1]"
    assert ledger.restore(text) == "Reply to bob@test.org then alice@example.com"


def test_ledger_lookup():
    ledger = _ledger()
    assert ledger.lookup_token("[REDACTED:EMAIL#1]") == "alice@example.com"
    assert ledger.lookup_token("[REDACTED:EMAIL#9]") is None
    assert ledger.lookup_id("EMAIL#2").original == "bob@test.org"
    assert ledger.size == 2
    assert ledger.dump() == {
        "[REDACTED:EMAIL#1]": "alice@example.com",
        "[REDACTED:EMAIL#2]": "bob@test.org",
    }


def test_ledger_leaves_unknown_placeholders():
    assert _ledger().restore("see [REDACTED:SSN#1]") == "see [REDACTED:SSN#1]"


# ── Streaming ────────────────────────────────────────────────────────

def _stream(restorer, chunks):
    out = [restorer.feed(c) for c in chunks]
    out.append(restorer.flush())
    return out


def test_streaming_split_placeholder():
    out = _stream(StreamingRestorer(_ledger()), ["Hi [RED", "ACTED:EMA", "IL#1], bye"])
    assert out == ["Hi ", "", "alice@example.com, bye", ""]


def test_streaming_plain_brackets_pass_through():
    restorer = StreamingRestorer(_ledger())
    assert restorer.feed("See [1] and [note]") == "See [1] and [note]"


def test_streaming_unknown_placeholder_kept():
    restorer = StreamingRestorer(_ledger())
    assert restorer.feed("x [REDACTED:SSN#4] y") == "x [REDACTED:SSN#4] y"


def test_streaming_flush_incomplete():
    restorer = StreamingRestorer(_ledger())
    assert restorer.feed("tail [REDACT") == "tail "
    assert restorer.flush() == "[REDACT"


def test_streaming_gives_up_on_long_prefix():
    restorer = StreamingRestorer(_ledger(), max_token_len=20)
    text = "[REDACTED:" + "A" * 30
    assert restorer.feed(text) == text


def test_streaming_matches_full_restore():
    result = annotate_for_redaction("Call 415-555-1234 or mail bob@test.org today.")
    ledger = RedactionLedger.from_annotations(result.annotations)
    text = result.rewritten_text
    chunks = [text[i:i + 3] for i in range(0, len(text), 3)]
    assert "".join(_stream(StreamingRestorer(ledger), chunks)) == ledger.restore(text)


def test_streaming_custom_category_with_space():
    case = custom_pattern("case number", r"\bCASE-\d+\b")
    result = annotate_for_redaction("See CASE-42 now", RedactorConfig(additional_patterns=[case]))
    assert result.rewritten_text == "See [REDACTED:CASE_NUMBER#1] now"
    restorer = StreamingRestorer(RedactionLedger.from_annotations(result.annotations))
    out = _stream(restorer, ["See [REDACTED:CA", "SE_NUMBER#1] now"])
    assert "".join(out) == "See CASE-42 now"
