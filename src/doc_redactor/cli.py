"""CLI interface for doc-redactor.

Usage:
    # Redact a document (stdin: plain text, stdout: JSON with text + annotations)
    doc-redactor redact < contract.txt > redacted.json

    # Only the rewritten text
    doc-redactor redact --text-only < contract.txt

    # Restore (stdin: the JSON written by `redact`)
    doc-redactor restore < redacted.json

    # Flag privilege / PHI / confidentiality / risky terms (stdin: plain text)
    doc-redactor flag < contract.txt

    # List the active redaction patterns
    doc-redactor --config redactor.yaml patterns
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import load_config, load_from_yaml
from .errors import RedactorError
from .flagger import Flagger
from .redactor import Redactor, restore_text
from .types import Annotation


def _load(args: argparse.Namespace) -> dict:
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    redactor_config = cfg["redactor"]
    if args.skip_types:
        redactor_config.skip_types |= {t.strip().upper() for t in args.skip_types.split(",")}
    if args.allow_list:
        redactor_config.allow_list |= set(args.allow_list.split(","))
    return cfg


def cmd_redact(args: argparse.Namespace) -> None:
    """Redact plain text on stdin."""
    redactor = Redactor(_load(args)["redactor"])
    result = redactor.redact(sys.stdin.read())
    if args.text_only:
        sys.stdout.write(result.rewritten_text)
        return
    json.dump(result.to_dict(), sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_restore(args: argparse.Namespace) -> None:
    """Restore text from the JSON produced by `redact`."""
    data = json.loads(sys.stdin.read())
    annotations = [Annotation.from_dict(a) for a in data.get("annotations", [])]
    sys.stdout.write(restore_text(data.get("text", ""), annotations))


def cmd_flag(args: argparse.Namespace) -> None:
    """Flag sensitive content in plain text on stdin."""
    flagger = Flagger(_load(args)["flagger"])
    result = flagger.flag(sys.stdin.read())
    json.dump(result.to_dict(), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_patterns(args: argparse.Namespace) -> None:
    """Dump the active redaction catalog as JSON."""
    redactor = Redactor(_load(args)["redactor"])
    rows = [
        {
            "type": p.category,
            "priority": p.priority,
            "confidence": p.confidence.value,
            "validator": p.validator.value,
            "group": p.group,
            "regex": p.regex.pattern,
        }
        for p in redactor.catalog
    ]
    json.dump(rows, sys.stdout, indent=2)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="doc-redactor",
        description="Redact identifiers and flag sensitive content in document text",
    )
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--skip-types", default="", help="Comma-separated entity types to skip")
    parser.add_argument("--allow-list", default="", help="Comma-separated values to never redact")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (stderr)")

    sub = parser.add_subparsers(dest="command", required=True)
    p_redact = sub.add_parser("redact", help="Redact plain text (stdin)")
    p_redact.add_argument("--text-only", action="store_true", help="Emit only the rewritten text")
    sub.add_parser("restore", help="Restore text from redact JSON (stdin)")
    sub.add_parser("flag", help="Flag sensitive content (stdin)")
    sub.add_parser("patterns", help="List active redaction patterns")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    cmds = {
        "redact": cmd_redact,
        "restore": cmd_restore,
        "flag": cmd_flag,
        "patterns": cmd_patterns,
    }
    try:
        cmds[args.command](args)
    except RedactorError as e:
        sys.stderr.write(f"doc-redactor: {e}\n")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
