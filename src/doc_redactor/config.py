"""YAML/dict config loader for doc-redactor.

Supports loading from a YAML file or a plain dict (for embedding in a
larger document-pipeline config).

Example YAML:

    doc_redactor:
      redaction:
        redact_pii: true
        redact_phi: true
        skip_types:
          - DATE
        allow_list:
          - support@example.com
        custom_patterns:
          - type: EMPLOYEE_ID
            regex: '\\bEMP-\\d{6}\\b'
            priority: 8
            confidence: high
          - type: CASE_NUMBER
            regex: 'case\\s+no\\.?\\s*\\d+'
            ignore_case: true
      flagging:
        flag_privilege: true
        flag_phi: true
        flag_confidentiality: true
        flag_financial: true
        flag_risky_terms: false
"""

from __future__ import annotations
import re
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .flagger import FlaggerConfig
from .patterns import Pattern, custom_pattern
from .redactor import RedactorConfig

_FLAG_GATES = (
    "flag_privilege",
    "flag_phi",
    "flag_confidentiality",
    "flag_financial",
    "flag_risky_terms",
)


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline).

    Returns {"redactor": RedactorConfig, "flagger": FlaggerConfig}.
    Raises ConfigError (or PatternError for a bad custom regex).
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError(f"config must be a mapping, got {type(data).__name__}")
    # Support nested under "doc_redactor" key or flat
    if "doc_redactor" in data:
        data = data["doc_redactor"] or {}

    redaction = _section(data, "redaction")
    flagging = _section(data, "flagging")

    redactor_config = RedactorConfig(
        redact_pii=bool(redaction.get("redact_pii", True)),
        redact_phi=bool(redaction.get("redact_phi", True)),
        additional_patterns=[
            _pattern_from_dict(p) for p in redaction.get("custom_patterns") or []
        ],
        skip_types={str(t).upper() for t in redaction.get("skip_types") or []},
        allow_list={str(v) for v in redaction.get("allow_list") or []},
    )
    flagger_config = FlaggerConfig(
        **{gate: bool(flagging.get(gate, True)) for gate in _FLAG_GATES}
    )
    return {"redactor": redactor_config, "flagger": flagger_config}


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    return load_config(raw)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return section


def _pattern_from_dict(spec: Any) -> Pattern:
    if not isinstance(spec, dict):
        raise ConfigError(f"custom pattern must be a mapping, got {spec!r}")
    try:
        category = spec["type"]
        regex = spec["regex"]
    except KeyError as e:
        raise ConfigError(f"custom pattern {spec!r} is missing {e.args[0]!r}") from None
    return custom_pattern(
        category,
        regex,
        priority=spec.get("priority", 1),
        confidence=spec.get("confidence", "low"),
        flags=re.IGNORECASE if spec.get("ignore_case") else 0,
    )
