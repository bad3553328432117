"""Exceptions raised while configuring the engine.

Scanning and flagging never raise on bad input text; only setup does.
"""

from __future__ import annotations


class RedactorError(Exception):
    """Base class for doc-redactor errors."""


class PatternError(RedactorError, ValueError):
    """A caller-supplied pattern could not be compiled or is unusable."""


class ConfigError(RedactorError, ValueError):
    """A config dict or YAML file is malformed."""
