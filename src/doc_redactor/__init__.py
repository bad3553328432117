"""doc-redactor: reversible redaction and sensitive-content flagging for document text."""

from .redactor import (
    Redactor, RedactorConfig,
    annotate_for_redaction, restore_original,
)
from .flagger import Flagger, FlaggerConfig, annotate_for_flagging
from .patterns import BUILTIN_PATTERNS, Pattern, custom_pattern
from .ledger import RedactionLedger
from .streaming import StreamingRestorer
from .config import load_config, load_from_yaml
from .errors import ConfigError, PatternError, RedactorError
from .types import (
    Annotation, Confidence, Flag, FlagResult, FlagSummary,
    RedactionResult, RiskLevel, Severity,
)

__all__ = [
    "Redactor", "RedactorConfig",
    "annotate_for_redaction", "restore_original",
    "Flagger", "FlaggerConfig", "annotate_for_flagging",
    "BUILTIN_PATTERNS", "Pattern", "custom_pattern",
    "RedactionLedger",
    "StreamingRestorer",
    "load_config", "load_from_yaml",
    "ConfigError", "PatternError", "RedactorError",
    "Annotation", "Confidence", "Flag", "FlagResult", "FlagSummary",
    "RedactionResult", "RiskLevel", "Severity",
]
__version__ = "0.1.0"
