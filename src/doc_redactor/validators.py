"""Candidate validators.

A pattern carries one ``Validator`` kind.  Built-in kinds dispatch to the
checks below; ``CUSTOM`` calls the pattern's own callback.  A validator
that raises rejects that one candidate and nothing else.
"""

from __future__ import annotations
import logging
import re
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

_NON_DIGIT = re.compile(r"[^0-9]")


class Validator(str, Enum):
    NONE = "none"
    LUHN = "luhn"
    PHONE_LENGTH = "phone_length"
    BANK_ACCOUNT = "bank_account"
    ROUTING_CHECKSUM = "routing_checksum"
    CUSTOM = "custom"


def _digits(text: str) -> str:
    return _NON_DIGIT.sub("", text)


def luhn_check(text: str) -> bool:
    """Mod-10 checksum over the digits of a card number (13-19 digits)."""
    digits = _digits(text)
    if not 13 <= len(digits) <= 19:
        return False
    total = 0
    for i, ch in enumerate(reversed(digits)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def valid_phone(text: str) -> bool:
    return 10 <= len(_digits(text)) <= 15


def valid_bank_account(text: str) -> bool:
    """Accept 8-17 digit account numbers.

    Labelled values ("account", "acct") are accepted outright; bare
    numbers need at least 10 digits.
    """
    digits = _digits(text)
    if not 8 <= len(digits) <= 17:
        return False
    # year / zip code shapes
    if len(digits) == 4 and 1900 <= int(digits) <= 2100:
        return False
    if len(digits) == 5:
        return False
    lowered = text.lower()
    if "account" in lowered or "acct" in lowered:
        return True
    return len(digits) >= 10


def valid_routing_number(text: str) -> bool:
    """Nine digits with either a routing/ABA label or a valid ABA checksum."""
    digits = _digits(text)
    if len(digits) != 9:
        return False
    lowered = text.lower()
    if "routing" in lowered or "aba" in lowered:
        return True
    d = [int(c) for c in digits]
    checksum = 3 * (d[0] + d[3] + d[6]) + 7 * (d[1] + d[4] + d[7]) + (d[2] + d[5] + d[8])
    return checksum % 10 == 0


_BUILTIN: dict[Validator, Callable[[str], bool]] = {
    Validator.LUHN: luhn_check,
    Validator.PHONE_LENGTH: valid_phone,
    Validator.BANK_ACCOUNT: valid_bank_account,
    Validator.ROUTING_CHECKSUM: valid_routing_number,
}


def run_validator(
    kind: Validator,
    text: str,
    custom: Callable[[str], bool] | None = None,
) -> bool:
    """Return True if ``text`` passes the validator of the given kind."""
    if kind is Validator.NONE:
        return True
    check = custom if kind is Validator.CUSTOM else _BUILTIN[kind]
    if check is None:
        return True
    try:
        return bool(check(text))
    except Exception:
        logger.warning("validator %s raised on %r; rejecting candidate",
                       kind.value, text, exc_info=True)
        return False
