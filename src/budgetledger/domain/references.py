"""Auto-matching reference numbers for budgeted transfers."""

import base64
import uuid
from typing import Iterable, Optional

MATCHED_PREFIX = "Matched "
REFERENCE_LENGTH = 7
DISALLOWED_CHARS = ("\\", "{", "}", "[", "]", "^", "=", "/", ";", ".", ",", "-", "+")


def normalize_reference(raw: str) -> str:
    """Strip disallowed characters and truncate to the reference length."""
    cleaned = raw
    for char in DISALLOWED_CHARS:
        cleaned = cleaned.replace(char, "")
    return cleaned[:REFERENCE_LENGTH]


def issue_reference() -> str:
    """Mint a new 7 character reference for the user to quote on a bank transfer."""
    reference = ""
    while len(reference) <= REFERENCE_LENGTH:
        encoded = base64.b64encode(uuid.uuid4().bytes).decode("ascii")
        reference += "".join(c for c in encoded if c not in DISALLOWED_CHARS)
    return normalize_reference(reference)


def is_consumed(reference: Optional[str]) -> bool:
    return bool(reference) and reference.startswith(MATCHED_PREFIX)


def is_awaiting_match(reference: Optional[str]) -> bool:
    """True when a reference is present and has not yet been matched."""
    return bool(reference and reference.strip()) and not is_consumed(reference)


def mark_matched(reference: str) -> str:
    """Prefix a reference with the matched marker. Already matched references are unchanged."""
    if is_consumed(reference):
        return reference
    return f"{MATCHED_PREFIX}{reference}"


def matches_reference(references: Iterable[Optional[str]], reference: str) -> bool:
    """True if any of the given fields, right-trimmed, equals the reference."""
    for candidate in references:
        if candidate is not None and candidate.rstrip() == reference:
            return True
    return False
