"""Decorative human ids: group ids rendered as a short run of pictographs."""

import base64
import re

# 256 consecutive assigned pictographs (U+1F400..U+1F4FF), one per byte value
SYMBOL_BASE = 0x1F400
HUMAN_ID_LENGTH = 4

_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")
_URLSAFE = str.maketrans("-_", "+/")


def decode_id(group_id: str) -> bytes:
    """Leniently base64-decode a group id.

    Accepts url-safe characters, ignores anything outside the alphabet,
    stops at the first padding character and tolerates missing padding.
    """
    body = group_id.split("=", 1)[0].translate(_URLSAFE)
    body = _NON_BASE64.sub("", body)
    if len(body) % 4 == 1:
        body = body[:-1]
    return base64.b64decode(body + "=" * (-len(body) % 4))


def symbols_from_bytes(data: bytes) -> list[str]:
    return [chr(SYMBOL_BASE + byte) for byte in data]


def human_id(group_id: str, symbols=symbols_from_bytes) -> str:
    """First four symbols of the decoded id, space-joined, with a trailing space."""
    return " ".join(symbols(decode_id(group_id))[:HUMAN_ID_LENGTH]) + " "
