# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Caption and protocol number helpers.

Technicians caption their photos with the service order ("protocol") number,
e.g. `2025001234` or `2025001234 caixa d'agua`. Only the digit run at the very
start of a line counts as a caption; digits elsewhere are ordinary text.
"""

import re
from typing import Iterable


_LEADING_DIGITS_RE = re.compile(r"^(?P<token>[0-9]+)\s*")

# 10 digits starting with 2025 or 2026.
_PROTOCOL_RE = re.compile(r"202[56][0-9]{6}")


def extract_caption(text: str) -> tuple[str | None, str]:
    """Split a text fragment into its leading numeric token and residual text.

    Args:
        text:
            Raw text fragment (a message or a continuation line).

    Returns:
        A tuple of (`token`, `residual`). `token` is None if the trimmed text
        does not start with a digit; `residual` is the trimmed remainder.
    """

    cleaned = text.strip()
    match = _LEADING_DIGITS_RE.match(cleaned)
    if match is None:
        return None, cleaned

    return match.group("token"), cleaned[match.end():].strip()


def is_valid_protocol(token: str | None) -> bool:
    """Return True if the token is a well-formed protocol number."""

    if not token:
        return False
    return _PROTOCOL_RE.fullmatch(token) is not None


def split_tokens(tokens: Iterable[str]) -> tuple[list[str], list[str]]:
    """Partition caption tokens into (valid protocols, invalid tokens).

    Order is preserved and duplicates are collapsed.
    """

    valid: list[str] = []
    invalid: list[str] = []
    for token in tokens:
        target = valid if is_valid_protocol(token) else invalid
        if token not in target:
            target.append(token)
    return valid, invalid
