# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""WhatsApp chat export parser.

Rules:
- A message starts with a header line `DD/MM/YYYY HH:MM - Author: Content`.
- Any other non-blank line is a continuation of the previous message.
- Lines before the first header are ignored (nothing to attach them to).
- Timestamps are local calendar values; no timezone conversion is done and no
  chronological order is enforced.

The parser only performs raw parsing. Grouping decisions happen elsewhere.
"""

import re
from datetime import datetime

from whatsapp_organizer.transcripts.base import Message


_HEADER_RE = re.compile(
    r"^(?P<date>\d{2}/\d{2}/\d{4})\s+(?P<time>\d{2}:\d{2})\s+-\s+(?P<author>[^:]+):\s*(?P<content>.*)$"
)


def parse_timestamp(date_text: str, time_text: str) -> datetime | None:
    """Build a local date-time from `DD/MM/YYYY` and `HH:MM` fields.

    Impossible values (31/02, 25:00, ...) are rejected instead of rolled over.

    Returns:
        The date-time, or None for the "no date" sentinel.
    """

    try:
        day, month, year = (int(part) for part in date_text.split("/"))
        hour, minute = (int(part) for part in time_text.split(":"))
        return datetime(year, month, day, hour, minute)
    except ValueError:
        return None


def parse_chat(text: str) -> list[Message]:
    """Parse the full transcript text into messages.

    Args:
        text:
            Complete chat export.

    Returns:
        Messages in transcript order.
    """

    messages: list[Message] = []

    header: re.Match[str] | None = None
    continuation: list[str] = []

    def _flush() -> None:
        if header is None:
            return
        messages.append(
            Message(
                timestamp=parse_timestamp(header.group("date"), header.group("time")),
                raw_timestamp=f"{header.group('date')} {header.group('time')}",
                author=header.group("author").strip(),
                content=header.group("content").strip(),
                continuation_lines=tuple(continuation),
            )
        )

    for line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        match = _HEADER_RE.match(line)
        if match:
            _flush()
            header = match
            continuation = []
            continue

        # Orphaned lines before the first header carry no context.
        if header is not None and line.strip():
            continuation.append(line.strip())

    _flush()
    return messages
