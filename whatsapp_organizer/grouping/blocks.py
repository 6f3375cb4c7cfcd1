# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Media block model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from whatsapp_organizer.transcripts.captions import split_tokens


@dataclass(frozen=True)
class MediaItem:
    """One attachment inside a block."""

    filename: str
    timestamp: datetime | None
    raw_timestamp: str


@dataclass
class Block:
    """
    A group of attachments sharing an author and caption context.

    Attributes:
        author:
            First contributor. Never overwritten; other contributors (only
            possible after a protocol merge) go to `additional_authors`.
        first_timestamp:
            Time of the message that opened the block.
        last_timestamp:
            Latest activity seen in the block. Only ever moves forward.
        media:
            Attachments in transcript order. Downstream naming relies on this
            order, so it is never re-sorted.
        caption_tokens:
            Distinct leading numeric tokens seen as captions, in insertion
            order. Both valid protocols and invalid tokens are kept.
        free_text:
            Caption-unrelated text fragments, for diagnostics.
        protocol_number:
            Single protocol identity used by the merge policy.
        additional_authors:
            Other authors whose blocks were merged into this one.
    """

    author: str
    first_timestamp: datetime | None
    last_timestamp: datetime | None
    media: list[MediaItem] = field(default_factory=list)
    caption_tokens: list[str] = field(default_factory=list)
    free_text: list[str] = field(default_factory=list)
    protocol_number: str | None = None
    additional_authors: list[str] = field(default_factory=list)

    def add_caption_token(self, token: str) -> None:
        if token not in self.caption_tokens:
            self.caption_tokens.append(token)

    def touch(self, timestamp: datetime | None) -> None:
        """Move `last_timestamp` forward (never backwards)."""

        if timestamp is None:
            return
        if self.last_timestamp is None or timestamp > self.last_timestamp:
            self.last_timestamp = timestamp

    @property
    def valid_protocols(self) -> list[str]:
        return split_tokens(self.caption_tokens)[0]

    @property
    def invalid_tokens(self) -> list[str]:
        return split_tokens(self.caption_tokens)[1]

    def to_dict(self) -> dict[str, Any]:
        """Plain representation for the YAML work file."""

        return {
            "author": self.author,
            "additional_authors": list(self.additional_authors),
            "first_timestamp": _iso(self.first_timestamp),
            "last_timestamp": _iso(self.last_timestamp),
            "protocol_number": self.protocol_number,
            "valid_protocols": self.valid_protocols,
            "invalid_tokens": self.invalid_tokens,
            "free_text": list(self.free_text),
            "media": [
                {"file": m.filename, "timestamp": _iso(m.timestamp), "sent": m.raw_timestamp}
                for m in self.media
            ],
        }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat(timespec="minutes") if value is not None else None
