# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Transcript records and reading errors."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class Message:
    """One logical transcript entry.

    Attributes:
        timestamp:
            Local date-time from the header line. `None` means "no date" (the
            header date could not be turned into a real calendar date).
        raw_timestamp:
            The `DD/MM/YYYY HH:MM` text exactly as written in the export.
        author:
            Sender label, not yet sanitized for filesystem use.
        content:
            Text on the header line after the author (trimmed, may be empty).
        continuation_lines:
            Trimmed, non-blank lines following the header line.
    """

    timestamp: datetime | None
    raw_timestamp: str
    author: str
    content: str
    continuation_lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParserError(RuntimeError):
    """Raised when a transcript file cannot be read."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


def read_transcript_text(path: Path) -> str:
    """Read a chat export as text.

    Args:
        path:
            Transcript file path.

    Returns:
        File content with line endings normalized to `\\n`.

    Raises:
        ParserError:
            If the file cannot be read or decoded.
    """

    try:
        raw = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParserError(f"Failed to read transcript: {exc}", path=path) from exc

    return raw.replace("\r\n", "\n").replace("\r", "\n")
