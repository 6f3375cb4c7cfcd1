# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Transcript file discovery and loading."""

from pathlib import Path

from whatsapp_organizer.config import ConfigError, OrganizerConfig
from whatsapp_organizer.transcripts.base import ParserError, read_transcript_text


# Bump this whenever parsing or grouping semantics change in a way that should
# force regeneration of block work files even if the chat export is unchanged.
GROUPING_VERSION = 2


def find_transcript(config: OrganizerConfig) -> Path:
    """Select the chat export to process.

    Args:
        config:
            Loaded configuration.

    Returns:
        The configured transcript, or the first `.txt` file (by name) in the
        input directory.

    Raises:
        ConfigError:
            If the input directory or the transcript does not exist.
    """

    if not config.input_dir.is_dir():
        raise ConfigError(
            f"Input directory not found: {config.input_dir}. "
            "Create it and put the _chat.txt export and its media files there."
        )

    if config.transcript is not None:
        if not config.transcript.is_file():
            raise ConfigError(f"Transcript file not found: {config.transcript}")
        return config.transcript

    candidates = sorted(p for p in config.input_dir.iterdir() if p.is_file() and p.suffix.lower() == ".txt")
    if not candidates:
        raise ConfigError(f"No .txt chat export found in: {config.input_dir}")

    return candidates[0]


def load_transcript(path: Path) -> str:
    """Read a transcript and normalize errors to ConfigError."""

    try:
        return read_transcript_text(path)
    except ParserError as exc:
        raise ConfigError(str(exc)) from exc
