# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Media reference detection.

WhatsApp exports created "with media" reference each attachment as
`IMG-20250101-WA0001.jpg (arquivo anexado)`. Exports created "without media"
only leave a `<Mídia oculta>` placeholder behind, so the file cannot be
recovered.
"""

import enum
import re
from dataclasses import dataclass
from typing import Iterable


DEFAULT_MEDIA_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".mp4")

ATTACHED_MARKERS: tuple[str, ...] = ("arquivo anexado", "file attached")

HIDDEN_MARKERS: tuple[str, ...] = ("Mídia oculta", "Media omitted")

DELETED_MESSAGE_TEXTS: frozenset[str] = frozenset(
    {
        "Mensagem apagada",
        "Esta mensagem foi apagada",
        "This message was deleted",
    }
)


class MediaKind(enum.Enum):
    NONE = "none"
    ATTACHED = "attached"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class MediaReference:
    """Result of classifying a message's content.

    Attributes:
        kind:
            Whether the content references an attached file, a hidden
            attachment, or no media at all.
        filename:
            Attached file name (verbatim), only set for `MediaKind.ATTACHED`.
    """

    kind: MediaKind
    filename: str | None = None


NO_MEDIA = MediaReference(kind=MediaKind.NONE)
HIDDEN_MEDIA = MediaReference(kind=MediaKind.HIDDEN)


def is_deleted_message(content: str) -> bool:
    """Return True for the system text WhatsApp leaves for retracted messages."""

    return content.strip() in DELETED_MESSAGE_TEXTS


class MediaClassifier:
    """Classify message content into attached / hidden / no media."""

    def __init__(self, extensions: Iterable[str] = DEFAULT_MEDIA_EXTENSIONS) -> None:
        normalized = [e.strip().lower().lstrip(".") for e in extensions if e.strip()]
        if not normalized:
            raise ValueError("At least one media extension is required")

        self.extensions = tuple(f".{e}" for e in normalized)

        ext_alt = "|".join(re.escape(e) for e in normalized)
        marker_alt = "|".join(re.escape(m) for m in ATTACHED_MARKERS)
        # The export prefixes file names with an invisible left-to-right mark.
        self._attached_re = re.compile(
            rf"‎?(?P<filename>.+\.(?:{ext_alt}))\s*\((?:{marker_alt})\)",
            re.IGNORECASE,
        )

    def classify(self, content: str) -> MediaReference:
        match = self._attached_re.search(content)
        if match:
            filename = match.group("filename").replace("‎", "").strip()
            return MediaReference(kind=MediaKind.ATTACHED, filename=filename)

        if any(marker in content for marker in HIDDEN_MARKERS):
            return HIDDEN_MEDIA

        return NO_MEDIA
