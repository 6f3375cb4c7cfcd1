# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Destination planning.

Turns the final block list into a list of copy tasks. Planning is pure: folders
are only created by the copy step, so a dry run and a real run see exactly the
same plan.

Folder layout below the run's output folder:

- `<protocol>/`: blocks with exactly one valid protocol number
- `sem_legenda/<author>/<p1_p2>/<pN>/`: blocks with several valid protocols
- `sem_legenda/<author>/<tok1_tok2>/`: blocks with only invalid caption tokens
- `sem_legenda/<author>/`: blocks without any caption
"""

import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from whatsapp_organizer.grouping.alerts import AlertKind, AlertRecorder
from whatsapp_organizer.grouping.blocks import Block
from whatsapp_organizer.grouping.policies import GroupingPolicy


UNCAPTIONED_DIR = "sem_legenda"
NO_DATE = "sem-data"
UNKNOWN_AUTHOR = "desconhecido"

PHOTO_EXTENSIONS: frozenset[str] = frozenset({".jpg", ".jpeg", ".png", ".webp"})

_RESERVED_CHARS_RE = re.compile(r'[<>:"/\\|?*]')


@dataclass(frozen=True)
class CopyTask:
    """One file to copy."""

    source: Path
    destination: Path
    original_name: str
    sent: str
    author: str


@dataclass
class PlacementPlan:
    """
    Result of planning.

    Attributes:
        output_dir:
            Run output folder.
        directories:
            Folders to create, in planning order (includes empty per-protocol
            subfolders of multi-caption blocks).
        tasks:
            Copy tasks, block by block, in media order.
    """

    output_dir: Path
    directories: list[Path] = field(default_factory=list)
    tasks: list[CopyTask] = field(default_factory=list)

    def add_directory(self, path: Path) -> None:
        if path not in self.directories:
            self.directories.append(path)


def format_file_timestamp(value: datetime | None) -> str:
    """Render a timestamp as `YYYY-MM-DD_HH-MM` (or `sem-data`)."""

    if value is None:
        return NO_DATE
    return value.strftime("%Y-%m-%d_%H-%M")


def sanitize_author(author: str | None) -> str:
    """Make an author label safe for use as a folder/file name component.

    Phone numbers (`+55 11 91234-5678`) lose the plus sign and the spaces.
    """

    if not author:
        return UNKNOWN_AUTHOR

    if author.startswith("+"):
        cleaned = re.sub(r"[+\s]", "", author)
    else:
        cleaned = _RESERVED_CHARS_RE.sub("", author).strip()

    return cleaned or UNKNOWN_AUTHOR


def slugify_caption(text: str | None) -> str:
    """Turn free caption text into a short ASCII slug."""

    if not text:
        return ""

    value = unicodedata.normalize("NFD", text.lower())
    value = "".join(ch for ch in value if not unicodedata.combining(ch))
    value = re.sub(r"[^a-z0-9\s-]", "", value)
    value = re.sub(r"\s+", "-", value)
    return value[:50].strip("-")


def output_folder_name(policy: GroupingPolicy, last_timestamp: datetime | None) -> str:
    """Name of the run output folder, stamped with the last chat message."""

    prefix = "batedor" if policy.merge_by_protocol else "fotos"
    return f"{prefix}-{format_file_timestamp(last_timestamp)}"


def plan_placement(
    blocks: list[Block] | tuple[Block, ...],
    policy: GroupingPolicy,
    *,
    input_dir: Path,
    output_dir: Path,
    recorder: AlertRecorder,
    min_photos: int = 3,
) -> PlacementPlan:
    """
    Decide destination folder and file name for every attachment.

    Args:
        blocks:
            Final blocks from the grouping pipeline.
        policy:
            Policy the blocks were grouped with.
        input_dir:
            Directory holding the media files referenced in the transcript.
        output_dir:
            Run output folder.
        recorder:
            Alert sink for protocols with too few photos.
        min_photos:
            Minimum photo count expected per protocol folder.

    Returns:
        The placement plan.
    """

    plan = PlacementPlan(output_dir=output_dir)
    photos_per_protocol: dict[str, int] = {}

    for block in blocks:
        author = sanitize_author(block.author)

        if policy.merge_by_protocol:
            protocols = [block.protocol_number] if block.protocol_number else []
        else:
            protocols = block.valid_protocols

        if len(protocols) == 1:
            protocol = protocols[0]
            folder = output_dir / protocol
            photos_per_protocol[protocol] = photos_per_protocol.get(protocol, 0) + _count_photos(block)
        elif len(protocols) > 1:
            folder = output_dir / UNCAPTIONED_DIR / author / "_".join(protocols)
            for protocol in protocols:
                plan.add_directory(folder / protocol)
        elif block.invalid_tokens:
            folder = output_dir / UNCAPTIONED_DIR / author / "_".join(block.invalid_tokens)
        else:
            folder = output_dir / UNCAPTIONED_DIR / author

        plan.add_directory(folder)

        for seq, item in enumerate(block.media, start=1):
            stamp = format_file_timestamp(item.timestamp)

            if policy.merge_by_protocol:
                name = f"{seq:02d}_{stamp}_{author}_{item.filename}"
            elif len(protocols) == 1:
                name = f"{stamp}_{author}_{item.filename}"
            elif len(protocols) > 1:
                # Sequential prefix keeps the chat order when sorting by name.
                name = f"{seq:02d}_{stamp}_{item.filename}"
            elif block.free_text and slugify_caption(block.free_text[0]):
                name = f"{stamp}_{slugify_caption(block.free_text[0])}_{item.filename}"
            else:
                name = f"{stamp}_{item.filename}"

            plan.tasks.append(
                CopyTask(
                    source=input_dir / item.filename,
                    destination=folder / name,
                    original_name=item.filename,
                    sent=item.raw_timestamp,
                    author=block.author,
                )
            )

    for protocol, count in photos_per_protocol.items():
        if count < min_photos:
            recorder.add(
                AlertKind.FEW_PHOTOS,
                f"Pasta {protocol} tem apenas {count} foto(s) (mínimo esperado: {min_photos})",
            )

    return plan


def _count_photos(block: Block) -> int:
    return sum(1 for m in block.media if Path(m.filename).suffix.lower() in PHOTO_EXTENSIONS)
