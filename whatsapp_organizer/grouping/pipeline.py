# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Transcript-to-blocks pipeline.

`segment_transcript` is a pure function: same text and policy, same blocks and
alerts. It performs no I/O and does not raise on malformed transcript content.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from whatsapp_organizer.grouping.alerts import Alert, AlertRecorder
from whatsapp_organizer.grouping.blocks import Block
from whatsapp_organizer.grouping.merger import merge_by_protocol
from whatsapp_organizer.grouping.policies import GroupingPolicy
from whatsapp_organizer.grouping.review import review_blocks
from whatsapp_organizer.grouping.segmenter import BlockSegmenter
from whatsapp_organizer.transcripts.chat_parser import parse_chat
from whatsapp_organizer.transcripts.media import DEFAULT_MEDIA_EXTENSIONS, MediaClassifier


@dataclass(frozen=True)
class SegmentationResult:
    """Output of one pipeline run.

    Attributes:
        messages_total:
            Number of parsed messages.
        last_timestamp:
            Timestamp of the last message (used to name the output folder).
        blocks:
            Final blocks, each with at least one attachment.
        alerts:
            Anomalies in the order they were found.
    """

    messages_total: int
    last_timestamp: datetime | None
    blocks: tuple[Block, ...]
    alerts: tuple[Alert, ...]


def segment_transcript(
    text: str,
    policy: GroupingPolicy,
    *,
    extensions: Iterable[str] = DEFAULT_MEDIA_EXTENSIONS,
) -> SegmentationResult:
    """Parse a transcript and group its attachments into blocks.

    Args:
        text:
            Complete chat export.
        policy:
            Grouping policy.
        extensions:
            Accepted media file extensions.

    Returns:
        Blocks and alerts of the run.
    """

    recorder = AlertRecorder()
    messages = parse_chat(text)

    segmenter = BlockSegmenter(policy, MediaClassifier(extensions))
    blocks = segmenter.segment(messages, recorder)

    if policy.merge_by_protocol:
        blocks = merge_by_protocol(
            blocks,
            recorder,
            interval_alert_minutes=policy.interval_alert_minutes,
        )

    review_blocks(blocks, policy, recorder)

    return SegmentationResult(
        messages_total=len(messages),
        last_timestamp=messages[-1].timestamp if messages else None,
        blocks=tuple(blocks),
        alerts=recorder.alerts,
    )
