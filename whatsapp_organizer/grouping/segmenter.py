# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Message-to-block segmentation.

The segmenter scans messages in transcript order and keeps exactly one piece of
state: the currently open block (or none). Each message is dispatched to one
transition, evaluated in this order:

1. hidden media: alert, message skipped
2. author change (policies that close on it): close the open block
3. divider (blank-line policies): close the open block, open a fresh one
4. attachment: extend the open block or open a new one
5. text: caption scan, caption-window close, or protocol forward reference

A block is only kept if it received at least one attachment. Closed blocks are
never reopened; protocol merging is a separate pass over the closed blocks.
"""

from dataclasses import dataclass, field
from typing import Iterable

from whatsapp_organizer.grouping.alerts import AlertKind, AlertRecorder, format_interval, minutes_between
from whatsapp_organizer.grouping.blocks import Block, MediaItem
from whatsapp_organizer.grouping.policies import GroupingPolicy
from whatsapp_organizer.transcripts.base import Message
from whatsapp_organizer.transcripts.captions import extract_caption, is_valid_protocol
from whatsapp_organizer.transcripts.media import MediaClassifier, MediaKind, MediaReference, is_deleted_message


@dataclass
class ScanState:
    """Accumulator of a single segmentation run.

    Attributes:
        current:
            The open block, or None when no block is open.
        closed:
            Closed blocks with at least one attachment, in closing order.
    """

    current: Block | None = None
    closed: list[Block] = field(default_factory=list)

    def close(self) -> None:
        """Close the open block; blocks without media are dropped silently."""

        if self.current is not None and self.current.media:
            self.closed.append(self.current)
        self.current = None

    def open(self, msg: Message) -> Block:
        """Close the open block and start a new one for the message's author."""

        self.close()
        self.current = Block(
            author=msg.author,
            first_timestamp=msg.timestamp,
            last_timestamp=msg.timestamp,
        )
        return self.current


class BlockSegmenter:
    """Group messages into media blocks according to a policy."""

    def __init__(self, policy: GroupingPolicy, classifier: MediaClassifier | None = None) -> None:
        self.policy = policy
        self.classifier = classifier or MediaClassifier()

    def segment(self, messages: Iterable[Message], recorder: AlertRecorder) -> list[Block]:
        """Run the scan.

        Args:
            messages:
                Parsed messages in transcript order.
            recorder:
                Alert sink for anomalies found while scanning.

        Returns:
            Closed blocks in transcript order (before any protocol merge).
        """

        state = ScanState()
        for msg in messages:
            self.step(state, msg, recorder)
        state.close()
        return state.closed

    def step(self, state: ScanState, msg: Message, recorder: AlertRecorder) -> None:
        """Apply one message to the scan state."""

        if not msg.author or is_deleted_message(msg.content):
            return

        media = self.classifier.classify(msg.content)

        if media.kind is MediaKind.HIDDEN:
            self.on_hidden(msg, recorder)
            return

        if (
            self.policy.close_on_author_change
            and state.current is not None
            and state.current.author != msg.author
        ):
            state.close()

        if self.policy.blank_line_delimits and not msg.content:
            self.on_divider(state, msg)
            return

        if media.kind is MediaKind.ATTACHED:
            self.on_attachment(state, msg, media, recorder)
            return

        self.on_text(state, msg)

    def on_hidden(self, msg: Message, recorder: AlertRecorder) -> None:
        recorder.add(AlertKind.HIDDEN_MEDIA, f"Mídia oculta: {msg.raw_timestamp} - {msg.author}")

    def on_divider(self, state: ScanState, msg: Message) -> None:
        block = state.open(msg)
        # A caption typed below the blank first line belongs to the fresh block.
        for line in msg.continuation_lines:
            self._scan_caption(block, line)

    def on_attachment(
        self,
        state: ScanState,
        msg: Message,
        media: MediaReference,
        recorder: AlertRecorder,
    ) -> None:
        block = state.current
        gap = minutes_between(block.last_timestamp, msg.timestamp) if block is not None else None

        if (
            block is None
            or block.author != msg.author
            or self._outside_window(gap, self.policy.tolerance_minutes)
        ):
            block = state.open(msg)
        else:
            self._check_interval(block, gap, recorder)

        block.media.append(
            MediaItem(
                filename=str(media.filename),
                timestamp=msg.timestamp,
                raw_timestamp=msg.raw_timestamp,
            )
        )
        block.touch(msg.timestamp)

        # Captions sent together with the file follow on the next lines.
        for line in msg.continuation_lines:
            self._scan_caption(block, line)

    def on_text(self, state: ScanState, msg: Message) -> None:
        block = state.current

        if block is not None and block.author == msg.author:
            gap = minutes_between(block.last_timestamp, msg.timestamp)
            if self._outside_window(gap, self._caption_window()):
                # Plain text never opens a block on its own.
                state.close()
                return

            self._scan_caption(block, msg.content)
            for line in msg.continuation_lines:
                self._scan_caption(block, line)
            block.touch(msg.timestamp)
            return

        if block is None and self.policy.merge_by_protocol:
            # Forward reference: a protocol announced before the media arrives.
            token, _ = extract_caption(msg.content)
            if token is not None and is_valid_protocol(token):
                block = state.open(msg)
                block.add_caption_token(token)
                block.protocol_number = token

    def _caption_window(self) -> float | None:
        if self.policy.caption_window_minutes is not None:
            return self.policy.caption_window_minutes
        return self.policy.tolerance_minutes

    def _outside_window(self, gap: float | None, tolerance: float | None) -> bool:
        if tolerance is None:
            return False
        # Undated messages cannot prove continuity.
        return gap is None or gap > tolerance

    def _check_interval(self, block: Block, gap: float | None, recorder: AlertRecorder) -> None:
        threshold = self.policy.interval_alert_minutes
        if threshold is None or gap is None or gap <= threshold:
            return

        recorder.add(
            AlertKind.LARGE_INTERVAL,
            f"Bloco OS {block.protocol_number or 'sem-os'} ({block.author}): "
            f"intervalo de {format_interval(gap)} entre mídias",
        )

    def _scan_caption(self, block: Block, text: str) -> None:
        """Record a caption token and/or free text from one fragment."""

        if not text or is_deleted_message(text):
            return

        token, residual = extract_caption(text)
        if token is not None:
            block.add_caption_token(token)
            if (
                self.policy.merge_by_protocol
                and block.protocol_number is None
                and is_valid_protocol(token)
            ):
                block.protocol_number = token

        if residual:
            block.free_text.append(residual)
