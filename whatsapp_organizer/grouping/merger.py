# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Protocol merge pass (merge policy only)."""

import copy

from whatsapp_organizer.grouping.alerts import AlertKind, AlertRecorder, format_interval, minutes_between
from whatsapp_organizer.grouping.blocks import Block


def merge_by_protocol(
    blocks: list[Block],
    recorder: AlertRecorder,
    *,
    interval_alert_minutes: float | None = None,
) -> list[Block]:
    """Fuse closed blocks that carry the same protocol number.

    The surviving block is the first one discovered for a protocol; media of
    later blocks are appended in discovery order. Blocks without a protocol are
    passed through unchanged. A large gap between merged blocks is reported but
    never prevents the merge.

    Args:
        blocks:
            Closed blocks in transcript order. They are not modified.
        recorder:
            Alert sink.
        interval_alert_minutes:
            Gap threshold for `intervalo_grande` alerts. None disables them.

    Returns:
        The merged block list.
    """

    merged: list[Block] = []
    by_protocol: dict[str, Block] = {}

    for block in blocks:
        protocol = block.protocol_number
        target = by_protocol.get(protocol) if protocol else None

        if target is None:
            own = copy.deepcopy(block)
            merged.append(own)
            if protocol:
                by_protocol[protocol] = own
            continue

        gap = minutes_between(target.last_timestamp, block.first_timestamp)
        if interval_alert_minutes is not None and gap is not None and gap > interval_alert_minutes:
            recorder.add(
                AlertKind.LARGE_INTERVAL,
                f"OS {protocol}: blocos separados por {format_interval(gap)} foram unidos "
                f"(autores: {target.author}, {block.author})",
            )

        target.media.extend(block.media)
        target.free_text.extend(block.free_text)
        for token in block.caption_tokens:
            target.add_caption_token(token)
        target.touch(block.last_timestamp)

        for author in [block.author, *block.additional_authors]:
            if author != target.author and author not in target.additional_authors:
                target.additional_authors.append(author)

    return merged
