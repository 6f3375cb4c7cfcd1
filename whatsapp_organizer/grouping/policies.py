# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Grouping policies.

The segmenter runs a single scanning loop; a `GroupingPolicy` decides which
conditions close a block. Three presets exist:

- `continuity`: same author and a short time window keep media together.
- `blank_line`: an empty message is an explicit divider; captions must follow
  within a short time window.
- `merge`: dividers and author changes close blocks, then blocks with the same
  protocol number are fused across the whole transcript.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class GroupingPolicy:
    """
    Configuration of the block segmenter.

    Attributes:
        name:
            Preset name, used in reports and output folder names.
        tolerance_minutes:
            Maximum gap between a block's last activity and a new attachment or
            caption from the same author. None disables the time window.
        caption_window_minutes:
            Time window applied to caption text only, for policies whose
            attachments are not time-bound. None falls back to
            `tolerance_minutes`.
        blank_line_delimits:
            If True, an empty message closes the open block and opens a fresh
            one for its author.
        close_on_author_change:
            If True, any message from another author closes the open block.
            Without it a reply from someone else leaves the block open and
            only an attachment from another author starts a new one.
        merge_by_protocol:
            If True, closed blocks sharing a protocol number are fused and a
            protocol announced while no block is open pre-seeds a new block.
        interval_alert_minutes:
            Gap above which a continuation or merge is still performed but
            reported. None disables the alert.
    """

    name: str
    tolerance_minutes: float | None = None
    caption_window_minutes: float | None = None
    blank_line_delimits: bool = False
    close_on_author_change: bool = False
    merge_by_protocol: bool = False
    interval_alert_minutes: float | None = None


CONTINUITY = GroupingPolicy(
    name="continuity",
    tolerance_minutes=2,
)

BLANK_LINE = GroupingPolicy(
    name="blank_line",
    caption_window_minutes=2,
    blank_line_delimits=True,
)

MERGE = GroupingPolicy(
    name="merge",
    blank_line_delimits=True,
    close_on_author_change=True,
    merge_by_protocol=True,
    interval_alert_minutes=30,
)

PRESETS: dict[str, GroupingPolicy] = {p.name: p for p in (CONTINUITY, BLANK_LINE, MERGE)}

_UNSET = object()


def get_policy(
    name: str,
    *,
    tolerance_minutes: float | None | object = _UNSET,
    caption_window_minutes: float | None | object = _UNSET,
    interval_alert_minutes: float | None | object = _UNSET,
) -> GroupingPolicy:
    """Look up a preset and optionally override its thresholds.

    Raises:
        KeyError:
            If no preset has the given name.
    """

    policy = PRESETS[name.strip().lower()]

    overrides: dict[str, object] = {}
    if tolerance_minutes is not _UNSET:
        overrides["tolerance_minutes"] = tolerance_minutes
    if caption_window_minutes is not _UNSET:
        overrides["caption_window_minutes"] = caption_window_minutes
    if interval_alert_minutes is not _UNSET:
        overrides["interval_alert_minutes"] = interval_alert_minutes

    return replace(policy, **overrides) if overrides else policy
