"""Block grouping.

Turns parsed messages into media blocks and anomaly alerts. The entry point is
`segment_transcript`, which runs the segmenter, the optional protocol merge and
the caption review for a given `GroupingPolicy`.
"""

from whatsapp_organizer.grouping.alerts import Alert, AlertKind, AlertRecorder
from whatsapp_organizer.grouping.blocks import Block, MediaItem
from whatsapp_organizer.grouping.pipeline import SegmentationResult, segment_transcript
from whatsapp_organizer.grouping.policies import GroupingPolicy, get_policy

__all__ = [
    "Alert",
    "AlertKind",
    "AlertRecorder",
    "Block",
    "GroupingPolicy",
    "MediaItem",
    "SegmentationResult",
    "get_policy",
    "segment_transcript",
]
