"""Transcript parsing.

The organizer reads WhatsApp chat exports (`_chat.txt`). The parser converts the
export into a list of `Message` records:

- `timestamp`: local date-time of the header line (None if unparseable)
- `author`: sender label as written in the export
- `content`: text after the author on the header line
- `continuation_lines`: following lines without a header

Media and caption classification are handled by the sibling modules.
"""

from whatsapp_organizer.transcripts.base import Message, ParserError
from whatsapp_organizer.transcripts.chat_parser import parse_chat

__all__ = [
    "Message",
    "ParserError",
    "parse_chat",
]
