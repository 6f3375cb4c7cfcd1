"""
WhatsApp organizer CLI package.

This package contains a small CLI tool that:
- parses an exported WhatsApp chat transcript,
- groups the attached photos/videos into blocks identified by a protocol number,
- files each block into its destination folder,
- writes a report of every anomaly found along the way.
"""
