from __future__ import annotations

import pytest

from whatsapp_organizer.grouping.alerts import AlertRecorder


@pytest.fixture
def recorder() -> AlertRecorder:
    return AlertRecorder()


def chat(*lines: str) -> str:
    """Join transcript lines the way the export writes them."""

    return "\n".join(lines) + "\n"


def attached(name: str) -> str:
    return f"‎{name} (arquivo anexado)"
