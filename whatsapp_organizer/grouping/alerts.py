# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Anomaly alerts.

Nothing in the grouping core aborts on malformed input. Every anomaly becomes an
`Alert` appended to an `AlertRecorder` that is passed explicitly through the
pipeline, so separate runs never share state.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime


class AlertKind(enum.Enum):
    HIDDEN_MEDIA = "midia_oculta"
    SHARED_FOLDER = "pasta_unida"
    MULTIPLE_CAPTIONS = "multiplas_legendas"
    IGNORED_TEXT = "texto_ignorado"
    FILE_NOT_FOUND = "arquivo_nao_encontrado"
    INVALID_PROTOCOL = "protocolo_invalido"
    FEW_PHOTOS = "poucas_fotos"
    LARGE_INTERVAL = "intervalo_grande"
    NO_PROTOCOL = "sem_os"
    INFO = "info"


_ICONS: dict[AlertKind, str] = {
    AlertKind.HIDDEN_MEDIA: "⚠️",
    AlertKind.SHARED_FOLDER: "📁",
    AlertKind.MULTIPLE_CAPTIONS: "📂",
    AlertKind.IGNORED_TEXT: "ℹ️",
    AlertKind.FILE_NOT_FOUND: "❌",
    AlertKind.INVALID_PROTOCOL: "🔢",
    AlertKind.FEW_PHOTOS: "📷",
    AlertKind.LARGE_INTERVAL: "⏰",
    AlertKind.NO_PROTOCOL: "❓",
    AlertKind.INFO: "📋",
}


@dataclass(frozen=True)
class Alert:
    """A typed, human-readable anomaly description."""

    kind: AlertKind
    message: str

    def render(self) -> str:
        """Format the alert as a single report line."""

        return f"{_ICONS.get(self.kind, '•')} {self.message}"


@dataclass
class AlertRecorder:
    """Ordered, append-only alert sink."""

    _alerts: list[Alert] = field(default_factory=list)

    def add(self, kind: AlertKind, message: str) -> None:
        self._alerts.append(Alert(kind=kind, message=message))

    @property
    def alerts(self) -> tuple[Alert, ...]:
        return tuple(self._alerts)

    def of_kind(self, kind: AlertKind) -> list[Alert]:
        return [a for a in self._alerts if a.kind is kind]

    def __len__(self) -> int:
        return len(self._alerts)


def minutes_between(first: datetime | None, second: datetime | None) -> float | None:
    """Absolute gap in minutes, or None if either side has no date."""

    if first is None or second is None:
        return None
    return abs((second - first).total_seconds()) / 60


def format_interval(minutes: float) -> str:
    """Render a gap like `1h20min` or `45min`."""

    hours = int(minutes // 60)
    mins = round(minutes % 60)
    if hours > 0:
        return f"{hours}h{mins}min"
    return f"{mins}min"
