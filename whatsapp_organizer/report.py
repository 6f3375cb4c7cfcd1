# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Plain-text run report."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable

from whatsapp_organizer.grouping.alerts import Alert, AlertKind


_RULE = "=" * 42


@dataclass(frozen=True)
class RunStats:
    policy: str
    merge_by_protocol: bool
    output_dir: Path
    dry_run: bool
    blocks_total: int
    copied: int
    not_found: int


def _section(title: str, alerts: list[Alert], empty: str) -> list[str]:
    lines = [_RULE, f"{title} ({len(alerts)})", _RULE]
    if alerts:
        lines.extend(a.render() for a in alerts)
    else:
        lines.append(empty)
    lines.append("")
    return lines


def render_report(stats: RunStats, alerts: Iterable[Alert], *, generated_at: datetime) -> str:
    """
    Render the end-of-run report.

    Protocol-merging policies group large-gap and missing-protocol alerts into their own
    sections; other policies list every alert in one section.

    Args:
        stats:
            Run statistics.
        alerts:
            Alerts in the order they were recorded.
        generated_at:
            Report time.

    Returns:
        Report text.
    """

    alerts = list(alerts)

    lines = [
        _RULE,
        f"RELATÓRIO DE ORGANIZAÇÃO - WhatsApp ({stats.policy})",
        _RULE,
        f"Data/Hora: {generated_at.strftime('%d/%m/%Y %H:%M:%S')}",
        f"Output: {stats.output_dir}",
        f"Modo: {'DRY-RUN (simulação)' if stats.dry_run else 'EXECUÇÃO REAL'}",
        "",
        "ESTATÍSTICAS:",
        f"- Total de blocos processados: {stats.blocks_total}",
        f"- Arquivos copiados: {stats.copied}",
        f"- Arquivos não encontrados: {stats.not_found}",
        "",
    ]

    if stats.merge_by_protocol:
        interval = [a for a in alerts if a.kind is AlertKind.LARGE_INTERVAL]
        no_protocol = [a for a in alerts if a.kind is AlertKind.NO_PROTOCOL]
        others = [a for a in alerts if a.kind not in {AlertKind.LARGE_INTERVAL, AlertKind.NO_PROTOCOL}]
        lines += _section("ALERTAS DE INTERVALO GRANDE", interval, "Nenhum.")
        lines += _section("BLOCOS SEM OS", no_protocol, "Nenhum.")
        lines += _section("OUTROS ALERTAS", others, "Nenhum.")
    else:
        lines += _section("ALERTAS", alerts, "Nenhum alerta.")

    lines.append(_RULE)
    return "\n".join(lines).strip() + "\n"


def write_report(text: str, logs_dir: Path, *, policy: str, generated_at: datetime) -> Path:
    """Write the report into `logs_dir` and return its path."""

    logs_dir.mkdir(parents=True, exist_ok=True)
    path = logs_dir / f"{generated_at.strftime('%Y-%m-%d_%H-%M')}_{policy}_relatorio.txt"
    path.write_text(text, encoding="utf-8")
    return path
