"""Tests for the run report."""

from datetime import datetime
from pathlib import Path

from whatsapp_organizer.grouping.alerts import Alert, AlertKind
from whatsapp_organizer.report import RunStats, render_report, write_report


NOW = datetime(2025, 3, 2, 8, 15, 30)


def stats(policy="blank_line", dry_run=False, merge=False):
    return RunStats(
        policy=policy,
        merge_by_protocol=merge,
        output_dir=Path("/out/fotos-2025-03-01_18-00"),
        dry_run=dry_run,
        blocks_total=4,
        copied=9,
        not_found=1,
    )


class TestRenderReport:

    def test_header_and_statistics(self):
        text = render_report(stats(), [], generated_at=NOW)

        assert "RELATÓRIO DE ORGANIZAÇÃO - WhatsApp (blank_line)" in text
        assert "Data/Hora: 02/03/2025 08:15:30" in text
        assert "Modo: EXECUÇÃO REAL" in text
        assert "- Total de blocos processados: 4" in text
        assert "- Arquivos copiados: 9" in text
        assert "- Arquivos não encontrados: 1" in text
        assert "ALERTAS (0)" in text
        assert "Nenhum alerta." in text

    def test_alerts_are_listed_in_order(self):
        alerts = [
            Alert(AlertKind.HIDDEN_MEDIA, "Mídia oculta: 01/03/2025 10:01 - Ana"),
            Alert(AlertKind.FILE_NOT_FOUND, "Arquivo não encontrado: A.jpg (01/03/2025 10:00 - Ana)"),
        ]

        text = render_report(stats(dry_run=True), alerts, generated_at=NOW)

        assert "Modo: DRY-RUN (simulação)" in text
        assert "ALERTAS (2)" in text
        assert text.index("Mídia oculta") < text.index("Arquivo não encontrado")
        assert "⚠️ Mídia oculta: 01/03/2025 10:01 - Ana" in text

    def test_merge_policy_sections(self):
        alerts = [
            Alert(AlertKind.NO_PROTOCOL, "Bloco sem OS: Ana - 01/03/2025 10:00 (1 mídias)"),
            Alert(AlertKind.LARGE_INTERVAL, "OS 2025000111: blocos separados por 50min foram unidos (autores: Bob, Eve)"),
            Alert(AlertKind.HIDDEN_MEDIA, "Mídia oculta: 01/03/2025 10:01 - Ana"),
        ]

        text = render_report(stats(policy="merge", merge=True), alerts, generated_at=NOW)

        assert "ALERTAS DE INTERVALO GRANDE (1)" in text
        assert "BLOCOS SEM OS (1)" in text
        assert "OUTROS ALERTAS (1)" in text
        assert text.index("INTERVALO GRANDE") < text.index("50min") < text.index("BLOCOS SEM OS")

    def test_sections_follow_merging_not_policy_name(self):
        alerts = [Alert(AlertKind.NO_PROTOCOL, "Bloco sem OS: Ana - 01/03/2025 10:00 (1 mídias)")]

        merged = render_report(stats(policy="batedor", merge=True), alerts, generated_at=NOW)
        plain = render_report(stats(policy="merge", merge=False), alerts, generated_at=NOW)

        assert "BLOCOS SEM OS (1)" in merged
        assert "BLOCOS SEM OS" not in plain
        assert "ALERTAS (1)" in plain


class TestWriteReport:

    def test_file_name_and_content(self, tmp_path):
        logs = tmp_path / "logs"

        path = write_report("conteúdo\n", logs, policy="merge", generated_at=NOW)

        assert path == logs / "2025-03-02_08-15_merge_relatorio.txt"
        assert path.read_text(encoding="utf-8") == "conteúdo\n"
