"""Tests for destination planning."""

from datetime import datetime
from pathlib import Path

import pytest

from whatsapp_organizer.grouping.alerts import AlertKind
from whatsapp_organizer.grouping.blocks import Block, MediaItem
from whatsapp_organizer.grouping.policies import BLANK_LINE, CONTINUITY, MERGE
from whatsapp_organizer.placement import (
    format_file_timestamp,
    output_folder_name,
    plan_placement,
    sanitize_author,
    slugify_caption,
)


IN = Path("/chat")
OUT = Path("/out/fotos")


def make_block(*names, author="Ana", tokens=(), free_text=(), protocol=None, minute=0):
    ts = datetime(2025, 3, 1, 10, minute)
    block = Block(author=author, first_timestamp=ts, last_timestamp=ts, protocol_number=protocol)
    for name in names:
        block.media.append(MediaItem(filename=name, timestamp=ts, raw_timestamp=f"01/03/2025 10:{minute:02d}"))
    for token in tokens:
        block.add_caption_token(token)
    block.free_text.extend(free_text)
    return block


def destinations(plan):
    return [t.destination.relative_to(OUT).as_posix() for t in plan.tasks]


class TestNameHelpers:

    def test_phone_number_author(self):
        assert sanitize_author("+55 11 91234-5678") == "551191234-5678"

    def test_reserved_characters_are_removed(self):
        assert sanitize_author('Ana <Obra>: "Sul"') == "Ana Obra Sul"

    @pytest.mark.parametrize("author", ["", None, "???"])
    def test_empty_author(self, author):
        assert sanitize_author(author) == "desconhecido"

    def test_slugify_caption(self):
        assert slugify_caption("Caixa D'água Nova") == "caixa-dagua-nova"

    def test_slugify_caption_is_truncated(self):
        assert len(slugify_caption("poste " * 20)) <= 50

    def test_slugify_symbols_only(self):
        assert slugify_caption("!!!") == ""

    def test_file_timestamp(self):
        assert format_file_timestamp(datetime(2025, 3, 1, 9, 5)) == "2025-03-01_09-05"
        assert format_file_timestamp(None) == "sem-data"

    def test_output_folder_name(self):
        ts = datetime(2025, 3, 1, 18, 30)

        assert output_folder_name(BLANK_LINE, ts) == "fotos-2025-03-01_18-30"
        assert output_folder_name(MERGE, ts) == "batedor-2025-03-01_18-30"
        assert output_folder_name(CONTINUITY, None) == "fotos-sem-data"


class TestPlanPlacement:

    def plan(self, blocks, recorder, policy=BLANK_LINE, min_photos=0):
        return plan_placement(blocks, policy, input_dir=IN, output_dir=OUT, recorder=recorder, min_photos=min_photos)

    def test_single_protocol_folder(self, recorder):
        plan = self.plan([make_block("IMG-1.jpg", "IMG-2.jpg", tokens=["2025000111"])], recorder)

        assert destinations(plan) == [
            "2025000111/2025-03-01_10-00_Ana_IMG-1.jpg",
            "2025000111/2025-03-01_10-00_Ana_IMG-2.jpg",
        ]
        assert plan.tasks[0].source == IN / "IMG-1.jpg"
        assert plan.directories == [OUT / "2025000111"]

    def test_multiple_protocols_get_subfolders(self, recorder):
        plan = self.plan(
            [make_block("A.jpg", "B.jpg", author="+55 11 9999-0000", tokens=["2025000111", "2025000222"])],
            recorder,
        )

        base = "sem_legenda/55119999-0000/2025000111_2025000222"
        assert destinations(plan) == [
            f"{base}/01_2025-03-01_10-00_A.jpg",
            f"{base}/02_2025-03-01_10-00_B.jpg",
        ]
        assert OUT / base / "2025000111" in plan.directories
        assert OUT / base / "2025000222" in plan.directories

    def test_invalid_tokens_only(self, recorder):
        plan = self.plan([make_block("A.jpg", tokens=["100", "7"])], recorder)

        assert destinations(plan) == ["sem_legenda/Ana/100_7/2025-03-01_10-00_A.jpg"]

    def test_uncaptioned_with_free_text(self, recorder):
        plan = self.plan([make_block("A.jpg", free_text=["Caixa D'água Nova"])], recorder)

        assert destinations(plan) == ["sem_legenda/Ana/2025-03-01_10-00_caixa-dagua-nova_A.jpg"]

    def test_uncaptioned_without_text(self, recorder):
        plan = self.plan([make_block("A.jpg")], recorder)

        assert destinations(plan) == ["sem_legenda/Ana/2025-03-01_10-00_A.jpg"]

    def test_reused_protocol_folder_is_planned_once(self, recorder):
        blocks = [
            make_block("A.jpg", tokens=["2025000111"]),
            make_block("B.jpg", tokens=["2025000111"], minute=30),
        ]

        plan = self.plan(blocks, recorder)

        assert len(plan.tasks) == 2
        assert plan.directories == [OUT / "2025000111"]

    def test_few_photos_counts_photos_only(self, recorder):
        blocks = [make_block("A.jpg", "B.png", "C.mp4", tokens=["2025000111"])]

        self.plan(blocks, recorder, min_photos=3)

        assert [a.message for a in recorder.of_kind(AlertKind.FEW_PHOTOS)] == [
            "Pasta 2025000111 tem apenas 2 foto(s) (mínimo esperado: 3)"
        ]

    def test_enough_photos(self, recorder):
        self.plan([make_block("A.jpg", "B.jpg", "C.jpg", tokens=["2025000111"])], recorder, min_photos=3)

        assert recorder.of_kind(AlertKind.FEW_PHOTOS) == []

    def test_merge_policy_uses_protocol_identity(self, recorder):
        block = make_block(
            "A.jpg",
            "B.jpg",
            tokens=["2025000111", "2025000222"],
            protocol="2025000111",
        )

        plan = self.plan([block], recorder, policy=MERGE)

        assert destinations(plan) == [
            "2025000111/01_2025-03-01_10-00_Ana_A.jpg",
            "2025000111/02_2025-03-01_10-00_Ana_B.jpg",
        ]

    def test_merge_policy_without_protocol(self, recorder):
        plan = self.plan([make_block("A.jpg", tokens=["100"])], recorder, policy=MERGE)

        assert destinations(plan) == ["sem_legenda/Ana/100/01_2025-03-01_10-00_Ana_A.jpg"]

    def test_undated_media(self, recorder):
        block = make_block("A.jpg")
        block.media[0] = MediaItem(filename="A.jpg", timestamp=None, raw_timestamp="31/02/2025 10:00")

        plan = self.plan([block], recorder)

        assert destinations(plan) == ["sem_legenda/Ana/sem-data_A.jpg"]
