"""Tests for the protocol merge pass."""

from datetime import datetime

from whatsapp_organizer.grouping.alerts import AlertKind, format_interval, minutes_between
from whatsapp_organizer.grouping.blocks import Block, MediaItem
from whatsapp_organizer.grouping.merger import merge_by_protocol


def make_block(author, protocol, start, end, *names, tokens=None):
    block = Block(
        author=author,
        first_timestamp=datetime(2025, 3, 1, *start),
        last_timestamp=datetime(2025, 3, 1, *end),
        protocol_number=protocol,
    )
    for name in names:
        block.media.append(MediaItem(filename=name, timestamp=block.first_timestamp, raw_timestamp="01/03/2025"))
    for token in tokens if tokens is not None else ([protocol] if protocol else []):
        block.add_caption_token(token)
    return block


class TestMergeByProtocol:

    def test_blocks_without_protocol_pass_through(self, recorder):
        blocks = [
            make_block("Ana", None, (10, 0), (10, 0), "A.jpg"),
            make_block("Ana", None, (10, 5), (10, 5), "B.jpg"),
        ]

        merged = merge_by_protocol(blocks, recorder, interval_alert_minutes=30)

        assert [[m.filename for m in b.media] for b in merged] == [["A.jpg"], ["B.jpg"]]
        assert len(recorder) == 0

    def test_discovery_order_is_kept(self, recorder):
        blocks = [
            make_block("Ana", "2025000111", (10, 0), (10, 1), "A.jpg"),
            make_block("Bob", "2025000222", (10, 2), (10, 3), "B.jpg"),
            make_block("Eve", "2025000111", (10, 4), (10, 5), "C.jpg", tokens=["2025000111", "99"]),
        ]

        merged = merge_by_protocol(blocks, recorder)

        assert [b.protocol_number for b in merged] == ["2025000111", "2025000222"]
        first = merged[0]
        assert [m.filename for m in first.media] == ["A.jpg", "C.jpg"]
        assert first.author == "Ana"
        assert first.additional_authors == ["Eve"]
        assert first.caption_tokens == ["2025000111", "99"]
        assert first.last_timestamp == datetime(2025, 3, 1, 10, 5)

    def test_same_author_is_not_an_additional_author(self, recorder):
        blocks = [
            make_block("Ana", "2025000111", (10, 0), (10, 0), "A.jpg"),
            make_block("Ana", "2025000111", (11, 0), (11, 0), "B.jpg"),
        ]

        merged = merge_by_protocol(blocks, recorder)

        assert merged[0].additional_authors == []

    def test_gap_alert_is_measured_between_blocks(self, recorder):
        blocks = [
            make_block("Ana", "2025000111", (9, 0), (10, 0), "A.jpg"),
            make_block("Bob", "2025000111", (10, 30), (10, 40), "B.jpg"),
            make_block("Eve", "2025000111", (11, 11), (11, 12), "C.jpg"),
        ]

        merge_by_protocol(blocks, recorder, interval_alert_minutes=30)

        assert [a.message for a in recorder.of_kind(AlertKind.LARGE_INTERVAL)] == [
            "OS 2025000111: blocos separados por 31min foram unidos (autores: Ana, Eve)"
        ]

    def test_no_alert_without_threshold(self, recorder):
        blocks = [
            make_block("Ana", "2025000111", (8, 0), (8, 0), "A.jpg"),
            make_block("Bob", "2025000111", (12, 0), (12, 0), "B.jpg"),
        ]

        merge_by_protocol(blocks, recorder, interval_alert_minutes=None)

        assert len(recorder) == 0

    def test_input_blocks_are_not_modified(self, recorder):
        first = make_block("Ana", "2025000111", (10, 0), (10, 0), "A.jpg")
        second = make_block("Bob", "2025000111", (10, 5), (10, 5), "B.jpg")

        merge_by_protocol([first, second], recorder)

        assert [m.filename for m in first.media] == ["A.jpg"]
        assert first.additional_authors == []


class TestIntervalHelpers:

    def test_minutes_between_is_absolute(self):
        a = datetime(2025, 3, 1, 10, 0)
        b = datetime(2025, 3, 1, 9, 15)

        assert minutes_between(a, b) == 45

    def test_minutes_between_without_date(self):
        assert minutes_between(None, datetime(2025, 3, 1)) is None

    def test_format_interval(self):
        assert format_interval(45) == "45min"
        assert format_interval(80) == "1h20min"
        assert format_interval(120) == "2h0min"
