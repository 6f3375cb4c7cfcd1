"""Tests for media and caption classification."""

import pytest

from whatsapp_organizer.transcripts.captions import extract_caption, is_valid_protocol, split_tokens
from whatsapp_organizer.transcripts.media import MediaClassifier, MediaKind, is_deleted_message


class TestMediaClassifier:
    """Content is classified as attached, hidden or no media."""

    def setup_method(self):
        self.classifier = MediaClassifier()

    def test_attached_file_with_direction_mark(self):
        ref = self.classifier.classify("‎IMG-20250301-WA0001.jpg (arquivo anexado)")

        assert ref.kind is MediaKind.ATTACHED
        assert ref.filename == "IMG-20250301-WA0001.jpg"

    def test_attached_file_without_direction_mark(self):
        ref = self.classifier.classify("VID-20250301-WA0002.mp4 (arquivo anexado)")

        assert ref.kind is MediaKind.ATTACHED
        assert ref.filename == "VID-20250301-WA0002.mp4"

    def test_extension_match_ignores_case(self):
        ref = self.classifier.classify("FOTO.JPEG (arquivo anexado)")

        assert ref.kind is MediaKind.ATTACHED
        assert ref.filename == "FOTO.JPEG"

    def test_english_marker(self):
        ref = self.classifier.classify("IMG-1.png (file attached)")

        assert ref.filename == "IMG-1.png"

    def test_unsupported_extension_is_plain_text(self):
        ref = self.classifier.classify("contrato.pdf (arquivo anexado)")

        assert ref.kind is MediaKind.NONE
        assert ref.filename is None

    def test_hidden_media(self):
        ref = self.classifier.classify("<Mídia oculta>")

        assert ref.kind is MediaKind.HIDDEN
        assert ref.filename is None

    def test_plain_text(self):
        assert self.classifier.classify("2025000111 poste").kind is MediaKind.NONE

    def test_custom_extensions(self):
        classifier = MediaClassifier(["webp", ".JPG"])

        assert classifier.extensions == (".webp", ".jpg")
        assert classifier.classify("a.webp (arquivo anexado)").filename == "a.webp"
        assert classifier.classify("a.png (arquivo anexado)").kind is MediaKind.NONE

    def test_no_extensions_is_an_error(self):
        with pytest.raises(ValueError):
            MediaClassifier([])


class TestDeletedMessages:

    @pytest.mark.parametrize("text", ["Mensagem apagada", " Esta mensagem foi apagada ", "This message was deleted"])
    def test_deleted_texts(self, text):
        assert is_deleted_message(text) is True

    def test_regular_text(self):
        assert is_deleted_message("Mensagem apagada sem querer, reenviando") is False


class TestExtractCaption:
    """Only the leading digit run of a fragment is a caption token."""

    def test_token_and_residual(self):
        assert extract_caption("2025001234 caixa d'agua") == ("2025001234", "caixa d'agua")

    def test_token_only(self):
        assert extract_caption("  2025001234  ") == ("2025001234", "")

    def test_short_token(self):
        assert extract_caption("100 quadro") == ("100", "quadro")

    def test_token_glued_to_text(self):
        assert extract_caption("100abc") == ("100", "abc")

    def test_digits_elsewhere_are_not_captions(self):
        assert extract_caption("quadro 2025001234") == (None, "quadro 2025001234")

    def test_empty_text(self):
        assert extract_caption("   ") == (None, "")


class TestProtocolValidity:
    """10 digits starting with 2025 or 2026."""

    def test_documented_examples(self):
        assert is_valid_protocol("2025010203") is True
        assert is_valid_protocol("2024010203") is False
        assert is_valid_protocol("12345") is False

    def test_2026_prefix(self):
        assert is_valid_protocol("2026999999") is True

    @pytest.mark.parametrize("token", ["20250102034", "202501020", "2027010203", "", None])
    def test_invalid(self, token):
        assert is_valid_protocol(token) is False

    def test_split_tokens_keeps_order_and_collapses_duplicates(self):
        valid, invalid = split_tokens(["100", "2025000111", "100", "2026123456", "2025000111", "7"])

        assert valid == ["2025000111", "2026123456"]
        assert invalid == ["100", "7"]
