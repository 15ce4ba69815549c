import pytest
from unittest.mock import patch
from kinship.extraction import (
    OCRError,
    extract_from_screenshot,
    parse_contact_text,
    parse_instagram_username,
    parse_screenshot_text,
    parse_vcards,
)
from kinship.extraction.screenshot import clean_screenshot_lines, ocr_image
from kinship.extraction.vcard import unfold, parse_property


class TestContactText:
    def test_full_card(self):
        draft = parse_contact_text("Mary Ann Jones\nmary@example.com\n(555) 123-4567")
        assert draft.first_name == "Mary"
        assert draft.last_name == "Ann Jones"
        assert draft.email == "mary@example.com"
        assert draft.phone == "(555) 123-4567"
        assert draft.source == "text"

    def test_first_line_with_digits_is_not_a_name(self):
        draft = parse_contact_text("555-123-4567\nbob@example.com")
        assert draft.first_name == ""
        assert draft.phone == "555-123-4567"
        assert draft.email == "bob@example.com"

    def test_single_word_name(self):
        draft = parse_contact_text("Cher")
        assert (draft.first_name, draft.last_name) == ("Cher", "")

    def test_email_only(self):
        draft = parse_contact_text("  \n contact: someone@example.org \n")
        assert draft.first_name == ""
        assert draft.email == "someone@example.org"
        assert not draft.is_empty()

    def test_phone_keeps_only_dial_characters(self):
        draft = parse_contact_text("Tom Lee\nTel: +44 20 7946 0958 ext")
        assert draft.phone == "+44 20 7946 0958"

    def test_empty(self):
        assert parse_contact_text("").is_empty()


class TestInstagramHandle:
    def test_dotted_handle(self):
        draft = parse_instagram_username("@jane.doe")
        assert (draft.first_name, draft.last_name) == ("Jane", "Doe")
        assert draft.instagram == "jane.doe"
        assert draft.source == "instagram"

    def test_underscores_join_remaining_parts(self):
        draft = parse_instagram_username("john_smith_jr")
        assert (draft.first_name, draft.last_name) == ("John", "Smith jr")

    def test_plain_handle(self):
        draft = parse_instagram_username("beyonce")
        assert (draft.first_name, draft.last_name) == ("Beyonce", "")

    @pytest.mark.parametrize("handle", ["", "@", "has space", "emoji🙂", "semi;colon"])
    def test_invalid(self, handle):
        with pytest.raises(ValueError):
            parse_instagram_username(handle)


class TestVCard:
    def test_unfold_continuation_lines(self):
        assert unfold("FN:Jonathan Q\r\n  Public\r\nEND:VCARD") == ["FN:Jonathan Q Public", "END:VCARD"]

    def test_grouped_property(self):
        prop = parse_property("item1.TEL;type=CELL:+1 555 0100")
        assert prop.name == "TEL"
        assert prop.has_type("cell")
        assert prop.value == "+1 555 0100"

    def test_name_falls_back_to_structured_name(self):
        drafts = parse_vcards("BEGIN:VCARD\nN:Doe;Jane;;;\nEMAIL:mailto:jane@example.com\nEND:VCARD")
        assert len(drafts) == 1
        assert (drafts[0].first_name, drafts[0].last_name) == ("Jane", "Doe")
        assert drafts[0].email == "jane@example.com"

    def test_first_phone_when_no_cell(self):
        drafts = parse_vcards(
            "BEGIN:VCARD\nFN:Ann Lee\nTEL;TYPE=WORK:tel:+1-555-0101\nTEL;TYPE=HOME:+1-555-0102\nEND:VCARD"
        )
        assert drafts[0].phone == "+1-555-0101"

    def test_instagram_profile(self):
        drafts = parse_vcards(
            "BEGIN:VCARD\nFN:Ann Lee\n"
            "X-SOCIALPROFILE;TYPE=instagram:https://instagram.com/ann.lee/\nEND:VCARD"
        )
        assert drafts[0].instagram == "ann.lee"

    def test_escaped_values(self):
        drafts = parse_vcards("BEGIN:VCARD\nFN:Smith\\, Jr. Bob\nEND:VCARD")
        assert drafts[0].first_name == "Smith,"

    def test_empty_cards_skipped(self):
        drafts = parse_vcards(
            "BEGIN:VCARD\nVERSION:3.0\nEND:VCARD\nBEGIN:VCARD\nFN:Real Person\nEND:VCARD"
        )
        assert [d.first_name for d in drafts] == ["Real"]

    def test_plain_text_fallback(self):
        drafts = parse_vcards("Jane Doe\njane@example.com")
        assert len(drafts) == 1
        assert drafts[0].source == "text"
        assert drafts[0].email == "jane@example.com"

    def test_nothing_usable(self):
        assert parse_vcards("") == []


class TestScreenshotText:
    OCR_OUTPUT = (
        "9:41 LTE 100%\n"
        "Contacts\n"
        "Edit\n"
        "JD\n"
        "Jane Doe\n"
        "message\n"
        "call\n"
        "mobile\n"
        "+1 555 010 0199\n"
        "home jane@example.com\n"
        "@jane.doe\n"
        "Share Contact\n"
    )

    def test_status_bar_and_labels_removed(self):
        lines = clean_screenshot_lines(self.OCR_OUTPUT)
        assert "9:41 LTE 100%" not in lines
        assert "JD" not in lines
        assert "message" not in lines
        assert "Share Contact" not in lines
        assert "jane@example.com" in lines

    def test_parse(self):
        draft = parse_screenshot_text(self.OCR_OUTPUT)
        assert (draft.first_name, draft.last_name) == ("Jane", "Doe")
        assert draft.source == "screenshot"
        assert draft.phone == "+1 555 010 0199"
        assert draft.email == "jane@example.com"
        assert draft.instagram == "jane.doe"

    def test_name_from_first_clean_line(self):
        draft = parse_screenshot_text("9:41\nJane Doe\nmobile +1 555 010 0199")
        assert (draft.first_name, draft.last_name) == ("Jane", "Doe")
        assert draft.phone == "+1 555 010 0199"
        assert draft.instagram is None

    def test_email_is_not_a_handle(self):
        draft = parse_screenshot_text("Jane Doe\njane@example.com")
        assert draft.instagram is None


class TestOCR:
    def test_unreadable_image(self):
        with pytest.raises(OCRError):
            ocr_image(b"definitely not an image")

    def test_extract_runs_tesseract_on_preprocessed_image(self, png_bytes):
        with patch("kinship.extraction.screenshot.pytesseract.image_to_string",
                   return_value="Jane Doe\njane@example.com\n") as tesseract:
            draft, text = extract_from_screenshot(png_bytes(size=(300, 600)))
        image = tesseract.call_args.args[0]
        assert image.mode == "L"
        # small screenshots are upscaled before recognition
        assert image.width == 1000
        assert text == "Jane Doe\njane@example.com\n"
        assert draft.first_name == "Jane"
        assert draft.email == "jane@example.com"

    def test_missing_tesseract(self, png_bytes):
        from pytesseract import TesseractNotFoundError
        with patch("kinship.extraction.screenshot.pytesseract.image_to_string",
                   side_effect=TesseractNotFoundError()):
            with pytest.raises(OCRError, match="not installed"):
                extract_from_screenshot(png_bytes())
