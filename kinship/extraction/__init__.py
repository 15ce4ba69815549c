"""Contact-data extraction: pasted text, vCards, screenshots and group photos."""

from .contact_text import ContactDraft, parse_contact_text, parse_instagram_username
from .vcard import parse_vcards
from .screenshot import OCRError, extract_from_screenshot, parse_screenshot_text
from .faces import FaceRegion, crop_region, detect_face_regions

__all__ = [
    "ContactDraft",
    "FaceRegion",
    "OCRError",
    "crop_region",
    "detect_face_regions",
    "extract_from_screenshot",
    "parse_contact_text",
    "parse_instagram_username",
    "parse_screenshot_text",
    "parse_vcards",
]
