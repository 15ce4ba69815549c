"""Contact extraction from screenshots of a phone's contact card.

The image is OCR'd with Tesseract, status-bar and UI chrome is
stripped from the recognized lines, and what remains goes through
the plain-text contact parser.
"""

import io
import logging
import os
import re

import pytesseract
from PIL import Image, ImageOps, ImageStat, UnidentifiedImageError

from .contact_text import ContactDraft, EMAIL_PATTERN, parse_contact_text

logger = logging.getLogger(__name__)

TESSERACT_CMD = os.getenv('TESSERACT_CMD')
OCR_LANG = os.getenv('OCR_LANG', 'eng')
# uniform block of text; contact cards are a single column
OCR_CONFIG = '--psm 6'
MIN_OCR_WIDTH = 1000

if TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = TESSERACT_CMD

# Tokens that make up a phone status bar: clock, carrier, signal, battery
_STATUS_TOKEN = re.compile(
    r"^(?:\d{1,2}:\d{2}(?:\s?[AP]M)?|\d{1,3}%|LTE|5G|4G|3G|E|Wi-?Fi|"
    r"Verizon|AT&T|T-Mobile|Vodafone|Sprint|No\s?Service|[.\-·•|]+)$",
    re.IGNORECASE,
)

# Labels and buttons on iOS/Android contact screens
UI_LABELS = {
    'contacts', 'edit', 'done', 'cancel', 'message', 'call', 'video', 'mail', 'pay',
    'facetime', 'send message', 'share contact', 'add to favorites', 'add to favourites',
    'share my location', 'block this caller', 'add to emergency contacts', 'notes',
    'create new contact', 'add to existing contact', 'contact photo & poster',
    'mobile', 'home', 'work', 'iphone', 'main', 'cell', 'phone', 'email', 'other',
    'text', 'ringtone', 'default', 'more',
}

# Field labels that prefix a value on the same line, e.g. "mobile +1 555 0100"
_LEADING_LABEL = re.compile(
    r"^(?:mobile|home|work|iphone|main|cell|phone|email|other)\s*[:\-]?\s+(?=\S)",
    re.IGNORECASE,
)
_HANDLE = re.compile(r"(?:^|\s)@([A-Za-z0-9._]{1,30})(?![A-Za-z0-9._@])")


class OCRError(Exception):
    """Raised when an image cannot be read or recognized."""


def _is_status_line(line: str) -> bool:
    tokens = line.split()
    return bool(tokens) and all(_STATUS_TOKEN.match(token) for token in tokens)


def _normalize_label(line: str) -> str:
    return re.sub(r"[^a-z& ]", "", line.lower()).strip()


def clean_screenshot_lines(text: str) -> list[str]:
    """Drop status-bar and UI chrome from OCR output, keeping field values."""
    lines = []
    for raw in text.splitlines():
        line = raw.strip()
        # OCR reads avatar initials and icons as one or two stray characters
        if len(line) <= 2:
            continue
        if _is_status_line(line):
            continue
        line = _LEADING_LABEL.sub("", line)
        if _normalize_label(line) in UI_LABELS:
            continue
        lines.append(line)
    return lines


def find_instagram_handle(lines: list[str]) -> str | None:
    for line in lines:
        if EMAIL_PATTERN.search(line):
            continue
        match = _HANDLE.search(line)
        if match:
            return match.group(1)
    return None


def parse_screenshot_text(text: str) -> ContactDraft:
    """Extract contact fields from OCR text of a contact screenshot."""
    lines = clean_screenshot_lines(text)
    handle = find_instagram_handle(lines)
    # a handle line would otherwise be mistaken for the name
    body = [line for line in lines if not (handle and line.lstrip().startswith('@'))]
    draft = parse_contact_text("\n".join(body), source="screenshot")
    draft.instagram = handle
    return draft


def preprocess_for_ocr(image: Image.Image) -> Image.Image:
    """Grayscale, dark-mode inversion, upscaling and contrast stretch."""
    image = ImageOps.exif_transpose(image)
    gray = image.convert('L')
    if ImageStat.Stat(gray).mean[0] < 128:
        # dark mode: Tesseract expects dark text on a light background
        gray = ImageOps.invert(gray)
    if gray.width < MIN_OCR_WIDTH:
        factor = MIN_OCR_WIDTH / gray.width
        gray = gray.resize((MIN_OCR_WIDTH, round(gray.height * factor)), Image.Resampling.LANCZOS)
    return ImageOps.autocontrast(gray)


def ocr_image(content: bytes, lang: str = None) -> str:
    """Run Tesseract over an uploaded image.

    Raises:
        OCRError: If the bytes are not an image or Tesseract fails.
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            prepared = preprocess_for_ocr(img)
    except (UnidentifiedImageError, OSError) as e:
        raise OCRError(f"Unreadable image: {e}") from e

    try:
        text = pytesseract.image_to_string(prepared, lang=lang or OCR_LANG, config=OCR_CONFIG)
    except pytesseract.TesseractNotFoundError as e:
        raise OCRError("Tesseract is not installed") from e
    except (pytesseract.TesseractError, RuntimeError) as e:
        raise OCRError(f"OCR failed: {e}") from e

    logger.debug("OCR recognized %d characters", len(text))
    return text


def extract_from_screenshot(content: bytes) -> tuple[ContactDraft, str]:
    """OCR a screenshot and parse it; returns the draft and the raw text."""
    text = ocr_image(content)
    return parse_screenshot_text(text), text
