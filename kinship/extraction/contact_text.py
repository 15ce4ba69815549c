"""Best-effort extraction of contact fields from free-form text.

Handles the text people paste from a phone's "share contact" sheet,
a signature block, or a note: a name on the first line, then phone
numbers and email addresses in any order.
"""

import re
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class ContactDraft:
    """Contact fields extracted from an import source."""

    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    instagram: Optional[str] = None
    source: str = "text"

    def is_empty(self) -> bool:
        return not (self.first_name or self.phone or self.email)

    def to_dict(self) -> dict:
        return asdict(self)


NAME_PATTERN = re.compile(r"^([A-Za-z]+)\s+([A-Za-z\s]+)$")
# characters that rule a first line out as a name
NOT_NAME_PATTERN = re.compile(r"[\d\-()]")
PHONE_PATTERN = re.compile(r"[+]?[\d\s\-()]{7,}")
PHONE_STRIP_PATTERN = re.compile(r"[^\d+\-()\s]")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
INSTAGRAM_HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9._]+$")


def split_name(full_name: str) -> tuple[str, str]:
    """Split a display name into first name and the rest."""
    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def _clean_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_name_line(line: str) -> tuple[str, str]:
    match = NAME_PATTERN.match(line)
    if match:
        return match.group(1), " ".join(match.group(2).split())
    if "@" not in line and not NOT_NAME_PATTERN.search(line):
        return split_name(line)
    return "", ""


def find_phone(lines: list[str]) -> str:
    for line in lines:
        if PHONE_PATTERN.search(line):
            return PHONE_STRIP_PATTERN.sub("", line).strip()
    return ""


def find_email(lines: list[str]) -> str:
    for line in lines:
        match = EMAIL_PATTERN.search(line)
        if match:
            return match.group(0)
    return ""


def parse_contact_text(text: str, source: str = "text") -> ContactDraft:
    """Extract name, phone and email from pasted contact text.

    The first line is treated as the name when it looks like one;
    the first phone-like line and the first email address win.

    Args:
        text: Raw text, one field per line.
        source: Label recorded on the draft.

    Returns:
        The extracted draft; fields that could not be found are empty.
    """
    lines = _clean_lines(text)
    draft = ContactDraft(source=source)
    if not lines:
        return draft

    draft.first_name, draft.last_name = parse_name_line(lines[0])
    draft.phone = find_phone(lines)
    draft.email = find_email(lines)
    return draft


def normalize_instagram_handle(username: str) -> str:
    handle = username.strip()
    if handle.startswith("@"):
        handle = handle[1:]
    return handle.strip()


def parse_instagram_username(username: str) -> ContactDraft:
    """Guess a name from an Instagram handle such as ``jane.doe`` or ``@john_smith``.

    Raises:
        ValueError: If the handle contains characters Instagram does not allow.
    """
    handle = normalize_instagram_handle(username)
    if not INSTAGRAM_HANDLE_PATTERN.match(handle):
        raise ValueError("Invalid Instagram username")

    parts = [part for part in re.split(r"[._]", handle) if part]
    first_name = parts[0] if parts else handle
    last_name = " ".join(parts[1:])
    return ContactDraft(
        first_name=first_name[:1].upper() + first_name[1:],
        last_name=last_name[:1].upper() + last_name[1:],
        instagram=handle,
        source="instagram",
    )
