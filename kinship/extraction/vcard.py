"""vCard (.vcf) parsing for contact import.

Supports vCard 2.1/3.0/4.0 as exported by iOS, Android and desktop
address books: folded lines, grouped properties (``item1.TEL``),
parameters (``TEL;TYPE=CELL``) and backslash escapes.
"""

import logging
from dataclasses import dataclass, field

from .contact_text import ContactDraft, parse_contact_text, split_name

logger = logging.getLogger(__name__)


@dataclass
class VCardProperty:
    """One unfolded content line of a vCard."""

    name: str
    params: list[str] = field(default_factory=list)
    value: str = ""

    def has_type(self, type_name: str) -> bool:
        wanted = type_name.upper()
        for param in self.params:
            key, _, values = param.partition("=")
            # vCard 2.1 allows bare types such as TEL;CELL
            candidates = values.split(",") if values else [key]
            if wanted in (c.strip().strip('"').upper() for c in candidates):
                return True
        return False


def unfold(content: str) -> list[str]:
    """Join continuation lines (leading space or tab) onto the previous line."""
    lines: list[str] = []
    for raw in content.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        if raw[:1] in (" ", "\t") and lines:
            lines[-1] += raw[1:]
        else:
            lines.append(raw)
    return [line for line in lines if line.strip()]


def unescape(value: str) -> str:
    return (
        value.replace("\\n", " ")
        .replace("\\N", " ")
        .replace("\\,", ",")
        .replace("\\;", ";")
        .replace("\\\\", "\\")
        .strip()
    )


def parse_property(line: str) -> VCardProperty | None:
    head, sep, value = line.partition(":")
    if not sep:
        return None
    parts = head.split(";")
    name = parts[0].split(".")[-1].strip().upper()
    return VCardProperty(name=name, params=parts[1:], value=value.strip())


def _split_cards(lines: list[str]) -> list[list[VCardProperty]]:
    cards: list[list[VCardProperty]] = []
    current: list[VCardProperty] | None = None
    for line in lines:
        upper = line.strip().upper()
        if upper == "BEGIN:VCARD":
            current = []
        elif upper == "END:VCARD":
            if current is not None:
                cards.append(current)
            current = None
        elif current is not None:
            prop = parse_property(line)
            if prop:
                current.append(prop)
    return cards


def _card_to_draft(props: list[VCardProperty]) -> ContactDraft:
    draft = ContactDraft(source="vcard")

    full_name = next((unescape(p.value) for p in props if p.name == "FN" and p.value.strip()), "")
    if full_name:
        draft.first_name, draft.last_name = split_name(full_name)
    else:
        structured = next((p.value for p in props if p.name == "N"), "")
        # N is family;given;additional;prefix;suffix
        pieces = [unescape(piece) for piece in structured.split(";")]
        if len(pieces) > 1:
            draft.first_name = pieces[1]
        if pieces:
            draft.last_name = pieces[0]

    phones = [p for p in props if p.name == "TEL" and p.value]
    cell = next((p for p in phones if p.has_type("CELL")), None)
    chosen = cell or (phones[0] if phones else None)
    if chosen:
        draft.phone = unescape(chosen.value).removeprefix("tel:")

    email = next((p for p in props if p.name == "EMAIL" and p.value), None)
    if email:
        draft.email = unescape(email.value).removeprefix("mailto:")

    for p in props:
        if p.name in ("X-SOCIALPROFILE", "X-INSTAGRAM") and (p.name == "X-INSTAGRAM" or p.has_type("INSTAGRAM")):
            draft.instagram = unescape(p.value).rstrip("/").split("/")[-1].lstrip("@") or None
            break

    return draft


def parse_vcards(content: str) -> list[ContactDraft]:
    """Parse every card in a .vcf payload.

    Content without a ``BEGIN:VCARD`` marker is treated as pasted text
    and yields at most one draft.

    Args:
        content: Decoded file content.

    Returns:
        One draft per card, skipping cards with no usable field.
    """
    lines = unfold(content)
    if not any(line.strip().upper() == "BEGIN:VCARD" for line in lines):
        draft = parse_contact_text(content, source="text")
        return [] if draft.is_empty() else [draft]

    drafts = [_card_to_draft(card) for card in _split_cards(lines)]
    kept = [d for d in drafts if not d.is_empty()]
    logger.info("Parsed %d of %d vCards", len(kept), len(drafts))
    return kept
