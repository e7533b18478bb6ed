from __future__ import annotations

from collections.abc import Iterable

from ..models.contact_record import ContactRecord

"""vCard 3.0 serialization.

Output layout per card (absent fields emit no line):

    BEGIN:VCARD
    VERSION:3.0
    FN:<full name>
    N:<full name>;;;;
    TEL;TYPE=CELL|WORK|HOME:<number>      (one line per phone, held order)
    EMAIL:<email>
    ORG:<organization>
    TITLE:<title>
    ADR:;;<address>;;;;
    CATEGORIES:<category>
    END:VCARD
    <blank line>

Values are written verbatim unless ``escape=True`` is requested, in which
case backslashes, commas, semicolons and newlines are escaped per RFC 6350
section 3.4.
"""

__all__ = [
    "VCARD_VERSION",
    "escape_text",
    "render_card",
    "serialize",
]

VCARD_VERSION = "3.0"
LINE_END = "\n"


def escape_text(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace("\r", "\\n")
        .replace(",", "\\,")
        .replace(";", "\\;")
    )


def _card_lines(record: ContactRecord, escape: bool) -> list[str]:
    def v(value: str) -> str:
        return escape_text(value) if escape else value

    lines = ["BEGIN:VCARD", f"VERSION:{VCARD_VERSION}"]
    if record.full_name:
        # N は分割せず氏名全体を姓フィールドへ
        lines.append(f"FN:{v(record.full_name)}")
        lines.append(f"N:{v(record.full_name)};;;;")
    for phone in record.phones:
        lines.append(f"TEL;TYPE={phone.label.value}:{v(phone.value)}")
    if record.email:
        lines.append(f"EMAIL:{v(record.email)}")
    if record.organization:
        lines.append(f"ORG:{v(record.organization)}")
    if record.title:
        lines.append(f"TITLE:{v(record.title)}")
    if record.address:
        lines.append(f"ADR:;;{v(record.address)};;;;")
    if record.category:
        lines.append(f"CATEGORIES:{v(record.category)}")
    lines.append("END:VCARD")
    return lines


def render_card(record: ContactRecord, *, escape: bool = False) -> str:
    """Render one card, terminated by END:VCARD and a blank line."""
    return LINE_END.join(_card_lines(record, escape)) + LINE_END + LINE_END


def serialize(records: Iterable[ContactRecord], *, escape: bool = False) -> str:
    """Serialize records to vCard 3.0 text, one card per record in input order."""
    return "".join(render_card(record, escape=escape) for record in records)
