"""Translation between raw sheet cells and plain Python values."""

import re
from typing import Any, Optional

from .models import Field, HEADER_ALIASES

IMAGE_FORMULA = re.compile(r'^=\s*IMAGE\(\s*"((?:[^"]|"")*)"', re.IGNORECASE)


def cell_text(value: Any) -> str:
    """Render a cell value as text. Sheets hands back ints/floats for numeric cells."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_blank(value: Any) -> bool:
    return cell_text(value).strip() == ""


def canonical_header(header: Any) -> Optional[Field]:
    """Map a header cell ("ISBN", "isbn", "Reading Level", "requested_by") to its Field."""
    key = re.sub(r"[\s_\-]", "", cell_text(header)).lower()
    return HEADER_ALIASES.get(key)


def encode_cover_cell(url: Optional[str]) -> str:
    """``https://x/c.jpg`` -> ``=IMAGE("https://x/c.jpg")``; nothing in, empty cell out."""
    url = (url or "").strip()
    if not url:
        return ""
    return '=IMAGE("{}")'.format(url.replace('"', '""'))


def decode_cover_cell(text: Any) -> str:
    text = cell_text(text).strip()
    if not text.startswith("="):
        return text
    m = IMAGE_FORMULA.match(text)
    if not m:
        # some other formula; there is no URL we can hand out
        return ""
    return m.group(1).replace('""', '"')


def encode_text_cell(value: Any) -> str:
    """Literal text for a USER_ENTERED write.

    The leading apostrophe stops Sheets from turning ``0306406152`` into a
    number or ``=foo`` into a formula; it is not part of the stored value.
    """
    text = cell_text(value)
    if not text:
        return ""
    return "'" + text
