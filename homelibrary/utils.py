"""ISBN and URL helpers for the lookup service."""

import re
from typing import Optional

ISBN13_PREFIXES = ("978", "979")


def clean_isbn(raw: str) -> str:
    """Keep digits and the ISBN-10 check character ``X``: ``0-306-40615-x`` -> ``030640615X``."""
    return re.sub(r"[^0-9X]", "", (raw or "").upper())


def validate_isbn13(isbn13: str) -> bool:
    if len(isbn13) != 13 or not isbn13.isdigit():
        return False
    # weights alternate 1, 3 over the first twelve digits
    weighted = sum(int(d) * (3 if i % 2 else 1) for i, d in enumerate(isbn13[:12]))
    return (10 - weighted % 10) % 10 == int(isbn13[12])


def validate_isbn10(isbn10: str) -> bool:
    if len(isbn10) != 10 or not isbn10[:9].isdigit():
        return False
    expected = sum(pos * int(d) for pos, d in enumerate(isbn10[:9], start=1)) % 11
    check = isbn10[9]
    if check == "X":
        return expected == 10
    return check.isdigit() and int(check) == expected


def is_valid_isbn(isbn: str) -> bool:
    return validate_isbn13(isbn) if len(isbn) == 13 else validate_isbn10(isbn)


def extract_isbn13_from_text(text: str) -> Optional[str]:
    """First checksum-valid 13-digit run in ``text``, Bookland prefixes tried first.

    Barcode scanners and pasted text often wrap the ISBN in other digits.
    """
    if not text:
        return None
    runs = re.findall(r"\d{13}", text)
    runs.sort(key=lambda run: not run.startswith(ISBN13_PREFIXES))
    return next((run for run in runs if validate_isbn13(run)), None)


def safe_url(url: Optional[str]) -> str:
    """``https`` version of an absolute http(s) URL, or ``""``."""
    if not isinstance(url, str):
        return ""
    url = url.strip()
    if url.lower().startswith(("http://", "https://")) and len(url) > 7:
        return url.replace("http://", "https://", 1)
    return ""
