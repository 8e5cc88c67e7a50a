from typing import Optional

import requests

from .errors import MissingField, NotFound
from .logging_config import get_logger
from .lookups import google_books, openlibrary
from .models import Book
from .utils import clean_isbn, extract_isbn13_from_text, is_valid_isbn

logger = get_logger(__name__)


class BookLookupService:
    """ISBN -> candidate ``Book`` (no location yet) from public metadata APIs."""

    def __init__(self, google_api_key: Optional[str] = None):
        self.google_api_key = google_api_key or None

    def _providers(self):
        yield "google", lambda s: google_books.by_isbn(s, self.google_api_key)
        yield "openlibrary", openlibrary.by_isbn

    def by_isbn(self, raw: str) -> Book:
        s = (raw or "").strip()
        if not s:
            raise MissingField("isbn", "ISBN is required")
        if not (s.isdigit() and len(s) in (10, 13)):
            found = extract_isbn13_from_text(s)
            if found: s = found
        s = clean_isbn(s)
        if len(s) not in (10, 13) or not is_valid_isbn(s):
            raise MissingField("isbn", f"{raw!r} is not a valid ISBN")

        for name, lookup in self._providers():
            try:
                book = lookup(s)
            except (requests.RequestException, ValueError) as e:
                logger.warning("%s lookup for %s failed: %s", name, s, e)
                continue
            if book and book.title:
                logger.info("Found %s via %s", s, name)
                return book
        raise NotFound(f"No book information found for ISBN {s}")
