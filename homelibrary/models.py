from dataclasses import dataclass
from enum import Enum


class Field(str, Enum):
    """Canonical book fields. Values are the attribute names on ``Book``."""

    ISBN = "isbn"
    COVER = "cover"
    TITLE = "title"
    AUTHORS = "authors"
    READING_LEVEL = "reading_level"
    LOCATION = "location"
    PUBLISHERS = "publishers"
    PAGES = "pages"
    GENRES = "genres"
    LANGUAGE = "language"
    NOTES = "notes"
    REQUESTED_BY = "requested_by"


# Header spellings seen in real sheets, compared after canonical_header()
HEADER_ALIASES = {
    "isbn": Field.ISBN,
    "cover": Field.COVER,
    "title": Field.TITLE,
    "authors": Field.AUTHORS,
    "author": Field.AUTHORS,
    "readinglevel": Field.READING_LEVEL,
    "level": Field.READING_LEVEL,
    "location": Field.LOCATION,
    "publishers": Field.PUBLISHERS,
    "publisher": Field.PUBLISHERS,
    "pages": Field.PAGES,
    "genres": Field.GENRES,
    "genre": Field.GENRES,
    "language": Field.LANGUAGE,
    "notes": Field.NOTES,
    "requestedby": Field.REQUESTED_BY,
    "requester": Field.REQUESTED_BY,
}

# Write layout: A..K in this order, requester lives in its own later column.
WRITE_ORDER = [
    Field.ISBN,
    Field.COVER,
    Field.TITLE,
    Field.AUTHORS,
    Field.READING_LEVEL,
    Field.LOCATION,
    Field.PUBLISHERS,
    Field.PAGES,
    Field.GENRES,
    Field.LANGUAGE,
    Field.NOTES,
]
LOCATION_COLUMN = "F"
REQUESTED_BY_COLUMN = "L"


@dataclass
class Book:
    isbn: str = ""
    cover: str = ""         # plain URL; the sheet stores it as =IMAGE("...")
    title: str = ""
    authors: str = ""
    reading_level: str = ""
    location: str = ""
    publishers: str = ""
    pages: str = ""
    genres: str = ""
    language: str = ""
    notes: str = ""
    requested_by: str = ""

    @property
    def is_requested(self) -> bool:
        return bool(self.requested_by.strip())

    def get(self, field: Field) -> str:
        return getattr(self, field.value)
