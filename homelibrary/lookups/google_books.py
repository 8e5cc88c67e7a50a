from typing import Optional
import requests

from ..models import Book
from ..utils import safe_url

ENDPOINT = "https://www.googleapis.com/books/v1/volumes"
TIMEOUT = 10

def best_cover_link(image_links: dict) -> str:
    links = image_links or {}
    for key in ("extraLarge", "large", "medium", "small", "thumbnail", "smallThumbnail"):
        url = safe_url(links.get(key))
        if url:
            return url
    return ""

def by_isbn(isbn: str, api_key: Optional[str] = None) -> Optional[Book]:
    params = {"q": f"isbn:{isbn}", "maxResults": 1, "printType": "books"}
    if api_key:
        params["key"] = api_key
    r = requests.get(ENDPOINT, params=params, timeout=TIMEOUT)
    if not r.ok: return None
    items = r.json().get("items", []) or []
    if not items: return None
    info = items[0].get("volumeInfo", {}) or {}
    pages = info.get("pageCount")
    return Book(
        isbn=isbn,
        cover=best_cover_link(info.get("imageLinks")),
        title=info.get("title", ""),
        authors=", ".join(info.get("authors", []) or []),
        publishers=info.get("publisher", ""),
        pages=str(pages) if pages else "",
        genres=", ".join(info.get("categories", []) or []),
        language=info.get("language", ""),
    )
