from typing import Optional
import requests

from ..models import Book

BASE = "https://openlibrary.org"
COVERS = "https://covers.openlibrary.org/b/id/{}-L.jpg"
TIMEOUT = 10

def _author_names(refs: list) -> list[str]:
    names = []
    for a in refs or []:
        key = (a.get("author") or a).get("key") if isinstance(a, dict) else None
        if not key:
            continue
        ar = requests.get(f"{BASE}{key}.json", timeout=TIMEOUT)
        if ar.ok:
            name = ar.json().get("name", "")
            if name:
                names.append(name)
    return names

def by_isbn(isbn: str) -> Optional[Book]:
    r = requests.get(f"{BASE}/isbn/{isbn}.json", timeout=TIMEOUT)
    if not r.ok: return None
    data = r.json()
    publishers = data.get("publishers", [])
    covers = [c for c in data.get("covers", []) or [] if isinstance(c, int) and c > 0]
    # "/languages/eng" -> "eng"
    languages = [l.get("key", "").rsplit("/", 1)[-1] for l in data.get("languages", []) or []]
    pages = data.get("number_of_pages")
    return Book(
        isbn=isbn,
        cover=COVERS.format(covers[0]) if covers else "",
        title=data.get("title", ""),
        authors=", ".join(_author_names(data.get("authors", []))),
        publishers=", ".join(publishers) if isinstance(publishers, list) else (publishers or ""),
        pages=str(pages) if pages else "",
        genres=", ".join(data.get("subjects", []) or []),
        language=", ".join(l for l in languages if l),
    )
