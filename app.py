# app.py
# Home Library: browse, add (ISBN lookup), check out and request books.
# The Google Sheet is the system of record; this page only calls homelibrary.Inventory.
# Requires: streamlit, pandas, gspread, google-auth, requests
# Secrets go in .streamlit/secrets.toml (see homelibrary/config.py for the layout).

from dataclasses import asdict
from typing import List

import pandas as pd
import streamlit as st

from homelibrary import (
    Book,
    BookLookupService,
    InventoryError,
    SheetsConfig,
    open_inventory,
)
from homelibrary.logging_config import setup_logging

# ==========================================
# App config
# ==========================================
st.set_page_config(page_title="Home Library", page_icon="📚", layout="wide")
setup_logging()

try:
    CONFIG = SheetsConfig.from_secrets(st.secrets)
except InventoryError as e:
    st.error(str(e))
    st.code(
        "[sheet]\nid = '1AbC...'\nworksheet = 'Inventory'\n\n[gcp_service_account]\n...",
        language="toml",
    )
    st.stop()


@st.cache_resource
def get_inventory():
    return open_inventory(CONFIG)


@st.cache_resource
def get_lookup():
    return BookLookupService(CONFIG.google_books_api_key)


inventory = get_inventory()
lookup = get_lookup()

# Column labels for the catalog table, in sheet order
LABELS = {
    "isbn": "ISBN",
    "title": "Title",
    "authors": "Authors",
    "reading_level": "Reading Level",
    "location": "Location",
    "requested_by": "Requested By",
    "publishers": "Publishers",
    "pages": "Pages",
    "genres": "Genres",
    "language": "Language",
    "notes": "Notes",
    "cover": "Cover",
}


def location_input(label: str, options: List[str], key: str) -> str:
    """Dropdown when the sheet has a validation list, free text otherwise."""
    if options:
        return st.selectbox(label, options=[""] + options, key=key)
    return st.text_input(label, key=key)


def run(action, success: str) -> None:
    try:
        action()
    except InventoryError as e:
        st.error(e.message)
    else:
        st.success(success)
        st.rerun()


# ==========================================
# Sidebar: which library
# ==========================================
sheet_name = st.sidebar.text_input("Library tab", value=CONFIG.inventory_sheet).strip() or CONFIG.inventory_sheet

st.title("📚 Home Library")

try:
    books = inventory.list_books(sheet_name)
except InventoryError as e:
    st.error(f"Could not load books: {e.message}")
    st.stop()

locations = inventory.get_location_options(sheet_name)
requesters = inventory.get_requester_options(sheet_name) or locations

# ==========================================
# Add a book
# ==========================================
st.session_state.setdefault("candidate", None)

with st.expander("➕ Add a book", expanded=False):
    a, b = st.columns([3, 1])
    with a:
        isbn_in = st.text_input("ISBN", key="add_isbn")
    with b:
        st.write("")
        if st.button("Look up", key="btn_lookup"):
            try:
                st.session_state.candidate = lookup.by_isbn(isbn_in)
            except InventoryError as e:
                st.session_state.candidate = None
                st.error(e.message)

    cand: Book | None = st.session_state.candidate
    if cand:
        c1, c2 = st.columns([1, 4])
        with c1:
            if cand.cover:
                st.image(cand.cover)
            else:
                st.caption("No cover")
        with c2:
            st.markdown(f"**{cand.title}**")
            st.caption(" · ".join(p for p in [cand.authors, cand.publishers, cand.pages and f"{cand.pages} pages"] if p))
        cand.reading_level = st.text_input("Reading level", key="add_level")
        cand.location = location_input("Location *", locations, key="add_location")
        cand.notes = st.text_area("Notes", key="add_notes")
        if st.button("Add to library", type="primary", key="btn_add"):
            def _add():
                inventory.add_book(cand, sheet_name)
                st.session_state.candidate = None
            run(_add, f"Added “{cand.title}”")

# ==========================================
# Catalog
# ==========================================
st.divider()
st.subheader("📖 Catalog")

df = pd.DataFrame([asdict(bk) for bk in books], columns=list(LABELS))
f_query = st.text_input("Filter", placeholder="Search title/author/isbn/location/notes")
fdf = df
if f_query:
    ql = f_query.lower()
    mask = pd.Series(False, index=fdf.index)
    for col in ("title", "authors", "isbn", "location", "notes", "genres"):
        mask |= fdf[col].str.lower().str.contains(ql, regex=False)
    fdf = fdf[mask]

st.dataframe(
    fdf.rename(columns=LABELS),
    hide_index=True,
    column_config={"Cover": st.column_config.ImageColumn("Cover")},
)
st.download_button(
    "⬇️ Export CSV",
    data=fdf.to_csv(index=False),
    file_name=f"{sheet_name}.csv",
    mime="text/csv",
)

# ==========================================
# Check out / request
# ==========================================
st.divider()
choices = {f"{bk.title or '(untitled)'} — {bk.isbn}": bk for bk in books}
picked = st.selectbox("Book", options=[""] + list(choices), key="pick_book")
book = choices.get(picked)

if book:
    st.caption(
        f"Currently at **{book.location or '—'}**"
        + (f", requested by **{book.requested_by}**" if book.is_requested else "")
    )
    left, right = st.columns(2)
    with left:
        st.markdown("**Move / check out**")
        new_loc = location_input("New location", locations, key="move_location")
        if st.button("Move", key="btn_move"):
            run(lambda: inventory.move_book(book.isbn, new_loc, sheet_name), f"Moved to {new_loc}")
    with right:
        st.markdown("**Request**")
        who = location_input("Requested by", requesters, key="request_by")
        if st.button("Request", key="btn_request"):
            run(lambda: inventory.request_book(book.isbn, who, sheet_name), f"Requested by {who}")
