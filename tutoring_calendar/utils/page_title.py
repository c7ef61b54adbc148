# tutoring_calendar/utils/page_title.py
"""
Page title store.

One store per request (see ``get_page_title``); pages set their own title
inside ``scoped()`` and the default comes back when the scope ends.
"""

from contextlib import contextmanager
from typing import Iterator

from fastapi import Request

from ..config import get_settings


class PageTitleStore:
    def __init__(self, default: str):
        self.default = default
        self._title = default

    def get(self) -> str:
        return self._title

    def set(self, title: str) -> None:
        self._title = title

    def reset(self) -> None:
        self._title = self.default

    @contextmanager
    def scoped(self, title: str) -> Iterator["PageTitleStore"]:
        previous = self._title
        self._title = title
        try:
            yield self
        finally:
            self._title = previous


def get_page_title(request: Request) -> PageTitleStore:
    """FastAPI dependency: the request's own title store."""
    store = getattr(request.state, "page_title", None)
    if store is None:
        store = PageTitleStore(get_settings().default_page_title)
        request.state.page_title = store
    return store
