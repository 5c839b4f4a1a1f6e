"""
Selector-based view over a parsed HTML page.

Extraction code only talks to ``HtmlDocument`` / ``HtmlElement``; the
BeautifulSoup implementation below is the one the services use.
"""
from __future__ import annotations

from typing import List, Optional, Protocol

from bs4 import BeautifulSoup
from bs4.element import Tag


class HtmlElement(Protocol):
    def text(self) -> str: ...

    def attr(self, name: str) -> Optional[str]: ...


class HtmlDocument(Protocol):
    def query_first(self, selector: str) -> Optional[HtmlElement]: ...

    def query_all(self, selector: str) -> List[HtmlElement]: ...


class SoupElement:
    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def text(self) -> str:
        """All descendant text, trimmed."""
        return self._tag.get_text().strip()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        # class/rel come back as lists
        if isinstance(value, list):
            value = " ".join(value)
        return str(value).strip()


class SoupDocument:
    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def from_html(cls, html: str) -> "SoupDocument":
        return cls(BeautifulSoup(html or "", "html.parser"))

    def query_first(self, selector: str) -> Optional[SoupElement]:
        tag = self._soup.select_one(selector)
        return SoupElement(tag) if tag is not None else None

    def query_all(self, selector: str) -> List[SoupElement]:
        return [SoupElement(tag) for tag in self._soup.select(selector)]
