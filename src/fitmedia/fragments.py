"""Parsing helpers and attribute views over intercepted markup."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Protocol

from bs4 import BeautifulSoup, FeatureNotFound
from bs4.element import Tag

from .exceptions import FragmentError


class ElementView(Protocol):
    """Attribute access shared by DOM tags and renderer tokens."""

    @property
    def name(self) -> str: ...

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str | int) -> None: ...

    def remove(self, key: str) -> None: ...


def coerce_attribute(value: Any) -> str | None:
    """Normalise an attribute value to a string when possible."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(value, Iterable):
        return " ".join(str(item) for item in value)
    return str(value)


class TagView:
    """View over a BeautifulSoup tag."""

    __slots__ = ("tag",)

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    @property
    def name(self) -> str:
        return self.tag.name

    def get(self, key: str) -> str | None:
        return coerce_attribute(self.tag.get(key))

    def set(self, key: str, value: str | int) -> None:
        self.tag[key] = str(value)

    def remove(self, key: str) -> None:
        if key in self.tag.attrs:
            del self.tag[key]


class TokenView:
    """View over a markdown-it token carrying ``attrs``."""

    __slots__ = ("token",)

    def __init__(self, token: Any) -> None:
        self.token = token

    @property
    def name(self) -> str:
        return self.token.tag

    def get(self, key: str) -> str | None:
        return coerce_attribute(self.token.attrGet(key))

    def set(self, key: str, value: str | int) -> None:
        self.token.attrSet(key, str(value))

    def remove(self, key: str) -> None:
        self.token.attrs.pop(key, None)


class ElementTreeView:
    """View over an :mod:`xml.etree.ElementTree` element."""

    __slots__ = ("element",)

    def __init__(self, element: Any) -> None:
        self.element = element

    @property
    def name(self) -> str:
        return self.element.tag

    def get(self, key: str) -> str | None:
        return coerce_attribute(self.element.get(key))

    def set(self, key: str, value: str | int) -> None:
        self.element.set(key, str(value))

    def remove(self, key: str) -> None:
        self.element.attrib.pop(key, None)


def matches_selector(name: str, attrs: dict[str, str], selector: str) -> bool:
    """Match a detached element against ``selector``.

    The element has no parents or siblings, so combinators never match.
    """
    if not selector.strip():
        return False
    tag = BeautifulSoup("", "html.parser").new_tag(name, attrs=dict(attrs))
    try:
        return bool(tag.css.match(selector))
    except Exception as exc:
        raise FragmentError(f"Invalid selector '{selector}'") from exc


class Fragment:
    """A parsed markup fragment that can be queried and serialised back."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @classmethod
    def parse(cls, markup: str, parser: str = "html.parser") -> Fragment:
        try:
            soup = BeautifulSoup(markup, parser)
        except FeatureNotFound:
            if parser == "html.parser":
                raise
            # Fall back to the built-in parser when the preferred backend is missing.
            soup = BeautifulSoup(markup, "html.parser")
        except Exception as exc:
            raise FragmentError("Unable to parse markup fragment") from exc
        return cls(soup)

    def select(self, selector: str) -> Iterator[Tag]:
        if not selector.strip():
            return iter(())
        try:
            return iter(self.soup.select(selector))
        except Exception as exc:
            raise FragmentError(f"Invalid selector '{selector}'") from exc

    def new_tag(self, name: str, **attrs: str) -> Tag:
        return self.soup.new_tag(name, attrs=attrs)

    def serialize(self) -> str:
        # lxml and html5lib wrap fragments in a synthetic document.
        body = self.soup.body
        if body is not None and self.soup.html is not None and _is_synthetic(self.soup):
            return body.decode_contents()
        return self.soup.decode()


def _is_synthetic(soup: BeautifulSoup) -> bool:
    builder = getattr(soup, "builder", None)
    return getattr(builder, "NAME", "html.parser") != "html.parser"


__all__ = [
    "ElementTreeView",
    "ElementView",
    "Fragment",
    "TagView",
    "TokenView",
    "coerce_attribute",
    "matches_selector",
]
