"""Helpers composing inline CSS declarations.

Styles are handled as plain text. Composition never rewrites what is already
there: new declarations are appended after a normalised ``; `` separator so
repeated composition stays well-formed.
"""

from __future__ import annotations

from collections.abc import Iterable
import re


_ASPECT_RATIO = re.compile(r"aspect-ratio", re.IGNORECASE)

BOX_LAYOUT: tuple[str, ...] = (
    "position:absolute",
    "top:0",
    "left:0",
    "width:100%",
    "height:100%",
)
FLUID_LAYOUT: tuple[str, ...] = ("width:100%", "max-width:100%", "height:auto")


def has_aspect_ratio(style: str | None) -> bool:
    return bool(style and _ASPECT_RATIO.search(style))


def append_declaration(style: str | None, declaration: str) -> str:
    """Append a single ``property:value;`` declaration to ``style``."""
    declaration = declaration.strip().rstrip(";") + ";"
    base = (style or "").rstrip()
    if not base:
        return declaration
    if not base.endswith(";"):
        base += ";"
    return f"{base} {declaration}"


def with_aspect_ratio(style: str | None, width: int, height: int) -> str:
    """Return ``style`` carrying an ``aspect-ratio`` declaration.

    An existing declaration, whatever its value, is left untouched so the
    function is idempotent.
    """
    if has_aspect_ratio(style):
        return style or ""
    return append_declaration(style, f"aspect-ratio:{width}/{height}")


def with_declarations(style: str | None, declarations: Iterable[str]) -> str:
    """Append ``declarations`` to ``style``, skipping exact duplicates."""
    result = style or ""
    present = set(_split_declarations(result))
    for declaration in declarations:
        key = _normalise_declaration(declaration)
        if not key or key in present:
            continue
        result = append_declaration(result, declaration)
        present.add(key)
    return result


def with_box_layout(style: str | None) -> str:
    """Position an element absolutely over its whole ratio box."""
    return with_declarations(style, BOX_LAYOUT)


def _split_declarations(style: str) -> list[str]:
    return [key for key in (_normalise_declaration(chunk) for chunk in style.split(";")) if key]


def _normalise_declaration(declaration: str) -> str:
    return re.sub(r"\s+", "", declaration).rstrip(";").lower()


__all__ = [
    "BOX_LAYOUT",
    "FLUID_LAYOUT",
    "append_declaration",
    "has_aspect_ratio",
    "with_aspect_ratio",
    "with_box_layout",
    "with_declarations",
]
