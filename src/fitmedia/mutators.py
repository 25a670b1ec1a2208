"""Attribute and style mutations applied to matched media elements.

Two policies exist. *Resize* stamps loading hints, intrinsic dimensions and an
``aspect-ratio`` declaration on images in place. *Fit* handles embedded
players: the ``wrap`` strategy moves the element into a padding-ratio box,
the ``fluid`` strategy keeps it in place and lets it span the line.

Fragment-level functions return the re-serialised markup when at least one
element changed and ``None`` otherwise, so callers can keep the original
bytes untouched.
"""

from __future__ import annotations

from .config import FitOptions
from .diagnostics import DiagnosticEmitter
from .dimensions import Dimensions, resolve_dimensions
from .fragments import ElementView, Fragment, TagView
from .styles import FLUID_LAYOUT, with_aspect_ratio, with_box_layout, with_declarations


def _format_percent(value: float) -> str:
    formatted = f"{value:.4f}"
    return formatted.rstrip("0").rstrip(".") or "0"


def _snapshot(element: ElementView, keys: tuple[str, ...]) -> tuple[str | None, ...]:
    return tuple(element.get(key) for key in keys)


_RESIZE_KEYS = ("loading", "decoding", "style", "width", "height")


def resize_element(
    element: ElementView,
    options: FitOptions,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> bool:
    """Apply the resize policy to a single image, returning whether it changed."""
    before = _snapshot(element, _RESIZE_KEYS)

    if options.img_lazy_load:
        element.set("loading", "lazy")
    hint = options.decoding_hint
    if hint:
        element.set("decoding", hint)

    src = element.get("src")
    if src:
        dimensions = resolve_dimensions(
            src,
            options,
            width=element.get("width"),
            height=element.get("height"),
            emitter=emitter,
        )
        if dimensions is not None:
            if options.aspect_ratio:
                element.set(
                    "style",
                    with_aspect_ratio(element.get("style"), dimensions.width, dimensions.height),
                )
            if options.img_size_hint:
                element.set("width", dimensions.width)
                element.set("height", dimensions.height)

    return _snapshot(element, _RESIZE_KEYS) != before


def resize_fragment(
    markup: str,
    options: FitOptions,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> str | None:
    """Resize every element matching ``options.resize_elements`` in ``markup``."""
    fragment = Fragment.parse(markup, options.html_parser)
    changed = False
    for tag in fragment.select(options.resize_selector):
        changed |= resize_element(TagView(tag), options, emitter=emitter)
    return fragment.serialize() if changed else None


def wrap_element(fragment: Fragment, element: TagView, options: FitOptions) -> bool:
    """Move ``element`` into a padding-ratio box sized from its attributes."""
    dimensions = Dimensions.from_attributes(element.get("width"), element.get("height"))
    if dimensions is None:
        return False

    element.remove("width")
    element.remove("height")
    element.set("style", with_box_layout(element.get("style")))

    wrapper_style = with_declarations(
        None,
        (
            "position:relative",
            "height:0",
            f"padding-bottom:{_format_percent(dimensions.padding_percent)}%",
        ),
    )
    if options.aspect_ratio:
        wrapper_style = with_aspect_ratio(wrapper_style, dimensions.width, dimensions.height)

    attrs = {"style": wrapper_style}
    if options.wrapper_class:
        attrs["class"] = options.wrapper_class
    element.tag.wrap(fragment.new_tag("div", **attrs))
    return True


def fluid_element(element: ElementView, options: FitOptions) -> bool:
    """Keep ``element`` in place and let it scale to the available width."""
    dimensions = Dimensions.from_attributes(element.get("width"), element.get("height"))
    if dimensions is None:
        return False

    before = element.get("style")
    style = before
    if options.aspect_ratio:
        style = with_aspect_ratio(style, dimensions.width, dimensions.height)
    style = with_declarations(style, FLUID_LAYOUT)
    element.set("style", style)
    return style != before


def fit_fragment(markup: str, options: FitOptions) -> str | None:
    """Fit every element matching ``options.fit_elements`` in ``markup``."""
    fragment = Fragment.parse(markup, options.html_parser)
    changed = False
    for tag in fragment.select(options.fit_selector):
        view = TagView(tag)
        if options.fit_strategy == "fluid":
            changed |= fluid_element(view, options)
        else:
            changed |= wrap_element(fragment, view, options)
    return fragment.serialize() if changed else None


__all__ = [
    "fit_fragment",
    "fluid_element",
    "resize_element",
    "resize_fragment",
    "wrap_element",
]
