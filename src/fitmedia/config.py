"""Configuration model shared by every fitmedia hook.

FitOptions

`img_dir` / `imgDir` (`str`)
: Prefix prepended verbatim to image sources before probing them. Leave empty
  to probe sources as written (relative to the working directory).

`img_lazy_load` / `imgLazyLoad` (`bool`)
: Add `loading="lazy"` to processed images. Legacy name: `lazyLoad`.

`img_decoding` / `imgDecoding` (`"auto" | "sync" | "async" | None`)
: Add a `decoding` hint to processed images unless `auto`. Legacy name:
  `decoding`.

`aspect_ratio` / `aspectRatio` (`bool`)
: Inject an `aspect-ratio` declaration into the inline style.

`img_size_hint` / `imgSizeHint` (`bool`)
: Stamp the resolved `width` and `height` attributes on images. Legacy name:
  `sizeHint`.

`resize_elements` / `resizeElements` (`tuple[str, ...]`)
: Selectors resized in place inside raw HTML fragments.

`fit_elements` / `fitWrapElements` (`tuple[str, ...]`)
: Selectors fitted inside raw HTML blocks. Legacy name: `fitElements`.

`fit_strategy` / `fitStrategy` (`"wrap" | "fluid"`)
: `wrap` moves the element into a padding-ratio box; `fluid` keeps it in place
  and makes it span the available width.

`size_from_attributes` / `imgSizeFromAttributes` (`bool`)
: Trust valid `width`/`height` attributes already present on an image instead
  of probing its file.

`html_parser` / `htmlParser` (`str`)
: BeautifulSoup tree builder used for fragments.

`wrapper_class` / `wrapperClass` (`str`)
: Class given to the container created by the `wrap` strategy.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


Decoding = Literal["auto", "sync", "async"]
FitStrategy = Literal["wrap", "fluid"]

# (current name, legacy name) pairs; the current name always wins.
LEGACY_ALIASES: tuple[tuple[str, str], ...] = (
    ("imgLazyLoad", "lazyLoad"),
    ("imgDecoding", "decoding"),
    ("imgSizeHint", "sizeHint"),
    ("fitWrapElements", "fitElements"),
)


class FitOptions(BaseModel):
    """Immutable options record built once per renderer installation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    img_dir: str = Field(default="", alias="imgDir")
    img_lazy_load: bool = Field(default=True, alias="imgLazyLoad")
    img_decoding: Decoding | None = Field(default="auto", alias="imgDecoding")
    aspect_ratio: bool = Field(default=True, alias="aspectRatio")
    img_size_hint: bool = Field(default=True, alias="imgSizeHint")
    resize_elements: tuple[str, ...] = Field(default=("img",), alias="resizeElements")
    fit_elements: tuple[str, ...] = Field(default=("iframe", "video"), alias="fitWrapElements")
    fit_strategy: FitStrategy = Field(default="wrap", alias="fitStrategy")
    size_from_attributes: bool = Field(default=True, alias="imgSizeFromAttributes")
    html_parser: str = Field(default="html.parser", alias="htmlParser")
    wrapper_class: str = Field(default="fit-media-box", alias="wrapperClass")

    @model_validator(mode="before")
    @classmethod
    def _resolve_legacy_aliases(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        payload = dict(data)
        for current, legacy in LEGACY_ALIASES:
            field_name = cls._field_for_alias(current)
            legacy_value = payload.pop(legacy, None)
            if payload.get(current) is not None or payload.get(field_name) is not None:
                continue
            if legacy_value is not None:
                payload[current] = legacy_value
        return payload

    @classmethod
    def _field_for_alias(cls, alias: str) -> str:
        for name, info in cls.model_fields.items():
            if info.alias == alias:
                return name
        return alias

    @property
    def decoding_hint(self) -> str | None:
        """Return the decoding attribute value to stamp, if any."""
        if self.img_decoding and self.img_decoding != "auto":
            return self.img_decoding
        return None

    @property
    def resize_selector(self) -> str:
        return ", ".join(self.resize_elements)

    @property
    def fit_selector(self) -> str:
        return ", ".join(self.fit_elements)


def normalize_options(
    options: FitOptions | Mapping[str, Any] | None = None, **overrides: Any
) -> FitOptions:
    """Merge caller options over the defaults and return a frozen record."""
    overrides = {_alias_for_field(key): value for key, value in overrides.items()}
    if isinstance(options, FitOptions):
        if not overrides:
            return options
        payload: dict[str, Any] = options.model_dump(by_alias=True)
        # Overrides may use legacy names that must beat the stored current value.
        for current, legacy in LEGACY_ALIASES:
            if legacy in overrides and current not in overrides:
                payload.pop(current, None)
    else:
        payload = dict(options or {})
    payload.update(overrides)
    return FitOptions.model_validate(payload)


def _alias_for_field(key: str) -> str:
    info = FitOptions.model_fields.get(key)
    if info is not None and info.alias:
        return info.alias
    return key


__all__ = ["Decoding", "FitOptions", "FitStrategy", "LEGACY_ALIASES", "normalize_options"]
