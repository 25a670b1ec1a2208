"""Intrinsic dimension lookup for media sources.

Dimensions come either from explicit ``width``/``height`` attributes or from
reading the image header with Pillow. Remote references are never fetched.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging
from pathlib import Path
import re
from typing import Any
from urllib.parse import unquote, urlparse

from PIL import Image, UnidentifiedImageError

from .config import FitOptions
from .diagnostics import DiagnosticEmitter, record_event
from .exceptions import ProbeError, exception_hint


logger = logging.getLogger(__name__)

_REMOTE_SCHEMES = {"http", "https", "ftp", "data", "blob"}
# ASCII digits only.
_LEADING_DIGITS = re.compile(r"\s*([0-9]+)")


@dataclass(frozen=True, slots=True)
class Dimensions:
    """Pixel size of a media resource."""

    width: int
    height: int

    @property
    def padding_percent(self) -> float:
        """Height expressed as a percentage of the width."""
        return self.height / self.width * 100

    @classmethod
    def from_attributes(cls, width: Any, height: Any) -> Dimensions | None:
        """Build dimensions from raw attribute values when both are usable."""
        parsed_width = parse_dimension(width)
        parsed_height = parse_dimension(height)
        if parsed_width is None or parsed_height is None:
            return None
        return cls(parsed_width, parsed_height)


def parse_dimension(value: Any) -> int | None:
    """Parse a positive integer the way browsers read ``width="640px"``."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    match = _LEADING_DIGITS.match(str(value))
    if match is None:
        return None
    number = int(match.group(1))
    return number if number > 0 else None


def is_remote_source(src: str) -> bool:
    """Return whether ``src`` points outside the local filesystem."""
    if src.startswith("//"):
        return True
    try:
        scheme = urlparse(src).scheme.lower()
    except ValueError:
        return False
    return scheme in _REMOTE_SCHEMES


def candidate_paths(src: str, options: FitOptions) -> list[str]:
    """Return the locations probed for ``src``, most literal first."""
    candidates = [f"{options.img_dir}{src}" if options.img_dir else src]
    unquoted = unquote(src)
    if unquoted != src:
        candidates.append(f"{options.img_dir}{unquoted}" if options.img_dir else unquoted)
    return candidates


def probe(source: str | Path | bytes) -> Dimensions:
    """Read the pixel size of an image file or in-memory buffer.

    Only the header is decoded. Raises :class:`ProbeError` when the resource is
    missing, unreadable, or not an image Pillow understands.
    """
    target: Any = BytesIO(source) if isinstance(source, bytes) else source
    label = "<buffer>" if isinstance(source, bytes) else str(source)
    try:
        with Image.open(target) as image:
            width, height = image.size
    except FileNotFoundError as exc:
        raise ProbeError(f"Media file '{label}' does not exist") from exc
    except UnidentifiedImageError as exc:
        raise ProbeError(f"Media file '{label}' is not a recognised image") from exc
    except (OSError, ValueError) as exc:
        raise ProbeError(f"Unable to read media file '{label}'") from exc
    if width <= 0 or height <= 0:
        raise ProbeError(f"Media file '{label}' reports an empty size")
    return Dimensions(width, height)


def resolve_dimensions(
    src: str | None,
    options: FitOptions,
    *,
    width: Any = None,
    height: Any = None,
    emitter: DiagnosticEmitter | None = None,
) -> Dimensions | None:
    """Resolve the intrinsic size of a media element.

    Attribute values win when ``options.size_from_attributes`` is set and both
    parse as positive integers. Otherwise the source is probed. Every failure
    is reported through ``emitter`` and yields ``None``.
    """
    if options.size_from_attributes:
        declared = Dimensions.from_attributes(width, height)
        if declared is not None:
            return declared

    if not src:
        return None

    if is_remote_source(src):
        record_event(emitter, "remote_source_skipped", {"source": src})
        return None

    failure: ProbeError | None = None
    for candidate in candidate_paths(src, options):
        try:
            return probe(candidate)
        except ProbeError as exc:
            logger.debug("probe of %s failed: %s", candidate, exc)
            failure = failure or exc

    record_event(
        emitter,
        "probe_failed",
        {"source": src, "reason": exception_hint(failure) if failure else None},
    )
    return None


__all__ = [
    "Dimensions",
    "candidate_paths",
    "is_remote_source",
    "parse_dimension",
    "probe",
    "resolve_dimensions",
]
