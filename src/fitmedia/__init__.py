"""Reserve the on-page footprint of images and embeds in rendered Markdown."""

from __future__ import annotations

from fitmedia.config import FitOptions, normalize_options
from fitmedia.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from fitmedia.dimensions import Dimensions, probe, resolve_dimensions
from fitmedia.exceptions import FitMediaError, FragmentError, ProbeError
from fitmedia.extension import FitMediaExtension
from fitmedia.mutators import fit_fragment, resize_fragment
from fitmedia.rules import RuleInterceptor, fit_media_plugin
from fitmedia.styles import with_aspect_ratio, with_box_layout
from fitmedia.version import get_version


__version__ = get_version()

__all__ = [
    "DiagnosticEmitter",
    "Dimensions",
    "FitMediaError",
    "FitMediaExtension",
    "FitOptions",
    "FragmentError",
    "LoggingEmitter",
    "NullEmitter",
    "ProbeError",
    "RuleInterceptor",
    "__version__",
    "fit_fragment",
    "fit_media_plugin",
    "get_version",
    "normalize_options",
    "probe",
    "resize_fragment",
    "resolve_dimensions",
    "with_aspect_ratio",
    "with_box_layout",
]
