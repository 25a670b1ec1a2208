"""Python-Markdown extension applying the resize policy to rendered images."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any
from xml.etree import ElementTree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .config import FitOptions, normalize_options
from .diagnostics import DiagnosticEmitter, LoggingEmitter, record_event
from .exceptions import exception_hint
from .fragments import ElementTreeView, matches_selector
from .mutators import resize_element, resize_fragment


logger = logging.getLogger(__name__)


class _FitMediaTreeprocessor(Treeprocessor):
    """Resize native ``<img>`` nodes and images inside stashed raw HTML."""

    def __init__(self, md: Markdown, options: FitOptions, emitter: DiagnosticEmitter) -> None:
        super().__init__(md)
        self.options = options
        self.emitter = emitter

    def run(self, root: ElementTree.Element) -> None:  # type: ignore[override]
        for element in root.iter():
            if not isinstance(element.tag, str):
                continue
            try:
                if not matches_selector(element.tag, element.attrib, self.options.resize_selector):
                    continue
                resize_element(ElementTreeView(element), self.options, emitter=self.emitter)
            except Exception as exc:
                self._report("image", exc)

        stash = self.md.htmlStash
        for index, raw in enumerate(stash.rawHtmlBlocks):
            if not isinstance(raw, str):
                continue
            try:
                replacement = resize_fragment(raw, self.options, emitter=self.emitter)
            except Exception as exc:
                self._report("raw_html", exc)
                continue
            if replacement is not None:
                stash.rawHtmlBlocks[index] = replacement

    def _report(self, rule: str, exc: Exception) -> None:
        hint = exception_hint(exc)
        self.emitter.warning(f"Failed to fit media in '{rule}' node: {hint}", exc)
        record_event(self.emitter, "fragment_fallback", {"rule": rule, "reason": hint})


class FitMediaExtension(Extension):
    """Register the media fitting treeprocessor on the Markdown pipeline."""

    def __init__(
        self,
        options: FitOptions | Mapping[str, Any] | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
        **config: Any,
    ) -> None:
        self.options = normalize_options(options, **config)
        self.emitter = emitter if emitter is not None else LoggingEmitter()
        super().__init__()

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        processor = _FitMediaTreeprocessor(md, self.options, self.emitter)
        # After attr_list (8) so ``{: width=... }`` is visible, before unescape (0).
        md.treeprocessors.register(processor, "fitmedia", 5)


def makeExtension(**kwargs: Any) -> FitMediaExtension:  # noqa: N802
    return FitMediaExtension(**kwargs)


__all__ = ["FitMediaExtension", "makeExtension"]
