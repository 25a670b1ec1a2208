"""Render-rule interception for markdown-it-py.

Each :class:`RuleInterceptor` replaces one entry of ``RendererHTML.rules`` and
keeps the rule it replaced as its fallback. Before delegating, the interceptor
lets its mutation rewrite the token (the raw ``content`` of HTML passthrough
tokens, or the ``attrs`` of image tokens). Because every interceptor delegates
to the one installed before it, stacking several installations composes their
mutations and the built-in rule at the bottom still produces the markup.

A failing mutation never escapes: the token is restored, a diagnostic is
emitted, and the fallback renders the original token.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import logging
from typing import TYPE_CHECKING, Any

from .config import FitOptions, normalize_options
from .diagnostics import DiagnosticEmitter, LoggingEmitter, record_event
from .exceptions import exception_hint
from .fragments import TokenView
from .mutators import fit_fragment, resize_element, resize_fragment


if TYPE_CHECKING:  # pragma: no cover - typing only
    from markdown_it import MarkdownIt
    from markdown_it.token import Token


logger = logging.getLogger(__name__)

RenderFunction = Callable[[Sequence["Token"], int, Any, Any], str]
TokenMutation = Callable[["Token", FitOptions, DiagnosticEmitter], bool]

HTML_INLINE = "html_inline"
HTML_BLOCK = "html_block"
IMAGE = "image"


def resize_html_token(token: Token, options: FitOptions, emitter: DiagnosticEmitter) -> bool:
    """Resize images found in the raw HTML carried by ``token``."""
    replacement = resize_fragment(token.content, options, emitter=emitter)
    if replacement is None:
        return False
    token.content = replacement
    return True


def fit_html_token(token: Token, options: FitOptions, emitter: DiagnosticEmitter) -> bool:
    """Fit embedded players found in the raw HTML carried by ``token``."""
    replacement = fit_fragment(token.content, options)
    if replacement is None:
        return False
    token.content = replacement
    return True


def resize_image_token(token: Token, options: FitOptions, emitter: DiagnosticEmitter) -> bool:
    """Resize a native Markdown image token through its attributes."""
    return resize_element(TokenView(token), options, emitter=emitter)


def _builtin_fallback(renderer: Any, rule: str) -> RenderFunction:
    if rule in (HTML_INLINE, HTML_BLOCK):
        return lambda tokens, idx, options, env: tokens[idx].content
    return lambda tokens, idx, options, env: renderer.renderToken(tokens, idx, options, env)


class RuleInterceptor:
    """Wrap one render rule with a token mutation."""

    def __init__(
        self,
        rule: str,
        mutation: TokenMutation,
        options: FitOptions,
        *,
        fallback: RenderFunction,
        emitter: DiagnosticEmitter,
    ) -> None:
        self.rule = rule
        self.mutation = mutation
        self.options = options
        self.fallback = fallback
        self.emitter = emitter

    @classmethod
    def install(
        cls,
        md: MarkdownIt,
        rule: str,
        mutation: TokenMutation,
        options: FitOptions,
        *,
        emitter: DiagnosticEmitter,
    ) -> RuleInterceptor:
        """Replace ``rule`` on the renderer of ``md``, chaining to the current one."""
        renderer = md.renderer
        if getattr(renderer, "__output__", None) != "html":
            msg = "fitmedia can only intercept rules of an HTML renderer"
            raise TypeError(msg)
        previous = renderer.rules.get(rule)
        fallback = previous if previous is not None else _builtin_fallback(renderer, rule)
        interceptor = cls(rule, mutation, options, fallback=fallback, emitter=emitter)
        md.add_render_rule(rule, interceptor.as_rule())
        return interceptor

    def apply(self, token: Token) -> bool:
        """Run the mutation on ``token``, restoring it when the mutation fails."""
        saved_attrs = dict(token.attrs)
        saved_content = token.content
        try:
            return self.mutation(token, self.options, self.emitter)
        except Exception as exc:
            token.attrs = saved_attrs
            token.content = saved_content
            hint = exception_hint(exc)
            self.emitter.warning(f"Failed to fit media in '{self.rule}' token: {hint}", exc)
            record_event(self.emitter, "fragment_fallback", {"rule": self.rule, "reason": hint})
            return False

    def render(self, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
        if self.apply(tokens[idx]):
            logger.debug("mutated %s token %d", self.rule, idx)
        return self.fallback(tokens, idx, options, env)

    def as_rule(self) -> Callable[..., str]:
        """Return a render rule with the ``(renderer, tokens, idx, options, env)`` signature."""

        def rule(renderer: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
            return self.render(tokens, idx, options, env)

        rule.__name__ = f"fitmedia_{self.rule}"
        return rule


def fit_media_plugin(
    md: MarkdownIt,
    options: FitOptions | Mapping[str, Any] | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
    **overrides: Any,
) -> None:
    """markdown-it-py plugin reserving the footprint of images and embeds.

    Usage::

        md = MarkdownIt("commonmark").use(fit_media_plugin, imgDir="docs/")
    """
    fit_options = normalize_options(options, **overrides)
    active_emitter = emitter if emitter is not None else LoggingEmitter()

    for rule, mutation in (
        (HTML_INLINE, resize_html_token),
        (HTML_BLOCK, resize_html_token),
        (IMAGE, resize_image_token),
        (HTML_BLOCK, fit_html_token),
    ):
        RuleInterceptor.install(md, rule, mutation, fit_options, emitter=active_emitter)


__all__ = [
    "RuleInterceptor",
    "fit_html_token",
    "fit_media_plugin",
    "resize_html_token",
    "resize_image_token",
]
