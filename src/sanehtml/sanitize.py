"""Sanitize entry point."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .engine import FilteringEngine
from .policy import SanitizationPolicy
from .stream import EventStream
from .tokenizer import Tokenizer, TokenizerOpts
from .tokens import ParseError


def sanitize_html(
    html: str | None,
    options: Mapping[str, Any] | None = None,
    *,
    policy: SanitizationPolicy | None = None,
    on_error: Callable[[ParseError], None] | None = None,
) -> str:
    """Return ``html`` with everything outside the policy removed.

    ``options`` is turned into a fresh `SanitizationPolicy` for this call
    (missing keys fall back to `DEFAULTS`); pass ``policy`` instead to reuse a
    prebuilt one. Malformed or hostile input never raises.

    The content of title, textarea, xmp, iframe, noembed and noframes, like
    that of script and style, is always read as raw text. When such a tag is
    disallowed but not a non-text tag, markup inside it comes out escaped
    rather than filtered: ``<iframe><b>x</b></iframe>`` gives
    ``&lt;b&gt;x&lt;/b&gt;``.

    If ``on_error`` is given it receives a `ParseError` for every tokenizer
    problem (category "tokenizer") and for every tag, attribute or URL the
    sanitizer removed (category "security").
    """
    if policy is None:
        policy = SanitizationPolicy.from_options(options)

    engine = FilteringEngine(policy, on_error=on_error)
    stream = EventStream(engine, void_elements=policy.self_closing, on_error=on_error)
    tokenizer = Tokenizer(stream, TokenizerOpts(collect_errors=on_error is not None))
    engine.source = tokenizer
    tokenizer.run("" if html is None else str(html))
    return engine.result()
