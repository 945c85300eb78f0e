"""The filtering engine.

`FilteringEngine` is an `EventStream` handler. It keeps one `Frame` per open
element, allowed or not, so every close event pops exactly the frame its open
event pushed; the allow decision only controls what gets written.

Output is a list of chunks. The only edit ever made to already-written output
is a content function replacing everything its own tag wrote since opening,
and because closes arrive innermost first those edits never overlap.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .attributes import sanitize_attributes
from .policy import SanitizationPolicy
from .serialize import escape_html, serialize_end_tag, serialize_start_tag
from .tokens import ElementState, ParseError, TokenSinkResult


class Frame:
    __slots__ = ("allowed", "attributes", "name", "suppress_text", "transform_start")

    def __init__(self, name: str, allowed: bool, suppress_text: bool = False) -> None:
        self.name = name
        self.allowed = allowed
        # Set when this element or an ancestor is a dropped non-text container.
        self.suppress_text = suppress_text
        # Output chunk index where a content function's input begins.
        self.transform_start: int | None = None
        self.attributes: Mapping[str, str] | None = None

    def __repr__(self) -> str:
        flags = []
        if not self.allowed:
            flags.append("disallowed")
        if self.suppress_text:
            flags.append("suppressed")
        if self.transform_start is not None:
            flags.append(f"transform@{self.transform_start}")
        return f"<Frame {self.name} {' '.join(flags)}>".replace(" >", ">")


class FilteringEngine:
    __slots__ = ("on_error", "output", "policy", "raw_start", "raw_tag", "source", "stack")

    def __init__(
        self,
        policy: SanitizationPolicy,
        source: Any = None,
        on_error: Callable[[ParseError], None] | None = None,
    ) -> None:
        self.policy = policy
        # Anything with source_slice(start, end); the tokenizer in practice.
        self.source = source
        self.on_error = on_error
        self.stack: list[Frame] = []
        self.output: list[str] = []
        # Raw capture: the tag whose inner source is being skipped, and the
        # source offset just past its start tag.
        self.raw_tag: str | None = None
        self.raw_start = 0

    def result(self) -> str:
        return "".join(self.output)

    def open_tag(self, name: str, attrs: Mapping[str, str], source_end: int) -> int | None:
        if self.raw_tag is not None:
            return None

        policy = self.policy
        stack = self.stack
        allowed = name in policy.allowed_tags
        inherited = bool(stack) and stack[-1].suppress_text
        frame = Frame(name, allowed, inherited or (not allowed and name in policy.non_text_tags))
        stack.append(frame)

        if not allowed:
            if not inherited:
                if frame.suppress_text:
                    self._report("dropped-content", f"Unsafe tag '{name}' (dropped content)")
                else:
                    self._report("disallowed-tag", f"Unsafe tag '{name}' (not allowed)")
        elif not frame.suppress_text:
            attributes = sanitize_attributes(name, attrs, policy, self._report)
            if name in policy.self_closing:
                self.output.append(serialize_start_tag(name, attributes, self_closing=True))
            else:
                self.output.append(serialize_start_tag(name, attributes))
                if name in policy.content_functions:
                    frame.transform_start = len(self.output)
                    frame.attributes = attributes

        if name in policy.dont_parse:
            self.raw_tag = name
            self.raw_start = source_end
            return TokenSinkResult.RawText
        return None

    def text(self, data: str) -> None:
        if self.raw_tag is not None:
            return
        if self.stack and self.stack[-1].suppress_text:
            return
        # Already escaped by the stream; escaping again would double it.
        self.output.append(data)

    def close_tag(self, name: str, source_start: int | None) -> None:
        if self.raw_tag is not None:
            if name != self.raw_tag:
                return
            self.raw_tag = None
            if not (self.stack and self.stack[-1].suppress_text):
                self.output.append(escape_html(self.source.source_slice(self.raw_start, source_start)))

        if not self.stack:
            return
        frame = self.stack.pop()
        if not frame.allowed or frame.suppress_text:
            return
        if frame.name in self.policy.self_closing:
            return
        if frame.transform_start is not None:
            start = frame.transform_start
            inner = "".join(self.output[start:])
            del self.output[start:]
            # The function's output is trusted verbatim; errors propagate.
            self.output.append(self.policy.content_functions[frame.name](inner, frame.attributes))
        self.output.append(serialize_end_tag(frame.name))

    def element_state(self, depth: int) -> int:
        frame = self.stack[depth]
        if frame.suppress_text:
            return ElementState.Opaque
        if frame.allowed:
            return ElementState.Emitted
        return ElementState.Hidden

    def _report(self, code: str, message: str) -> None:
        if self.on_error is not None:
            self.on_error(ParseError(code, category="security", message=message))
