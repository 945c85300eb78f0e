"""Balanced markup events on top of the tokenizer.

The tokenizer reports tags exactly as written. Handlers want something
stricter: every open event is matched by exactly one close event, in LIFO
order, and text arrives already escaped. `EventStream` sits between the two
and performs the recovery a lenient parser would:

- void elements open and close at the same point;
- some start tags implicitly close an open element (``<li>`` after
  ``<li>``, a block element after ``<p>``), along with everything opened
  inside it, unless a scope boundary such as ``<table>`` or ``<ul>`` lies in
  between;
- an end tag closes everything opened after its matching start tag, and an
  end tag matching nothing is dropped (``</br>`` and ``</p>`` excepted);
- whatever is still open at the end of input is closed.

Handler interface::

    open_tag(name, attrs, source_end) -> TokenSinkResult | None
    text(data)
    close_tag(name, source_start)
    element_state(depth) -> ElementState

``source_end`` is the offset just past the start tag; ``source_start`` is the
offset of the closing tag's ``<``, or None when the element is closed by the
end of input. ``element_state`` describes the open element at ``depth`` in
the stack (0 is the outermost): implied closes ignore scope boundaries that never
reach the output and never reach past an element whose whole content is
dropped.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from .constants import IMPLIED_CLOSES, RAWTEXT_ELEMENTS, SCOPE_BOUNDARIES, VOID_ELEMENTS
from .serialize import escape_attr_value, escape_text
from .tokens import CharacterTokens, ElementState, EOFToken, ParseError, Tag, TokenSinkResult


class EventStream:
    __slots__ = ("handler", "on_error", "open_elements", "void_elements")

    def __init__(
        self,
        handler: Any,
        *,
        void_elements: Iterable[str] = (),
        on_error: Callable[[ParseError], None] | None = None,
    ) -> None:
        self.handler = handler
        # Rawtext elements keep their own end tag even if configured as void;
        # closing them early would leave their content outside the element.
        extra = set(void_elements).difference(RAWTEXT_ELEMENTS)
        self.void_elements = frozenset(VOID_ELEMENTS).union(extra)
        self.on_error = on_error
        self.open_elements: list[str] = []

    def process_token(self, token: Any) -> int:
        if isinstance(token, Tag):
            if token.kind == Tag.START:
                return self._start_tag(token)
            self._end_tag(token)
        elif isinstance(token, CharacterTokens):
            self.handler.text(escape_text(token.data))
        elif isinstance(token, EOFToken):
            self._close_all()
        elif isinstance(token, ParseError):
            if self.on_error is not None:
                self.on_error(token)
        # Comments and anything else are dropped.
        return TokenSinkResult.Continue

    def _start_tag(self, token: Tag) -> int:
        name = token.name
        stack = self.open_elements
        implied = IMPLIED_CLOSES.get(name)
        if implied:
            self._close_implied(implied, token.start)

        attrs = {key: escape_attr_value(value) for key, value in token.attrs.items()}
        if name in self.void_elements:
            self.handler.open_tag(name, attrs, token.end)
            self.handler.close_tag(name, token.end)
            return TokenSinkResult.Continue

        stack.append(name)
        result = self.handler.open_tag(name, attrs, token.end)
        return TokenSinkResult.Continue if result is None else result

    def _close_implied(self, implied: set[str], offset: int) -> None:
        stack = self.open_elements
        handler = self.handler
        while True:
            target = -1
            for index in range(len(stack) - 1, -1, -1):
                state = handler.element_state(index)
                if state == ElementState.Opaque:
                    break
                current = stack[index]
                if current in implied:
                    target = index
                    break
                # Boundaries that are not written out do not count.
                if state == ElementState.Emitted and current in SCOPE_BOUNDARIES:
                    break
            if target < 0:
                return
            while len(stack) > target:
                handler.close_tag(stack.pop(), offset)

    def _end_tag(self, token: Tag) -> None:
        name = token.name
        stack = self.open_elements
        if name in stack:
            while stack:
                top = stack.pop()
                self.handler.close_tag(top, token.start)
                if top == name:
                    break
            return

        # Browsers turn these two stray end tags into elements.
        if name == "br" or name == "p":
            self.handler.open_tag(name, {}, token.end)
            self.handler.close_tag(name, token.end)

    def _close_all(self) -> None:
        stack = self.open_elements
        while stack:
            self.handler.close_tag(stack.pop(), None)
