class Tag:
    __slots__ = ("attrs", "end", "kind", "name", "self_closing", "start")

    START = 0
    END = 1

    def __init__(self, kind, name, attrs, self_closing=False, start=0, end=0):
        self.kind = kind
        self.name = name
        self.attrs = attrs if attrs is not None else {}
        self.self_closing = bool(self_closing)
        # Source offsets: `start` is the "<", `end` is just past the ">".
        self.start = start
        self.end = end

    def __repr__(self):
        attrs = " ".join(f"{name}={value!r}" for name, value in self.attrs.items())
        closing = " /" if self.self_closing else ""
        kind_str = "start" if self.kind == self.START else "end"
        return f"<{kind_str}:{self.name}{closing} {attrs}>"


class CharacterTokens:
    __slots__ = ("data",)

    def __init__(self, data):
        self.data = data


class CommentToken:
    __slots__ = ("data",)

    def __init__(self, data):
        self.data = data


class EOFToken:
    __slots__ = ()


class TokenSinkResult:
    __slots__ = ()

    Continue = 0
    RawText = 1


class ElementState:
    """How an open element shows up in the output."""

    __slots__ = ()

    Emitted = 0
    # Dropped, but its content still flows into the output.
    Hidden = 1
    # Dropped together with everything inside it.
    Opaque = 2


class ParseError:
    """A diagnostic with location information.

    ``category`` is "tokenizer" for malformed markup and "security" for
    content the sanitizer removed.
    """

    __slots__ = ("category", "code", "column", "line", "message")

    def __init__(self, code, line=None, column=None, category="tokenizer", message=None):
        self.code = code
        self.line = line
        self.column = column
        self.category = category
        self.message = message or code

    def __repr__(self):
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.line == other.line and self.column == other.column

    __hash__ = None  # Unhashable since we define __eq__
