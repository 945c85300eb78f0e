import re
import sys

from .constants import RAWTEXT_ELEMENTS
from .entities import decode_entities_in_text
from .tokens import CharacterTokens, CommentToken, EOFToken, ParseError, Tag, TokenSinkResult

_ATTR_VALUE_DOUBLE_TERMINATORS = '"\0'
_ATTR_VALUE_SINGLE_TERMINATORS = "'\0"
_ATTR_VALUE_UNQUOTED_TERMINATORS = "\t\n\f\r >\"'<=`\0"
_ATTR_NAME_TERMINATORS = "\t\n\f\r />=\0\"'<"
_WHITESPACE = ("\t", "\n", "\f", "\r", " ")
_RAWTEXT_END_TERMINATORS = "\t\n\f\r />"
_ASCII_LOWER_TABLE = str.maketrans({chr(code): chr(code + 32) for code in range(65, 91)})
_RAWTEXT_ELEMENTS = frozenset(RAWTEXT_ELEMENTS)

_ATTR_VALUE_DOUBLE_PATTERN = re.compile(f"[{re.escape(_ATTR_VALUE_DOUBLE_TERMINATORS)}]")
_ATTR_VALUE_SINGLE_PATTERN = re.compile(f"[{re.escape(_ATTR_VALUE_SINGLE_TERMINATORS)}]")
_ATTR_VALUE_UNQUOTED_PATTERN = re.compile(f"[{re.escape(_ATTR_VALUE_UNQUOTED_TERMINATORS)}]")
_ATTR_NAME_TERMINATOR_PATTERN = re.compile(f"[{re.escape(_ATTR_NAME_TERMINATORS)}]")


def _is_ascii_alpha(c):
    return c.isascii() and c.isalpha()


class TokenizerOpts:
    __slots__ = ("collect_errors", "discard_bom")

    def __init__(self, collect_errors=False, discard_bom=True):
        self.collect_errors = bool(collect_errors)
        self.discard_bom = bool(discard_bom)


class Tokenizer:
    """Streaming HTML tokenizer.

    Tokens are pushed to ``sink.process_token`` in document order. Start and
    end tags carry their source offsets so a consumer can later ask for the
    untouched markup between two tags with :meth:`source_slice`.

    A sink may answer a start tag with ``TokenSinkResult.RawText`` to have
    everything up to the matching end tag delivered as text, the way script
    and style content always is.
    """

    DATA = 0
    TAG_OPEN = 1
    END_TAG_OPEN = 2
    TAG_NAME = 3
    BEFORE_ATTRIBUTE_NAME = 4
    ATTRIBUTE_NAME = 5
    AFTER_ATTRIBUTE_NAME = 6
    BEFORE_ATTRIBUTE_VALUE = 7
    ATTRIBUTE_VALUE_DOUBLE = 8
    ATTRIBUTE_VALUE_SINGLE = 9
    ATTRIBUTE_VALUE_UNQUOTED = 10
    AFTER_ATTRIBUTE_VALUE_QUOTED = 11
    SELF_CLOSING_START_TAG = 12
    MARKUP_DECLARATION_OPEN = 13
    COMMENT = 14
    BOGUS_COMMENT = 15
    RAWTEXT = 16

    __slots__ = (
        "buffer",
        "current_attr_name",
        "current_attr_value",
        "current_char",
        "current_tag_attrs",
        "current_tag_kind",
        "current_tag_name",
        "current_tag_self_closing",
        "length",
        "opts",
        "pos",
        "rawtext_tag_name",
        "sink",
        "state",
        "text_buffer",
        "token_start",
    )

    def __init__(self, sink, opts=None):
        self.sink = sink
        self.opts = opts or TokenizerOpts()

        self.state = self.DATA
        self.buffer = ""
        self.length = 0
        self.pos = 0
        self.current_char = ""
        self.token_start = 0

        # Reusable buffers to avoid per-token allocations.
        self.text_buffer = []
        self.current_tag_name = []
        self.current_tag_attrs = {}
        self.current_attr_name = []
        self.current_attr_value = []
        self.current_tag_self_closing = False
        self.current_tag_kind = Tag.START
        self.rawtext_tag_name = None

    def run(self, html):
        if html and html[0] == "\ufeff" and self.opts.discard_bom:
            html = html[1:]

        self.buffer = html or ""
        self.length = len(self.buffer)
        self.pos = 0
        self.current_char = ""
        self.token_start = 0
        self.text_buffer.clear()
        self._start_tag(Tag.START)
        self.rawtext_tag_name = None
        self.state = self.DATA

        while True:
            state = self.state
            if state == self.DATA:
                if self._state_data():
                    break
            elif state == self.TAG_OPEN:
                if self._state_tag_open():
                    break
            elif state == self.END_TAG_OPEN:
                if self._state_end_tag_open():
                    break
            elif state == self.TAG_NAME:
                if self._state_tag_name():
                    break
            elif state == self.BEFORE_ATTRIBUTE_NAME:
                if self._state_before_attribute_name():
                    break
            elif state == self.ATTRIBUTE_NAME:
                if self._state_attribute_name():
                    break
            elif state == self.AFTER_ATTRIBUTE_NAME:
                if self._state_after_attribute_name():
                    break
            elif state == self.BEFORE_ATTRIBUTE_VALUE:
                if self._state_before_attribute_value():
                    break
            elif state == self.ATTRIBUTE_VALUE_DOUBLE:
                if self._state_attribute_value_quoted('"', _ATTR_VALUE_DOUBLE_PATTERN):
                    break
            elif state == self.ATTRIBUTE_VALUE_SINGLE:
                if self._state_attribute_value_quoted("'", _ATTR_VALUE_SINGLE_PATTERN):
                    break
            elif state == self.ATTRIBUTE_VALUE_UNQUOTED:
                if self._state_attribute_value_unquoted():
                    break
            elif state == self.AFTER_ATTRIBUTE_VALUE_QUOTED:
                if self._state_after_attribute_value_quoted():
                    break
            elif state == self.SELF_CLOSING_START_TAG:
                if self._state_self_closing_start_tag():
                    break
            elif state == self.MARKUP_DECLARATION_OPEN:
                if self._state_markup_declaration_open():
                    break
            elif state == self.COMMENT:
                if self._state_comment():
                    break
            elif state == self.BOGUS_COMMENT:
                if self._state_bogus_comment():
                    break
            elif state == self.RAWTEXT:
                if self._state_rawtext():
                    break
            else:
                # Unknown state fallback to data.
                self.state = self.DATA

    # ---------------------
    # Source access
    # ---------------------

    def source_slice(self, start, end):
        """Return the original markup between two source offsets."""
        return self.buffer[start:end]

    def position(self, offset):
        """Return the 1-based ``(line, column)`` of a source offset."""
        line = self.buffer.count("\n", 0, offset) + 1
        return line, offset - self.buffer.rfind("\n", 0, offset)

    # ---------------------
    # State handlers
    # ---------------------

    def _state_data(self):
        buffer = self.buffer
        pos = self.pos
        lt_index = buffer.find("<", pos)
        end = self.length if lt_index == -1 else lt_index
        if end > pos:
            self._append_text_chunk(buffer[pos:end], pos)
        if lt_index == -1:
            self.pos = self.length
            return self._emit_eof()
        self.token_start = lt_index
        self.pos = lt_index + 1
        self.state = self.TAG_OPEN
        return False

    def _state_tag_open(self):
        c = self._get_char()
        if c is None:
            self._emit_error("eof-before-tag-name")
            self.text_buffer.append("<")
            return self._emit_eof()
        if c == "!":
            self.state = self.MARKUP_DECLARATION_OPEN
            return False
        if c == "/":
            self.state = self.END_TAG_OPEN
            return False
        if c == "?":
            self._emit_error("unexpected-question-mark-instead-of-tag-name")
            self._reconsume_current()
            self.state = self.BOGUS_COMMENT
            return False
        if _is_ascii_alpha(c):
            self._start_tag(Tag.START)
            self._append_tag_name(c)
            self.state = self.TAG_NAME
            return False

        self._emit_error("invalid-first-character-of-tag-name")
        self.text_buffer.append("<")
        self._reconsume_current()
        self.state = self.DATA
        return False

    def _state_end_tag_open(self):
        c = self._get_char()
        if c is None:
            self._emit_error("eof-before-tag-name")
            self.text_buffer.append("</")
            return self._emit_eof()
        if _is_ascii_alpha(c):
            self._start_tag(Tag.END)
            self._append_tag_name(c)
            self.state = self.TAG_NAME
            return False
        if c == ">":
            self._emit_error("missing-end-tag-name")
            self.state = self.DATA
            return False

        self._emit_error("invalid-first-character-of-tag-name")
        self._reconsume_current()
        self.state = self.BOGUS_COMMENT
        return False

    def _state_tag_name(self):
        while True:
            c = self._get_char()
            if c is None:
                return self._eof_in_tag()
            if c in _WHITESPACE:
                self.state = self.BEFORE_ATTRIBUTE_NAME
                return False
            if c == "/":
                self.state = self.SELF_CLOSING_START_TAG
                return False
            if c == ">":
                self._emit_current_tag()
                return False
            if c == "\0":
                self._emit_error("unexpected-null-character")
                self._append_tag_name("\ufffd")
                continue
            self._append_tag_name(c)

    def _state_before_attribute_name(self):
        while True:
            c = self._get_char()
            if c is None:
                return self._eof_in_tag()
            if c in _WHITESPACE:
                continue
            if c == "/":
                self.state = self.SELF_CLOSING_START_TAG
                return False
            if c == ">":
                self._emit_current_tag()
                return False
            self._start_attribute()
            if c == "=":
                self._emit_error("unexpected-equals-sign-before-attribute-name")
                self._append_attr_name(c)
            else:
                self._reconsume_current()
            self.state = self.ATTRIBUTE_NAME
            return False

    def _state_attribute_name(self):
        while True:
            if self._consume_attribute_name_run():
                continue
            c = self._get_char()
            if c is None:
                return self._eof_in_tag()
            if c in _WHITESPACE:
                self.state = self.AFTER_ATTRIBUTE_NAME
                return False
            if c == "/":
                self._finish_attribute()
                self.state = self.SELF_CLOSING_START_TAG
                return False
            if c == "=":
                self.state = self.BEFORE_ATTRIBUTE_VALUE
                return False
            if c == ">":
                self._emit_current_tag()
                return False
            if c == "\0":
                self._emit_error("unexpected-null-character")
                self._append_attr_name("\ufffd")
                continue
            self._emit_error("unexpected-character-in-attribute-name")
            self._append_attr_name(c)

    def _state_after_attribute_name(self):
        while True:
            c = self._get_char()
            if c is None:
                return self._eof_in_tag()
            if c in _WHITESPACE:
                continue
            if c == "/":
                self._finish_attribute()
                self.state = self.SELF_CLOSING_START_TAG
                return False
            if c == "=":
                self.state = self.BEFORE_ATTRIBUTE_VALUE
                return False
            if c == ">":
                self._emit_current_tag()
                return False
            self._finish_attribute()
            self._start_attribute()
            self._reconsume_current()
            self.state = self.ATTRIBUTE_NAME
            return False

    def _state_before_attribute_value(self):
        while True:
            c = self._get_char()
            if c is None:
                return self._eof_in_tag()
            if c in _WHITESPACE:
                continue
            if c == '"':
                self.state = self.ATTRIBUTE_VALUE_DOUBLE
                return False
            if c == "'":
                self.state = self.ATTRIBUTE_VALUE_SINGLE
                return False
            if c == ">":
                self._emit_error("missing-attribute-value")
                self._emit_current_tag()
                return False
            self._reconsume_current()
            self.state = self.ATTRIBUTE_VALUE_UNQUOTED
            return False

    def _state_attribute_value_quoted(self, quote, stop_pattern):
        while True:
            if self._consume_attribute_value_run(stop_pattern):
                continue
            c = self._get_char()
            if c is None:
                return self._eof_in_tag()
            if c == quote:
                self._finish_attribute()
                self.state = self.AFTER_ATTRIBUTE_VALUE_QUOTED
                return False
            self._emit_error("unexpected-null-character")
            self.current_attr_value.append("\ufffd")

    def _state_attribute_value_unquoted(self):
        while True:
            if self._consume_attribute_value_run(_ATTR_VALUE_UNQUOTED_PATTERN):
                continue
            c = self._get_char()
            if c is None:
                return self._eof_in_tag()
            if c in _WHITESPACE:
                self._finish_attribute()
                self.state = self.BEFORE_ATTRIBUTE_NAME
                return False
            if c == ">":
                self._emit_current_tag()
                return False
            if c == "\0":
                self._emit_error("unexpected-null-character")
                self.current_attr_value.append("\ufffd")
                continue
            self._emit_error("unexpected-character-in-unquoted-attribute-value")
            self.current_attr_value.append(c)

    def _state_after_attribute_value_quoted(self):
        c = self._get_char()
        if c is None:
            return self._eof_in_tag()
        if c in _WHITESPACE:
            self.state = self.BEFORE_ATTRIBUTE_NAME
            return False
        if c == "/":
            self.state = self.SELF_CLOSING_START_TAG
            return False
        if c == ">":
            self._emit_current_tag()
            return False
        self._emit_error("missing-whitespace-between-attributes")
        self._reconsume_current()
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_self_closing_start_tag(self):
        c = self._get_char()
        if c is None:
            return self._eof_in_tag()
        if c == ">":
            self.current_tag_self_closing = True
            self._emit_current_tag()
            return False
        self._emit_error("unexpected-solidus-in-tag")
        self._reconsume_current()
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_markup_declaration_open(self):
        if self._consume_if("--"):
            self.state = self.COMMENT
            return False
        # Doctypes and CDATA outside foreign content are kept as bogus
        # comments; they never reach the output.
        if not self._consume_case_insensitive("DOCTYPE"):
            self._emit_error("incorrectly-opened-comment")
        self.state = self.BOGUS_COMMENT
        return False

    def _state_comment(self):
        buffer = self.buffer
        pos = self.pos
        if buffer.startswith(">", pos) or buffer.startswith("->", pos):
            self._emit_error("abrupt-closing-of-empty-comment")
            self.pos = buffer.find(">", pos) + 1
            self._emit_comment("")
            self.state = self.DATA
            return False

        end = buffer.find("-->", pos)
        bang_end = buffer.find("--!>", pos)
        if bang_end != -1 and (end == -1 or bang_end < end):
            self._emit_error("incorrectly-closed-comment")
            self._emit_comment(buffer[pos:bang_end])
            self.pos = bang_end + 4
        elif end != -1:
            self._emit_comment(buffer[pos:end])
            self.pos = end + 3
        else:
            self._emit_error("eof-in-comment")
            self._emit_comment(buffer[pos:])
            self.pos = self.length
            return self._emit_eof()
        self.state = self.DATA
        return False

    def _state_bogus_comment(self):
        buffer = self.buffer
        pos = self.pos
        gt_index = buffer.find(">", pos)
        if gt_index == -1:
            self._emit_comment(buffer[pos:])
            self.pos = self.length
            return self._emit_eof()
        self._emit_comment(buffer[pos:gt_index])
        self.pos = gt_index + 1
        self.state = self.DATA
        return False

    def _state_rawtext(self):
        buffer = self.buffer
        length = self.length
        name = self.rawtext_tag_name
        pos = self.pos
        search = pos
        while True:
            lt_index = buffer.find("</", search)
            if lt_index == -1:
                if pos < length:
                    self._append_text_chunk(buffer[pos:], pos)
                self.pos = length
                return self._emit_eof()
            name_end = lt_index + 2 + len(name)
            if (
                name_end < length
                and buffer[lt_index + 2 : name_end].lower() == name
                and buffer[name_end] in _RAWTEXT_END_TERMINATORS
            ):
                if lt_index > pos:
                    self._append_text_chunk(buffer[pos:lt_index], pos)
                # Appropriate end tag: finish it through the regular tag states.
                self.token_start = lt_index
                self.pos = name_end
                self._start_tag(Tag.END)
                self.current_tag_name.append(name)
                self.rawtext_tag_name = None
                self.state = self.TAG_NAME
                return False
            search = lt_index + 2

    # ---------------------
    # Low-level helpers
    # ---------------------

    def _get_char(self):
        if self.pos >= self.length:
            self.current_char = None
            return None
        c = self.buffer[self.pos]
        self.pos += 1
        self.current_char = c
        return c

    def _reconsume_current(self):
        if self.current_char is not None:
            self.pos -= 1

    def _consume_if(self, literal):
        if not self.buffer.startswith(literal, self.pos):
            return False
        self.pos += len(literal)
        return True

    def _consume_case_insensitive(self, literal):
        end = self.pos + len(literal)
        if end > self.length:
            return False
        if self.buffer[self.pos : end].lower() != literal.lower():
            return False
        self.pos = end
        return True

    def _append_text_chunk(self, chunk, offset):
        if "\0" in chunk:
            self._emit_error("unexpected-null-character", offset + chunk.index("\0"))
            chunk = chunk.replace("\0", "")
        if chunk:
            self.text_buffer.append(chunk)

    def _flush_text(self):
        if not self.text_buffer:
            return
        data = "".join(self.text_buffer)
        self.text_buffer.clear()
        if "\r" in data:
            data = data.replace("\r\n", "\n").replace("\r", "\n")
        # References are decoded in every text state, rawtext included, so
        # that one escaping rule downstream makes all text round-trip.
        if "&" in data:
            data = decode_entities_in_text(data)
        if data:
            self._emit_token(CharacterTokens(data))

    def _start_tag(self, kind):
        self.current_tag_kind = kind
        self.current_tag_name.clear()
        self.current_tag_attrs = {}
        self.current_attr_name.clear()
        self.current_attr_value.clear()
        self.current_tag_self_closing = False

    def _start_attribute(self):
        self.current_attr_name.clear()
        self.current_attr_value.clear()

    def _append_tag_name(self, c):
        if "A" <= c <= "Z":
            c = chr(ord(c) + 32)
        self.current_tag_name.append(c)

    def _append_attr_name(self, c):
        if "A" <= c <= "Z":
            c = chr(ord(c) + 32)
        self.current_attr_name.append(c)

    def _finish_attribute(self):
        if not self.current_attr_name:
            self.current_attr_value.clear()
            return
        name = "".join(self.current_attr_name)
        value = "".join(self.current_attr_value)
        if "&" in value:
            value = decode_entities_in_text(value, in_attribute=True)
        if name in self.current_tag_attrs:
            self._emit_error("duplicate-attribute")
        else:
            self.current_tag_attrs[name] = value
        self.current_attr_name.clear()
        self.current_attr_value.clear()

    def _consume_attribute_value_run(self, stop_pattern):
        pos = self.pos
        if pos >= self.length:
            return False
        match = stop_pattern.search(self.buffer, pos)
        end = match.start() if match else self.length
        if end == pos:
            return False
        self.current_attr_value.append(self.buffer[pos:end])
        self.pos = end
        return True

    def _consume_attribute_name_run(self):
        pos = self.pos
        if pos >= self.length:
            return False
        match = _ATTR_NAME_TERMINATOR_PATTERN.search(self.buffer, pos)
        end = match.start() if match else self.length
        if end == pos:
            return False
        self.current_attr_name.append(self.buffer[pos:end].translate(_ASCII_LOWER_TABLE))
        self.pos = end
        return True

    def _emit_current_tag(self):
        self._finish_attribute()
        name = sys.intern("".join(self.current_tag_name))
        kind = self.current_tag_kind
        attrs = self.current_tag_attrs
        if kind == Tag.END and attrs:
            self._emit_error("end-tag-with-attributes")
            attrs = {}
        tag = Tag(kind, name, attrs, self.current_tag_self_closing, self.token_start, self.pos)
        self._start_tag(Tag.START)

        self._flush_text()
        self.state = self.DATA
        if kind == Tag.START and name in _RAWTEXT_ELEMENTS:
            self.state = self.RAWTEXT
            self.rawtext_tag_name = name
        result = self._emit_token(tag)
        if kind == Tag.START and result == TokenSinkResult.RawText:
            self.state = self.RAWTEXT
            self.rawtext_tag_name = name

    def _emit_comment(self, data):
        self._flush_text()
        self._emit_token(CommentToken(data))

    def _emit_eof(self):
        self._flush_text()
        self._emit_token(EOFToken())
        return True

    def _eof_in_tag(self):
        # The incomplete tag is discarded, not emitted as text.
        self._emit_error("eof-in-tag")
        self._start_tag(Tag.START)
        return self._emit_eof()

    def _emit_token(self, token):
        return self.sink.process_token(token)

    def _emit_error(self, code, offset=None):
        if self.opts.collect_errors:
            line, column = self.position(self.pos if offset is None else offset)
            self._emit_token(ParseError(code, line=line, column=column))
