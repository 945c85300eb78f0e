import unittest

from sanehtml.tokenizer import Tokenizer, TokenizerOpts
from sanehtml.tokens import CharacterTokens, CommentToken, EOFToken, ParseError, Tag, TokenSinkResult


class _RecordingSink:
    __slots__ = ("raw_text", "tokens")

    def __init__(self, raw_text=()) -> None:
        self.tokens = []
        self.raw_text = raw_text

    def process_token(self, token):
        self.tokens.append(token)
        if isinstance(token, Tag) and token.kind == Tag.START and token.name in self.raw_text:
            return TokenSinkResult.RawText
        return TokenSinkResult.Continue


def _simplify(tokens):
    out = []
    for token in tokens:
        if isinstance(token, Tag):
            kind = "start" if token.kind == Tag.START else "end"
            out.append((kind, token.name, dict(token.attrs), token.self_closing))
        elif isinstance(token, CharacterTokens):
            out.append(("text", token.data))
        elif isinstance(token, CommentToken):
            out.append(("comment", token.data))
        elif isinstance(token, EOFToken):
            out.append(("eof",))
        elif isinstance(token, ParseError):
            out.append(("error", token.code))
    return out


def _tokenize(html, collect_errors=False, raw_text=()):
    sink = _RecordingSink(raw_text)
    tokenizer = Tokenizer(sink, TokenizerOpts(collect_errors=collect_errors))
    tokenizer.run(html)
    return tokenizer, sink.tokens


class TestTokenizerTags(unittest.TestCase):
    def test_tags_and_attributes_are_lowercased(self) -> None:
        _, tokens = _tokenize('<P CLASS=x Id="y">hi</P>')
        self.assertEqual(
            _simplify(tokens),
            [
                ("start", "p", {"class": "x", "id": "y"}, False),
                ("text", "hi"),
                ("end", "p", {}, False),
                ("eof",),
            ],
        )

    def test_tag_offsets(self) -> None:
        tokenizer, tokens = _tokenize("ab<b>x</b>")
        start, end = tokens[1], tokens[3]
        assert (start.start, start.end) == (2, 5)
        assert (end.start, end.end) == (6, 10)
        assert tokenizer.source_slice(start.end, end.start) == "x"
        assert tokenizer.source_slice(start.end, None) == "x</b>"

    def test_self_closing_flag(self) -> None:
        _, tokens = _tokenize("<br/><hr />")
        assert tokens[0].self_closing
        assert tokens[1].self_closing
        assert tokens[1].name == "hr"

    def test_single_and_unquoted_values(self) -> None:
        _, tokens = _tokenize("<a title='t' name=n target>")
        assert tokens[0].attrs == {"title": "t", "name": "n", "target": ""}

    def test_duplicate_attribute_keeps_first(self) -> None:
        _, tokens = _tokenize("<a href=1 href=2>", collect_errors=True)
        tags = [t for t in tokens if isinstance(t, Tag)]
        assert tags[0].attrs == {"href": "1"}
        assert ("error", "duplicate-attribute") in _simplify(tokens)

    def test_end_tag_attributes_are_dropped(self) -> None:
        _, tokens = _tokenize("</p class=x>", collect_errors=True)
        simplified = _simplify(tokens)
        assert ("end", "p", {}, False) in simplified
        assert ("error", "end-tag-with-attributes") in simplified

    def test_eof_in_tag_discards_tag(self) -> None:
        _, tokens = _tokenize('a<b class="x')
        self.assertEqual(_simplify(tokens), [("text", "a"), ("eof",)])

    def test_lone_less_than_is_text(self) -> None:
        _, tokens = _tokenize("a < b<")
        self.assertEqual(_simplify(tokens), [("text", "a < b<"), ("eof",)])


class TestTokenizerText(unittest.TestCase):
    def test_entities_decoded_in_text_and_attributes(self) -> None:
        _, tokens = _tokenize('<a title="a&amp;b">&lt;x&gt; &copy</a>')
        assert tokens[0].attrs == {"title": "a&b"}
        assert tokens[1].data == "<x> \u00a9"

    def test_legacy_entity_not_decoded_before_alnum_in_attribute(self) -> None:
        _, tokens = _tokenize('<a href="?a=1&copy=2">')
        assert tokens[0].attrs == {"href": "?a=1&copy=2"}

    def test_numeric_entities(self) -> None:
        _, tokens = _tokenize("&#106;&#x61;&#0;")
        assert tokens[0].data == "ja\ufffd"

    def test_newlines_normalized(self) -> None:
        _, tokens = _tokenize("a\r\nb\rc")
        assert tokens[0].data == "a\nb\nc"

    def test_bom_discarded(self) -> None:
        _, tokens = _tokenize("\ufeffhi")
        assert _simplify(tokens) == [("text", "hi"), ("eof",)]

    def test_null_dropped_from_text(self) -> None:
        _, tokens = _tokenize("<p>\x00</p>", collect_errors=True)
        errors = [t for t in tokens if isinstance(t, ParseError)]
        assert errors == [ParseError("unexpected-null-character", line=1, column=4)]
        assert not [t for t in tokens if isinstance(t, CharacterTokens)]

    def test_comments_and_doctype(self) -> None:
        _, tokens = _tokenize("<!DOCTYPE html>a<!-- c -->b")
        self.assertEqual(
            _simplify(tokens),
            [
                ("comment", " html"),
                ("text", "a"),
                ("comment", " c "),
                ("text", "b"),
                ("eof",),
            ],
        )

    def test_unterminated_comment(self) -> None:
        _, tokens = _tokenize("a<!-- c", collect_errors=True)
        simplified = _simplify(tokens)
        assert ("error", "eof-in-comment") in simplified
        assert simplified[-1] == ("eof",)


class TestTokenizerRawText(unittest.TestCase):
    def test_script_content_is_text(self) -> None:
        _, tokens = _tokenize("<script><b>x</b></script>y")
        self.assertEqual(
            _simplify(tokens),
            [
                ("start", "script", {}, False),
                ("text", "<b>x</b>"),
                ("end", "script", {}, False),
                ("text", "y"),
                ("eof",),
            ],
        )

    def test_rawtext_end_tag_is_case_insensitive(self) -> None:
        _, tokens = _tokenize("<style>a</STYLE >b")
        simplified = _simplify(tokens)
        assert simplified[1] == ("text", "a")
        assert simplified[2] == ("end", "style", {}, False)

    def test_rawtext_ignores_longer_names(self) -> None:
        _, tokens = _tokenize("<title>a</titles></title>")
        assert tokens[1].data == "a</titles>"

    def test_sink_can_request_rawtext(self) -> None:
        tokenizer, tokens = _tokenize("<div><b>x</b></div><i>", raw_text=("div",))
        simplified = _simplify(tokens)
        assert simplified[:3] == [
            ("start", "div", {}, False),
            ("text", "<b>x</b>"),
            ("end", "div", {}, False),
        ]
        assert simplified[3] == ("start", "i", {}, False)
        assert tokenizer.source_slice(tokens[0].end, tokens[2].start) == "<b>x</b>"

    def test_unclosed_rawtext_runs_to_eof(self) -> None:
        _, tokens = _tokenize("<script>a</scr")
        assert _simplify(tokens)[1:] == [("text", "a</scr"), ("eof",)]


class TestTokenizerPosition(unittest.TestCase):
    def test_position_is_one_based(self) -> None:
        tokenizer, _ = _tokenize("a\nbc")
        assert tokenizer.position(0) == (1, 1)
        assert tokenizer.position(2) == (2, 1)
        assert tokenizer.position(3) == (2, 2)


if __name__ == "__main__":
    unittest.main()
