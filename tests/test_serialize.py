import unittest

from sanehtml import escape_html
from sanehtml.serialize import escape_attr_value, escape_text, serialize_end_tag, serialize_start_tag


class TestEscaping(unittest.TestCase):
    def test_escape_html(self) -> None:
        assert escape_html('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"

    def test_escape_html_does_not_double_escape_its_own_output(self) -> None:
        assert escape_html("&lt;") == "&amp;lt;"
        assert escape_html("<") == "&lt;"

    def test_escape_html_empty(self) -> None:
        assert escape_html("") == ""
        assert escape_html(None) == ""

    def test_escape_text_keeps_quotes(self) -> None:
        assert escape_text('a < "b" & c > d') == 'a &lt; "b" &amp; c &gt; d'

    def test_escape_attr_value(self) -> None:
        assert escape_attr_value('a<b>"&') == "a&lt;b>&quot;&amp;"
        assert escape_attr_value("it's") == "it's"


class TestSerializeTags(unittest.TestCase):
    def test_start_tag(self) -> None:
        assert serialize_start_tag("p") == "<p>"
        assert serialize_start_tag("a", {"href": "x", "name": ""}) == '<a href="x" name>'

    def test_self_closing_start_tag(self) -> None:
        assert serialize_start_tag("br", self_closing=True) == "<br />"
        assert serialize_start_tag("img", {"src": "a.png"}, self_closing=True) == '<img src="a.png" />'

    def test_end_tag(self) -> None:
        assert serialize_end_tag("p") == "</p>"


if __name__ == "__main__":
    unittest.main()
