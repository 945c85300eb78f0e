import unittest

from sanehtml.entities import decode_entities_in_text, decode_numeric_entity


class TestNumericEntities(unittest.TestCase):
    def test_decimal_and_hex(self) -> None:
        assert decode_numeric_entity("60") == "<"
        assert decode_numeric_entity("3C", is_hex=True) == "<"

    def test_replacements(self) -> None:
        assert decode_numeric_entity("0") == "\ufffd"
        assert decode_numeric_entity("128") == "\u20ac"
        assert decode_numeric_entity("D800", is_hex=True) == "\ufffd"
        assert decode_numeric_entity("110000", is_hex=True) == "\ufffd"

    def test_not_a_number(self) -> None:
        assert decode_numeric_entity("") is None


class TestDecodeEntities(unittest.TestCase):
    def test_named(self) -> None:
        assert decode_entities_in_text("&lt;&gt;&amp;&quot;") == '<>&"'

    def test_numeric_without_semicolon(self) -> None:
        assert decode_entities_in_text("&#60a&#x3e") == "<a>"

    def test_unknown_and_bare_ampersands_stay(self) -> None:
        assert decode_entities_in_text("a & b &bogus; &#;") == "a & b &bogus; &#;"

    def test_legacy_prefix_in_text(self) -> None:
        assert decode_entities_in_text("&notit; &copy2") == "\u00acit; \u00a92"

    def test_legacy_blocked_in_attribute(self) -> None:
        assert decode_entities_in_text("?a=1&copy=2&not", in_attribute=True) == "?a=1&copy=2\u00ac"
        assert decode_entities_in_text("&amp;x", in_attribute=True) == "&x"


if __name__ == "__main__":
    unittest.main()
