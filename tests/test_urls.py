import unittest

from sanehtml import is_naughty_href


class TestNaughtyHref(unittest.TestCase):
    def test_script_schemes_are_naughty(self) -> None:
        for href in [
            "javascript:alert(1)",
            "JavaScript:alert(1)",
            "vbscript:msgbox(1)",
            "data:text/html;base64,PHNjcmlwdD4=",
        ]:
            assert is_naughty_href(href), href

    def test_obfuscated_schemes_are_naughty(self) -> None:
        for href in [
            " javascript:alert(1)",
            "java\tscript:alert(1)",
            "java\nscript:alert(1)",
            "\x01javascript:alert(1)",
            "&#106;avascript:alert(1)",
            "&#x6A;avascript:alert(1)",
            "jav&#x09;ascript:alert(1)",
        ]:
            assert is_naughty_href(href), repr(href)

    def test_safe_schemes(self) -> None:
        for href in ["http://a", "https://a", "HTTPS://a", "ftp://a", "mailto:a@b.c"]:
            assert not is_naughty_href(href), href

    def test_relative_references_are_never_naughty(self) -> None:
        for href in ["", "/x", "x.html", "#top", "?q=javascript:1", "./javascript:x", "javascript"]:
            assert not is_naughty_href(href), href

    def test_custom_schemes(self) -> None:
        assert is_naughty_href("http://a", ["https"])
        assert not is_naughty_href("tel:123", ["tel"])
        assert is_naughty_href("tel:123")


if __name__ == "__main__":
    unittest.main()
