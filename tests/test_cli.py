import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from sanehtml.__main__ import main


def _run(argv, stdin=""):
    out = io.StringIO()
    err = io.StringIO()
    with mock.patch("sys.stdin", io.StringIO(stdin)), redirect_stdout(out), redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def test_reads_stdin(self) -> None:
        code, out, err = _run([], stdin="<b onclick=x>hi</b><script>x</script>")
        assert code == 0
        assert out == "<b>hi</b>"
        assert err == ""

    def test_reads_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "in.html")
            with open(path, "w", encoding="utf-8") as f:
                f.write('<p class="x">hi</p>')
            _, out, _ = _run([path])
        assert out == "<p>hi</p>"

    def test_allowed_tags(self) -> None:
        _, out, _ = _run(["--allowed-tags", "b, i"], stdin="<p><b>x</b><i>y</i></p>")
        assert out == "<b>x</b><i>y</i>"

    def test_self_closing_and_dont_parse(self) -> None:
        argv = ["--allowed-tags", "pre,br", "--self-closing", "br", "--dont-parse", "pre"]
        _, out, _ = _run(argv, stdin="<pre><b>x</b></pre><br>")
        assert out == "<pre>&lt;b&gt;x&lt;/b&gt;</pre><br />"

    def test_report(self) -> None:
        _, out, err = _run(["--report"], stdin='<span>x</span><a onclick="y">z</a>')
        assert out == "x<a>z</a>"
        assert err.splitlines() == [
            "disallowed-tag - Unsafe tag 'span' (not allowed)",
            "disallowed-attribute - Unsafe attribute 'onclick' on <a>",
        ]


if __name__ == "__main__":
    unittest.main()
