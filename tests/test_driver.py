"""Tests for two-pass document expansion."""

import pytest

from autoc.config import AutocConfig
from autoc.errors import (
    ArityMismatch,
    EvalError,
    ResourceLimitExceeded,
    ScanError,
    UndefinedFunction,
    UndefinedName,
)
from autoc.rewrite.driver import expand_text

FUNC1 = """\
/*
  autoc:defun func1 (x)
  (dotimes (n x)
    (insert "void;")
    (newline-and-indent))
  autoc#
*/
"""


def _expected_example(text):
    return text.replace(
        '//autoc:message "hello world woooo"\n\n//autoc#',
        '//autoc:message "hello world woooo"\n//autoc#',
    )


class TestFixture:
    def test_expands_example(self, example_text):
        result = expand_text(example_text, "example.c")
        assert result.text == _expected_example(example_text)
        assert result.changed

    def test_idempotent(self, example_text):
        once = expand_text(example_text).text
        twice = expand_text(once)
        assert twice.text == once
        assert not twice.changed

    def test_locality(self, example_text):
        result = expand_text(example_text)
        outside_before = []
        cursor = 0
        for d in result.directives:
            if d.output_span:
                outside_before.append(example_text[cursor:d.output_span[0]])
                cursor = d.output_span[1]
        outside_before.append(example_text[cursor:])

        rescanned = expand_text(result.text).directives
        outside_after = []
        cursor = 0
        for d in rescanned:
            if d.output_span:
                outside_after.append(result.text[cursor:d.output_span[0]])
                cursor = d.output_span[1]
        outside_after.append(result.text[cursor:])
        assert outside_after == outside_before

    def test_message_diagnostic(self, example_text):
        result = expand_text(example_text, "example.c")
        messages = [d for d in result.diagnostics if d.severity == "message"]
        assert len(messages) == 1
        assert messages[0].message == "hello world woooo"
        assert messages[0].line == 39
        assert messages[0].filename == "example.c"


class TestScenarios:
    def test_funcall_into_empty_region(self):
        text = FUNC1 + "// autoc:funcall func1 3\n// autoc#\n"
        result = expand_text(text)
        assert result.text == FUNC1 + "// autoc:funcall func1 3\nvoid;\nvoid;\nvoid;\n// autoc#\n"

    def test_funcall_indented_call_site(self):
        text = FUNC1 + "void f() {\n    // autoc:funcall func1 2\n    // autoc#\n}\n"
        result = expand_text(text)
        assert "    // autoc:funcall func1 2\n    void;\n    void;\n    // autoc#\n" in result.text
        assert expand_text(result.text).text == result.text

    def test_funcall_replaces_stale_output(self):
        text = FUNC1 + "// autoc:funcall func1 1\nold\nstuff\n// autoc#\n"
        assert expand_text(text).text.endswith("// autoc:funcall func1 1\nvoid;\n// autoc#\n")

    def test_format_lines(self):
        text = (
            "/*\n"
            "autoc:lines lines1\n"
            "some content\n"
            "across multiple lines\n"
            "autoc#\n"
            "*/\n"
            '// autoc:format-lines lines1 "%s WOO"\n'
            "// autoc#\n"
        )
        result = expand_text(text)
        assert result.text.endswith(
            '// autoc:format-lines lines1 "%s WOO"\n'
            "some content WOO\nacross multiple lines WOO\n"
            "// autoc#\n"
        )

    def test_format_lines_strips_marker_indent(self):
        text = (
            "  # autoc:lines names\n"
            "  alpha\n"
            "  beta\n"
            "  # autoc#\n"
            '    # autoc:format-lines names "%s = 1"\n'
            "    # autoc#\n"
        )
        result = expand_text(text)
        assert "    alpha = 1\n    beta = 1\n    # autoc#" in result.text

    def test_block_is_one_virtual_line(self):
        text = (
            "// autoc:block b1\n"
            "one\n"
            "two\n"
            "// autoc#\n"
            '// autoc:format-lines b1 "<%s>"\n'
            "// autoc#\n"
        )
        result = expand_text(text)
        assert result.text.endswith('"<%s>"\n<one\ntwo>\n// autoc#\n')

    def test_block_and_lines_are_unchanged(self):
        text = "//autoc:block b\n// x\n//autoc#\n//autoc:lines l\n// y\n//autoc#\n"
        result = expand_text(text)
        assert result.text == text
        assert not result.changed

    def test_message_clears_region(self):
        text = '//autoc:message "hello world woooo"\nleftover\nmore\n//autoc#\n'
        result = expand_text(text)
        assert result.text == '//autoc:message "hello world woooo"\n//autoc#\n'
        assert [d.message for d in result.diagnostics] == ["hello world woooo"]

    def test_undefined_function_leaves_no_output(self):
        text = "// autoc:funcall missing 1\nkeep\n// autoc#\n"
        with pytest.raises(UndefinedFunction) as exc:
            expand_text(text, "f.c")
        assert exc.value.line == 1
        assert exc.value.filename == "f.c"

    def test_redefinition_last_wins(self):
        text = (
            "// autoc:funcall func1 2\n// autoc#\n"
            '// autoc:defun func1 (x)\n(insert "first")\n// autoc#\n'
            '// autoc:defun func1 (x)\n(dotimes (i x) (insert "second") (newline-and-indent))\n// autoc#\n'
            "// autoc:funcall func1 1\n// autoc#\n"
        )
        result = expand_text(text)
        assert result.text.startswith("// autoc:funcall func1 2\nsecond\nsecond\n// autoc#\n")
        assert result.text.endswith("// autoc:funcall func1 1\nsecond\n// autoc#\n")
        warnings = [d for d in result.diagnostics if d.severity == "warning"]
        assert len(warnings) == 1
        assert "redefined" in warnings[0].message
        assert warnings[0].line == 6

    def test_forward_reference(self):
        text = "// autoc:funcall later\n// autoc#\n" + '// autoc:defun later ()\n(insert "ok")\n// autoc#\n'
        assert expand_text(text).text.startswith("// autoc:funcall later\nok\n// autoc#\n")

    def test_crlf_document(self):
        text = FUNC1.replace("\n", "\r\n") + "// autoc:funcall func1 2\r\n// autoc#\r\n"
        result = expand_text(text)
        assert result.text.endswith("// autoc:funcall func1 2\r\nvoid;\r\nvoid;\r\n// autoc#\r\n")
        assert expand_text(result.text).text == result.text

    def test_trailing_empty_line_kept(self):
        text = (
            "// autoc:lines l\n"
            "a\n"
            "\n"
            "// autoc#\n"
            '// autoc:format-lines l "%s"\n'
            "// autoc#\n"
        )
        result = expand_text(text)
        assert result.text.endswith('// autoc:format-lines l "%s"\na\n\n// autoc#\n')
        assert expand_text(result.text).text == result.text

    def test_trailing_spaces_in_lines_kept(self):
        text = '// autoc:lines l\nx  \n// autoc#\n// autoc:format-lines l "%s"\n// autoc#\n'
        assert expand_text(text).text.endswith('"%s"\nx  \n// autoc#\n')


class TestCommentSyntax:
    def test_block_comment_closers_on_headers(self):
        text = (
            '/* autoc:defun f (n) */\n'
            '(dotimes (i n) (insert "z"))\n'
            '/* autoc# */\n'
            '/* autoc:funcall f 3 */\n'
            '/* autoc# */\n'
            '/* autoc:message "hi" */\n'
            'old\n'
            '/* autoc# */\n'
        )
        result = expand_text(text)
        assert result.text.endswith(
            '/* autoc:funcall f 3 */\nzzz\n/* autoc# */\n'
            '/* autoc:message "hi" */\n/* autoc# */\n'
        )
        assert [d.message for d in result.diagnostics] == ["hi"]

    def test_html_comment_format_lines(self):
        text = (
            "<!-- autoc:lines items -->\n"
            "one\n"
            "two\n"
            "<!-- autoc# -->\n"
            '<!-- autoc:format-lines items "<li>%s</li>" -->\n'
            "<!-- autoc# -->\n"
        )
        result = expand_text(text)
        assert result.text.endswith('-->\n<li>one</li>\n<li>two</li>\n<!-- autoc# -->\n')

    def test_hash_commented_defun_body(self):
        text = (
            "# autoc:defun f (x)\n"
            "# (dotimes (i x)\n"
            '#   (insert "y"))\n'
            "# autoc#\n"
            "# autoc:funcall f 2\n"
            "# autoc#\n"
        )
        assert expand_text(text).text.endswith("# autoc:funcall f 2\nyy\n# autoc#\n")

    def test_slash_commented_defun_body(self):
        text = (
            "    // autoc:defun g ()\n"
            '    // (insert "x")\n'
            "    // autoc#\n"
            "    // autoc:funcall g\n"
            "    // autoc#\n"
        )
        assert expand_text(text).text.endswith("    // autoc:funcall g\n    x\n    // autoc#\n")

    def test_commented_body_error_line(self):
        text = "// autoc:defun f ()\n// (insert 1)\n// (insert y)\n// autoc#\n// autoc:funcall f\n// autoc#\n"
        with pytest.raises(UndefinedName) as exc:
            expand_text(text)
        assert exc.value.line == 3


class TestErrors:
    def test_undefined_lines(self):
        with pytest.raises(UndefinedName, match="nope"):
            expand_text('// autoc:format-lines nope "%s"\n// autoc#\n')

    def test_arity_mismatch_at_call_site(self):
        with pytest.raises(ArityMismatch) as exc:
            expand_text(FUNC1 + "\n// autoc:funcall func1\n// autoc#\n")
        assert exc.value.line == 9

    def test_error_inside_body_reports_body_line(self):
        text = "// autoc:defun f ()\n(insert 1)\n(insert y)\n// autoc#\n// autoc:funcall f\n// autoc#\n"
        with pytest.raises(UndefinedName) as exc:
            expand_text(text)
        assert exc.value.line == 3

    def test_bad_body_is_scan_error(self):
        with pytest.raises(ScanError, match="unknown form") as exc:
            expand_text("// autoc:defun f ()\n\n(launch)\n// autoc#\n", "g.c")
        assert exc.value.line == 3
        assert exc.value.filename == "g.c"

    def test_generated_marker_rejected(self):
        text = '// autoc:defun f ()\n(insert "autoc" "#")\n// autoc#\n// autoc:funcall f\n// autoc#\n'
        with pytest.raises(EvalError, match="directive marker"):
            expand_text(text)

    def test_resource_limit_from_config(self):
        config = AutocConfig(max_iterations=2)
        with pytest.raises(ResourceLimitExceeded):
            expand_text(FUNC1 + "// autoc:funcall func1 3\n// autoc#\n", config=config)

    def test_unbounded_depth_still_reports_limit(self):
        config = AutocConfig(max_call_depth=100_000)
        text = "// autoc:defun loop ()\n(funcall loop)\n// autoc#\n// autoc:funcall loop\n// autoc#\n"
        with pytest.raises(ResourceLimitExceeded) as exc:
            expand_text(text, "a.c", config=config)
        assert exc.value.line == 4
        assert exc.value.filename == "a.c"
