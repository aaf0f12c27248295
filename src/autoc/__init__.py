"""autoc — code generators embedded in source comments.

Directives live inside ordinary comments of any host language:

    // autoc:funcall func1 3
    void;
    void;
    void;
    // autoc#

The text between the open marker line and the close marker line is the
output region. Running the expander regenerates it; everything outside the
markers is preserved untouched.
"""

__version__ = "0.1.0"

# Marker tokens recognized by the scanner, whatever comment syntax surrounds them
OPEN_TOKEN = "autoc:"
CLOSE_TOKEN = "autoc#"

DIRECTIVE_KINDS = ("defun", "funcall", "block", "lines", "format-lines", "message")
OUTPUT_KINDS = ("funcall", "format-lines", "message")
