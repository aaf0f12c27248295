"""Lang module — reader, AST, and evaluator for directive bodies.

Forms supported inside a ``defun`` body:
    (dotimes (VAR COUNT) BODY...)
    (insert ARG...)
    (newline-and-indent)
    (funcall NAME ARG...)
"""
