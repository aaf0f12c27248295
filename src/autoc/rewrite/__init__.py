"""Rewrite module — regenerate output regions in documents and files."""
