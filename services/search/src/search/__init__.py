"""
Limud Transcript Search Service.

Literal, case- and whole-word-aware search over recording transcripts
with context snippets, ranking by match count, safe highlighting, and a
debounced query controller for interactive use.
"""
