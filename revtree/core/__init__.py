"""Core engine: orchestration, parsing, tree materialization and navigation."""
