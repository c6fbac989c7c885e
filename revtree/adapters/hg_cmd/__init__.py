"""Mercurial command construction."""
