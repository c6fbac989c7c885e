"""Revision tree browser for Mercurial repositories."""
