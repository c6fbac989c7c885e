"""Asynchronous process execution."""
