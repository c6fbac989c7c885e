"""Presentation helpers: row formatting and colors."""

from revtree.core.presentation.colors import RevtreeColors, render_diff_highlighted
from revtree.core.presentation.rows import RowFormatter

__all__ = ["RevtreeColors", "RowFormatter", "render_diff_highlighted"]
