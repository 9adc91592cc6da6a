"""Blockshop: a two-view text editor with block-level AI rewrites."""

__version__ = "0.1.0"
