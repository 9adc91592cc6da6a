"""Textual widget components."""

from blockshop.tui.widgets.block_tree import BlockTree
from blockshop.tui.widgets.status_panel import StatusPanel
from blockshop.tui.widgets.content_editor import ContentEditor

__all__ = [
    "BlockTree",
    "StatusPanel",
    "ContentEditor",
]
