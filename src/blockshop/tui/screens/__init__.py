"""Screens for the Blockshop TUI."""

from blockshop.tui.screens.action_menu import ActionMenuScreen
from blockshop.tui.screens.block_editor import BlockEditorScreen
from blockshop.tui.screens.flat_view import FlatViewScreen
from blockshop.tui.screens.workshop import WorkshopScreen

__all__ = ["ActionMenuScreen", "BlockEditorScreen", "FlatViewScreen", "WorkshopScreen"]
