"""Workshop view: the document as reorderable, editable blocks.

Paragraphs are shown as top-level nodes. Selecting a collapsed paragraph
expands it into sentences; selecting an expanded paragraph or a sentence
opens it in the block editor.
"""

from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Label, Static, Tree
import structlog

from blockshop.models.edit_action import EditAction
from blockshop.services.exceptions import BlockBusyError, BlockshopError
from blockshop.tui.screens.action_menu import ActionMenuScreen
from blockshop.tui.screens.block_editor import BlockEditorScreen
from blockshop.tui.widgets.block_tree import BlockTree
from blockshop.tui.widgets.status_panel import StatusPanel

logger = structlog.get_logger()

EMPTY_MESSAGE = "No content available. Switch to flat view to add content."


class WorkshopScreen(Screen):
    """Block-level view of the document.

    Keyboard Bindings:
    - enter / click: Expand paragraph, or edit an expanded paragraph / sentence
    - e: Edit block under cursor
    - x: Collapse paragraph
    - K / J: Move paragraph up / down
    - a: AI edit actions
    """

    DEFAULT_CSS = """
    WorkshopScreen {
        layout: vertical;
    }

    #view-title {
        height: auto;
        padding: 0 1;
    }

    #workshop-container {
        height: 1fr;
        padding: 0 1;
    }

    BlockTree {
        height: 1fr;
    }

    #empty-message {
        color: $text-muted;
        content-align: center middle;
        height: 1fr;
    }

    #status-panel {
        dock: bottom;
        height: 1;
        background: $panel;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("e", "edit_block", "Edit"),
        ("x", "collapse_block", "Collapse"),
        ("K", "move_up", "Move up"),
        ("J", "move_down", "Move down"),
        ("a", "ai_edit", "AI edit"),
    ]

    def compose(self) -> ComposeResult:
        yield Label("Workshop view (ctrl+w: flat view)", id="view-title")
        with Container(id="workshop-container"):
            yield BlockTree()
            yield Static(EMPTY_MESSAGE, id="empty-message")
        yield StatusPanel(rewrites_enabled=self.app.dispatcher.enabled)
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_blocks()
        self.query_one(BlockTree).focus()

    def on_screen_resume(self) -> None:
        self.refresh_blocks()

    @property
    def reconciler(self):
        return self.app.reconciler

    @property
    def dispatcher(self):
        return self.app.dispatcher

    def refresh_blocks(self) -> None:
        """Redraw the tree and status line from the current store."""
        store = self.reconciler.store
        tree = self.query_one(BlockTree)
        busy = self.dispatcher.busy_blocks
        tree.load_store(store, busy)

        has_blocks = len(store) > 0
        tree.display = has_blocks
        self.query_one("#empty-message").display = not has_blocks
        self.query_one(StatusPanel).update_status(busy)

    def _current_block_id(self) -> Optional[str]:
        return self.query_one(BlockTree).get_current_block_id()

    def _owning_paragraph(self, block_id: str) -> Optional[str]:
        """Paragraph id for a paragraph or sentence id."""
        block = self.reconciler.store.find_block(block_id)
        if block is None:
            return None
        return block.id if block.kind == "paragraph" else block.parent_id

    # Block activation

    @on(Tree.NodeSelected)
    def on_block_selected(self, event: Tree.NodeSelected) -> None:
        event.stop()
        if event.node.data is not None:
            self.activate_block(event.node.data)

    def activate_block(self, block_id: str) -> None:
        """Expand a collapsed paragraph, otherwise open the block for editing."""
        store = self.reconciler.store
        block = store.find_block(block_id)
        if block is None:
            return

        if block.kind == "paragraph" and not store.is_expanded(block_id):
            self.reconciler.expand(block_id)
            logger.info("user_action_expand", block_id=block_id)
            self.refresh_blocks()
        else:
            self.open_editor(block_id)

    def open_editor(self, block_id: str) -> None:
        block = self.reconciler.store.find_block(block_id)
        if block is None:
            return

        def save(result: Optional[str]) -> None:
            if result is None:
                logger.info("user_action_edit_cancelled", block_id=block_id)
                return
            self.reconciler.edit_block(block_id, result)

        self.app.push_screen(BlockEditorScreen(block), save)

    def action_edit_block(self) -> None:
        block_id = self._current_block_id()
        if block_id is not None:
            self.open_editor(block_id)

    def action_collapse_block(self) -> None:
        block_id = self._current_block_id()
        paragraph_id = self._owning_paragraph(block_id) if block_id else None
        if paragraph_id is not None and self.reconciler.collapse(paragraph_id):
            logger.info("user_action_collapse", block_id=paragraph_id)
            self.refresh_blocks()

    # Reordering

    def _move(self, offset: int) -> None:
        block_id = self._current_block_id()
        paragraph_id = self._owning_paragraph(block_id) if block_id else None
        if paragraph_id is None:
            return

        order = self.reconciler.store.paragraph_order
        target_index = order.index(paragraph_id) + offset
        if not 0 <= target_index < len(order):
            return

        self.reconciler.reorder(paragraph_id, order[target_index])

    def action_move_up(self) -> None:
        self._move(-1)

    def action_move_down(self) -> None:
        self._move(1)

    # AI edits

    def action_ai_edit(self) -> None:
        block_id = self._current_block_id()
        if block_id is None:
            return

        if not self.dispatcher.enabled:
            self.notify("AI edits need an LLM configuration", severity="warning")
            return

        try:
            self.dispatcher.open_menu(block_id)
        except BlockBusyError:
            self.notify(f"{block_id} is already being rewritten", severity="warning")
            return
        except BlockshopError:
            # Menu left open by a dismissed screen
            self.dispatcher.reset(block_id)
            self.dispatcher.open_menu(block_id)

        def run(choice: Optional[tuple[EditAction, Optional[str]]]) -> None:
            if choice is None:
                return
            action, instruction = choice
            self.run_worker(
                self._rewrite_worker(block_id, action, instruction),
                name=f"rewrite-{block_id}",
                group="rewrite",
            )

        self.app.push_screen(ActionMenuScreen(block_id, self.dispatcher), run)

    async def _rewrite_worker(self, block_id: str, action: EditAction, instruction: Optional[str]) -> None:
        """Worker: run one rewrite through the dispatcher."""
        try:
            if action is EditAction.OTHER:
                applied = await self.dispatcher.submit_custom(block_id, instruction or "")
            else:
                applied = await self.dispatcher.select_action(block_id, action)
        except BlockshopError as e:
            logger.warning("rewrite_worker_rejected", block_id=block_id, error=str(e))
            self.dispatcher.reset(block_id)
            self.notify(str(e), severity="warning")
            return

        if not applied:
            self.notify(f"Rewrite of {block_id} was not applied", severity="warning")
