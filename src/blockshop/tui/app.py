"""Main Blockshop TUI Application.

The app owns the document text, the Reconciler (and through it the block
store) and the EditActionDispatcher. Screens read and mutate them through
the app:

```
FlatViewScreen ──update_text()──► Reconciler.sync()        (external text)
WorkshopScreen ──edit/reorder/rewrite──► Reconciler ──commit()──► document_text
```

Only the flat view writes external text and only the workshop view mutates
the store, so the two never fight over the buffer.
"""

from pathlib import Path
from typing import Optional

from textual.app import App
from textual.binding import Binding
import structlog

from blockshop.models.edit_action import ActionState
from blockshop.services.dispatcher import EditActionDispatcher, RewriteService
from blockshop.services.reconciler import Reconciler
from blockshop.tui.screens import FlatViewScreen, WorkshopScreen

logger = structlog.get_logger()


WELCOME_TEXT = """Welcome to the Blockshop editor! This is a tool for focused writing and editing.

The editor has two views: the flat view for standard text editing, and the workshop view that breaks your text into interactive blocks for more focused editing.

In the workshop view, each paragraph becomes a separate block that you can work on individually. Select any block to break it down into sentences for even more granular editing.

Press ctrl+w to switch to the workshop view and see your text turn into blocks that you can reorder, edit, and enhance with AI-powered suggestions."""


class BlockshopApp(App):
    """Blockshop TUI Application.

    Starts in the flat view; ctrl+w toggles the workshop view.
    """

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=True, priority=True),
        Binding("ctrl+w", "toggle_view", "Flat/Workshop", show=True, priority=True),
        Binding("ctrl+s", "save", "Save", show=True),
    ]

    def __init__(
        self,
        text: str = WELCOME_TEXT,
        rewrite_service: Optional[RewriteService] = None,
        document_path: Optional[Path] = None,
    ):
        """Initialize the Blockshop app.

        Args:
            text: Initial document text
            rewrite_service: Backend for AI edits (None disables them)
            document_path: File written by the save action
        """
        super().__init__()
        self.document_text = text
        self.document_path = document_path
        self.reconciler = Reconciler(text, on_content_change=self._on_content_change)
        self.dispatcher = EditActionDispatcher(
            self.reconciler,
            rewrite_service,
            on_state_change=self._on_action_state_change,
        )
        self._workshop: Optional[WorkshopScreen] = None

        logger.info(
            "app_initialized",
            paragraph_count=len(self.reconciler.store),
            rewrites_enabled=self.dispatcher.enabled,
            document_path=str(document_path) if document_path else None,
        )

    def on_mount(self) -> None:
        self.push_screen(FlatViewScreen(name="flat"))

    @property
    def workshop_active(self) -> bool:
        return self._workshop is not None

    def update_text(self, text: str) -> None:
        """Accept new text from the flat view and reconcile the store with it."""
        self.document_text = text
        self.reconciler.sync(text)

    def _on_content_change(self, text: str) -> None:
        """Receive the store's serialization after an internal mutation."""
        self.document_text = text
        if self._workshop is not None:
            self._workshop.refresh_blocks()

    def _on_action_state_change(self, block_id: str, state: ActionState) -> None:
        if state in (ActionState.INVOKING, ActionState.IDLE) and self._workshop is not None:
            self._workshop.refresh_blocks()

    def action_toggle_view(self) -> None:
        """Switch between the flat view and the workshop view."""
        if isinstance(self.screen, WorkshopScreen):
            self.pop_screen()
            self._workshop = None
            logger.info("user_action_toggle_view", view="flat")
        elif isinstance(self.screen, FlatViewScreen):
            self.reconciler.sync(self.document_text)
            self._workshop = WorkshopScreen(name="workshop")
            self.push_screen(self._workshop)
            logger.info("user_action_toggle_view", view="workshop", paragraph_count=len(self.reconciler.store))

    def action_save(self) -> None:
        """Write the document to its file (ctrl+s)."""
        if self.document_path is None:
            self.notify("No file to save to", severity="warning")
            return

        try:
            self.document_path.write_text(self.document_text, encoding="utf-8")
        except OSError as e:
            logger.error("document_save_failed", path=str(self.document_path), error=str(e))
            self.notify(f"Could not save {self.document_path.name}: {e}", severity="error")
            return

        logger.info("document_saved", path=str(self.document_path), length=len(self.document_text))
        self.notify(f"Saved {self.document_path.name}")
