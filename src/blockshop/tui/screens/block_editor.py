"""Modal editor for a single block's content."""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label

from blockshop.models.block import Block
from blockshop.tui.widgets.content_editor import ContentEditor


class BlockEditorScreen(ModalScreen[str | None]):
    """Edit one paragraph or sentence.

    Dismisses with the new content on save, or None on cancel.
    """

    DEFAULT_CSS = """
    BlockEditorScreen {
        align: center middle;
    }

    #block-editor-panel {
        width: 80%;
        height: 60%;
        border: solid $accent;
        border-title-align: center;
        background: $surface;
        padding: 0 1;
    }

    #block-editor {
        height: 1fr;
    }

    #block-editor-hint {
        height: auto;
        color: $text-muted;
    }
    """

    BINDINGS = [
        ("ctrl+s", "save", "Save"),
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, block: Block, **kwargs):
        super().__init__(**kwargs)
        self.block = block

    def compose(self) -> ComposeResult:
        with Vertical(id="block-editor-panel"):
            yield ContentEditor(id="block-editor")
            yield Label("ctrl+s: save   escape: cancel", id="block-editor-hint")

    def on_mount(self) -> None:
        self.query_one("#block-editor-panel").border_title = f"Edit {self.block.kind} {self.block.id}"
        editor = self.query_one(ContentEditor)
        editor.load_content(self.block.content)
        editor.focus()

    def action_save(self) -> None:
        self.dismiss(self.query_one(ContentEditor).get_content())

    def action_cancel(self) -> None:
        self.dismiss(None)
