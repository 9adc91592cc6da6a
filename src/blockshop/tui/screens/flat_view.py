"""Flat view: the whole document in one text editor."""

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Label, TextArea
import structlog

from blockshop.tui.widgets.content_editor import ContentEditor

logger = structlog.get_logger()


class FlatViewScreen(Screen):
    """Plain text editing of the document.

    Every change in the editor is handed to the app, which reconciles the
    block store against it.
    """

    DEFAULT_CSS = """
    FlatViewScreen {
        layout: vertical;
    }

    #view-title {
        height: auto;
        padding: 0 1;
    }

    #flat-container {
        height: 1fr;
    }

    ContentEditor {
        height: 1fr;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label("Flat view (ctrl+w: workshop view)", id="view-title")
        with Container(id="flat-container"):
            yield ContentEditor()
        yield Footer()

    def on_mount(self) -> None:
        self._load_document()
        self.query_one(ContentEditor).focus()

    def on_screen_resume(self) -> None:
        """Reload the text when coming back from the workshop view."""
        self._load_document()

    def _load_document(self) -> None:
        editor = self.query_one(ContentEditor)
        if editor.get_content() != self.app.document_text:
            editor.load_content(self.app.document_text)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Push edits to the app as the new external text."""
        self.app.update_text(event.text_area.text)
