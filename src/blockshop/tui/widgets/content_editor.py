"""ContentEditor widget for editing document and block text."""

from textual.widgets import TextArea
from textual.reactive import reactive


class ContentEditor(TextArea):
    """Multi-line text editor used by the flat view and the block editor."""

    # Reactive attribute to track if editor has focus
    editor_has_focus = reactive(False)

    def __init__(self, *args, id: str = "content-editor", **kwargs):
        """Initialize ContentEditor."""
        super().__init__("", *args, id=id, **kwargs)
        self.can_focus = True
        self.show_line_numbers = False

    def on_focus(self) -> None:
        """Highlight the border while focused."""
        self.editor_has_focus = True
        self.styles.border = ("heavy", "blue")

    def on_blur(self) -> None:
        self.editor_has_focus = False
        self.styles.border = ("solid", "white")

    def load_content(self, content: str) -> None:
        """Load content into the editor.

        Args:
            content: Text content to load
        """
        self.text = content

    def get_content(self) -> str:
        """Get current content from editor.

        Returns:
            Current text content
        """
        return self.text
