"""StatusPanel widget for displaying rewrites in flight."""

from typing import Iterable

from textual.widgets import Static


class StatusPanel(Static):
    """Status line listing blocks that are being rewritten."""

    def __init__(self, rewrites_enabled: bool = True, *args, **kwargs):
        """Initialize StatusPanel.

        Args:
            rewrites_enabled: Whether a rewrite service is configured
        """
        super().__init__("", *args, id="status-panel", **kwargs)
        self.rewrites_enabled = rewrites_enabled

    def on_mount(self) -> None:
        self.update_status([])

    def update_status(self, busy_blocks: Iterable[str]) -> None:
        """Update status display from the blocks currently invoking a rewrite."""
        busy = list(busy_blocks)
        if busy:
            self.update(f"Rewriting {', '.join(busy)}...")
        elif not self.rewrites_enabled:
            self.update("Ready (AI edits disabled: no LLM configured)")
        else:
            self.update("Ready")
