"""Keep the block store and the linear text buffer consistent.

Exactly one side is authoritative at a time, decided by who wrote last:

- Text arriving from outside that differs from the store's serialization
  replaces the store wholesale (``sync``).
- Mutations made through the reconciler patch the store in place and then
  push the new serialization outward (``commit``).

The reconciler compares incoming text with the store's own serialization, so
text it produced itself is recognized as already reconciled and never causes
a rebuild loop.
"""

from typing import Callable, Optional

from blockshop.services.block_store import BlockStore
from blockshop.services.reorder import reorder as reorder_blocks
from blockshop.utils.logging import get_logger


logger = get_logger(__name__)

ContentChangeCallback = Callable[[str], None]


class Reconciler:
    """Owns the current BlockStore and mediates every change to it."""

    def __init__(self, text: str = "", on_content_change: Optional[ContentChangeCallback] = None):
        """
        Initialize reconciler with the document's current text.

        Args:
            text: Initial linear text
            on_content_change: Called with the new text after every internal mutation
        """
        self.on_content_change = on_content_change
        self.store = BlockStore.from_text(text)
        self.generation = 0
        self.last_serialized = self.store.to_text()

    @property
    def text(self) -> str:
        """Current serialization of the store."""
        return self.store.to_text()

    def sync(self, text: str) -> bool:
        """
        Reconcile with externally supplied text.

        Args:
            text: Text from the flat view (or any other outside source)

        Returns:
            True if the store was rebuilt
        """
        if not isinstance(text, str):
            logger.warning("reconcile_malformed_input", input_type=type(text).__name__)
            return False

        if text == self.store.to_text():
            return False

        self.store = BlockStore.from_text(text)
        self.generation += 1
        self.last_serialized = self.store.to_text()
        logger.info(
            "store_rebuilt",
            generation=self.generation,
            paragraph_count=len(self.store),
            text_length=len(text),
        )
        return True

    def commit(self) -> str:
        """Serialize the store and push the result to the content sink."""
        text = self.store.to_text()
        self.last_serialized = text
        if self.on_content_change is not None:
            self.on_content_change(text)
        return text

    # Internal mutations

    def edit_block(self, block_id: str, content: str) -> bool:
        """Edit a block's content and publish the new text."""
        if not self.store.edit_block(block_id, content):
            return False
        self.commit()
        return True

    def apply_rewrite(self, block_id: str, content: str) -> bool:
        """Apply a rewrite result to a block and publish the new text."""
        applied = self.edit_block(block_id, content)
        if applied:
            logger.info("rewrite_applied", block_id=block_id, content_length=len(content))
        else:
            logger.debug("rewrite_target_missing", block_id=block_id)
        return applied

    def reorder(self, moved_id: str, target_id: str) -> bool:
        """Move a paragraph onto another's position and publish the new text."""
        if not reorder_blocks(self.store, moved_id, target_id):
            return False
        self.commit()
        return True

    def toggle(self, paragraph_id: str) -> bool:
        """Expand or collapse a paragraph. The text is unchanged, so nothing is published."""
        return self.store.toggle(paragraph_id)

    def expand(self, paragraph_id: str) -> bool:
        self.store.expand(paragraph_id)
        return self.store.is_expanded(paragraph_id)

    def collapse(self, paragraph_id: str) -> bool:
        return self.store.collapse(paragraph_id)
