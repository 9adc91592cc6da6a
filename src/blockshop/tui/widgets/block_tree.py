"""BlockTree widget for displaying the workshop view.

Paragraphs are top-level nodes; an expanded paragraph shows its sentences as
leaf children. The tree is rebuilt from the BlockStore after every change, so
it never holds state of its own beyond the cursor position.
"""

from typing import Iterable, Optional

from rich.text import Text
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from blockshop.models.block import Block
from blockshop.services.block_store import BlockStore


class BlockTree(Tree):
    """Tree widget showing paragraph and sentence blocks."""

    def __init__(self, *args, **kwargs):
        super().__init__("Document", *args, id="block-tree", **kwargs)
        self.show_root = False
        self.auto_expand = False

    def load_store(self, store: BlockStore, busy: Iterable[str] = ()) -> None:
        """Rebuild all nodes from the store, keeping the cursor on the same block.

        Args:
            store: Block store to display
            busy: Ids of blocks with a rewrite in flight
        """
        busy_ids = set(busy)
        current_id = self.get_current_block_id()

        self.clear()
        rows: list[str] = []
        for paragraph in store.paragraphs:
            rows.append(paragraph.id)
            label = self._create_block_label(paragraph, paragraph.id in busy_ids)
            if store.is_expanded(paragraph.id):
                node = self.root.add(label, data=paragraph.id, expand=True)
                for sentence in store.sentences(paragraph.id):
                    rows.append(sentence.id)
                    node.add_leaf(self._create_block_label(sentence, sentence.id in busy_ids), data=sentence.id)
            else:
                self.root.add_leaf(label, data=paragraph.id)

        if not rows:
            return

        if current_id in rows:
            line = rows.index(current_id)
        elif current_id is not None and current_id.split("-sentence-")[0] in rows:
            # Sentence vanished after a collapse: fall back to its paragraph
            line = rows.index(current_id.split("-sentence-")[0])
        else:
            line = 0
        self.call_after_refresh(self._restore_cursor, line)

    def _restore_cursor(self, line: int) -> None:
        self.cursor_line = line

    def _create_block_label(self, block: Block, busy: bool) -> Text:
        """Create Rich Text label for a block.

        Busy blocks get an hourglass and a dimmed style; sentences are
        italic.
        """
        label = Text()
        if busy:
            label.append("⏳ ", style="")
        style = "italic" if block.kind == "sentence" else ""
        if busy:
            style = f"{style} dim".strip()
        label.append(block.content, style=style)
        return label

    def get_current_block_id(self) -> Optional[str]:
        """Get block_id of the node under the cursor.

        Returns:
            Block ID string or None if no selection
        """
        node: Optional[TreeNode] = self.cursor_node
        if node is not None:
            return node.data
        return None
