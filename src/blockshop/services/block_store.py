"""In-memory hierarchical state for the workshop view.

Blocks are kept in an arena keyed by id. Order is held separately: one list
for the top-level paragraphs and one list per expanded paragraph (the
sentence cache). Blocks never point at each other, so moving or discarding
a list never leaves dangling parent/child references.
"""

from typing import Iterator, Optional

from blockshop.models.block import Block
from blockshop.services.segmenter import (
    PARAGRAPH_DELIMITER,
    segment_paragraphs,
    segment_sentences,
)
from blockshop.utils.logging import get_logger


logger = get_logger(__name__)


class BlockStore:
    """
    Paragraph blocks, per-paragraph sentence blocks and the expansion set.

    A paragraph is either collapsed (no sentence list) or expanded (sentence
    list derived from its content at expansion time, or at its last edit).
    """

    def __init__(self, paragraphs: Optional[list[Block]] = None):
        """
        Initialize store from an ordered list of paragraph blocks.

        Args:
            paragraphs: Paragraph blocks in document order
        """
        self._blocks: dict[str, Block] = {}
        self.paragraph_order: list[str] = []
        self.sentence_orders: dict[str, list[str]] = {}
        self.expanded: set[str] = set()

        for block in paragraphs or []:
            self._blocks[block.id] = block
            self.paragraph_order.append(block.id)

    @classmethod
    def from_text(cls, text: str) -> "BlockStore":
        """Build a fresh store from linear text (nothing expanded, empty cache)."""
        return cls(segment_paragraphs(text))

    def to_text(self) -> str:
        """Serialize paragraph contents joined by the paragraph delimiter."""
        return PARAGRAPH_DELIMITER.join(block.content for block in self.paragraphs)

    # Read access

    @property
    def paragraphs(self) -> list[Block]:
        """Paragraph blocks in current order."""
        return [self._blocks[block_id] for block_id in self.paragraph_order]

    def sentences(self, paragraph_id: str) -> list[Block]:
        """Sentence blocks of an expanded paragraph (empty when collapsed)."""
        if paragraph_id not in self.expanded:
            return []
        return [self._blocks[block_id] for block_id in self.sentence_orders.get(paragraph_id, [])]

    def is_expanded(self, paragraph_id: str) -> bool:
        return paragraph_id in self.expanded

    def is_paragraph(self, block_id: str) -> bool:
        return block_id in self.paragraph_order

    def find_block(self, block_id: str) -> Optional[Block]:
        """
        Find a block by id.

        Searches the paragraph list first, then every cached sentence list.

        Returns:
            Block if found, None otherwise
        """
        if block_id in self.paragraph_order:
            return self._blocks[block_id]
        for order in self.sentence_orders.values():
            if block_id in order:
                return self._blocks[block_id]
        return None

    def __len__(self) -> int:
        return len(self.paragraph_order)

    def __contains__(self, block_id: object) -> bool:
        return isinstance(block_id, str) and self.find_block(block_id) is not None

    def __iter__(self) -> Iterator[Block]:
        return iter(self.paragraphs)

    # Mutations

    def edit_block(self, block_id: str, content: str) -> bool:
        """
        Replace the content of a paragraph or cached sentence.

        Editing an expanded paragraph re-splits its sentences from the new
        content. Editing a sentence changes only that sentence.

        Args:
            block_id: Target block id
            content: New content

        Returns:
            True if a block was updated, False if the id is unknown or the
            content is not a string
        """
        if not isinstance(content, str):
            logger.warning("edit_block_malformed_input", block_id=block_id, input_type=type(content).__name__)
            return False

        block = self.find_block(block_id)
        if block is None:
            logger.debug("edit_block_not_found", block_id=block_id)
            return False

        block.content = content
        if block.kind == "paragraph" and block_id in self.expanded:
            self._split(block)

        logger.info("block_edited", block_id=block_id, kind=block.kind, content_length=len(content))
        return True

    def expand(self, paragraph_id: str) -> list[Block]:
        """
        Expand a paragraph into freshly derived sentence blocks.

        Returns:
            The new sentence blocks (empty if the id is not a paragraph)
        """
        if paragraph_id not in self.paragraph_order:
            logger.debug("expand_block_not_found", block_id=paragraph_id)
            return []

        sentences = self._split(self._blocks[paragraph_id])
        self.expanded.add(paragraph_id)
        logger.info("block_expanded", block_id=paragraph_id, sentence_count=len(sentences))
        return sentences

    def collapse(self, paragraph_id: str) -> bool:
        """
        Collapse a paragraph and discard its cached sentences.

        Returns:
            True if the paragraph was expanded
        """
        if paragraph_id not in self.expanded:
            return False

        self.expanded.discard(paragraph_id)
        self._drop_sentences(paragraph_id)
        logger.info("block_collapsed", block_id=paragraph_id)
        return True

    def toggle(self, paragraph_id: str) -> bool:
        """
        Expand a collapsed paragraph or collapse an expanded one.

        Returns:
            True if the paragraph is expanded afterwards
        """
        if paragraph_id in self.expanded:
            self.collapse(paragraph_id)
            return False
        self.expand(paragraph_id)
        return paragraph_id in self.expanded

    def _split(self, paragraph: Block) -> list[Block]:
        """Replace the sentence cache for ``paragraph`` with a fresh split."""
        self._drop_sentences(paragraph.id)
        sentences = segment_sentences(paragraph.content, paragraph.id)
        for sentence in sentences:
            self._blocks[sentence.id] = sentence
        self.sentence_orders[paragraph.id] = [sentence.id for sentence in sentences]
        return sentences

    def _drop_sentences(self, paragraph_id: str) -> None:
        for block_id in self.sentence_orders.pop(paragraph_id, []):
            self._blocks.pop(block_id, None)
