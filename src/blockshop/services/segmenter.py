"""Split linear text into paragraph and sentence blocks.

Both functions are pure: they never touch a store and always return fresh
Block objects. Malformed input degrades to an empty list.
"""

import re

from blockshop.models.block import Block
from blockshop.utils.logging import get_logger


logger = get_logger(__name__)

PARAGRAPH_DELIMITER = "\n\n"
SENTENCE_TERMINATOR = "."

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_TRAILING_TERMINATOR = re.compile(r"([.!?]+)\s*$")


def paragraph_id(index: int) -> str:
    """Positional id for the paragraph at ``index``."""
    return f"block-{index}"


def sentence_id(parent_id: str, index: int) -> str:
    """Id for the sentence at ``index`` within paragraph ``parent_id``."""
    return f"{parent_id}-sentence-{index}"


def segment_paragraphs(text: str) -> list[Block]:
    """
    Split text into paragraph blocks on blank-line boundaries.

    Each piece is stripped and empty pieces are dropped. Ids are assigned by
    position among the kept pieces.

    Args:
        text: Linear document text

    Returns:
        Paragraph blocks in document order (empty list for non-string input)

    Example:
        >>> [b.content for b in segment_paragraphs("One.\\n\\n\\n\\nTwo.")]
        ['One.', 'Two.']
    """
    if not isinstance(text, str):
        logger.warning("segmenter_malformed_input", scope="paragraph", input_type=type(text).__name__)
        return []

    pieces = [piece.strip() for piece in text.split(PARAGRAPH_DELIMITER)]
    return [
        Block(id=paragraph_id(index), content=piece, kind="paragraph")
        for index, piece in enumerate(p for p in pieces if p)
    ]


def segment_sentences(paragraph_text: str, parent_id: str) -> list[Block]:
    """
    Split a paragraph into sentence blocks with a punctuation heuristic.

    Splits on runs of ``.``, ``!`` and ``?``. Every sentence but the last gets
    a single ``.`` appended in place of whatever run was consumed. The last
    sentence never gets a synthetic terminator; it keeps the run that ended
    the paragraph, if there was one.

    Abbreviations, decimals and quoted punctuation are not special-cased.

    Args:
        paragraph_text: Paragraph content
        parent_id: Id of the owning paragraph

    Returns:
        Sentence blocks in order (empty list for non-string input)

    Example:
        >>> [b.content for b in segment_sentences("A. B! C?", "block-0")]
        ['A.', 'B.', 'C?']
    """
    if not isinstance(paragraph_text, str):
        logger.warning("segmenter_malformed_input", scope="sentence", input_type=type(paragraph_text).__name__)
        return []

    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(paragraph_text)]
    sentences = [s for s in sentences if s]
    if not sentences:
        return []

    match = _TRAILING_TERMINATOR.search(paragraph_text)
    final_terminator = match.group(1) if match else ""

    last = len(sentences) - 1
    return [
        Block(
            id=sentence_id(parent_id, index),
            content=sentence + (SENTENCE_TERMINATOR if index < last else final_terminator),
            kind="sentence",
            parent_id=parent_id,
        )
        for index, sentence in enumerate(sentences)
    ]
