"""Drag-and-drop reordering of top-level paragraph blocks."""

from typing import Sequence, TypeVar

from blockshop.services.block_store import BlockStore
from blockshop.utils.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


def move_item(items: Sequence[T], old_index: int, new_index: int) -> list[T]:
    """
    Return a copy of ``items`` with one element moved.

    The element at ``old_index`` is removed and reinserted at ``new_index``;
    everything in between shifts by one position.

    Example:
        >>> move_item(["p0", "p1", "p2"], 2, 0)
        ['p2', 'p0', 'p1']
    """
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


def reorder(store: BlockStore, moved_id: str, target_id: str) -> bool:
    """
    Move a paragraph onto the position held by another paragraph.

    Only the top-level order changes. Block objects, their ids and content,
    and the sentence cache are untouched.

    Args:
        store: Block store to mutate
        moved_id: Paragraph being dragged
        target_id: Paragraph it was dropped on

    Returns:
        True if the order changed; False for a self-move or an unknown id
    """
    if moved_id == target_id:
        return False

    order = store.paragraph_order
    if moved_id not in order or target_id not in order:
        logger.debug("reorder_block_not_found", moved_id=moved_id, target_id=target_id)
        return False

    old_index = order.index(moved_id)
    new_index = order.index(target_id)
    store.paragraph_order[:] = move_item(order, old_index, new_index)

    logger.info(
        "blocks_reordered",
        moved_id=moved_id,
        target_id=target_id,
        from_index=old_index,
        to_index=new_index,
    )
    return True
