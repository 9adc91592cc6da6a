"""Pydantic data models for Blockshop."""

from blockshop.models.block import Block, BlockKind
from blockshop.models.edit_action import (
    ACTION_DESCRIPTIONS,
    ACTION_INSTRUCTIONS,
    ActionState,
    EditAction,
    RewriteRequest,
)

__all__ = [
    "ACTION_DESCRIPTIONS",
    "ACTION_INSTRUCTIONS",
    "ActionState",
    "Block",
    "BlockKind",
    "EditAction",
    "RewriteRequest",
]
