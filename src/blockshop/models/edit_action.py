"""Edit action definitions for block rewrites."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EditAction(str, Enum):
    """Rewrite actions offered by the action menu."""

    REWORD = "reword"
    REFINE = "refine"
    SHORTEN = "shorten"
    EXPAND = "expand"
    SUMMARIZE = "summarize"
    OTHER = "other"


class ActionState(str, Enum):
    """Per-block state of the edit action cycle."""

    IDLE = "idle"
    SELECTING = "selecting"
    AWAITING_CUSTOM_PROMPT = "awaiting_custom_prompt"
    INVOKING = "invoking"


# Prompt prefixes for the named actions. OTHER uses the user's instruction.
ACTION_INSTRUCTIONS: dict[EditAction, str] = {
    EditAction.REWORD: "Reword this text while keeping the semantic intent",
    EditAction.REFINE: "Improve the style and preserve the meaning",
    EditAction.SHORTEN: "Make this text more concise",
    EditAction.EXPAND: "Add more depth and detail to this text",
    EditAction.SUMMARIZE: "Summarize this text while retaining core ideas",
}

# Menu text, in display order
ACTION_DESCRIPTIONS: dict[EditAction, str] = {
    EditAction.REWORD: "Alter words, keep semantic intent",
    EditAction.REFINE: "Improve style, preserve meaning",
    EditAction.SHORTEN: "Cut clutter, keep message",
    EditAction.EXPAND: "Add depth, retain purpose",
    EditAction.SUMMARIZE: "Condense, retain core ideas",
    EditAction.OTHER: "Customize with any instruction",
}


class RewriteRequest(BaseModel):
    """A single rewrite request sent to the rewrite service."""

    block_id: str = Field(
        ...,
        description="Block whose content is being rewritten"
    )

    action: EditAction = Field(
        ...,
        description="Action picked from the menu"
    )

    instruction: str = Field(
        ...,
        description="Resolved instruction (template or custom text)"
    )

    content: str = Field(
        ...,
        description="Block content at the time the request was built"
    )

    model_config = {"frozen": True}

    @property
    def prompt(self) -> str:
        """Formatted prompt: instruction followed by the quoted content."""
        return format_prompt(self.instruction, self.content)


def resolve_instruction(action: EditAction, custom_instruction: Optional[str] = None) -> str:
    """
    Get the instruction text for an action.

    Args:
        action: Menu action
        custom_instruction: User text, required for EditAction.OTHER

    Returns:
        Instruction template, or the custom instruction verbatim

    Raises:
        ValueError: If OTHER is given without a non-blank instruction
    """
    if action is EditAction.OTHER:
        if custom_instruction is None or not custom_instruction.strip():
            raise ValueError("Custom instruction must not be empty")
        return custom_instruction
    return ACTION_INSTRUCTIONS[action]


def build_rewrite_prompt(
    action: EditAction,
    content: str,
    custom_instruction: Optional[str] = None
) -> str:
    """
    Build the prompt string for a rewrite.

    Example:
        >>> build_rewrite_prompt(EditAction.SHORTEN, "Hello world.")
        'Make this text more concise: "Hello world."'
    """
    instruction = resolve_instruction(action, custom_instruction)
    return format_prompt(instruction, content)


def format_prompt(instruction: str, content: str) -> str:
    """Join an instruction and the block content into the service input format."""
    return f'{instruction}: "{content}"'
