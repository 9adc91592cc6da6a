"""Block model for the workshop view hierarchy."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


BlockKind = Literal["paragraph", "sentence"]


class Block(BaseModel):
    """A paragraph or sentence in the workshop view.

    Paragraphs live in the top-level order; sentences belong to exactly one
    paragraph and reference it through ``parent_id``.
    """

    id: str = Field(
        ...,
        description="Stable identifier, unique among the block's siblings"
    )

    content: str = Field(
        ...,
        description="Block text, authoritative for its scope"
    )

    kind: BlockKind = Field(
        ...,
        description="Block kind: top-level paragraph or nested sentence"
    )

    parent_id: Optional[str] = Field(
        default=None,
        description="Owning paragraph id (sentences only)"
    )

    model_config = {"frozen": False}  # Content is edited in place

    @model_validator(mode="after")
    def check_parent(self) -> "Block":
        """Sentences must name their paragraph; paragraphs must not have one."""
        if self.kind == "sentence" and not self.parent_id:
            raise ValueError(f"Sentence block {self.id} requires a parent_id")
        if self.kind == "paragraph" and self.parent_id is not None:
            raise ValueError(f"Paragraph block {self.id} cannot have a parent_id")
        return self
