"""Custom exceptions for Blockshop services."""


class BlockshopError(Exception):
    """Base class for errors raised by the block editing core."""


class EmptyInstructionError(BlockshopError, ValueError):
    """Raised when a custom rewrite instruction is empty or whitespace-only.

    The submission is rejected before any rewrite request is made and the
    block's action state is left untouched.

    Attributes:
        block_id: Block the instruction was submitted for
    """

    def __init__(self, block_id: str):
        self.block_id = block_id
        super().__init__(f"Custom instruction for {block_id} must not be empty")


class BlockBusyError(BlockshopError):
    """Raised when an action menu is opened on a block with a rewrite in flight.

    Attributes:
        block_id: Block that is currently being rewritten
    """

    def __init__(self, block_id: str):
        self.block_id = block_id
        super().__init__(f"A rewrite is already running for {block_id}")


class InvalidTransitionError(BlockshopError):
    """Raised when an edit action step is not allowed from the block's current state.

    Attributes:
        block_id: Block whose state machine rejected the step
        current: State the block was in
        attempted: Name of the rejected step
    """

    def __init__(self, block_id: str, current: str, attempted: str):
        self.block_id = block_id
        self.current = current
        self.attempted = attempted
        super().__init__(f"Cannot {attempted} for {block_id} while {current}")


class EmptyRewriteError(BlockshopError):
    """Raised when the rewrite service returns no usable text."""
