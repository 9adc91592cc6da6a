"""Dispatch rewrite actions against single blocks.

Each block has its own action state:

    idle ──open_menu──► selecting ──select_action(other)──► awaiting_custom_prompt
      ▲                   │  ▲                                   │
      │             close_menu └────────── cancel_custom ─────────┤
      │                   ▼                                       │
      └────────────── invoking ◄─── select_action(named) ─────────┘ submit_custom

The rewrite call is the only step that suspends. While it runs the block is
"invoking" and further dispatches on it are rejected; other blocks are free.
The busy state is always cleared, whether the call succeeds, fails or is
cancelled.
"""

import asyncio
from typing import Callable, Optional, Protocol

from blockshop.models.edit_action import (
    ActionState,
    EditAction,
    RewriteRequest,
    resolve_instruction,
)
from blockshop.services.exceptions import (
    BlockBusyError,
    EmptyInstructionError,
    InvalidTransitionError,
)
from blockshop.services.reconciler import Reconciler
from blockshop.utils.logging import get_logger


logger = get_logger(__name__)


class RewriteService(Protocol):
    """Anything that turns a formatted rewrite prompt into replacement text."""

    async def generate(self, prompt: str) -> str:
        ...


class EditActionDispatcher:
    """
    Runs the edit action cycle for blocks in a reconciler's store.

    Blocks not present in ``_states`` are idle.
    """

    def __init__(
        self,
        reconciler: Reconciler,
        rewrite_service: Optional[RewriteService],
        on_state_change: Optional[Callable[[str, ActionState], None]] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            reconciler: Reconciler whose store is read and updated
            rewrite_service: Rewrite backend (None disables rewrites)
            on_state_change: Called with (block_id, new_state) on every transition
        """
        self.reconciler = reconciler
        self.rewrite_service = rewrite_service
        self.on_state_change = on_state_change
        self._states: dict[str, ActionState] = {}

    @property
    def enabled(self) -> bool:
        return self.rewrite_service is not None

    def state(self, block_id: str) -> ActionState:
        return self._states.get(block_id, ActionState.IDLE)

    @property
    def busy_blocks(self) -> list[str]:
        """Ids of blocks with a rewrite in flight."""
        return [
            block_id for block_id, state in self._states.items()
            if state is ActionState.INVOKING
        ]

    def _set_state(self, block_id: str, state: ActionState) -> None:
        if state is ActionState.IDLE:
            self._states.pop(block_id, None)
        else:
            self._states[block_id] = state
        if self.on_state_change is not None:
            self.on_state_change(block_id, state)

    def _require(self, block_id: str, expected: ActionState, attempted: str) -> None:
        current = self.state(block_id)
        if current is ActionState.INVOKING:
            raise BlockBusyError(block_id)
        if current is not expected:
            raise InvalidTransitionError(block_id, current.value, attempted)

    # Menu transitions

    def open_menu(self, block_id: str) -> None:
        """Idle → Selecting."""
        self._require(block_id, ActionState.IDLE, "open the action menu")
        self._set_state(block_id, ActionState.SELECTING)
        logger.debug("action_menu_opened", block_id=block_id)

    def close_menu(self, block_id: str) -> None:
        """Selecting → Idle."""
        self._require(block_id, ActionState.SELECTING, "close the action menu")
        self._set_state(block_id, ActionState.IDLE)
        logger.debug("action_menu_closed", block_id=block_id)

    def reset(self, block_id: str) -> None:
        """Return a block to idle unless a rewrite is in flight for it."""
        if self.state(block_id) is not ActionState.INVOKING:
            self._set_state(block_id, ActionState.IDLE)

    def cancel_custom(self, block_id: str) -> None:
        """AwaitingCustomPrompt → Selecting."""
        self._require(block_id, ActionState.AWAITING_CUSTOM_PROMPT, "cancel the custom instruction")
        self._set_state(block_id, ActionState.SELECTING)

    async def select_action(self, block_id: str, action: EditAction) -> bool:
        """
        Pick an action from the menu.

        ``other`` moves to the custom instruction form; a named action runs
        the rewrite immediately.

        Returns:
            True if a rewrite was applied
        """
        self._require(block_id, ActionState.SELECTING, f"select {action.value}")
        if action is EditAction.OTHER:
            self._set_state(block_id, ActionState.AWAITING_CUSTOM_PROMPT)
            return False

        return await self._invoke(block_id, action, None)

    async def submit_custom(self, block_id: str, instruction: str) -> bool:
        """
        Submit the custom instruction form.

        Raises:
            EmptyInstructionError: If the instruction is blank (state unchanged)

        Returns:
            True if a rewrite was applied
        """
        self._require(block_id, ActionState.AWAITING_CUSTOM_PROMPT, "submit a custom instruction")
        if not instruction or not instruction.strip():
            raise EmptyInstructionError(block_id)

        return await self._invoke(block_id, EditAction.OTHER, instruction)

    # Rewrite

    async def dispatch(
        self,
        block_id: str,
        action: EditAction | str,
        custom_instruction: Optional[str] = None,
    ) -> bool:
        """
        Rewrite one block's content with the rewrite service.

        Args:
            block_id: Paragraph or cached sentence id
            action: Action (enum or its string value)
            custom_instruction: Instruction text for ``other``

        Returns:
            True if the rewrite result was applied to the store

        Raises:
            EmptyInstructionError: If ``other`` is given a blank instruction
            ValueError: If ``action`` is not a known action name
        """
        action = EditAction(action)
        if action is EditAction.OTHER and (custom_instruction is None or not custom_instruction.strip()):
            raise EmptyInstructionError(block_id)

        if self.state(block_id) is ActionState.INVOKING:
            logger.warning("rewrite_rejected_block_busy", block_id=block_id, action=action.value)
            return False

        return await self._invoke(block_id, action, custom_instruction)

    async def _invoke(self, block_id: str, action: EditAction, custom_instruction: Optional[str]) -> bool:
        """Resolve the block, call the rewrite service and apply the result."""
        block = self.reconciler.store.find_block(block_id)
        if block is None:
            logger.debug("rewrite_block_not_found", block_id=block_id, action=action.value)
            self._set_state(block_id, ActionState.IDLE)
            return False

        if self.rewrite_service is None:
            logger.warning("rewrite_service_unavailable", block_id=block_id, action=action.value)
            self._set_state(block_id, ActionState.IDLE)
            return False

        request = RewriteRequest(
            block_id=block_id,
            action=action,
            instruction=resolve_instruction(action, custom_instruction),
            content=block.content,
        )
        generation = self.reconciler.generation

        self._set_state(block_id, ActionState.INVOKING)
        logger.info(
            "rewrite_started",
            block_id=block_id,
            action=action.value,
            kind=block.kind,
            content_length=len(block.content),
        )
        logger.debug("rewrite_prompt", block_id=block_id, prompt=request.prompt)

        try:
            result = await self.rewrite_service.generate(request.prompt)
            if not isinstance(result, str):
                logger.error(
                    "rewrite_failed",
                    block_id=block_id,
                    action=action.value,
                    error="Rewrite service returned a non-string result",
                    error_type=type(result).__name__,
                )
                return False
        except asyncio.CancelledError:
            logger.info("rewrite_cancelled", block_id=block_id, action=action.value)
            raise
        except Exception as e:
            logger.error(
                "rewrite_failed",
                block_id=block_id,
                action=action.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        finally:
            self._set_state(block_id, ActionState.IDLE)

        if generation != self.reconciler.generation:
            logger.info(
                "rewrite_discarded_stale_store",
                block_id=block_id,
                started_generation=generation,
                current_generation=self.reconciler.generation,
            )
            return False

        # A re-split replaces sentence blocks under the same positional ids
        if self.reconciler.store.find_block(block_id) is not block:
            logger.info("rewrite_discarded_block_replaced", block_id=block_id)
            return False

        return self.reconciler.apply_rewrite(block_id, result)
