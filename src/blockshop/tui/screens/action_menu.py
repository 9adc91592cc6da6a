"""Action menu for AI edits on a block.

Shows the named rewrite actions plus "Other", which switches to a form for a
free-form instruction. The screen drives the dispatcher's menu transitions
and dismisses with the chosen ``(action, instruction)``; the rewrite itself
runs in a worker owned by the workshop screen.
"""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, OptionList
from textual.widgets.option_list import Option

from blockshop.models.edit_action import ACTION_DESCRIPTIONS, EditAction
from blockshop.services.dispatcher import EditActionDispatcher

MenuChoice = tuple[EditAction, Optional[str]]


class ActionMenuScreen(ModalScreen[Optional[MenuChoice]]):
    """Pick a rewrite action for one block."""

    DEFAULT_CSS = """
    ActionMenuScreen {
        align: center middle;
    }

    #action-menu {
        width: 60;
        height: auto;
        border: solid $accent;
        border-title-align: center;
        background: $surface;
        padding: 0 1;
    }

    #action-options {
        height: auto;
    }

    #custom-instruction {
        display: none;
    }

    #action-hint {
        color: $text-muted;
    }
    """

    BINDINGS = [
        ("escape", "back", "Back"),
    ]

    def __init__(self, block_id: str, dispatcher: EditActionDispatcher, **kwargs):
        super().__init__(**kwargs)
        self.block_id = block_id
        self.dispatcher = dispatcher

    def compose(self) -> ComposeResult:
        with Vertical(id="action-menu"):
            yield OptionList(
                *[
                    Option(f"{action.value.title()}: {description}", id=action.value)
                    for action, description in ACTION_DESCRIPTIONS.items()
                ],
                id="action-options",
            )
            yield Input(placeholder="What change do you want to make?", id="custom-instruction")
            yield Label("enter: choose   escape: back", id="action-hint")

    def on_mount(self) -> None:
        self.query_one("#action-menu").border_title = f"AI edit {self.block_id}"
        self.query_one(OptionList).focus()

    @property
    def custom_form_open(self) -> bool:
        return self.query_one(Input).display

    def _show_custom_form(self, show: bool) -> None:
        options = self.query_one(OptionList)
        form = self.query_one(Input)
        options.display = not show
        form.display = show
        if show:
            form.value = ""
            form.focus()
        else:
            options.focus()

    async def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        action = EditAction(event.option.id)
        if action is EditAction.OTHER:
            await self.dispatcher.select_action(self.block_id, action)
            self._show_custom_form(True)
        else:
            self.dismiss((action, None))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        instruction = event.value
        if not instruction.strip():
            self.notify("Enter an instruction first", severity="warning")
            return
        self.dismiss((EditAction.OTHER, instruction))

    def action_back(self) -> None:
        if self.custom_form_open:
            self.dispatcher.cancel_custom(self.block_id)
            self._show_custom_form(False)
        else:
            self.dispatcher.close_menu(self.block_id)
            self.dismiss(None)
