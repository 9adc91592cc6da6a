"""Demo for the Blockshop editor without an LLM.

Runs the full app with a canned rewrite service, so the workshop view's AI
edits can be tried offline:
- ctrl+w switches to the workshop view
- enter expands a paragraph into sentences, or edits it once expanded
- a opens the AI edit menu (replies arrive after a short delay)

Run: python demos/demo_app.py
"""

import asyncio

from blockshop.models.edit_action import ACTION_INSTRUCTIONS, EditAction
from blockshop.tui.app import BlockshopApp


class CannedRewriteService:
    """Pretend rewrite service: tags the text with the action it was asked for."""

    def __init__(self, delay: float = 1.5):
        self.delay = delay

    async def generate(self, prompt: str) -> str:
        await asyncio.sleep(self.delay)
        instruction, _, quoted = prompt.partition(': "')
        content = quoted[:-1] if quoted.endswith('"') else quoted

        for action, template in ACTION_INSTRUCTIONS.items():
            if instruction == template:
                return self._rewrite(action, content)
        return f"{content} [{instruction}]"

    def _rewrite(self, action: EditAction, content: str) -> str:
        words = content.split()
        if action is EditAction.SHORTEN:
            return " ".join(words[: max(3, len(words) // 2)]) + "."
        if action is EditAction.SUMMARIZE:
            return " ".join(words[:5]) + "..."
        if action is EditAction.EXPAND:
            return f"{content} This point deserves a closer look, with an example or two."
        return content.upper() if action is EditAction.REWORD else content.capitalize()


def main():
    app = BlockshopApp(rewrite_service=CannedRewriteService())
    app.run()


if __name__ == "__main__":
    main()
