"""End-to-end editing workflow across the text buffer, store and dispatcher."""

import asyncio

import pytest

from blockshop.models.edit_action import EditAction
from blockshop.services.dispatcher import EditActionDispatcher
from blockshop.services.reconciler import Reconciler


class TextBuffer:
    """Stands in for the flat view: holds text and feeds edits back."""

    def __init__(self, text):
        self.text = text
        self.reconciler = Reconciler(text, on_content_change=self.receive)
        self.received = []

    def receive(self, text):
        self.text = text
        self.received.append(text)
        # The flat view echoes every change back as external text
        self.reconciler.sync(text)

    def type(self, text):
        self.text = text
        self.reconciler.sync(text)


@pytest.fixture
def buffer():
    return TextBuffer("Alpha one. Alpha two.\n\nBeta.\n\nGamma!")


def test_echoed_commits_never_rebuild(buffer):
    buffer.reconciler.expand("block-0")

    buffer.reconciler.reorder("block-2", "block-0")
    buffer.reconciler.edit_block("block-1", "Beta revised.")

    assert buffer.reconciler.generation == 0
    assert buffer.reconciler.store.is_expanded("block-0")
    assert buffer.text == "Gamma!\n\nAlpha one. Alpha two.\n\nBeta revised."


def test_typing_rebuilds_with_positional_ids(buffer):
    buffer.reconciler.reorder("block-2", "block-0")

    buffer.type(buffer.text + "\n\nDelta.")

    assert buffer.reconciler.generation == 1
    assert buffer.reconciler.store.paragraph_order == ["block-0", "block-1", "block-2", "block-3"]
    assert [b.content for b in buffer.reconciler.store.paragraphs] == [
        "Gamma!", "Alpha one. Alpha two.", "Beta.", "Delta."
    ]


def test_serialization_round_trip(buffer):
    """Whatever the store holds, rebuilding from its text gives the same paragraphs."""
    buffer.reconciler.edit_block("block-1", "Beta, edited.")
    buffer.reconciler.reorder("block-0", "block-2")
    text = buffer.reconciler.text

    rebuilt = Reconciler(text)

    assert [b.content for b in rebuilt.store.paragraphs] == [
        b.content for b in buffer.reconciler.store.paragraphs
    ]


@pytest.mark.asyncio
async def test_rewrite_then_edit_flow(buffer, make_rewrite_service):
    service = make_rewrite_service(replies={'Make this text more concise: "Alpha one. Alpha two."': "Alpha."})
    dispatcher = EditActionDispatcher(buffer.reconciler, service)
    buffer.reconciler.expand("block-0")

    assert await dispatcher.dispatch("block-0", EditAction.SHORTEN) is True

    # Rewriting an expanded paragraph re-derives its sentences
    assert [s.content for s in buffer.reconciler.store.sentences("block-0")] == ["Alpha."]
    assert buffer.text == "Alpha.\n\nBeta.\n\nGamma!"
    assert buffer.received[-1] == buffer.text


@pytest.mark.asyncio
async def test_rewrite_discarded_when_user_types(buffer, make_rewrite_service):
    service = make_rewrite_service(default="Too late.")
    service.gate = asyncio.Event()
    dispatcher = EditActionDispatcher(buffer.reconciler, service)

    task = asyncio.create_task(dispatcher.dispatch("block-1", EditAction.REWORD))
    await asyncio.sleep(0)
    buffer.type("Completely new text.")
    service.gate.set()

    assert await task is False
    assert buffer.text == "Completely new text."
    assert buffer.reconciler.text == "Completely new text."
