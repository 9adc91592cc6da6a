"""UI tests for the workshop view: expand, edit, collapse and move blocks."""

import pytest

from blockshop.tui.app import BlockshopApp
from blockshop.tui.screens import BlockEditorScreen, WorkshopScreen
from blockshop.tui.widgets.block_tree import BlockTree
from blockshop.tui.widgets.content_editor import ContentEditor


async def open_workshop(app, pilot):
    await pilot.pause()
    await pilot.press("ctrl+w")
    await pilot.pause()
    assert isinstance(app.screen, WorkshopScreen)
    return app.screen


@pytest.mark.asyncio
async def test_enter_expands_paragraph(document_text):
    app = BlockshopApp(text=document_text)

    async with app.run_test() as pilot:
        screen = await open_workshop(app, pilot)

        await pilot.press("enter")
        await pilot.pause()

        assert app.reconciler.store.is_expanded("block-0")
        tree = screen.query_one(BlockTree)
        paragraph = tree.root.children[0]
        assert [node.data for node in paragraph.children] == [
            "block-0-sentence-0",
            "block-0-sentence-1",
            "block-0-sentence-2",
        ]
        assert paragraph.children[2].label.plain == "Red fish."
        assert app.document_text == document_text


@pytest.mark.asyncio
async def test_collapse_discards_sentences(document_text):
    app = BlockshopApp(text=document_text)

    async with app.run_test() as pilot:
        screen = await open_workshop(app, pilot)
        screen.activate_block("block-0")
        await pilot.pause()

        await pilot.press("x")
        await pilot.pause()

        assert not app.reconciler.store.is_expanded("block-0")
        assert len(screen.query_one(BlockTree).root.children[0].children) == 0


@pytest.mark.asyncio
async def test_edit_paragraph_in_modal(document_text):
    app = BlockshopApp(text=document_text)

    async with app.run_test() as pilot:
        await open_workshop(app, pilot)

        await pilot.press("e")
        await pilot.pause()

        assert isinstance(app.screen, BlockEditorScreen)
        editor = app.screen.query_one(ContentEditor)
        assert editor.get_content() == "One fish. Two fish. Red fish."

        editor.load_content("Old fish.")
        await pilot.press("ctrl+s")
        await pilot.pause()

        assert isinstance(app.screen, WorkshopScreen)
        assert app.document_text == "Old fish.\n\nBlue fish!"
        assert app.screen.query_one(BlockTree).root.children[0].label.plain == "Old fish."


@pytest.mark.asyncio
async def test_cancel_edit_keeps_content(document_text):
    app = BlockshopApp(text=document_text)

    async with app.run_test() as pilot:
        await open_workshop(app, pilot)

        await pilot.press("e")
        await pilot.pause()
        app.screen.query_one(ContentEditor).load_content("Discarded.")
        await pilot.press("escape")
        await pilot.pause()

        assert isinstance(app.screen, WorkshopScreen)
        assert app.document_text == document_text


@pytest.mark.asyncio
async def test_edit_sentence_keeps_document_text(document_text):
    app = BlockshopApp(text=document_text)

    async with app.run_test() as pilot:
        screen = await open_workshop(app, pilot)
        screen.activate_block("block-0")
        await pilot.pause()

        screen.open_editor("block-0-sentence-1")
        await pilot.pause()
        app.screen.query_one(ContentEditor).load_content("Three fish.")
        await pilot.press("ctrl+s")
        await pilot.pause()

        assert app.reconciler.store.find_block("block-0-sentence-1").content == "Three fish."
        assert app.document_text == document_text


@pytest.mark.asyncio
async def test_move_paragraph_down_and_up(document_text):
    app = BlockshopApp(text=document_text)

    async with app.run_test() as pilot:
        screen = await open_workshop(app, pilot)

        await pilot.press("J")
        await pilot.pause()

        assert app.reconciler.store.paragraph_order == ["block-1", "block-0"]
        assert app.document_text == "Blue fish!\n\nOne fish. Two fish. Red fish."
        tree = screen.query_one(BlockTree)
        assert tree.get_current_block_id() == "block-0"

        await pilot.press("K")
        await pilot.pause()

        assert app.reconciler.store.paragraph_order == ["block-0", "block-1"]
        assert app.document_text == document_text


@pytest.mark.asyncio
async def test_move_past_edge_is_noop(document_text):
    app = BlockshopApp(text=document_text)

    async with app.run_test() as pilot:
        await open_workshop(app, pilot)

        await pilot.press("K")
        await pilot.pause()

        assert app.reconciler.store.paragraph_order == ["block-0", "block-1"]
