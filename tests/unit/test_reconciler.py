"""Unit tests for the Reconciler."""

from unittest.mock import Mock

import pytest

from blockshop.services.reconciler import Reconciler


@pytest.fixture
def sink():
    return Mock()


@pytest.fixture
def reconciler(sample_text, sink):
    return Reconciler(sample_text, on_content_change=sink)


class TestSync:
    """Test reconciling with external text."""

    def test_initial_build(self, reconciler, sample_text):
        assert len(reconciler.store) == 3
        assert reconciler.generation == 0
        assert reconciler.text == sample_text

    def test_same_text_is_noop(self, reconciler, sample_text):
        store = reconciler.store
        reconciler.store.expand("block-0")

        assert reconciler.sync(sample_text) is False

        assert reconciler.store is store
        assert reconciler.store.is_expanded("block-0")
        assert reconciler.generation == 0

    def test_different_text_rebuilds(self, reconciler):
        reconciler.store.expand("block-0")

        assert reconciler.sync("Brand new.\n\nText.") is True

        assert [b.content for b in reconciler.store.paragraphs] == ["Brand new.", "Text."]
        assert reconciler.store.expanded == set()
        assert reconciler.store.sentence_orders == {}
        assert reconciler.generation == 1

    def test_compares_against_serialization(self, reconciler, sample_text):
        """Padded text differs from the serialization, so it rebuilds once."""
        assert reconciler.sync(sample_text.replace("\n\n", "\n\n\n\n")) is True
        assert reconciler.sync(sample_text) is False

    def test_sync_does_not_publish(self, reconciler, sink):
        reconciler.sync("Other text.")

        sink.assert_not_called()

    def test_empty_text_clears_store(self, reconciler):
        assert reconciler.sync("") is True

        assert len(reconciler.store) == 0
        assert reconciler.text == ""

    def test_non_string_is_ignored(self, reconciler, sample_text):
        assert reconciler.sync(None) is False
        assert reconciler.sync(["not", "text"]) is False

        assert reconciler.text == sample_text
        assert reconciler.generation == 0


class TestMutations:
    """Test internal mutations and publishing."""

    def test_edit_paragraph_publishes(self, reconciler, sink):
        assert reconciler.edit_block("block-2", "Final words.") is True

        sink.assert_called_once_with(
            "The first paragraph. It has two sentences.\n\n"
            "Second paragraph here! Is it short? Yes\n\n"
            "Final words."
        )
        assert reconciler.last_serialized == reconciler.text

    def test_published_text_does_not_rebuild(self, reconciler, sink):
        """Feeding the published text back is recognized as already reconciled."""
        reconciler.store.expand("block-0")
        reconciler.edit_block("block-1", "Changed.")
        published = sink.call_args.args[0]

        assert reconciler.sync(published) is False
        assert reconciler.store.is_expanded("block-0")

    def test_edit_with_non_string_content_does_not_publish(self, reconciler, sink, sample_text):
        assert reconciler.edit_block("block-0", None) is False

        sink.assert_not_called()
        assert reconciler.text == sample_text

    def test_edit_missing_block_does_not_publish(self, reconciler, sink):
        assert reconciler.edit_block("block-8", "x") is False

        sink.assert_not_called()

    def test_edit_sentence_publishes_unchanged_text(self, reconciler, sink, sample_text):
        reconciler.expand("block-0")

        reconciler.edit_block("block-0-sentence-0", "Changed.")

        sink.assert_called_once_with(sample_text)

    def test_reorder_publishes(self, reconciler, sink):
        assert reconciler.reorder("block-2", "block-0") is True

        text = sink.call_args.args[0]
        assert text.startswith("Third and last paragraph.\n\n")

    def test_self_reorder_does_not_publish(self, reconciler, sink):
        assert reconciler.reorder("block-1", "block-1") is False

        sink.assert_not_called()

    def test_apply_rewrite(self, reconciler, sink):
        assert reconciler.apply_rewrite("block-0", "Short.") is True

        assert reconciler.store.find_block("block-0").content == "Short."
        sink.assert_called_once()

    def test_apply_rewrite_missing_target(self, reconciler, sink):
        assert reconciler.apply_rewrite("block-1-sentence-0", "x") is False

        sink.assert_not_called()

    def test_expand_and_collapse_do_not_publish(self, reconciler, sink):
        assert reconciler.expand("block-1") is True
        assert reconciler.toggle("block-1") is False
        assert reconciler.collapse("block-1") is False

        sink.assert_not_called()

    def test_expand_unknown(self, reconciler):
        assert reconciler.expand("block-5") is False

    def test_works_without_sink(self, sample_text):
        reconciler = Reconciler(sample_text)

        assert reconciler.edit_block("block-0", "Solo.") is True
        assert reconciler.commit().startswith("Solo.")
