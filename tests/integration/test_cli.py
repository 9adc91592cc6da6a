"""Integration tests for the blockshop CLI."""

from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from blockshop.cli import cli, load_config, parent_paragraph_id
from blockshop.models.config import Config, LLMConfig


@pytest.fixture(autouse=True)
def no_log_file():
    """Keep CLI runs from configuring the file logger."""
    with patch("blockshop.cli.configure_logging"):
        yield


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def document(tmp_path, sample_text):
    path = tmp_path / "notes.txt"
    path.write_text(sample_text)
    return path


@pytest.fixture
def config():
    return Config(llm=LLMConfig(endpoint="http://localhost:11434/v1", api_key="ollama", model="llama3"))


@pytest.fixture
def patched_llm(config, make_rewrite_service):
    """Patch config loading and the LLM client with an in-memory service."""
    service = make_rewrite_service(default="Rewritten text.")
    with patch("blockshop.cli.load_config", return_value=config), \
            patch("blockshop.services.llm_client.LLMClient", return_value=service) as client_cls:
        yield service, client_cls


def test_parent_paragraph_id():
    assert parent_paragraph_id("block-3-sentence-1") == "block-3"
    assert parent_paragraph_id("block-3") is None


class TestLoadConfig:
    """Test config errors surface as click errors."""

    def test_missing_config(self, tmp_path):
        with pytest.raises(click.ClickException, match="Configuration file not found"):
            load_config(tmp_path / "config.yaml")

    def test_bad_permissions(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("llm: {}\n")
        path.chmod(0o644)

        with pytest.raises(click.ClickException, match="chmod 600"):
            load_config(path)


class TestBlocksCommand:
    """Test `blockshop blocks`."""

    def test_lists_paragraphs(self, runner, document):
        result = runner.invoke(cli, ["blocks", str(document)])

        assert result.exit_code == 0
        assert "block-0" in result.output
        assert "block-2" in result.output
        assert "block-0-sentence" not in result.output

    def test_expand_lists_sentences(self, runner, document):
        result = runner.invoke(cli, ["blocks", str(document), "--expand", "block-1"])

        assert result.exit_code == 0
        assert "block-1-sentence-0" in result.output
        assert "block-1-sentence-2" in result.output
        assert "block-0-sentence-0" not in result.output

    def test_expand_unknown_paragraph(self, runner, document):
        result = runner.invoke(cli, ["blocks", str(document), "--expand", "block-9"])

        assert result.exit_code != 0
        assert "No paragraph with id block-9" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["blocks", str(tmp_path / "nope.txt")])

        assert result.exit_code != 0


class TestRewriteCommand:
    """Test `blockshop rewrite`."""

    def test_rewrite_paragraph(self, runner, document, patched_llm):
        service, _ = patched_llm

        result = runner.invoke(cli, ["rewrite", str(document), "block-2", "shorten"])

        assert result.exit_code == 0, result.output
        assert service.prompts == ['Make this text more concise: "Third and last paragraph."']
        assert "Rewritten text." in result.output
        assert document.read_text().endswith("Third and last paragraph.")

    def test_rewrite_with_write(self, runner, document, patched_llm):
        result = runner.invoke(cli, ["rewrite", str(document), "block-0", "reword", "--write"])

        assert result.exit_code == 0, result.output
        assert document.read_text().startswith("Rewritten text.\n\n")

    def test_rewrite_sentence_expands_parent(self, runner, document, patched_llm, sample_text):
        service, _ = patched_llm

        result = runner.invoke(cli, ["rewrite", str(document), "block-1-sentence-1", "expand", "--write"])

        assert result.exit_code == 0, result.output
        assert service.prompts == ['Add more depth and detail to this text: "Is it short."']
        assert "block-1-sentence-1" in result.output
        assert "Sentence rewrites do not change the document" in result.output
        assert "Wrote" not in result.output
        assert document.read_text() == sample_text

    def test_other_requires_instruction(self, runner, document, patched_llm):
        service, _ = patched_llm

        result = runner.invoke(cli, ["rewrite", str(document), "block-0", "other"])

        assert result.exit_code != 0
        assert "must not be empty" in result.output
        assert service.prompts == []

    def test_other_with_instruction(self, runner, document, patched_llm):
        service, _ = patched_llm

        result = runner.invoke(cli, ["rewrite", str(document), "block-0", "other", "-i", "Make it rhyme"])

        assert result.exit_code == 0, result.output
        assert service.prompts[0].startswith('Make it rhyme: "The first paragraph.')

    def test_unknown_block(self, runner, document, patched_llm):
        result = runner.invoke(cli, ["rewrite", str(document), "block-7", "shorten"])

        assert result.exit_code != 0
        assert "No block with id block-7" in result.output

    def test_unknown_action(self, runner, document, patched_llm):
        result = runner.invoke(cli, ["rewrite", str(document), "block-0", "translate"])

        assert result.exit_code != 0

    def test_service_failure(self, runner, document, config, make_rewrite_service):
        service = make_rewrite_service(error=RuntimeError("model offline"))
        with patch("blockshop.cli.load_config", return_value=config), \
                patch("blockshop.services.llm_client.LLMClient", return_value=service):
            result = runner.invoke(cli, ["rewrite", str(document), "block-0", "refine", "--write"])

        assert result.exit_code != 0
        assert "Rewrite of block-0 failed" in result.output
        assert document.read_text().startswith("The first paragraph.")
