"""CLI entry point for Blockshop."""

import asyncio
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from blockshop import __version__
from blockshop.models.config import DEFAULT_CONFIG_PATH, Config
from blockshop.models.edit_action import EditAction
from blockshop.services.dispatcher import EditActionDispatcher
from blockshop.services.exceptions import BlockshopError
from blockshop.services.reconciler import Reconciler
from blockshop.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)
console = Console()

SENTENCE_MARKER = "-sentence-"


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load configuration from ~/.config/blockshop/config.yaml.

    Returns:
        Validated Config instance

    Raises:
        click.ClickException: If config is missing, has invalid permissions, or validation fails
    """
    try:
        config = Config.load(config_path)
        logger.info("config_loaded", path=str(config_path))
        return config
    except FileNotFoundError as e:
        logger.error("config_not_found", path=str(config_path))
        raise click.ClickException(str(e))
    except PermissionError as e:
        logger.error("config_permission_error", path=str(config_path))
        raise click.ClickException(str(e))
    except Exception as e:
        logger.error("config_validation_error", error=str(e))
        raise click.ClickException(f"Configuration validation failed:\n{e}")


def read_document(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot read {path}: {e}")


def parent_paragraph_id(block_id: str) -> Optional[str]:
    """Paragraph id owning a sentence id, or None for a paragraph id."""
    if SENTENCE_MARKER not in block_id:
        return None
    return block_id.split(SENTENCE_MARKER, 1)[0]


@click.group()
@click.version_option(version=__version__, prog_name="blockshop")
def cli():
    """Blockshop: edit text as paragraphs and sentences, with LLM-powered rewrites."""
    configure_logging()


@cli.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
def edit(path: Optional[Path]):
    """
    Open a document in the editor.

    Examples:
        blockshop edit              # Start with the welcome text
        blockshop edit notes.txt    # Edit notes.txt (ctrl+s saves)
    """
    from blockshop.services.llm_client import LLMClient
    from blockshop.tui.app import BlockshopApp, WELCOME_TEXT

    logger.info("edit_command_started", path=str(path) if path else None)

    if path is not None and path.exists():
        text = read_document(path)
    elif path is not None:
        text = ""
    else:
        text = WELCOME_TEXT

    try:
        config = load_config()
        rewrite_service = LLMClient(config.llm, config.rewrite)
    except click.ClickException as e:
        console.print(f"[yellow]AI edits disabled:[/yellow] {e.format_message()}")
        rewrite_service = None

    app = BlockshopApp(text=text, rewrite_service=rewrite_service, document_path=path)
    app.run()
    logger.info("edit_command_completed")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--expand", "expand_ids", multiple=True, metavar="BLOCK_ID", help="Also list the sentences of this paragraph")
def blocks(path: Path, expand_ids: tuple[str, ...]):
    """
    List the blocks of a document.

    Examples:
        blockshop blocks notes.txt
        blockshop blocks notes.txt --expand block-0 --expand block-2
    """
    reconciler = Reconciler(read_document(path))
    store = reconciler.store

    for paragraph_id in expand_ids:
        if not reconciler.expand(paragraph_id):
            raise click.ClickException(f"No paragraph with id {paragraph_id}")

    table = Table(title=str(path))
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Content")

    for paragraph in store.paragraphs:
        table.add_row(paragraph.id, paragraph.kind, paragraph.content)
        for sentence in store.sentences(paragraph.id):
            table.add_row(sentence.id, sentence.kind, sentence.content, style="dim")

    console.print(table)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("block_id")
@click.argument("action", type=click.Choice([action.value for action in EditAction]))
@click.option("--instruction", "-i", default=None, help="Instruction for the 'other' action")
@click.option("--write", is_flag=True, help="Write the rewritten document back to PATH")
def rewrite(path: Path, block_id: str, action: str, instruction: Optional[str], write: bool):
    """
    Rewrite a single block with the configured LLM.

    Examples:
        blockshop rewrite notes.txt block-1 shorten
        blockshop rewrite notes.txt block-0-sentence-2 reword
        blockshop rewrite notes.txt block-3 other -i "Make it sound formal" --write
    """
    from blockshop.services.llm_client import LLMClient

    logger.info("rewrite_command_started", path=str(path), block_id=block_id, action=action)

    config = load_config()
    reconciler = Reconciler(read_document(path))

    paragraph_id = parent_paragraph_id(block_id)
    if paragraph_id is not None:
        reconciler.expand(paragraph_id)

    if reconciler.store.find_block(block_id) is None:
        raise click.ClickException(f"No block with id {block_id}")

    dispatcher = EditActionDispatcher(reconciler, LLMClient(config.llm, config.rewrite))

    async def run_rewrite() -> bool:
        with console.status(f"[bold green]Rewriting {block_id}..."):
            return await dispatcher.dispatch(block_id, action, instruction)

    try:
        applied = asyncio.run(run_rewrite())
    except BlockshopError as e:
        raise click.ClickException(str(e))

    if not applied:
        raise click.ClickException(f"Rewrite of {block_id} failed (see log for details)")

    block = reconciler.store.find_block(block_id)
    console.print(f"[bold]{block_id}[/bold]: {block.content}")

    written = write and paragraph_id is None
    if write and not written:
        click.echo("Sentence rewrites do not change the document; not writing it", err=True)

    if written:
        path.write_text(reconciler.text, encoding="utf-8")
        click.echo(f"Wrote {path}")
    else:
        click.echo()
        click.echo(reconciler.text)

    logger.info("rewrite_command_completed", block_id=block_id, written=written)


def main():
    """Main entry point for setuptools console script."""
    cli()


if __name__ == "__main__":
    main()
