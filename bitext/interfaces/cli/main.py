"""
CLI Main - Typer-based command-line interface.

Usage:
    bitext translate "时近半夜，硬卧车厢熄灯。" --model deepseek-chat
    bitext translate --file chapter.txt --stream --output chapter.json
    bitext models
    bitext serve
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

app = typer.Typer(
    name="bitext",
    help="Bitext - Sentence-aligned Chinese/English translation",
    add_completion=False,
)
console = Console()


def _configure_logging() -> None:
    from bitext.config import get_settings

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def translate(
    text: str | None = typer.Argument(None, help="Text to translate"),
    file: Path | None = typer.Option(None, "--file", "-f", help="Read text from a file"),
    model: str | None = typer.Option(None, "--model", "-m", help="Model id (see `bitext models`)"),
    stream: bool = typer.Option(False, "--stream", "-s", help="Print chunks as they arrive"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON path"),
) -> None:
    """Translate Chinese text into sentence-aligned English with vocabulary."""
    if file is not None:
        if not file.exists():
            console.print(f"[red]Error:[/red] File not found: {file}")
            raise typer.Exit(1)
        text = file.read_text(encoding="utf-8")

    if text is None:
        console.print("[red]Error:[/red] Provide TEXT or --file")
        raise typer.Exit(1)

    _configure_logging()
    asyncio.run(_translate_async(text, model, stream, output))


async def _translate_async(
    text: str,
    model: str | None,
    stream: bool,
    output: Path | None,
) -> None:
    """Async translation implementation."""
    from bitext.config import BitextError
    from bitext.domains.orchestration import TranslationOrchestrator

    orchestrator = TranslationOrchestrator.from_settings()

    try:
        if stream:
            result = await orchestrator.translate_text(
                text,
                model,
                on_text=lambda chunk: console.print(chunk, end="", markup=False, highlight=False),
            )
            console.print()
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task("Translating...", total=None)
                result = await orchestrator.translate_text(text, model)
    except BitextError as e:
        console.print(f"[red]Error:[/red] {escape(f'[{e.code.value}] {e.message}')}")
        raise typer.Exit(1)

    if not result.is_aligned:
        console.print(
            f"[yellow]Warning:[/yellow] {len(result.sentences_source)} source vs "
            f"{len(result.sentences_target)} translated sentences"
        )

    table = Table(title="Translation", show_lines=True)
    table.add_column("中文", style="cyan")
    table.add_column("English", style="green")
    for source, target in result.pairs():
        table.add_row(source, target)
    console.print(table)

    if result.vocabulary:
        words = Table(title="Vocabulary")
        words.add_column("Word", style="bold")
        words.add_column("Type", style="magenta")
        words.add_column("Meaning")
        for entry in result.vocabulary:
            words.add_row(entry.word, entry.part_of_speech.value, entry.meaning)
        console.print(words)

    if output:
        output.write_text(
            json.dumps(result.to_payload(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        console.print(f"\n[green]Saved to:[/green] {output}")


@app.command()
def models() -> None:
    """List supported models and whether their credentials are configured."""
    from bitext.config import get_settings
    from bitext.domains.providers import ProviderRegistry

    settings = get_settings()
    registry = ProviderRegistry.from_settings(settings)

    table = Table(title="Models")
    table.add_column("Family", style="cyan")
    table.add_column("Model")
    table.add_column("Key", justify="center")

    for family, model_ids in registry.models().items():
        for model_id in model_ids:
            marker = "[green]✓[/green]" if registry.has_credential(model_id) else "[dim]-[/dim]"
            if model_id == settings.default_model:
                model_id = f"{model_id} [bold](default)[/bold]"
            table.add_row(family, model_id, marker)

    console.print(table)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    from bitext.config import get_settings

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting Bitext API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "bitext.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
        log_level=settings.log_level.lower(),
    )


@app.command()
def version() -> None:
    """Show version information."""
    from bitext import __version__

    console.print(f"Bitext v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
