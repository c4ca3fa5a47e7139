from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path
import typer
from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from config import SETTINGS
from translator.errors import ConfigurationError
from translator.factory import build_translator, get_available_engines
from translator.session import TranslationSession
from utils.cache import TranslationCache, make_cache_key
from utils.logging_config import configure_logging

app = typer.Typer(add_completion=False)
console = Console()


def _run_async(coro):
    return asyncio.run(coro)


@app.command(help="Translate a text file line by line through the request batcher")
def translate(
    input: Path = typer.Argument(..., exists=True, readable=True),
    output: Path = typer.Argument(...),
    engine: str = typer.Option(SETTINGS.translator.provider, "--engine", "-e"),
    target: str = typer.Option(SETTINGS.default_target_lang, "--target", "-t"),
    scenario: str | None = typer.Option(None, help="Translation scenario: transcript, chat, topic or general"),
    video_title: str | None = typer.Option(None, help="Video title passed as translation context"),
    endpoint_url: str | None = typer.Option(None, help="Override the batch translation endpoint URL"),
    proxy: str | None = typer.Option(None, help="Proxy URL for engines that support it"),
    batch_delay: int = typer.Option(SETTINGS.batcher.batch_delay_ms, help="Debounce window in milliseconds"),
    max_batch_size: int = typer.Option(SETTINGS.batcher.max_batch_size, help="Requests per batch (1-100)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    configure_logging(level="DEBUG" if verbose else "INFO")
    try:
        translator = build_translator(engine, proxy=proxy, endpoint_url=endpoint_url)
        settings = replace(
            SETTINGS,
            batcher=replace(SETTINGS.batcher, batch_delay_ms=batch_delay, max_batch_size=max_batch_size),
        )
        session = TranslationSession(
            TranslationCache(),
            translator=translator,
            settings=settings,
            notify=lambda title, description: console.print(f"[yellow]{title}[/yellow]: {description}"),
        )
        session.change_language(target)
        # Validate batcher configuration before any work is queued.
        session.batcher
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc

    lines = input.read_text(encoding="utf-8").splitlines()

    async def runner() -> list[str]:
        with Progress() as progress:
            task_id = progress.add_task("Translating", total=len(lines))

            async def one(index: int, line: str) -> str:
                if not line.strip():
                    result = line
                else:
                    result = await session.request_translation(
                        line,
                        make_cache_key(f"line-{index}", target),
                        scenario,
                        video_title=video_title,
                    )
                progress.advance(task_id)
                return result

            try:
                return list(await asyncio.gather(*(one(i, line) for i, line in enumerate(lines))))
            finally:
                stats = session.batcher.get_stats()
                console.log(f"Cache entries: {stats.cache_size}")
                await session.aclose()
                await translator.close()

    translations = _run_async(runner())
    output.write_text("\n".join(translations) + "\n", encoding="utf-8")
    console.print(f"Saved translated file to {output}")


@app.command(help="List available translation engines")
def engines() -> None:
    table = Table("Engine", "Description")
    for name, label in get_available_engines().items():
        table.add_row(name, label)
    console.print(table)


if __name__ == "__main__":
    app()
