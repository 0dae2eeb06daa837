"""Command-line entrypoint printing one result document for the launcher."""

from __future__ import annotations

import asyncio

import httpx
import typer
from pydantic import ValidationError

from imdb_suggest.config import SuggestSettings, get_settings
from imdb_suggest.domain.models import ResultDocument
from imdb_suggest.logging import configure_logging, logger
from imdb_suggest.services.exceptions import ConfigurationError
from imdb_suggest.services.image_cache import ImageCache
from imdb_suggest.services.items import error_document
from imdb_suggest.services.orchestrator import SuggestOrchestrator
from imdb_suggest.services.suggestions import SuggestionFetcher

app = typer.Typer(
    name="imdb-suggest",
    help="Search IMDb titles and names and print launcher result items as JSON.",
    add_completion=False,
)


def load_settings() -> SuggestSettings:
    try:
        return get_settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc.error_count()} error(s)") from exc


async def run(query: str, settings: SuggestSettings) -> ResultDocument:
    async with httpx.AsyncClient(
        timeout=settings.api.request_timeout_seconds,
        follow_redirects=True,
    ) as client:
        orchestrator = SuggestOrchestrator(
            settings=settings,
            fetcher=SuggestionFetcher(client, settings.api),
            image_cache=ImageCache(client, settings),
        )
        return await orchestrator.run(query)


@app.command()
def main(
    query: str = typer.Argument("", help="Partial title or name to look up."),
) -> None:
    configure_logging()
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("configuration_invalid", error=str(exc))
        typer.echo(error_document(str(exc)).to_json())
        return

    configure_logging(settings.log_level)
    try:
        document = asyncio.run(run(query, settings))
    except Exception as exc:
        logger.exception("suggest_failed", query=query)
        document = error_document(str(exc) or exc.__class__.__name__, settings.default_icon)
    typer.echo(document.to_json())


if __name__ == "__main__":
    app()
