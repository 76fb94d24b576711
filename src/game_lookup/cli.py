"""CLI entry point for the game lookup."""

import json
from functools import partial
from pathlib import Path

import click
from loguru import logger

from .api.igdb import MetadataClient
from .api.query import rank_candidates
from .config import LookupConfig
from .credentials import CredentialStore
from .errors import GameLookupError
from .lookup import lookup, pick_best
from .models import CatalogRecord
from .normalize import suggestion_label
from .session import Session

log = logger.bind(stage="cli")


def choose_interactively(
    records: list[CatalogRecord],
    query_text: str,
    auto_select: bool = False,
    threshold: int = 90,
) -> CatalogRecord | None:
    """Numbered chooser on the terminal. Returns None when the user picks 0."""
    if auto_select:
        best = pick_best(records, query_text, threshold)
        if best is not None:
            return best

    ordered = records
    if len(records) > 1:
        ordered = [r for r, _ in rank_candidates(records, query_text)]

    for idx, record in enumerate(ordered, 1):
        click.echo(f"  {idx:>2}. {suggestion_label(record)}", err=True)
    click.echo("   0. Cancel", err=True)

    choice = click.prompt(
        "Select a game",
        type=click.IntRange(0, len(ordered)),
        default=1,
        err=True,
    )
    if choice == 0:
        return None
    return ordered[choice - 1]


@click.command()
@click.argument("query", required=False)
@click.option("--client-id", default=None, help="IGDB (Twitch) client id.")
@click.option("--client-secret", default=None, help="IGDB (Twitch) client secret.")
@click.option(
    "--token-path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Where the access token is cached.",
)
@click.option(
    "--first",
    is_flag=True,
    help="Pick the best-matching candidate without asking when it scores high enough.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "variables"]),
    default="json",
    show_default=True,
    help="Print display fields only, or all template variables.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    default=None,
    help="Path to .env file.",
)
def main(
    query: str | None,
    client_id: str | None,
    client_secret: str | None,
    token_path: str | None,
    first: bool,
    output_format: str,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Look up a game on IGDB by name or URL and print note-ready fields."""
    # Pass CLI flags as kwargs to avoid env pollution
    config_kwargs: dict[str, str | Path] = {}
    if client_id:
        config_kwargs["igdb_client_id"] = client_id
    if client_secret:
        config_kwargs["igdb_client_secret"] = client_secret
    if token_path:
        config_kwargs["token_path"] = Path(token_path)
    if verbose:
        config_kwargs["log_level"] = "DEBUG"
    if config_file:
        config_kwargs["_env_file"] = config_file

    config = LookupConfig(**config_kwargs)  # type: ignore[arg-type]
    config.setup_logging()

    if query is None:
        query = click.prompt(
            "Enter IGDB game name or URL", default="", show_default=False, err=True,
        )

    try:
        config.require_credentials()
        store = CredentialStore(config.token_path, key=config.credential_key)
        session = Session(
            config.igdb_client_id,
            config.igdb_client_secret,
            store,
            auth_url=config.auth_url,
            timeout=config.request_timeout,
        )
        client = MetadataClient(
            session,
            config.igdb_client_id,
            api_url=config.api_url,
            timeout=config.request_timeout,
        )
        chooser = partial(
            choose_interactively,
            query_text=query,
            auto_select=first,
            threshold=config.auto_select_threshold,
        )
        record, display = lookup(
            query,
            client,
            chooser,
            image_sizes=config.image_sizes,
            source_token=config.image_source_token,
        )
    except GameLookupError as exc:
        log.error(f"Lookup failed: {exc}")
        raise click.ClickException(str(exc)) from exc

    if output_format == "variables":
        payload = display.to_variables(record)
    else:
        payload = display.to_dict()
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
