"""Game Lookup -- resolve IGDB game records into display-ready note fields.

Core modules:
    config      -- Lookup configuration via pydantic-settings (IGDB_* env vars)
                   and loguru setup.
    cli         -- Click CLI entry point: prompt, candidate chooser, output.
    lookup      -- Resolution order (exact slug, then free-text search) and the
                   pick-and-normalize flow.
    session     -- Current bearer credential; lazy load from disk, refresh on demand.
    credentials -- JSON credential file load/save.
    normalize   -- Pure CatalogRecord -> DisplayRecord transform.
    models      -- Credential, Query, CatalogRecord, DisplayRecord and constants.
    errors      -- Exception hierarchy.

Subpackages:
    api -- External API clients (Twitch client-credentials grant, IGDB catalog
           queries, query building and fuzzy candidate ranking)
"""
