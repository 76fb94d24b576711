"""External API clients for game metadata resolution.

Submodules:
    auth  -- Twitch OAuth2 client-credentials grant
    igdb  -- IGDB catalog client with one-shot refresh-and-retry
    query -- Slug extraction, slugify, query clauses, fuzzy ranking
"""
