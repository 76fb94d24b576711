"""Exception hierarchy for the game lookup."""


class GameLookupError(Exception):
    """Base exception for all lookup errors."""


class ConfigError(GameLookupError):
    """Invalid or missing configuration."""


class CredentialStoreError(GameLookupError):
    """Cached credential file could not be read or written."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class InputAbortedError(GameLookupError):
    """User entered no search text or made no selection."""


class AuthError(GameLookupError):
    """Identity endpoint did not return a usable access token."""


class NoResultsError(GameLookupError):
    """Neither the slug lookup nor the free-text search found anything."""

    def __init__(self, query: str) -> None:
        super().__init__(f"No results found for {query!r}.")
        self.query = query


class ApiError(GameLookupError):
    """Catalog request failed, including the one refresh-and-retry."""

    def __init__(self, message: str, attempts: int = 2) -> None:
        super().__init__(message)
        self.attempts = attempts
