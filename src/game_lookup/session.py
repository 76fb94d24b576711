"""Session state: the one current bearer credential for this process.

The credential is loaded from the store on first use and minted (then
persisted) when nothing is cached. Refreshing swaps in a new Credential;
credentials themselves are immutable.
"""

from __future__ import annotations

from loguru import logger

from .api.auth import AUTH_URL, fetch_token
from .credentials import CredentialStore
from .models import Credential

log = logger.bind(stage="session")


class Session:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        store: CredentialStore,
        auth_url: str = AUTH_URL,
        timeout: float = 30.0,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.store = store
        self.auth_url = auth_url
        self.timeout = timeout
        self._credential: Credential | None = None

    @property
    def credential(self) -> Credential:
        """The current credential, loading or minting it on first access."""
        if self._credential is None:
            cached = self.store.load()
            if cached is not None:
                self._credential = cached
            else:
                log.info("No cached IGDB token, requesting a new one")
                self._credential = self.refresh()
        return self._credential

    def refresh(self) -> Credential:
        """Mint a new credential, persist it, and make it current."""
        credential = fetch_token(
            self.client_id,
            self.client_secret,
            auth_url=self.auth_url,
            timeout=self.timeout,
        )
        self.store.save(credential)
        self._credential = credential
        return credential
