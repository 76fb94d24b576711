"""Lookup configuration via pydantic-settings (.env + env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError
from .models import IMAGE_SIZES, IMAGE_SOURCE_TOKEN


class LookupConfig(BaseSettings):
    """All lookup configuration with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # -- Credentials (Twitch developer application) --
    igdb_client_id: str = ""
    igdb_client_secret: str = ""

    # -- Token cache --
    token_path: Path = Path.home() / ".config" / "game-lookup" / "igdbToken.json"
    credential_key: str = "igdbToken"

    # -- Endpoints --
    auth_url: str = "https://id.twitch.tv/oauth2/token"
    api_url: str = "https://api.igdb.com/v4/games"
    request_timeout: float = 30.0

    # -- Images --
    image_source_token: str = IMAGE_SOURCE_TOKEN
    cover_size: str = IMAGE_SIZES["cover"]
    logo_size: str = IMAGE_SIZES["logo"]

    # -- Candidate selection --
    auto_select_threshold: int = 90

    # -- Logging --
    log_level: str = "INFO"
    log_dir: Path | None = None  # unset = stderr only

    @property
    def image_sizes(self) -> dict[str, str]:
        """Size tokens that replace image_source_token, keyed by image kind."""
        return {"cover": self.cover_size, "logo": self.logo_size}

    def require_credentials(self) -> None:
        """Raise ConfigError unless both client id and secret are set."""
        missing = [
            name
            for name, value in (
                ("IGDB_CLIENT_ID", self.igdb_client_id),
                ("IGDB_CLIENT_SECRET", self.igdb_client_secret),
            )
            if not value.strip()
        ]
        if missing:
            raise ConfigError(f"Missing IGDB credentials: {', '.join(missing)}")

    def setup_logging(self) -> None:
        """Send stage-tagged logs to stderr at log_level.

        A lookup is a short interactive run, so the DEBUG file log is opt-in:
        it is written to log_dir/lookup.log only when LOG_DIR is set.
        """
        logger.remove()

        log_format = "{time:HH:mm:ss} | {level:<8} | {extra[stage]:<11} | {message}"

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level=self.log_level.upper(),
            filter=_default_extra,
        )

        if self.log_dir is None:
            return
        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "lookup.log"),
            format=log_format,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            filter=_default_extra,
        )
