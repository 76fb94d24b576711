"""Twitch OAuth2 client-credentials grant.

IGDB accepts Twitch application tokens. The grant is a single POST with
the client id, secret and grant type in the query string and no body.
Retrying is the caller's business.
"""

import httpx
from loguru import logger

from ..errors import AuthError
from ..models import Credential

log = logger.bind(stage="auth")

AUTH_URL = "https://id.twitch.tv/oauth2/token"
GRANT_TYPE = "client_credentials"


def fetch_token(
    client_id: str,
    client_secret: str,
    auth_url: str = AUTH_URL,
    timeout: float = 30.0,
) -> Credential:
    """Mint a fresh bearer credential.

    Raises AuthError when the endpoint is unreachable, answers with
    something other than JSON, or the JSON lacks ``access_token``.
    """
    params = {
        "client_id": client_id,
        "client_secret": client_secret,
        "grant_type": GRANT_TYPE,
    }

    log.debug(f"Requesting client-credentials token from {auth_url}")

    try:
        resp = httpx.post(
            auth_url,
            params=params,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        data = resp.json()
    except httpx.HTTPError as e:
        log.warning(f"Token request failed: {e}")
        raise AuthError("Auth token refresh failed.") from e
    except ValueError as e:
        log.warning(f"Token response is not JSON: {e}")
        raise AuthError("Auth token refresh failed.") from e

    token = data.get("access_token") if isinstance(data, dict) else None
    if not isinstance(token, str) or not token:
        # Twitch reports bad credentials as {"status": 400, "message": "..."}
        detail = data.get("message", "") if isinstance(data, dict) else ""
        log.warning(f"Token response has no access_token (status={resp.status_code}) {detail}")
        raise AuthError("Auth token refresh failed.")

    log.debug("Obtained new access token")
    return Credential(token=token)
