# iberiava/oauth.py
"""Discord OAuth2 authorization-code exchange: code -> verified {id, username}."""
from __future__ import annotations
import logging
from urllib.parse import urlencode
import httpx
from pydantic import ValidationError
from .config import get_config
from .errors import IdentityExchangeFailed
from .schemas import Identity

log = logging.getLogger(__name__)

SCOPE = "identify"


def authorize_url(state: str) -> str:
    cfg = get_config()
    params = urlencode({
        "client_id": cfg.DISCORD_CLIENT_ID,
        "redirect_uri": cfg.DISCORD_REDIRECT_URI,
        "response_type": "code",
        "scope": SCOPE,
        "state": state,
    })
    return f"{cfg.DISCORD_API_BASE}/oauth2/authorize?{params}"


def exchange_code(code: str, client: httpx.Client | None = None) -> Identity:
    cfg = get_config()
    own = client is None
    client = client or httpx.Client(timeout=cfg.DISCORD_TIMEOUT)
    try:
        token_res = client.post(
            f"{cfg.DISCORD_API_BASE}/oauth2/token",
            data={
                "client_id": cfg.DISCORD_CLIENT_ID,
                "client_secret": cfg.DISCORD_CLIENT_SECRET,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": cfg.DISCORD_REDIRECT_URI,
                "scope": SCOPE,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        token_res.raise_for_status()
        access_token = token_res.json()["access_token"]

        user_res = client.get(
            f"{cfg.DISCORD_API_BASE}/users/@me",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        user_res.raise_for_status()
        return Identity.model_validate(user_res.json())
    except httpx.HTTPError as e:
        log.warning("discord exchange failed: %s", e)
        raise IdentityExchangeFailed("OAuth login failed.") from e
    except (KeyError, ValueError, ValidationError) as e:
        log.warning("unexpected discord response: %s", e)
        raise IdentityExchangeFailed("OAuth login failed.") from e
    finally:
        if own:
            client.close()
