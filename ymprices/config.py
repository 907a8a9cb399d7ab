from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError
from .types import Credential


DEFAULT_API_URL = "https://api.partner.market.yandex.ru"

AUTH_API_KEY = "api-key"
AUTH_OAUTH = "oauth"


@dataclass(frozen=True)
class Config:
    """Process-wide settings, built once and passed to every operation."""

    credential: Credential
    campaign_id: Optional[str] = None
    base_url: str = DEFAULT_API_URL
    timeout: float = 30.0
    page_limit: int = 1000
    page_delay: float = 0.1
    batch_size: int = 500
    batch_delay: float = 0.2

    def require_campaign(self) -> str:
        if not self.campaign_id:
            raise ConfigError("campaign id is not set (YM_CAMPAIGN_ID or --campaign-id)")
        return self.campaign_id


def load_config(
    env_file: Optional[str] = None,
    token: Optional[str] = None,
    campaign_id: Optional[str] = None,
    auth_mode: Optional[str] = None,
    oauth_client_id: Optional[str] = None,
    base_url: Optional[str] = None,
) -> Config:
    """Build a Config from the environment (and ``.env``); explicit arguments win."""
    load_dotenv(env_file or find_dotenv(usecwd=True))

    token = token or os.getenv("YM_API_TOKEN")
    if not token:
        raise ConfigError("API token is not set (YM_API_TOKEN or --token)")

    mode = (auth_mode or os.getenv("YM_AUTH_MODE") or AUTH_API_KEY).strip().lower()
    if mode not in (AUTH_API_KEY, AUTH_OAUTH):
        raise ConfigError(f"unknown auth mode: {mode!r}")
    client_id = oauth_client_id or os.getenv("YM_OAUTH_CLIENT_ID")
    if mode == AUTH_OAUTH and not client_id:
        raise ConfigError("OAuth mode requires a client id (YM_OAUTH_CLIENT_ID or --oauth-client-id)")

    credential = Credential(token=token, use_api_key=(mode == AUTH_API_KEY), oauth_client_id=client_id)
    return Config(
        credential=credential,
        campaign_id=campaign_id or os.getenv("YM_CAMPAIGN_ID") or None,
        base_url=(base_url or os.getenv("YM_API_URL") or DEFAULT_API_URL).rstrip("/"),
    )
