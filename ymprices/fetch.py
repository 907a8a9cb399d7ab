from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter

from .config import Config
from .errors import ApiError, UNKNOWN_ERROR, error_message
from .extract import flatten_campaign
from .types import Campaign, ConnectionStatus, Credential


logger = logging.getLogger(__name__)


def build_auth_headers(credential: Credential) -> Dict[str, str]:
    if credential.use_api_key:
        authorization = f"Api-Key {credential.token}"
    else:
        authorization = (
            f'OAuth oauth_token="{credential.token}", '
            f'oauth_client_id="{credential.oauth_client_id or ""}"'
        )
    return {
        "Authorization": authorization,
        "Content-Type": "application/json",
    }


def create_session(config: Config) -> requests.Session:
    session = requests.Session()
    session.headers.update(build_auth_headers(config.credential))
    session.headers["Accept"] = "application/json"

    # No transport-level retries: pacing between pages is the only throttling.
    adapter = HTTPAdapter(max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _parse_response(response: requests.Response) -> Any:
    """
    Decode a JSON answer. Raises ApiError for any status other than 200.
    """
    status = response.status_code
    try:
        payload = response.json()
    except ValueError:
        if status != 200:
            raise ApiError(status, UNKNOWN_ERROR) from None
        raise

    if status != 200:
        logger.error("API error %s: %s", status, payload)
        raise ApiError(status, error_message(payload), payload=payload)
    return payload


def _prices_url(config: Config) -> str:
    return f"{config.base_url}/campaigns/{config.require_campaign()}/offer-prices"


def fetch_prices_page(
    config: Config,
    session: requests.Session,
    page_token: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Fetch one page of the offer price listing.
    Expected shape: ``{"result": {"offers": [...], "paging": {"nextPageToken": ...}}}``.
    """
    url = _prices_url(config)
    params: Dict[str, Any] = {}
    limit = config.page_limit if limit is None else limit
    if limit:
        params["limit"] = limit
    if page_token:
        params["page_token"] = page_token

    logger.info("GET %s params=%s", url, params)
    response = session.get(url, params=params, timeout=config.timeout)
    return _parse_response(response)


def fetch_specific_prices(
    config: Config,
    session: requests.Session,
    offer_ids: Sequence[str],
) -> Dict[str, Any]:
    url = _prices_url(config)
    logger.info("POST %s for %d offers", url, len(offer_ids))
    response = session.post(
        url,
        json={"offerIds": list(offer_ids)},
        timeout=config.timeout,
    )
    return _parse_response(response)


def _campaigns_url(config: Config) -> str:
    return f"{config.base_url}/campaigns"


def fetch_campaigns(config: Config, session: requests.Session) -> List[Campaign]:
    url = _campaigns_url(config)
    logger.info("GET %s", url)
    payload = _parse_response(session.get(url, timeout=config.timeout))
    return [flatten_campaign(item) for item in payload.get("campaigns") or [] if isinstance(item, dict)]


def check_connection(config: Config, session: requests.Session) -> ConnectionStatus:
    """Probe the campaigns endpoint. Non-200 answers are reported, not raised."""
    url = _campaigns_url(config)
    logger.info("GET %s (connection check)", url)
    response = session.get(url, timeout=config.timeout)
    if response.status_code == 200:
        return ConnectionStatus(ok=True, status_code=200)
    try:
        payload = response.json()
    except ValueError:
        payload = None
    logger.error("Connection check failed with %s: %s", response.status_code, payload)
    return ConnectionStatus(ok=False, status_code=response.status_code, message=error_message(payload))
