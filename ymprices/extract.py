from __future__ import annotations

from datetime import datetime
from typing import Any, Iterator, List, Optional, Sequence

from .types import DEFAULT_CURRENCY, Campaign, PriceRecord


RU_DATETIME_FORMAT = "%d.%m.%Y, %H:%M:%S"


def _blank(value: Any) -> Any:
    return "" if value is None else value


def format_date(raw: Any) -> str:
    """
    Render an ISO-8601 timestamp the way a ru-RU locale prints it.
    Unparseable input is returned unchanged.
    """
    if not raw:
        return ""
    text = str(raw).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return str(raw)
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime(RU_DATETIME_FORMAT)


def flatten_offer(offer: dict) -> PriceRecord:
    """Build a PriceRecord from an ``offers[]`` item, substituting defaults for missing fields."""
    price = offer.get("price")
    if not isinstance(price, dict):
        price = {}

    return PriceRecord(
        offer_id=offer.get("id") or offer.get("offerId") or "",
        market_sku=offer.get("marketSku") or "",
        price=_blank(price.get("value")),
        currency=price.get("currencyId") or DEFAULT_CURRENCY,
        # Only missing values are blanked; a 0 discount base or VAT rate is written as 0.
        discount_base=_blank(price.get("discountBase")),
        vat=_blank(price.get("vat")),
        updated_at=format_date(offer.get("updatedAt")),
    )


def flatten_campaign(item: dict) -> Campaign:
    business = item.get("business")
    if not isinstance(business, dict):
        business = {}
    return Campaign(
        id=item.get("id"),
        domain=item.get("domain") or "",
        business_id=_blank(business.get("id")),
        business_name=business.get("name") or "",
        placement_type=item.get("placementType") or "",
    )


def extract_offers(payload: Any) -> Optional[List[dict]]:
    """Return ``result.offers`` or None when the payload has an unexpected shape."""
    if not isinstance(payload, dict):
        return None
    result = payload.get("result")
    if not isinstance(result, dict):
        return None
    offers = result.get("offers")
    if not isinstance(offers, list):
        return None
    return [o for o in offers if isinstance(o, dict)]


def next_page_token(payload: dict) -> Optional[str]:
    paging = (payload.get("result") or {}).get("paging") or {}
    return paging.get("nextPageToken") or None


def chunked(items: Sequence[str], size: int) -> Iterator[List[str]]:
    if size <= 0:
        raise ValueError("batch size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
