from dataclasses import dataclass
from typing import Any, List, Optional


DEFAULT_CURRENCY = "RUR"


@dataclass(frozen=True)
class Credential:
    token: str
    use_api_key: bool = True
    oauth_client_id: Optional[str] = None


@dataclass
class Campaign:
    id: Any
    domain: str = ""
    business_id: Any = ""
    business_name: str = ""
    placement_type: str = ""

    def as_row(self) -> List[Any]:
        return [self.id, self.domain, self.business_id, self.business_name, self.placement_type]


@dataclass
class PriceRecord:
    offer_id: str
    market_sku: Any = ""
    price: Any = ""
    currency: str = DEFAULT_CURRENCY
    discount_base: Any = ""
    vat: Any = ""
    updated_at: str = ""

    def as_row(self) -> List[Any]:
        return [
            self.offer_id,
            self.market_sku,
            self.price,
            self.currency,
            self.discount_base,
            self.vat,
            self.updated_at,
        ]


@dataclass
class ExportResult:
    sheet: str
    processed: int
    requested: Optional[int] = None


@dataclass
class ConnectionStatus:
    ok: bool
    status_code: int
    message: str = ""
