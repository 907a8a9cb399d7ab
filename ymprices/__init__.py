"""
Yandex Market price exporter package.

Exports:
- PriceRecord, Campaign: flattened API records
- export_all_prices / export_specific_prices: write price sheets into an openpyxl Workbook
- list_campaigns / test_connection: campaign discovery and connectivity check
"""

from .types import Campaign, PriceRecord
from .exporter import export_all_prices, export_specific_prices, list_campaigns, test_connection

__all__ = [
    "Campaign",
    "PriceRecord",
    "export_all_prices",
    "export_specific_prices",
    "list_campaigns",
    "test_connection",
]
