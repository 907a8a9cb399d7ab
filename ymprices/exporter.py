from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence

import requests
from openpyxl import Workbook

from .config import Config
from .excel_writer import (
    FOUND_LABEL,
    TOTAL_LABEL,
    clear_and_setup_sheet,
    get_or_create_sheet,
    read_offer_ids,
    write_campaigns,
    write_rows,
    write_summary,
)
from .extract import chunked, extract_offers, flatten_offer, next_page_token
from .fetch import (
    check_connection,
    create_session,
    fetch_campaigns,
    fetch_prices_page,
    fetch_specific_prices,
)
from .types import Campaign, ConnectionStatus, ExportResult


logger = logging.getLogger(__name__)

ALL_PRICES_SHEET = "Цены товаров"
SPECIFIC_PRICES_SHEET = "Конкретные цены"
CAMPAIGNS_SHEET = "Список кампаний"

FIRST_DATA_ROW = 2


def export_all_prices(
    config: Config,
    wb: Workbook,
    session: Optional[requests.Session] = None,
) -> ExportResult:
    """Walk the paged price listing and rewrite the full-export sheet.

    The loop ends when the service stops issuing a continuation token. A page
    without ``result.offers`` ends it early; rows written so far are kept.
    """
    config.require_campaign()
    sess = session or create_session(config)
    ws = get_or_create_sheet(wb, ALL_PRICES_SHEET)
    clear_and_setup_sheet(ws)

    page_token: Optional[str] = None
    row_idx = FIRST_DATA_ROW
    total = 0
    page = 0
    while True:
        page += 1
        payload = fetch_prices_page(config, sess, page_token=page_token)
        offers = extract_offers(payload)
        if offers is None:
            logger.warning("Unexpected response shape on page %d, stopping: %r", page, payload)
            break

        logger.info("Page %d: %d offers", page, len(offers))
        row_idx = write_rows(ws, row_idx, (flatten_offer(o).as_row() for o in offers))
        total += len(offers)

        page_token = next_page_token(payload)
        if not page_token:
            break
        time.sleep(config.page_delay)

    write_summary(ws, total, TOTAL_LABEL)
    logger.info("Exported %d offers into %r", total, ws.title)
    return ExportResult(sheet=ws.title, processed=total)


def export_specific_prices(
    config: Config,
    wb: Workbook,
    offer_ids: Optional[Sequence[str]] = None,
    session: Optional[requests.Session] = None,
) -> Optional[ExportResult]:
    """Look up prices for explicit offer ids in batches.

    When ``offer_ids`` is empty the ids are taken from column A of the active
    sheet. Returns None when there is nothing to look up.
    """
    ids: List[str] = [str(i) for i in offer_ids] if offer_ids else read_offer_ids(wb.active)
    if not ids:
        logger.info("No offer ids to export")
        return None

    config.require_campaign()
    sess = session or create_session(config)
    ws = get_or_create_sheet(wb, SPECIFIC_PRICES_SHEET)
    clear_and_setup_sheet(ws)

    batches = list(chunked(ids, config.batch_size))
    row_idx = FIRST_DATA_ROW
    found = 0
    for number, batch in enumerate(batches, start=1):
        payload = fetch_specific_prices(config, sess, batch)
        offers = extract_offers(payload)
        if offers is None:
            logger.warning("Unexpected response shape for batch %d: %r", number, payload)
        else:
            row_idx = write_rows(ws, row_idx, (flatten_offer(o).as_row() for o in offers))
            found += len(offers)

        if number < len(batches):
            time.sleep(config.batch_delay)

    write_summary(ws, found, FOUND_LABEL)
    logger.info("Found %d of %d requested offers", found, len(ids))
    return ExportResult(sheet=ws.title, processed=found, requested=len(ids))


def list_campaigns(
    config: Config,
    wb: Workbook,
    session: Optional[requests.Session] = None,
) -> List[Campaign]:
    sess = session or create_session(config)
    campaigns = fetch_campaigns(config, sess)
    ws = get_or_create_sheet(wb, CAMPAIGNS_SHEET)
    write_campaigns(ws, [c.as_row() for c in campaigns])
    logger.info("Found %d campaigns", len(campaigns))
    return campaigns


def test_connection(config: Config, session: Optional[requests.Session] = None) -> ConnectionStatus:
    sess = session or create_session(config)
    return check_connection(config, sess)
