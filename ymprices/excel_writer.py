from __future__ import annotations

import os
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet


PRICE_HEADERS_RU = [
    "SKU товара",
    "Market SKU",
    "Цена",
    "Валюта",
    "Цена без скидки",
    "НДС",
    "Дата обновления",
]

CAMPAIGN_HEADERS_RU = [
    "Campaign ID",
    "Название",
    "Business ID",
    "Бизнес",
    "Модель размещения",
]

PRICE_HEADER_FILL = "E8F5E8"
CAMPAIGN_HEADER_FILL = "E1F5FE"

UPDATED_LABEL = "Обновлено:"
TOTAL_LABEL = "Всего товаров:"
FOUND_LABEL = "Найдено товаров:"

# Summary cells live to the right of the 7-column data block: I1/J1 and I2/J2.
SUMMARY_LABEL_COLUMN = 9
SUMMARY_VALUE_COLUMN = 10

MAX_COLUMN_WIDTH = 60


def _is_blank_sheet(ws: Worksheet) -> bool:
    return ws.max_row == 1 and ws.max_column == 1 and ws.cell(row=1, column=1).value is None


def open_workbook(path: Optional[str]) -> Workbook:
    """Load the workbook at ``path`` if it exists, otherwise start a new one."""
    if path and os.path.exists(path):
        return load_workbook(path)
    return Workbook()


def get_or_create_sheet(wb: Workbook, title: str) -> Worksheet:
    if title in wb.sheetnames:
        return wb[title]
    ws = wb.create_sheet(title)
    # A fresh Workbook carries an empty placeholder sheet; drop it once real data arrives.
    if "Sheet" in wb.sheetnames and _is_blank_sheet(wb["Sheet"]):
        wb.remove(wb["Sheet"])
    return ws


def autosize_columns(ws: Worksheet, columns: Optional[int] = None) -> None:
    last = columns or ws.max_column
    for col_idx in range(1, last + 1):
        longest = 0
        for (value,) in ws.iter_rows(min_col=col_idx, max_col=col_idx, values_only=True):
            if value is None:
                continue
            longest = max(longest, len(str(value)))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(longest + 2, MAX_COLUMN_WIDTH)


def _style_header(ws: Worksheet, width: int, fill_color: str) -> None:
    font = Font(bold=True)
    fill = PatternFill(start_color=fill_color, end_color=fill_color, fill_type="solid")
    for col_idx in range(1, width + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = font
        cell.fill = fill


def clear_and_setup_sheet(
    ws: Worksheet,
    headers: Optional[Sequence[str]] = None,
    fill_color: str = PRICE_HEADER_FILL,
) -> None:
    """
    Wipe the sheet and write a styled, frozen header row.
    """
    headers = list(headers or PRICE_HEADERS_RU)
    if ws.max_row:
        ws.delete_rows(1, ws.max_row)

    for col_idx, title in enumerate(headers, start=1):
        ws.cell(row=1, column=col_idx).value = title
    _style_header(ws, len(headers), fill_color)
    autosize_columns(ws, len(headers))
    ws.freeze_panes = "A2"


def write_rows(ws: Worksheet, start_row: int, rows: Iterable[Sequence[Any]]) -> int:
    """Write a contiguous block starting at ``start_row``; returns the next free row."""
    row_idx = start_row
    for row in rows:
        for col_idx, value in enumerate(row, start=1):
            ws.cell(row=row_idx, column=col_idx).value = value
        row_idx += 1
    return row_idx


def write_summary(
    ws: Worksheet,
    total: int,
    total_label: str = TOTAL_LABEL,
    updated_at: Optional[datetime] = None,
) -> None:
    ws.cell(row=1, column=SUMMARY_LABEL_COLUMN).value = UPDATED_LABEL
    ws.cell(row=1, column=SUMMARY_VALUE_COLUMN).value = updated_at or datetime.now()
    ws.cell(row=2, column=SUMMARY_LABEL_COLUMN).value = total_label
    ws.cell(row=2, column=SUMMARY_VALUE_COLUMN).value = total


def write_campaigns(ws: Worksheet, rows: Sequence[Sequence[Any]]) -> None:
    clear_and_setup_sheet(ws, CAMPAIGN_HEADERS_RU, fill_color=CAMPAIGN_HEADER_FILL)
    write_rows(ws, 2, rows)
    autosize_columns(ws, len(CAMPAIGN_HEADERS_RU))


def _id_to_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def read_offer_ids(ws: Worksheet) -> List[str]:
    """Offer identifiers from column A, row 2 downwards, skipping empty cells."""
    ids: List[str] = []
    for (value,) in ws.iter_rows(min_row=2, max_col=1, values_only=True):
        if value is None:
            continue
        text = _id_to_text(value)
        if text:
            ids.append(text)
    return ids
