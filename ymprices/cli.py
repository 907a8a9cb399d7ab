from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional

from openpyxl import Workbook

from . import exporter
from .config import AUTH_API_KEY, AUTH_OAUTH, Config, load_config
from .excel_writer import open_workbook


logger = logging.getLogger(__name__)


MESSAGES = {
    "ru": {
        "campaigns_start": "Получаем список кампаний…",
        "campaigns_done": (
            "Найдено {count} кампаний.\n"
            "Используйте значения из колонки \"Campaign ID\" в настройках (YM_CAMPAIGN_ID)."
        ),
        "campaigns_none": "Кампании не найдены. Проверьте права доступа токена.",
        "check_start": "Тестируем подключение к API…",
        "check_ok": "✅ Подключение к API Яндекс Маркета успешно!\nМожно приступать к выгрузке данных.",
        "check_fail": "❌ Ошибка подключения к API:\nКод: {code}\nСообщение: {message}\nПроверьте токен и настройки.",
        "export_all_start": "Начинаем выгрузку цен…",
        "export_all_done": "Выгрузка завершена!\nВыгружено товаров: {count}\nЛист: \"{sheet}\"",
        "export_skus_start": "Запрашиваем цены для {count} товаров…",
        "export_skus_empty": (
            "Не найдены SKU для выгрузки. Укажите их в столбце A или передайте в параметрах команды."
        ),
        "export_skus_done": "Выгрузка завершена!\nНайдено товаров: {found} из {requested} запрошенных\nЛист: \"{sheet}\"",
        "file": "Файл: {path}",
        "error": "Ошибка: {error}",
        "interrupted": "Прервано пользователем",
        "help_desc": "Выгрузка цен товаров из API Яндекс Маркета в Excel.",
        "help_campaigns": "Получить список кампаний",
        "help_check": "Тестировать подключение",
        "help_export_all": "Выгрузить все цены",
        "help_export_skus": "Выгрузить цены конкретных товаров",
        "help_skus": "SKU товаров (по умолчанию берутся из столбца A активного листа)",
        "help_sheet": "Лист, из столбца A которого читаются SKU",
        "help_workbook": "Путь к файлу Excel (по умолчанию prices.xlsx)",
        "help_env": "Путь к .env файлу с настройками",
        "help_token": "Токен API (иначе YM_API_TOKEN)",
        "help_campaign": "ID кампании (иначе YM_CAMPAIGN_ID)",
        "help_auth": "Тип авторизации: api-key или oauth",
        "help_client_id": "OAuth client id (иначе YM_OAUTH_CLIENT_ID)",
        "help_verbose": "Подробный журнал запросов",
        "help_lang": "Язык сообщений: ru или en (по умолчанию ru)",
    },
    "en": {
        "campaigns_start": "Fetching campaign list…",
        "campaigns_done": (
            "Found {count} campaigns.\n"
            "Use a value from the \"Campaign ID\" column as YM_CAMPAIGN_ID."
        ),
        "campaigns_none": "No campaigns found. Check the token's access rights.",
        "check_start": "Testing API connection…",
        "check_ok": "✅ Connected to the Yandex Market API.\nYou can start exporting.",
        "check_fail": "❌ API connection failed:\nCode: {code}\nMessage: {message}\nCheck the token and settings.",
        "export_all_start": "Exporting prices…",
        "export_all_done": "Export finished.\nExported offers: {count}\nSheet: \"{sheet}\"",
        "export_skus_start": "Requesting prices for {count} offers…",
        "export_skus_empty": "No SKUs to export. Put them in column A or pass them on the command line.",
        "export_skus_done": "Export finished.\nFound offers: {found} of {requested} requested\nSheet: \"{sheet}\"",
        "file": "File: {path}",
        "error": "Error: {error}",
        "interrupted": "Interrupted by user",
        "help_desc": "Export product prices from the Yandex Market API to Excel.",
        "help_campaigns": "List campaigns",
        "help_check": "Test the connection",
        "help_export_all": "Export all prices",
        "help_export_skus": "Export prices of specific offers",
        "help_skus": "Offer SKUs (default: column A of the active sheet)",
        "help_sheet": "Sheet whose column A holds the SKUs",
        "help_workbook": "Path to the Excel file (default prices.xlsx)",
        "help_env": "Path to a .env settings file",
        "help_token": "API token (otherwise YM_API_TOKEN)",
        "help_campaign": "Campaign ID (otherwise YM_CAMPAIGN_ID)",
        "help_auth": "Authorization type: api-key or oauth",
        "help_client_id": "OAuth client id (otherwise YM_OAUTH_CLIENT_ID)",
        "help_verbose": "Verbose request log",
        "help_lang": "Messages language: ru or en (default ru)",
    },
}


def _msg(lang: str, key: str, **kwargs) -> str:
    lang_key = lang if lang in MESSAGES else "ru"
    template = MESSAGES[lang_key].get(key, "")
    return template.format(**kwargs)


def _run_campaigns(args: argparse.Namespace, config: Config, wb: Workbook) -> int:
    print(_msg(args.lang, "campaigns_start"), flush=True)
    campaigns = exporter.list_campaigns(config, wb)
    _save(args, wb)
    if campaigns:
        print(_msg(args.lang, "campaigns_done", count=len(campaigns)))
    else:
        print(_msg(args.lang, "campaigns_none"))
    return 0


def _run_check(args: argparse.Namespace, config: Config, wb: Workbook) -> int:
    print(_msg(args.lang, "check_start"), flush=True)
    status = exporter.test_connection(config)
    if status.ok:
        print(_msg(args.lang, "check_ok"))
        return 0
    print(_msg(args.lang, "check_fail", code=status.status_code, message=status.message), file=sys.stderr)
    return 1


def _run_export_all(args: argparse.Namespace, config: Config, wb: Workbook) -> int:
    print(_msg(args.lang, "export_all_start"), flush=True)
    try:
        result = exporter.export_all_prices(config, wb)
    finally:
        # Rows written before a failure stay in the file.
        _save(args, wb)
    print(_msg(args.lang, "export_all_done", count=result.processed, sheet=result.sheet))
    return 0


def _run_export_skus(args: argparse.Namespace, config: Config, wb: Workbook) -> int:
    if args.sheet:
        wb.active = wb[args.sheet]
    if args.skus:
        print(_msg(args.lang, "export_skus_start", count=len(args.skus)), flush=True)
    try:
        result = exporter.export_specific_prices(config, wb, offer_ids=args.skus)
    except Exception:
        # Rows written before a failure stay in the file.
        if exporter.SPECIFIC_PRICES_SHEET in wb.sheetnames:
            _save(args, wb)
        raise
    if result is None:
        print(_msg(args.lang, "export_skus_empty"))
        return 0
    _save(args, wb)
    print(
        _msg(
            args.lang,
            "export_skus_done",
            found=result.processed,
            requested=result.requested,
            sheet=result.sheet,
        )
    )
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace, Config, Workbook], int]] = {
    "campaigns": _run_campaigns,
    "check": _run_check,
    "export-all": _run_export_all,
    "export-skus": _run_export_skus,
}


def _save(args: argparse.Namespace, wb: Workbook) -> None:
    wb.save(args.workbook)
    print(_msg(args.lang, "file", path=args.workbook))


def _build_arg_parser(lang: str = "ru") -> argparse.ArgumentParser:
    loc = MESSAGES.get(lang, MESSAGES["ru"])
    p = argparse.ArgumentParser(
        prog="ymprices",
        description=loc["help_desc"],
    )
    p.add_argument(
        "-w",
        "--workbook",
        dest="workbook",
        default="prices.xlsx",
        help=loc["help_workbook"],
    )
    p.add_argument("--env-file", dest="env_file", default=None, help=loc["help_env"])
    p.add_argument("--token", dest="token", default=None, help=loc["help_token"])
    p.add_argument("--campaign-id", dest="campaign_id", default=None, help=loc["help_campaign"])
    p.add_argument(
        "--auth",
        dest="auth_mode",
        choices=[AUTH_API_KEY, AUTH_OAUTH],
        default=None,
        help=loc["help_auth"],
    )
    p.add_argument("--oauth-client-id", dest="oauth_client_id", default=None, help=loc["help_client_id"])
    p.add_argument("-v", "--verbose", dest="verbose", action="store_true", help=loc["help_verbose"])
    p.add_argument(
        "--lang",
        dest="lang",
        choices=["ru", "en"],
        default=lang,
        help=loc["help_lang"],
    )

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("campaigns", help=loc["help_campaigns"])
    sub.add_parser("check", help=loc["help_check"])
    sub.add_parser("export-all", help=loc["help_export_all"])
    skus = sub.add_parser("export-skus", help=loc["help_export_skus"])
    skus.add_argument("skus", nargs="*", help=loc["help_skus"])
    skus.add_argument("--sheet", dest="sheet", default=None, help=loc["help_sheet"])
    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_arg_parser("ru")
    args = parser.parse_args(argv)
    lang = args.lang
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(
            env_file=args.env_file,
            token=args.token,
            campaign_id=args.campaign_id,
            auth_mode=args.auth_mode,
            oauth_client_id=args.oauth_client_id,
        )
        wb = open_workbook(args.workbook) if args.command != "check" else Workbook()
        return COMMANDS[args.command](args, config, wb)
    except KeyboardInterrupt:
        print(_msg(lang, "interrupted"), file=sys.stderr)
        return 130
    except Exception as exc:
        logger.error("Command %s failed: %s", args.command, exc, exc_info=args.verbose)
        print(_msg(lang, "error", error=exc), file=sys.stderr)
        return 1
