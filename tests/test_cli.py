from __future__ import annotations

import pytest
from openpyxl import Workbook, load_workbook

from conftest import FakeResponse, FakeSession, offers_payload
from ymprices import cli
from ymprices.errors import ApiError
from ymprices.types import Campaign, ConnectionStatus, ExportResult


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in ("YM_API_TOKEN", "YM_CAMPAIGN_ID", "YM_AUTH_MODE", "YM_OAUTH_CLIENT_ID", "YM_API_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _argv(tmp_path, *command):
    return ["--token", "tok", "--campaign-id", "1", "-w", str(tmp_path / "out.xlsx"), *command]


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli._build_arg_parser().parse_args([])


def test_export_all_success(monkeypatch, tmp_path, capsys):
    def fake_export(config, wb):
        ws = wb.create_sheet("Цены товаров")
        ws["A2"] = "sku"
        return ExportResult(sheet="Цены товаров", processed=1)

    monkeypatch.setattr(cli.exporter, "export_all_prices", fake_export)

    assert cli.main(_argv(tmp_path, "export-all")) == 0
    out = capsys.readouterr().out
    assert "Выгружено товаров: 1" in out
    assert load_workbook(tmp_path / "out.xlsx")["Цены товаров"]["A2"].value == "sku"


def test_export_all_failure_surfaces_status_and_saves(monkeypatch, tmp_path, capsys):
    def fake_export(config, wb):
        wb.create_sheet("Цены товаров")["A2"] = "partial"
        raise ApiError(401, "Unauthorized")

    monkeypatch.setattr(cli.exporter, "export_all_prices", fake_export)

    assert cli.main(_argv(tmp_path, "--lang", "en", "export-all")) == 1
    err = capsys.readouterr().err
    assert "Error: API returned status 401: Unauthorized" in err
    assert load_workbook(tmp_path / "out.xlsx")["Цены товаров"]["A2"].value == "partial"


def test_export_skus_passes_ids(monkeypatch, tmp_path, capsys):
    seen = {}

    def fake_export(config, wb, offer_ids=None):
        seen["ids"] = offer_ids
        return ExportResult(sheet="Конкретные цены", processed=2, requested=3)

    monkeypatch.setattr(cli.exporter, "export_specific_prices", fake_export)

    assert cli.main(_argv(tmp_path, "export-skus", "a", "b", "c")) == 0
    assert seen["ids"] == ["a", "b", "c"]
    assert "Найдено товаров: 2 из 3 запрошенных" in capsys.readouterr().out


def test_export_skus_without_ids_prints_notice(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(cli.exporter, "export_specific_prices", lambda config, wb, offer_ids=None: None)

    assert cli.main(_argv(tmp_path, "export-skus")) == 0
    out = capsys.readouterr().out
    assert "Не найдены SKU для выгрузки" in out
    assert "Файл:" not in out
    assert not (tmp_path / "out.xlsx").exists()


def test_export_skus_reads_ids_from_named_sheet(monkeypatch, tmp_path, capsys):
    path = tmp_path / "out.xlsx"
    wb = Workbook()
    wb.active["A2"] = "ignored"
    ids = wb.create_sheet("Мои SKU")
    ids["A1"] = "SKU"
    ids["A2"] = "a"
    ids["A3"] = "b"
    wb.save(path)

    session = FakeSession([FakeResponse(200, offers_payload([{"offerId": "b"}]))])
    monkeypatch.setattr(cli.exporter, "create_session", lambda config: session)

    assert cli.main(_argv(tmp_path, "export-skus", "--sheet", "Мои SKU")) == 0

    assert session.calls[0]["json"] == {"offerIds": ["a", "b"]}
    assert "Найдено товаров: 1 из 2 запрошенных" in capsys.readouterr().out
    saved = load_workbook(path)
    assert saved["Конкретные цены"]["A2"].value == "b"
    assert saved["Мои SKU"]["A3"].value == "b"


def test_campaigns_none_found(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(cli.exporter, "list_campaigns", lambda config, wb: [])
    assert cli.main(_argv(tmp_path, "--lang", "en", "campaigns")) == 0
    assert "No campaigns found" in capsys.readouterr().out


def test_campaigns_found(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(cli.exporter, "list_campaigns", lambda config, wb: [Campaign(id=1), Campaign(id=2)])
    assert cli.main(_argv(tmp_path, "campaigns")) == 0
    assert "Найдено 2 кампаний" in capsys.readouterr().out


def test_check_failure(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(
        cli.exporter,
        "test_connection",
        lambda config: ConnectionStatus(ok=False, status_code=403, message="Forbidden"),
    )
    assert cli.main(_argv(tmp_path, "--lang", "en", "check")) == 1
    err = capsys.readouterr().err
    assert "Code: 403" in err
    assert "Forbidden" in err
    assert not (tmp_path / "out.xlsx").exists()


def test_missing_token(tmp_path, capsys):
    assert cli.main(["-w", str(tmp_path / "out.xlsx"), "check"]) == 1
    assert "YM_API_TOKEN" in capsys.readouterr().err
