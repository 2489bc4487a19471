from pathlib import Path

import pytest
from openpyxl import Workbook

from quote_engine.data import catalog_repository
from quote_engine.data.catalog_repository import get_catalog, load_catalog, reload_catalog

HEADER = ["ServiceId", "Name", "Category", "Description", "BasePrice", "Duration", "Active", "Option", "OptionPrice"]


def _write_workbook(path: Path, rows: list[list]) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.append(HEADER)
    for row in rows:
        ws.append(row)
    wb.save(path)
    return path


@pytest.fixture(autouse=True)
def no_database(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(catalog_repository, "get_supabase_client", lambda: None)
    load_catalog.cache_clear()
    yield
    load_catalog.cache_clear()


def test_workbook_rows_define_services_and_ordered_options(tmp_path: Path) -> None:
    source = _write_workbook(
        tmp_path / "services.xlsx",
        [
            ["S1", "Oil change", "Maintenance", "Full synthetic", 100, 60, "yes", None, None],
            ["S1", None, None, None, None, None, None, "Synthetic oil", 10],
            ["S1", None, None, None, None, None, None, "Filter", "25,50"],
            ["S2", "Tire swap", "Tires", None, 80, None, None, None, None],
        ],
    )

    catalog = load_catalog(source)

    assert len(catalog) == 2
    oil = catalog.get("S1")
    assert oil.name == "Oil change"
    assert oil.base_price == 100.0
    assert oil.duration_minutes == 60
    assert [option.name for option in oil.options] == ["Synthetic oil", "Filter"]
    assert catalog.option("S1", 1).price == 25.5
    assert catalog.option("S1", 2) is None
    assert catalog.get("S2").is_active


def test_inactive_services_are_hidden(tmp_path: Path) -> None:
    source = _write_workbook(
        tmp_path / "services.xlsx",
        [
            ["S1", "Oil change", None, None, 100, None, "yes", None, None],
            ["S2", "Retired", None, None, 50, None, "no", None, None],
        ],
    )

    assert "S2" in load_catalog(source)
    assert [entry.service_id for entry in get_catalog(source)] == ["S1"]


def test_missing_columns_are_reported(tmp_path: Path) -> None:
    path = tmp_path / "services.xlsx"
    wb = Workbook()
    wb.active.append(["ServiceId", "Name"])
    wb.active.append(["S1", "Oil change"])
    wb.save(path)

    with pytest.raises(ValueError, match="BasePrice"):
        load_catalog(path)


def test_missing_workbook_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "absent.xlsx")


def test_reload_replaces_cached_snapshot(tmp_path: Path) -> None:
    source = tmp_path / "services.xlsx"
    _write_workbook(source, [["S1", "Oil change", None, None, 100, None, None, None, None]])
    first = get_catalog(source)

    _write_workbook(source, [["S1", "Oil change", None, None, 120, None, None, None, None]])
    assert get_catalog(source).get("S1").base_price == 100.0

    reloaded = reload_catalog(source)
    assert reloaded.get("S1").base_price == 120.0
    assert first.get("S1").base_price == 100.0


def test_database_rows_take_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    class Response:
        data = [
            {
                "service_id": "DB1",
                "name": "Brake inspection",
                "base_price": "75.00",
                "options": '[{"name": "Pads", "price": 40}]',
                "is_active": True,
            }
        ]

    class Query:
        def select(self, columns):
            return self

        def execute(self):
            return Response()

    class Client:
        def table(self, name):
            assert name == "services"
            return Query()

    monkeypatch.setattr(catalog_repository, "get_supabase_client", lambda: Client())

    catalog = load_catalog(tmp_path / "absent.xlsx")

    assert [entry.service_id for entry in catalog] == ["DB1"]
    assert catalog.option("DB1", 0).price == 40.0
