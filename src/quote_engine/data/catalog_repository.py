"""Service catalog loader with database-first approach, falling back to the Excel workbook."""

from __future__ import annotations

import functools
import json
import logging
from pathlib import Path
from typing import Any, Iterable

from openpyxl import load_workbook

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import ServiceCatalog, ServiceCatalogEntry, ServiceOption

REQUIRED_COLUMNS = {"ServiceId", "Name", "BasePrice"}


def _coerce_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", ".").replace("$", "").strip()
    return float(value)


def _coerce_bool(value: Any) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, str):
        return value.strip().lower() not in {"0", "false", "no", "non", "n"}
    return bool(value)


def _parse_options(raw: Any) -> tuple[ServiceOption, ...]:
    if not raw:
        return ()
    if isinstance(raw, str):
        raw = json.loads(raw)
    return tuple(ServiceOption(name=str(item.get("name", "")), price=_coerce_float(item.get("price"))) for item in raw)


def _load_catalog_from_database() -> tuple[ServiceCatalogEntry, ...] | None:
    """Load services from Supabase. Returns None if database not available or empty."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        response = supabase.table("services").select("*").execute()
    except Exception as e:
        logging.warning(f"Service catalog query failed, falling back to workbook: {e}")
        return None
    if not response.data:
        return None

    entries: list[ServiceCatalogEntry] = []
    for row in response.data:
        try:
            entries.append(
                ServiceCatalogEntry(
                    service_id=str(row["service_id"]).strip(),
                    name=str(row.get("name") or row["service_id"]),
                    base_price=_coerce_float(row.get("base_price")),
                    options=_parse_options(row.get("options")),
                    category=row.get("category"),
                    description=row.get("description"),
                    duration_minutes=int(row["duration"]) if row.get("duration") is not None else None,
                    is_active=_coerce_bool(row.get("is_active")),
                )
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"Skipping invalid service row: {e}")
            continue
    return tuple(entries) if entries else None


def _rows_to_entries(header: Iterable[Any], rows: Iterable[tuple]) -> tuple[ServiceCatalogEntry, ...]:
    header_map = {str(name).strip(): idx for idx, name in enumerate(header) if name is not None}
    missing_columns = REQUIRED_COLUMNS - set(header_map)
    if missing_columns:
        raise ValueError(f"Service workbook missing columns: {', '.join(sorted(missing_columns))}")

    def cell(row: tuple, column: str) -> Any:
        idx = header_map.get(column)
        return row[idx] if idx is not None and idx < len(row) else None

    services: dict[str, dict[str, Any]] = {}
    for row in rows:
        service_id = cell(row, "ServiceId")
        if not service_id:
            continue
        service_id = str(service_id).strip()
        option_name = cell(row, "Option")
        if option_name:
            # Option rows keep workbook order, which defines option indexes
            service = services.setdefault(service_id, {"options": []})
            service["options"].append(ServiceOption(name=str(option_name).strip(), price=_coerce_float(cell(row, "OptionPrice"))))
            continue
        service = services.setdefault(service_id, {"options": []})
        duration = cell(row, "Duration")
        service.update(
            name=str(cell(row, "Name") or service_id).strip(),
            base_price=_coerce_float(cell(row, "BasePrice")),
            category=cell(row, "Category"),
            description=cell(row, "Description"),
            duration_minutes=int(duration) if duration not in (None, "") else None,
            is_active=_coerce_bool(cell(row, "Active")),
        )

    entries = []
    for service_id, service in services.items():
        if "name" not in service:
            logging.warning(f"Service '{service_id}' has options but no definition row, skipping")
            continue
        options = service.pop("options")
        entries.append(ServiceCatalogEntry(service_id=service_id, options=tuple(options), **service))
    return tuple(entries)


def _load_catalog_from_file(source: Path | None = None) -> tuple[ServiceCatalogEntry, ...]:
    """Load services from the Excel workbook."""
    workbook_path = source or settings.catalog_file
    if not workbook_path.exists():
        raise FileNotFoundError(f"Service workbook not found: {workbook_path}")

    wb = load_workbook(workbook_path, data_only=True, read_only=True)
    try:
        rows = wb.active.iter_rows(min_row=1, values_only=True)
        header = next(rows, None)
        if header is None:
            raise ValueError(f"Service workbook '{workbook_path}' is empty.")
        return _rows_to_entries(header, rows)
    finally:
        wb.close()


@functools.lru_cache(maxsize=1)
def load_catalog(source: Path | None = None) -> ServiceCatalog:
    """Load the full catalog snapshot, database first, then workbook."""
    entries = _load_catalog_from_database()
    if entries is None:
        entries = _load_catalog_from_file(source)
    logging.info(f"Loaded service catalog with {len(entries)} services")
    return ServiceCatalog(entries)


def get_catalog(source: Path | None = None) -> ServiceCatalog:
    """Active services only."""
    return load_catalog(source).active()


def reload_catalog(source: Path | None = None) -> ServiceCatalog:
    load_catalog.cache_clear()
    return get_catalog(source)
