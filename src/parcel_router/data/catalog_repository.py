"""Postal register loader: built-in register, or a CSV/XLSX file."""

from __future__ import annotations

import csv
import functools
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from openpyxl import load_workbook

from ..config import settings
from ..errors import CatalogError
from ..models.domain import Catalog, Waypoint

logger = logging.getLogger(__name__)

# (x, y, name) per postal code; index 0 is the depot.
DEFAULT_POSTAL_REGISTER: tuple[tuple[int, int, str], ...] = (
    (0, 0, "Depot"),
    (9, 8, "location 1"),
    (6, 8, "location 2"),
    (7, 8, "location 3"),
    (1, 1, "location 4"),
    (21, 11, "location 5"),
    (7, 11, "location 6"),
    (11, 11, "location 7"),
    (5, 5, "location 8"),
    (9, 9, "location 9"),
    (8, 1, "location 10"),
)

REQUIRED_COLUMNS = {"Name", "X", "Y"}
COLUMN_ALIASES = {"name": "Name", "x": "X", "y": "Y", "id": "Id"}


def _coerce_int(value: Any, column: str, line: int) -> int:
    if value is None or str(value).strip() == "":
        raise CatalogError(f"Row {line}: missing value for column '{column}'.")
    try:
        number = float(str(value).strip())
    except ValueError as exc:
        raise CatalogError(f"Row {line}: unable to parse integer from {column}='{value}'.") from exc
    if not number.is_integer():
        raise CatalogError(f"Row {line}: coordinate {column}='{value}' is not an integer.")
    return int(number)


def _normalize_header(header: Iterable[Any]) -> dict[str, int]:
    header_map: dict[str, int] = {}
    for idx, name in enumerate(header):
        if name is None:
            continue
        column = COLUMN_ALIASES.get(str(name).strip().lower())
        if column and column not in header_map:
            header_map[column] = idx
    return header_map


def _cell(row: Sequence[Any], header_map: dict[str, int], column: str) -> Any:
    index = header_map[column]
    return row[index] if index < len(row) else None


def _build_waypoints(rows: Iterable[tuple[int, Sequence[Any]]], header_map: dict[str, int]) -> list[Waypoint]:
    waypoints: list[Waypoint] = []
    for line, row in rows:
        cell = functools.partial(_cell, row, header_map)
        name = cell("Name")
        if name is None or str(name).strip() == "":
            continue  # blank spreadsheet rows
        expected_id = len(waypoints)
        if "Id" in header_map:
            declared = _coerce_int(cell("Id"), "Id", line)
            if declared != expected_id:
                raise CatalogError(
                    f"Row {line}: postal code {declared} is out of sequence; expected {expected_id}."
                )
        waypoints.append(
            Waypoint(
                id=expected_id,
                x=_coerce_int(cell("X"), "X", line),
                y=_coerce_int(cell("Y"), "Y", line),
                name=str(name).strip(),
            )
        )
    return waypoints


def _load_catalog_from_csv(csv_path: Path) -> list[Waypoint]:
    with csv_path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.reader(handle)
        header = next(reader, None)
        if header is None:
            raise CatalogError(f"Postal register '{csv_path}' is missing a header row.")
        header_map = _normalize_header(header)
        missing_columns = REQUIRED_COLUMNS - set(header_map)
        if missing_columns:
            raise CatalogError(f"Postal register missing columns: {', '.join(sorted(missing_columns))}")
        return _build_waypoints(enumerate(reader, start=2), header_map)


def _load_catalog_from_workbook(workbook_path: Path) -> list[Waypoint]:
    wb = load_workbook(workbook_path, data_only=True, read_only=True)
    try:
        sheet = wb.active
        rows = sheet.iter_rows(min_row=1, values_only=True)
        header = next(rows, None)
        if header is None:
            raise CatalogError(f"Postal register workbook '{workbook_path}' is empty.")
        header_map = _normalize_header(header)
        missing_columns = REQUIRED_COLUMNS - set(header_map)
        if missing_columns:
            raise CatalogError(f"Postal register workbook missing columns: {', '.join(sorted(missing_columns))}")
        return _build_waypoints(enumerate(rows, start=2), header_map)
    finally:
        wb.close()


@functools.lru_cache(maxsize=1)
def load_catalog(source: Optional[Path] = None) -> Catalog:
    """Load the postal register from ``source``, the configured file, or the built-in register."""

    path = source or settings.catalog_file
    if path is None:
        return Catalog.from_rows(DEFAULT_POSTAL_REGISTER)

    if not path.exists():
        raise FileNotFoundError(f"Postal register not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        waypoints = _load_catalog_from_csv(path)
    elif suffix in {".xlsx", ".xlsm"}:
        waypoints = _load_catalog_from_workbook(path)
    else:
        raise CatalogError(f"Unsupported postal register format '{path.suffix}' (expected .csv or .xlsx).")

    if not waypoints:
        raise CatalogError(f"Postal register '{path}' has no rows; at least the depot is required.")
    logger.info("Loaded %d postal codes from %s (depot '%s')", len(waypoints) - 1, path, waypoints[0].name)
    return Catalog(waypoints)


def get_catalog() -> Catalog:
    return load_catalog()
