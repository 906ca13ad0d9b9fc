"""
Production statistics over work orders.

WORKER statistics count shifts per person, MECHANICAL statistics split the
handled tonnage across the operators of each order. Both are recomputed on
every query from the raw records; nothing aggregated is persisted.
"""
import csv
import io
import re
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from openpyxl import Workbook

from models.work_order import DayType, WorkOrderType
from schemas.validators import split_names
from services.date_service import iso_from_parts, parse_day_month_year

DEFAULT_METHOD = "N/A"
DEFAULT_CARGO_TYPE = "Giấy"

_NUMERIC_PREFIX = re.compile(r"^\s*(-?\d+(?:[.,]\d+)?)")


@dataclass
class StatisticsFilter:
    month: Optional[int] = None
    year: Optional[int] = None
    start_date: Optional[str] = None  # YYYY-MM-DD, inclusive
    end_date: Optional[str] = None
    names: List[str] = field(default_factory=list)

    @property
    def has_date_filter(self) -> bool:
        return any(v is not None and v != "" for v in (self.month, self.year, self.start_date, self.end_date))


@dataclass
class WorkerStatRow:
    id: str
    name: str
    date: str
    shift: str
    method: str
    cargo_type: str
    normal_shifts: int = 0
    weekend_shifts: int = 0
    holiday_shifts: int = 0


@dataclass
class MechanicalStatRow:
    id: str
    name: str
    vehicle_no: str
    date: str
    shift: str
    method: str
    cargo_type: str
    normal_weight: float = 0.0
    weekend_weight: float = 0.0
    holiday_weight: float = 0.0


def _type_value(work_order) -> str:
    wo_type = work_order.type
    return wo_type.value if hasattr(wo_type, "value") else str(wo_type)


def day_type_of(work_order) -> DayType:
    if work_order.is_holiday:
        return DayType.HOLIDAY
    if work_order.is_weekend:
        return DayType.WEEKEND
    return DayType.NORMAL


def passes_date_filter(date_text: str, filters: StatisticsFilter) -> bool:
    if not filters.has_date_filter:
        return True
    parts = parse_day_month_year(date_text)
    if parts is None:
        return False

    y, m, _ = parts
    iso_date = iso_from_parts(parts)
    if filters.month is not None and m != int(filters.month):
        return False
    if filters.year is not None and y != int(filters.year):
        return False
    if filters.start_date and iso_date < filters.start_date:
        return False
    if filters.end_date and iso_date > filters.end_date:
        return False
    return True


def resolve_people(work_order) -> List[str]:
    """Flattened worker names, falling back to a comma-split team name."""
    people = split_names(work_order.worker_names or [])
    if not people and work_order.team_name:
        people = split_names(work_order.team_name)
    return people


def _first_item(work_order) -> Tuple[str, str]:
    items = work_order.items or []
    first = items[0] if items else {}
    if not isinstance(first, dict):
        first = {}
    method = first.get("method") or DEFAULT_METHOD
    cargo_type = first.get("cargo_type") or first.get("cargoType") or DEFAULT_CARGO_TYPE
    return method, cargo_type


def parse_weight_text(text) -> float:
    """Numeric prefix of an item weight such as ``"28.8 tấn"``; 0 when absent."""
    if text is None:
        return 0.0
    if isinstance(text, (int, float)):
        return float(text)
    match = _NUMERIC_PREFIX.match(str(text).lower())
    if not match:
        return 0.0
    return float(match.group(1).replace(",", "."))


def order_weight(work_order, weights_by_container_no: Dict[str, float]) -> float:
    """Sum of referenced container weights, else the order's own item weights."""
    total = sum(weights_by_container_no.get(no, 0.0) for no in (work_order.container_nos or []))
    if total == 0:
        total = sum(
            parse_weight_text(item.get("weight"))
            for item in (work_order.items or [])
            if isinstance(item, dict)
        )
    return total


def aggregate_worker_stats(work_orders: Iterable, filters: Optional[StatisticsFilter] = None) -> List[WorkerStatRow]:
    """One shift per LABOR order for every person named on it, bucketed by day type."""
    filters = filters or StatisticsFilter()
    allowed = set(filters.names or [])
    rows: Dict[str, WorkerStatRow] = {}

    for wo in work_orders:
        if _type_value(wo) != WorkOrderType.LABOR.value:
            continue
        if not passes_date_filter(wo.date, filters):
            continue

        method, cargo_type = _first_item(wo)
        day_type = day_type_of(wo)

        for name in resolve_people(wo):
            if allowed and name not in allowed:
                continue

            key = f"{name}-{wo.date}-{method}-{cargo_type}"
            row = rows.get(key)
            if row is None:
                row = rows[key] = WorkerStatRow(
                    id=key, name=name, date=wo.date, shift=wo.shift,
                    method=method, cargo_type=cargo_type,
                )

            if day_type == DayType.HOLIDAY:
                row.holiday_shifts += 1
            elif day_type == DayType.WEEKEND:
                row.weekend_shifts += 1
            else:
                row.normal_shifts += 1

    return list(rows.values())


def aggregate_mechanical_stats(
    work_orders: Iterable,
    containers: Iterable,
    filters: Optional[StatisticsFilter] = None,
) -> List[MechanicalStatRow]:
    """
    Split each MECHANICAL order's tonnage evenly across its operators.

    Operators are the flattened people list; without people the vehicles are
    used, and without vehicles the team itself. When people and vehicles have
    the same length they are paired by position.
    """
    filters = filters or StatisticsFilter()
    allowed = set(filters.names or [])

    weights: Dict[str, float] = {}
    for container in containers:
        # first record wins for a repeated container number
        weights.setdefault(container.container_no, float(container.weight or 0))

    rows: Dict[str, MechanicalStatRow] = {}

    for wo in work_orders:
        if _type_value(wo) != WorkOrderType.MECHANICAL.value:
            continue
        if not passes_date_filter(wo.date, filters):
            continue

        total_weight = order_weight(wo, weights)
        people = resolve_people(wo)
        vehicles = [str(v) for v in (wo.vehicle_nos or [])]
        team_name = wo.team_name or ""

        if people:
            entities = people
        elif vehicles:
            entities = vehicles
        else:
            entities = [team_name]

        weight_per_entity = total_weight / (len(entities) or 1)
        method, cargo_type = _first_item(wo)
        day_type = day_type_of(wo)

        for idx, entity in enumerate(entities):
            if people:
                name = entity
                vehicle = vehicles[idx] if len(vehicles) == len(people) else ", ".join(vehicles)
            elif vehicles:
                name = team_name
                vehicle = entity
            else:
                name = team_name
                vehicle = "N/A"

            if allowed and name not in allowed:
                continue

            key = f"{name}-{vehicle}-{wo.date}-{method}-{cargo_type}"
            row = rows.get(key)
            if row is None:
                row = rows[key] = MechanicalStatRow(
                    id=key, name=name, vehicle_no=vehicle, date=wo.date,
                    shift=wo.shift, method=method, cargo_type=cargo_type,
                )

            if day_type == DayType.HOLIDAY:
                row.holiday_weight += weight_per_entity
            elif day_type == DayType.WEEKEND:
                row.weekend_weight += weight_per_entity
            else:
                row.normal_weight += weight_per_entity

    return list(rows.values())


_TOTAL_FIELDS = (
    "normal_shifts", "weekend_shifts", "holiday_shifts",
    "normal_weight", "weekend_weight", "holiday_weight",
)


def compute_totals(rows: Sequence) -> dict:
    return {name: sum(getattr(row, name, 0) for row in rows) for name in _TOTAL_FIELDS}


WORKER_COLUMNS = [
    ("name", "TÊN NHÂN VIÊN"),
    ("cargo_type", "LOẠI HÀNG"),
    ("method", "PHƯƠNG ÁN KHAI THÁC"),
    ("date", "NGÀY KHAI THÁC"),
    ("normal_shifts", "CA HC"),
    ("weekend_shifts", "CA CUỐI TUẦN"),
    ("holiday_shifts", "CA LỄ"),
]

MECHANICAL_COLUMNS = [
    ("name", "TÊN NHÂN VIÊN"),
    ("vehicle_no", "SỐ XE"),
    ("cargo_type", "LOẠI HÀNG"),
    ("method", "PHƯƠNG ÁN KHAI THÁC"),
    ("date", "NGÀY KHAI THÁC"),
    ("normal_weight", "TẤN HC"),
    ("weekend_weight", "TẤN CUỐI TUẦN"),
    ("holiday_weight", "TẤN LỄ"),
]


def _export_cell(column: str, value):
    if column == "name":
        # "Nguyen Van A (Kho)" -> "Nguyen Van A"
        return str(value).split("(")[0].strip()
    if isinstance(value, float):
        return int(value) if value.is_integer() else round(value, 2)
    return value


def export_rows(kind: str, rows: Sequence, fmt: str = "csv") -> bytes:
    """Render aggregated rows as CSV (UTF-8 with BOM) or XLSX."""
    columns = WORKER_COLUMNS if kind == "WORKER" else MECHANICAL_COLUMNS
    headers = [label for _, label in columns]
    table = [
        [_export_cell(col, asdict(row)[col]) for col, _ in columns]
        for row in rows
    ]

    if fmt == "xlsx":
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "San_Luong"
        sheet.append(headers)
        for line in table:
            sheet.append(line)
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)
    writer.writerows(table)
    return ("\ufeff" + buffer.getvalue()).encode("utf-8")
