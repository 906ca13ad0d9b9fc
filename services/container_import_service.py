# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException
from openpyxl import Workbook, load_workbook
from sqlalchemy.orm import Session

from models.container import Container, ContainerStatus, UnitType, new_container_id
from models.vessel import Vessel
from schemas.validators import is_present
from services.config_service import get_import_defaults
from services.date_service import normalize_date

log = logging.getLogger(__name__)

# Header synonyms, matched case- and whitespace-insensitively
CONTAINER_NO_KEYS = ["Số hiệu Cont/Xe", "Số hiệu Cont", "containerNo", "Container Number", "Container No", "Số Cont"]
PLAN_DATE_KEYS = ["Ngày Kế hoạch", "ngayKeHoach", "Plan Date", "Ngày"]
SIZE_KEYS = ["Size", "Kích cỡ", "size"]
SEAL_KEYS = ["Số Seal", "Seal No", "sealNo"]
TK_NHA_VC_KEYS = ["Số TK Nhà VC", "tkNhaVC", "Tờ khai", "Số tờ khai", "Số TK", "Customs No"]
NGAY_TK_NHA_VC_KEYS = ["Ngày TK Nhà VC", "ngayTkNhaVC", "Ngày tờ khai", "Ngày TK", "Customs Date"]
TK_DNL_KEYS = ["Số TK DNL", "tkDnlOla", "Số TK DNL/OLA", "Tờ khai DNL"]
NGAY_TK_DNL_KEYS = ["Ngày TK DNL", "ngayTkDnl", "Ngày TK DNL/OLA", "Ngày tờ khai DNL"]
BILL_KEYS = ["Bill No", "billNo", "Vận đơn"]
PKGS_KEYS = ["Số kiện", "pkgs", "Package"]
WEIGHT_KEYS = ["Số tấn", "weight", "Weight"]
VENDOR_KEYS = ["Vendor", "vendor"]
CONSIGNEE_KEYS = ["Chủ hàng", "Consignee", "consignee", "Khách hàng", "Customer"]
CARRIER_KEYS = ["Hãng tàu", "carrier", "Carrier"]
DET_KEYS = ["Hạn DET", "detExpiry", "DET"]
EMPTY_RETURN_KEYS = ["Nơi hạ rỗng", "noiHaRong", "Empty Return"]

TEMPLATE_HEADERS = [
    "STT", "Ngày Kế hoạch", "Số hiệu Cont/Xe", "Số Seal", "Số TK Nhà VC", "Ngày TK Nhà VC",
    "Số TK DNL", "Ngày TK DNL", "Số kiện", "Số tấn", "Vendor", "Hạn DET", "Nơi hạ rỗng",
]
TEMPLATE_SAMPLE = [
    "1", "31/12/2025", "GESU6721400", "H/25.0462426", "500592570963", "01/01/2026",
    "500592633150", "02/01/2026", 16, 28.8, "DH/SME/SME", "07/01/2026", "TIEN SA",
]

CONTAINER_NO_PATTERN = re.compile(r"^[A-Z]{4}\d{7}$")
DEFAULT_CONTAINER_SIZE = "40'HC"
DEFAULT_VEHICLE_SIZE = "TRAILER"
DEFAULT_EMPTY_RETURN = "TIEN SA"
DEFAULT_DET_DAYS = 14


@dataclass
class ImportResult:
    containers: List[Container] = field(default_factory=list)
    total_pkgs: int = 0
    total_weight: float = 0.0
    errors: List[dict] = field(default_factory=list)
    skipped: int = 0

    @property
    def summary(self) -> dict:
        return {
            "imported": len(self.containers),
            "total_pkgs": self.total_pkgs,
            "total_weight": self.total_weight,
            "skipped": self.skipped,
            "errors": self.errors,
        }


def _normalize_header(key: Any) -> str:
    return re.sub(r"\s+", "", str(key)).lower()


def find_value(row: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Look up the first synonym present in the row, ignoring case and all whitespace."""
    normalized = {_normalize_header(k): v for k, v in row.items() if k is not None}
    for key in keys:
        wanted = _normalize_header(key)
        if wanted in normalized:
            return normalized[wanted]
    return None


def detect_unit_type(identifier: str) -> UnitType:
    if not identifier:
        return UnitType.VEHICLE
    clean = str(identifier).strip().upper()
    if "/" in clean:
        return UnitType.VEHICLE
    if CONTAINER_NO_PATTERN.match(re.sub(r"[\s.\-]", "", clean)):
        return UnitType.CONTAINER
    return UnitType.VEHICLE


def coalesce(existing: Any, new: Any, default: Any = None) -> Any:
    """New value if present, else the existing one, else the default."""
    if is_present(new):
        return new.strip() if isinstance(new, str) else new
    if is_present(existing):
        return existing
    return default


def _to_number(value: Any, cast=float) -> Optional[float]:
    """Non-negative quantity, or None when the cell is blank, unreadable or negative."""
    if not is_present(value):
        return None
    try:
        number = cast(float(str(value).replace(",", ".").strip()))
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


def _to_text(value: Any) -> Optional[str]:
    if not is_present(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _coalesce_date(existing: Any, raw: Any) -> str:
    normalized = normalize_date(raw) if is_present(raw) else ""
    return coalesce(existing, normalized, "")


def _status_of(value: Any) -> ContainerStatus:
    if isinstance(value, ContainerStatus):
        return value
    try:
        return ContainerStatus(str(value))
    except ValueError:
        return ContainerStatus.PENDING


def _merge_row(row: Dict[str, Any], vessel_id: str, existing: Optional[Container], plan_date: str, container_no: str) -> dict:
    default_pkgs, default_weight = get_import_defaults()

    def prior(name: str) -> Any:
        return getattr(existing, name, None) if existing is not None else None

    unit_type = prior("unit_type") or detect_unit_type(container_no)
    default_size = DEFAULT_CONTAINER_SIZE if unit_type == UnitType.CONTAINER else DEFAULT_VEHICLE_SIZE

    det_expiry = normalize_date(find_value(row, DET_KEYS)) or prior("det_expiry") \
        or (date.today() + timedelta(days=DEFAULT_DET_DAYS)).isoformat()

    values = {
        "vessel_id": vessel_id,
        "unit_type": unit_type,
        "container_no": container_no,
        "plan_date": plan_date,
        "size": coalesce(prior("size"), _to_text(find_value(row, SIZE_KEYS)), default_size),
        "seal_no": coalesce(prior("seal_no"), _to_text(find_value(row, SEAL_KEYS)), ""),
        "tk_nha_vc": coalesce(prior("tk_nha_vc"), _to_text(find_value(row, TK_NHA_VC_KEYS)), ""),
        "ngay_tk_nha_vc": _coalesce_date(prior("ngay_tk_nha_vc"), find_value(row, NGAY_TK_NHA_VC_KEYS)),
        "tk_dnl_ola": coalesce(prior("tk_dnl_ola"), _to_text(find_value(row, TK_DNL_KEYS)), ""),
        "ngay_tk_dnl": _coalesce_date(prior("ngay_tk_dnl"), find_value(row, NGAY_TK_DNL_KEYS)),
        "bill_no": coalesce(prior("bill_no"), _to_text(find_value(row, BILL_KEYS)), ""),
        "pkgs": coalesce(prior("pkgs"), _to_number(find_value(row, PKGS_KEYS), int), default_pkgs),
        "weight": coalesce(prior("weight"), _to_number(find_value(row, WEIGHT_KEYS)), default_weight),
        "vendor": coalesce(prior("vendor"), _to_text(find_value(row, VENDOR_KEYS)), ""),
        "consignee": coalesce(prior("consignee"), _to_text(find_value(row, CONSIGNEE_KEYS)), "N/A"),
        "carrier": coalesce(prior("carrier"), _to_text(find_value(row, CARRIER_KEYS)), "N/A"),
        "det_expiry": det_expiry,
        "empty_return_place": coalesce(
            prior("empty_return_place"), _to_text(find_value(row, EMPTY_RETURN_KEYS)), DEFAULT_EMPTY_RETURN
        ),
        "updated_at": datetime.now(timezone.utc),
    }

    status = _status_of(prior("status") or ContainerStatus.PENDING)
    if values["tk_nha_vc"] and values["tk_dnl_ola"] and status == ContainerStatus.PENDING:
        status = ContainerStatus.READY
    values["status"] = status
    return values


def merge_import(
    rows: List[Dict[str, Any]],
    vessel_id: str,
    existing_containers: Iterable[Container],
) -> ImportResult:
    """
    Merge spreadsheet rows into the container set of one vessel.

    Identity is ``container_no + "_" + plan_date``. Rows enrich matching
    containers (a present new value wins, absent values never blank out what
    was captured before) and create new ones otherwise. A failing row is
    logged and reported; it does not abort the batch.
    """
    result = ImportResult()
    working: Dict[str, Container] = {}

    for container in existing_containers:
        if container is None or container.vessel_id != vessel_id:
            continue
        working[container.identity_key] = container

    for index, row in enumerate(rows or []):
        try:
            if not row:
                result.skipped += 1
                continue

            container_no = _to_text(find_value(row, CONTAINER_NO_KEYS)) or ""
            if not container_no or container_no == "undefined":
                result.skipped += 1
                continue

            plan_raw = find_value(row, PLAN_DATE_KEYS)
            plan_date = normalize_date(plan_raw if is_present(plan_raw) else date.today())

            key = f"{container_no}_{plan_date}"
            existing = working.get(key)
            values = _merge_row(row, vessel_id, existing, plan_date, container_no)

            if existing is not None:
                for name, value in values.items():
                    setattr(existing, name, value)
            else:
                working[key] = Container(id=new_container_id(), tally_approved=False,
                                         work_order_approved=False, worker_names=[], **values)
        except Exception as exc:
            log.warning("Container import row %s failed: %s", index, exc, exc_info=True)
            result.errors.append({"row": index, "error": str(exc)})

    result.containers = list(working.values())
    result.total_pkgs = sum(int(c.pkgs or 0) for c in result.containers)
    result.total_weight = round(sum(float(c.weight or 0) for c in result.containers), 3)
    return result


def read_workbook_rows(content: bytes) -> List[Dict[str, Any]]:
    """Read the first sheet of an .xlsx upload into header-keyed rows."""
    workbook = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        rows_iter = sheet.iter_rows(values_only=True)
        headers = next(rows_iter, None)
        if not headers:
            return []

        rows: List[Dict[str, Any]] = []
        for values in rows_iter:
            if values is None or all(v is None or v == "" for v in values):
                continue
            rows.append({
                str(header): value
                for header, value in zip(headers, values)
                if header is not None
            })
        return rows
    finally:
        workbook.close()


def build_import_template() -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Template_Import"
    sheet.append(TEMPLATE_HEADERS)
    sheet.append(TEMPLATE_SAMPLE)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class ContainerImportService:
    """Persists merged imports as per-record upserts and refreshes vessel totals."""

    @staticmethod
    def import_rows(vessel_id: str, rows: List[Dict[str, Any]], db: Session) -> ImportResult:
        vessel = db.query(Vessel).filter(Vessel.id == vessel_id).first()
        if not vessel:
            raise HTTPException(status_code=404, detail="Vessel not found")

        existing = db.query(Container).filter(Container.vessel_id == vessel_id).all()
        result = merge_import(rows, vessel_id, existing)

        try:
            db.add_all(result.containers)
            vessel.total_containers = len(result.containers)  # type: ignore[assignment]
            vessel.total_pkgs = result.total_pkgs  # type: ignore[assignment]
            vessel.total_weight = result.total_weight  # type: ignore[assignment]
            db.commit()
        except Exception as exc:
            log.error("Container import for vessel %s failed: %s", vessel_id, exc, exc_info=True)
            db.rollback()
            raise

        log.info(
            "Imported %s rows into vessel %s: %s containers, %s errors",
            len(rows), vessel_id, len(result.containers), len(result.errors),
        )
        return result

    @staticmethod
    def import_workbook(vessel_id: str, content: bytes, db: Session) -> ImportResult:
        try:
            rows = read_workbook_rows(content)
        except Exception as exc:
            log.warning("Unreadable workbook for vessel %s: %s", vessel_id, exc)
            raise HTTPException(status_code=400, detail="Could not read the Excel file")
        return ContainerImportService.import_rows(vessel_id, rows, db)
