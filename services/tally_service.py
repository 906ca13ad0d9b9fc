"""
Tally report numbering, grouping, print pagination and approval.

Report numbers are never stored. Every read sorts the whole report
collection by ``created_at`` ascending and numbers it from 1, so a report
keeps its number no matter how the list is displayed or filtered.
"""
# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.container import Container, ContainerStatus
from models.tally_report import TallyReport, TallyStatus
from models.vessel import Vessel
from models.work_order import WorkOrder
from schemas.tally_report import AddTallyItem, TallyReportRecord, TallyReportSave
from schemas.validators import is_present, split_names
from services.config_service import get_tally_page_size
from services.date_service import iso_from_parts, parse_day_month_year
from services.detention_service import is_completed, is_exploitable
from services.work_order_service import (
    WorkOrderService,
    build_tally_work_orders,
    labor_order_id,
    mechanical_order_id,
)

log = logging.getLogger(__name__)

UNKNOWN_VESSEL = "Unknown"
UNKNOWN_CONSIGNEE = "Unknown"
DEFAULT_COMMODITY = "Giấy"


def now_ms() -> int:
    return int(time.time() * 1000)


def format_report_no(number: int, vessel_name: str) -> str:
    """``7`` on ``"MV OCEAN STAR"`` -> ``"007 - STAR"``."""
    tokens = (vessel_name or "").split()
    code = tokens[-1] if tokens else ""
    return f"{number:03d} - {code}"


@dataclass
class TallyReportGroup:
    id: str
    report_no: str
    number: int
    vessel_id: str
    vessel_name: str
    voyage_no: str
    mode: str
    shift: str
    work_date: str
    day: str
    month: str
    year: str
    consignee: str
    commodity: str
    equipment: str
    worker_names: str
    created_by: Optional[str]
    created_at: int
    is_approved: bool
    containers: List[dict] = field(default_factory=list)

    @property
    def total_units(self) -> int:
        return sum(c.get("actual_units") or 0 for c in self.containers)

    @property
    def total_weight(self) -> float:
        return round(sum(float(c.get("actual_weight") or 0) for c in self.containers), 3)


@dataclass
class TallyPage:
    report_no: str
    page: int
    total_pages: int
    start_index: int
    rows: List[dict]

    @property
    def subtotal_units(self) -> int:
        return sum(r.get("actual_units") or 0 for r in self.rows)

    @property
    def subtotal_weight(self) -> float:
        return round(sum(float(r.get("actual_weight") or 0) for r in self.rows), 3)


def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else str(value or "")


def _index_containers(containers: Iterable) -> Tuple[Dict[tuple, object], Dict[str, object]]:
    by_vessel: Dict[tuple, object] = {}
    by_no: Dict[str, object] = {}
    for c in containers:
        by_vessel.setdefault((c.vessel_id, c.container_no), c)
        by_no.setdefault(c.container_no, c)
    return by_vessel, by_no


def _resolve_consignee(report, matched: List[object], vessel) -> str:
    if is_present(report.owner):
        return report.owner.strip()
    for container in matched:
        consignee = (container.consignee or "").strip()
        if consignee and consignee != "N/A":
            return consignee
    if vessel is not None and is_present(vessel.consignee):
        return vessel.consignee
    return ""


def _enrich_item(item: dict, container) -> dict:
    row = {
        "cont_id": item.get("cont_id"),
        "cont_no": item.get("cont_no") or "",
        "seal_no": item.get("seal_no"),
        "size": "",
        "unit_type": "",
        "tk_nha_vc": "",
        "tk_dnl_ola": "",
        "actual_units": item.get("actual_units") or 0,
        "actual_weight": item.get("actual_weight") or 0.0,
        "is_scratched_floor": bool(item.get("is_scratched_floor")),
        "torn_units": item.get("torn_units") or 0,
        "notes": item.get("notes"),
    }
    if container is not None:
        row.update(
            cont_id=row["cont_id"] or container.id,
            seal_no=row["seal_no"] or container.seal_no,
            size=container.size or "",
            unit_type=_enum_value(container.unit_type),
            tk_nha_vc=container.tk_nha_vc or "",
            tk_dnl_ola=container.tk_dnl_ola or "",
        )
    return row


def build_report_groups(
    reports: Iterable[TallyReport],
    vessels: Iterable[Vessel],
    containers: Iterable[Container],
) -> List[TallyReportGroup]:
    """One printable group per report, newest first, numbered by creation order."""
    vessels_by_id = {v.id: v for v in vessels}
    by_vessel, by_no = _index_containers(containers)

    ordered = sorted(reports, key=lambda r: (r.created_at or 0, r.id or ""))
    groups = []

    for number, report in enumerate(ordered, start=1):
        vessel = vessels_by_id.get(report.vessel_id)
        vessel_name = vessel.vessel_name if vessel else UNKNOWN_VESSEL

        rows, matched = [], []
        for item in report.items or []:
            if not isinstance(item, dict):
                continue
            cont_no = item.get("cont_no")
            container = by_vessel.get((report.vessel_id, cont_no)) or by_no.get(cont_no)
            if container is not None:
                matched.append(container)
            rows.append(_enrich_item(item, container))

        parts = parse_day_month_year(report.work_date or "")
        if parts:
            year, month, day = f"{parts[0]:04d}", f"{parts[1]:02d}", f"{parts[2]:02d}"
        else:
            year = month = day = ""

        groups.append(TallyReportGroup(
            id=report.id,
            report_no=format_report_no(number, vessel_name),
            number=number,
            vessel_id=report.vessel_id,
            vessel_name=vessel_name,
            voyage_no=vessel.voyage_no if vessel else "N/A",
            mode=_enum_value(report.mode),
            shift=report.shift or "",
            work_date=report.work_date or "",
            day=day,
            month=month,
            year=year,
            consignee=_resolve_consignee(report, matched, vessel) or UNKNOWN_CONSIGNEE,
            commodity=(vessel.commodity if vessel and vessel.commodity else DEFAULT_COMMODITY),
            equipment=report.equipment or "",
            worker_names=report.worker_names or "",
            created_by=report.created_by,
            created_at=report.created_at or 0,
            is_approved=report.is_approved,
            containers=rows,
        ))

    groups.reverse()
    return groups


def filter_report_groups(
    groups: Sequence[TallyReportGroup],
    mode: Optional[str] = None,
    vessel_id: Optional[str] = None,
    date: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    report_no: Optional[str] = None,
    consignee: Optional[str] = None,
) -> List[TallyReportGroup]:
    """Narrow already-numbered groups; filtering never renumbers."""
    result = []
    for group in groups:
        iso = iso_from_parts((int(group.year), int(group.month), int(group.day))) if group.year else ""
        if mode and group.mode != mode:
            continue
        if vessel_id and group.vessel_id != vessel_id:
            continue
        if date and iso != date:
            continue
        if start_date and (not iso or iso < start_date):
            continue
        if end_date and (not iso or iso > end_date):
            continue
        if report_no and report_no.lower() not in group.report_no.lower():
            continue
        if consignee and consignee.lower() not in group.consignee.lower():
            continue
        result.append(group)
    return result


def paginate_group(group: TallyReportGroup, page_size: Optional[int] = None) -> List[TallyPage]:
    """
    Split a group's container rows into print pages. A multi-page group gets
    ``"(page/total)"`` appended to its report number on every page; an empty
    group still prints one blank page.
    """
    page_size = page_size or get_tally_page_size()
    rows = group.containers
    chunks = [rows[i:i + page_size] for i in range(0, len(rows), page_size)] or [[]]
    total = len(chunks)

    pages = []
    for idx, chunk in enumerate(chunks):
        label = group.report_no if total == 1 else f"{group.report_no} ({idx + 1}/{total})"
        pages.append(TallyPage(
            report_no=label,
            page=idx + 1,
            total_pages=total,
            start_index=idx * page_size,
            rows=chunk,
        ))
    return pages


@dataclass(frozen=True)
class TallyApproved:
    """Domain event: these reports were signed off by a supervisor."""
    report_ids: Tuple[str, ...]


def apply_tally_approved(
    event: TallyApproved,
    reports: Iterable[TallyReport],
    containers: Iterable[Container],
) -> Tuple[List[TallyReport], List[Container]]:
    """
    Approve the reports named by the event and complete every container they
    counted. Containers are matched by item ``cont_id``, falling back to the
    container number within the report's vessel.
    """
    wanted = set(event.report_ids)
    approved = [r for r in reports if r.id in wanted]

    by_id: Dict[str, Container] = {}
    by_key: Dict[tuple, Container] = {}
    for c in containers:
        by_id[c.id] = c
        by_key.setdefault((c.vessel_id, c.container_no), c)

    touched: Dict[str, Container] = {}
    for report in approved:
        report.status = TallyStatus.DA_DUYET  # type: ignore[assignment]
        for item in report.items or []:
            if not isinstance(item, dict):
                continue
            container = by_id.get(item.get("cont_id") or "") or by_key.get((report.vessel_id, item.get("cont_no")))
            if container is None:
                continue
            container.tally_approved = True  # type: ignore[assignment]
            container.status = ContainerStatus.COMPLETED  # type: ignore[assignment]
            touched[container.id] = container

    return approved, list(touched.values())


def check_tallyable(container) -> None:
    """Raise ValueError unless ``container`` may be put on a tally report."""
    if is_completed(container):
        raise ValueError(f"Container {container.container_no} is already completed")
    if not is_exploitable(container):
        raise ValueError(
            f"Container {container.container_no} is missing customs declarations and cannot be tallied"
        )


def add_item_to_report(
    items: Sequence[dict],
    container,
    actual_units: Optional[int] = None,
    notes: Optional[str] = None,
) -> List[dict]:
    """
    Return a new item list with ``container`` appended.

    Raises ValueError when the container is completed, not exploitable or
    already on the report; the given list is never modified.
    """
    check_tallyable(container)
    if any(i.get("cont_id") == container.id for i in items):
        raise ValueError(f"Container {container.container_no} is already on this report")

    units = container.pkgs if actual_units is None else actual_units
    unit_weight = (float(container.weight or 0) / container.pkgs) if container.pkgs else 0.0
    new_item = {
        "cont_id": container.id,
        "cont_no": container.container_no,
        "seal_no": container.seal_no,
        "actual_units": units or 0,
        "actual_weight": round((units or 0) * unit_weight, 3),
        "is_scratched_floor": False,
        "torn_units": 0,
        "notes": notes,
    }
    return list(items) + [new_item]


def _load_report(report_id: str, db: Session) -> TallyReport:
    report = db.query(TallyReport).filter(TallyReport.id == report_id).first()
    if not report:
        raise HTTPException(status_code=404, detail="Tally report not found")
    return report


def _check_editable(report: Optional[TallyReport]) -> None:
    if report is not None and report.is_approved:
        raise HTTPException(status_code=400, detail="Approved tally reports cannot be modified")


def _lookup_item_container(vessel_id: str, item: dict, db: Session) -> Optional[Container]:
    if item.get("cont_id"):
        return db.query(Container).filter(Container.id == item["cont_id"]).first()
    candidates = (
        db.query(Container)
        .filter(Container.vessel_id == vessel_id, Container.container_no == item.get("cont_no"))
        .order_by(Container.plan_date)
        .all()
    )
    # A container number can recur across plan dates; the open one is the one being tallied
    open_ones = [c for c in candidates if not is_completed(c)]
    return (open_ones or candidates or [None])[0]


def _resolve_new_items(
    vessel_id: str,
    items: List[dict],
    existing: Optional[TallyReport],
    db: Session,
) -> Dict[str, Container]:
    """
    Gate every item this save adds to the report. Items already on the stored
    report are left alone. Resolved ids are written back onto the items.
    """
    previous = (existing.items or []) if existing else []
    known_ids = {i.get("cont_id") for i in previous if i.get("cont_id")}
    known_nos = {i.get("cont_no") for i in previous if i.get("cont_no")}

    resolved = {}
    for item in items:
        if item.get("cont_id") in known_ids or (not item.get("cont_id") and item.get("cont_no") in known_nos):
            continue
        container = _lookup_item_container(vessel_id, item, db)
        if container is None:
            raise HTTPException(
                status_code=400,
                detail=f"Container {item.get('cont_no')} does not belong to vessel {vessel_id}",
            )
        try:
            check_tallyable(container)
        except ValueError as e:
            log.info("Rejected container %s on tally save: %s", container.container_no, e)
            raise HTTPException(status_code=400, detail=str(e))
        item["cont_id"] = container.id
        resolved[container.id] = container
    return resolved


class TallyService:

    @staticmethod
    def list_reports(db: Session) -> List[TallyReport]:
        return db.query(TallyReport).order_by(TallyReport.created_at).all()

    @staticmethod
    def list_groups(db: Session, **filters) -> List[TallyReportGroup]:
        groups = build_report_groups(
            db.query(TallyReport).order_by(TallyReport.created_at, TallyReport.id).all(),
            db.query(Vessel).all(),
            db.query(Container).all(),
        )
        return filter_report_groups(groups, **filters)

    @staticmethod
    def get_group(report_id: str, db: Session) -> TallyReportGroup:
        for group in TallyService.list_groups(db):
            if group.id == report_id:
                return group
        raise HTTPException(status_code=404, detail="Tally report not found")

    @staticmethod
    def add_container_item(report_id: str, payload: AddTallyItem, db: Session) -> TallyReport:
        """Readiness gate for tally entry. A rejected container leaves the report untouched."""
        report = _load_report(report_id, db)
        _check_editable(report)

        container = db.query(Container).filter(Container.id == payload.container_id).first()
        if not container:
            raise HTTPException(status_code=404, detail="Container not found")

        try:
            report.items = add_item_to_report(  # type: ignore[assignment]
                report.items or [], container, payload.actual_units, payload.notes
            )
        except ValueError as e:
            log.info("Rejected container %s for tally %s: %s", container.container_no, report_id, e)
            raise HTTPException(status_code=400, detail=str(e))

        db.commit()
        db.refresh(report)
        return report

    @staticmethod
    def save_report(payload: TallyReportSave, db: Session, user_name: Optional[str] = None) -> TallyReport:
        """
        Inspector save (draft or final). Writes the report and its two derived
        work orders in one transaction.
        """
        existing = db.query(TallyReport).filter(TallyReport.id == payload.id).first() if payload.id else None
        _check_editable(existing)

        items = [item.model_dump() for item in payload.items]
        if not payload.is_draft:
            if not split_names(payload.worker_names):
                raise HTTPException(status_code=400, detail="Worker names are required")
            if not items:
                raise HTTPException(status_code=400, detail="At least one container is required")

        containers_by_id = _resolve_new_items(payload.vessel_id, items, existing, db)
        containers_by_id.update({
            c.id: c for c in db.query(Container).filter(
                Container.id.in_([i["cont_id"] for i in items if i.get("cont_id")])
            ).all()
        })

        stamp = now_ms()
        values = payload.model_dump(exclude={"id", "created_at", "created_by", "is_draft", "items"})
        report = existing or TallyReport(
            id=payload.id or f"PKH-{stamp}",
            created_at=payload.created_at or stamp,
        )
        for key, value in values.items():
            setattr(report, key, value)
        report.items = items  # type: ignore[assignment]
        report.status = TallyStatus.NHAP if payload.is_draft else TallyStatus.CHUA_DUYET  # type: ignore[assignment]
        report.created_by = payload.created_by or (existing.created_by if existing else None) or user_name  # type: ignore[assignment]
        if existing is None:
            db.add(report)

        previous = {
            wo.id: wo for wo in db.query(WorkOrder).filter(
                WorkOrder.id.in_([labor_order_id(report.id), mechanical_order_id(report.id)])
            ).all()
        }
        orders = build_tally_work_orders(report, containers_by_id, previous, created_by=report.created_by)

        try:
            WorkOrderService.save_derived(orders, db)
            db.commit()
        except Exception:
            db.rollback()
            log.error("Failed to save tally report %s", report.id, exc_info=True)
            raise

        db.refresh(report)
        log.info("Saved tally report %s (%s) with %s items", report.id, _enum_value(report.status), len(items))
        return report

    @staticmethod
    def approve(report_ids: List[str], db: Session) -> Tuple[List[TallyReport], List[Container]]:
        reports = db.query(TallyReport).filter(TallyReport.id.in_(report_ids)).all()
        missing = set(report_ids) - {r.id for r in reports}
        if missing:
            raise HTTPException(status_code=404, detail=f"Tally reports not found: {', '.join(sorted(missing))}")

        vessel_ids = {r.vessel_id for r in reports}
        containers = db.query(Container).filter(Container.vessel_id.in_(vessel_ids)).all()
        approved, touched = apply_tally_approved(TallyApproved(tuple(report_ids)), reports, containers)

        try:
            db.commit()
        except Exception:
            db.rollback()
            log.error("Failed to approve tally reports %s", report_ids, exc_info=True)
            raise

        log.info("Approved %s tally reports, completed %s containers", len(approved), len(touched))
        return approved, touched

    @staticmethod
    def replace_all(records: List[TallyReportRecord], db: Session) -> List[TallyReport]:
        ids = [r.id for r in records]
        if len(ids) != len(set(ids)):
            raise HTTPException(status_code=400, detail="Duplicate tally report ids")

        try:
            db.query(TallyReport).delete()
            reports = []
            for record in records:
                values = record.model_dump()
                values["items"] = [dict(i) for i in values["items"]]
                reports.append(TallyReport(**values))
            db.add_all(reports)
            db.commit()
        except Exception:
            db.rollback()
            log.error("Failed to replace tally reports", exc_info=True)
            raise

        log.info("Replaced tally reports collection with %s records", len(reports))
        return reports
