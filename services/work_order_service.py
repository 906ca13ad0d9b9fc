# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import logging
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.work_order import WorkOrder, WorkOrderStatus, WorkOrderType
from schemas.validators import split_names
from schemas.work_order import WorkOrderRecord
from services.date_service import display_date
from services.statistics_service import resolve_people

log = logging.getLogger(__name__)

LABOR_TEAM_DEFAULT = "Tổ Công Nhân"
MECHANICAL_TEAM_DEFAULT = "Tổ Cơ Giới"
LABOR_METHOD = "Đóng mở Cont, Bấm Seal, quấn phủ bạt"
MECHANICAL_METHOD = "Nâng hàng từ cont <-> kho"
DERIVED_CARGO_TYPE = "Giấy vuông"


def labor_order_id(tally_id: str) -> str:
    return f"WO-CN-{tally_id}"


def mechanical_order_id(tally_id: str) -> str:
    return f"WO-CG-{tally_id}"


def tally_weight(items: Iterable[dict], containers_by_id: Dict[str, object]) -> float:
    """Counted units times each container's declared unit weight, to 3 dp."""
    total = 0.0
    for item in items:
        container = containers_by_id.get(item.get("cont_id") or "")
        if container is None or not container.pkgs:
            continue
        total += (item.get("actual_units") or 0) * (float(container.weight or 0) / container.pkgs)
    return round(total, 3)


def _inherit_flag(report_value: Optional[bool], previous: Optional[WorkOrder], attr: str) -> bool:
    if report_value is not None:
        return bool(report_value)
    if previous is not None:
        return bool(getattr(previous, attr))
    return False


def build_tally_work_orders(
    report,
    containers_by_id: Dict[str, object],
    previous: Optional[Dict[str, WorkOrder]] = None,
    created_by: Optional[str] = None,
) -> List[dict]:
    """
    The LABOR and MECHANICAL orders a tally report stands for.

    Returned as plain column dicts keyed by the deterministic ids
    ``WO-CN-<tally id>`` / ``WO-CG-<tally id>``, so re-saving a report
    overwrites its orders instead of duplicating them.
    """
    previous = previous or {}
    items = [i for i in (report.items or []) if isinstance(i, dict)]
    total_units = sum(i.get("actual_units") or 0 for i in items)
    summary = {
        "cargo_type": DERIVED_CARGO_TYPE,
        "specs": f"{len(items)} Cont",
        "volume": str(total_units),
        "weight": str(tally_weight(items, containers_by_id)),
        "extra_labor": 0,
        "notes": "",
    }
    common = {
        "vessel_id": report.vessel_id,
        "container_ids": [i.get("cont_id") for i in items if i.get("cont_id")],
        "container_nos": [i.get("cont_no") for i in items],
        "shift": report.shift,
        "date": display_date(report.work_date),
        "status": WorkOrderStatus.APPROVED,
        "created_by": created_by,
        "tally_id": report.id,
    }

    labor_id = labor_order_id(report.id)
    mech_id = mechanical_order_id(report.id)
    workers = split_names(report.worker_names)
    operators = split_names(report.mechanical_names)

    labor = dict(
        common,
        id=labor_id,
        type=WorkOrderType.LABOR,
        team_name=", ".join(workers) or LABOR_TEAM_DEFAULT,
        worker_names=workers,
        people_count=report.worker_count or len(workers),
        vehicle_type=None,
        vehicle_nos=[],
        items=[dict(summary, method=LABOR_METHOD)],
        is_holiday=_inherit_flag(report.is_holiday, previous.get(labor_id), "is_holiday"),
        is_weekend=_inherit_flag(report.is_weekend, previous.get(labor_id), "is_weekend"),
    )
    mechanical = dict(
        common,
        id=mech_id,
        type=WorkOrderType.MECHANICAL,
        team_name=", ".join(operators) or MECHANICAL_TEAM_DEFAULT,
        worker_names=[],
        people_count=report.mechanical_count or len(operators),
        vehicle_type=report.vehicle_type,
        vehicle_nos=[report.vehicle_no] if report.vehicle_no else [],
        items=[dict(summary, method=MECHANICAL_METHOD)],
        is_holiday=_inherit_flag(report.is_holiday, previous.get(mech_id), "is_holiday"),
        is_weekend=_inherit_flag(report.is_weekend, previous.get(mech_id), "is_weekend"),
    )
    return [labor, mechanical]


def validate_work_order(record: WorkOrderRecord) -> None:
    """A LABOR order needs people; a MECHANICAL order needs people, vehicles or a team."""
    people = resolve_people(record)
    if record.type == WorkOrderType.LABOR and not people:
        raise ValueError(f"Work order {record.id} has no workers")
    if record.type == WorkOrderType.MECHANICAL and not (people or record.vehicle_nos or record.team_name):
        raise ValueError(f"Work order {record.id} has no operators, vehicles or team")


def _columns(record: WorkOrderRecord) -> dict:
    values = record.model_dump()
    values["items"] = [dict(item) for item in values["items"]]
    return values


class WorkOrderService:

    @staticmethod
    def list_work_orders(db: Session, vessel_id: Optional[str] = None) -> List[WorkOrder]:
        query = db.query(WorkOrder)
        if vessel_id:
            query = query.filter(WorkOrder.vessel_id == vessel_id)
        return query.order_by(WorkOrder.date, WorkOrder.id).all()

    @staticmethod
    def upsert_one(record: WorkOrderRecord, db: Session) -> WorkOrder:
        try:
            validate_work_order(record)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        values = _columns(record)
        work_order = db.query(WorkOrder).filter(WorkOrder.id == record.id).first()
        if work_order is None:
            work_order = WorkOrder(**values)
            db.add(work_order)
        else:
            for key, value in values.items():
                setattr(work_order, key, value)

        try:
            db.commit()
        except Exception:
            db.rollback()
            log.error("Failed to save work order %s", record.id, exc_info=True)
            raise
        db.refresh(work_order)
        return work_order

    @staticmethod
    def replace_all(records: List[WorkOrderRecord], db: Session) -> List[WorkOrder]:
        """
        Replace the whole collection. Every record is validated first, so a
        single bad order leaves the stored collection untouched.
        """
        ids = [r.id for r in records]
        if len(ids) != len(set(ids)):
            raise HTTPException(status_code=400, detail="Duplicate work order ids")
        for record in records:
            try:
                validate_work_order(record)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        try:
            db.query(WorkOrder).delete()
            work_orders = [WorkOrder(**_columns(r)) for r in records]
            db.add_all(work_orders)
            db.commit()
        except Exception:
            db.rollback()
            log.error("Failed to replace work orders", exc_info=True)
            raise

        log.info("Replaced work orders collection with %s records", len(work_orders))
        return work_orders

    @staticmethod
    def save_derived(orders: List[dict], db: Session) -> List[WorkOrder]:
        """Stage derived orders on the session; the caller commits."""
        saved = []
        for values in orders:
            work_order = db.query(WorkOrder).filter(WorkOrder.id == values["id"]).first()
            if work_order is None:
                work_order = WorkOrder(**values)
                db.add(work_order)
            else:
                for key, value in values.items():
                    setattr(work_order, key, value)
            saved.append(work_order)
        return saved
