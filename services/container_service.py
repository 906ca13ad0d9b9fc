# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.container import Container, ContainerStatus, new_container_id
from models.vessel import Vessel
from schemas.container import ContainerRecord, ContainerUpdate
from schemas.vessel import VesselRecord
from services.detention_service import is_exploitable

log = logging.getLogger(__name__)


def refresh_vessel_totals(vessel: Vessel, containers: List[Container]) -> None:
    vessel.total_containers = len(containers)  # type: ignore[assignment]
    vessel.total_pkgs = sum(int(c.pkgs or 0) for c in containers)  # type: ignore[assignment]
    vessel.total_weight = round(sum(float(c.weight or 0) for c in containers), 3)  # type: ignore[assignment]


def _check_identity_unique(records: List[ContainerRecord]) -> None:
    seen = set()
    for record in records:
        key = (record.vessel_id, record.container_no, record.plan_date)
        if key in seen:
            raise HTTPException(
                status_code=400,
                detail=f"Duplicate container {record.container_no} for plan date {record.plan_date or '-'}",
            )
        seen.add(key)


class ContainerService:
    """Service layer for container operations."""

    @staticmethod
    def list_containers(
        db: Session,
        vessel_id: Optional[str] = None,
        consignee: Optional[str] = None,
    ) -> List[Container]:
        query = db.query(Container)
        if vessel_id:
            query = query.filter(Container.vessel_id == vessel_id)
        if consignee:
            query = query.filter(Container.consignee == consignee)
        return query.order_by(Container.plan_date, Container.container_no).all()

    @staticmethod
    def get_container(container_id: str, db: Session) -> Container:
        container = db.query(Container).filter(Container.id == container_id).first()
        if not container:
            raise HTTPException(status_code=404, detail="Container not found")
        return container

    @staticmethod
    def replace_vessel_containers(vessel_id: str, records: List[ContainerRecord], db: Session) -> List[Container]:
        """
        Replace every container of one vessel. This is the only path that
        deletes containers; concurrent writers are last-writer-wins.
        """
        vessel = db.query(Vessel).filter(Vessel.id == vessel_id).first()
        if not vessel:
            raise HTTPException(status_code=404, detail="Vessel not found")
        if any(r.vessel_id != vessel_id for r in records):
            raise HTTPException(status_code=400, detail="All containers must belong to the target vessel")
        _check_identity_unique(records)

        try:
            db.query(Container).filter(Container.vessel_id == vessel_id).delete()
            containers = [
                Container(**dict(r.model_dump(exclude={"id"}), id=r.id or new_container_id()))
                for r in records
            ]
            db.add_all(containers)
            refresh_vessel_totals(vessel, containers)
            db.commit()
        except Exception:
            db.rollback()
            log.error("Failed to replace containers of vessel %s", vessel_id, exc_info=True)
            raise

        log.info("Replaced containers of vessel %s with %s records", vessel_id, len(containers))
        return containers

    @staticmethod
    def bulk_upsert(records: List[ContainerRecord], db: Session) -> List[Container]:
        """Insert or overwrite by id; records without an id are inserted."""
        _check_identity_unique(records)
        saved = []
        try:
            for record in records:
                values = record.model_dump(exclude={"id"})
                container = None
                if record.id:
                    container = db.query(Container).filter(Container.id == record.id).first()
                if container is None:
                    container = Container(id=record.id or new_container_id(), **values)
                    db.add(container)
                else:
                    for key, value in values.items():
                        setattr(container, key, value)
                container.updated_at = datetime.now(timezone.utc)  # type: ignore[assignment]
                saved.append(container)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(status_code=400, detail="Container already exists for this vessel and plan date")
        except Exception:
            db.rollback()
            log.error("Bulk container upsert failed", exc_info=True)
            raise
        return saved

    @staticmethod
    def update_container(container_id: str, update: ContainerUpdate, db: Session) -> Container:
        """
        Single-record update. COMPLETED is reserved for tally approval and
        READY needs both customs declarations.
        """
        container = ContainerService.get_container(container_id, db)
        changes = update.model_dump(exclude_unset=True)

        new_status = changes.get("status")
        if new_status == ContainerStatus.COMPLETED and container.status != ContainerStatus.COMPLETED:
            raise HTTPException(status_code=400, detail="Containers are completed by tally approval only")
        if new_status == ContainerStatus.READY and not is_exploitable(container):
            raise HTTPException(status_code=400, detail="Container is missing customs declarations")

        for key, value in changes.items():
            setattr(container, key, value)
        container.updated_at = datetime.now(timezone.utc)  # type: ignore[assignment]

        db.commit()
        db.refresh(container)
        return container


class VesselService:

    @staticmethod
    def list_vessels(db: Session) -> List[Vessel]:
        return db.query(Vessel).order_by(Vessel.vessel_name).all()

    @staticmethod
    def bulk_upsert(records: List[VesselRecord], db: Session) -> List[Vessel]:
        saved = []
        try:
            for record in records:
                values = record.model_dump(exclude={"id"})
                vessel = db.query(Vessel).filter(Vessel.id == record.id).first() if record.id else None
                if vessel is None:
                    vessel = Vessel(**values)
                    if record.id:
                        vessel.id = record.id  # type: ignore[assignment]
                    db.add(vessel)
                else:
                    for key, value in values.items():
                        setattr(vessel, key, value)
                saved.append(vessel)
            db.commit()
        except Exception:
            db.rollback()
            log.error("Vessel upsert failed", exc_info=True)
            raise

        for vessel in saved:
            db.refresh(vessel)
        return saved
