# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

import logging
from typing import List, Type, Union

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.resource import Team, Worker
from schemas.resource import ResourceRecord

log = logging.getLogger(__name__)

ResourceModel = Union[Type[Worker], Type[Team]]


def find_duplicate_name(records: List[ResourceRecord]):
    """First name that repeats, compared case-insensitively, else None."""
    seen = set()
    for record in records:
        key = record.name.lower()
        if key in seen:
            return record.name
        seen.add(key)
    return None


class ResourceService:

    @staticmethod
    def list_resources(model: ResourceModel, db: Session):
        return db.query(model).order_by(model.name).all()

    @staticmethod
    def replace_all(model: ResourceModel, records: List[ResourceRecord], db: Session):
        duplicate = find_duplicate_name(records)
        if duplicate:
            raise HTTPException(status_code=400, detail=f"Duplicate name: {duplicate}")

        try:
            db.query(model).delete()
            rows = []
            for record in records:
                values = record.model_dump(exclude={"id"})
                row = model(**values)
                if record.id:
                    row.id = record.id
                rows.append(row)
            db.add_all(rows)
            db.commit()
        except Exception:
            db.rollback()
            log.error("Failed to replace %s", model.__tablename__, exc_info=True)
            raise

        for row in rows:
            db.refresh(row)
        log.info("Replaced %s with %s records", model.__tablename__, len(rows))
        return rows
