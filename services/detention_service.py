"""
DET (detention) urgency classification and the customs readiness gate.

Both are pure reads over container records; the only write here is the
urge stamp, which goes through the single-record update path.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.container import Container, ContainerStatus
from services.config_service import DetentionConfig, get_detention_config

log = logging.getLogger(__name__)

URGENT = "urgent"
WARNING = "warning"
SAFE = "safe"

_URGENCY_SCORE = {URGENT: 3, WARNING: 2, SAFE: 1}
MS_PER_DAY = 86400000

OPERATION_FILTERS = {"ALL", "NOT_STARTED", "PENDING_DOCS", "URGENT_DET", "COMPLETED"}


def _parse_expiry(expiry: Optional[str]) -> Optional[datetime]:
    if not expiry:
        return None
    text = str(expiry).strip()
    try:
        if len(text) == 10:
            # Date-only strings are read as UTC midnight
            return datetime.strptime(text, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def days_until(expiry: Optional[str], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days left before expiry, rounded up. None when the date is unknown."""
    expires_at = _parse_expiry(expiry)
    if expires_at is None:
        return None
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    diff_ms = (expires_at - now).total_seconds() * 1000
    return math.ceil(diff_ms / MS_PER_DAY)


def classify_detention(
    expiry: Optional[str],
    config: Optional[DetentionConfig] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Return ``"urgent"``, ``"warning"`` or ``"safe"``.

    The urgent threshold is checked first, so an inverted config still
    resolves deterministically. An unknown expiry is ``"safe"``.
    """
    config = config or get_detention_config()
    diff_days = days_until(expiry, now)
    if diff_days is None:
        return SAFE
    if diff_days <= config.urgent_days:
        return URGENT
    if diff_days <= config.warning_days:
        return WARNING
    return SAFE


def is_exploitable(container) -> bool:
    """Both customs declarations (carrier and DNL/OLA) are filled in."""
    tk_nha_vc = (getattr(container, "tk_nha_vc", None) or "").strip()
    tk_dnl_ola = (getattr(container, "tk_dnl_ola", None) or "").strip()
    return bool(tk_nha_vc and tk_dnl_ola)


def _status_value(container) -> str:
    return container.status.value if hasattr(container.status, "value") else str(container.status)


def is_completed(container) -> bool:
    return _status_value(container) == ContainerStatus.COMPLETED.value


def dashboard_stats(
    containers: Iterable[Container],
    config: Optional[DetentionConfig] = None,
    now: Optional[datetime] = None,
) -> dict:
    containers = list(containers)
    config = config or get_detention_config()
    open_containers = [c for c in containers if not is_completed(c)]

    return {
        "total": len(containers),
        "ready": sum(1 for c in open_containers if is_exploitable(c)),
        "urgent_det": sum(1 for c in open_containers if classify_detention(c.det_expiry, config, now) == URGENT),
        "completed": len(containers) - len(open_containers),
        "in_progress": sum(1 for c in containers if _status_value(c) == ContainerStatus.IN_PROGRESS.value),
        "pending": sum(1 for c in containers if _status_value(c) == ContainerStatus.PENDING.value),
    }


def operations_board(
    containers: Iterable[Container],
    status_filter: str = "ALL",
    search: str = "",
    vessel_id: Optional[str] = None,
    config: Optional[DetentionConfig] = None,
    now: Optional[datetime] = None,
) -> List[dict]:
    """Filter containers for the operations board, most urgent first and COMPLETED last."""
    config = config or get_detention_config()
    needle = (search or "").lower()
    rows = []

    for container in containers:
        if vessel_id and container.vessel_id != vessel_id:
            continue
        if needle and needle not in (container.container_no or "").lower():
            continue

        completed = is_completed(container)
        ready = is_exploitable(container)
        det_status = classify_detention(container.det_expiry, config, now)

        if status_filter == "NOT_STARTED" and (completed or not ready):
            continue
        if status_filter == "PENDING_DOCS" and (completed or ready):
            continue
        if status_filter == "URGENT_DET" and (completed or det_status != URGENT):
            continue
        if status_filter == "COMPLETED" and not completed:
            continue

        rows.append({
            "container": container,
            "det_status": det_status,
            "is_exploitable": ready,
            "score": -10 if completed else _URGENCY_SCORE[det_status],
        })

    # sorted() is stable, so equal scores keep input order
    return sorted(rows, key=lambda r: r["score"], reverse=True)


def available_containers(
    containers: Iterable[Container],
    exclude_ids: Iterable[str] = (),
    search: str = "",
) -> List[Container]:
    """
    Pick list for tally entry: exploitable, not COMPLETED, not already on the
    report. Containers that were urged most recently come first.
    """
    excluded = set(exclude_ids or ())
    needle = (search or "").lower()
    picks = [
        c for c in containers
        if c.id not in excluded
        and needle in (c.container_no or "").lower()
        and not is_completed(c)
        and is_exploitable(c)
    ]

    def urged_at(container) -> float:
        stamp = container.last_urged_at
        if stamp is None:
            return 0.0
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=timezone.utc)
        return stamp.timestamp()

    return sorted(picks, key=urged_at, reverse=True)


class DetentionService:

    @staticmethod
    def urge_container(container_id: str, db: Session) -> Container:
        """Stamp ``last_urged_at`` so the container jumps to the top of inspectors' pick lists."""
        container = db.query(Container).filter(Container.id == container_id).first()
        if not container:
            raise HTTPException(status_code=404, detail="Container not found")
        if is_completed(container):
            raise HTTPException(status_code=400, detail="Container is already completed")

        container.last_urged_at = datetime.now(timezone.utc)  # type: ignore[assignment]
        db.commit()
        db.refresh(container)
        log.info("Inspector urged for container %s", container.container_no)
        return container
