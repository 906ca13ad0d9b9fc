from datetime import datetime, timedelta, timezone

from models.container import ContainerStatus
from services.config_service import DetentionConfig, set_detention_config
from services.detention_service import (
    SAFE,
    URGENT,
    WARNING,
    available_containers,
    classify_detention,
    dashboard_stats,
    is_exploitable,
    operations_board,
)
from tests.conftest import make_container, make_vessel

NOW = datetime(2026, 3, 1, 0, 0, tzinfo=timezone.utc)
CONFIG = DetentionConfig(urgent_days=2, warning_days=5)


class Stub:
    def __init__(self, **kwargs):
        defaults = dict(
            id="c", vessel_id="v1", container_no="GESU6721400", tk_nha_vc="TK", tk_dnl_ola="DNL",
            status=ContainerStatus.READY, det_expiry=None, last_urged_at=None,
        )
        defaults.update(kwargs)
        self.__dict__.update(defaults)


def expiry_in(days):
    return (NOW + timedelta(days=days)).date().isoformat()


def test_detention_boundaries():
    assert classify_detention(expiry_in(2), CONFIG, NOW) == URGENT
    assert classify_detention(expiry_in(3), CONFIG, NOW) == WARNING
    assert classify_detention(expiry_in(5), CONFIG, NOW) == WARNING
    assert classify_detention(expiry_in(6), CONFIG, NOW) == SAFE


def test_expired_is_urgent():
    assert classify_detention(expiry_in(-3), CONFIG, NOW) == URGENT


def test_partial_day_rounds_up():
    later = NOW + timedelta(hours=1)
    # 2 days minus one hour left still counts as 2 days
    assert classify_detention(expiry_in(2), CONFIG, later) == URGENT
    assert classify_detention(expiry_in(6), CONFIG, later) == SAFE


def test_unknown_expiry_is_safe():
    assert classify_detention("", CONFIG, NOW) == SAFE
    assert classify_detention("someday", CONFIG, NOW) == SAFE


def test_exploitable_needs_both_declarations():
    assert is_exploitable(Stub(tk_nha_vc="", tk_dnl_ola="X")) is False
    assert is_exploitable(Stub(tk_nha_vc="  ", tk_dnl_ola="X")) is False
    assert is_exploitable(Stub(tk_nha_vc="A", tk_dnl_ola="X")) is True


def test_dashboard_counts_exclude_completed_from_ready_and_urgent():
    containers = [
        Stub(id="1", det_expiry=expiry_in(1)),
        Stub(id="2", det_expiry=expiry_in(1), status=ContainerStatus.COMPLETED),
        Stub(id="3", tk_nha_vc="", det_expiry=expiry_in(10), status=ContainerStatus.PENDING),
        Stub(id="4", status=ContainerStatus.IN_PROGRESS),
    ]
    stats = dashboard_stats(containers, CONFIG, NOW)
    assert stats == {
        "total": 4, "ready": 2, "urgent_det": 1, "completed": 1, "in_progress": 1, "pending": 1,
    }


def test_operations_board_orders_by_urgency_and_completed_last():
    containers = [
        Stub(id="done", det_expiry=expiry_in(1), status=ContainerStatus.COMPLETED),
        Stub(id="safe", det_expiry=expiry_in(20)),
        Stub(id="urgent", det_expiry=expiry_in(1)),
        Stub(id="warn", det_expiry=expiry_in(4)),
    ]
    rows = operations_board(containers, config=CONFIG, now=NOW)
    assert [r["container"].id for r in rows] == ["urgent", "warn", "safe", "done"]


def test_operations_board_filters():
    containers = [
        Stub(id="ready"),
        Stub(id="docs", tk_dnl_ola=""),
        Stub(id="done", status=ContainerStatus.COMPLETED),
        Stub(id="urgent", det_expiry=expiry_in(0)),
    ]

    def ids(status):
        return sorted(r["container"].id for r in operations_board(containers, status, config=CONFIG, now=NOW))

    assert ids("NOT_STARTED") == ["ready", "urgent"]
    assert ids("PENDING_DOCS") == ["docs"]
    assert ids("URGENT_DET") == ["urgent"]
    assert ids("COMPLETED") == ["done"]


def test_available_containers_skip_blocked_and_prefer_recently_urged():
    containers = [
        Stub(id="a", container_no="AAAU1111111"),
        Stub(id="b", container_no="BBBU2222222", last_urged_at=NOW),
        Stub(id="c", container_no="CCCU3333333", tk_nha_vc=""),
        Stub(id="d", container_no="DDDU4444444", status=ContainerStatus.COMPLETED),
        Stub(id="e", container_no="EEEU5555555"),
    ]
    picks = available_containers(containers, exclude_ids=["e"])
    assert [c.id for c in picks] == ["b", "a"]


def test_runtime_config_changes_classification(client, db_session):
    make_vessel(db_session)
    expiry = (datetime.now(timezone.utc) + timedelta(days=4)).date().isoformat()
    make_container(db_session, "c1", "GESU6721400", det_expiry=expiry)

    first = client.get("/api/containers/operations").json()
    assert first[0]["det_status"] == WARNING

    response = client.put("/api/config/detention", json={"urgent_days": 5, "warning_days": 10})
    assert response.status_code == 200

    second = client.get("/api/containers/operations").json()
    assert second[0]["det_status"] == URGENT


def test_inverted_config_is_rejected(client):
    response = client.put("/api/config/detention", json={"urgent_days": 6, "warning_days": 3})
    assert response.status_code == 422


def test_unknown_operations_filter_is_400(client):
    assert client.get("/api/containers/operations", params={"status": "WHATEVER"}).status_code == 400


def test_dashboard_endpoint(client, db_session):
    make_vessel(db_session)
    make_container(db_session, "c1", "GESU6721400")
    make_container(db_session, "c2", "TCLU1234567", tk_nha_vc="", status=ContainerStatus.PENDING)

    stats = client.get("/api/dashboard", params={"vessel_id": "v_test"}).json()
    assert stats["total"] == 2
    assert stats["ready"] == 1
    assert stats["pending"] == 1


def test_urge_stamps_container(client, db_session):
    make_vessel(db_session)
    make_container(db_session, "c1", "GESU6721400")

    response = client.post("/api/containers/c1/urge")
    assert response.status_code == 200
    assert response.json()["last_urged_at"] is not None


def test_urge_completed_container_is_rejected(client, db_session):
    make_vessel(db_session)
    make_container(db_session, "c1", "GESU6721400", status=ContainerStatus.COMPLETED)
    assert client.post("/api/containers/c1/urge").status_code == 400


def test_classification_uses_runtime_config_when_none_given():
    set_detention_config(1, 3)
    assert classify_detention(expiry_in(2), now=NOW) == WARNING
    assert classify_detention(expiry_in(2), CONFIG, NOW) == URGENT
