import io
from datetime import date, timedelta, timezone

from openpyxl import Workbook

from models.container import Container, ContainerStatus, UnitType
from services.container_import_service import (
    coalesce,
    detect_unit_type,
    merge_import,
    read_workbook_rows,
)
from tests.conftest import make_container, make_vessel


def row(container_no="GESU6721400", plan="31/12/2025", **extra):
    data = {"Số hiệu Cont/Xe": container_no, "Ngày Kế hoạch": plan}
    data.update(extra)
    return data


def test_same_identity_twice_keeps_one_container_with_latest_seal():
    first = merge_import([row(**{"Số Seal": "SEAL-A"})], "v1", [])
    second = merge_import([row(**{"Số Seal": "SEAL-B"})], "v1", first.containers)

    assert len(second.containers) == 1
    assert second.containers[0].seal_no == "SEAL-B"
    assert second.containers[0] is first.containers[0]


def test_blank_seal_does_not_erase_captured_value():
    first = merge_import([row(**{"Số Seal": "SEAL-A"})], "v1", [])
    second = merge_import([row(**{"Số Seal": ""})], "v1", first.containers)
    assert second.containers[0].seal_no == "SEAL-A"


def test_new_plan_date_creates_distinct_container():
    first = merge_import([row()], "v1", [])
    second = merge_import([row(plan="01/01/2026")], "v1", first.containers)

    assert len(second.containers) == 2
    assert {c.plan_date for c in second.containers} == {"2025-12-31", "2026-01-01"}
    assert len({c.id for c in second.containers}) == 2


def test_other_vessels_do_not_take_part_in_the_merge():
    other = Container(id="x1", vessel_id="v2", container_no="GESU6721400", plan_date="2025-12-31",
                      status=ContainerStatus.READY)
    result = merge_import([row()], "v1", [other])
    assert len(result.containers) == 1
    assert result.containers[0] is not other


def test_pending_becomes_ready_once_both_declarations_exist():
    docs = {"Số TK Nhà VC": "500592570963", "Số TK DNL": "500592633150"}
    first = merge_import([row()], "v1", [])
    assert first.containers[0].status == ContainerStatus.PENDING

    second = merge_import([row(**docs)], "v1", first.containers)
    assert second.containers[0].status == ContainerStatus.READY

    third = merge_import([row(**docs)], "v1", second.containers)
    assert third.containers[0].status == ContainerStatus.READY


def test_completed_container_survives_reimport():
    done = Container(id="c1", vessel_id="v1", unit_type=UnitType.CONTAINER, container_no="GESU6721400",
                     plan_date="2025-12-31", status=ContainerStatus.COMPLETED, tally_approved=True)
    result = merge_import([row(**{"Số TK Nhà VC": "1", "Số TK DNL": "2"})], "v1", [done])
    assert result.containers[0].status == ContainerStatus.COMPLETED
    assert result.containers[0].tally_approved is True


def test_defaults_for_new_rows():
    result = merge_import([row()], "v1", [])
    container = result.containers[0]
    assert container.pkgs == 16
    assert container.weight == 28.8
    assert container.size == "40'HC"
    assert container.consignee == "N/A"
    assert container.carrier == "N/A"
    assert container.empty_return_place == "TIEN SA"
    assert container.det_expiry == (date.today() + timedelta(days=14)).isoformat()


def test_zero_packages_is_kept():
    result = merge_import([row(**{"Số kiện": 0})], "v1", [])
    assert result.containers[0].pkgs == 0


def test_negative_quantities_fall_back_to_defaults():
    result = merge_import([row(**{"Số kiện": -5, "Số tấn": -2.5})], "v1", [])
    container = result.containers[0]
    assert (container.pkgs, container.weight) == (16, 28.8)
    assert (result.total_pkgs, result.total_weight) == (16, 28.8)


def test_negative_quantities_keep_stored_values():
    first = merge_import([row(**{"Số kiện": 10, "Số tấn": 12})], "v1", [])
    second = merge_import([row(**{"Số kiện": "-1", "Số tấn": "-3,5"})], "v1", first.containers)
    assert (second.containers[0].pkgs, second.containers[0].weight) == (10, 12)


def test_failing_row_is_reported_and_batch_continues():
    result = merge_import([row(), "not a row", row(container_no="TCLU1234567")], "v1", [])

    assert [e["row"] for e in result.errors] == [1]
    assert len(result.containers) == 2
    summary = result.summary
    assert summary["imported"] == 2
    assert summary["total_pkgs"] == 32
    assert len(summary["errors"]) == 1


def test_vehicle_plates_get_trailer_size():
    result = merge_import([row(container_no="43C-123.45")], "v1", [])
    assert result.containers[0].unit_type == UnitType.VEHICLE
    assert result.containers[0].size == "TRAILER"


def test_rows_without_identifier_are_skipped():
    result = merge_import([{}, row(container_no=""), row()], "v1", [])
    assert result.skipped == 2
    assert len(result.containers) == 1


def test_header_synonyms_ignore_case_and_spaces():
    result = merge_import([{"container no": "TCLU1234567", "plan date": 45200, "SEALNO": "S9"}], "v1", [])
    container = result.containers[0]
    assert container.plan_date == "2023-10-01"
    assert container.seal_no == "S9"


def test_totals_cover_the_whole_vessel():
    result = merge_import([row(), row(container_no="TCLU1234567", **{"Số tấn": 20})], "v1", [])
    assert result.total_pkgs == 32
    assert result.total_weight == 48.8


def test_coalesce_presence_rules():
    assert coalesce("old", "new", "d") == "new"
    assert coalesce("old", "", "d") == "old"
    assert coalesce(None, None, "d") == "d"
    assert coalesce(5, 0, 16) == 0


def test_detect_unit_type():
    assert detect_unit_type("GESU 672140-0") == UnitType.CONTAINER
    assert detect_unit_type("43C/12345") == UnitType.VEHICLE


def _workbook_bytes(rows):
    workbook = Workbook()
    sheet = workbook.active
    for line in rows:
        sheet.append(line)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_read_workbook_rows_keys_by_header():
    content = _workbook_bytes([
        ["Số hiệu Cont/Xe", "Ngày Kế hoạch", "Số Seal"],
        ["GESU6721400", "31/12/2025", "S1"],
    ])
    rows = read_workbook_rows(content)
    assert rows[0]["Số hiệu Cont/Xe"] == "GESU6721400"
    assert rows[0]["Số Seal"] == "S1"


def test_workbook_upload_updates_vessel_totals(client, db_session):
    make_vessel(db_session)
    content = _workbook_bytes([
        ["Số hiệu Cont/Xe", "Ngày Kế hoạch", "Số TK Nhà VC", "Số TK DNL", "Số kiện", "Số tấn"],
        ["GESU6721400", "31/12/2025", "TK1", "DNL1", 10, 20],
        ["TCLU1234567", "31/12/2025", "", "", 16, 28.8],
    ])
    files = {"file": ("plan.xlsx", io.BytesIO(content),
                      "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")}
    response = client.post("/api/containers/import/v_test", files=files)
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["imported"] == 2
    assert body["total_pkgs"] == 26

    vessels = client.get("/api/vessels/").json()
    assert vessels[0]["total_containers"] == 2
    assert vessels[0]["total_weight"] == 48.8

    statuses = {c["container_no"]: c["status"] for c in client.get("/api/containers/").json()}
    assert statuses == {"GESU6721400": "READY", "TCLU1234567": "PENDING"}


def test_row_import_merges_with_stored_containers(client, db_session):
    make_vessel(db_session)
    make_container(db_session, "c1", "GESU6721400", plan_date="2025-12-31", seal_no="OLD",
                   status=ContainerStatus.PENDING, tk_nha_vc="", tk_dnl_ola="")

    response = client.post("/api/containers/import/v_test/rows", json=[row(**{"Số Seal": "NEW"})])
    assert response.status_code == 200, response.text

    containers = client.get("/api/containers/").json()
    assert len(containers) == 1
    assert containers[0]["id"] == "c1"
    assert containers[0]["seal_no"] == "NEW"


def test_import_into_unknown_vessel_is_404(client):
    response = client.post("/api/containers/import/nope/rows", json=[row()])
    assert response.status_code == 404


def test_unreadable_workbook_is_400(client, db_session):
    make_vessel(db_session)
    files = {"file": ("plan.xlsx", io.BytesIO(b"not excel"), "application/octet-stream")}
    response = client.post("/api/containers/import/v_test", files=files)
    assert response.status_code == 400


def test_import_template_download(client):
    response = client.get("/api/containers/import-template")
    assert response.status_code == 200
    rows = read_workbook_rows(response.content)
    assert rows[0]["Số hiệu Cont/Xe"] == "GESU6721400"


def test_merged_rows_are_stamped_in_utc():
    container = merge_import([row()], "v1", []).containers[0]
    assert container.updated_at.tzinfo == timezone.utc
