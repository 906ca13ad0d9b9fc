import csv
import io
from types import SimpleNamespace

from openpyxl import load_workbook

from models.work_order import WorkOrder, WorkOrderType
from services.statistics_service import (
    StatisticsFilter,
    aggregate_mechanical_stats,
    aggregate_worker_stats,
    compute_totals,
    export_rows,
    parse_weight_text,
)


def work_order(**kwargs):
    values = dict(
        id="wo", type=WorkOrderType.LABOR, team_name="", worker_names=[], vehicle_nos=[],
        container_nos=[], shift="1", date="10/01/2026", is_holiday=False, is_weekend=False,
        items=[{"method": "Đóng mở Cont", "cargo_type": "Giấy vuông", "weight": ""}],
    )
    values.update(kwargs)
    return SimpleNamespace(**values)


def container(no, weight):
    return SimpleNamespace(container_no=no, weight=weight)


def test_each_order_is_one_shift_per_named_worker():
    orders = [
        work_order(id="1", worker_names=["A", "B"]),
        work_order(id="2", worker_names=["A", "B"], is_weekend=True),
    ]
    rows = {r.name: r for r in aggregate_worker_stats(orders)}

    for name in ("A", "B"):
        assert rows[name].normal_shifts == 1
        assert rows[name].weekend_shifts == 1
        assert rows[name].holiday_shifts == 0

    totals = compute_totals(list(rows.values()))
    assert totals["normal_shifts"] == 2
    assert totals["weekend_shifts"] == 2


def test_holiday_wins_over_weekend():
    rows = aggregate_worker_stats([work_order(worker_names=["A"], is_weekend=True, is_holiday=True)])
    assert (rows[0].holiday_shifts, rows[0].weekend_shifts) == (1, 0)


def test_comma_packed_names_are_flattened():
    rows = aggregate_worker_stats([work_order(worker_names=["A, B", " C "])])
    assert sorted(r.name for r in rows) == ["A", "B", "C"]


def test_team_name_is_used_without_worker_names():
    rows = aggregate_worker_stats([work_order(team_name="X, Y")])
    assert sorted(r.name for r in rows) == ["X", "Y"]


def test_mechanical_orders_are_ignored_by_worker_stats():
    assert aggregate_worker_stats([work_order(type=WorkOrderType.MECHANICAL, worker_names=["A"])]) == []


def test_different_method_gives_a_separate_row():
    orders = [
        work_order(worker_names=["A"]),
        work_order(worker_names=["A"], items=[{"method": "Khác", "cargo_type": "Giấy vuông"}]),
    ]
    assert len(aggregate_worker_stats(orders)) == 2


def test_missing_item_defaults():
    rows = aggregate_worker_stats([work_order(worker_names=["A"], items=[])])
    assert (rows[0].method, rows[0].cargo_type) == ("N/A", "Giấy")


def test_name_allow_list():
    rows = aggregate_worker_stats([work_order(worker_names=["A", "B"])], StatisticsFilter(names=["B"]))
    assert [r.name for r in rows] == ["B"]


def test_date_filters():
    orders = [
        work_order(id="1", worker_names=["A"], date="10/01/2026"),
        work_order(id="2", worker_names=["A"], date="10/02/2026"),
        work_order(id="3", worker_names=["A"], date="not a date"),
    ]
    assert len(aggregate_worker_stats(orders)) == 3
    january = aggregate_worker_stats(orders, StatisticsFilter(month=1, year=2026))
    assert [r.date for r in january] == ["10/01/2026"]
    ranged = aggregate_worker_stats(orders, StatisticsFilter(start_date="2026-02-01", end_date="2026-02-28"))
    assert [r.date for r in ranged] == ["10/02/2026"]


def test_vehicle_split_without_people():
    order = work_order(
        type=WorkOrderType.MECHANICAL, team_name="", container_nos=["C1", "C2"], vehicle_nos=["V1", "V2"],
    )
    rows = aggregate_mechanical_stats([order], [container("C1", 10), container("C2", 14)])

    assert len(rows) == 2
    assert sorted(r.vehicle_no for r in rows) == ["V1", "V2"]
    assert all(r.normal_weight == 12 for r in rows)


def test_people_paired_with_vehicles_by_position():
    order = work_order(type=WorkOrderType.MECHANICAL, worker_names=["P1", "P2"], vehicle_nos=["V1", "V2"],
                       container_nos=["C1"], is_weekend=True)
    rows = {r.name: r for r in aggregate_mechanical_stats([order], [container("C1", 30)])}
    assert rows["P1"].vehicle_no == "V1"
    assert rows["P2"].vehicle_no == "V2"
    assert rows["P1"].weekend_weight == 15


def test_uneven_people_and_vehicles_share_joined_vehicles():
    order = work_order(type=WorkOrderType.MECHANICAL, worker_names=["P1", "P2", "P3"], vehicle_nos=["V1"],
                       container_nos=["C1"])
    rows = aggregate_mechanical_stats([order], [container("C1", 30)])
    assert {r.vehicle_no for r in rows} == {"V1"}
    assert all(r.normal_weight == 10 for r in rows)


def test_item_weight_fallback_when_no_container_matches():
    order = work_order(type=WorkOrderType.MECHANICAL, team_name="Tổ Cơ Giới",
                       container_nos=["UNKNOWN"], items=[{"method": "M", "cargo_type": "G", "weight": "28.8 tấn"}])
    rows = aggregate_mechanical_stats([order], [])
    assert rows[0].name == "Tổ Cơ Giới"
    assert rows[0].vehicle_no == ""
    assert rows[0].normal_weight == 28.8


def test_parse_weight_text():
    assert parse_weight_text("28.8 tấn") == 28.8
    assert parse_weight_text("12,5") == 12.5
    assert parse_weight_text("tấn") == 0.0
    assert parse_weight_text(None) == 0.0


def test_csv_export_has_bom_and_vietnamese_headers():
    rows = aggregate_worker_stats([work_order(worker_names=["Nguyen Van A (Kho)"])])
    content = export_rows("WORKER", rows, "csv")
    assert content.startswith("\ufeff".encode("utf-8"))

    lines = list(csv.reader(io.StringIO(content.decode("utf-8-sig"))))
    assert lines[0][0] == "TÊN NHÂN VIÊN"
    assert lines[1][0] == "Nguyen Van A"


def test_xlsx_export():
    order = work_order(type=WorkOrderType.MECHANICAL, vehicle_nos=["V1"], container_nos=["C1"])
    rows = aggregate_mechanical_stats([order], [container("C1", 28.8)])
    content = export_rows("MECHANICAL", rows, "xlsx")

    sheet = load_workbook(io.BytesIO(content)).active
    assert sheet.cell(row=1, column=2).value == "SỐ XE"
    assert sheet.cell(row=2, column=2).value == "V1"
    assert sheet.cell(row=2, column=6).value == 28.8


def test_statistics_endpoints(client, db_session):
    db_session.add(WorkOrder(
        id="WO-1", type=WorkOrderType.LABOR, vessel_id="v1", worker_names=["A", "B"],
        date="10/01/2026", items=[{"method": "M", "cargo_type": "G"}],
    ))
    db_session.commit()

    body = client.get("/api/statistics/workers", params={"month": 1, "year": 2026}).json()
    assert body["totals"]["normal_shifts"] == 2
    assert {r["name"] for r in body["rows"]} == {"A", "B"}

    export = client.get("/api/statistics/workers/export", params={"fmt": "csv"})
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")

    assert client.get("/api/statistics/nope/export").status_code == 400
