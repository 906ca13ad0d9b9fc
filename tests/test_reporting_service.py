from services.reporting_service import ReportingService, to_latin1
from services.tally_service import TallyReportGroup, paginate_group


def group(rows):
    return TallyReportGroup(
        id="r1", report_no="001 - STAR", number=1, vessel_id="v1", vessel_name="MV ĐÀ NẴNG STAR",
        voyage_no="V1", mode="NHAP", shift="1", work_date="2026-01-15", day="15", month="01", year="2026",
        consignee="Công ty Giấy", commodity="Giấy", equipment="Xe nâng", worker_names="Nguyễn Văn A",
        created_by="insp", created_at=1, is_approved=False, containers=rows,
    )


def test_to_latin1_strips_vietnamese_marks():
    assert to_latin1("Nguyễn Văn Đức") == "Nguyen Van Duc"
    assert to_latin1(None) == ""


def test_render_multi_page_pdf():
    rows = [{"cont_no": f"CONT{i:07d}", "seal_no": None, "size": "40'HC", "actual_units": 1,
             "actual_weight": 1.8, "notes": "rách"} for i in range(20)]
    content = ReportingService.render_tally_pdf(group(rows), page_size=15)
    assert content.startswith(b"%PDF")
    assert len(paginate_group(group(rows), 15)) == 2


def test_render_empty_group():
    assert ReportingService.render_tally_pdf(group([])).startswith(b"%PDF")
