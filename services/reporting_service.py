"""
Reporting service for printable tally sheets.
"""
import logging
import unicodedata
from datetime import datetime
from typing import List

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from services.tally_service import TallyPage, TallyReportGroup, paginate_group

log = logging.getLogger(__name__)

# (header, width mm, row key)
TALLY_COLUMNS = [
    ("STT", 10, None),
    ("SO CONT", 32, "cont_no"),
    ("SO SEAL", 28, "seal_no"),
    ("KICH CO", 18, "size"),
    ("SO KIEN", 20, "actual_units"),
    ("TRONG LUONG", 26, "actual_weight"),
    ("GHI CHU", 56, "notes"),
]


def to_latin1(text) -> str:
    """Core PDF fonts are latin-1 only; strip Vietnamese diacritics."""
    text = "" if text is None else str(text)
    text = text.replace("đ", "d").replace("Đ", "D")
    text = unicodedata.normalize("NFKD", text)
    return text.encode("latin-1", "ignore").decode("latin-1")


class TallySheetPDF(FPDF):
    def header(self):
        self.set_font("Helvetica", "B", 14)
        self.cell(0, 10, "PHIEU KIEM DEM HANG HOA", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(2)

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.cell(0, 10, f"Generated {timestamp} | Page {self.page_no()}", align="C")


def _draw_page(pdf: TallySheetPDF, group: TallyReportGroup, page: TallyPage) -> None:
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 11)
    pdf.cell(0, 7, to_latin1(f"So phieu: {page.report_no}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.set_font("Helvetica", "", 10)
    lines = [
        f"Tau: {group.vessel_name}   Chuyen: {group.voyage_no}",
        f"Chu hang: {group.consignee}   Mat hang: {group.commodity}",
        f"Ngay {group.day or '--'} thang {group.month or '--'} nam {group.year or '----'}   Ca: {group.shift}",
        f"Phuong tien: {group.equipment or '-'}   Cong nhan: {group.worker_names or '-'}",
    ]
    for line in lines:
        pdf.cell(0, 6, to_latin1(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)

    pdf.set_fill_color(240, 240, 240)
    pdf.set_font("Helvetica", "B", 9)
    for label, width, _ in TALLY_COLUMNS:
        pdf.cell(width, 8, label, border=1, align="C", fill=True)
    pdf.ln()

    pdf.set_font("Helvetica", "", 9)
    for offset, row in enumerate(page.rows):
        for label, width, key in TALLY_COLUMNS:
            value = page.start_index + offset + 1 if key is None else row.get(key)
            pdf.cell(width, 7, to_latin1(value if value is not None else ""), border=1)
        pdf.ln()

    pdf.set_font("Helvetica", "B", 9)
    label_width = sum(width for _, width, _ in TALLY_COLUMNS[:4])
    pdf.cell(label_width, 7, "CONG", border=1, align="R")
    pdf.cell(TALLY_COLUMNS[4][1], 7, str(page.subtotal_units), border=1)
    pdf.cell(TALLY_COLUMNS[5][1], 7, str(page.subtotal_weight), border=1)
    pdf.cell(TALLY_COLUMNS[6][1], 7, "", border=1)
    pdf.ln(12)

    status = "DA DUYET" if group.is_approved else "CHUA DUYET"
    pdf.set_font("Helvetica", "I", 9)
    pdf.cell(0, 6, f"Trang thai: {status}   Lap boi: {to_latin1(group.created_by or '-')}")


class ReportingService:
    @staticmethod
    def render_tally_pdf(group: TallyReportGroup, page_size: int = None) -> bytes:
        """One PDF page per print page of the group."""
        pages: List[TallyPage] = paginate_group(group, page_size)
        pdf = TallySheetPDF()
        pdf.set_auto_page_break(auto=False)
        for page in pages:
            _draw_page(pdf, group, page)

        log.info("Rendered tally %s as %s page(s)", group.report_no, len(pages))
        return bytes(pdf.output())
