from __future__ import annotations

import logging
import os
from functools import lru_cache
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape

from django.conf import settings
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from weighings.services.formatting import format_local_datetime

from .weighing_report import REPORT_HEADERS, WeighingReport

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

PAGE_MARGIN = 40
LOGO_WIDTH = 80
LOGO_HEIGHT = 40

_FONT_CANDIDATES = (
    ("DejaVu", "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    ("DejaVu-Bold", "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
)


@lru_cache(maxsize=None)
def _register_fonts() -> tuple[str, str]:
    """Prefer DejaVu so Δ and ± render; fall back to the built-in Helvetica."""
    try:
        for name, path in _FONT_CANDIDATES:
            if name not in pdfmetrics.getRegisteredFontNames():
                pdfmetrics.registerFont(TTFont(name, path))
    except (TTFError, OSError) as exc:
        logger.warning("No se pudo registrar la fuente DejaVu, se usa Helvetica: %s", exc)
        return "Helvetica", "Helvetica-Bold"
    return "DejaVu", "DejaVu-Bold"


def _load_logo() -> Optional[ImageReader]:
    path = getattr(settings, "ANNCOR_REPORT_LOGO_PATH", "") or ""
    if not path:
        return None
    if not os.path.exists(path):
        logger.warning("No se encontró el logo del reporte en %s.", path)
        return None
    try:
        return ImageReader(path)
    except Exception as exc:  # pragma: no cover - depends on the image file
        logger.warning("No se pudo cargar el logo del reporte %s: %s", path, exc)
        return None


def render_pdf(report: WeighingReport) -> bytes:
    """Render the report as an A4 PDF with a header, the table and a footer on every page."""
    font, font_bold = _register_fonts()
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "WeighingTitle",
        parent=styles["Title"],
        fontName=font_bold,
        fontSize=16,
        leading=20,
        alignment=TA_LEFT,
    )
    subtitle_style = ParagraphStyle(
        "WeighingSubtitle",
        parent=styles["Normal"],
        fontName=font,
        fontSize=10,
        leading=13,
        textColor=colors.HexColor("#525252"),
    )

    logo = _load_logo()

    def _draw_page(canvas, doc) -> None:
        page_width, page_height = A4
        canvas.saveState()
        if logo is not None:
            canvas.drawImage(
                logo,
                page_width - 100,
                page_height - 20 - LOGO_HEIGHT,
                width=LOGO_WIDTH,
                height=LOGO_HEIGHT,
                preserveAspectRatio=True,
                mask="auto",
            )
        canvas.setFont(font, 9)
        canvas.drawString(PAGE_MARGIN, 20, report.footer)
        canvas.restoreState()

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=report.title,
        author=report.brand_name,
    )

    data = [list(REPORT_HEADERS)] + [row.as_list() for row in report.rows]
    table = Table(data, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), font),
                ("FONTNAME", (0, 0), (-1, 0), font_bold),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("TOPPADDING", (0, 0), (-1, -1), 6),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ("LEFTPADDING", (0, 0), (-1, -1), 6),
                ("RIGHTPADDING", (0, 0), (-1, -1), 6),
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1F2937")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                ("ALIGN", (0, 1), (0, -1), "LEFT"),
                ("ALIGN", (1, 1), (1, -1), "CENTER"),
                ("ALIGN", (2, 1), (3, -1), "RIGHT"),
                ("GRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#D4D4D4")),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
            ]
        )
    )

    story = [
        Paragraph(escape(report.title), title_style),
        Paragraph(escape(f"Generado: {format_local_datetime(report.generated_at)}"), subtitle_style),
        Spacer(1, 14),
        table,
    ]
    doc.build(story, onFirstPage=_draw_page, onLaterPages=_draw_page)
    logger.info("Reporte PDF '%s' generado con %s filas.", report.title, len(report.rows))
    return buffer.getvalue()


def render_xlsx(report: WeighingReport) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Pesajes"
    sheet.append([report.title])
    sheet.append([f"Generado: {format_local_datetime(report.generated_at)}"])
    sheet.append([])
    sheet.append(list(REPORT_HEADERS))
    for row in report.rows:
        sheet.append(row.as_list())

    sheet["A1"].font = Font(bold=True, size=14)
    header_row = 4
    for cell in sheet[header_row]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
    for row_cells in sheet.iter_rows(min_row=header_row + 1, min_col=3, max_col=4):
        for cell in row_cells:
            cell.alignment = Alignment(horizontal="right")
    for column, width in zip("ABCD", (14, 18, 12, 20)):
        sheet.column_dimensions[column].width = width

    buffer = BytesIO()
    workbook.save(buffer)
    logger.info("Reporte XLSX '%s' generado con %s filas.", report.title, len(report.rows))
    return buffer.getvalue()
