from __future__ import annotations

from io import BytesIO

from django.utils import timezone
from django.utils.html import escape
from openpyxl import Workbook
from openpyxl.styles import Font
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .models import CooperationRecord


styles = getSampleStyleSheet()

PRODUCT_HEADER = ["S.No", "Product", "Code", "Platform", "Price", "Commission %", "Order No."]


def _product_rows(record: CooperationRecord):
    for index, product in enumerate(record.products.all(), start=1):
        yield [
            index,
            product.product_name,
            product.product_code,
            product.get_cooperation_platform_display(),
            product.price,
            product.commission_rate,
            product.order_number,
        ]


def cooperation_record_to_excel(record: CooperationRecord) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Cooperation"

    ws["A1"] = f"Cooperation #{record.id}"
    ws["A1"].font = Font(size=16, bold=True)
    ws["A3"] = "Influencer"
    ws["B3"] = str(record.influencer)
    ws["A4"] = "Status"
    ws["B4"] = record.get_cooperation_status_display()
    ws["A5"] = "Created"
    ws["B5"] = timezone.localtime(record.created_at).strftime("%Y-%m-%d %H:%M")
    ws["A6"] = "Notes"
    ws["B6"] = record.notes

    ws.append([])
    ws.append(PRODUCT_HEADER)
    header_row = ws.max_row
    for cell in ws[header_row]:
        cell.font = Font(bold=True)

    for row in _product_rows(record):
        ws.append([float(value) if value is not None and index in {4, 5} else value for index, value in enumerate(row)])

    ws.append([])
    ws.append(["", "Total", "", "", float(record.total_amount)])
    ws.cell(row=ws.max_row, column=2).font = Font(bold=True)

    ws.column_dimensions["A"].width = 12
    ws.column_dimensions["B"].width = 32
    ws.column_dimensions["C"].width = 16
    ws.column_dimensions["D"].width = 18
    ws.column_dimensions["E"].width = 12
    ws.column_dimensions["F"].width = 14
    ws.column_dimensions["G"].width = 18

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def cooperation_record_to_pdf(record: CooperationRecord) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=12 * mm, rightMargin=12 * mm, topMargin=10 * mm, bottomMargin=10 * mm)
    elements = []

    elements.append(Paragraph(f"Cooperation #{record.id}", styles["Title"]))
    elements.append(Spacer(1, 6))
    elements.append(Paragraph(f"Influencer: {escape(str(record.influencer))}", styles["Normal"]))
    elements.append(Paragraph(f"Status: {record.get_cooperation_status_display()}", styles["Normal"]))
    elements.append(Paragraph(f"Created: {timezone.localtime(record.created_at):%Y-%m-%d %H:%M}", styles["Normal"]))
    if record.notes:
        elements.append(Paragraph(f"Notes: {escape(record.notes)}", styles["Normal"]))
    elements.append(Spacer(1, 10))

    data = [PRODUCT_HEADER]
    for row in _product_rows(record):
        data.append(["" if value is None else str(value) for value in row])
    data.append(["", "Total", "", "", str(record.total_amount), "", ""])

    table = Table(data, colWidths=[12 * mm, 52 * mm, 24 * mm, 28 * mm, 22 * mm, 22 * mm, 26 * mm])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#0f172a")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("BACKGROUND", (0, 1), (-1, -1), colors.HexColor("#f8fafc")),
            ]
        )
    )
    elements.append(table)

    doc.build(elements)
    return buffer.getvalue()
