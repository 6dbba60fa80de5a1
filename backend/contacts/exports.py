from __future__ import annotations

from io import BytesIO

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

CONTACT_COLUMNS = [
    ("Date", 18),
    ("Influencer", 22),
    ("Type", 20),
    ("Method", 12),
    ("Contact person", 18),
    ("Content", 48),
    ("Result", 16),
    ("Follow-up", 18),
    ("Follow-up date", 14),
    ("Follow-up notes", 36),
    ("Recorded by", 16),
]


def contact_records_to_excel(records) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Contact Records"

    ws.append([label for label, _width in CONTACT_COLUMNS])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for index, (_label, width) in enumerate(CONTACT_COLUMNS, start=1):
        ws.column_dimensions[ws.cell(row=1, column=index).column_letter].width = width

    for record in records:
        ws.append(
            [
                timezone.localtime(record.contact_date).strftime("%Y-%m-%d %H:%M"),
                record.influencer.name,
                record.get_contact_type_display(),
                record.get_contact_method_display(),
                record.contact_person,
                record.contact_content,
                record.get_contact_result_display(),
                record.get_follow_up_required_display(),
                record.follow_up_date.isoformat() if record.follow_up_date else "",
                record.follow_up_notes,
                record.created_by.username if record.created_by else "",
            ]
        )
        ws.cell(row=ws.max_row, column=6).alignment = Alignment(wrap_text=True, vertical="top")

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
