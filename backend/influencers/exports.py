from __future__ import annotations

from io import BytesIO

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

HEADER_FILL = PatternFill("solid", fgColor="0F172A")

INFLUENCER_COLUMNS = [
    ("ID", 8),
    ("Name", 20),
    ("Nickname", 18),
    ("WeChat", 18),
    ("Email", 26),
    ("Douyin", 34),
    ("Douyin followers", 16),
    ("Xiaohongshu", 34),
    ("Xiaohongshu followers", 20),
    ("WeChat Channels", 34),
    ("Channels followers", 18),
    ("Channels shop", 14),
    ("Price", 12),
    ("Cooperation types", 30),
    ("Refund", 10),
    ("Created", 18),
]


def _write_header(ws, columns) -> None:
    ws.append([label for label, _width in columns])
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = HEADER_FILL
    for index, (_label, width) in enumerate(columns, start=1):
        ws.column_dimensions[ws.cell(row=1, column=index).column_letter].width = width
    ws.freeze_panes = "A2"


def influencers_to_excel(influencers) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Influencers"
    _write_header(ws, INFLUENCER_COLUMNS)

    for influencer in influencers:
        ws.append(
            [
                influencer.id,
                influencer.name,
                influencer.nickname,
                influencer.wechat,
                influencer.email,
                influencer.douyin_url,
                influencer.douyin_followers,
                influencer.xiaohongshu_url,
                influencer.xiaohongshu_followers,
                influencer.wechat_channels_url,
                influencer.wechat_channels_followers,
                "Yes" if influencer.wechat_channels_has_shop else "No",
                float(influencer.cooperation_price) if influencer.cooperation_price is not None else None,
                ", ".join(influencer.cooperation_type_labels),
                "Yes" if influencer.is_refund else "No",
                timezone.localtime(influencer.created_at).strftime("%Y-%m-%d %H:%M"),
            ]
        )

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
