"""把 PopupContent 渲染成弹窗使用的 HTML。

Qt 富文本不支持 <ruby>，拼音用两行表格放在汉字上方。
"""

from __future__ import annotations

from html import escape
from typing import List

from .constants import MESSAGES
from .models import AlignmentResult, PopupContent

LOADING_COLOR = "#f5c542"
READY_COLOR = "#34c759"
SEPARATOR = '<hr style="border:0;border-top:1px solid #333;margin:12px 0">'


def render_chinese(segments: AlignmentResult) -> str:
    pinyin_row: List[str] = []
    char_row: List[str] = []
    for seg in segments:
        pinyin_row.append(f'<td class="py">{escape(seg.annotation)}</td>')
        char_row.append(f'<td class="zh">{escape(seg.char)}</td>')
    return (
        '<table class="zh-table" align="center" cellspacing="0" cellpadding="2">'
        f'<tr>{"".join(pinyin_row)}</tr><tr>{"".join(char_row)}</tr></table>'
    )


def render_body(content: PopupContent) -> str:
    chinese_text = content.chinese_text
    vi_text = content.vietnamese_text
    # 错误提示放在译文一侧，原文保持不变
    if content.error:
        if content.source_is_chinese:
            vi_text = content.error
        else:
            chinese_text = content.error
    vi_html = f'<div class="vi">{escape(vi_text)}</div>'

    if content.segments:
        zh_html = render_chinese(content.segments)
    else:
        zh_html = f'<div class="zh">{escape(chinese_text)}</div>'

    if content.source_is_chinese:
        parts = [zh_html, SEPARATOR, vi_html]
    else:
        parts = [vi_html, SEPARATOR, zh_html]
    if content.loading:
        parts.append(f'<div class="loading">{escape(MESSAGES["loading"])}</div>')
    return "".join(parts)


def render_html(content: PopupContent) -> str:
    color = LOADING_COLOR if content.loading else READY_COLOR
    return (
        "<html><head><style>"
        "body{color:#ffffff;}"
        ".zh{font-size:30px;text-align:center;}"
        ".py{font-size:12px;color:#bbbbbb;text-align:center;}"
        ".vi{font-size:16px;color:#e6e6e6;text-align:center;}"
        ".loading{color:#aaaaaa;text-align:center;margin-top:18px;}"
        "</style></head><body>"
        f'<div class="status" style="color:{color}">●</div>'
        f"{render_body(content)}"
        "</body></html>"
    )
