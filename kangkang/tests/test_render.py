"""弹窗渲染测试"""

from kangkang.alignment import AlignmentEngine
from kangkang.constants import MESSAGES
from kangkang.models import PopupContent
from kangkang.render import LOADING_COLOR, READY_COLOR, render_chinese, render_html


def annotate(text):
    tokens = {"你": "nǐ", "好": "hǎo"}
    return AlignmentEngine(lambda chars: [tokens.get(ch, "") for ch in chars]).annotate(text)


def test_chinese_source_layout():
    """中文原文在上，越南语在下"""
    content = PopupContent("你好", "Xin chào", segments=annotate("你好"), source_is_chinese=True)
    html = render_html(content)
    assert html.index("zh-table") < html.index("<hr") < html.index("Xin chào")
    assert ">nǐ<" in html and ">hǎo<" in html
    assert READY_COLOR in html
    assert MESSAGES['loading'] not in html


def test_vietnamese_source_layout():
    """越南语原文在上，翻译出的中文在下"""
    content = PopupContent("Xin chào", "你好", segments=annotate("你好"), source_is_chinese=False)
    html = render_html(content)
    assert html.index("Xin chào") < html.index("<hr") < html.index("zh-table")


def test_loading_state():
    """加载中显示提示，中文按原文显示"""
    content = PopupContent("你好", loading=True, source_is_chinese=True)
    html = render_html(content)
    assert LOADING_COLOR in html
    assert MESSAGES['loading'] in html
    assert '<div class="zh">你好</div>' in html


def test_error_replaces_translation():
    """失败时在译文位置显示错误提示"""
    content = PopupContent("你好", source_is_chinese=True, error=MESSAGES['translate_failed'])
    assert MESSAGES['translate_failed'] in render_html(content)


def test_error_for_vietnamese_source_keeps_source_on_top():
    """越南语原文翻译失败时，原文仍在上方，错误提示在中文一侧"""
    content = PopupContent("Tạm biệt", source_is_chinese=False, error=MESSAGES['translate_failed'])
    html = render_html(content)
    assert html.index("Tạm biệt") < html.index("<hr") < html.index(MESSAGES['translate_failed'])
    assert html.count("Tạm biệt") == 1


def test_user_text_is_escaped():
    """用户文本会被转义"""
    content = PopupContent("<script>x</script>", "<b>你</b>", segments=annotate("<b>你</b>"))
    html = render_html(content)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;" in render_chinese(annotate("<b>你</b>"))
