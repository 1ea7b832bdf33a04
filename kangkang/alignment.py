"""汉字与拼音的逐字对齐。

拼音服务只收到原文中的汉字子序列，按顺序每个汉字返回一个读音；这里再
按位置把读音放回原文：每遇到一个汉字就取下一个读音，其它字符不取。
汉字判断与计数必须一致，否则之后的注音会整体错位。
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from pypinyin import Style, pinyin

from .constants import IDEOGRAPH_FIRST, IDEOGRAPH_LAST
from .models import AlignmentResult, AnnotatedChar

logger = logging.getLogger(__name__)

Transcriber = Callable[[str], Sequence[str]]


def is_ideograph(ch: str) -> bool:
    return IDEOGRAPH_FIRST <= ch <= IDEOGRAPH_LAST


def contains_ideograph(text: str) -> bool:
    return any(is_ideograph(ch) for ch in text)


def extract_ideographs(text: str) -> str:
    return "".join(ch for ch in text if is_ideograph(ch))


def pinyin_transcriber(ideographs: str) -> List[str]:
    """带声调的拼音，每个汉字取第一个读音；没有读音时 pypinyin 原样返回汉字，记为空。"""
    readings = pinyin(ideographs, style=Style.TONE, heteronym=False)
    tokens = []
    for ch, item in zip(ideographs, readings):
        token = item[0] if item else ""
        tokens.append("" if token == ch else token)
    return tokens


class AlignmentEngine:
    def __init__(self, transcriber: Optional[Transcriber] = None) -> None:
        self._transcriber = transcriber or pinyin_transcriber

    def annotate(self, text: str) -> AlignmentResult:
        ideographs = extract_ideographs(text)
        tokens: Sequence[str] = self._transcriber(ideographs) if ideographs else ()
        if len(tokens) != len(ideographs):
            logger.debug("注音数量不一致: 汉字 %d 个, 读音 %d 个", len(ideographs), len(tokens))

        segments = []
        index = 0
        # str 按码位迭代，不会拆开一个字符
        for ch in text:
            if is_ideograph(ch):
                annotation = tokens[index] if index < len(tokens) else ""
                index += 1
                segments.append(AnnotatedChar(ch, annotation or ""))
            else:
                segments.append(AnnotatedChar(ch))
        return AlignmentResult(tuple(segments))
