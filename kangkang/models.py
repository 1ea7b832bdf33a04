"""数据模型定义。"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .constants import IDEOGRAPH_FIRST, IDEOGRAPH_LAST
from .exceptions import DecryptError


@dataclass(frozen=True)
class EncryptedBlob:
    """落盘的加密密钥：初始化向量 + 密文。"""

    iv: bytes
    ciphertext: bytes

    def serialize(self) -> str:
        return f"{self.iv.hex()}:{self.ciphertext.hex()}"

    @classmethod
    def parse(cls, data: str) -> "EncryptedBlob":
        if not isinstance(data, str) or data.count(":") != 1:
            raise DecryptError("密文格式错误")
        iv_hex, cipher_hex = data.split(":")
        try:
            iv = bytes.fromhex(iv_hex)
            ciphertext = bytes.fromhex(cipher_hex)
        except ValueError as exc:
            raise DecryptError(f"密文不是合法的十六进制: {exc}") from exc
        return cls(iv, ciphertext)


@dataclass(frozen=True)
class AnnotatedChar:
    char: str
    annotation: str = ""


@dataclass(frozen=True)
class AlignmentResult:
    """逐字注音结果，长度与原文字符数一致。"""

    segments: Tuple[AnnotatedChar, ...] = ()

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[AnnotatedChar]:
        return iter(self.segments)

    def __getitem__(self, index: int) -> AnnotatedChar:
        return self.segments[index]

    @property
    def annotations(self) -> List[str]:
        return [seg.annotation for seg in self.segments]

    def chinese_text(self) -> str:
        """只保留汉字（含没有读音的），供“复制中文”使用。"""
        return "".join(
            seg.char for seg in self.segments
            if IDEOGRAPH_FIRST <= seg.char <= IDEOGRAPH_LAST
        )

    def to_inline(self) -> str:
        return "".join(
            f"{seg.char}({seg.annotation})" if seg.annotation else seg.char
            for seg in self.segments
        )


class SessionState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    DISPLAYING = "displaying"
    FAILED = "failed"
    CREDENTIAL_REPAIR = "credential_repair"


@dataclass
class Session:
    """一次快捷键触发的翻译。"""

    id: int
    source_text: str
    source_is_chinese: bool
    translated_text: str = ""
    state: SessionState = SessionState.LOADING

    @property
    def loading(self) -> bool:
        return self.state is SessionState.LOADING

    @property
    def chinese_text(self) -> str:
        return self.source_text if self.source_is_chinese else self.translated_text


@dataclass(frozen=True)
class PopupContent:
    """交给弹窗渲染的结构化内容。"""

    source_text: str
    translated_text: str = ""
    segments: AlignmentResult = field(default_factory=AlignmentResult)
    loading: bool = False
    source_is_chinese: bool = False
    error: Optional[str] = None

    @property
    def chinese_text(self) -> str:
        return self.source_text if self.source_is_chinese else self.translated_text

    @property
    def vietnamese_text(self) -> str:
        return self.translated_text if self.source_is_chinese else self.source_text


__all__ = [
    "EncryptedBlob",
    "AnnotatedChar",
    "AlignmentResult",
    "SessionState",
    "Session",
    "PopupContent",
]
