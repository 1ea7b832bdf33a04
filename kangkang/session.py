"""翻译流程编排。

一次快捷键触发对应一个 Session。同一时间只有一个 Session 处于活动状态：
新的触发会先关闭旧弹窗，旧请求晚到的结果通过会话编号比对后直接丢弃。
唯一的挂起点是等待翻译接口返回。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from .alignment import AlignmentEngine, contains_ideograph
from .client import TranslationClient, mask_key
from .constants import CREDENTIAL_PREFIX, MESSAGES
from .exceptions import InvalidCredentialFormatError, NoCredentialError, UpstreamFailureError
from .guard import FailureGuard
from .models import AlignmentResult, PopupContent, Session, SessionState
from .vault import CredentialVault

logger = logging.getLogger(__name__)


class PopupHost(Protocol):
    """弹窗宿主，负责窗口与渲染。"""

    def show(self, content: PopupContent) -> None:
        ...

    def show_repair(self, error: Optional[str] = None) -> None:
        ...

    def close(self) -> None:
        ...


@dataclass
class AppState:
    """进程内的全部可变状态。"""

    vault: CredentialVault
    client: TranslationClient
    guard: FailureGuard = field(default_factory=FailureGuard)
    engine: AlignmentEngine = field(default_factory=AlignmentEngine)
    active: Optional[Session] = None
    repair_open: bool = False
    last_session_id: int = 0

    def next_session_id(self) -> int:
        self.last_session_id += 1
        return self.last_session_id


def validate_credential(api_key: str, prefix: str = CREDENTIAL_PREFIX) -> str:
    api_key = (api_key or "").strip()
    if not api_key.startswith(prefix):
        raise InvalidCredentialFormatError(f"API 密钥必须以 {prefix} 开头")
    return api_key


class CredentialRepair:
    """重新输入 API 密钥的表单流程。"""

    def __init__(self, state: AppState, popup: PopupHost) -> None:
        self._state = state
        self._popup = popup

    @property
    def is_open(self) -> bool:
        return self._state.repair_open

    def open(self) -> None:
        self._state.repair_open = True
        self._popup.show_repair()

    def submit(self, api_key: str) -> bool:
        """校验并保存密钥；格式错误时不落盘，也不清零失败计数。"""
        try:
            api_key = validate_credential(api_key)
        except InvalidCredentialFormatError as exc:
            logger.info("密钥格式错误: %s", exc)
            self._popup.show_repair(MESSAGES['repair_invalid'])
            return False

        try:
            self._state.vault.save(api_key)
        except OSError as exc:
            logger.error("API 密钥保存失败: %s", exc)
            self._popup.show_repair(MESSAGES['repair_save_failed'])
            return False
        self._state.client.set_api_key(api_key)
        self._state.guard.reset()
        self._state.repair_open = False
        logger.info("已更换 API 密钥: %s", mask_key(api_key))
        self._popup.show(PopupContent(
            source_text=MESSAGES['repair_saved'],
            translated_text=MESSAGES['repair_saved_mark'],
        ))
        return True

    def cancel(self) -> None:
        self._state.repair_open = False


class TranslationSession:
    """状态机：Idle → Loading → Displaying / Failed / CredentialRepair。"""

    def __init__(self, state: AppState, popup: PopupHost) -> None:
        self.state = state
        self.popup = popup
        self.repair = CredentialRepair(state, popup)

    @property
    def active(self) -> Optional[Session]:
        return self.state.active

    def is_active(self, session: Session) -> bool:
        return self.state.active is not None and self.state.active.id == session.id

    def _begin(self, text: str) -> Session:
        if self.state.active is not None or self.state.repair_open:
            logger.debug("关闭上一个弹窗")
            self.popup.close()
        self.state.repair_open = False
        session = Session(
            id=self.state.next_session_id(),
            source_text=text,
            source_is_chinese=contains_ideograph(text),
        )
        self.state.active = session
        return session

    def _content(self, session: Session, segments: Optional[AlignmentResult] = None,
                 error: Optional[str] = None) -> PopupContent:
        return PopupContent(
            source_text=session.source_text,
            translated_text=session.translated_text,
            segments=segments or AlignmentResult(),
            loading=session.loading,
            source_is_chinese=session.source_is_chinese,
            error=error,
        )

    async def trigger(self, text: Optional[str]) -> Optional[Session]:
        text = (text or "").strip()
        if not text:
            return None

        session = self._begin(text)
        logger.debug("开始翻译 #%d (%s)", session.id, "zh→vi" if session.source_is_chinese else "vi→zh")
        self.popup.show(self._content(session))

        try:
            translated = await self.state.client.translate(
                text, target_is_chinese=not session.source_is_chinese
            )
        except NoCredentialError:
            if self.is_active(session):
                logger.info("未配置 API 密钥，打开密钥输入")
                self.open_repair()
            return session
        except UpstreamFailureError as exc:
            escalate = self.state.guard.record_failure()
            if not self.is_active(session):
                logger.debug("丢弃过期的失败结果 #%d: %s", session.id, exc)
                return session
            if escalate:
                self.open_repair()
                return session
            session.state = SessionState.FAILED
            self.popup.show(self._content(session, error=MESSAGES['translate_failed']))
            return session

        self.state.guard.record_success()
        if not self.is_active(session):
            logger.debug("丢弃过期的翻译结果 #%d", session.id)
            return session

        session.translated_text = translated
        session.state = SessionState.DISPLAYING
        segments = self.state.engine.annotate(session.chinese_text)
        self.popup.show(self._content(session, segments=segments))
        return session

    async def trigger_from_clipboard(self, read_text: Callable[[], Optional[str]]) -> Optional[Session]:
        return await self.trigger(read_text())

    def dismiss(self) -> None:
        """用户手动关闭弹窗。"""
        if self.state.active is not None:
            logger.debug("弹窗已关闭 #%d", self.state.active.id)
        self.state.active = None
        self.repair.cancel()

    def open_repair(self) -> None:
        if self.state.active is not None:
            self.state.active.state = SessionState.CREDENTIAL_REPAIR
            self.popup.close()
        self.state.active = None
        self.repair.open()

    def submit_credential(self, api_key: str) -> bool:
        return self.repair.submit(api_key)
