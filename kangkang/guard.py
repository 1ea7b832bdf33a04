"""连续失败计数。"""

from __future__ import annotations

import logging

from .constants import FAILURE_THRESHOLD

logger = logging.getLogger(__name__)


class FailureGuard:
    """统计翻译接口的连续失败次数。

    达到阈值后每次失败都会返回 True（电平触发）：用户关掉重填窗口而密钥
    仍然无效时，下一次失败会再次弹出。
    """

    def __init__(self, threshold: int = FAILURE_THRESHOLD) -> None:
        if threshold < 1:
            raise ValueError("threshold must be >= 1")
        self.threshold = threshold
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def record_success(self) -> None:
        self._count = 0

    def record_failure(self) -> bool:
        self._count += 1
        escalate = self._count >= self.threshold
        if escalate:
            logger.warning("连续失败 %d 次，需要重新输入 API 密钥", self._count)
        return escalate

    def reset(self) -> None:
        self._count = 0
