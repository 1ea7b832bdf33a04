"""连续失败计数测试"""

import pytest

from kangkang.guard import FailureGuard


def test_escalates_at_threshold():
    """连续失败 5 次时触发"""
    guard = FailureGuard()
    results = [guard.record_failure() for _ in range(5)]
    assert results == [False, False, False, False, True]
    assert guard.count == 5


def test_keeps_firing_past_threshold():
    """超过阈值后每次失败都会触发"""
    guard = FailureGuard(threshold=2)
    guard.record_failure()
    assert guard.record_failure() is True
    assert guard.record_failure() is True
    assert guard.count == 3


def test_success_resets_count():
    """成功一次后再失败 4 次不会触发"""
    guard = FailureGuard()
    for _ in range(4):
        guard.record_failure()
    guard.record_success()
    assert guard.count == 0
    assert not any(guard.record_failure() for _ in range(4))


def test_reset():
    """重置后计数为 0"""
    guard = FailureGuard()
    guard.record_failure()
    guard.reset()
    assert guard.count == 0


def test_invalid_threshold():
    """阈值必须为正数"""
    with pytest.raises(ValueError):
        FailureGuard(threshold=0)
