"""翻译客户端测试"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from kangkang.client import TranslationClient, build_messages, mask_key
from kangkang.constants import DEFAULT_MODEL, SYSTEM_PROMPT
from kangkang.exceptions import NoCredentialError, UpstreamFailureError


def make_completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion(" Xin chào \n"))
    client.close = AsyncMock()
    return client


@pytest.fixture
def factory(openai_client):
    return MagicMock(return_value=openai_client)


@pytest.fixture
def client(factory):
    return TranslationClient("gsk_test", timeout=12, client_factory=factory)


def test_build_messages_direction():
    """根据方向生成提示词"""
    to_zh = build_messages("Xin chào", target_is_chinese=True)
    to_vi = build_messages("你好", target_is_chinese=False)
    assert to_zh[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert to_zh[1]["content"] == "Dịch sang tiếng Trung:\nXin chào"
    assert to_vi[1]["content"] == "Dịch sang tiếng Việt:\n你好"


def test_client_created_without_sdk_retries(client, factory):
    """SDK 重试被关闭，超时显式设置"""
    kwargs = factory.call_args.kwargs
    assert kwargs["api_key"] == "gsk_test"
    assert kwargs["max_retries"] == 0
    assert isinstance(kwargs["timeout"], httpx.Timeout)
    assert kwargs["timeout"].read == 12


@pytest.mark.asyncio
async def test_translate_sends_one_deterministic_request(client, openai_client):
    """一次调用只发送一个 temperature=0 的请求"""
    result = await client.translate("你好", target_is_chinese=False)
    assert result == "Xin chào"
    openai_client.chat.completions.create.assert_awaited_once()
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["temperature"] == 0
    assert kwargs["model"] == DEFAULT_MODEL
    assert kwargs["messages"] == build_messages("你好", target_is_chinese=False)


@pytest.mark.asyncio
async def test_no_credential():
    """未配置密钥时抛出 NoCredentialError"""
    client = TranslationClient(None)
    assert not client.has_credential
    with pytest.raises(NoCredentialError):
        await client.translate("你好", target_is_chinese=False)


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    openai.APIConnectionError(request=httpx.Request("POST", "https://api.groq.com")),
    openai.APITimeoutError(request=httpx.Request("POST", "https://api.groq.com")),
    httpx.ReadTimeout("timeout"),
])
async def test_upstream_errors_are_wrapped(client, openai_client, error):
    """传输错误统一转换为 UpstreamFailureError，且不重试"""
    openai_client.chat.completions.create.side_effect = error
    with pytest.raises(UpstreamFailureError) as exc_info:
        await client.translate("你好", target_is_chinese=False)
    assert exc_info.value.__cause__ is error
    assert openai_client.chat.completions.create.await_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("completion", [
    make_completion(None),
    make_completion("   "),
    SimpleNamespace(choices=[]),
    SimpleNamespace(),
])
async def test_malformed_response(client, openai_client, completion):
    """响应为空或格式不对时视为失败"""
    openai_client.chat.completions.create.return_value = completion
    with pytest.raises(UpstreamFailureError):
        await client.translate("你好", target_is_chinese=False)


def test_set_api_key(client, factory):
    """更换密钥会重建客户端，清空密钥则视为未配置"""
    client.set_api_key("gsk_other")
    assert factory.call_args.kwargs["api_key"] == "gsk_other"
    assert client.has_credential
    client.set_api_key(None)
    assert not client.has_credential


@pytest.mark.asyncio
async def test_aclose(client, openai_client):
    """关闭底层客户端"""
    await client.aclose()
    openai_client.close.assert_awaited_once()
    assert not client.has_credential


def test_mask_key():
    """日志中只显示密钥前缀"""
    assert mask_key("gsk_1234567890") == "gsk_..."
    assert mask_key(None) == "<none>"
