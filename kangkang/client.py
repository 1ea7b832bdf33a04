"""翻译接口封装：每次调用只发送一个请求，不重试。"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

import httpx
import openai

from .constants import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    PROMPT_TO_CHINESE,
    PROMPT_TO_VIETNAMESE,
    SYSTEM_PROMPT,
    TEMPERATURE,
)
from .exceptions import NoCredentialError, UpstreamFailureError

logger = logging.getLogger(__name__)


def build_messages(text: str, target_is_chinese: bool) -> List[Dict[str, str]]:
    template = PROMPT_TO_CHINESE if target_is_chinese else PROMPT_TO_VIETNAMESE
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": template.format(text=text)},
    ]


def mask_key(api_key: Optional[str]) -> str:
    if not api_key:
        return "<none>"
    return f"{api_key[:4]}..."


class TranslationClient:
    """中越互译客户端，方向由 ``target_is_chinese`` 决定。"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        client_factory: Callable[..., openai.AsyncOpenAI] = openai.AsyncOpenAI,
    ) -> None:
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client_factory = client_factory
        self._client: Optional[openai.AsyncOpenAI] = None
        self.set_api_key(api_key)

    @property
    def has_credential(self) -> bool:
        return self._client is not None

    def set_api_key(self, api_key: Optional[str]) -> None:
        if not api_key:
            self._client = None
            return
        # max_retries=0：SDK 自带重试会让一次调用发出多个请求
        self._client = self._client_factory(
            api_key=api_key,
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            max_retries=0,
        )
        logger.info("翻译客户端已更新，密钥: %s", mask_key(api_key))

    async def translate(self, text: str, target_is_chinese: bool) -> str:
        client = self._client
        if client is None:
            raise NoCredentialError("未配置 API 密钥")

        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=build_messages(text, target_is_chinese),
                temperature=TEMPERATURE,
            )
        except (openai.OpenAIError, httpx.HTTPError) as exc:
            logger.warning("翻译请求失败: %s", exc)
            raise UpstreamFailureError(f"翻译请求失败: {exc}") from exc

        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise UpstreamFailureError(f"响应格式错误: {exc}") from exc
        if not isinstance(content, str) or not content.strip():
            raise UpstreamFailureError("响应内容为空")
        return content.strip()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
