"""运行配置：从环境变量与 .env 文件读取。"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

import dotenv

from .constants import (
    CONFIG_FILENAME,
    DEFAULT_BASE_URL,
    DEFAULT_HOME_DIRNAME,
    DEFAULT_HOTKEY_REPAIR,
    DEFAULT_HOTKEY_TRANSLATE,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
)
from .exceptions import KKConfigError


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    home: Path = Path.home() / DEFAULT_HOME_DIRNAME
    hotkey_translate: str = DEFAULT_HOTKEY_TRANSLATE
    hotkey_repair: str = DEFAULT_HOTKEY_REPAIR
    log_level: str = "INFO"

    @property
    def config_path(self) -> Path:
        return self.home / CONFIG_FILENAME

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """读取 KANGKANG_* 环境变量，未设置的项使用默认值。

        传入 ``environ`` 时不会加载 .env 文件，便于测试。
        """
        if environ is None:
            dotenv.load_dotenv(env_file, override=False)
            environ = os.environ

        raw_timeout = environ.get("KANGKANG_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise KKConfigError(f"无效的超时时间: {raw_timeout}") from exc
        if timeout <= 0:
            raise KKConfigError(f"超时时间必须大于 0: {raw_timeout}")

        home = environ.get("KANGKANG_HOME")
        return cls(
            base_url=environ.get("KANGKANG_BASE_URL", DEFAULT_BASE_URL),
            model=environ.get("KANGKANG_MODEL", DEFAULT_MODEL),
            timeout=timeout,
            home=Path(home).expanduser() if home else Path.home() / DEFAULT_HOME_DIRNAME,
            hotkey_translate=environ.get("KANGKANG_HOTKEY_TRANSLATE", DEFAULT_HOTKEY_TRANSLATE),
            hotkey_repair=environ.get("KANGKANG_HOTKEY_REPAIR", DEFAULT_HOTKEY_REPAIR),
            log_level=environ.get("KANGKANG_LOG_LEVEL", "INFO").upper(),
        )
