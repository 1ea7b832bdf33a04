"""API 密钥的本地加密存储。

密钥由本机主机名与当前用户名派生（SHA-256），不落盘；落盘的只有
``{"key": "<ivHex>:<cipherHex>"}``，密文为 AES-256-CBC + PKCS7。
"""

from __future__ import annotations

import getpass
import hashlib
import json
import logging
import os
import platform
from pathlib import Path
from typing import Callable, Optional, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .constants import CONFIG_KEY_FIELD, IV_SIZE
from .exceptions import DecryptError
from .models import EncryptedBlob

logger = logging.getLogger(__name__)


def derive_key() -> bytes:
    """由机器标识派生 256 位密钥，同一台机器同一用户下结果稳定。"""
    identity = f"{platform.node()}{getpass.getuser()}"
    return hashlib.sha256(identity.encode("utf-8")).digest()


class CredentialVault:
    def __init__(
        self,
        path: Union[str, Path],
        key_source: Callable[[], bytes] = derive_key,
    ) -> None:
        self.path = Path(path)
        self._key_source = key_source

    def encrypt(self, secret: str) -> EncryptedBlob:
        iv = os.urandom(IV_SIZE)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        data = padder.update(secret.encode("utf-8")) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self._key_source()), modes.CBC(iv)).encryptor()
        return EncryptedBlob(iv, encryptor.update(data) + encryptor.finalize())

    def decrypt_strict(self, blob: Union[EncryptedBlob, str]) -> str:
        """解密失败时抛出 DecryptError。"""
        if isinstance(blob, str):
            blob = EncryptedBlob.parse(blob)
        if len(blob.iv) != IV_SIZE or not blob.ciphertext or len(blob.ciphertext) % IV_SIZE:
            raise DecryptError("密文长度错误")

        decryptor = Cipher(algorithms.AES(self._key_source()), modes.CBC(blob.iv)).decryptor()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        try:
            data = decryptor.update(blob.ciphertext) + decryptor.finalize()
            data = unpadder.update(data) + unpadder.finalize()
            secret = data.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            raise DecryptError(f"解密失败: {exc}") from exc

        return secret

    def decrypt(self, blob: Union[EncryptedBlob, str]) -> str:
        """解密；任何失败都返回空字符串，与“未配置密钥”等同。"""
        try:
            return self.decrypt_strict(blob)
        except DecryptError as exc:
            logger.debug("密钥解密失败，按未配置处理: %s", exc)
            return ""

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("配置文件读取失败: %s", exc)
            return None

        stored = document.get(CONFIG_KEY_FIELD) if isinstance(document, dict) else None
        if not stored or not isinstance(stored, str):
            return None
        return self.decrypt(stored) or None

    def save(self, secret: str) -> None:
        """先写临时文件再替换，写入中途崩溃不会破坏旧密钥。"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {CONFIG_KEY_FIELD: self.encrypt(secret).serialize()}
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(document), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.info("API 密钥已保存: %s", self.path)
