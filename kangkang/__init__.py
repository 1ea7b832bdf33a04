"""
Kang Kang AI - 剪贴板中越互译弹窗

复制文本后按下快捷键，弹出中越互译结果，并在汉字上方标注拼音。
"""

__version__ = "1.0.0"

from .alignment import AlignmentEngine, contains_ideograph, is_ideograph
from .client import TranslationClient
from .config import Settings
from .exceptions import (
    KKError, KKConfigError, NoCredentialError, UpstreamFailureError,
    DecryptError, InvalidCredentialFormatError
)
from .guard import FailureGuard
from .models import AlignmentResult, AnnotatedChar, EncryptedBlob, PopupContent, Session, SessionState
from .session import AppState, CredentialRepair, PopupHost, TranslationSession
from .vault import CredentialVault, derive_key

__all__ = [
    'AlignmentEngine',
    'AlignmentResult',
    'AnnotatedChar',
    'AppState',
    'CredentialRepair',
    'CredentialVault',
    'DecryptError',
    'EncryptedBlob',
    'FailureGuard',
    'InvalidCredentialFormatError',
    'KKConfigError',
    'KKError',
    'NoCredentialError',
    'PopupContent',
    'PopupHost',
    'Session',
    'SessionState',
    'Settings',
    'TranslationClient',
    'TranslationSession',
    'UpstreamFailureError',
    'contains_ideograph',
    'derive_key',
    'is_ideograph',
]
