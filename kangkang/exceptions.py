"""异常处理模块"""


class KKError(Exception):
    """Kang Kang 基础异常类"""
    pass


class KKConfigError(KKError):
    """配置错误"""
    pass


class NoCredentialError(KKError):
    """未配置 API 密钥"""
    pass


class UpstreamFailureError(KKError):
    """翻译服务调用失败（网络、超时、认证或响应格式）"""
    pass


class DecryptError(KKError):
    """密文损坏或密钥不匹配"""
    pass


class InvalidCredentialFormatError(KKError):
    """用户输入的 API 密钥格式不正确"""
    pass
