"""
统一异常基类
定义代理服务异常的基础结构，每个异常都携带HTTP状态码
"""

from datetime import datetime
from typing import Any, Optional

from .error_codes import ErrorCode, get_error_message


class BaseProxyException(Exception):
    """代理服务基础异常类"""

    status_code: int = 500
    error_name: str = "InternalError"

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.error_code = error_code
        self.message = message or get_error_message(error_code)
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now()

        super().__init__(self.message)

    def to_envelope(self) -> dict[str, Any]:
        """转换为对外的错误响应格式 {message, error, details}"""
        envelope: dict[str, Any] = {"message": self.message, "error": self.error_name}
        if self.details:
            envelope["details"] = self.details
        return envelope

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式（用于日志）"""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(error_code={self.error_code.value}, message='{self.message}')"


class ConfigurationException(BaseProxyException):
    """配置相关异常"""

    error_name = "ConfigurationError"

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        config_path: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", None) or {}
        if config_path:
            details["config_path"] = config_path

        super().__init__(error_code, message, details, **kwargs)


class InvalidMethodError(BaseProxyException):
    """不支持的HTTP方法"""

    status_code = 405
    error_name = "InvalidMethod"

    def __init__(self, method: str):
        super().__init__(ErrorCode.INVALID_METHOD)
        self.method = method

    def to_envelope(self) -> dict[str, Any]:
        return {"message": self.message}


class InvalidRequestBodyError(BaseProxyException):
    """请求体不是JSON对象"""

    status_code = 400
    error_name = "InvalidRequestBody"

    def __init__(self, reason: str):
        super().__init__(ErrorCode.INVALID_REQUEST, details={"reason": reason})


class MissingRequiredFieldError(BaseProxyException):
    """缺少必需字段，签名之前即拒绝"""

    status_code = 400
    error_name = "MissingRequiredField"

    def __init__(self, field: str, endpoint: Optional[str] = None):
        details = {"field": field}
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(
            ErrorCode.MISSING_REQUIRED_FIELD,
            message=f"Missing required field: {field}",
            details=details,
        )
        self.field = field


class MissingCredentialsError(BaseProxyException):
    """没有唯一的激活凭证"""

    status_code = 500
    error_name = "MissingCredentials"

    def __init__(
        self,
        provider: str,
        key_name: str,
        error_code: ErrorCode = ErrorCode.CREDENTIALS_MISSING,
        reason: Optional[str] = None,
    ):
        details = {"provider": provider, "key_name": key_name}
        if reason:
            details["reason"] = reason
        super().__init__(error_code, details=details)
        self.provider = provider
        self.key_name = key_name


class AmbiguousCredentialsError(MissingCredentialsError):
    """同一 (provider, key_name) 存在多个激活凭证"""

    def __init__(self, provider: str, key_name: str, count: int):
        super().__init__(
            provider,
            key_name,
            error_code=ErrorCode.CREDENTIALS_AMBIGUOUS,
            reason=f"{count} active credentials found",
        )
        self.count = count


class UpstreamUnreachableError(BaseProxyException):
    """上游不可达（网络错误、超时）"""

    status_code = 500
    error_name = "UpstreamUnreachable"

    def __init__(self, url: str, cause: Exception):
        super().__init__(
            ErrorCode.UPSTREAM_UNREACHABLE,
            details={"url": url},
            cause=cause,
        )
        self.url = url

    def to_envelope(self) -> dict[str, Any]:
        return {"message": self.message, "error": str(self.cause)}


class WebhookSignatureError(BaseProxyException):
    """Webhook签名缺失或不匹配"""

    status_code = 401
    error_name = "WebhookSignature"

    def to_envelope(self) -> dict[str, Any]:
        return {"error": self.message}


class ProductSyncError(BaseProxyException):
    """商品同步失败"""

    error_name = "ProductSync"

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(ErrorCode.PRODUCT_SYNC_FAILED, message=message)
        self.status_code = status_code


class WebhookPayloadError(BaseProxyException):
    """Webhook回调内容不完整"""

    status_code = 400
    error_name = "WebhookPayload"

    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_REQUEST, message=message)

    def to_envelope(self) -> dict[str, Any]:
        return {"error": self.message}
