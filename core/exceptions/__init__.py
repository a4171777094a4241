"""
统一异常处理模块
"""

from .base_exceptions import (
    AmbiguousCredentialsError,
    BaseProxyException,
    ConfigurationException,
    InvalidMethodError,
    InvalidRequestBodyError,
    MissingCredentialsError,
    MissingRequiredFieldError,
    ProductSyncError,
    UpstreamUnreachableError,
    WebhookPayloadError,
    WebhookSignatureError,
)
from .error_codes import ErrorCode, get_error_message

__all__ = [
    # 错误码
    "ErrorCode",
    "get_error_message",
    # 异常类
    "BaseProxyException",
    "ConfigurationException",
    "InvalidMethodError",
    "InvalidRequestBodyError",
    "MissingRequiredFieldError",
    "MissingCredentialsError",
    "AmbiguousCredentialsError",
    "UpstreamUnreachableError",
    "WebhookSignatureError",
    "WebhookPayloadError",
    "ProductSyncError",
]
