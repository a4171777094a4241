"""
统一错误码体系
定义代理服务所有错误的标准化错误码
"""

from enum import Enum


class ErrorCode(Enum):
    """系统错误码枚举"""

    # 通用错误 (1000-1099)
    UNKNOWN_ERROR = "E1000"
    INVALID_REQUEST = "E1001"
    INVALID_METHOD = "E1002"
    MISSING_REQUIRED_FIELD = "E1003"

    # 配置错误 (1100-1199)
    CONFIG_LOAD_FAILED = "E1100"
    CONFIG_INVALID = "E1101"
    CONFIG_MISSING_REQUIRED = "E1102"

    # 凭证错误 (1300-1399)
    CREDENTIALS_MISSING = "E1300"
    CREDENTIALS_AMBIGUOUS = "E1301"

    # 上游错误 (1500-1599)
    UPSTREAM_UNREACHABLE = "E1500"
    UPSTREAM_NON_OK = "E1501"
    UPSTREAM_MALFORMED_BODY = "E1502"

    # Webhook错误 (1600-1699)
    WEBHOOK_SIGNATURE_MISSING = "E1600"
    WEBHOOK_SIGNATURE_INVALID = "E1601"

    # 商品同步错误 (1700-1799)
    PRODUCT_SYNC_FAILED = "E1700"


# 错误码到消息的映射
ERROR_MESSAGES = {
    ErrorCode.UNKNOWN_ERROR: "Internal Server Error",
    ErrorCode.INVALID_REQUEST: "Invalid request body",
    ErrorCode.INVALID_METHOD: "Method Not Allowed",
    ErrorCode.MISSING_REQUIRED_FIELD: "Missing required field",
    ErrorCode.CONFIG_LOAD_FAILED: "Failed to load configuration",
    ErrorCode.CONFIG_INVALID: "Invalid configuration",
    ErrorCode.CONFIG_MISSING_REQUIRED: "Missing required configuration",
    ErrorCode.CREDENTIALS_MISSING: "Missing Digiflazz credentials",
    ErrorCode.CREDENTIALS_AMBIGUOUS: "Missing Digiflazz credentials",
    ErrorCode.UPSTREAM_UNREACHABLE: "Failed to reach upstream",
    ErrorCode.UPSTREAM_NON_OK: "Upstream returned an error",
    ErrorCode.UPSTREAM_MALFORMED_BODY: "Invalid JSON response",
    ErrorCode.WEBHOOK_SIGNATURE_MISSING: "No signature provided",
    ErrorCode.WEBHOOK_SIGNATURE_INVALID: "Invalid signature",
    ErrorCode.PRODUCT_SYNC_FAILED: "Failed to sync products from Digiflazz",
}


def get_error_message(error_code: ErrorCode, default: str = "Internal Server Error") -> str:
    """获取错误码对应的消息"""
    return ERROR_MESSAGES.get(error_code, default)
