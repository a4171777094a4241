"""
签名因子选择与出站payload构建

出站payload = {username, sign} + 固定字段 + 白名单字段 + 默认字段 + 签名字段。
签名字段由代理写入且与签名使用的值完全一致，调用方的其它字段无法覆盖它。
"""

from typing import Any, Mapping, Optional

from core.credentials import ActiveCredentials
from core.exceptions import InvalidRequestBodyError, MissingRequiredFieldError
from core.utils.logger import get_logger

from .endpoints import (
    RESERVED_FIELDS,
    DiscriminantSource,
    EndpointKind,
    MissingFieldPolicy,
    ResolvedEndpoint,
)
from .signature import generate_signature

logger = get_logger(__name__)


def _field_as_text(name: str, value: Any) -> Optional[str]:
    """签名字段只接受字符串或数字；空值视为缺失"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidRequestBodyError(f"{name} must be a string or number")
    text = str(value)
    return text if text.strip() else None


def select_discriminant(endpoint: ResolvedEndpoint, body: Mapping[str, Any]) -> str:
    """
    按端点规则选择签名因子

    Raises:
        MissingRequiredFieldError: 必需字段缺失（签名之前）
    """
    rule = endpoint.spec.rule

    if rule.source is DiscriminantSource.LITERAL:
        return rule.value

    if rule.source is DiscriminantSource.PATH_SEGMENT:
        return endpoint.path_segment or "unknown"

    value = _field_as_text(rule.value, body.get(rule.value))
    if value is not None:
        return value

    if rule.on_missing is MissingFieldPolicy.REJECT:
        raise MissingRequiredFieldError(rule.value, endpoint.kind.value)

    logger.warning(
        f"{endpoint.kind.value}: {rule.value} 缺失，仍然转发，由上游判定",
        endpoint=endpoint.kind.value,
        field=rule.value,
    )
    return ""


def build_signed_payload(
    endpoint: ResolvedEndpoint,
    credentials: ActiveCredentials,
    body: Mapping[str, Any],
    discriminant: str,
) -> dict[str, Any]:
    """
    构建出站payload（不包含API密钥）

    Args:
        endpoint: 已解析的端点
        credentials: 当前激活凭证
        body: 入站请求体
        discriminant: select_discriminant 选出的签名因子
    """
    spec = endpoint.spec
    payload: dict[str, Any] = {
        "username": credentials.username,
        "sign": generate_signature(credentials.username, credentials.api_key, discriminant),
    }
    payload.update(spec.fixed_fields)

    if spec.kind is EndpointKind.GENERIC:
        # 未知端点：除保留字段外逐个复制
        for key, value in body.items():
            if key not in RESERVED_FIELDS and key not in payload:
                payload[key] = value
        return payload

    for name in spec.passthrough_fields:
        if name in body and name not in payload:
            payload[name] = body[name]
    for name, value in spec.default_fields.items():
        payload.setdefault(name, value)

    if spec.rule.source is DiscriminantSource.FIELD and discriminant:
        payload[spec.rule.value] = discriminant

    return payload
