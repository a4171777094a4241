"""
PPOB 端点定义
封闭的 EndpointKind 集合 + 查找表：端点类型 -> 签名因子规则 -> 上游子路径 -> 允许转发的字段
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping, Optional

from core.exceptions import ConfigurationException, ErrorCode


class EndpointKind(str, Enum):
    """已知的代理端点类型"""

    PRICE_LIST = "price-list"
    TRANSACTION = "transaction"
    TRANSACTION_HISTORY = "transaction-history"
    INQUIRY_PLN = "inquiry-pln"
    SERVICE_LIST = "service-list"
    DEPOSIT = "cek-saldo"
    GENERIC = "generic"


class DiscriminantSource(Enum):
    """签名因子来源"""

    LITERAL = "literal"  # 固定字面量
    FIELD = "field"  # 调用方请求体中的字段
    PATH_SEGMENT = "path_segment"  # 未知路径的最后一段


class MissingFieldPolicy(Enum):
    """签名字段缺失时的处理方式"""

    REJECT = "reject"  # 签名前直接返回400
    FORWARD = "forward"  # 照常转发，记录警告，由上游判定


class ResponseShape(Enum):
    """上游响应的整形方式"""

    PASSTHROUGH = "passthrough"
    PLN_INQUIRY = "pln_inquiry"


@dataclass(frozen=True)
class DiscriminantRule:
    source: DiscriminantSource
    value: str = ""
    on_missing: MissingFieldPolicy = MissingFieldPolicy.REJECT


@dataclass(frozen=True)
class EndpointSpec:
    """单个端点的完整契约"""

    kind: EndpointKind
    upstream_path: str
    rule: DiscriminantRule
    # 从请求体逐个复制的字段白名单（不含签名字段本身）
    passthrough_fields: tuple[str, ...] = ()
    # 由代理固定写入的字段
    fixed_fields: Mapping[str, str] = field(default_factory=dict)
    # 调用方未提供时才写入的字段
    default_fields: Mapping[str, str] = field(default_factory=dict)
    response_shape: ResponseShape = ResponseShape.PASSTHROUGH


@dataclass(frozen=True)
class ResolvedEndpoint:
    """一次请求解析出的端点"""

    spec: EndpointSpec
    upstream_path: str
    # 仅 GENERIC 使用：路径最后一段，空路径为 "unknown"
    path_segment: str = "unknown"

    @property
    def kind(self) -> EndpointKind:
        return self.spec.kind


# 调用方不能覆盖的字段
RESERVED_FIELDS = frozenset({"username", "sign", "apiKey", "api_key"})

GENERIC_SPEC = EndpointSpec(
    kind=EndpointKind.GENERIC,
    upstream_path="/v1",
    rule=DiscriminantRule(DiscriminantSource.PATH_SEGMENT),
)

DEFAULT_ENDPOINTS: dict[EndpointKind, EndpointSpec] = {
    EndpointKind.PRICE_LIST: EndpointSpec(
        kind=EndpointKind.PRICE_LIST,
        upstream_path="/v1/price-list",
        rule=DiscriminantRule(DiscriminantSource.LITERAL, "pricelist"),
        passthrough_fields=("cmd", "code", "category_id"),
        default_fields={"cmd": "prepaid"},
    ),
    EndpointKind.TRANSACTION: EndpointSpec(
        kind=EndpointKind.TRANSACTION,
        upstream_path="/v1/transaction",
        rule=DiscriminantRule(
            DiscriminantSource.FIELD, "ref_id", MissingFieldPolicy.REJECT
        ),
        passthrough_fields=(
            "buyer_sku_code",
            "customer_no",
            "testing",
            "max_price",
            "cb_url",
            "allow_dot",
            "msg",
        ),
    ),
    EndpointKind.TRANSACTION_HISTORY: EndpointSpec(
        kind=EndpointKind.TRANSACTION_HISTORY,
        upstream_path="/v1/transaction-history",
        rule=DiscriminantRule(DiscriminantSource.LITERAL, "history"),
    ),
    EndpointKind.INQUIRY_PLN: EndpointSpec(
        kind=EndpointKind.INQUIRY_PLN,
        upstream_path="/v1/inquiry-pln",
        rule=DiscriminantRule(
            DiscriminantSource.FIELD, "customer_no", MissingFieldPolicy.FORWARD
        ),
        response_shape=ResponseShape.PLN_INQUIRY,
    ),
    EndpointKind.SERVICE_LIST: EndpointSpec(
        kind=EndpointKind.SERVICE_LIST,
        upstream_path="/v1/service-list",
        rule=DiscriminantRule(DiscriminantSource.LITERAL, "category-list"),
        fixed_fields={"cmd": "category-list"},
    ),
    EndpointKind.DEPOSIT: EndpointSpec(
        kind=EndpointKind.DEPOSIT,
        upstream_path="/v1/cek-saldo",
        rule=DiscriminantRule(DiscriminantSource.LITERAL, "depo"),
        fixed_fields={"cmd": "deposit"},
    ),
}


def build_endpoint_table(
    overrides: Optional[Mapping[str, str]] = None,
) -> dict[EndpointKind, EndpointSpec]:
    """
    构建端点表，允许通过配置覆盖固定字面量签名因子

    Args:
        overrides: {端点类型: 字面量}，如 {"price-list": "pricelist"}

    Raises:
        ConfigurationException: 未知端点或该端点的签名因子不是字面量
    """
    table = dict(DEFAULT_ENDPOINTS)
    for kind_name, literal in (overrides or {}).items():
        try:
            kind = EndpointKind(kind_name)
        except ValueError:
            raise ConfigurationException(
                ErrorCode.CONFIG_INVALID,
                message=f"未知的端点类型: {kind_name}",
            ) from None

        spec = table.get(kind)
        if spec is None or spec.rule.source is not DiscriminantSource.LITERAL:
            raise ConfigurationException(
                ErrorCode.CONFIG_INVALID,
                message=f"端点 {kind_name} 的签名因子不是固定字面量，不能覆盖",
            )
        if not literal:
            raise ConfigurationException(
                ErrorCode.CONFIG_INVALID,
                message=f"端点 {kind_name} 的签名因子不能为空",
            )
        table[kind] = replace(spec, rule=replace(spec.rule, value=literal))
    return table


def _strip_prefix(path: str, prefix: str) -> str:
    if prefix and (path == prefix or path.startswith(prefix.rstrip("/") + "/")):
        return path[len(prefix.rstrip("/")):]
    return path


def resolve_endpoint(
    path: str,
    table: Mapping[EndpointKind, EndpointSpec] = DEFAULT_ENDPOINTS,
    prefix: str = "",
) -> ResolvedEndpoint:
    """
    把入站路径解析为端点

    去掉路由前缀和可选的 "v1/" 段后查表；查不到的路径按 GENERIC 转发到
    上游 /v1/<剩余路径>。
    """
    remainder = _strip_prefix(path or "", prefix).strip("/")
    if remainder == "v1" or remainder.startswith("v1/"):
        remainder = remainder[2:].lstrip("/")

    for kind, spec in table.items():
        if kind is not EndpointKind.GENERIC and remainder == kind.value:
            return ResolvedEndpoint(spec=spec, upstream_path=spec.upstream_path)

    segment = remainder.rsplit("/", 1)[-1] or "unknown"
    upstream_path = f"/v1/{remainder}" if remainder else GENERIC_SPEC.upstream_path
    return ResolvedEndpoint(
        spec=GENERIC_SPEC, upstream_path=upstream_path, path_segment=segment
    )


def endpoint_for_kind(
    kind: EndpointKind,
    table: Mapping[EndpointKind, EndpointSpec] = DEFAULT_ENDPOINTS,
) -> ResolvedEndpoint:
    """按类型直接取端点（内部调用，如商品同步）"""
    if kind is EndpointKind.GENERIC:
        raise ValueError("GENERIC 端点需要通过路径解析")
    spec = table[kind]
    return ResolvedEndpoint(spec=spec, upstream_path=spec.upstream_path)
