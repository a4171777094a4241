"""
代理请求处理模块
"""

from .endpoints import (
    DEFAULT_ENDPOINTS,
    RESERVED_FIELDS,
    DiscriminantRule,
    DiscriminantSource,
    EndpointKind,
    EndpointSpec,
    MissingFieldPolicy,
    ResolvedEndpoint,
    ResponseShape,
    build_endpoint_table,
    endpoint_for_kind,
    resolve_endpoint,
)
from .normalizers import PLN_INQUIRY_DEFAULTS, normalize_pln_inquiry
from .payload import build_signed_payload, select_discriminant
from .proxy_handler import SigningForwarder
from .result import ProxyResult, build_cors_headers
from .signature import SignatureInput, generate_signature, sign

__all__ = [
    "DEFAULT_ENDPOINTS",
    "RESERVED_FIELDS",
    "DiscriminantRule",
    "DiscriminantSource",
    "EndpointKind",
    "EndpointSpec",
    "MissingFieldPolicy",
    "ResolvedEndpoint",
    "ResponseShape",
    "build_endpoint_table",
    "endpoint_for_kind",
    "resolve_endpoint",
    "PLN_INQUIRY_DEFAULTS",
    "normalize_pln_inquiry",
    "build_signed_payload",
    "select_discriminant",
    "SigningForwarder",
    "ProxyResult",
    "build_cors_headers",
    "SignatureInput",
    "generate_signature",
    "sign",
]
