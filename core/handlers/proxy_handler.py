"""
签名转发处理器
负责一次代理请求的完整流程：方法检查 -> 解析请求体 -> 端点解析 -> 字段校验 ->
凭证查询 -> 签名 -> 转发 -> 响应映射
"""

import json
import time
from typing import Any, Dict, Mapping, Optional, Union

from core.credentials import CredentialProvider, resolve_active_credentials
from core.exceptions import (
    BaseProxyException,
    InvalidMethodError,
    InvalidRequestBodyError,
)
from core.providers.base import BaseAdapter, UpstreamResponse
from core.utils.logger import get_logger, mask_payload

from .endpoints import (
    EndpointKind,
    ResolvedEndpoint,
    ResponseShape,
    build_endpoint_table,
    endpoint_for_kind,
    resolve_endpoint,
)
from .normalizers import normalize_pln_inquiry
from .payload import build_signed_payload, select_discriminant
from .result import ProxyResult, build_cors_headers

logger = get_logger(__name__)

PREFLIGHT_BODY = {"message": "Preflight request successful"}
EMPTY_UPSTREAM_BODY = {"message": "No response content from upstream"}

RawBody = Union[bytes, str, Mapping[str, Any], None]


class SigningForwarder:
    """Digiflazz 签名转发器"""

    def __init__(
        self,
        credential_provider: CredentialProvider,
        adapter: BaseAdapter,
        provider_name: str = "digiflazz",
        route_prefix: str = "",
        discriminant_overrides: Optional[Mapping[str, str]] = None,
        cors_headers: Optional[Dict[str, str]] = None,
    ):
        """
        初始化转发器

        Args:
            credential_provider: 凭证提供者
            adapter: 上游适配器
            provider_name: 凭证所属的供应商名称
            route_prefix: 入站路由前缀，解析端点时去掉
            discriminant_overrides: 固定签名因子的配置覆盖
            cors_headers: 附加到每个结果的CORS头
        """
        self.credential_provider = credential_provider
        self.adapter = adapter
        self.provider_name = provider_name
        self.route_prefix = route_prefix
        self.endpoints = build_endpoint_table(discriminant_overrides)
        self.cors_headers = cors_headers if cors_headers is not None else build_cors_headers()

    async def handle(self, method: str, path: str, body: RawBody = None) -> ProxyResult:
        """
        处理一次入站请求，永远返回结果而不抛出异常

        Args:
            method: HTTP方法
            path: 入站路径（含路由前缀）
            body: 原始请求体
        """
        start_time = time.time()
        try:
            method = (method or "").upper()
            if method == "OPTIONS":
                return self._result(200, dict(PREFLIGHT_BODY))
            if method != "POST":
                raise InvalidMethodError(method)

            payload = self._parse_body(body)
            endpoint = resolve_endpoint(path, self.endpoints, self.route_prefix)
            upstream = await self._forward(endpoint, payload)
            result = self._map_response(endpoint, upstream)

            logger.info(
                f"{endpoint.kind.value} -> {upstream.status_code}",
                endpoint=endpoint.kind.value,
                upstream_status=upstream.status_code,
                status_code=result.status_code,
                duration_ms=round((time.time() - start_time) * 1000, 2),
            )
            return result

        except BaseProxyException as e:
            log = logger.error if e.status_code >= 500 else logger.warning
            log(f"代理请求失败: {e}", path=path, error_code=e.error_code.value)
            return ProxyResult.from_exception(e, self.cors_headers)
        except Exception as e:
            logger.exception(f"代理请求出现未处理异常: {e}", path=path)
            return ProxyResult.internal_error(e, self.cors_headers)

    async def call(
        self, kind: EndpointKind, body: Optional[Mapping[str, Any]] = None
    ) -> ProxyResult:
        """
        内部调用：按端点类型签名转发，返回映射后的结果

        Raises:
            BaseProxyException: 校验、凭证或上游错误
        """
        endpoint = endpoint_for_kind(kind, self.endpoints)
        upstream = await self._forward(endpoint, dict(body or {}))
        return self._map_response(endpoint, upstream)

    async def _forward(
        self, endpoint: ResolvedEndpoint, body: Mapping[str, Any]
    ) -> UpstreamResponse:
        # 本地校验全部在网络调用之前完成
        discriminant = select_discriminant(endpoint, body)
        credentials = await resolve_active_credentials(
            self.credential_provider, self.provider_name
        )
        payload = build_signed_payload(endpoint, credentials, body, discriminant)

        logger.debug(
            f"转发到上游 {endpoint.upstream_path}",
            endpoint=endpoint.kind.value,
            payload=mask_payload(payload),
        )
        return await self.adapter.post_json(endpoint.upstream_path, payload)

    @staticmethod
    def _parse_body(body: RawBody) -> dict[str, Any]:
        if body is None:
            return {}
        if isinstance(body, Mapping):
            return dict(body)

        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError:
                raise InvalidRequestBodyError("body is not valid UTF-8") from None
        if not body.strip():
            return {}

        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidRequestBodyError(f"body is not valid JSON: {e.msg}") from None
        if not isinstance(parsed, dict):
            raise InvalidRequestBodyError("body must be a JSON object")
        return parsed

    def _map_response(
        self, endpoint: ResolvedEndpoint, upstream: UpstreamResponse
    ) -> ProxyResult:
        if not upstream.text.strip():
            return self._result(upstream.status_code, dict(EMPTY_UPSTREAM_BODY))

        try:
            data = upstream.parse_json()
        except ValueError:
            logger.warning(
                "上游返回了非JSON响应",
                endpoint=endpoint.kind.value,
                upstream_status=upstream.status_code,
            )
            return self._result(
                upstream.status_code,
                {"error": "Invalid JSON response", "rawResponse": upstream.text},
            )

        if endpoint.spec.response_shape is ResponseShape.PLN_INQUIRY:
            return self._result(200, normalize_pln_inquiry(data))

        if not upstream.ok:
            logger.warning(
                f"上游返回错误状态 {upstream.status_code}",
                endpoint=endpoint.kind.value,
                upstream_status=upstream.status_code,
            )
        return self._result(upstream.status_code, data)

    def _result(self, status_code: int, body: Any) -> ProxyResult:
        return ProxyResult(status_code, body, dict(self.cors_headers))
