"""
Provider基础适配器
负责把已签名的payload以 POST JSON 的形式发送到上游
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from core.exceptions import UpstreamUnreachableError
from core.utils.http_client_pool import HTTPClientPool, get_http_pool
from core.utils.logger import get_logger

logger = get_logger(__name__)


def _reject_constant(name: str) -> Any:
    # NaN/Infinity 无法再编码为标准JSON
    raise ValueError(f"non-standard JSON constant: {name}")


@dataclass
class UpstreamResponse:
    """上游原始响应"""

    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def parse_json(self) -> Any:
        """
        解析响应体

        Raises:
            ValueError: 响应体为空、不是合法JSON或含有 NaN/Infinity
        """
        if not self.text.strip():
            raise ValueError("empty response body")
        return json.loads(self.text, parse_constant=_reject_constant)


class BaseAdapter:
    """Provider适配器基类"""

    def __init__(
        self,
        provider_name: str,
        base_url: str,
        pool: Optional[HTTPClientPool] = None,
        default_headers: Optional[Dict[str, str]] = None,
    ):
        """
        初始化适配器

        Args:
            provider_name: Provider名称
            base_url: 上游基础URL
            pool: HTTP连接池，默认使用全局连接池
            default_headers: 每个请求附带的请求头
        """
        self.provider_name = provider_name
        self.base_url = base_url.rstrip("/")
        self.pool = pool or get_http_pool()
        self.default_headers = {"Content-Type": "application/json"}
        self.default_headers.update(default_headers or {})

        logger.info(f"初始化{provider_name}适配器: {self.base_url}")

    def build_url(self, sub_path: str) -> str:
        return f"{self.base_url}/{sub_path.lstrip('/')}"

    async def post_json(self, sub_path: str, payload: Dict[str, Any]) -> UpstreamResponse:
        """
        发送 POST JSON 请求，任何HTTP状态都原样返回

        Raises:
            UpstreamUnreachableError: 网络错误或超时，没有拿到任何响应
        """
        url = self.build_url(sub_path)
        try:
            response = await self.pool.post(
                url,
                content=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                headers=self.default_headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"{self.provider_name} 上游不可达: {url}: {e}")
            raise UpstreamUnreachableError(url, e) from e

        return UpstreamResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    async def close(self):
        """关闭连接池"""
        await self.pool.close_all()
