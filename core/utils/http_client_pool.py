#!/usr/bin/env python3
"""
HTTP客户端连接池管理器
按上游 base URL 复用 httpx.AsyncClient，减少连接建立时间
"""

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from .logger import get_logger

logger = get_logger(__name__)


class HTTPClientPool:
    """HTTP客户端连接池"""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http2: bool = True,
    ):
        self.clients: Dict[str, httpx.AsyncClient] = {}
        self.lock = asyncio.Lock()
        # 测试时注入 httpx.MockTransport
        self.transport = transport
        self.http2 = http2

        # 连接池配置
        self.limits = httpx.Limits(
            max_keepalive_connections=20,
            max_connections=100,
            keepalive_expiry=30.0,
        )

        # 超时配置，没有额外的重试或取消逻辑
        self.timeout = httpx.Timeout(timeout, connect=10.0)

    def _get_base_url_key(self, url: str) -> str:
        """从完整URL提取base URL作为key"""
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}"

    async def get_client(self, url: str) -> httpx.AsyncClient:
        """获取或创建HTTP客户端"""
        base_url_key = self._get_base_url_key(url)

        async with self.lock:
            if base_url_key not in self.clients:
                kwargs: dict[str, Any] = {
                    "base_url": base_url_key,
                    "timeout": self.timeout,
                    "limits": self.limits,
                    "follow_redirects": True,
                }
                if self.transport is not None:
                    kwargs["transport"] = self.transport
                else:
                    kwargs["http2"] = self.http2
                self.clients[base_url_key] = httpx.AsyncClient(**kwargs)
                logger.info(f"创建新的HTTP客户端连接池: {base_url_key}")

            return self.clients[base_url_key]

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """使用连接池发送HTTP请求"""
        client = await self.get_client(url)
        return await client.request(method, url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        """POST请求"""
        return await self.request("POST", url, **kwargs)

    async def close_all(self):
        """关闭所有客户端连接"""
        async with self.lock:
            for base_url, client in self.clients.items():
                try:
                    await client.aclose()
                    logger.info(f"关闭HTTP客户端连接池: {base_url}")
                except Exception as e:
                    logger.warning(f"关闭客户端连接池失败 {base_url}: {e}")
            self.clients.clear()

    def get_stats(self) -> Dict[str, Any]:
        """获取连接池统计信息"""
        return {
            "active_clients": len(self.clients),
            "base_urls": list(self.clients.keys()),
        }


# 全局连接池实例
_global_pool: Optional[HTTPClientPool] = None


def get_http_pool() -> HTTPClientPool:
    """获取全局HTTP连接池实例"""
    global _global_pool
    if _global_pool is None:
        _global_pool = HTTPClientPool()
        logger.info("初始化全局HTTP连接池")
    return _global_pool

