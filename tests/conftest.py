"""测试公共工具：模拟上游、凭证与转发器"""

import json
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

import httpx
import pytest

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.credentials import InMemoryCredentialProvider, KeyName
from core.handlers.proxy_handler import SigningForwarder
from core.providers.digiflazz import DigiflazzAdapter
from core.utils.http_client_pool import HTTPClientPool
from core.utils.logger import setup_logging

TEST_USERNAME = "U"
TEST_API_KEY = "K"
UPSTREAM_BASE_URL = "https://api.digiflazz.test"


class MockUpstream:
    """记录所有上游请求，按设定返回响应"""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ):
        self.requests: List[httpx.Request] = []
        self.status_code = status_code
        self.json_body = {"data": []} if json_body is None else json_body
        self.text = text
        self.handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def payload(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def make_credentials(username: Optional[str] = TEST_USERNAME, api_key: Optional[str] = TEST_API_KEY):
    provider = InMemoryCredentialProvider()
    if username is not None:
        provider.add("digiflazz", KeyName.USERNAME, username)
    if api_key is not None:
        provider.add("digiflazz", KeyName.API_KEY, api_key)
    return provider


def make_forwarder(
    upstream: MockUpstream,
    credentials: Optional[InMemoryCredentialProvider] = None,
    route_prefix: str = "/digiflazz-proxy",
    **kwargs: Any,
) -> SigningForwarder:
    pool = HTTPClientPool(transport=upstream.transport())
    adapter = DigiflazzAdapter(base_url=UPSTREAM_BASE_URL, pool=pool)
    return SigningForwarder(
        credentials if credentials is not None else make_credentials(),
        adapter,
        route_prefix=route_prefix,
        **kwargs,
    )


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    setup_logging({"level": "DEBUG", "format": "text"})


@pytest.fixture
def upstream() -> MockUpstream:
    return MockUpstream()
