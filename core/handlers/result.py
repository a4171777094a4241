"""
代理结果 - 与传输层无关的 {status_code, body, headers}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.config_models import Cors
from core.exceptions import BaseProxyException


def build_cors_headers(cors: Optional[Cors] = None) -> Dict[str, str]:
    """构建每个响应都要附带的CORS头"""
    cors = cors or Cors()
    return {
        "Access-Control-Allow-Origin": cors.allow_origin,
        "Access-Control-Allow-Headers": cors.allow_headers,
        "Access-Control-Allow-Methods": cors.allow_methods,
    }


@dataclass
class ProxyResult:
    status_code: int
    body: Any
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_exception(
        cls, exc: BaseProxyException, headers: Optional[Dict[str, str]] = None
    ) -> "ProxyResult":
        return cls(exc.status_code, exc.to_envelope(), dict(headers or {}))

    @classmethod
    def internal_error(
        cls, exc: Exception, headers: Optional[Dict[str, str]] = None
    ) -> "ProxyResult":
        return cls(
            500,
            {"message": "Internal Server Error", "error": str(exc)},
            dict(headers or {}),
        )
