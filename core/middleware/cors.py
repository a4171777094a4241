"""
CORS中间件 - 每个响应（包括错误响应）都附带固定的CORS头，OPTIONS 预检直接返回200
"""

from typing import Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.handlers.proxy_handler import PREFLIGHT_BODY
from core.handlers.result import build_cors_headers


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """固定CORS头中间件"""

    def __init__(self, app, headers: Optional[Dict[str, str]] = None):
        super().__init__(app)
        self.headers = headers or build_cors_headers()

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return JSONResponse(
                status_code=200, content=dict(PREFLIGHT_BODY), headers=self.headers
            )

        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers[name] = value
        return response
