"""
日志中间件 - 自动记录API请求和响应
"""

import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.utils.logger import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

# 日志中不输出的请求头
SENSITIVE_HEADERS = {"authorization", "cookie", "x-digiflazz-signature", "x-hub-signature"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """API请求/响应日志中间件"""

    def __init__(self, app, skip_paths: Optional[set] = None):
        super().__init__(app)
        self.skip_paths = skip_paths or {"/health", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # 沿用调用方传入的请求ID，否则生成新的
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        if request.url.path in self.skip_paths:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        bind_request_context(request_id=request_id)
        start_time = time.time()

        logger.info(
            f"API Request: {request.method} {request.url.path}",
            method=request.method,
            path=request.url.path,
            client_ip=self._get_client_ip(request),
            headers=self._filter_headers(dict(request.headers)),
        )

        try:
            response = await call_next(request)
            process_time = time.time() - start_time

            if response.status_code >= 500:
                log = logger.error
            elif response.status_code >= 400:
                log = logger.warning
            else:
                log = logger.info
            log(
                f"API Response: {response.status_code} - {process_time:.4f}s",
                status_code=response.status_code,
                process_time=round(process_time, 4),
            )

            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()

    @staticmethod
    def _filter_headers(headers: dict) -> dict:
        return {
            key: "[FILTERED]" if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }

    @staticmethod
    def _get_client_ip(request: Request) -> Optional[str]:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip
        return request.client.host if request.client else None
