"""
FastAPI exception middleware for unified error handling
"""

import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.exceptions import BaseProxyException
from core.utils.logger import get_logger

logger = get_logger(__name__)


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """统一异常处理中间件：任何未捕获的异常都转换为JSON错误响应，不影响其它并发请求"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            return await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            return self._handle_exception(request, e, duration_ms)

    def _handle_exception(
        self, request: Request, exc: Exception, duration_ms: float
    ) -> JSONResponse:
        """处理异常并返回统一格式的错误响应"""
        if isinstance(exc, BaseProxyException):
            status_code = exc.status_code
            content = exc.to_envelope()
        else:
            status_code = 500
            content = {"message": "Internal Server Error", "error": str(exc)}

        self._log_error(request, exc, status_code, duration_ms)
        return JSONResponse(status_code=status_code, content=content)

    @staticmethod
    def _log_error(
        request: Request, exc: Exception, status_code: int, duration_ms: float
    ) -> None:
        """记录错误日志"""
        logger.error(
            f"Request failed: {request.method} {request.url.path}",
            exception=str(exc),
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
            request_id=getattr(request.state, "request_id", None),
            remote_addr=request.client.host if request.client else None,
            exc_info=not isinstance(exc, BaseProxyException),
        )
