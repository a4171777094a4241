"""
中间件模块
"""

from .cors import CORSHeadersMiddleware
from .exception_middleware import ExceptionHandlerMiddleware
from .logging import LoggingMiddleware

__all__ = ["CORSHeadersMiddleware", "ExceptionHandlerMiddleware", "LoggingMiddleware"]
