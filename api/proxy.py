"""
PPOB proxy API endpoints
签名转发API接口
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from core.handlers.proxy_handler import SigningForwarder

# 所有方法都进入转发器，由转发器统一返回 405
PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def create_proxy_router(forwarder: SigningForwarder, route_prefix: str = "") -> APIRouter:
    """创建签名转发路由"""

    router = APIRouter(tags=["proxy"])

    async def forward(request: Request) -> JSONResponse:
        body = await request.body()
        result = await forwarder.handle(request.method, request.url.path, body)
        return JSONResponse(
            status_code=result.status_code,
            content=result.body,
            headers=result.headers,
        )

    if route_prefix:
        router.add_api_route(route_prefix, forward, methods=PROXY_METHODS)
    router.add_api_route(
        f"{route_prefix}/{{path:path}}", forward, methods=PROXY_METHODS
    )

    return router
