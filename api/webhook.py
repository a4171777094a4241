"""
Webhook API endpoints
Digiflazz 交易回调接口
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from core.exceptions import BaseProxyException
from core.utils.logger import get_logger
from core.webhook import WebhookHandler

logger = get_logger(__name__)


def create_webhook_router(handler: WebhookHandler, path: str = "/payload") -> APIRouter:
    """创建回调接收路由"""

    router = APIRouter(tags=["webhook"])

    @router.post(path)
    async def receive_webhook(request: Request):
        """接收 Digiflazz 交易回调"""
        raw_body = await request.body()
        try:
            return await handler.process(raw_body, request.headers)
        except BaseProxyException as e:
            logger.warning(f"Webhook rejected: {e.message}", status_code=e.status_code)
            return JSONResponse(status_code=e.status_code, content=e.to_envelope())

    return router
