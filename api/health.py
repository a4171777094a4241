"""
Health check API endpoints
健康检查API接口
"""

import time

from fastapi import APIRouter

from core.yaml_config import YAMLConfigLoader


def create_health_router(config_loader: YAMLConfigLoader) -> APIRouter:
    """创建健康检查相关的API路由"""

    router = APIRouter(tags=["health"])
    config = config_loader.config

    @router.get("/health")
    async def health_check():
        """系统健康检查"""
        return {
            "status": "healthy",
            "name": config.system.name,
            "version": config.system.version,
            "timestamp": int(time.time()),
            "provider": config.provider.name,
            "mode": config.provider.mode,
            "credentials_source": config.credentials.source,
            "route_prefix": config.server.route_prefix or "/",
            "webhook_enabled": config.webhook.enabled,
        }

    return router
