#!/usr/bin/env python3
"""
PPOB Signing Proxy - Digiflazz 凭证签名转发代理
"""

import argparse
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI

# 添加项目根目录到 Python 路径（需在导入 api/core 之前）
sys.path.insert(0, str(Path(__file__).parent))

from api.health import create_health_router
from api.proxy import create_proxy_router
from api.webhook import create_webhook_router
from core.credentials import CredentialProvider, create_credential_provider
from core.handlers.proxy_handler import SigningForwarder
from core.handlers.result import build_cors_headers
from core.middleware.cors import CORSHeadersMiddleware
from core.middleware.exception_middleware import ExceptionHandlerMiddleware
from core.middleware.logging import LoggingMiddleware
from core.providers.digiflazz import DigiflazzAdapter
from core.utils.http_client_pool import HTTPClientPool
from core.utils.logger import get_logger, is_logging_configured, setup_logging, shutdown_logging
from core.webhook import InMemoryTransactionSink, TransactionEventSink, WebhookHandler, WebhookVerifier
from core.yaml_config import YAMLConfigLoader, get_yaml_config_loader

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    config = app.state.config_loader.config
    logger.info(
        f"{config.system.name} {config.system.version} started",
        route_prefix=config.server.route_prefix or "/",
        upstream=config.provider.base_url,
    )

    yield

    # 关闭阶段
    try:
        await app.state.forwarder.adapter.close()
        await app.state.credential_provider.close()
        logger.info(f"{config.system.name} shutdown complete")
    finally:
        if app.state.owns_logging:
            shutdown_logging()


def create_app(
    config_loader: Optional[YAMLConfigLoader] = None,
    credential_provider: Optional[CredentialProvider] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    webhook_sink: Optional[TransactionEventSink] = None,
) -> FastAPI:
    """
    创建FastAPI应用

    Args:
        config_loader: 配置加载器，默认加载全局配置
        credential_provider: 凭证提供者，默认按配置创建
        transport: 上游HTTP传输层（测试时注入 httpx.MockTransport）
        webhook_sink: 回调事件存储，默认使用内存实现
    """
    config_loader = config_loader or get_yaml_config_loader()
    config = config_loader.config

    # 设置日志系统（测试或脚本已配置时不覆盖）
    owns_logging = not is_logging_configured()
    if owns_logging:
        setup_logging(config_loader.get_logging_config(), config.logging.file)

    credential_provider = credential_provider or create_credential_provider(config)
    cors_headers = build_cors_headers(config.server.cors)

    pool = HTTPClientPool(timeout=config.provider.timeout, transport=transport)
    adapter = DigiflazzAdapter(
        base_url=config.provider.base_url, pool=pool, provider_name=config.provider.name
    )
    forwarder = SigningForwarder(
        credential_provider,
        adapter,
        provider_name=config.provider.name,
        route_prefix=config.server.route_prefix,
        discriminant_overrides=config.provider.discriminants,
        cors_headers=cors_headers,
    )

    # 创建FastAPI应用
    app = FastAPI(
        title=config.system.name,
        description="Credential-signing forwarding proxy for the Digiflazz PPOB API",
        version=config.system.version,
        lifespan=lifespan,
    )
    app.state.config_loader = config_loader
    app.state.credential_provider = credential_provider
    app.state.forwarder = forwarder
    app.state.owns_logging = owns_logging

    # 添加中间件（后添加的在外层，CORS放在最外层保证错误响应也带CORS头）
    app.add_middleware(ExceptionHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CORSHeadersMiddleware, headers=cors_headers)

    # 注册API路由模块
    app.include_router(create_health_router(config_loader))

    if config.webhook.enabled:
        sink = webhook_sink or InMemoryTransactionSink(config.webhook.max_records)
        handler = WebhookHandler(WebhookVerifier(config.webhook.secret), sink)
        app.state.webhook_handler = handler
        app.include_router(create_webhook_router(handler, config.webhook.path))
        logger.info(f"Webhook receiver enabled at {config.webhook.path}")

    # 转发路由必须最后注册，它会匹配前缀下的任意路径
    app.include_router(create_proxy_router(forwarder, config.server.route_prefix))

    return app


def main():
    """主函数"""
    parser = argparse.ArgumentParser(description="PPOB Signing Proxy")
    parser.add_argument("--config", default=None, help="Path to config YAML")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")

    args = parser.parse_args()

    config_loader = get_yaml_config_loader(args.config)
    server = config_loader.config.server
    host = args.host or server.host
    port = args.port or server.port

    app = create_app(config_loader)

    print(
        f"""
{config_loader.config.system.name} Starting...
Upstream: {config_loader.config.provider.base_url}
Server: http://{host}:{port}{server.route_prefix}
    """
    )

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=None,  # 使用我们自己的日志配置
    )


if __name__ == "__main__":
    main()
