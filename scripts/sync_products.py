#!/usr/bin/env python3
"""
商品同步脚本
通过签名转发器拉取 Digiflazz 价格表并保存为JSON文件
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.credentials import create_credential_provider
from core.exceptions import BaseProxyException
from core.handlers.proxy_handler import SigningForwarder
from core.providers.digiflazz import DigiflazzAdapter
from core.services.product_sync import ProductSyncService
from core.utils.http_client_pool import HTTPClientPool
from core.utils.logger import get_logger, setup_logging
from core.yaml_config import YAMLConfigLoader

logger = get_logger(__name__)


async def run_sync(config_path: str, output: str, cmd: str) -> int:
    config_loader = YAMLConfigLoader(config_path)
    config = config_loader.config
    setup_logging(config_loader.get_logging_config())

    credential_provider = create_credential_provider(config)
    adapter = DigiflazzAdapter(
        base_url=config.provider.base_url,
        pool=HTTPClientPool(timeout=config.provider.timeout),
        provider_name=config.provider.name,
    )
    forwarder = SigningForwarder(
        credential_provider,
        adapter,
        provider_name=config.provider.name,
        discriminant_overrides=config.provider.discriminants,
    )

    try:
        return await ProductSyncService(forwarder, cmd=cmd).sync(output)
    finally:
        await adapter.close()
        await credential_provider.close()


def main():
    parser = argparse.ArgumentParser(description="Sync Digiflazz products")
    parser.add_argument("--config", default=None, help="Path to config YAML")
    parser.add_argument(
        "--output", default="data/products.json", help="Output JSON file"
    )
    parser.add_argument(
        "--cmd", default="prepaid", choices=["prepaid", "pasca"], help="Price list type"
    )
    args = parser.parse_args()

    try:
        count = asyncio.run(run_sync(args.config, args.output, args.cmd))
    except BaseProxyException as e:
        logger.error(f"Error syncing products: {e.message}", details=e.details)
        sys.exit(1)

    print(f"Successfully synced {count} products from Digiflazz -> {args.output}")


if __name__ == "__main__":
    main()
