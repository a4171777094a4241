"""
商品同步服务 - 通过签名转发器拉取 Digiflazz 价格表并写入本地JSON文件
"""

import json
import time
from pathlib import Path
from typing import Any, Dict, List, Union

import aiofiles
import aiofiles.os

from core.exceptions import ProductSyncError
from core.handlers.endpoints import EndpointKind
from core.handlers.proxy_handler import SigningForwarder
from core.utils.logger import get_logger

logger = get_logger(__name__)


class ProductSyncService:
    """价格表同步服务"""

    def __init__(self, forwarder: SigningForwarder, cmd: str = "prepaid"):
        self.forwarder = forwarder
        self.cmd = cmd

    async def fetch_products(self) -> List[Dict[str, Any]]:
        """
        拉取价格表

        Raises:
            ProductSyncError: 上游返回错误或响应中没有商品列表
        """
        result = await self.forwarder.call(EndpointKind.PRICE_LIST, {"cmd": self.cmd})
        if not result.ok:
            raise ProductSyncError(
                f"Digiflazz price list request failed with status {result.status_code}",
                status_code=result.status_code,
            )

        products = result.body.get("data") if isinstance(result.body, dict) else None
        if not isinstance(products, list):
            raise ProductSyncError("Invalid response from Digiflazz API")

        logger.info(f"Received {len(products)} products from Digiflazz", cmd=self.cmd)
        return products

    async def sync(self, output_path: Union[str, Path]) -> int:
        """
        同步商品并写入文件

        Returns:
            写入的商品数量
        """
        start_time = time.time()
        products = await self.fetch_products()

        path = Path(output_path)
        await aiofiles.os.makedirs(path.parent, exist_ok=True)
        # 先写临时文件再替换，避免读到写了一半的文件
        temp_path = path.with_suffix(path.suffix + ".tmp")
        async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(products, ensure_ascii=False, indent=2))
        await aiofiles.os.replace(temp_path, path)

        logger.info(
            f"Successfully synced {len(products)} products from Digiflazz",
            output=str(path),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return len(products)
