"""商品同步测试"""

import hashlib
import json
import sys
from pathlib import Path

import pytest

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from conftest import MockUpstream, make_credentials, make_forwarder

from core.exceptions import MissingCredentialsError, ProductSyncError
from core.services.product_sync import ProductSyncService

PRODUCTS = [
    {"product_name": "XL 10.000", "buyer_sku_code": "xld10", "price": 10200},
    {"product_name": "Telkomsel 5.000", "buyer_sku_code": "tsel5", "price": 5350},
]


class TestProductSyncService:
    """价格表同步测试"""

    @pytest.mark.asyncio
    async def test_sync_writes_products(self, tmp_path):
        upstream = MockUpstream(json_body={"data": PRODUCTS})
        service = ProductSyncService(make_forwarder(upstream))
        output = tmp_path / "nested" / "products.json"

        count = await service.sync(output)

        assert count == 2
        assert json.loads(output.read_text(encoding="utf-8")) == PRODUCTS
        payload = upstream.payload()
        assert payload["cmd"] == "prepaid"
        assert payload["sign"] == hashlib.md5(b"UKpricelist").hexdigest()

    @pytest.mark.asyncio
    async def test_sync_postpaid(self, tmp_path):
        upstream = MockUpstream(json_body={"data": []})
        service = ProductSyncService(make_forwarder(upstream), cmd="pasca")
        assert await service.sync(tmp_path / "products.json") == 0
        assert upstream.payload()["cmd"] == "pasca"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"data": {"rc": "41"}}, {"message": "x"}])
    async def test_invalid_response(self, tmp_path, body):
        service = ProductSyncService(make_forwarder(MockUpstream(json_body=body)))
        output = tmp_path / "products.json"
        with pytest.raises(ProductSyncError):
            await service.sync(output)
        assert not output.exists()

    @pytest.mark.asyncio
    async def test_upstream_error_status(self, tmp_path):
        upstream = MockUpstream(status_code=400, json_body={"data": {"rc": "41"}})
        service = ProductSyncService(make_forwarder(upstream))
        with pytest.raises(ProductSyncError) as exc_info:
            await service.sync(tmp_path / "products.json")
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_credentials(self, tmp_path):
        upstream = MockUpstream(json_body={"data": PRODUCTS})
        service = ProductSyncService(make_forwarder(upstream, make_credentials(api_key=None)))
        with pytest.raises(MissingCredentialsError):
            await service.sync(tmp_path / "products.json")
        assert upstream.calls == 0


if __name__ == "__main__":
    pytest.main([__file__])
