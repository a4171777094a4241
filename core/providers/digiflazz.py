"""
Digiflazz Provider适配器
Digiflazz 是印尼的PPOB聚合商，所有接口均为 POST JSON，签名在payload中
"""

from typing import Optional

from core.utils.http_client_pool import HTTPClientPool

from .base import BaseAdapter

DIGIFLAZZ_BASE_URL = "https://api.digiflazz.com"


class DigiflazzAdapter(BaseAdapter):
    """Digiflazz适配器"""

    def __init__(
        self,
        base_url: str = DIGIFLAZZ_BASE_URL,
        pool: Optional[HTTPClientPool] = None,
        provider_name: str = "digiflazz",
    ):
        super().__init__(provider_name, base_url or DIGIFLAZZ_BASE_URL, pool=pool)
