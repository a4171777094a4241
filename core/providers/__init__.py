"""
Provider适配器模块
提供上游PPOB聚合商的HTTP接口
"""

from .base import BaseAdapter, UpstreamResponse
from .digiflazz import DIGIFLAZZ_BASE_URL, DigiflazzAdapter

__all__ = [
    "BaseAdapter",
    "UpstreamResponse",
    "DigiflazzAdapter",
    "DIGIFLAZZ_BASE_URL",
]
