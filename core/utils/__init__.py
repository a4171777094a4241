"""工具函数模块"""

from .config import load_config
from .logger import get_logger, mask_payload, mask_secret, setup_logging

__all__ = ["load_config", "setup_logging", "get_logger", "mask_secret", "mask_payload"]
