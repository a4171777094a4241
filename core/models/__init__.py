"""数据模型模块 - SQLAlchemy data models"""

# 导入所有模型以确保它们被注册到Base.metadata
from .base import Base
from .credential import APICredential

__all__ = [
    "Base",
    "APICredential",
]
