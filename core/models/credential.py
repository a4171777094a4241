"""
Provider credential data models
供应商凭证数据模型
"""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String
from sqlalchemy.sql import func

from .base import Base


class APICredential(Base):
    """供应商API凭证表 - 每个 (provider, key_name) 至多一条激活记录"""

    __tablename__ = "api_credentials"

    id = Column(Integer, primary_key=True)
    provider = Column(String(50), nullable=False)  # e.g. "digiflazz"
    key_name = Column(String(50), nullable=False)  # username / apiKey
    key_value = Column(String(500), nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_api_credentials_lookup", "provider", "key_name", "is_active"),
    )

    def __repr__(self):
        return (
            f"<APICredential(provider='{self.provider}', key_name='{self.key_name}', "
            f"is_active={self.is_active})>"
        )
