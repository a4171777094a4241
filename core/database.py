"""
数据库连接和会话管理
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from core.models.base import Base
from core.utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """异步数据库引擎与会话工厂"""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine: AsyncEngine = self._create_engine(database_url)
        self.session_maker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @staticmethod
    def _create_engine(database_url: str) -> AsyncEngine:
        echo = os.getenv("DEBUG", "false").lower() == "true"
        if "sqlite" in database_url:
            # SQLite特殊配置，内存库需要共享同一个连接
            return create_async_engine(
                database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=echo,
            )
        # PostgreSQL等
        return create_async_engine(database_url, pool_pre_ping=True, echo=echo)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """获取数据库会话上下文管理器"""
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """创建所有表（开发与测试使用，生产环境应使用迁移）"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("数据库表已创建")

    async def close(self) -> None:
        """关闭数据库连接"""
        await self.engine.dispose()
        logger.info("数据库连接已关闭")

