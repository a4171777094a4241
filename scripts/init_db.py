#!/usr/bin/env python3
"""
数据库初始化脚本
- 创建 api_credentials 表
- 写入（或轮换）供应商凭证：同一 (provider, key_name) 只保留一条激活记录
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import update

from core.credentials import KeyName
from core.database import Database
from core.models.credential import APICredential
from core.utils.logger import get_logger, mask_secret, setup_logging

logger = get_logger(__name__)


async def store_credential(
    database: Database, provider: str, key_name: KeyName, value: str
) -> None:
    """写入新凭证并停用旧的激活凭证"""
    async with database.session() as session:
        await session.execute(
            update(APICredential)
            .where(APICredential.provider == provider)
            .where(APICredential.key_name == key_name.value)
            .where(APICredential.is_active.is_(True))
            .values(is_active=False)
        )
        session.add(
            APICredential(
                provider=provider,
                key_name=key_name.value,
                key_value=value,
                is_active=True,
            )
        )
    logger.info(
        f"凭证已写入: {provider}/{key_name.value} = {mask_secret(value)}"
    )


async def init_database(database_url: str, provider: str, username: str, api_key: str):
    database = Database(database_url)
    try:
        await database.create_tables()
        if username:
            await store_credential(database, provider, KeyName.USERNAME, username)
        if api_key:
            await store_credential(database, provider, KeyName.API_KEY, api_key)
    finally:
        await database.close()


def main():
    parser = argparse.ArgumentParser(description="Initialize the credential store")
    parser.add_argument(
        "--database-url",
        default=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./ppob_proxy.db"),
    )
    parser.add_argument("--provider", default="digiflazz")
    parser.add_argument("--username", default=os.getenv("DIGIFLAZZ_USERNAME", ""))
    parser.add_argument("--api-key", default=os.getenv("DIGIFLAZZ_API_KEY", ""))
    args = parser.parse_args()

    setup_logging({"format": "text"})
    asyncio.run(
        init_database(args.database_url, args.provider, args.username, args.api_key)
    )
    print("数据库初始化完成")


if __name__ == "__main__":
    main()
