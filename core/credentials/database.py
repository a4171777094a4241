"""
数据库凭证提供者 - 从 api_credentials 表读取激活凭证
"""

from typing import Optional

from sqlalchemy import select

from core.database import Database
from core.exceptions import AmbiguousCredentialsError
from core.models.credential import APICredential
from core.utils.logger import get_logger

from .base import CredentialProvider, KeyName, ProviderCredential

logger = get_logger(__name__)


class DatabaseCredentialProvider(CredentialProvider):
    """基于SQLAlchemy异步会话的凭证提供者（只读）"""

    def __init__(self, database: Database, owns_database: bool = False):
        self.database = database
        self.owns_database = owns_database

    async def get_active(
        self, provider: str, key_name: KeyName
    ) -> Optional[ProviderCredential]:
        key = KeyName(key_name)
        stmt = (
            select(APICredential.key_value)
            .where(APICredential.provider == provider)
            .where(APICredential.key_name == key.value)
            .where(APICredential.is_active.is_(True))
        )

        async with self.database.session() as session:
            result = await session.execute(stmt)
            values = list(result.scalars().all())

        if len(values) > 1:
            logger.error(
                f"Ambiguous credentials: {len(values)} active rows",
                provider=provider,
                key_name=key.value,
            )
            raise AmbiguousCredentialsError(provider, key.value, len(values))
        if not values:
            return None
        return ProviderCredential(provider=provider, key_name=key, value=values[0])

    async def close(self) -> None:
        if self.owns_database:
            await self.database.close()
