"""
内存凭证提供者 - 用于测试和静态配置
"""

from typing import Iterable, Optional

from core.exceptions import AmbiguousCredentialsError

from .base import CredentialProvider, KeyName, ProviderCredential


class InMemoryCredentialProvider(CredentialProvider):
    """基于内存列表的凭证提供者"""

    def __init__(self, records: Optional[Iterable[ProviderCredential]] = None):
        self.records: list[ProviderCredential] = list(records or [])
        # 查询计数，便于测试断言
        self.lookups = 0

    def add(
        self, provider: str, key_name: KeyName, value: str, is_active: bool = True
    ) -> ProviderCredential:
        credential = ProviderCredential(provider, KeyName(key_name), value, is_active)
        self.records.append(credential)
        return credential

    async def get_active(
        self, provider: str, key_name: KeyName
    ) -> Optional[ProviderCredential]:
        self.lookups += 1
        matches = [
            record
            for record in self.records
            if record.provider == provider
            and record.key_name == key_name
            and record.is_active
        ]
        if len(matches) > 1:
            raise AmbiguousCredentialsError(provider, KeyName(key_name).value, len(matches))
        return matches[0] if matches else None
