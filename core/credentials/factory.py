"""
根据配置创建凭证提供者
"""

from core.config_models import Config
from core.database import Database

from .base import CredentialProvider, KeyName, ProviderCredential
from .database import DatabaseCredentialProvider
from .environment import EnvironmentCredentialProvider
from .memory import InMemoryCredentialProvider


def create_credential_provider(config: Config) -> CredentialProvider:
    """
    从配置创建凭证提供者

    Args:
        config: 已校验的全局配置

    Returns:
        凭证提供者实例
    """
    source = config.credentials.source

    if source == "memory":
        return InMemoryCredentialProvider(
            ProviderCredential(
                provider=config.provider.name,
                key_name=KeyName(record.key_name),
                value=record.value,
                is_active=record.is_active,
            )
            for record in config.credentials.records
        )

    if source == "environment":
        return EnvironmentCredentialProvider()

    return DatabaseCredentialProvider(
        Database(config.credentials.database_url), owns_database=True
    )
