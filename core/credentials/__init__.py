"""
供应商凭证模块
"""

from .base import (
    ActiveCredentials,
    CredentialProvider,
    KeyName,
    ProviderCredential,
    resolve_active_credentials,
)
from .database import DatabaseCredentialProvider
from .environment import EnvironmentCredentialProvider
from .factory import create_credential_provider
from .memory import InMemoryCredentialProvider

__all__ = [
    "ActiveCredentials",
    "CredentialProvider",
    "KeyName",
    "ProviderCredential",
    "resolve_active_credentials",
    "InMemoryCredentialProvider",
    "DatabaseCredentialProvider",
    "EnvironmentCredentialProvider",
    "create_credential_provider",
]
