"""
环境变量凭证提供者 - 仅限本地开发

读取 DIGIFLAZZ_USERNAME / DIGIFLAZZ_API_KEY。配置加载器保证它不会在
provider.mode=production 下被启用。
"""

import os
from typing import Mapping, Optional

from core.utils.logger import get_logger

from .base import CredentialProvider, KeyName, ProviderCredential

logger = get_logger(__name__)

ENV_VARS = {
    KeyName.USERNAME: "DIGIFLAZZ_USERNAME",
    KeyName.API_KEY: "DIGIFLAZZ_API_KEY",
}


class EnvironmentCredentialProvider(CredentialProvider):
    """开发用凭证提供者"""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = environ if environ is not None else os.environ
        logger.warning("Using development credentials from environment variables")

    async def get_active(
        self, provider: str, key_name: KeyName
    ) -> Optional[ProviderCredential]:
        key = KeyName(key_name)
        value = self.environ.get(ENV_VARS[key])
        if not value:
            return None
        return ProviderCredential(provider=provider, key_name=key, value=value)
