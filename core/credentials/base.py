"""
供应商凭证基础定义
CredentialProvider 是可注入的只读能力，代理在每次请求时查询激活的凭证
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.exceptions import MissingCredentialsError
from core.utils.logger import get_logger

logger = get_logger(__name__)


class KeyName(str, Enum):
    """凭证键名"""

    USERNAME = "username"
    API_KEY = "apiKey"


@dataclass(frozen=True)
class ProviderCredential:
    """单条供应商凭证记录"""

    provider: str
    key_name: KeyName
    value: str
    is_active: bool = True

    def __repr__(self) -> str:
        # 不在repr中暴露凭证值
        return (
            f"ProviderCredential(provider={self.provider!r}, key_name={self.key_name.value!r}, "
            f"is_active={self.is_active})"
        )


@dataclass(frozen=True)
class ActiveCredentials:
    """一次请求使用的用户名和API密钥"""

    username: str
    api_key: str

    def __repr__(self) -> str:
        return f"ActiveCredentials(username={self.username!r}, api_key='****')"


class CredentialProvider(ABC):
    """凭证提供者接口"""

    @abstractmethod
    async def get_active(
        self, provider: str, key_name: KeyName
    ) -> Optional[ProviderCredential]:
        """
        获取当前激活的凭证

        Args:
            provider: 供应商名称
            key_name: 凭证键名

        Returns:
            唯一的激活凭证；不存在时返回None

        Raises:
            AmbiguousCredentialsError: 存在多条激活凭证
        """

    async def close(self) -> None:
        """释放底层资源（默认无操作）"""


async def resolve_active_credentials(
    credential_provider: CredentialProvider, provider: str
) -> ActiveCredentials:
    """
    解析用户名和API密钥，任一缺失即失败，不做任何猜测

    Raises:
        MissingCredentialsError: 缺少或存在多个激活凭证
    """
    values: dict[KeyName, str] = {}
    for key_name in (KeyName.USERNAME, KeyName.API_KEY):
        credential = await credential_provider.get_active(provider, key_name)
        if credential is None or not credential.value:
            logger.error(
                "Missing active credential",
                provider=provider,
                key_name=key_name.value,
            )
            raise MissingCredentialsError(provider, key_name.value)
        values[key_name] = credential.value

    return ActiveCredentials(
        username=values[KeyName.USERNAME], api_key=values[KeyName.API_KEY]
    )
