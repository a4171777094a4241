"""
基于YAML的配置加载器 - Pydantic版本
"""

from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from .config_models import Config
from .exceptions import ConfigurationException, ErrorCode
from .utils.config import load_config, resolve_config_path
from .utils.logger import get_logger

logger = get_logger(__name__)


class YAMLConfigLoader:
    """基于Pydantic的YAML配置加载器"""

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        config: Optional[Config] = None,
    ):
        if config is not None:
            # 直接注入已构建的配置（测试与脚本使用）
            self.config_path: Optional[Path] = None
            self.config = config
        else:
            self.config_path = resolve_config_path(config_path)
            self.config = self._load_and_validate_config()

        self._validate_credential_source()
        self._validate_webhook()

        logger.info(
            f"Config loaded: provider={self.config.provider.name}, "
            f"mode={self.config.provider.mode}, credentials={self.config.credentials.source}"
        )

    def _load_and_validate_config(self) -> Config:
        """加载YAML并用Pydantic校验"""
        try:
            raw = load_config(self.config_path)
        except (FileNotFoundError, ValueError) as e:
            raise ConfigurationException(
                ErrorCode.CONFIG_LOAD_FAILED,
                message=str(e),
                config_path=str(self.config_path),
                cause=e,
            ) from e

        try:
            return Config.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationException(
                ErrorCode.CONFIG_INVALID,
                message=f"配置校验失败: {e.error_count()} 个错误",
                config_path=str(self.config_path),
                details={"errors": e.errors(include_url=False)},
                cause=e,
            ) from e

    def _validate_credential_source(self) -> None:
        """环境变量凭证仅用于本地开发，生产模式下拒绝启动"""
        if (
            self.config.credentials.source == "environment"
            and self.config.provider.mode == "production"
        ):
            raise ConfigurationException(
                ErrorCode.CONFIG_INVALID,
                message="credentials.source=environment 只能在 provider.mode=development 下使用",
                config_path=str(self.config_path) if self.config_path else None,
            )

    def _validate_webhook(self) -> None:
        """启用webhook时必须配置签名密钥"""
        webhook = self.config.webhook
        if webhook.enabled and not webhook.secret:
            raise ConfigurationException(
                ErrorCode.CONFIG_MISSING_REQUIRED,
                message="webhook.enabled=true 时必须配置 webhook.secret",
                config_path=str(self.config_path) if self.config_path else None,
            )

    def get_server_config(self) -> dict[str, Any]:
        """获取服务器配置"""
        return self.config.server.model_dump()

    def get_logging_config(self) -> dict[str, Any]:
        """获取日志配置"""
        return self.config.logging.model_dump()


# 全局配置加载器实例
_yaml_config_loader: Optional[YAMLConfigLoader] = None


def get_yaml_config_loader(
    config_path: Optional[Union[str, Path]] = None,
) -> YAMLConfigLoader:
    """获取全局配置加载器（首次调用时加载）"""
    global _yaml_config_loader
    if _yaml_config_loader is None:
        _yaml_config_loader = YAMLConfigLoader(config_path)
    return _yaml_config_loader


def reset_yaml_config_loader() -> None:
    """重置全局配置加载器（测试使用）"""
    global _yaml_config_loader
    _yaml_config_loader = None
