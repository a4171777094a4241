"""配置管理模块"""

import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

from .logger import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent


def resolve_config_path(config_path: Optional[Union[str, Path]] = None) -> Path:
    """
    确定配置文件路径

    优先级: 显式参数 > PPOB_PROXY_CONFIG 环境变量 > config/config.yaml > config/example.yaml
    """
    if config_path is not None:
        return Path(config_path)

    env_path = os.getenv("PPOB_PROXY_CONFIG")
    if env_path:
        return Path(env_path)

    default_path = PROJECT_ROOT / "config" / "config.yaml"
    if default_path.exists():
        return default_path

    # 如果 config.yaml 不存在，尝试 example.yaml
    example_path = PROJECT_ROOT / "config" / "example.yaml"
    logger.warning(f"配置文件 config/config.yaml 不存在，使用示例配置 {example_path}")
    return example_path


def load_config(config_path: Optional[Union[str, Path]] = None) -> dict[str, Any]:
    """
    加载配置文件

    Args:
        config_path: 配置文件路径，默认为 config/config.yaml

    Returns:
        配置字典（环境变量已替换）
    """
    # 加载环境变量
    load_dotenv()

    path = resolve_config_path(config_path)

    # 读取配置文件
    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"配置文件未找到: {path}") from None
    except yaml.YAMLError as e:
        raise ValueError(f"配置文件格式错误: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"配置文件顶层必须是映射: {path}")

    # 环境变量替换
    return _replace_env_vars(config)  # type: ignore[no-any-return]


def _replace_env_vars(obj: Any) -> Any:
    """
    递归替换配置中的环境变量占位符

    Args:
        obj: 配置对象

    Returns:
        替换后的配置对象
    """
    if isinstance(obj, dict):
        return {key: _replace_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_replace_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        # 提取环境变量名 ${VAR_NAME} -> VAR_NAME
        env_var = obj[2:-1]
        default_value = None

        # 支持默认值 ${VAR_NAME:default_value}
        if ":" in env_var:
            env_var, default_value = env_var.split(":", 1)

        value = os.getenv(env_var, default_value)
        if value is None:
            logger.warning(f"环境变量 {env_var} 未设置，使用占位符")
            return obj
        return value
    else:
        return obj


def get_config_value(config: dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    获取嵌套配置值

    Args:
        config: 配置字典
        key_path: 配置路径，如 'server.port'
        default: 默认值

    Returns:
        配置值
    """
    keys = key_path.split(".")
    value: Any = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
