"""配置系统测试"""

import sys
from pathlib import Path

import pytest

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config_models import Config, Server
from core.exceptions import ConfigurationException
from core.utils.config import get_config_value, load_config
from core.yaml_config import YAMLConfigLoader


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """YAML加载与环境变量替换测试"""

    def test_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_DIGIFLAZZ_URL", "https://example.test")
        path = write_config(
            tmp_path,
            'provider:\n  base_url: "${TEST_DIGIFLAZZ_URL}"\n  name: "${TEST_UNSET_NAME:digiflazz}"\n',
        )
        config = load_config(path)
        assert config["provider"]["base_url"] == "https://example.test"
        assert config["provider"]["name"] == "digiflazz"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, "- a\n- b\n"))

    def test_get_config_value(self):
        config = {"server": {"port": 8888}}
        assert get_config_value(config, "server.port") == 8888
        assert get_config_value(config, "server.host", "0.0.0.0") == "0.0.0.0"

    def test_example_config_is_valid(self):
        loader = YAMLConfigLoader(project_root / "config" / "example.yaml")
        assert loader.config.server.route_prefix == "/digiflazz-proxy"
        assert loader.config.provider.discriminants["price-list"] == "pricelist"


class TestConfigModels:
    """配置模型测试"""

    def test_defaults(self):
        config = Config()
        assert config.provider.base_url == "https://api.digiflazz.com"
        assert config.provider.mode == "production"
        assert config.credentials.source == "database"
        assert config.server.cors.allow_origin == "*"

    @pytest.mark.parametrize(
        "value, expected",
        [("digiflazz-proxy", "/digiflazz-proxy"), ("/api/", "/api"), ("/", ""), ("", "")],
    )
    def test_route_prefix_normalized(self, value, expected):
        assert Server(route_prefix=value).route_prefix == expected


class TestYAMLConfigLoader:
    """配置加载器校验测试"""

    def test_invalid_config(self, tmp_path):
        path = write_config(tmp_path, "credentials:\n  source: vault\n")
        with pytest.raises(ConfigurationException) as exc_info:
            YAMLConfigLoader(path)
        assert exc_info.value.details["config_path"] == str(path)

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationException):
            YAMLConfigLoader(write_config(tmp_path, "server: [unclosed\n"))

    def test_environment_credentials_rejected_in_production(self):
        config = Config.model_validate({"credentials": {"source": "environment"}})
        with pytest.raises(ConfigurationException):
            YAMLConfigLoader(config=config)

    def test_environment_credentials_allowed_in_development(self):
        config = Config.model_validate(
            {"provider": {"mode": "development"}, "credentials": {"source": "environment"}}
        )
        assert YAMLConfigLoader(config=config).config.credentials.source == "environment"

    def test_webhook_requires_secret(self):
        config = Config.model_validate({"webhook": {"enabled": True}})
        with pytest.raises(ConfigurationException):
            YAMLConfigLoader(config=config)


if __name__ == "__main__":
    pytest.main([__file__])
