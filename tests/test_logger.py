"""日志系统测试"""

import json
import logging
import sys
from pathlib import Path

import pytest

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.utils.logger import (
    get_logger,
    is_logging_configured,
    mask_payload,
    mask_secret,
    setup_logging,
)


class TestMasking:
    """敏感信息脱敏测试"""

    def test_mask_secret(self):
        assert mask_secret("abcdef123456") == "abcd****"
        assert mask_secret("") == "Not set"
        assert mask_secret(None) == "Not set"

    def test_mask_payload(self):
        payload = {"username": "U", "sign": "0123456789abcdef", "ref_id": "R1"}
        masked = mask_payload(payload)
        assert masked["sign"] == "0123****"
        assert masked["ref_id"] == "R1"
        assert masked["username"] == "U"
        # 原字典不变
        assert payload["sign"] == "0123456789abcdef"

    def test_mask_empty_payload(self):
        assert mask_payload(None) == {}


class TestSetupLogging:
    """日志配置测试"""

    def test_file_logging_json(self, tmp_path):
        log_file = tmp_path / "logs" / "proxy.log"
        setup_logging({"level": "INFO", "format": "json"}, log_file)
        try:
            assert is_logging_configured()
            get_logger("test").info("hello", ref_id="R1")
            for handler in logging.getLogger().handlers:
                handler.flush()

            lines = log_file.read_text(encoding="utf-8").strip().splitlines()
            record = json.loads(lines[-1])
            assert "hello" in record["message"]
        finally:
            # 恢复测试默认的日志配置
            setup_logging({"level": "DEBUG", "format": "text"})

    def test_get_logger_accepts_context(self):
        logger = get_logger(__name__)
        logger.info("structured", endpoint="transaction", status_code=200)


if __name__ == "__main__":
    pytest.main([__file__])
