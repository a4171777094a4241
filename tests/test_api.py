"""HTTP接口测试"""

import hashlib
import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from conftest import UPSTREAM_BASE_URL, MockUpstream

from core.config_models import Config
from core.webhook import InMemoryTransactionSink, compute_signature
from core.yaml_config import YAMLConfigLoader
from main import create_app

WEBHOOK_SECRET = "webhook-secret"
CORS_ORIGIN = "Access-Control-Allow-Origin"


def build_config(**overrides) -> YAMLConfigLoader:
    raw = {
        "provider": {"base_url": UPSTREAM_BASE_URL},
        "credentials": {
            "source": "memory",
            "records": [
                {"key_name": "username", "value": "U"},
                {"key_name": "apiKey", "value": "K"},
            ],
        },
        "webhook": {"enabled": True, "secret": WEBHOOK_SECRET},
        "logging": {"file": None},
    }
    raw.update(overrides)
    return YAMLConfigLoader(config=Config.model_validate(raw))


@pytest.fixture
def sink():
    return InMemoryTransactionSink()


@pytest.fixture
def client(upstream, sink):
    app = create_app(build_config(), transport=upstream.transport(), webhook_sink=sink)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    with TestClient(app) as test_client:
        yield test_client


class TestProxyRoutes:
    """转发路由测试"""

    def test_transaction(self, client, upstream):
        response = client.post(
            "/digiflazz-proxy/transaction",
            json={"ref_id": "R1", "customer_no": "08123", "buyer_sku_code": "SKU1"},
        )
        assert response.status_code == 200
        assert response.headers[CORS_ORIGIN] == "*"
        assert upstream.payload()["sign"] == hashlib.md5(b"UKR1").hexdigest()
        assert upstream.payload()["ref_id"] == "R1"

    def test_v1_prefix(self, client, upstream):
        response = client.post("/digiflazz-proxy/v1/price-list", json={"cmd": "prepaid"})
        assert response.status_code == 200
        assert str(upstream.requests[0].url) == f"{UPSTREAM_BASE_URL}/v1/price-list"

    def test_missing_ref_id(self, client, upstream):
        response = client.post("/digiflazz-proxy/transaction", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required field: ref_id"
        assert response.headers[CORS_ORIGIN] == "*"
        assert upstream.calls == 0

    def test_options_preflight(self, client, upstream):
        response = client.options("/digiflazz-proxy/transaction")
        assert response.status_code == 200
        assert response.headers[CORS_ORIGIN] == "*"
        assert response.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"
        assert response.headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"
        assert upstream.calls == 0

    def test_options_any_path(self, client, upstream):
        response = client.options("/anything/else")
        assert response.status_code == 200
        assert response.headers[CORS_ORIGIN] == "*"

    def test_get_not_allowed(self, client, upstream):
        response = client.get("/digiflazz-proxy/price-list")
        assert response.status_code == 405
        assert response.json() == {"message": "Method Not Allowed"}
        assert response.headers[CORS_ORIGIN] == "*"
        assert upstream.calls == 0

    def test_invalid_json(self, client, upstream):
        response = client.post(
            "/digiflazz-proxy/price-list",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert upstream.calls == 0

    def test_request_id_header(self, client):
        response = client.post("/digiflazz-proxy/price-list", json={})
        assert response.headers["X-Request-ID"]
        response = client.post(
            "/digiflazz-proxy/price-list", json={}, headers={"X-Request-ID": "req-123"}
        )
        assert response.headers["X-Request-ID"] == "req-123"

    def test_upstream_nan_body_wrapped(self):
        upstream = MockUpstream(text='{"data": NaN}')
        app = create_app(build_config(), transport=upstream.transport())
        with TestClient(app) as client:
            response = client.post("/digiflazz-proxy/price-list", json={})
        assert response.status_code == 200
        assert response.json() == {
            "error": "Invalid JSON response",
            "rawResponse": '{"data": NaN}',
        }


class TestMissingCredentials:
    """凭证缺失测试"""

    def test_missing_credentials(self, upstream):
        config = build_config(credentials={"source": "memory", "records": []})
        app = create_app(config, transport=upstream.transport())
        with TestClient(app) as client:
            response = client.post("/digiflazz-proxy/price-list", json={})
        assert response.status_code == 500
        assert response.json()["message"] == "Missing Digiflazz credentials"
        assert upstream.calls == 0


class TestErrorHandling:
    """统一错误处理测试"""

    def test_unhandled_exception(self, client):
        response = client.get("/boom")
        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error", "error": "kaboom"}
        assert response.headers[CORS_ORIGIN] == "*"


class TestHealth:
    """健康检查测试"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["provider"] == "digiflazz"
        assert data["webhook_enabled"] is True


class TestWebhookRoute:
    """回调接口测试"""

    def _post(self, client, body: dict, signature=None):
        raw = json.dumps(body).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if signature is None:
            signature = compute_signature(WEBHOOK_SECRET, raw)
        if signature:
            headers["X-Digiflazz-Signature"] = signature
        return client.post("/payload", content=raw, headers=headers)

    def test_create_event(self, client, sink):
        body = {"event": "create", "data": {"ref_id": "R1", "status": "Pending"}}
        response = self._post(client, body)
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert sink.get("R1").status == "Pending"

    def test_missing_signature(self, client, sink):
        response = self._post(client, {"event": "create", "data": {"ref_id": "R1"}}, "")
        assert response.status_code == 401
        assert response.json() == {"error": "No signature provided"}
        assert response.headers[CORS_ORIGIN] == "*"
        assert sink.get("R1") is None

    def test_invalid_signature(self, client, sink):
        response = self._post(client, {"event": "create", "data": {"ref_id": "R1"}}, "sha1=bad")
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid signature"}

    def test_update_without_ids(self, client):
        response = self._post(client, {"event": "update", "data": {"status": "Sukses"}})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing buyer_tx_id or ref_id"}

    def test_webhook_disabled(self, upstream):
        config = build_config(webhook={"enabled": False})
        app = create_app(config, transport=upstream.transport())
        with TestClient(app) as client:
            response = client.post("/payload", json={})
        # 未启用时 /payload 不在代理前缀下，没有路由
        assert response.status_code == 404

    def test_default_sink_capacity_from_config(self, upstream):
        config = build_config(
            webhook={"enabled": True, "secret": WEBHOOK_SECRET, "max_records": 5}
        )
        app = create_app(config, transport=upstream.transport())
        sink = app.state.webhook_handler.sink
        assert isinstance(sink, InMemoryTransactionSink)
        assert sink.max_records == 5


class TestEntryPoint:
    """入口模块测试"""

    def test_project_root_added_before_local_imports(self):
        lines = (project_root / "main.py").read_text(encoding="utf-8").splitlines()
        insert_at = next(i for i, line in enumerate(lines) if line.startswith("sys.path.insert"))
        first_local = next(
            i for i, line in enumerate(lines) if line.startswith(("from api", "from core"))
        )
        assert insert_at < first_local


if __name__ == "__main__":
    pytest.main([__file__])
