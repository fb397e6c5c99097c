"""
Tests for the API client.

Tests cover:
- Payload normalization ({"data": ...} vs bare bodies)
- Bearer token header
- Error translation (server message, fallback, network errors)
- Forced logout hook on 401
"""

from unittest.mock import MagicMock

import pytest
import requests

from alici_erp.services.api_client import ApiClient, normalize_payload
from alici_erp.services.exceptions import RequestFailed, Unauthorized

BASE_URL = "https://erp.test/api"


@pytest.fixture
def client(api):
    return ApiClient(BASE_URL, session=api, token_provider=lambda: None)


class TestNormalizePayload:
    def test_unwraps_data(self):
        assert normalize_payload({"data": [1, 2]}) == [1, 2]

    def test_unwraps_data_with_siblings(self):
        assert normalize_payload({"data": {"id": 1}, "message": "ok"}) == {"id": 1}

    def test_bare_list_unchanged(self):
        assert normalize_payload([1, 2]) == [1, 2]

    def test_bare_object_unchanged(self):
        assert normalize_payload({"costoTotal": 10}) == {"costoTotal": 10}

    def test_none_unchanged(self):
        assert normalize_payload(None) is None


class TestRequests:
    def test_get_returns_normalized_payload(self, api, client):
        api.add("GET", "/production/products", {"data": [{"id": "p1"}]})
        assert client.get("/production/products") == [{"id": "p1"}]

    def test_bare_array_endpoint(self, api, client):
        api.add("GET", "/conversions", [{"id": "c1"}])
        assert client.get("/conversions") == [{"id": "c1"}]

    def test_params_forwarded(self, api, client):
        api.add("GET", "/cash", [])
        client.get("/cash", params={"tipo": "INGRESO"})
        assert api.calls[0].params == {"tipo": "INGRESO"}

    def test_post_sends_json(self, api, client):
        api.add("POST", "/waste", {"data": {"id": "w1"}}, status_code=201)
        assert client.post("/waste", json={"productoId": "p1"}) == {"id": "w1"}
        assert api.calls[0].json == {"productoId": "p1"}

    def test_no_content_returns_none(self, api, client):
        api.add("DELETE", "/payroll/1", status_code=204)
        assert client.delete("/payroll/1") is None

    def test_get_raw_returns_bytes(self, api, client):
        api.add("GET", "/cash/report.csv", content=b"fecha,monto\n")
        assert client.get_raw("/cash/report.csv") == b"fecha,monto\n"

    def test_no_token_no_authorization_header(self, api, client):
        api.add("GET", "/config", {})
        client.get("/config")
        assert "Authorization" not in api.calls[0].headers
        assert api.calls[0].headers["Content-Type"] == "application/json"

    def test_bearer_token_attached(self, api):
        client = ApiClient(BASE_URL, session=api, token_provider=lambda: "abc")
        api.add("GET", "/config", {})

        client.get("/config")

        assert api.calls[0].headers["Authorization"] == "Bearer abc"


class TestErrors:
    def test_server_error_field_preferred(self, api, client):
        api.add("POST", "/sales/checkout", {"error": "Stock insuficiente", "message": "Bad"}, status_code=400)

        with pytest.raises(RequestFailed) as exc_info:
            client.post("/sales/checkout", json={})

        assert exc_info.value.message == "Stock insuficiente"
        assert exc_info.value.status_code == 400
        assert exc_info.value.from_server is True

    def test_server_message_field(self, api, client):
        api.add("PUT", "/config", {"message": "Tasa inválida"}, status_code=422)

        with pytest.raises(RequestFailed) as exc_info:
            client.put("/config", json={})

        assert exc_info.value.message == "Tasa inválida"

    def test_field_errors_collected(self, api, client):
        api.add(
            "POST",
            "/inventory",
            {"error": "Datos inválidos", "errors": [{"message": "nombre requerido"}, "unidad requerida"]},
            status_code=400,
        )

        with pytest.raises(RequestFailed) as exc_info:
            client.post("/inventory", json={})

        assert exc_info.value.errors == ["nombre requerido", "unidad requerida"]

    def test_no_body_falls_back_to_reason(self, api, client):
        api.add("GET", "/dashboard/stats", status_code=500)
        api.routes[("GET", "/dashboard/stats")].reason = "Internal Server Error"

        with pytest.raises(RequestFailed) as exc_info:
            client.get("/dashboard/stats")

        assert exc_info.value.message == "Internal Server Error"
        assert exc_info.value.from_server is False

    def test_network_error(self, api, client):
        api.add("GET", "/sales", error=requests.ConnectionError("Connection refused"))

        with pytest.raises(RequestFailed) as exc_info:
            client.get("/sales")

        assert exc_info.value.status_code is None
        assert exc_info.value.from_server is False

    def test_unauthorized_runs_hook(self, api):
        on_unauthorized = MagicMock()
        client = ApiClient(BASE_URL, session=api, on_unauthorized=on_unauthorized)
        api.add("GET", "/orders", {"error": "Token inválido"}, status_code=401)

        with pytest.raises(Unauthorized) as exc_info:
            client.get("/orders")

        on_unauthorized.assert_called_once()
        assert exc_info.value.message == "Token inválido"

    def test_unauthorized_hook_skipped_on_request(self, api):
        on_unauthorized = MagicMock()
        client = ApiClient(BASE_URL, session=api, on_unauthorized=on_unauthorized)
        api.add("POST", "/auth/login", {"error": "Credenciales inválidas"}, status_code=401)

        with pytest.raises(Unauthorized):
            client.post("/auth/login", json={}, logout_on_401=False)

        on_unauthorized.assert_not_called()


def test_default_session_mounts_retries():
    client = ApiClient(BASE_URL, retries=2, backoff=0.1)

    adapter = client.session.get_adapter(BASE_URL)

    assert adapter.max_retries.total == 2
    assert "POST" not in adapter.max_retries.allowed_methods
