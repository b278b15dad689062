import httpx
import pytest

from customer_demo.console.client import UNREACHABLE_MESSAGE, ApiError, CustomerApiClient


def _client(handler):
    return CustomerApiClient(httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(handler)))


class TestCustomerApiClient:
    def test_list_customers(self):
        def handler(request):
            assert request.method == "GET"
            assert request.url.path == "/api/customers"
            return httpx.Response(200, json=[{"id": "C001"}])

        assert _client(handler).list_customers() == [{"id": "C001"}]

    def test_create_sends_json_body(self):
        seen = {}

        def handler(request):
            seen["body"] = request.read()
            return httpx.Response(201, json={"id": "C001"})

        _client(handler).create_customer({"id": "C001", "username": "Taro"})
        assert b'"username"' in seen["body"]

    def test_ids_are_escaped_in_paths(self):
        def handler(request):
            assert request.url.raw_path == b"/api/customers/a%2Fb"
            return httpx.Response(204)

        _client(handler).delete_customer("a/b")

    def test_error_detail_becomes_message(self):
        def handler(request):
            return httpx.Response(409, json={"detail": "Customer already exists: C001"})

        with pytest.raises(ApiError) as excinfo:
            _client(handler).create_customer({"id": "C001"})
        assert excinfo.value.message == "Customer already exists: C001"
        assert excinfo.value.status_code == 409

    def test_error_without_json_detail(self):
        def handler(request):
            return httpx.Response(500, text="boom")

        with pytest.raises(ApiError) as excinfo:
            _client(handler).get_customer("C001")
        assert excinfo.value.message == "Request failed with status 500"

    def test_transport_failure_has_generic_message(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ApiError) as excinfo:
            _client(handler).list_customers()
        assert excinfo.value.message == UNREACHABLE_MESSAGE
        assert excinfo.value.status_code is None
