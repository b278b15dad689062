import logging
import httpx
from urllib.parse import quote
from typing import Optional
from customer_demo.config import settings

logger = logging.getLogger(__name__)

CUSTOMERS_PATH = "/api/customers"
UNREACHABLE_MESSAGE = "Could not reach the customer service. Check that the API server is running."


class ApiError(Exception):
    """A failed call to the Data Service, carrying the message to show the user"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _customer_path(customer_id: str) -> str:
    return f"{CUSTOMERS_PATH}/{quote(customer_id, safe='')}"


def _error_message(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    if isinstance(detail, str) and detail:
        return detail
    return f"Request failed with status {response.status_code}"


class CustomerApiClient:
    """Calls the customer REST API; every failure surfaces as ApiError"""

    def __init__(self, http: httpx.Client):
        self.http = http

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(UNREACHABLE_MESSAGE)

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(message, response.status_code)
        return response

    def list_customers(self) -> list[dict]:
        return self._request("GET", CUSTOMERS_PATH).json()

    def get_customer(self, customer_id: str) -> dict:
        return self._request("GET", _customer_path(customer_id)).json()

    def create_customer(self, payload: dict) -> dict:
        return self._request("POST", CUSTOMERS_PATH, json=payload).json()

    def update_customer(self, customer_id: str, payload: dict) -> dict:
        return self._request("PUT", _customer_path(customer_id), json=payload).json()

    def delete_customer(self, customer_id: str) -> None:
        self._request("DELETE", _customer_path(customer_id))


def get_api_client():
    """FastAPI dependency: a client bound to API_BASE_URL for one request"""
    with httpx.Client(base_url=settings.API_BASE_URL, timeout=settings.API_TIMEOUT_SECONDS) as http:
        yield CustomerApiClient(http)
