from typing import Any, Optional

import httpx

from utils.logger import get_logger

_logger = get_logger("client")

API_BASE_URL = "http://localhost:3001/api"

NETWORK_ERROR = "Network error"


class ApiError(Exception):
    """
    The one failure type the data layer raises.

    `message` is what callers show; `status` is None for transport failures.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return NETWORK_ERROR
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP error! status: {response.status_code}"


class ApiClient:
    """
    Thin async JSON client for the record store.

    Each call resolves to the decoded JSON body or raises ApiError.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, endpoint: str, data: Any = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        kwargs = {} if data is None else {"json": data}
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            _logger.warning(f"{method} {endpoint} failed: {e!r}")
            raise ApiError(NETWORK_ERROR) from e

        if not response.is_success:
            message = _error_message(response)
            _logger.debug(f"{method} {endpoint} -> {response.status_code}: {message}")
            raise ApiError(message, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(NETWORK_ERROR, response.status_code) from e

    async def get(self, endpoint: str) -> Any:
        return await self._request("GET", endpoint)

    async def post(self, endpoint: str, data: Any) -> Any:
        return await self._request("POST", endpoint, data)

    async def put(self, endpoint: str, data: Any) -> Any:
        return await self._request("PUT", endpoint, data)

    async def patch(self, endpoint: str, data: Any) -> Any:
        return await self._request("PATCH", endpoint, data)

    async def delete(self, endpoint: str) -> Any:
        return await self._request("DELETE", endpoint)
