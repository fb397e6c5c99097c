"""
HTTP client for the ALICI ERP REST API.

All requests go through ApiClient, which:
- attaches the bearer token (when there is one) and JSON content type
- applies the configured timeout, and retries GETs with backoff
- normalizes response bodies: some endpoints wrap their payload as
  {"data": ...}, others return it bare; callers always receive the payload
- translates failures into RequestFailed / Unauthorized

Usage:
    client = ApiClient("https://sist-alici.vercel.app/api", token_provider=auth.get_token)
    productos = client.get("/production/products")
"""

from typing import Any, Callable, List, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..utils.constants import DEFAULT_REQUEST_RETRIES, DEFAULT_REQUEST_TIMEOUT, DEFAULT_RETRY_BACKOFF, GENERIC_ERROR_MESSAGE
from .exceptions import RequestFailed, Unauthorized
from .logging_utils import get_service_logger

logger = get_service_logger(__name__)

TokenProvider = Callable[[], Optional[str]]


def normalize_payload(body: Any) -> Any:
    """
    Return the payload of a response body.

    {"data": X} (with or without sibling keys such as "message") becomes X;
    every other shape is returned unchanged.

    Example:
        >>> normalize_payload({"data": [1, 2]})
        [1, 2]
        >>> normalize_payload([1, 2])
        [1, 2]
    """
    if isinstance(body, Mapping) and "data" in body:
        return body["data"]
    return body


def _error_details(body: Any) -> List[str]:
    if not isinstance(body, Mapping):
        return []
    details = body.get("errors") or body.get("details") or []
    if isinstance(details, str):
        return [details]
    if isinstance(details, Mapping):
        return [f"{key}: {value}" for key, value in details.items()]
    result = []
    for item in details:
        if isinstance(item, Mapping):
            result.append(str(item.get("message") or item.get("msg") or item))
        else:
            result.append(str(item))
    return result


def _server_message(body: Any) -> Optional[str]:
    if isinstance(body, Mapping):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return None


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class ApiClient:
    """
    Thin wrapper over a requests.Session bound to the API base URL.

    Args:
        base_url: API root, including the /api prefix
        session: Session to use (a fresh one by default; tests pass a mock)
        token_provider: Callable returning the current token or None
        on_unauthorized: Called once for every 401 response, before
            Unauthorized is raised (forced logout)
        timeout: Per-request timeout in seconds
        retries: Retry count for GET requests
        backoff: Exponential backoff factor between GET retries
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        token_provider: Optional[TokenProvider] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        retries: int = DEFAULT_REQUEST_RETRIES,
        backoff: float = DEFAULT_RETRY_BACKOFF,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_provider = token_provider
        self.on_unauthorized = on_unauthorized
        if session is None:
            session = requests.Session()
            self._mount_retries(session, retries, backoff)
        self.session = session

    @staticmethod
    def _mount_retries(session: requests.Session, retries: int, backoff: float) -> None:
        # Only GET is retried
        retry = Retry(
            total=retries,
            backoff_factor=backoff,
            status_forcelist=(502, 503, 504),
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping] = None,
        json: Any = None,
        logout_on_401: bool = True,
    ) -> requests.Response:
        """
        Send a request and return the successful response.

        logout_on_401 is False for requests made before there is a session
        (login), where a 401 means bad credentials.

        Raises:
            Unauthorized: HTTP 401 (on_unauthorized has already run when
                logout_on_401 is set)
            RequestFailed: Any other HTTP error, connection error or timeout
        """
        url = self._url(path)
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise RequestFailed(str(e) or GENERIC_ERROR_MESSAGE) from e

        if response.status_code == 401:
            if logout_on_401 and self.on_unauthorized is not None:
                logger.warning(f"{method} {url} returned 401, forcing logout")
                self.on_unauthorized()
            body = _json_or_none(response)
            fallback = "Sesión expirada" if logout_on_401 else "Credenciales inválidas"
            raise Unauthorized(_server_message(body) or fallback)

        if response.status_code >= 400:
            body = _json_or_none(response)
            server_message = _server_message(body)
            message = server_message or response.reason or GENERIC_ERROR_MESSAGE
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise RequestFailed(
                message,
                status_code=response.status_code,
                errors=_error_details(body),
                from_server=server_message is not None,
            )

        return response

    def _payload(self, response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        return normalize_payload(_json_or_none(response))

    def get(self, path: str, params: Optional[Mapping] = None) -> Any:
        return self._payload(self.request("GET", path, params=params))

    def post(self, path: str, json: Any = None, params: Optional[Mapping] = None, logout_on_401: bool = True) -> Any:
        return self._payload(self.request("POST", path, params=params, json=json, logout_on_401=logout_on_401))

    def put(self, path: str, json: Any = None, params: Optional[Mapping] = None) -> Any:
        return self._payload(self.request("PUT", path, params=params, json=json))

    def delete(self, path: str, params: Optional[Mapping] = None) -> Any:
        return self._payload(self.request("DELETE", path, params=params))

    def get_raw(self, path: str, params: Optional[Mapping] = None) -> bytes:
        """GET a file download (CSV, PDF, Excel) as bytes."""
        return self.request("GET", path, params=params).content
