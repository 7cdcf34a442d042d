"""HTTP session wrapper that routes every request through the cookie store."""

import logging
from typing import Any, Optional

import httpx

from cf.cookies import BASE_URL, CookieStore
from cf.exceptions import ApiUnavailableError, NetworkError, RequestTimeoutError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class HttpSession:
    """httpx client with a fixed identity whose cookies live in a CookieStore.

    Responses are returned whatever their status code; callers decide what a
    redirect or an error page means.
    """

    def __init__(
        self,
        cookies: CookieStore,
        base_url: str = BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._cookies = cookies
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            event_hooks={
                "request": [self._inject_cookies],
                "response": [self._capture_cookies],
            },
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url).rstrip("/")

    def _inject_cookies(self, request: httpx.Request) -> None:
        # The store is authoritative; replace whatever httpx merged in.
        header = self._cookies.get(str(request.url))
        if header:
            request.headers["Cookie"] = header
        elif "Cookie" in request.headers:
            del request.headers["Cookie"]

    def _capture_cookies(self, response: httpx.Response) -> None:
        url = str(response.request.url)
        for raw in response.headers.get_list("set-cookie"):
            self._cookies.set(raw, url)

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"{method} {path} timed out: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    def get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        follow_redirects: bool = True,
    ) -> httpx.Response:
        return self._send("GET", path, params=params, follow_redirects=follow_redirects)

    def post(
        self,
        path: str,
        data: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        return self._send(
            "POST", path, data=data, headers=headers, follow_redirects=follow_redirects
        )

    def get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET a JSON endpoint and return the decoded body."""
        response = self.get(path, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise ApiUnavailableError(
                f"{path} returned a non-JSON response (HTTP {response.status_code})"
            ) from e

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
