"""Session cookie store keyed by full request URL."""

from email.utils import formatdate
from http.cookiejar import Cookie

import httpx

BASE_URL = "https://codeforces.com"

EXPIRED_DATE = "Thu, 01 Jan 1970 00:00:00 GMT"


class CookieStore:
    """Holds session cookies and applies standard domain/path matching.

    Cookies are always set and looked up against a full URL so that
    path-scoped cookies only reach the pages they belong to.
    """

    def __init__(self) -> None:
        self._cookies = httpx.Cookies()

    @property
    def jar(self):
        return self._cookies.jar

    def __len__(self) -> int:
        return len(self._cookies.jar)

    def get(self, url: str) -> str:
        """Return the Cookie header value for url, or an empty string."""
        request = httpx.Request("GET", url)
        self._cookies.set_cookie_header(request)
        return request.headers.get("cookie", "")

    def set(self, raw_set_cookie: str, url: str) -> None:
        """Merge a raw Set-Cookie header as if it came from a response for url."""
        response = httpx.Response(
            200,
            headers=[("set-cookie", raw_set_cookie)],
            request=httpx.Request("GET", url),
        )
        self._cookies.extract_cookies(response)

    def cookies_for(self, url: str = BASE_URL) -> list[Cookie]:
        """Return every stored cookie whose domain matches the host of url."""
        host = httpx.URL(url).host
        return [cookie for cookie in self._cookies.jar if _domain_matches(host, cookie.domain)]

    def clear(self, url: str = BASE_URL) -> None:
        """Expire all cookies for the host of url by overwriting them."""
        for cookie in self.cookies_for(url):
            self.set(_expired_header(cookie), url)

    def export(self, url: str = BASE_URL) -> list[str]:
        """Serialize the cookies for url as Set-Cookie strings."""
        return [cookie_to_header(cookie) for cookie in self.cookies_for(url)]

    def load(self, headers: list[str], url: str = BASE_URL) -> None:
        """Replay Set-Cookie strings produced by export()."""
        for header in headers:
            self.set(header, url)


def cookie_to_header(cookie: Cookie) -> str:
    """Render a stored cookie back into a Set-Cookie header string."""
    parts = [f"{cookie.name}={cookie.value or ''}"]
    if cookie.domain_specified:
        parts.append(f"Domain={cookie.domain}")
    parts.append(f"Path={cookie.path}")
    if cookie.expires is not None:
        parts.append(f"Expires={formatdate(cookie.expires, usegmt=True)}")
    if cookie.secure:
        parts.append("Secure")
    if any(name.lower() == "httponly" for name in cookie._rest):
        parts.append("HttpOnly")
    return "; ".join(parts)


def parse_cookie_string(raw: str) -> list[str]:
    """Split a pasted 'a=1; b=2' string into individual name=value pairs."""
    pairs = []
    for part in raw.split(";"):
        part = part.strip()
        if part and "=" in part and not part.startswith("="):
            pairs.append(part)
    return pairs


def _expired_header(cookie: Cookie) -> str:
    parts = [f"{cookie.name}=", f"Path={cookie.path}", f"Expires={EXPIRED_DATE}"]
    if cookie.domain_specified:
        parts.insert(1, f"Domain={cookie.domain}")
    return "; ".join(parts)


def _domain_matches(host: str, domain: str) -> bool:
    domain = domain.lower()
    host = host.lower()
    if domain.startswith("."):
        return host == domain[1:] or host.endswith(domain)
    return host == domain
