"""Process-scoped session context shared by the authenticator and the client."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from cf.cookies import CookieStore
from cf.transport import HttpSession


class AuthState(Enum):
    ANONYMOUS = "anonymous"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"


@dataclass
class Session:
    """Cookie jar, HTTP session and login state for one process.

    Only SessionManager changes state and handle.
    """

    cookies: CookieStore
    http: HttpSession
    state: AuthState = AuthState.ANONYMOUS
    handle: Optional[str] = None

    @classmethod
    def create(cls, transport: Optional[httpx.BaseTransport] = None) -> "Session":
        cookies = CookieStore()
        return cls(cookies=cookies, http=HttpSession(cookies, transport=transport))

    @property
    def authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def close(self) -> None:
        self.http.close()
