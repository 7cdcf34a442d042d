"""Session manager for coordinating Codeforces authentication."""

import logging
import threading
from collections.abc import Callable
from typing import Optional

from cf import extract
from cf.client import CodeforcesClient
from cf.context import AuthState, Session
from cf.cookies import parse_cookie_string
from cf.exceptions import (
    AuthError,
    CodeforcesError,
    InvalidCookiesError,
    LoginTokenMissingError,
    NotLoggedInError,
    VerificationFailedError,
    wrap_errors,
)
from cf.storage import COOKIES_KEY, HANDLE_KEY, PASSWORD_KEY, Storage

logger = logging.getLogger(__name__)

LOGIN_PATH = "/enter"


class SessionManager:
    """Establishes, verifies and tears down the authenticated Codeforces session.

    Three strategies exist because accounts that use Google or other social
    login have no password to post through the form:

    - restore_session replays cookies saved by a previous login;
    - login_with_credentials posts the /enter form;
    - login_with_cookie_string accepts cookies copied from a browser.
    """

    def __init__(self, storage: Storage | None = None, session: Session | None = None) -> None:
        self._storage = storage or Storage()
        self._session = session or Session.create()
        self._lock = threading.Lock()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def storage(self) -> Storage:
        return self._storage

    def _load_cookies(self) -> bool:
        stored = self._storage.get_state(COOKIES_KEY)
        if not stored:
            return False
        self._session.cookies.load(stored)
        return True

    def _export_cookies(self) -> None:
        self._storage.update_state(COOKIES_KEY, self._session.cookies.export())

    def _authenticate(self, handle: str) -> bool:
        """Verify handle and move to AUTHENTICATED or back to ANONYMOUS."""
        self._session.state = AuthState.VERIFYING
        if self.verify(handle):
            self._session.state = AuthState.AUTHENTICATED
            self._session.handle = handle
            return True
        self._session.state = AuthState.ANONYMOUS
        return False

    def verify(self, handle: str) -> bool:
        """Check the profile page for elements only a logged-in user sees."""
        try:
            response = self._session.http.get(f"/profile/{handle}")
        except CodeforcesError as e:
            logger.debug("Login verification request failed: %s", e.message)
            return False
        return response.status_code == 200 and extract.is_authenticated_page(response.text)

    def restore_session(self, handle: str) -> bool:
        """Replay stored cookies and check they still authenticate handle."""
        with self._lock:
            if not self._load_cookies():
                return False
            restored = self._authenticate(handle)
        logger.debug("Restored session for %s: %s", handle, restored)
        return restored

    def login_with_credentials(self, handle: str, password: str) -> None:
        """Log in through the /enter form."""
        with self._lock, wrap_errors("Login failed"):
            page = self._session.http.get(LOGIN_PATH)
            token = extract.parse_csrf_token(page.text)
            if not token:
                raise LoginTokenMissingError()

            form = {
                "csrf_token": token,
                "action": "enter",
                "ftaa": "",
                "bfaa": "",
                "handleOrEmail": handle,
                "password": password,
                "remember": "on",
            }
            response = self._session.http.post(
                LOGIN_PATH,
                data=form,
                headers={"Referer": f"{self._session.http.base_url}{LOGIN_PATH}"},
                follow_redirects=False,
            )
            if response.status_code >= 400:
                raise VerificationFailedError(f"Login request rejected with HTTP {response.status_code}")
            if response.is_redirect:
                logger.debug("Login redirected to %s", response.headers.get("location"))

            if not self._authenticate(handle):
                raise VerificationFailedError()

            self._storage.store_secret(HANDLE_KEY, handle)
            self._storage.store_secret(PASSWORD_KEY, password)
            self._export_cookies()

    def login_with_cookie_string(self, handle: str, raw_cookies: str) -> None:
        """Log in with a 'name=value; name=value' string copied from a browser."""
        with self._lock, wrap_errors("Cookie login failed"):
            pairs = parse_cookie_string(raw_cookies)
            if not pairs:
                raise InvalidCookiesError("No cookies found in the supplied string")
            for pair in pairs:
                self._session.cookies.set(pair, self._session.http.base_url)

            if not self._authenticate(handle):
                raise InvalidCookiesError()

            self._storage.store_secret(HANDLE_KEY, handle)
            self._export_cookies()

    def login_with_browser(
        self,
        handle: str,
        prompt: Callable[[], str],
        open_url: Callable[[str], object],
    ) -> None:
        """Send the user to the login page and ask for the resulting cookies."""
        open_url(f"{self._session.http.base_url}{LOGIN_PATH}")
        raw_cookies = prompt().strip()
        if raw_cookies:
            self.login_with_cookie_string(handle, raw_cookies)
            return

        with self._lock, wrap_errors("Browser login failed"):
            if not self._authenticate(handle):
                raise InvalidCookiesError("Could not verify login. Please provide session cookies.")
            self._storage.store_secret(HANDLE_KEY, handle)
            self._export_cookies()

    def login(self, handle: str, password: Optional[str] = None) -> None:
        """Restore a stored session if possible, otherwise log in with password."""
        if self.restore_session(handle):
            return
        if not password:
            raise AuthError(
                "Login failed: Password not provided. For Google/social login users:\n"
                "1. Set a password in Codeforces settings, OR\n"
                "2. Use 'cf login --browser', OR\n"
                "3. Use 'cf login --cookies \"JSESSIONID=...; 39ce7=...\"'"
            )
        self.login_with_credentials(handle, password)

    def logout(self) -> None:
        """Forget the session locally and expire every cookie for the site."""
        with self._lock:
            self._session.state = AuthState.ANONYMOUS
            self._session.handle = None
            self._storage.delete_secret(HANDLE_KEY)
            self._storage.delete_secret(PASSWORD_KEY)
            self._storage.update_state(COOKIES_KEY, None)
            self._session.cookies.clear(self._session.http.base_url)

    def is_authenticated(self) -> bool:
        """Re-check the live server; sessions expire without a local signal."""
        if not self._session.authenticated:
            return False
        handle = self._session.handle or self._storage.get_secret(HANDLE_KEY)
        if not handle:
            return False
        return self.verify(handle)

    def get_client(self, require_login: bool = False) -> CodeforcesClient:
        """Return a client, restoring the stored session when login is required."""
        handle = self._storage.get_secret(HANDLE_KEY)

        if self._session.authenticated:
            pass
        elif require_login:
            if not handle or not self.restore_session(handle):
                raise NotLoggedInError()
        else:
            self._load_cookies()

        return CodeforcesClient(self._session, handle=handle)
