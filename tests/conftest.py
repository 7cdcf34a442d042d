"""Shared pytest fixtures for the codeforces-cli test suite."""

from collections.abc import Callable
from typing import Any, Optional, Union

import httpx
import pytest

from cf.context import AuthState, Session
from cf.models import Config, Example, Problem
from cf.storage import Storage

PROBLEM_HTML = """
<html><body>
<div class="problem-statement">
  <div class="header">
    <div class="title">A. Watermelon</div>
    <div class="time-limit"><div class="property-title">time limit per test</div>1 second</div>
  </div>
  <div><p>Pete and Billy bought a watermelon weighing <b>w</b> kilos.</p></div>
  <div class="input-specification">
    <div class="section-title">Input</div>
    <p>The first line contains integer w.</p>
  </div>
  <div class="output-specification">
    <div class="section-title">Output</div>
    <p>Print YES or NO.</p>
  </div>
  <div class="sample-tests">
    <div class="section-title">Examples</div>
    <div class="sample-test">
      <div class="input"><div class="title">Input</div><pre>8</pre></div>
      <div class="output"><div class="title">Output</div><pre>YES</pre></div>
      <div class="input"><div class="title">Input</div><pre><div class="test-example-line">3</div><div class="test-example-line">1 2 3</div></pre></div>
      <div class="output"><div class="title">Output</div><pre>NO<br/>done</pre></div>
    </div>
  </div>
</div>
</body></html>
"""

LOGGED_IN_PROFILE_HTML = """
<html><body>
<div class="lang-chooser"><a href="/profile/tourist">tourist</a></div>
<a href="/settings/general">Settings</a>
</body></html>
"""

ANONYMOUS_PROFILE_HTML = """
<html><body>
<div class="header"><a href="/enter">Enter</a> | <a href="/register">Register</a></div>
<div class="userbox">tourist</div>
</body></html>
"""

LOGIN_PAGE_HTML = """
<html><body>
<form method="post" action="">
  <input type="hidden" name="csrf_token" value="login-token-123"/>
  <input name="handleOrEmail"/>
  <input name="password" type="password"/>
</form>
</body></html>
"""

SUBMIT_PAGE_HTML = """
<html><body>
<form class="submit-form" method="post">
  <input type="hidden" name="csrf_token" value="submit-token-456"/>
  <select name="programTypeId"><option value="54">GNU G++17 7.3.0</option></select>
</form>
</body></html>
"""

SUBMISSIONS_HTML = """
<html><body>
<table class="status-frame-datatable">
  <tr><th>#</th><th>When</th><th>Who</th><th>Problem</th><th>Lang</th><th>Verdict</th><th>Time</th><th>Memory</th></tr>
  <tr>
    <td><a href="/contest/4/submission/200000002">200000002</a></td>
    <td>2026-10-19 10:00</td>
    <td><a href="/profile/tourist">tourist</a></td>
    <td><a href="/contest/4/problem/A">4A - Watermelon</a></td>
    <td>GNU G++17 7.3.0</td>
    <td><span class="verdict-rejected">Wrong answer on test <span>3</span></span></td>
    <td>15 ms</td>
    <td>0 KB</td>
  </tr>
  <tr>
    <td>200000001</td>
    <td>2026-10-19 09:00</td>
    <td><a href="/profile/tourist">tourist</a></td>
    <td><a href="/contest/1/problem/A">1A - Theatre Square</a></td>
    <td>Python 3.8.10</td>
    <td><span class="verdict-accepted">Accepted</span></td>
    <td>30 ms</td>
    <td>100 KB</td>
  </tr>
  <tr><td colspan="8">No more submissions</td></tr>
</table>
</body></html>
"""

CONTEST_HTML = """
<html><body>
<table class="problems">
  <tr><th>#</th><th>Name</th><th></th></tr>
  <tr>
    <td class="id"><a href="/contest/4/problem/A">A</a></td>
    <td><div><div><a href="/contest/4/problem/A">Watermelon</a></div><div>standard input/output</div></div></td>
    <td>x12345</td>
  </tr>
  <tr>
    <td class="id"><a href="/contest/4/problem/B">B</a></td>
    <td><div><div><a href="/contest/4/problem/B">Before an Exam</a></div></div></td>
    <td>x9000</td>
  </tr>
</table>
</body></html>
"""

EMPTY_CONTEST_HTML = """
<html><body><div class="datatable">This contest is private.</div></body></html>
"""

STANDINGS_PAYLOAD = {
    "status": "OK",
    "result": {
        "contest": {"id": 4, "name": "Codeforces Beta Round 4"},
        "problems": [
            {"contestId": 4, "index": "A", "name": "Watermelon", "type": "PROGRAMMING",
             "points": 500.0, "rating": 800, "tags": ["brute force", "math"]},
            {"contestId": 4, "index": "B", "name": "Before an Exam", "type": "PROGRAMMING",
             "rating": 1200, "tags": ["constructive algorithms", "greedy"]},
        ],
        "rows": [],
    },
}

Handler = Callable[[httpx.Request], httpx.Response]


class FakeCodeforces:
    """Routes requests made through httpx.MockTransport and records them."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Union[Handler, dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def route(
        self,
        method: str,
        path: str,
        status: int = 200,
        text: Optional[str] = None,
        json: Any = None,
        headers: Optional[list[tuple[str, str]]] = None,
        handler: Optional[Handler] = None,
    ) -> None:
        if handler is not None:
            self.routes[(method, path)] = handler
        else:
            self.routes[(method, path)] = {
                "status_code": status,
                "text": text,
                "json": json,
                "headers": headers or [],
            }

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="Not found")
        if callable(route):
            return route(request)
        if route["json"] is not None:
            return httpx.Response(route["status_code"], json=route["json"], headers=route["headers"])
        return httpx.Response(route["status_code"], text=route["text"] or "", headers=route["headers"])


@pytest.fixture
def server() -> FakeCodeforces:
    """Returns an empty fake Codeforces server."""
    return FakeCodeforces()


@pytest.fixture
def session(server: FakeCodeforces) -> Session:
    """Returns an anonymous Session whose requests go to the fake server."""
    session = Session.create(transport=httpx.MockTransport(server.handle))
    yield session
    session.close()


@pytest.fixture
def logged_in_session(session: Session) -> Session:
    """Returns a Session already marked as authenticated for 'tourist'."""
    session.state = AuthState.AUTHENTICATED
    session.handle = "tourist"
    return session


@pytest.fixture
def sample_problem() -> Problem:
    """Returns a sample Problem object for testing."""
    return Problem(
        contest_id=4,
        index="A",
        name="Watermelon",
        points=500.0,
        rating=800,
        tags=["brute force", "math"],
        statement="Pete and Billy bought a watermelon weighing **w** kilos.",
        input_format="The first line contains integer w.",
        output_format="Print YES or NO.",
        examples=[
            Example(input="8", output="YES"),
            Example(input="3\n1 2 3", output="NO"),
        ],
    )


@pytest.fixture
def sample_config() -> Config:
    """Returns a default Config for testing."""
    return Config(
        template_language="cpp",
        language="",
        editor="vim",
        show_notifications=True,
        status_check_delay=5.0,
    )


@pytest.fixture
def tmp_storage(tmp_path) -> Storage:
    """Returns a Storage instance using a temporary directory."""
    return Storage(base_path=tmp_path)
