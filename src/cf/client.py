"""Codeforces client for fetching problems and submitting solutions."""

import logging
from pathlib import Path
from typing import Any, Optional, TypeVar

from cf import extract
from cf.api import ApiSubmission, ProblemsetResult, StandingsResult, parse_result
from cf.context import Session
from cf.exceptions import (
    CodeforcesError,
    NotLoggedInError,
    PageUnavailableError,
    SubmissionRejectedError,
    SubmitTokenMissingError,
    wrap_errors,
)
from cf.models import (
    PENDING_VERDICT,
    UNKNOWN_SUBMISSION_ID,
    UNKNOWN_VERDICT,
    Problem,
    Submission,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECENT_SUBMISSIONS_LIMIT = 20
USER_STATUS_COUNT = 50
TAB_SIZE = "4"

LANGUAGE_IDS = {
    "GNU G++17 7.3.0": "54",
    "GNU G++14 6.4.0": "50",
    "GNU G++11 5.1.0": "42",
    "GNU GCC C11 5.1.0": "43",
    "Python 3.8.10": "31",
    "Python 2.7.18": "7",
    "Java 11.0.6": "60",
    "Java 8": "36",
    "Node.js 12.16.3": "55",
}
DEFAULT_LANGUAGE = "GNU G++17 7.3.0"
DEFAULT_LANGUAGE_ID = LANGUAGE_IDS[DEFAULT_LANGUAGE]

EXTENSION_LANGUAGES = {
    "cpp": "GNU G++17 7.3.0",
    "cc": "GNU G++17 7.3.0",
    "cxx": "GNU G++17 7.3.0",
    "c": "GNU GCC C11 5.1.0",
    "py": "Python 3.8.10",
    "py3": "Python 3.8.10",
    "java": "Java 11.0.6",
    "js": "Node.js 12.16.3",
    "ts": "Node.js 12.16.3",
}


def get_language_id(language: str) -> str:
    """Map a language label to the numeric programTypeId, defaulting to G++17."""
    return LANGUAGE_IDS.get(language, DEFAULT_LANGUAGE_ID)


def language_for_file(path: Path | str) -> str:
    """Guess the submit language label from a source file's extension."""
    extension = Path(path).suffix.lstrip(".").lower()
    return EXTENSION_LANGUAGES.get(extension, DEFAULT_LANGUAGE)


class CodeforcesClient:
    """Client for Codeforces pages and its public API."""

    def __init__(self, session: Session, handle: Optional[str] = None) -> None:
        self._session = session
        self._fallback_handle = handle

    @property
    def session(self) -> Session:
        return self._session

    @property
    def handle(self) -> Optional[str]:
        return self._session.handle or self._fallback_handle

    def _require_login(self) -> None:
        if not self._session.authenticated:
            raise NotLoggedInError()

    def _get_page(self, path: str) -> str:
        response = self._session.http.get(path)
        if response.status_code >= 400:
            raise PageUnavailableError(f"{path} returned HTTP {response.status_code}")
        return response.text

    def _call_api(self, method: str, params: Optional[dict[str, Any]], result_type: type[T]) -> T:
        payload = self._session.http.get_json(f"/api/{method}", params=params)
        return parse_result(payload, result_type)

    def _contest_standings(self, contest_id: int) -> StandingsResult:
        return self._call_api(
            "contest.standings",
            {"contestId": contest_id, "from": 1, "count": 1},
            StandingsResult,
        )

    def fetch_problem(self, contest_id: int, index: str) -> Problem:
        """Scrape a problem statement, then enrich it with API tags and rating."""
        with wrap_errors("Failed to fetch problem"):
            html = self._get_page(f"/contest/{contest_id}/problem/{index}")
            problem = extract.parse_problem(html, contest_id, index)

        try:
            standings = self._contest_standings(contest_id)
        except CodeforcesError as e:
            logger.warning("Could not fetch problem tags from API: %s", e.message)
            return problem

        return extract.merge_problem_metadata(problem, standings.problems)

    def search_problems(self, query: str) -> list[Problem]:
        """Search the full problemset by name or tag."""
        with wrap_errors("Search failed"):
            result = self._call_api("problemset.problems", None, ProblemsetResult)
            return extract.filter_problems(result.problems, query)

    def fetch_contest_problems(self, contest_id: int) -> list[Problem]:
        """List a contest's problems from its dashboard, falling back to the API."""
        with wrap_errors("Failed to fetch contest problems"):
            html = self._get_page(f"/contest/{contest_id}")
            problems = extract.parse_contest_problems(html, contest_id)

        if problems:
            return problems

        try:
            standings = self._contest_standings(contest_id)
        except CodeforcesError as e:
            logger.warning("API fallback failed for contest %s: %s", contest_id, e.message)
            return []

        return extract.problems_from_api(standings.problems, contest_id)

    def _submissions_page(self) -> str:
        path = f"/submissions/{self.handle}" if self.handle else "/submissions"
        return self._get_page(path)

    def get_recent_submissions(self) -> list[Submission]:
        """Return the user's most recent submissions, newest first."""
        self._require_login()
        with wrap_errors("Failed to fetch submissions"):
            submissions = extract.parse_submissions_table(self._submissions_page())
        return submissions[:RECENT_SUBMISSIONS_LIMIT]

    def submit_solution(self, contest_id: int, index: str, code: str, language: str) -> Submission:
        """Submit a solution and return it with a pending verdict.

        If the response carries no submission id the sentinel "unknown" id is
        returned; the submission may still have been accepted by the server.
        """
        self._require_login()
        path = f"/contest/{contest_id}/submit"

        with wrap_errors("Submission failed"):
            logger.debug("Preparing submission for %s%s", contest_id, index)
            token = extract.parse_csrf_token(self._get_page(path))
            if not token:
                raise SubmitTokenMissingError()
            logger.debug("CSRF token fetched from %s", path)

            form = {
                "csrf_token": token,
                "action": "submitSolutionFormSubmitted",
                "submittedProblemIndex": index,
                "programTypeId": get_language_id(language),
                "source": code,
                "tabSize": TAB_SIZE,
                "sourceFile": "",
            }
            response = self._session.http.post(
                path,
                data=form,
                headers={"Referer": f"{self._session.http.base_url}{path}"},
                follow_redirects=True,
            )

            if response.status_code >= 400:
                raise SubmissionRejectedError(f"Submission request failed with HTTP {response.status_code}")
            if response.url.path.endswith("/submit"):
                error = extract.parse_form_error(response.text)
                if error:
                    raise SubmissionRejectedError(error)
            logger.debug("Submitted %s%s", contest_id, index)

        submission_id = extract.extract_submission_id(response.text)
        if submission_id is None:
            logger.debug("No submission id in response; status unknown")
            return Submission(
                id=UNKNOWN_SUBMISSION_ID,
                problem_name=f"{contest_id}{index}",
                verdict=UNKNOWN_VERDICT,
            )

        logger.debug("Tracking submission %s", submission_id)
        return Submission(
            id=submission_id,
            problem_name=f"{contest_id}{index}",
            verdict=PENDING_VERDICT,
        )

    def get_submission_status(self, submission_id: str) -> SubmissionStatus:
        """Look a submission up in the status table, then in the API."""
        self._require_login()
        with wrap_errors("Failed to get submission status"):
            verdict = extract.find_submission_verdict(self._submissions_page(), submission_id)
        if verdict is not None:
            return SubmissionStatus(submission_id=submission_id, verdict=verdict, source="table")

        verdict = self._api_verdict(submission_id)
        if verdict is not None:
            return SubmissionStatus(submission_id=submission_id, verdict=verdict, source="api")

        return SubmissionStatus(submission_id=submission_id, verdict=UNKNOWN_VERDICT)

    def _api_verdict(self, submission_id: str) -> Optional[str]:
        if not self.handle:
            return None
        try:
            submissions = self._call_api(
                "user.status",
                {"handle": self.handle, "from": 1, "count": USER_STATUS_COUNT},
                list[ApiSubmission],
            )
        except CodeforcesError as e:
            logger.warning("Could not fetch submission status from API: %s", e.message)
            return None

        for submission in submissions:
            if str(submission.id) == submission_id:
                return submission.verdict or UNKNOWN_VERDICT
        return None
