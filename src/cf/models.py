"""Data models for the Codeforces CLI."""

from dataclasses import dataclass, field
from typing import Optional

UNKNOWN_SUBMISSION_ID = "unknown"
UNKNOWN_VERDICT = "Unknown"
PENDING_VERDICT = "Pending"


@dataclass
class Example:
    """Represents a sample test with input and expected output."""

    input: str
    output: str = ""


@dataclass
class Problem:
    """Represents a Codeforces problem."""

    contest_id: int
    index: str
    name: str
    type: str = "PROGRAMMING"
    points: Optional[float] = None
    rating: Optional[int] = None
    tags: list[str] = field(default_factory=list)
    statement: str = ""
    input_format: str = ""
    output_format: str = ""
    examples: list[Example] = field(default_factory=list)

    @property
    def problem_id(self) -> str:
        return f"{self.contest_id}{self.index}"

    @property
    def url(self) -> str:
        return f"https://codeforces.com/contest/{self.contest_id}/problem/{self.index}"


@dataclass
class Submission:
    """Represents a row of the submissions table, or a freshly sent solution."""

    id: str
    problem_name: str
    verdict: str
    time_consumed: str = "N/A"
    memory_consumed: str = "N/A"

    @property
    def trackable(self) -> bool:
        """Whether the server assigned an id we can look up later."""
        return self.id != UNKNOWN_SUBMISSION_ID


@dataclass
class SubmissionStatus:
    """Represents the verdict of a submission at the time it was queried."""

    submission_id: str
    verdict: str
    source: str = "none"

    @property
    def known(self) -> bool:
        return self.verdict != UNKNOWN_VERDICT


@dataclass
class Config:
    """User configuration for the CLI."""

    template_language: str
    language: str
    editor: str
    show_notifications: bool
    status_check_delay: float
