"""Typed records for the Codeforces JSON API.

Every response is wrapped as ``{"status": "OK" | "FAILED", "comment": ..., "result": ...}``.
"""

from typing import Any, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from cf.exceptions import ApiUnavailableError

T = TypeVar("T")


class ApiEnvelope(BaseModel):
    status: str
    comment: Optional[str] = None
    result: Any = None


class ApiProblem(BaseModel):
    contestId: Optional[int] = None
    index: str
    name: str
    type: str = "PROGRAMMING"
    points: Optional[float] = None
    rating: Optional[int] = None
    tags: list[str] = []


class ProblemsetResult(BaseModel):
    problems: list[ApiProblem]


class StandingsResult(BaseModel):
    problems: list[ApiProblem]


class ApiSubmission(BaseModel):
    id: int
    contestId: Optional[int] = None
    problem: ApiProblem
    programmingLanguage: str = ""
    verdict: Optional[str] = None
    timeConsumedMillis: int = 0
    memoryConsumedBytes: int = 0


def parse_result(payload: Any, result_type: type[T]) -> T:
    """Validate an API envelope and return its result as result_type."""
    try:
        envelope = ApiEnvelope.model_validate(payload)
    except ValidationError as e:
        raise ApiUnavailableError(f"Malformed API response: {e.error_count()} validation error(s)") from e

    if envelope.status != "OK":
        raise ApiUnavailableError(envelope.comment or f"API returned status {envelope.status}")

    try:
        return TypeAdapter(result_type).validate_python(envelope.result)
    except ValidationError as e:
        raise ApiUnavailableError(f"Unexpected API result shape: {e.error_count()} validation error(s)") from e
