"""Pure functions turning Codeforces HTML and API records into models."""

import dataclasses
from collections.abc import Iterable, Iterator
from typing import Optional

from bs4 import BeautifulSoup, Tag
from markdownify import markdownify

from cf import markup
from cf.api import ApiProblem
from cf.exceptions import PageUnavailableError
from cf.models import UNKNOWN_VERDICT, Example, Problem, Submission

SEARCH_RESULT_LIMIT = 50


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _text(node: Optional[Tag]) -> str:
    if node is None:
        return ""
    return " ".join(node.get_text(" ").split())


def _to_markdown(node: Optional[Tag]) -> str:
    if node is None:
        return ""
    return markdownify(str(node), heading_style="ATX", strip=["script", "style"]).strip()


def parse_csrf_token(html: str) -> Optional[str]:
    """Return the value of the hidden csrf_token input, if present."""
    node = _soup(html).select_one(markup.CSRF_TOKEN_INPUT)
    if node is None:
        return None
    value = node.get("value")
    return value or None


def is_authenticated_page(html: str) -> bool:
    """Whether the page carries an element only rendered for a logged-in user."""
    soup = _soup(html)
    return any(soup.select_one(selector) is not None for selector in markup.AUTHENTICATED_MARKERS)


def parse_form_error(html: str) -> Optional[str]:
    """Return the first non-empty inline form error message."""
    for node in _soup(html).select(markup.FORM_ERROR):
        message = _text(node)
        if message:
            return message
    return None


def extract_submission_id(html: str) -> Optional[str]:
    match = markup.SUBMISSION_ID_PATTERN.search(html)
    return match.group(1) if match else None


def _section_markdown(soup: BeautifulSoup, selector: str) -> str:
    section = soup.select_one(selector)
    if section is None:
        return ""
    for title in section.select(markup.SECTION_TITLE):
        title.decompose()
    return _to_markdown(section)


def _sample_text(block: Tag) -> str:
    pre = block.select_one(markup.SAMPLE_CONTENT)
    if pre is None:
        return ""
    lines = pre.select(markup.SAMPLE_LINE)
    if lines:
        return "\n".join(line.get_text() for line in lines).strip()
    for br in pre.find_all("br"):
        br.replace_with("\n")
    return pre.get_text().strip()


def pair_examples(blocks: Iterable[tuple[bool, str]]) -> list[Example]:
    """Pair (is_input, text) blocks into examples.

    Each input opens a slot; each output fills the most recently opened slot
    still waiting for one. Outputs with no open slot are dropped.
    """
    examples: list[Example] = []
    waiting: list[int] = []
    for is_input, text in blocks:
        if is_input:
            examples.append(Example(input=text))
            waiting.append(len(examples) - 1)
        elif waiting:
            examples[waiting.pop()].output = text
    return examples


def parse_problem(html: str, contest_id: int, index: str) -> Problem:
    """Parse a problem page into a Problem without tags or rating."""
    soup = _soup(html)
    if soup.select_one(markup.PROBLEM_STATEMENT) is None:
        raise PageUnavailableError(f"No problem statement found for {contest_id}{index}")

    name = markup.TITLE_PREFIX.sub("", _text(soup.select_one(markup.PROBLEM_TITLE)))

    blocks = (
        (markup.SAMPLE_INPUT_CLASS in block.get("class", []), _sample_text(block))
        for block in soup.select(markup.SAMPLE_BLOCKS)
    )

    return Problem(
        contest_id=contest_id,
        index=index,
        name=name,
        statement=_to_markdown(soup.select_one(markup.PROBLEM_LEGEND)),
        input_format=_section_markdown(soup, markup.INPUT_SPECIFICATION),
        output_format=_section_markdown(soup, markup.OUTPUT_SPECIFICATION),
        examples=pair_examples(blocks),
    )


def merge_problem_metadata(problem: Problem, api_problems: Iterable[ApiProblem]) -> Problem:
    """Return problem with tags, rating and points copied from the matching API entry."""
    for api_problem in api_problems:
        if api_problem.index == problem.index:
            return dataclasses.replace(
                problem,
                tags=list(dict.fromkeys(api_problem.tags)),
                rating=api_problem.rating,
                points=api_problem.points,
            )
    return problem


def problem_from_api(api_problem: ApiProblem, contest_id: Optional[int] = None) -> Problem:
    return Problem(
        contest_id=api_problem.contestId or contest_id or 0,
        index=api_problem.index,
        name=api_problem.name,
        type=api_problem.type,
        points=api_problem.points,
        rating=api_problem.rating,
        tags=list(dict.fromkeys(api_problem.tags)),
    )


def problems_from_api(api_problems: Iterable[ApiProblem], contest_id: Optional[int] = None) -> list[Problem]:
    return [problem_from_api(p, contest_id) for p in api_problems]


def filter_problems(
    api_problems: Iterable[ApiProblem], query: str, limit: int = SEARCH_RESULT_LIMIT
) -> list[Problem]:
    """Case-insensitive substring match on name or any tag, capped at limit."""
    needle = query.lower()
    results: list[Problem] = []
    for api_problem in api_problems:
        if len(results) >= limit:
            break
        matches_name = needle in api_problem.name.lower()
        matches_tag = any(needle in tag.lower() for tag in api_problem.tags)
        if matches_name or matches_tag:
            results.append(problem_from_api(api_problem))
    return results


def _table_rows(soup: BeautifulSoup, selector: str, min_cells: int) -> Iterator[list[Tag]]:
    # First row is the header.
    for row in soup.select(selector)[1:]:
        cells = row.find_all("td")
        if len(cells) >= min_cells:
            yield cells


def _cell(cells: list[Tag], column: int, default: str = "") -> str:
    if column >= len(cells):
        return default
    return _text(cells[column]) or default


def parse_submissions_table(html: str) -> list[Submission]:
    """Parse every qualifying row of a status table, newest first."""
    submissions: list[Submission] = []
    for cells in _table_rows(_soup(html), markup.SUBMISSION_ROWS, markup.SUBMISSION_MIN_CELLS):
        submission_id = _cell(cells, markup.SUBMISSION_ID_COLUMN)
        problem_cell = cells[markup.SUBMISSION_PROBLEM_COLUMN]
        problem_name = _text(problem_cell.find("a")) or _text(problem_cell)
        if not submission_id or not problem_name:
            continue
        submissions.append(
            Submission(
                id=submission_id,
                problem_name=problem_name,
                verdict=_cell(cells, markup.SUBMISSION_VERDICT_COLUMN, UNKNOWN_VERDICT),
                time_consumed=_cell(cells, markup.SUBMISSION_TIME_COLUMN, "N/A"),
                memory_consumed=_cell(cells, markup.SUBMISSION_MEMORY_COLUMN, "N/A"),
            )
        )
    return submissions


def find_submission_verdict(html: str, submission_id: str) -> Optional[str]:
    """Return the verdict cell of the row with submission_id, if present."""
    for cells in _table_rows(_soup(html), markup.SUBMISSION_ROWS, markup.SUBMISSION_MIN_CELLS):
        if _cell(cells, markup.SUBMISSION_ID_COLUMN) == submission_id:
            return _cell(cells, markup.SUBMISSION_VERDICT_COLUMN, UNKNOWN_VERDICT)
    return None


def parse_contest_problems(html: str, contest_id: int) -> list[Problem]:
    problems: list[Problem] = []
    for cells in _table_rows(_soup(html), markup.CONTEST_PROBLEM_ROWS, markup.CONTEST_MIN_CELLS):
        index = _cell(cells, markup.CONTEST_INDEX_COLUMN)
        name = _text(cells[markup.CONTEST_NAME_COLUMN].find("a"))
        if index and name:
            problems.append(Problem(contest_id=contest_id, index=index, name=name))
    return problems
