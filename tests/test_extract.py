"""Tests for turning Codeforces pages and API records into models."""

import pytest

from cf.api import ApiProblem
from cf.exceptions import PageUnavailableError
from cf.extract import (
    extract_submission_id,
    filter_problems,
    find_submission_verdict,
    is_authenticated_page,
    merge_problem_metadata,
    pair_examples,
    parse_contest_problems,
    parse_csrf_token,
    parse_form_error,
    parse_problem,
    parse_submissions_table,
    problems_from_api,
)
from cf.models import Example, Problem

from conftest import (
    ANONYMOUS_PROFILE_HTML,
    CONTEST_HTML,
    EMPTY_CONTEST_HTML,
    LOGGED_IN_PROFILE_HTML,
    LOGIN_PAGE_HTML,
    PROBLEM_HTML,
    SUBMISSIONS_HTML,
)


class TestParseProblem:
    """Tests for parse_problem()."""

    def test_title_without_index_prefix(self):
        problem = parse_problem(PROBLEM_HTML, 4, "A")

        assert problem.name == "Watermelon"
        assert problem.problem_id == "4A"

    def test_statement_is_markdown(self):
        problem = parse_problem(PROBLEM_HTML, 4, "A")

        assert "watermelon" in problem.statement
        assert "**w**" in problem.statement
        assert "time limit" not in problem.statement

    def test_input_and_output_sections_drop_their_titles(self):
        problem = parse_problem(PROBLEM_HTML, 4, "A")

        assert problem.input_format == "The first line contains integer w."
        assert problem.output_format == "Print YES or NO."

    def test_examples_in_page_order(self):
        problem = parse_problem(PROBLEM_HTML, 4, "A")

        assert problem.examples == [
            Example(input="8", output="YES"),
            Example(input="3\n1 2 3", output="NO\ndone"),
        ]

    def test_tags_left_for_api(self):
        problem = parse_problem(PROBLEM_HTML, 4, "A")

        assert problem.tags == []
        assert problem.rating is None

    def test_missing_statement_raises(self):
        with pytest.raises(PageUnavailableError) as exc_info:
            parse_problem("<html><body>Redirecting...</body></html>", 4, "Z")

        assert exc_info.value.message == "No problem statement found for 4Z"

    def test_statement_without_samples(self):
        html = """
        <div class="problem-statement">
          <div class="header"><div class="title">E. Interactive</div></div>
          <div><p>Guess the number.</p></div>
        </div>
        """
        problem = parse_problem(html, 1000, "E")

        assert problem.name == "Interactive"
        assert problem.examples == []
        assert problem.input_format == ""


class TestPairExamples:
    """Tests for pair_examples()."""

    def test_alternating_blocks(self):
        blocks = [(True, "1"), (False, "a"), (True, "2"), (False, "b")]

        assert pair_examples(blocks) == [Example("1", "a"), Example("2", "b")]

    def test_leading_orphan_output_dropped(self):
        blocks = [(False, "orphan"), (True, "1"), (False, "a")]

        assert pair_examples(blocks) == [Example("1", "a")]

    def test_output_fills_most_recent_open_input(self):
        blocks = [(True, "1"), (True, "2"), (False, "b"), (False, "a")]

        assert pair_examples(blocks) == [Example("1", "a"), Example("2", "b")]

    def test_input_without_output_keeps_empty_output(self):
        assert pair_examples([(True, "1")]) == [Example("1", "")]

    def test_empty(self):
        assert pair_examples([]) == []


class TestPageChecks:
    """Tests for the small page probes used by login and submit."""

    def test_csrf_token_found(self):
        assert parse_csrf_token(LOGIN_PAGE_HTML) == "login-token-123"

    def test_csrf_token_missing(self):
        assert parse_csrf_token("<form><input name='handleOrEmail'/></form>") is None

    def test_csrf_token_empty_value(self):
        assert parse_csrf_token('<input name="csrf_token" value=""/>') is None

    def test_authenticated_page(self):
        assert is_authenticated_page(LOGGED_IN_PROFILE_HTML) is True

    def test_anonymous_page(self):
        assert is_authenticated_page(ANONYMOUS_PROFILE_HTML) is False

    def test_form_error(self):
        html = '<form><span class="error for__source">You have submitted exactly the same code before</span></form>'

        assert parse_form_error(html) == "You have submitted exactly the same code before"

    def test_empty_form_error_ignored(self):
        assert parse_form_error('<span class="error"></span>') is None

    def test_submission_id(self):
        assert extract_submission_id(SUBMISSIONS_HTML) == "200000002"

    def test_submission_id_missing(self):
        assert extract_submission_id("<html>My submissions</html>") is None


class TestSubmissionsTable:
    """Tests for parse_submissions_table() and find_submission_verdict()."""

    def test_rows_parsed_newest_first(self):
        submissions = parse_submissions_table(SUBMISSIONS_HTML)

        assert [s.id for s in submissions] == ["200000002", "200000001"]

    def test_row_fields(self):
        first = parse_submissions_table(SUBMISSIONS_HTML)[0]

        assert first.problem_name == "4A - Watermelon"
        assert first.verdict == "Wrong answer on test 3"
        assert first.time_consumed == "15 ms"
        assert first.memory_consumed == "0 KB"

    def test_short_row_defaults(self):
        html = """
        <table class="status-frame-datatable">
          <tr><th>#</th></tr>
          <tr><td>7</td><td></td><td></td><td>1A - Theatre Square</td><td></td><td></td></tr>
        </table>
        """
        [submission] = parse_submissions_table(html)

        assert submission.verdict == "Unknown"
        assert submission.time_consumed == "N/A"
        assert submission.memory_consumed == "N/A"

    def test_no_table(self):
        assert parse_submissions_table("<html></html>") == []

    def test_find_verdict(self):
        assert find_submission_verdict(SUBMISSIONS_HTML, "200000001") == "Accepted"

    def test_find_verdict_missing_row(self):
        assert find_submission_verdict(SUBMISSIONS_HTML, "1") is None


class TestContestProblems:
    """Tests for parse_contest_problems()."""

    def test_problems_in_table_order(self):
        problems = parse_contest_problems(CONTEST_HTML, 4)

        assert [(p.problem_id, p.name) for p in problems] == [
            ("4A", "Watermelon"),
            ("4B", "Before an Exam"),
        ]

    def test_missing_table(self):
        assert parse_contest_problems(EMPTY_CONTEST_HTML, 4) == []


class TestApiProblems:
    """Tests for merging and filtering API problem records."""

    def test_merge_copies_metadata(self, sample_problem):
        bare = Problem(contest_id=4, index="A", name="Watermelon")
        api_problems = [
            ApiProblem(contestId=4, index="B", name="Before an Exam", rating=1200),
            ApiProblem(contestId=4, index="A", name="Watermelon", rating=800, points=500.0,
                       tags=["math", "brute force", "math"]),
        ]

        merged = merge_problem_metadata(bare, api_problems)

        assert merged.tags == ["math", "brute force"]
        assert merged.rating == 800
        assert merged.points == 500.0
        assert bare.tags == []

    def test_merge_without_match_returns_problem(self):
        bare = Problem(contest_id=4, index="C", name="Registration system")

        assert merge_problem_metadata(bare, []) is bare

    def test_problems_from_api_uses_fallback_contest(self):
        problems = problems_from_api([ApiProblem(index="A", name="Watermelon")], contest_id=4)

        assert problems[0].problem_id == "4A"

    @pytest.fixture
    def problemset(self):
        return [
            ApiProblem(contestId=1, index="A", name="Binary Search Tree", tags=["trees", "dp"]),
            ApiProblem(contestId=2, index="B", name="Graph Coloring", tags=["graphs"]),
            ApiProblem(index="X", name="Binary Gym Problem", tags=["dp"]),
        ]

    @pytest.mark.parametrize("query", ["dp", "DP", "binary", "search tree"])
    def test_filter_matches_name_or_tag(self, problemset, query):
        results = filter_problems(problemset[:1], query)

        assert [p.name for p in results] == ["Binary Search Tree"]

    def test_filter_no_match(self, problemset):
        assert filter_problems(problemset[:1], "graph") == []

    def test_filter_keeps_problems_without_contest(self, problemset):
        results = filter_problems(problemset, "binary")

        assert [p.problem_id for p in results] == ["1A", "0X"]

    def test_filter_tag_match_without_contest(self):
        problemset = [ApiProblem(index="A", name="Binary Search Tree", tags=["trees", "dp"])]

        results = filter_problems(problemset, "dp")

        assert [p.name for p in results] == ["Binary Search Tree"]
        assert results[0].contest_id == 0

    def test_filter_caps_results(self):
        problemset = [ApiProblem(contestId=i, index="A", name=f"Sum {i}") for i in range(1, 61)]

        results = filter_problems(problemset, "sum")

        assert len(results) == 50
        assert results[0].contest_id == 1
