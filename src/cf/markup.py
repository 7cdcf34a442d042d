"""CSS selectors and patterns the extractor relies on.

Codeforces markup changes without notice; every selector lives here so a
layout change is fixed in one table.
"""

import re

# Forms
CSRF_TOKEN_INPUT = 'input[name="csrf_token"]'
FORM_ERROR = "span.error"

# Only rendered for a logged-in viewer
AUTHENTICATED_MARKERS = (".lang-chooser", "a[href='/settings/general']")

# Problem page
PROBLEM_STATEMENT = ".problem-statement"
PROBLEM_TITLE = ".problem-statement .title"
PROBLEM_LEGEND = ".problem-statement .header + div"
INPUT_SPECIFICATION = ".problem-statement .input-specification"
OUTPUT_SPECIFICATION = ".problem-statement .output-specification"
SECTION_TITLE = ".section-title"
SAMPLE_BLOCKS = ".sample-test .input, .sample-test .output"
SAMPLE_INPUT_CLASS = "input"
SAMPLE_CONTENT = "pre"
SAMPLE_LINE = "div.test-example-line"
TITLE_PREFIX = re.compile(r"^[A-Z][A-Z0-9]?\.\s*")

# Submissions table: #, When, Who, Problem, Lang, Verdict, Time, Memory
SUBMISSION_ROWS = "table.status-frame-datatable tr"
SUBMISSION_MIN_CELLS = 6
SUBMISSION_ID_COLUMN = 0
SUBMISSION_PROBLEM_COLUMN = 3
SUBMISSION_VERDICT_COLUMN = 5
SUBMISSION_TIME_COLUMN = 6
SUBMISSION_MEMORY_COLUMN = 7

# Contest dashboard
CONTEST_PROBLEM_ROWS = "table.problems tr"
CONTEST_MIN_CELLS = 2
CONTEST_INDEX_COLUMN = 0
CONTEST_NAME_COLUMN = 1

SUBMISSION_ID_PATTERN = re.compile(r"submission/(\d+)")
