"""Markdown documents and solution templates generated from problems."""

import re
from datetime import datetime

from cf.models import Problem, Submission

BASE_URL = "https://codeforces.com"

VERDICT_EMOJIS = {
    "Accepted": "✅",
    "Wrong answer": "❌",
    "Time limit exceeded": "⏰",
    "Memory limit exceeded": "💾",
    "Runtime error": "💥",
    "Compilation error": "🔨",
    "Pending": "⏳",
    "Running": "🏃",
    "Partial": "⚠️",
}
UNKNOWN_VERDICT_EMOJI = "❓"

TEMPLATE_EXTENSIONS = {
    "cpp": "cpp",
    "python": "py",
    "java": "java",
}

CPP_TEMPLATE = """#include <bits/stdc++.h>
using namespace std;

int main() {{
    ios_base::sync_with_stdio(false);
    cin.tie(NULL);

    // Solution for {title}

    return 0;
}}
"""

PYTHON_TEMPLATE = """# Solution for {title}

def solve():
    pass

if __name__ == "__main__":
    solve()
"""

JAVA_TEMPLATE = """import java.util.*;
import java.io.*;

public class Solution {{
    public static void main(String[] args) {{
        Scanner sc = new Scanner(System.in);

        // Solution for {title}

        sc.close();
    }}
}}
"""

TEMPLATES = {
    "cpp": CPP_TEMPLATE,
    "python": PYTHON_TEMPLATE,
    "java": JAVA_TEMPLATE,
}


def _title(problem: Problem) -> str:
    return f"{problem.problem_id}: {problem.name}"


def format_problem(problem: Problem) -> str:
    content = f"# {_title(problem)}\n\n"

    if problem.rating:
        content += f"**Rating:** {problem.rating}\n\n"
    if problem.tags:
        content += f"**Tags:** {', '.join(problem.tags)}\n\n"

    content += f"## Problem Statement\n\n{problem.statement}\n\n"

    if problem.input_format:
        content += f"## Input Format\n\n{problem.input_format}\n\n"
    if problem.output_format:
        content += f"## Output Format\n\n{problem.output_format}\n\n"

    if problem.examples:
        content += "## Examples\n\n"
        for number, example in enumerate(problem.examples, 1):
            content += f"### Example {number}\n\n"
            content += f"**Input:**\n```\n{example.input}\n```\n\n"
            content += f"**Output:**\n```\n{example.output}\n```\n\n"

    content += "---\n\n"
    content += f"**Contest Link:** [{problem.problem_id}]({problem.url})\n"
    return content


def format_contest(problems: list[Problem], contest_id: int) -> str:
    content = f"# Contest {contest_id} Problems\n\n"
    content += f"**Total Problems**: {len(problems)}\n\n"
    content += "## Problem List\n\n"

    for problem in problems:
        content += f"### {problem.index}: {problem.name}\n"
        if problem.rating:
            content += f"**Rating**: {problem.rating}\n"
        if problem.tags:
            content += f"**Tags**: {', '.join(problem.tags)}\n"
        content += f"**Link**: [Problem {problem.index}]({problem.url})\n\n"

    content += "---\n\n"
    content += f"**Contest Link**: [Contest {contest_id}]({BASE_URL}/contest/{contest_id})\n"
    return content


def verdict_emoji(verdict: str) -> str:
    lowered = verdict.lower()
    for key, emoji in VERDICT_EMOJIS.items():
        if key.lower() in lowered:
            return emoji
    return UNKNOWN_VERDICT_EMOJI


def format_submissions(submissions: list[Submission], now: datetime | None = None) -> str:
    content = "# Recent Submissions\n\n"
    content += "| ID | Problem | Verdict | Time | Memory |\n"
    content += "|---|---|---|---|---|\n"

    for submission in submissions:
        content += (
            f"| {submission.id} | {submission.problem_name} | "
            f"{verdict_emoji(submission.verdict)} {submission.verdict} | "
            f"{submission.time_consumed} | {submission.memory_consumed} |\n"
        )

    now = now or datetime.now()
    content += "\n---\n\n"
    content += f"*Last updated: {now:%Y-%m-%d %H:%M:%S}*\n"
    return content


def solution_template(problem: Problem, language: str) -> tuple[str, str]:
    """Return (template text, file extension) for the configured language."""
    template = TEMPLATES.get(language)
    if template is None:
        return f"// Solution for {_title(problem)}\n", "txt"
    return template.format(title=_title(problem)), TEMPLATE_EXTENSIONS[language]


def suggested_filename(problem: Problem, extension: str) -> str:
    slug = re.sub(r"[^a-zA-Z0-9]", "_", problem.name).lower()
    return f"{problem.problem_id}_{slug}.{extension}"
