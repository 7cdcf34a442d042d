"""CLI interface for the Codeforces CLI using Typer."""

import dataclasses
import logging
import re
import subprocess
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.table import Table

from cf.client import language_for_file
from cf.exceptions import CodeforcesError, ProblemNotFoundError
from cf.models import Problem
from cf.render import (
    format_contest,
    format_problem,
    format_submissions,
    solution_template,
    suggested_filename,
    verdict_emoji,
)
from cf.session import SessionManager
from cf.storage import DEFAULT_CONFIG, HANDLE_KEY, Storage
from cf.tracking import ScheduledStatusCheck

app = typer.Typer(help="Solve Codeforces problems from your terminal")
console = Console()

PROBLEM_ID_PATTERN = re.compile(r"^(\d+)([A-Za-z][A-Za-z0-9]?)$")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _split_problem_id(problem_id: str) -> tuple[int, str]:
    match = PROBLEM_ID_PATTERN.match(problem_id)
    if not match:
        console.print(f"[red]Error:[/red] '{problem_id}' is not a problem id like 1234A.")
        raise typer.Exit(1)
    return int(match.group(1)), match.group(2).upper()


def _resolve_problem_id(problem_id: Optional[str], storage: Storage) -> str:
    """Resolve problem id from argument or current working directory."""
    if problem_id:
        return problem_id.upper()

    cwd = Path.cwd()
    problems_dir = storage.problems_dir

    if problems_dir in cwd.parents or cwd == problems_dir:
        # We're inside ~/.codeforces/problems/ or a subdirectory
        try:
            relative = cwd.relative_to(problems_dir)
            parts = relative.parts
            if parts:
                return parts[0]
        except ValueError:
            pass

    console.print(
        "[red]Error:[/red] No problem id provided and not in a problem directory.\n"
        "Usage: cf <command> <problem> or cd to ~/.codeforces/problems/<problem>/"
    )
    raise typer.Exit(1)


def _handle_error(e: Exception) -> None:
    """Print the error message and exit."""
    if isinstance(e, ProblemNotFoundError):
        console.print(f"[red]Problem '{e.problem_id}' not found locally. Use 'cf fetch' first.[/red]")
    elif isinstance(e, CodeforcesError):
        console.print(f"[red]{e.message}[/red]")
    else:
        console.print(f"[red]Error: {e}[/red]")
    raise typer.Exit(1)


def _save_problem(storage: Storage, problem: Problem) -> Path:
    config = storage.get_config()
    template, extension = solution_template(problem, config.template_language)
    return storage.save_problem(
        problem,
        format_problem(problem),
        suggested_filename(problem, extension),
        template,
    )


@app.command()
def login(
    handle: Optional[str] = typer.Argument(None, help="Codeforces handle"),
    cookies: Optional[str] = typer.Option(
        None, "--cookies", envvar="CF_COOKIES", help="Session cookies copied from a browser"
    ),
    browser: bool = typer.Option(False, "--browser", help="Log in in the browser and paste cookies"),
) -> None:
    """Log in to Codeforces."""
    storage = Storage()
    session = SessionManager(storage)

    if not handle:
        handle = typer.prompt("Codeforces handle")

    try:
        if cookies:
            session.login_with_cookie_string(handle, cookies)
        elif browser:
            _browser_login(session, handle)
        elif not session.restore_session(handle):
            password = typer.prompt(
                "Password (leave empty for Google/social login)",
                hide_input=True,
                default="",
                show_default=False,
            )
            if password:
                session.login_with_credentials(handle, password)
            else:
                _browser_login(session, handle)
        console.print(f"[green]Logged in as[/green] [bold]{handle}[/bold]")
    except CodeforcesError as e:
        _handle_error(e)


def _browser_login(session: SessionManager, handle: str) -> None:
    console.print("Log in to Codeforces in your browser, then copy the cookies for codeforces.com.")
    session.login_with_browser(
        handle,
        prompt=lambda: typer.prompt(
            "Paste your session cookies (empty to reuse current)",
            hide_input=True,
            default="",
            show_default=False,
        ),
        open_url=typer.launch,
    )


@app.command()
def logout() -> None:
    """Log out and forget stored credentials and cookies."""
    session = SessionManager(Storage())
    session.logout()
    console.print("[green]Logged out.[/green]")


@app.command()
def status() -> None:
    """Check whether the stored session is still logged in."""
    storage = Storage()
    session = SessionManager(storage)
    handle = storage.get_secret(HANDLE_KEY)

    if handle and session.restore_session(handle):
        console.print(f"[green]Logged in as[/green] [bold]{handle}[/bold]")
    else:
        console.print("[yellow]You are not logged in to Codeforces.[/yellow]")


@app.command()
def fetch(
    contest_id: int = typer.Argument(..., help="Contest id (e.g., 4)"),
    index: str = typer.Argument(..., help="Problem index (e.g., A)"),
) -> None:
    """Fetch problem from Codeforces and save locally."""
    storage = Storage()
    session = SessionManager(storage)

    try:
        client = session.get_client()
        console.print(f"Fetching {contest_id}{index.upper()}...")
        problem = client.fetch_problem(contest_id, index.upper())
        console.print(f"Fetched '[bold]{problem.name}[/bold]'")

        solution_path = _save_problem(storage, problem)
        problem_dir = solution_path.parent

        console.print(f"[green]Created:[/green] {problem_dir}/")
        console.print("  - problem.md")
        console.print(f"  - {solution_path.name}")
        console.print("  - metadata.json")
        console.print(f"\nOpen with: [cyan]cf open {problem.problem_id}[/cyan]")
    except CodeforcesError as e:
        _handle_error(e)


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to match against titles and tags"),
) -> None:
    """Search the problemset by title or tag."""
    session = SessionManager(Storage())

    try:
        problems = session.get_client().search_problems(query)
    except CodeforcesError as e:
        _handle_error(e)
        return

    if not problems:
        console.print(f"[yellow]No problems match '{query}'.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Problem", style="cyan")
    table.add_column("Name")
    table.add_column("Rating")
    table.add_column("Tags")
    for problem in problems:
        table.add_row(
            problem.problem_id,
            problem.name,
            str(problem.rating or "N/A"),
            ", ".join(problem.tags),
        )
    console.print(table)


@app.command()
def contest(
    contest_id: int = typer.Argument(..., help="Contest id"),
    save: bool = typer.Option(False, "--save", help="Fetch every problem and create solution templates"),
) -> None:
    """Show a contest's problems."""
    storage = Storage()
    session = SessionManager(storage)

    try:
        client = session.get_client()
        problems = client.fetch_contest_problems(contest_id)
        if not problems:
            console.print(f"[yellow]No problems found for contest {contest_id}.[/yellow]")
            return

        console.print(Markdown(format_contest(problems, contest_id)))

        if save:
            for problem in problems:
                solution_path = _save_problem(storage, client.fetch_problem(contest_id, problem.index))
                console.print(f"[green]Created:[/green] {solution_path}")
    except CodeforcesError as e:
        _handle_error(e)


@app.command()
def submit(
    problem_id: Optional[str] = typer.Argument(None, help="Problem id like 1234A (optional if in problem directory)"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Source file to submit"
    ),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language label, e.g. 'GNU G++17 7.3.0'"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Check the verdict after a short delay"),
) -> None:
    """Submit solution to Codeforces."""
    storage = Storage()
    resolved_id = _resolve_problem_id(problem_id, storage)
    contest_id, index = _split_problem_id(resolved_id)
    config = storage.get_config()
    session = SessionManager(storage)

    try:
        source_path = file or storage.get_solution_path(resolved_id)
        code = source_path.read_text(encoding="utf-8")
        label = language or config.language or language_for_file(source_path)
        client = session.get_client(require_login=True)

        console.print(f"Submitting '[bold]{resolved_id}[/bold]' as {label}...")
        submission = client.submit_solution(contest_id, index, code, label)
        console.print(f"[green]Solution submitted.[/green] Submission ID: {submission.id}")
    except CodeforcesError as e:
        _handle_error(e)
        return

    if not (wait and config.show_notifications and submission.trackable):
        return

    check = ScheduledStatusCheck(client, submission.id, delay=config.status_check_delay).start()
    try:
        with console.status("Waiting for verdict..."):
            result = check.wait()
    except KeyboardInterrupt:
        check.cancel()
        raise typer.Exit(130)

    if result is not None:
        console.print(f"Submission Status: {verdict_emoji(result.verdict)} {result.verdict}")


@app.command()
def submissions() -> None:
    """Show your most recent submissions."""
    session = SessionManager(Storage())

    try:
        recent = session.get_client(require_login=True).get_recent_submissions()
    except CodeforcesError as e:
        _handle_error(e)
        return

    if not recent:
        console.print("[yellow]No recent submissions found.[/yellow]")
        return

    console.print(Markdown(format_submissions(recent)))


@app.command()
def verdict(submission_id: str = typer.Argument(..., help="Submission id")) -> None:
    """Look up the verdict of a submission."""
    session = SessionManager(Storage())

    try:
        result = session.get_client(require_login=True).get_submission_status(submission_id)
        console.print(f"{verdict_emoji(result.verdict)} {result.verdict}")
    except CodeforcesError as e:
        _handle_error(e)


@app.command("list")
def list_problems(
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only show problems with this tag"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum number of problems to show"),
) -> None:
    """List locally saved problems."""
    storage = Storage()
    problem_ids = storage.list_problems()

    if not problem_ids:
        console.print("[yellow]No problems saved locally.[/yellow]")
        console.print("Use 'cf fetch <contest> <index>' to fetch a problem.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Problem", style="cyan")
    table.add_column("Name")
    table.add_column("Rating")

    count = 0
    for problem_id in problem_ids:
        if count >= limit:
            break

        try:
            problem = storage.load_problem(problem_id)
        except ProblemNotFoundError:
            continue

        if tag and tag.lower() not in (t.lower() for t in problem.tags):
            continue

        table.add_row(problem.problem_id, problem.name, str(problem.rating or "N/A"))
        count += 1

    if count == 0:
        console.print(f"[yellow]No problems found with tag '{tag}'.[/yellow]")
    else:
        console.print(table)


@app.command()
def show(
    problem_id: Optional[str] = typer.Argument(None, help="Problem id (optional if in problem directory)")
) -> None:
    """Display problem statement in terminal."""
    storage = Storage()
    resolved_id = _resolve_problem_id(problem_id, storage)

    try:
        console.print(Markdown(storage.get_document(resolved_id)))
    except ProblemNotFoundError as e:
        _handle_error(e)


@app.command("open")
def open_solution(
    problem_id: Optional[str] = typer.Argument(None, help="Problem id (optional if in problem directory)")
) -> None:
    """Open solution file in editor."""
    storage = Storage()
    resolved_id = _resolve_problem_id(problem_id, storage)

    try:
        solution_path = storage.get_solution_path(resolved_id)
        subprocess.run([storage.get_config().editor, str(solution_path)])
    except ProblemNotFoundError as e:
        _handle_error(e)


@app.command("config")
def configure(
    key: Optional[str] = typer.Argument(None, help="Setting to change"),
    value: Optional[str] = typer.Argument(None, help="New value"),
) -> None:
    """Show or change settings."""
    storage = Storage()
    config = storage.get_config()

    if key is None:
        for name, current in vars(config).items():
            console.print(f"{name} = {current!r}")
        return

    if key not in vars(DEFAULT_CONFIG) or value is None:
        console.print(f"[red]Error:[/red] Usage: cf config <{'|'.join(vars(DEFAULT_CONFIG))}> <value>")
        raise typer.Exit(1)

    default = getattr(DEFAULT_CONFIG, key)
    if isinstance(default, bool):
        parsed: object = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(default, float):
        try:
            parsed = float(value)
        except ValueError:
            console.print(f"[red]Error:[/red] {key} must be a number")
            raise typer.Exit(1)
    else:
        parsed = value

    storage.save_config(dataclasses.replace(config, **{key: parsed}))
    console.print(f"{key} = {parsed!r}")


if __name__ == "__main__":
    app()
