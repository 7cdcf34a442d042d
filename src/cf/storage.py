"""Local file operations for problems, configuration, secrets and session state."""

import json
import os
from pathlib import Path
from typing import Any, Optional

from cf.exceptions import ProblemNotFoundError
from cf.models import Config, Example, Problem

HANDLE_KEY = "cf_handle"
PASSWORD_KEY = "cf_password"
COOKIES_KEY = "cf_cookies"

DEFAULT_CONFIG = Config(
    template_language="cpp",
    language="",
    editor="vim",
    show_notifications=True,
    status_check_delay=5.0,
)


class Storage:
    """Manages local file storage under ~/.codeforces."""

    def __init__(self, base_path: Path | None = None) -> None:
        self.base_path = base_path or Path.home() / ".codeforces"
        self.problems_dir = self.base_path / "problems"
        self.config_path = self.base_path / "config.json"
        self.credentials_path = self.base_path / "credentials.json"
        self.state_path = self.base_path / "state.json"

    def _ensure_dirs(self) -> None:
        """Create base directories if they don't exist."""
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.problems_dir.mkdir(parents=True, exist_ok=True)

    def _problem_dir(self, problem_id: str) -> Path:
        return self.problems_dir / problem_id

    def _read_json(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        return json.loads(path.read_text(encoding="utf-8"))

    def _write_json(self, path: Path, data: dict[str, Any], private: bool = False) -> None:
        self._ensure_dirs()
        text = json.dumps(data, indent=2)
        if not private:
            path.write_text(text, encoding="utf-8")
            return
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # O_CREAT mode only applies to new files
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)

    # Secrets

    def store_secret(self, key: str, value: str) -> None:
        secrets = self._read_json(self.credentials_path)
        secrets[key] = value
        self._write_json(self.credentials_path, secrets, private=True)

    def get_secret(self, key: str) -> Optional[str]:
        return self._read_json(self.credentials_path).get(key)

    def delete_secret(self, key: str) -> None:
        secrets = self._read_json(self.credentials_path)
        if secrets.pop(key, None) is not None:
            self._write_json(self.credentials_path, secrets, private=True)

    # Durable state

    def get_state(self, key: str) -> Any:
        return self._read_json(self.state_path).get(key)

    def update_state(self, key: str, value: Any) -> None:
        """Set a state value; None removes the key."""
        state = self._read_json(self.state_path)
        if value is None:
            state.pop(key, None)
        else:
            state[key] = value
        self._write_json(self.state_path, state, private=True)

    # Problems

    def save_problem(self, problem: Problem, document: str, solution_name: str, template: str) -> Path:
        """Save problem to disk. Returns the solution file path.

        An existing solution file is left untouched.
        """
        self._ensure_dirs()
        problem_dir = self._problem_dir(problem.problem_id)
        problem_dir.mkdir(parents=True, exist_ok=True)

        problem_md = problem_dir / "problem.md"
        problem_md.write_text(document, encoding="utf-8")

        solution_path = problem_dir / solution_name
        if not solution_path.exists():
            solution_path.write_text(template, encoding="utf-8")

        metadata = {
            "contest_id": problem.contest_id,
            "index": problem.index,
            "name": problem.name,
            "type": problem.type,
            "points": problem.points,
            "rating": problem.rating,
            "tags": problem.tags,
            "solution": solution_name,
            "examples": [
                {"input": example.input, "output": example.output}
                for example in problem.examples
            ],
        }
        metadata_json = problem_dir / "metadata.json"
        metadata_json.write_text(json.dumps(metadata, indent=2), encoding="utf-8")

        return solution_path

    def load_problem(self, problem_id: str) -> Problem:
        """Load problem metadata from disk."""
        if not self.problem_exists(problem_id):
            raise ProblemNotFoundError(problem_id)

        metadata = self._read_json(self._problem_dir(problem_id) / "metadata.json")

        return Problem(
            contest_id=metadata["contest_id"],
            index=metadata["index"],
            name=metadata["name"],
            type=metadata.get("type", "PROGRAMMING"),
            points=metadata.get("points"),
            rating=metadata.get("rating"),
            tags=metadata.get("tags", []),
            examples=[
                Example(input=example["input"], output=example["output"])
                for example in metadata.get("examples", [])
            ],
        )

    def get_document(self, problem_id: str) -> str:
        """Read the saved problem.md."""
        if not self.problem_exists(problem_id):
            raise ProblemNotFoundError(problem_id)
        return (self._problem_dir(problem_id) / "problem.md").read_text(encoding="utf-8")

    def get_solution_path(self, problem_id: str) -> Path:
        if not self.problem_exists(problem_id):
            raise ProblemNotFoundError(problem_id)
        metadata = self._read_json(self._problem_dir(problem_id) / "metadata.json")
        return self._problem_dir(problem_id) / metadata["solution"]

    def problem_exists(self, problem_id: str) -> bool:
        """Check if problem is saved locally."""
        problem_dir = self._problem_dir(problem_id)
        return (
            problem_dir.exists()
            and (problem_dir / "problem.md").exists()
            and (problem_dir / "metadata.json").exists()
        )

    def list_problems(self) -> list[str]:
        """List all saved problem ids."""
        if not self.problems_dir.exists():
            return []

        return sorted(
            d.name
            for d in self.problems_dir.iterdir()
            if d.is_dir() and self.problem_exists(d.name)
        )

    # Config

    def get_config(self) -> Config:
        """Load config from config.json."""
        if not self.config_path.exists():
            return DEFAULT_CONFIG

        data = self._read_json(self.config_path)
        return Config(
            template_language=data.get("template_language", DEFAULT_CONFIG.template_language),
            language=data.get("language", DEFAULT_CONFIG.language),
            editor=data.get("editor", DEFAULT_CONFIG.editor),
            show_notifications=data.get("show_notifications", DEFAULT_CONFIG.show_notifications),
            status_check_delay=data.get("status_check_delay", DEFAULT_CONFIG.status_check_delay),
        )

    def save_config(self, config: Config) -> None:
        """Save config to config.json."""
        data = {
            "template_language": config.template_language,
            "language": config.language,
            "editor": config.editor,
            "show_notifications": config.show_notifications,
            "status_check_delay": config.status_check_delay,
        }
        self._write_json(self.config_path, data)
