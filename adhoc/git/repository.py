"""Thin git CLI wrapper for generated project repositories."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List

from ..models import CommitHandle, Identity

GitRunner = Callable[..., str]

GIT_DIR = ".git"

# Generated commits must not depend on the user's signing setup.
_COMMIT_OPTIONS = ["-c", "commit.gpgsign=false"]


class GitError(RuntimeError):
    """Raised when a git command fails."""


def default_runner(
    args: Iterable[str],
    *,
    cwd: Path,
    env: dict[str, str] | None = None,
    capture_output: bool = False,
) -> str:
    completed = subprocess.run(
        list(args),
        cwd=str(cwd),
        env=env,
        check=True,
        text=True,
        capture_output=True,
    )
    if capture_output:
        return completed.stdout
    return ""


class GitRepository:
    """A non-bare repository rooted at a project directory."""

    def __init__(self, path: Path, runner: GitRunner | None = None) -> None:
        self.path = Path(path)
        self._runner = runner or default_runner

    @staticmethod
    def exists_at(path: Path) -> bool:
        return (Path(path) / GIT_DIR).exists()

    @classmethod
    def init(
        cls,
        path: Path,
        identity: Identity,
        *,
        message: str = "Initializing Repository",
        runner: GitRunner | None = None,
    ) -> "GitRepository":
        """Create a repository at ``path`` with an empty root commit."""
        repo = cls(path, runner=runner)
        repo._run(["git", "-c", "init.defaultBranch=main", "init", "--quiet"])
        repo.commit(message, identity, allow_empty=True)
        return repo

    def is_dirty(self) -> bool:
        status = self._run(["git", "status", "--porcelain"], capture_output=True)
        return bool(status.strip())

    def reset_hard(self) -> None:
        """Discard tracked modifications and untracked files."""
        self._run(["git", "reset", "--hard", "--quiet", "HEAD"])
        self._run(["git", "clean", "-fd", "--quiet"])

    def stage(self, file_path: Path | str) -> None:
        self._run(["git", "add", "--", self._to_relative(Path(file_path))])

    def staged_changes(self) -> List[str]:
        output = self._run(["git", "diff", "--cached", "--name-only"], capture_output=True)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def commit(self, message: str, identity: Identity, *, allow_empty: bool = False) -> CommitHandle:
        args = ["git", *_COMMIT_OPTIONS, "commit", "--quiet", "--no-verify", "-m", message]
        if allow_empty:
            args.append("--allow-empty")
        self._run(args, env=_identity_env(identity))
        return self.head()

    def head(self) -> CommitHandle:
        sha = self._run(["git", "rev-parse", "HEAD"], capture_output=True).strip()
        message = self._run(["git", "log", "-1", "--format=%B", sha], capture_output=True).strip()
        return CommitHandle(sha=sha, message=message)

    def commit_count(self) -> int:
        output = self._run(["git", "rev-list", "--count", "HEAD"], capture_output=True)
        return int(output.strip() or 0)

    # ------------------------------------------------------------------
    # Helpers

    def _to_relative(self, file_path: Path) -> str:
        repo = self.path.resolve()
        target = file_path if file_path.is_absolute() else self.path / file_path
        try:
            return target.resolve().relative_to(repo).as_posix()
        except ValueError:
            raise ValueError(f"File is outside of the repository. [{repo}]") from None

    def _run(
        self,
        args: Iterable[str],
        *,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        args = list(args)
        try:
            return self._runner(args, cwd=self.path, env=env, capture_output=capture_output)
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
            raise GitError(f"{' '.join(args)} failed: {detail or exc}") from exc


def _identity_env(identity: Identity) -> dict[str, str]:
    env = os.environ.copy()
    env["GIT_AUTHOR_NAME"] = identity.name
    env["GIT_AUTHOR_EMAIL"] = identity.email
    env["GIT_COMMITTER_NAME"] = identity.name
    env["GIT_COMMITTER_EMAIL"] = identity.email
    return env


__all__ = ["GIT_DIR", "GitError", "GitRepository", "GitRunner", "default_runner"]
