"""Core data models shared across adhoc components."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Author and committer used for every generated commit."""

    name: str
    email: str


@dataclass(frozen=True)
class CommitHandle:
    """A commit in a generated project's repository."""

    sha: str
    message: str

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class ExpansionResult:
    """Outcome of expanding one source file.

    ``handled`` is True when a descriptor comment was found and processed,
    even if nothing was scaffolded or no new commit was needed. ``commit``
    is the repository HEAD after the run, or None when no project was
    scaffolded.
    """

    handled: bool
    commit: Optional[CommitHandle] = None


NOTHING_TO_DO = ExpansionResult(handled=False, commit=None)


@dataclass(frozen=True)
class RegisteredProject:
    """A project known to the workspace registry."""

    name: str
    project_file: str
    registered_at: str = ""
