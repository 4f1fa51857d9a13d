"""Rename session data models."""

import os
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PathCandidate(BaseModel):
    """A command-line argument checked for renaming eligibility."""

    model_config = ConfigDict(frozen=True)

    raw_argument: str = Field(description="Argument as given, with a leading '~' expanded")
    resolved_absolute_path: str = Field(description="Absolute path used for existence and permission checks")
    exists: bool = Field(description="Whether anything exists at the path")
    is_directory: bool = Field(default=False, description="Whether the path is a directory")
    readable: bool = Field(default=False, description="Whether the file can be read")
    writable: bool = Field(default=False, description="Whether the file can be modified or moved")
    parent_writable: bool = Field(default=False, description="Whether the containing directory accepts new entries")

    @property
    def parent_directory(self) -> str:
        """Directory containing the resolved path."""
        return os.path.dirname(self.resolved_absolute_path)

    @property
    def eligible(self) -> bool:
        return self.exists and not self.is_directory and self.readable and self.writable and self.parent_writable


class ProposalPair(BaseModel):
    """One original file positionally matched with a generated name."""

    original: str = Field(description="Original path, as retained from the command line")
    proposed_name: str = Field(description="New leaf name proposed for the file")

    def __str__(self) -> str:
        return f"{self.original} -> {self.proposed_name}"


class RenameFailure(BaseModel):
    """A move that could not be performed."""

    source: str = Field(description="Source path of the failed move")
    destination: str = Field(description="Destination path of the failed move")
    reason: str = Field(description="Why the move failed")


class RenameReport(BaseModel):
    """Per-item outcome of executing a list of proposals."""

    succeeded: list[tuple[str, str]] = Field(
        description="(source, destination) pairs that were moved or already in place",
        default_factory=list,
    )
    failures: list[RenameFailure] = Field(description="Moves that failed", default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)


class SessionState(str, Enum):
    """States of the interactive renaming session."""

    COLLECTING_PROMPT = "collecting_prompt"
    QUERYING_MODEL = "querying_model"
    PRESENTING_PROPOSAL = "presenting_proposal"
    CONFIRMING = "confirming"
    RETRYING = "retrying"
    EXECUTING = "executing"
    DRY_RUN_DONE = "dry_run_done"
    DONE = "done"
    PARTIAL_FAILURE = "partial_failure"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {
        SessionState.DRY_RUN_DONE,
        SessionState.DONE,
        SessionState.PARTIAL_FAILURE,
        SessionState.ABORTED,
    }
)


class SessionOutcome(BaseModel):
    """Result of a completed session run."""

    state: SessionState = Field(description="Terminal state the session ended in")
    rounds: int = Field(description="Number of requests sent to the generation service", default=0)
    proposals: list[ProposalPair] = Field(
        description="Proposal pairs of the last round",
        default_factory=list,
    )
    report: RenameReport | None = Field(description="Executor report, if renames were executed", default=None)

    @property
    def failure_count(self) -> int:
        return self.report.failure_count if self.report else 0

    def __str__(self) -> str:
        return f"SessionOutcome(state={self.state.value}, rounds={self.rounds}, failures={self.failure_count})"
